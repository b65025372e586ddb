"""Rich debug logging with color-coded categories.

Enable: set QAML_DEBUG=1 or call debug.init(enabled=True).
Logs to both stderr (colored) and a rolling log file.

Categories & colors:
  🟦 BLUE    — engine lifecycle, instructions, app switches
  🟩 GREEN   — planner requests and responses
  🟨 YELLOW  — condition polling (checks, retries, timeouts)
  🟪 PURPLE  — system alert handling
  🩵 CYAN    — dispatched actions
  🟧 ORANGE  — HTTP round-trips
  🟥 RED     — errors and warnings
"""
import json
import os
import sys
import time
from datetime import datetime, timezone
from pathlib import Path
from . import config

# ANSI color codes
RESET = "\033[0m"
BOLD = "\033[1m"
DIM = "\033[2m"

COLORS = {
    "ENGINE":  "\033[34m",       # Blue
    "PLANNER": "\033[32m",       # Green
    "WAIT":    "\033[33m",       # Yellow
    "ALERT":   "\033[35m",       # Purple/Magenta
    "ACTION":  "\033[36m",       # Cyan
    "HTTP":    "\033[38;5;208m", # Orange (256-color)
    "ERROR":   "\033[31m",       # Red
}

# Emoji prefixes for file logs (no ANSI)
EMOJI = {
    "ENGINE":  "🟦",
    "PLANNER": "🟩",
    "WAIT":    "🟨",
    "ALERT":   "🟪",
    "ACTION":  "🩵",
    "HTTP":    "🟧",
    "ERROR":   "🟥",
}

_debug_enabled = False
_log_file = None
_log_path = None


def is_enabled() -> bool:
    return _debug_enabled


def init(enabled: bool = None, log_dir: Path = None):
    """Initialize debug logging. Call once per test session."""
    global _debug_enabled, _log_file, _log_path

    if enabled is None:
        enabled = os.environ.get("QAML_DEBUG", "0") in ("1", "true", "yes")

    _debug_enabled = enabled

    if not enabled:
        return

    log_dir = log_dir or config.DATA_DIR / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)
    _log_path = log_dir / "debug.log"

    # Rotate if over 10MB
    if _log_path.exists() and _log_path.stat().st_size > 10 * 1024 * 1024:
        rotated = log_dir / f"debug.{int(time.time())}.log"
        _log_path.rename(rotated)

    _log_file = open(_log_path, "a", buffering=1)  # line-buffered

    log("ENGINE", f"Debug logging enabled. Log file: {_log_path}")
    log("ENGINE", f"Tail with: tail -f {_log_path}")


def log(category: str, message: str, data: dict = None):
    """Log a debug message with category color coding."""
    if not _debug_enabled:
        return

    ts = datetime.now(timezone.utc).strftime("%H:%M:%S.%f")[:-3]
    cat = category.upper()

    # Terminal (colored)
    color = COLORS.get(cat, RESET)
    prefix = f"{DIM}{ts}{RESET} {color}{BOLD}[{cat:7s}]{RESET} {color}"
    line = f"{prefix}{message}{RESET}"
    if data:
        data_str = json.dumps(data, indent=2, default=str)
        indented = "\n".join(f"  {color}{l}{RESET}" for l in data_str.split("\n"))
        line += f"\n{indented}"
    print(line, file=sys.stderr, flush=True)

    # File (emoji, no ANSI)
    emoji = EMOJI.get(cat, "  ")
    file_line = f"{ts} {emoji} [{cat:7s}] {message}"
    if data:
        file_line += f"\n{json.dumps(data, indent=2, default=str)}"
    if _log_file:
        _log_file.write(file_line + "\n")


def log_instruction(kind: str, text: str, target: str = None):
    tag = f"[{target}] " if target else ""
    log("ENGINE", f"{tag}{kind}: {text}")


def log_planner_request(path: str, instruction: str, num_elements: int, keyboard_shown: bool = False):
    """Log an outgoing planner request (screenshot omitted)."""
    kb = ", keyboard shown" if keyboard_shown else ""
    log("PLANNER", f"→ {path} ({num_elements} element{'s' if num_elements != 1 else ''}{kb})")
    for i, line in enumerate(instruction.strip().split("\n")):
        prefix = "  Instruction: " if i == 0 else "               "
        log("PLANNER", f"{prefix}{line}")


def log_planner_response(path: str, summary: str):
    log("PLANNER", f"← {path}: {summary[:300]}")


def log_action(name: str, arguments: dict):
    log("ACTION", f"{name} {json.dumps(arguments, default=str)}")


def log_wait_event(condition: str, event: str, detail: str = ""):
    """Log a condition poller event."""
    log("WAIT", f"[{condition[:60]}] {event}" + (f" — {detail}" if detail else ""))


def log_alert(event: str, detail: str = ""):
    log("ALERT", event + (f" — {detail}" if detail else ""))


def log_http(method: str, path: str, status: int, duration_ms: float):
    """Log an HTTP round-trip to the planner."""
    log("HTTP", f"{method} {path} → {status} ({duration_ms:.0f}ms)")


def log_error(message: str):
    log("ERROR", message)


def close():
    """Flush and close log file."""
    global _log_file
    if _log_file:
        _log_file.close()
        _log_file = None
