"""Configuration for the qaml automation engine."""
from dataclasses import dataclass, field, replace
from pathlib import Path
from dotenv import load_dotenv
import os

load_dotenv()  # loads .env from project root (or cwd) if present

# Paths
DATA_DIR = Path(os.environ.get("QAML_DATA_DIR", Path.home() / ".qaml"))
ARTIFACTS_DIR = DATA_DIR / "artifacts"

# Remote planner
API_KEY = os.environ.get("QAML_API_KEY", "")
API_BASE_URL = os.environ.get("QAML_API_BASE_URL", "https://api.camelqa.com/v1")
PLATFORM = os.environ.get("QAML_PLATFORM", "iOS")
SYSTEM_PROMPT = os.environ.get("QAML_SYSTEM_PROMPT", "")

# System alerts — "off", "none" or an empty value disables automatic handling
DEFAULT_ALERT_HANDLER = "select the most permissive option. DO NOT select options related to precision"
_alert_env = os.environ.get("QAML_ALERT_HANDLER", DEFAULT_ALERT_HANDLER)
ALERT_HANDLER = None if _alert_env.strip().lower() in ("", "off", "none") else _alert_env

# Timing (seconds)
AUTO_DELAY = float(os.environ.get("QAML_AUTO_DELAY", "0.0"))
SETTLE_DELAY = float(os.environ.get("QAML_SETTLE_DELAY", "0.5"))  # lets animations finish before a capture
POLL_INTERVAL = float(os.environ.get("QAML_POLL_INTERVAL", "0.5"))
WAIT_TIMEOUT = float(os.environ.get("QAML_WAIT_TIMEOUT", "10"))
APP_SWITCH_DELAY = 1.0
LONG_PRESS_DURATION = 2.0
DRAG_PRESS_DURATION = 0.1

# Run loop pumping
PUMP_SLICE = float(os.environ.get("QAML_PUMP_SLICE", "0.1"))
REQUEST_CEILING = float(os.environ.get("QAML_REQUEST_CEILING", "120"))

# Diagnostics
KEEP_ARTIFACTS = os.environ.get("QAML_KEEP_ARTIFACTS", "0") in ("1", "true", "yes")
THUMBNAIL_MAX_DIM = 360
THUMBNAIL_JPEG_QUALITY = 60


@dataclass
class EngineConfig:
    """Settings handed to an AutomationEngine at construction.

    Fields are read at the start of every instruction cycle, so they may be
    changed between instructions but not during one.
    """
    api_key: str = API_KEY
    api_base_url: str = API_BASE_URL
    platform: str = PLATFORM
    system_prompt: str = SYSTEM_PROMPT
    alert_handler: str | None = ALERT_HANDLER
    auto_delay: float = AUTO_DELAY
    settle_delay: float = SETTLE_DELAY
    poll_interval: float = POLL_INTERVAL
    wait_timeout: float = WAIT_TIMEOUT
    app_switch_delay: float = APP_SWITCH_DELAY
    pump_slice: float = PUMP_SLICE
    request_ceiling: float = REQUEST_CEILING
    keep_artifacts: bool = KEEP_ARTIFACTS
    artifacts_dir: Path = field(default_factory=lambda: ARTIFACTS_DIR)

    @classmethod
    def from_env(cls, **overrides) -> "EngineConfig":
        return replace(cls(), **overrides)

    @property
    def base_url(self) -> str:
        return self.api_base_url.rstrip("/")
