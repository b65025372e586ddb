"""Executes planner actions as driver primitives."""
import logging
from enum import Enum
from typing import Callable

from . import config, debug
from .bridge import RunLoop
from .driver.base import UIDriver
from .errors import InvalidActionArguments, QamlError, UnknownActionError
from .planner import Action
from .reporting import Reporter

log = logging.getLogger(__name__)


class Direction(str, Enum):
    LEFT = "left"
    DOWN = "down"
    UP = "up"
    RIGHT = "right"


# Scrolling moves content, swiping moves the finger: scrolling up is a downward swipe.
SCROLL_TO_SWIPE = {
    Direction.UP: Direction.DOWN,
    Direction.DOWN: Direction.UP,
    Direction.LEFT: Direction.RIGHT,
    Direction.RIGHT: Direction.LEFT,
}

BACKSPACE = "\b"
FORWARD_DELETE = "\x7f"


class ActionDispatcher:
    """Executes decoded planner actions against the driver, in order."""

    def __init__(
        self,
        driver: UIDriver,
        target: Callable[[], str],
        run_loop: RunLoop,
        reporter: Reporter,
        dump_state: Callable[[], object] = None,
    ):
        self.driver = driver
        self._target = target
        self.run_loop = run_loop
        self.reporter = reporter
        self._dump_state = dump_state
        self._handlers: dict[str, Callable[[str, dict], None]] = {
            "type_text": self._handle_type_text,
            "tap": self._handle_tap,
            "long_press": self._handle_long_press,
            "swipe": self._handle_swipe,
            "scroll": self._handle_scroll,
            "drag": self._handle_drag,
            "sleep": self._handle_sleep,
            "report_error": self._handle_report_error,
            "assert": self._handle_assert,
        }

    @property
    def action_names(self) -> frozenset[str]:
        return frozenset(self._handlers)

    def dispatch(self, action: Action):
        handler = self._handlers.get(action.name)
        if handler is None:
            raise UnknownActionError(action.name)
        log.info(f"Executing action: {action.name} with arguments: {action.arguments}")
        debug.log_action(action.name, action.arguments)
        handler(action.name, action.arguments)

    def dispatch_all(self, actions: list[Action]):
        for action in actions:
            self.dispatch(action)

    # ─── Primitives ─────────────────────────────────────────────

    def type_text(self, text: str):
        """Replace the focused field's contents with `text`."""
        target = self._target()
        self.driver.press_clear_key()
        current = self.driver.focused_value(target)
        if isinstance(current, str) and current:
            self.driver.type_text(target, BACKSPACE * len(current) + FORWARD_DELETE * len(current))
        self.driver.type_text(target, text)

    def swipe(self, direction: Direction):
        self.driver.swipe(self._target(), Direction(direction).value)

    def scroll(self, direction: Direction):
        self.swipe(SCROLL_TO_SWIPE[Direction(direction)])

    # ─── Handlers ───────────────────────────────────────────────

    def _handle_type_text(self, name: str, args: dict):
        self.type_text(_string(name, args, "text"))

    def _handle_tap(self, name: str, args: dict):
        x, y = int(_number(name, args, "x")), int(_number(name, args, "y"))
        self.driver.tap(self._target(), x, y)

    def _handle_long_press(self, name: str, args: dict):
        x, y = int(_number(name, args, "x")), int(_number(name, args, "y"))
        self.driver.long_press(self._target(), x, y, config.LONG_PRESS_DURATION)

    def _handle_swipe(self, name: str, args: dict):
        self.swipe(_direction(name, args))

    def _handle_scroll(self, name: str, args: dict):
        self.scroll(_direction(name, args))

    def _handle_drag(self, name: str, args: dict):
        start_x = _integer(name, args, "startX")
        start_y = _integer(name, args, "startY")
        end_x = _integer(name, args, "endX")
        end_y = _integer(name, args, "endY")
        self.driver.drag(self._target(), start_x, start_y, end_x, end_y, config.DRAG_PRESS_DURATION)

    def _handle_sleep(self, name: str, args: dict):
        self.run_loop.sleep(_number(name, args, "duration"))

    def _handle_report_error(self, name: str, args: dict):
        reason = _string(name, args, "reason")
        if self._dump_state is not None:
            try:
                self._dump_state()
            except QamlError as e:
                log.warning(f"Could not dump elements for report_error: {e}")
        self.reporter.fail(reason)

    def _handle_assert(self, name: str, args: dict):
        condition = _boolean(name, args, "condition")
        message = _string(name, args, "message")
        if not condition:
            self.reporter.fail(message)


# ─── Argument validation ────────────────────────────────────────

def _number(action: str, args: dict, field: str) -> float:
    value = args.get(field)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidActionArguments(action, field, "a number")
    return value


def _integer(action: str, args: dict, field: str) -> int:
    value = args.get(field)
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidActionArguments(action, field, "an integer")
    return value


def _string(action: str, args: dict, field: str) -> str:
    value = args.get(field)
    if not isinstance(value, str):
        raise InvalidActionArguments(action, field, "a string")
    return value


def _boolean(action: str, args: dict, field: str) -> bool:
    value = args.get(field)
    if not isinstance(value, bool):
        raise InvalidActionArguments(action, field, "a boolean")
    return value


def _direction(action: str, args: dict) -> Direction:
    value = args.get("direction")
    try:
        return Direction(value)
    except ValueError:
        raise InvalidActionArguments(action, "direction", "one of left, right, up, down") from None
