"""Condition poller: re-ask the planner until a condition holds."""
import logging
import time
from enum import Enum
from typing import Callable

from . import debug
from .dispatcher import Direction
from .errors import AssertionNotSatisfied, TransportError
from .planner import AssertionResult

log = logging.getLogger(__name__)

# Failures that mean "not yet" inside a polling loop
RETRYABLE = (AssertionNotSatisfied, TransportError)


class PollState(Enum):
    CHECKING = "checking"
    ACTING = "acting"
    SATISFIED = "satisfied"
    TIMED_OUT = "timed_out"


class ConditionPoller:
    """Drives wait-until and scroll-until flows.

    `check(condition)` returns an AssertionResult or raises
    AssertionNotSatisfied; `scroll(direction)` performs one scroll.
    """

    def __init__(
        self,
        check: Callable[[str], AssertionResult],
        scroll: Callable[[Direction], None],
        sleep: Callable[[float], None],
        interval: float = 0.5,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._check = check
        self._scroll = scroll
        self._sleep = sleep
        self.interval = interval
        self._clock = clock
        self.state = PollState.CHECKING
        self.checks = 0
        self.actions = 0

    def _reset(self):
        self.state = PollState.CHECKING
        self.checks = 0
        self.actions = 0

    def _run_check(self, condition: str) -> AssertionResult:
        self.state = PollState.CHECKING
        self.checks += 1
        result = self._check(condition)
        self.state = PollState.SATISFIED
        debug.log_wait_event(condition, "✅ SATISFIED", result.reason)
        return result

    def wait_until(self, condition: str, timeout: float) -> AssertionResult:
        """Poll until the condition holds; after `timeout`, one last check decides."""
        self._reset()
        start = self._clock()
        while True:
            elapsed = self._clock() - start
            if elapsed > timeout:
                self.state = PollState.TIMED_OUT
                log.info(f"Condition {condition!r} timed out after {elapsed:.1f}s, final check")
                debug.log_wait_event(condition, "⏰ TIMEOUT", f"{elapsed:.1f}s > {timeout}s, final check")
                try:
                    return self._run_check(condition)
                except Exception:
                    self.state = PollState.TIMED_OUT
                    raise
            try:
                log.info(f"Waiting for condition: {condition}")
                return self._run_check(condition)
            except RETRYABLE as e:
                log.info(f"Condition {condition!r} not met yet. Retrying...")
                debug.log_wait_event(condition, "NOT YET", str(e))
                self.state = PollState.ACTING
                self._sleep(self.interval)

    def scroll_until(self, direction: Direction, condition: str, max_scrolls: int = None) -> AssertionResult:
        """Alternate check and scroll until the condition holds.

        Unbounded unless `max_scrolls` is given; the caller must make sure the
        condition is reachable.
        """
        self._reset()
        direction = Direction(direction)
        while True:
            try:
                return self._run_check(condition)
            except RETRYABLE as e:
                if max_scrolls is not None and self.actions >= max_scrolls:
                    log.info(f"Gave up scrolling {direction.value} after {self.actions} scroll(s)")
                    raise
                debug.log_wait_event(condition, f"SCROLL {direction.value}", str(e))
                self.state = PollState.ACTING
                self.actions += 1
                self._scroll(direction)
