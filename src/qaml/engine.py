"""Automation engine — NL instruction → capture → plan → dispatch, with polling."""
import base64
import json
import logging
from contextlib import contextmanager

import httpx

from . import debug
from .alerts import AlertInterceptor
from .bridge import PlannerTransport, RunLoop
from .config import EngineConfig
from .dispatcher import ActionDispatcher, Direction
from .driver.base import UIDriver
from .driver.types import UINode
from .element import Element
from .errors import CaptureUnavailable, QamlError
from .flatten import Capture, flatten, scale_factor
from .planner import AssertionResult, PlannerClient, ScreenState
from .poller import ConditionPoller
from .reporting import RaisingReporter, Reporter

log = logging.getLogger(__name__)


class AutomationEngine:
    """Drives one app through a remote planner.

    All methods must be called from the automation thread, outside any
    running asyncio loop. Failures inside an instruction are reported once
    through the reporter; they are not raised unless the reporter raises.
    """

    def __init__(
        self,
        driver: UIDriver,
        target: str,
        config: EngineConfig = None,
        reporter: Reporter = None,
        transport: httpx.AsyncBaseTransport = None,
        run_loop: RunLoop = None,
    ):
        if not debug.is_enabled():
            debug.init()
        self.driver = driver
        self.target = target
        self.config = config or EngineConfig.from_env()
        self.reporter = reporter or RaisingReporter(
            artifacts_dir=self.config.artifacts_dir,
            keep_artifacts=self.config.keep_artifacts,
        )
        self.run_loop = run_loop or RunLoop(self.config.pump_slice)
        self.transport = PlannerTransport(
            self.config.base_url,
            self.config.api_key,
            self.run_loop,
            ceiling=self.config.request_ceiling,
            transport=transport,
        )
        self.planner = PlannerClient(self.config, self.transport, self.run_loop)
        self.alerts = AlertInterceptor(driver, self.planner, self.config, self.run_loop)
        self.dispatcher = ActionDispatcher(
            driver,
            lambda: self.target,
            self.run_loop,
            self.reporter,
            dump_state=self.dump_elements,
        )
        self.last_poll: ConditionPoller | None = None

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def close(self):
        self.transport.close()
        self.run_loop.close()
        debug.close()

    # ─── Observation ────────────────────────────────────────────

    def capture(self) -> Capture:
        """Clear system alerts, then flatten the frontmost UI."""
        try:
            self.alerts.clear()
            root = self._capture_root()
            scale = scale_factor(self.driver.window_size(self.target), self.driver.app_frame(self.target))
        except CaptureUnavailable:
            raise
        except Exception as e:
            raise CaptureUnavailable(f"Could not capture UI of {self.target}: {e}") from e
        return flatten(root, scale)

    def _capture_root(self) -> UINode:
        # System overlays (alerts left unhandled, system navigation bars) sit above the app
        if self.driver.system_overlay_count() > 0:
            return self.driver.system_snapshot()
        return self.driver.snapshot(self.target)

    def observe(self) -> ScreenState:
        """Capture everything the planner needs about the current screen."""
        capture = self.capture()
        try:
            window = self.driver.window_size(self.target)
            png = self.driver.screenshot(self.target)
        except Exception as e:
            raise CaptureUnavailable(f"Could not screenshot {self.target}: {e}") from e
        self.reporter.attach("screenshot", png, kind="png")
        return ScreenState(
            elements=capture.elements,
            keyboard_shown=capture.keyboard_shown,
            screen_size=window,
            screenshot=base64.b64encode(png).decode(),
        )

    def dump_elements(self) -> list[Element]:
        elements = self.capture().elements
        dump = json.dumps([e.to_dict() for e in elements], indent=2)
        log.debug(f"Accessibility elements: {dump}")
        self.reporter.attach("accessibility_elements", dump.encode(), kind="json")
        return elements

    # ─── Instructions ───────────────────────────────────────────

    @contextmanager
    def _instruction(self, name: str):
        with self.reporter.activity(name):
            try:
                yield
            except QamlError as e:
                debug.log_error(f"{name}: {e}")
                self.reporter.fail(str(e))

    def execute(self, command: str):
        """Ask the planner how to carry out `command` and perform its actions."""
        debug.log_instruction("Execute", command, self.target)
        with self._instruction(f"Execute command: {command}"):
            self.planner.settle()
            state = self.observe()
            actions = self.planner.plan(command, state)
            self.dispatcher.dispatch_all(actions)

    def _check(self, condition: str) -> AssertionResult:
        self.planner.settle()
        return self.planner.assert_condition(condition, self.observe())

    def assert_condition(self, assertion: str):
        debug.log_instruction("Assert", assertion, self.target)
        with self._instruction(f"Assert Condition: {assertion}"):
            self._check(assertion)

    def wait_until(self, condition: str, timeout: float = None):
        timeout = self.config.wait_timeout if timeout is None else timeout
        debug.log_instruction("Wait until", f"{condition} (timeout {timeout}s)", self.target)
        with self._instruction(f"Wait Until {condition}"):
            self.last_poll = ConditionPoller(self._check, self.dispatcher.scroll, self.run_loop.sleep, self.config.poll_interval)
            self.last_poll.wait_until(condition, timeout)

    def scroll(self, direction: Direction, until: str, max_scrolls: int = None):
        direction = Direction(direction)
        debug.log_instruction(f"Scroll {direction.value} until", until, self.target)
        with self._instruction(f"Scrolling {direction.value} until {until}"):
            self.last_poll = ConditionPoller(self._check, self.dispatcher.scroll, self.run_loop.sleep, self.config.poll_interval)
            self.last_poll.scroll_until(direction, until, max_scrolls=max_scrolls)

    def type(self, text: str):
        with self._instruction("Type text"):
            self.dispatcher.type_text(text)

    # ─── App lifecycle ──────────────────────────────────────────

    def switch_to_app(self, bundle_id: str):
        debug.log_instruction("Switch app", bundle_id)
        self.driver.activate_app(bundle_id)
        self.target = bundle_id
        self.run_loop.sleep(self.config.app_switch_delay)

    def launch_app(self, bundle_id: str):
        debug.log_instruction("Launch app", bundle_id)
        self.driver.launch_app(bundle_id)
        self.target = bundle_id
        self.run_loop.sleep(self.config.app_switch_delay)

    def open_url(self, url: str):
        debug.log_instruction("Open URL", url, self.target)
        self.driver.open_url(url)
        self.run_loop.sleep(self.config.app_switch_delay)
