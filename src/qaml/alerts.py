"""System alert interceptor — clears unsolicited modal dialogs."""
import logging
from typing import Callable

from . import debug
from .bridge import RunLoop
from .config import EngineConfig
from .driver.base import UIDriver
from .driver.types import UINode
from .flatten import collect_alert
from .planner import PlannerClient
from .roles import ElementRole

log = logging.getLogger(__name__)


class AlertInterceptor:
    """Resolves system alerts before each capture.

    The policy is `config.alert_handler`: the instruction used to pick a
    button when an alert offers more than one. None disables handling.
    """

    def __init__(self, driver: UIDriver, planner: PlannerClient, config: EngineConfig, run_loop: RunLoop):
        self.driver = driver
        self.planner = planner
        self.config = config
        self.run_loop = run_loop

    @property
    def policy(self) -> str | None:
        return self.config.alert_handler

    @property
    def enabled(self) -> bool:
        return self.policy is not None

    def clear(self) -> int:
        """Handle alerts until none are left. Returns the number of buttons tapped."""
        if not self.enabled:
            return 0
        handled = 0
        while self.driver.alert_count() > 0:
            try:
                if self._handle_frontmost():
                    handled += 1
            except Exception:
                log.exception("Failed to handle system alert, retrying")
                debug.log_error("Alert handling failed, retrying")
                self.run_loop.pump()
        return handled

    def _handle_frontmost(self) -> bool:
        root = self.driver.alert_snapshot()
        if root is None:
            return False
        contents = collect_alert(root)

        if len(contents.buttons) == 1:
            debug.log_alert("Single-button alert", contents.buttons[0].label)
            return self.driver.tap_alert_button(None)
        if not contents.buttons:
            log.warning(f"Alert {contents.texts[:1]} has no enabled buttons, tapping the first one")
            debug.log_alert("No button candidates", " | ".join(contents.texts)[:200])
            return self.driver.tap_alert_button(None)

        choice = self.planner.select_element(self.policy, "\n".join(contents.texts), contents.buttons)
        debug.log_alert(f"Planner chose {choice.label!r}", " | ".join(contents.texts)[:200])
        log.info(f"Alert {contents.texts[:1]} → tapping {choice.label!r}")
        return self.driver.tap_alert_button(choice.label)

    def interruption_handler(self) -> Callable[[UINode], bool]:
        """Handler for drivers that report UI interruptions as they happen."""
        def handle(node: UINode) -> bool:
            if node.role is not ElementRole.ALERT:
                return False
            self.clear()
            return True
        return handle
