"""Abstract base class for platform UI drivers."""
from abc import ABC, abstractmethod

from ..element import Frame, Size
from .types import UINode


class UIDriver(ABC):
    """Interface to the platform automation driver (accessibility snapshots and synthesized input).

    `target` arguments are the bundle identifier of the app currently under
    test. Gesture coordinates are in the same space the flattener reports.
    All methods are called from the single automation thread.
    """

    # ─── Snapshots ──────────────────────────────────────────────

    @abstractmethod
    def snapshot(self, target: str) -> UINode:
        """Capture the full UI tree of the target app."""
        ...

    @abstractmethod
    def system_snapshot(self) -> UINode:
        """Capture the system UI (home screen / system overlays) tree."""
        ...

    @abstractmethod
    def system_overlay_count(self) -> int:
        """Number of system alerts and system navigation bars on screen."""
        ...

    @abstractmethod
    def window_size(self, target: str) -> Size:
        ...

    @abstractmethod
    def app_frame(self, target: str) -> Frame:
        ...

    @abstractmethod
    def screenshot(self, target: str) -> bytes:
        """PNG bytes of the current screen."""
        ...

    # ─── System alerts ──────────────────────────────────────────

    @abstractmethod
    def alert_count(self) -> int:
        ...

    @abstractmethod
    def alert_snapshot(self) -> UINode | None:
        """Tree of the frontmost system alert, or None if it vanished."""
        ...

    @abstractmethod
    def tap_alert_button(self, label: str | None = None) -> bool:
        """Tap a button of the frontmost alert (the first one when label is None).

        Returns False if no such button exists any more.
        """
        ...

    # ─── Gestures & text ────────────────────────────────────────

    @abstractmethod
    def tap(self, target: str, x: int, y: int):
        ...

    @abstractmethod
    def long_press(self, target: str, x: int, y: int, duration: float):
        ...

    @abstractmethod
    def swipe(self, target: str, direction: str):
        """Swipe the target's main window; direction is left|right|up|down."""
        ...

    @abstractmethod
    def drag(self, target: str, start_x: int, start_y: int, end_x: int, end_y: int, press_duration: float):
        ...

    @abstractmethod
    def focused_value(self, target: str):
        """Current value of the element with keyboard focus (None if unknown)."""
        ...

    @abstractmethod
    def type_text(self, target: str, text: str):
        """Type into the element with keyboard focus."""
        ...

    def press_clear_key(self):
        """Send the hardware "clear" key event, if the platform supports it."""
        return None

    # ─── App lifecycle ──────────────────────────────────────────

    def launch_app(self, bundle_id: str):
        raise NotImplementedError

    def activate_app(self, bundle_id: str):
        raise NotImplementedError

    def open_url(self, url: str):
        raise NotImplementedError
