"""Shared fixtures: a scripted UI driver and a stubbed planner API."""
import json

import httpx
import pytest

from qaml.config import DEFAULT_ALERT_HANDLER, EngineConfig
from qaml.driver.base import UIDriver
from qaml.driver.types import UINode
from qaml.element import Frame, Size
from qaml.roles import ElementRole

TARGET = "com.example.shop"
BASE_URL = "https://planner.test/v1"
FAKE_PNG = b"\x89PNG\r\n\x1a\nfake"


def node(role, x=0, y=0, w=100, h=40, children=None, **kw) -> UINode:
    return UINode(role=ElementRole.parse(role), frame=Frame(x, y, w, h), children=list(children or []), **kw)


def screen(*children, w=390, h=844) -> UINode:
    return node("application", 0, 0, w, h, children=[node("window", 0, 0, w, h, children=children)])


def alert(message: str, *buttons: str) -> UINode:
    return node(
        "alert", 40, 300, 310, 200,
        label="Alert",
        children=[node("staticText", 50, 310, 290, 40, label=message)]
        + [node("button", 50 + i * 150, 440, 140, 44, label=b) for i, b in enumerate(buttons)],
    )


def assert_body(result, reason=""):
    return [{"name": "assert", "arguments": json.dumps({"result": result, "reason": reason})}]


def action(name, **arguments):
    return {"name": name, "arguments": json.dumps(arguments)}


class FakeDriver(UIDriver):
    """In-memory driver recording every primitive it is asked to perform."""

    def __init__(self, root: UINode = None, window: Size = Size(390, 844), app_frame: Frame = Frame(0, 0, 390, 844)):
        self.root = root or screen()
        self.system_root = screen(node("navigationBar", 0, 0, 390, 44, label="System"))
        self.window = window
        self.frame = app_frame
        self.overlays = 0
        self.alerts: list[UINode] = []
        self.focused = None
        self.snapshot_error: Exception | None = None
        self.alert_errors: list[Exception] = []
        self.calls: list[tuple] = []

    def named(self, name: str) -> list[tuple]:
        return [c for c in self.calls if c[0] == name]

    def snapshot(self, target):
        if self.snapshot_error is not None:
            raise self.snapshot_error
        self.calls.append(("snapshot", target))
        return self.root

    def system_snapshot(self):
        self.calls.append(("system_snapshot",))
        return self.system_root

    def system_overlay_count(self):
        return self.overlays + len(self.alerts)

    def window_size(self, target):
        return self.window

    def app_frame(self, target):
        return self.frame

    def screenshot(self, target):
        return FAKE_PNG

    def alert_count(self):
        return len(self.alerts)

    def alert_snapshot(self):
        if self.alert_errors:
            raise self.alert_errors.pop(0)
        return self.alerts[0] if self.alerts else None

    def tap_alert_button(self, label=None):
        self.calls.append(("tap_alert_button", label))
        labels = [c.label for c in self.alerts[0].children if c.role is ElementRole.BUTTON]
        if label is None or label in labels:
            self.alerts.pop(0)
            return True
        return False

    def tap(self, target, x, y):
        self.calls.append(("tap", target, x, y))

    def long_press(self, target, x, y, duration):
        self.calls.append(("long_press", target, x, y, duration))

    def swipe(self, target, direction):
        self.calls.append(("swipe", target, direction))

    def drag(self, target, start_x, start_y, end_x, end_y, press_duration):
        self.calls.append(("drag", target, start_x, start_y, end_x, end_y, press_duration))

    def focused_value(self, target):
        return self.focused

    def type_text(self, target, text):
        self.calls.append(("type_text", target, text))

    def press_clear_key(self):
        self.calls.append(("clear_key",))

    def launch_app(self, bundle_id):
        self.calls.append(("launch_app", bundle_id))

    def activate_app(self, bundle_id):
        self.calls.append(("activate_app", bundle_id))

    def open_url(self, url):
        self.calls.append(("open_url", url))


class PlannerStub:
    """Scripted planner API. Queued responses are served in order; the last one repeats."""

    def __init__(self):
        self.responses: dict[str, list] = {"/execute": [], "/assert": [], "/call": []}
        self.requests: list[tuple[str, dict, httpx.Headers]] = []
        self.error: Exception | None = None

    def queue(self, path: str, body, status: int = 200):
        self.responses[path].append((status, body))

    def handler(self, request: httpx.Request) -> httpx.Response:
        if self.error is not None:
            raise self.error
        path = request.url.path.removeprefix("/v1")
        self.requests.append((path, json.loads(request.content), request.headers))
        queue = self.responses[path]
        status, body = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(body, (bytes, str)):
            return httpx.Response(status, content=body)
        return httpx.Response(status, json=body)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def calls(self, path: str) -> list[dict]:
        return [payload for p, payload, _ in self.requests if p == path]


class FakeRunLoop:
    """Stands in for RunLoop where only sleeping matters."""

    def __init__(self):
        self.slept: list[float] = []
        self.pumps = 0

    def sleep(self, duration):
        self.slept.append(duration)

    def pump(self, seconds=None):
        self.pumps += 1


@pytest.fixture
def config(tmp_path):
    return EngineConfig(
        api_key="test-key",
        api_base_url=BASE_URL,
        platform="iOS",
        alert_handler=DEFAULT_ALERT_HANDLER,
        auto_delay=0.0,
        settle_delay=0.0,
        poll_interval=0.0,
        app_switch_delay=0.0,
        pump_slice=0.01,
        request_ceiling=5.0,
        keep_artifacts=False,
        artifacts_dir=tmp_path / "artifacts",
    )


@pytest.fixture
def login_screen():
    return screen(
        node("staticText", 20, 100, 350, 30, label="Welcome back"),
        node("textField", 20, 150, 350, 40, placeholder="Email"),
        node("button", 10, 200, 80, 40, label="Login", children=[node("image", 20, 205, 20, 20, label="arrow")]),
    )


@pytest.fixture
def driver(login_screen):
    return FakeDriver(login_screen)


@pytest.fixture
def planner():
    return PlannerStub()


@pytest.fixture
def reporter():
    from qaml.reporting import RecordingReporter
    return RecordingReporter()


@pytest.fixture
def engine(driver, config, reporter, planner):
    from qaml.engine import AutomationEngine

    eng = AutomationEngine(driver, TARGET, config=config, reporter=reporter, transport=planner.transport())
    yield eng
    eng.close()
