"""Tests for action dispatch and argument validation."""
import pytest

from conftest import TARGET, FakeDriver, FakeRunLoop


@pytest.fixture
def run_loop():
    return FakeRunLoop()


@pytest.fixture
def dumps():
    return []


@pytest.fixture
def dispatcher(run_loop, reporter, dumps):
    from qaml.dispatcher import ActionDispatcher

    driver = FakeDriver()
    return ActionDispatcher(driver, lambda: TARGET, run_loop, reporter, dump_state=lambda: dumps.append("dumped"))


def _act(name, **arguments):
    from qaml.planner import Action
    return Action(name=name, arguments=arguments)


def test_tap_truncates_coordinates(dispatcher):
    dispatcher.dispatch(_act("tap", x=50.9, y=220))
    assert dispatcher.driver.calls == [("tap", TARGET, 50, 220)]


def test_tap_rejects_non_numeric_coordinates(dispatcher):
    from qaml.errors import InvalidActionArguments

    with pytest.raises(InvalidActionArguments) as exc:
        dispatcher.dispatch(_act("tap", x="50", y=220))
    assert exc.value.action == "tap"
    assert exc.value.field == "x"
    assert dispatcher.driver.calls == []

    with pytest.raises(InvalidActionArguments):
        dispatcher.dispatch(_act("tap", x=True, y=220))
    with pytest.raises(InvalidActionArguments):
        dispatcher.dispatch(_act("tap", x=10))


def test_unknown_action(dispatcher):
    from qaml.errors import QamlError, UnknownActionError

    with pytest.raises(UnknownActionError) as exc:
        dispatcher.dispatch(_act("teleport"))
    assert str(exc.value) == "Invalid action: teleport"
    assert not isinstance(exc.value, QamlError)


def test_action_names(dispatcher):
    assert dispatcher.action_names == {
        "type_text", "tap", "long_press", "swipe", "scroll", "drag", "sleep", "report_error", "assert",
    }


def test_long_press(dispatcher):
    dispatcher.dispatch(_act("long_press", x=5, y=6))
    assert dispatcher.driver.calls == [("long_press", TARGET, 5, 6, 2.0)]


def test_swipe_passes_direction_through(dispatcher):
    for direction in ("up", "down", "left", "right"):
        dispatcher.dispatch(_act("swipe", direction=direction))
    assert [c[2] for c in dispatcher.driver.calls] == ["up", "down", "left", "right"]


def test_scroll_swipes_the_opposite_way(dispatcher):
    for direction in ("up", "down", "left", "right"):
        dispatcher.dispatch(_act("scroll", direction=direction))
    assert [c[2] for c in dispatcher.driver.calls] == ["down", "up", "right", "left"]


def test_invalid_direction(dispatcher):
    from qaml.errors import InvalidActionArguments

    with pytest.raises(InvalidActionArguments) as exc:
        dispatcher.dispatch(_act("scroll", direction="sideways"))
    assert exc.value.field == "direction"


def test_drag(dispatcher):
    from qaml.errors import InvalidActionArguments

    dispatcher.dispatch(_act("drag", startX=10, startY=20.0, endX=300, endY=400))
    assert dispatcher.driver.calls == [("drag", TARGET, 10, 20, 300, 400, 0.1)]

    with pytest.raises(InvalidActionArguments) as exc:
        dispatcher.dispatch(_act("drag", startX=10, startY=20, endX=300.5, endY=400))
    assert exc.value.field == "endX"


def test_type_text_replaces_existing_value(dispatcher):
    dispatcher.driver.focused = "abc"
    dispatcher.dispatch(_act("type_text", text="new"))

    assert dispatcher.driver.calls == [
        ("clear_key",),
        ("type_text", TARGET, "\b\b\b\x7f\x7f\x7f"),
        ("type_text", TARGET, "new"),
    ]


def test_type_text_into_empty_field(dispatcher):
    dispatcher.driver.focused = None
    dispatcher.type_text("hello")
    assert dispatcher.driver.calls == [("clear_key",), ("type_text", TARGET, "hello")]


def test_sleep(dispatcher, run_loop):
    dispatcher.dispatch(_act("sleep", duration=1.5))
    assert run_loop.slept == [1.5]


def test_report_error_dumps_then_fails(dispatcher, reporter, dumps):
    dispatcher.dispatch(_act("report_error", reason="Login button missing"))
    assert dumps == ["dumped"]
    assert reporter.failures == ["Login button missing"]


def test_assert_action(dispatcher, reporter):
    dispatcher.dispatch(_act("assert", condition=True, message="fine"))
    assert reporter.failures == []

    dispatcher.dispatch(_act("assert", condition=False, message="Total is wrong"))
    assert reporter.failures == ["Total is wrong"]


def test_dispatch_all_stops_at_first_error(dispatcher):
    from qaml.errors import InvalidActionArguments

    with pytest.raises(InvalidActionArguments):
        dispatcher.dispatch_all([_act("tap", x=1, y=2), _act("tap", x="?", y=2), _act("tap", x=3, y=4)])
    assert dispatcher.driver.calls == [("tap", TARGET, 1, 2)]
