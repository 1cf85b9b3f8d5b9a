import pytest

from teddy_engine.events import (
    AppRenderEvent,
    AppTickEvent,
    AppUpdateEvent,
    EventCategory,
    EventDispatcher,
    EventType,
    KeyEvent,
    KeyPressedEvent,
    KeyReleasedEvent,
    KeyTypedEvent,
    MouseButtonEvent,
    MouseButtonPressedEvent,
    MouseButtonReleasedEvent,
    MouseMovedEvent,
    MouseScrolledEvent,
    WindowCloseEvent,
    WindowResizeEvent,
)


def test_window_resize_string_and_fields():
    event = WindowResizeEvent(1280, 720)
    assert str(event) == "WindowResizeEvent: 1280, 720"
    assert (event.width, event.height) == (1280, 720)
    assert event.name == "WindowResize"


def test_plain_events_stringify_to_their_name():
    assert str(WindowCloseEvent()) == "WindowClose"
    assert str(AppTickEvent()) == "AppTick"
    assert str(AppUpdateEvent()) == "AppUpdate"
    assert str(AppRenderEvent()) == "AppRender"


def test_key_event_strings():
    assert str(KeyPressedEvent(65, 2)) == "KeyPressedEvent: 65 (2 repeats)"
    assert str(KeyReleasedEvent(65)) == "KeyReleasedEvent: 65"
    assert str(KeyTypedEvent(66)) == "KeyTypedEvent: 66"


def test_mouse_event_strings_use_stream_number_format():
    assert str(MouseMovedEvent(1.5, 2.0)) == "MouseMovedEvent: 1.5, 2"
    assert str(MouseScrolledEvent(0.0, -1.0)) == "MouseScrolledEvent: 0, -1"
    assert str(MouseButtonPressedEvent(1)) == "MouseButtonPressedEvent: 1"
    assert str(MouseButtonReleasedEvent(2)) == "MouseButtonReleasedEvent: 2"


def test_categories():
    key = KeyPressedEvent(10, 0)
    assert key.is_in_category(EventCategory.KEYBOARD)
    assert key.is_in_category(EventCategory.INPUT)
    assert not key.is_in_category(EventCategory.MOUSE)

    button = MouseButtonPressedEvent(0)
    assert button.is_in_category(EventCategory.MOUSE)
    assert not button.is_in_category(EventCategory.MOUSE_BUTTON)

    assert WindowCloseEvent().is_in_category(EventCategory.APPLICATION)
    assert not WindowCloseEvent().is_in_category(EventCategory.INPUT)


def test_event_types_are_distinct():
    types = [
        WindowResizeEvent(1, 1).event_type,
        WindowCloseEvent().event_type,
        KeyPressedEvent(1, 0).event_type,
        KeyReleasedEvent(1).event_type,
        KeyTypedEvent(1).event_type,
        MouseMovedEvent(0, 0).event_type,
        MouseScrolledEvent(0, 0).event_type,
        MouseButtonPressedEvent(0).event_type,
        MouseButtonReleasedEvent(0).event_type,
    ]
    assert len(set(types)) == len(types)
    assert MouseScrolledEvent(0, 0).event_type is EventType.MOUSE_SCROLLED


def test_dispatch_matching_type_sets_handled():
    event = MouseScrolledEvent(0.0, 3.0)
    seen = []

    def handler(e):
        seen.append(e.y_offset)
        return True

    assert EventDispatcher(event).dispatch(MouseScrolledEvent, handler) is True
    assert seen == [3.0]
    assert event.handled is True


def test_dispatch_handler_result_overwrites_handled():
    event = KeyPressedEvent(1, 0)
    event.handled = True
    assert EventDispatcher(event).dispatch(KeyPressedEvent, lambda e: False)
    assert event.handled is False


def test_dispatch_other_type_does_nothing():
    event = WindowResizeEvent(800, 600)
    calls = []
    dispatched = EventDispatcher(event).dispatch(
        MouseScrolledEvent, lambda e: calls.append(e) or True
    )
    assert dispatched is False
    assert calls == []
    assert event.handled is False


def test_handled_is_per_instance():
    first = AppTickEvent()
    second = AppTickEvent()
    EventDispatcher(first).dispatch(AppTickEvent, lambda e: True)
    assert first.handled is True
    assert second.handled is False


@pytest.mark.parametrize("abstract", [KeyEvent, MouseButtonEvent])
def test_dispatch_to_abstract_class_raises(abstract):
    with pytest.raises(TypeError):
        EventDispatcher(KeyTypedEvent(1)).dispatch(abstract, lambda e: True)