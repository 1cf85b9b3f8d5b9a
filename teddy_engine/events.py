"""Engine events, their categories and a type-based dispatcher.

Events are blocking: when one occurs it is dispatched at once and must be
handled right there.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntFlag
from typing import Callable, ClassVar, Optional, Type, TypeVar


class EventType(Enum):
    """Concrete kind of an event."""

    NONE = 0
    WINDOW_CLOSE = 1
    WINDOW_RESIZE = 2
    WINDOW_FOCUS = 3
    WINDOW_LOST_FOCUS = 4
    WINDOW_MOVED = 5
    APP_TICK = 6
    APP_UPDATE = 7
    APP_RENDER = 8
    KEY_PRESSED = 9
    KEY_RELEASED = 10
    KEY_TYPED = 11
    MOUSE_BUTTON_PRESSED = 12
    MOUSE_BUTTON_RELEASED = 13
    MOUSE_MOVED = 14
    MOUSE_SCROLLED = 15


class EventCategory(IntFlag):
    """Bit flags grouping events into broad categories."""

    NONE = 0
    APPLICATION = 1 << 0
    INPUT = 1 << 1
    KEYBOARD = 1 << 2
    MOUSE = 1 << 3
    MOUSE_BUTTON = 1 << 4


def _number(value: float) -> str:
    """Format a number the way a default text stream does."""
    return f"{value:g}"


class Event:
    """Base of all events.

    Concrete subclasses set ``event_type``, ``name`` and ``category_flags``.
    """

    event_type: ClassVar[Optional[EventType]] = None
    name: ClassVar[str] = ""
    category_flags: ClassVar[EventCategory] = EventCategory.NONE

    handled = False

    def is_in_category(self, category: EventCategory) -> bool:
        """Return True if the event belongs to ``category``."""
        return bool(self.category_flags & category)

    def __str__(self) -> str:
        return self.name


E = TypeVar("E", bound=Event)


class EventDispatcher:
    """Routes one event to a handler chosen by event class."""

    def __init__(self, event: Event) -> None:
        self.event = event

    def dispatch(self, event_class: Type[E], func: Callable[[E], bool]) -> bool:
        """Call ``func`` if the event is of ``event_class``'s type.

        The handler's result becomes the event's ``handled`` flag. Returns
        True when the handler was called.
        """
        if event_class.event_type is None:
            raise TypeError(f"{event_class.__name__} has no concrete event type")
        if self.event.event_type is not event_class.event_type:
            return False
        self.event.handled = bool(func(self.event))  # type: ignore[arg-type]
        return True


# --- application events ----------------------------------------------------


@dataclass
class WindowResizeEvent(Event):
    width: int
    height: int

    event_type = EventType.WINDOW_RESIZE
    name = "WindowResize"
    category_flags = EventCategory.APPLICATION

    def __str__(self) -> str:
        return f"WindowResizeEvent: {self.width}, {self.height}"


@dataclass
class WindowCloseEvent(Event):
    event_type = EventType.WINDOW_CLOSE
    name = "WindowClose"
    category_flags = EventCategory.APPLICATION


@dataclass
class AppTickEvent(Event):
    event_type = EventType.APP_TICK
    name = "AppTick"
    category_flags = EventCategory.APPLICATION


@dataclass
class AppUpdateEvent(Event):
    event_type = EventType.APP_UPDATE
    name = "AppUpdate"
    category_flags = EventCategory.APPLICATION


@dataclass
class AppRenderEvent(Event):
    event_type = EventType.APP_RENDER
    name = "AppRender"
    category_flags = EventCategory.APPLICATION


# --- key events --------------------------------------------------------------


@dataclass
class KeyEvent(Event):
    """Base of keyboard events; not dispatchable on its own."""

    key_code: int

    category_flags = EventCategory.KEYBOARD | EventCategory.INPUT


@dataclass
class KeyPressedEvent(KeyEvent):
    repeat_count: int

    event_type = EventType.KEY_PRESSED
    name = "KeyPressed"

    def __str__(self) -> str:
        return f"KeyPressedEvent: {self.key_code} ({self.repeat_count} repeats)"


@dataclass
class KeyReleasedEvent(KeyEvent):
    event_type = EventType.KEY_RELEASED
    name = "KeyReleased"

    def __str__(self) -> str:
        return f"KeyReleasedEvent: {self.key_code}"


@dataclass
class KeyTypedEvent(KeyEvent):
    event_type = EventType.KEY_TYPED
    name = "KeyTyped"

    def __str__(self) -> str:
        return f"KeyTypedEvent: {self.key_code}"


# --- mouse events ------------------------------------------------------------


@dataclass
class MouseMovedEvent(Event):
    x: float
    y: float

    event_type = EventType.MOUSE_MOVED
    name = "MouseMoved"
    category_flags = EventCategory.MOUSE | EventCategory.INPUT

    def __str__(self) -> str:
        return f"MouseMovedEvent: {_number(self.x)}, {_number(self.y)}"


@dataclass
class MouseScrolledEvent(Event):
    x_offset: float
    y_offset: float

    event_type = EventType.MOUSE_SCROLLED
    name = "MouseScrolled"
    category_flags = EventCategory.MOUSE | EventCategory.INPUT

    def __str__(self) -> str:
        return f"MouseScrolledEvent: {_number(self.x_offset)}, {_number(self.y_offset)}"


@dataclass
class MouseButtonEvent(Event):
    """Base of mouse button events; not dispatchable on its own."""

    button: int

    category_flags = EventCategory.MOUSE | EventCategory.INPUT


@dataclass
class MouseButtonPressedEvent(MouseButtonEvent):
    event_type = EventType.MOUSE_BUTTON_PRESSED
    name = "MouseButtonPressed"

    def __str__(self) -> str:
        return f"MouseButtonPressedEvent: {self.button}"


@dataclass
class MouseButtonReleasedEvent(MouseButtonEvent):
    event_type = EventType.MOUSE_BUTTON_RELEASED
    name = "MouseButtonReleased"

    def __str__(self) -> str:
        return f"MouseButtonReleasedEvent: {self.button}"