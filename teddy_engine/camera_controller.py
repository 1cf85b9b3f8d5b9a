"""Zoomable controller around an orthographic camera."""

from __future__ import annotations

from dataclasses import dataclass

from teddy_engine.camera import OrthographicCamera
from teddy_engine.events import (
    Event,
    EventDispatcher,
    MouseScrolledEvent,
    WindowResizeEvent,
)


@dataclass
class OrthographicCameraBounds:
    left: float
    right: float
    bottom: float
    top: float

    @property
    def width(self) -> float:
        return self.right - self.left

    @property
    def height(self) -> float:
        return self.top - self.bottom


class OrthographicCameraController:
    """Owns an orthographic camera and reacts to scroll and resize events."""

    def __init__(self, aspect_ratio: float, rotation: bool = False) -> None:
        self.aspect_ratio = float(aspect_ratio)
        self.zoom_level = 1.0
        self.rotation = rotation
        self.camera_translation_speed = 5.0
        self.camera_rotation_speed = 180.0
        self._bounds = self._make_bounds()
        self.camera = OrthographicCamera(
            self._bounds.left, self._bounds.right, self._bounds.bottom, self._bounds.top
        )

    @property
    def bounds(self) -> OrthographicCameraBounds:
        return self._bounds

    def on_event(self, event: Event) -> None:
        dispatcher = EventDispatcher(event)
        dispatcher.dispatch(MouseScrolledEvent, self._on_mouse_scrolled)
        dispatcher.dispatch(WindowResizeEvent, self._on_window_resized)

    def on_resize(self, width: float, height: float) -> None:
        """Adopt a new aspect ratio; the stored bounds are left as they were."""
        if height == 0:
            raise ValueError("height must be non-zero")
        self.aspect_ratio = width / height
        self.camera.set_projection(
            -self.aspect_ratio * self.zoom_level,
            self.aspect_ratio * self.zoom_level,
            -self.zoom_level,
            self.zoom_level,
        )

    def _make_bounds(self) -> OrthographicCameraBounds:
        return OrthographicCameraBounds(
            -self.aspect_ratio * self.zoom_level,
            self.aspect_ratio * self.zoom_level,
            -self.zoom_level,
            self.zoom_level,
        )

    def _on_mouse_scrolled(self, event: MouseScrolledEvent) -> bool:
        self.zoom_level -= event.y_offset * 0.25
        self.zoom_level = max(self.zoom_level, 0.25)
        self._bounds = self._make_bounds()
        self.camera.set_projection(
            self._bounds.left, self._bounds.right, self._bounds.bottom, self._bounds.top
        )
        return False

    def _on_window_resized(self, event: WindowResizeEvent) -> bool:
        self.on_resize(float(event.width), float(event.height))
        return False