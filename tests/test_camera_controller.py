import numpy as np
import pytest

from teddy_engine.camera_controller import (
    OrthographicCameraBounds,
    OrthographicCameraController,
)
from teddy_engine.events import MouseScrolledEvent, WindowResizeEvent
from teddy_engine.transforms import ortho


def test_initial_bounds_follow_aspect_ratio():
    ctrl = OrthographicCameraController(2.0)
    assert ctrl.bounds == OrthographicCameraBounds(-2.0, 2.0, -1.0, 1.0)
    assert ctrl.bounds.width == 2.0 * ctrl.bounds.height
    assert np.allclose(ctrl.camera.projection_matrix, ortho(-2.0, 2.0, -1.0, 1.0, -1.0, 1.0))


def test_scroll_zooms_and_updates_bounds():
    ctrl = OrthographicCameraController(1.5)
    event = MouseScrolledEvent(0.0, 2.0)
    ctrl.on_event(event)
    assert ctrl.zoom_level == 0.5
    assert ctrl.bounds.top == ctrl.zoom_level
    assert ctrl.bounds.right == 1.5 * ctrl.zoom_level
    assert event.handled is False


def test_scroll_clamps_zoom_level():
    ctrl = OrthographicCameraController(1.0)
    ctrl.on_event(MouseScrolledEvent(0.0, 50.0))
    assert ctrl.zoom_level == 0.25


def test_scroll_out_increases_zoom():
    ctrl = OrthographicCameraController(1.0)
    ctrl.on_event(MouseScrolledEvent(0.0, -4.0))
    assert ctrl.zoom_level > 1.0
    assert ctrl.bounds.height == 2.0 * ctrl.zoom_level


def test_resize_event_changes_projection_not_bounds():
    ctrl = OrthographicCameraController(1.0)
    before = ctrl.bounds
    event = WindowResizeEvent(800, 400)
    ctrl.on_event(event)
    assert ctrl.aspect_ratio == 2.0
    assert ctrl.bounds == before
    assert np.allclose(
        ctrl.camera.projection_matrix, ortho(-2.0, 2.0, -1.0, 1.0, -1.0, 1.0)
    )
    assert event.handled is False


def test_resize_zero_height_raises():
    with pytest.raises(ValueError):
        OrthographicCameraController(1.0).on_resize(100.0, 0.0)


def test_bounds_width_and_height():
    bounds = OrthographicCameraBounds(-3.0, 5.0, -1.0, 2.0)
    assert bounds.width == 8.0
    assert bounds.height == 3.0