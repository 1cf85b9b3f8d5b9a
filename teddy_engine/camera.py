"""Cameras: a plain projection holder, a 2D orthographic camera, an editor
orbit camera and the scene camera used by camera components."""

from __future__ import annotations

import math
from enum import Enum
from typing import Optional, Sequence, Tuple

import numpy as np

from teddy_engine.events import Event, EventDispatcher, MouseScrolledEvent
from teddy_engine.transforms import (
    ortho,
    perspective,
    quat_from_euler,
    quat_rotate,
    quat_to_mat4,
    rotate,
    translate,
)


class Camera:
    """Holds a projection matrix."""

    def __init__(self, projection: Optional[np.ndarray] = None) -> None:
        self.projection = (
            np.identity(4) if projection is None else np.array(projection, dtype=float)
        )


class OrthographicCamera:
    """2D camera with a position and a rotation about the Z axis in degrees."""

    def __init__(self, left: float, right: float, bottom: float, top: float) -> None:
        self._projection_matrix = ortho(left, right, bottom, top, -1.0, 1.0)
        self._view_matrix = np.identity(4)
        self._view_projection_matrix = self._projection_matrix @ self._view_matrix
        self._position = np.zeros(3)
        self._rotation = 0.0

    def set_projection(self, left: float, right: float, bottom: float, top: float) -> None:
        """Replace the projection with new bounds."""
        self._projection_matrix = ortho(left, right, bottom, top, -1.0, 1.0)
        self._view_projection_matrix = self._projection_matrix @ self._view_matrix

    @property
    def position(self) -> np.ndarray:
        return self._position.copy()

    @position.setter
    def position(self, value: Sequence[float]) -> None:
        self._position = np.array(value, dtype=float)
        self._recalculate_view_matrix()

    @property
    def rotation(self) -> float:
        return self._rotation

    @rotation.setter
    def rotation(self, value: float) -> None:
        self._rotation = float(value)
        self._recalculate_view_matrix()

    @property
    def projection_matrix(self) -> np.ndarray:
        return self._projection_matrix

    @property
    def view_matrix(self) -> np.ndarray:
        return self._view_matrix

    @property
    def view_projection_matrix(self) -> np.ndarray:
        return self._view_projection_matrix

    def _recalculate_view_matrix(self) -> None:
        transform = translate(self._position) @ rotate(
            math.radians(self._rotation), (0.0, 0.0, 1.0)
        )
        self._view_matrix = np.linalg.inv(transform)
        self._view_projection_matrix = self._projection_matrix @ self._view_matrix


class EditorCamera(Camera):
    """Perspective camera orbiting a focal point at a given distance."""

    def __init__(
        self,
        fov: float = 45.0,
        aspect_ratio: float = 1.778,
        near_clip: float = 0.1,
        far_clip: float = 1000.0,
    ) -> None:
        super().__init__(perspective(math.radians(fov), aspect_ratio, near_clip, far_clip))
        self.fov = fov
        self.aspect_ratio = aspect_ratio
        self.near_clip = near_clip
        self.far_clip = far_clip

        self.view_matrix = np.identity(4)
        self.position = np.zeros(3)
        self.focal_point = np.zeros(3)
        self.distance = 10.0
        self.pitch = 0.0
        self.yaw = 0.0
        self.viewport_width = 1280.0
        self.viewport_height = 720.0
        self._update_view()

    def set_viewport_size(self, width: float, height: float) -> None:
        """Resize the viewport and rebuild the projection."""
        if height == 0:
            raise ValueError("viewport height must be non-zero")
        self.viewport_width = float(width)
        self.viewport_height = float(height)
        self._update_projection()

    def view_projection(self) -> np.ndarray:
        return self.projection @ self.view_matrix

    def orientation(self) -> np.ndarray:
        """Orientation quaternion (w, x, y, z)."""
        return quat_from_euler((-self.pitch, -self.yaw, 0.0))

    def up_direction(self) -> np.ndarray:
        return quat_rotate(self.orientation(), (0.0, 1.0, 0.0))

    def right_direction(self) -> np.ndarray:
        return quat_rotate(self.orientation(), (1.0, 0.0, 0.0))

    def forward_direction(self) -> np.ndarray:
        return quat_rotate(self.orientation(), (0.0, 0.0, -1.0))

    def on_event(self, event: Event) -> None:
        EventDispatcher(event).dispatch(MouseScrolledEvent, self._on_mouse_scroll)

    def mouse_pan(self, delta: Sequence[float]) -> None:
        """Move the focal point across the view plane."""
        dx, dy = delta
        x_speed, y_speed = self._pan_speed()
        self.focal_point = self.focal_point + (
            -self.right_direction() * dx * x_speed * self.distance
        )
        self.focal_point = self.focal_point + (
            self.up_direction() * dy * y_speed * self.distance
        )
        self._update_view()

    def mouse_rotate(self, delta: Sequence[float]) -> None:
        """Change yaw and pitch around the focal point."""
        dx, dy = delta
        yaw_sign = -1.0 if self.up_direction()[1] < 0 else 1.0
        self.yaw += yaw_sign * dx * self._rotation_speed()
        self.pitch += dy * self._rotation_speed()
        self._update_view()

    def mouse_zoom(self, delta: float) -> None:
        """Move towards the focal point; closer than 1 pushes the focal point."""
        self.distance -= delta * self._zoom_speed()
        if self.distance < 1.0:
            self.focal_point = self.focal_point + self.forward_direction()
            self.distance = 1.0
        self._update_view()

    def _on_mouse_scroll(self, event: MouseScrolledEvent) -> bool:
        self.mouse_zoom(event.y_offset * 0.1)
        return False

    def _update_projection(self) -> None:
        self.aspect_ratio = self.viewport_width / self.viewport_height
        self.projection = perspective(
            math.radians(self.fov), self.aspect_ratio, self.near_clip, self.far_clip
        )

    def _update_view(self) -> None:
        self.position = self.focal_point - self.forward_direction() * self.distance
        transform = translate(self.position) @ quat_to_mat4(self.orientation())
        self.view_matrix = np.linalg.inv(transform)

    def _pan_speed(self) -> Tuple[float, float]:
        x = min(self.viewport_width / 1000.0, 2.4)
        x_factor = 0.0366 * (x * x) - 0.1778 * x + 0.3021
        y = min(self.viewport_height / 1000.0, 2.4)
        y_factor = 0.0366 * (y * y) - 0.1778 * y + 0.3021
        return x_factor, y_factor

    @staticmethod
    def _rotation_speed() -> float:
        return 0.9

    def _zoom_speed(self) -> float:
        distance = max(self.distance * 0.2, 0.0)
        return min(distance * distance, 100.0)


class ProjectionType(Enum):
    PERSPECTIVE = 0
    ORTHOGRAPHIC = 1


class SceneCamera(Camera):
    """Camera whose projection follows its settings and viewport aspect.

    Until a viewport size is given the aspect ratio is zero and the
    projection stays the identity.
    """

    def __init__(self) -> None:
        super().__init__()
        self._projection_type = ProjectionType.ORTHOGRAPHIC
        self._perspective_fov = math.radians(45.0)
        self._perspective_near = 0.01
        self._perspective_far = 1000.0
        self._orthographic_size = 10.0
        self._orthographic_near = -1.0
        self._orthographic_far = 1.0
        self._aspect_ratio = 0.0
        self._recalculate_projection()

    def set_perspective(self, vertical_fov: float, near_clip: float, far_clip: float) -> None:
        self._projection_type = ProjectionType.PERSPECTIVE
        self._perspective_fov = float(vertical_fov)
        self._perspective_near = float(near_clip)
        self._perspective_far = float(far_clip)
        self._recalculate_projection()

    def set_orthographic(self, size: float, near_clip: float, far_clip: float) -> None:
        self._projection_type = ProjectionType.ORTHOGRAPHIC
        self._orthographic_size = float(size)
        self._orthographic_near = float(near_clip)
        self._orthographic_far = float(far_clip)
        self._recalculate_projection()

    def set_viewport_size(self, width: int, height: int) -> None:
        if height == 0:
            raise ValueError("viewport height must be non-zero")
        self._aspect_ratio = float(width) / float(height)
        self._recalculate_projection()

    @property
    def aspect_ratio(self) -> float:
        return self._aspect_ratio

    @property
    def projection_type(self) -> ProjectionType:
        return self._projection_type

    @projection_type.setter
    def projection_type(self, value: ProjectionType) -> None:
        self._projection_type = ProjectionType(value)
        self._recalculate_projection()

    @property
    def perspective_vertical_fov(self) -> float:
        return self._perspective_fov

    @perspective_vertical_fov.setter
    def perspective_vertical_fov(self, value: float) -> None:
        self._perspective_fov = float(value)
        self._recalculate_projection()

    @property
    def perspective_near_clip(self) -> float:
        return self._perspective_near

    @perspective_near_clip.setter
    def perspective_near_clip(self, value: float) -> None:
        self._perspective_near = float(value)
        self._recalculate_projection()

    @property
    def perspective_far_clip(self) -> float:
        return self._perspective_far

    @perspective_far_clip.setter
    def perspective_far_clip(self, value: float) -> None:
        self._perspective_far = float(value)
        self._recalculate_projection()

    @property
    def orthographic_size(self) -> float:
        return self._orthographic_size

    @orthographic_size.setter
    def orthographic_size(self, value: float) -> None:
        self._orthographic_size = float(value)
        self._recalculate_projection()

    @property
    def orthographic_near_clip(self) -> float:
        return self._orthographic_near

    @orthographic_near_clip.setter
    def orthographic_near_clip(self, value: float) -> None:
        self._orthographic_near = float(value)
        self._recalculate_projection()

    @property
    def orthographic_far_clip(self) -> float:
        return self._orthographic_far

    @orthographic_far_clip.setter
    def orthographic_far_clip(self, value: float) -> None:
        self._orthographic_far = float(value)
        self._recalculate_projection()

    def _recalculate_projection(self) -> None:
        if self._aspect_ratio == 0.0:
            return
        if self._projection_type is ProjectionType.PERSPECTIVE:
            self.projection = perspective(
                self._perspective_fov,
                self._aspect_ratio,
                self._perspective_near,
                self._perspective_far,
            )
        else:
            half_width = self._orthographic_size * self._aspect_ratio * 0.5
            half_height = self._orthographic_size * 0.5
            self.projection = ortho(
                -half_width,
                half_width,
                -half_height,
                half_height,
                self._orthographic_near,
                self._orthographic_far,
            )