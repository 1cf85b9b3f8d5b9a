"""Batched 2D renderer for quads, circles and lines.

Geometry is collected on the CPU into vertex batches and handed to the
render command backend as draw calls when a batch is flushed.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, List, Optional, Sequence, Tuple

import numpy as np

from teddy_engine.buffer import BufferElement, BufferLayout, ShaderDataType
from teddy_engine.camera import Camera, EditorCamera
from teddy_engine.render_api import RenderCommand, Texture
from teddy_engine.shaders import Shader
from teddy_engine.transforms import rotate, scale, translate

MAX_QUADS = 20000
MAX_VERTICES = MAX_QUADS * 4
MAX_INDICES = MAX_QUADS * 6
MAX_TEXTURE_SLOTS = 32

QUAD_VERTEX_POSITIONS = np.array(
    [
        [-0.5, -0.5, 0.0, 1.0],
        [0.5, -0.5, 0.0, 1.0],
        [0.5, 0.5, 0.0, 1.0],
        [-0.5, 0.5, 0.0, 1.0],
    ]
)
TEXTURE_COORDS: Tuple[Tuple[float, float], ...] = (
    (0.0, 0.0),
    (1.0, 0.0),
    (1.0, 1.0),
    (0.0, 1.0),
)

QUAD_LAYOUT = BufferLayout(
    [
        BufferElement(ShaderDataType.FLOAT3, "a_Position"),
        BufferElement(ShaderDataType.FLOAT4, "a_Color"),
        BufferElement(ShaderDataType.FLOAT2, "a_TexCoord"),
        BufferElement(ShaderDataType.FLOAT, "a_TexIndex"),
        BufferElement(ShaderDataType.FLOAT, "a_TilingFactor"),
        BufferElement(ShaderDataType.INT, "a_EntityID"),
    ]
)
CIRCLE_LAYOUT = BufferLayout(
    [
        BufferElement(ShaderDataType.FLOAT3, "a_WorldPosition"),
        BufferElement(ShaderDataType.FLOAT3, "a_LocalPosition"),
        BufferElement(ShaderDataType.FLOAT4, "a_Color"),
        BufferElement(ShaderDataType.FLOAT, "a_Thickness"),
        BufferElement(ShaderDataType.FLOAT, "a_Fade"),
        BufferElement(ShaderDataType.INT, "a_EntityID"),
    ]
)
LINE_LAYOUT = BufferLayout(
    [
        BufferElement(ShaderDataType.FLOAT3, "a_Position"),
        BufferElement(ShaderDataType.FLOAT4, "a_Color"),
        BufferElement(ShaderDataType.INT, "a_EntityID"),
    ]
)

Vec3 = Tuple[float, float, float]
Vec4 = Tuple[float, float, float, float]


def _floats(values: Sequence[float], size: int, what: str) -> tuple:
    result = tuple(float(v) for v in np.asarray(values, dtype=float).ravel())
    if len(result) != size:
        raise ValueError(f"{what} needs {size} components, got {len(result)}")
    return result


def _matrix(transform: Any) -> np.ndarray:
    m = np.asarray(transform, dtype=float)
    if m.shape != (4, 4):
        raise ValueError(f"expected a 4x4 transform, got shape {m.shape}")
    return m


def _corners(transform: np.ndarray) -> List[Vec3]:
    world = (transform @ QUAD_VERTEX_POSITIONS.T).T
    return [tuple(float(c) for c in row[:3]) for row in world]  # type: ignore[misc]


def _quad_indices() -> np.ndarray:
    base = np.arange(MAX_QUADS, dtype=np.uint32)[:, None] * 4
    pattern = np.array([0, 1, 2, 2, 3, 0], dtype=np.uint32)
    return (base + pattern).ravel()


def _position3(position: Sequence[float]) -> np.ndarray:
    p = np.asarray(position, dtype=float).ravel()
    if p.shape == (2,):
        return np.append(p, 0.0)
    if p.shape == (3,):
        return p
    raise ValueError(f"position needs 2 or 3 components, got {p.shape[0]}")


@dataclass
class Statistics:
    draw_calls: int = 0
    quad_count: int = 0

    @property
    def total_vertex_count(self) -> int:
        return self.quad_count * 4

    @property
    def total_index_count(self) -> int:
        return self.quad_count * 6


@dataclass(frozen=True)
class QuadVertex:
    position: Vec3
    color: Vec4
    tex_coord: Tuple[float, float]
    tex_index: float
    tiling_factor: float
    entity_id: int


@dataclass(frozen=True)
class CircleVertex:
    world_position: Vec3
    local_position: Vec3
    color: Vec4
    thickness: float
    fade: float
    entity_id: int


@dataclass(frozen=True)
class LineVertex:
    position: Vec3
    color: Vec4
    entity_id: int


class _VertexArray:
    """Vertex storage for one primitive kind, as uploaded at flush time."""

    def __init__(self, layout: BufferLayout, index_buffer: Optional[np.ndarray] = None) -> None:
        self.layout = layout
        self.index_buffer = index_buffer
        self.vertices: tuple = ()
        self.bound = False

    @property
    def uploaded_bytes(self) -> int:
        return len(self.vertices) * self.layout.stride

    def set_data(self, vertices: Sequence[Any]) -> None:
        self.vertices = tuple(vertices)

    def bind(self) -> None:
        self.bound = True


class Renderer2D:
    """Collects 2D primitives into batches and issues draw calls."""

    def __init__(self, command: Optional[RenderCommand] = None) -> None:
        self.command = command if command is not None else RenderCommand()

        indices = _quad_indices()
        self.quad_vertex_array = _VertexArray(QUAD_LAYOUT, indices)
        self.circle_vertex_array = _VertexArray(CIRCLE_LAYOUT, indices)
        self.line_vertex_array = _VertexArray(LINE_LAYOUT)

        self.quad_shader = Shader("QuadShader")
        self.circle_shader = Shader("CircleShader")
        self.line_shader = Shader("LineShader")

        self.white_texture = Texture(1, 1)
        self.white_texture.set_data(b"\xff\xff\xff\xff")
        self.texture_slots: List[Optional[Texture]] = [None] * MAX_TEXTURE_SLOTS
        self.texture_slots[0] = self.white_texture

        self.line_width = 5.0
        self.camera_view_projection = np.identity(4)
        self._stats = Statistics()

        self._quad_vertices: List[QuadVertex] = []
        self._circle_vertices: List[CircleVertex] = []
        self._line_vertices: List[LineVertex] = []
        self._texture_slot_index = 1

    # --- state ---------------------------------------------------------------

    @property
    def stats(self) -> Statistics:
        return replace(self._stats)

    @property
    def quad_vertices(self) -> Tuple[QuadVertex, ...]:
        return tuple(self._quad_vertices)

    @property
    def circle_vertices(self) -> Tuple[CircleVertex, ...]:
        return tuple(self._circle_vertices)

    @property
    def line_vertices(self) -> Tuple[LineVertex, ...]:
        return tuple(self._line_vertices)

    @property
    def texture_slot_index(self) -> int:
        return self._texture_slot_index

    def reset_stats(self) -> None:
        self._stats = Statistics()

    # --- scenes and batches --------------------------------------------------

    def begin_scene(self, camera: Any, transform: Optional[np.ndarray] = None) -> None:
        """Start a scene.

        An editor camera supplies its own view projection; an orthographic
        camera's view projection goes straight to the quad shader; any other
        camera (or a bare projection matrix) needs its world ``transform``.
        """
        if isinstance(camera, EditorCamera):
            self.camera_view_projection = np.array(camera.view_projection())
        elif hasattr(camera, "view_projection_matrix"):
            self.quad_shader.bind()
            self.quad_shader.set_mat4("u_ViewProjection", camera.view_projection_matrix)
        else:
            if transform is None:
                raise ValueError("a camera transform is required for this camera")
            projection = camera.projection if isinstance(camera, Camera) else camera
            self.camera_view_projection = _matrix(projection) @ np.linalg.inv(
                _matrix(transform)
            )
        self._start_batch()

    def end_scene(self) -> None:
        self.flush()

    def flush(self) -> None:
        """Upload pending geometry and issue one draw call per primitive kind."""
        if self._quad_vertices:
            self.quad_vertex_array.set_data(self._quad_vertices)
            for slot, texture in enumerate(self.texture_slots[: self._texture_slot_index]):
                if texture is not None:
                    texture.bind(slot)
            self.quad_shader.bind()
            self.command.draw_indexed(self.quad_vertex_array, self._quad_index_count)
            self._stats.draw_calls += 1

        if self._circle_vertices:
            self.circle_vertex_array.set_data(self._circle_vertices)
            self.circle_shader.bind()
            self.command.draw_indexed(self.circle_vertex_array, self._circle_index_count)
            self._stats.draw_calls += 1

        if self._line_vertices:
            self.line_vertex_array.set_data(self._line_vertices)
            self.line_shader.bind()
            self.command.set_line_width(self.line_width)
            self.command.draw_lines(self.line_vertex_array, len(self._line_vertices))
            self._stats.draw_calls += 1

    @property
    def _quad_index_count(self) -> int:
        return len(self._quad_vertices) // 4 * 6

    @property
    def _circle_index_count(self) -> int:
        return len(self._circle_vertices) // 4 * 6

    def _start_batch(self) -> None:
        self._quad_vertices = []
        self._circle_vertices = []
        self._line_vertices = []
        self._texture_slot_index = 1

    def _next_batch(self) -> None:
        self.flush()
        self._start_batch()

    # --- quads ---------------------------------------------------------------

    def _push_quad(self, transform: np.ndarray, color: Vec4, tex_index: float,
                   tiling_factor: float, entity_id: int) -> None:
        for position, tex_coord in zip(_corners(transform), TEXTURE_COORDS):
            self._quad_vertices.append(
                QuadVertex(position, color, tex_coord, tex_index, float(tiling_factor),
                           int(entity_id))
            )
        self._stats.quad_count += 1

    def draw_quad(self, transform: np.ndarray, color: Sequence[float],
                  entity_id: int = -1) -> None:
        """Draw a flat-coloured unit quad placed by ``transform``."""
        m = _matrix(transform)
        rgba = _floats(color, 4, "color")
        if self._quad_index_count >= MAX_INDICES:
            self._next_batch()
        self._push_quad(m, rgba, 0.0, 1.0, entity_id)

    def draw_textured_quad(
        self,
        transform: np.ndarray,
        texture: Texture,
        tiling_factor: float = 1.0,
        tint_color: Sequence[float] = (1.0, 1.0, 1.0, 1.0),
        entity_id: int = -1,
    ) -> None:
        """Draw a textured unit quad, giving the texture a batch slot."""
        m = _matrix(transform)
        rgba = _floats(tint_color, 4, "tint_color")
        if self._quad_index_count >= MAX_INDICES:
            self._next_batch()

        texture_index = 0.0
        for slot in range(1, self._texture_slot_index):
            if self.texture_slots[slot] == texture:
                texture_index = float(slot)
                break

        if texture_index == 0.0:
            if self._texture_slot_index >= MAX_TEXTURE_SLOTS:
                self._next_batch()
            texture_index = float(self._texture_slot_index)
            self.texture_slots[self._texture_slot_index] = texture
            self._texture_slot_index += 1

        self._push_quad(m, rgba, texture_index, tiling_factor, entity_id)

    def draw_quad_at(self, position: Sequence[float], size: Sequence[float],
                     color: Sequence[float]) -> None:
        """Draw an axis-aligned quad centred on ``position``."""
        sx, sy = _floats(size, 2, "size")
        transform = translate(_position3(position)) @ scale((sx, sy, 1.0))
        self.draw_quad(transform, color)

    def draw_rotated_quad(self, position: Sequence[float], size: Sequence[float],
                          rotation: float, color: Sequence[float]) -> None:
        """Draw a quad turned ``rotation`` degrees about the Z axis."""
        sx, sy = _floats(size, 2, "size")
        transform = (
            translate(_position3(position))
            @ rotate(np.radians(rotation), (0.0, 0.0, 1.0))
            @ scale((sx, sy, 1.0))
        )
        self.draw_quad(transform, color)

    def draw_sprite(self, transform: np.ndarray, color: Sequence[float],
                    entity_id: int = -1) -> None:
        self.draw_quad(transform, color, entity_id)

    # --- circles -------------------------------------------------------------

    def draw_circle(
        self,
        transform: np.ndarray,
        color: Sequence[float],
        thickness: float = 1.0,
        fade: float = 0.005,
        entity_id: int = -1,
    ) -> None:
        """Draw a circle inscribed in the unit quad placed by ``transform``."""
        m = _matrix(transform)
        rgba = _floats(color, 4, "color")
        if self._circle_index_count >= MAX_INDICES:
            raise OverflowError("circle batch is full")
        for world, local in zip(_corners(m), QUAD_VERTEX_POSITIONS * 2.0):
            self._circle_vertices.append(
                CircleVertex(
                    world,
                    tuple(float(c) for c in local[:3]),  # type: ignore[arg-type]
                    rgba,
                    float(thickness),
                    float(fade),
                    int(entity_id),
                )
            )
        self._stats.quad_count += 1

    # --- lines ---------------------------------------------------------------

    def draw_line(self, p0: Sequence[float], p1: Sequence[float],
                  color: Sequence[float], entity_id: int = -1) -> None:
        a = _floats(p0, 3, "p0")
        b = _floats(p1, 3, "p1")
        rgba = _floats(color, 4, "color")
        if len(self._line_vertices) + 2 > MAX_VERTICES:
            raise OverflowError("line batch is full")
        self._line_vertices.append(LineVertex(a, rgba, int(entity_id)))
        self._line_vertices.append(LineVertex(b, rgba, int(entity_id)))

    def draw_rect(self, position: Sequence[float], size: Sequence[float],
                  color: Sequence[float], entity_id: int = -1) -> None:
        """Outline an axis-aligned rectangle centred on ``position``."""
        x, y, z = _floats(position, 3, "position")
        w, h = _floats(size, 2, "size")
        corners = [
            (x - w * 0.5, y - h * 0.5, z),
            (x + w * 0.5, y - h * 0.5, z),
            (x + w * 0.5, y + h * 0.5, z),
            (x - w * 0.5, y + h * 0.5, z),
        ]
        self._outline(corners, color, entity_id)

    def draw_rect_transform(self, transform: np.ndarray, color: Sequence[float],
                            entity_id: int = -1) -> None:
        """Outline the unit quad placed by ``transform``."""
        self._outline(_corners(_matrix(transform)), color, entity_id)

    def _outline(self, corners: Sequence[Sequence[float]], color: Sequence[float],
                 entity_id: int) -> None:
        for start, end in zip(corners, [*corners[1:], corners[0]]):
            self.draw_line(start, end, color, entity_id)