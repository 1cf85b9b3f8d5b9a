"""Renderer backend interface, render commands and the scene renderer.

The backend here is headless: it keeps the state it is given and records
draw calls, so rendering logic can run without a graphics context.
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional, Sequence, Tuple

import numpy as np

_texture_ids = itertools.count(1)


class GraphicsAPI(Enum):
    NONE = 0
    OPENGL = 1


class RendererAPI:
    """Backend that holds render state and records draw calls."""

    def __init__(self, api: GraphicsAPI = GraphicsAPI.OPENGL) -> None:
        api = GraphicsAPI(api)
        if api is GraphicsAPI.NONE:
            raise ValueError("RendererAPI::None is currently not supported!")
        self.api = api
        self.initialized = False
        self.viewport: Tuple[int, int, int, int] = (0, 0, 0, 0)
        self.clear_color: Tuple[float, float, float, float] = (0.0, 0.0, 0.0, 0.0)
        self.clear_count = 0
        self.line_width = 1.0
        self.draw_calls: List[Tuple[str, Any, int]] = []

    def init(self) -> None:
        self.initialized = True

    def set_viewport(self, x: int, y: int, width: int, height: int) -> None:
        self.viewport = (int(x), int(y), int(width), int(height))

    def set_clear_color(self, color: Sequence[float]) -> None:
        values = tuple(float(c) for c in color)
        if len(values) != 4:
            raise ValueError("clear colour needs four components")
        self.clear_color = values  # type: ignore[assignment]

    def clear(self) -> None:
        self.clear_count += 1

    def draw_indexed(self, vertex_array: Any, index_count: int = 0) -> None:
        self.draw_calls.append(("indexed", vertex_array, int(index_count)))

    def draw_lines(self, vertex_array: Any, vertex_count: int) -> None:
        self.draw_calls.append(("lines", vertex_array, int(vertex_count)))

    def set_line_width(self, width: float) -> None:
        self.line_width = float(width)


@dataclass(eq=False)
class Texture:
    """A 2D texture; textures compare equal when they share a renderer id."""

    width: int = 0
    height: int = 0
    path: str = ""
    renderer_id: int = field(default_factory=lambda: next(_texture_ids))
    data: Optional[bytes] = None
    bound_slot: Optional[int] = None

    def set_data(self, data: bytes) -> None:
        self.data = bytes(data)

    def bind(self, slot: int = 0) -> None:
        self.bound_slot = int(slot)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Texture):
            return NotImplemented
        return self.renderer_id == other.renderer_id

    def __hash__(self) -> int:
        return hash(self.renderer_id)


class FramebufferTextureFormat(Enum):
    NONE = 0
    RGBA8 = 1
    RED_INTEGER = 2
    DEPTH24STENCIL8 = 3
    DEPTH = 3


@dataclass
class FramebufferSpecification:
    width: int = 0
    height: int = 0
    attachments: List[FramebufferTextureFormat] = field(default_factory=list)
    samples: int = 1
    swap_chain_target: bool = False


class RenderCommand:
    """Forwards render commands to a backend."""

    def __init__(self, api: Optional[RendererAPI] = None) -> None:
        self.api = api if api is not None else RendererAPI()

    def init(self) -> None:
        self.api.init()

    def set_viewport(self, x: int, y: int, width: int, height: int) -> None:
        self.api.set_viewport(x, y, width, height)

    def set_clear_color(self, color: Sequence[float]) -> None:
        self.api.set_clear_color(color)

    def clear(self) -> None:
        self.api.clear()

    def draw_indexed(self, vertex_array: Any, index_count: int = 0) -> None:
        self.api.draw_indexed(vertex_array, index_count)

    def draw_lines(self, vertex_array: Any, vertex_count: int) -> None:
        self.api.draw_lines(vertex_array, vertex_count)

    def set_line_width(self, width: float) -> None:
        self.api.set_line_width(width)


class Renderer:
    """Submits shader and vertex-array pairs under a camera's view projection.

    Vertex arrays only need a ``bind()`` method.
    """

    def __init__(self, command: Optional[RenderCommand] = None) -> None:
        self.command = command if command is not None else RenderCommand()
        self.view_projection_matrix = np.identity(4)

    @property
    def api(self) -> GraphicsAPI:
        return self.command.api.api

    def init(self) -> None:
        self.command.init()

    def on_window_resize(self, width: int, height: int) -> None:
        self.command.set_viewport(0, 0, width, height)

    def begin_scene(self, camera: Any) -> None:
        """Take the view projection of an orthographic camera."""
        self.view_projection_matrix = np.array(camera.view_projection_matrix, dtype=float)

    def end_scene(self) -> None:
        """Nothing is batched, so there is nothing to finish."""

    def submit(self, shader: Any, vertex_array: Any,
               transform: Optional[np.ndarray] = None) -> None:
        shader.bind()
        shader.set_mat4("u_ViewProjection", self.view_projection_matrix)
        shader.set_mat4("u_Transform", np.identity(4) if transform is None else transform)
        vertex_array.bind()
        self.command.draw_indexed(vertex_array)