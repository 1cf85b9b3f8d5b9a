"""Shader programs with a CPU-side uniform store, and a named shader library."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Iterable, Iterator, Optional, Sequence, Union

import numpy as np

UniformValue = Union[int, float, tuple, np.ndarray]


def _vector(value: Sequence[float], size: int, what: str) -> np.ndarray:
    arr = np.array(value, dtype=float)
    if arr.shape != (size,):
        raise ValueError(f"{what} expects {size} components, got shape {arr.shape}")
    return arr


class Shader:
    """A named shader program holding its sources and uniform values."""

    def __init__(
        self,
        name: str,
        vertex_src: str = "",
        fragment_src: str = "",
        source: str = "",
    ) -> None:
        self.name = name
        self.vertex_src = vertex_src
        self.fragment_src = fragment_src
        self.source = source
        self.bound = False
        self.uniforms: Dict[str, UniformValue] = {}

    @classmethod
    def from_file(cls, filepath: Union[str, Path]) -> "Shader":
        """Read a shader file; the shader is named after the file's stem."""
        path = Path(filepath)
        return cls(path.stem, source=path.read_text(encoding="utf-8"))

    def bind(self) -> None:
        self.bound = True

    def unbind(self) -> None:
        self.bound = False

    def set_int(self, name: str, value: int) -> None:
        self.uniforms[name] = int(value)

    def set_int_array(self, name: str, values: Iterable[int]) -> None:
        self.uniforms[name] = tuple(int(v) for v in values)

    def set_float(self, name: str, value: float) -> None:
        self.uniforms[name] = float(value)

    def set_float2(self, name: str, value: Sequence[float]) -> None:
        self.uniforms[name] = _vector(value, 2, "set_float2")

    def set_float3(self, name: str, value: Sequence[float]) -> None:
        self.uniforms[name] = _vector(value, 3, "set_float3")

    def set_float4(self, name: str, value: Sequence[float]) -> None:
        self.uniforms[name] = _vector(value, 4, "set_float4")

    def set_mat4(self, name: str, value: np.ndarray) -> None:
        arr = np.array(value, dtype=float)
        if arr.shape != (4, 4):
            raise ValueError(f"set_mat4 expects a 4x4 matrix, got shape {arr.shape}")
        self.uniforms[name] = arr

    def __repr__(self) -> str:
        return f"Shader(name={self.name!r})"


class ShaderLibrary:
    """Shaders stored under unique names."""

    def __init__(self) -> None:
        self._shaders: Dict[str, Shader] = {}

    def add(self, shader: Shader, name: Optional[str] = None) -> None:
        """Store ``shader`` under ``name`` (its own name by default)."""
        key = shader.name if name is None else name
        if self.exists(key):
            raise ValueError(f"Shader already exists: {key!r}")
        self._shaders[key] = shader

    def load(self, filepath: Union[str, Path], name: Optional[str] = None) -> Shader:
        """Read a shader file, store it and return it."""
        shader = Shader.from_file(filepath)
        self.add(shader, name)
        return shader

    def get(self, name: str) -> Shader:
        try:
            return self._shaders[name]
        except KeyError:
            raise KeyError(f"Shader not found: {name!r}") from None

    def exists(self, name: str) -> bool:
        return name in self._shaders

    def __contains__(self, name: object) -> bool:
        return name in self._shaders

    def __len__(self) -> int:
        return len(self._shaders)

    def __iter__(self) -> Iterator[str]:
        return iter(self._shaders)