"""Vertex buffer layouts: element types, sizes, offsets and stride."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Iterable, Iterator, Tuple


class ShaderDataType(Enum):
    NONE = 0
    FLOAT = 1
    FLOAT2 = 2
    FLOAT3 = 3
    FLOAT4 = 4
    MAT3 = 5
    MAT4 = 6
    INT = 7
    INT2 = 8
    INT3 = 9
    INT4 = 10
    BOOL = 11


_SIZES = {
    ShaderDataType.FLOAT: 4,
    ShaderDataType.FLOAT2: 4 * 2,
    ShaderDataType.FLOAT3: 4 * 3,
    ShaderDataType.FLOAT4: 4 * 4,
    ShaderDataType.MAT3: 4 * 3 * 3,
    ShaderDataType.MAT4: 4 * 4 * 4,
    ShaderDataType.INT: 4,
    ShaderDataType.INT2: 4 * 2,
    ShaderDataType.INT3: 4 * 3,
    ShaderDataType.INT4: 4 * 4,
    ShaderDataType.BOOL: 1,
}

_COMPONENTS = {
    ShaderDataType.FLOAT: 1,
    ShaderDataType.FLOAT2: 2,
    ShaderDataType.FLOAT3: 3,
    ShaderDataType.FLOAT4: 4,
    ShaderDataType.MAT3: 3 * 3,
    ShaderDataType.MAT4: 4 * 4,
    ShaderDataType.INT: 1,
    ShaderDataType.INT2: 2,
    ShaderDataType.INT3: 3,
    ShaderDataType.INT4: 4,
    ShaderDataType.BOOL: 1,
}


def shader_data_type_size(data_type: ShaderDataType) -> int:
    """Size in bytes of one value of ``data_type``."""
    try:
        return _SIZES[data_type]
    except KeyError:
        raise ValueError(f"unknown shader data type: {data_type!r}") from None


@dataclass(frozen=True)
class BufferElement:
    """One attribute of a vertex layout."""

    data_type: ShaderDataType
    name: str
    normalized: bool = False
    offset: int = 0

    def __post_init__(self) -> None:
        shader_data_type_size(self.data_type)

    @property
    def size(self) -> int:
        return shader_data_type_size(self.data_type)

    def component_count(self) -> int:
        """Number of scalar components in the element."""
        try:
            return _COMPONENTS[self.data_type]
        except KeyError:
            raise ValueError(f"unknown shader data type: {self.data_type!r}") from None


class BufferLayout:
    """Ordered elements with offsets packed one after another."""

    def __init__(self, elements: Iterable[BufferElement] = ()) -> None:
        placed = []
        offset = 0
        for element in elements:
            placed.append(replace(element, offset=offset))
            offset += element.size
        self._elements: Tuple[BufferElement, ...] = tuple(placed)
        self._stride = offset

    @property
    def stride(self) -> int:
        return self._stride

    @property
    def elements(self) -> Tuple[BufferElement, ...]:
        return self._elements

    def __iter__(self) -> Iterator[BufferElement]:
        return iter(self._elements)

    def __len__(self) -> int:
        return len(self._elements)