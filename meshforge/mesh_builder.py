"""Collects vertices and indices and bakes them into interleaved arrays."""

from __future__ import annotations

import operator
from dataclasses import dataclass
from typing import Generic, Iterable, TypeVar

import numpy as np

from .vertex_types import BufferAttribute

V = TypeVar("V")

_UINT32_LIMIT = 2**32


@dataclass(eq=False)
class BakedMesh:
    """Interleaved vertex data and index data ready for upload."""

    vertex_type: type
    vertex_data: np.ndarray
    index_data: np.ndarray
    attributes: tuple[BufferAttribute, ...]
    stride: int


def _checked_index(index: int) -> int:
    value = operator.index(index)
    if not 0 <= value < _UINT32_LIMIT:
        raise ValueError(f"index {value} does not fit in an unsigned 32-bit integer")
    return value


class MeshBuilder(Generic[V]):
    """Builds a mesh of one vertex type from vertices and triangle indices."""

    def __init__(self, vertex_type: type[V]) -> None:
        self.vertex_type = vertex_type
        self.vertices: list[V] = []
        self.indices: list[int] = []

    def _check(self, vertex: object) -> None:
        if not isinstance(vertex, self.vertex_type):
            raise TypeError(
                f"expected {self.vertex_type.__name__}, got {type(vertex).__name__}"
            )

    def add_vertex(self, vertex: V) -> int:
        """Append a vertex and return its index."""
        self._check(vertex)
        self.vertices.append(vertex)
        return len(self.vertices) - 1

    def add_vertex_range(self, vertices: Iterable[V]) -> int:
        """Append several vertices and return the index of the first one."""
        items = list(vertices)
        for vertex in items:
            self._check(vertex)
        start = len(self.vertices)
        self.vertices.extend(items)
        return start

    def add_index(self, index: int) -> None:
        """Append one index."""
        self.indices.append(_checked_index(index))

    def add_index_tri(self, a: int, b: int, c: int) -> None:
        """Append a triangle between three vertex indices."""
        self.indices.extend(_checked_index(i) for i in (a, b, c))

    def vertex_count(self) -> int:
        return len(self.vertices)

    def index_count(self) -> int:
        return len(self.indices)

    def triangle_count(self) -> int:
        """Triangles counted from the indices, or from the vertices when unindexed."""
        return (len(self.indices) if self.indices else len(self.vertices)) // 3

    def bake(self) -> BakedMesh:
        """Return the current contents as interleaved float32 and uint32 arrays."""
        stride = self.vertex_type.STRIDE
        raw = b"".join(vertex.pack() for vertex in self.vertices)
        vertex_data = np.frombuffer(raw, dtype="<f4").reshape(-1, stride // 4).copy()
        index_data = np.array(self.indices, dtype=np.uint32)
        return BakedMesh(
            vertex_type=self.vertex_type,
            vertex_data=vertex_data,
            index_data=index_data,
            attributes=self.vertex_type.V_DECL,
            stride=stride,
        )