"""Vertex array object wrapper: vertex buffers, an index buffer and drawing.

Buffers are duck-typed: a vertex buffer has `element_count` and `bind()`, an
index buffer also has `element_type`. The `gl` object provides
create_vertex_array, delete_vertex_array, bind_vertex_array, bind_buffer,
enable_vertex_array_attrib, vertex_attrib_pointer, draw_arrays and draw_elements.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable

from .log import get_logger
from .vertex_types import BufferAttribute, DrawMode

_ELEMENT_ARRAY_BUFFER = 0x8893


@dataclass(frozen=True)
class _VertexBufferBinding:
    buffer: Any
    attributes: tuple[BufferAttribute, ...]


class VertexArrayObject:
    """All the buffers and attribute layouts that make up one drawable mesh."""

    def __init__(self, gl: Any) -> None:
        self._gl = gl
        self._index_buffer: Any = None
        self._bindings: list[_VertexBufferBinding] = []
        self._vertex_count = 0
        self._handle = gl.create_vertex_array()

    @property
    def handle(self) -> int:
        """The underlying vertex array handle (0 once deleted)."""
        return self._handle

    @property
    def vertex_count(self) -> int:
        return self._vertex_count

    @property
    def index_buffer(self) -> Any:
        return self._index_buffer

    @property
    def vertex_buffers(self) -> tuple[tuple[Any, tuple[BufferAttribute, ...]], ...]:
        """Each added buffer with the attributes it feeds, in order of addition."""
        return tuple((b.buffer, b.attributes) for b in self._bindings)

    def __enter__(self) -> VertexArrayObject:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.delete()

    def set_index_buffer(self, ibo: Any) -> None:
        """Use `ibo` for indexed drawing, or draw unindexed when it is None."""
        self._index_buffer = ibo
        self.bind()
        if ibo is not None:
            ibo.bind()
        else:
            self._gl.bind_buffer(_ELEMENT_ARRAY_BUFFER, 0)
        self.unbind()

    def add_vertex_buffer(self, buffer: Any, attributes: Iterable[BufferAttribute]) -> None:
        """Add a vertex buffer that feeds the given attributes."""
        attributes = tuple(attributes)
        if not self._bindings:
            self._vertex_count = buffer.element_count
        elif buffer.element_count != self._vertex_count:
            get_logger().warning("Buffer element count does not match vertex count of this VAO!!!")

        self._bindings.append(_VertexBufferBinding(buffer, attributes))

        gl = self._gl
        self.bind()
        buffer.bind()
        for attrib in attributes:
            gl.enable_vertex_array_attrib(self._handle, attrib.slot)
            gl.vertex_attrib_pointer(attrib.slot, attrib.size, attrib.type, attrib.normalized,
                                     attrib.stride, attrib.offset)
        self.unbind()

    def draw(self, mode: DrawMode = DrawMode.TRIANGLE_LIST) -> None:
        """Draw the whole mesh, indexed if an index buffer is set."""
        mode = DrawMode(mode)
        self.bind()
        if self._index_buffer is None:
            self._gl.draw_arrays(mode, 0, self._vertex_count)
        else:
            self._gl.draw_elements(mode, self._index_buffer.element_count, self._index_buffer.element_type)
        self.unbind()

    def bind(self) -> None:
        """Make this the current vertex array."""
        self._gl.bind_vertex_array(self._handle)

    def unbind(self) -> None:
        """Make no vertex array current."""
        self._gl.bind_vertex_array(0)

    def delete(self) -> None:
        """Delete the vertex array; further deletes do nothing."""
        if self._handle != 0:
            self._gl.delete_vertex_array(self._handle)
            self._handle = 0