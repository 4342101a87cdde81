"""Maps the generic vertex attributes onto the fields of a vertex format."""

from __future__ import annotations

from typing import Iterable, Sequence, TypeVar

from .vertex_types import AttribUsage, AttributeType, BufferAttribute

V = TypeVar("V")

_ZERO3 = (0.0, 0.0, 0.0)
_ZERO2 = (0.0, 0.0)
_WHITE = (1.0, 1.0, 1.0, 1.0)


class VertexParamMap:
    """Locates position, normal, texture and color attributes in a vertex declaration.

    An attribute that the declaration lacks is recorded as None; setting it is
    then a no-op and reading it returns a default value.
    """

    def __init__(self, attributes: Iterable[BufferAttribute] = ()) -> None:
        self.position_offset: int | None = None
        self.normal_offset: int | None = None
        self.texture_offset: int | None = None
        self.color_offset: int | None = None
        self.color_size = 0

        for attrib in attributes:
            is_float = attrib.type == AttributeType.FLOAT
            if attrib.usage == AttribUsage.POSITION and attrib.size == 3 and is_float:
                self.position_offset = attrib.offset
            elif attrib.usage == AttribUsage.NORMAL and attrib.size == 3 and is_float:
                self.normal_offset = attrib.offset
            elif attrib.usage == AttribUsage.TEXTURE and attrib.size == 2 and is_float:
                self.texture_offset = attrib.offset
            elif attrib.usage == AttribUsage.COLOR and is_float:
                self.color_offset = attrib.offset
                self.color_size = attrib.size

    @staticmethod
    def _field(vertex: object, offset: int) -> str:
        for name, field_offset in type(vertex).OFFSETS.items():
            if field_offset == offset:
                return name
        raise LookupError(f"{type(vertex).__name__} has no field at byte offset {offset}")

    def _set(self, vertex: object, offset: int | None, value: Sequence[float], width: int) -> None:
        if offset is None:
            return
        components = tuple(float(c) for c in value)
        if len(components) < width:
            raise ValueError(f"expected at least {width} components, got {len(components)}")
        setattr(vertex, self._field(vertex, offset), components[:width])

    def _get(self, vertex: object, offset: int | None, default: tuple[float, ...]) -> tuple[float, ...]:
        if offset is None:
            return default
        return tuple(getattr(vertex, self._field(vertex, offset)))

    def set_position(self, vertex: object, value: Sequence[float]) -> None:
        self._set(vertex, self.position_offset, value, 3)

    def set_normal(self, vertex: object, value: Sequence[float]) -> None:
        self._set(vertex, self.normal_offset, value, 3)

    def set_texture(self, vertex: object, value: Sequence[float]) -> None:
        self._set(vertex, self.texture_offset, value, 2)

    def set_color(self, vertex: object, value: Sequence[float]) -> None:
        """Store as many color components as the vertex's color attribute holds."""
        self._set(vertex, self.color_offset, value, self.color_size)

    def get_position(self, vertex: object) -> tuple[float, ...]:
        return self._get(vertex, self.position_offset, _ZERO3)

    def get_normal(self, vertex: object) -> tuple[float, ...]:
        return self._get(vertex, self.normal_offset, _ZERO3)

    def get_texture(self, vertex: object) -> tuple[float, ...]:
        return self._get(vertex, self.texture_offset, _ZERO2)

    def get_color(self, vertex: object) -> tuple[float, ...]:
        """Return the color widened to RGBA; white when the vertex has none."""
        if self.color_offset is None:
            return _WHITE
        color = self._get(vertex, self.color_offset, _WHITE)
        if self.color_size == 2:
            return (color[0], color[1], 0.0, 1.0)
        if self.color_size == 3:
            return (*color, 1.0)
        if self.color_size == 4:
            return color
        return _WHITE


def create_vertex(
    vertex_type: type[V],
    position: Sequence[float],
    normal: Sequence[float],
    uv: Sequence[float],
    color: Sequence[float],
    vmap: VertexParamMap,
) -> V:
    """Build a vertex, filling in every attribute the vertex type has."""
    vertex = vertex_type()
    vmap.set_position(vertex, position)
    vmap.set_normal(vertex, normal)
    vmap.set_texture(vertex, uv)
    vmap.set_color(vertex, color)
    return vertex