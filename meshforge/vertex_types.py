"""Vertex attribute descriptions and the interleaved vertex formats."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from enum import IntEnum
from itertools import chain
from typing import ClassVar

_FLOAT_SIZE = 4


class AttribUsage(IntEnum):
    """Intended use of a vertex attribute."""

    UNKNOWN = 0
    POSITION = 1
    COLOR = 2
    COLOR1 = 3
    COLOR2 = 4
    COLOR3 = 5
    TEXTURE = 6
    TEXTURE1 = 7
    TEXTURE2 = 8
    TEXTURE3 = 9
    NORMAL = 10
    TANGENT = 11
    BINORMAL = 12
    USER0 = 13
    USER1 = 14
    USER2 = 15
    USER3 = 16


class AttributeType(IntEnum):
    """Component type of a vertex attribute (OpenGL enum values)."""

    BYTE = 0x1400
    UBYTE = 0x1401
    SHORT = 0x1402
    USHORT = 0x1403
    INT = 0x1404
    UINT = 0x1405
    FLOAT = 0x1406
    DOUBLE = 0x140A
    UNKNOWN = 0


class DrawMode(IntEnum):
    """Primitive topology used when drawing (OpenGL enum values)."""

    POINTS = 0x0000
    LINE_LIST = 0x0001
    LINE_LOOP = 0x0002
    LINE_STRIP = 0x0003
    TRIANGLE_LIST = 0x0004
    TRIANGLE_STRIP = 0x0005
    TRIANGLE_FAN = 0x0006


@dataclass(frozen=True)
class BufferAttribute:
    """Parameters describing one attribute fed from a vertex buffer."""

    slot: int
    size: int
    type: AttributeType
    stride: int
    offset: int
    usage: AttribUsage
    normalized: bool = False


class _PackedVertex:
    """Shared behaviour for interleaved float vertex formats."""

    _COMPONENTS: ClassVar[tuple[tuple[str, int], ...]]
    _STRUCT: ClassVar[struct.Struct]
    OFFSETS: ClassVar[dict[str, int]]
    STRIDE: ClassVar[int]
    V_DECL: ClassVar[tuple[BufferAttribute, ...]]

    def __post_init__(self) -> None:
        for name, width in self._COMPONENTS:
            value = tuple(float(c) for c in getattr(self, name))
            if len(value) != width:
                raise ValueError(f"{name} needs {width} components, got {len(value)}")
            setattr(self, name, value)

    def _pack_fields(self) -> bytes:
        return self._STRUCT.pack(*chain.from_iterable(getattr(self, name) for name, _ in self._COMPONENTS))


def _finish(cls: type, declaration: tuple[tuple[int, str, AttribUsage], ...]) -> None:
    offsets: dict[str, int] = {}
    widths = dict(cls._COMPONENTS)
    offset = 0
    for name, width in cls._COMPONENTS:
        offsets[name] = offset
        offset += width * _FLOAT_SIZE
    cls.OFFSETS = offsets
    cls.STRIDE = offset
    cls._STRUCT = struct.Struct("<" + "f" * (offset // _FLOAT_SIZE))
    cls.V_DECL = tuple(
        BufferAttribute(slot, widths[name], AttributeType.FLOAT, offset, offsets[name], usage)
        for slot, name, usage in declaration
    )


@dataclass
class VertexPosCol(_PackedVertex):
    """Vertex with a position and an RGBA color."""

    _COMPONENTS: ClassVar = (("position", 3), ("color", 4))

    position: tuple[float, ...] = (0.0, 0.0, 0.0)
    color: tuple[float, ...] = (0.0, 0.0, 0.0, 1.0)

    def pack(self) -> bytes:
        """Return the vertex as little-endian interleaved float32 bytes."""
        return self._pack_fields()


@dataclass
class VertexPosNormCol(_PackedVertex):
    """Vertex with a position, a normal and an RGBA color."""

    _COMPONENTS: ClassVar = (("position", 3), ("normal", 3), ("color", 4))

    position: tuple[float, ...] = (0.0, 0.0, 0.0)
    normal: tuple[float, ...] = (0.0, 0.0, 0.0)
    color: tuple[float, ...] = (0.0, 0.0, 0.0, 1.0)

    def pack(self) -> bytes:
        """Return the vertex as little-endian interleaved float32 bytes."""
        return self._pack_fields()


@dataclass
class VertexPosNormTex(_PackedVertex):
    """Vertex with a position, a normal and texture coordinates."""

    _COMPONENTS: ClassVar = (("position", 3), ("normal", 3), ("uv", 2))

    position: tuple[float, ...] = (0.0, 0.0, 0.0)
    normal: tuple[float, ...] = (0.0, 0.0, 0.0)
    uv: tuple[float, ...] = (0.0, 0.0)

    def pack(self) -> bytes:
        """Return the vertex as little-endian interleaved float32 bytes."""
        return self._pack_fields()


@dataclass
class VertexPosNormTexCol(_PackedVertex):
    """Vertex with a position, a normal, texture coordinates and an RGBA color."""

    _COMPONENTS: ClassVar = (("position", 3), ("normal", 3), ("uv", 2), ("color", 4))

    position: tuple[float, ...] = (0.0, 0.0, 0.0)
    normal: tuple[float, ...] = (0.0, 0.0, 0.0)
    uv: tuple[float, ...] = (0.0, 0.0)
    color: tuple[float, ...] = (0.0, 0.0, 0.0, 1.0)

    def pack(self) -> bytes:
        """Return the vertex as little-endian interleaved float32 bytes."""
        return self._pack_fields()


_finish(VertexPosCol, (
    (0, "position", AttribUsage.POSITION),
    (1, "color", AttribUsage.COLOR),
))
_finish(VertexPosNormCol, (
    (0, "position", AttribUsage.POSITION),
    (1, "color", AttribUsage.COLOR),
    (2, "normal", AttribUsage.NORMAL),
))
_finish(VertexPosNormTex, (
    (0, "position", AttribUsage.POSITION),
    (2, "normal", AttribUsage.NORMAL),
    (3, "uv", AttribUsage.TEXTURE),
))
_finish(VertexPosNormTexCol, (
    (0, "position", AttribUsage.POSITION),
    (1, "color", AttribUsage.COLOR),
    (2, "normal", AttribUsage.NORMAL),
    (3, "uv", AttribUsage.TEXTURE),
))