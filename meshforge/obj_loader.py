"""Minimal Wavefront OBJ reader producing unindexed triangle meshes."""

from __future__ import annotations

import os

from .mesh_builder import BakedMesh, MeshBuilder
from .vertex_types import VertexPosNormTexCol

_DEFAULT_NORMAL = (0.0, 0.0, 1.0)
_DEFAULT_UV = (0.0, 0.0)
_DEFAULT_COLOR = (1.0, 1.0, 1.0, 1.0)


def _position_index(group: str, line_no: int) -> int:
    head = group.split("/", 1)[0]
    try:
        return int(head) - 1
    except ValueError:
        raise ValueError(f"line {line_no}: invalid face vertex {group!r}") from None


def load_obj_vertices(path: str | os.PathLike) -> list[VertexPosNormTexCol]:
    """Read positions and triangular faces; every face corner becomes its own vertex."""
    positions: list[tuple[float, float, float]] = []
    corners: list[tuple[int, int]] = []

    with open(path, encoding="utf-8") as file:
        for line_no, line in enumerate(file, 1):
            tokens = line.split()
            if not tokens or tokens[0].startswith("#"):
                continue
            command, args = tokens[0], tokens[1:]
            if command == "v":
                if len(args) < 3:
                    raise ValueError(f"line {line_no}: vertex needs three coordinates")
                try:
                    x, y, z = (float(a) for a in args[:3])
                except ValueError:
                    raise ValueError(f"line {line_no}: invalid vertex coordinates") from None
                positions.append((x, y, z))
            elif command == "f":
                if len(args) < 3:
                    raise ValueError(f"line {line_no}: face needs three vertices")
                corners.extend((_position_index(group, line_no), line_no) for group in args[:3])

    vertices = []
    for index, line_no in corners:
        if not 0 <= index < len(positions):
            raise ValueError(f"line {line_no}: position index {index + 1} is out of range")
        vertices.append(VertexPosNormTexCol(positions[index], _DEFAULT_NORMAL, _DEFAULT_UV, _DEFAULT_COLOR))
    return vertices


def load_from_file(filename: str | os.PathLike) -> BakedMesh:
    """Load an OBJ file into baked, unindexed vertex data."""
    builder = MeshBuilder(VertexPosNormTexCol)
    builder.add_vertex_range(load_obj_vertices(filename))
    return builder.bake()