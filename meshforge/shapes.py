"""Cube and plane generation into a mesh builder."""

from __future__ import annotations

from typing import Sequence

import numpy as np

from .log import get_logger
from .mesh_builder import MeshBuilder
from .transforms import euler_to_matrix, scaling, translation
from .vertex_map import VertexParamMap, create_vertex

_WHITE = (1.0, 1.0, 1.0, 1.0)

_QUAD_UVS = ((0.0, 0.0), (0.0, 1.0), (1.0, 1.0), (1.0, 0.0))

_CUBE_CORNERS = np.array([
    (-0.5, -0.5, -0.5),
    (0.5, -0.5, -0.5),
    (-0.5, 0.5, -0.5),
    (0.5, 0.5, -0.5),
    (-0.5, -0.5, 0.5),
    (0.5, -0.5, 0.5),
    (-0.5, 0.5, 0.5),
    (0.5, 0.5, 0.5),
])

_CUBE_NORMALS = np.array([
    (-1.0, 0.0, 0.0),
    (1.0, 0.0, 0.0),
    (0.0, -1.0, 0.0),
    (0.0, 1.0, 0.0),
    (0.0, 0.0, -1.0),
    (0.0, 0.0, 1.0),
])

# (normal index, corner indices) for bottom, top, left, right, front, back
_CUBE_FACES = (
    (4, (0, 2, 3, 1)),
    (5, (6, 4, 5, 7)),
    (0, (0, 4, 6, 2)),
    (1, (3, 7, 5, 1)),
    (3, (2, 6, 7, 3)),
    (2, (1, 5, 4, 0)),
)


def _param_map(mesh: MeshBuilder, shape: str) -> VertexParamMap | None:
    vmap = VertexParamMap(mesh.vertex_type.V_DECL)
    if vmap.position_offset is None:
        get_logger().warning("Vertex type does not have position attribute, aborting %s", shape)
        return None
    return vmap


def _unit(v: np.ndarray, what: str) -> np.ndarray:
    length = float(np.linalg.norm(v))
    if length == 0.0:
        raise ValueError(f"{what} must not be a zero vector")
    return v / length


def add_cube(
    mesh: MeshBuilder,
    position: Sequence[float],
    scale: Sequence[float] | float,
    euler_degrees: Sequence[float] = (0.0, 0.0, 0.0),
    color: Sequence[float] = _WHITE,
) -> None:
    """Add a unit cube scaled, rotated by Euler angles (degrees) and centred at `position`."""
    transform = translation(position) @ euler_to_matrix(euler_degrees) @ scaling(scale)
    add_cube_transform(mesh, transform, color)


def add_cube_transform(mesh: MeshBuilder, transform: Sequence[Sequence[float]],
                       color: Sequence[float] = _WHITE) -> None:
    """Add a 1x1x1 cube centred on the origin and transformed by a 4x4 matrix."""
    vmap = _param_map(mesh, "AddCube")
    if vmap is None:
        return

    matrix = np.asarray(transform, dtype=float)
    if matrix.shape != (4, 4):
        raise ValueError(f"expected a 4x4 transform, got shape {matrix.shape}")

    homogeneous = np.hstack([_CUBE_CORNERS, np.ones((len(_CUBE_CORNERS), 1))])
    positions = (matrix @ homogeneous.T).T[:, :3]
    # Normals use the upper 3x3 part of the transform, as given.
    normals = (matrix[:3, :3] @ _CUBE_NORMALS.T).T

    for normal_ix, corners in _CUBE_FACES:
        ids = [
            mesh.add_vertex(create_vertex(mesh.vertex_type, positions[corner], normals[normal_ix], uv, color, vmap))
            for corner, uv in zip(corners, _QUAD_UVS)
        ]
        mesh.add_index_tri(ids[0], ids[1], ids[2])
        mesh.add_index_tri(ids[0], ids[2], ids[3])


def add_plane(
    mesh: MeshBuilder,
    position: Sequence[float],
    normal: Sequence[float],
    tangent: Sequence[float],
    scale: Sequence[float],
    color: Sequence[float] = _WHITE,
) -> None:
    """Add a quad centred at `position` facing `normal`, its x extent along `tangent`."""
    vmap = _param_map(mesh, "AddPlane")
    if vmap is None:
        return

    centre = np.asarray(position, dtype=float)
    n = _unit(np.asarray(normal, dtype=float), "plane normal")
    t = _unit(np.asarray(tangent, dtype=float), "plane tangent")
    binormal = np.cross(n, t)
    half_x, half_y = (float(s) / 2.0 for s in scale)

    corners = (
        centre - t * half_x - binormal * half_y,
        centre - t * half_x + binormal * half_y,
        centre + t * half_x + binormal * half_y,
        centre + t * half_x - binormal * half_y,
    )
    p1, p2, p3, p4 = (
        mesh.add_vertex(create_vertex(mesh.vertex_type, corner, n, uv, color, vmap))
        for corner, uv in zip(corners, _QUAD_UVS)
    )
    mesh.add_index_tri(p1, p3, p2)
    mesh.add_index_tri(p1, p4, p3)