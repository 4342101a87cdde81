"""Ico-sphere and UV-sphere generation into a mesh builder."""

from __future__ import annotations

import copy
import math
from itertools import chain
from typing import Sequence

from .log import get_logger, log_assert
from .mesh_builder import MeshBuilder
from .vertex_map import VertexParamMap

Vec3 = tuple[float, float, float]

_WHITE = (1.0, 1.0, 1.0, 1.0)
_GOLDEN = (1.0 + math.sqrt(5.0)) / 2.0

_ICO_DIRECTIONS: tuple[Vec3, ...] = (
    (-1.0, _GOLDEN, 0.0),
    (1.0, _GOLDEN, 0.0),
    (-1.0, -_GOLDEN, 0.0),
    (1.0, -_GOLDEN, 0.0),
    (0.0, -1.0, _GOLDEN),
    (0.0, 1.0, _GOLDEN),
    (0.0, -1.0, -_GOLDEN),
    (0.0, 1.0, -_GOLDEN),
    (_GOLDEN, 0.0, -1.0),
    (_GOLDEN, 0.0, 1.0),
    (-_GOLDEN, 0.0, -1.0),
    (-_GOLDEN, 0.0, 1.0),
)

_ICO_FACES: tuple[tuple[int, int, int], ...] = (
    # 5 faces around point 0
    (0, 11, 5), (0, 5, 1), (0, 1, 7), (0, 7, 10), (0, 10, 11),
    # 5 adjacent faces
    (1, 5, 9), (5, 11, 4), (11, 10, 2), (10, 7, 6), (7, 1, 8),
    # 5 faces around point 3
    (3, 9, 4), (3, 4, 2), (3, 2, 6), (3, 6, 8), (3, 8, 9),
    # 5 adjacent faces
    (4, 9, 5), (2, 4, 11), (6, 2, 10), (8, 6, 7), (9, 8, 1),
)


def _vec3(value: Sequence[float] | float) -> Vec3:
    if isinstance(value, (int, float)):
        return (float(value),) * 3
    x, y, z = (float(c) for c in value)
    return (x, y, z)


def _normalize(v: Sequence[float]) -> Vec3:
    length = math.sqrt(sum(c * c for c in v))
    return (v[0] / length, v[1] / length, v[2] / length)


def _on_surface(center: Vec3, direction: Vec3, scale: Vec3) -> Vec3:
    return tuple(c + d * s for c, d, s in zip(center, direction, scale))


def _sphere_uv(direction: Vec3) -> tuple[float, float]:
    u = math.atan2(direction[1], direction[0]) / (2.0 * math.pi)
    v = math.asin(max(-1.0, min(1.0, direction[2]))) / math.pi + 0.5
    return (u, v)


def _sphere_vertex(vertex_type: type, direction: Vec3, scale: Vec3, center: Vec3,
                   vmap: VertexParamMap, color: Sequence[float]) -> object:
    vertex = vertex_type()
    pos = _normalize(direction)
    vmap.set_position(vertex, _on_surface(center, pos, scale))
    vmap.set_normal(vertex, pos)
    vmap.set_texture(vertex, _sphere_uv(pos))
    vmap.set_color(vertex, color)
    return vertex


def _middle_point(vertex_type: type, scale: Vec3, center: Vec3, a: int, b: int,
                  vertices: list, cache: dict[tuple[int, int], int], vmap: VertexParamMap) -> int:
    key = (a, b) if a < b else (b, a)
    cached = cache.get(key)
    if cached is not None:
        return cached

    p1, p2 = vertices[a], vertices[b]
    n1 = _normalize([p - c for p, c in zip(vmap.get_position(p1), center)])
    n2 = _normalize([p - c for p, c in zip(vmap.get_position(p2), center)])
    pos = _normalize([(x + y) / 2.0 for x, y in zip(n1, n2)])

    interpolated = vertex_type()
    vmap.set_position(interpolated, _on_surface(center, pos, scale))
    vmap.set_normal(interpolated, pos)
    vmap.set_texture(interpolated, _sphere_uv(pos))
    if vmap.color_offset is not None:
        c1, c2 = vmap.get_color(p1), vmap.get_color(p2)
        vmap.set_color(interpolated, [(x + y) / 2.0 for x, y in zip(c1, c2)])

    index = len(vertices)
    cache[key] = index
    vertices.append(interpolated)
    return index


def _correct_uv_seams(vertices: list, indices: list[int], offset: int, vmap: VertexParamMap) -> None:
    """Duplicate vertices of triangles that wrap around the u=±0.5 seam."""
    if vmap.texture_offset is None:
        return

    def duplicate(ix: int, uv: tuple[float, float]) -> None:
        source = indices[ix]
        indices[ix] = len(vertices)
        vertex = copy.copy(vertices[source])
        vmap.set_texture(vertex, uv)
        vertices.append(vertex)

    first = offset // 3
    count = (len(indices) - offset) // 3
    for tri in range(first, first + count):
        base = tri * 3
        uv0, uv1, uv2 = (vmap.get_texture(vertices[indices[base + k]]) for k in range(3))
        d1 = uv1[0] - uv0[0]
        d2 = uv2[0] - uv0[0]
        if abs(d1) > 0.5 and abs(d2) > 0.5:
            duplicate(base, (uv0[0] + (1.0 if d1 > 0.0 else -1.0), uv0[1]))
        elif abs(d1) > 0.5:
            duplicate(base + 1, (uv1[0] + (1.0 if d1 < 0.0 else -1.0), uv1[1]))
        elif abs(d2) > 0.5:
            duplicate(base + 2, (uv2[0] + (1.0 if d2 < 0.0 else -1.0), uv2[1]))


def _param_map(mesh: MeshBuilder, shape: str) -> VertexParamMap | None:
    vmap = VertexParamMap(mesh.vertex_type.V_DECL)
    if vmap.position_offset is None:
        get_logger().warning("Vertex type does not have position attribute, aborting %s", shape)
        return None
    return vmap


def add_ico_sphere(mesh: MeshBuilder, center: Sequence[float], radii: Sequence[float] | float,
                   tessellation: int = 0, color: Sequence[float] = _WHITE) -> None:
    """Add an ico-sphere subdivided `tessellation` times; radii may be a scalar or per axis."""
    log_assert(tessellation >= 0, "Tessellation must be greater than zero!")
    vmap = _param_map(mesh, "AddIcoSphere")
    if vmap is None:
        return

    scale = _vec3(radii)
    centre = _vec3(center)
    vertex_type = mesh.vertex_type
    vertices = mesh.vertices
    index_offset = len(vertices)
    initial_index = len(mesh.indices)

    vertices.extend(
        _sphere_vertex(vertex_type, direction, scale, centre, vmap, color) for direction in _ICO_DIRECTIONS
    )
    faces = [tuple(index_offset + i for i in face) for face in _ICO_FACES]

    cache: dict[tuple[int, int], int] = {}
    for _ in range(tessellation):
        subdivided = []
        for i0, i1, i2 in faces:
            a = _middle_point(vertex_type, scale, centre, i0, i1, vertices, cache, vmap)
            b = _middle_point(vertex_type, scale, centre, i1, i2, vertices, cache, vmap)
            c = _middle_point(vertex_type, scale, centre, i2, i0, vertices, cache, vmap)
            subdivided.extend(((i0, a, c), (i1, b, a), (i2, c, b), (a, b, c)))
        faces = subdivided

    mesh.indices.extend(chain.from_iterable(faces))
    _correct_uv_seams(vertices, mesh.indices, initial_index, vmap)


def add_uv_sphere(mesh: MeshBuilder, center: Sequence[float], radii: Sequence[float] | float,
                  tessellation: int = 0, color: Sequence[float] = _WHITE) -> None:
    """Add a latitude/longitude sphere with 1 + 2**(tessellation + 1) slices."""
    log_assert(tessellation >= 0, "Tessellation must be greater than zero!")
    vmap = _param_map(mesh, "AddUvSphere")
    if vmap is None:
        return

    scale = _vec3(radii)
    centre = _vec3(center)
    vertex_type = mesh.vertex_type
    vertices = mesh.vertices

    slices = 1 + 2 ** (tessellation + 1)
    stacks = slices // 2 + 1
    offset = len(vertices)

    d_long = (math.pi * 2.0) / slices
    d_lat = math.pi / stacks

    for i in range(stacks + 1):
        stack_angle = math.pi / 2.0 - i * d_lat
        xy = math.cos(stack_angle)
        z = math.sin(stack_angle)
        for j in range(slices + 1):
            slice_angle = j * d_long
            normal = (xy * math.cos(slice_angle), xy * math.sin(slice_angle), z)
            vertex = vertex_type()
            vmap.set_normal(vertex, normal)
            vmap.set_position(vertex, _on_surface(centre, normal, scale))
            vmap.set_texture(vertex, (j / slices, 1.0 - i / stacks))
            vmap.set_color(vertex, color)
            vertices.append(vertex)

    vmap.set_texture(vertices[offset], (0.5, 1.0))
    vmap.set_texture(vertices[-1], (0.5, 0.0))

    indices = mesh.indices
    for i in range(stacks):
        k1 = i * (slices + 1)
        k2 = k1 + slices + 1
        for _ in range(slices):
            if i != 0:
                indices.extend((offset + k1, offset + k2, offset + k1 + 1))
            if i != stacks - 1:
                indices.extend((offset + k1 + 1, offset + k2, offset + k2 + 1))
            k1 += 1
            k2 += 1