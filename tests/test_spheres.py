import math
from dataclasses import dataclass
from typing import ClassVar

import pytest

from meshforge.mesh_builder import MeshBuilder
from meshforge.spheres import add_ico_sphere, add_uv_sphere
from meshforge.vertex_types import (
    AttribUsage,
    AttributeType,
    BufferAttribute,
    VertexPosCol,
    VertexPosNormCol,
    VertexPosNormTex,
    VertexPosNormTexCol,
)


@dataclass
class _ColorOnly:
    OFFSETS: ClassVar = {"color": 0}
    V_DECL: ClassVar = (BufferAttribute(1, 4, AttributeType.FLOAT, 16, 0, AttribUsage.COLOR),)

    color: tuple = (0.0, 0.0, 0.0, 1.0)


def _distance(a, b):
    return math.sqrt(sum((x - y) ** 2 for x, y in zip(a, b)))


@pytest.mark.parametrize("tess", [0, 1, 2])
def test_ico_sphere_counts_without_texture(tess):
    mesh = MeshBuilder(VertexPosCol)
    add_ico_sphere(mesh, (0, 0, 0), 1.0, tess)
    assert mesh.triangle_count() == 20 * 4**tess
    assert mesh.vertex_count() == 10 * 4**tess + 2


@pytest.mark.parametrize("tess", [0, 1, 2])
def test_ico_sphere_points_on_surface(tess):
    mesh = MeshBuilder(VertexPosNormTexCol)
    center = (1.0, -2.0, 0.5)
    add_ico_sphere(mesh, center, 2.0, tess)
    for vertex in mesh.vertices:
        assert _distance(vertex.position, center) == pytest.approx(2.0, abs=1e-9)
        assert math.sqrt(sum(c * c for c in vertex.normal)) == pytest.approx(1.0)
    assert all(0 <= i < mesh.vertex_count() for i in mesh.indices)


def test_ico_sphere_ellipsoid_radii():
    mesh = MeshBuilder(VertexPosNormCol)
    radii = (1.0, 2.0, 3.0)
    add_ico_sphere(mesh, (0, 0, 0), radii, 1)
    for vertex in mesh.vertices:
        total = sum((p / r) ** 2 for p, r in zip(vertex.position, radii))
        assert total == pytest.approx(1.0)


def test_ico_sphere_color_preserved_by_midpoints():
    mesh = MeshBuilder(VertexPosCol)
    add_ico_sphere(mesh, (0, 0, 0), 1.0, 2, (0.2, 0.4, 0.6, 1.0))
    for vertex in mesh.vertices:
        assert vertex.color == pytest.approx((0.2, 0.4, 0.6, 1.0))


def test_ico_sphere_seam_fix_duplicates_vertices():
    plain = MeshBuilder(VertexPosNormCol)
    textured = MeshBuilder(VertexPosNormTex)
    add_ico_sphere(plain, (0, 0, 0), 1.0, 2)
    add_ico_sphere(textured, (0, 0, 0), 1.0, 2)
    base = plain.vertex_count()
    assert textured.index_count() == plain.index_count()
    assert textured.vertex_count() > base
    base_positions = [v.position for v in textured.vertices[:base]]
    for extra in textured.vertices[base:]:
        assert extra.position in base_positions


def test_ico_sphere_appends_after_existing_data():
    mesh = MeshBuilder(VertexPosCol)
    add_ico_sphere(mesh, (0, 0, 0), 1.0, 0)
    first_vertices = mesh.vertex_count()
    first_indices = mesh.index_count()
    add_ico_sphere(mesh, (5, 0, 0), 1.0, 0)
    assert mesh.vertex_count() == 2 * first_vertices
    assert all(i >= first_vertices for i in mesh.indices[first_indices:])
    assert mesh.indices[:first_indices] == [i - first_vertices for i in mesh.indices[first_indices:]]


@pytest.mark.parametrize("builder", [add_ico_sphere, add_uv_sphere])
def test_negative_tessellation_rejected(builder):
    mesh = MeshBuilder(VertexPosCol)
    with pytest.raises(AssertionError):
        builder(mesh, (0, 0, 0), 1.0, -1)
    assert mesh.vertex_count() == 0
    assert mesh.index_count() == 0


@pytest.mark.parametrize("builder", [add_ico_sphere, add_uv_sphere])
def test_vertex_type_without_position_adds_nothing(builder):
    mesh = MeshBuilder(_ColorOnly)
    builder(mesh, (0, 0, 0), 1.0, 1)
    assert mesh.vertex_count() == 0
    assert mesh.index_count() == 0


def test_uv_sphere_smallest_counts():
    mesh = MeshBuilder(VertexPosNormTex)
    add_uv_sphere(mesh, (0, 0, 0), 1.0, 0)
    assert mesh.vertex_count() == 12
    assert mesh.index_count() == 18


def test_uv_sphere_pole_texture_coordinates():
    mesh = MeshBuilder(VertexPosNormTex)
    add_uv_sphere(mesh, (0, 0, 0), 1.0, 1)
    assert mesh.vertices[0].uv == (0.5, 1.0)
    assert mesh.vertices[-1].uv == (0.5, 0.0)
    assert mesh.vertices[0].position == pytest.approx((0.0, 0.0, 1.0), abs=1e-9)
    assert mesh.vertices[-1].position == pytest.approx((0.0, 0.0, -1.0), abs=1e-9)


@pytest.mark.parametrize("tess", [0, 1, 2])
def test_uv_sphere_surface_and_indices(tess):
    mesh = MeshBuilder(VertexPosNormTexCol)
    center = (0.0, 1.0, 0.0)
    add_uv_sphere(mesh, center, 3.0, tess, (1.0, 0.0, 0.0, 1.0))
    for vertex in mesh.vertices:
        assert _distance(vertex.position, center) == pytest.approx(3.0)
        assert vertex.color == (1.0, 0.0, 0.0, 1.0)
    assert mesh.index_count() % 3 == 0
    assert all(0 <= i < mesh.vertex_count() for i in mesh.indices)


def test_uv_sphere_offsets_indices_on_nonempty_mesh():
    mesh = MeshBuilder(VertexPosCol)
    add_uv_sphere(mesh, (0, 0, 0), 1.0, 0)
    count = mesh.vertex_count()
    index_count = mesh.index_count()
    add_uv_sphere(mesh, (0, 0, 0), 1.0, 0)
    assert mesh.indices[index_count:] == [i + count for i in mesh.indices[:index_count]]