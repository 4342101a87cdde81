import numpy as np
import pytest

from meshforge.mesh_builder import MeshBuilder
from meshforge.vertex_types import VertexPosCol, VertexPosNormTex


def _vertex(x):
    return VertexPosCol((x, x + 1, x + 2), (1, 0, 0, 1))


def test_add_vertex_returns_sequential_indices():
    mesh = MeshBuilder(VertexPosCol)
    assert [mesh.add_vertex(_vertex(i)) for i in range(3)] == [0, 1, 2]
    assert mesh.vertex_count() == 3


def test_add_vertex_range_returns_start():
    mesh = MeshBuilder(VertexPosCol)
    mesh.add_vertex(_vertex(0))
    start = mesh.add_vertex_range(_vertex(i) for i in range(1, 5))
    assert start == 1
    assert mesh.vertex_count() == 5
    assert mesh.vertices[4].position == (4.0, 5.0, 6.0)


def test_add_vertex_wrong_type_rejected():
    mesh = MeshBuilder(VertexPosCol)
    with pytest.raises(TypeError):
        mesh.add_vertex(VertexPosNormTex())
    with pytest.raises(TypeError):
        mesh.add_vertex_range([_vertex(0), VertexPosNormTex()])
    assert mesh.vertex_count() == 0


def test_indices_and_triangles():
    mesh = MeshBuilder(VertexPosCol)
    mesh.add_vertex_range(_vertex(i) for i in range(4))
    mesh.add_index_tri(0, 1, 2)
    mesh.add_index(0)
    mesh.add_index(2)
    mesh.add_index(3)
    assert mesh.indices == [0, 1, 2, 0, 2, 3]
    assert mesh.index_count() == 6
    assert mesh.triangle_count() == 2


def test_triangle_count_without_indices_uses_vertices():
    mesh = MeshBuilder(VertexPosCol)
    mesh.add_vertex_range(_vertex(i) for i in range(7))
    assert mesh.triangle_count() == 7 // 3


def test_invalid_index_rejected():
    mesh = MeshBuilder(VertexPosCol)
    with pytest.raises(ValueError):
        mesh.add_index(-1)
    with pytest.raises(ValueError):
        mesh.add_index_tri(0, 1, 2**32)
    with pytest.raises(TypeError):
        mesh.add_index(1.5)
    assert mesh.indices == []


def test_bake_interleaves_vertices():
    mesh = MeshBuilder(VertexPosCol)
    mesh.add_vertex_range(_vertex(i) for i in range(3))
    mesh.add_index_tri(2, 1, 0)
    baked = mesh.bake()
    assert baked.vertex_data.shape == (3, VertexPosCol.STRIDE // 4)
    assert baked.vertex_data.dtype == np.float32
    assert baked.vertex_data[1].tobytes() == mesh.vertices[1].pack()
    assert baked.index_data.dtype == np.uint32
    assert baked.index_data.tolist() == [2, 1, 0]
    assert baked.attributes == VertexPosCol.V_DECL
    assert baked.stride == VertexPosCol.STRIDE
    assert baked.vertex_type is VertexPosCol


def test_bake_empty_mesh():
    baked = MeshBuilder(VertexPosNormTex).bake()
    assert baked.vertex_data.shape == (0, VertexPosNormTex.STRIDE // 4)
    assert baked.index_data.size == 0