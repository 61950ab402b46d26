import numpy as np
import pytest

from m3topo.adjacency import triangle_triangle_adjacency
from m3topo.boundary import boundary_loop
from m3topo.boundary import boundary_loops
from m3topo.cut import cut_flags
from m3topo.cut import cut_mesh
from m3topo.cut import cut_mesh_copy
from m3topo.cut import cut_vertex_counts
from m3topo.manifold import euler_characteristic


def cut(mesh, E):
    V, F = mesh
    V, F = V.copy(), F.copy()
    C = cut_flags(F, E)
    FF, FFi = triangle_triangle_adjacency(F)

    return cut_mesh(V, F, C, FF, FFi) + (C, FF, FFi)


class TestCutFlags:

    def test_interior_edge(self, grid):
        _, F = grid
        C = cut_flags(F, [[4, 1]])

        assert np.argwhere(C).tolist() == [[0, 1], [3, 2]]

    def test_boundary_edge(self, grid):
        _, F = grid
        C = cut_flags(F, [[0, 1], [2, 1]])

        assert np.argwhere(C).tolist() == [[0, 0], [2, 0]]

    def test_empty(self, grid):
        _, F = grid
        assert not np.any(cut_flags(F, []))


class TestCutVertexCounts:

    def test_grid(self, grid):
        _, F = grid
        TT, _ = triangle_triangle_adjacency(F)
        C = cut_flags(F, [[1, 4]])

        counts = cut_vertex_counts(F, TT, C)
        assert counts.tolist() == [1, 2, 1, 1, 1, 1, 1, 1, 1]

    def test_closed(self, tetrahedron):
        _, F = tetrahedron
        TT, _ = triangle_triangle_adjacency(F)
        C = cut_flags(F, [[0, 1], [1, 2]])

        assert cut_vertex_counts(F, TT, C).tolist() == [1, 2, 1, 0]


class TestCutMesh:

    def test_square(self, square):
        V0, _ = square
        V, F, I, C, FF, FFi = cut(square, [[0, 2]])

        assert F.tolist() == [[0, 1, 4], [5, 2, 3]]
        assert I.tolist() == [0, 1, 2, 3, 2, 0]
        assert np.array_equal(V, V0[I])
        assert np.all(FF == -1)
        assert np.all(FFi == -1)

    def test_slit(self, grid):
        V0, _ = grid
        V, F, I, C, FF, FFi = cut(grid, [[1, 4]])

        assert len(V) == 10
        assert F[0].tolist() == [0, 9, 4]
        assert I.tolist() == list(range(9)) + [1]
        assert np.array_equal(V, V0[I])

        # Adjacency is updated in place.
        assert FF[0, 1] == FF[3, 2] == -1
        assert np.array_equal(FF, triangle_triangle_adjacency(F)[0])

        assert boundary_loop(F).tolist() == [0, 9, 4, 1, 2, 5, 8, 7, 6, 3]

    def test_closed(self, tetrahedron):
        V0, _ = tetrahedron
        V, F, I, C, FF, FFi = cut(tetrahedron, [[0, 1], [1, 2]])

        assert F.tolist() == [[0, 2, 4], [0, 1, 3], [0, 3, 2], [1, 2, 3]]
        assert I.tolist() == [0, 1, 2, 3, 1]
        assert np.array_equal(V, V0[I])

        TT, TTi = triangle_triangle_adjacency(F)

        assert np.array_equal(FF, TT)
        assert np.all(FF[C] == -1)
        assert np.all(FFi[C] == -1)
        assert np.array_equal(FFi[TT >= 0], TTi[TT >= 0])

        # A slit turns the sphere into a disk.
        assert [L.tolist() for L in boundary_loops(F)] == [[0, 1, 2, 4]]
        assert euler_characteristic(F) == 1

    def test_vertex_count(self, octahedron):
        _, F = octahedron
        TT, _ = triangle_triangle_adjacency(F)
        E = [[0, 1], [0, 3], [3, 5]]

        eventual = cut_vertex_counts(F, TT, cut_flags(F, E))
        V, F, I, C, FF, FFi = cut(octahedron, E)

        assert len(V) == 6 + np.maximum(eventual - 1, 0).sum()
        assert np.bincount(I).tolist() == np.maximum(eventual, 1).tolist()
        assert np.array_equal(FF, triangle_triangle_adjacency(F)[0])
        assert euler_characteristic(F) == 1

    def test_no_cut(self, grid):
        V0, F0 = grid
        V, F, I, C, FF, FFi = cut(grid, [])

        assert np.array_equal(V, V0)
        assert np.array_equal(F, F0)
        assert np.array_equal(I, np.arange(9))

    def test_boundary_cut(self, grid):
        V0, F0 = grid
        V, F, I, C, FF, FFi = cut(grid, [[0, 1]])

        assert len(V) == 9
        assert np.array_equal(F, F0)

    def test_default_adjacency(self, square):
        V, F = square
        V, F = V.copy(), F.copy()
        C = cut_flags(F, [[0, 2]])

        V, F, I = cut_mesh(V, F, C)
        assert F.tolist() == [[0, 1, 4], [5, 2, 3]]

    def test_in_place(self, square):
        V, F = square
        V, F = V.copy(), F.copy()
        C = cut_flags(F, [[0, 2]])

        Vc, Fc, _ = cut_mesh(V, F, C)

        assert Vc is V
        assert Fc is F
        assert V.shape == (6, 3)

    def test_view(self, square):
        V, F = square
        V = V.copy()[:]
        F = F.copy()

        with pytest.raises(ValueError):
            cut_mesh(V, F, cut_flags(F, [[0, 2]]))

    def test_shape_mismatch(self, square):
        V, F = square

        with pytest.raises(ValueError):
            cut_mesh(V.copy(), F.copy(), np.zeros((2, 2), dtype=bool))

        with pytest.raises(ValueError):
            cut_mesh(V.tolist(), F.tolist(), np.zeros((2, 3), dtype=bool))

    def test_one_sided_flags(self, octahedron):
        V, F = octahedron
        V, F = V.copy(), F.copy()
        F0 = F.copy()

        C = np.zeros(F.shape, dtype=bool)
        C[0, 0] = C[0, 2] = True

        with pytest.raises(ValueError, match='one side only'):
            cut_mesh(V, F, C)

        # Nothing is modified before the flags are rejected.
        assert V.shape == (6, 3)
        assert np.array_equal(F, F0)

        with pytest.raises(ValueError):
            cut_mesh_copy(V, F, C)

    def test_boundary_flags(self, grid):
        V, F = grid
        C = np.zeros(F.shape, dtype=bool)
        C[0, 0] = True

        Vn, Fn, I = cut_mesh_copy(V, F, C)
        assert np.array_equal(Fn, F)

    def test_copy(self, square):
        V, F = square
        V0, F0 = V.copy(), F.copy()

        Vn, Fn, I = cut_mesh_copy(V.tolist(), F.tolist(),
                                  cut_flags(F, [[0, 2]]))

        assert len(Vn) == 6
        assert Fn.tolist() == [[0, 1, 4], [5, 2, 3]]
        assert np.array_equal(V, V0)
        assert np.array_equal(F, F0)

    def test_output(self, square, capsys):
        V, F = square
        cut_mesh_copy(V, F, cut_flags(F, [[0, 2]]), quiet=False)

        out = capsys.readouterr().out
        assert '2 vertices duplicated' in out
