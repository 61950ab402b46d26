import numpy as np
import pytest

from m3topo.facets import corner_to_edge
from m3topo.facets import edge_to_corner
from m3topo.facets import edge_topology
from m3topo.facets import oriented_facets
from m3topo.facets import unique_edge_map
from m3topo.facets import unique_rows
from m3topo.facets import unique_simplices
from m3topo.mesh import NonManifoldError


def test_corner_edge_conversion():
    c = np.arange(3)

    assert corner_to_edge(c).tolist() == [1, 2, 0]
    assert edge_to_corner(corner_to_edge(c)).tolist() == [0, 1, 2]


class TestOrientedFacets:

    def test_triangle(self, triangle):
        _, F = triangle
        assert oriented_facets(F).tolist() == [[1, 2], [2, 0], [0, 1]]

    def test_corner_major(self, strip):
        _, F = strip
        E = oriented_facets(F)

        assert E.tolist() == [[1, 2], [1, 3], [2, 0], [3, 2], [0, 1], [2, 1]]

    def test_tetrahedron(self, tet):
        E = oriented_facets(tet)

        assert E.tolist() == [[1, 3, 2], [0, 2, 3], [0, 3, 1], [0, 1, 2]]

    def test_closed_surface(self, tetrahedron):
        _, F = tetrahedron
        E = oriented_facets(F)

        # Every halfedge has its twin.
        directed = set(map(tuple, E.tolist()))
        assert all((b, a) in directed for a, b in directed)

    def test_unsupported(self):
        with pytest.raises(NotImplementedError):
            oriented_facets([[0, 1]])


class TestUnique:

    def test_unique_rows(self):
        A = np.array([[1, 2], [0, 1], [1, 2], [0, 1], [3, 0]])
        C, IA, IC = unique_rows(A)

        assert C.tolist() == [[0, 1], [1, 2], [3, 0]]
        assert IA.tolist() == [1, 0, 4]
        assert IC.tolist() == [1, 0, 1, 0, 2]
        assert np.array_equal(C[IC], A)

    def test_unique_rows_empty(self):
        C, IA, IC = unique_rows(np.empty((0, 2), dtype=int))

        assert C.shape == (0, 2)
        assert len(IA) == len(IC) == 0

    def test_unique_simplices(self):
        F = np.array([[0, 1, 2], [2, 0, 1], [1, 2, 3]])
        FF, IA, IC = unique_simplices(F)

        assert FF.tolist() == [[0, 1, 2], [1, 2, 3]]
        assert IA.tolist() == [0, 2]
        assert IC.tolist() == [0, 0, 1]

    def test_unique_simplices_orientation(self):
        FF, _, IC = unique_simplices([[0, 1, 2], [0, 2, 1]])

        assert len(FF) == 1
        assert IC.tolist() == [0, 0]


class TestUniqueEdgeMap:

    def test_strip(self, strip):
        _, F = strip
        E, uE, EMAP, uE2E = unique_edge_map(F)

        assert len(E) == 6
        assert uE.tolist() == [[0, 1], [0, 2], [1, 2], [1, 3], [2, 3]]
        assert EMAP.tolist() == [2, 3, 1, 4, 0, 2]
        assert uE2E[2].tolist() == [0, 5]
        assert uE2E.counts().tolist() == [1, 1, 2, 1, 1]

    def test_consistency(self, manifold_mesh):
        _, F = manifold_mesh
        E, uE, EMAP, uE2E = unique_edge_map(F)

        assert np.array_equal(uE[EMAP], np.sort(E, axis=1))

        for u, members in enumerate(uE2E):
            assert np.all(EMAP[members] == u)
            assert np.all(np.diff(members) > 0)

        assert np.array_equal(np.sort(uE2E.values), np.arange(len(E)))

    def test_closed(self, icosahedron):
        _, F = icosahedron
        _, uE, _, uE2E = unique_edge_map(F)

        assert len(uE) == 30
        assert np.all(uE2E.counts() == 2)

    def test_non_manifold(self, fin):
        _, uE, _, uE2E = unique_edge_map(fin)

        assert uE[0].tolist() == [0, 1]
        assert uE2E.counts()[0] == 3


class TestEdgeTopology:

    def test_strip(self, strip):
        _, F = strip
        EV, FE, EF = edge_topology(F)

        assert EV.tolist() == [[0, 1], [0, 2], [1, 2], [1, 3], [2, 3]]
        assert FE.tolist() == [[0, 2, 1], [2, 3, 4]]
        assert EF.tolist() == [[0, -1], [-1, 0], [0, 1], [1, -1], [-1, 1]]

    def test_relations(self, manifold_mesh):
        _, F = manifold_mesh
        EV, FE, EF = edge_topology(F)

        src = F
        dst = np.roll(F, -1, axis=1)

        assert np.array_equal(EV[FE, 0], np.minimum(src, dst))
        assert np.array_equal(EV[FE, 1], np.maximum(src, dst))

        # The first face holds the edge as stored, the second its reverse.
        for e, (a, b) in enumerate(EV.tolist()):
            f0, f1 = EF[e]

            if f0 >= 0:
                k = FE[f0].tolist().index(e)
                assert (F[f0, k], F[f0, (k + 1) % 3]) == (a, b)

            if f1 >= 0:
                k = FE[f1].tolist().index(e)
                assert (F[f1, k], F[f1, (k + 1) % 3]) == (b, a)

    def test_closed(self, octahedron):
        _, F = octahedron
        EV, FE, EF = edge_topology(F)

        assert len(EV) == 12
        assert np.all(EF >= 0)
        assert np.all(FE >= 0)

    def test_empty(self):
        EV, FE, EF = edge_topology(np.empty((0, 3), dtype=int))

        assert EV.shape == (0, 2)
        assert FE.shape == (0, 3)
        assert EF.shape == (0, 2)

    def test_non_manifold(self, fin):
        with pytest.raises(NonManifoldError):
            edge_topology(fin)
