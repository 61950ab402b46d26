# Copyright 2024, m3shware
#
# Permission is hereby granted, free of charge, to any person obtaining a
# copy of this software and associated documentation files (the "Software"),
# to deal in the Software without restriction, including without limitation
# the rights to use, copy, modify, merge, publish, distribute, sublicense,
# and/or sell copies of the Software, and to permit persons to whom the
# Software is furnished to do so, subject to the following conditions:
#
# The above copyright notice and this permission notice shall be included in
# all copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
# IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
# FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
# AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
# LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING
# FROM, OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS
# IN THE SOFTWARE.

r""" Facets and unique edges.

A facet of a simplex is the face opposite one of its corners: the edges
of a triangle and the triangles of a tetrahedron. The functions in this
module enumerate facets of all simplices of a mesh in *corner-major*
order. Row ``f + m*c`` of a facet array holds the facet opposite corner
:math:`c` of simplex :math:`f`, where :math:`m` is the number of
simplices.

Note
----
Tables indexed per face and *local edge* use a different convention:
local edge :math:`k` runs from corner :math:`k` to corner
:math:`(k + 1) \bmod 3`. The facet opposite corner :math:`c` is local
edge ``corner_to_edge(c)``. Use :func:`corner_to_edge` and
:func:`edge_to_corner` for any conversion between the two.
"""

import numpy as np

from m3topo.mesh import AdjacencyLists
from m3topo.mesh import NonManifoldError
from m3topo.mesh import as_faces


# Corner indices of the facet opposite each corner. Facets are oriented
# such that they are consistent with the orientation of the simplex.
_FACET_CORNERS = {
    3: [[1, 2], [2, 0], [0, 1]],
    4: [[1, 3, 2], [0, 2, 3], [0, 3, 1], [0, 1, 2]],
}


def corner_to_edge(c):
    r""" Local edge index of the edge opposite a corner.

    Parameters
    ----------
    c : int or ~numpy.ndarray
        Corner index of a triangle.

    Returns
    -------
    int or ~numpy.ndarray
        Index :math:`k` of the local edge from corner :math:`k` to
        corner :math:`(k + 1) \bmod 3` that is opposite corner `c`.
    """
    return (c + 1) % 3


def edge_to_corner(k):
    """ Corner index opposite a local edge.

    Inverse of :func:`corner_to_edge`.

    Parameters
    ----------
    k : int or ~numpy.ndarray
        Local edge index of a triangle.

    Returns
    -------
    int or ~numpy.ndarray
        Corner index opposite local edge `k`.
    """
    return (k + 2) % 3


def oriented_facets(F):
    """ Directed facets.

    For a manifold triangle mesh this computes all halfedges, for a
    manifold tetrahedral mesh all half-faces. Interior facets show up
    once for each orientation, non-manifold facets may show up more
    than once per orientation.

    Parameters
    ----------
    F : array_like, shape (m, k)
        List of simplices.

    Raises
    ------
    NotImplementedError
        For simplices other than triangles and tetrahedra.

    Returns
    -------
    ~numpy.ndarray, shape (m*k, k-1)
        Facet array. Row ``f + m*c`` is the facet opposite ``F[f, c]``.
    """
    F = as_faces(F, sizes=None)
    k = F.shape[1]

    if k not in _FACET_CORNERS:
        raise NotImplementedError(f'simplex of size {k} not supported')

    return np.concatenate([F[:, corners] for corners in _FACET_CORNERS[k]])


def unique_rows(A):
    """ Unique rows.

    Parameters
    ----------
    A : array_like, shape (n, k)
        Input array.

    Returns
    -------
    C : ~numpy.ndarray, shape (p, k)
        Unique rows of `A` in lexicographic order.
    IA : ~numpy.ndarray, shape (p, )
        Index of the first occurrence so that ``C == A[IA]``.
    IC : ~numpy.ndarray, shape (n, )
        Index vector so that ``A == C[IC]``.
    """
    A = np.asarray(A)

    if len(A) == 0:
        empty = np.empty(0, dtype=np.int64)
        return A.copy(), empty, empty.copy()

    C, IA, IC = np.unique(A, axis=0, return_index=True, return_inverse=True)

    # Depending on the NumPy version the inverse index array is returned
    # with an extra axis.
    return C, IA.astype(np.int64), IC.reshape(-1).astype(np.int64)


def unique_simplices(F):
    """ Combinatorially unique simplices.

    Two simplices are considered equal if they share the same set of
    vertices, regardless of order and orientation.

    Parameters
    ----------
    F : array_like, shape (m, k)
        List of simplices.

    Returns
    -------
    FF : ~numpy.ndarray, shape (p, k)
        Unique simplices. Each simplex keeps the vertex order of its
        first occurrence in `F`.
    IA : ~numpy.ndarray, shape (p, )
        Index vector so that ``FF == F[IA]``.
    IC : ~numpy.ndarray, shape (m, )
        Index vector so that ``sort(F, axis=1) == sort(FF, axis=1)[IC]``.
    """
    F = as_faces(F, sizes=None)
    _, IA, IC = unique_rows(np.sort(F, axis=1))

    return F[IA], IA, IC


def unique_edge_map(F):
    """ Unique edge map.

    Relates the directed edges of a triangle mesh to the unique edges
    of the mesh seen as a graph.

    Parameters
    ----------
    F : array_like, shape (m, 3)
        List of triangles.

    Returns
    -------
    E : ~numpy.ndarray, shape (3*m, 2)
        All directed edges, row ``f + m*c`` is the edge opposite
        ``F[f, c]``, see :func:`oriented_facets`.
    uE : ~numpy.ndarray, shape (p, 2)
        Unique undirected edges, each row sorted ascending.
    EMAP : ~numpy.ndarray, shape (3*m, )
        Maps directed edges to unique edges, ``uE[EMAP[e]]`` is the
        sorted version of ``E[e]``.
    uE2E : AdjacencyLists
        For each unique edge, the indices into `E` of all directed edges
        sharing it in ascending order. Its :attr:`~AdjacencyLists.offsets`
        and :attr:`~AdjacencyLists.values` arrays are the cumulative counts
        and the flat list of directed edges.

    Note
    ----
    A manifold interior edge has two directed edges, a boundary edge has
    one. Non-manifold edges have three or more.
    """
    F = as_faces(F)
    E = oriented_facets(F)

    sortE = np.sort(E, axis=1)
    uE, _, EMAP = unique_rows(sortE)

    uE2E = AdjacencyLists.from_keys(EMAP, len(uE))

    return E, uE, EMAP, uE2E


def edge_topology(F):
    r""" Edge topology of an edge-manifold triangle mesh.

    Parameters
    ----------
    F : array_like, shape (m, 3)
        List of triangles.

    Raises
    ------
    NonManifoldError
        If an edge is shared by more than two faces.

    Returns
    -------
    EV : ~numpy.ndarray, shape (p, 2)
        Edge endpoints, each row sorted ascending.
    FE : ~numpy.ndarray, shape (m, 3)
        Face-edge relation, ``FE[f, k]`` is the edge index of local edge
        :math:`k` of face :math:`f` (from corner :math:`k` to corner
        :math:`(k + 1) \bmod 3`).
    EF : ~numpy.ndarray, shape (p, 2)
        Edge-face relation. ``EF[e, 0]`` is the face that contains the
        directed edge ``EV[e, 0] -> EV[e, 1]``, ``EF[e, 1]`` the face that
        contains its reverse. Missing faces of boundary edges are marked
        by -1.
    """
    F = as_faces(F)
    m = len(F)

    if m == 0:
        return (np.full((0, 2), -1, dtype=np.int64),
                np.full((0, 3), -1, dtype=np.int64),
                np.full((0, 2), -1, dtype=np.int64))

    _, _, _, uE2E = unique_edge_map(F)

    if np.any(uE2E.counts() > 2):
        raise NonManifoldError('edge topology requires an edge-manifold mesh')

    # One tuple (v1, v2, f, k) per local edge with v1 <= v2, sorted
    # lexicographically. Equal vertex pairs end up next to each other.
    src = F.ravel()
    dst = np.roll(F, -1, axis=1).ravel()
    face = np.repeat(np.arange(m), 3)
    edge = np.tile(np.arange(3), m)

    v1 = np.minimum(src, dst)
    v2 = np.maximum(src, dst)
    order = np.lexsort((edge, face, v2, v1))

    v1, v2, face, edge = v1[order], v2[order], face[order], edge[order]

    first = np.ones(len(order), dtype=bool)
    first[1:] = (v1[1:] != v1[:-1]) | (v2[1:] != v2[:-1])
    eid = np.cumsum(first) - 1
    p = int(eid[-1]) + 1

    EV = np.column_stack((v1[first], v2[first]))
    FE = np.full((m, 3), -1, dtype=np.int64)
    EF = np.full((p, 2), -1, dtype=np.int64)

    FE[face, edge] = eid
    EF[eid[first], 0] = face[first]
    EF[eid[~first], 1] = face[~first]

    # The first face of each edge has to contain the edge oriented as
    # in EV, otherwise the two faces are swapped. For boundary edges
    # this moves the -1 marker to the first column.
    flip = src[order][first] != EV[:, 0]
    EF[flip] = EF[flip][:, ::-1]

    return EV, FE, EF
