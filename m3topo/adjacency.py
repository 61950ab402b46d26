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

""" Mesh adjacency tables.

Vertex-face incidence, face-face adjacency, and vertex-vertex adjacency
of simplicial meshes given as face arrays. All tables are computed
eagerly and returned to the caller, nothing is cached.

Face-face adjacency comes in two flavors:

    - :func:`triangle_triangle_adjacency` reports one neighbor per local
      edge and assumes a 2-manifold mesh,
    - :func:`triangle_triangle_lists` reports all neighbors per local
      edge and handles non-manifold edges.
"""

import numpy as np
import scipy.sparse as sparse

from scipy.sparse import csgraph

from m3topo.facets import corner_to_edge
from m3topo.facets import edge_to_corner
from m3topo.facets import unique_edge_map
from m3topo.mesh import AdjacencyLists
from m3topo.mesh import as_faces
from m3topo.mesh import vertex_count


def _scatter(F, n):
    """ Vertex-face incidence by counting sort.

    Returns
    -------
    VF : list[int]
        Incident faces grouped by vertex.
    VI : list[int]
        Corner of the vertex in the corresponding face of `VF`.
    NI : list[int]
        Cumulative vertex degrees with a preceding zero.
    """
    # Vertex-face degree of each vertex.
    degree = np.bincount(F.ravel(), minlength=n)

    NI = [0] * (n + 1)

    for i, d in enumerate(degree.tolist()):
        NI[i+1] = NI[i] + d

    # Write position of the next incidence of each vertex.
    cursor = NI[:-1]
    VF = [0] * NI[-1]
    VI = [0] * NI[-1]

    for f, face in enumerate(F.tolist()):
        for c, v in enumerate(face):
            VF[cursor[v]] = f
            VI[cursor[v]] = c
            cursor[v] += 1

    return VF, VI, NI


def vertex_triangle_adjacency(F, n=None):
    """ Vertex-face adjacency.

    Parameters
    ----------
    F : array_like, shape (m, k)
        Triangles or tetrahedra.
    n : int, optional
        Number of vertices, ``max(F) + 1`` by default.

    Returns
    -------
    VF : ~numpy.ndarray, shape (k*m, )
        Incident faces of all vertices. The faces incident to vertex
        :math:`i` are ``VF[NI[i]:NI[i+1]]`` in ascending order.
    NI : ~numpy.ndarray, shape (n + 1, )
        Cumulative vertex-face degrees with a preceding zero.
    """
    F = as_faces(F, (3, 4))
    n = vertex_count(F, n)

    VF, _, NI = _scatter(F, n)

    return np.array(VF, dtype=np.int64), np.array(NI, dtype=np.int64)


def vertex_triangle_lists(F, n=None):
    """ Vertex-face adjacency lists.

    Parameters
    ----------
    F : array_like, shape (m, k)
        Triangles or tetrahedra.
    n : int, optional
        Number of vertices, ``max(F) + 1`` by default.

    Returns
    -------
    VF : AdjacencyLists
        ``VF[i]`` lists the faces incident to vertex :math:`i`.
    VFi : AdjacencyLists
        ``VFi[i][j]`` is the corner of vertex :math:`i` in face
        ``VF[i][j]``.

    Note
    ----
    A combinatorially degenerate face that references a vertex twice
    appears twice in the list of that vertex.
    """
    F = as_faces(F, (3, 4))
    n = vertex_count(F, n)

    VF, VI, NI = _scatter(F, n)

    return AdjacencyLists(NI, VF), AdjacencyLists(NI, VI)


def triangle_triangle_adjacency(F):
    """ Triangle-triangle adjacency of a manifold mesh.

    Parameters
    ----------
    F : array_like, shape (m, 3)
        List of triangles. The mesh is assumed to be an edge-manifold
        and consistently oriented.

    Returns
    -------
    TT : ~numpy.ndarray, shape (m, 3)
        ``TT[f, k]`` is the face adjacent to local edge :math:`k` of face
        :math:`f`, -1 for boundary edges.
    TTi : ~numpy.ndarray, shape (m, 3)
        ``TTi[f, k]`` is the local edge of face ``TT[f, k]`` that is
        shared with face :math:`f`, -1 for boundary edges.

    Note
    ----
    For a non-manifold edge the first adjacent face found is reported.
    ``TTi`` is only meaningful where ``TT`` is non-negative. The tables
    are symmetric: ``TT[TT[f, k], TTi[f, k]] == f`` and
    ``TTi[TT[f, k], TTi[f, k]] == k``.
    """
    F = as_faces(F)
    m = len(F)

    TT = [[-1, -1, -1] for _ in range(m)]
    TTi = [[-1, -1, -1] for _ in range(m)]

    if m == 0:
        return (np.array(TT, dtype=np.int64).reshape(0, 3),
                np.array(TTi, dtype=np.int64).reshape(0, 3))

    VF, _, NI = _scatter(F, vertex_count(F))
    faces = F.tolist()

    for f, face in enumerate(faces):
        for k in range(3):
            vi = face[k]
            vin = face[(k + 1) % 3]

            # Scan the faces incident to vi for a face that also contains
            # vin, i.e., a face sharing the edge (vi, vin).
            for fn in VF[NI[vi]:NI[vi+1]]:
                if fn != f and vin in faces[fn]:
                    TT[f][k] = fn
                    break

    for f, face in enumerate(faces):
        for k in range(3):
            fn = TT[f][k]

            if fn < 0:
                continue

            vi = face[k]
            vj = face[(k + 1) % 3]

            # The neighbor contains the edge with reversed orientation.
            for kn in range(3):
                if faces[fn][kn] == vj and faces[fn][(kn + 1) % 3] == vi:
                    TTi[f][k] = kn
                    break

    return np.array(TT, dtype=np.int64), np.array(TTi, dtype=np.int64)


def triangle_triangle_lists(F):
    """ Triangle-triangle adjacency lists.

    General face adjacency that correctly models edges shared by more
    than two faces.

    Parameters
    ----------
    F : array_like, shape (m, 3)
        List of triangles.

    Returns
    -------
    TT : AdjacencyLists
        Lists with shape ``(m, 3)``. ``TT[f, k]`` lists all faces other
        than :math:`f` that share local edge :math:`k` of face :math:`f`.
    TTi : AdjacencyLists
        Lists with shape ``(m, 3)``. ``TTi[f, k][j]`` is the local edge
        of face ``TT[f, k][j]`` that is shared with face :math:`f`.
    """
    F = as_faces(F)
    m = len(F)

    _, _, EMAP, uE2E = unique_edge_map(F)
    emap = EMAP.tolist()
    members = uE2E.tolist()

    offsets = [0]
    faces = []
    edges = []

    for f in range(m):
        for k in range(3):
            e = f + m * edge_to_corner(k)

            for ne in members[emap[e]]:
                nf = ne % m

                if nf != f:
                    faces.append(nf)
                    edges.append(corner_to_edge(ne // m))

            offsets.append(len(faces))

    return (AdjacencyLists(offsets, faces, shape=(m, 3)),
            AdjacencyLists(offsets, edges, shape=(m, 3)))


def adjacency_matrix(F, n=None, dtype=np.float64):
    """ Vertex adjacency matrix.

    Parameters
    ----------
    F : array_like, shape (m, k)
        Triangles or tetrahedra.
    n : int, optional
        Number of vertices, ``max(F) + 1`` by default.
    dtype : data-type, optional
        Type of the matrix entries.

    Returns
    -------
    ~scipy.sparse.csr_matrix, shape (n, n)
        Symmetric matrix with unit entries for each pair of vertices
        that share a simplex.
    """
    F = as_faces(F, (3, 4))
    n = vertex_count(F, n)
    k = F.shape[1]

    # All vertex pairs of each simplex, in both directions.
    pairs = [(i, j) for i in range(k) for j in range(i + 1, k)]
    head = [F[:, i] for i, _ in pairs]
    tail = [F[:, j] for _, j in pairs]

    src = np.concatenate(head + tail)
    dst = np.concatenate(tail + head)

    # Combinatorially degenerate simplices would add diagonal entries.
    keep = src != dst
    src, dst = src[keep], dst[keep]

    A = sparse.csr_matrix((np.ones(len(src), dtype=dtype), (src, dst)),
                          shape=(n, n))
    A.sum_duplicates()
    A.data[:] = 1

    return A


def edges(F):
    """ Unique edges.

    Parameters
    ----------
    F : array_like or ~scipy.sparse.spmatrix
        Triangles or tetrahedra of shape ``(m, k)``, or a symmetric
        vertex adjacency matrix.

    Returns
    -------
    ~numpy.ndarray, shape (p, 2)
        Unique edges, each row sorted ascending, rows in lexicographic
        order.
    """
    if sparse.issparse(F):
        A = F
    else:
        A = adjacency_matrix(F)

    A = sparse.triu(A, k=1, format='coo')
    E = np.column_stack((A.row, A.col)).astype(np.int64)

    return E[np.lexsort((E[:, 1], E[:, 0]))]


def vertex_components(A):
    """ Connected components of a graph.

    Parameters
    ----------
    A : ~scipy.sparse.spmatrix or array_like
        Square adjacency matrix of shape ``(n, n)``, or triangles or
        tetrahedra whose vertex adjacency defines the graph.

    Raises
    ------
    ValueError
        If the adjacency matrix is not square.

    Returns
    -------
    C : ~numpy.ndarray, shape (n, )
        Component id of each vertex. Ids start at 0 and are assigned in
        order of the smallest vertex index of each component.
    counts : ~numpy.ndarray
        Number of vertices in each component.
    """
    if not sparse.issparse(A):
        A = adjacency_matrix(A)

    if A.shape[0] != A.shape[1]:
        raise ValueError(f'adjacency matrix has to be square, got {A.shape}')

    A = sparse.csr_matrix(A, copy=True)
    A.eliminate_zeros()

    # Labels of an undirected graph are assigned in order of the smallest
    # vertex index of each component.
    ncomp, C = csgraph.connected_components(A, directed=False)
    counts = np.bincount(C, minlength=ncomp)

    return C.astype(np.int64), counts.astype(np.int64)
