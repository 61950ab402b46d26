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

""" Manifold checks and topological invariants.

A triangle mesh is *edge-manifold* if every edge is shared by at most two
faces. It is *vertex-manifold* if the faces incident to each vertex form
a single fan, i.e., are connected via shared edges that contain the
vertex. Vertices incident to non-manifold edges are not considered
non-manifold by :func:`is_vertex_manifold`.
"""

from collections import deque

import numpy as np

from m3topo.adjacency import edges
from m3topo.adjacency import triangle_triangle_adjacency
from m3topo.adjacency import triangle_triangle_lists
from m3topo.adjacency import vertex_triangle_lists
from m3topo.facets import edge_topology
from m3topo.facets import unique_edge_map
from m3topo.mesh import as_faces
from m3topo.mesh import vertex_count


def is_edge_manifold(F, return_flags=False):
    """ Edge-manifold check.

    Parameters
    ----------
    F : array_like, shape (m, 3)
        List of triangles.
    return_flags : bool, optional
        Also return per facet and per edge diagnostics.

    Returns
    -------
    manifold : bool
        :obj:`True` iff every edge is shared by at most two faces.
    BF : ~numpy.ndarray, shape (m, 3)
        ``BF[f, c]`` flags whether the edge opposite corner :math:`c` of
        face :math:`f` is manifold. Only returned if `return_flags` is
        :obj:`True`.
    uE : ~numpy.ndarray, shape (p, 2)
        Unique edges. Only returned if `return_flags` is :obj:`True`.
    EMAP : ~numpy.ndarray, shape (3*m, )
        Maps directed edge ``f + m*c`` to its unique edge. Only returned
        if `return_flags` is :obj:`True`.
    BE : ~numpy.ndarray, shape (p, )
        Flags whether a unique edge is manifold. Only returned if
        `return_flags` is :obj:`True`.
    """
    F = as_faces(F)
    m = len(F)

    _, uE, EMAP, uE2E = unique_edge_map(F)

    BE = uE2E.counts() <= 2
    BF = BE[EMAP].reshape(3, m).T
    manifold = bool(np.all(BE))

    if return_flags:
        return manifold, BF, uE, EMAP, BE

    return manifold


def is_vertex_manifold(F, return_flags=False):
    """ Vertex-manifold check.

    Parameters
    ----------
    F : array_like, shape (m, 3)
        List of triangles.
    return_flags : bool, optional
        Also return per vertex flags.

    Raises
    ------
    NotImplementedError
        For tetrahedral meshes.

    Returns
    -------
    manifold : bool
        :obj:`True` iff all vertices are manifold.
    B : ~numpy.ndarray, shape (n, )
        Flags whether vertex :math:`i` is manifold, ``n = max(F) + 1``.
        Only returned if `return_flags` is :obj:`True`.

    Note
    ----
    Unreferenced vertices have an empty one-ring and are considered
    non-manifold.
    """
    F = as_faces(F, sizes=None)

    if F.shape[1] == 4:
        raise NotImplementedError('vertex manifold check not implemented '
                                  'for tetrahedra')

    F = as_faces(F)
    n = vertex_count(F)

    TT, _ = triangle_triangle_lists(F)
    VF, _ = vertex_triangle_lists(F, n)

    faces = F.tolist()
    B = np.zeros(n, dtype=bool)

    for v in range(n):
        B[v] = _is_fan(v, VF[v], TT, faces)

    manifold = bool(np.all(B))

    if return_flags:
        return manifold, B

    return manifold


def _is_fan(v, incident, TT, faces):
    """ One-ring connectivity check.

    Breadth-first traversal of the faces incident to `v`, stepping only
    between faces that both contain `v`.

    Returns
    -------
    bool
        :obj:`True` if all incident faces are reached from the first.
    """
    ring = set(incident.tolist())

    if not ring:
        return False

    seed = int(incident[0])
    queue = deque([seed])
    seen = {seed}

    while queue:
        f = queue.popleft()

        for k in range(3):
            for g in TT[f, k].tolist():
                if g not in seen and v in faces[g]:
                    seen.add(g)
                    queue.append(g)

    return len(seen) == len(ring)


def is_border_vertex(F, n=None, TT=None):
    """ Boundary vertex flags.

    Parameters
    ----------
    F : array_like, shape (m, 3)
        List of triangles of an edge-manifold mesh.
    n : int, optional
        Number of vertices, ``max(F) + 1`` by default.
    TT : array_like, shape (m, 3), optional
        Triangle-triangle adjacency of `F`, computed if not given.

    Returns
    -------
    ~numpy.ndarray, shape (n, )
        Flags whether a vertex is incident to a boundary edge.
    """
    F = as_faces(F)
    n = vertex_count(F, n)

    if TT is None:
        TT, _ = triangle_triangle_adjacency(F)

    border = np.asarray(TT) < 0
    flags = np.zeros(n, dtype=bool)

    flags[F[border]] = True
    flags[np.roll(F, -1, axis=1)[border]] = True

    return flags


def euler_characteristic(F, V=None):
    r""" Euler characteristic.

    The number :math:`\chi = |V| - |E| + |F|`.

    Parameters
    ----------
    F : array_like, shape (m, 3)
        List of triangles.
    V : array_like, optional
        Vertex coordinates. If given, the number of vertices is
        ``len(V)`` and the mesh has to be edge-manifold. Otherwise the
        number of vertices is ``max(F) + 1``.

    Raises
    ------
    NonManifoldError
        If `V` is given and the mesh is not edge-manifold.

    Returns
    -------
    int
    """
    F = as_faces(F)

    if V is None:
        nv = vertex_count(F)
        ne = len(edges(F))
    else:
        nv = len(V)
        ne = len(edge_topology(F)[0])

    return nv - ne + len(F)
