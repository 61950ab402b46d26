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

""" Mesh boundary extraction.

Boundary facets of triangle and tetrahedral meshes, and ordered boundary
loops of manifold triangle meshes.
"""

import numpy as np

from m3topo.adjacency import triangle_triangle_adjacency
from m3topo.adjacency import vertex_triangle_lists
from m3topo.facets import oriented_facets
from m3topo.facets import unique_rows
from m3topo.manifold import is_border_vertex
from m3topo.mesh import as_faces
from m3topo.mesh import vertex_count


def boundary_facets(F):
    """ Boundary facets.

    Boundary edges of a triangle mesh, or boundary triangles of a
    tetrahedral mesh. A facet is on the boundary if it belongs to
    exactly one simplex.

    Parameters
    ----------
    F : array_like, shape (m, k)
        Triangles or tetrahedra.

    Raises
    ------
    NotImplementedError
        For simplices other than triangles and tetrahedra.

    Returns
    -------
    E : ~numpy.ndarray, shape (p, k-1)
        Boundary facets, oriented consistently with their simplex.
    J : ~numpy.ndarray, shape (p, )
        Index of the simplex each facet belongs to.
    K : ~numpy.ndarray, shape (p, )
        Corner of the simplex opposite each facet.
    """
    F = as_faces(F, sizes=None)
    m, k = F.shape

    facets = oriented_facets(F)

    if m == 0:
        empty = np.empty(0, dtype=np.int64)
        return facets, empty, empty.copy()

    _, IA, IC = unique_rows(np.sort(facets, axis=1))

    # Multiplicity of each unique facet. Boundary facets occur once.
    count = np.bincount(IC, minlength=len(IA))
    idx = IA[count == 1]

    return facets[idx], idx % m, idx // m


def boundary_loops(F, TT=None):
    """ Ordered boundary loops.

    Parameters
    ----------
    F : array_like, shape (m, 3)
        List of triangles of a manifold mesh.
    TT : array_like, shape (m, 3), optional
        Triangle-triangle adjacency of `F`, computed if not given.

    Returns
    -------
    list[~numpy.ndarray]
        Boundary loops. Each loop lists the vertices of a boundary cycle
        in the order of the boundary edges' orientation. A closed mesh has
        no boundary loops.

    Note
    ----
    Loops are seeded at the unvisited boundary vertex with the smallest
    index. A loop ends when the current vertex has no boundary edge that
    leads to an unvisited vertex.
    """
    F = as_faces(F)

    if len(F) == 0:
        return []

    if TT is None:
        TT, _ = triangle_triangle_adjacency(F)
    else:
        TT = np.asarray(TT)

        if TT.shape != F.shape:
            raise ValueError(f'adjacency shape {TT.shape} does not match '
                             f'face shape {F.shape}')

    n = vertex_count(F)
    VF, VFi = vertex_triangle_lists(F, n)

    unvisited = is_border_vertex(F, n, TT=TT)
    faces = F.tolist()
    border = (TT < 0).tolist()

    loops = []

    for start in np.flatnonzero(unvisited).tolist():
        if not unvisited[start]:
            continue

        loop = [start]
        unvisited[start] = False

        while True:
            v = loop[-1]
            nxt = None

            # Follow the boundary edge that starts at v and leads to a
            # vertex not visited yet.
            for f, c in zip(VF[v].tolist(), VFi[v].tolist()):
                if border[f][c]:
                    w = faces[f][(c + 1) % 3]

                    if unvisited[w]:
                        nxt = w
                        break

            if nxt is None:
                break

            loop.append(nxt)
            unvisited[nxt] = False

        loops.append(np.array(loop, dtype=np.int64))

    return loops


def boundary_loop(F, TT=None):
    """ Longest boundary loop.

    Parameters
    ----------
    F : array_like, shape (m, 3)
        List of triangles of a manifold mesh.
    TT : array_like, shape (m, 3), optional
        Triangle-triangle adjacency of `F`, computed if not given.

    Returns
    -------
    ~numpy.ndarray
        Vertices of the boundary loop with the largest number of vertices,
        the first one found in case of a tie. Empty for closed meshes.
    """
    longest = np.empty(0, dtype=np.int64)

    for loop in boundary_loops(F, TT):
        if len(loop) > len(longest):
            longest = loop

    return longest
