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

""" Mesh cutting.

Cutting a mesh along a set of edges turns these edges into boundary
edges. Vertices along the cut are duplicated as needed, faces on one
side of the cut are redirected to the copies.

Cut edges are specified by a boolean array ``C`` of the same shape as
the face array: ``C[f, k]`` marks local edge :math:`k` of face :math:`f`,
the edge from ``F[f, k]`` to ``F[f, (k + 1) % 3]``. Interior cut edges
have to be marked on both sides, see :func:`cut_flags`.
"""

from time import time

import numpy as np

from m3topo.adjacency import triangle_triangle_adjacency
from m3topo.iterators import HalfEdgeIterator
from m3topo.mesh import CBOLD
from m3topo.mesh import CEND
from m3topo.mesh import as_faces
from m3topo.mesh import vertex_count


def cut_flags(F, E):
    """ Cut flags from a list of edges.

    Parameters
    ----------
    F : array_like, shape (m, 3)
        List of triangles.
    E : array_like, shape (p, 2)
        Edges to cut, as pairs of vertex indices in any order.

    Returns
    -------
    ~numpy.ndarray, shape (m, 3)
        Flags of all local edges that coincide with one of the edges.
    """
    F = as_faces(F)
    E = np.asarray(E, dtype=np.int64).reshape(-1, 2)

    cut = set(map(tuple, np.sort(E, axis=1).tolist()))

    src = F
    dst = np.roll(F, -1, axis=1)
    lo = np.minimum(src, dst).tolist()
    hi = np.maximum(src, dst).tolist()

    C = [[(lo[f][k], hi[f][k]) in cut for k in range(3)]
         for f in range(len(F))]

    return np.array(C, dtype=bool).reshape(len(F), 3)


def cut_vertex_counts(F, FF, C):
    """ Eventual number of copies of each vertex.

    A vertex ends up with one copy per boundary edge it is the origin of
    and one copy per cut edge it is an endpoint of, counting each cut
    edge once. Vertices without boundary and cut edges keep their single
    occurrence.

    Parameters
    ----------
    F : ~numpy.ndarray, shape (m, 3)
        List of triangles.
    FF : ~numpy.ndarray, shape (m, 3)
        Triangle-triangle adjacency.
    C : ~numpy.ndarray, shape (m, 3)
        Cut flags.

    Returns
    -------
    ~numpy.ndarray, shape (max(F) + 1, )
        Eventual number of occurrences, 0 for vertices that need no
        extra copy.

    Note
    ----
    The number of new vertices created by :func:`cut_mesh` is
    ``np.maximum(eventual - 1, 0).sum()``.
    """
    F = as_faces(F)
    n = int(F.max()) + 1 if F.size else 0

    src = F
    dst = np.roll(F, -1, axis=1)

    border = np.asarray(FF) < 0
    cut = np.asarray(C, dtype=bool) & ~border & (src < dst)

    eventual = np.bincount(src[border], minlength=n)
    eventual += np.bincount(src[cut], minlength=n)
    eventual += np.bincount(dst[cut], minlength=n)

    return eventual


def cut_mesh(V, F, C, FF=None, FFi=None, *, quiet=True):
    """ In-place mesh cut.

    Parameters
    ----------
    V : ~numpy.ndarray, shape (n, dim)
        Vertex coordinates. Rows for new vertices are appended in place,
        the array has to own its data buffer.
    F : ~numpy.ndarray, shape (m, 3)
        Integer face array. Redirected to new vertices in place.
    C : array_like, shape (m, 3)
        Cut flags.
    FF : ~numpy.ndarray, shape (m, 3), optional
        Triangle-triangle adjacency of `F`. Cut edges are marked as
        boundary edges in place. Computed if not given.
    FFi : ~numpy.ndarray, shape (m, 3), optional
        Inverse triangle-triangle adjacency of `F`. Computed together
        with `FF` if not given. Cut edges are marked by -1 in place.
    quiet : bool, optional
        Suppress console output.

    Raises
    ------
    ValueError
        If array shapes do not match, an interior cut edge is flagged on
        one side only, or `V` cannot be resized in place.

    Returns
    -------
    V : ~numpy.ndarray
        The resized vertex array.
    F : ~numpy.ndarray
        The modified face array.
    I : ~numpy.ndarray, shape (len(V), )
        Index of the original vertex of each vertex of the cut mesh.

    Note
    ----
    Faces are processed in index order, corners in ascending order. The
    fan of faces that is found first around a vertex receives the first
    copy, the last fan keeps the original vertex index. Later fans are
    bounded by the edges severed while processing earlier ones.
    """
    if not isinstance(V, np.ndarray) or not isinstance(F, np.ndarray):
        raise ValueError('in-place cut requires ndarray arguments, '
                         'use cut_mesh_copy() instead')

    if F.ndim != 2 or F.shape[1] != 3:
        raise ValueError(f'expected triangles, got shape {F.shape}')

    if not np.issubdtype(F.dtype, np.integer):
        raise ValueError(f'face indices have to be integers, got {F.dtype}')

    C = np.asarray(C, dtype=bool)

    if C.shape != F.shape:
        raise ValueError(f'cut flags of shape {C.shape} do not match '
                         f'face shape {F.shape}')

    if FF is None or FFi is None:
        FF, FFi = triangle_triangle_adjacency(F)
    elif FF.shape != F.shape or FFi.shape != F.shape:
        raise ValueError('adjacency shape does not match face shape')

    # Interior cut edges have to be flagged on both sides.
    rows, cols = np.nonzero((FF >= 0) & (FFi >= 0))
    odd = C[rows, cols] != C[FF[rows, cols], FFi[rows, cols]]

    if np.any(odd):
        i = np.flatnonzero(odd)[0]
        raise ValueError(f'local edge {cols[i]} of face #{rows[i]} is cut '
                         f'on one side only')

    if not quiet:
        start = time()

    n_v = len(V)
    vertex_count(F, n_v)

    occurrence = np.ones(n_v, dtype=np.int64)
    eventual = np.zeros(n_v, dtype=np.int64)

    counts = cut_vertex_counts(F, FF, C)
    eventual[:len(counts)] = counts

    n_new = int(np.maximum(eventual - 1, 0).sum())

    if n_new:
        if not V.flags.owndata or not V.flags.c_contiguous:
            raise ValueError('vertex array does not own its data buffer, '
                             'use cut_mesh_copy() instead')

        V.resize((n_v + n_new, *V.shape[1:]), refcheck=False)

    I = np.arange(n_v + n_new, dtype=np.int64)
    pos = n_v

    for f in range(len(F)):
        for k in range(3):
            v0 = int(F[f, k])

            # Corners already redirected to a copy are done.
            if v0 >= n_v:
                continue

            if not C[f, k] or occurrence[v0] == eventual[v0]:
                continue

            he = HalfEdgeIterator(F, FF, FFi, f, k)

            # Rotate clockwise around v0 until another cut or the
            # boundary is hit.
            fan = []

            while True:
                fan.append(he.fi)
                he.flip_e()
                he.flip_f()

                if C[he.fi, he.ei] or he.is_border():
                    break

            V[pos] = V[v0]
            I[pos] = v0
            occurrence[v0] += 1

            for g in fan:
                F[g][F[g] == v0] = pos

            # Sever both ends of the fan. Later fans stop here.
            FF[f, k] = -1
            FF[he.fi, he.ei] = -1

            pos += 1

    assert pos == n_v + n_new

    # All cut edges are boundary edges of the cut mesh, including those
    # at vertices that needed no copy.
    FF[C] = -1
    FFi[C] = -1

    if not quiet:
        print(f'cut {CBOLD}{int(C.sum())}{CEND} halfedges '
              f'({time()-start:.3f} sec)')
        print(f'\t\u251c\u2500 {n_v} vertices')
        print(f'\t\u2514\u2500 {n_new} vertices duplicated')

    return V, F, I


def cut_mesh_copy(V, F, C, *, quiet=True):
    """ Mesh cut.

    Same as :func:`cut_mesh` but leaves its arguments unchanged.

    Parameters
    ----------
    V : array_like, shape (n, dim)
        Vertex coordinates.
    F : array_like, shape (m, 3)
        List of triangles.
    C : array_like, shape (m, 3)
        Cut flags.
    quiet : bool, optional
        Suppress console output.

    Returns
    -------
    Vn : ~numpy.ndarray
        Vertex coordinates of the cut mesh.
    Fn : ~numpy.ndarray
        Faces of the cut mesh.
    I : ~numpy.ndarray, shape (len(Vn), )
        Index of the original vertex of each vertex of the cut mesh.
    """
    Vn = np.array(V, dtype=np.float64)
    Fn = np.array(as_faces(F))

    return cut_mesh(Vn, Fn, C, quiet=quiet)
