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

r""" Indexed mesh representation.

A triangle (or tetrahedral) mesh is described by two arrays:

    - an optional array of vertex coordinates, one point per row,
    - and an integer array of simplex definitions, one simplex per row.

All topology functions of this package operate on the simplex array
alone. If no vertex coordinates are given, the number of vertices is
taken to be ``max(F) + 1``. This convention silently drops unreferenced
trailing vertices, pass an explicit vertex count wherever this matters.

Local edge :math:`k` of a triangle :math:`f` runs from corner :math:`k`
to corner :math:`(k + 1) \bmod 3`, i.e., from ``F[f, k]`` to
``F[f, (k + 1) % 3]``. All per face and local edge tables (triangle
adjacency, cut flags, halfedge iterators) use this convention.
"""

from copy import deepcopy

import numpy as np


CWHITERED = '\33[41m'                   # white on red background
CBOLD = '\33[1m'                        # bold text, white on black
CEND = '\33[0m'


def as_faces(faces, sizes=(3, ), dtype=np.int64):
    """ Face array conversion.

    Parameters
    ----------
    faces : array_like, shape (m, k)
        Simplex definitions, 0-based vertex indexing.
    sizes : tuple of int or None, optional
        Admissible simplex sizes :math:`k`. Any size is accepted when
        :obj:`None`.
    dtype : data-type, optional
        Integer type of the returned array.

    Raises
    ------
    ValueError
        If `faces` is not a two-dimensional array of non-negative
        integers with an admissible number of columns.

    Returns
    -------
    ~numpy.ndarray, shape (m, k)
        Face array. No copy is made if `faces` already is an array of
        the requested type.
    """
    F = np.asarray(faces)

    # Empty face lists are valid input. The number of columns is kept
    # if there is one, otherwise the smallest admissible size is used.
    if F.size == 0:
        if F.ndim == 2:
            k = F.shape[1]
        else:
            k = sizes[0] if sizes else 3

        return np.empty((0, k), dtype=dtype)

    if F.ndim != 2:
        raise ValueError(f'face array has to be two-dimensional, '
                         f'got shape {F.shape}')

    if sizes is not None and F.shape[1] not in sizes:
        raise ValueError(f'expected simplices of size {sizes}, '
                         f'got shape {F.shape}')

    if not np.issubdtype(F.dtype, np.integer):
        raise ValueError(f'face indices have to be integers, got {F.dtype}')

    if F.min() < 0:
        raise ValueError('face indices have to be non-negative')

    return F.astype(dtype, copy=False)


def vertex_count(F, n=None):
    """ Number of vertices.

    Parameters
    ----------
    F : ~numpy.ndarray, shape (m, k)
        Face array.
    n : int, optional
        Declared number of vertices.

    Raises
    ------
    ValueError
        If `n` is smaller than ``max(F) + 1``.

    Returns
    -------
    int
        The declared number of vertices or ``max(F) + 1`` if :obj:`None`.
    """
    num = int(F.max()) + 1 if F.size else 0

    if n is None:
        return num

    if n < num:
        raise ValueError(f'{n} vertices declared but face array '
                         f'references {num}')

    return int(n)


class AdjacencyLists:
    """ Compressed list of lists.

    A sequence of variable length integer lists stored as a flat array
    of `values` and an array of cumulative `offsets` such that list
    :math:`i` occupies ``values[offsets[i]:offsets[i+1]]``.

    Parameters
    ----------
    offsets : array_like, shape (n + 1, )
        Cumulative list sizes with a preceding zero.
    values : array_like
        Concatenation of all lists.
    shape : tuple of int, optional
        Two-dimensional layout of the lists. If given, the list of slot
        ``(i, j)`` can be accessed as ``lists[i, j]``.

    Note
    ----
    Instances behave like read-only lists of :obj:`~numpy.ndarray`
    objects and share their buffers with the returned slices.
    """

    def __init__(self, offsets, values, shape=None):
        self._offsets = np.asarray(offsets, dtype=np.int64)
        self._values = np.asarray(values, dtype=np.int64)

        assert self._offsets.ndim == 1 and len(self._offsets) > 0
        assert self._offsets[0] == 0
        assert self._offsets[-1] == len(self._values)

        if shape is not None:
            if int(np.prod(shape)) != len(self._offsets) - 1:
                raise ValueError(f'shape {shape} does not match '
                                 f'{len(self._offsets) - 1} lists')

            shape = tuple(shape)

        self._shape = shape

    @classmethod
    def from_keys(cls, keys, n=None, shape=None):
        """ Group items by key.

        Item :math:`i` is put into list ``keys[i]``. Within each list
        items appear in ascending order.

        Parameters
        ----------
        keys : array_like
            Non-negative list index of each item.
        n : int, optional
            Number of lists, at least ``max(keys) + 1``.
        shape : tuple of int, optional
            Two-dimensional layout of the lists.

        Returns
        -------
        AdjacencyLists
        """
        keys = np.asarray(keys, dtype=np.int64)

        if n is None:
            n = int(keys.max()) + 1 if keys.size else 0

        counts = np.bincount(keys, minlength=n)
        offsets = np.zeros(n + 1, dtype=np.int64)
        np.cumsum(counts, out=offsets[1:])

        # A stable sort of the keys is a counting sort of the item
        # indices, ties are kept in ascending order.
        values = np.argsort(keys, kind='stable')

        return cls(offsets, values, shape=shape)

    def __len__(self):
        return len(self._offsets) - 1

    def __getitem__(self, index):
        """ List access.

        Parameters
        ----------
        index : int or tuple of int
            List index or slot ``(i, j)`` if a shape was given.

        Raises
        ------
        IndexError
            If `index` is out of bounds.

        Returns
        -------
        ~numpy.ndarray
            The list as a view into :attr:`values`.
        """
        if isinstance(index, tuple):
            if self._shape is None:
                raise IndexError('lists have no two-dimensional layout')

            index = int(np.ravel_multi_index(index, self._shape))

        n = len(self)

        if index < 0:
            index += n

        if not 0 <= index < n:
            raise IndexError(f'index {index} out of range(0, {n})')

        return self._values[self._offsets[index]:self._offsets[index+1]]

    def __iter__(self):
        for i in range(len(self)):
            yield self._values[self._offsets[i]:self._offsets[i+1]]

    def __repr__(self):
        return f'AdjacencyLists({self.tolist()})'

    @property
    def offsets(self):
        """ Cumulative list sizes with a preceding zero.

        :type: ~numpy.ndarray
        """
        return self._offsets

    @property
    def values(self):
        """ Concatenation of all lists.

        :type: ~numpy.ndarray
        """
        return self._values

    @property
    def shape(self):
        """ Two-dimensional layout, :obj:`None` if not set.

        :type: tuple or None
        """
        return self._shape

    def counts(self):
        """ List sizes.

        Returns
        -------
        ~numpy.ndarray
        """
        return np.diff(self._offsets)

    def tolist(self):
        """ Conversion to nested Python lists.

        Returns
        -------
        list[list[int]]
        """
        values = self._values.tolist()
        offsets = self._offsets.tolist()

        return [values[offsets[i]:offsets[i+1]] for i in range(len(self))]


class IndexedMesh:
    """ Indexed mesh.

    A thin container for a vertex coordinate array and a face array.
    Combinatorial information is never stored but computed on demand
    by the functions of the :mod:`~m3topo.adjacency`,
    :mod:`~m3topo.manifold`, and :mod:`~m3topo.boundary` modules.

    Parameters
    ----------
    points : array_like, optional
        Vertex coordinates. Converted to an equivalent
        :obj:`~numpy.ndarray` object if necessary.
    faces : array_like, optional
        Face definitions, 0-based vertex indexing. Triangles or
        tetrahedra.
    name : str, optional
        Name tag.
    quiet : bool, optional
        Suppress console output.

    Raises
    ------
    ValueError
        If face definitions reference vertices that do not exist.
    """

    def __init__(self, points=None, faces=None, *, name=None, quiet=False):
        """ Initialize from vertex and face lists.
        """
        if points is None and faces is None:
            self._points = None
            self._faces = as_faces([])
        else:
            self._faces = as_faces([] if faces is None else faces, (3, 4))

            if points is not None:
                self._points = np.asarray(points)
                vertex_count(self._faces, len(self._points))
            else:
                self._points = None

        self.name = name

        # Typically one does not expect isolated vertices in a mesh.
        if not quiet and np.any(self.unreferenced):
            print(f'{CWHITERED}there are isolated vertices{CEND}')

    def __len__(self):
        """ Number of faces.
        """
        return len(self._faces)

    def __iter__(self):
        """ Face iterator.

        Yields
        ------
        ~numpy.ndarray
            Next face definition in index order.
        """
        return iter(self._faces)

    def __getitem__(self, index):
        """ Array access.

        Index 0 gives the vertex coordinates, index 1 the face array, as
        for a ``(points, faces)`` pair. Note that unpacking and iteration
        visit faces, see :meth:`__iter__`.

        Parameters
        ----------
        index : int
            Either 0 (points) or 1 (faces).

        Raises
        ------
        IndexError
            If `index` is out of bounds.
        """
        if index == 0:
            return self._points
        elif index == 1:
            return self._faces

        raise IndexError(f'index {index} out of range(0, 2)')

    def __copy__(self):
        return self.copy()

    def __repr__(self):
        return (f'IndexedMesh({self.num_verts} vertices, '
                f'{self.num_faces} faces)')

    @property
    def name(self):
        """ Name tag.

        :type: str or None
        """
        return self._name

    @name.setter
    def name(self, value):
        self._name = value

    @property
    def points(self):
        """ Vertex coordinates.

        :type: ~numpy.ndarray or None
        """
        return self._points

    @property
    def faces(self):
        """ Face definitions.

        :type: ~numpy.ndarray
        """
        return self._faces

    @property
    def simplex_size(self):
        """ Number of vertices per face.

        :type: int
        """
        return self._faces.shape[1]

    @property
    def num_verts(self):
        """ Number of vertices.

        Equals ``max(F) + 1`` for meshes without vertex coordinates.

        :type: int
        """
        if self._points is not None:
            return len(self._points)

        return vertex_count(self._faces)

    @property
    def num_faces(self):
        """ Number of faces.

        :type: int
        """
        return len(self._faces)

    @property
    def unreferenced(self):
        """ Flags of vertices that are not referenced by any face.

        :type: ~numpy.ndarray of bool
        """
        used = np.zeros(self.num_verts, dtype=bool)
        used[self._faces.ravel()] = True

        return ~used

    def copy(self):
        """ Mesh copy.

        Returns
        -------
        IndexedMesh
            A copy that does not share any array buffers.
        """
        return IndexedMesh(deepcopy(self._points), self._faces.copy(),
                           name=self._name, quiet=True)

    def check(self):
        """ Manifold check.

        Raises
        ------
        NonManifoldError
            If there is an edge shared by more than two faces or a vertex
            whose incident faces do not form a single fan.
        NotImplementedError
            For tetrahedral meshes.
        """
        from m3topo.manifold import is_edge_manifold, is_vertex_manifold

        if self.simplex_size != 3:
            raise NotImplementedError('manifold check not implemented '
                                      'for tetrahedra')

        ok, BF, *_ = is_edge_manifold(self._faces, return_flags=True)

        if not ok:
            f, c = np.argwhere(~BF)[0]
            raise NonManifoldError(f'edge opposite corner {c} of '
                                   f'face #{f} is non-manifold')

        ok, B = is_vertex_manifold(self._faces, return_flags=True)

        if not ok:
            v = np.flatnonzero(~B)[0]
            raise NonManifoldError(f'vertex #{v} is non-manifold')


class NonManifoldError(Exception):
    """ Manifold exception base class.

    Raised if an operation requires or results in a topological
    configuration that violates the manifold condition.
    """

    pass
