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

""" Cell-tuple halfedge iterator.

Local navigation on triangle meshes given as a face array ``F`` and its
triangle-triangle adjacency ``(TT, TTi)``, see
:func:`~m3topo.adjacency.triangle_triangle_adjacency`. This is not a
classical halfedge data structure. Following the cell-tuple approach of
Brisson (1989), *Representing geometric structures in d dimensions:
topology and order*, a position on the mesh is a tuple

    (face, local edge, reverse)

that identifies a face, one of its edges, and one of the edge's
vertices. Each of the atomic operations :meth:`~HalfEdgeIterator.flip_f`,
:meth:`~HalfEdgeIterator.flip_e`, and :meth:`~HalfEdgeIterator.flip_v`
changes exactly one of the three items.

Note
----
Iterators never copy the arrays they are constructed from. Changing the
arrays while an iterator is in use changes how it navigates, which is
exactly what :func:`~m3topo.cut.cut_mesh` relies on.
"""


class HalfEdgeIterator:
    """ Cell-tuple iterator.

    Parameters
    ----------
    F : ~numpy.ndarray, shape (m, 3)
        Face array.
    TT : ~numpy.ndarray, shape (m, 3)
        Triangle-triangle adjacency.
    TTi : ~numpy.ndarray, shape (m, 3)
        Inverse triangle-triangle adjacency.
    fi : int
        Face index.
    ei : int
        Local edge index, the edge from corner `ei` to corner
        ``(ei + 1) % 3``.
    reverse : bool, optional
        Selects the edge's target instead of its origin as the current
        vertex.
    """

    def __init__(self, F, TT, TTi, fi, ei, reverse=False):
        if not 0 <= ei <= 2:
            raise ValueError(f'local edge index {ei} out of range(0, 3)')

        self._F = F
        self._TT = TT
        self._TTi = TTi

        self._fi = int(fi)
        self._ei = int(ei)
        self._reverse = bool(reverse)

    def __repr__(self):
        return (f'HalfEdgeIterator(fi={self._fi}, ei={self._ei}, '
                f'reverse={self._reverse})')

    def __eq__(self, other):
        """ Structural equality.

        Iterators are equal if they are in the same state and navigate
        the very same arrays.
        """
        if not isinstance(other, HalfEdgeIterator):
            return NotImplemented

        return (self._fi == other._fi and
                self._ei == other._ei and
                self._reverse == other._reverse and
                self._F is other._F and
                self._TT is other._TT and
                self._TTi is other._TTi)

    def __copy__(self):
        return self.copy()

    def copy(self):
        """ Iterator copy.

        Returns
        -------
        HalfEdgeIterator
            An iterator in the same state that shares the arrays.
        """
        return HalfEdgeIterator(self._F, self._TT, self._TTi,
                                self._fi, self._ei, self._reverse)

    @property
    def fi(self):
        """ Current face index.

        :type: int
        """
        return self._fi

    @property
    def ei(self):
        """ Current local edge index.

        :type: int
        """
        return self._ei

    @property
    def reverse(self):
        """ Orientation flag.

        :type: bool
        """
        return self._reverse

    @property
    def vi(self):
        """ Current vertex index.

        The origin ``F[fi, ei]`` of the current edge, or its target
        ``F[fi, (ei + 1) % 3]`` if reversed.

        :type: int
        """
        assert 0 <= self._fi < len(self._F)

        if not self._reverse:
            return int(self._F[self._fi, self._ei])

        return int(self._F[self._fi, (self._ei + 1) % 3])

    def is_border(self):
        """ Boundary test.

        Returns
        -------
        bool
            :obj:`True` if the current edge is a boundary edge.
        """
        return bool(self._TT[self._fi, self._ei] == -1)

    def flip_f(self):
        """ Change face.

        Move to the face on the other side of the current edge. Nothing
        happens on a boundary edge.
        """
        if self.is_border():
            return

        fin = int(self._TT[self._fi, self._ei])
        ein = int(self._TTi[self._fi, self._ei])

        # Only consistently oriented meshes have valid inverse adjacency
        # entries for all interior edges.
        assert ein >= 0

        self._fi = fin
        self._ei = ein
        self._reverse = not self._reverse

    def flip_e(self):
        """ Change edge.

        Move to the other edge of the current face that is incident to
        the current vertex.
        """
        if not self._reverse:
            self._ei = (self._ei + 2) % 3
        else:
            self._ei = (self._ei + 1) % 3

        self._reverse = not self._reverse

    def flip_v(self):
        """ Change vertex.

        Make the other endpoint of the current edge the current vertex.
        """
        self._reverse = not self._reverse

    def next_fe(self):
        """ Next face and edge around the current vertex.

        Rotate about the current vertex. At the boundary the iterator
        jumps to the opposite boundary edge of the vertex' one-ring.
        In the example below, with the edges left of `a` and right of
        `d` on the boundary, the faces are visited in order
        a, b, c, d, a, b, c, ...

        ::

                _________
               /\\ c | b /\\
              /  \\  |  /  \\
             / d  \\ | / a  \\
            /______\\|/______\\
                    v

        Returns
        -------
        bool
            :obj:`False` if a boundary was skipped.
        """
        if self.is_border():
            while True:
                self.flip_f()
                self.flip_e()

                if self.is_border():
                    break

            self.flip_e()
            return False

        self.flip_f()
        self.flip_e()
        return True


def faces(it):
    """ One-ring face iterator.

    Visits the faces incident to the current vertex of `it` by repeated
    calls of :meth:`~HalfEdgeIterator.next_fe`, starting with the current
    face. The iterator `it` itself is not changed.

    Parameters
    ----------
    it : HalfEdgeIterator
        The start position.

    Yields
    ------
    int
        Next face index. Each incident face is reported once.
    """
    he = it.copy()
    seen = set()

    while he.fi not in seen:
        seen.add(he.fi)
        yield he.fi

        he.next_fe()


def verts(it):
    """ One-ring vertex iterator.

    Visits the vertices adjacent to the current vertex of `it` in the
    order of the one-ring traversal of :func:`faces`. The iterator `it`
    itself is not changed.

    Parameters
    ----------
    it : HalfEdgeIterator
        The start position.

    Yields
    ------
    int
        Next vertex index. Each adjacent vertex is reported once.
    """
    he = it.copy()
    seen = set()
    found = set()

    while he.fi not in seen:
        seen.add(he.fi)

        # Both edges of the face that are incident to the center vertex.
        for flip in (False, True):
            tmp = he.copy()

            if flip:
                tmp.flip_e()

            tmp.flip_v()
            w = tmp.vi

            if w not in found:
                found.add(w)
                yield w

        he.next_fe()
