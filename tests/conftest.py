"""Pytest fixtures: small meshes with known topology."""

import numpy as np
import pytest


@pytest.fixture
def triangle():
    """A single triangle, all edges on the boundary."""
    V = np.array([[0.0, 0.0, 0.0], [1.0, 0.0, 0.0], [0.0, 1.0, 0.0]])
    F = np.array([[0, 1, 2]])
    return V, F


@pytest.fixture
def strip():
    """Two triangles sharing the edge (1, 2)."""
    V = np.array([[0.0, 0.0, 0.0], [1.0, 0.0, 0.0],
                  [0.0, 1.0, 0.0], [1.0, 1.0, 0.0]])
    F = np.array([[0, 1, 2], [2, 1, 3]])
    return V, F


@pytest.fixture
def square():
    """Unit square split along the diagonal (0, 2)."""
    V = np.array([[0.0, 0.0, 0.0], [1.0, 0.0, 0.0],
                  [1.0, 1.0, 0.0], [0.0, 1.0, 0.0]])
    F = np.array([[0, 1, 2], [0, 2, 3]])
    return V, F


@pytest.fixture
def tetrahedron():
    """Closed, outward oriented boundary of a tetrahedron."""
    V = np.array([[0.0, 0.0, 0.0], [1.0, 0.0, 0.0],
                  [0.0, 1.0, 0.0], [0.0, 0.0, 1.0]])
    F = np.array([[0, 2, 1], [0, 1, 3], [0, 3, 2], [1, 2, 3]])
    return V, F


@pytest.fixture
def octahedron():
    """Closed octahedron, apex 0 and 5, equator 1, 2, 3, 4."""
    V = np.array([[0.0, 0.0, 1.0],
                  [1.0, 0.0, 0.0], [0.0, 1.0, 0.0],
                  [-1.0, 0.0, 0.0], [0.0, -1.0, 0.0],
                  [0.0, 0.0, -1.0]])
    F = np.array([[0, 1, 2], [0, 2, 3], [0, 3, 4], [0, 4, 1],
                  [5, 2, 1], [5, 3, 2], [5, 4, 3], [5, 1, 4]])
    return V, F


@pytest.fixture
def icosahedron():
    """Closed icosahedron."""
    t = (1.0 + np.sqrt(5.0)) / 2.0
    V = np.array([[-1, t, 0], [1, t, 0], [-1, -t, 0], [1, -t, 0],
                  [0, -1, t], [0, 1, t], [0, -1, -t], [0, 1, -t],
                  [t, 0, -1], [t, 0, 1], [-t, 0, -1], [-t, 0, 1]])
    F = np.array([[0, 11, 5], [0, 5, 1], [0, 1, 7], [0, 7, 10],
                  [0, 10, 11], [1, 5, 9], [5, 11, 4], [11, 10, 2],
                  [10, 7, 6], [7, 1, 8], [3, 9, 4], [3, 4, 2],
                  [3, 2, 6], [3, 6, 8], [3, 8, 9], [4, 9, 5],
                  [2, 4, 11], [6, 2, 10], [8, 6, 7], [9, 8, 1]])
    return V, F


@pytest.fixture
def grid():
    """3x3 vertex grid, 8 triangles, interior vertex 4.

    Vertex i + 3j sits at (i, j). Faces are listed quad by quad.
    """
    V = np.array([[i, j, 0.0] for j in range(3) for i in range(3)],
                 dtype=np.float64)
    F = np.array([[0, 1, 4], [0, 4, 3],
                  [1, 2, 5], [1, 5, 4],
                  [3, 4, 7], [3, 7, 6],
                  [4, 5, 8], [4, 8, 7]])
    return V, F


@pytest.fixture
def bowtie():
    """Two triangles sharing only vertex 0."""
    return np.array([[0, 1, 2], [0, 3, 4]])


@pytest.fixture
def fin():
    """Three triangles sharing the edge (0, 1)."""
    return np.array([[0, 1, 2], [1, 0, 3], [0, 1, 4]])


@pytest.fixture
def tet():
    """A single tetrahedral element."""
    return np.array([[0, 1, 2, 3]])


@pytest.fixture(params=['tetrahedron', 'octahedron', 'icosahedron',
                        'grid', 'strip', 'square'])
def manifold_mesh(request):
    """Consistently oriented manifold meshes, with and without boundary."""
    return request.getfixturevalue(request.param)
