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

""" Visualization using VTK.

Wrapper functions for `VTK <https://vtk.org/doc/nightly/html>`_
functionality. This is not meant as a full featured set of visualization
routines but should serve as a quick way to inspect meshes, boundary
loops, and cuts:

>>> from m3topo import vis
>>> from m3topo.boundary import boundary_loops
>>> vis.mesh(V, F)
>>> vis.loops(V, boundary_loops(F))
>>> vis.show()

Datasets are converted to :class:`vtkPolyData` objects by
:func:`polydata`, :func:`polylines`, and :func:`edge_lines`. These do not
require a render window.
"""

import numpy as np
import vtk

from vtk.util import colors
from vtk.util.numpy_support import numpy_to_vtk


# Actors added via mesh(), loops(), and edges(). They are rendered by the
# next call of show() and removed afterwards.
_actors = []


def _points(points):
    """ Conversion to vtkPoints.

    Two-dimensional points, e.g., parameter domain coordinates, are
    embedded into the plane z = 0.
    """
    P = np.asarray(points, dtype=np.float64)

    if P.ndim != 2 or P.shape[1] not in (2, 3):
        raise ValueError(f'expected 2d or 3d points, got shape {P.shape}')

    if P.shape[1] == 2:
        P = np.column_stack((P, np.zeros(len(P))))

    vtk_points = vtk.vtkPoints()
    vtk_points.SetData(numpy_to_vtk(np.ascontiguousarray(P), deep=True))

    return vtk_points


def _cells(cells):
    """ Conversion of a sequence of index lists to vtkCellArray.
    """
    vtk_cells = vtk.vtkCellArray()

    for cell in cells:
        ids = vtk.vtkIdList()

        for v in cell:
            ids.InsertNextId(int(v))

        vtk_cells.InsertNextCell(ids)

    return vtk_cells


def polydata(points, faces):
    """ Mesh conversion.

    Parameters
    ----------
    points : array_like, shape (n, 3)
        Vertex coordinates.
    faces : array_like, shape (m, 3)
        List of triangles.

    Returns
    -------
    vtkPolyData
        Polygonal dataset with one polygon per face.
    """
    data = vtk.vtkPolyData()
    data.SetPoints(_points(points))
    data.SetPolys(_cells(np.asarray(faces).tolist()))

    return data


def polylines(points, loops, closed=True):
    """ Boundary loop conversion.

    Parameters
    ----------
    points : array_like, shape (n, 3)
        Vertex coordinates.
    loops : list[array_like]
        Vertex index sequences, e.g., as returned by
        :func:`~m3topo.boundary.boundary_loops`.
    closed : bool, optional
        Connect the last vertex of each loop to its first.

    Returns
    -------
    vtkPolyData
        Dataset with one polyline per loop.
    """
    lines = []

    for loop in loops:
        loop = [int(v) for v in loop]

        if closed and len(loop) > 1:
            loop.append(loop[0])

        lines.append(loop)

    data = vtk.vtkPolyData()
    data.SetPoints(_points(points))
    data.SetLines(_cells(lines))

    return data


def edge_lines(points, faces, flags):
    """ Local edge conversion.

    Parameters
    ----------
    points : array_like, shape (n, 3)
        Vertex coordinates.
    faces : array_like, shape (m, 3)
        List of triangles.
    flags : array_like, shape (m, 3)
        Flags of local edges to convert, e.g., cut flags or the boundary
        edges ``TT == -1``.

    Returns
    -------
    vtkPolyData
        Dataset with one line segment per flagged local edge.
    """
    F = np.asarray(faces)
    flags = np.asarray(flags, dtype=bool)

    if flags.shape != F.shape:
        raise ValueError(f'flags of shape {flags.shape} do not match '
                         f'face shape {F.shape}')

    src = F[flags]
    dst = np.roll(F, -1, axis=1)[flags]

    data = vtk.vtkPolyData()
    data.SetPoints(_points(points))
    data.SetLines(_cells(zip(src.tolist(), dst.tolist())))

    return data


def _actor(data, color, width=None):
    mapper = vtk.vtkPolyDataMapper()
    mapper.SetInputData(data)

    actor = vtk.vtkActor()
    actor.SetMapper(mapper)
    actor.GetProperty().SetColor(color[0], color[1], color[2])

    if width is not None:
        actor.GetProperty().SetLineWidth(width)
        actor.GetProperty().SetRenderLinesAsTubes(True)

    return actor


def mesh(points, faces, edges=True, color=colors.snow):
    """ Mesh visualization.

    Parameters
    ----------
    points : array_like, shape (n, 3)
        Vertex coordinates.
    faces : array_like, shape (m, 3)
        List of triangles.
    edges : bool, optional
        Render mesh edges.
    color : array_like, shape (3, ), optional
        RGB color triple.

    Returns
    -------
    vtkActor
        The corresponding actor object.
    """
    actor = _actor(polydata(points, faces), color)

    if edges:
        actor.GetProperty().EdgeVisibilityOn()
        actor.GetProperty().SetEdgeColor(*colors.dim_grey)

    _actors.append(actor)
    return actor


def loops(points, L, width=3.0, color=colors.red):
    """ Boundary loop visualization.

    Parameters
    ----------
    points : array_like, shape (n, 3)
        Vertex coordinates.
    L : list[array_like]
        Vertex index sequences, one per loop.
    width : float, optional
        Width of line segments in screen units.
    color : array_like, shape (3, ), optional
        RGB color triple.

    Returns
    -------
    vtkActor
        The corresponding actor object.
    """
    actor = _actor(polylines(points, L), color, width)

    _actors.append(actor)
    return actor


def edges(points, faces, flags, width=3.0, color=colors.blue):
    """ Local edge visualization.

    Parameters
    ----------
    points : array_like, shape (n, 3)
        Vertex coordinates.
    faces : array_like, shape (m, 3)
        List of triangles.
    flags : array_like, shape (m, 3)
        Flags of local edges to display.
    width : float, optional
        Width of line segments in screen units.
    color : array_like, shape (3, ), optional
        RGB color triple.

    Returns
    -------
    vtkActor
        The corresponding actor object.
    """
    actor = _actor(edge_lines(points, faces, flags), color, width)

    _actors.append(actor)
    return actor


def show(width=1200, height=600, title=None, color=colors.white):
    """ Start the VTK event loop.

    Open a window that renders all actors created since the last call
    and start the VTK event loop. This is a blocking function.

    Parameters
    ----------
    width : int, optional
        Window width in pixels.
    height : int, optional
        Window height in pixels.
    title : str, optional
        Window title.
    color : array_like, shape (3, ), optional
        Background color.
    """
    renderer = vtk.vtkRenderer()
    renderer.SetBackground(*color)

    for actor in _actors:
        renderer.AddActor(actor)

    renwin = vtk.vtkRenderWindow()
    renwin.AddRenderer(renderer)
    renwin.SetSize(width, height)
    renwin.SetWindowName(title or 'm3topo')

    iren = vtk.vtkRenderWindowInteractor()
    iren.SetRenderWindow(renwin)
    iren.SetInteractorStyle(vtk.vtkInteractorStyleTrackballCamera())

    renderer.ResetCamera()
    renwin.Render()
    iren.Start()

    _actors.clear()
