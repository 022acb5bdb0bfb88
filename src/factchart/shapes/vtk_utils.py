"""
VTK and Geometry Utilities
Helper functions turning point arrays into pyvista PolyData for the shape generators.
"""
from typing import Optional

import numpy as np
import numpy.typing as npt
import pyvista as pv

import logging

logger = logging.getLogger(__name__)

# Segments shorter than this are treated as degenerate and produce no mesh
MIN_SEGMENT_LENGTH = 1e-9


class VtkUtils:
    @staticmethod
    def polyline_to_polydata(points: npt.ArrayLike) -> pv.PolyData:
        """Convert an (N, 3) array of points to a single PolyData polyline."""
        pts = np.asarray(points, dtype=np.float64).reshape(-1, 3)
        n = pts.shape[0]
        if n < 2:
            return pv.PolyData()
        return pv.PolyData(pts, lines=np.hstack([[n], np.arange(n, dtype=np.int_)]))

    @staticmethod
    def segments_to_polydata(starts: npt.ArrayLike, ends: npt.ArrayLike) -> pv.PolyData:
        """
        Convert matching (N, 3) start/end arrays into N independent line cells.
        """
        s = np.asarray(starts, dtype=np.float64).reshape(-1, 3)
        e = np.asarray(ends, dtype=np.float64).reshape(-1, 3)
        n_lines = s.shape[0]
        if n_lines == 0:
            return pv.PolyData()

        points = np.empty((n_lines * 2, 3), dtype=np.float64)
        points[0::2] = s
        points[1::2] = e

        cells = np.empty((n_lines, 3), dtype=np.int_)
        cells[:, 0] = 2
        cells[:, 1] = np.arange(0, n_lines * 2, 2)
        cells[:, 2] = cells[:, 1] + 1

        return pv.PolyData(points, lines=cells.ravel())

    @staticmethod
    def dashed_polydata(
        points: npt.ArrayLike,
        dash_size: float = 0.1,
        gap_size: float = 0.05
    ) -> pv.PolyData:
        """
        Split a polyline into dash segments of `dash_size` separated by `gap_size`,
        measured along the curve.
        """
        pts = np.asarray(points, dtype=np.float64).reshape(-1, 3)
        if len(pts) < 2 or dash_size <= 0.0:
            return pv.PolyData()

        seg_len = np.linalg.norm(np.diff(pts, axis=0), axis=1)
        arc = np.concatenate(([0.0], np.cumsum(seg_len)))
        total = arc[-1]
        if total < MIN_SEGMENT_LENGTH:
            return pv.PolyData()

        period = dash_size + max(gap_size, 0.0)
        dash_starts = np.arange(0.0, total, period)
        dash_ends = np.minimum(dash_starts + dash_size, total)

        def at(s: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
            return np.c_[
                np.interp(s, arc, pts[:, 0]),
                np.interp(s, arc, pts[:, 1]),
                np.interp(s, arc, pts[:, 2]),
            ]

        return VtkUtils.segments_to_polydata(at(dash_starts), at(dash_ends))

    @staticmethod
    def dotted_polydata(points: npt.ArrayLike, spacing: float = 0.05) -> pv.PolyData:
        """Resample a polyline into evenly spaced vertex points."""
        pts = np.asarray(points, dtype=np.float64).reshape(-1, 3)
        if len(pts) == 0:
            return pv.PolyData()
        if len(pts) == 1 or spacing <= 0.0:
            return pv.PolyData(pts)

        seg_len = np.linalg.norm(np.diff(pts, axis=0), axis=1)
        arc = np.concatenate(([0.0], np.cumsum(seg_len)))
        samples = np.arange(0.0, arc[-1] + 0.5 * spacing, spacing)
        dots = np.c_[
            np.interp(samples, arc, pts[:, 0]),
            np.interp(samples, arc, pts[:, 1]),
            np.interp(samples, arc, pts[:, 2]),
        ]
        return pv.PolyData(dots)

    @staticmethod
    def cylinder_between(
        start: npt.ArrayLike,
        end: npt.ArrayLike,
        radius: float,
        resolution: int = 12
    ) -> Optional[pv.PolyData]:
        """Solid capped cylinder spanning start -> end; None for a degenerate segment."""
        p0 = np.asarray(start, dtype=np.float64)
        p1 = np.asarray(end, dtype=np.float64)
        axis = p1 - p0
        length = float(np.linalg.norm(axis))
        if length < MIN_SEGMENT_LENGTH or radius <= 0.0:
            return None
        return pv.Cylinder(
            center=(p0 + p1) / 2.0,
            direction=axis / length,
            radius=radius,
            height=length,
            resolution=max(3, resolution),
            capping=True,
        )

    @staticmethod
    def triangles_to_polydata(vertices: npt.ArrayLike, triangles: npt.ArrayLike) -> pv.PolyData:
        """Build a surface from (V, 3) vertices and (T, 3) vertex index triples."""
        verts = np.asarray(vertices, dtype=np.float64).reshape(-1, 3)
        tris = np.asarray(triangles, dtype=np.int_).reshape(-1, 3)
        if len(tris) == 0:
            return pv.PolyData(verts)
        faces = np.hstack([np.full((len(tris), 1), 3, dtype=np.int_), tris]).ravel()
        return pv.PolyData(verts, faces=faces)
