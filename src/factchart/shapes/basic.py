"""
Basic Shapes
============
Disk, plane, plane of parallel lines, box of parallel lines, hoop and sphere.

Planar shapes are modelled in the XY plane (canonical normal +Z) and turned
onto the optional `normal` option with the minimal alignment rotation.
"""
from __future__ import annotations

import logging

import numpy as np
import numpy.typing as npt
import pyvista as pv

from factchart.model.geometry_utils import alignment_matrix, ellipse_points, golden_angle_points
from factchart.shapes.glyphs import line_node, outline_part, radiating_node
from factchart.shapes.nodes import PartStyle, ShapeNode, ShapePart
from factchart.shapes.options import (
    BoxOfParallelLinesOptions, DiskOptions, HoopOptions, PlaneOfParallelLinesOptions,
    PlaneOptions, SphereOptions
)
from factchart.shapes.registry import ShapeKind, builtin_shape
from factchart.shapes.vtk_utils import VtkUtils

logger = logging.getLogger(__name__)

PLANAR_AXIS = np.array([0.0, 0.0, 1.0])


def _orient(node: ShapeNode, normal) -> ShapeNode:
    if normal is not None:
        node.orientation = alignment_matrix(PLANAR_AXIS, normal.to_array())
    return node


def _square_outline(size: float) -> npt.NDArray[np.float64]:
    h = size / 2.0
    return np.array([
        [-h, -h, 0.0],
        [h, -h, 0.0],
        [h, h, 0.0],
        [-h, h, 0.0],
        [-h, -h, 0.0],
    ])


def _square_fill(size: float, color, opacity: float) -> ShapePart:
    plane = pv.Plane(
        center=(0.0, 0.0, 0.0),
        direction=tuple(PLANAR_AXIS),
        i_size=size,
        j_size=size,
        i_resolution=1,
        j_resolution=1,
    )
    return ShapePart(mesh=plane, color=color, opacity=opacity, label="fill")


@builtin_shape(ShapeKind.DISK, DiskOptions)
def create_disk(options: DiskOptions) -> ShapeNode:
    """Translucent filled circle, outline ring and `lineCount` spokes."""
    node = ShapeNode(name="disk")
    r = options.radius
    if r > 0.0:
        fill = pv.Disc(
            center=(0.0, 0.0, 0.0),
            inner=0.0,
            outer=r,
            normal=tuple(PLANAR_AXIS),
            r_res=1,
            c_res=options.circle_resolution,
        )
        node.add_part(ShapePart(mesh=fill, color=options.color, opacity=options.opacity, label="fill"))
        node.add_part(outline_part(
            ellipse_points(r, r, options.circle_resolution, plane="xy"), options.color, "rim"
        ))

    center = np.zeros(3)
    for i in range(options.line_count):
        angle = (i / options.line_count) * 2.0 * np.pi
        edge = np.array([r * np.cos(angle), r * np.sin(angle), 0.0])
        node.add_child(radiating_node(
            options.line_type, center, edge, options.color, options.line_radius, scale=min(r, 1.0)
        ))

    return _orient(node, options.normal)


@builtin_shape(ShapeKind.PLANE, PlaneOptions)
def create_plane(options: PlaneOptions) -> ShapeNode:
    """Translucent square with a colored border."""
    node = ShapeNode(name="plane")
    if options.size > 0.0:
        node.add_part(_square_fill(options.size, options.color, options.opacity))
        node.add_part(outline_part(_square_outline(options.size), options.color, "border"))
    return _orient(node, options.normal)


@builtin_shape(ShapeKind.PLANE_OF_PARALLEL_LINES, PlaneOfParallelLinesOptions)
def create_plane_of_parallel_lines(options: PlaneOfParallelLinesOptions) -> ShapeNode:
    """Backing square, border and `divisions + 1` evenly spaced lines along Y."""
    node = ShapeNode(name="planeOfParallelLines")
    size = options.size
    half = size / 2.0
    if size > 0.0:
        node.add_part(_square_fill(size, options.color, options.opacity))
        node.add_part(outline_part(_square_outline(size), options.color, "border"))

    for i in range(options.divisions + 1):
        x = -half + (i / options.divisions) * size
        node.add_child(line_node((x, -half, 0.0), (x, half, 0.0), options.color, options.line_radius))

    return _orient(node, options.normal)


def box_grid_positions(divisions: int, size: float) -> list[tuple[float, float]]:
    """
    (x, z) positions of the interior lines of a box of parallel lines.

    The four corner positions are skipped; the cube wireframe already has an
    edge there.
    """
    half = size / 2.0
    positions = []
    for i in range(divisions + 1):
        for j in range(divisions + 1):
            if i in (0, divisions) and j in (0, divisions):
                continue
            x = -half + (i / divisions) * size
            z = -half + (j / divisions) * size
            positions.append((x, z))
    return positions


def cube_edges(size: float) -> tuple[np.ndarray, np.ndarray]:
    """Start and end points of the 12 edges of an origin-centred cube."""
    h = size / 2.0
    corners = np.array([
        [x, y, z] for x in (-h, h) for y in (-h, h) for z in (-h, h)
    ])
    starts, ends = [], []
    for a in range(8):
        for b in range(a + 1, 8):
            # Edges join corners differing in exactly one coordinate
            if np.count_nonzero(corners[a] != corners[b]) == 1:
                starts.append(corners[a])
                ends.append(corners[b])
    return np.array(starts), np.array(ends)


@builtin_shape(ShapeKind.BOX_OF_PARALLEL_LINES, BoxOfParallelLinesOptions)
def create_box_of_parallel_lines(options: BoxOfParallelLinesOptions) -> ShapeNode:
    """Cube wireframe plus a grid of vertical (Y) lines filling the box."""
    node = ShapeNode(name="boxOfParallelLines")
    size = options.size
    half = size / 2.0
    if size > 0.0:
        starts, ends = cube_edges(size)
        node.add_part(ShapePart(
            mesh=VtkUtils.segments_to_polydata(starts, ends),
            color=options.color,
            style=PartStyle.LINES,
            line_width=2.0,
            label="wireframe",
        ))

    for x, z in box_grid_positions(options.divisions, size):
        node.add_child(line_node((x, -half, z), (x, half, z), options.color, options.line_radius))

    return node


@builtin_shape(ShapeKind.HOOP, HoopOptions)
def create_hoop(options: HoopOptions) -> ShapeNode:
    """Vertical lines evenly spaced around a circle of `radius`."""
    node = ShapeNode(name="hoop")
    half_height = options.height / 2.0
    for i in range(options.line_count):
        angle = (i / options.line_count) * 2.0 * np.pi
        x = options.radius * np.cos(angle)
        z = options.radius * np.sin(angle)
        node.add_child(line_node((x, -half_height, z), (x, half_height, z), options.color, options.line_radius))
    return node


def sphere_endpoints(options: SphereOptions) -> npt.NDArray[np.float64]:
    """Outer ends of the radiating elements (with antipodes when mirrored)."""
    points = golden_angle_points(options.line_count, options.radius)
    if options.mirrored:
        points = np.vstack([points, -points])
    return points


@builtin_shape(ShapeKind.SPHERE, SphereOptions)
def create_sphere(options: SphereOptions) -> ShapeNode:
    """
    Equatorial (XZ), sagittal (YZ) and coronal (XY) great circles plus one
    radiating element per golden-angle point.
    """
    node = ShapeNode(name="sphere")
    r = options.radius
    if r > 0.0:
        for plane, label in (("xz", "equator"), ("yz", "sagittal"), ("xy", "coronal")):
            node.add_part(outline_part(
                ellipse_points(r, r, options.circle_resolution, plane=plane), options.color, label
            ))

    center = np.zeros(3)
    for point in sphere_endpoints(options):
        node.add_child(radiating_node(
            options.line_type, center, point, options.color, options.line_radius, scale=min(r, 1.0) * 0.6
        ))
    return node
