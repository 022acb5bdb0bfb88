"""
Ruled Surfaces
==============
Cylindroid, hyperbolic paraboloid and hyperboloid, drawn through their
ruling lines plus light construction overlays (dashed axes, dotted boundaries).

The point generation of each surface is exposed as a separate function so the
geometry can be inspected without building meshes.
"""
from __future__ import annotations

import logging
from typing import Tuple

import numpy as np
import numpy.typing as npt

from factchart.model.geometry_utils import apply_matrix, ellipse_points, shear_matrix
from factchart.shapes.colors import darken, lerp_colors
from factchart.shapes.glyphs import line_node, outline_part
from factchart.shapes.nodes import PartStyle, ShapeNode, ShapePart
from factchart.shapes.options import CylindroidOptions, HyperbolicParaboloidOptions, HyperboloidOptions
from factchart.shapes.registry import ShapeKind, builtin_shape
from factchart.shapes.vtk_utils import VtkUtils

logger = logging.getLogger(__name__)

Points = npt.NDArray[np.float64]

DASH_SIZE = 0.08
DASH_GAP = 0.05
DOT_SPACING = 0.06
DOT_SIZE = 3.0

# Shear applied to the non-orthogonal hyperbolic paraboloid (y += 0.5 x)
SADDLE_SHEAR = shear_matrix(xy=0.5)


def _dashed_part(points: Points, color, label: str) -> ShapePart:
    return ShapePart(
        mesh=VtkUtils.dashed_polydata(points, DASH_SIZE, DASH_GAP),
        color=color,
        style=PartStyle.LINES,
        line_width=1.5,
        label=label,
    )


def _dotted_part(points: Points, color, label: str) -> ShapePart:
    return ShapePart(
        mesh=VtkUtils.dotted_polydata(points, DOT_SPACING),
        color=color,
        style=PartStyle.POINTS,
        point_size=DOT_SIZE,
        label=label,
    )


# ------------------------------------------------------------------------------
# Cylindroid
# ------------------------------------------------------------------------------
def cylindroid_height(theta: npt.ArrayLike, height: float) -> npt.NDArray[np.float64]:
    """z(theta) = (height / 2) * sin(2 * theta)"""
    return (height / 2.0) * np.sin(2.0 * np.asarray(theta, dtype=np.float64))


def cylindroid_rulings(options: CylindroidOptions) -> Tuple[Points, Points]:
    """
    Ruling i (theta = 2*pi*i/n) runs from the z-axis point (0, 0, z) to the
    boundary point (w cos(theta), w sin(theta), z).
    """
    n = options.line_count
    theta = np.arange(n, dtype=np.float64) / max(n, 1) * 2.0 * np.pi
    z = cylindroid_height(theta, options.height)
    starts = np.c_[np.zeros(n), np.zeros(n), z]
    ends = np.c_[options.width * np.cos(theta), options.width * np.sin(theta), z]
    return starts, ends


def cylindroid_boundary(options: CylindroidOptions) -> Points:
    theta = np.linspace(0.0, 2.0 * np.pi, options.boundary_resolution + 1)
    return np.c_[
        options.width * np.cos(theta),
        options.width * np.sin(theta),
        cylindroid_height(theta, options.height),
    ]


@builtin_shape(ShapeKind.CYLINDROID, CylindroidOptions)
def create_cylindroid(options: CylindroidOptions) -> ShapeNode:
    """Rulings shaded from the base color to a darker variant, dashed axis, dotted rim."""
    node = ShapeNode(name="cylindroid")
    starts, ends = cylindroid_rulings(options)
    colors = lerp_colors(options.color, darken(options.color, options.darken), len(starts))

    for start, end, rgb in zip(starts, ends, colors):
        node.add_child(line_node(start, end, tuple(float(c) for c in rgb), options.line_radius))

    half = max(abs(options.height) / 2.0, DASH_SIZE)
    node.add_part(_dashed_part(np.array([[0.0, 0.0, -half], [0.0, 0.0, half]]), options.color, "centerline"))
    if options.width > 0.0:
        node.add_part(_dotted_part(cylindroid_boundary(options), options.color, "boundary"))
    return node


# ------------------------------------------------------------------------------
# Hyperbolic paraboloid
# ------------------------------------------------------------------------------
def saddle_rulings(options: HyperbolicParaboloidOptions) -> Tuple[Points, Points, Points, Points]:
    """
    Both ruling families of z = u * v * 0.5 over [-s/2, s/2]^2.

    Returns:
        (starts_u, ends_u, starts_v, ends_v), each (divisions + 1, 3). Family u
        runs along Y at fixed x = u; family v along X at fixed y = v. The
        non-orthogonal variant shears every endpoint.
    """
    s = options.size
    half = s / 2.0
    u = -half + (np.arange(options.divisions + 1) / options.divisions) * s

    starts_u = np.c_[u, np.full_like(u, -half), u * -half * 0.5]
    ends_u = np.c_[u, np.full_like(u, half), u * half * 0.5]
    starts_v = np.c_[np.full_like(u, -half), u, -half * u * 0.5]
    ends_v = np.c_[np.full_like(u, half), u, half * u * 0.5]

    if not options.is_orthogonal:
        starts_u, ends_u, starts_v, ends_v = (
            apply_matrix(p, SADDLE_SHEAR) for p in (starts_u, ends_u, starts_v, ends_v)
        )
    return starts_u, ends_u, starts_v, ends_v


def saddle_connectors(starts_u: Points, ends_u: Points) -> Tuple[Points, Points]:
    """
    Diagonals of the skew quadrilateral spanned by the outermost u-rulings.

    The first joins the two raised corners, the second the two lowered ones.
    Both chords leave the surface everywhere except at their end corners.
    """
    return (
        np.array([starts_u[0], ends_u[-1]]),
        np.array([ends_u[0], starts_u[-1]]),
    )


@builtin_shape(ShapeKind.HYPERBOLIC_PARABOLOID, HyperbolicParaboloidOptions)
def create_hyperbolic_paraboloid(options: HyperbolicParaboloidOptions) -> ShapeNode:
    """
    Two ruling families, a dashed central axis and dotted diagonals joining
    the corners of the outermost rulings. No filled surface is drawn.
    """
    node = ShapeNode(name="hyperbolicParaboloid")
    starts_u, ends_u, starts_v, ends_v = saddle_rulings(options)

    for start, end in zip(np.vstack([starts_u, starts_v]), np.vstack([ends_u, ends_v])):
        node.add_child(line_node(start, end, options.color, options.line_radius))

    half = max(options.size / 2.0, DASH_SIZE)
    node.add_part(_dashed_part(np.array([[0.0, 0.0, -half], [0.0, 0.0, half]]), options.color, "axis"))
    raised, lowered = saddle_connectors(starts_u, ends_u)
    node.add_part(_dotted_part(raised, options.color, "connector-raised"))
    node.add_part(_dotted_part(lowered, options.color, "connector-lowered"))
    return node


# ------------------------------------------------------------------------------
# Hyperboloid
# ------------------------------------------------------------------------------
def _hyperboloid_rim_points(options: HyperboloidOptions) -> Tuple[Points, Points]:
    """Top and bottom points for angular steps i = 0..n (the seam is revisited at i = n)."""
    n = options.line_count
    half = options.height / 2.0
    theta_top = np.arange(n + 1, dtype=np.float64) / n * 2.0 * np.pi
    theta_bottom = theta_top + options.twist_angle
    top = np.c_[
        options.radius_x * np.cos(theta_top),
        np.full(n + 1, half),
        options.radius_z * np.sin(theta_top),
    ]
    bottom = np.c_[
        options.radius_x * np.cos(theta_bottom),
        np.full(n + 1, -half),
        options.radius_z * np.sin(theta_bottom),
    ]
    return top, bottom


def hyperboloid_rulings(options: HyperboloidOptions) -> Tuple[Points, Points]:
    """
    Rulings joining top point theta1 = 2*pi*i/n to bottom point theta1 + twist,
    for i = 0..n inclusive: the last ruling repeats the first one at the seam.
    """
    return _hyperboloid_rim_points(options)


def hyperboloid_surface(options: HyperboloidOptions) -> Tuple[Points, npt.NDArray[np.int_]]:
    """
    Triangulated lateral surface.

    Vertices are emitted interleaved per angular step, 2 * (n + 1) in total.
    For a non-negative twist each step emits (top, bottom), for a negative
    twist (bottom, top). The triangle winding is reversed together with the
    emission order, so the normals point outward for either twist sign.

    Returns:
        (vertices (2n+2, 3), triangles (2n, 3))
    """
    n = options.line_count
    top, bottom = _hyperboloid_rim_points(options)
    first, second = (top, bottom) if options.twist_angle >= 0.0 else (bottom, top)

    vertices = np.empty((2 * (n + 1), 3), dtype=np.float64)
    vertices[0::2] = first
    vertices[1::2] = second

    a = 2 * np.arange(n)
    triangles = np.empty((2 * n, 3), dtype=np.int_)
    if options.twist_angle >= 0.0:
        triangles[0::2] = np.c_[a, a + 2, a + 1]
        triangles[1::2] = np.c_[a + 2, a + 3, a + 1]
    else:
        triangles[0::2] = np.c_[a, a + 1, a + 2]
        triangles[1::2] = np.c_[a + 2, a + 1, a + 3]
    return vertices, triangles


@builtin_shape(ShapeKind.HYPERBOLOID, HyperboloidOptions)
def create_hyperboloid(options: HyperboloidOptions) -> ShapeNode:
    """Rulings, translucent lateral surface and top/bottom boundary ellipses."""
    node = ShapeNode(name="hyperboloid")

    starts, ends = hyperboloid_rulings(options)
    for start, end in zip(starts, ends):
        node.add_child(line_node(start, end, options.color, options.line_radius))

    vertices, triangles = hyperboloid_surface(options)
    node.add_part(ShapePart(
        mesh=VtkUtils.triangles_to_polydata(vertices, triangles),
        color=options.color,
        opacity=options.opacity,
        label="surface",
    ))

    half = options.height / 2.0
    for offset, label in ((half, "top-ring"), (-half, "bottom-ring")):
        ring = ellipse_points(
            options.radius_x, options.radius_z, options.circle_resolution, plane="xz", offset=offset
        )
        node.add_part(outline_part(ring, options.color, label))
    return node
