"""
Lines and Vector Glyphs
=======================
The plain line primitive plus the two glyphs drawn for unit motions:

* translation - bold line with cone arrowheads,
* moment (torque / rotation) - bold line with a double-headed torus arc symbol.

Arrowheads and arc symbols are modelled along a canonical local axis and then
turned onto the line direction with the minimal alignment rotation.
"""
from __future__ import annotations

import logging
from typing import Optional

import numpy as np
import numpy.typing as npt
import pyvista as pv

from factchart.model.geometry_primitives import Vector
from factchart.model.geometry_utils import alignment_matrix, normalized
from factchart.shapes.colors import NEUTRAL_GLYPH_COLOR, RGB
from factchart.shapes.nodes import PartStyle, ShapeNode, ShapePart
from factchart.shapes.options import LineOptions, LineType, MomentOptions, TranslationOptions
from factchart.shapes.registry import ShapeKind, builtin_shape
from factchart.shapes.vtk_utils import MIN_SEGMENT_LENGTH, VtkUtils

logger = logging.getLogger(__name__)

# Canonical axis of cone arrowheads and of the moment arc symbol
GLYPH_AXIS = np.array([0.0, 1.0, 0.0])
# Angular extent of the moment arc, radians
MOMENT_ARC_SPAN = 1.5 * np.pi
MOMENT_ARC_SEGMENTS = 48
ARROWHEAD_RESOLUTION = 16


def line_node(
    start: npt.ArrayLike,
    end: npt.ArrayLike,
    color: RGB,
    radius: float,
    name: str = "line"
) -> ShapeNode:
    """A node with one solid cylinder; empty if the segment is degenerate."""
    node = ShapeNode(name=name)
    mesh = VtkUtils.cylinder_between(start, end, radius)
    if mesh is not None:
        node.add_part(ShapePart(mesh=mesh, color=color, label=name))
    return node


def arrowhead_node(tip: npt.ArrayLike, direction: npt.ArrayLike, length: float, radius: float, color: RGB) -> ShapeNode:
    """Cone whose tip sits at `tip`, pointing along `direction`."""
    unit = normalized(direction)
    cone = pv.Cone(
        center=(0.0, 0.0, 0.0),
        direction=tuple(GLYPH_AXIS),
        height=length,
        radius=radius,
        resolution=ARROWHEAD_RESOLUTION,
    )
    return ShapeNode(
        name="arrowhead",
        parts=[ShapePart(mesh=cone, color=color, label="arrowhead")],
        position=np.asarray(tip, dtype=np.float64) - unit * (length / 2.0),
        orientation=alignment_matrix(GLYPH_AXIS, unit),
    )


def moment_symbol_node(
    center: npt.ArrayLike,
    axis: npt.ArrayLike,
    options: MomentOptions
) -> ShapeNode:
    """
    Torus arc around `axis` with two arrowheads turning the same way
    (right-hand rule about the axis).
    """
    r = options.symbol_radius
    node = ShapeNode(
        name="moment-symbol",
        position=np.asarray(center, dtype=np.float64),
        orientation=alignment_matrix(GLYPH_AXIS, axis),
    )
    if r <= 0.0:
        return node

    # Arc in the local XZ plane; theta runs from +Z towards +X, i.e. counter-
    # clockwise seen from +Y
    theta = np.linspace(0.0, MOMENT_ARC_SPAN, MOMENT_ARC_SEGMENTS + 1)
    arc = np.c_[r * np.sin(theta), np.zeros_like(theta), r * np.cos(theta)]
    tube_radius = max(options.radius * 0.5, 1e-4)
    tube = VtkUtils.polyline_to_polydata(arc).tube(radius=tube_radius, n_sides=8)
    node.add_part(ShapePart(mesh=tube, color=options.color, label="moment-arc"))

    for angle in (MOMENT_ARC_SPAN / 2.0, MOMENT_ARC_SPAN):
        point = np.array([r * np.sin(angle), 0.0, r * np.cos(angle)])
        tangent = np.array([np.cos(angle), 0.0, -np.sin(angle)])
        node.add_child(arrowhead_node(
            point + tangent * options.head_length,
            tangent,
            options.head_length,
            options.head_radius,
            options.color,
        ))
    return node


@builtin_shape(ShapeKind.LINE, LineOptions)
def create_line(options: LineOptions) -> ShapeNode:
    return line_node(options.start.to_array(), options.end.to_array(), options.color, options.radius)


@builtin_shape(ShapeKind.TRANSLATION, TranslationOptions)
def create_translation(options: TranslationOptions) -> ShapeNode:
    """Bold line, arrowhead at the far end and (unless only_end) at the near end."""
    start = options.start.to_array()
    end = options.end.to_array()
    node = line_node(start, end, NEUTRAL_GLYPH_COLOR, options.radius, name="translation")

    direction = end - start
    if np.linalg.norm(direction) < MIN_SEGMENT_LENGTH:
        return node

    node.add_child(arrowhead_node(end, direction, options.head_length, options.head_radius, NEUTRAL_GLYPH_COLOR))
    if not options.only_end:
        node.add_child(arrowhead_node(start, -direction, options.head_length, options.head_radius, NEUTRAL_GLYPH_COLOR))
    return node


@builtin_shape(ShapeKind.MOMENT, MomentOptions)
def create_moment(options: MomentOptions) -> ShapeNode:
    """Bold line, arc symbol at the far end and (unless only_end) at the near end."""
    start = options.start.to_array()
    end = options.end.to_array()
    node = line_node(start, end, options.color, options.radius, name="moment")

    direction = end - start
    if np.linalg.norm(direction) < MIN_SEGMENT_LENGTH:
        return node

    node.add_child(moment_symbol_node(end, direction, options))
    if not options.only_end:
        node.add_child(moment_symbol_node(start, -direction, options))
    return node


def radiating_node(
    line_type: LineType,
    start: npt.ArrayLike,
    end: npt.ArrayLike,
    color: RGB,
    radius: float,
    scale: Optional[float] = None
) -> ShapeNode:
    """
    One spoke of a disk or sphere. Glyph spokes only mark the outer end;
    `scale` shrinks glyph heads for small shapes.
    """
    if line_type == LineType.LINE:
        return line_node(start, end, color, radius)

    s = 1.0 if scale is None else scale
    if line_type == LineType.TRANSLATION:
        defaults = TranslationOptions()
        return create_translation(TranslationOptions(
            start=Vector.from_sequence(start),
            end=Vector.from_sequence(end),
            only_end=True,
            radius=defaults.radius * s,
            head_length=defaults.head_length * s,
            head_radius=defaults.head_radius * s,
        ))

    defaults = MomentOptions()
    return create_moment(MomentOptions(
        start=Vector.from_sequence(start),
        end=Vector.from_sequence(end),
        only_end=True,
        color=color,
        radius=defaults.radius * s,
        symbol_radius=defaults.symbol_radius * s,
        head_length=defaults.head_length * s,
        head_radius=defaults.head_radius * s,
    ))


def outline_part(points: npt.ArrayLike, color: RGB, label: str, line_width: float = 2.0) -> ShapePart:
    """Thin polyline overlay (rings, borders)."""
    return ShapePart(
        mesh=VtkUtils.polyline_to_polydata(points),
        color=color,
        style=PartStyle.LINES,
        line_width=line_width,
        label=label,
    )
