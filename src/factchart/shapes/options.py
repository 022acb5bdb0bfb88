"""
Shape Options (Defaults & Schema)
=================================
One dataclass per shape kind holding the documented default of every option.

Why is this file needed?
------------------------
1. Defaults: Each shape's defaults live in exactly one place (the dataclass),
   instead of being repeated at every call site.
2. Schema: Field metadata declares how the raw JSON value is validated and
   converted (vector, color, number, integer, flag, choice). Conversion is
   driven by this schema, so a 3-number color triple is never mistaken for a
   vector.
3. Robustness: A missing or malformed field silently falls back to its default
   (logged at DEBUG). Building options never raises.

JSON keys are the camelCase names used by the data file (`lineCount`); the
snake_case attribute name is accepted as well.
"""
from __future__ import annotations

from dataclasses import dataclass, field, fields, Field
from enum import StrEnum
from math import pi
import logging
from typing import Any, Mapping, Optional, Sequence, Tuple, TypeVar

from factchart.model.geometry_primitives import Vector, is_finite_number, is_vector_like
from factchart.shapes.colors import BLACK, NEUTRAL_GLYPH_COLOR, RGB, parse_color

logger = logging.getLogger(__name__)

T = TypeVar("T")


class FieldKind(StrEnum):
    VECTOR = "vector"
    COLOR = "color"
    NUMBER = "number"
    INTEGER = "integer"
    FLAG = "flag"
    CHOICE = "choice"


class LineType(StrEnum):
    """Element drawn for each spoke / radiating line."""
    LINE = "line"
    TRANSLATION = "translation"
    MOMENT = "moment"


# ------------------------------------------------------------------------------
# Field constructors
# ------------------------------------------------------------------------------
def _meta(kind: FieldKind, key: Optional[str], **extra: Any) -> dict:
    return {"kind": kind, "key": key, **extra}


def vector_field(default: Optional[Tuple[float, float, float]], key: Optional[str] = None) -> Any:
    if default is None:
        return field(default=None, metadata=_meta(FieldKind.VECTOR, key, optional=True))
    return field(
        default_factory=lambda: Vector(*default),
        metadata=_meta(FieldKind.VECTOR, key, optional=False),
    )


def color_field(default: RGB, key: Optional[str] = None) -> Any:
    return field(default=default, metadata=_meta(FieldKind.COLOR, key))


def number_field(default: float, key: Optional[str] = None, minimum: Optional[float] = None) -> Any:
    return field(default=default, metadata=_meta(FieldKind.NUMBER, key, minimum=minimum))


def int_field(default: int, key: Optional[str] = None, minimum: Optional[int] = None) -> Any:
    return field(default=default, metadata=_meta(FieldKind.INTEGER, key, minimum=minimum))


def flag_field(default: bool, key: Optional[str] = None) -> Any:
    return field(default=default, metadata=_meta(FieldKind.FLAG, key))


def choice_field(default: StrEnum, choices: type[StrEnum], key: Optional[str] = None) -> Any:
    return field(default=default, metadata=_meta(FieldKind.CHOICE, key, choices=choices))


# ------------------------------------------------------------------------------
# Per-shape defaults
# ------------------------------------------------------------------------------
@dataclass
class LineOptions:
    """Solid thin cylinder from `start` to `end`."""
    start: Vector = vector_field((0.0, 0.0, 0.0))
    end: Vector = vector_field((1.0, 0.0, 0.0))
    color: RGB = color_field(BLACK)
    radius: float = number_field(0.01, minimum=0.0)


@dataclass
class DiskOptions:
    """Translucent unit disk in the XY plane with `lineCount` spokes."""
    radius: float = number_field(1.0, minimum=0.0)
    line_count: int = int_field(12, key="lineCount", minimum=0)
    line_type: LineType = choice_field(LineType.LINE, LineType, key="lineType")
    color: RGB = color_field(BLACK)
    opacity: float = number_field(0.25, minimum=0.0)
    normal: Optional[Vector] = vector_field(None)
    line_radius: float = number_field(0.01, key="lineRadius", minimum=0.0)
    circle_resolution: int = int_field(64, key="circleResolution", minimum=3)


@dataclass
class PlaneOptions:
    """Translucent square of side `size` in the XY plane."""
    size: float = number_field(2.0, minimum=0.0)
    color: RGB = color_field(BLACK)
    opacity: float = number_field(0.25, minimum=0.0)
    normal: Optional[Vector] = vector_field(None)


@dataclass
class PlaneOfParallelLinesOptions:
    """Backing square plus `divisions + 1` lines parallel to the Y axis."""
    size: float = number_field(2.0, minimum=0.0)
    divisions: int = int_field(10, minimum=1)
    color: RGB = color_field(BLACK)
    opacity: float = number_field(0.15, minimum=0.0)
    normal: Optional[Vector] = vector_field(None)
    line_radius: float = number_field(0.01, key="lineRadius", minimum=0.0)


@dataclass
class BoxOfParallelLinesOptions:
    """Wireframe cube of side `size` filled with lines parallel to the Y axis."""
    size: float = number_field(2.0, minimum=0.0)
    divisions: int = int_field(10, minimum=1)
    color: RGB = color_field(BLACK)
    line_radius: float = number_field(0.008, key="lineRadius", minimum=0.0)


@dataclass
class HoopOptions:
    """`lineCount` vertical lines around a circle of `radius` in the XZ plane."""
    radius: float = number_field(1.0, minimum=0.0)
    height: float = number_field(2.0, minimum=0.0)
    line_count: int = int_field(24, key="lineCount", minimum=0)
    color: RGB = color_field(BLACK)
    line_radius: float = number_field(0.01, key="lineRadius", minimum=0.0)


@dataclass
class SphereOptions:
    """Three great circles plus `lineCount` golden-angle radiating elements."""
    radius: float = number_field(1.0, minimum=0.0)
    line_count: int = int_field(100, key="lineCount", minimum=0)
    line_type: LineType = choice_field(LineType.LINE, LineType, key="lineType")
    mirrored: bool = flag_field(False)
    color: RGB = color_field(BLACK)
    line_radius: float = number_field(0.006, key="lineRadius", minimum=0.0)
    circle_resolution: int = int_field(96, key="circleResolution", minimum=3)


@dataclass
class CylindroidOptions:
    """Ruled surface z = (height/2) sin(2 theta) swept out to `width`."""
    width: float = number_field(2.0, minimum=0.0)
    height: float = number_field(1.0)
    line_count: int = int_field(24, key="lineCount", minimum=0)
    color: RGB = color_field(BLACK)
    # Fraction by which the last ruling is darker than the first
    darken: float = number_field(0.5, minimum=0.0)
    line_radius: float = number_field(0.01, key="lineRadius", minimum=0.0)
    boundary_resolution: int = int_field(128, key="boundaryResolution", minimum=8)


@dataclass
class HyperbolicParaboloidOptions:
    """Doubly ruled saddle z = u * v * 0.5 over a `size` square."""
    size: float = number_field(2.0, minimum=0.0)
    divisions: int = int_field(10, minimum=1)
    is_orthogonal: bool = flag_field(True, key="isOrthogonal")
    color: RGB = color_field(BLACK)
    line_radius: float = number_field(0.008, key="lineRadius", minimum=0.0)


@dataclass
class HyperboloidOptions:
    """Doubly ruled hyperboloid joining two ellipses rotated by `twistAngle`."""
    radius_x: float = number_field(1.0, key="radiusX", minimum=0.0)
    radius_z: float = number_field(1.0, key="radiusZ", minimum=0.0)
    height: float = number_field(2.0, minimum=0.0)
    line_count: int = int_field(24, key="lineCount", minimum=1)
    twist_angle: float = number_field(pi / 4, key="twistAngle")
    color: RGB = color_field(BLACK)
    opacity: float = number_field(0.2, minimum=0.0)
    line_radius: float = number_field(0.01, key="lineRadius", minimum=0.0)
    circle_resolution: int = int_field(64, key="circleResolution", minimum=3)


@dataclass
class TranslationOptions:
    """Bold line with arrowheads; always drawn in the neutral glyph color."""
    start: Vector = vector_field((0.0, 0.0, 0.0))
    end: Vector = vector_field((1.0, 0.0, 0.0))
    only_end: bool = flag_field(False, key="only_end")
    radius: float = number_field(0.02, minimum=0.0)
    head_length: float = number_field(0.15, key="headLength", minimum=0.0)
    head_radius: float = number_field(0.06, key="headRadius", minimum=0.0)


@dataclass
class MomentOptions:
    """Bold line with a double-headed torus arc symbol at the far (and near) end."""
    start: Vector = vector_field((0.0, 0.0, 0.0))
    end: Vector = vector_field((1.0, 0.0, 0.0))
    only_end: bool = flag_field(False, key="only_end")
    color: RGB = color_field(NEUTRAL_GLYPH_COLOR)
    radius: float = number_field(0.02, minimum=0.0)
    symbol_radius: float = number_field(0.15, key="symbolRadius", minimum=0.0)
    head_length: float = number_field(0.08, key="headLength", minimum=0.0)
    head_radius: float = number_field(0.04, key="headRadius", minimum=0.0)


# ------------------------------------------------------------------------------
# Conversion
# ------------------------------------------------------------------------------
_MISSING = object()


def _lookup(raw: Mapping[str, Any], f: Field) -> Any:
    key = f.metadata.get("key") or f.name
    if key in raw:
        return raw[key]
    if f.name in raw:
        return raw[f.name]
    return _MISSING


def convert_field(f: Field, value: Any) -> Any:
    """
    Convert one raw value according to the field's schema.

    Returns `_MISSING` if the value does not fit; the caller keeps the default.
    """
    kind = f.metadata.get("kind")
    minimum = f.metadata.get("minimum")

    if kind == FieldKind.VECTOR:
        if value is None and f.metadata.get("optional"):
            return None
        if not is_vector_like(value):
            return _MISSING
        vec = value if isinstance(value, Vector) else Vector.from_sequence(value)
        if f.metadata.get("optional") and vec.magnitude == 0.0:
            return None
        return vec

    if kind == FieldKind.COLOR:
        rgb = parse_color(value)
        return _MISSING if rgb is None else rgb

    if kind == FieldKind.NUMBER:
        if not is_finite_number(value) or (minimum is not None and value < minimum):
            return _MISSING
        return float(value)

    if kind == FieldKind.INTEGER:
        if not is_finite_number(value) or (minimum is not None and value < minimum):
            return _MISSING
        return int(value)

    if kind == FieldKind.FLAG:
        return value if isinstance(value, bool) else _MISSING

    if kind == FieldKind.CHOICE:
        choices: type[StrEnum] = f.metadata["choices"]
        try:
            return choices(value)
        except ValueError:
            return _MISSING

    return value


def build_options(options_type: type[T], raw: Optional[Mapping[str, Any]]) -> T:
    """
    Instantiate `options_type` from a raw options mapping.

    Every field is validated on its own; invalid or missing values keep the
    dataclass default. Unknown keys are ignored.
    """
    if isinstance(raw, options_type):
        return raw
    raw = raw if isinstance(raw, Mapping) else {}

    values = {}
    for f in fields(options_type):
        value = _lookup(raw, f)
        if value is _MISSING:
            continue
        converted = convert_field(f, value)
        if converted is _MISSING:
            logger.debug(
                f"{options_type.__name__}: invalid value {value!r} for "
                f"'{f.metadata.get('key') or f.name}', using default."
            )
            continue
        values[f.name] = converted

    known = {f.metadata.get("key") or f.name for f in fields(options_type)} | {f.name for f in fields(options_type)}
    unknown = [k for k in raw if k not in known]
    if unknown:
        logger.debug(f"{options_type.__name__}: ignoring unknown options {unknown}.")

    return options_type(**values)


def vector_fields(options_type: type) -> Sequence[str]:
    """JSON keys of the vector-valued fields declared by an options type."""
    return [
        f.metadata.get("key") or f.name
        for f in fields(options_type)
        if f.metadata.get("kind") == FieldKind.VECTOR
    ]


def sniff_vectors(raw: Optional[Mapping[str, Any]]) -> dict:
    """
    Options conversion for shapes registered without a schema: every top-level
    value that is an array of exactly three numbers becomes a Vector. Nested
    objects are left untouched.
    """
    if not isinstance(raw, Mapping):
        return {}
    return {
        key: Vector.from_sequence(value) if is_vector_like(value) and not isinstance(value, Vector) else value
        for key, value in raw.items()
    }
