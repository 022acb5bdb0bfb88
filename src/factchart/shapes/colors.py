"""
Color parsing and ramps for shape options.

Accepted inputs: matplotlib color names and "#rrggbb" strings, "0xrrggbb"
strings, packed integers (0xrrggbb), and [r, g, b] triples in 0..1 (or 0..255).
"""
from __future__ import annotations

from typing import Any, Optional, Sequence, Tuple

import numpy as np
from matplotlib import colors as mcolors

from factchart.model.geometry_primitives import is_finite_number

RGB = Tuple[float, float, float]

BLACK: RGB = (0.0, 0.0, 0.0)
# Fixed color of translation and moment glyphs
NEUTRAL_GLYPH_COLOR: RGB = (0.2, 0.2, 0.2)


def parse_color(value: Any) -> Optional[RGB]:
    """Returns an RGB triple in 0..1, or None if `value` is not a color."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        if not 0 <= value <= 0xFFFFFF:
            return None
        value = f"#{value:06x}"
    elif isinstance(value, str) and value.lower().startswith("0x"):
        value = "#" + value[2:]
    elif isinstance(value, Sequence) and not isinstance(value, str):
        if len(value) != 3 or not all(is_finite_number(v) for v in value):
            return None
        rgb = np.asarray(value, dtype=np.float64)
        if rgb.max() > 1.0:
            rgb = rgb / 255.0
        if rgb.min() < 0.0 or rgb.max() > 1.0:
            return None
        return tuple(float(c) for c in rgb)

    try:
        return tuple(float(c) for c in mcolors.to_rgb(value))
    except (ValueError, TypeError):
        return None


def darken(color: RGB, factor: float) -> RGB:
    """Scale each channel by (1 - factor); factor is clamped to 0..1."""
    f = 1.0 - min(max(factor, 0.0), 1.0)
    return tuple(float(c * f) for c in color)


def lerp_colors(start: RGB, end: RGB, count: int) -> np.ndarray:
    """(count, 3) RGB ramp from `start` to `end`, both included."""
    if count <= 0:
        return np.empty((0, 3))
    t = np.linspace(0.0, 1.0, count)[:, None] if count > 1 else np.zeros((1, 1))
    a = np.asarray(start, dtype=np.float64)
    b = np.asarray(end, dtype=np.float64)
    return a + (b - a) * t
