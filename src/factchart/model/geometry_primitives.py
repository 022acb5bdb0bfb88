"""
Geometric Primitives for shape generation and option parsing.
"""
from __future__ import annotations
from dataclasses import dataclass
from numbers import Real
from typing import Any, Sequence, TYPE_CHECKING
import numpy as np
import math

if TYPE_CHECKING:
    import numpy.typing as npt


def is_finite_number(value: Any) -> bool:
    """
    True for a real number (bools excluded) that is finite as a float.

    Integers too large for a float count as not finite.
    """
    if isinstance(value, bool) or not isinstance(value, Real):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        return False


def is_vector_like(value: Any) -> bool:
    """True for a sequence of exactly three finite real numbers."""
    if isinstance(value, Vector):
        return True
    if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
        return False
    return len(value) == 3 and all(is_finite_number(v) for v in value)


@dataclass
class Vector:
    """
    A 3D vector option value (a direction or a position).
    """
    x: float
    y: float
    z: float = 0.0

    @classmethod
    def from_sequence(cls, values: Sequence[float]) -> Vector:
        x, y, z = values
        return cls(float(x), float(y), float(z))

    def __iter__(self):
        yield self.x
        yield self.y
        yield self.z

    @property
    def magnitude(self) -> float:
        return math.sqrt(self.x**2 + self.y**2 + self.z**2)

    def to_array(self) -> npt.NDArray[np.float64]:
        return np.array([self.x, self.y, self.z])
