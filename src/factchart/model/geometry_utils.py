from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

from math import pi, sqrt
import numpy as np
from scipy.spatial.transform import Rotation

if TYPE_CHECKING:
    from numpy import typing as npt

# Dot product below which two unit vectors are treated as antiparallel
ANTIPARALLEL_EPS = 1e-9

# Golden angle in radians, pi * (3 - sqrt(5))
GOLDEN_ANGLE = pi * (3.0 - sqrt(5.0))


def normalized(v: npt.ArrayLike) -> np.ndarray:
    """Unit vector in the direction of `v`; the zero vector stays zero."""
    arr = np.asarray(v, dtype=np.float64)
    norm = np.linalg.norm(arr)
    if norm == 0.0:
        return np.zeros(3)
    return arr / norm


def any_perpendicular(v: npt.ArrayLike) -> np.ndarray:
    """
    Returns a unit vector perpendicular to `v`.

    Picks the construction that avoids cancellation: drop the smaller of the
    x/z components so the result never collapses to zero for a unit input.
    """
    x, y, z = normalized(v)
    if abs(x) > abs(z):
        perp = np.array([-y, x, 0.0])
    else:
        perp = np.array([0.0, -z, y])
    return normalized(perp)


def rotation_between(default_axis: npt.ArrayLike, target: npt.ArrayLike) -> Rotation:
    """
    Minimal rotation mapping `default_axis` onto `target`.

    Built as a quaternion from the cross and dot products of the two unit
    vectors:

        q = (d x t, 1 + d . t), normalized

    When the vectors are antiparallel the cross product vanishes; the result is
    then a 180 degree rotation about an arbitrary axis perpendicular to `d`.

    Args:
        default_axis: The canonical axis of the shape (e.g. (0, 0, 1)).
        target: Direction the axis should point to. Need not be normalized.

    Returns:
        A scipy Rotation. Identity if either vector has zero length.
    """
    d = normalized(default_axis)
    t = normalized(target)
    if not d.any() or not t.any():
        return Rotation.identity()

    w = 1.0 + float(np.dot(d, t))
    if w < ANTIPARALLEL_EPS:
        axis = any_perpendicular(d)
        quat = np.array([axis[0], axis[1], axis[2], 0.0])
    else:
        c = np.cross(d, t)
        quat = np.array([c[0], c[1], c[2], w])

    # scipy expects scalar-last (x, y, z, w) and normalizes on construction
    return Rotation.from_quat(quat)


def alignment_matrix(default_axis: npt.ArrayLike, target: npt.ArrayLike) -> np.ndarray:
    """3x3 matrix of `rotation_between`."""
    return rotation_between(default_axis, target).as_matrix()


def euler_to_matrix(angles: Sequence[float]) -> np.ndarray:
    """
    3x3 rotation matrix for intrinsic X, then Y, then Z Euler angles (radians).

    Equivalent to Rx @ Ry @ Rz, the convention used by the chart data files.
    """
    return Rotation.from_euler("XYZ", np.asarray(angles, dtype=np.float64)).as_matrix()


def transform_matrix(
    position: npt.ArrayLike | None = None,
    orientation: npt.ArrayLike | None = None
) -> np.ndarray:
    """4x4 homogeneous matrix translating by `position` after rotating by `orientation`."""
    m = np.eye(4)
    if orientation is not None:
        m[:3, :3] = np.asarray(orientation, dtype=np.float64)
    if position is not None:
        m[:3, 3] = np.asarray(position, dtype=np.float64)
    return m


def shear_matrix(
    xy: float = 0.0, xz: float = 0.0,
    yx: float = 0.0, yz: float = 0.0,
    zx: float = 0.0, zy: float = 0.0
) -> np.ndarray:
    """
    3x3 shear matrix. `xy` is the amount of x added to y, and so on:

        x' = x + yx*y + zx*z
        y' = xy*x + y + zy*z
        z' = xz*x + yz*y + z
    """
    return np.array([
        [1.0, yx, zx],
        [xy, 1.0, zy],
        [xz, yz, 1.0],
    ])


def apply_matrix(points: npt.ArrayLike, matrix: npt.ArrayLike) -> np.ndarray:
    """Apply a 3x3 linear map to an (N, 3) array of points (or a single point)."""
    pts = np.asarray(points, dtype=np.float64)
    return pts @ np.asarray(matrix, dtype=np.float64).T


def ellipse_points(
    a: float,
    b: float,
    n_segments: int,
    *,
    plane: str = "xz",
    offset: float = 0.0,
    phase: float = 0.0,
    closed: bool = True
) -> npt.NDArray[np.float64]:
    """
    Discretize an origin-centred ellipse into an (N, 3) polyline.

    Args:
        a: Semi-axis along the first axis of `plane`.
        b: Semi-axis along the second axis of `plane`.
        n_segments: Number of segments used for discretization.
        plane: One of "xy", "xz", "yz".
        offset: Coordinate along the remaining (normal) axis.
        phase: Angle of the first point.
        closed: Repeat the first point at the end.

    Returns:
        An array of shape (n, 3) with the ellipse points.
    """
    n_segments = max(3, int(n_segments))
    theta = phase + np.linspace(0.0, 2.0 * np.pi, n_segments, endpoint=False)
    u = a * np.cos(theta)
    v = b * np.sin(theta)
    w = np.full_like(u, offset)

    if plane == "xy":
        pts = np.c_[u, v, w]
    elif plane == "yz":
        pts = np.c_[w, u, v]
    else:
        pts = np.c_[u, w, v]

    # close the ring
    if closed and not np.allclose(pts[0], pts[-1]):
        pts = np.vstack((pts, pts[0]))

    return pts


def golden_angle_points(count: int, radius: float = 1.0) -> npt.NDArray[np.float64]:
    """
    Near-uniform points on a sphere (Fibonacci / golden-angle distribution).

    For index i in [0, count):

        y_i = 1 - 2i / (count - 1)
        r_i = sqrt(1 - y_i^2)
        theta_i = i * GOLDEN_ANGLE
        p_i = (cos(theta_i) * r_i, y_i, sin(theta_i) * r_i) * radius

    A single point sits at the north pole.

    Returns:
        An array of shape (count, 3).
    """
    if count <= 0:
        return np.empty((0, 3))

    i = np.arange(count, dtype=np.float64)
    denominator = count - 1 if count > 1 else 1
    y = 1.0 - (i / denominator) * 2.0
    r = np.sqrt(np.clip(1.0 - y * y, 0.0, None))
    theta = GOLDEN_ANGLE * i

    return np.c_[np.cos(theta) * r, y, np.sin(theta) * r] * radius
