"""Host-side vector math: rotations and local coordinate frames.

The camera and the oriented planar shapes keep their orientation on the host
as NumPy arrays and only upload the result to Taichi fields before a frame is
rendered. This module holds the rotation helpers they share and
``LocalFrame``, the orthonormal (horizontal, vertical, direction) basis that
recomputes its dependent axes whenever its direction changes.

Two axis-angle rotations are provided, a Rodrigues rotation matrix and a unit
quaternion sandwich product. They produce the same result up to floating
point tolerance; the quaternion form is the one frames use.

Example:
    >>> import numpy as np
    >>> from whitted.core.transform import rotate_axis_quaternion
    >>> v = rotate_axis_quaternion((1.0, 0.0, 0.0), (0.0, 0.0, 1.0), np.pi / 2)
    >>> np.round(v, 6)
    array([0., 1., 0.])
"""

from __future__ import annotations

import math

import numpy as np
import numpy.typing as npt

Vector = npt.NDArray[np.float64]


def as_vector(v) -> Vector:
    """Convert a 3-sequence to a float64 NumPy vector (always a copy)."""
    return np.array(v, dtype=np.float64).reshape(3)


def normalize(v) -> Vector:
    """Scale a vector to unit length.

    A zero vector has no direction; the result is non-finite and callers must
    not pass one.
    """
    v = as_vector(v)
    with np.errstate(divide="ignore", invalid="ignore"):
        return v / np.linalg.norm(v)


def norm(v) -> float:
    """Euclidean length of a vector."""
    return float(np.linalg.norm(as_vector(v)))


# =============================================================================
# Principal Axis Rotations
# =============================================================================


def rotate_x(v, angle: float | None = None, *, sin_cos: tuple[float, float] | None = None) -> Vector:
    """Rotate a vector about the X axis.

    Either ``angle`` (radians) or a precomputed ``sin_cos`` pair is given.
    Positive angles rotate counter-clockwise looking down the axis toward the
    origin.
    """
    s, c = _sin_cos(angle, sin_cos)
    x, y, z = as_vector(v)
    return np.array([x, y * c - z * s, y * s + z * c])


def rotate_y(v, angle: float | None = None, *, sin_cos: tuple[float, float] | None = None) -> Vector:
    """Rotate a vector about the Y axis."""
    s, c = _sin_cos(angle, sin_cos)
    x, y, z = as_vector(v)
    return np.array([x * c + z * s, y, -x * s + z * c])


def rotate_z(v, angle: float | None = None, *, sin_cos: tuple[float, float] | None = None) -> Vector:
    """Rotate a vector about the Z axis."""
    s, c = _sin_cos(angle, sin_cos)
    x, y, z = as_vector(v)
    return np.array([x * c - y * s, x * s + y * c, z])


def _sin_cos(angle: float | None, sin_cos: tuple[float, float] | None) -> tuple[float, float]:
    if sin_cos is not None:
        return sin_cos
    if angle is None:
        raise ValueError("Either angle or sin_cos must be given")
    return math.sin(angle), math.cos(angle)


# =============================================================================
# Arbitrary Axis Rotations
# =============================================================================


def axis_rotation_matrix(axis, angle: float) -> npt.NDArray[np.float64]:
    """Build the 3x3 matrix rotating by ``angle`` about the unit ``axis``.

    Rodrigues' formula: R = c I + (1 - c) a a^T + s [a]_x
    """
    ax, ay, az = as_vector(axis)
    c = math.cos(angle)
    s = math.sin(angle)
    t = 1.0 - c
    return np.array(
        [
            [c + t * ax * ax, t * ax * ay - s * az, t * ax * az + s * ay],
            [t * ax * ay + s * az, c + t * ay * ay, t * ay * az - s * ax],
            [t * ax * az - s * ay, t * ay * az + s * ax, c + t * az * az],
        ]
    )


def rotate_axis_matrix(v, axis, angle: float) -> Vector:
    """Rotate ``v`` by ``angle`` about the unit ``axis`` using a rotation matrix."""
    return axis_rotation_matrix(axis, angle) @ as_vector(v)


def rotate_axis_quaternion(v, axis, angle: float) -> Vector:
    """Rotate ``v`` by ``angle`` about the unit ``axis`` using a quaternion.

    With q = (cos(a/2), sin(a/2) * axis) = (w, u), the sandwich product
    q v q* expands to:
        2 (u . v) u + (w^2 - u . u) v + 2 w (u x v)
    """
    v = as_vector(v)
    half = angle / 2.0
    w = math.cos(half)
    u = as_vector(axis) * math.sin(half)
    return 2.0 * np.dot(u, v) * u + (w * w - np.dot(u, u)) * v + 2.0 * w * np.cross(u, v)


# =============================================================================
# Local Coordinate Frame
# =============================================================================

DEFAULT_HORIZONTAL = (1.0, 0.0, 0.0)
DEFAULT_VERTICAL = (0.0, 1.0, 0.0)
DEFAULT_DIRECTION = (0.0, 0.0, -1.0)


def basis_from_direction(direction) -> tuple[Vector, Vector]:
    """Compute the (horizontal, vertical) axes for a unit facing direction.

    This is the closed form of rotating the default frame, which faces
    (0, 0, -1), about the axis (0, 0, -1) x direction by the angle between
    the two. With d = (x, y, z) and k = (1 + z) / (x^2 + y^2):

        horizontal = (y^2 k - z, -x y k, x)
        vertical   = (-x y k, x^2 k - z, y)

    The rotation axis vanishes when d lies on the Z axis (k divides by zero),
    so those two directions use fixed bases instead.
    """
    x, y, z = as_vector(direction)
    if x == 0.0 and y == 0.0:
        vertical = as_vector(DEFAULT_VERTICAL)
        if z < 0.0:
            horizontal = as_vector(DEFAULT_HORIZONTAL)
        else:
            horizontal = np.array([-1.0, 0.0, 0.0])
        return horizontal, vertical

    k = (1.0 + z) / (x * x + y * y)
    horizontal = np.array([y * y * k - z, -x * y * k, x])
    vertical = np.array([-x * y * k, x * x * k - z, y])
    return horizontal, vertical


class LocalFrame:
    """An orthonormal frame of horizontal, vertical and facing axes.

    Every operation that changes the orientation updates all three axes
    together and then calls ``_on_orientation_changed`` so subclasses can
    refresh state derived from the axes in the same step.
    """

    def __init__(
        self,
        horizontal=DEFAULT_HORIZONTAL,
        vertical=DEFAULT_VERTICAL,
        direction=DEFAULT_DIRECTION,
    ) -> None:
        self._horizontal = as_vector(horizontal)
        self._vertical = as_vector(vertical)
        self._direction = as_vector(direction)

    @property
    def horizontal(self) -> Vector:
        """Unit horizontal axis (copy)."""
        return self._horizontal.copy()

    @property
    def vertical(self) -> Vector:
        """Unit vertical axis (copy)."""
        return self._vertical.copy()

    @property
    def direction(self) -> Vector:
        """Unit facing direction (copy)."""
        return self._direction.copy()

    def rotate_x(self, angle: float) -> None:
        self._apply(lambda v: rotate_x(v, angle))

    def rotate_y(self, angle: float) -> None:
        self._apply(lambda v: rotate_y(v, angle))

    def rotate_z(self, angle: float) -> None:
        self._apply(lambda v: rotate_z(v, angle))

    def rotate_axis(self, axis, angle: float) -> None:
        """Rotate the frame about an arbitrary unit axis."""
        axis = as_vector(axis)
        self._apply(lambda v: rotate_axis_quaternion(v, axis, angle))

    def set_direction(self, direction) -> None:
        """Face the frame toward a unit direction, rebuilding the other axes."""
        self._direction = as_vector(direction)
        self._horizontal, self._vertical = basis_from_direction(self._direction)
        self._on_orientation_changed()

    def _apply(self, rotation) -> None:
        self._horizontal = rotation(self._horizontal)
        self._vertical = rotation(self._vertical)
        self._direction = rotation(self._direction)
        self._on_orientation_changed()

    def _on_orientation_changed(self) -> None:
        """Hook for subclasses that cache values derived from the axes."""
