"""Host-side shape catalog.

The catalog is closed: ``Sphere``, ``Plane``, ``Disc``, ``Rectangle`` and
``Ellipse``. Each class carries its ``kind`` tag (see ``ShapeKind``) and a
``store`` method that writes the shape into the device shape table, where
``hit_shape`` dispatches on that tag.

Shapes are mutable between frames so that an animation loop can move or
re-aim them (``move``, ``center``, ``set_normal``, ``rotate_*``). Flat shapes
keep their orientation in a ``LocalFrame`` whose facing direction is the
surface normal; a rectangle's in-plane axes are the frame's horizontal and
vertical axes and are rebuilt in the same call whenever the normal changes.

Example:
    >>> from whitted.materials.phong import Material
    >>> from whitted.scene.shapes import Rectangle, Sphere
    >>> glass = Material(1.5, (0.0, 0.5, 0.1, 0.8), (0.6, 0.7, 0.8), 125.0)
    >>> ball = Sphere((3.0, 0.0, -10.0), 2.0, glass)
    >>> panel = Rectangle((3.0, 0.0, -5.0), 4.0, 4.0, (0.0, 0.0, 1.0), glass)
"""

from __future__ import annotations

from typing import ClassVar, Union

import numpy as np

from whitted.core.transform import LocalFrame, Vector, as_vector, norm, normalize
from whitted.materials.phong import Material
from whitted.scene.intersection import (
    ShapeKind,
    add_disc,
    add_ellipse,
    add_plane,
    add_rectangle,
    add_sphere,
)

DEFAULT_MATERIAL = Material()


class _ShapeBase:
    """Fields and behavior common to every shape: a center and a material."""

    kind: ClassVar[ShapeKind]

    def __init__(self, center, material: Material | None) -> None:
        self.center = center
        self.material = material if material is not None else DEFAULT_MATERIAL

    @property
    def center(self) -> Vector:
        return self._center

    @center.setter
    def center(self, value) -> None:
        center = as_vector(value)
        if not np.all(np.isfinite(center)):
            raise ValueError(f"center must be finite, got {value}")
        self._center = center

    def move(self, offset) -> None:
        """Translate the shape by ``offset``."""
        self.center = self._center + as_vector(offset)

    def store(self, material_id: int) -> int:
        """Write the shape into the device shape table; returns the row index."""
        raise NotImplementedError


class Sphere(_ShapeBase):
    """A sphere of positive radius."""

    kind = ShapeKind.SPHERE

    def __init__(self, center, radius: float, material: Material | None = None) -> None:
        if not radius > 0.0:
            raise ValueError(f"radius must be positive, got {radius}")
        super().__init__(center, material)
        self.radius = float(radius)

    def store(self, material_id: int) -> int:
        return add_sphere(self.center, self.radius, material_id)

    def __repr__(self) -> str:
        return f"Sphere(center={self.center.tolist()}, radius={self.radius})"


class _FlatShape(_ShapeBase):
    """A shape lying in a plane with an orientable unit normal."""

    def __init__(self, center, normal, material: Material | None) -> None:
        super().__init__(center, material)
        self._frame = LocalFrame()
        self.set_normal(normal)

    @property
    def normal(self) -> Vector:
        """Unit normal (the intrinsic orientation of the surface)."""
        return self._frame.direction

    def set_normal(self, normal) -> None:
        """Re-orient the shape; the normal is normalised."""
        if norm(normal) == 0.0:
            raise ValueError("normal must be a non-zero vector")
        self._frame.set_direction(normalize(normal))

    def rotate_x(self, angle: float) -> None:
        self._frame.rotate_x(angle)

    def rotate_y(self, angle: float) -> None:
        self._frame.rotate_y(angle)

    def rotate_z(self, angle: float) -> None:
        self._frame.rotate_z(angle)

    def rotate_axis(self, axis, angle: float) -> None:
        """Rotate the orientation about a unit axis through the center."""
        self._frame.rotate_axis(axis, angle)


class Plane(_FlatShape):
    """An infinite plane through ``center``."""

    kind = ShapeKind.PLANE

    def __init__(self, center, normal, material: Material | None = None) -> None:
        super().__init__(center, normal, material)

    def store(self, material_id: int) -> int:
        return add_plane(self.center, self.normal, material_id)

    def __repr__(self) -> str:
        return f"Plane(center={self.center.tolist()}, normal={self.normal.tolist()})"


class Disc(_FlatShape):
    """A flat disc of positive radius around ``center``."""

    kind = ShapeKind.DISC

    def __init__(self, center, radius: float, normal, material: Material | None = None) -> None:
        if not radius > 0.0:
            raise ValueError(f"radius must be positive, got {radius}")
        super().__init__(center, normal, material)
        self.radius = float(radius)

    def store(self, material_id: int) -> int:
        return add_disc(self.center, self.normal, self.radius, material_id)

    def __repr__(self) -> str:
        return (
            f"Disc(center={self.center.tolist()}, radius={self.radius}, "
            f"normal={self.normal.tolist()})"
        )


class Rectangle(_FlatShape):
    """A flat rectangle of ``width`` x ``height`` centered on ``center``.

    The width runs along ``horizontal_axis`` and the height along
    ``vertical_axis``; both are derived from the normal.
    """

    kind = ShapeKind.RECTANGLE

    def __init__(
        self,
        center,
        width: float,
        height: float,
        normal,
        material: Material | None = None,
    ) -> None:
        if not (width > 0.0 and height > 0.0):
            raise ValueError(f"width and height must be positive, got {width}x{height}")
        super().__init__(center, normal, material)
        self.width = float(width)
        self.height = float(height)

    @property
    def horizontal_axis(self) -> Vector:
        return self._frame.horizontal

    @property
    def vertical_axis(self) -> Vector:
        return self._frame.vertical

    def store(self, material_id: int) -> int:
        return add_rectangle(
            self.center,
            self.normal,
            self.horizontal_axis,
            self.vertical_axis,
            self.width / 2.0,
            self.height / 2.0,
            material_id,
        )

    def __repr__(self) -> str:
        return (
            f"Rectangle(center={self.center.tolist()}, width={self.width}, "
            f"height={self.height}, normal={self.normal.tolist()})"
        )


class Ellipse(_FlatShape):
    """A flat ellipse with foci ``center`` and ``focus``.

    Points of the support plane whose distances to the two foci sum to at
    most ``focal_sum`` belong to the ellipse. Rotations turn the normal only;
    the foci stay where they are.
    """

    kind = ShapeKind.ELLIPSE

    def __init__(
        self,
        center,
        focus,
        focal_sum: float,
        normal,
        material: Material | None = None,
    ) -> None:
        super().__init__(center, normal, material)
        self.focus = as_vector(focus)
        focal_distance = norm(self.center - self.focus)
        if not focal_sum > focal_distance:
            raise ValueError(
                f"focal_sum ({focal_sum}) must exceed the distance between the foci "
                f"({focal_distance})"
            )
        self.focal_sum = float(focal_sum)

    @classmethod
    def from_foci(
        cls,
        focus1,
        focus2,
        extra_distance: float,
        normal,
        material: Material | None = None,
    ) -> Ellipse:
        """Build an ellipse whose focal sum is |focus1 - focus2| + extra_distance."""
        if not extra_distance > 0.0:
            raise ValueError(f"extra_distance must be positive, got {extra_distance}")
        focal_sum = norm(as_vector(focus1) - as_vector(focus2)) + extra_distance
        return cls(focus1, focus2, focal_sum, normal, material)

    def move(self, offset) -> None:
        """Translate both foci by ``offset``."""
        super().move(offset)
        self.focus = self.focus + as_vector(offset)

    def store(self, material_id: int) -> int:
        return add_ellipse(self.center, self.normal, self.focus, self.focal_sum, material_id)

    def __repr__(self) -> str:
        return (
            f"Ellipse(center={self.center.tolist()}, focus={self.focus.tolist()}, "
            f"focal_sum={self.focal_sum}, normal={self.normal.tolist()})"
        )


Shape = Union[Sphere, Plane, Disc, Rectangle, Ellipse]

SHAPE_TYPES: tuple[type, ...] = (Sphere, Plane, Disc, Rectangle, Ellipse)
