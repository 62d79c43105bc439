"""Ellipse primitive defined by its two foci.

A point p of the support plane belongs to the ellipse when

    |p - f1| + |p - f2| <= focal_sum

where ``f1`` is the shape's center and ``f2`` the second focus. The curve is
only non-degenerate when ``focal_sum`` exceeds |f1 - f2|; the host-side
shape validates that before upload.
"""

import taichi as ti
import taichi.math as tm

from whitted.geometry.plane import solve_support_plane
from whitted.geometry.sphere import HitRecord

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.dataclass
class Ellipse:
    """A bounded planar ellipse.

    Attributes:
        center: First focus (also the point defining the support plane).
        normal: Unit normal of the ellipse's plane.
        focus: Second focus.
        focal_sum: Constant sum of distances to the two foci.
    """

    center: vec3
    normal: vec3
    focus: vec3
    focal_sum: ti.f32


@ti.func
def hit_ellipse(ray_origin: vec3, ray_direction: vec3, ellipse: Ellipse) -> HitRecord:
    """Intersect a ray with an ellipse."""
    did_hit, t, point, facing_normal = solve_support_plane(
        ray_origin, ray_direction, ellipse.center, ellipse.normal
    )
    if did_hit == 1:
        distance_sum = tm.length(point - ellipse.center) + tm.length(point - ellipse.focus)
        if distance_sum > ellipse.focal_sum:
            did_hit = 0
    return HitRecord(hit=did_hit, t=t, point=point, normal=facing_normal)
