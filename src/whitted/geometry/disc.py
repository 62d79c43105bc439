"""Disc primitive: a flat circle of given radius around its center."""

import taichi as ti
import taichi.math as tm

from whitted.geometry.plane import solve_support_plane
from whitted.geometry.sphere import HitRecord

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.dataclass
class Disc:
    """A bounded planar disc.

    Attributes:
        center: Center of the disc.
        normal: Unit normal of the disc's plane.
        radius: Disc radius (positive).
    """

    center: vec3
    normal: vec3
    radius: ti.f32


@ti.func
def hit_disc(ray_origin: vec3, ray_direction: vec3, disc: Disc) -> HitRecord:
    """Intersect a ray with a disc.

    The support-plane hit counts when it lies within ``radius`` of the
    center (boundary included).
    """
    did_hit, t, point, facing_normal = solve_support_plane(
        ray_origin, ray_direction, disc.center, disc.normal
    )
    if did_hit == 1:
        offset = point - disc.center
        if tm.dot(offset, offset) > disc.radius * disc.radius:
            did_hit = 0
    return HitRecord(hit=did_hit, t=t, point=point, normal=facing_normal)
