"""Infinite plane primitive and the support-plane solve shared by flat shapes.

Every flat primitive (plane, disc, rectangle, ellipse) lies in the plane
through ``center`` with unit normal ``n``. A ray o + t*d meets that plane at

    t = n . (center - o) / (n . d)

The bounded shapes then test whether the hit point falls inside their
region. A denominator close to zero means the ray runs parallel to the plane
and is reported as a miss; the division is never evaluated in that case, so
no NaN or infinity reaches later distance comparisons.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.geometry.plane import Plane, hit_plane
    >>> floor = Plane(center=ti.math.vec3(0, -4, 0), normal=ti.math.vec3(0, 1, 0))
    >>> # Use hit_plane within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

from whitted.config import PARALLEL_EPSILON
from whitted.geometry.sphere import HitRecord

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.dataclass
class Plane:
    """An infinite plane.

    Attributes:
        center: Any point on the plane.
        normal: Unit normal giving the plane's intrinsic orientation.
    """

    center: vec3
    normal: vec3


@ti.func
def solve_support_plane(ray_origin: vec3, ray_direction: vec3, center: vec3, normal: vec3):
    """Intersect a ray with the plane through ``center`` with unit ``normal``.

    The returned normal faces the incoming ray: if the ray travels along the
    intrinsic normal (n . d >= 0) the normal is negated.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The ray direction (unit length).
        center: A point on the plane.
        normal: The plane's unit normal.

    Returns:
        A tuple (hit, t, point, facing_normal) where hit is 1 when the plane
        lies in front of the ray and the ray is not parallel to it.
    """
    denom = tm.dot(normal, ray_direction)

    did_hit = 0
    t = 0.0
    point = vec3(0.0, 0.0, 0.0)
    facing_normal = normal

    if ti.abs(denom) > PARALLEL_EPSILON:
        t = tm.dot(normal, center - ray_origin) / denom
        if t > 0.0:
            did_hit = 1
            point = ray_origin + t * ray_direction
            if denom >= 0.0:
                facing_normal = -normal

    return did_hit, t, point, facing_normal


@ti.func
def hit_plane(ray_origin: vec3, ray_direction: vec3, plane: Plane) -> HitRecord:
    """Intersect a ray with an infinite plane.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The ray direction (unit length).
        plane: The plane to test.

    Returns:
        A HitRecord; check its hit field.
    """
    did_hit, t, point, facing_normal = solve_support_plane(
        ray_origin, ray_direction, plane.center, plane.normal
    )
    return HitRecord(hit=did_hit, t=t, point=point, normal=facing_normal)
