"""Rectangle primitive: an oriented flat rectangle.

The rectangle carries its in-plane basis (``axis_u`` horizontal, ``axis_v``
vertical) next to the normal. The basis is derived from the normal on the
host (``whitted.scene.shapes.Rectangle``) and uploaded with the shape, so the
intersection test only projects the hit point onto the two axes.
"""

import taichi as ti
import taichi.math as tm

from whitted.geometry.plane import solve_support_plane
from whitted.geometry.sphere import HitRecord

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.dataclass
class Rectangle:
    """A bounded planar rectangle.

    Attributes:
        center: Center of the rectangle.
        normal: Unit normal of the rectangle's plane.
        axis_u: Unit horizontal in-plane axis.
        axis_v: Unit vertical in-plane axis.
        half_width: Half of the extent along axis_u.
        half_height: Half of the extent along axis_v.
    """

    center: vec3
    normal: vec3
    axis_u: vec3
    axis_v: vec3
    half_width: ti.f32
    half_height: ti.f32


@ti.func
def hit_rectangle(ray_origin: vec3, ray_direction: vec3, rect: Rectangle) -> HitRecord:
    """Intersect a ray with a rectangle.

    The support-plane hit counts when the signed projections of
    (point - center) onto axis_u and axis_v lie within the half extents.
    """
    did_hit, t, point, facing_normal = solve_support_plane(
        ray_origin, ray_direction, rect.center, rect.normal
    )
    if did_hit == 1:
        offset = point - rect.center
        u = tm.dot(offset, rect.axis_u)
        v = tm.dot(offset, rect.axis_v)
        if ti.abs(u) > rect.half_width or ti.abs(v) > rect.half_height:
            did_hit = 0
    return HitRecord(hit=did_hit, t=t, point=point, normal=facing_normal)
