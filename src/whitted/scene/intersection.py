"""Scene-level shape storage and nearest-intersection queries.

All shapes live in one ordered table regardless of their kind. Each row
holds a ``kind`` tag plus the union of the per-kind geometry columns, and
``hit_shape`` dispatches on the tag to the matching primitive routine. Rows
keep insertion order, which makes the nearest-hit tie-break deterministic:
shapes are scanned in order and a later shape only replaces the current
nearest hit when it is strictly closer, so on equal distances the shape
inserted first wins.

Hits at or beyond ``HORIZON_DISTANCE`` are ignored. Past that range the ray
sees the background, and the cut-off also discards the huge distances
produced by nearly parallel rays.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.scene.intersection import add_sphere, clear_scene, find_nearest
    >>> clear_scene()
    >>> add_sphere((0.0, 0.0, -5.0), 1.0, material_id=0)
    >>> # Use find_nearest within a Taichi kernel
"""

from enum import IntEnum

import taichi as ti
import taichi.math as tm

from whitted.config import HORIZON_DISTANCE, MAX_SHAPES
from whitted.geometry.disc import Disc, hit_disc
from whitted.geometry.ellipse import Ellipse, hit_ellipse
from whitted.geometry.plane import Plane, hit_plane
from whitted.geometry.rectangle import Rectangle, hit_rectangle
from whitted.geometry.sphere import HitRecord, Sphere, hit_sphere, make_miss_record

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


class ShapeKind(IntEnum):
    """Tag identifying the primitive stored in a shape row."""

    SPHERE = 0
    PLANE = 1
    DISC = 2
    RECTANGLE = 3
    ELLIPSE = 4


@ti.dataclass
class SceneHitRecord:
    """Record of a ray-scene intersection with material information.

    Attributes:
        hit: Whether the ray intersected any shape (1 if hit, 0 if miss).
        t: Distance to the nearest intersection. Only valid if hit == 1.
        point: The nearest intersection point. Only valid if hit == 1.
        normal: Unit normal at the intersection, facing the incoming ray.
            Only valid if hit == 1.
        material_id: Material index of the hit shape. Only valid if hit == 1;
            -1 otherwise.
    """

    hit: ti.i32
    t: ti.f32
    point: vec3
    normal: vec3
    material_id: ti.i32


# Shape storage: Structure of Arrays layout, one row per shape in insertion order
shape_kinds = ti.field(dtype=ti.i32, shape=MAX_SHAPES)
shape_centers = ti.Vector.field(3, dtype=ti.f32, shape=MAX_SHAPES)
shape_normals = ti.Vector.field(3, dtype=ti.f32, shape=MAX_SHAPES)
# In-plane basis (rectangles only)
shape_axes_u = ti.Vector.field(3, dtype=ti.f32, shape=MAX_SHAPES)
shape_axes_v = ti.Vector.field(3, dtype=ti.f32, shape=MAX_SHAPES)
# Second focus (ellipses only)
shape_foci = ti.Vector.field(3, dtype=ti.f32, shape=MAX_SHAPES)
# Radius (spheres, discs), half extents (rectangles), focal sum (ellipses)
shape_radii = ti.field(dtype=ti.f32, shape=MAX_SHAPES)
shape_half_widths = ti.field(dtype=ti.f32, shape=MAX_SHAPES)
shape_half_heights = ti.field(dtype=ti.f32, shape=MAX_SHAPES)
shape_focal_sums = ti.field(dtype=ti.f32, shape=MAX_SHAPES)
shape_material_ids = ti.field(dtype=ti.i32, shape=MAX_SHAPES)
num_shapes = ti.field(dtype=ti.i32, shape=())


def clear_scene() -> None:
    """Remove all shapes from the scene.

    Resets the shape count to zero. Stale rows are overwritten when new
    shapes are added.
    """
    num_shapes[None] = 0


def _next_row(kind: ShapeKind, center, material_id: int) -> int:
    idx = num_shapes[None]
    if idx >= MAX_SHAPES:
        raise RuntimeError(f"Maximum number of shapes ({MAX_SHAPES}) exceeded")
    shape_kinds[idx] = int(kind)
    shape_centers[idx] = [float(c) for c in center]
    shape_material_ids[idx] = material_id
    num_shapes[None] = idx + 1
    return idx


def add_sphere(center, radius: float, material_id: int = 0) -> int:
    """Add a sphere and return its row index.

    Raises:
        RuntimeError: If the maximum number of shapes is exceeded.
    """
    idx = _next_row(ShapeKind.SPHERE, center, material_id)
    shape_radii[idx] = radius
    return idx


def add_plane(center, normal, material_id: int = 0) -> int:
    """Add an infinite plane and return its row index."""
    idx = _next_row(ShapeKind.PLANE, center, material_id)
    shape_normals[idx] = [float(c) for c in normal]
    return idx


def add_disc(center, normal, radius: float, material_id: int = 0) -> int:
    """Add a disc and return its row index."""
    idx = _next_row(ShapeKind.DISC, center, material_id)
    shape_normals[idx] = [float(c) for c in normal]
    shape_radii[idx] = radius
    return idx


def add_rectangle(
    center,
    normal,
    axis_u,
    axis_v,
    half_width: float,
    half_height: float,
    material_id: int = 0,
) -> int:
    """Add a rectangle with its in-plane basis and return its row index."""
    idx = _next_row(ShapeKind.RECTANGLE, center, material_id)
    shape_normals[idx] = [float(c) for c in normal]
    shape_axes_u[idx] = [float(c) for c in axis_u]
    shape_axes_v[idx] = [float(c) for c in axis_v]
    shape_half_widths[idx] = half_width
    shape_half_heights[idx] = half_height
    return idx


def add_ellipse(center, normal, focus, focal_sum: float, material_id: int = 0) -> int:
    """Add an ellipse (first focus at ``center``) and return its row index."""
    idx = _next_row(ShapeKind.ELLIPSE, center, material_id)
    shape_normals[idx] = [float(c) for c in normal]
    shape_foci[idx] = [float(c) for c in focus]
    shape_focal_sums[idx] = focal_sum
    return idx


def get_shape_count() -> int:
    """Get the number of shapes in the scene."""
    return int(num_shapes[None])


@ti.func
def hit_shape(index: ti.i32, ray_origin: vec3, ray_direction: vec3) -> HitRecord:
    """Intersect a ray with the shape stored in row ``index``.

    Dispatches on the row's kind tag to the matching primitive routine.
    """
    kind = shape_kinds[index]
    center = shape_centers[index]
    rec = make_miss_record()

    if kind == int(ShapeKind.SPHERE):
        rec = hit_sphere(ray_origin, ray_direction, Sphere(center=center, radius=shape_radii[index]))
    elif kind == int(ShapeKind.PLANE):
        rec = hit_plane(ray_origin, ray_direction, Plane(center=center, normal=shape_normals[index]))
    elif kind == int(ShapeKind.DISC):
        disc = Disc(center=center, normal=shape_normals[index], radius=shape_radii[index])
        rec = hit_disc(ray_origin, ray_direction, disc)
    elif kind == int(ShapeKind.RECTANGLE):
        rect = Rectangle(
            center=center,
            normal=shape_normals[index],
            axis_u=shape_axes_u[index],
            axis_v=shape_axes_v[index],
            half_width=shape_half_widths[index],
            half_height=shape_half_heights[index],
        )
        rec = hit_rectangle(ray_origin, ray_direction, rect)
    elif kind == int(ShapeKind.ELLIPSE):
        ellipse = Ellipse(
            center=center,
            normal=shape_normals[index],
            focus=shape_foci[index],
            focal_sum=shape_focal_sums[index],
        )
        rec = hit_ellipse(ray_origin, ray_direction, ellipse)

    return rec


@ti.func
def find_nearest(ray_origin: vec3, ray_direction: vec3) -> SceneHitRecord:
    """Find the nearest shape hit along a ray, with its material.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The ray direction (unit length).

    Returns:
        A SceneHitRecord for the nearest hit closer than HORIZON_DISTANCE,
        or a miss record.
    """
    closest_t = HORIZON_DISTANCE
    result = SceneHitRecord(
        hit=0,
        t=0.0,
        point=vec3(0.0, 0.0, 0.0),
        normal=vec3(0.0, 0.0, 0.0),
        material_id=-1,
    )

    for i in range(num_shapes[None]):
        rec = hit_shape(i, ray_origin, ray_direction)
        if rec.hit == 1 and rec.t < closest_t:
            closest_t = rec.t
            result = SceneHitRecord(
                hit=1,
                t=rec.t,
                point=rec.point,
                normal=rec.normal,
                material_id=shape_material_ids[i],
            )

    return result


@ti.func
def find_nearest_point(ray_origin: vec3, ray_direction: vec3) -> HitRecord:
    """Find the nearest shape hit along a ray, without material lookup.

    Lighter variant of find_nearest used by shadow rays, which only need
    the position of the occluder.
    """
    closest_t = HORIZON_DISTANCE
    result = make_miss_record()

    for i in range(num_shapes[None]):
        rec = hit_shape(i, ray_origin, ray_direction)
        if rec.hit == 1 and rec.t < closest_t:
            closest_t = rec.t
            result = rec

    return result
