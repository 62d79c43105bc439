"""Recursive Whitted shader.

``cast_ray`` computes the color seen along one ray. At the nearest hit it
combines four terms weighted by the surface material's albedo:

    color = diffuse_color * diffuse * albedo[0]
          + white * specular * albedo[1]
          + reflected_color * albedo[2]
          + refracted_color * albedo[3]

The diffuse and specular intensities sum Lambert and Phong terms over every
point light that is not blocked by another shape (shadow rays). The
reflected and refracted colors come from recursive calls one level deeper.
Rays that miss the scene, or that reach the maximum depth, see
``BACKGROUND_COLOR``.

Recursion is resolved at compile time: ``depth`` and ``max_depth`` are
template arguments, so Taichi inlines one copy of the shader per depth level
and the ``ti.static`` guard ends the chain at ``max_depth``. Each level
spawns two secondary rays, which makes the compiled shader grow as
2 ** max_depth; keep ``max_depth`` small.

Secondary ray origins are pushed off the surface by ``RAY_EPSILON`` along the
facing normal: outward for reflection, inward for refraction, regardless of
which side the ray actually leaves from.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.core.shader import shade
    >>> color = shade((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))  # empty scene: background
"""

import taichi as ti
import taichi.math as tm

from whitted.config import BACKGROUND_COLOR, MAX_DEPTH, RAY_EPSILON
from whitted.core.ray import normalize, reflect, refract, vec3
from whitted.materials.phong import get_material
from whitted.scene.intersection import find_nearest, find_nearest_point
from whitted.scene.lights import light_intensities, light_positions, num_lights


@ti.func
def background_color() -> vec3:
    return vec3(BACKGROUND_COLOR[0], BACKGROUND_COLOR[1], BACKGROUND_COLOR[2])


# =============================================================================
# Local Illumination
# =============================================================================


@ti.func
def light_intensities_at(point: vec3, normal: vec3, direction: vec3, specular_exponent: ti.f32):
    """Sum the diffuse and specular light intensities at a surface point.

    A light contributes only when the shadow ray toward it reaches the light
    before hitting any shape.

    Args:
        point: The surface point being shaded.
        normal: Unit surface normal facing the incoming ray.
        direction: Direction of the incoming ray.
        specular_exponent: Phong exponent of the surface material.

    Returns:
        A tuple (diffuse, specular) of scalar intensities.
    """
    diffuse = 0.0
    specular = 0.0

    for i in range(num_lights[None]):
        to_light = light_positions[i] - point
        light_distance = tm.length(to_light)
        light_dir = to_light / light_distance

        # Start the shadow ray on the same side of the surface as the light
        shadow_origin = point + normal * RAY_EPSILON
        if tm.dot(light_dir, normal) < 0.0:
            shadow_origin = point - normal * RAY_EPSILON

        blocker = find_nearest_point(shadow_origin, light_dir)
        if blocker.hit == 0 or tm.length(blocker.point - shadow_origin) >= light_distance:
            intensity = light_intensities[i]
            diffuse += intensity * tm.max(0.0, tm.dot(light_dir, normal))
            highlight = tm.max(0.0, tm.dot(-reflect(-light_dir, normal), direction))
            specular += intensity * highlight**specular_exponent

    return diffuse, specular


# =============================================================================
# Recursive Ray Casting
# =============================================================================


@ti.func
def cast_ray(origin: vec3, direction: vec3, depth: ti.template(), max_depth: ti.template()) -> vec3:
    """Color seen along a ray.

    Args:
        origin: Ray origin.
        direction: Unit ray direction.
        depth: Current recursion level (compile-time constant, 0 for
            primary rays).
        max_depth: Level at which the recursion stops and returns the
            background (compile-time constant).

    Returns:
        Linear RGB color; components may exceed 1.
    """
    color = background_color()

    if ti.static(depth < max_depth):
        rec = find_nearest(origin, direction)
        if rec.hit == 1:
            point = rec.point
            normal = rec.normal
            material = get_material(rec.material_id)

            reflect_dir = normalize(reflect(direction, normal))
            refract_dir = normalize(refract(direction, normal, material.refractive_index, 1.0))
            reflect_color = cast_ray(point + normal * RAY_EPSILON, reflect_dir, depth + 1, max_depth)
            refract_color = cast_ray(point - normal * RAY_EPSILON, refract_dir, depth + 1, max_depth)

            diffuse, specular = light_intensities_at(
                point, normal, direction, material.specular_exponent
            )
            albedo = material.albedo
            color = (
                material.diffuse_color * diffuse * albedo[0]
                + vec3(1.0, 1.0, 1.0) * specular * albedo[1]
                + reflect_color * albedo[2]
                + refract_color * albedo[3]
            )

    return color


# =============================================================================
# Single-Ray Entry Point
# =============================================================================

_shade_result = ti.Vector.field(3, dtype=ti.f32, shape=())


@ti.kernel
def _shade_kernel(origin: vec3, direction: vec3, max_depth: ti.template()):
    _shade_result[None] = cast_ray(origin, direction, 0, max_depth)


def shade(origin, direction, max_depth: int = MAX_DEPTH) -> tuple[float, float, float]:
    """Evaluate the shader for a single ray against the uploaded scene.

    This is a Python-callable function for testing and debugging; full frames
    go through the scheduler.

    Args:
        origin: Ray origin (x, y, z).
        direction: Unit ray direction (x, y, z).
        max_depth: Recursion depth limit.

    Returns:
        Tuple of (R, G, B) linear color values.

    Raises:
        ValueError: If ``max_depth`` is negative.
    """
    if max_depth < 0:
        raise ValueError(f"max_depth must be non-negative, got {max_depth}")
    _shade_kernel(vec3(*origin), vec3(*direction), max_depth)
    color = _shade_result[None]
    return (float(color[0]), float(color[1]), float(color[2]))
