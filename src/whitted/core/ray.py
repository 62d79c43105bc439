"""Ray data structure and vector utilities for the Taichi shading kernels.

This module provides the Ray dataclass and the vector operations the shader
and the shape intersection routines call. Everything here is a ``ti.func``
and runs inside Taichi kernels; host-side vector math (rotations, camera
bases) lives in ``whitted.core.transform``.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> origin = ti.math.vec3(0.0, 0.0, 0.0)
    >>> direction = ti.math.vec3(0.0, 0.0, -1.0)
    >>> ray = Ray(origin=origin, direction=direction)
    >>> point = ray_at(ray, 5.0)  # Point 5 units along the ray
"""

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.dataclass
class Ray:
    """A ray with an origin point and direction vector.

    Attributes:
        origin: The starting point of the ray (vec3).
        direction: The direction vector of the ray (vec3). Expected to be
            unit length; intersection distances are measured in multiples
            of it.
    """

    origin: vec3
    direction: vec3


@ti.func
def ray_at(ray: Ray, t: ti.f32) -> vec3:
    """Compute the point along the ray at parameter t.

    Args:
        ray: The ray to evaluate.
        t: The parameter value. Positive values are in front of the origin.

    Returns:
        The point ray.origin + t * ray.direction.
    """
    return ray.origin + t * ray.direction


@ti.func
def make_ray(origin: vec3, direction: vec3) -> Ray:
    """Create a ray from origin and direction."""
    return Ray(origin=origin, direction=direction)


# =============================================================================
# Vector Utility Functions
# =============================================================================


@ti.func
def length(v: vec3) -> ti.f32:
    """Compute the Euclidean length of a vector."""
    return tm.length(v)


@ti.func
def normalize(v: vec3) -> vec3:
    """Normalize a vector to unit length.

    The zero vector has no direction; normalizing it produces non-finite
    components and callers must not pass one.
    """
    return v / tm.length(v)


@ti.func
def dot(a: vec3, b: vec3) -> ti.f32:
    """Compute the dot product a . b."""
    return tm.dot(a, b)


@ti.func
def cross(a: vec3, b: vec3) -> vec3:
    """Compute the cross product a x b."""
    return tm.cross(a, b)


@ti.func
def reflect(incident: vec3, normal: vec3) -> vec3:
    """Reflect an incident vector about a normal.

    The component of ``incident`` along ``normal`` is flipped:
        d - 2 (d . n) n

    Args:
        incident: The incoming direction vector (pointing toward the surface).
        normal: The surface normal (should be normalized).

    Returns:
        The reflected direction vector.
    """
    return incident - 2.0 * tm.dot(incident, normal) * normal


@ti.func
def refract(incident: vec3, normal: vec3, eta_t: ti.f32, eta_i: ti.f32) -> vec3:
    """Refract an incident vector through a surface using Snell's law.

    ``eta_i`` is the refractive index on the side the ray arrives from and
    ``eta_t`` the index on the far side. When the ray arrives from behind the
    normal (``incident . normal > 0``) it is leaving the medium, so the two
    indices swap and the normal is flipped before the transmitted direction
    is computed.

    Total internal reflection has no transmitted ray. In that case the
    incident direction is returned unchanged so the recursive shader always
    has a direction to follow.

    Args:
        incident: The incoming direction (normalized).
        normal: The surface normal (normalized).
        eta_t: Refractive index of the medium being entered.
        eta_i: Refractive index of the medium being left (1 for air).

    Returns:
        The transmitted direction (not normalized).
    """
    cos_i = -tm.clamp(tm.dot(incident, normal), -1.0, 1.0)
    n = normal
    eta_from = eta_i
    eta_to = eta_t
    if cos_i < 0.0:
        # Inside the object: swap the media and face the normal the other way
        cos_i = -cos_i
        n = -normal
        eta_from = eta_t
        eta_to = eta_i

    eta = eta_from / eta_to
    k = 1.0 - eta * eta * (1.0 - cos_i * cos_i)
    result = incident
    if k >= 0.0:
        result = incident * eta + n * (eta * cos_i - ti.sqrt(k))
    return result
