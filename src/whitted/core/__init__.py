"""Core rendering module.

Components:
    ray: Ray data structure and device-side vector algebra
    transform: Host-side rotations and local coordinate frames
    shader: Recursive Whitted shader (reflection, refraction, shadows)
    scheduler: Band partitioning and the parallel frame kernel

All per-pixel work runs in Taichi kernels; the host side prepares the
scene, camera and band layout before each launch.
"""

from .ray import (
    Ray,
    cross,
    dot,
    length,
    make_ray,
    normalize,
    ray_at,
    reflect,
    refract,
    vec3,
)

# Note: shader and scheduler are NOT imported here to avoid circular imports.
# Import directly from whitted.core.shader or whitted.core.scheduler when needed.

__all__ = [
    "Ray",
    "ray_at",
    "make_ray",
    "vec3",
    "length",
    "normalize",
    "dot",
    "cross",
    "reflect",
    "refract",
]
