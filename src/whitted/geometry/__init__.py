"""Geometry module for the analytic shape primitives.

This module provides the device-side primitives and their ray intersection
routines:

Components:
    sphere: Sphere primitive and the HitRecord shared by all primitives
    plane: Infinite plane and the support-plane solve used by flat shapes
    disc: Flat disc bounded by a radius
    rectangle: Oriented flat rectangle with an in-plane basis
    ellipse: Flat ellipse bounded by a focal distance sum

All intersection routines are Taichi functions (@ti.func) with the same
shape:
    record = hit_<shape>(ray_origin, ray_direction, shape)

The returned HitRecord holds the nearest positive distance, the hit point
and a unit normal facing the incoming ray.
"""

from .disc import Disc, hit_disc
from .ellipse import Ellipse, hit_ellipse
from .plane import Plane, hit_plane, solve_support_plane
from .rectangle import Rectangle, hit_rectangle
from .sphere import HitRecord, Sphere, hit_sphere, make_miss_record, make_sphere

__all__ = [
    "HitRecord",
    "make_miss_record",
    "Sphere",
    "hit_sphere",
    "make_sphere",
    "Plane",
    "hit_plane",
    "solve_support_plane",
    "Disc",
    "hit_disc",
    "Rectangle",
    "hit_rectangle",
    "Ellipse",
    "hit_ellipse",
]
