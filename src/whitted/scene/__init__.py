"""Scene module for shapes, lights and nearest-hit queries.

Components:
    shapes: Host-side shape catalog (sphere, plane, disc, rectangle, ellipse)
    lights: Point lights and their device storage
    intersection: Device shape table and nearest-intersection queries
    manager: Scene container uploading shapes, materials and lights
    showcase: Seeded demo scene

Scene data is organized for efficient device access:
    - Structure-of-Arrays layout for geometric data
    - One ordered shape table tagged by ShapeKind
    - Deduplicated material table indexed by shape rows
"""

from .intersection import (
    SceneHitRecord,
    ShapeKind,
    clear_scene,
    find_nearest,
    find_nearest_point,
    get_shape_count,
)
from .lights import Light, clear_lights, get_light_count
from .manager import Scene
from .shapes import Disc, Ellipse, Plane, Rectangle, Shape, Sphere

__all__ = [
    # Shapes
    "Shape",
    "ShapeKind",
    "Sphere",
    "Plane",
    "Disc",
    "Rectangle",
    "Ellipse",
    # Lights
    "Light",
    "clear_lights",
    "get_light_count",
    # Intersection
    "SceneHitRecord",
    "clear_scene",
    "find_nearest",
    "find_nearest_point",
    "get_shape_count",
    # Manager
    "Scene",
]
