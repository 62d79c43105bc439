"""Camera module for view and ray generation.

Components:
    pinhole: Pinhole (perspective) camera with a rotatable basis

Ray generation uses centered pixel coordinates:
    x: column offset from the screen center, growing to the right
    y: row offset from the screen center, growing upward
"""

from .pinhole import (
    PinholeCamera,
    get_camera_info,
    get_pixel_ray,
    setup_camera,
)

__all__ = [
    "PinholeCamera",
    "setup_camera",
    "get_pixel_ray",
    "get_camera_info",
]
