"""Rendering constants and frame settings.

The constants here are shared by the device-side code (shader, scene queries)
and the host-side scheduler. They are plain Python values, so Taichi folds
them into the compiled kernels as compile-time constants.

Example:
    >>> from whitted.config import RenderSettings
    >>> settings = RenderSettings(width=320, height=240, thread_count=4)
    >>> settings.pixel_count
    76800
"""

from dataclasses import dataclass

# =============================================================================
# Shading Constants
# =============================================================================

# Recursion depth at which the shader stops spawning secondary rays
MAX_DEPTH = 3

# Offset applied along the surface normal to secondary ray origins
RAY_EPSILON = 1e-3

# Hits at or beyond this distance are treated as background
HORIZON_DISTANCE = 1000.0

# |n . d| below this counts as a ray parallel to a planar surface
PARALLEL_EPSILON = 1e-6

# Color returned for rays that escape the scene or exceed the depth limit.
# Not black, so the depth limit shows as attenuated sky in mirrors.
BACKGROUND_COLOR = (0.2, 0.7, 0.8)

# =============================================================================
# Capacity Limits (storage is preallocated in Taichi fields)
# =============================================================================

MAX_SHAPES = 256
MAX_LIGHTS = 32
MAX_MATERIALS = 256

MAX_IMAGE_WIDTH = 2048
MAX_IMAGE_HEIGHT = 2048

# Frame buffers are either RGB or RGBA
SUPPORTED_CHANNELS = (3, 4)


@dataclass(frozen=True)
class RenderSettings:
    """Frame-level settings for a render.

    Attributes:
        width: Frame width in pixels.
        height: Frame height in pixels.
        thread_count: Number of horizontal bands rendered concurrently.
        channels: Bytes per pixel, 3 (RGB) or 4 (RGBA with opaque alpha).
        max_depth: Recursion limit for reflection/refraction rays.
    """

    width: int = 512
    height: int = 512
    thread_count: int = 8
    channels: int = 3
    max_depth: int = MAX_DEPTH

    def __post_init__(self) -> None:
        if not (0 < self.width <= MAX_IMAGE_WIDTH and 0 < self.height <= MAX_IMAGE_HEIGHT):
            raise ValueError(
                f"Frame dimensions ({self.width}x{self.height}) must be positive and "
                f"not exceed maximum supported ({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
            )
        if self.thread_count < 1:
            raise ValueError(f"thread_count must be at least 1, got {self.thread_count}")
        if self.channels not in SUPPORTED_CHANNELS:
            raise ValueError(f"channels must be 3 or 4, got {self.channels}")
        if self.max_depth < 0:
            raise ValueError(f"max_depth must be non-negative, got {self.max_depth}")

    @property
    def pixel_count(self) -> int:
        """Number of pixels in the frame."""
        return self.width * self.height

    @property
    def buffer_size(self) -> int:
        """Size of the frame buffer in bytes."""
        return self.pixel_count * self.channels
