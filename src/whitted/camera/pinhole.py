"""Pinhole camera model for primary ray generation.

The camera is an eye point plus an orthonormal basis:
- horizontal: points right in the image plane
- vertical: points up in the image plane
- direction: points from the eye toward the screen center

The screen sits ``screen_distance`` pixels in front of the eye, where

    screen_distance = frame_height / (2 * tan(field_of_view / 2))

so one world unit on the screen corresponds to one pixel and the vertical
field of view spans exactly ``frame_height`` rows. Pixel coordinates are
centered: column ``x`` runs from ``-W/2`` to ``W/2 - 1`` left to right and row
``y`` from ``H/2`` down to ``-H/2 + 1`` top to bottom.

The camera is configured on the host (``PinholeCamera``) and uploaded with
``setup_camera`` before rendering; kernels then call ``get_pixel_ray``.

Example:
    >>> import math
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.camera.pinhole import PinholeCamera, get_pixel_ray, setup_camera
    >>>
    >>> camera = PinholeCamera(frame_height=512, field_of_view=math.pi / 3)
    >>> camera.rotate_y(math.radians(10.0))
    >>> setup_camera(camera)
    >>>
    >>> @ti.kernel
    ... def render():
    ...     ray = get_pixel_ray(0, 0)  # Ray through the screen center
"""

import math

import numpy as np
import taichi as ti
import taichi.math as tm

from whitted.core.ray import Ray, make_ray
from whitted.core.transform import LocalFrame, Vector, as_vector, normalize

DEFAULT_FIELD_OF_VIEW = math.pi / 3.0
DEFAULT_FRAME_HEIGHT = 512

# =============================================================================
# Camera Model (Python-side)
# =============================================================================


class PinholeCamera(LocalFrame):
    """A perspective camera with a rotatable orthonormal basis.

    The cached ``direction * screen_distance`` offset is refreshed by every
    operation that changes either factor, so ``pixel_direction`` never sees a
    stale value.

    Attributes:
        position: Eye position in world space.
        frame_height: Height in pixels of the frame the camera renders.
        field_of_view: Vertical field of view in radians.
        screen_distance: Distance from the eye to the screen, in pixels.
    """

    def __init__(
        self,
        frame_height: int = DEFAULT_FRAME_HEIGHT,
        field_of_view: float = DEFAULT_FIELD_OF_VIEW,
        position=(0.0, 0.0, 0.0),
    ) -> None:
        if frame_height < 1:
            raise ValueError(f"frame_height must be positive, got {frame_height}")
        self.frame_height = int(frame_height)
        self.position = as_vector(position)
        self._direction_times_distance = np.zeros(3)
        self.screen_distance = 0.0
        super().__init__()
        self.set_field_of_view(field_of_view)

    @property
    def direction_times_distance(self) -> Vector:
        """Vector from the eye to the screen center (copy)."""
        return self._direction_times_distance.copy()

    def set_field_of_view(self, field_of_view: float) -> None:
        """Set the vertical field of view in radians, in (0, pi)."""
        if not 0.0 < field_of_view < math.pi:
            raise ValueError(f"field_of_view must be in (0, pi), got {field_of_view}")
        self.field_of_view = float(field_of_view)
        self.screen_distance = self.screen_distance_for(self.frame_height)
        self._on_orientation_changed()

    def screen_distance_for(self, frame_height: int) -> float:
        """Eye-to-screen distance that fits the field of view to ``frame_height`` rows."""
        return frame_height / (2.0 * math.tan(self.field_of_view / 2.0))

    def look_at(self, target) -> None:
        """Turn the camera toward a world-space point."""
        self.set_direction(normalize(as_vector(target) - self.position))

    def move(self, offset) -> None:
        self.position = self.position + as_vector(offset)

    def pixel_direction(self, x: int, y: int) -> Vector:
        """Unit direction of the primary ray through centered pixel (x, y)."""
        return normalize(
            self._horizontal * x + self._vertical * y + self._direction_times_distance
        )

    def _on_orientation_changed(self) -> None:
        self._direction_times_distance = self._direction * self.screen_distance

    def __repr__(self) -> str:
        return (
            f"PinholeCamera(position={self.position.tolist()}, "
            f"direction={self._direction.tolist()}, field_of_view={self.field_of_view})"
        )


# =============================================================================
# Taichi Fields for Camera State (GPU-accessible)
# =============================================================================

_camera_position = ti.Vector.field(3, dtype=ti.f32, shape=())
_camera_horizontal = ti.Vector.field(3, dtype=ti.f32, shape=())
_camera_vertical = ti.Vector.field(3, dtype=ti.f32, shape=())
# Eye-to-screen-center offset (direction * screen_distance)
_camera_screen_center = ti.Vector.field(3, dtype=ti.f32, shape=())


def setup_camera(camera: PinholeCamera, frame_height: int | None = None) -> None:
    """Upload the camera state to the device.

    Must be called before rendering and again after the camera changes.

    Args:
        camera: The camera to upload.
        frame_height: Height of the frame about to be rendered. The screen
            distance is recomputed for it, so the field of view spans the
            frame whatever ``camera.frame_height`` is. Defaults to
            ``camera.frame_height``.
    """
    if frame_height is None:
        screen_center = camera.direction_times_distance
    else:
        if frame_height < 1:
            raise ValueError(f"frame_height must be positive, got {frame_height}")
        screen_center = camera.direction * camera.screen_distance_for(frame_height)
    _camera_position[None] = camera.position.tolist()
    _camera_horizontal[None] = camera.horizontal.tolist()
    _camera_vertical[None] = camera.vertical.tolist()
    _camera_screen_center[None] = screen_center.tolist()


# =============================================================================
# Ray Generation (Taichi-compatible, GPU-callable)
# =============================================================================


@ti.func
def get_pixel_ray(x: ti.i32, y: ti.i32) -> Ray:
    """Primary ray from the eye through centered pixel (x, y).

    Args:
        x: Centered column, negative to the left of the screen center.
        y: Centered row, positive above the screen center.

    Returns:
        A Ray starting at the eye with a unit direction.
    """
    offset = (
        _camera_horizontal[None] * ti.cast(x, ti.f32)
        + _camera_vertical[None] * ti.cast(y, ti.f32)
        + _camera_screen_center[None]
    )
    return make_ray(_camera_position[None], tm.normalize(offset))


# =============================================================================
# Utility Functions
# =============================================================================


def get_camera_info() -> dict[str, tuple[float, float, float]]:
    """Get the uploaded camera state for debugging.

    Returns:
        Dictionary with position, horizontal, vertical and screen_center.
    """
    fields = {
        "position": _camera_position,
        "horizontal": _camera_horizontal,
        "vertical": _camera_vertical,
        "screen_center": _camera_screen_center,
    }
    info = {}
    for name, field in fields.items():
        vec = field[None]
        info[name] = (float(vec[0]), float(vec[1]), float(vec[2]))
    return info
