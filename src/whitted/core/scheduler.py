"""Parallel frame scheduler.

A frame is rendered as a fork/join over horizontal bands of rows:

    IDLE -> DISPATCHING -> WORKERS_RUNNING -> JOINED -> IDLE

- DISPATCHING: the scene and camera are uploaded, the rows are partitioned
  into bands with ``split_bands`` and the band bounds are written to the
  device. The camera screen distance is computed for the frame height being
  rendered, so the field of view always spans the frame.
- WORKERS_RUNNING: one kernel launch renders the frame. Its outermost loop
  runs one iteration per band, which Taichi spreads over its CPU worker
  threads; each band walks its own rows top to bottom and columns left to
  right, so every byte of the frame is written by exactly one band and no
  locking is needed.
- JOINED: ``ti.sync()`` returns once every band has finished, and the frame
  is copied out of the device field.

Each pixel's color depends only on its coordinates, so the band layout
never changes the result: one band and many bands produce identical bytes.

Colors are tone mapped when written: a color whose largest channel exceeds 1
is scaled down by that channel, then every channel is clamped to [0, 1] and
converted to a byte by truncating ``255 * c``. RGBA frames get an opaque
alpha.

Rays that escape the scene or stop at the depth limit take
``BACKGROUND_COLOR``, a light sky blue rather than black. Truncated
recursion therefore stays visible: a mirror seen at the depth limit shows
the attenuated sky instead of a black hole.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.core.scheduler import render
    >>> from whitted.scene.showcase import create_showcase_scene
    >>>
    >>> scene, camera = create_showcase_scene(frame_height=240, seed=7)
    >>> frame = render(scene, camera, width=320, height=240, thread_count=4)
    >>> len(frame)
    230400
"""

import logging
import time
from enum import Enum

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from whitted.camera.pinhole import PinholeCamera, get_pixel_ray, setup_camera
from whitted.config import MAX_DEPTH, MAX_IMAGE_HEIGHT, MAX_IMAGE_WIDTH, RenderSettings
from whitted.core.ray import vec3
from whitted.core.shader import cast_ray
from whitted.scene.manager import Scene

logger = logging.getLogger(__name__)


class SchedulerState(Enum):
    """Lifecycle of a frame inside a FrameScheduler."""

    IDLE = "idle"
    DISPATCHING = "dispatching"
    WORKERS_RUNNING = "workers_running"
    JOINED = "joined"


# =============================================================================
# Band Partitioning
# =============================================================================


def split_bands(height: int, thread_count: int) -> list[tuple[int, int]]:
    """Partition ``height`` rows into contiguous bands.

    The bands have equal height except the last one, which also takes the
    remainder rows. ``thread_count`` is clamped to ``height`` so that no band
    is empty.

    Args:
        height: Number of rows in the frame.
        thread_count: Requested number of bands.

    Returns:
        A list of half-open ``(start_row, end_row)`` ranges covering every
        row exactly once, in top to bottom order.

    Raises:
        ValueError: If ``height`` or ``thread_count`` is less than 1.
    """
    if height < 1:
        raise ValueError(f"height must be at least 1, got {height}")
    if thread_count < 1:
        raise ValueError(f"thread_count must be at least 1, got {thread_count}")

    num_bands = min(thread_count, height)
    band_height = height // num_bands
    bands = [(i * band_height, (i + 1) * band_height) for i in range(num_bands)]
    last_start, _ = bands[-1]
    bands[-1] = (last_start, height)
    return bands


# =============================================================================
# Device Frame Buffer
# =============================================================================

# Band bounds, one entry per band (at most one band per row)
_band_starts = ti.field(dtype=ti.i32, shape=MAX_IMAGE_HEIGHT)
_band_ends = ti.field(dtype=ti.i32, shape=MAX_IMAGE_HEIGHT)

# Frame bytes, row-major with the top row first; preallocated to the maximum
# size so that frame size changes do not reallocate fields
_frame = ti.field(dtype=ti.u8, shape=(MAX_IMAGE_HEIGHT, MAX_IMAGE_WIDTH, 4))


def _upload_bands(bands: list[tuple[int, int]]) -> None:
    starts = np.zeros(MAX_IMAGE_HEIGHT, dtype=np.int32)
    ends = np.zeros(MAX_IMAGE_HEIGHT, dtype=np.int32)
    for i, (start, end) in enumerate(bands):
        starts[i] = start
        ends[i] = end
    _band_starts.from_numpy(starts)
    _band_ends.from_numpy(ends)


@ti.func
def tone_map(color: vec3) -> vec3:
    """Bring a linear color into [0, 1], preserving hue when it overflows."""
    mapped = color
    max_channel = tm.max(color[0], tm.max(color[1], color[2]))
    if max_channel > 1.0:
        mapped = color / max_channel
    return tm.clamp(mapped, 0.0, 1.0)


@ti.kernel
def _render_bands(
    num_bands: ti.i32,
    width: ti.i32,
    height: ti.i32,
    channels: ti.template(),
    max_depth: ti.template(),
):
    # Outermost loop is parallel: one iteration per band
    for band in range(num_bands):
        for row in range(_band_starts[band], _band_ends[band]):
            y = height // 2 - row
            for col in range(width):
                x = col - width // 2
                ray = get_pixel_ray(x, y)
                color = tone_map(cast_ray(ray.origin, ray.direction, 0, max_depth))
                for c in ti.static(range(3)):
                    _frame[row, col, c] = ti.cast(color[c] * 255.0, ti.u8)
                if ti.static(channels == 4):
                    _frame[row, col, 3] = ti.cast(255, ti.u8)


# =============================================================================
# Scheduler
# =============================================================================


class FrameScheduler:
    """Renders frames of a fixed size by splitting rows into bands.

    One scheduler renders one frame at a time; the scene it renders is kept
    in flight (read-only) until the frame has been joined.

    Attributes:
        settings: Frame size, band count, channels and depth limit.
    """

    def __init__(self, settings: RenderSettings | None = None) -> None:
        self.settings = settings if settings is not None else RenderSettings()
        self._state = SchedulerState.IDLE
        self.last_frame_seconds = 0.0

    @property
    def state(self) -> SchedulerState:
        """The current stage of the frame lifecycle."""
        return self._state

    def render_array(self, scene: Scene, camera: PinholeCamera) -> npt.NDArray[np.uint8]:
        """Render one frame and return it as a (height, width, channels) array.

        Raises:
            RuntimeError: If a frame is already being rendered by this scheduler,
                or a device table capacity is exceeded during upload.
        """
        if self._state is not SchedulerState.IDLE:
            raise RuntimeError(f"Scheduler is busy ({self._state.value})")

        settings = self.settings
        start = time.perf_counter()
        self._state = SchedulerState.DISPATCHING
        try:
            with scene.frame():
                setup_camera(camera, settings.height)
                bands = split_bands(settings.height, settings.thread_count)
                _upload_bands(bands)
                logger.debug(
                    "Dispatching %dx%d frame in %d bands",
                    settings.width,
                    settings.height,
                    len(bands),
                )

                self._state = SchedulerState.WORKERS_RUNNING
                _render_bands(
                    len(bands),
                    settings.width,
                    settings.height,
                    settings.channels,
                    settings.max_depth,
                )
                ti.sync()
                self._state = SchedulerState.JOINED

            frame = _frame.to_numpy()[: settings.height, : settings.width, : settings.channels]
        finally:
            self._state = SchedulerState.IDLE

        self.last_frame_seconds = time.perf_counter() - start
        logger.debug("Frame joined in %.3fs", self.last_frame_seconds)
        return np.ascontiguousarray(frame)

    def render(self, scene: Scene, camera: PinholeCamera) -> bytes:
        """Render one frame and return its bytes (row-major, top row first)."""
        return self.render_array(scene, camera).tobytes()


# =============================================================================
# Public Rendering API
# =============================================================================


def render_array(
    scene: Scene,
    camera: PinholeCamera,
    width: int,
    height: int,
    thread_count: int,
    channels: int = 3,
    max_depth: int = MAX_DEPTH,
) -> npt.NDArray[np.uint8]:
    """Render a frame and return it as a (height, width, channels) uint8 array.

    Raises:
        ValueError: If the frame settings are invalid.
    """
    settings = RenderSettings(
        width=width,
        height=height,
        thread_count=thread_count,
        channels=channels,
        max_depth=max_depth,
    )
    return FrameScheduler(settings).render_array(scene, camera)


def render(
    scene: Scene,
    camera: PinholeCamera,
    width: int,
    height: int,
    thread_count: int,
    channels: int = 3,
    max_depth: int = MAX_DEPTH,
) -> bytes:
    """Render a frame into a byte buffer.

    Args:
        scene: The shapes and lights to render.
        camera: The camera to render from. Its field of view is fitted to
            ``height`` whatever the camera's own ``frame_height``.
        width: Frame width in pixels.
        height: Frame height in pixels.
        thread_count: Number of bands rendered concurrently.
        channels: 3 for RGB or 4 for RGBA.
        max_depth: Recursion limit for reflection and refraction.

    Returns:
        ``width * height * channels`` bytes, row-major with the top row first.

    Raises:
        ValueError: If the frame settings are invalid.
        RuntimeError: If a device table capacity is exceeded.
    """
    return render_array(
        scene, camera, width, height, thread_count, channels, max_depth
    ).tobytes()
