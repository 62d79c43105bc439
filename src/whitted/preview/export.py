"""Image export utilities for rendered frames.

The scheduler produces raw frame buffers: ``width * height * channels``
bytes, row-major with the top row first. This module wraps them as Pillow
images and writes them to disk.

Supported formats:
    - Any still format Pillow infers from the file extension (PNG, BMP, ...)
    - Animated GIF for frame sequences

Example:
    >>> from whitted.core.scheduler import render
    >>> from whitted.preview.export import save_frame
    >>>
    >>> frame = render(scene, camera, 256, 256, thread_count=8)
    >>> save_frame(frame, 256, 256, "output.png")
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

_MODES = {3: "RGB", 4: "RGBA"}


def frame_to_array(
    buffer: bytes, width: int, height: int, channels: int = 3
) -> npt.NDArray[np.uint8]:
    """View a frame buffer as a (height, width, channels) uint8 array.

    Raises:
        ValueError: If the channel count is unsupported or the buffer size
            does not match the frame dimensions.
    """
    if channels not in _MODES:
        raise ValueError(f"channels must be 3 or 4, got {channels}")
    expected = width * height * channels
    if len(buffer) != expected:
        raise ValueError(
            f"Frame buffer holds {len(buffer)} bytes, expected {expected} "
            f"for {width}x{height}x{channels}"
        )
    return np.frombuffer(buffer, dtype=np.uint8).reshape(height, width, channels)


def frame_to_image(
    buffer: bytes, width: int, height: int, channels: int = 3
) -> PILImage.Image:
    """Wrap a frame buffer as a Pillow image (RGB or RGBA)."""
    array = frame_to_array(buffer, width, height, channels)
    return PILImage.fromarray(array)


def save_frame(
    buffer: bytes,
    width: int,
    height: int,
    filepath: str | Path,
    channels: int = 3,
) -> None:
    """Save a frame buffer to an image file.

    The format follows the file extension. BMP files are written as RGB;
    the alpha channel of an RGBA frame is dropped for formats without one.

    Args:
        buffer: The frame bytes.
        width: Frame width in pixels.
        height: Frame height in pixels.
        filepath: Output file path.
        channels: Bytes per pixel in ``buffer`` (3 or 4).
    """
    image = frame_to_image(buffer, width, height, channels)
    if Path(filepath).suffix.lower() in (".bmp", ".jpg", ".jpeg"):
        image = image.convert("RGB")
    image.save(filepath)


def save_animation(
    frames: Sequence[bytes],
    width: int,
    height: int,
    filepath: str | Path,
    frame_duration_ms: int = 50,
    channels: int = 3,
    loop: int = 0,
) -> None:
    """Save a sequence of frame buffers as an animated GIF.

    Args:
        frames: Frame buffers in display order (at least one).
        width: Frame width in pixels.
        height: Frame height in pixels.
        filepath: Output file path (should end in .gif).
        frame_duration_ms: Display time of each frame in milliseconds.
        channels: Bytes per pixel in each buffer (3 or 4).
        loop: Number of times the animation repeats (0 loops forever).

    Raises:
        ValueError: If ``frames`` is empty.
    """
    if not frames:
        raise ValueError("At least one frame is required")
    images = [frame_to_image(f, width, height, channels).convert("RGB") for f in frames]
    images[0].save(
        filepath,
        format="GIF",
        save_all=True,
        append_images=images[1:],
        duration=frame_duration_ms,
        loop=loop,
    )
