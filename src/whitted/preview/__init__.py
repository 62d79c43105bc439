"""Preview module for frame output.

Components:
    export: Frame buffer to Pillow image, PNG/BMP files and animated GIFs
"""

from .export import frame_to_array, frame_to_image, save_animation, save_frame

__all__ = [
    "frame_to_array",
    "frame_to_image",
    "save_frame",
    "save_animation",
]
