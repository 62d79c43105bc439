"""Point lights.

A light is a position and a scalar intensity. Lights are immutable host
records; the scene uploads them into the fields below before each frame and
the shader loops over them with ``get_light_count``/``light_positions``.
"""

import math
from dataclasses import dataclass

import taichi as ti

from whitted.config import MAX_LIGHTS


@dataclass(frozen=True)
class Light:
    """An immutable point light.

    Attributes:
        position: World-space position of the light.
        intensity: Non-negative scalar intensity.
    """

    position: tuple[float, float, float]
    intensity: float = 1.0

    def __post_init__(self) -> None:
        if len(self.position) != 3:
            raise ValueError(f"position must have 3 components, got {self.position}")
        if not (math.isfinite(self.intensity) and self.intensity >= 0.0):
            raise ValueError(f"intensity must be non-negative, got {self.intensity}")
        object.__setattr__(self, "position", tuple(float(c) for c in self.position))


# Light storage: Structure of Arrays layout
light_positions = ti.Vector.field(3, dtype=ti.f32, shape=MAX_LIGHTS)
light_intensities = ti.field(dtype=ti.f32, shape=MAX_LIGHTS)
num_lights = ti.field(dtype=ti.i32, shape=())


def clear_lights() -> None:
    """Remove all uploaded lights."""
    num_lights[None] = 0


def add_light(light: Light) -> int:
    """Upload a light and return its index.

    Raises:
        RuntimeError: If the maximum number of lights is exceeded.
    """
    idx = num_lights[None]
    if idx >= MAX_LIGHTS:
        raise RuntimeError(f"Maximum number of lights ({MAX_LIGHTS}) exceeded")
    light_positions[idx] = list(light.position)
    light_intensities[idx] = light.intensity
    num_lights[None] = idx + 1
    return idx


def get_light_count() -> int:
    """Get the number of uploaded lights."""
    return int(num_lights[None])
