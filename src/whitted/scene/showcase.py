"""Showcase scene configuration.

This module provides a factory for the demo scene rendered by the example
script: a corner of three matte walls holding one of each surface kind.

The showcase consists of:
- Left wall, back wall and floor: infinite red rubber planes
- Ivory disc tilted toward the camera (the shape the animation moves)
- Glass rectangle in front of a mirror sphere
- Optional ellipse with a randomly colored matte material
- Two point lights above the camera

Random colors are drawn from an explicit ``numpy.random.Generator``, so a
given seed always produces the same scene.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.scene.showcase import create_showcase_scene
    >>>
    >>> scene, camera = create_showcase_scene(frame_height=256, seed=1)
    >>> len(scene.shapes)
    7
"""

import math
from dataclasses import dataclass

import numpy as np

from whitted.camera.pinhole import PinholeCamera
from whitted.materials.phong import Material
from whitted.scene.lights import Light
from whitted.scene.manager import Scene
from whitted.scene.shapes import Disc, Ellipse, Plane, Rectangle, Sphere

# =============================================================================
# Showcase Materials
# =============================================================================

IVORY = Material(1.0, (0.6, 0.3, 0.1, 0.0), (0.4, 0.4, 0.3), 50.0)
GLASS = Material(1.5, (0.0, 0.5, 0.1, 0.8), (0.6, 0.7, 0.8), 125.0)
RED_RUBBER = Material(1.0, (0.9, 0.1, 0.0, 0.0), (0.3, 0.1, 0.1), 10.0)
MIRROR = Material(1.0, (0.0, 10.0, 0.8, 0.0), (1.0, 1.0, 1.0), 1425.0)

# =============================================================================
# Showcase Parameters
# =============================================================================

# Position of the disc in Scene.shapes (moved between animation frames)
DISC_INDEX = 3

# Default animation: the disc travels 5 units along +x over 32 frames
DEFAULT_FRAME_COUNT = 32
DISC_TRAVEL = 5.0


@dataclass
class ShowcaseParams:
    """Parameters for configuring the showcase scene.

    Attributes:
        field_of_view: Vertical field of view of the camera in radians.
        include_ellipse: Whether to add the randomly colored ellipse.
        light_intensities: Intensities of the left and right lights.

    Example:
        >>> params = ShowcaseParams(include_ellipse=False)
        >>> params.light_intensities
        (1.5, 1.8)
    """

    field_of_view: float = math.pi / 3.0
    include_ellipse: bool = True
    light_intensities: tuple[float, float] = (1.5, 1.8)


def random_color(rng: np.random.Generator) -> tuple[float, float, float]:
    """Draw an RGB color with 8-bit channel resolution."""
    channels = rng.integers(0, 256, size=3)
    return tuple(float(c) / 255.0 for c in channels)


def random_matte_material(rng: np.random.Generator) -> Material:
    """A mostly diffuse material with a random color."""
    return Material(1.0, (0.8, 0.2, 0.0, 0.0), random_color(rng), 20.0)


# =============================================================================
# Showcase Factory
# =============================================================================


def create_showcase_scene(
    frame_height: int = 256,
    seed: int | None = None,
    params: ShowcaseParams | None = None,
    rng: np.random.Generator | None = None,
) -> tuple[Scene, PinholeCamera]:
    """Create the showcase scene and a camera at the origin looking down -z.

    Args:
        frame_height: Height of the frames the camera renders.
        seed: Seed for the random colors, used when ``rng`` is not given.
        params: Optional ShowcaseParams; defaults to ShowcaseParams().
        rng: Random generator for the random colors.

    Returns:
        A tuple of (Scene, PinholeCamera).
    """
    if params is None:
        params = ShowcaseParams()
    if rng is None:
        rng = np.random.default_rng(seed)

    scene = Scene()

    # Walls
    scene.add_shape(Plane((-6.0, 0.0, -20.0), (1.0, 0.0, 0.0), RED_RUBBER))
    scene.add_shape(Plane((5.0, 0.0, -15.0), (0.0, 0.0, 1.0), RED_RUBBER))
    scene.add_shape(Plane((0.0, -4.0, 0.0), (0.0, 1.0, 0.0), RED_RUBBER))

    # Shapes
    scene.add_shape(Disc((-3.0, 0.0, -10.0), 2.0, (0.0, 1.0, 1.0), IVORY))
    scene.add_shape(Rectangle((3.0, 0.0, -5.0), 4.0, 4.0, (0.0, 0.0, 1.0), GLASS))
    scene.add_shape(Sphere((3.0, 0.0, -10.0), 2.0, MIRROR))
    if params.include_ellipse:
        scene.add_shape(
            Ellipse.from_foci(
                (-1.5, -3.0, -14.0),
                (1.5, -3.0, -14.0),
                1.0,
                (0.0, 0.0, 1.0),
                random_matte_material(rng),
            )
        )

    left_intensity, right_intensity = params.light_intensities
    scene.add_light(Light((-5.0, 10.0, -1.0), left_intensity))
    scene.add_light(Light((5.0, 10.0, -1.0), right_intensity))

    camera = PinholeCamera(frame_height=frame_height, field_of_view=params.field_of_view)
    return scene, camera


def advance_animation(scene: Scene, frame_count: int = DEFAULT_FRAME_COUNT) -> None:
    """Move the showcase disc one animation step along +x."""
    scene.move_shape(DISC_INDEX, (DISC_TRAVEL / frame_count, 0.0, 0.0))
