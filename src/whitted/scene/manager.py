"""Scene container coordinating shapes, lights and their materials.

A ``Scene`` keeps the host-side description of everything that is rendered:
the ordered shape list and the point lights. Before a frame is rendered the
scheduler calls ``upload``, which rewrites the device-side material, shape and
light tables from that description:

- materials are deduplicated, so shapes sharing an equal ``Material`` share
  one material index on the device;
- shapes are stored in insertion order, which is what makes the nearest-hit
  tie-break deterministic;
- lights are stored in insertion order.

While a frame is being rendered the scene is marked in flight. Adding or
removing shapes or lights through the scene in that window raises
``RuntimeError``; the device tables the kernel reads would otherwise no
longer match the scene.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.materials.phong import Material
    >>> from whitted.scene.lights import Light
    >>> from whitted.scene.manager import Scene
    >>> from whitted.scene.shapes import Sphere
    >>> scene = Scene()
    >>> scene.add_shape(Sphere((0.0, 0.0, -5.0), 1.0, Material()))
    0
    >>> scene.add_light(Light((-20.0, 20.0, 20.0), 1.5))
    0
    >>> scene.upload()
"""

import logging
from contextlib import contextmanager
from typing import Iterator

from whitted.materials.phong import Material, add_material, clear_materials
from whitted.scene.intersection import clear_scene
from whitted.scene.lights import Light, add_light, clear_lights
from whitted.scene.shapes import SHAPE_TYPES, Shape

logger = logging.getLogger(__name__)


class Scene:
    """Ordered shapes plus point lights.

    Attributes:
        shapes: The shapes in insertion order (read-only view).
        lights: The lights in insertion order (read-only view).
    """

    def __init__(self) -> None:
        self._shapes: list[Shape] = []
        self._lights: list[Light] = []
        self._frames_in_flight = 0

    @property
    def shapes(self) -> tuple[Shape, ...]:
        return tuple(self._shapes)

    @property
    def lights(self) -> tuple[Light, ...]:
        return tuple(self._lights)

    @property
    def in_flight(self) -> bool:
        """Whether a frame using this scene is currently being rendered."""
        return self._frames_in_flight > 0

    def __len__(self) -> int:
        return len(self._shapes)

    # =========================================================================
    # Building
    # =========================================================================

    def add_shape(self, shape: Shape) -> int:
        """Append a shape and return its position in the scene.

        Raises:
            TypeError: If ``shape`` is not one of the supported shapes.
            RuntimeError: If a frame is being rendered.
        """
        self._check_mutable()
        if not isinstance(shape, SHAPE_TYPES):
            raise TypeError(f"Unsupported shape type: {type(shape).__name__}")
        self._shapes.append(shape)
        return len(self._shapes) - 1

    def add_light(self, light: Light) -> int:
        """Append a light and return its position in the scene.

        Raises:
            RuntimeError: If a frame is being rendered.
        """
        self._check_mutable()
        self._lights.append(light)
        return len(self._lights) - 1

    def move_shape(self, index: int, offset) -> None:
        """Translate the shape at ``index`` by ``offset``."""
        self._check_mutable()
        self._shapes[index].move(offset)

    def remove_shape(self, index: int) -> Shape:
        """Remove and return the shape at ``index``."""
        self._check_mutable()
        return self._shapes.pop(index)

    def clear(self) -> None:
        """Remove all shapes and lights."""
        self._check_mutable()
        self._shapes.clear()
        self._lights.clear()

    def _check_mutable(self) -> None:
        if self.in_flight:
            raise RuntimeError("Scene cannot be modified while a frame is being rendered")

    # =========================================================================
    # Device Upload
    # =========================================================================

    def upload(self) -> None:
        """Rewrite the device material, shape and light tables from this scene.

        Raises:
            RuntimeError: If a device table capacity is exceeded.
        """
        clear_materials()
        clear_scene()
        clear_lights()

        material_ids: dict[Material, int] = {}
        for shape in self._shapes:
            material_id = material_ids.get(shape.material)
            if material_id is None:
                material_id = add_material(shape.material)
                material_ids[shape.material] = material_id
            shape.store(material_id)

        for light in self._lights:
            add_light(light)

        logger.debug(
            "Uploaded scene: %d shapes, %d materials, %d lights",
            len(self._shapes),
            len(material_ids),
            len(self._lights),
        )

    # =========================================================================
    # Frame Lifetime
    # =========================================================================

    def begin_frame(self) -> None:
        """Mark a frame as in flight; the scene rejects mutation until it ends."""
        self._frames_in_flight += 1

    def end_frame(self) -> None:
        if self._frames_in_flight == 0:
            raise RuntimeError("end_frame() called without a matching begin_frame()")
        self._frames_in_flight -= 1

    @contextmanager
    def frame(self) -> Iterator["Scene"]:
        """Upload the scene and keep it in flight for the duration of the block."""
        self.upload()
        self.begin_frame()
        try:
            yield self
        finally:
            self.end_frame()

    def __repr__(self) -> str:
        return f"Scene(shapes={len(self._shapes)}, lights={len(self._lights)})"
