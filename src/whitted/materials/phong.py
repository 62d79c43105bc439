"""Phong-style surface materials for the Whitted shader.

A material describes how a surface point combines four contributions into
its final color, each scaled by one of the four albedo weights:

    color = diffuse_color * diffuse * albedo[0]     (Lambert term)
          + white * specular * albedo[1]            (Phong highlight)
          + reflected_color * albedo[2]             (mirror reflection)
          + refracted_color * albedo[3]             (transmission)

The weights are not required to sum to 1. ``diffuse_color`` may exceed 1;
the scheduler tone-maps the final color when it writes bytes.

Host code builds immutable ``Material`` records. The scene uploads them into
the preallocated Taichi fields below, and the shader reads them back with
``get_material`` by index.

Example:
    >>> from whitted.materials.phong import Material
    >>> ivory = Material(
    ...     refractive_index=1.0,
    ...     albedo=(0.6, 0.3, 0.1, 0.0),
    ...     diffuse_color=(0.4, 0.4, 0.3),
    ...     specular_exponent=50.0,
    ... )
"""

import math
from dataclasses import dataclass

import taichi as ti
import taichi.math as tm

from whitted.config import MAX_MATERIALS

# Type aliases for Taichi vectors
vec3 = tm.vec3
vec4 = tm.vec4


@dataclass(frozen=True)
class Material:
    """Immutable surface material.

    Attributes:
        refractive_index: Index of refraction of the medium behind the
            surface (must be positive; 1.0 for air).
        albedo: Weights of the (diffuse, specular, reflection, refraction)
            contributions. Each must be non-negative.
        diffuse_color: RGB base color of the Lambert term.
        specular_exponent: Phong exponent controlling highlight size
            (non-negative).
    """

    refractive_index: float = 1.0
    albedo: tuple[float, float, float, float] = (1.0, 0.0, 0.0, 0.0)
    diffuse_color: tuple[float, float, float] = (0.0, 0.0, 0.0)
    specular_exponent: float = 0.0

    def __post_init__(self) -> None:
        if not self.refractive_index > 0.0:
            raise ValueError(
                f"refractive_index must be positive, got {self.refractive_index}"
            )
        if len(self.albedo) != 4:
            raise ValueError(f"albedo must have 4 weights, got {len(self.albedo)}")
        if any(not math.isfinite(w) or w < 0.0 for w in self.albedo):
            raise ValueError(f"albedo weights must be finite and non-negative, got {self.albedo}")
        if len(self.diffuse_color) != 3:
            raise ValueError(f"diffuse_color must be RGB, got {self.diffuse_color}")
        if any(not math.isfinite(c) or c < 0.0 for c in self.diffuse_color):
            raise ValueError(f"diffuse_color components must be non-negative, got {self.diffuse_color}")
        if not self.specular_exponent >= 0.0:
            raise ValueError(
                f"specular_exponent must be non-negative, got {self.specular_exponent}"
            )
        # Normalise sequences so equal materials compare and hash equal
        object.__setattr__(self, "albedo", tuple(float(w) for w in self.albedo))
        object.__setattr__(self, "diffuse_color", tuple(float(c) for c in self.diffuse_color))


@ti.dataclass
class MaterialRecord:
    """Device-side copy of a Material.

    Attributes:
        refractive_index: Index of refraction.
        albedo: (diffuse, specular, reflection, refraction) weights.
        diffuse_color: RGB color of the Lambert term.
        specular_exponent: Phong exponent.
    """

    refractive_index: ti.f32
    albedo: vec4
    diffuse_color: vec3
    specular_exponent: ti.f32


# Material storage: Structure of Arrays layout
material_refractive_indices = ti.field(dtype=ti.f32, shape=MAX_MATERIALS)
material_albedos = ti.Vector.field(4, dtype=ti.f32, shape=MAX_MATERIALS)
material_diffuse_colors = ti.Vector.field(3, dtype=ti.f32, shape=MAX_MATERIALS)
material_specular_exponents = ti.field(dtype=ti.f32, shape=MAX_MATERIALS)
num_materials = ti.field(dtype=ti.i32, shape=())


def clear_materials() -> None:
    """Forget all uploaded materials.

    Only the count is reset; stale slots are overwritten by later uploads.
    """
    num_materials[None] = 0


def add_material(material: Material) -> int:
    """Upload a material and return its index.

    Args:
        material: The material to store.

    Returns:
        The index to reference the material from shapes.

    Raises:
        RuntimeError: If the maximum number of materials is exceeded.
    """
    idx = num_materials[None]
    if idx >= MAX_MATERIALS:
        raise RuntimeError(f"Maximum number of materials ({MAX_MATERIALS}) exceeded")
    material_refractive_indices[idx] = material.refractive_index
    material_albedos[idx] = list(material.albedo)
    material_diffuse_colors[idx] = list(material.diffuse_color)
    material_specular_exponents[idx] = material.specular_exponent
    num_materials[None] = idx + 1
    return idx


def get_material_count() -> int:
    """Get the number of uploaded materials."""
    return int(num_materials[None])


@ti.func
def get_material(material_id: ti.i32) -> MaterialRecord:
    """Read an uploaded material by index (for use inside kernels)."""
    return MaterialRecord(
        refractive_index=material_refractive_indices[material_id],
        albedo=material_albedos[material_id],
        diffuse_color=material_diffuse_colors[material_id],
        specular_exponent=material_specular_exponents[material_id],
    )
