"""Materials module.

Components:
    phong: Material record (albedo weights, diffuse color, specular
        exponent, refractive index) and its device storage
"""

from .phong import (
    Material,
    MaterialRecord,
    add_material,
    clear_materials,
    get_material,
    get_material_count,
)

__all__ = [
    "Material",
    "MaterialRecord",
    "add_material",
    "clear_materials",
    "get_material",
    "get_material_count",
]
