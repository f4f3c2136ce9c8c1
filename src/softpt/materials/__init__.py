"""Materials module.

A single material model: diffuse albedo plus emitted radiance. Materials
live in Taichi fields and are referenced by integer ID.
"""

from .material import (
    MAX_MATERIALS,
    Material,
    add_material,
    clear_materials,
    get_material,
    get_material_count,
)

__all__ = [
    "Material",
    "MAX_MATERIALS",
    "add_material",
    "clear_materials",
    "get_material",
    "get_material_count",
]
