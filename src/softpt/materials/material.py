"""Diffuse/emissive material model and material storage.

There is a single material model. A surface emits ``emissive`` radiance and
reflects incoming radiance scaled per channel by ``albedo``. ``roughness`` is
stored with the material but the shading model does not read it.

Materials live in Taichi fields indexed by material ID; spheres refer to
materials by that ID, so adding materials never invalidates a reference.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from softpt.materials.material import add_material, get_material
    >>> mat_id = add_material(albedo=(1.0, 0.5, 0.5), emissive=(0.0, 0.0, 0.0))
    >>> # inside a kernel: get_material(mat_id).albedo
"""

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors
vec3 = tm.vec3


@ti.dataclass
class Material:
    """Material properties read by the path integrator.

    Attributes:
        albedo: Per-channel diffuse reflectance (RGB), expected in [0, 1]
            but not enforced.
        emissive: Per-channel emitted radiance (RGB). Any positive channel
            makes the surface a light source.
        roughness: Reserved; not used by the current shading model.
    """

    albedo: vec3
    emissive: vec3
    roughness: ti.f32


# =============================================================================
# Material Field Storage
# =============================================================================

# Maximum number of materials in the scene
MAX_MATERIALS = 256

material_albedos = ti.Vector.field(3, dtype=ti.f32, shape=MAX_MATERIALS)
material_emissives = ti.Vector.field(3, dtype=ti.f32, shape=MAX_MATERIALS)
material_roughness = ti.field(dtype=ti.f32, shape=MAX_MATERIALS)
num_materials = ti.field(dtype=ti.i32, shape=())


def clear_materials() -> None:
    """Clear all materials.

    Resets the material count to zero. Existing data in the fields will be
    overwritten when new materials are added.
    """
    num_materials[None] = 0


def add_material(
    albedo: tuple[float, float, float],
    emissive: tuple[float, float, float] = (0.0, 0.0, 0.0),
    roughness: float = 1.0,
) -> int:
    """Add a material to the material registry.

    Args:
        albedo: The diffuse reflectance as an (R, G, B) tuple.
        emissive: The emitted radiance as an (R, G, B) tuple.
        roughness: Stored as-is; unused by shading.

    Returns:
        The material ID of the added material.

    Raises:
        RuntimeError: If the maximum number of materials is exceeded.
    """
    idx = num_materials[None]
    if idx >= MAX_MATERIALS:
        raise RuntimeError(f"Maximum number of materials ({MAX_MATERIALS}) exceeded")

    material_albedos[idx] = vec3(albedo[0], albedo[1], albedo[2])
    material_emissives[idx] = vec3(emissive[0], emissive[1], emissive[2])
    material_roughness[idx] = roughness
    num_materials[None] = idx + 1
    return idx


def get_material_count() -> int:
    """Get the number of materials in the registry."""
    return int(num_materials[None])


@ti.func
def get_material(material_id: ti.i32) -> Material:
    """Look up a material by ID.

    Args:
        material_id: Index into the material registry. Must be valid; the
            scene manager checks IDs when spheres are added.

    Returns:
        The Material stored at that index.
    """
    return Material(
        albedo=material_albedos[material_id],
        emissive=material_emissives[material_id],
        roughness=material_roughness[material_id],
    )
