"""Scene description and the manager that uploads it to Taichi fields.

A ``Scene`` is an immutable value: an ordered tuple of materials and an
ordered tuple of spheres, each sphere naming its material by index. The
``SceneManager`` mirrors a scene into the material and sphere fields read by
the integrator, and keeps the host-side records for inspection.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from softpt.scene.manager import SceneManager
    >>> scene = SceneManager()
    >>> light = scene.add_material(albedo=(0.0, 0.0, 0.0), emissive=(4.0, 4.0, 4.0))
    >>> scene.add_sphere(center=(0, 0, 2), radius=0.5, material_id=light)
    >>> frozen = scene.to_scene()
"""

import logging
from dataclasses import dataclass

import taichi.math as tm

from softpt.materials.material import (
    MAX_MATERIALS,
    add_material,
    clear_materials,
    get_material_count,
)
from softpt.scene.intersection import (
    MAX_SPHERES,
    add_sphere,
    clear_scene,
    get_sphere_count,
)

# Type alias for 3D vectors
vec3 = tm.vec3

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MaterialInfo:
    """Host-side description of a material.

    Attributes:
        albedo: Per-channel diffuse reflectance (R, G, B).
        emissive: Per-channel emitted radiance (R, G, B).
        roughness: Reserved; not used by shading.
    """

    albedo: tuple[float, float, float]
    emissive: tuple[float, float, float] = (0.0, 0.0, 0.0)
    roughness: float = 1.0


@dataclass(frozen=True)
class SphereInfo:
    """Host-side description of a sphere.

    Attributes:
        center: The center of the sphere.
        radius: The radius of the sphere (only its square matters).
        material_id: Index of the sphere's material in the scene.
    """

    center: tuple[float, float, float]
    radius: float
    material_id: int


@dataclass(frozen=True)
class Scene:
    """An immutable, ordered collection of materials and spheres.

    Attributes:
        materials: Materials, addressed by position.
        spheres: Spheres in intersection order; on exactly equal hit
            distances the earlier sphere wins.

    Raises:
        ValueError: If a sphere names a material index that does not exist.
    """

    materials: tuple[MaterialInfo, ...] = ()
    spheres: tuple[SphereInfo, ...] = ()

    def __post_init__(self) -> None:
        for index, sphere in enumerate(self.spheres):
            if not 0 <= sphere.material_id < len(self.materials):
                raise ValueError(
                    f"Sphere {index} references material {sphere.material_id}, "
                    f"but the scene has {len(self.materials)} material(s)"
                )


class SceneManager:
    """Builds a scene directly in the Taichi fields.

    Creating a manager clears the material and sphere fields, so only one
    scene is live at a time.

    Attributes:
        materials: MaterialInfo for all registered materials, by ID.
        spheres: SphereInfo for all spheres, in storage order.
    """

    def __init__(self) -> None:
        """Initialize an empty scene."""
        self.materials: list[MaterialInfo] = []
        self.spheres: list[SphereInfo] = []
        self._clear_all()

    def _clear_all(self) -> None:
        clear_scene()
        clear_materials()
        self.materials.clear()
        self.spheres.clear()

    def clear(self) -> None:
        """Clear the entire scene (spheres and materials)."""
        self._clear_all()

    @classmethod
    def from_scene(cls, scene: Scene) -> "SceneManager":
        """Create a manager holding a copy of ``scene``.

        Args:
            scene: The scene to upload.

        Returns:
            A SceneManager whose fields mirror the scene.

        Raises:
            RuntimeError: If the scene exceeds the field capacity.
        """
        if len(scene.materials) > MAX_MATERIALS:
            raise RuntimeError(f"Maximum number of materials ({MAX_MATERIALS}) exceeded")
        if len(scene.spheres) > MAX_SPHERES:
            raise RuntimeError(f"Maximum number of spheres ({MAX_SPHERES}) exceeded")

        manager = cls()
        for material in scene.materials:
            manager.add_material(material.albedo, material.emissive, material.roughness)
        for sphere in scene.spheres:
            manager.add_sphere(sphere.center, sphere.radius, sphere.material_id)

        logger.debug(
            f"Uploaded scene with {len(scene.materials)} materials "
            f"and {len(scene.spheres)} spheres"
        )
        return manager

    # =========================================================================
    # Material Management
    # =========================================================================

    def add_material(
        self,
        albedo: tuple[float, float, float],
        emissive: tuple[float, float, float] = (0.0, 0.0, 0.0),
        roughness: float = 1.0,
    ) -> int:
        """Add a material to the scene.

        Args:
            albedo: The diffuse reflectance as (R, G, B).
            emissive: The emitted radiance as (R, G, B).
            roughness: Stored as-is; unused by shading.

        Returns:
            The material ID for this material.

        Raises:
            RuntimeError: If the maximum number of materials is exceeded.
        """
        material_id = add_material(albedo, emissive, roughness)
        self.materials.append(
            MaterialInfo(albedo=tuple(albedo), emissive=tuple(emissive), roughness=roughness)
        )
        return material_id

    def get_material_count(self) -> int:
        """Get the total number of materials in the scene."""
        return get_material_count()

    def get_material_info(self, material_id: int) -> MaterialInfo | None:
        """Get information about a material by ID, or None if not found."""
        if 0 <= material_id < len(self.materials):
            return self.materials[material_id]
        return None

    # =========================================================================
    # Primitive Management
    # =========================================================================

    def add_sphere(
        self,
        center: tuple[float, float, float],
        radius: float,
        material_id: int,
    ) -> int:
        """Add a sphere to the scene.

        Args:
            center: The center point of the sphere as (x, y, z).
            radius: The radius of the sphere.
            material_id: ID of a material already added to this scene.

        Returns:
            The index of the added sphere.

        Raises:
            RuntimeError: If the maximum number of spheres is exceeded.
            ValueError: If material_id is invalid.
        """
        if material_id < 0 or material_id >= len(self.materials):
            raise ValueError(f"Invalid material_id: {material_id}")

        center_vec = vec3(center[0], center[1], center[2])
        sphere_index = add_sphere(center_vec, radius, material_id)

        self.spheres.append(
            SphereInfo(center=tuple(center), radius=radius, material_id=material_id)
        )
        return sphere_index

    def get_sphere_count(self) -> int:
        """Get the number of spheres in the scene."""
        return get_sphere_count()

    def to_scene(self) -> Scene:
        """Snapshot the current contents as an immutable Scene."""
        return Scene(materials=tuple(self.materials), spheres=tuple(self.spheres))

    def __repr__(self) -> str:
        return (
            f"SceneManager(materials={len(self.materials)}, spheres={len(self.spheres)})"
        )


def upload_scene(scene: Scene) -> SceneManager:
    """Replace the live scene fields with ``scene``."""
    return SceneManager.from_scene(scene)
