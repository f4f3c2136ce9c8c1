"""Scene-level sphere storage and nearest-hit search.

Spheres are stored in Taichi fields (Structure of Arrays) together with the
ID of the material they use. ``intersect_scene`` scans every sphere and keeps
the hit point closest to the ray origin.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from softpt.scene.intersection import add_sphere, clear_scene, vec3
    >>> clear_scene()
    >>> add_sphere(vec3(0, 0, -1), 0.5, material_id=0)
    >>> # Use intersect_scene within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

from softpt.core.vector import length
from softpt.geometry.sphere import Sphere, intersect_sphere

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Larger than any hit distance; the starting value of the nearest-hit search
MAX_DISTANCE = 3.0e38


@ti.dataclass
class SceneHit:
    """Nearest intersection of a ray with the scene.

    Attributes:
        hit: 1 if any sphere was hit, 0 on a miss.
        point: The nearest hit point. Only valid if hit == 1.
        distance: Euclidean distance from the ray origin to ``point``.
        sphere_index: Index of the sphere that was hit, -1 on a miss.
        material_id: Material ID of that sphere, -1 on a miss.
    """

    hit: ti.i32
    point: vec3
    distance: ti.f32
    sphere_index: ti.i32
    material_id: ti.i32


# Maximum number of spheres supported in the scene
MAX_SPHERES = 1024

# Sphere storage: Structure of Arrays layout for GPU efficiency
sphere_centers = ti.Vector.field(3, dtype=ti.f32, shape=MAX_SPHERES)
sphere_radii = ti.field(dtype=ti.f32, shape=MAX_SPHERES)
sphere_material_ids = ti.field(dtype=ti.i32, shape=MAX_SPHERES)
num_spheres = ti.field(dtype=ti.i32, shape=())


def clear_scene() -> None:
    """Clear all spheres from the scene.

    Resets the sphere count to zero. The field data is overwritten when new
    spheres are added.
    """
    num_spheres[None] = 0


def add_sphere(center: vec3, radius: float, material_id: int = 0) -> int:
    """Add a sphere to the scene.

    Args:
        center: The center point of the sphere.
        radius: The radius of the sphere. May be negative; only its square
            is used by the intersection test.
        material_id: The material ID to associate with this sphere.

    Returns:
        The index of the added sphere.

    Raises:
        RuntimeError: If the maximum number of spheres is exceeded.
    """
    idx = num_spheres[None]
    if idx >= MAX_SPHERES:
        raise RuntimeError(f"Maximum number of spheres ({MAX_SPHERES}) exceeded")
    sphere_centers[idx] = center
    sphere_radii[idx] = radius
    sphere_material_ids[idx] = material_id
    num_spheres[None] = idx + 1
    return idx


def get_sphere_count() -> int:
    """Get the number of spheres in the scene."""
    return int(num_spheres[None])


@ti.func
def get_sphere(index: ti.i32) -> Sphere:
    return Sphere(center=sphere_centers[index], radius=sphere_radii[index])


@ti.func
def _make_miss_record() -> SceneHit:
    return SceneHit(
        hit=0,
        point=vec3(0.0, 0.0, 0.0),
        distance=MAX_DISTANCE,
        sphere_index=-1,
        material_id=-1,
    )


@ti.func
def intersect_scene(ray_origin: vec3, ray_direction: vec3) -> SceneHit:
    """Find the nearest sphere hit along a ray.

    Every sphere is tested in storage order. For a sphere with at least one
    hit, its nearest point is compared by Euclidean distance to the ray
    origin; a sphere replaces the current best only when strictly closer,
    so on exact ties the sphere stored first wins.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The direction vector of the ray.

    Returns:
        A SceneHit for the closest intersection, or a miss record.
    """
    nearest_distance = MAX_DISTANCE
    result = _make_miss_record()

    n_spheres = num_spheres[None]
    for i in range(n_spheres):
        hits = intersect_sphere(ray_origin, ray_direction, get_sphere(i))
        if hits.count > 0:
            hit_distance = length(hits.near - ray_origin)
            if hit_distance < nearest_distance:
                nearest_distance = hit_distance
                result = SceneHit(
                    hit=1,
                    point=hits.near,
                    distance=hit_distance,
                    sphere_index=i,
                    material_id=sphere_material_ids[i],
                )

    return result
