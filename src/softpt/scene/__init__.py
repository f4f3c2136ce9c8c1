"""Scene module for scene description and ray-scene queries.

Components:
    intersection: Sphere storage fields and nearest-hit search
    manager: Immutable Scene values and the SceneManager that uploads them
    default_scene: The built-in eight-sphere scene and its camera
"""

from .default_scene import DEFAULT_CAMERA, build_scene, create_default_scene
from .intersection import (
    MAX_SPHERES,
    SceneHit,
    add_sphere,
    clear_scene,
    get_sphere_count,
    intersect_scene,
)
from .manager import MaterialInfo, Scene, SceneManager, SphereInfo, upload_scene

__all__ = [
    # Intersection module
    "SceneHit",
    "add_sphere",
    "clear_scene",
    "get_sphere_count",
    "intersect_scene",
    "MAX_SPHERES",
    # Manager module
    "MaterialInfo",
    "SphereInfo",
    "Scene",
    "SceneManager",
    "upload_scene",
    # Default scene module
    "build_scene",
    "create_default_scene",
    "DEFAULT_CAMERA",
]
