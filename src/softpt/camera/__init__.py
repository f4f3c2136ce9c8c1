"""Camera module for primary ray generation."""

from .look_at import LookAtCamera, get_camera_info, get_primary_ray, setup_camera

__all__ = [
    "LookAtCamera",
    "setup_camera",
    "get_primary_ray",
    "get_camera_info",
]
