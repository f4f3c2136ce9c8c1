"""Look-at camera for primary ray generation.

The camera is positioned at ``position`` and aims at ``target``. Its basis
is built once on the host with NumPy:

    forward = normalize(target - position)
    right   = cross(up, forward)              (not normalized)
    up'     = cross(right, normalize(position - target))

The image plane passes through ``target`` and spans ``right`` and ``up'``
over [-1, 1] in each direction. Pixel (i, j), with j = 0 the top row, maps
to

    near = target + right * (-1 + 2i / width) + up' * (1 - 2j / height)

and the primary ray runs from ``position`` toward ``near``. Because
``right`` keeps the length of ``cross(up, forward)``, the plane shrinks as
the view direction tilts toward ``up``.

There is no sub-pixel jitter: every sample of a pixel reuses the same
primary ray, and the noise comes from the bounce directions only.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from softpt.camera.look_at import LookAtCamera, setup_camera
    >>> camera = LookAtCamera(
    ...     position=(0.0, 0.5, -1.0),
    ...     target=(0.0, 0.0, 0.0),
    ...     up=(0.0, 1.0, 0.0),
    ... )
    >>> setup_camera(camera)
    >>> # inside a kernel: ray = get_primary_ray(i, j, width, height)
"""

from dataclasses import dataclass

import numpy as np
import taichi as ti
import taichi.math as tm

from softpt.core.vector import Ray, make_ray, normalize

vec3 = tm.vec3

# =============================================================================
# Camera Data Structures
# =============================================================================


@dataclass
class LookAtCamera:
    """Configuration for the look-at camera.

    Attributes:
        position: Camera position in world space (x, y, z).
        target: Point the camera looks at; the image plane passes through it.
        up: Approximate up direction, typically (0, 1, 0). Must not be
            parallel to the view direction.

    Raises:
        ValueError: If position equals target, or if up is parallel to the
            view direction.
    """

    position: tuple[float, float, float]
    target: tuple[float, float, float]
    up: tuple[float, float, float]

    def __post_init__(self) -> None:
        position = np.array(self.position, dtype=np.float32)
        target = np.array(self.target, dtype=np.float32)
        up = np.array(self.up, dtype=np.float32)

        view = target - position
        if np.linalg.norm(view) == 0.0:
            raise ValueError("Camera position and target must differ")
        if np.linalg.norm(np.cross(up, view / np.linalg.norm(view))) == 0.0:
            raise ValueError(f"Camera up vector {self.up} is parallel to the view direction")


# =============================================================================
# Taichi Fields for Camera State
# =============================================================================

_camera_origin = ti.Vector.field(3, dtype=ti.f32, shape=())
_camera_target = ti.Vector.field(3, dtype=ti.f32, shape=())
_camera_right = ti.Vector.field(3, dtype=ti.f32, shape=())
_camera_up = ti.Vector.field(3, dtype=ti.f32, shape=())


# =============================================================================
# Camera Setup (Python-side, called once per camera configuration)
# =============================================================================


def setup_camera(camera: LookAtCamera) -> None:
    """Initialize camera state from configuration.

    Args:
        camera: Camera configuration with position, target and up vector.
            LookAtCamera rejects degenerate views when it is constructed.
    """
    position = np.array(camera.position, dtype=np.float32)
    target = np.array(camera.target, dtype=np.float32)
    up = np.array(camera.up, dtype=np.float32)

    view = target - position
    forward = view / np.linalg.norm(view)
    right = np.cross(up, forward)

    backward = -forward
    image_up = np.cross(right, backward)

    _camera_origin[None] = position.tolist()
    _camera_target[None] = target.tolist()
    _camera_right[None] = right.tolist()
    _camera_up[None] = image_up.tolist()


# =============================================================================
# Ray Generation (Taichi-compatible)
# =============================================================================


@ti.func
def get_primary_ray(pixel_i: ti.i32, pixel_j: ti.i32, width: ti.i32, height: ti.i32) -> Ray:
    """Generate the primary ray through a pixel.

    Args:
        pixel_i: Pixel column (0 = left).
        pixel_j: Pixel row (0 = top).
        width: Image width in pixels.
        height: Image height in pixels.

    Returns:
        A Ray from the camera position with a normalized direction.
    """
    dx = 2.0 / ti.cast(width, ti.f32)
    dy = 2.0 / ti.cast(height, ti.f32)
    near = (
        _camera_target[None]
        + _camera_right[None] * (-1.0 + dx * ti.cast(pixel_i, ti.f32))
        + _camera_up[None] * (1.0 - dy * ti.cast(pixel_j, ti.f32))
    )
    origin = _camera_origin[None]
    return make_ray(origin, normalize(near - origin))


# =============================================================================
# Utility Functions
# =============================================================================


def get_camera_info() -> dict[str, tuple[float, float, float]]:
    """Get current camera state for debugging.

    Returns:
        Dictionary with origin, target, right and up vectors.
    """
    info = {}
    for name, field in (
        ("origin", _camera_origin),
        ("target", _camera_target),
        ("right", _camera_right),
        ("up", _camera_up),
    ):
        value = field[None]
        info[name] = (float(value[0]), float(value[1]), float(value[2]))
    return info
