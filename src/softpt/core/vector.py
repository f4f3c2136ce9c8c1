"""Ray data structure and vector algebra for the path tracer.

Every operation here is a pure Taichi function on ``vec3`` values (f32).
Component-wise ``+``, ``-`` and ``*`` between two vectors, and ``*`` or
``+`` with a scalar, are the native ``vec3`` operators and are not wrapped.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from softpt.core.vector import Ray, ray_at, vec3
    >>> ray = Ray(origin=vec3(0.0, 0.0, -5.0), direction=vec3(0.0, 0.0, 1.0))
    >>> # inside a kernel: ray_at(ray, 4.0) -> (0, 0, -1)
"""

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Tolerance shared by equivalence tests, tangent detection and ray offsets
EPSILON = 1e-5


@ti.dataclass
class Ray:
    """A ray with an origin point and direction vector.

    Attributes:
        origin: The starting point of the ray (vec3).
        direction: The direction vector of the ray (vec3). Intersection does
            not require unit length; the integrator always normalizes.
    """

    origin: vec3
    direction: vec3


@ti.func
def ray_at(ray: Ray, t: ti.f32) -> vec3:
    """Compute the point ``origin + t * direction``."""
    return ray.origin + t * ray.direction


@ti.func
def make_ray(origin: vec3, direction: vec3) -> Ray:
    return Ray(origin=origin, direction=direction)


@ti.func
def dot(a: vec3, b: vec3) -> ti.f32:
    return a.x * b.x + a.y * b.y + a.z * b.z


@ti.func
def cross(a: vec3, b: vec3) -> vec3:
    """Compute the cross product ``a x b``.

    The result is perpendicular to both inputs.
    """
    return vec3(
        a.y * b.z - a.z * b.y,
        a.z * b.x - a.x * b.z,
        a.x * b.y - a.y * b.x,
    )


@ti.func
def length_squared(v: vec3) -> ti.f32:
    return dot(v, v)


@ti.func
def length(v: vec3) -> ti.f32:
    """Compute the Euclidean length ``sqrt(dot(v, v))``."""
    return ti.sqrt(dot(v, v))


@ti.func
def normalize(v: vec3) -> vec3:
    """Scale a vector to unit length.

    Computed as ``v * (1 / length(v))``. A zero vector is not guarded:
    ``1 / length`` is infinite and every component comes back NaN.

    Args:
        v: The input vector; callers guarantee it is non-degenerate.

    Returns:
        A unit vector in the same direction as v.
    """
    return v * (1.0 / length(v))


@ti.func
def distance(a: vec3, b: vec3) -> ti.f32:
    return length(a - b)


@ti.func
def is_equivalent(a: vec3, b: vec3, max_delta: ti.f32) -> ti.i32:
    """Check whether two points lie within ``max_delta`` of each other.

    Args:
        a: First vector.
        b: Second vector.
        max_delta: Exclusive distance bound; the tracer always passes EPSILON.

    Returns:
        1 if ``length(b - a) < max_delta``, 0 otherwise.
    """
    result = 0
    if length(b - a) < max_delta:
        result = 1
    return result


@ti.func
def lerp(a: vec3, b: vec3, t: ti.f32) -> vec3:
    """Linear interpolation ``a + (b - a) * t``; t is not clamped."""
    return a + (b - a) * t
