"""Sphere primitive with closed-form ray-sphere intersection.

The intersection solves the full quadratic

    a*t^2 + b*t + c = 0

with a = d.d, b = 2 d.(o - center), c = (o - center).(o - center) - r^2, and
reports up to two hit points in front of the ray origin, nearest first. A
discriminant no larger than EPSILON counts as a single tangent hit so that
two almost identical roots are never both reported.

The radius only appears squared, so a negative radius describes the same
sphere as its absolute value.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from softpt.geometry.sphere import Sphere, intersect_sphere, vec3
    >>> sphere = Sphere(center=vec3(0.0, 0.0, 0.0), radius=1.0)
    >>> # inside a kernel:
    >>> # hits = intersect_sphere(vec3(0.0, 0.0, -5.0), vec3(0.0, 0.0, 1.0), sphere)
    >>> # hits.count == 2, hits.near == (0, 0, -1), hits.far == (0, 0, 1)
"""

import taichi as ti
import taichi.math as tm

from softpt.core.vector import EPSILON, dot

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.dataclass
class Sphere:
    """A sphere defined by center point and radius.

    Attributes:
        center: The center point of the sphere (vec3).
        radius: The radius of the sphere. Only its square is used.
    """

    center: vec3
    radius: ti.f32


@ti.dataclass
class SphereHits:
    """Ordered intersection points of a ray with one sphere.

    Attributes:
        count: Number of valid hits (0, 1 or 2). Zero means the ray misses
            the sphere or the sphere lies entirely behind the origin.
        near: The nearest hit point. Only valid if count >= 1.
        far: The second hit point. Only valid if count == 2.
        t_near: Ray parameter of ``near``.
        t_far: Ray parameter of ``far``.
    """

    count: ti.i32
    near: vec3
    far: vec3
    t_near: ti.f32
    t_far: ti.f32


@ti.func
def intersect_sphere(ray_origin: vec3, ray_direction: vec3, sphere: Sphere) -> SphereHits:
    """Intersect a ray with a sphere.

    Roots with t < 0 lie behind the origin and are dropped. The
    ``(-b + sqrt(disc))`` root is always considered; the
    ``(-b - sqrt(disc))`` root only when the discriminant exceeds EPSILON.
    When both survive they are ordered by ascending t.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The direction vector of the ray. Need not be
            normalized, but must be non-zero.
        sphere: The sphere to test.

    Returns:
        A SphereHits record with at most two points, nearest first.
    """
    origin_to_center = ray_origin - sphere.center
    a = dot(ray_direction, ray_direction)
    b = 2.0 * dot(ray_direction, origin_to_center)
    c = dot(origin_to_center, origin_to_center) - sphere.radius * sphere.radius
    discriminant = b * b - 4.0 * a * c

    # Initialize result fields (Taichi requires outer-scope declaration)
    count = 0
    near = vec3(0.0, 0.0, 0.0)
    far = vec3(0.0, 0.0, 0.0)
    t_near = 0.0
    t_far = 0.0

    if discriminant >= 0.0:
        sqrt_d = ti.sqrt(discriminant)

        t0 = (-b + sqrt_d) / (2.0 * a)
        if t0 >= 0.0:
            count = 1
            t_near = t0
            near = ray_origin + ray_direction * t0

        if discriminant > EPSILON:
            t1 = (-b - sqrt_d) / (2.0 * a)
            if t1 >= 0.0:
                point = ray_origin + ray_direction * t1
                if count == 0:
                    count = 1
                    t_near = t1
                    near = point
                elif t1 < t_near:
                    count = 2
                    t_far = t_near
                    far = near
                    t_near = t1
                    near = point
                else:
                    count = 2
                    t_far = t1
                    far = point

    return SphereHits(count=count, near=near, far=far, t_near=t_near, t_far=t_far)


@ti.func
def make_sphere(center: vec3, radius: ti.f32) -> Sphere:
    return Sphere(center=center, radius=radius)
