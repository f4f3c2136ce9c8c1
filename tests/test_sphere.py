"""Unit tests for ray-sphere intersection.

Tests cover:
- Two hits ordered nearest first
- Missing the sphere
- Tangent rays (single hit)
- Spheres behind the ray origin
- Ray starting inside the sphere
- Negative radii and unnormalized directions
- Near-tangent rays with a tiny discriminant
"""

import pytest
import taichi as ti


def _run_intersection(origin, direction, center=(0.0, 0.0, 0.0), radius=1.0):
    """Intersect one ray with one sphere and return the hits on the host."""
    from softpt.geometry.sphere import Sphere, intersect_sphere, vec3

    count = ti.field(dtype=ti.i32, shape=())
    points = ti.field(dtype=ti.math.vec3, shape=2)
    ts = ti.field(dtype=ti.f32, shape=2)

    @ti.kernel
    def test_kernel(
        ox: ti.f32, oy: ti.f32, oz: ti.f32,
        dx: ti.f32, dy: ti.f32, dz: ti.f32,
        cx: ti.f32, cy: ti.f32, cz: ti.f32,
        r: ti.f32,
    ):
        sphere = Sphere(center=vec3(cx, cy, cz), radius=r)
        hits = intersect_sphere(vec3(ox, oy, oz), vec3(dx, dy, dz), sphere)
        count[None] = hits.count
        points[0] = hits.near
        points[1] = hits.far
        ts[0] = hits.t_near
        ts[1] = hits.t_far

    test_kernel(*origin, *direction, *center, radius)
    near = points[0]
    far = points[1]
    return (
        int(count[None]),
        (float(near[0]), float(near[1]), float(near[2])),
        (float(far[0]), float(far[1]), float(far[2])),
        (float(ts[0]), float(ts[1])),
    )


class TestSphereBasics:
    """Tests for Sphere dataclass and basic operations."""

    def test_make_sphere(self):
        from softpt.geometry.sphere import make_sphere, vec3

        center_result = ti.field(dtype=ti.math.vec3, shape=())
        radius_result = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            sphere = make_sphere(vec3(1.0, 2.0, 3.0), 0.5)
            center_result[None] = sphere.center
            radius_result[None] = sphere.radius

        test_kernel()
        c = center_result[None]
        assert (c[0], c[1], c[2]) == pytest.approx((1.0, 2.0, 3.0))
        assert radius_result[None] == pytest.approx(0.5)


class TestSphereIntersection:
    """Tests for intersect_sphere."""

    def test_two_hits_nearest_first(self):
        """A ray through the center enters at z=-1 and leaves at z=1."""
        count, near, far, (t_near, t_far) = _run_intersection((0.0, 0.0, -5.0), (0.0, 0.0, 1.0))

        assert count == 2
        assert near == pytest.approx((0.0, 0.0, -1.0))
        assert far == pytest.approx((0.0, 0.0, 1.0))
        assert t_near == pytest.approx(4.0)
        assert t_far == pytest.approx(6.0)

    def test_miss(self):
        count, *_ = _run_intersection((5.0, 0.0, -5.0), (0.0, 0.0, 1.0))
        assert count == 0

    def test_tangent_ray_gives_single_hit(self):
        count, near, _, (t_near, _) = _run_intersection((0.0, 1.0, -5.0), (0.0, 0.0, 1.0))

        assert count == 1
        assert near == pytest.approx((0.0, 1.0, 0.0))
        assert t_near == pytest.approx(5.0)

    def test_sphere_behind_origin(self):
        count, *_ = _run_intersection((0.0, 0.0, 5.0), (0.0, 0.0, 1.0))
        assert count == 0

    def test_origin_inside_sphere(self):
        """Only the exit point lies in front of the origin."""
        count, near, _, (t_near, _) = _run_intersection((0.0, 0.0, 0.0), (0.0, 0.0, 1.0))

        assert count == 1
        assert near == pytest.approx((0.0, 0.0, 1.0))
        assert t_near == pytest.approx(1.0)

    def test_negative_radius_behaves_like_positive(self):
        positive = _run_intersection((0.0, 0.0, -5.0), (0.0, 0.0, 1.0), radius=1.0)
        negative = _run_intersection((0.0, 0.0, -5.0), (0.0, 0.0, 1.0), radius=-1.0)
        assert positive == negative

    def test_unnormalized_direction(self):
        """Hit points are the same; t is measured in direction lengths."""
        count, near, far, (t_near, t_far) = _run_intersection((0.0, 0.0, -5.0), (0.0, 0.0, 2.0))

        assert count == 2
        assert near == pytest.approx((0.0, 0.0, -1.0))
        assert far == pytest.approx((0.0, 0.0, 1.0))
        assert t_near == pytest.approx(2.0)
        assert t_far == pytest.approx(3.0)

    def test_offset_center(self):
        count, near, far, _ = _run_intersection(
            (0.0, 0.0, 0.0), (1.0, 0.0, 0.0), center=(3.0, 0.0, 0.0), radius=0.5
        )

        assert count == 2
        assert near == pytest.approx((2.5, 0.0, 0.0))
        assert far == pytest.approx((3.5, 0.0, 0.0))

    def test_tiny_discriminant_keeps_one_hit(self):
        """Below EPSILON the second root is not considered."""
        count, near, _, _ = _run_intersection(
            (0.0, 0.0, -5.0), (0.0, 0.0, 1.0), radius=0.001
        )

        assert count == 1
        assert abs(near[2]) < 0.01
