"""Unit tests for scene-level intersection.

Tests cover:
- SceneHit miss records
- Sphere storage and clearing
- Single sphere hits and misses
- Nearest hit selection among several spheres
- Tie-breaking in favour of the sphere stored first
"""

import pytest
import taichi as ti


def _trace(origin, direction):
    """Run intersect_scene for one ray and return the record on the host."""
    from softpt.scene.intersection import intersect_scene, vec3

    hit = ti.field(dtype=ti.i32, shape=())
    point = ti.field(dtype=ti.math.vec3, shape=())
    distance = ti.field(dtype=ti.f32, shape=())
    sphere_index = ti.field(dtype=ti.i32, shape=())
    material_id = ti.field(dtype=ti.i32, shape=())

    @ti.kernel
    def test_kernel(
        ox: ti.f32, oy: ti.f32, oz: ti.f32, dx: ti.f32, dy: ti.f32, dz: ti.f32
    ):
        rec = intersect_scene(vec3(ox, oy, oz), vec3(dx, dy, dz))
        hit[None] = rec.hit
        point[None] = rec.point
        distance[None] = rec.distance
        sphere_index[None] = rec.sphere_index
        material_id[None] = rec.material_id

    test_kernel(*origin, *direction)
    p = point[None]
    return {
        "hit": int(hit[None]),
        "point": (float(p[0]), float(p[1]), float(p[2])),
        "distance": float(distance[None]),
        "sphere_index": int(sphere_index[None]),
        "material_id": int(material_id[None]),
    }


class TestSceneHitBasics:
    """Tests for the SceneHit record."""

    def test_miss_record(self):
        from softpt.scene.intersection import _make_miss_record

        result_hit = ti.field(dtype=ti.i32, shape=())
        result_index = ti.field(dtype=ti.i32, shape=())
        result_material_id = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            rec = _make_miss_record()
            result_hit[None] = rec.hit
            result_index[None] = rec.sphere_index
            result_material_id[None] = rec.material_id

        test_kernel()
        assert result_hit[None] == 0
        assert result_index[None] == -1
        assert result_material_id[None] == -1


class TestSphereStorage:
    """Tests for sphere storage and management."""

    def test_add_sphere(self):
        from softpt.scene.intersection import add_sphere, get_sphere_count, vec3

        assert get_sphere_count() == 0
        idx = add_sphere(vec3(1.0, 2.0, 3.0), 0.5, material_id=1)
        assert idx == 0
        assert get_sphere_count() == 1

    def test_multiple_spheres(self):
        from softpt.scene.intersection import add_sphere, get_sphere_count, vec3

        for i in range(5):
            idx = add_sphere(vec3(float(i), 0.0, 0.0), 0.5, material_id=i)
            assert idx == i

        assert get_sphere_count() == 5

    def test_clear_scene(self):
        from softpt.scene.intersection import add_sphere, clear_scene, get_sphere_count, vec3

        add_sphere(vec3(0.0, 0.0, 0.0), 1.0, material_id=0)
        add_sphere(vec3(1.0, 0.0, 0.0), 0.5, material_id=1)
        assert get_sphere_count() == 2

        clear_scene()
        assert get_sphere_count() == 0

    def test_capacity_exceeded(self):
        from softpt.scene.intersection import MAX_SPHERES, add_sphere, num_spheres, vec3

        num_spheres[None] = MAX_SPHERES
        with pytest.raises(RuntimeError, match="Maximum number of spheres"):
            add_sphere(vec3(0.0, 0.0, 0.0), 1.0, material_id=0)


class TestSceneIntersection:
    """Tests for intersect_scene."""

    def test_empty_scene_misses(self):
        rec = _trace((0.0, 0.0, 0.0), (0.0, 0.0, 1.0))
        assert rec["hit"] == 0

    def test_hit_single_sphere(self):
        from softpt.scene.intersection import add_sphere, vec3

        add_sphere(vec3(0.0, 0.0, -3.0), 1.0, material_id=5)

        rec = _trace((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
        assert rec["hit"] == 1
        assert rec["point"] == pytest.approx((0.0, 0.0, -2.0))
        assert rec["distance"] == pytest.approx(2.0)
        assert rec["sphere_index"] == 0
        assert rec["material_id"] == 5

    def test_miss_single_sphere(self):
        from softpt.scene.intersection import add_sphere, vec3

        add_sphere(vec3(0.0, 0.0, -3.0), 1.0, material_id=5)

        rec = _trace((5.0, 0.0, 0.0), (0.0, 0.0, -1.0))
        assert rec["hit"] == 0

    def test_nearest_sphere_wins(self):
        """A closer sphere stored later replaces a farther one."""
        from softpt.scene.intersection import add_sphere, vec3

        add_sphere(vec3(0.0, 0.0, -10.0), 1.0, material_id=1)
        add_sphere(vec3(0.0, 0.0, -3.0), 1.0, material_id=2)
        add_sphere(vec3(0.0, 0.0, -6.0), 1.0, material_id=3)

        rec = _trace((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
        assert rec["hit"] == 1
        assert rec["sphere_index"] == 1
        assert rec["material_id"] == 2
        assert rec["point"] == pytest.approx((0.0, 0.0, -2.0))

    def test_equal_distance_keeps_first_sphere(self):
        from softpt.scene.intersection import add_sphere, vec3

        add_sphere(vec3(0.0, 0.0, -3.0), 1.0, material_id=4)
        add_sphere(vec3(0.0, 0.0, -3.0), 1.0, material_id=9)

        rec = _trace((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
        assert rec["sphere_index"] == 0
        assert rec["material_id"] == 4

    def test_origin_inside_sphere_hits_exit_point(self):
        from softpt.scene.intersection import add_sphere, vec3

        add_sphere(vec3(0.0, 0.0, 0.0), 2.0, material_id=0)

        rec = _trace((0.0, 0.0, 0.0), (1.0, 0.0, 0.0))
        assert rec["hit"] == 1
        assert rec["point"] == pytest.approx((2.0, 0.0, 0.0))
        assert rec["distance"] == pytest.approx(2.0)

    def test_distance_is_euclidean(self):
        """Distances are measured in space, not in units of the direction."""
        from softpt.scene.intersection import add_sphere, vec3

        add_sphere(vec3(0.0, 0.0, -3.0), 1.0, material_id=0)

        rec = _trace((0.0, 0.0, 0.0), (0.0, 0.0, -4.0))
        assert rec["distance"] == pytest.approx(2.0)
