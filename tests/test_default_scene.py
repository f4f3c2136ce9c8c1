"""Unit tests for the default sphere scene.

Tests cover:
- Scene creation and counts
- Ground sphere placement
- Resting radii of the small spheres
- Material assignments and emitters
- Camera configuration
"""

import math

import pytest


@pytest.fixture
def default_scene():
    """Create the default scene for testing."""
    from softpt.scene.default_scene import create_default_scene

    scene, camera = create_default_scene()
    yield scene, camera
    scene.clear()


class TestSceneCreation:
    """Tests for basic scene creation."""

    def test_create_scene_returns_manager_and_camera(self, default_scene):
        from softpt.camera.look_at import LookAtCamera
        from softpt.scene.manager import SceneManager

        scene, camera = default_scene
        assert isinstance(scene, SceneManager)
        assert isinstance(camera, LookAtCamera)

    def test_counts(self, default_scene):
        scene, _ = default_scene
        assert scene.get_sphere_count() == 8
        assert scene.get_material_count() == 8

    def test_build_scene_is_pure(self):
        from softpt.scene.default_scene import build_scene

        assert build_scene() == build_scene()


class TestGeometry:
    """Tests for sphere placement."""

    def test_ground_sphere(self):
        from softpt.scene.default_scene import build_scene

        ground = build_scene().spheres[0]
        assert ground.center == (0.0, -100.0, 0.0)
        assert ground.radius == 100.0
        assert ground.material_id == 0

    def test_center_sphere_radius(self):
        from softpt.scene.default_scene import build_scene

        sphere = build_scene().spheres[1]
        assert sphere.center == (0.0, 0.125, 0.0)
        assert sphere.radius == pytest.approx(0.125, abs=1e-5)

    def test_spheres_rest_on_ground(self):
        """Each small sphere's radius is its centre's distance to the ground minus 100."""
        from softpt.scene.default_scene import GROUND_CENTER, GROUND_RADIUS, build_scene

        for sphere in build_scene().spheres[1:]:
            expected = math.dist(sphere.center, GROUND_CENTER) - GROUND_RADIUS
            assert sphere.radius == pytest.approx(expected, abs=1e-4)
            assert sphere.radius > 0.0

    def test_material_indices_follow_sphere_order(self):
        from softpt.scene.default_scene import build_scene

        ids = [sphere.material_id for sphere in build_scene().spheres]
        assert ids == list(range(8))


class TestMaterials:
    """Tests for material assignments."""

    def test_emitters(self):
        from softpt.scene.default_scene import build_scene

        emissive = [m.emissive for m in build_scene().materials]
        assert emissive[1] == (10.0, 10.0, 10.0)
        assert emissive[5] == (10.0, 5.0, 5.0)
        assert emissive[7] == (5.0, 5.0, 10.0)
        for index in (0, 2, 3, 4, 6):
            assert emissive[index] == (0.0, 0.0, 0.0)

    def test_roughness_is_one(self):
        from softpt.scene.default_scene import build_scene

        assert all(m.roughness == 1.0 for m in build_scene().materials)


class TestCamera:
    """Tests for the default camera."""

    def test_camera_configuration(self, default_scene):
        _, camera = default_scene
        assert camera.position == (0.0, 0.5, -1.0)
        assert camera.target == (0.0, 0.0, 0.0)
        assert camera.up == (0.0, 1.0, 0.0)
