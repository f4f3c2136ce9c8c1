"""Pytest configuration for softpt tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls which can cause
    segmentation faults due to Taichi runtime conflicts.
    """
    ti.init(arch=ti.cpu)
    yield


@pytest.fixture(autouse=True)
def clear_all_scene_data():
    """Clear scene, material and render target data around each test."""
    # Import here so the fields are created after ti.init()
    from softpt.materials.material import clear_materials
    from softpt.scene.intersection import clear_scene

    def _clear_all():
        clear_scene()
        clear_materials()

        try:
            from softpt.core.integrator import clear_render_target, reset_sampling_violations

            clear_render_target()
            reset_sampling_violations()
        except (ImportError, RuntimeError):
            pass

    _clear_all()

    yield

    _clear_all()
