"""Pytest configuration for rmtracer tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls, which would
    destroy the fields allocated by modules imported earlier.
    """
    ti.init(arch=ti.cpu, random_seed=42)
    yield


@pytest.fixture(autouse=True)
def clear_all_scene_data():
    """Clear scene data before and after each test.

    This ensures tests are isolated from each other.
    """
    # Import here to ensure Taichi is initialized first
    from rmtracer.scene.intersection import clear_scene

    def _clear_all():
        clear_scene()

        try:
            from rmtracer.core.integrator import clear_render_target

            clear_render_target()
        except (ImportError, RuntimeError):
            pass

    _clear_all()

    yield

    _clear_all()


@pytest.fixture
def make_screen():
    """Factory fixture that creates and installs a ScreenCamera."""
    return _setup_screen


@pytest.fixture
def background():
    """Host-side background gradient, for expected values."""
    return _expected_background


def _setup_screen(
    screen_size=(2, 2),
    virtual_size=(2.0, 2.0),
    camera_position=(0.0, 0.0, 1.0),
    sample_count=1,
):
    """Create and install a ScreenCamera, returning it."""
    from rmtracer.camera.screen import ScreenCamera, setup_camera

    camera = ScreenCamera(
        screen_size=screen_size,
        virtual_size=virtual_size,
        camera_position=camera_position,
        sample_count=sample_count,
    )
    setup_camera(camera)
    return camera


def _expected_background(direction):
    """Background gradient computed on the host for a direction."""
    import math

    dx, dy, dz = direction
    norm = math.sqrt(dx * dx + dy * dy + dz * dz)
    dx, dy = dx / norm, dy / norm
    lerp = min(1.0, math.sqrt(dx * dx + dy * dy))
    value = int(255.0 * (1.0 - lerp))
    return (value, value, 255)
