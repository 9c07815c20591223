"""Tests for scene storage, shading and nearest-hit resolution.

Tests cover:
- Object storage and the capacity limit
- View-dependent shading, including the 256 overflow
- Background gradient
- Nearest-hit selection independent of insertion order
"""

import pytest
import taichi as ti


def _shade(direction, normal, color):
    """Run shade() in a kernel and return the integer color."""
    from rmtracer.core.ray import vec3
    from rmtracer.scene.intersection import shade

    result = ti.Vector.field(3, dtype=ti.i32, shape=())
    dx, dy, dz = direction
    nx, ny, nz = normal
    cr, cg, cb = color

    @ti.kernel
    def test_kernel():
        result[None] = shade(vec3(dx, dy, dz), vec3(nx, ny, nz), vec3(cr, cg, cb))

    test_kernel()
    c = result[None]
    return (int(c[0]), int(c[1]), int(c[2]))


def _background(direction):
    """Run background_color() in a kernel and return the integer color."""
    from rmtracer.core.ray import vec3
    from rmtracer.scene.intersection import background_color

    result = ti.Vector.field(3, dtype=ti.i32, shape=())
    dx, dy, dz = direction

    @ti.kernel
    def test_kernel():
        result[None] = background_color(vec3(dx, dy, dz))

    test_kernel()
    c = result[None]
    return (int(c[0]), int(c[1]), int(c[2]))


class TestSceneStorage:
    """Tests for adding and clearing primitives."""

    def test_add_sphere_returns_slot_index(self):
        """Test that spheres are stored in insertion order."""
        from rmtracer.core.ray import vec3
        from rmtracer.scene.intersection import (
            add_sphere,
            get_object_count,
            object_kinds,
            sphere_radii,
        )
        from rmtracer.geometry.hittable import PrimitiveKind

        assert get_object_count() == 0

        first = add_sphere(vec3(0.0, 0.0, -1.0), 0.5, vec3(1.0, 0.0, 0.0))
        second = add_sphere(vec3(1.0, 0.0, -1.0), 0.25, vec3(0.0, 1.0, 0.0))

        assert first == 0
        assert second == 1
        assert get_object_count() == 2
        assert object_kinds[0] == int(PrimitiveKind.SPHERE)
        assert abs(sphere_radii[1] - 0.25) < 1e-6

    def test_clear_scene_resets_count(self):
        """Test that clear_scene removes all objects."""
        from rmtracer.core.ray import vec3
        from rmtracer.scene.intersection import add_sphere, clear_scene, get_object_count

        add_sphere(vec3(0.0, 0.0, -1.0), 0.5, vec3(1.0, 0.0, 0.0))
        clear_scene()

        assert get_object_count() == 0

    def test_capacity_overflow_raises(self):
        """Test that exceeding MAX_OBJECTS raises RuntimeError."""
        from rmtracer.core.ray import vec3
        from rmtracer.scene.intersection import MAX_OBJECTS, add_sphere, num_objects

        num_objects[None] = MAX_OBJECTS

        with pytest.raises(RuntimeError, match="Maximum number of objects"):
            add_sphere(vec3(0.0, 0.0, -1.0), 0.5, vec3(1.0, 0.0, 0.0))


class TestShading:
    """Tests for the view-dependent blend term."""

    def test_face_on_full_channel_overflows_to_256(self):
        """Test that a head-on hit on a full channel yields 256."""
        color = _shade((0.0, 0.0, -1.0), (0.0, 0.0, 1.0), (1.0, 0.0, 0.0))
        assert color == (256, 0, 0)

    def test_grazing_normal_is_half_bright(self):
        """Test that a perpendicular normal gives half the scale."""
        color = _shade((0.0, 0.0, -1.0), (1.0, 0.0, 0.0), (1.0, 1.0, 1.0))
        assert color == (128, 128, 128)

    def test_facing_away_is_black(self):
        """Test that a normal parallel to the ray gives zero."""
        color = _shade((0.0, 0.0, -1.0), (0.0, 0.0, -1.0), (1.0, 1.0, 1.0))
        assert color == (0, 0, 0)

    def test_shading_truncates(self):
        """Test that shaded channels are truncated toward zero."""
        # blend = 1, 256 * 0.5 = 128, 256 * 0.25 = 64
        color = _shade((0.0, 0.0, -1.0), (0.0, 0.0, 1.0), (0.5, 0.25, 0.0))
        assert color == (128, 64, 0)


class TestBackground:
    """Tests for the background gradient."""

    def test_view_axis_is_white(self):
        """Test that the straight-ahead direction is white."""
        assert _background((0.0, 0.0, -1.0)) == (255, 255, 255)

    def test_sideways_is_pure_blue(self):
        """Test that an xy length of 1 gives pure blue."""
        assert _background((1.0, 0.0, 0.0)) == (0, 0, 255)
        assert _background((0.0, -1.0, 0.0)) == (0, 0, 255)

    def test_halfway(self):
        """Test the gradient at an xy length of one half."""
        assert _background((0.5, 0.0, -0.8660254)) == (127, 127, 255)

    def test_matches_host_gradient(self, background):
        """Test the kernel gradient against the host-side computation."""
        direction = (-0.57735026, 0.57735026, -0.57735026)
        assert _background(direction) == background(direction)


class TestNearestHit:
    """Tests for resolving the nearest surface along a ray."""

    def test_empty_scene_returns_background(self, background):
        """Test that a ray in an empty scene sees the background."""
        from rmtracer.core.integrator import trace_ray

        hit, t, color = trace_ray((0.0, 0.0, 1.0), (0.0, 0.0, -1.0))

        assert not hit
        assert t == 0.0
        assert color == background((0.0, 0.0, -1.0))

    def test_single_sphere_hit(self):
        """Test the t and shaded color of a head-on hit."""
        from rmtracer.core.integrator import trace_ray
        from rmtracer.core.ray import vec3
        from rmtracer.scene.intersection import add_sphere

        add_sphere(vec3(0.0, 0.0, -1.0), 0.5, vec3(0.0, 0.0, 1.0))

        hit, t, color = trace_ray((0.0, 0.0, 1.0), (0.0, 0.0, -1.0))

        assert hit
        assert abs(t - 1.5) < 1e-5
        assert color == (0, 0, 256)

    @pytest.mark.parametrize("far_center", [(0.0, 0.0, -3.0), (0.0, 0.0, -1.3)])
    @pytest.mark.parametrize("near_first", [True, False])
    def test_nearest_wins_regardless_of_order(self, far_center, near_first):
        """Test that the closer sphere is shaded whatever the insertion order."""
        from rmtracer.core.integrator import trace_ray
        from rmtracer.core.ray import vec3
        from rmtracer.scene.intersection import add_sphere

        near = (vec3(0.0, 0.0, -1.0), 0.5, vec3(0.0, 0.0, 1.0))
        far = (vec3(*far_center), 0.5, vec3(1.0, 0.0, 0.0))

        for args in (near, far) if near_first else (far, near):
            add_sphere(*args)

        hit, t, color = trace_ray((0.0, 0.0, 1.0), (0.0, 0.0, -1.0))

        assert hit
        assert abs(t - 1.5) < 1e-5
        assert color == (0, 0, 256)

    def test_miss_beside_sphere_returns_background(self, background):
        """Test that a ray passing beside every object sees the background."""
        from rmtracer.core.integrator import trace_ray
        from rmtracer.core.ray import vec3
        from rmtracer.scene.intersection import add_sphere

        add_sphere(vec3(0.0, 0.0, -1.0), 0.5, vec3(1.0, 0.0, 0.0))

        direction = (0.70710677, 0.0, -0.70710677)
        hit, _, color = trace_ray((0.0, 0.0, 1.0), direction)

        assert not hit
        assert color == background(direction)

    def test_origin_inside_sphere_sees_background(self, background):
        """Test that a ray starting inside a sphere does not hit it."""
        from rmtracer.core.integrator import trace_ray
        from rmtracer.core.ray import vec3
        from rmtracer.scene.intersection import add_sphere

        add_sphere(vec3(0.0, 0.0, -1.0), 0.5, vec3(1.0, 0.0, 0.0))

        hit, _, color = trace_ray((0.0, 0.0, -1.0), (0.0, 0.0, -1.0))

        assert not hit
        assert color == background((0.0, 0.0, -1.0))
