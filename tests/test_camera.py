"""Unit tests for the pinhole camera.

Tests cover:
- Screen distance from frame height and field of view
- Pixel directions for the centered coordinate system
- Cached eye-to-screen offset refreshed by rotations and FOV changes
- Basis orthonormality after rotations, set_direction and look_at
- Device upload and get_pixel_ray agreeing with the host computation
"""

import math

import numpy as np
import pytest
import taichi as ti


class TestCameraModel:
    """Tests for the host-side camera."""

    def test_default_basis(self):
        from whitted.camera.pinhole import PinholeCamera

        camera = PinholeCamera()
        np.testing.assert_allclose(camera.horizontal, [1.0, 0.0, 0.0])
        np.testing.assert_allclose(camera.vertical, [0.0, 1.0, 0.0])
        np.testing.assert_allclose(camera.direction, [0.0, 0.0, -1.0])
        np.testing.assert_allclose(camera.position, [0.0, 0.0, 0.0])

    def test_screen_distance(self):
        from whitted.camera.pinhole import PinholeCamera

        camera = PinholeCamera(frame_height=512, field_of_view=math.pi / 3)
        expected = 512 / (2.0 * math.tan(math.pi / 6))
        assert abs(camera.screen_distance - expected) < 1e-9
        np.testing.assert_allclose(camera.direction_times_distance, [0.0, 0.0, -expected])

    def test_center_pixel_looks_forward(self):
        from whitted.camera.pinhole import PinholeCamera

        camera = PinholeCamera()
        np.testing.assert_allclose(camera.pixel_direction(0, 0), [0.0, 0.0, -1.0])

    def test_top_row_looks_up_at_half_fov(self):
        """Row y = H/2 sits at the top edge of the vertical field of view."""
        from whitted.camera.pinhole import PinholeCamera

        camera = PinholeCamera(frame_height=200, field_of_view=math.pi / 2)
        d = camera.pixel_direction(0, 100)
        angle = math.atan2(d[1], -d[2])
        assert abs(angle - math.pi / 4) < 1e-9

    def test_left_columns_look_left(self):
        from whitted.camera.pinhole import PinholeCamera

        camera = PinholeCamera()
        assert camera.pixel_direction(-100, 0)[0] < 0.0

    def test_set_field_of_view_refreshes_cache(self):
        from whitted.camera.pinhole import PinholeCamera

        camera = PinholeCamera(frame_height=100)
        camera.set_field_of_view(math.pi / 2)
        assert abs(camera.screen_distance - 50.0) < 1e-9
        np.testing.assert_allclose(camera.direction_times_distance, [0.0, 0.0, -50.0], atol=1e-9)

    @pytest.mark.parametrize("fov", [0.0, math.pi, -1.0])
    def test_invalid_field_of_view(self, fov):
        from whitted.camera.pinhole import PinholeCamera

        with pytest.raises(ValueError):
            PinholeCamera(field_of_view=fov)

    def test_rotation_refreshes_cache(self):
        from whitted.camera.pinhole import PinholeCamera

        camera = PinholeCamera()
        camera.rotate_y(-math.pi / 2)
        np.testing.assert_allclose(
            camera.direction_times_distance, camera.direction * camera.screen_distance
        )
        np.testing.assert_allclose(camera.direction, [1.0, 0.0, 0.0], atol=1e-12)

    def test_basis_orthonormal_after_operations(self):
        from whitted.camera.pinhole import PinholeCamera

        camera = PinholeCamera()
        camera.rotate_x(0.2)
        camera.rotate_axis((0.0, 0.6, 0.8), 1.3)
        camera.set_direction((0.36, 0.48, -0.8))
        camera.rotate_z(0.5)
        h, v, d = camera.horizontal, camera.vertical, camera.direction
        for axis in (h, v, d):
            assert abs(np.linalg.norm(axis) - 1.0) < 1e-9
        assert abs(np.dot(h, v)) < 1e-9
        assert abs(np.dot(h, d)) < 1e-9
        assert abs(np.dot(v, d)) < 1e-9

    def test_look_at(self):
        from whitted.camera.pinhole import PinholeCamera

        camera = PinholeCamera(position=(1.0, 2.0, 3.0))
        camera.look_at((1.0, 2.0, -7.0))
        np.testing.assert_allclose(camera.direction, [0.0, 0.0, -1.0])
        np.testing.assert_allclose(camera.horizontal, [1.0, 0.0, 0.0])


class TestCameraDevice:
    """Tests for the device-side camera state."""

    def test_setup_camera_info(self):
        from whitted.camera.pinhole import PinholeCamera, get_camera_info, setup_camera

        camera = PinholeCamera(frame_height=100, field_of_view=math.pi / 2, position=(0.0, 1.0, 0.0))
        setup_camera(camera)
        info = get_camera_info()
        assert info["position"] == pytest.approx((0.0, 1.0, 0.0))
        assert info["screen_center"] == pytest.approx((0.0, 0.0, -50.0))

    @pytest.mark.parametrize("x, y", [(0, 0), (-50, 50), (49, -49), (13, 7)])
    def test_get_pixel_ray_matches_host(self, x, y):
        from whitted.camera.pinhole import PinholeCamera, get_pixel_ray, setup_camera

        camera = PinholeCamera(frame_height=100)
        camera.rotate_y(0.3)
        camera.rotate_x(-0.2)
        setup_camera(camera)

        direction = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            direction[None] = get_pixel_ray(x, y).direction

        test_kernel()
        np.testing.assert_allclose(
            direction[None].to_numpy(), camera.pixel_direction(x, y), atol=1e-5
        )

    def test_setup_camera_fits_frame_height(self):
        from whitted.camera.pinhole import PinholeCamera, get_camera_info, setup_camera

        camera = PinholeCamera(frame_height=512, field_of_view=math.pi / 2)
        setup_camera(camera, frame_height=64)
        assert get_camera_info()["screen_center"] == pytest.approx((0.0, 0.0, -32.0))
        # The host camera keeps its own screen distance
        assert camera.screen_distance == pytest.approx(256.0)

    def test_setup_camera_rejects_empty_frame(self):
        from whitted.camera.pinhole import PinholeCamera, setup_camera

        with pytest.raises(ValueError):
            setup_camera(PinholeCamera(), frame_height=0)
