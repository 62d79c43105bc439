"""Unit tests for host-side rotations and local frames.

Tests cover:
- Principal axis rotations (angle and precomputed sine/cosine forms)
- Agreement of the matrix and quaternion axis-angle rotations
- Closed-form basis from a facing direction, including the Z-axis cases
- LocalFrame orthonormality and the orientation-changed hook
"""

import math

import numpy as np
import pytest


def assert_orthonormal(horizontal, vertical, direction, tol=1e-9):
    for axis in (horizontal, vertical, direction):
        assert abs(np.linalg.norm(axis) - 1.0) < tol
    assert abs(np.dot(horizontal, vertical)) < tol
    assert abs(np.dot(horizontal, direction)) < tol
    assert abs(np.dot(vertical, direction)) < tol


class TestPrincipalRotations:
    """Tests for rotate_x, rotate_y and rotate_z."""

    def test_rotate_z_quarter_turn(self):
        from whitted.core.transform import rotate_z

        np.testing.assert_allclose(rotate_z((1.0, 0.0, 0.0), math.pi / 2), [0.0, 1.0, 0.0], atol=1e-12)

    def test_rotate_x_quarter_turn(self):
        from whitted.core.transform import rotate_x

        np.testing.assert_allclose(rotate_x((0.0, 1.0, 0.0), math.pi / 2), [0.0, 0.0, 1.0], atol=1e-12)

    def test_rotate_y_quarter_turn(self):
        from whitted.core.transform import rotate_y

        np.testing.assert_allclose(rotate_y((0.0, 0.0, 1.0), math.pi / 2), [1.0, 0.0, 0.0], atol=1e-12)

    def test_precomputed_sin_cos_matches_angle(self):
        from whitted.core.transform import rotate_y

        angle = 0.37
        v = (0.2, -1.3, 2.1)
        expected = rotate_y(v, angle)
        actual = rotate_y(v, sin_cos=(math.sin(angle), math.cos(angle)))
        np.testing.assert_allclose(actual, expected)

    def test_missing_angle_raises(self):
        from whitted.core.transform import rotate_x

        with pytest.raises(ValueError):
            rotate_x((1.0, 0.0, 0.0))


class TestAxisRotations:
    """Tests for arbitrary axis rotations."""

    @pytest.mark.parametrize(
        "axis, angle",
        [
            ((0.0, 0.0, 1.0), 0.5),
            ((1.0, 1.0, 0.0), -1.2),
            ((0.3, -0.4, 0.866), 2.9),
            ((-1.0, 2.0, 3.0), math.pi),
        ],
    )
    def test_quaternion_matches_matrix(self, axis, angle):
        from whitted.core.transform import normalize, rotate_axis_matrix, rotate_axis_quaternion

        unit_axis = normalize(axis)
        v = (1.5, -0.25, 0.75)
        np.testing.assert_allclose(
            rotate_axis_quaternion(v, unit_axis, angle),
            rotate_axis_matrix(v, unit_axis, angle),
            atol=1e-9,
        )

    def test_rotation_preserves_length(self):
        from whitted.core.transform import normalize, rotate_axis_quaternion

        v = np.array([3.0, -4.0, 12.0])
        rotated = rotate_axis_quaternion(v, normalize((1.0, 2.0, 2.0)), 1.1)
        assert abs(np.linalg.norm(rotated) - 13.0) < 1e-9

    def test_matrix_is_orthogonal(self):
        from whitted.core.transform import axis_rotation_matrix, normalize

        m = axis_rotation_matrix(normalize((2.0, -1.0, 0.5)), 0.8)
        np.testing.assert_allclose(m @ m.T, np.eye(3), atol=1e-12)
        assert abs(np.linalg.det(m) - 1.0) < 1e-12


class TestBasisFromDirection:
    """Tests for the closed-form frame basis."""

    def test_default_direction_gives_default_basis(self):
        from whitted.core.transform import basis_from_direction

        horizontal, vertical = basis_from_direction((0.0, 0.0, -1.0))
        np.testing.assert_allclose(horizontal, [1.0, 0.0, 0.0])
        np.testing.assert_allclose(vertical, [0.0, 1.0, 0.0])

    def test_backward_direction_special_case(self):
        from whitted.core.transform import basis_from_direction

        horizontal, vertical = basis_from_direction((0.0, 0.0, 1.0))
        np.testing.assert_allclose(horizontal, [-1.0, 0.0, 0.0])
        np.testing.assert_allclose(vertical, [0.0, 1.0, 0.0])

    @pytest.mark.parametrize(
        "direction",
        [
            (1.0, 0.0, 0.0),
            (0.0, 1.0, 0.0),
            (0.0, -1.0, 0.0),
            (1.0, 1.0, 1.0),
            (-0.2, 0.3, -0.9),
            (0.6, -0.7, 0.2),
        ],
    )
    def test_basis_is_orthonormal(self, direction):
        from whitted.core.transform import basis_from_direction, normalize

        d = normalize(direction)
        horizontal, vertical = basis_from_direction(d)
        assert_orthonormal(horizontal, vertical, d)
        # Right-handed: horizontal x vertical points against the facing direction
        np.testing.assert_allclose(np.cross(horizontal, vertical), -d, atol=1e-9)


class TestLocalFrame:
    """Tests for the LocalFrame recompute-on-write basis."""

    def test_default_frame(self):
        from whitted.core.transform import LocalFrame

        frame = LocalFrame()
        np.testing.assert_allclose(frame.horizontal, [1.0, 0.0, 0.0])
        np.testing.assert_allclose(frame.vertical, [0.0, 1.0, 0.0])
        np.testing.assert_allclose(frame.direction, [0.0, 0.0, -1.0])

    def test_axes_are_copies(self):
        from whitted.core.transform import LocalFrame

        frame = LocalFrame()
        frame.direction[0] = 42.0
        np.testing.assert_allclose(frame.direction, [0.0, 0.0, -1.0])

    def test_rotations_keep_frame_orthonormal(self):
        from whitted.core.transform import LocalFrame, normalize

        frame = LocalFrame()
        frame.rotate_x(0.3)
        frame.rotate_y(-1.1)
        frame.rotate_z(2.0)
        frame.rotate_axis(normalize((1.0, -2.0, 0.5)), 0.7)
        assert_orthonormal(frame.horizontal, frame.vertical, frame.direction)

    def test_set_direction_keeps_frame_orthonormal(self):
        from whitted.core.transform import LocalFrame, normalize

        frame = LocalFrame()
        frame.rotate_y(0.4)
        frame.set_direction(normalize((0.3, 0.5, -0.8)))
        assert_orthonormal(frame.horizontal, frame.vertical, frame.direction)
        np.testing.assert_allclose(frame.direction, normalize((0.3, 0.5, -0.8)))

    def test_hook_runs_on_every_orientation_change(self):
        from whitted.core.transform import LocalFrame

        class CountingFrame(LocalFrame):
            def __init__(self):
                super().__init__()
                self.changes = 0

            def _on_orientation_changed(self):
                self.changes += 1

        frame = CountingFrame()
        frame.rotate_x(0.1)
        frame.rotate_y(0.1)
        frame.rotate_z(0.1)
        frame.rotate_axis((0.0, 1.0, 0.0), 0.1)
        frame.set_direction((1.0, 0.0, 0.0))
        assert frame.changes == 5
