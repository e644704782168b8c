"""
Test the 3x3 rotation builders.
"""

import math
import pytest
import numpy as np
from pathlib import Path

# Add src to path
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from spatial3d.geometry import UnitVector3D, Vector3D, rotation_around_arbitrary_vector, rotation_to, rotation_xyz


class TestRodrigues:
    """Rotation about an arbitrary axis."""

    def test_quarter_turn_about_z(self):
        R = rotation_around_arbitrary_vector(UnitVector3D.z_axis(), math.pi / 2)
        np.testing.assert_allclose(R @ [1, 0, 0], [0, 1, 0], atol=1e-15)

    def test_axis_is_normalized(self):
        a = rotation_around_arbitrary_vector(Vector3D(1, 1, 1), 0.7)
        b = rotation_around_arbitrary_vector(UnitVector3D(1, 1, 1), 0.7)
        np.testing.assert_allclose(a, b, atol=1e-15)

    def test_is_proper_rotation(self):
        R = rotation_around_arbitrary_vector(Vector3D(1, -2, 3), 1.3)
        np.testing.assert_allclose(R.T @ R, np.eye(3), atol=1e-14)
        assert np.linalg.det(R) == pytest.approx(1.0)


class TestRotationXYZ:
    """Fixed-axis x, y, z rotation."""

    def test_zero_is_identity(self):
        np.testing.assert_allclose(rotation_xyz(0, 0, 0), np.eye(3), atol=0)

    def test_single_axis(self):
        np.testing.assert_allclose(rotation_xyz(0, 0, math.pi / 2) @ [1, 0, 0], [0, 1, 0], atol=1e-15)
        np.testing.assert_allclose(rotation_xyz(0, math.pi / 2, 0) @ [1, 0, 0], [0, 0, -1], atol=1e-15)
        np.testing.assert_allclose(rotation_xyz(math.pi / 2, 0, 0) @ [0, 1, 0], [0, 0, 1], atol=1e-15)

    def test_x_applied_before_z(self):
        R = rotation_xyz(math.pi / 2, 0, math.pi / 2)
        np.testing.assert_allclose(R @ [0, 1, 0], [0, 0, 1], atol=1e-15)

    def test_matches_product_of_single_rotations(self):
        rx, ry, rz = 0.3, -1.1, 2.0
        expected = (
            rotation_around_arbitrary_vector(UnitVector3D.z_axis(), rz)
            @ rotation_around_arbitrary_vector(UnitVector3D.y_axis(), ry)
            @ rotation_around_arbitrary_vector(UnitVector3D.x_axis(), rx)
        )
        np.testing.assert_allclose(rotation_xyz(rx, ry, rz), expected, atol=0)


class TestRotationTo:
    """Aligning one direction with another."""

    def test_same_direction_is_identity(self):
        np.testing.assert_array_equal(rotation_to(UnitVector3D.x_axis(), UnitVector3D.x_axis()), np.eye(3))

    def test_general_directions(self):
        a, b = UnitVector3D(1, 2, 3), UnitVector3D(-2, 0, 1)
        np.testing.assert_allclose(rotation_to(a, b) @ a.to_array(), b.to_array(), atol=1e-12)

    def test_antiparallel_uses_given_axis(self):
        x = UnitVector3D.x_axis()
        R = rotation_to(x, -x, UnitVector3D.z_axis())
        np.testing.assert_allclose(R @ [1, 0, 0], [-1, 0, 0], atol=1e-12)
        np.testing.assert_allclose(R @ [0, 0, 1], [0, 0, 1], atol=1e-12)

    def test_antiparallel_without_axis(self):
        z = UnitVector3D.z_axis()
        R = rotation_to(z, -z)
        np.testing.assert_allclose(R @ [0, 0, 1], [0, 0, -1], atol=1e-12)
