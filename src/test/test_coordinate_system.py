"""
Test CoordinateSystem3D: builders, transforms, inversion, equality and text.
"""

import math
import pytest
import numpy as np
from pathlib import Path

# Add src to path
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from spatial3d.geometry import (
    Point3D, Vector3D, UnitVector3D, Line3D, LineSegment3D, Ray3D, CoordinateSystem3D,
)
from spatial3d.exceptions import GeometryFormatError, SingularFrameError


def assert_xyz(actual, expected, atol=1e-12):
    np.testing.assert_allclose(actual.to_array(), np.asarray(expected, dtype=float), atol=atol)


class TestBuilders:
    """Frame construction."""

    def test_default_is_identity(self):
        cs = CoordinateSystem3D()
        np.testing.assert_array_equal(cs.matrix, np.eye(4))
        assert cs == CoordinateSystem3D.identity()

    def test_axes_and_origin_are_columns(self):
        cs = CoordinateSystem3D(Point3D(1, 2, 3), Vector3D(0, 1, 0), Vector3D(-1, 0, 0), Vector3D(0, 0, 2))
        np.testing.assert_array_equal(cs.matrix[:3, 0], [0, 1, 0])
        np.testing.assert_array_equal(cs.matrix[:3, 2], [0, 0, 2])
        np.testing.assert_array_equal(cs.matrix[:3, 3], [1, 2, 3])
        np.testing.assert_array_equal(cs.matrix[3], [0, 0, 0, 1])
        assert cs.origin == Point3D(1, 2, 3)
        assert cs.x_axis == Vector3D(0, 1, 0)
        assert cs.y_axis == Vector3D(-1, 0, 0)
        assert cs.z_axis == Vector3D(0, 0, 2)
        assert cs.offset_to_base == Vector3D(1, 2, 3)

    def test_from_matrix_requires_4x4(self):
        with pytest.raises(ValueError):
            CoordinateSystem3D.from_matrix(np.eye(3))

    def test_matrix_is_a_copy(self):
        cs = CoordinateSystem3D()
        m = cs.matrix
        m[0, 0] = 5.0
        assert cs.matrix[0, 0] == 1.0

    def test_from_matrix_copies_input(self):
        m = np.eye(4)
        cs = CoordinateSystem3D.from_matrix(m)
        m[0, 3] = 9.0
        assert cs.origin == Point3D(0, 0, 0)

    def test_from_matrix_rejects_projective_bottom_row(self):
        m = np.eye(4)
        m[3] = [1, 2, 3, 4]
        with pytest.raises(ValueError, match="Bottom row"):
            CoordinateSystem3D.from_matrix(m)
        with pytest.raises(ValueError, match="Bottom row"):
            CoordinateSystem3D().transform_by(m)

    def test_from_matrix_snaps_bottom_row_within_tolerance(self):
        m = np.eye(4)
        m[:3, 3] = [1, 2, 3]
        m[3] = [1e-12, 0, 0, 1 + 1e-12]
        cs = CoordinateSystem3D.from_matrix(m)
        np.testing.assert_array_equal(cs.matrix[3], [0, 0, 0, 1])
        assert CoordinateSystem3D.parse(str(cs)) == cs
        with pytest.raises(ValueError):
            CoordinateSystem3D.from_matrix(m, tolerance=1e-15)

    def test_translation(self):
        cs = CoordinateSystem3D.translation(Vector3D(1, 2, 4))
        assert cs.transform(Point3D(0, 0, 0)) == Point3D(1, 2, 4)
        assert cs.transform(Vector3D(1, 0, 0)) == Vector3D(1, 0, 0)

    def test_rotation_about_z(self):
        cs = CoordinateSystem3D.rotation(math.pi / 2, UnitVector3D.z_axis())
        assert_xyz(cs.transform(Point3D(1, 2, 3)), [-2, 1, 3])

    def test_rotation_about_unnormalized_axis(self):
        cs = CoordinateSystem3D.rotation(math.pi / 2, Vector3D(0, 0, 5))
        assert_xyz(cs.transform(Point3D(1, 2, 3)), [-2, 1, 3])

    @pytest.mark.parametrize("builder, point, expected", [
        ("yaw", (1, 0, 0), (0, 1, 0)),
        ("pitch", (1, 0, 0), (0, 0, -1)),
        ("roll", (0, 1, 0), (0, 0, 1)),
    ])
    def test_single_axis_rotations(self, builder, point, expected):
        cs = getattr(CoordinateSystem3D, builder)(math.pi / 2)
        assert_xyz(cs.transform(Point3D(*point)), expected)

    def test_yaw_pitch_roll_order(self):
        yaw, pitch, roll = 0.3, -0.7, 1.1
        combined = CoordinateSystem3D.rotation_yaw_pitch_roll(yaw, pitch, roll)
        expected = (
            CoordinateSystem3D.roll(roll).matrix
            @ CoordinateSystem3D.pitch(pitch).matrix
            @ CoordinateSystem3D.yaw(yaw).matrix
        )
        np.testing.assert_allclose(combined.matrix, expected, atol=1e-12)

    def test_rotate_to(self):
        cs = CoordinateSystem3D.rotate_to(UnitVector3D.x_axis(), UnitVector3D.y_axis())
        assert_xyz(cs.transform(UnitVector3D.x_axis()), [0, 1, 0])

    def test_rotate_to_antiparallel(self):
        cs = CoordinateSystem3D.rotate_to(UnitVector3D.x_axis(), UnitVector3D(-1, 0, 0))
        assert_xyz(cs.transform(UnitVector3D.x_axis()), [-1, 0, 0])

    def test_rotate_to_antiparallel_about_given_axis(self):
        cs = CoordinateSystem3D.rotate_to(UnitVector3D.x_axis(), UnitVector3D(-1, 0, 0), UnitVector3D.z_axis())
        assert_xyz(cs.transform(UnitVector3D.x_axis()), [-1, 0, 0])
        assert_xyz(cs.transform(UnitVector3D.z_axis()), [0, 0, 1])

    def test_rotate_to_same_direction(self):
        cs = CoordinateSystem3D.rotate_to(UnitVector3D.z_axis(), UnitVector3D.z_axis())
        assert cs == CoordinateSystem3D.identity()


class TestMapping:
    """Frame-to-frame mappings."""

    def test_mapping_from_identity_is_target(self):
        target = CoordinateSystem3D.translation(Vector3D(1, 2, 3))
        mapping = CoordinateSystem3D.create_mapping_coordinate_system(CoordinateSystem3D(), target)
        assert mapping.equals(target, 1e-12)

    def test_mapping_takes_from_onto_to(self):
        from_cs = CoordinateSystem3D.translation(Vector3D(1, 0, 0))
        to_cs = CoordinateSystem3D.yaw(math.pi / 2).offset_by(Vector3D(0, 0, 2))
        mapping = CoordinateSystem3D.create_mapping_coordinate_system(from_cs, to_cs)
        assert mapping.transform(from_cs).equals(to_cs, 1e-12)
        assert mapping.matrix[3, 3] == 1.0

    def test_set_to_align(self):
        mapping = CoordinateSystem3D.set_to_align_coordinate_systems(
            Point3D(1, 0, 0), UnitVector3D.x_axis(), UnitVector3D.y_axis(), UnitVector3D.z_axis(),
            Point3D(0, 1, 0), UnitVector3D.y_axis(), UnitVector3D(-1, 0, 0), UnitVector3D.z_axis(),
        )
        assert_xyz(mapping.transform(Point3D(1, 0, 0)), [0, 1, 0])
        assert_xyz(mapping.transform(Vector3D(1, 0, 0)), [0, 1, 0])

    def test_mapping_from_singular_frame_fails(self):
        singular = CoordinateSystem3D(Point3D(0, 0, 0), Vector3D(1, 0, 0), Vector3D(0, 1, 0), Vector3D(1, 1, 0))
        with pytest.raises(SingularFrameError):
            CoordinateSystem3D.create_mapping_coordinate_system(singular, CoordinateSystem3D())


class TestDerivedFrames:
    """Frames derived from an existing one."""

    def setup_method(self):
        self.cs = CoordinateSystem3D.yaw(0.4).offset_by(Vector3D(1, 2, 3))

    def test_offset_by(self):
        assert_xyz(self.cs.origin, [1, 2, 3])
        moved = self.cs.offset_by(Vector3D(0, 0, 1))
        assert_xyz(moved.origin, [1, 2, 4])
        assert moved.x_axis == self.cs.x_axis

    def test_with_translation(self):
        moved = self.cs.with_translation(Vector3D(5, 5, 5))
        assert moved.origin == Point3D(5, 5, 5)
        assert moved.rotation_sub_matrix().tolist() == self.cs.rotation_sub_matrix().tolist()

    def test_with_rotation_sub_matrix(self):
        reset = self.cs.with_rotation_sub_matrix(np.eye(3))
        assert reset.origin == self.cs.origin
        np.testing.assert_array_equal(reset.rotation_sub_matrix(), np.eye(3))
        with pytest.raises(ValueError):
            self.cs.with_rotation_sub_matrix(np.eye(4))

    def test_reset_rotations_keeps_scale(self):
        scaled = CoordinateSystem3D(Point3D(1, 1, 1), Vector3D(0, 2, 0), Vector3D(-3, 0, 0), Vector3D(0, 0, 4))
        reset = scaled.reset_rotations()
        assert reset.origin == Point3D(1, 1, 1)
        assert reset.x_axis == Vector3D(2, 0, 0)
        assert reset.y_axis == Vector3D(0, 3, 0)
        assert reset.z_axis == Vector3D(0, 0, 4)

    def test_rotate_around_vector(self):
        rotated = CoordinateSystem3D().rotate_around_vector(UnitVector3D.z_axis(), math.pi / 2)
        assert_xyz(rotated.x_axis, [0, 1, 0])

    def test_rotate_no_reset_keeps_existing_rotation(self):
        rotated = CoordinateSystem3D.yaw(0.25).rotate_no_reset(0.5, 0.0, 0.0)
        assert rotated.equals(CoordinateSystem3D.yaw(0.75), 1e-12)


class TestTransform:
    """Applying frames to entities."""

    def setup_method(self):
        self.cs = CoordinateSystem3D.yaw(math.pi / 2).offset_by(Vector3D(1, 2, 3))

    def test_point_uses_translation(self):
        assert_xyz(self.cs.transform(Point3D(1, 0, 0)), [1, 3, 3])

    def test_vectors_ignore_translation(self):
        v = self.cs.transform(Vector3D(1, 0, 0))
        assert isinstance(v, Vector3D)
        assert_xyz(v, [0, 1, 0])
        u = self.cs.transform(UnitVector3D.x_axis())
        assert isinstance(u, Vector3D)
        assert_xyz(u, [0, 1, 0])

    def test_ray(self):
        ray = self.cs.transform(Ray3D(Point3D(0, 0, 0), UnitVector3D.x_axis()))
        assert isinstance(ray, Ray3D)
        assert_xyz(ray.through_point, [1, 2, 3])
        assert_xyz(ray.direction, [0, 1, 0])

    @pytest.mark.parametrize("cls", [Line3D, LineSegment3D])
    def test_lines_keep_type(self, cls):
        moved = self.cs.transform(cls(Point3D(0, 0, 0), Point3D(1, 0, 0)))
        assert type(moved) is cls
        assert_xyz(moved.end_point, [1, 3, 3])

    def test_entity_transform_by(self):
        p = Point3D(1, 0, 0).transform_by(self.cs)
        assert_xyz(p, [1, 3, 3])
        segment = LineSegment3D(Point3D(0, 0, 0), Point3D(1, 0, 0)).transform_by(self.cs)
        assert_xyz(segment.start_point, [1, 2, 3])

    def test_frame_composition(self):
        t = CoordinateSystem3D.translation(Vector3D(0, 0, 1))
        composed = t.transform(self.cs)
        np.testing.assert_allclose(composed.matrix, t.matrix @ self.cs.matrix)

    def test_transform_by_array(self):
        t = CoordinateSystem3D.translation(Vector3D(0, 0, 1))
        assert self.cs.transform_by(t.matrix) == self.cs.transform_by(t)
        with pytest.raises(ValueError):
            self.cs.transform_by(np.eye(3))

    def test_unsupported_type(self):
        with pytest.raises(TypeError):
            self.cs.transform("not an entity")

    def test_to_and_from_coord_sys(self):
        local = self.cs.transform_to_coord_sys(Point3D(1, 3, 3))
        assert_xyz(local, [1, 0, 0])
        assert_xyz(self.cs.transform_from_coord_sys(local), [1, 3, 3])

    def test_to_coord_sys_ray(self):
        ray = Ray3D(Point3D(1, 2, 3), UnitVector3D.y_axis())
        local = self.cs.transform_to_coord_sys(ray)
        assert_xyz(local.through_point, [0, 0, 0])
        assert_xyz(local.direction, [1, 0, 0])


class TestInvert:
    """Inversion and singular frames."""

    def test_invert_round_trip(self):
        cs = CoordinateSystem3D.rotation_yaw_pitch_roll(0.2, 0.4, -0.9).offset_by(Vector3D(3, -1, 2))
        p = Point3D(0.5, -2, 7)
        assert_xyz(cs.invert().transform(cs.transform(p)), p.to_array(), atol=1e-12)
        assert cs.transform(cs.invert()).equals(CoordinateSystem3D(), 1e-12)

    def test_singular_frame(self):
        cs = CoordinateSystem3D(Point3D(0, 0, 0), Vector3D(1, 0, 0), Vector3D(0, 1, 0), Vector3D(1, 1, 0))
        with pytest.raises(SingularFrameError):
            cs.invert()
        with pytest.raises(SingularFrameError):
            cs.transform_to_coord_sys(Point3D(1, 1, 1))


class TestComparison:
    """Equality and hashing."""

    def test_eq_and_hash(self):
        a = CoordinateSystem3D.translation(Vector3D(1, 2, 3))
        b = CoordinateSystem3D(Point3D(1, 2, 3))
        assert a == b
        assert hash(a) == hash(b)
        assert len({a, b}) == 1

    def test_not_equal_to_other_types(self):
        assert CoordinateSystem3D() != "identity"

    def test_equals_tolerance(self):
        a = CoordinateSystem3D()
        b = CoordinateSystem3D.translation(Vector3D(1e-10, 0, 0))
        assert a != b
        assert a.equals(b, 1e-9)
        assert not a.equals(b, 1e-11)
        with pytest.raises(ValueError):
            a.equals(b, -1.0)


class TestText:
    """Frame text form."""

    def test_format(self):
        text = str(CoordinateSystem3D.translation(Vector3D(1, 2, 3)))
        assert text == "o:{1.0, 2.0, 3.0} x:{1.0, 0.0, 0.0} y:{0.0, 1.0, 0.0} z:{0.0, 0.0, 1.0}"

    def test_round_trip(self):
        cs = CoordinateSystem3D.rotation_yaw_pitch_roll(0.1, 0.2, 0.3).offset_by(Vector3D(1.5, -2, 1e-3))
        assert CoordinateSystem3D.parse(str(cs)) == cs

    def test_parse_is_case_insensitive(self):
        cs = CoordinateSystem3D.parse("O:{1, 2, 3} X:{1, 0, 0} Y:{0, 1, 0} Z:{0, 0, 1}")
        assert cs == CoordinateSystem3D.translation(Vector3D(1, 2, 3))

    def test_decimal_comma(self):
        cs = CoordinateSystem3D.translation(Vector3D(1.5, 2, 3))
        text = cs.to_string(decimal_separator=",")
        assert CoordinateSystem3D.parse(text, decimal_separator=",") == cs

    @pytest.mark.parametrize("text", [
        "o:{1, 2, 3} x:{1, 0, 0} y:{0, 1, 0}",
        "o:{1, 2} x:{1, 0, 0} y:{0, 1, 0} z:{0, 0, 1}",
        "",
    ])
    def test_invalid(self, text):
        assert CoordinateSystem3D.try_parse(text) == (False, None)
        with pytest.raises(GeometryFormatError):
            CoordinateSystem3D.parse(text)
