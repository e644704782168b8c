"""
Test Plane3D: construction, distances, projection and intersection.
"""

import math
import pytest
import numpy as np
from pathlib import Path

# Add src to path
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from spatial3d.geometry import (
    Point3D, Vector3D, UnitVector3D, Line3D, LineSegment3D, Ray3D, Plane3D, CoordinateSystem3D,
)
from spatial3d.exceptions import (
    DegenerateGeometryError, GeometryFormatError, GeometryOperationError, ParallelGeometryError,
)


@pytest.fixture
def xy_plane():
    return Plane3D(UnitVector3D.z_axis(), 0.0)


@pytest.fixture
def raised_plane():
    """z = 2"""
    return Plane3D.from_normal_and_point(UnitVector3D.z_axis(), Point3D(0, 0, 2))


class TestConstruction:
    """Builders and derived properties."""

    def test_from_points(self):
        plane = Plane3D.from_points(Point3D(0, 0, 0), Point3D(1, 0, 0), Point3D(0, 1, 0))
        assert plane.normal == UnitVector3D(0, 0, 1)
        assert plane.d == 0.0

    def test_from_points_orientation_follows_order(self):
        plane = Plane3D.from_points(Point3D(0, 0, 0), Point3D(0, 1, 0), Point3D(1, 0, 0))
        assert plane.normal == UnitVector3D(0, 0, -1)

    def test_from_points_collinear_fails(self):
        with pytest.raises(DegenerateGeometryError):
            Plane3D.from_points(Point3D(0, 0, 0), Point3D(1, 1, 1), Point3D(2, 2, 2))

    def test_from_points_coincident_fails(self):
        with pytest.raises(DegenerateGeometryError):
            Plane3D.from_points(Point3D(0, 0, 0), Point3D(0, 0, 0), Point3D(2, 2, 2))

    def test_from_coefficients_keeps_point_set(self):
        plane = Plane3D.from_coefficients(0, 0, 2, -4)
        assert plane.normal == UnitVector3D(0, 0, 1)
        assert plane.d == pytest.approx(-2.0)
        assert plane.absolute_distance_to(Point3D(3, -1, 2)) == pytest.approx(0.0)

    def test_vector_normal_is_normalized(self):
        plane = Plane3D(Vector3D(0, 0, 5), -1)
        assert isinstance(plane.normal, UnitVector3D)
        assert plane.normal == UnitVector3D(0, 0, 1)

    def test_coefficients_and_root_point(self, raised_plane):
        assert (raised_plane.a, raised_plane.b, raised_plane.c) == (0.0, 0.0, 1.0)
        assert raised_plane.d == -2.0
        assert raised_plane.root_point == Point3D(0, 0, 2)

    def test_intersection_of_three_planes(self):
        p = Plane3D.intersection_of(
            Plane3D.from_coefficients(1, 0, 0, -1),
            Plane3D.from_coefficients(0, 1, 0, -2),
            Plane3D.from_coefficients(0, 0, 1, -3),
        )
        np.testing.assert_allclose(p.to_array(), [1, 2, 3], atol=1e-12)


class TestDistances:
    """Signed and absolute distances."""

    @pytest.mark.parametrize("point, expected", [
        ((1, 1, 5), 3.0),
        ((0, 0, 0), -2.0),
        ((7, -3, 2), 0.0),
    ])
    def test_signed_distance_to_point(self, raised_plane, point, expected):
        assert raised_plane.signed_distance_to(Point3D(*point)) == pytest.approx(expected)

    def test_absolute_distance(self, raised_plane):
        assert raised_plane.absolute_distance_to(Point3D(0, 0, -1)) == pytest.approx(3.0)

    def test_distance_to_parallel_plane(self, raised_plane):
        other = Plane3D.from_normal_and_point(UnitVector3D.z_axis(), Point3D(0, 0, 5))
        assert raised_plane.signed_distance_to(other) == pytest.approx(3.0)

    def test_distance_to_tilted_plane_fails(self, raised_plane):
        other = Plane3D(UnitVector3D.x_axis(), 0.0)
        with pytest.raises(GeometryOperationError):
            raised_plane.signed_distance_to(other)

    def test_distance_to_parallel_ray(self, raised_plane):
        ray = Ray3D(Point3D(0, 0, 5), UnitVector3D.x_axis())
        assert raised_plane.signed_distance_to(ray) == pytest.approx(3.0)

    def test_distance_to_crossing_ray_fails(self, raised_plane):
        ray = Ray3D(Point3D(0, 0, 5), UnitVector3D(0, 0.6, 0.8))
        with pytest.raises(GeometryOperationError):
            raised_plane.signed_distance_to(ray)

    def test_distance_to_unsupported_type(self, raised_plane):
        with pytest.raises(TypeError):
            raised_plane.signed_distance_to(Vector3D(1, 2, 3))


class TestProjection:
    """Projection onto the plane."""

    def test_project_point(self, raised_plane):
        assert raised_plane.project(Point3D(1, 2, 7)) == Point3D(1, 2, 2)

    def test_project_along_direction(self, xy_plane):
        projected = xy_plane.project(Point3D(1, 2, 3), UnitVector3D.z_axis())
        assert projected == Point3D(1, 2, 0)

    def test_project_line_keeps_type(self, xy_plane):
        line = Line3D(Point3D(0, 0, 1), Point3D(1, 1, 3))
        projected = xy_plane.project_line(line)
        assert type(projected) is Line3D
        assert projected == Line3D(Point3D(0, 0, 0), Point3D(1, 1, 0))

    def test_project_segment(self, xy_plane):
        segment = LineSegment3D(Point3D(0, 0, 1), Point3D(2, 0, 3))
        assert xy_plane.project_segment(segment) == LineSegment3D(Point3D(0, 0, 0), Point3D(2, 0, 0))

    def test_project_ray(self, xy_plane):
        ray = Ray3D(Point3D(1, 1, 4), UnitVector3D.create(1, 0, 1))
        projected = xy_plane.project_ray(ray)
        assert projected.through_point == Point3D(1, 1, 0)
        assert projected.direction.equals(UnitVector3D.x_axis(), 1e-12)

    def test_project_vector(self, xy_plane):
        projected = xy_plane.project_vector(Vector3D(0, 2, 5))
        assert projected.through_point == Point3D(0, 0, 0)
        assert projected.direction == UnitVector3D(0, 1, 0)

    def test_mirror_about(self, xy_plane):
        assert xy_plane.mirror_about(Point3D(1, 2, 3)) == Point3D(1, 2, -3)


class TestIntersection:
    """Plane, line and ray intersections."""

    def test_plane_plane(self):
        p1 = Plane3D.from_coefficients(0, 0, 1, -1)
        p2 = Plane3D.from_coefficients(1, 0, 0, -2)
        ray = p1.intersection_with(p2)
        assert ray.direction.is_parallel_to(UnitVector3D.y_axis())
        np.testing.assert_allclose(ray.through_point.to_array(), [2, 0, 1], atol=1e-12)

    def test_ray_intersection_of(self):
        p1 = Plane3D.from_coefficients(0, 0, 1, -1)
        p2 = Plane3D.from_coefficients(1, 0, 0, -2)
        assert Ray3D.intersection_of(p1, p2).direction.is_parallel_to(UnitVector3D.y_axis())

    def test_parallel_planes_fail(self, xy_plane, raised_plane):
        with pytest.raises(ParallelGeometryError):
            xy_plane.intersection_with(raised_plane)

    def test_parallel_planes_are_operation_errors(self, xy_plane, raised_plane):
        with pytest.raises(GeometryOperationError):
            xy_plane.intersection_with(raised_plane)

    def test_ray(self, xy_plane):
        ray = Ray3D(Point3D(1, 1, 1), UnitVector3D.z_axis())
        assert xy_plane.intersection_with(ray) == Point3D(1, 1, 0)
        assert ray.intersection_with(xy_plane) == Point3D(1, 1, 0)

    def test_ray_behind_through_point(self, xy_plane):
        ray = Ray3D(Point3D(1, 1, -2), UnitVector3D(0, 0, -1))
        assert xy_plane.intersection_with(ray) == Point3D(1, 1, 0)

    def test_parallel_ray_fails(self, xy_plane):
        ray = Ray3D(Point3D(1, 1, 1), UnitVector3D.x_axis())
        with pytest.raises(GeometryOperationError):
            xy_plane.intersection_with(ray)

    def test_segment_inside_range(self, xy_plane):
        segment = LineSegment3D(Point3D(0, 0, -1), Point3D(2, 2, 1))
        assert xy_plane.intersection_with(segment) == Point3D(1, 1, 0)

    def test_unsupported_type(self, xy_plane):
        with pytest.raises(TypeError):
            xy_plane.intersection_with(Point3D(0, 0, 0))


class TestTransformations:
    """Rotation and frame transforms."""

    def test_rotate(self):
        plane = Plane3D.from_normal_and_point(UnitVector3D.z_axis(), Point3D(0, 0, 1))
        rotated = plane.rotate(UnitVector3D.x_axis(), math.pi / 2)
        assert rotated.equals(Plane3D(UnitVector3D(0, -1, 0), -1.0), 1e-9)

    def test_transform_by_translation(self):
        plane = Plane3D.from_normal_and_point(UnitVector3D.z_axis(), Point3D(0, 0, 1))
        moved = plane.transform_by(CoordinateSystem3D.translation(Vector3D(5, 0, 3)))
        assert moved.normal == UnitVector3D(0, 0, 1)
        assert moved.d == pytest.approx(-4.0)

    def test_equals(self, raised_plane):
        assert raised_plane.equals(Plane3D(UnitVector3D.z_axis(), -2.0 + 1e-12), 1e-9)
        assert not raised_plane.equals(Plane3D(UnitVector3D.z_axis(), -2.1), 1e-9)
        with pytest.raises(ValueError):
            raised_plane.equals(raised_plane, -1)


class TestText:
    """Plane text form."""

    def test_format(self, raised_plane):
        assert str(raised_plane) == "A:0.0 B:0.0 C:1.0 D:-2.0"

    def test_round_trip(self):
        plane = Plane3D.from_coefficients(1, 2, 3, 4)
        assert Plane3D.parse(str(plane)) == plane

    def test_decimal_comma(self, raised_plane):
        text = raised_plane.to_string(decimal_separator=",")
        assert text == "A:0,0 B:0,0 C:1,0 D:-2,0"
        assert Plane3D.parse(text, decimal_separator=",") == raised_plane

    @pytest.mark.parametrize("text", [
        "A:0 B:0 C:0 D:1",
        "A:0 B:0 C:1",
        "A:x B:0 C:1 D:0",
        "",
    ])
    def test_invalid(self, text):
        assert Plane3D.try_parse(text) == (False, None)
        with pytest.raises(GeometryFormatError):
            Plane3D.parse(text)
