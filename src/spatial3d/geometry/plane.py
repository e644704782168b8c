"""
Plane3D in implicit form: {p : normal . p + d = 0}.
"""

from __future__ import annotations
from dataclasses import dataclass
import logging
from typing import TYPE_CHECKING, Optional, Union

import numpy as np

from ..exceptions import (
    DegenerateGeometryError,
    GeometryFormatError,
    GeometryOperationError,
    ParallelGeometryError,
)
from ..text import split_labeled, try_parse_number, format_number
from .constants import FLOAT_EPSILON, PLANE_PARALLEL_TOLERANCE
from .lines import Line3D, LineSegment3D
from .primitives import Point3D, UnitVector3D, Vector3D
from .ray import Ray3D

if TYPE_CHECKING:
    from .coordinate_system import CoordinateSystem3D

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Plane3D:
    """
    Plane with unit ``normal`` and signed offset ``d``.

    ``root_point`` (= -d * normal) is the point of the plane closest to the origin.
    """
    normal: UnitVector3D
    d: float = 0.0

    def __post_init__(self):
        if isinstance(self.normal, Vector3D):
            object.__setattr__(self, "normal", self.normal.normalize())
        object.__setattr__(self, "d", float(self.d))

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def from_normal_and_point(cls, normal: Union[UnitVector3D, Vector3D], point: Point3D) -> Plane3D:
        """Plane with the given normal passing through ``point``."""
        normal = normal.normalize()
        return cls(normal, -normal.dot(point))

    @classmethod
    def from_coefficients(cls, a: float, b: float, c: float, d: float) -> Plane3D:
        """
        Plane a*x + b*y + c*z + d = 0.

        (a, b, c) is normalized and d divided by the same norm, so the
        described point set is unchanged.
        """
        raw = Vector3D(a, b, c)
        norm = raw.length
        return cls(raw.normalize(), d / norm)

    @classmethod
    def from_points(cls, p1: Point3D, p2: Point3D, p3: Point3D) -> Plane3D:
        """
        Plane through three points.

        Raises:
            DegenerateGeometryError: two points coincide or all three are collinear
        """
        if p1 == p2 or p1 == p3 or p2 == p3:
            raise DegenerateGeometryError("Must use three different points")

        cross = (p2 - p1).cross(p3 - p1)
        if cross.length <= FLOAT_EPSILON:
            raise DegenerateGeometryError(
                "The 3 points should not be on the same line",
                details={"cross_length": cross.length},
            )
        return cls.from_normal_and_point(cross.normalize(), p1)

    @staticmethod
    def intersection_of(plane1: Plane3D, plane2: Plane3D, plane3: Plane3D) -> Point3D:
        """Common point of three planes."""
        return Point3D.intersection_of_planes(plane1, plane2, plane3)

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def a(self) -> float:
        return self.normal.x

    @property
    def b(self) -> float:
        return self.normal.y

    @property
    def c(self) -> float:
        return self.normal.z

    @property
    def root_point(self) -> Point3D:
        return (-self.d * self.normal).to_point()

    # ------------------------------------------------------------------
    # Distances
    # ------------------------------------------------------------------

    def signed_distance_to(self, other: Union[Point3D, Plane3D, Ray3D]) -> float:
        """
        Signed distance along the normal.

        Args:
            other: A point, a parallel plane or a ray parallel to this plane

        Raises:
            GeometryOperationError: plane or ray is not parallel to this plane
        """
        if isinstance(other, Point3D):
            return self.project(other).vector_to(other).dot(self.normal)

        if isinstance(other, Plane3D):
            if not self.normal.is_parallel_to(other.normal, PLANE_PARALLEL_TOLERANCE):
                raise GeometryOperationError("Planes are not parallel")
            return self.signed_distance_to(other.root_point)

        if isinstance(other, Ray3D):
            if abs(other.direction.dot(self.normal)) >= PLANE_PARALLEL_TOLERANCE:
                raise GeometryOperationError("Ray is not parallel to the plane")
            return self.signed_distance_to(other.through_point)

        raise TypeError(f"Cannot measure distance to {type(other).__name__}")

    def absolute_distance_to(self, point: Point3D) -> float:
        return abs(self.signed_distance_to(point))

    # ------------------------------------------------------------------
    # Projection
    # ------------------------------------------------------------------

    def project(self, p: Point3D, direction: Optional[UnitVector3D] = None) -> Point3D:
        """
        Project ``p`` onto the plane.

        Args:
            p: Point to project
            direction: Projection direction, defaults to the normal. The
                point is moved by (normal . p + d) along it; this is the
                orthogonal projection when the direction is the normal.
        """
        direction = self.normal if direction is None else direction
        offset = self.normal.dot(p.to_vector()) + self.d
        return p - offset * direction

    def project_line(self, line: Union[Line3D, LineSegment3D]) -> Union[Line3D, LineSegment3D]:
        """Project both end points; the result keeps the input type."""
        return type(line)(self.project(line.start_point), self.project(line.end_point))

    def project_segment(self, segment: LineSegment3D) -> LineSegment3D:
        return self.project_line(segment)

    def project_ray(self, ray: Ray3D) -> Ray3D:
        projected_through = self.project(ray.through_point)
        projected_direction = self.project_vector(ray.direction)
        return Ray3D(projected_through, projected_direction.direction)

    def project_vector(self, vector: Union[Vector3D, UnitVector3D]) -> Ray3D:
        """Ray from the projected origin towards the projected vector head."""
        projected_end = self.project(vector.to_point())
        projected_zero = self.project(Point3D.origin())
        return Ray3D(projected_zero, projected_zero.vector_to(projected_end).normalize())

    # ------------------------------------------------------------------
    # Intersection
    # ------------------------------------------------------------------

    def intersection_with(self, other, tolerance: float = FLOAT_EPSILON):
        """
        Intersect with a plane, line, segment or ray.

        Returns:
            Ray3D for a plane; Point3D for a ray; Point3D or None for lines
            and segments (None when parallel, or off the segment)

        Raises:
            ParallelGeometryError: planes are parallel
            GeometryOperationError: line lies in the plane, or ray is parallel to it
        """
        if isinstance(other, Plane3D):
            return self._intersection_with_plane(other, tolerance)
        if isinstance(other, (Line3D, LineSegment3D)):
            return self._intersection_with_line(other, tolerance)
        if isinstance(other, Ray3D):
            return self._intersection_with_ray(other, tolerance)
        raise TypeError(f"Cannot intersect a plane with {type(other).__name__}")

    def _intersection_with_plane(self, other: Plane3D, tolerance: float) -> Ray3D:
        A = np.vstack([self.normal.to_array(), other.normal.to_array()])
        _, S, Vt = np.linalg.svd(A)
        if S[1] < tolerance:
            raise ParallelGeometryError("Planes", tolerance)

        # Minimum-norm solution of A x = -[d1, d2]
        y = np.array([-self.d, -other.d], dtype=np.float64)
        through = np.linalg.pinv(A) @ y
        return Ray3D(Point3D.from_array(through), UnitVector3D.from_array(Vt[2]))

    def _intersection_with_line(self, line: Union[Line3D, LineSegment3D], tolerance: float) -> Optional[Point3D]:
        if line.direction.is_perpendicular_to(self.normal, tolerance):
            projected = self.project(line.start_point, line.direction)
            if projected == line.start_point:
                raise GeometryOperationError("Line lies in the plane")
            logger.debug("Line %s is parallel to plane %s", line, self)
            return None

        distance = self.signed_distance_to(line.start_point)
        u = line.start_point.vector_to(line.end_point)
        t = -distance / u.dot(self.normal)
        if isinstance(line, LineSegment3D) and (t > 1 or t < 0):
            return None
        return line.start_point + (t * u)

    def _intersection_with_ray(self, ray: Ray3D, tolerance: float) -> Point3D:
        if self.normal.is_perpendicular_to(ray.direction, tolerance):
            raise GeometryOperationError("Ray is parallel to the plane")

        distance = self.signed_distance_to(ray.through_point)
        t = -distance / ray.direction.dot(self.normal)
        return ray.through_point + (t * ray.direction)

    # ------------------------------------------------------------------
    # Transformations
    # ------------------------------------------------------------------

    def mirror_about(self, p: Point3D) -> Point3D:
        """Reflection of ``p`` through the plane."""
        return self.project(p) - self.signed_distance_to(p) * self.normal

    def rotate(self, about: Union[Vector3D, UnitVector3D], angle: float) -> Plane3D:
        """Rotate about an axis through the origin (angle in radians)."""
        rotated_root = self.root_point.rotate(about, angle)
        rotated_normal = self.normal.rotate(about, angle)
        return Plane3D.from_normal_and_point(rotated_normal, rotated_root)

    def transform_by(self, cs: CoordinateSystem3D) -> Plane3D:
        """Plane through the transformed root point with the transformed normal."""
        normal = cs.transform(self.normal).normalize()
        return Plane3D.from_normal_and_point(normal, cs.transform(self.root_point))

    def equals(self, other: Plane3D, tolerance: float) -> bool:
        if tolerance < 0:
            raise ValueError("tolerance must be non-negative")
        return abs(other.d - self.d) < tolerance and self.normal.equals(other.normal, tolerance)

    # ------------------------------------------------------------------
    # Text
    # ------------------------------------------------------------------

    def to_string(self, fmt: Optional[str] = None, decimal_separator: str = ".") -> str:
        values = (format_number(v, fmt, decimal_separator) for v in (self.a, self.b, self.c, self.d))
        return "A:{} B:{} C:{} D:{}".format(*values)

    def __str__(self) -> str:
        return self.to_string()

    @classmethod
    def try_parse(cls, text: str, decimal_separator: Optional[str] = None):
        """Parse ``A:.. B:.. C:.. D:..``; returns (ok, value)."""
        parts = split_labeled(text, ("A", "B", "C", "D"))
        if parts is None:
            return False, None
        values = [try_parse_number(parts[key], decimal_separator) for key in "ABCD"]
        if any(v is None for v in values):
            return False, None
        a, b, c, d = values
        try:
            normal = UnitVector3D.create(a, b, c)
        except DegenerateGeometryError:
            return False, None
        return True, cls(normal, d)

    @classmethod
    def parse(cls, text: str, decimal_separator: Optional[str] = None) -> Plane3D:
        ok, value = cls.try_parse(text, decimal_separator)
        if not ok:
            raise GeometryFormatError(cls.__name__, text)
        return value
