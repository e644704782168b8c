"""
Line3D (unbounded) and LineSegment3D (bounded).

Both are defined by two distinct points. They share closest-point and
closest-pair algorithms; the skew-line solve follows the normal-equation
form from http://geomalgorithms.com/a07-_distance.html.
"""

from __future__ import annotations
from dataclasses import dataclass
import logging
from typing import TYPE_CHECKING, Optional, Tuple

from ..exceptions import DegenerateGeometryError, GeometryFormatError
from ..text import split_labeled
from .constants import DOUBLE_EPSILON, FLOAT_EPSILON
from .primitives import Point3D, UnitVector3D, Vector3D, _VECTOR_TYPES

if TYPE_CHECKING:
    from .coordinate_system import CoordinateSystem3D
    from .plane import Plane3D

logger = logging.getLogger(__name__)

PointPair = Tuple[Point3D, Point3D]


@dataclass(frozen=True)
class _LinearEntity3D:
    """Two distinct points; the part Line3D and LineSegment3D have in common."""
    start_point: Point3D
    end_point: Point3D

    def __post_init__(self):
        if self.start_point == self.end_point:
            raise DegenerateGeometryError(
                "The start and end points cannot be identical",
                details={"point": str(self.start_point)},
            )

    @property
    def length(self) -> float:
        """Distance between the start and end points."""
        return self.start_point.distance_to(self.end_point)

    @property
    def direction(self) -> UnitVector3D:
        """Unit vector from start to end."""
        return self.start_point.vector_to(self.end_point).normalize()

    def _closest_point(self, p: Point3D, clamp: bool) -> Point3D:
        direction = self.direction
        along = self.start_point.vector_to(p).dot(direction)
        if clamp:
            along = min(max(along, 0.0), self.length)
        return self.start_point + along * direction

    def is_parallel_to(self, other: _LinearEntity3D, tolerance: float = DOUBLE_EPSILON) -> bool:
        """True when |1 - |u.v|| <= tolerance for the two directions."""
        return self.direction.is_parallel_to(other.direction, tolerance)

    def is_parallel_to_angle(self, other: _LinearEntity3D, angle_tolerance: float) -> bool:
        """True when the directions differ by less than ``angle_tolerance`` radians (either sense)."""
        return self.direction.is_parallel_to_angle(other.direction, angle_tolerance)

    def _closest_points_between_lines(self, other: _LinearEntity3D, parallel: bool, tolerance: float) -> PointPair:
        if parallel:
            return self.start_point, other._closest_point(self.start_point, clamp=False)

        p0, u = self.start_point, self.direction
        p1, v = other.start_point, other.direction

        w0 = p0 - p1
        a = u.dot(u)
        b = u.dot(v)
        c = v.dot(v)
        d = u.dot(w0)
        e = v.dot(w0)

        denominator = (a * c) - (b * b)
        if denominator <= tolerance:
            logger.debug("Skew-line denominator %g below tolerance %g, using parallel solution",
                         denominator, tolerance)
            return self.start_point, other._closest_point(self.start_point, clamp=False)

        sc = ((b * e) - (c * d)) / denominator
        tc = ((a * e) - (b * d)) / denominator
        return p0 + (sc * u), p1 + (tc * v)

    def _contains_collinear(self, p: Point3D) -> bool:
        # A point known to lie on the line is on the segment when it is no
        # farther than the length from both endpoints.
        length = self.length
        return p.distance_to(self.start_point) <= length and p.distance_to(self.end_point) <= length

    def _closest_endpoint_pair(self, other: _LinearEntity3D) -> PointPair:
        candidates = (
            (self.start_point, other._closest_point(self.start_point, clamp=True)),
            (self.end_point, other._closest_point(self.end_point, clamp=True)),
            (self._closest_point(other.start_point, clamp=True), other.start_point),
            (self._closest_point(other.end_point, clamp=True), other.end_point),
        )
        best = candidates[0]
        best_distance = best[0].distance_to(best[1])
        for pair in candidates[1:]:
            distance = pair[0].distance_to(pair[1])
            if distance < best_distance:
                best, best_distance = pair, distance
        return best

    def _bounded_closest_points(self, other: _LinearEntity3D, parallel: bool, tolerance: float) -> PointPair:
        if not parallel:
            first, second = self._closest_points_between_lines(other, False, tolerance)
            if self._contains_collinear(first) and other._contains_collinear(second):
                return first, second
        return self._closest_endpoint_pair(other)

    def closest_points_between(
        self,
        other: _LinearEntity3D,
        must_be_on_segments: bool = False,
        tolerance: float = DOUBLE_EPSILON,
    ) -> PointPair:
        """
        Closest pair of points between this line and ``other``.

        Args:
            other: Another line or segment
            must_be_on_segments: Restrict both points to the finite extents
            tolerance: Parallel tolerance on |1 - |u.v||; also the lower bound
                for the skew-line denominator

        Returns:
            (point on this, point on other). For parallel unbounded lines the
            start point of this line and its projection onto ``other``.
        """
        parallel = self.is_parallel_to(other, tolerance)
        if must_be_on_segments:
            return self._bounded_closest_points(other, parallel, tolerance)
        return self._closest_points_between_lines(other, parallel, tolerance)

    def project_on(self, plane: Plane3D):
        """Project onto ``plane`` along its normal."""
        return plane.project_line(self)

    def intersection_with(self, plane: Plane3D, tolerance: float = FLOAT_EPSILON) -> Optional[Point3D]:
        """Point where this meets ``plane``, or None."""
        return plane.intersection_with(self, tolerance)

    def transform_by(self, cs: CoordinateSystem3D):
        return cs.transform(self)

    def equals(self, other: _LinearEntity3D, tolerance: float) -> bool:
        return (
            self.start_point.equals(other.start_point, tolerance)
            and self.end_point.equals(other.end_point, tolerance)
        )

    def to_string(self, fmt: Optional[str] = None, decimal_separator: str = ".") -> str:
        return (
            f"StartPoint: {self.start_point.to_string(fmt, decimal_separator)}, "
            f"EndPoint: {self.end_point.to_string(fmt, decimal_separator)}"
        )

    def __str__(self) -> str:
        return self.to_string()

    @classmethod
    def from_strings(cls, start_point: str, end_point: str, decimal_separator: Optional[str] = None):
        """Build from two point strings."""
        return cls(
            Point3D.parse(start_point, decimal_separator),
            Point3D.parse(end_point, decimal_separator),
        )

    @classmethod
    def try_parse(cls, text: str, decimal_separator: Optional[str] = None):
        """Parse ``StartPoint: (..), EndPoint: (..)``; returns (ok, value)."""
        parts = split_labeled(text, ("StartPoint", "EndPoint"))
        if parts is None:
            return False, None
        ok_start, start = Point3D.try_parse(parts["StartPoint"], decimal_separator)
        ok_end, end = Point3D.try_parse(parts["EndPoint"], decimal_separator)
        if not (ok_start and ok_end) or start == end:
            return False, None
        return True, cls(start, end)

    @classmethod
    def parse(cls, text: str, decimal_separator: Optional[str] = None):
        ok, value = cls.try_parse(text, decimal_separator)
        if not ok:
            raise GeometryFormatError(cls.__name__, text)
        return value


@dataclass(frozen=True)
class Line3D(_LinearEntity3D):
    """
    An infinite line through ``start_point`` and ``end_point``.

    The two points also give the line a finite extent, used by the
    ``must_be_on_segment(s)`` variants of the closest-point queries.
    """

    def closest_point_to(self, p: Point3D, must_be_on_segment: bool = False) -> Point3D:
        """
        Orthogonal projection of ``p`` onto the line.

        Args:
            p: Query point
            must_be_on_segment: Clamp the result between start and end point
        """
        return self._closest_point(p, clamp=must_be_on_segment)

    def line_to(self, p: Point3D, must_start_between_start_and_end: bool = False) -> Line3D:
        """Line from the closest point on this line to ``p``."""
        return Line3D(self.closest_point_to(p, must_start_between_start_and_end), p)


@dataclass(frozen=True)
class LineSegment3D(_LinearEntity3D):
    """The finite segment between ``start_point`` and ``end_point``."""

    def closest_point_to(self, p: Point3D) -> Point3D:
        """Closest point on the segment (clamped to its endpoints)."""
        return self._closest_point(p, clamp=True)

    def line_to(self, p: Point3D) -> LineSegment3D:
        """Segment from the closest point on this segment to ``p``."""
        return LineSegment3D(self.closest_point_to(p), p)

    def translate_by(self, vector: Vector3D) -> LineSegment3D:
        if not isinstance(vector, _VECTOR_TYPES):
            raise TypeError(f"Expected a vector, got {type(vector).__name__}")
        return LineSegment3D(self.start_point + vector, self.end_point + vector)

    def closest_points_between(
        self,
        other: _LinearEntity3D,
        must_be_on_segments: bool = True,
        tolerance: float = DOUBLE_EPSILON,
    ) -> PointPair:
        return super().closest_points_between(other, must_be_on_segments, tolerance)

    def try_shortest_line_to(self, other: LineSegment3D, angle_tolerance: float):
        """
        Shortest segment connecting this segment to ``other``.

        Args:
            other: Another segment
            angle_tolerance: Angle (radians) below which the segments count as parallel

        Returns:
            (True, LineSegment3D) or (False, None) when the segments touch,
            since the connecting segment would have zero length
        """
        parallel = self.is_parallel_to_angle(other, angle_tolerance)
        first, second = self._bounded_closest_points(other, parallel, DOUBLE_EPSILON)
        if first == second:
            return False, None
        return True, LineSegment3D(first, second)
