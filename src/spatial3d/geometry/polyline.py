"""
PolyLine3D: an ordered sequence of points joined by straight segments.
"""

from __future__ import annotations
from typing import Iterable, Iterator, List, Optional, Tuple

from ..exceptions import GeometryFormatError
from ..text import split_tuples
from .lines import LineSegment3D
from .primitives import Point3D


class PolyLine3D:
    """
    Immutable polyline over at least one vertex.

    Consecutive duplicate vertices are kept; they add zero-length pieces
    which ``segments()`` leaves out.
    """

    __slots__ = ("_vertices",)

    def __init__(self, vertices: Iterable[Point3D]):
        vertices = tuple(vertices)
        if not vertices:
            raise ValueError("A polyline needs at least one vertex")
        for v in vertices:
            if not isinstance(v, Point3D):
                raise TypeError(f"Vertices must be Point3D, got {type(v).__name__}")
        self._vertices: Tuple[Point3D, ...] = vertices

    @property
    def vertices(self) -> Tuple[Point3D, ...]:
        return self._vertices

    def __len__(self) -> int:
        return len(self._vertices)

    def __getitem__(self, index):
        return self._vertices[index]

    def __iter__(self) -> Iterator[Point3D]:
        return iter(self._vertices)

    def __eq__(self, other) -> bool:
        if not isinstance(other, PolyLine3D):
            return NotImplemented
        return self._vertices == other._vertices

    def __hash__(self) -> int:
        return hash(self._vertices)

    def _pairs(self) -> Iterator[Tuple[Point3D, Point3D]]:
        return zip(self._vertices[:-1], self._vertices[1:])

    def segments(self) -> List[LineSegment3D]:
        """Segments between consecutive distinct vertices."""
        return [LineSegment3D(a, b) for a, b in self._pairs() if a != b]

    @property
    def length(self) -> float:
        """Sum of the distances between consecutive vertices."""
        return sum(a.distance_to(b) for a, b in self._pairs())

    def get_point_at_length_from_start(self, length_from_start: float) -> Point3D:
        """
        Point at arc length ``length_from_start``.

        Values past either end return the first or last vertex.
        """
        total = self.length
        if length_from_start >= total:
            return self._vertices[-1]
        if length_from_start <= 0:
            return self._vertices[0]

        cumulative = 0.0
        for a, b in self._pairs():
            piece = a.distance_to(b)
            next_cumulative = cumulative + piece
            if cumulative <= length_from_start < next_cumulative:
                fraction = (length_from_start - cumulative) / piece
                return a + fraction * a.vector_to(b)
            cumulative = next_cumulative

        # Only reachable through rounding in the running sum.
        return self._vertices[-1]

    def get_point_at_fraction_along_curve(self, fraction: float) -> Point3D:
        """
        Point at ``fraction`` of the total length.

        Raises:
            ValueError: fraction outside [0, 1]
        """
        if fraction < 0 or fraction > 1:
            raise ValueError(f"fraction must be within [0, 1], got {fraction}")
        return self.get_point_at_length_from_start(fraction * self.length)

    def closest_point_to(self, p: Point3D) -> Point3D:
        """Closest point on the polyline; ties go to the earliest segment."""
        best = self._vertices[0]
        best_distance = best.distance_to(p)
        for segment in self.segments():
            candidate = segment.closest_point_to(p)
            distance = candidate.distance_to(p)
            if distance < best_distance:
                best, best_distance = candidate, distance
        return best

    def equals(self, other: PolyLine3D, tolerance: float) -> bool:
        if len(self) != len(other):
            return False
        return all(a.equals(b, tolerance) for a, b in zip(self, other))

    def to_string(self, fmt: Optional[str] = None, decimal_separator: str = ".") -> str:
        return "[" + ", ".join(v.to_string(fmt, decimal_separator) for v in self._vertices) + "]"

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"PolyLine3D({list(self._vertices)!r})"

    @classmethod
    def try_parse(cls, text: str, decimal_separator: Optional[str] = None):
        """Parse ``[(..), (..), ...]``; returns (ok, value)."""
        groups = split_tuples(text)
        if groups is None:
            return False, None
        points = []
        for group in groups:
            ok, point = Point3D.try_parse(group, decimal_separator)
            if not ok:
                return False, None
            points.append(point)
        return True, cls(points)

    @classmethod
    def parse(cls, text: str, decimal_separator: Optional[str] = None) -> PolyLine3D:
        ok, value = cls.try_parse(text, decimal_separator)
        if not ok:
            raise GeometryFormatError(cls.__name__, text)
        return value
