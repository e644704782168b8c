"""
Ray3D: a point and a unit direction.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from ..exceptions import GeometryFormatError
from ..text import split_labeled
from .constants import FLOAT_EPSILON
from .lines import Line3D
from .primitives import Point3D, UnitVector3D, Vector3D

if TYPE_CHECKING:
    from .coordinate_system import CoordinateSystem3D
    from .plane import Plane3D


@dataclass(frozen=True)
class Ray3D:
    """
    Ray through ``through_point`` along ``direction``.

    A Vector3D direction is normalized on construction. Queries treat the ray
    as the full line; nothing restricts results to the forward half.
    """
    through_point: Point3D
    direction: UnitVector3D

    def __post_init__(self):
        if isinstance(self.direction, Vector3D):
            object.__setattr__(self, "direction", self.direction.normalize())

    @staticmethod
    def intersection_of(plane1: Plane3D, plane2: Plane3D) -> Ray3D:
        """Line of intersection of two planes."""
        return plane1.intersection_with(plane2)

    def intersection_with(self, plane: Plane3D, tolerance: float = FLOAT_EPSILON) -> Point3D:
        return plane.intersection_with(self, tolerance)

    def shortest_line_to(self, point: Point3D) -> Line3D:
        """
        Line from the projection of ``point`` on the ray to ``point``.

        The projection may lie behind ``through_point``.
        """
        along = self.through_point.vector_to(point).dot(self.direction)
        closest = self.through_point + along * self.direction
        return Line3D(closest, point)

    def line_to(self, point: Point3D) -> Line3D:
        return self.shortest_line_to(point)

    def is_collinear(self, point: Point3D, tolerance: float = FLOAT_EPSILON) -> bool:
        """True when ``point`` lies on the ray's line within ``tolerance``."""
        if point == self.through_point:
            return True
        return self.through_point.vector_to(point).normalize().is_parallel_to(self.direction, tolerance)

    def transform_by(self, cs: CoordinateSystem3D) -> Ray3D:
        return cs.transform(self)

    def equals(self, other: Ray3D, tolerance: float) -> bool:
        return (
            self.through_point.equals(other.through_point, tolerance)
            and self.direction.equals(other.direction, tolerance)
        )

    def to_string(self, fmt: Optional[str] = None, decimal_separator: str = ".") -> str:
        return (
            f"ThroughPoint: {self.through_point.to_string(fmt, decimal_separator)}, "
            f"Direction: {self.direction.to_string(fmt, decimal_separator)}"
        )

    def __str__(self) -> str:
        return self.to_string()

    @classmethod
    def try_parse(cls, text: str, decimal_separator: Optional[str] = None):
        """Parse ``ThroughPoint: (..), Direction: (..)``; returns (ok, value)."""
        parts = split_labeled(text, ("ThroughPoint", "Direction"))
        if parts is None:
            return False, None
        ok_point, point = Point3D.try_parse(parts["ThroughPoint"], decimal_separator)
        ok_direction, direction = UnitVector3D.try_parse(parts["Direction"], decimal_separator)
        if not (ok_point and ok_direction):
            return False, None
        return True, cls(point, direction)

    @classmethod
    def parse(cls, text: str, decimal_separator: Optional[str] = None) -> Ray3D:
        ok, value = cls.try_parse(text, decimal_separator)
        if not ok:
            raise GeometryFormatError(cls.__name__, text)
        return value
