"""
Circle3D: center, axis and radius.
"""

from __future__ import annotations
from dataclasses import dataclass
import math
from typing import Optional

from ..exceptions import DegenerateGeometryError, GeometryFormatError, GeometryOperationError
from ..text import split_labeled, try_parse_number, format_number
from .constants import FLOAT_EPSILON
from .plane import Plane3D
from .primitives import Point3D, UnitVector3D, Vector3D
from .ray import Ray3D


@dataclass(frozen=True)
class Circle3D:
    """Circle of ``radius`` around ``center_point`` in the plane normal to ``axis``."""
    center_point: Point3D
    axis: UnitVector3D
    radius: float

    def __post_init__(self):
        if isinstance(self.axis, Vector3D):
            object.__setattr__(self, "axis", self.axis.normalize())
        if not self.radius >= 0:
            raise ValueError(f"radius must be non-negative, got {self.radius}")
        object.__setattr__(self, "radius", float(self.radius))

    @classmethod
    def from_points(cls, p1: Point3D, p2: Point3D, p3: Point3D, tolerance: float = FLOAT_EPSILON) -> Circle3D:
        """
        Circle through three points.

        The center is where the perpendicular bisector of p1-p2 (a ray) meets
        the perpendicular bisector plane of p2-p3.

        Args:
            tolerance: Points count as collinear when the sine of the angle
                between p1-p2 and p2-p3 is at most this value

        Raises:
            DegenerateGeometryError: points are collinear or coincide
        """
        p1p2 = p1.vector_to(p2)
        p2p3 = p2.vector_to(p3)
        normal = p1p2.cross(p2p3)
        # |a x b| = |a| |b| sin(angle), so the test does not depend on scale
        if normal.length <= tolerance * p1p2.length * p2p3.length:
            raise DegenerateGeometryError(
                "A circle cannot be created from these points, are they collinear?"
            )
        axis = normal.normalize()

        mid12 = Point3D.midpoint(p1, p2)
        mid23 = Point3D.midpoint(p2, p3)
        bisector_a = Ray3D(mid12, p1p2.cross(axis))
        bisector_b = Plane3D.from_points(
            mid23,
            mid23 + p2p3.cross(axis).normalize(),
            mid23 + axis,
        )
        try:
            center = bisector_b.intersection_with(bisector_a)
        except GeometryOperationError as e:
            raise DegenerateGeometryError(
                "A circle cannot be created from these points, are they collinear?"
            ) from e
        return cls(center, axis, center.distance_to(p1))

    @classmethod
    def from_points_and_axis(cls, p1: Point3D, p2: Point3D, axis: UnitVector3D) -> Circle3D:
        """Circle with ``p1``-``p2`` as diameter."""
        center = Point3D.midpoint(p1, p2)
        return cls(center, axis, center.distance_to(p1))

    @property
    def diameter(self) -> float:
        return 2 * self.radius

    @property
    def circumference(self) -> float:
        return 2 * self.radius * math.pi

    @property
    def area(self) -> float:
        return self.radius * self.radius * math.pi

    def equals(self, other: Circle3D, tolerance: float) -> bool:
        if tolerance < 0:
            raise ValueError("tolerance must be non-negative")
        return (
            self.center_point.equals(other.center_point, tolerance)
            and self.axis.equals(other.axis, tolerance)
            and abs(self.radius - other.radius) < tolerance
        )

    def to_string(self, fmt: Optional[str] = None, decimal_separator: str = ".") -> str:
        return (
            f"CenterPoint: {self.center_point.to_string(fmt, decimal_separator)}, "
            f"Axis: {self.axis.to_string(fmt, decimal_separator)}, "
            f"Radius: {format_number(self.radius, fmt, decimal_separator)}"
        )

    def __str__(self) -> str:
        return self.to_string()

    @classmethod
    def try_parse(cls, text: str, decimal_separator: Optional[str] = None):
        """Parse ``CenterPoint: (..), Axis: (..), Radius: r``; returns (ok, value)."""
        parts = split_labeled(text, ("CenterPoint", "Axis", "Radius"))
        if parts is None:
            return False, None
        ok_center, center = Point3D.try_parse(parts["CenterPoint"], decimal_separator)
        ok_axis, axis = UnitVector3D.try_parse(parts["Axis"], decimal_separator)
        radius = try_parse_number(parts["Radius"], decimal_separator)
        if not (ok_center and ok_axis) or radius is None or radius < 0:
            return False, None
        return True, cls(center, axis, radius)

    @classmethod
    def parse(cls, text: str, decimal_separator: Optional[str] = None) -> Circle3D:
        ok, value = cls.try_parse(text, decimal_separator)
        if not ok:
            raise GeometryFormatError(cls.__name__, text)
        return value
