"""Geometry kernel: primitives, lines, rays, planes, frames, circles, polylines."""

from .primitives import Point3D, Vector3D, UnitVector3D
from .matrix3d import (
    rotation_xyz,
    rotation_around_arbitrary_vector,
    rotation_to,
)
from .lines import Line3D, LineSegment3D
from .ray import Ray3D
from .plane import Plane3D
from .coordinate_system import CoordinateSystem3D
from .circle import Circle3D
from .polyline import PolyLine3D

__all__ = [
    "Point3D",
    "Vector3D",
    "UnitVector3D",
    "rotation_xyz",
    "rotation_around_arbitrary_vector",
    "rotation_to",
    "Line3D",
    "LineSegment3D",
    "Ray3D",
    "Plane3D",
    "CoordinateSystem3D",
    "Circle3D",
    "PolyLine3D",
]
