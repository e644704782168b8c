"""
spatial3d - three-dimensional Euclidean geometry.

Immutable points, vectors, unit vectors, lines, segments, rays, planes,
coordinate systems, circles and polylines, with the closest-point,
intersection, projection and rotation algorithms between them.
"""

import logging

from .exceptions import (
    GeometryError,
    DegenerateGeometryError,
    GeometryOperationError,
    ParallelGeometryError,
    SingularFrameError,
    GeometryFormatError,
    ConfigurationError,
    ConfigNotFoundError,
    ConfigValidationError,
)
from .geometry import (
    Point3D,
    Vector3D,
    UnitVector3D,
    Line3D,
    LineSegment3D,
    Ray3D,
    Plane3D,
    CoordinateSystem3D,
    Circle3D,
    PolyLine3D,
)
from .logging_config import setup_logging

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
    "GeometryError",
    "DegenerateGeometryError",
    "GeometryOperationError",
    "ParallelGeometryError",
    "SingularFrameError",
    "GeometryFormatError",
    "ConfigurationError",
    "ConfigNotFoundError",
    "ConfigValidationError",
    "Point3D",
    "Vector3D",
    "UnitVector3D",
    "Line3D",
    "LineSegment3D",
    "Ray3D",
    "Plane3D",
    "CoordinateSystem3D",
    "Circle3D",
    "PolyLine3D",
    "setup_logging",
]
