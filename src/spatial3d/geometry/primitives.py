"""
Geometric primitives: Point3D, Vector3D and UnitVector3D.

All three are immutable values. ``==`` compares components exactly; use
``equals(other, tolerance)`` for floating-point comparisons.

Allowed arithmetic (anything else returns ``NotImplemented``):

    Point3D  +/- Vector3D | UnitVector3D   -> Point3D
    Point3D   -  Point3D                   -> Vector3D
    Vector3D | UnitVector3D +/- Vector3D | UnitVector3D -> Vector3D
    Vector3D | UnitVector3D * float, float * ..., ... / float -> Vector3D
"""

from __future__ import annotations
from dataclasses import dataclass
import math
from numbers import Real
from typing import TYPE_CHECKING, Iterable, Iterator, Optional, Tuple, Union

import numpy as np
from numpy.typing import NDArray

from ..exceptions import DegenerateGeometryError, GeometryFormatError
from ..text import format_3d, try_parse_3d
from .constants import (
    ANGLE_SNAP_TOLERANCE,
    DOUBLE_EPSILON,
    FLOAT_EPSILON,
    PARALLEL_TOLERANCE,
    PERPENDICULAR_TOLERANCE,
    UNIT_VECTOR_PARSE_TOLERANCE,
    VECTOR_PERPENDICULAR_TOLERANCE,
)

if TYPE_CHECKING:
    from .coordinate_system import CoordinateSystem3D
    from .plane import Plane3D
    from .ray import Ray3D


def _is_scalar(value) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


@dataclass(frozen=True)
class _Coordinates3D:
    """Shared storage, conversion and text handling for x, y, z values."""
    x: float
    y: float
    z: float

    # numpy scalars defer to our reflected operators (np.float64 * vector)
    __array_ufunc__ = None

    def __post_init__(self):
        for name in ("x", "y", "z"):
            value = getattr(self, name)
            if not math.isfinite(value):
                raise DegenerateGeometryError(f"Invalid value for {name}", details={name: value})

    def to_array(self) -> NDArray[np.float64]:
        """Convert to NumPy array (3,)."""
        return np.array([self.x, self.y, self.z], dtype=np.float64)

    @classmethod
    def from_array(cls, arr):
        """Create from NumPy array (or any length-3 sequence)."""
        arr = np.asarray(arr, dtype=np.float64)
        if arr.shape != (3,):
            raise ValueError(f"Expected array of shape (3,), got {arr.shape}")
        return cls(float(arr[0]), float(arr[1]), float(arr[2]))

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y
        yield self.z

    def equals(self, other: _Coordinates3D, tolerance: float) -> bool:
        """Componentwise comparison, each difference strictly below tolerance."""
        if tolerance < 0:
            raise ValueError("tolerance must be non-negative")
        return (
            abs(other.x - self.x) < tolerance
            and abs(other.y - self.y) < tolerance
            and abs(other.z - self.z) < tolerance
        )

    def to_string(self, fmt: Optional[str] = None, decimal_separator: str = ".") -> str:
        """Format as ``(x, y, z)``; see ``spatial3d.text.format_3d``."""
        return format_3d(self.x, self.y, self.z, fmt, decimal_separator)

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.x!r}, {self.y!r}, {self.z!r})"

    @classmethod
    def try_parse(cls, text: str, decimal_separator: Optional[str] = None):
        """Returns (True, value) on success, (False, None) otherwise."""
        values = try_parse_3d(text, decimal_separator)
        if values is None:
            return False, None
        return True, cls(*values)

    @classmethod
    def parse(cls, text: str, decimal_separator: Optional[str] = None):
        """Parse text or raise GeometryFormatError."""
        ok, value = cls.try_parse(text, decimal_separator)
        if not ok:
            raise GeometryFormatError(cls.__name__, text)
        return value


@dataclass(frozen=True, repr=False)
class Point3D(_Coordinates3D):
    """An affine position in 3D space."""

    @classmethod
    def origin(cls) -> Point3D:
        return cls(0.0, 0.0, 0.0)

    @staticmethod
    def centroid(points: Iterable[Point3D]) -> Point3D:
        """Arithmetic mean of the given points."""
        points = list(points)
        if not points:
            raise ValueError("Cannot take the centroid of no points")
        arr = np.mean([p.to_array() for p in points], axis=0)
        return Point3D.from_array(arr)

    @staticmethod
    def midpoint(p1: Point3D, p2: Point3D) -> Point3D:
        return Point3D.centroid((p1, p2))

    @staticmethod
    def intersection_of_planes(plane1: Plane3D, plane2: Plane3D, plane3: Plane3D) -> Point3D:
        """Intersect plane1 and plane2 as a ray, then intersect that ray with plane3."""
        ray = plane1.intersection_with(plane2)
        return plane3.intersection_with(ray)

    def vector_to(self, other: Point3D) -> Vector3D:
        return other - self

    def distance_to(self, other: Point3D) -> float:
        """Euclidean distance to another point."""
        return self.vector_to(other).length

    def to_vector(self) -> Vector3D:
        return Vector3D(self.x, self.y, self.z)

    def mirror_about(self, plane: Plane3D) -> Point3D:
        return plane.mirror_about(self)

    def project_on(self, plane: Plane3D) -> Point3D:
        return plane.project(self)

    def rotate(self, about: Union[Vector3D, UnitVector3D], angle: float) -> Point3D:
        """Rotate about an axis through the origin (angle in radians)."""
        from .coordinate_system import CoordinateSystem3D
        return CoordinateSystem3D.rotation(angle, about).transform(self)

    def transform_by(self, cs: CoordinateSystem3D) -> Point3D:
        return cs.transform(self)

    def __add__(self, vector):
        """Point + Vector = Point."""
        if not isinstance(vector, _VECTOR_TYPES):
            return NotImplemented
        return Point3D(self.x + vector.x, self.y + vector.y, self.z + vector.z)

    def __sub__(self, other):
        """Point - Point = Vector, Point - Vector = Point."""
        if isinstance(other, Point3D):
            return Vector3D(self.x - other.x, self.y - other.y, self.z - other.z)
        if isinstance(other, _VECTOR_TYPES):
            return Point3D(self.x - other.x, self.y - other.y, self.z - other.z)
        return NotImplemented


class _VectorOperations:
    """Arithmetic and products shared by Vector3D and UnitVector3D."""

    def __add__(self, other):
        """Vector addition."""
        if not isinstance(other, _VECTOR_TYPES):
            return NotImplemented
        return Vector3D(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other):
        """Vector subtraction."""
        if not isinstance(other, _VECTOR_TYPES):
            return NotImplemented
        return Vector3D(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, scalar):
        """Scalar multiplication."""
        if not _is_scalar(scalar):
            return NotImplemented
        return Vector3D(self.x * scalar, self.y * scalar, self.z * scalar)

    def __rmul__(self, scalar):
        """Scalar multiplication (reversed)."""
        return self.__mul__(scalar)

    def __truediv__(self, scalar):
        """Scalar division."""
        if not _is_scalar(scalar):
            return NotImplemented
        return Vector3D(self.x / scalar, self.y / scalar, self.z / scalar)

    def dot(self, other) -> float:
        """Dot product."""
        return (self.x * other.x) + (self.y * other.y) + (self.z * other.z)

    def _cross_components(self, other) -> Tuple[float, float, float]:
        return (
            (self.y * other.z) - (self.z * other.y),
            (self.z * other.x) - (self.x * other.z),
            (self.x * other.y) - (self.y * other.x),
        )

    def scale_by(self, factor: float) -> Vector3D:
        return factor * self

    def project_on(self, direction: UnitVector3D) -> Vector3D:
        """Component of this vector along ``direction``."""
        return Vector3D(self.x, self.y, self.z).dot(direction) * direction

    def project_on_plane(self, plane: Plane3D) -> Ray3D:
        return plane.project_vector(self)

    def to_vector(self) -> Vector3D:
        return Vector3D(self.x, self.y, self.z)

    def to_point(self) -> Point3D:
        return Point3D(self.x, self.y, self.z)

    def transform_by(self, cs: CoordinateSystem3D) -> Vector3D:
        """Apply the rotation block of ``cs`` (translation does not affect vectors)."""
        return cs.transform(self.to_vector())

    def unit_tensor_product(self) -> NDArray[np.float64]:
        """Outer product v v^T (3, 3)."""
        arr = self.to_array()
        return np.outer(arr, arr)

    def cross_product_matrix(self) -> NDArray[np.float64]:
        """Skew-symmetric matrix K such that K @ w == v x w."""
        return np.array([
            [0.0, -self.z, self.y],
            [self.z, 0.0, -self.x],
            [-self.y, self.x, 0.0],
        ], dtype=np.float64)


@dataclass(frozen=True, repr=False)
class Vector3D(_VectorOperations, _Coordinates3D):
    """A free displacement vector."""

    @property
    def length(self) -> float:
        """Vector magnitude (L2 norm)."""
        return math.sqrt((self.x * self.x) + (self.y * self.y) + (self.z * self.z))

    @property
    def orthogonal(self) -> UnitVector3D:
        """Some unit vector perpendicular to this one."""
        return _orthogonal(self.x, self.y, self.z)

    def normalize(self) -> UnitVector3D:
        """Return unit vector in same direction."""
        if self.length < FLOAT_EPSILON:
            raise DegenerateGeometryError(
                "Cannot normalize a degenerate vector",
                details={"length": self.length},
            )
        return UnitVector3D(self.x, self.y, self.z)

    def __neg__(self) -> Vector3D:
        """Negation."""
        return Vector3D(-self.x, -self.y, -self.z)

    def negate(self) -> Vector3D:
        return -self

    def cross(self, other: Union[Vector3D, UnitVector3D]) -> Vector3D:
        """Cross product."""
        return Vector3D(*self._cross_components(other))

    def is_parallel_to(self, other: Union[Vector3D, UnitVector3D], tolerance: float = PARALLEL_TOLERANCE) -> bool:
        return self.normalize().is_parallel_to(other, tolerance)

    def is_parallel_to_angle(self, other: Union[Vector3D, UnitVector3D], angle_tolerance: float) -> bool:
        return self.normalize().is_parallel_to_angle(other, angle_tolerance)

    def is_perpendicular_to(
        self,
        other: Union[Vector3D, UnitVector3D],
        tolerance: float = VECTOR_PERPENDICULAR_TOLERANCE,
    ) -> bool:
        return self.normalize().is_perpendicular_to(other, tolerance)

    def angle_to(self, other: Union[Vector3D, UnitVector3D]) -> float:
        """Angle to another vector in radians [0, pi]."""
        return self.normalize().angle_to(other)

    def signed_angle_to(self, other: Union[Vector3D, UnitVector3D], about: UnitVector3D) -> float:
        return self.normalize().signed_angle_to(other, about)

    def rotate(self, about: Union[Vector3D, UnitVector3D], angle: float) -> Vector3D:
        """Rotate about ``about`` by ``angle`` radians."""
        from .coordinate_system import CoordinateSystem3D
        return CoordinateSystem3D.rotation(angle, about).transform(self)


@dataclass(frozen=True, repr=False)
class UnitVector3D(_VectorOperations, _Coordinates3D):
    """
    A direction of length one.

    Construction always rescales the input; it fails for non-finite input and
    for norms below single-precision epsilon. Use ``create`` to also bound how
    far the input norm may be from one.
    """

    def __post_init__(self):
        super().__post_init__()

        norm = math.sqrt((self.x * self.x) + (self.y * self.y) + (self.z * self.z))
        if norm < FLOAT_EPSILON:
            raise DegenerateGeometryError(
                "The Euclidean norm of x, y, z is less than float epsilon",
                details={"norm": norm},
            )
        # Already unit within rounding: keep the components so that
        # normalize() and text round trips are exact.
        if abs(norm - 1.0) > 8 * DOUBLE_EPSILON:
            object.__setattr__(self, "x", self.x / norm)
            object.__setattr__(self, "y", self.y / norm)
            object.__setattr__(self, "z", self.z / norm)

    @classmethod
    def create(cls, x: float, y: float, z: float, tolerance: float = math.inf) -> UnitVector3D:
        """
        Create a unit vector, rescaling x, y, z.

        Args:
            x, y, z: Components
            tolerance: Maximum allowed |norm - 1| before rescaling

        Raises:
            DegenerateGeometryError: norm below float epsilon or outside tolerance
        """
        norm = math.sqrt((x * x) + (y * y) + (z * z))
        if norm < FLOAT_EPSILON:
            raise DegenerateGeometryError(
                "The Euclidean norm of x, y, z is less than float epsilon",
                details={"norm": norm},
            )
        if abs(norm - 1) > tolerance:
            raise DegenerateGeometryError(
                "The Euclidean norm of x, y, z differs more than tolerance from 1",
                details={"norm": norm, "tolerance": tolerance},
            )
        return cls(x, y, z)

    @classmethod
    def x_axis(cls) -> UnitVector3D:
        return cls(1.0, 0.0, 0.0)

    @classmethod
    def y_axis(cls) -> UnitVector3D:
        return cls(0.0, 1.0, 0.0)

    @classmethod
    def z_axis(cls) -> UnitVector3D:
        return cls(0.0, 0.0, 1.0)

    @classmethod
    def try_parse(
        cls,
        text: str,
        decimal_separator: Optional[str] = None,
        tolerance: float = UNIT_VECTOR_PARSE_TOLERANCE,
    ):
        """Parse a triple whose norm is within ``tolerance`` of one."""
        values = try_parse_3d(text, decimal_separator)
        if values is None:
            return False, None
        candidate = Vector3D(*values)
        if abs(candidate.length - 1) >= tolerance:
            return False, None
        return True, candidate.normalize()

    @classmethod
    def parse(
        cls,
        text: str,
        decimal_separator: Optional[str] = None,
        tolerance: float = UNIT_VECTOR_PARSE_TOLERANCE,
    ) -> UnitVector3D:
        ok, value = cls.try_parse(text, decimal_separator, tolerance)
        if not ok:
            raise GeometryFormatError(cls.__name__, text)
        return value

    @property
    def length(self) -> float:
        return math.sqrt((self.x * self.x) + (self.y * self.y) + (self.z * self.z))

    @property
    def orthogonal(self) -> UnitVector3D:
        """Some unit vector perpendicular to this one."""
        return _orthogonal(self.x, self.y, self.z)

    def normalize(self) -> UnitVector3D:
        return self

    def __neg__(self) -> UnitVector3D:
        return UnitVector3D(-self.x, -self.y, -self.z)

    def negate(self) -> UnitVector3D:
        return -self

    def dot(self, other) -> float:
        """Dot product; clamped to [-1, 1] when both operands are unit vectors."""
        dp = (self.x * other.x) + (self.y * other.y) + (self.z * other.z)
        if isinstance(other, UnitVector3D):
            return max(-1.0, min(dp, 1.0))
        return dp

    def cross(self, other):
        """Cross product. Unit x Unit is a UnitVector3D and fails for parallel input."""
        if isinstance(other, UnitVector3D):
            return UnitVector3D.create(*self._cross_components(other))
        return Vector3D(*self._cross_components(other))

    def is_parallel_to(self, other: Union[Vector3D, UnitVector3D], tolerance: float = PARALLEL_TOLERANCE) -> bool:
        """True when |1 - |u.v|| <= tolerance."""
        other = other.normalize()
        dp = abs(self.dot(other))
        return abs(1 - dp) <= tolerance

    def is_parallel_to_angle(self, other: Union[Vector3D, UnitVector3D], angle_tolerance: float) -> bool:
        """True when the angle, or its supplement, is below ``angle_tolerance`` radians."""
        angle = self.angle_to(other)
        opposite = math.pi - angle
        return min(angle, opposite) < angle_tolerance

    def is_perpendicular_to(
        self,
        other: Union[Vector3D, UnitVector3D],
        tolerance: float = PERPENDICULAR_TOLERANCE,
    ) -> bool:
        return abs(self.dot(other.normalize())) < tolerance

    def angle_to(self, other: Union[Vector3D, UnitVector3D]) -> float:
        """Unsigned angle in radians [0, pi]."""
        return math.acos(self.dot(other.normalize()))

    def signed_angle_to(self, other: Union[Vector3D, UnitVector3D], about: UnitVector3D) -> float:
        """
        Angle from this vector to ``other`` measured in the plane normal to ``about``.

        Both vectors are projected onto that plane first; the sign follows the
        right-hand rule around ``about``.

        Raises:
            DegenerateGeometryError: either vector is parallel to ``about``
        """
        other = other.normalize()
        about = about.normalize()
        if self.is_parallel_to(about):
            raise DegenerateGeometryError("FromVector parallel to aboutVector")
        if other.is_parallel_to(about):
            raise DegenerateGeometryError("ToVector parallel to aboutVector")

        from_projected = (self - self.dot(about) * about).normalize()
        to_projected = (other - other.dot(about) * about).normalize()
        dp = from_projected.dot(to_projected)
        if abs(dp - 1) < ANGLE_SNAP_TOLERANCE:
            return 0.0
        if abs(dp + 1) < ANGLE_SNAP_TOLERANCE:
            return math.pi

        angle = math.acos(dp)
        sign = 1.0 if from_projected.to_vector().cross(to_projected).dot(about) >= 0 else -1.0
        return sign * angle

    def rotate(self, about: Union[Vector3D, UnitVector3D], angle: float) -> UnitVector3D:
        """Rotate about ``about`` by ``angle`` radians."""
        from .coordinate_system import CoordinateSystem3D
        return CoordinateSystem3D.rotation(angle, about).transform(self).normalize()


def _orthogonal(x: float, y: float, z: float) -> UnitVector3D:
    norm = math.sqrt((x * x) + (y * y) + (z * z))
    if norm < FLOAT_EPSILON:
        raise DegenerateGeometryError("The zero vector has no orthogonal direction")
    x, y, z = x / norm, y / norm, z / norm
    # (z, z, -x - y) and (-y - z, x, x) are both perpendicular; the second
    # collapses for x = 0, y = -z.
    if -x - y > 0.1 or abs(x) + abs(y + z) < 0.1:
        return UnitVector3D.create(z, z, -x - y)
    return UnitVector3D.create(-y - z, x, x)


_VECTOR_TYPES = (Vector3D, UnitVector3D)
