"""
CoordinateSystem3D: an affine frame stored as a 4x4 homogeneous matrix.

Columns 0-2 of the top 3x3 block hold the x, y and z basis vectors, column 3
holds the origin and the bottom row is [0, 0, 0, 1]. The basis need not be
orthonormal. The matrix is owned by the frame and never exposed writable.
"""

from __future__ import annotations
import logging
import re
from typing import Optional, Union

import numpy as np
from numpy.typing import NDArray

from ..exceptions import GeometryFormatError, SingularFrameError
from ..text import format_3d, try_parse_3d
from .lines import Line3D, LineSegment3D
from .constants import HOMOGENEOUS_ROW_TOLERANCE
from .matrix3d import rotation_around_arbitrary_vector, rotation_to
from .primitives import Point3D, UnitVector3D, Vector3D
from .ray import Ray3D

logger = logging.getLogger(__name__)

AnyVector = Union[Vector3D, UnitVector3D]

_BOTTOM_ROW = np.array([0.0, 0.0, 0.0, 1.0])

_FRAME_PATTERN = re.compile(
    r"^\s*o:\s*(?P<o>\{[^{}]*\})\s*x:\s*(?P<x>\{[^{}]*\})"
    r"\s*y:\s*(?P<y>\{[^{}]*\})\s*z:\s*(?P<z>\{[^{}]*\})\s*$",
    flags=re.IGNORECASE,
)


def _as_vector(v: Optional[AnyVector], default: UnitVector3D) -> Vector3D:
    return (default if v is None else v).to_vector()


class CoordinateSystem3D:
    """
    Affine frame: origin plus three basis vectors.

    Omitted constructor arguments default to the identity frame. Use
    ``from_matrix`` to wrap an existing 4x4 matrix.
    """

    __slots__ = ("_matrix",)

    def __init__(
        self,
        origin: Optional[Point3D] = None,
        x_axis: Optional[AnyVector] = None,
        y_axis: Optional[AnyVector] = None,
        z_axis: Optional[AnyVector] = None,
    ):
        origin = Point3D.origin() if origin is None else origin
        x = _as_vector(x_axis, UnitVector3D.x_axis())
        y = _as_vector(y_axis, UnitVector3D.y_axis())
        z = _as_vector(z_axis, UnitVector3D.z_axis())

        m = np.eye(4, dtype=np.float64)
        m[:3, 0] = x.to_array()
        m[:3, 1] = y.to_array()
        m[:3, 2] = z.to_array()
        m[:3, 3] = origin.to_array()
        self._set_matrix(m)

    def _set_matrix(self, m: NDArray[np.float64]) -> None:
        m = np.array(m, dtype=np.float64, copy=True)
        m.setflags(write=False)
        self._matrix = m

    # ------------------------------------------------------------------
    # Builders
    # ------------------------------------------------------------------

    @classmethod
    def from_matrix(cls, matrix, tolerance: float = HOMOGENEOUS_ROW_TOLERANCE) -> CoordinateSystem3D:
        """
        Wrap a 4x4 affine matrix (copied).

        A bottom row within ``tolerance`` of [0, 0, 0, 1] is snapped to it.

        Raises:
            ValueError: matrix is not 4x4, or its bottom row is not [0, 0, 0, 1]
        """
        m = np.asarray(matrix, dtype=np.float64)
        if m.shape != (4, 4):
            raise ValueError(f"Expected a 4x4 matrix, got shape {m.shape}")
        if not np.max(np.abs(m[3] - _BOTTOM_ROW)) <= tolerance:
            raise ValueError(f"Bottom row must be [0, 0, 0, 1], got {m[3].tolist()}")
        return cls._from_affine(m)

    @classmethod
    def _from_affine(cls, m: NDArray[np.float64]) -> CoordinateSystem3D:
        m = np.array(m, dtype=np.float64, copy=True)
        m[3] = _BOTTOM_ROW
        cs = cls.__new__(cls)
        cs._set_matrix(m)
        return cs

    @classmethod
    def identity(cls) -> CoordinateSystem3D:
        return cls()

    @classmethod
    def rotation(cls, angle: float, axis: AnyVector) -> CoordinateSystem3D:
        """Rotation by ``angle`` radians around ``axis`` through the origin."""
        m = np.eye(4, dtype=np.float64)
        m[:3, :3] = rotation_around_arbitrary_vector(axis, angle)
        return cls.from_matrix(m)

    @classmethod
    def yaw(cls, angle: float) -> CoordinateSystem3D:
        """Rotation around the z axis."""
        return cls.rotation(angle, UnitVector3D.z_axis())

    @classmethod
    def pitch(cls, angle: float) -> CoordinateSystem3D:
        """Rotation around the y axis."""
        return cls.rotation(angle, UnitVector3D.y_axis())

    @classmethod
    def roll(cls, angle: float) -> CoordinateSystem3D:
        """Rotation around the x axis."""
        return cls.rotation(angle, UnitVector3D.x_axis())

    @classmethod
    def rotation_yaw_pitch_roll(cls, yaw: float, pitch: float, roll: float) -> CoordinateSystem3D:
        """Yaw, then pitch, then roll applied to the identity frame (radians)."""
        frame = cls.identity()
        frame = cls.yaw(yaw).transform(frame)
        frame = cls.pitch(pitch).transform(frame)
        return cls.roll(roll).transform(frame)

    @classmethod
    def translation(cls, vector: AnyVector) -> CoordinateSystem3D:
        return cls(vector.to_point())

    @classmethod
    def rotate_to(
        cls,
        from_vector: UnitVector3D,
        to_vector: UnitVector3D,
        axis: Optional[UnitVector3D] = None,
    ) -> CoordinateSystem3D:
        """
        Minimal rotation taking ``from_vector`` onto ``to_vector``.

        ``axis`` is only used when the vectors are antiparallel.
        """
        return cls.identity().with_rotation_sub_matrix(rotation_to(from_vector, to_vector, axis))

    @classmethod
    def create_mapping_coordinate_system(
        cls,
        from_cs: CoordinateSystem3D,
        to_cs: CoordinateSystem3D,
    ) -> CoordinateSystem3D:
        """
        Transform mapping ``from_cs`` onto ``to_cs`` (to * inverse(from)).

        Raises:
            SingularFrameError: ``from_cs`` cannot be inverted
        """
        m = to_cs._matrix @ from_cs._inverse()
        if m[3, 3] != 1.0:
            logger.debug("Resetting homogeneous corner %r to 1", m[3, 3])
        return cls._from_affine(m)

    @classmethod
    def set_to_align_coordinate_systems(
        cls,
        from_origin: Point3D,
        from_x_axis: AnyVector,
        from_y_axis: AnyVector,
        from_z_axis: AnyVector,
        to_origin: Point3D,
        to_x_axis: AnyVector,
        to_y_axis: AnyVector,
        to_z_axis: AnyVector,
    ) -> CoordinateSystem3D:
        """Mapping between two frames given by origin and axes."""
        from_cs = cls(from_origin, from_x_axis, from_y_axis, from_z_axis)
        to_cs = cls(to_origin, to_x_axis, to_y_axis, to_z_axis)
        return cls.create_mapping_coordinate_system(from_cs, to_cs)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def matrix(self) -> NDArray[np.float64]:
        """Writable copy of the 4x4 matrix."""
        return self._matrix.copy()

    @property
    def x_axis(self) -> Vector3D:
        return Vector3D.from_array(self._matrix[:3, 0])

    @property
    def y_axis(self) -> Vector3D:
        return Vector3D.from_array(self._matrix[:3, 1])

    @property
    def z_axis(self) -> Vector3D:
        return Vector3D.from_array(self._matrix[:3, 2])

    @property
    def origin(self) -> Point3D:
        return Point3D.from_array(self._matrix[:3, 3])

    @property
    def offset_to_base(self) -> Vector3D:
        return self.origin.to_vector()

    def rotation_sub_matrix(self) -> NDArray[np.float64]:
        """Copy of the 3x3 basis block."""
        return self._matrix[:3, :3].copy()

    # ------------------------------------------------------------------
    # Derived frames
    # ------------------------------------------------------------------

    def with_rotation_sub_matrix(self, r) -> CoordinateSystem3D:
        """
        New frame with the 3x3 block replaced by ``r``.

        Raises:
            ValueError: ``r`` is not 3x3
        """
        r = np.asarray(r, dtype=np.float64)
        if r.shape != (3, 3):
            raise ValueError(f"Expected a 3x3 matrix, got shape {r.shape}")
        m = self.matrix
        m[:3, :3] = r
        return CoordinateSystem3D.from_matrix(m)

    def with_translation(self, vector: AnyVector) -> CoordinateSystem3D:
        """Same axes, origin moved to ``vector``."""
        return CoordinateSystem3D(vector.to_point(), self.x_axis, self.y_axis, self.z_axis)

    def offset_by(self, vector: AnyVector) -> CoordinateSystem3D:
        """Same axes, origin shifted by ``vector``."""
        return CoordinateSystem3D(self.origin + vector, self.x_axis, self.y_axis, self.z_axis)

    def reset_rotations(self) -> CoordinateSystem3D:
        """Axis-aligned frame keeping the origin and the axis lengths."""
        return CoordinateSystem3D(
            self.origin,
            self.x_axis.length * UnitVector3D.x_axis(),
            self.y_axis.length * UnitVector3D.y_axis(),
            self.z_axis.length * UnitVector3D.z_axis(),
        )

    def rotate_around_vector(self, about: AnyVector, angle: float) -> CoordinateSystem3D:
        return CoordinateSystem3D.rotation(angle, about).transform(self)

    def rotate_no_reset(self, yaw: float, pitch: float, roll: float) -> CoordinateSystem3D:
        return CoordinateSystem3D.rotation_yaw_pitch_roll(yaw, pitch, roll).transform(self)

    # ------------------------------------------------------------------
    # Transformations
    # ------------------------------------------------------------------

    def _transform_point(self, p: Point3D) -> Point3D:
        v4 = self._matrix @ np.array([p.x, p.y, p.z, 1.0])
        return Point3D.from_array(v4[:3])

    def _transform_direction(self, v: AnyVector) -> Vector3D:
        return Vector3D.from_array(self._matrix[:3, :3] @ v.to_array())

    def transform(self, other):
        """
        Apply this frame to ``other``.

        Points use the full homogeneous matrix; vectors (free or unit) only
        the 3x3 block and come back as Vector3D. Rays, lines and segments
        keep their type. For another frame the result is ``self @ other``.
        """
        if isinstance(other, Point3D):
            return self._transform_point(other)
        if isinstance(other, (Vector3D, UnitVector3D)):
            return self._transform_direction(other)
        if isinstance(other, Ray3D):
            return Ray3D(self._transform_point(other.through_point), self._transform_direction(other.direction))
        if isinstance(other, (Line3D, LineSegment3D)):
            return type(other)(self._transform_point(other.start_point), self._transform_point(other.end_point))
        if isinstance(other, CoordinateSystem3D):
            return CoordinateSystem3D.from_matrix(self._matrix @ other._matrix)
        raise TypeError(f"Cannot transform {type(other).__name__}")

    def transform_by(self, other) -> CoordinateSystem3D:
        """``other`` applied to this frame; accepts a frame or a 4x4 array."""
        if not isinstance(other, CoordinateSystem3D):
            other = CoordinateSystem3D.from_matrix(other)
        return other.transform(self)

    def transform_to_coord_sys(self, other: Union[Point3D, Ray3D]):
        """Express a global point or ray in this frame's local coordinates."""
        return self.invert().transform(other)

    def transform_from_coord_sys(self, other: Union[Point3D, Ray3D]):
        """Express a point or ray given in local coordinates globally."""
        return self.transform(other)

    def _inverse(self) -> NDArray[np.float64]:
        try:
            return np.linalg.inv(self._matrix)
        except np.linalg.LinAlgError as e:
            raise SingularFrameError(str(e)) from e

    def invert(self) -> CoordinateSystem3D:
        """
        Inverse transform.

        Raises:
            SingularFrameError: basis has zero volume
        """
        return CoordinateSystem3D._from_affine(self._inverse())

    # ------------------------------------------------------------------
    # Comparison and text
    # ------------------------------------------------------------------

    def __eq__(self, other) -> bool:
        if not isinstance(other, CoordinateSystem3D):
            return NotImplemented
        return bool(np.array_equal(self._matrix, other._matrix))

    def __hash__(self) -> int:
        return hash(tuple(self._matrix.ravel().tolist()))

    def equals(self, other: CoordinateSystem3D, tolerance: float) -> bool:
        """All 16 entries within ``tolerance``."""
        if tolerance < 0:
            raise ValueError("tolerance must be non-negative")
        return bool(np.all(np.abs(self._matrix - other._matrix) <= tolerance))

    def to_string(self, fmt: Optional[str] = None, decimal_separator: str = ".") -> str:
        def part(v):
            return format_3d(v.x, v.y, v.z, fmt, decimal_separator, brackets="{}")

        return (
            f"o:{part(self.origin)} x:{part(self.x_axis)} "
            f"y:{part(self.y_axis)} z:{part(self.z_axis)}"
        )

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"CoordinateSystem3D({self.to_string()})"

    @classmethod
    def try_parse(cls, text: str, decimal_separator: Optional[str] = None):
        """Parse ``o:{..} x:{..} y:{..} z:{..}``; returns (ok, value)."""
        if not isinstance(text, str):
            return False, None
        match = _FRAME_PATTERN.match(text)
        if match is None:
            return False, None
        values = [try_parse_3d(match.group(key), decimal_separator) for key in "oxyz"]
        if any(v is None for v in values):
            return False, None
        o, x, y, z = values
        return True, cls(Point3D(*o), Vector3D(*x), Vector3D(*y), Vector3D(*z))

    @classmethod
    def parse(cls, text: str, decimal_separator: Optional[str] = None) -> CoordinateSystem3D:
        ok, value = cls.try_parse(text, decimal_separator)
        if not ok:
            raise GeometryFormatError(cls.__name__, text)
        return value
