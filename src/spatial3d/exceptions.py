"""
spatial3d exception hierarchy.

Degenerate input (coincident points, collinear points, zero-length vectors)
is reported as a ``DegenerateGeometryError``, which is also a ``ValueError``.
Operations whose preconditions do not hold for otherwise valid input (a line
lying in a plane, parallel planes) raise ``GeometryOperationError``, which is
also a ``RuntimeError``. Legitimate "no answer" cases return ``None`` instead.
"""

from typing import Any, Optional


class GeometryError(Exception):
    """Base exception for all spatial3d errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional context.
    """

    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.details:
            detail_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({detail_str})"
        return self.message


# =============================================================================
# Geometry Errors
# =============================================================================


class DegenerateGeometryError(GeometryError, ValueError):
    """Input does not define the requested entity (zero length, collinear, ...)."""

    pass


class GeometryOperationError(GeometryError, RuntimeError):
    """Operation is undefined for the given, otherwise valid, entities."""

    pass


class ParallelGeometryError(GeometryOperationError):
    """Two entities are parallel where an intersection was requested."""

    def __init__(self, what: str, tolerance: Optional[float] = None):
        details = {}
        if tolerance is not None:
            details["tolerance"] = tolerance
        super().__init__(f"{what} are parallel", details=details)


class SingularFrameError(GeometryOperationError):
    """Coordinate system has a zero-volume basis and cannot be inverted."""

    def __init__(self, reason: str = "singular matrix"):
        super().__init__(
            f"Coordinate system cannot be inverted: {reason}",
            details={"reason": reason},
        )


class GeometryFormatError(GeometryError, ValueError):
    """Text or markup could not be parsed into a geometry entity."""

    def __init__(self, type_name: str, text: Any):
        super().__init__(
            f"Could not parse a {type_name} from the string {text!r}",
            details={"type": type_name},
        )


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(GeometryError):
    """Error in geometry document loading or validation."""

    pass


class ConfigNotFoundError(ConfigurationError):
    """Geometry document not found."""

    def __init__(self, path: str):
        super().__init__(
            f"Geometry file not found: {path}",
            details={"path": path},
        )


class ConfigValidationError(ConfigurationError):
    """Geometry document failed schema validation."""

    def __init__(self, key: str, reason: str, value: Any = None):
        details = {"key": key, "reason": reason}
        if value is not None:
            details["value"] = str(value)
        super().__init__(
            f"Invalid configuration for '{key}': {reason}",
            details=details,
        )
