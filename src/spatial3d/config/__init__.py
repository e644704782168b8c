"""Configuration schemas for validation."""

from .schemas import (
    ToleranceConfig,
    FrameConfig,
    EntityConfig,
    GeometryDocument,
)

__all__ = [
    "ToleranceConfig",
    "FrameConfig",
    "EntityConfig",
    "GeometryDocument",
]
