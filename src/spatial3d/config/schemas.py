"""
Pydantic schemas for geometry document validation.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from typing import List, Tuple, Optional, Literal

Triple = Tuple[float, float, float]

EntityType = Literal[
    "point",
    "vector",
    "unit_vector",
    "line",
    "line_segment",
    "ray",
    "plane",
    "coordinate_system",
    "circle",
    "polyline",
]

# Fields each entity type needs (anything else it may carry is rejected)
REQUIRED_FIELDS = {
    "point": ("coordinates",),
    "vector": ("coordinates",),
    "unit_vector": ("coordinates",),
    "line": ("start", "end"),
    "line_segment": ("start", "end"),
    "ray": ("through_point", "direction"),
    "plane": ("normal", "point"),
    "coordinate_system": ("frame",),
    "circle": ("center", "axis", "radius"),
    "polyline": ("vertices",),
}

GEOMETRY_FIELDS = (
    "coordinates", "start", "end", "through_point", "direction", "normal",
    "point", "frame", "center", "axis", "radius", "vertices",
)


class ToleranceConfig(BaseModel):
    """Tolerances applied while building entities from a document."""
    model_config = ConfigDict(extra="forbid")

    equality: float = Field(
        default=1e-9,
        gt=0,
        description="Componentwise tolerance for comparing scenes"
    )
    unit_vector_norm: Optional[float] = Field(
        default=None,
        gt=0,
        description="Max |norm - 1| accepted for unit vectors, axes and normals (None = always rescale)"
    )


class FrameConfig(BaseModel):
    """Coordinate system: origin plus axes, or origin plus XYZ rotation."""
    model_config = ConfigDict(extra="forbid")

    origin: Triple = Field(
        default=(0.0, 0.0, 0.0),
        description="Frame origin (x, y, z)"
    )
    x_axis: Optional[Triple] = Field(default=None, description="X basis vector")
    y_axis: Optional[Triple] = Field(default=None, description="Y basis vector")
    z_axis: Optional[Triple] = Field(default=None, description="Z basis vector")
    rotation_xyz_deg: Optional[Triple] = Field(
        default=None,
        description="Rotation angles (rx, ry, rz) in degrees, R = Rz * Ry * Rx"
    )

    @model_validator(mode="after")
    def check_axes_or_rotation(self):
        """Axes and rotation are mutually exclusive."""
        has_axes = any(a is not None for a in (self.x_axis, self.y_axis, self.z_axis))
        if has_axes and self.rotation_xyz_deg is not None:
            raise ValueError("Give either axes or rotation_xyz_deg, not both")
        return self


class EntityConfig(BaseModel):
    """A single named geometry entity."""
    model_config = ConfigDict(extra="forbid")

    name: str = Field(..., description="Unique entity identifier")
    type: EntityType = Field(..., description="Entity type")

    coordinates: Optional[Triple] = Field(default=None, description="Point/vector components")
    start: Optional[Triple] = Field(default=None, description="Line start point")
    end: Optional[Triple] = Field(default=None, description="Line end point")
    through_point: Optional[Triple] = Field(default=None, description="Ray through point")
    direction: Optional[Triple] = Field(default=None, description="Ray direction")
    normal: Optional[Triple] = Field(default=None, description="Plane normal")
    point: Optional[Triple] = Field(default=None, description="Point on the plane")
    frame: Optional[FrameConfig] = Field(default=None, description="Coordinate system")
    center: Optional[Triple] = Field(default=None, description="Circle center")
    axis: Optional[Triple] = Field(default=None, description="Circle axis")
    radius: Optional[float] = Field(default=None, ge=0, description="Circle radius")
    vertices: Optional[List[Triple]] = Field(default=None, min_length=1, description="Polyline vertices")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        """Check name is not blank."""
        if not v or not v.strip():
            raise ValueError("Entity name cannot be empty")
        return v.strip()

    @model_validator(mode="after")
    def check_fields_for_type(self):
        """Each type carries exactly the fields it needs."""
        required = REQUIRED_FIELDS[self.type]
        missing = [f for f in required if getattr(self, f) is None]
        if missing:
            raise ValueError(f"{self.type} '{self.name}' is missing {missing}")
        extra = [f for f in GEOMETRY_FIELDS if f not in required and getattr(self, f) is not None]
        if extra:
            raise ValueError(f"{self.type} '{self.name}' does not take {extra}")
        return self


class GeometryDocument(BaseModel):
    """Top-level geometry document."""
    model_config = ConfigDict(extra="forbid")  # Catch typos in YAML

    name: str = Field(..., description="Document name")
    description: str = Field(default="", description="Document description")
    tolerances: ToleranceConfig = Field(
        default_factory=ToleranceConfig,
        description="Tolerance settings"
    )
    entities: List[EntityConfig] = Field(
        ...,
        min_length=1,
        description="List of entities"
    )

    @field_validator("entities")
    @classmethod
    def check_unique_names(cls, v):
        """Ensure entity names are unique."""
        names = [entity.name for entity in v]
        if len(names) != len(set(names)):
            duplicates = [name for name in names if names.count(name) > 1]
            raise ValueError(f"Duplicate entity names: {set(duplicates)}")
        return v
