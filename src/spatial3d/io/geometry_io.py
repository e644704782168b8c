"""
YAML/JSON geometry documents.

A document names a set of entities::

    name: bracket
    tolerances:
      unit_vector_norm: 1.0e-6
    entities:
      - name: base
        type: plane
        normal: [0, 0, 1]
        point: [0, 0, 0]
      - name: edge
        type: line_segment
        start: [0, 0, 0]
        end: [1, 0, 0]

``GeometryReader`` validates it against ``GeometryDocument`` and builds a
``GeometryScene``; ``GeometryWriter`` writes a scene back out.
"""

from __future__ import annotations
from dataclasses import dataclass, field
import json
import logging
import math
from pathlib import Path
from typing import Any, Dict, Iterator

import numpy as np
import yaml
from pydantic import ValidationError

from ..config.schemas import EntityConfig, FrameConfig, GeometryDocument, ToleranceConfig
from ..exceptions import ConfigNotFoundError, ConfigValidationError, DegenerateGeometryError
from ..geometry import (
    Circle3D,
    CoordinateSystem3D,
    Line3D,
    LineSegment3D,
    Plane3D,
    Point3D,
    PolyLine3D,
    Ray3D,
    UnitVector3D,
    Vector3D,
    rotation_xyz,
)

logger = logging.getLogger(__name__)

YAML_SUFFIXES = (".yaml", ".yml")
JSON_SUFFIXES = (".json",)


@dataclass
class GeometryScene:
    """
    Named geometry entities loaded from (or destined for) a document.

    Attributes:
        name: Scene identifier
        entities: Entities by name, in document order
        description: Optional scene description
        tolerances: Tolerances the entities were built with
    """

    name: str
    entities: Dict[str, Any]
    description: str = ""
    tolerances: ToleranceConfig = field(default_factory=ToleranceConfig)

    def __getitem__(self, name: str):
        return self.entities[name]

    def __contains__(self, name: str) -> bool:
        return name in self.entities

    def __iter__(self) -> Iterator[str]:
        return iter(self.entities)

    def __len__(self) -> int:
        return len(self.entities)

    def equals(self, other: GeometryScene) -> bool:
        """Same names, order and types; entities equal within ``tolerances.equality``."""
        if list(self.entities) != list(other.entities):
            return False
        tolerance = self.tolerances.equality
        for name, entity in self.entities.items():
            candidate = other.entities[name]
            if type(candidate) is not type(entity) or not entity.equals(candidate, tolerance):
                return False
        return True


# ----------------------------------------------------------------------
# Entity <-> config
# ----------------------------------------------------------------------

def _unit(values, tolerance: float) -> UnitVector3D:
    return UnitVector3D.create(*values, tolerance=tolerance)


def _build_frame(frame: FrameConfig) -> CoordinateSystem3D:
    origin = Point3D(*frame.origin)
    if frame.rotation_xyz_deg is not None:
        rx, ry, rz = np.radians(frame.rotation_xyz_deg)
        return CoordinateSystem3D(origin).with_rotation_sub_matrix(rotation_xyz(rx, ry, rz))

    def axis(values):
        return None if values is None else Vector3D(*values)

    return CoordinateSystem3D(origin, axis(frame.x_axis), axis(frame.y_axis), axis(frame.z_axis))


def build_entity(config: EntityConfig, tolerances: ToleranceConfig):
    """
    Create the geometry entity described by ``config``.

    Raises:
        DegenerateGeometryError: values do not define a valid entity
    """
    norm_tolerance = tolerances.unit_vector_norm if tolerances.unit_vector_norm is not None else math.inf
    kind = config.type

    if kind == "point":
        return Point3D(*config.coordinates)
    if kind == "vector":
        return Vector3D(*config.coordinates)
    if kind == "unit_vector":
        return _unit(config.coordinates, norm_tolerance)
    if kind == "line":
        return Line3D(Point3D(*config.start), Point3D(*config.end))
    if kind == "line_segment":
        return LineSegment3D(Point3D(*config.start), Point3D(*config.end))
    if kind == "ray":
        return Ray3D(Point3D(*config.through_point), _unit(config.direction, norm_tolerance))
    if kind == "plane":
        return Plane3D.from_normal_and_point(_unit(config.normal, norm_tolerance), Point3D(*config.point))
    if kind == "coordinate_system":
        return _build_frame(config.frame)
    if kind == "circle":
        return Circle3D(Point3D(*config.center), _unit(config.axis, norm_tolerance), config.radius)
    if kind == "polyline":
        return PolyLine3D(Point3D(*v) for v in config.vertices)
    raise ValueError(f"Unknown entity type: {kind}")


def entity_to_dict(name: str, entity) -> Dict[str, Any]:
    """Document representation of ``entity``."""
    def triple(value):
        return [float(c) for c in value]

    if isinstance(entity, Point3D):
        return {"name": name, "type": "point", "coordinates": triple(entity)}
    if isinstance(entity, Vector3D):
        return {"name": name, "type": "vector", "coordinates": triple(entity)}
    if isinstance(entity, UnitVector3D):
        return {"name": name, "type": "unit_vector", "coordinates": triple(entity)}
    if isinstance(entity, (Line3D, LineSegment3D)):
        kind = "line" if isinstance(entity, Line3D) else "line_segment"
        return {"name": name, "type": kind,
                "start": triple(entity.start_point), "end": triple(entity.end_point)}
    if isinstance(entity, Ray3D):
        return {"name": name, "type": "ray",
                "through_point": triple(entity.through_point), "direction": triple(entity.direction)}
    if isinstance(entity, Plane3D):
        return {"name": name, "type": "plane",
                "normal": triple(entity.normal), "point": triple(entity.root_point)}
    if isinstance(entity, CoordinateSystem3D):
        frame = {
            "origin": triple(entity.origin),
            "x_axis": triple(entity.x_axis),
            "y_axis": triple(entity.y_axis),
            "z_axis": triple(entity.z_axis),
        }
        return {"name": name, "type": "coordinate_system", "frame": frame}
    if isinstance(entity, Circle3D):
        return {"name": name, "type": "circle", "center": triple(entity.center_point),
                "axis": triple(entity.axis), "radius": float(entity.radius)}
    if isinstance(entity, PolyLine3D):
        return {"name": name, "type": "polyline", "vertices": [triple(v) for v in entity]}
    raise TypeError(f"Cannot write {type(entity).__name__} to a geometry document")


def _validation_error(error: ValidationError) -> ConfigValidationError:
    first = error.errors()[0]
    key = ".".join(str(part) for part in first["loc"]) or "document"
    return ConfigValidationError(key, first["msg"], first.get("input"))


# ----------------------------------------------------------------------
# Reader / writer
# ----------------------------------------------------------------------

class GeometryReader:
    """Load and validate geometry documents from YAML or JSON files."""

    @staticmethod
    def load_raw(filepath: str | Path) -> Dict[str, Any]:
        """
        Read a document without validating it.

        Args:
            filepath: Path to a .yaml/.yml or .json file

        Returns:
            Parsed mapping
        """
        filepath = Path(filepath)

        if not filepath.exists():
            raise ConfigNotFoundError(str(filepath))

        suffix = filepath.suffix.lower()
        with open(filepath, 'r', encoding='utf-8') as f:
            if suffix in YAML_SUFFIXES:
                data = yaml.safe_load(f)
            elif suffix in JSON_SUFFIXES:
                data = json.load(f)
            else:
                raise ValueError(
                    f"Unsupported geometry file format: {suffix}. Expected .yaml, .yml or .json"
                )

        if not isinstance(data, dict):
            raise ConfigValidationError("document", "top level must be a mapping", type(data).__name__)
        return data

    @staticmethod
    def validate(filepath: str | Path) -> GeometryDocument:
        """
        Validate a document against the schema.

        Raises:
            ConfigNotFoundError: file does not exist
            ConfigValidationError: schema violation
        """
        raw = GeometryReader.load_raw(filepath)
        try:
            return GeometryDocument(**raw)
        except ValidationError as e:
            raise _validation_error(e) from e

    @staticmethod
    def from_document(document: GeometryDocument) -> GeometryScene:
        """Build a scene from a validated document."""
        entities = {}
        for config in document.entities:
            try:
                entities[config.name] = build_entity(config, document.tolerances)
            except DegenerateGeometryError as e:
                raise ConfigValidationError(f"entities.{config.name}", e.message) from e

        return GeometryScene(
            name=document.name,
            entities=entities,
            description=document.description,
            tolerances=document.tolerances,
        )

    @staticmethod
    def read(filepath: str | Path) -> GeometryScene:
        """
        Read a geometry document and build its entities.

        Args:
            filepath: Path to a .yaml/.yml or .json file

        Returns:
            GeometryScene
        """
        document = GeometryReader.validate(filepath)
        scene = GeometryReader.from_document(document)
        logger.info("Loaded geometry '%s' from %s (%d entities)", scene.name, filepath, len(scene))
        return scene


class GeometryWriter:
    """Write geometry scenes as YAML or JSON documents."""

    @staticmethod
    def to_document(scene: GeometryScene) -> GeometryDocument:
        data = {
            "name": scene.name,
            "description": scene.description,
            "tolerances": scene.tolerances.model_dump(exclude_none=True),
            "entities": [entity_to_dict(name, entity) for name, entity in scene.entities.items()],
        }
        try:
            return GeometryDocument(**data)
        except ValidationError as e:
            raise _validation_error(e) from e

    @staticmethod
    def write(scene: GeometryScene, filepath: str | Path) -> Path:
        """
        Write ``scene`` to ``filepath`` (format from the suffix).

        Returns:
            Path written
        """
        filepath = Path(filepath)
        suffix = filepath.suffix.lower()
        if suffix not in YAML_SUFFIXES + JSON_SUFFIXES:
            raise ValueError(
                f"Unsupported geometry file format: {suffix}. Expected .yaml, .yml or .json"
            )

        data = GeometryWriter.to_document(scene).model_dump(mode="json", exclude_none=True)
        filepath.parent.mkdir(parents=True, exist_ok=True)
        with open(filepath, 'w', encoding='utf-8') as f:
            if suffix in YAML_SUFFIXES:
                yaml.safe_dump(data, f, sort_keys=False)
            else:
                json.dump(data, f, indent=2)

        logger.info("Wrote geometry '%s' to %s (%d entities)", scene.name, filepath, len(scene))
        return filepath
