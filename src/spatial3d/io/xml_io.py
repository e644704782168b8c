"""
XML serialization of geometry entities.

Numeric triples are written as attributes (``<Point3D X=".." Y=".." Z=".." />``)
and read from either attributes or ``<X>``/``<Y>``/``<Z>`` child elements.
Composite entities nest one element per part, e.g. ``<StartPoint>`` and
``<EndPoint>`` for lines.
"""

from __future__ import annotations
from typing import Callable, Dict, Optional, Type
import xml.etree.ElementTree as ET

from ..exceptions import GeometryFormatError
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
)
from ..text import format_number

_AXES = ("X", "Y", "Z")


# ----------------------------------------------------------------------
# Writing
# ----------------------------------------------------------------------

def _triple_element(tag: str, value) -> ET.Element:
    element = ET.Element(tag)
    for axis, component in zip(_AXES, value):
        element.set(axis, format_number(component))
    return element


def _child(parent: ET.Element, tag: str, value) -> None:
    parent.append(_triple_element(tag, value))


def to_element(entity, tag: Optional[str] = None) -> ET.Element:
    """Build the XML element for ``entity`` (tag defaults to the class name)."""
    tag = tag or type(entity).__name__

    if isinstance(entity, (Point3D, Vector3D, UnitVector3D)):
        return _triple_element(tag, entity)

    element = ET.Element(tag)
    if isinstance(entity, (Line3D, LineSegment3D)):
        _child(element, "StartPoint", entity.start_point)
        _child(element, "EndPoint", entity.end_point)
    elif isinstance(entity, Ray3D):
        _child(element, "ThroughPoint", entity.through_point)
        _child(element, "Direction", entity.direction)
    elif isinstance(entity, Plane3D):
        _child(element, "RootPoint", entity.root_point)
        _child(element, "Normal", entity.normal)
    elif isinstance(entity, CoordinateSystem3D):
        _child(element, "Origin", entity.origin)
        _child(element, "XAxis", entity.x_axis)
        _child(element, "YAxis", entity.y_axis)
        _child(element, "ZAxis", entity.z_axis)
    elif isinstance(entity, Circle3D):
        element.set("Radius", format_number(entity.radius))
        _child(element, "CenterPoint", entity.center_point)
        _child(element, "Axis", entity.axis)
    elif isinstance(entity, PolyLine3D):
        vertices = ET.SubElement(element, "Vertices")
        for vertex in entity:
            _child(vertices, "Point3D", vertex)
    else:
        raise TypeError(f"Cannot serialize {type(entity).__name__} to XML")
    return element


def to_xml(entity, tag: Optional[str] = None) -> str:
    """Serialize ``entity`` to an XML string."""
    return ET.tostring(to_element(entity, tag), encoding="unicode")


# ----------------------------------------------------------------------
# Reading
# ----------------------------------------------------------------------

def _number(element: ET.Element, name: str, type_name: str) -> float:
    text = element.get(name)
    if text is None:
        child = element.find(name)
        text = child.text if child is not None else None
    if text is None:
        raise GeometryFormatError(type_name, f"<{element.tag}> without {name}")
    try:
        return float(text.strip())
    except ValueError as e:
        raise GeometryFormatError(type_name, text) from e


def _triple(element: ET.Element, type_name: str):
    return tuple(_number(element, axis, type_name) for axis in _AXES)


def _part(element: ET.Element, tag: str, type_name: str) -> ET.Element:
    found = element.findall(tag)
    if len(found) != 1:
        raise GeometryFormatError(type_name, f"<{element.tag}> needs exactly one <{tag}>")
    return found[0]


def _read_point(element: ET.Element, tag: str, type_name: str) -> Point3D:
    return Point3D(*_triple(_part(element, tag, type_name), type_name))


def _read_vector(element: ET.Element, tag: str, type_name: str) -> Vector3D:
    return Vector3D(*_triple(_part(element, tag, type_name), type_name))


def _read_unit(element: ET.Element, tag: str, type_name: str) -> UnitVector3D:
    return UnitVector3D.create(*_triple(_part(element, tag, type_name), type_name))


def _read_line(cls):
    def reader(element: ET.Element):
        return cls(
            _read_point(element, "StartPoint", cls.__name__),
            _read_point(element, "EndPoint", cls.__name__),
        )
    return reader


def _read_ray(element: ET.Element) -> Ray3D:
    return Ray3D(
        _read_point(element, "ThroughPoint", "Ray3D"),
        _read_unit(element, "Direction", "Ray3D"),
    )


def _read_plane(element: ET.Element) -> Plane3D:
    return Plane3D.from_normal_and_point(
        _read_unit(element, "Normal", "Plane3D"),
        _read_point(element, "RootPoint", "Plane3D"),
    )


def _read_frame(element: ET.Element) -> CoordinateSystem3D:
    name = "CoordinateSystem3D"
    return CoordinateSystem3D(
        _read_point(element, "Origin", name),
        _read_vector(element, "XAxis", name),
        _read_vector(element, "YAxis", name),
        _read_vector(element, "ZAxis", name),
    )


def _read_circle(element: ET.Element) -> Circle3D:
    return Circle3D(
        _read_point(element, "CenterPoint", "Circle3D"),
        _read_unit(element, "Axis", "Circle3D"),
        _number(element, "Radius", "Circle3D"),
    )


def _read_polyline(element: ET.Element) -> PolyLine3D:
    vertices = _part(element, "Vertices", "PolyLine3D")
    return PolyLine3D(Point3D(*_triple(v, "PolyLine3D")) for v in vertices)


_READERS: Dict[type, Callable[[ET.Element], object]] = {
    Point3D: lambda e: Point3D(*_triple(e, "Point3D")),
    Vector3D: lambda e: Vector3D(*_triple(e, "Vector3D")),
    UnitVector3D: lambda e: UnitVector3D.create(*_triple(e, "UnitVector3D")),
    Line3D: _read_line(Line3D),
    LineSegment3D: _read_line(LineSegment3D),
    Ray3D: _read_ray,
    Plane3D: _read_plane,
    CoordinateSystem3D: _read_frame,
    Circle3D: _read_circle,
    PolyLine3D: _read_polyline,
}


def from_element(element: ET.Element, cls: Type):
    """Read an entity of type ``cls`` from ``element``."""
    try:
        reader = _READERS[cls]
    except KeyError:
        raise TypeError(f"Cannot read {getattr(cls, '__name__', cls)} from XML") from None
    try:
        return reader(element)
    except GeometryFormatError:
        raise
    except ValueError as e:
        # Degenerate values, empty vertex lists, negative radii
        raise GeometryFormatError(cls.__name__, ET.tostring(element, encoding="unicode")) from e


def from_xml(text: str, cls: Type):
    """
    Parse an XML string into an entity of type ``cls``.

    Raises:
        GeometryFormatError: malformed XML, missing parts or degenerate values
    """
    try:
        element = ET.fromstring(text)
    except ET.ParseError as e:
        raise GeometryFormatError(cls.__name__, text) from e
    return from_element(element, cls)
