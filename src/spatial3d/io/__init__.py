"""IO utilities: XML serialization, YAML/JSON geometry documents."""

from .xml_io import to_xml, from_xml, to_element, from_element
from .geometry_io import GeometryScene, GeometryReader, GeometryWriter

__all__ = [
    "to_xml",
    "from_xml",
    "to_element",
    "from_element",
    "GeometryScene",
    "GeometryReader",
    "GeometryWriter",
]
