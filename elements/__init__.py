"""
Typed wrappers around the nodes of a SDF document.
"""

from typing import Optional

from lxml import etree

from core.errors import UnknownElement
from sdf_types import ElementKind

from .element import Element
from .axis import Axis, AxisLimit
from .frame import Frame
from .joint import Joint
from .link import Inertial, Link
from .model import Model
from .physics import Physics
from .plugin import Plugin
from .root import Root
from .sensor import Sensor
from .spherical_coordinates import UTM, SphericalCoordinates
from .world import World


def wrap(xml: etree._Element, parent: Optional[Element] = None) -> Element:
    """Typed entity matching the tag of xml. Raises UnknownElement if there is none."""
    try:
        kind = ElementKind.from_tag(xml.tag)
    except ValueError:
        raise UnknownElement(f"no SDF element type for tag '{xml.tag}'") from None

    if kind is ElementKind.ROOT:
        return Root(xml, parent)
    elif kind is ElementKind.WORLD:
        return World(xml, parent)
    elif kind is ElementKind.MODEL:
        return Model(xml, parent)
    elif kind is ElementKind.LINK:
        return Link(xml, parent)
    elif kind is ElementKind.JOINT:
        return Joint(xml, parent)
    elif kind is ElementKind.AXIS:
        return Axis(xml, parent)
    elif kind is ElementKind.AXIS_LIMIT:
        return AxisLimit(xml, parent)
    elif kind is ElementKind.SENSOR:
        return Sensor(xml, parent)
    elif kind is ElementKind.FRAME:
        return Frame(xml, parent)
    elif kind is ElementKind.PLUGIN:
        return Plugin(xml, parent)
    elif kind is ElementKind.PHYSICS:
        return Physics(xml, parent)
    elif kind is ElementKind.SPHERICAL_COORDINATES:
        return SphericalCoordinates(xml, parent)
    raise UnknownElement(f"no SDF element type for tag '{xml.tag}'")


__all__ = [
    'Element', 'Root', 'World', 'Model', 'Link', 'Inertial', 'Joint', 'Axis', 'AxisLimit',
    'Sensor', 'Frame', 'Plugin', 'Physics', 'SphericalCoordinates', 'UTM',
    'wrap',
]
