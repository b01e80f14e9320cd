#!/usr/bin/env python3
"""
SDF-specific types and enums.
"""

from enum import Enum


# ---------- Kinds of typed entities ----------
class ElementKind(Enum):
    ROOT = "sdf"
    WORLD = "world"
    MODEL = "model"
    LINK = "link"
    JOINT = "joint"
    AXIS = "axis"
    AXIS_LIMIT = "limit"
    SENSOR = "sensor"
    FRAME = "frame"
    PLUGIN = "plugin"
    PHYSICS = "physics"
    SPHERICAL_COORDINATES = "spherical_coordinates"

    @classmethod
    def from_tag(cls, tag: str) -> "ElementKind":
        """Map an XML tag to its entity kind. Raises ValueError for unknown tags."""
        if tag == "gazebo":
            return cls.ROOT
        if tag == "axis2":
            return cls.AXIS
        return cls(tag)

    @classmethod
    def has_tag(cls, tag: str) -> bool:
        try:
            cls.from_tag(tag)
        except ValueError:
            return False
        return True
