from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, Optional

import numpy as np
from lxml import etree

from core.conversions import Isometry3, pose_to_isometry
from core.errors import Invalid
from elements.element import Element
from elements.sensor import Sensor
from utils.xml import element_children, first_child, xml_text

WORLD_LINK_NAME = "world"

# SDF defaults of the inertia matrix entries
INERTIA_DEFAULTS = {"ixx": 1.0, "ixy": 0.0, "ixz": 0.0, "iyy": 1.0, "iyz": 0.0, "izz": 1.0}


@dataclass
class Inertial:
    mass: float = 1.0
    pose: Isometry3 = field(default_factory=Isometry3.identity)
    inertia: np.ndarray = field(default_factory=lambda: np.eye(3))


def _read_float(node: etree._Element) -> float:
    try:
        return float(xml_text(node))
    except ValueError:
        raise Invalid.at(node, f"invalid number '{xml_text(node)}'") from None


class Link(Element):
    xml_tag_name = "link"

    _world: Optional["Link"] = None

    @classmethod
    def world(cls) -> "Link":
        """The link that stands for the world in joint definitions."""
        if cls._world is None:
            cls._world = Link(etree.Element("link", name=WORLD_LINK_NAME))
        return cls._world

    @property
    def pose(self) -> Isometry3:
        """The link's pose w.r.t. its parent."""
        return pose_to_isometry(first_child(self.xml, "pose"))

    @property
    def inertial(self) -> Inertial:
        inertial = first_child(self.xml, "inertial")
        if inertial is None:
            return Inertial()

        mass = first_child(inertial, "mass")
        values = dict(INERTIA_DEFAULTS)
        inertia = first_child(inertial, "inertia")
        if inertia is not None:
            for key in values:
                node = first_child(inertia, key)
                if node is not None:
                    values[key] = _read_float(node)

        matrix = np.array([
            [values["ixx"], values["ixy"], values["ixz"]],
            [values["ixy"], values["iyy"], values["iyz"]],
            [values["ixz"], values["iyz"], values["izz"]],
        ])
        return Inertial(
            mass=_read_float(mass) if mass is not None else 1.0,
            pose=pose_to_isometry(first_child(inertial, "pose")),
            inertia=matrix,
        )

    def each_sensor(self) -> Iterator[Sensor]:
        for element in element_children(self.xml, "sensor"):
            yield Sensor(element, self)
