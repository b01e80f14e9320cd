from __future__ import annotations

from typing import Iterator, Optional

from elements.element import Element
from elements.model import Model
from elements.physics import Physics
from elements.plugin import Plugin
from elements.spherical_coordinates import SphericalCoordinates
from utils.xml import element_children, first_child


class World(Element):
    xml_tag_name = "world"

    def each_model(self) -> Iterator[Model]:
        """Enumerates the models from this world."""
        for element in element_children(self.xml, "model"):
            yield Model(element, self)

    def each_plugin(self) -> Iterator[Plugin]:
        for element in element_children(self.xml, "plugin"):
            yield Plugin(element, self)

    def find_model_by_name(self, name: str) -> Optional[Model]:
        for element in element_children(self.xml, "model"):
            if element.get("name") == name:
                return Model(element, self)
        return None

    def physics(self) -> Physics:
        """The world's physics parameters. An empty physics element is created if there is none."""
        return self.child_by_name("physics", Physics, required=False)

    def spherical_coordinates(self) -> Optional[SphericalCoordinates]:
        if first_child(self.xml, "spherical_coordinates") is None:
            return None
        return self.child_by_name("spherical_coordinates", SphericalCoordinates)
