from __future__ import annotations

from typing import Optional

import numpy as np

from core.conversions import to_boolean, vector3_to_array
from core.errors import Invalid
from elements.element import Element
from utils.xml import first_child, xml_text

# Axis direction when no xyz is given
DEFAULT_XYZ = (0.0, 0.0, 1.0)


class AxisLimit(Element):
    xml_tag_name = "limit"

    def read(self, element_name: str, default_value: Optional[float]) -> Optional[float]:
        element = first_child(self.xml, element_name)
        if element is None:
            return default_value
        try:
            return float(xml_text(element))
        except ValueError:
            raise Invalid.at(element, f"invalid number '{xml_text(element)}'") from None

    @property
    def lower(self) -> Optional[float]:
        return self.read("lower", None)

    @property
    def upper(self) -> Optional[float]:
        return self.read("upper", None)

    @property
    def effort(self) -> Optional[float]:
        return self.read("effort", None)

    @property
    def velocity(self) -> Optional[float]:
        return self.read("velocity", None)


class Axis(Element):
    xml_tag_name = "axis"

    @classmethod
    def accepts_tag(cls, tag: str) -> bool:
        return tag in ("axis", "axis2")

    @property
    def xyz(self) -> np.ndarray:
        xyz = first_child(self.xml, "xyz")
        if xyz is None:
            return np.array(DEFAULT_XYZ)
        return vector3_to_array(xyz)

    @property
    def use_parent_model_frame(self) -> bool:
        flag = first_child(self.xml, "use_parent_model_frame")
        return flag is not None and to_boolean(flag)

    def limit(self) -> AxisLimit:
        """The axis limits. An empty limit element is created if there is none."""
        return self.child_by_name("limit", AxisLimit, required=False)
