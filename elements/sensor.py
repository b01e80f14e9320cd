from __future__ import annotations

import math
from typing import Optional

from lxml import etree

from core.conversions import Isometry3, pose_to_isometry
from core.errors import Invalid
from elements.element import Element
from utils.xml import first_child, xml_text


class Sensor(Element):
    """Base representation of sensors.

    Each sensor type has a type-specific block (e.g. a sensor/ray element
    for 'ray' sensors), exposed as sensor_info.
    """

    xml_tag_name = "sensor"

    @property
    def type(self) -> Optional[str]:
        return self.xml.get("type")

    @property
    def sensor_info(self) -> Optional[etree._Element]:
        if self.type is None:
            return None
        return first_child(self.xml, self.type)

    @property
    def pose(self) -> Isometry3:
        """The sensor's pose w.r.t. its parent."""
        return pose_to_isometry(first_child(self.xml, "pose"))

    @property
    def update_rate(self) -> Optional[float]:
        """The sensor's update rate in Hz, if specified."""
        rate = first_child(self.xml, "update_rate")
        if rate is None:
            return None
        try:
            return float(xml_text(rate))
        except ValueError:
            raise Invalid.at(rate, f"invalid number '{xml_text(rate)}'") from None

    @property
    def update_period(self) -> Optional[float]:
        rate = self.update_rate
        if rate is None:
            return None
        if rate == 0:
            return math.inf
        return 1.0 / rate
