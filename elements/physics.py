from __future__ import annotations

import math
from typing import Optional

from core.errors import Invalid
from elements.element import Element
from utils.xml import first_child, xml_text


class Physics(Element):
    """Physics engine parameters."""

    xml_tag_name = "physics"

    @property
    def type(self) -> Optional[str]:
        """The selected physics engine."""
        return self.xml.get("type")

    @property
    def real_time_factor(self) -> float:
        """The simulated time / realtime factor, 1 if unspecified."""
        factor = first_child(self.xml, "real_time_factor")
        if factor is None:
            return 1.0
        try:
            return float(xml_text(factor))
        except ValueError:
            raise Invalid.at(factor, f"invalid number '{xml_text(factor)}'") from None

    @property
    def real_time_update_rate(self) -> Optional[int]:
        """The world's update rate in realtime, in Hz, if specified."""
        rate = first_child(self.xml, "real_time_update_rate")
        if rate is None:
            return None
        try:
            return int(xml_text(rate))
        except ValueError:
            raise Invalid.at(rate, f"invalid integer '{xml_text(rate)}'") from None

    @property
    def real_time_update_period(self) -> Optional[float]:
        """Update period in seconds, infinite for a rate of 0 (as fast as possible)."""
        rate = self.real_time_update_rate
        if rate is None:
            return None
        if rate == 0:
            return math.inf
        return 1.0 / rate

    @property
    def simulation_time_update_period(self) -> Optional[float]:
        """The world's update period in simulated seconds.

        None if the update rate is not explicitly set, the SDF format
        specifies no default for it.
        """
        period = self.real_time_update_period
        if period is None:
            return None
        return period * self.real_time_factor
