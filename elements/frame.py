from typing import Optional

from core.conversions import Isometry3, pose_to_isometry
from elements.element import Element
from utils.xml import first_child


class Frame(Element):
    xml_tag_name = "frame"

    @property
    def pose(self) -> Isometry3:
        """The frame's pose w.r.t. its parent."""
        return pose_to_isometry(first_child(self.xml, "pose"))

    @property
    def attached_to(self) -> Optional[str]:
        return self.xml.get("attached_to")
