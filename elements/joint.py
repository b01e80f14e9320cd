from __future__ import annotations

from typing import Mapping, Optional

from scipy.spatial.transform import Rotation

from core.conversions import Isometry3, pose_to_isometry
from core.errors import Invalid
from elements.axis import Axis
from elements.element import Element
from elements.link import WORLD_LINK_NAME, Link
from utils.xml import first_child, xml_text

ROTATIONAL_TYPES = ("revolute", "continuous", "revolute2", "universal", "gearbox")
TRANSLATIONAL_TYPES = ("prismatic",)


class Joint(Element):
    xml_tag_name = "joint"

    def __init__(self, xml=None, parent=None) -> None:
        super().__init__(xml, parent)
        self._parent_link: Optional[Link] = None
        self._child_link: Optional[Link] = None

    @property
    def type(self) -> str:
        joint_type = self.xml.get("type")
        if joint_type is None:
            raise Invalid(f"expected attribute 'type' missing on {self}")
        return joint_type

    @property
    def pose(self) -> Isometry3:
        """The joint's pose w.r.t. its child link."""
        return pose_to_isometry(first_child(self.xml, "pose"))

    @property
    def parent_link(self) -> Link:
        if self._parent_link is None:
            self._parent_link = self._resolve_link("parent", self._model_links())
        return self._parent_link

    @property
    def child_link(self) -> Link:
        if self._child_link is None:
            self._child_link = self._resolve_link("child", self._model_links())
        return self._child_link

    def resolve_links(self, links: Mapping[str, Link]) -> None:
        """Resolve the parent and child links against a qualified-name -> link map."""
        self._parent_link = self._resolve_link("parent", links)
        self._child_link = self._resolve_link("child", links)

    def _model_links(self) -> Optional[Mapping[str, Link]]:
        from elements.model import Model

        if isinstance(self.parent, Model):
            return self.parent.links
        return None

    def _resolve_link(self, tag: str, links: Optional[Mapping[str, Link]]) -> Link:
        node = first_child(self.xml, tag)
        if node is None:
            raise Invalid(f"required child element '{tag}' of {self} not found")
        name = xml_text(node)
        if name == WORLD_LINK_NAME:
            return Link.world()
        if links is None:
            raise Invalid(f"cannot resolve {tag} link '{name}' of {self}, the joint is not part of a model")
        link = links.get(name)
        if link is None:
            known = ", ".join(sorted(links)) or "none"
            raise Invalid(f"cannot find {tag} link '{name}' of {self}, known links: {known}")
        return link

    def axis(self) -> Axis:
        """The joint's main axis."""
        return self.child_by_name("axis", Axis)

    def axis2(self) -> Optional[Axis]:
        """The second axis of two-axis joints, if there is one."""
        if first_child(self.xml, "axis2") is None:
            return None
        return self.child_by_name("axis2", Axis)

    def transform_for(self, value: float) -> Isometry3:
        """The child-to-parent motion caused by the given joint position."""
        joint_type = self.type
        if joint_type == "fixed":
            return Isometry3.identity()
        xyz = self.axis().xyz
        if joint_type in ROTATIONAL_TYPES:
            return Isometry3(rotation=Rotation.from_rotvec(xyz * value))
        if joint_type in TRANSLATIONAL_TYPES:
            return Isometry3(translation=xyz * value)
        raise NotImplementedError(f"joint type {joint_type} not implemented")
