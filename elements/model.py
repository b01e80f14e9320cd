from __future__ import annotations

from typing import Dict, Iterator, List, Optional, Tuple

from lxml import etree

from core.conversions import Isometry3, pose_to_isometry, to_boolean
from core.errors import Invalid
from core.namespace import prefix_name
from elements.element import Element
from elements.frame import Frame
from elements.joint import Joint
from elements.link import Link
from elements.plugin import Plugin
from elements.sensor import Sensor
from sdf_types import SdfVersion
from utils.xml import element_children, first_child


def _first_link_xml(node: etree._Element) -> Optional[etree._Element]:
    """First link of a model, looking into nested models depth-first."""
    link = first_child(node, "link")
    if link is not None:
        return link
    for submodel in element_children(node, "model"):
        link = _first_link_xml(submodel)
        if link is not None:
            return link
    return None


class Model(Element):
    """A model, with its links, joints, frames and plugins resolved by qualified name.

    The name maps of a model cover its direct children and the children of
    all its nested models, with keys namespaced by the submodel names
    (e.g. "submodel::link").
    """

    xml_tag_name = "model"

    def __init__(self, xml=None, parent=None) -> None:
        super().__init__(xml, parent)

        if isinstance(parent, Model) and parent._canonical_link_xml is not None:
            self._canonical_link_xml = parent._canonical_link_xml
        else:
            self._canonical_link_xml = _first_link_xml(self.xml)

        self._direct_models: List[Model] = []
        self._direct_links: List[Link] = []
        self._direct_joints: List[Joint] = []
        self._direct_frames: List[Frame] = []
        self._direct_plugins: List[Plugin] = []

        self._models: Dict[str, Model] = {}
        self._links: Dict[str, Link] = {}
        self._joints: Dict[str, Joint] = {}
        self._frames: Dict[str, Frame] = {}
        self._plugins: Dict[str, Plugin] = {}

        deferred_joints = []
        for child in element_children(self.xml):
            if child.tag == "model":
                submodel = Model(child, self)
                self._direct_models.append(submodel)
                self._register(self._models, submodel)
                self._merge_submodel(submodel)
            elif child.tag == "link":
                link = Link(child, self)
                self._direct_links.append(link)
                self._register(self._links, link)
            elif child.tag == "frame":
                frame = Frame(child, self)
                self._direct_frames.append(frame)
                self._register(self._frames, frame)
            elif child.tag == "plugin":
                plugin = Plugin(child, self)
                self._direct_plugins.append(plugin)
                if plugin.name is not None:
                    self._register(self._plugins, plugin)
            elif child.tag == "joint":
                deferred_joints.append(child)

        for child in deferred_joints:
            joint = Joint(child, self)
            self._direct_joints.append(joint)
            self._register(self._joints, joint)
            joint.resolve_links(self._links)

    def _register(self, mapping: Dict[str, Element], element: Element,
                  name: Optional[str] = None) -> None:
        if name is None:
            name = element.name
            if name is None:
                raise Invalid.at(element.xml, f"{element.xml.tag} without a name in {self}")
        if name in mapping:
            raise Invalid.at(element.xml, f"duplicate {element.xml.tag} name '{name}' in {self}")
        mapping[name] = element

    def _merge_submodel(self, submodel: "Model") -> None:
        for own, nested in ((self._models, submodel._models),
                            (self._links, submodel._links),
                            (self._joints, submodel._joints),
                            (self._frames, submodel._frames),
                            (self._plugins, submodel._plugins)):
            for name, element in nested.items():
                self._register(own, element, prefix_name(submodel.name, name))

    @classmethod
    def load_from_model_name(cls, model_name: str, sdf_version: SdfVersion = None,
                             flatten: bool = True, loader=None) -> "Model":
        """Load a model from its name in the model search path.

        Raises NoSuchModel if the model cannot be found.
        """
        from elements.root import Root

        root = Root.load_from_model_name(model_name, sdf_version, flatten=flatten, loader=loader)
        model = next(root.each_model(), None)
        if model is None:
            raise Invalid(f"model {model_name} has no model element")
        return model

    @property
    def links(self) -> Dict[str, Link]:
        """All the links of this model and its submodels, by qualified name."""
        return self._links

    @property
    def static(self) -> bool:
        node = first_child(self.xml, "static")
        return node is not None and to_boolean(node)

    @property
    def pose(self) -> Isometry3:
        """The model's pose w.r.t. its parent."""
        return pose_to_isometry(first_child(self.xml, "pose"))

    @property
    def canonical_link(self) -> Optional[Link]:
        """The link whose pose stands for the model's.

        This is the first link declared in the model, looking into nested
        models if needed. An enclosing model's canonical link takes
        precedence.
        """
        if self._canonical_link_xml is None:
            return None
        for link in self._links.values():
            if link.xml is self._canonical_link_xml:
                return link
        if isinstance(self.parent, Model):
            return self.parent.canonical_link
        return Link(self._canonical_link_xml)

    def each_model(self) -> Iterator["Model"]:
        """The models directly within this one."""
        return iter(self._direct_models)

    def each_model_with_name(self) -> Iterator[Tuple[str, "Model"]]:
        """All nested models, recursively, along with their qualified names."""
        return iter(self._models.items())

    def each_direct_link(self) -> Iterator[Link]:
        return iter(self._direct_links)

    def each_link(self) -> Iterator[Link]:
        return iter(self._links.values())

    def each_link_with_name(self) -> Iterator[Tuple[str, Link]]:
        return iter(self._links.items())

    def each_direct_joint(self) -> Iterator[Joint]:
        return iter(self._direct_joints)

    def each_joint(self) -> Iterator[Joint]:
        return iter(self._joints.values())

    def each_joint_with_name(self) -> Iterator[Tuple[str, Joint]]:
        return iter(self._joints.items())

    def each_direct_frame(self) -> Iterator[Frame]:
        return iter(self._direct_frames)

    def each_frame(self) -> Iterator[Frame]:
        return iter(self._frames.values())

    def each_frame_with_name(self) -> Iterator[Tuple[str, Frame]]:
        return iter(self._frames.items())

    def each_direct_plugin(self) -> Iterator[Plugin]:
        return iter(self._direct_plugins)

    def each_plugin(self) -> Iterator[Plugin]:
        """All plugins of this model and its submodels, unnamed ones included."""
        yield from self._direct_plugins
        for submodel in self._direct_models:
            yield from submodel.each_plugin()

    def each_plugin_with_name(self) -> Iterator[Tuple[str, Plugin]]:
        return iter(self._plugins.items())

    def each_direct_sensor(self) -> Iterator[Sensor]:
        for link in self._direct_links:
            yield from link.each_sensor()

    def each_sensor(self) -> Iterator[Sensor]:
        for link in self._links.values():
            yield from link.each_sensor()

    def find_model_by_name(self, name: str) -> Optional["Model"]:
        return self._models.get(name)

    def find_link_by_name(self, name: str) -> Optional[Link]:
        return self._links.get(name)

    def find_joint_by_name(self, name: str) -> Optional[Joint]:
        return self._joints.get(name)

    def find_frame_by_name(self, name: str) -> Optional[Frame]:
        return self._frames.get(name)

    def find_plugin_by_name(self, name: str) -> Optional[Plugin]:
        return self._plugins.get(name)

    def find_by_name(self, name: str) -> Optional[Element]:
        for mapping in (self._models, self._links, self._joints, self._frames, self._plugins):
            element = mapping.get(name)
            if element is not None:
                return element
        return super().find_by_name(name)
