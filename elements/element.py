"""
Base class of the typed SDF element layer.

Elements only wrap the underlying lxml node, they do not copy its content.
The lxml tree owns the nodes; an element holds its node and the element it
was reached from (its logical parent, None for a root).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar, Optional, Type, TypeVar
import copy

from lxml import etree

from core.errors import ElementTagMismatch, Invalid
from core.flatten import flatten_model_tree
from core.namespace import SEPARATOR
from sdf_types import ElementKind
from utils.xml import element_children, node_path

if TYPE_CHECKING:
    from elements.root import Root

E = TypeVar("E", bound="Element")


class Element:
    """Common API to store and access the XML of an SDF element."""

    xml_tag_name: ClassVar[Optional[str]] = None

    def __init__(self, xml: Optional[etree._Element] = None, parent: Optional["Element"] = None) -> None:
        if xml is None:
            xml = etree.Element(self.xml_tag_name or "element")
        elif isinstance(xml, etree._ElementTree):
            xml = xml.getroot()
        if not self.accepts_tag(xml.tag):
            raise ElementTagMismatch(
                f"expected the XML element to be a '{self.xml_tag_name}' tag, "
                f"but got '{xml.tag}' ({node_path(xml)})")
        self.xml: etree._Element = xml
        self.parent: Optional[Element] = parent

    @classmethod
    def accepts_tag(cls, tag: str) -> bool:
        return cls.xml_tag_name is None or cls.xml_tag_name == tag

    @classmethod
    def from_xml_string(cls: Type[E], xml_string: str) -> E:
        return cls(etree.fromstring(xml_string))

    def to_xml_string(self) -> str:
        return etree.tostring(self.xml, encoding="unicode")

    @property
    def name(self) -> Optional[str]:
        return self.xml.get("name")

    @name.setter
    def name(self, name: str) -> None:
        self.xml.set("name", name)

    @property
    def node_path(self) -> str:
        """Structural path of the underlying node within its document."""
        return node_path(self.xml)

    def root(self) -> "Element":
        obj = self
        while obj.parent is not None:
            obj = obj.parent
        return obj

    def make_parents(self, root: "Element") -> None:
        """Create the parent elements of self up to the given root."""
        from elements import wrap

        xml_parent = self.xml.getparent()
        if xml_parent is None:
            raise ValueError(f"{self} is not a descendant of {root}")
        if xml_parent is root.xml:
            self.parent = root
        else:
            self.parent = wrap(xml_parent)
            self.parent.make_parents(root)

    def full_name(self, root: Optional["Element"] = None) -> Optional[str]:
        """This element's name, qualified up to root (excluded) or the document root.

        With an element whose complete name is el0::el1::el2::element,
        element.full_name(root=el1) is "el2::element".
        """
        if root is not None and self.xml is root.xml:
            return None
        if self.parent is not None:
            parent_name = self.parent.full_name(root=root)
            if parent_name:
                return f"{parent_name}{SEPARATOR}{self.name}"
        return self.name

    def find_by_name(self, name: str) -> Optional["Element"]:
        """Find a named element within the hierarchy, one '::' level at a time.

        Only children with a typed element class are considered, None is
        returned for e.g. visuals or collisions.
        """
        from elements import wrap

        for child in element_children(self.xml):
            child_name = child.get("name")
            if child_name is None or not ElementKind.has_tag(child.tag):
                continue
            if name == child_name:
                return wrap(child, self)
            prefix = f"{child_name}{SEPARATOR}"
            if name.startswith(prefix):
                element = wrap(child, self)
                found = element.find_by_name(name[len(prefix):])
                if found is not None:
                    return found
        return None

    def child_by_name(self, path: str, klass: Type[E], required: bool = True) -> E:
        """Wrap the single child matching path into klass.

        If there is no match and required is False, an empty child is created.
        """
        children = self.xml.findall(path)
        if not children:
            if required:
                raise Invalid(f"expected {self} to have a {path} child element, but could not find one")
            child = etree.SubElement(self.xml, path)
            return klass(child, self)
        if len(children) > 1:
            raise Invalid(f"more than one child matching {path} found on {self}, was expecting exactly one")
        return klass(children[0], self)

    def make_root(self, flatten: bool = False) -> "Root":
        """New SDF document whose only content is a deep copy of self."""
        from elements.root import Root

        r = self.root()
        version = r.version if isinstance(r, Root) else None
        xml = copy.deepcopy(self.xml)
        if flatten:
            flatten_model_tree(xml)
        return Root.make(xml, version)

    def __eq__(self, other: object) -> bool:
        if type(self) is not type(other):
            return NotImplemented
        return self.xml is other.xml or self.to_xml_string() == other.to_xml_string()

    def __hash__(self) -> int:
        return hash((type(self), self.xml.tag, self.xml.get("name")))

    def __reduce__(self):
        return (type(self).from_xml_string, (self.to_xml_string(),))

    def __str__(self) -> str:
        s = f"{type(self).__name__}[{self.name}]"
        if self.parent is not None:
            return f"{self.parent}/{s}"
        return s

    def __repr__(self) -> str:
        return f"<{self} at {self.node_path}>"
