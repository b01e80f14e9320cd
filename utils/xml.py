from __future__ import annotations

import copy
from typing import List, Optional

from lxml import etree

from sdf_types import XmlValue


def xml_text(v: XmlValue | etree._Element) -> str:
    """Stripped text of an element, or the string form of a plain value."""
    if v is None:
        return ""
    if isinstance(v, etree._Element):
        return (v.text or "").strip()
    return str(v)


def element_children(node: etree._Element, tag: Optional[str] = None) -> List[etree._Element]:
    """Element children of node, skipping comments and processing instructions."""
    return [
        child for child in node
        if isinstance(child.tag, str) and (tag is None or child.tag == tag)
    ]


def first_child(node: etree._Element, tag: str) -> Optional[etree._Element]:
    for child in element_children(node, tag):
        return child
    return None


def node_path(node: etree._Element) -> str:
    return node.getroottree().getpath(node)


def deep_copy(node: etree._Element) -> etree._Element:
    return copy.deepcopy(node)


def replace_or_append(parent: etree._Element, new_child: etree._Element) -> None:
    """Replace the first child sharing new_child's tag, dropping the others; append if none."""
    existing = element_children(parent, new_child.tag)
    if not existing:
        parent.append(new_child)
        return
    parent.replace(existing[0], new_child)
    for extra in existing[1:]:
        parent.remove(extra)


__all__ = [
    "xml_text",
    "element_children",
    "first_child",
    "node_path",
    "deep_copy",
    "replace_or_append",
]
