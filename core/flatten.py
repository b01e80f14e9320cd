#!/usr/bin/env python3
"""
Model tree flattening.

Replaces every model-within-model by its content: names get namespaced
with the submodel name, link poses get composed with the submodel pose and
joint axes get rotated accordingly. Frames and joint poses are left as-is.
"""

from __future__ import annotations

from typing import List
import logging

import numpy as np
from lxml import etree

from core.conversions import (
    Isometry3, array_to_vector3, isometry_to_pose, pose_to_isometry,
    to_boolean, vector3_to_array,
)
from core.namespace import prefix_name
from utils.xml import element_children, first_child, replace_or_append, xml_text

logger = logging.getLogger(__name__)

WORLD_LINK_NAME = "world"
DEFAULT_AXIS = (0.0, 0.0, 1.0)


def flatten_model_tree(node: etree._Element) -> None:
    """Flatten, in place, all the model-within-model found in node's subtree."""
    if node.tag != "model":
        for child in element_children(node):
            flatten_model_tree(child)
        return

    for child in element_children(node, "model"):
        basename = child.get("name")
        flatten_model_tree(child)

        position = node.index(child)
        nodes = transform_submodel_nodes(child, basename)
        node.remove(child)
        for offset, element in enumerate(nodes):
            node.insert(position + offset, element)
        logger.debug("flattened submodel %s into %s", basename, node.get("name"))


def transform_submodel_nodes(submodel: etree._Element, basename: str) -> List[etree._Element]:
    """Namespace and transform the children of submodel, returning them detached.

    The submodel's own pose is consumed, and not part of the result.
    """
    nodes = []
    model_pose = Isometry3.identity()
    for child in element_children(submodel):
        if child.tag == "pose":
            model_pose = pose_to_isometry(child)
            continue

        child_name = child.get("name")
        if child_name is not None:
            child.set("name", prefix_name(basename, child_name))

        if child.tag == "joint":
            for ref_tag in ("parent", "child"):
                ref = first_child(child, ref_tag)
                if ref is not None and xml_text(ref) != WORLD_LINK_NAME:
                    ref.text = prefix_name(basename, xml_text(ref))
        nodes.append(child)

    if not model_pose.is_identity():
        for element in nodes:
            if element.tag == "link":
                _transform_link(element, model_pose)
            elif element.tag == "joint":
                _rotate_joint_axis(element, model_pose)

    for element in nodes:
        submodel.remove(element)
    return nodes


def _transform_link(link: etree._Element, model_pose: Isometry3) -> None:
    link_pose = pose_to_isometry(first_child(link, "pose"))
    replace_or_append(link, isometry_to_pose(model_pose * link_pose))


def _rotate_joint_axis(joint: etree._Element, model_pose: Isometry3) -> None:
    # Reference: parser.cc in libsdformat
    for axis in element_children(joint, "axis"):
        use_parent = first_child(axis, "use_parent_model_frame")
        if use_parent is not None and to_boolean(use_parent):
            continue
        xyz_node = first_child(axis, "xyz")
        xyz = vector3_to_array(xyz_node) if xyz_node is not None else np.array(DEFAULT_AXIS)
        replace_or_append(axis, array_to_vector3(model_pose.rotation.apply(xyz)))


__all__ = [
    "flatten_model_tree",
    "transform_submodel_nodes",
]
