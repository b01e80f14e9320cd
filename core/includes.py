#!/usr/bin/env python3
"""
Include expansion.

Replaces the <include> placeholders found directly within <sdf>, <world>
and <model> scopes by the model they reference, applying the include's
overrides, and records where each included document got spliced
(provenance metadata). A separate pass rewrites <uri> references into
absolute paths.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, TYPE_CHECKING
import logging
import os

from lxml import etree

from core.errors import InvalidXML
from core.namespace import SEPARATOR, prefix_name
from sdf_types import IncludeMap, SdfVersion
from utils.xml import deep_copy, element_children, replace_or_append, xml_text

if TYPE_CHECKING:
    from core.loader import SdfDocument, SdfLoader

logger = logging.getLogger(__name__)


@dataclass
class DocumentMetadata:
    """Provenance of a loaded document."""
    path: str
    includes: IncludeMap = field(default_factory=dict)

    def merge_includes(self, includes: IncludeMap) -> None:
        merge_includes(self.includes, includes)

    def prefixed(self, prefix: Optional[str]) -> IncludeMap:
        return prefix_includes(self.includes, prefix)

    def copy(self) -> "DocumentMetadata":
        return DocumentMetadata(self.path, {p: list(names) for p, names in self.includes.items()})


def merge_includes(target: IncludeMap, added: IncludeMap) -> None:
    for path, names in added.items():
        target.setdefault(path, []).extend(names)


def prefix_includes(includes: IncludeMap, prefix: Optional[str]) -> IncludeMap:
    return {path: [prefix_name(prefix, n) for n in names] for path, names in includes.items()}


def rename_includes(includes: IncludeMap, old_name: Optional[str], new_name: str) -> IncludeMap:
    """Rewrite the leading component old_name of every recorded name into new_name."""
    if not old_name or old_name == new_name:
        return {path: list(names) for path, names in includes.items()}

    def rename(name: str) -> str:
        if name == old_name:
            return new_name
        if name.startswith(old_name + SEPARATOR):
            return new_name + name[len(old_name):]
        return name

    return {path: [rename(n) for n in names] for path, names in includes.items()}


@dataclass
class IncludeRequest:
    """Parsed content of an <include> node."""
    node: etree._Element
    uri: str
    name: Optional[str] = None
    overrides: List[etree._Element] = field(default_factory=list)


class IncludeExpander:
    def __init__(self, loader: "SdfLoader") -> None:
        self.loader = loader

    @property
    def meta(self):
        return self.loader.meta

    def expand(self, scope: etree._Element, sdf_version: SdfVersion, base_path: str) -> IncludeMap:
        """Replace the include tags that are direct children of scope, recursively.

        Returns the provenance of what got included, with names qualified
        relative to scope's parent (i.e. prefixed with scope's own name
        unless scope is the document root).
        """
        includes: IncludeMap = {}

        for child in element_children(scope):
            if self.meta.is_scope_tag(child.tag):
                merge_includes(includes, self.expand(child, sdf_version, base_path))
            elif child.tag == self.meta.include_tag:
                request = self.parse_include(child)
                merge_includes(includes, self.splice(scope, request, sdf_version, base_path))

        if not self.meta.is_root_tag(scope.tag):
            includes = prefix_includes(includes, scope.get("name"))
        return includes

    def parse_include(self, inc: etree._Element) -> IncludeRequest:
        uris = []
        name = None
        overrides = []
        for element in element_children(inc):
            if element.tag == "uri":
                uris.append(xml_text(element))
            elif element.tag == "name":
                name = xml_text(element)
            elif element.tag in self.meta.include_override_tags:
                overrides.append(element)
            else:
                raise InvalidXML(f"unexpected element '{element.tag}' found as child of an include")

        if not uris:
            raise InvalidXML("no uri element in include")
        if len(uris) > 1:
            raise InvalidXML(f"more than one uri element in include: {', '.join(uris)}")
        return IncludeRequest(inc, uris[0], name, overrides)

    def load_included(self, uri: str, sdf_version: SdfVersion, base_path: str) -> "SdfDocument":
        """Document referenced by an include URI. The result may be shared and must not be mutated."""
        match = self.meta.model_uri.match(uri)
        if match:
            model_name, file_name = match.groups()
            if file_name:
                raise InvalidXML(
                    f"does not know how to resolve an explicit file in a model:// URI inside an include ({uri})")
            return self.loader.cached_model(model_name, sdf_version)

        uri_path = os.path.normpath(os.path.join(base_path, uri))
        if os.path.isdir(uri_path):
            return self.loader.load_gazebo_model(uri_path, sdf_version, flatten=False)
        raise InvalidXML(f"URI {uri} is neither a model:// URI nor an existing directory")

    def splice(self, scope: etree._Element, request: IncludeRequest,
               sdf_version: SdfVersion, base_path: str) -> IncludeMap:
        included = self.load_included(request.uri, sdf_version, base_path)

        elements = element_children(included.root)
        if len(elements) != 1 or elements[0].tag != "model":
            raise InvalidXML(
                f"expected included resource {request.uri} to have exactly one model, "
                f"found {', '.join(e.tag for e in elements) or 'nothing'}")

        model = deep_copy(elements[0])
        original_name = model.get("name")
        if request.name:
            model.set("name", request.name)
        for override in request.overrides:
            replace_or_append(model, deep_copy(override))
        model.tail = request.node.tail
        scope.replace(request.node, model)

        splice_name = model.get("name") or ""
        logger.info("included %s as '%s'", included.metadata.path, splice_name)

        includes: IncludeMap = {included.metadata.path: [splice_name]}
        merge_includes(includes, rename_includes(included.metadata.includes, original_name, splice_name))
        return includes

    def resolve_relative_uris(self, node: etree._Element, sdf_version: SdfVersion, base_path: str) -> None:
        """Rewrite <uri> nodes into absolute paths.

        model://name[/file] resolves through the model search path, relative
        paths against base_path. Include nodes are not descended into.
        """
        queue = [node]
        while queue:
            n = queue.pop(0)
            if n.tag == self.meta.include_tag:
                continue
            if n.tag == "uri":
                self._rewrite_uri(n, sdf_version, base_path)
            queue.extend(element_children(n))

    def _rewrite_uri(self, n: etree._Element, sdf_version: SdfVersion, base_path: str) -> None:
        text = xml_text(n)
        if not text:
            return
        match = self.meta.model_uri.match(text)
        if match:
            model_name, file_name = match.groups()
            sdf_path = self.loader.resolver.model_path_from_name(model_name, sdf_version)
            model_dir = os.path.dirname(sdf_path)
            n.text = os.path.join(model_dir, file_name) if file_name else model_dir
        elif "://" in text or os.path.isabs(text):
            return
        else:
            n.text = os.path.normpath(os.path.join(base_path, text))
        logger.debug("rewrote uri %s into %s", text, n.text)


__all__ = [
    "DocumentMetadata",
    "IncludeExpander",
    "IncludeRequest",
    "merge_includes",
    "prefix_includes",
    "rename_includes",
]
