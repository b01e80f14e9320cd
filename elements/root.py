from __future__ import annotations

from typing import Iterator, List, Optional, Union
import os

from lxml import etree

from core.includes import DocumentMetadata
from core.loader import SdfDocument, SdfLoader, numeric_version_to_string, sdf_version_of
from core.namespace import build_namespace_tree, find_source_path
from elements.element import Element
from elements.model import Model
from elements.world import World
from meta import DEFAULT_META
from sdf_types import SdfVersion
from utils.xml import element_children


def _loader_or_default(loader: Optional[SdfLoader]) -> SdfLoader:
    if loader is not None:
        return loader
    import core
    return core.default_loader()


class Root(Element):
    """A SDF document root, along with the provenance of its content."""

    xml_tag_name = "sdf"

    def __init__(self, xml=None, parent=None,
                 metadata: Optional[DocumentMetadata] = None,
                 loader: Optional[SdfLoader] = None) -> None:
        super().__init__(xml, parent)
        self.metadata = metadata
        self.loader = loader

    @classmethod
    def accepts_tag(cls, tag: str) -> bool:
        return DEFAULT_META.is_root_tag(tag)

    @classmethod
    def from_document(cls, document: SdfDocument, loader: Optional[SdfLoader] = None) -> "Root":
        return cls(document.tree, metadata=document.metadata, loader=loader)

    @classmethod
    def load(cls, sdf_file: Union[str, os.PathLike], sdf_version: SdfVersion = None,
             flatten: bool = True, loader: Optional[SdfLoader] = None) -> "Root":
        """Load a SDF file, given either its path or a model:// URI.

        sdf_version is the maximum SDF version (as version * 100) accepted
        when resolving a model:// URI. Raises FileNotFoundError if the file
        does not exist, NotSDF and InvalidXML on bad content.
        """
        loader = _loader_or_default(loader)
        sdf_file = os.fspath(sdf_file)
        match = loader.meta.model_uri.match(sdf_file)
        if match is None:
            return cls.from_document(loader.load_sdf(sdf_file, flatten=flatten), loader)

        model_name, file_name = match.groups()
        if not file_name:
            return cls.load_from_model_name(model_name, sdf_version, flatten=flatten, loader=loader)
        model_dir = os.path.dirname(loader.resolver.model_path_from_name(model_name, sdf_version))
        return cls.from_document(loader.load_sdf(os.path.join(model_dir, file_name), flatten=flatten), loader)

    @classmethod
    def load_from_model_name(cls, model_name: str, sdf_version: SdfVersion = None,
                             flatten: bool = True, loader: Optional[SdfLoader] = None) -> "Root":
        """Load a model from its name. Raises NoSuchModel if it cannot be found."""
        loader = _loader_or_default(loader)
        return cls.from_document(loader.model_from_name(model_name, sdf_version, flatten=flatten), loader)

    @classmethod
    def make(cls, xml: Optional[etree._Element] = None, version: SdfVersion = None) -> "Root":
        """New document holding xml as its only child."""
        root = etree.Element(DEFAULT_META.root_tag)
        if version is not None:
            root.set("version", numeric_version_to_string(version))
        if xml is not None:
            root.append(xml)
        return cls(etree.ElementTree(root))

    @property
    def version(self) -> SdfVersion:
        """The advertised SDF version, as version * 100 (1.5 is 150)."""
        return sdf_version_of(self.xml)

    def each_world(self) -> Iterator[World]:
        for element in element_children(self.xml, "world"):
            yield World(element, self)

    def each_model(self, recursive: bool = False) -> Iterator[Model]:
        """The toplevel models, plus the models of each world if recursive is set."""
        for element in element_children(self.xml, "model"):
            yield Model(element, self)
        if recursive:
            for world in self.each_world():
                yield from world.each_model()

    def find_all_included_models(self, uri_or_path: str) -> List[Element]:
        """All the elements that got spliced in from the given model URI or file."""
        if self.metadata is None:
            return []
        match = DEFAULT_META.model_uri.match(uri_or_path)
        if match:
            loader = _loader_or_default(self.loader)
            path = loader.resolver.model_path_from_name(match.group(1), self.version)
        else:
            path = os.path.abspath(uri_or_path)

        result = []
        for name in self.metadata.includes.get(path, []):
            element = self.find_by_name(name)
            if element is not None:
                result.append(element)
        return result

    def find_file_of(self, element: Element) -> Optional[str]:
        """Path of the file that defined element, None if this root has no provenance."""
        if self.metadata is None:
            return None
        full_name = element.full_name(root=self)
        if not full_name:
            return self.metadata.path
        tree = build_namespace_tree(self.metadata.includes, self.metadata.path)
        return find_source_path(tree, full_name)
