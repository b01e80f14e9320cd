#!/usr/bin/env python3
"""
SDF document loading.

file -> lxml tree -> include expansion -> uri rewrite -> [flattening]

The loader owns a ModelResolver (search path and model cache) and an
IncludeExpander. Documents cached by the resolver are shared: every public
entry point hands out deep copies.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional
import copy
import logging
import os

from lxml import etree

from core.errors import Invalid, InvalidXML, NotSDF, SdfError, UnavailableSDFVersionInModel
from core.flatten import flatten_model_tree
from core.includes import DocumentMetadata, IncludeExpander
from core.resolver import ModelResolver, parse_version
from meta import DEFAULT_META, SdfMetaModel
from sdf_types import SdfVersion

logger = logging.getLogger(__name__)


@dataclass
class SdfDocument:
    """A parsed SDF document along with its provenance."""
    tree: etree._ElementTree
    metadata: DocumentMetadata

    @property
    def root(self) -> etree._Element:
        return self.tree.getroot()

    @property
    def path(self) -> str:
        return self.metadata.path

    def copy(self) -> "SdfDocument":
        return SdfDocument(etree.ElementTree(copy.deepcopy(self.root)), self.metadata.copy())


def numeric_version_to_string(version: int) -> str:
    """Inverse of the integer version encoding (150 -> "1.5", 110 -> "1.1")."""
    major, minor = divmod(version, 100)
    while minor != 0 and minor % 10 == 0:
        minor //= 10
    return f"{major}.{minor}"


def sdf_version_of(tree: etree._ElementTree | etree._Element) -> SdfVersion:
    root = tree.getroot() if isinstance(tree, etree._ElementTree) else tree
    version = root.get("version")
    if version is None:
        return None
    try:
        return parse_version(version)
    except ValueError:
        raise Invalid.at(root, f"invalid SDF version '{version}'") from None


class SdfLoader:
    def __init__(self, resolver: Optional[ModelResolver] = None,
                 meta: SdfMetaModel = DEFAULT_META,
                 model_path: Optional[List[str]] = None) -> None:
        self.resolver: ModelResolver = resolver or ModelResolver(model_path, meta)
        self.meta: SdfMetaModel = self.resolver.meta
        self.includes = IncludeExpander(self)

    @property
    def model_path(self) -> List[str]:
        return self.resolver.model_path

    @model_path.setter
    def model_path(self, paths: List[str]) -> None:
        self.resolver.model_path = paths

    def clear_cache(self) -> None:
        self.resolver.clear_cache()

    def load_sdf_raw(self, sdf_file: str) -> etree._ElementTree:
        """Parse a SDF file without resolving anything."""
        with open(sdf_file, "rb") as io:
            data = io.read()
        if not data.strip():
            raise NotSDF(f"{sdf_file} can be parsed as an XML file, but it does not have a root")
        try:
            root = etree.fromstring(data, base_url=sdf_file)
        except etree.XMLSyntaxError as e:
            raise InvalidXML(f"cannot load {sdf_file}: {e}") from e

        if not self.meta.is_root_tag(root.tag):
            raise NotSDF(f"{sdf_file} is not a SDF file")
        return etree.ElementTree(root)

    def sdf_version_of(self, tree: etree._ElementTree | etree._Element) -> SdfVersion:
        return sdf_version_of(tree)

    def load_sdf(self, sdf_file: str, flatten: bool = True) -> SdfDocument:
        """Load a SDF file, resolving include tags and relative URIs."""
        sdf_file = os.path.abspath(os.fspath(sdf_file))
        try:
            tree = self.load_sdf_raw(sdf_file)
            sdf_version = sdf_version_of(tree)
            base_path = os.path.dirname(sdf_file)

            metadata = DocumentMetadata(sdf_file)
            metadata.merge_includes(self.includes.expand(tree.getroot(), sdf_version, base_path))
            self.includes.resolve_relative_uris(tree.getroot(), sdf_version, base_path)

            if flatten:
                flatten_model_tree(tree.getroot())
        except SdfError as e:
            raise e.with_context(f"while loading {sdf_file}") from e
        except OSError as e:
            raise type(e)(e.errno, f"while loading {sdf_file}: {e.strerror or e}", e.filename) from e

        logger.info("loaded %s (%d included documents)", sdf_file, len(metadata.includes))
        return SdfDocument(tree, metadata)

    def load_gazebo_model(self, model_dir: str, sdf_version: SdfVersion = None,
                          flatten: bool = True) -> SdfDocument:
        """Load the SDF of a model directory, picking the file matching sdf_version."""
        return self.load_sdf(self.resolver.model_path_of(model_dir, sdf_version), flatten=flatten)

    def cached_model(self, model_name: str, sdf_version: SdfVersion = None) -> SdfDocument:
        """Unflattened document of a named model, shared through the cache.

        Do not modify the returned tree, use model_from_name for a private copy.
        """
        path = self.resolver.model_path_from_name(model_name, sdf_version)
        entry = self.resolver.cache_entry(model_name, sdf_version)
        if entry.document is None:
            document = self.load_sdf(path, flatten=False)
            entry.document, entry.metadata = document.tree, document.metadata
        return SdfDocument(entry.document, entry.metadata)

    def model_from_name(self, model_name: str, sdf_version: SdfVersion = None,
                        flatten: bool = True) -> SdfDocument:
        """Load a model by its name. Raises NoSuchModel if it is not in the search path."""
        document = self.cached_model(model_name, sdf_version).copy()
        if flatten:
            flatten_model_tree(document.root)
        return document

    def gazebo_models(self, sdf_version: SdfVersion = None) -> Dict[str, SdfDocument]:
        """All models of the search path offering a SDF file matching sdf_version."""
        result: Dict[str, SdfDocument] = {}
        for model_name, model_dir in self.resolver.iter_model_dirs():
            if model_name in result:
                continue
            entry = self.resolver.cache_entry(model_name, sdf_version)
            if entry.document is None:
                try:
                    path = entry.path or self.resolver.model_path_of(model_dir, sdf_version)
                    document = self.load_sdf(path, flatten=False)
                except UnavailableSDFVersionInModel as e:
                    logger.debug("skipping %s: %s", model_name, e)
                    continue
                entry.path, entry.document, entry.metadata = path, document.tree, document.metadata
            result[model_name] = SdfDocument(entry.document, entry.metadata).copy()
        return result


__all__ = [
    "SdfDocument",
    "SdfLoader",
    "numeric_version_to_string",
    "sdf_version_of",
]
