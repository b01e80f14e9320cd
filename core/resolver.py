#!/usr/bin/env python3
"""
Model path resolution and caching.

Resolves a model name, and an optional SDF version ceiling, to the SDF file
of a gazebo-style model directory (<dir>/<name>/model.config), searching an
ordered list of directories. Results are cached per (name, ceiling) until
clear_cache() is called or the search path changes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Tuple, TYPE_CHECKING
from pathlib import Path
import logging
import os

from lxml import etree

from core.errors import InvalidXML, NoSuchModel, UnavailableSDFVersionInModel
from meta import DEFAULT_META, SdfMetaModel
from sdf_types import SdfVersion
from utils.xml import element_children, xml_text

if TYPE_CHECKING:
    from core.includes import DocumentMetadata

logger = logging.getLogger(__name__)


@dataclass
class ModelCacheEntry:
    """Resolution state of one (model name, version ceiling) pair."""
    path: Optional[str] = None
    document: Optional[etree._ElementTree] = None
    metadata: Optional["DocumentMetadata"] = None


def parse_version(text: str) -> int:
    """Convert a "MAJOR.MINOR" version string into its integer encoding (1.5 -> 150)."""
    return round(float(text) * 100)


class ModelResolver:
    """Search path plus the per-version model cache."""

    def __init__(self, model_path: Optional[List[str]] = None, meta: SdfMetaModel = DEFAULT_META) -> None:
        self.meta = meta
        self._model_path: List[str] = list(model_path) if model_path is not None else meta.default_model_path()
        self._cache: Dict[Tuple[str, SdfVersion], ModelCacheEntry] = {}

    @property
    def model_path(self) -> List[str]:
        return list(self._model_path)

    @model_path.setter
    def model_path(self, paths: List[str]) -> None:
        if isinstance(paths, (str, os.PathLike)):
            paths = [paths]
        self._model_path = [str(p) for p in paths]
        self.clear_cache()

    def add_model_path(self, path: str) -> None:
        self.model_path = self._model_path + [str(path)]

    def clear_cache(self) -> None:
        logger.debug("clearing model cache (%d entries)", len(self._cache))
        self._cache.clear()

    def cache_entry(self, model_name: str, sdf_version: SdfVersion = None) -> ModelCacheEntry:
        key = (model_name, sdf_version)
        entry = self._cache.get(key)
        if entry is None:
            entry = self._cache[key] = ModelCacheEntry()
        return entry

    def model_path_of(self, model_dir: str, sdf_version: SdfVersion = None) -> str:
        """Path of the SDF file offered by a model directory.

        Picks the highest version not above sdf_version (any version if None).
        """
        config_path = os.path.join(model_dir, self.meta.model_config)
        try:
            config = etree.parse(config_path)
        except etree.XMLSyntaxError as e:
            raise InvalidXML(f"in {config_path}, {e}") from e

        root = config.getroot()
        entries = element_children(root, "sdf") if root.tag == "model" else []

        candidates: List[Tuple[int, str]] = []
        for sdf in entries:
            version_text = sdf.get("version") or "0"
            try:
                version = parse_version(version_text)
            except ValueError:
                raise InvalidXML(f"in {config_path}, invalid version '{version_text}'") from None
            candidates.append((version, os.path.join(model_dir, xml_text(sdf))))

        if sdf_version is not None:
            candidates = [(v, p) for v, p in candidates if v <= sdf_version]
        if not candidates:
            raise UnavailableSDFVersionInModel(
                f"gazebo model in {model_dir} does not offer a SDF file matching version {sdf_version}")
        version, path = max(candidates, key=lambda c: c[0])
        logger.debug("model %s: selected SDF version %d at %s", model_dir, version, path)
        return os.path.abspath(path)

    def model_path_from_name(self, model_name: str, sdf_version: SdfVersion = None) -> str:
        """Resolve a model name to the path of its SDF file, using the cache."""
        entry = self.cache_entry(model_name, sdf_version)
        if entry.path:
            logger.debug("cache hit for model %s (version %s)", model_name, sdf_version)
            return entry.path

        for model_dir in self._candidate_dirs(model_name):
            entry.path = self.model_path_of(model_dir, sdf_version)
            return entry.path

        raise NoSuchModel(
            model_name,
            f"cannot find model {model_name} in path {os.pathsep.join(self._model_path)}. "
            f"You probably want to update the {self.meta.model_path_env} environment variable, "
            f"or set the model path explicitly")

    def _candidate_dirs(self, model_name: str) -> Iterator[str]:
        for base in self._model_path:
            model_dir = os.path.join(base, model_name)
            if os.path.isfile(os.path.join(model_dir, self.meta.model_config)):
                yield model_dir

    def iter_model_dirs(self) -> Iterator[Tuple[str, str]]:
        """Yield (model name, model directory) for every model in the search path.

        Directories are visited in search path order, so a name present in
        several of them is yielded once per directory, earliest first.
        """
        for base in self._model_path:
            if not os.path.isdir(base):
                continue
            for subdir in sorted(Path(base).iterdir()):
                if (subdir / self.meta.model_config).is_file():
                    yield subdir.name, str(subdir)


__all__ = [
    "ModelCacheEntry",
    "ModelResolver",
    "parse_version",
]
