from __future__ import annotations

from dataclasses import dataclass, fields
from typing import List, Optional
import os

import yaml

from core.loader import SdfLoader
from core.resolver import parse_version


@dataclass
class LoaderConfig:
    model_path: Optional[List[str]] = None     # None: GAZEBO_MODEL_PATH + ~/.gazebo/models
    sdf_version: Optional[str] = None          # maximum SDF version of model files, e.g. "1.5"
    flatten: bool = True
    log_level: str = "WARNING"

    @property
    def version_ceiling(self) -> Optional[int]:
        if self.sdf_version is None:
            return None
        return parse_version(str(self.sdf_version))

    def build_loader(self) -> SdfLoader:
        return SdfLoader(model_path=self.model_path)


def load_config(path: str) -> LoaderConfig:
    """Read a LoaderConfig from a YAML file. Unknown keys are rejected."""
    if not os.path.isfile(path):
        raise FileNotFoundError(f"Configuration file not found: {path}")
    with open(path, 'r', encoding='utf-8') as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a mapping at the top level")

    known = {f.name for f in fields(LoaderConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError(f"{path}: unknown configuration keys {', '.join(unknown)}")

    model_path = data.get("model_path")
    if isinstance(model_path, str):
        data["model_path"] = model_path.split(os.pathsep)
    if data.get("sdf_version") is not None:
        data["sdf_version"] = str(data["sdf_version"])
    return LoaderConfig(**data)


DEFAULT_CONFIG = LoaderConfig()

__all__ = [
    "LoaderConfig",
    "load_config",
    "DEFAULT_CONFIG",
]
