#!/usr/bin/env python3
"""
Core module: SDF loading, include resolution and model tree flattening.

The module-level helpers operate on a process-wide default loader. Code
that needs an independent search path or cache creates its own SdfLoader.
"""

from typing import List, Optional

from .errors import (
    SdfError, Invalid, UnknownElement, ElementTagMismatch, InvalidXML, NotSDF,
    NoSuchModel, UnavailableSDFVersionInModel,
)
from .conversions import Isometry3, pose_to_isometry, isometry_to_pose
from .resolver import ModelResolver, ModelCacheEntry
from .includes import DocumentMetadata
from .loader import SdfDocument, SdfLoader, numeric_version_to_string, sdf_version_of
from .flatten import flatten_model_tree

_default_loader: Optional[SdfLoader] = None


def default_loader() -> SdfLoader:
    global _default_loader
    if _default_loader is None:
        _default_loader = SdfLoader()
    return _default_loader


def get_model_path() -> List[str]:
    return default_loader().model_path


def set_model_path(paths: List[str]) -> None:
    """Override the default search path. This clears the model cache."""
    default_loader().model_path = paths


def clear_cache() -> None:
    default_loader().clear_cache()


__all__ = [
    'SdfError', 'Invalid', 'UnknownElement', 'ElementTagMismatch', 'InvalidXML', 'NotSDF',
    'NoSuchModel', 'UnavailableSDFVersionInModel',
    'Isometry3', 'pose_to_isometry', 'isometry_to_pose',
    'ModelResolver', 'ModelCacheEntry', 'DocumentMetadata',
    'SdfDocument', 'SdfLoader', 'numeric_version_to_string', 'sdf_version_of',
    'flatten_model_tree',
    'default_loader', 'get_model_path', 'set_model_path', 'clear_cache',
]
