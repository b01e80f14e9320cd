#!/usr/bin/env python3
"""
Types module for the SDF model tree project.
Centralized type definitions shared by the loader and the element layer.
"""

from .base import (
    XmlValue, SdfVersion, IncludeMap
)

from .sdf import (
    ElementKind
)

__all__ = [
    # Base types
    'XmlValue', 'SdfVersion', 'IncludeMap',

    # SDF types
    'ElementKind',
]
