#!/usr/bin/env python3
"""
Base type aliases for the SDF model tree project.
"""

from typing import Dict, List, Optional, Union

# ---------- Common type aliases ----------
XmlValue = Union[str, int, float, bool, None]

# SDF versions are integer-encoded as round(version * 100), i.e. 1.5 -> 150
SdfVersion = Optional[int]

# included document path -> qualified names at which it was spliced
IncludeMap = Dict[str, List[str]]
