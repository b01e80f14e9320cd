"""
Error taxonomy for SDF loading and the typed element layer.
"""

from __future__ import annotations

import copy

from lxml import etree


class SdfError(Exception):
    """Base class for all SDF loading and validation errors."""

    def with_context(self, context: str) -> "SdfError":
        """Copy of this error, same class and attributes, with context prepended to the message."""
        err = copy.copy(self)
        err.args = (f"{context}: {self}",)
        return err


class Invalid(SdfError):
    """The XML does not match what the SDF format requires."""

    @classmethod
    def at(cls, node: etree._Element, message: str) -> "Invalid":
        return cls(f"in {node.getroottree().getpath(node)}: {message}")


class UnknownElement(Invalid):
    """No typed entity kind exists for the given XML tag."""


class ElementTagMismatch(SdfError, ValueError):
    """A typed entity was built from an XML element with the wrong tag."""


class InvalidXML(SdfError, ValueError):
    """Malformed XML document, or malformed include children."""


class NotSDF(SdfError, ValueError):
    """The document parses as XML but has no sdf/gazebo root."""


class UnavailableSDFVersionInModel(SdfError, ValueError):
    """The model exists but offers no SDF file matching the version ceiling."""


class NoSuchModel(SdfError, ValueError):
    """A model name could not be resolved in the search path."""

    def __init__(self, model_name: str, message: str | None = None) -> None:
        self.model_name = model_name
        super().__init__(message or f"cannot find model {model_name}")


__all__ = [
    "SdfError",
    "Invalid",
    "UnknownElement",
    "ElementTagMismatch",
    "InvalidXML",
    "NotSDF",
    "UnavailableSDFVersionInModel",
    "NoSuchModel",
]
