"""Serialization of JSON-compatible nodes back to XML markup."""

from .writer import XmlSerializer, scalar_to_text

__all__ = [
    "XmlSerializer",
    "scalar_to_text",
]
