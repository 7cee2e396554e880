"""Tokenizer integration for XML to JSON conversion.

Key Components:
    ExpatEventSource: Runs expat and forwards start/text/end events to a target
"""

from .expat_source import ExpatEventSource, XMLInput

__all__ = [
    "ExpatEventSource",
    "XMLInput",
]
