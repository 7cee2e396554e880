"""Command-line interface for converting files between XML and JSON."""

from .main import main

__all__ = ["main"]
