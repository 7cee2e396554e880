"""Tree building for XML to JSON conversion.

Key Components:
    TreeBuilder: Builds JSON-compatible nodes from ordered parse events
    ValueCoercer: Coercion policy for attribute values and element text
"""

from .builder import BuildStatistics, Node, TreeBuilder
from .coercion import ValueCoercer, parse_number, sanitize_value

__all__ = [
    "BuildStatistics",
    "Node",
    "TreeBuilder",
    "ValueCoercer",
    "parse_number",
    "sanitize_value",
]
