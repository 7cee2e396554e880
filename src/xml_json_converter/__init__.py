"""XML/JSON converter.

Bidirectional, structure-preserving conversion between XML documents and
JSON-compatible object trees.

Progressive API Disclosure:
- Level 1: Simple functions - to_json(), to_xml()
- Level 2: Reusable converter - XmlJsonConverter class
- Integrations: from_lxml(), to_lxml() for lxml element trees
"""

__version__ = "0.1.0"
__author__ = "XML JSON Converter Team"

# Level 1 and level 2 conversion API
from .api import XmlJsonConverter, from_lxml, to_json, to_lxml, to_xml

# Configuration and errors for advanced usage
from .shared.config import ConfigError, ConfigValidationError, ToJsonConfig, ToXmlConfig
from .shared.errors import ConversionError, ParseError

# Engines for callers driving their own event source
from .serialization import XmlSerializer
from .tree import TreeBuilder

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Level 1: Simple conversion functions
    "to_json",
    "to_xml",

    # Level 2: Reusable converter
    "XmlJsonConverter",

    # lxml integration
    "from_lxml",
    "to_lxml",

    # Configuration
    "ToJsonConfig",
    "ToXmlConfig",

    # Errors
    "ConversionError",
    "ParseError",
    "ConfigError",
    "ConfigValidationError",

    # Engines
    "TreeBuilder",
    "XmlSerializer",
]
