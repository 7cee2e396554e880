"""Shared configuration, error types and logging utilities."""

from .config import (
    ALTERNATE_TEXT_NODE,
    DEFAULT_TEXT_NODE,
    ConfigError,
    ConfigValidationError,
    ToJsonConfig,
    ToXmlConfig,
    resolve_text_node_name,
)
from .errors import ConversionError, ParseError
from .logging import CorrelationLogger, get_logger

__all__ = [
    "ALTERNATE_TEXT_NODE",
    "DEFAULT_TEXT_NODE",
    "ConfigError",
    "ConfigValidationError",
    "ToJsonConfig",
    "ToXmlConfig",
    "resolve_text_node_name",
    "ConversionError",
    "ParseError",
    "CorrelationLogger",
    "get_logger",
]
