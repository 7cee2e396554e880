"""Configuration classes for XML/JSON conversion.

Both conversion directions are configured through immutable dataclasses that
validate themselves on construction. They can also be built from the
camelCase option mappings used by other xml2json implementations
(``{"object": True, "arrayNotation": ["item"]}``) via ``from_dict``.
"""

import json
from dataclasses import dataclass, fields, replace
from typing import Any, Callable, Dict, FrozenSet, Iterable, List, Mapping, Optional, Union

from .errors import ConversionError

DEFAULT_TEXT_NODE = "$t"
ALTERNATE_TEXT_NODE = "_t"

TextNodeOption = Union[bool, str]
CoerceOption = Union[None, bool, Mapping[str, Callable[[str], Any]]]
ArrayNotationOption = Union[bool, Iterable[str]]
SanitizeOption = Union[bool, Callable[[str], str]]

# Option names accepted by from_dict in addition to the field names
_OPTION_ALIASES = {
    "object": "as_object",
    "alternateTextNode": "alternate_text_node",
    "arrayNotation": "array_notation",
    "ignoreNull": "ignore_null",
    "correlationId": "correlation_id",
}


class ConfigError(ConversionError, ValueError):
    """Base exception for configuration errors."""


class ConfigValidationError(ConfigError):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field_name = field_name
        self.suggestions = suggestions or []


def resolve_text_node_name(option: TextNodeOption) -> str:
    """Resolve the ``alternateTextNode`` option to the reserved text key.

    Args:
        option: ``False`` for ``"$t"``, ``True`` for ``"_t"``, or a custom key

    Returns:
        Key under which element text is stored
    """
    if isinstance(option, str):
        return option
    return ALTERNATE_TEXT_NODE if option else DEFAULT_TEXT_NODE


def _validate_text_node(option: Any) -> None:
    if isinstance(option, bool):
        return
    if not isinstance(option, str):
        raise ConfigValidationError(
            "alternate_text_node must be a bool or a string",
            field_name="alternate_text_node",
        )
    if not option:
        raise ConfigValidationError(
            "alternate_text_node cannot be an empty string",
            field_name="alternate_text_node",
            suggestions=["Use False for the default '$t' key"],
        )


def _validate_sanitize(option: Any) -> None:
    if not isinstance(option, bool) and not callable(option):
        raise ConfigValidationError(
            "sanitize must be a bool or a callable taking and returning a string",
            field_name="sanitize",
        )


def _validate_flags(config: Any, *names: str) -> None:
    for name in names:
        if not isinstance(getattr(config, name), bool):
            raise ConfigValidationError(
                f"{name} must be a bool, got {type(getattr(config, name)).__name__}",
                field_name=name,
            )


def _normalize_options(cls: type, data: Mapping[str, Any]) -> Dict[str, Any]:
    """Map option names (camelCase aliases or field names) onto field names."""
    known = {f.name for f in fields(cls)}
    normalized: Dict[str, Any] = {}
    for key, value in data.items():
        field_name = _OPTION_ALIASES.get(key, key)
        if field_name not in known:
            raise ConfigValidationError(
                f"Unknown option '{key}' for {cls.__name__}",
                field_name=key,
                suggestions=sorted(known),
            )
        normalized[field_name] = value
    return normalized


class _ConfigMixin:
    """Shared dict/JSON conversion helpers for the conversion configs."""

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> Any:
        """Create configuration from an option mapping.

        Args:
            data: Options keyed by field name or camelCase option name

        Returns:
            Configuration instance
        """
        return cls(**_normalize_options(cls, data or {}))

    def override(self, **kwargs: Any) -> Any:
        """Create a new configuration with specific overrides.

        Example:
            >>> config = ToJsonConfig()
            >>> config.override(reversible=True, arrayNotation=["item"]).reversible
            True
        """
        return replace(self, **_normalize_options(type(self), kwargs))

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to a JSON-compatible dictionary.

        Callables (custom coercion or sanitize functions) are represented by
        their qualified names.
        """
        def _plain(value: Any) -> Any:
            if isinstance(value, (frozenset, set)):
                return sorted(value)
            if isinstance(value, Mapping):
                return {key: _plain(item) for key, item in value.items()}
            if callable(value):
                return getattr(value, "__qualname__", repr(value))
            return value

        return {f.name: _plain(getattr(self, f.name)) for f in fields(self)}

    def to_json(self, indent: int = 2) -> str:
        """Convert configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)


@dataclass(frozen=True)
class ToJsonConfig(_ConfigMixin):
    """Options for XML to JSON conversion.

    Attributes:
        as_object: Return the node itself instead of JSON text
        reversible: Keep text-only elements as ``{text_node: value}`` mappings
        alternate_text_node: ``False`` → ``"$t"``, ``True`` → ``"_t"``, or a custom key
        coerce: ``True`` for default coercion, or a mapping of per-key functions
            (``None`` is treated as ``False``)
        array_notation: ``True`` to make every element an array, or names to force
        trim: Strip surrounding whitespace from text before coercion
        sanitize: Transform applied to string values, ``True`` for XML escaping
        correlation_id: Correlation ID attached to log records
    """

    as_object: bool = False
    reversible: bool = False
    alternate_text_node: TextNodeOption = False
    coerce: CoerceOption = False
    array_notation: Union[bool, FrozenSet[str]] = False
    trim: bool = True
    sanitize: SanitizeOption = False
    correlation_id: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate options and normalize ``coerce`` and ``array_notation``."""
        _validate_flags(self, "as_object", "reversible", "trim")
        _validate_text_node(self.alternate_text_node)
        _validate_sanitize(self.sanitize)

        if self.coerce is None:
            object.__setattr__(self, "coerce", False)

        if isinstance(self.coerce, Mapping):
            for key, func in self.coerce.items():
                if not callable(func):
                    raise ConfigValidationError(
                        f"coerce['{key}'] must be callable",
                        field_name="coerce",
                    )
        elif not isinstance(self.coerce, bool):
            raise ConfigValidationError(
                "coerce must be a bool or a mapping of key to function",
                field_name="coerce",
            )

        notation = self.array_notation
        if isinstance(notation, str):
            raise ConfigValidationError(
                "array_notation must be a bool or a list of element names",
                field_name="array_notation",
                suggestions=[f"Use ['{notation}'] to force a single element name"],
            )
        if not isinstance(notation, bool):
            try:
                names = frozenset(notation)
            except TypeError as e:
                raise ConfigValidationError(
                    "array_notation must be a bool or a list of element names",
                    field_name="array_notation",
                ) from e
            object.__setattr__(self, "array_notation", names)

    @property
    def text_node_name(self) -> str:
        """Key under which element text is stored."""
        return resolve_text_node_name(self.alternate_text_node)

    @property
    def array_mode(self) -> bool:
        """Whether every element is represented as an array."""
        return self.array_notation is True

    @property
    def force_arrays(self) -> FrozenSet[str]:
        """Element names always represented as arrays."""
        if isinstance(self.array_notation, frozenset):
            return self.array_notation
        return frozenset()


@dataclass(frozen=True)
class ToXmlConfig(_ConfigMixin):
    """Options for JSON to XML conversion.

    Attributes:
        ignore_null: Omit keys whose value is ``None`` instead of writing empty elements
        alternate_text_node: Key holding element text (same rules as ToJsonConfig)
        sanitize: Transform applied to attribute values and text in place of
            the default markup escaping
        correlation_id: Correlation ID attached to log records
    """

    ignore_null: bool = False
    alternate_text_node: TextNodeOption = False
    sanitize: SanitizeOption = False
    correlation_id: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate options."""
        _validate_flags(self, "ignore_null")
        _validate_text_node(self.alternate_text_node)
        _validate_sanitize(self.sanitize)

    @property
    def text_node_name(self) -> str:
        """Key whose values are written as element text."""
        return resolve_text_node_name(self.alternate_text_node)
