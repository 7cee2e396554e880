"""Scalar value coercion and sanitization for XML to JSON conversion."""

import math
from typing import Any, Callable, Dict, Mapping, Optional, Union

from xml_json_converter.shared.config import CoerceOption, SanitizeOption

Scalar = Union[str, int, float, bool]

# Largest integer a double holds exactly
MAX_SAFE_INTEGER = 2 ** 53 - 1

# Reserved characters escaped by the default sanitizer
SANITIZE_CHARS: Dict[str, str] = {
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "'": "&apos;",
}


def sanitize_value(value: str) -> str:
    """Escape XML reserved characters in a string value."""
    return "".join(SANITIZE_CHARS.get(char, char) for char in value)


def resolve_sanitizer(option: SanitizeOption) -> Optional[Callable[[str], str]]:
    """Resolve the ``sanitize`` option to a transform function, if any."""
    if option is True:
        return sanitize_value
    if callable(option):
        return option
    return None


def parse_number(value: str) -> Optional[Union[int, float]]:
    """Parse a finite decimal number, returning None when not numeric.

    Integral values become ``int`` (``"1e3"`` gives ``1000``) within the
    exactly representable range. NaN, infinities, non-ASCII digits and
    Python-only forms such as ``1_000`` are not considered numbers.
    """
    text = value.strip()
    if not text or "_" in text or not text.isascii():
        return None
    try:
        return int(text, 10)
    except ValueError:
        pass
    try:
        number = float(text)
    except ValueError:
        return None
    if not math.isfinite(number):
        return None
    if number.is_integer() and abs(number) <= MAX_SAFE_INTEGER:
        return int(number)
    return number


class ValueCoercer:
    """Coercion policy applied to attribute values and element text.

    Args:
        coerce: ``False`` to keep strings, ``True`` for default coercion, or a
            mapping of key to function overriding coercion for that key
        sanitize: Optional transform applied to values that remain strings
    """

    def __init__(self, coerce: CoerceOption = False, sanitize: SanitizeOption = False) -> None:
        self.enabled = coerce is True or isinstance(coerce, Mapping)
        self.custom: Mapping[str, Callable[[str], Any]] = (
            coerce if isinstance(coerce, Mapping) else {}
        )
        self.sanitizer = resolve_sanitizer(sanitize)

    def __call__(self, value: str, key: str) -> Any:
        result = self.coerce(value, key)
        if self.sanitizer is not None and isinstance(result, str):
            return self.sanitizer(result)
        return result

    def coerce(self, value: str, key: str) -> Any:
        """Coerce a single string value stored under ``key``."""
        if not self.enabled or not value.strip():
            return value

        custom = self.custom.get(key)
        if custom is not None:
            return custom(value)

        number = parse_number(value)
        if number is not None:
            return number

        lowered = value.lower()
        if lowered == "true":
            return True
        if lowered == "false":
            return False
        return value
