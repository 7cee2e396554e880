"""Tests for value coercion and sanitization."""

import pytest

from xml_json_converter.tree.coercion import (
    ValueCoercer,
    parse_number,
    resolve_sanitizer,
    sanitize_value,
)


class TestParseNumber:
    """Test finite number parsing."""

    @pytest.mark.parametrize("value, expected", [
        ("123", 123),
        ("-7", -7),
        (" 12 ", 12),
        ("104.95", 104.95),
        ("1e3", 1000),
        ("1.0", 1),
        ("1e300", 1e300),
        (".5", 0.5),
    ])
    def test_numeric_values(self, value: str, expected: float) -> None:
        """Test decimal integers and floats are parsed."""
        result = parse_number(value)
        assert result == expected
        assert type(result) is type(expected)

    @pytest.mark.parametrize("value", [
        "", "abc", "12abc", "nan", "inf", "-Infinity", "1_000",
        "\u0661\u0662\u0663", "\uff11\uff12",
    ])
    def test_non_numeric_values(self, value: str) -> None:
        """Test non-finite and non-numeric strings are rejected."""
        assert parse_number(value) is None


class TestValueCoercer:
    """Test the coercion policy."""

    def test_disabled_keeps_strings(self) -> None:
        """Test coercion disabled returns values unchanged."""
        coercer = ValueCoercer(False)
        assert coercer("123", "v") == "123"
        assert coercer("true", "v") == "true"

    def test_booleans_case_insensitive(self) -> None:
        """Test true and false are matched case-insensitively."""
        coercer = ValueCoercer(True)
        assert coercer("TRUE", "v") is True
        assert coercer("False", "v") is False

    def test_blank_value_never_coerced(self) -> None:
        """Test empty and whitespace-only values are returned unchanged."""
        coercer = ValueCoercer(True)
        assert coercer("", "v") == ""
        assert coercer("  ", "v") == "  "

    def test_other_strings_unchanged(self) -> None:
        """Test values that are neither numbers nor booleans stay strings."""
        assert ValueCoercer(True)("yes", "v") == "yes"

    def test_custom_function_receives_raw_value(self) -> None:
        """Test a per-key function gets the raw string and its result is kept."""
        calls = []

        def upper(value: str) -> str:
            calls.append(value)
            return value.upper()

        coercer = ValueCoercer({"code": upper})
        assert coercer("  ", "code") == "  "
        assert coercer("ab", "code") == "AB"
        assert coercer("12", "other") == 12
        assert calls == ["ab"]

    def test_empty_mapping_enables_default_coercion(self) -> None:
        """Test a mapping without functions still enables coercion."""
        assert ValueCoercer({})("42", "v") == 42

    def test_custom_function_errors_propagate(self) -> None:
        """Test exceptions from custom functions are not swallowed."""
        def broken(value: str) -> str:
            raise RuntimeError("bad value")

        with pytest.raises(RuntimeError, match="bad value"):
            ValueCoercer({"v": broken})("x", "v")

    def test_sanitize_applies_to_remaining_strings(self) -> None:
        """Test sanitize escapes strings but leaves coerced values alone."""
        coercer = ValueCoercer(True, sanitize=True)
        assert coercer("a<b", "v") == "a&lt;b"
        assert coercer("5", "v") == 5


class TestSanitize:
    """Test the default sanitizer and sanitize option resolution."""

    def test_sanitize_value_escapes_reserved_characters(self) -> None:
        """Test all reserved characters are replaced by entities."""
        assert sanitize_value("<a href=\"x\">'&'</a>") == (
            "&lt;a href=&quot;x&quot;&gt;&apos;&amp;&apos;&lt;/a&gt;"
        )

    def test_resolve_sanitizer(self) -> None:
        """Test option resolution for bool and callable values."""
        assert resolve_sanitizer(False) is None
        assert resolve_sanitizer(True) is sanitize_value
        assert resolve_sanitizer(str.upper) is str.upper
