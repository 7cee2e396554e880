"""Exception types raised by XML/JSON conversion operations."""

from typing import Dict, Optional


class ConversionError(Exception):
    """Base exception for all conversion errors."""


class ParseError(ConversionError):
    """Raised when the XML tokenizer reports malformed markup.

    Carries the tokenizer's diagnostic message and, where the tokenizer
    reports one, the position of the failure.
    """

    def __init__(
        self,
        message: str,
        line: Optional[int] = None,
        column: Optional[int] = None,
        code: Optional[int] = None
    ) -> None:
        detail = message
        if line is not None:
            detail = f"{message} (line {line}, column {column})"
        super().__init__(f"There are errors in your xml file: {detail}")
        self.message = message
        self.line = line
        self.column = column
        self.code = code

    @property
    def position(self) -> Optional[Dict[str, Optional[int]]]:
        """Position of the failure as a ``{"line", "column"}`` mapping."""
        if self.line is None:
            return None
        return {"line": self.line, "column": self.column}
