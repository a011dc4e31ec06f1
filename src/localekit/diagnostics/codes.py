"""Diagnostic codes and data structures.

Defines error codes, source spans, and diagnostic messages.
Python 3.13+. Zero external dependencies.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Literal

__all__ = [
    "Diagnostic",
    "DiagnosticCode",
    "SourceSpan",
]


class DiagnosticCode(Enum):
    """Error codes with unique identifiers.

    Organized by category:
        1000-1999: Locale tag errors
        2000-2999: Lookup errors (missing resources)
        3000-3999: Template syntax errors
        4000-4999: Render errors (arguments, formatting)
    """

    # Locale tag errors (1000-1999)
    TAG_EMPTY = 1001
    TAG_INVALID_LANGUAGE = 1002
    TAG_INVALID_SUBTAG = 1003

    # Lookup errors (2000-2999)
    RESOURCE_NOT_FOUND = 2001
    NO_LOCALE_AVAILABLE = 2002

    # Template syntax errors (3000-3999)
    UNEXPECTED_EOF = 3001
    UNMATCHED_BRACE = 3002
    INVALID_ARGUMENT_NAME = 3003
    UNKNOWN_ARGUMENT_TYPE = 3004
    UNKNOWN_PLURAL_KEYWORD = 3005
    MISSING_OTHER_BRANCH = 3006
    DUPLICATE_SELECTOR = 3007
    INVALID_OFFSET = 3008
    INVALID_EXPLICIT_VALUE = 3009
    EXPECTED_SUB_MESSAGE = 3010
    INVALID_CHOICE = 3011
    NESTING_DEPTH_EXCEEDED = 3012
    UNEXPECTED_CHARACTER = 3013
    UNSUPPORTED_STYLE = 3014

    # Render errors (4000-4999)
    ARGUMENT_NOT_PROVIDED = 4001
    TYPE_MISMATCH = 4002
    NO_MATCHING_BRANCH = 4003
    FORMATTING_FAILED = 4004


@dataclass(frozen=True, slots=True)
class SourceSpan:
    """Template location for error reporting.

    Note:
        Python strings measure positions in characters (Unicode code points),
        not bytes. For multi-byte UTF-8 characters, character offset differs
        from byte offset.

    Attributes:
        start: Starting character offset (0-indexed)
        end: Ending character offset (exclusive)
        line: Line number (1-indexed)
        column: Column number (1-indexed)
    """

    start: int
    end: int
    line: int
    column: int

    def __post_init__(self) -> None:
        """Validate SourceSpan invariants.

        Raises:
            ValueError: If start is negative, end precedes start, line is
                less than 1, or column is less than 1.
        """
        if self.start < 0:
            msg = f"SourceSpan.start must be >= 0, got {self.start}"
            raise ValueError(msg)
        if self.end < self.start:
            msg = f"SourceSpan.end ({self.end}) must be >= start ({self.start})"
            raise ValueError(msg)
        if self.line < 1:
            msg = f"SourceSpan.line must be >= 1 (1-indexed), got {self.line}"
            raise ValueError(msg)
        if self.column < 1:
            msg = f"SourceSpan.column must be >= 1 (1-indexed), got {self.column}"
            raise ValueError(msg)


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """Structured diagnostic message.

    Inspired by Rust compiler diagnostics. Provides rich error information
    for both humans and tools.

    Attributes:
        code: Unique error code
        message: Human-readable error description
        span: Template location (None for non-syntax errors)
        hint: Suggestion for fixing the error
        argument_name: Argument name that caused the error (render errors)
        expected_type: Expected value kind (render errors)
        received_type: Actual value kind received (render errors)
        locale_code: Locale in effect when the error occurred
        severity: Error severity level
    """

    code: DiagnosticCode
    message: str
    span: SourceSpan | None = None
    hint: str | None = None
    argument_name: str | None = None
    expected_type: str | None = None
    received_type: str | None = None
    locale_code: str | None = None
    severity: Literal["error", "warning"] = "error"

    def __str__(self) -> str:
        """Return human-readable error description."""
        return self.message

    def format_error(self) -> str:
        """Format diagnostic like Rust compiler.

        Delegates to DiagnosticFormatter for consistent output.

        Example output:
            error[UNMATCHED_BRACE]: Unmatched '{' in template
              --> line 1, column 7
              = help: Close the argument with '}' or quote it as '{'

        Returns:
            Formatted error message
        """
        from .formatter import DiagnosticFormatter  # noqa: PLC0415 - circular

        return DiagnosticFormatter().format(self)
