"""Immutable cursor infrastructure for template parsing.

Implements the immutable cursor pattern: every advance() returns a new
cursor, EOF is a state (is_eof) rather than a return value, and line:column
is only computed when an error is reported.

Python 3.13+. Zero external dependencies.
"""

from dataclasses import dataclass

from localekit.diagnostics import SourceSpan

__all__ = ["Cursor", "ParseResult"]


@dataclass(frozen=True, slots=True)
class Cursor:
    """Immutable source position tracker.

    Example:
        >>> cursor = Cursor("{n}", 0)
        >>> cursor.current
        '{'
        >>> cursor.advance().current
        'n'
        >>> cursor.current  # Original unchanged
        '{'
        >>> Cursor("hi", 2).is_eof
        True
    """

    source: str
    pos: int

    @property
    def is_eof(self) -> bool:
        """Check if at end of input."""
        return self.pos >= len(self.source)

    @property
    def current(self) -> str:
        """Get current character.

        Raises:
            EOFError: If at end of input
        """
        if self.is_eof:
            msg = f"Unexpected EOF at position {self.pos}"
            raise EOFError(msg)
        return self.source[self.pos]

    def peek(self, offset: int = 0) -> str | None:
        """Peek at character with offset without advancing.

        Returns:
            Character at position + offset, or None if beyond EOF
        """
        target_pos = self.pos + offset
        if target_pos >= len(self.source):
            return None
        return self.source[target_pos]

    def advance(self, count: int = 1) -> "Cursor":
        """Return new cursor advanced by count positions."""
        return Cursor(self.source, min(self.pos + count, len(self.source)))

    def slice_to(self, end_pos: int) -> str:
        """Extract source slice from current position to end_pos."""
        return self.source[self.pos : end_pos]

    def skip_whitespace(self) -> "Cursor":
        """Skip Unicode whitespace (allowed around argument syntax).

        Example:
            >>> Cursor("{ n , number}", 1).skip_whitespace().current
            'n'
        """
        c = self
        while not c.is_eof and c.current.isspace():
            c = c.advance()
        return c

    def compute_line_col(self) -> tuple[int, int]:
        """Compute line and column for current position.

        Returns:
            (line, column) tuple (1-indexed, like text editors)

        Performance:
            O(n) where n = current position. Only call for error reporting.

        Example:
            >>> Cursor("a\\nbc", 3).compute_line_col()
            (2, 2)
        """
        line = self.source.count("\n", 0, self.pos) + 1
        last_newline = self.source.rfind("\n", 0, self.pos)
        col = self.pos - last_newline if last_newline >= 0 else self.pos + 1
        return (line, col)

    def span(self, end: int | None = None) -> SourceSpan:
        """SourceSpan from the current position to ``end`` (default: one char)."""
        line, column = self.compute_line_col()
        if end is None:
            end = min(self.pos + 1, len(self.source))
        return SourceSpan(start=self.pos, end=max(end, self.pos), line=line, column=column)


@dataclass(frozen=True, slots=True)
class ParseResult[T]:
    """Parser result containing parsed value and new cursor position.

    Example:
        >>> cursor = Cursor("abc", 0)
        >>> result = ParseResult("a", cursor.advance())
        >>> result.value, result.cursor.pos
        ('a', 1)
    """

    value: T
    cursor: Cursor
