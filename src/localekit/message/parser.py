"""Recursive-descent parser for ICU MessageFormat templates.

Grammar (whitespace is allowed around argument syntax):

    message      := (text | '#' | argument)*
    argument     := '{' name '}'
                  | '{' name ',' ('number' | 'date' | 'time') [',' style] '}'
                  | '{' name ',' ('plural' | 'selectordinal') ',' [offset] plural_branch+ '}'
                  | '{' name ',' 'select' ',' select_branch+ '}'
                  | '{' name ',' 'choice' ',' choice_branch ('|' choice_branch)* '}'
    name         := identifier | ASCII digits (positional, no leading zero)
    offset       := 'offset:' number
    plural_branch:= ('=' number | category) '{' message '}'
    select_branch:= keyword '{' message '}'
    choice_branch:= number ('#' | '≤' | '<') message

Apostrophe quoting:
    ''           literal apostrophe (inside or outside quoted text)
    '{ '} '#     start quoted text (``#`` only inside plural branches, ``|``
                 only inside choice branches); quoted text ends at the next
                 single apostrophe, or at the end of the template
    '            any other apostrophe is literal

``#`` is a placeholder only directly inside a plural/selectordinal branch.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import re
from decimal import Decimal
from types import MappingProxyType

from localekit.constants import MAX_DEPTH
from localekit.diagnostics import Diagnostic, ErrorTemplate, TemplateSyntaxError
from localekit.enums import ArgumentType, PluralCategory, PluralKind
from localekit.message.ast import (
    Argument,
    ChoiceBranch,
    ChoiceClause,
    CompiledMessage,
    Literal,
    Part,
    Pattern,
    PluralClause,
    PoundSign,
    SelectClause,
)
from localekit.message.cursor import Cursor, ParseResult

__all__ = ["MessageParser", "parse_template"]

_NUMBER = re.compile(r"-?[0-9]+(?:\.[0-9]+)?")
_INFINITY = {"∞": Decimal("Infinity"), "-∞": Decimal("-Infinity")}
_OFFSET = "offset:"
_CATEGORY_NAMES = frozenset(PluralCategory)
_TOKEN_STOP = frozenset("{}")


def parse_template(template: str, *, max_depth: int = MAX_DEPTH) -> CompiledMessage:
    """Compile a template string.

    Args:
        template: ICU MessageFormat template
        max_depth: Maximum clause nesting depth

    Returns:
        Immutable compiled message

    Raises:
        TemplateSyntaxError: If the template is malformed

    Example:
        >>> [type(part).__name__ for part in parse_template("Hello, {name}!").parts]
        ['Literal', 'Argument', 'Literal']
    """
    return MessageParser(template, max_depth=max_depth).parse()


class MessageParser:
    """Parser for one template.

    Stateless apart from the source text; every parse method takes an
    immutable Cursor and returns a ParseResult with the advanced cursor.
    """

    __slots__ = ("_max_depth", "_source")

    def __init__(self, source: str, *, max_depth: int = MAX_DEPTH) -> None:
        self._source = source
        self._max_depth = max_depth

    def parse(self) -> CompiledMessage:
        """Parse the whole template.

        Raises:
            TemplateSyntaxError: If the template is malformed
        """
        result = self._parse_pattern(Cursor(self._source, 0), 0, pound=False, choice=False)
        cursor = result.cursor
        if not cursor.is_eof:
            # Top-level patterns only stop early at an unmatched '}'
            raise self._fail(ErrorTemplate.unmatched_brace(cursor.span()))
        return CompiledMessage(source=self._source, parts=result.value)

    def _fail(self, diagnostic: Diagnostic) -> TemplateSyntaxError:
        return TemplateSyntaxError(diagnostic, template=self._source)

    def _eof(self, cursor: Cursor, expected: str) -> TemplateSyntaxError:
        return self._fail(ErrorTemplate.unexpected_eof(cursor.span(), expected))

    # ------------------------------------------------------------------
    # Message text
    # ------------------------------------------------------------------

    def _parse_pattern(
        self, cursor: Cursor, depth: int, *, pound: bool, choice: bool
    ) -> ParseResult[Pattern]:
        """Parse text and arguments up to '}' (or '|' in choice branches).

        The terminator is not consumed.
        """
        parts: list[Part] = []
        text: list[str] = []

        def flush() -> None:
            if text:
                parts.append(Literal("".join(text)))
                text.clear()

        while not cursor.is_eof:
            ch = cursor.current
            if ch == "'":
                quoted = self._parse_apostrophe(cursor, pound=pound, choice=choice)
                text.append(quoted.value)
                cursor = quoted.cursor
            elif ch == "}" or (choice and ch == "|"):
                break
            elif ch == "{":
                flush()
                argument = self._parse_argument(cursor, depth)
                parts.append(argument.value)
                cursor = argument.cursor
            elif pound and ch == "#":
                flush()
                parts.append(PoundSign())
                cursor = cursor.advance()
            else:
                text.append(ch)
                cursor = cursor.advance()

        flush()
        return ParseResult(tuple(parts), cursor)

    def _parse_apostrophe(self, cursor: Cursor, *, pound: bool, choice: bool) -> ParseResult[str]:
        nxt = cursor.peek(1)
        if nxt == "'":
            return ParseResult("'", cursor.advance(2))

        special = "{}" + ("#" if pound else "") + ("|" if choice else "")
        if nxt is None or nxt not in special:
            return ParseResult("'", cursor.advance())

        # Quoted run: ends at the next single apostrophe or at end of input
        cursor = cursor.advance()
        chars: list[str] = []
        while not cursor.is_eof:
            ch = cursor.current
            if ch == "'":
                if cursor.peek(1) == "'":
                    chars.append("'")
                    cursor = cursor.advance(2)
                    continue
                return ParseResult("".join(chars), cursor.advance())
            chars.append(ch)
            cursor = cursor.advance()
        return ParseResult("".join(chars), cursor)

    def _parse_sub_message(
        self, cursor: Cursor, depth: int, *, pound: bool
    ) -> ParseResult[Pattern]:
        """Parse '{' message '}' for a plural or select branch."""
        if cursor.is_eof:
            raise self._eof(cursor, "'{'")
        if cursor.current != "{":
            raise self._fail(ErrorTemplate.expected_sub_message(cursor.span()))
        if depth > self._max_depth:
            raise self._fail(ErrorTemplate.nesting_depth_exceeded(self._max_depth, cursor.span()))

        result = self._parse_pattern(cursor.advance(), depth, pound=pound, choice=False)
        if result.cursor.is_eof:
            raise self._eof(result.cursor, "'}'")
        return ParseResult(result.value, result.cursor.advance())

    # ------------------------------------------------------------------
    # Arguments
    # ------------------------------------------------------------------

    def _parse_argument(self, cursor: Cursor, depth: int) -> ParseResult[Part]:
        """Parse an argument starting at '{' through its closing '}'."""
        start = cursor
        name_result = self._parse_name(cursor.advance().skip_whitespace())
        name = name_result.value
        cursor = name_result.cursor.skip_whitespace()

        if cursor.is_eof:
            raise self._eof(cursor, "'}' or ','")
        if cursor.current == "}":
            return ParseResult(Argument(name), cursor.advance())
        if cursor.current != ",":
            raise self._fail(
                ErrorTemplate.unexpected_character(cursor.current, "',' or '}'", cursor.span())
            )

        cursor = cursor.advance().skip_whitespace()
        keyword_start = cursor
        while not cursor.is_eof and cursor.current.isalpha():
            cursor = cursor.advance()
        keyword = keyword_start.slice_to(cursor.pos)
        if not keyword:
            if cursor.is_eof:
                raise self._eof(cursor, "argument type")
            raise self._fail(
                ErrorTemplate.unexpected_character(cursor.current, "argument type", cursor.span())
            )
        cursor = cursor.skip_whitespace()

        match keyword:
            case "number" | "date" | "time":
                return self._parse_simple(name, ArgumentType(keyword), cursor)
            case "plural":
                return self._parse_plural(name, PluralKind.CARDINAL, cursor, depth, start)
            case "selectordinal":
                return self._parse_plural(name, PluralKind.ORDINAL, cursor, depth, start)
            case "select":
                return self._parse_select(name, cursor, depth)
            case "choice":
                return self._parse_choice(name, cursor, depth)
            case _:
                raise self._fail(
                    ErrorTemplate.unknown_argument_type(
                        keyword, keyword_start.span(keyword_start.pos + len(keyword))
                    )
                )

    def _parse_name(self, cursor: Cursor) -> ParseResult[str]:
        start = cursor
        while not cursor.is_eof and (cursor.current.isalnum() or cursor.current == "_"):
            cursor = cursor.advance()

        # Swallow the rest of a malformed token ({user-name}) for the diagnostic
        end = cursor
        while not end.is_eof and not end.current.isspace() and end.current not in ",{}":
            end = end.advance()

        name = start.slice_to(end.pos)
        if not name and end.is_eof:
            raise self._eof(end, "argument name")
        if (
            not name
            or end.pos != cursor.pos
            or (name[0].isdigit() and not _is_positional(name))
        ):
            raise self._fail(ErrorTemplate.invalid_argument_name(name, start.span(end.pos)))
        return ParseResult(name, cursor)

    def _expect_comma(self, cursor: Cursor) -> Cursor:
        if cursor.is_eof:
            raise self._eof(cursor, "','")
        if cursor.current != ",":
            raise self._fail(
                ErrorTemplate.unexpected_character(cursor.current, "','", cursor.span())
            )
        return cursor.advance().skip_whitespace()

    def _read_token(self, cursor: Cursor) -> ParseResult[str]:
        start = cursor
        while (
            not cursor.is_eof
            and not cursor.current.isspace()
            and cursor.current not in _TOKEN_STOP
        ):
            cursor = cursor.advance()
        return ParseResult(start.slice_to(cursor.pos), cursor)

    def _parse_simple(self, name: str, arg_type: ArgumentType, cursor: Cursor) -> ParseResult[Part]:
        """Parse the rest of {name, number|date|time[, style]} after the type."""
        if cursor.is_eof:
            raise self._eof(cursor, "'}' or ','")
        if cursor.current == "}":
            return ParseResult(Argument(name, arg_type), cursor.advance())
        if cursor.current != ",":
            raise self._fail(
                ErrorTemplate.unexpected_character(cursor.current, "',' or '}'", cursor.span())
            )

        style_start = cursor.advance().skip_whitespace()
        cursor = style_start
        nesting = 0
        while True:
            if cursor.is_eof:
                raise self._eof(cursor, "'}'")
            ch = cursor.current
            if ch == "'":
                # Quoted pattern text is passed through to Babel verbatim
                closing = self._source.find("'", cursor.pos + 1)
                if closing < 0:
                    raise self._eof(Cursor(self._source, len(self._source)), "closing apostrophe")
                cursor = Cursor(self._source, closing + 1)
                continue
            if ch == "{":
                nesting += 1
            elif ch == "}":
                if nesting == 0:
                    break
                nesting -= 1
            cursor = cursor.advance()

        style = style_start.slice_to(cursor.pos).strip()
        if not style:
            raise self._fail(
                ErrorTemplate.unexpected_character("}", "argument style", cursor.span())
            )
        if style.startswith("::"):
            raise self._fail(ErrorTemplate.unsupported_style(style, style_start.span(cursor.pos)))
        return ParseResult(Argument(name, arg_type, style), cursor.advance())

    # ------------------------------------------------------------------
    # Clauses
    # ------------------------------------------------------------------

    def _parse_plural(
        self,
        name: str,
        kind: PluralKind,
        cursor: Cursor,
        depth: int,
        start: Cursor,
    ) -> ParseResult[Part]:
        cursor = self._expect_comma(cursor)

        offset = Decimal(0)
        if self._source.startswith(_OFFSET, cursor.pos):
            offset_start = cursor
            cursor = cursor.advance(len(_OFFSET)).skip_whitespace()
            found = _NUMBER.match(self._source, cursor.pos)
            token = self._read_token(cursor)
            if found is None or found.end() != token.cursor.pos:
                text = offset_start.slice_to(token.cursor.pos)
                raise self._fail(
                    ErrorTemplate.invalid_offset(text, offset_start.span(token.cursor.pos))
                )
            offset = Decimal(found.group())
            cursor = token.cursor.skip_whitespace()

        branches: dict[PluralCategory, Pattern] = {}
        explicit: dict[Decimal, Pattern] = {}

        while True:
            if cursor.is_eof:
                raise self._eof(cursor, "plural selector or '}'")
            if cursor.current == "}":
                cursor = cursor.advance()
                break

            selector_start = cursor
            token = self._read_token(cursor)
            selector = token.value
            span = selector_start.span(token.cursor.pos)

            if not selector:
                raise self._fail(
                    ErrorTemplate.unexpected_character(cursor.current, "plural selector", span)
                )
            explicit_value: Decimal | None = None
            if selector.startswith("="):
                if _NUMBER.fullmatch(selector, 1) is None:
                    raise self._fail(ErrorTemplate.invalid_explicit_value(selector, span))
                explicit_value = Decimal(selector[1:])
                if explicit_value in explicit:
                    raise self._fail(ErrorTemplate.duplicate_selector(selector, span))
            elif selector.startswith(_OFFSET):
                raise self._fail(ErrorTemplate.invalid_offset(selector, span))
            elif selector not in _CATEGORY_NAMES:
                raise self._fail(ErrorTemplate.unknown_plural_keyword(selector, span))
            elif PluralCategory(selector) in branches:
                raise self._fail(ErrorTemplate.duplicate_selector(selector, span))

            sub = self._parse_sub_message(token.cursor.skip_whitespace(), depth + 1, pound=True)
            if explicit_value is not None:
                explicit[explicit_value] = sub.value
            else:
                branches[PluralCategory(selector)] = sub.value
            cursor = sub.cursor.skip_whitespace()

        if PluralCategory.OTHER not in branches:
            raise self._fail(ErrorTemplate.missing_other_branch(name, start.span(cursor.pos)))

        clause = PluralClause(
            name=name,
            kind=kind,
            offset=offset,
            branches=MappingProxyType(branches),
            explicit_branches=MappingProxyType(explicit),
        )
        return ParseResult(clause, cursor)

    def _parse_select(self, name: str, cursor: Cursor, depth: int) -> ParseResult[Part]:
        cursor = self._expect_comma(cursor)
        branches: dict[str, Pattern] = {}

        while True:
            if cursor.is_eof:
                raise self._eof(cursor, "select keyword or '}'")
            if cursor.current == "}":
                if not branches:
                    raise self._fail(
                        ErrorTemplate.unexpected_character("}", "select keyword", cursor.span())
                    )
                cursor = cursor.advance()
                break

            selector_start = cursor
            token = self._read_token(cursor)
            selector = token.value
            span = selector_start.span(token.cursor.pos)
            if not selector:
                raise self._fail(
                    ErrorTemplate.unexpected_character(cursor.current, "select keyword", span)
                )
            if selector in branches:
                raise self._fail(ErrorTemplate.duplicate_selector(selector, span))

            sub = self._parse_sub_message(token.cursor.skip_whitespace(), depth + 1, pound=False)
            branches[selector] = sub.value
            cursor = sub.cursor.skip_whitespace()

        clause = SelectClause(
            name=name,
            branches=MappingProxyType(branches),
            default=branches.get("other"),
        )
        return ParseResult(clause, cursor)

    def _parse_choice(self, name: str, cursor: Cursor, depth: int) -> ParseResult[Part]:
        cursor = self._expect_comma(cursor)
        branches: list[ChoiceBranch] = []

        while True:
            cursor = cursor.skip_whitespace()
            if cursor.is_eof:
                raise self._eof(cursor, "choice limit")

            limit_start = cursor
            found = _NUMBER.match(self._source, cursor.pos)
            if found is not None:
                limit = Decimal(found.group())
                cursor = cursor.advance(len(found.group()))
            elif self._source.startswith("-∞", cursor.pos):
                limit = _INFINITY["-∞"]
                cursor = cursor.advance(2)
            elif cursor.current == "∞":
                limit = _INFINITY["∞"]
                cursor = cursor.advance()
            else:
                raise self._fail(
                    ErrorTemplate.invalid_choice("expected a number", limit_start.span())
                )

            cursor = cursor.skip_whitespace()
            if cursor.is_eof:
                raise self._eof(cursor, "'#', '≤' or '<'")
            if cursor.current in "#≤":
                inclusive = True
            elif cursor.current == "<":
                inclusive = False
            else:
                raise self._fail(
                    ErrorTemplate.invalid_choice(
                        "expected '#', '≤' or '<' after the limit", cursor.span()
                    )
                )

            if branches:
                previous = branches[-1]
                if (limit, not inclusive) <= (previous.limit, not previous.inclusive):
                    raise self._fail(
                        ErrorTemplate.invalid_choice(
                            "limits must be in ascending order", limit_start.span(cursor.pos)
                        )
                    )

            if depth + 1 > self._max_depth:
                raise self._fail(
                    ErrorTemplate.nesting_depth_exceeded(self._max_depth, cursor.span())
                )
            sub = self._parse_pattern(cursor.advance(), depth + 1, pound=False, choice=True)
            branches.append(ChoiceBranch(limit=limit, inclusive=inclusive, pattern=sub.value))
            cursor = sub.cursor

            if cursor.is_eof:
                raise self._eof(cursor, "'|' or '}'")
            if cursor.current == "|":
                cursor = cursor.advance()
                continue
            # Only '}' remains: choice patterns stop at '|' or '}'
            return ParseResult(ChoiceClause(name=name, branches=tuple(branches)), cursor.advance())


def _is_positional(name: str) -> bool:
    return name.isascii() and name.isdigit() and (name == "0" or not name.startswith("0"))
