"""Compiled message tree.

A template compiles to an immutable tree of parts. Literal text has its
apostrophe quoting already resolved, so rendering never re-inspects the
source.

    "You have {n, plural, =0{no messages} one{# message} other{# messages}}."

    CompiledMessage(parts=(
        Literal("You have "),
        PluralClause(name="n", kind=CARDINAL, offset=0,
                     explicit_branches={0: (Literal("no messages"),)},
                     branches={ONE: (PoundSign(), Literal(" message")),
                               OTHER: (PoundSign(), Literal(" messages"))}),
        Literal("."),
    ))

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from decimal import Decimal
from types import MappingProxyType

from localekit.enums import ArgumentType, PluralCategory, PluralKind

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Leaf parts
    "Literal",
    "PoundSign",
    "Argument",
    # Clauses
    "PluralClause",
    "SelectClause",
    "ChoiceBranch",
    "ChoiceClause",
    # Containers
    "Part",
    "Pattern",
    "CompiledMessage",
]


@dataclass(frozen=True, slots=True)
class Literal:
    """Literal text, emitted unchanged."""

    text: str


@dataclass(frozen=True, slots=True)
class PoundSign:
    """The ``#`` placeholder of a plural branch (offset-adjusted value)."""


@dataclass(frozen=True, slots=True)
class Argument:
    """Simple placeholder: {name} or {name, number|date|time[, style]}.

    Attributes:
        name: Argument name; positional arguments use their index ("0", "1")
        arg_type: Formatting type (NONE for bare {name})
        style: Named style or CLDR pattern; None for the default style
    """

    name: str
    arg_type: ArgumentType = ArgumentType.NONE
    style: str | None = None


@dataclass(frozen=True, slots=True)
class PluralClause:
    """{name, plural|selectordinal, [offset:N] [=K{...}] category{...} other{...}}.

    Attributes:
        name: Argument name
        kind: CARDINAL for plural, ORDINAL for selectordinal
        offset: Subtracted from the value before category selection and ``#``
        branches: Category branches; always contains OTHER
        explicit_branches: Exact-value branches, matched on the unoffset value
    """

    name: str
    kind: PluralKind
    offset: Decimal
    branches: Mapping[PluralCategory, Pattern]
    explicit_branches: Mapping[Decimal, Pattern] = field(
        default_factory=lambda: MappingProxyType({})
    )


@dataclass(frozen=True, slots=True)
class SelectClause:
    """{name, select, key{...} ... other{...}}.

    Attributes:
        name: Argument name
        branches: Keyword branches, "other" included when present
        default: The "other" branch, or None
    """

    name: str
    branches: Mapping[str, Pattern]
    default: Pattern | None = None


@dataclass(frozen=True, slots=True)
class ChoiceBranch:
    """One ``limit#text`` / ``limit<text`` alternative of a choice clause.

    Attributes:
        limit: Lower bound of the branch
        inclusive: True for ``#``/``≤`` (value >= limit), False for ``<``
        pattern: Sub-message rendered when the branch is selected
    """

    limit: Decimal
    inclusive: bool
    pattern: Pattern

    def accepts(self, value: Decimal) -> bool:
        """Check whether ``value`` satisfies this branch's limit."""
        return value >= self.limit if self.inclusive else value > self.limit


@dataclass(frozen=True, slots=True)
class ChoiceClause:
    """{name, choice, 0#none|1#one|1<many}: branches in ascending limit order."""

    name: str
    branches: tuple[ChoiceBranch, ...]


type Part = Literal | PoundSign | Argument | PluralClause | SelectClause | ChoiceClause
type Pattern = tuple[Part, ...]


def _walk(pattern: Pattern) -> Iterator[Part]:
    for part in pattern:
        yield part
        match part:
            case PluralClause(branches=branches, explicit_branches=explicit):
                for sub in (*explicit.values(), *branches.values()):
                    yield from _walk(sub)
            case SelectClause(branches=branches):
                for sub in branches.values():
                    yield from _walk(sub)
            case ChoiceClause(branches=choices):
                for choice in choices:
                    yield from _walk(choice.pattern)
            case _:
                pass


@dataclass(frozen=True, slots=True)
class CompiledMessage:
    """Immutable compiled form of a template.

    Attributes:
        source: Template the message was compiled from
        parts: Top-level parts
    """

    source: str
    parts: Pattern

    @property
    def is_literal(self) -> bool:
        """True when the message contains no placeholders."""
        return all(isinstance(part, Literal) for part in self.parts)

    def argument_names(self) -> frozenset[str]:
        """Names of every argument referenced anywhere in the message.

        >>> from localekit.message.parser import parse_template
        >>> sorted(parse_template("{a} {n, plural, other{{b}}}").argument_names())
        ['a', 'b', 'n']
        """
        names: set[str] = set()
        for part in _walk(self.parts):
            match part:
                case Argument(name=name) | PluralClause(name=name):
                    names.add(name)
                case SelectClause(name=name) | ChoiceClause(name=name):
                    names.add(name)
                case _:
                    pass
        return frozenset(names)
