"""Render-time argument values.

Arguments arrive as plain Python objects. Each value is classified once into
a ValueKind, and formatting decisions are made on the kind, not on ad-hoc
isinstance checks scattered through the renderer.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import date, datetime, time
from decimal import Decimal

from localekit.enums import ValueKind

__all__ = ["ArgumentValue", "classify", "selector_text", "to_decimal"]

type ArgumentValue = (
    str | int | float | Decimal | bool | date | datetime | time | None | Mapping[str, object]
    | list[object] | tuple[object, ...]
)
"""Values accepted as message arguments (mappings and sequences only to be rejected)."""


def classify(value: object) -> ValueKind:
    """Return the tagged kind of an argument value.

    bool is checked before int and datetime before date, since each is a
    subclass of the latter.

    Example:
        >>> [str(classify(v)) for v in (True, 3, "x", None)]
        ['boolean', 'number', 'string', 'none']
    """
    match value:
        case None:
            return ValueKind.NONE
        case bool():
            return ValueKind.BOOLEAN
        case int() | float() | Decimal():
            return ValueKind.NUMBER
        case str():
            return ValueKind.STRING
        case datetime():
            return ValueKind.DATETIME
        case date():
            return ValueKind.DATE
        case time():
            return ValueKind.TIME
        case _:
            # Mappings, sequences, sets and arbitrary objects have no text form
            return ValueKind.OBJECT


def selector_text(value: object, kind: ValueKind) -> str | None:
    """Text a select clause matches against, or None when not selectable.

    Strings select as themselves, booleans as "true"/"false" and numbers by
    their str().
    """
    match kind:
        case ValueKind.STRING:
            return str(value)
        case ValueKind.BOOLEAN:
            return "true" if value else "false"
        case ValueKind.NUMBER:
            return str(value)
        case _:
            return None


def to_decimal(value: int | float | Decimal) -> Decimal:
    """Exact decimal form of a number (floats via their shortest repr)."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(repr(value))
    return Decimal(value)

