"""Enumerations for localekit type-safe constants.

Uses StrEnum (Python 3.11+) for automatic string conversion.
StrEnum members are strings themselves, eliminating boilerplate __str__ methods.

Python 3.13+.
"""

from enum import StrEnum


class PluralCategory(StrEnum):
    """CLDR plural category.

    StrEnum provides automatic string conversion: str(PluralCategory.ONE) == "one"
    """

    ZERO = "zero"
    ONE = "one"
    TWO = "two"
    FEW = "few"
    MANY = "many"
    OTHER = "other"
    """Implicit last rule of every language; always selectable."""


class PluralKind(StrEnum):
    """Kind of plural rule to apply.

    StrEnum provides automatic string conversion: str(PluralKind.ORDINAL) == "ordinal"
    """

    CARDINAL = "cardinal"
    """Counting: "1 item", "2 items" ({n, plural, ...})"""

    ORDINAL = "ordinal"
    """Ranking: "1st", "2nd", "3rd" ({n, selectordinal, ...})"""


class ArgumentType(StrEnum):
    """Formatting type of a simple argument placeholder.

    NONE is used for bare arguments such as {name}.
    """

    NONE = ""
    NUMBER = "number"
    DATE = "date"
    TIME = "time"


class ValueKind(StrEnum):
    """Tagged kind of a render-time argument value."""

    NUMBER = "number"
    STRING = "string"
    BOOLEAN = "boolean"
    DATE = "date"
    TIME = "time"
    DATETIME = "datetime"
    OBJECT = "object"
    """Mappings and sequences (nested objects)."""

    NONE = "none"


class LoadStatus(StrEnum):
    """Outcome of loading resources for one locale.

    StrEnum provides automatic string conversion: str(LoadStatus.SUCCESS) == "success"
    """

    SUCCESS = "success"
    NOT_FOUND = "not_found"
    ERROR = "error"


__all__ = [
    "ArgumentType",
    "LoadStatus",
    "PluralCategory",
    "PluralKind",
    "ValueKind",
]
