"""ICU MessageFormat compilation and rendering.

Python 3.13+.
"""

from .ast import (
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
from .cache import MessageCache
from .formatter import MessageFormatter, RenderContext
from .parser import MessageParser, parse_template

__all__ = [
    "Argument",
    "ChoiceBranch",
    "ChoiceClause",
    "CompiledMessage",
    "Literal",
    "MessageCache",
    "MessageFormatter",
    "MessageParser",
    "Part",
    "Pattern",
    "PluralClause",
    "PoundSign",
    "RenderContext",
    "SelectClause",
    "parse_template",
]
