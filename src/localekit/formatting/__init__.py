"""Locale-aware value formatting backed by Babel.

Python 3.13+.
"""

from .locale_context import (
    BabelValueFormatter,
    LocaleContext,
    ValueFormatter,
)

__all__ = [
    "BabelValueFormatter",
    "LocaleContext",
    "ValueFormatter",
]
