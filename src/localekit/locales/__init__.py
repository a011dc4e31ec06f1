"""Locale identifiers and fallback chains.

Python 3.13+.
"""

from .fallback import FallbackChain, FallbackChainBuilder
from .tag import LocaleTag, as_locale_tag

__all__ = [
    "FallbackChain",
    "FallbackChainBuilder",
    "LocaleTag",
    "as_locale_tag",
]
