"""Shared constants for localekit.

This module provides centralized configuration constants used across the
locale, message and runtime packages. Placing constants here avoids circular
imports and provides a single source of truth.

Constants are grouped by domain:
- Depth limits: Recursion protection for template parsing
- Cache limits: Memory bounds for caching subsystems
- Locale defaults: Process-wide fallback locale

Python 3.13+. Zero external dependencies.
"""

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Depth limits
    "MAX_DEPTH",
    # Cache limits
    "DEFAULT_CACHE_SIZE",
    "DEFAULT_CHAIN_CACHE_SIZE",
    "MAX_LOCALE_CACHE_SIZE",
    # Locale defaults
    "DEFAULT_LOCALE",
    "FORMATTING_FALLBACK_LOCALE",
]

# ============================================================================
# DEPTH LIMITS
# ============================================================================

# Maximum nesting of plural/select/choice clauses inside one template.
# Rendering recurses once per nesting level, so bounding the parser also
# bounds the renderer. Real templates rarely nest more than 3 levels.
MAX_DEPTH: int = 100

# ============================================================================
# CACHE LIMITS
# ============================================================================

# Default maximum entries in the compiled-message cache.
# A typical UI has a few hundred distinct templates per locale.
DEFAULT_CACHE_SIZE: int = 1000

# Default maximum cached fallback chains (keyed by requested locale).
DEFAULT_CHAIN_CACHE_SIZE: int = 128

# Maximum cached LocaleContext instances.
# 128 covers typical multi-region applications (major locales + variants).
MAX_LOCALE_CACHE_SIZE: int = 128

# ============================================================================
# LOCALE DEFAULTS
# ============================================================================

# Process-wide default locale used when a caller does not configure one.
DEFAULT_LOCALE: str = "en"

# Locale used for number/date formatting when Babel knows neither the
# requested locale nor any of its parents.
FORMATTING_FALLBACK_LOCALE: str = "en"
