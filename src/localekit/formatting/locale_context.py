"""Locale context for thread-safe, locale-scoped value formatting.

This module provides locale-aware formatting without global state mutation.
Uses Babel for CLDR-compliant number, percent, currency, date and time
formatting.

Architecture:
    - LocaleContext: Immutable locale configuration container
    - Formatters use Babel (thread-safe, CLDR-based)
    - No dependency on Python's locale module (avoids global state)
    - BabelValueFormatter adapts LocaleContext to the ValueFormatter protocol
      consumed by MessageFormatter

Python 3.13+. Uses Babel for i18n.
"""

from __future__ import annotations

import logging
from collections import OrderedDict
from dataclasses import dataclass
from datetime import date, datetime, time
from decimal import Decimal, InvalidOperation
from threading import RLock
from typing import ClassVar, Protocol

from babel import Locale, UnknownLocaleError
from babel import dates as babel_dates
from babel import numbers as babel_numbers
from babel.core import get_global, parse_locale

from localekit.constants import FORMATTING_FALLBACK_LOCALE, MAX_LOCALE_CACHE_SIZE
from localekit.diagnostics import FormatError
from localekit.locale_utils import get_babel_locale
from localekit.locales.tag import LocaleTag, as_locale_tag

__all__ = [
    "BabelValueFormatter",
    "LocaleContext",
    "ValueFormatter",
]

logger = logging.getLogger(__name__)

type Number = int | float | Decimal

_FORMAT_ERRORS = (ValueError, TypeError, InvalidOperation, AttributeError, KeyError, OverflowError)


@dataclass(frozen=True, slots=True)
class LocaleContext:
    """Immutable locale configuration for formatting operations.

    Provides thread-safe, locale-specific formatting for numbers, dates and
    currency without mutating global state.

    Use LocaleContext.create() to construct instances; it resolves the Babel
    locale and caches the result.

    Cache Management:
        LocaleContext uses an internal LRU cache for instance reuse:
        - LocaleContext.clear_cache(): Clear all cached instances
        - LocaleContext.cache_size(): Get current cache size
        - LocaleContext.cache_info(): Get detailed cache statistics

    Examples:
        >>> ctx = LocaleContext.create('en-US')
        >>> ctx.format_number(1234.5)
        '1,234.5'

        >>> ctx = LocaleContext.create('lv-LV')
        >>> ctx.format_number(1234.5)
        '1 234,5'

        >>> # Unknown locales fall back to the nearest known parent, then en
        >>> ctx = LocaleContext.create('xx-YY')
        >>> ctx.is_fallback
        True

    Thread Safety:
        LocaleContext is immutable and thread-safe. Cache operations are
        protected by RLock.
    """

    # OrderedDict provides LRU semantics with O(1) operations
    _cache: ClassVar[OrderedDict[LocaleTag, LocaleContext]] = OrderedDict()
    _cache_lock: ClassVar[RLock] = RLock()

    locale: LocaleTag
    _babel_locale: Locale
    is_fallback: bool = False

    @classmethod
    def clear_cache(cls) -> None:
        """Clear the locale context cache."""
        with cls._cache_lock:
            cls._cache.clear()

    @classmethod
    def cache_size(cls) -> int:
        """Get current number of cached LocaleContext instances."""
        with cls._cache_lock:
            return len(cls._cache)

    @classmethod
    def cache_info(cls) -> dict[str, int | tuple[str, ...]]:
        """Get detailed cache statistics.

        Returns:
            Dictionary with cache statistics:
            - size: Current number of cached instances
            - max_size: Maximum cache size
            - locales: Tuple of cached canonical locale codes (LRU order)
        """
        with cls._cache_lock:
            return {
                "size": len(cls._cache),
                "max_size": MAX_LOCALE_CACHE_SIZE,
                "locales": tuple(str(tag) for tag in cls._cache),
            }

    @classmethod
    def create(cls, locale: LocaleTag | str) -> LocaleContext:
        """Create (or fetch from cache) the context for a locale.

        When Babel has no data for the locale, its parents are tried (most
        specific first); when none is known, formatting uses "en" and a
        warning is logged. ``locale`` is preserved either way.

        Thread Safety:
            Concurrent calls with the same locale return the same instance.

        Args:
            locale: LocaleTag or locale string

        Returns:
            LocaleContext instance
        """
        tag = as_locale_tag(locale)

        with cls._cache_lock:
            if tag in cls._cache:
                cls._cache.move_to_end(tag)
                return cls._cache[tag]

        babel_locale, used_fallback = cls._resolve_babel_locale(tag)
        ctx = cls(locale=tag, _babel_locale=babel_locale, is_fallback=used_fallback)

        with cls._cache_lock:
            if tag in cls._cache:
                return cls._cache[tag]
            if len(cls._cache) >= MAX_LOCALE_CACHE_SIZE:
                cls._cache.popitem(last=False)
            cls._cache[tag] = ctx
            return ctx

    @staticmethod
    def _resolve_babel_locale(tag: LocaleTag) -> tuple[Locale, bool]:
        for candidate in tag.ancestors():
            try:
                return get_babel_locale(candidate.to_posix()), candidate != tag
            except (UnknownLocaleError, ValueError):
                continue
        logger.warning(
            "Unknown locale '%s' for formatting. Falling back to %s",
            tag,
            FORMATTING_FALLBACK_LOCALE,
        )
        return get_babel_locale(FORMATTING_FALLBACK_LOCALE), True

    @property
    def babel_locale(self) -> Locale:
        """Pre-validated Babel Locale object for this context."""
        return self._babel_locale

    # ------------------------------------------------------------------
    # Numbers
    # ------------------------------------------------------------------

    def format_number(
        self,
        value: Number,
        *,
        minimum_fraction_digits: int = 0,
        maximum_fraction_digits: int = 3,
        use_grouping: bool = True,
        pattern: str | None = None,
    ) -> str:
        """Format number with locale-specific separators.

        Args:
            value: Number to format (int, float, or Decimal)
            minimum_fraction_digits: Minimum decimal places (default: 0)
            maximum_fraction_digits: Maximum decimal places (default: 3)
            use_grouping: Use thousands separator (default: True)
            pattern: Custom CLDR number pattern (overrides other parameters)

        Returns:
            Formatted number string according to locale rules

        Raises:
            FormatError: If Babel cannot format the value

        Examples:
            >>> LocaleContext.create('de-DE').format_number(1234.5)
            '1.234,5'
            >>> LocaleContext.create('en-US').format_number(-1234.56, pattern="#,##0.00;(#,##0.00)")
            '(1,234.56)'
        """
        try:
            if pattern is not None:
                return str(
                    babel_numbers.format_decimal(value, format=pattern, locale=self.babel_locale)
                )

            # '#,##0' = integer with grouping
            # '#,##0.0##' = 1-3 decimal places with grouping
            integer_part = "#,##0" if use_grouping else "0"

            if maximum_fraction_digits == 0:
                format_pattern = integer_part
            elif minimum_fraction_digits == maximum_fraction_digits:
                format_pattern = f"{integer_part}.{'0' * minimum_fraction_digits}"
            else:
                required = "0" * minimum_fraction_digits
                optional = "#" * (maximum_fraction_digits - minimum_fraction_digits)
                format_pattern = f"{integer_part}.{required}{optional}"

            return str(
                babel_numbers.format_decimal(
                    value, format=format_pattern, locale=self.babel_locale
                )
            )
        except _FORMAT_ERRORS as e:
            msg = f"Number formatting failed for '{value}': {e}"
            raise FormatError(msg) from e

    def format_percent(self, value: Number) -> str:
        """Format a ratio as a percentage (0.25 -> '25%')."""
        try:
            return str(babel_numbers.format_percent(value, locale=self.babel_locale))
        except _FORMAT_ERRORS as e:
            msg = f"Percent formatting failed for '{value}': {e}"
            raise FormatError(msg) from e

    def default_currency(self) -> str:
        """ISO 4217 code of the locale's current currency.

        Uses the locale's territory, or its likely territory for bare
        languages ("en" -> US -> USD).

        Raises:
            FormatError: If no currency is known for the territory
        """
        territory = self.babel_locale.territory
        if not territory:
            likely = get_global("likely_subtags").get(self.babel_locale.language)
            if likely:
                territory = parse_locale(likely)[1]
        currencies = babel_numbers.get_territory_currencies(territory) if territory else []
        if not currencies:
            msg = f"No default currency for locale '{self.locale}'"
            raise FormatError(msg)
        return str(currencies[0])

    def format_currency(
        self,
        value: Number,
        *,
        currency: str | None = None,
        pattern: str | None = None,
    ) -> str:
        """Format currency with locale-specific rules.

        Args:
            value: Monetary amount (int, float, or Decimal)
            currency: ISO 4217 currency code; defaults to the locale's currency
            pattern: Custom CLDR currency pattern

        Returns:
            Formatted currency string according to locale rules

        Examples:
            >>> LocaleContext.create('en-US').format_currency(123.45, currency='EUR')
            '€123.45'
            >>> LocaleContext.create('lv-LV').format_currency(123.45, currency='EUR')
            '123,45 €'
            >>> LocaleContext.create('ja-JP').format_currency(12345)
            '￥12,345'

        CLDR Compliance:
            Applies currency-specific decimal places (JPY: 0, BHD: 3, most: 2).
        """
        code = currency or self.default_currency()
        try:
            return str(
                babel_numbers.format_currency(
                    value,
                    code,
                    format=pattern,
                    locale=self.babel_locale,
                    currency_digits=True,
                )
            )
        except _FORMAT_ERRORS as e:
            msg = f"Currency formatting failed for '{code} {value}': {e}"
            raise FormatError(msg) from e

    # ------------------------------------------------------------------
    # Dates and times
    # ------------------------------------------------------------------

    def format_date(self, value: date, style: str = "medium") -> str:
        """Format the date part of a date or datetime.

        Args:
            value: date or datetime
            style: short, medium, long, full, or a CLDR date pattern

        Examples:
            >>> ctx = LocaleContext.create('en-US')
            >>> ctx.format_date(date(2025, 10, 27), 'short')
            '10/27/25'
            >>> ctx.format_date(date(2025, 10, 27), 'yyyy-MM-dd')
            '2025-10-27'
        """
        try:
            return str(babel_dates.format_date(value, format=style, locale=self.babel_locale))
        except _FORMAT_ERRORS as e:
            msg = f"Date formatting failed for '{value}': {e}"
            raise FormatError(msg) from e

    def format_time(self, value: time | datetime, style: str = "medium") -> str:
        """Format the time part of a time or datetime.

        Args:
            value: time or datetime
            style: short, medium, long, full, or a CLDR time pattern
        """
        try:
            return str(babel_dates.format_time(value, format=style, locale=self.babel_locale))
        except _FORMAT_ERRORS as e:
            msg = f"Time formatting failed for '{value}': {e}"
            raise FormatError(msg) from e

    def format_datetime(self, value: datetime, style: str = "medium") -> str:
        """Format a datetime using the locale's date-time combination pattern.

        Args:
            value: datetime
            style: short, medium, long, full, or a CLDR datetime pattern
        """
        try:
            return str(
                babel_dates.format_datetime(value, format=style, locale=self.babel_locale)
            )
        except _FORMAT_ERRORS as e:
            msg = f"DateTime formatting failed for '{value}': {e}"
            raise FormatError(msg) from e


class ValueFormatter(Protocol):
    """Locale-aware formatting of argument values.

    MessageFormatter delegates every number, date and time rendering to an
    implementation of this protocol. ``style`` is None for the default style,
    one of the named styles, or a CLDR pattern.

    All methods raise FormatError when the value cannot be formatted.
    """

    def format_number(self, locale: LocaleTag, value: Number, style: str | None = None) -> str:
        """Format a number: default, integer, percent, currency or pattern."""
        ...

    def format_date(self, locale: LocaleTag, value: date, style: str | None = None) -> str:
        """Format a date (or the date part of a datetime)."""
        ...

    def format_time(
        self, locale: LocaleTag, value: time | datetime, style: str | None = None
    ) -> str:
        """Format a time (or the time part of a datetime)."""
        ...

    def format_datetime(self, locale: LocaleTag, value: datetime, style: str | None = None) -> str:
        """Format a full datetime."""
        ...


class BabelValueFormatter:
    """Default ValueFormatter over cached LocaleContext instances.

    Example:
        >>> fmt = BabelValueFormatter()
        >>> fmt.format_number(LocaleTag.parse("de"), 1234.5)
        '1.234,5'
        >>> fmt.format_number(LocaleTag.parse("en"), 0.25, "percent")
        '25%'
    """

    __slots__ = ()

    def format_number(self, locale: LocaleTag, value: Number, style: str | None = None) -> str:
        ctx = LocaleContext.create(locale)
        match style:
            case None | "":
                return ctx.format_number(value)
            case "integer":
                return ctx.format_number(value, maximum_fraction_digits=0)
            case "percent":
                return ctx.format_percent(value)
            case "currency":
                return ctx.format_currency(value)
            case _:
                return ctx.format_number(value, pattern=style)

    def format_date(self, locale: LocaleTag, value: date, style: str | None = None) -> str:
        return LocaleContext.create(locale).format_date(value, style or "medium")

    def format_time(
        self, locale: LocaleTag, value: time | datetime, style: str | None = None
    ) -> str:
        return LocaleContext.create(locale).format_time(value, style or "medium")

    def format_datetime(self, locale: LocaleTag, value: datetime, style: str | None = None) -> str:
        return LocaleContext.create(locale).format_datetime(value, style or "medium")
