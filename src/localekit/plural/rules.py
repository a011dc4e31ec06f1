"""CLDR plural rules implementation using Babel.

Provides plural category selection for cardinal ({n, plural, ...}) and ordinal
({n, selectordinal, ...}) clauses. Rule tables are data, not code: by default
they come from Babel's CLDR data, and callers can add or replace a language
with CLDR rule text.

Operands follow CLDR (n, i, v, w, f, t, e) as extracted by Babel:
    - negative numbers use their absolute value
    - Decimal keeps trailing zeros, so Decimal("1.0") has v = 1
    - integral floats behave like integers (1.0 -> 1)
    - other floats are evaluated through their shortest repr (0.1 -> "0.1")

Python 3.13+. Depends on Babel for CLDR data.

Reference: https://www.unicode.org/cldr/charts/47/supplemental/language_plural_rules.html
"""

from __future__ import annotations

import logging
import math
from collections import OrderedDict
from collections.abc import Mapping
from dataclasses import dataclass
from decimal import Decimal
from threading import Lock

from babel.core import UnknownLocaleError
from babel.plural import PluralRule

from localekit.constants import MAX_LOCALE_CACHE_SIZE
from localekit.diagnostics import ErrorTemplate, FormatError
from localekit.enums import PluralCategory, PluralKind
from localekit.locale_utils import get_babel_locale
from localekit.locales.tag import LocaleTag, as_locale_tag

__all__ = ["OTHER_ONLY", "PluralRuleEngine", "PluralRuleSet", "to_plural_operand"]

logger = logging.getLogger(__name__)

type PluralNumber = int | float | Decimal

_CATEGORY_NAMES = frozenset(PluralCategory)


def to_plural_operand(value: object, argument_name: str = "") -> PluralNumber:
    """Validate a value used as a plural/choice operand.

    Args:
        value: Candidate number
        argument_name: Argument being evaluated (for diagnostics)

    Returns:
        The value, typed as a number

    Raises:
        FormatError: If value is not an int, float or Decimal (bool is
            rejected), or is NaN/infinite
    """
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        raise FormatError(
            ErrorTemplate.type_mismatch(argument_name or "<plural>", "number", type(value).__name__)
        )
    if isinstance(value, float) and not math.isfinite(value):
        raise FormatError(
            ErrorTemplate.type_mismatch(argument_name or "<plural>", "finite number", repr(value))
        )
    if isinstance(value, Decimal) and not value.is_finite():
        raise FormatError(
            ErrorTemplate.type_mismatch(argument_name or "<plural>", "finite number", str(value))
        )
    return value


@dataclass(frozen=True, slots=True)
class PluralRuleSet:
    """Cardinal and ordinal rules of one language.

    Each rule is an ordered CLDR rule table; the first matching category wins
    and "other" is implicit.

    Attributes:
        cardinal: Compiled cardinal rule table
        ordinal: Compiled ordinal rule table

    Example:
        >>> rules = PluralRuleSet.from_cldr(
        ...     cardinal={"one": "i = 1 and v = 0"},
        ...     ordinal={"one": "n % 10 = 1 and n % 100 != 11"},
        ... )
        >>> rules.select(1)
        <PluralCategory.ONE: 'one'>
        >>> rules.select(21, PluralKind.ORDINAL)
        <PluralCategory.ONE: 'one'>
    """

    cardinal: PluralRule
    ordinal: PluralRule

    @classmethod
    def from_cldr(
        cls,
        cardinal: Mapping[str, str] | None = None,
        ordinal: Mapping[str, str] | None = None,
    ) -> PluralRuleSet:
        """Compile rule tables from CLDR rule text.

        Args:
            cardinal: Category -> CLDR condition (e.g. {"one": "n = 1"})
            ordinal: Category -> CLDR condition

        Returns:
            PluralRuleSet; a missing table selects "other" for every number

        Raises:
            ValueError: If a category name is not a CLDR category or a
                condition does not parse
        """
        for table in (cardinal or {}, ordinal or {}):
            for category in table:
                if category not in _CATEGORY_NAMES:
                    msg = f"Unknown plural category '{category}'"
                    raise ValueError(msg)
        return cls(
            cardinal=PluralRule(dict(cardinal or {})),
            ordinal=PluralRule(dict(ordinal or {})),
        )

    def rule(self, kind: PluralKind = PluralKind.CARDINAL) -> PluralRule:
        """Return the rule table for ``kind``."""
        return self.ordinal if kind == PluralKind.ORDINAL else self.cardinal

    def categories(self, kind: PluralKind = PluralKind.CARDINAL) -> frozenset[PluralCategory]:
        """Categories this language can select, "other" included."""
        tags = {PluralCategory(tag) for tag in self.rule(kind).tags}
        return frozenset({*tags, PluralCategory.OTHER})

    def select(
        self, number: PluralNumber, kind: PluralKind = PluralKind.CARDINAL
    ) -> PluralCategory:
        """Evaluate the rule table on an already validated number."""
        return PluralCategory(self.rule(kind)(number))


OTHER_ONLY = PluralRuleSet.from_cldr()
"""Rule set of a language without plural distinctions (and of unknown languages)."""


class PluralRuleEngine:
    """Select CLDR plural categories per locale.

    Rule lookup for a locale walks the locale's ancestors (most specific
    first), preferring caller overrides over Babel data at each step, and ends
    with the other-only rule set when nothing matches. Resolved rule sets are
    kept in a bounded LRU cache keyed by locale.

    Args:
        overrides: Extra or replacement rule sets keyed by locale string
            (usually a bare language such as "xx"; "pt-PT" style keys apply
            to that locale and its descendants only)
        max_cache_size: Maximum number of cached locales
            (default: MAX_LOCALE_CACHE_SIZE)

    Example:
        >>> engine = PluralRuleEngine()
        >>> engine.category("en", 1)
        <PluralCategory.ONE: 'one'>
        >>> engine.category("ru", 5)
        <PluralCategory.MANY: 'many'>
        >>> engine.category("en", 3, PluralKind.ORDINAL)
        <PluralCategory.FEW: 'few'>
    """

    __slots__ = ("_cache", "_lock", "_max_cache_size", "_overrides")

    def __init__(
        self,
        overrides: Mapping[str | LocaleTag, PluralRuleSet] | None = None,
        *,
        max_cache_size: int = MAX_LOCALE_CACHE_SIZE,
    ) -> None:
        if max_cache_size <= 0:
            msg = "max_cache_size must be positive"
            raise ValueError(msg)
        self._overrides: dict[LocaleTag, PluralRuleSet] = {
            as_locale_tag(locale): rules for locale, rules in (overrides or {}).items()
        }
        self._cache: OrderedDict[LocaleTag, PluralRuleSet] = OrderedDict()
        self._max_cache_size = max_cache_size
        self._lock = Lock()

    def category(
        self,
        locale: LocaleTag | str,
        number: object,
        kind: PluralKind = PluralKind.CARDINAL,
    ) -> PluralCategory:
        """Select the plural category of ``number`` in ``locale``.

        Total: every finite number yields exactly one category.

        Args:
            locale: Locale whose rules apply
            number: int, float or Decimal
            kind: CARDINAL (plural) or ORDINAL (selectordinal)

        Returns:
            One of zero, one, two, few, many, other

        Raises:
            FormatError: If number is not numeric
        """
        value = to_plural_operand(number)
        return self.rules_for(locale).select(value, kind)

    def rules_for(self, locale: LocaleTag | str) -> PluralRuleSet:
        """Return the rule set used for ``locale``."""
        tag = as_locale_tag(locale)
        with self._lock:
            cached = self._cache.get(tag)
            if cached is not None:
                self._cache.move_to_end(tag)
                return cached

        rules = self._lookup(tag)
        with self._lock:
            rules = self._cache.setdefault(tag, rules)
            self._cache.move_to_end(tag)
            while len(self._cache) > self._max_cache_size:
                evicted, _ = self._cache.popitem(last=False)
                logger.debug("Evicted plural rules for %s", evicted)
            return rules

    def cache_size(self) -> int:
        """Number of locales with cached rule sets."""
        with self._lock:
            return len(self._cache)

    def _lookup(self, tag: LocaleTag) -> PluralRuleSet:
        for candidate in tag.ancestors():
            override = self._overrides.get(candidate)
            if override is not None:
                return override
            try:
                babel_locale = get_babel_locale(candidate.to_posix())
            except (UnknownLocaleError, ValueError):
                continue
            return PluralRuleSet(
                cardinal=babel_locale.plural_form,
                ordinal=babel_locale.ordinal_form,
            )
        logger.debug("No plural rules for locale %s; using other-only rules", tag)
        return OTHER_ONLY
