"""Locale utilities for BCP-47 / POSIX conversion and Babel lookups.

Centralizes locale format normalization used by the formatting layer and the
plural rule engine, so that Babel always sees one canonical form.

Python 3.13+.
"""

from __future__ import annotations

import functools
import os
from typing import TYPE_CHECKING

from localekit.constants import DEFAULT_LOCALE, MAX_LOCALE_CACHE_SIZE

if TYPE_CHECKING:
    from babel import Locale

    from localekit.locales.tag import LocaleTag

__all__ = [
    "get_babel_locale",
    "get_system_locale",
    "normalize_locale",
]

_PSEUDO_LOCALES = ("C", "POSIX", "")


def normalize_locale(locale_code: str) -> str:
    """Convert a BCP-47 locale code to POSIX format for Babel.

    BCP-47 uses hyphens (en-US), while Babel/POSIX uses underscores (en_US).

    Args:
        locale_code: BCP-47 locale code (e.g., "en-US", "pt-BR")

    Returns:
        POSIX-formatted locale code (e.g., "en_US", "pt_BR")

    Example:
        >>> normalize_locale("en-US")
        'en_US'
        >>> normalize_locale("en")  # Already normalized
        'en'
    """
    return locale_code.replace("-", "_")


@functools.lru_cache(maxsize=MAX_LOCALE_CACHE_SIZE)
def get_babel_locale(locale_code: str) -> Locale:
    """Get a Babel Locale object with caching.

    Parses the locale code once and caches the result. Plural selection and
    value formatting both hit this on every render.

    Thread-safe via lru_cache internal locking.

    Args:
        locale_code: Locale code (BCP-47 or POSIX format accepted)

    Returns:
        Babel Locale object

    Raises:
        babel.core.UnknownLocaleError: If locale is not recognized
        ValueError: If locale format is invalid

    Example:
        >>> locale = get_babel_locale("en-US")
        >>> locale.language
        'en'
        >>> locale.territory
        'US'
    """
    # Lazy import: Babel loads CLDR data at import time; defer until needed
    from babel import Locale  # noqa: PLC0415

    return Locale.parse(normalize_locale(locale_code))


def get_system_locale(*, raise_on_failure: bool = False) -> LocaleTag:
    """Detect the process locale from the OS and environment variables.

    Detection order:
    1. Python locale.getlocale() (OS-level locale)
    2. LC_ALL environment variable (overrides all)
    3. LC_MESSAGES environment variable (for message catalogs)
    4. LANG environment variable (default locale)

    Encoding and modifier suffixes (".UTF-8", "@euro") are stripped and the
    "C" and "POSIX" pseudo-locales are ignored. Values that do not parse as a
    locale tag are skipped.

    Args:
        raise_on_failure: If True, raise RuntimeError when no locale can be
            determined. If False (default), return the default locale ("en").

    Returns:
        Detected locale as a LocaleTag.

    Raises:
        RuntimeError: If raise_on_failure is True and locale cannot be determined.

    Example:
        >>> import os
        >>> os.environ['LANG'] = 'de_DE.UTF-8'
        >>> str(get_system_locale())
        'de-DE'
    """
    import locale as locale_module  # noqa: PLC0415

    from localekit.diagnostics import MalformedTagError  # noqa: PLC0415
    from localekit.locales.tag import LocaleTag  # noqa: PLC0415

    candidates: list[str] = []
    try:
        system_locale, _ = locale_module.getlocale()
    except (ValueError, AttributeError):
        system_locale = None
    if system_locale:
        candidates.append(system_locale)
    candidates.extend(os.environ.get(var, "") for var in ("LC_ALL", "LC_MESSAGES", "LANG"))

    for value in candidates:
        code = value.split(".")[0].split("@")[0]
        if code in _PSEUDO_LOCALES:
            continue
        try:
            return LocaleTag.parse(code, strict=False)
        except MalformedTagError:
            continue

    if raise_on_failure:
        msg = (
            "Could not determine system locale. "
            "Set LC_ALL, LC_MESSAGES, or LANG environment variable."
        )
        raise RuntimeError(msg)

    return LocaleTag.parse(DEFAULT_LOCALE)
