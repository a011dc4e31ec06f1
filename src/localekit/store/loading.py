"""Resource loading infrastructure for the ResourceStore.

Provides the protocol for resource loaders, an in-memory implementation, and
result/summary data structures for tracking load attempts. Parsing of on-disk
resource formats is left to loader implementations.

Components:
    ResourceLoader - Protocol for loading key/template tables (structural typing)
    DictResourceLoader - In-memory loader over a locale -> mapping table
    FallbackInfo - Immutable record of a locale fallback event
    ResourceLoadResult - Immutable result of a single load attempt
    LoadSummary - Immutable aggregate of the load results of one store load

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Protocol

from localekit.enums import LoadStatus
from localekit.locales.tag import LocaleTag

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Type aliases
    "ResourceKey",
    "Template",
    # Protocol
    "ResourceLoader",
    # Concrete loader
    "DictResourceLoader",
    # Fallback observability
    "FallbackInfo",
    # Load result types
    "ResourceLoadResult",
    "LoadSummary",
]

type ResourceKey = str
"""Identifier of a translatable resource (e.g., 'greeting', 'cart.items')."""

type Template = str
"""Raw, uncompiled message template text."""


class ResourceLoader(Protocol):
    """Protocol for loading the resources of one locale.

    Implementations return the complete key -> template table for the locale.
    This is a Protocol (structural typing) rather than ABC so that any object
    with a matching load() method can be used.

    Example:
        >>> class JsonLoader:
        ...     def load(self, locale: LocaleTag) -> Mapping[str, str]:
        ...         path = Path(f"i18n/{locale}.json")
        ...         return json.loads(path.read_text(encoding="utf-8"))
        ...
        >>> store = ResourceStore()
        >>> summary = store.load(JsonLoader(), ["en", "fr"])
    """

    def load(self, locale: LocaleTag) -> Mapping[ResourceKey, Template]:
        """Load all resources for a locale.

        Args:
            locale: Locale to load

        Returns:
            Mapping of resource key to template

        Raises:
            FileNotFoundError: If the locale has no resources
            OSError: If resources exist but cannot be read
            ValueError: If resources cannot be decoded
        """
        ...


@dataclass(frozen=True, slots=True)
class DictResourceLoader:
    """In-memory resource loader.

    Keys of ``resources`` may be LocaleTag instances or locale strings; they
    are parsed (strictly) on construction so lookups use canonical tags.

    Example:
        >>> loader = DictResourceLoader({"en": {"hi": "Hello"}, "fr": {"hi": "Salut"}})
        >>> loader.load(LocaleTag.parse("fr"))["hi"]
        'Salut'
    """

    resources: Mapping[LocaleTag | str, Mapping[ResourceKey, Template]]

    def __post_init__(self) -> None:
        normalized = {
            (key if isinstance(key, LocaleTag) else LocaleTag.parse(key)): dict(table)
            for key, table in self.resources.items()
        }
        object.__setattr__(self, "resources", MappingProxyType(normalized))

    def load(self, locale: LocaleTag) -> Mapping[ResourceKey, Template]:
        """Return the table for ``locale``.

        Raises:
            FileNotFoundError: If no table was registered for the locale
        """
        try:
            return self.resources[locale]
        except KeyError:
            msg = f"No resources registered for locale '{locale}'"
            raise FileNotFoundError(msg) from None


@dataclass(frozen=True, slots=True)
class FallbackInfo:
    """Information about a locale fallback event.

    Provided to the Resolver's on_fallback callback when a key is resolved
    from a locale other than the requested one.

    Attributes:
        requested_locale: Locale the caller asked for
        resolved_locale: Locale that actually contained the key
        key: Resource key that was resolved
    """

    requested_locale: LocaleTag
    resolved_locale: LocaleTag
    key: ResourceKey


@dataclass(frozen=True, slots=True)
class ResourceLoadResult:
    """Result of loading the resources of one locale.

    Attributes:
        locale: Locale that was loaded
        status: Load status (success, not_found, error)
        error: Exception if status is ERROR or NOT_FOUND, None otherwise
        key_count: Number of keys loaded (0 unless successful)
        source: Name of the registered loader, or None for ResourceStore.load()
    """

    locale: LocaleTag
    status: LoadStatus
    error: Exception | None = None
    key_count: int = 0
    source: str | None = None

    @property
    def is_success(self) -> bool:
        """Check if resources loaded successfully."""
        return self.status == LoadStatus.SUCCESS

    @property
    def is_not_found(self) -> bool:
        """Check if the locale had no resources (expected for optional locales)."""
        return self.status == LoadStatus.NOT_FOUND

    @property
    def is_error(self) -> bool:
        """Check if loading failed with an error."""
        return self.status == LoadStatus.ERROR


@dataclass(frozen=True, slots=True)
class LoadSummary:
    """Immutable aggregate of resource load results.

    All statistics are computed properties derived from the ``results`` tuple.

    Attributes:
        results: All individual load results (immutable tuple)

    Example:
        >>> summary = store.load(loader, ["en", "de"])
        >>> if summary.errors > 0:
        ...     for result in summary.get_errors():
        ...         print(f"Failed: {result.locale}: {result.error}")
    """

    results: tuple[ResourceLoadResult, ...]

    def __repr__(self) -> str:
        """Return string representation for debugging."""
        return (
            f"LoadSummary(total={self.total_attempted}, "
            f"ok={self.successful}, "
            f"not_found={self.not_found}, "
            f"errors={self.errors})"
        )

    @property
    def total_attempted(self) -> int:
        """Total number of load attempts."""
        return len(self.results)

    @property
    def successful(self) -> int:
        """Number of successful loads."""
        return sum(1 for r in self.results if r.is_success)

    @property
    def not_found(self) -> int:
        """Number of locales without resources."""
        return sum(1 for r in self.results if r.is_not_found)

    @property
    def errors(self) -> int:
        """Number of load errors."""
        return sum(1 for r in self.results if r.is_error)

    @property
    def all_successful(self) -> bool:
        """True when no load failed (not-found locales do not count as failures)."""
        return self.errors == 0

    def get_errors(self) -> tuple[ResourceLoadResult, ...]:
        """Get all results with errors."""
        return tuple(r for r in self.results if r.is_error)

    def get_not_found(self) -> tuple[ResourceLoadResult, ...]:
        """Get all results where the locale had no resources."""
        return tuple(r for r in self.results if r.is_not_found)

    def get_successful(self) -> tuple[ResourceLoadResult, ...]:
        """Get all successful results."""
        return tuple(r for r in self.results if r.is_success)
