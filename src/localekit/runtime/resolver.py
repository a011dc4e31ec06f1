"""Resource resolution with locale fallback.

The Resolver ties the store, the fallback-chain builder and the message
formatter together: it finds the most specific locale that provides a key,
compiles its template through the shared cache and renders it with the
locale the template was actually found in.

Resolution holds no locks of its own. The store is read from its current
immutable snapshot and the compile cache serializes only its own bookkeeping,
so any number of threads may resolve concurrently with a writer publishing
new resources.

Python 3.13+. Depends on Babel (through the message formatter).
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Mapping

from localekit.constants import DEFAULT_LOCALE
from localekit.diagnostics import ErrorTemplate, MissingResourceError
from localekit.locales.fallback import FallbackChain, FallbackChainBuilder
from localekit.locales.tag import LocaleTag, as_locale_tag
from localekit.message.cache import MessageCache
from localekit.message.formatter import MessageFormatter, RenderContext
from localekit.runtime.cache_config import CacheConfig
from localekit.store.loading import FallbackInfo, ResourceKey, Template
from localekit.store.store import ResourceStore

__all__ = ["Resolver"]

logger = logging.getLogger(__name__)


class Resolver:
    """Resolve resource keys to rendered text for a requested locale.

    Args:
        store: Resource store to read templates from
        default_locale: Locale of last resort appended to every chain
        formatter: Message formatter (default: a Babel-backed formatter whose
            compile cache is sized by ``cache``)
        cache: Cache sizes; ignored for the compile cache when ``formatter``
            is given
        on_fallback: Optional callback invoked when a key resolves from a
            locale other than the requested one

    Example:
        >>> store = ResourceStore({"en": {"files": "{n, plural, one{# file} other{# files}}"}})
        >>> resolver = Resolver(store, "en")
        >>> resolver.resolve("en-US", "files", {"n": 3})
        '3 files'
    """

    __slots__ = ("_chains", "_default", "_formatter", "_on_fallback", "_store")

    def __init__(
        self,
        store: ResourceStore,
        default_locale: LocaleTag | str = DEFAULT_LOCALE,
        *,
        formatter: MessageFormatter | None = None,
        cache: CacheConfig | None = None,
        on_fallback: Callable[[FallbackInfo], None] | None = None,
    ) -> None:
        config = cache if cache is not None else CacheConfig()
        self._store = store
        self._default = as_locale_tag(default_locale)
        self._formatter = (
            formatter
            if formatter is not None
            else MessageFormatter(cache=MessageCache(config.size))
        )
        self._chains = FallbackChainBuilder(config.chain_size)
        self._on_fallback = on_fallback

    def __repr__(self) -> str:
        return (
            f"Resolver(default_locale={str(self._default)!r}, "
            f"locales={len(self._store.available_locales())})"
        )

    @property
    def store(self) -> ResourceStore:
        """Resource store this resolver reads from."""
        return self._store

    @property
    def default_locale(self) -> LocaleTag:
        """Locale of last resort."""
        return self._default

    @property
    def formatter(self) -> MessageFormatter:
        """Message formatter used for compile and render."""
        return self._formatter

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def fallback_chain(self, locale: LocaleTag | str) -> FallbackChain:
        """Locales searched for a request, most specific first.

        Raises:
            MalformedTagError: If ``locale`` is a string that does not parse
        """
        return self._chains.build(
            as_locale_tag(locale), self._store.available_locales(), self._default
        )

    def find(self, locale: LocaleTag | str, key: ResourceKey) -> tuple[LocaleTag, Template] | None:
        """Locate the template for a key without rendering it.

        Returns:
            (resolved locale, template) or None when no chain locale has the key
        """
        return self._find_in(self.fallback_chain(locale), key)

    def has(self, locale: LocaleTag | str, key: ResourceKey) -> bool:
        """Check whether any locale in the chain provides the key."""
        return self.find(locale, key) is not None

    def candidates(
        self, locale: LocaleTag | str, key: ResourceKey
    ) -> Iterator[tuple[LocaleTag, Template]]:
        """Every (locale, template) in the chain that provides the key, in order."""
        for candidate in self.fallback_chain(locale):
            template = self._store.get(candidate, key)
            if template is not None:
                yield candidate, template

    def _find_in(self, chain: FallbackChain, key: ResourceKey) -> tuple[LocaleTag, Template] | None:
        for candidate in chain:
            template = self._store.get(candidate, key)
            if template is not None:
                return candidate, template
        return None

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def resolve(
        self,
        locale: LocaleTag | str,
        key: ResourceKey,
        args: Mapping[str | int, object] | None = None,
    ) -> str:
        """Resolve and render a key for a locale.

        The template is rendered with the locale it was found in, so plural
        rules and number formats match the language of the text.

        Raises:
            MalformedTagError: If ``locale`` is a string that does not parse
            MissingResourceError: If no locale in the chain has the key
            TemplateSyntaxError: If the template is malformed
            MissingArgumentError: If a referenced argument is absent
            FormatError: If a value does not fit its placeholder
        """
        resolved, template = self.lookup(locale, key)
        return self.render(resolved, template, args)

    def lookup(self, locale: LocaleTag | str, key: ResourceKey) -> tuple[LocaleTag, Template]:
        """Find the template resolve() would render, firing on_fallback.

        Returns:
            (resolved locale, template)

        Raises:
            MalformedTagError: If ``locale`` is a string that does not parse
            MissingResourceError: If no locale in the chain has the key
        """
        requested = as_locale_tag(locale)
        chain = self.fallback_chain(requested)
        found = self._find_in(chain, key)
        if found is None:
            raise self._missing(requested, key, chain)

        resolved, _ = found
        if resolved != requested:
            logger.debug("Resolved '%s' for %s from %s", key, requested, resolved)
            if self._on_fallback is not None:
                self._on_fallback(
                    FallbackInfo(requested_locale=requested, resolved_locale=resolved, key=key)
                )
        return found

    def render(
        self,
        locale: LocaleTag | str,
        template: Template,
        args: Mapping[str | int, object] | None = None,
    ) -> str:
        """Compile ``template`` through the cache and render it in ``locale``.

        Raises:
            TemplateSyntaxError: If the template is malformed
            MissingArgumentError: If a referenced argument is absent
            FormatError: If a value does not fit its placeholder
        """
        compiled = self._formatter.compile(template)
        return self._formatter.render(compiled, RenderContext.of(locale, args))

    def _missing(
        self, requested: LocaleTag, key: ResourceKey, chain: FallbackChain
    ) -> MissingResourceError:
        locale_code = requested.to_canonical_string()
        searched = tuple(tag.to_canonical_string() for tag in chain)
        if chain:
            diagnostic = ErrorTemplate.resource_not_found(key, locale_code, searched)
        else:
            diagnostic = ErrorTemplate.no_locale_available(
                key, locale_code, self._default.to_canonical_string()
            )
        return MissingResourceError(diagnostic, key=key, locale_code=locale_code, chain=searched)

    # ------------------------------------------------------------------
    # Cache management
    # ------------------------------------------------------------------

    def clear_cache(self) -> None:
        """Drop compiled messages and cached fallback chains."""
        self._formatter.cache.clear()
        self._chains.clear()

    def get_cache_stats(self) -> dict[str, int | float]:
        """Compile-cache statistics (see MessageCache.get_stats)."""
        return self._formatter.cache.get_stats()
