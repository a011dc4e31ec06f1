"""Fallback chain construction.

A fallback chain is the ordered list of locales searched for a key: the
requested locale and its successively less specific ancestors, followed by
the default locale. Only locales that actually have resources are included.

Example:
    requested=en-US, available={en, fr}, default=fr  ->  (en, fr)

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import logging
from collections import OrderedDict
from collections.abc import Iterable
from threading import Lock

from localekit.constants import DEFAULT_CHAIN_CACHE_SIZE
from localekit.locales.tag import LocaleTag

__all__ = ["FallbackChain", "FallbackChainBuilder"]

logger = logging.getLogger(__name__)

type FallbackChain = tuple[LocaleTag, ...]
"""Locales to search, most specific first. May be empty."""


class FallbackChainBuilder:
    """Build fallback chains, optionally memoizing them.

    The chain for a request depends only on (requested, available, default),
    so results are cached per (requested, default) pair and the whole cache
    is dropped as soon as a different available-locale set is passed in.

    Thread Safety:
        Cache operations are protected by a Lock. Chains are immutable tuples
        and may be shared freely.

    Args:
        cache_size: Maximum cached chains; 0 disables caching

    Example:
        >>> builder = FallbackChainBuilder()
        >>> available = {LocaleTag.parse("en"), LocaleTag.parse("fr")}
        >>> chain = builder.build(LocaleTag.parse("en-US"), available, LocaleTag.parse("fr"))
        >>> [str(tag) for tag in chain]
        ['en', 'fr']
    """

    __slots__ = ("_available", "_cache", "_hits", "_lock", "_misses", "_size")

    def __init__(self, cache_size: int = DEFAULT_CHAIN_CACHE_SIZE) -> None:
        if cache_size < 0:
            msg = f"cache_size must be >= 0, got {cache_size}"
            raise ValueError(msg)
        self._size = cache_size
        self._cache: OrderedDict[tuple[str, str], FallbackChain] = OrderedDict()
        self._available: frozenset[LocaleTag] | None = None
        self._lock = Lock()
        self._hits = 0
        self._misses = 0

    def build(
        self,
        requested: LocaleTag,
        available: Iterable[LocaleTag],
        default: LocaleTag,
    ) -> FallbackChain:
        """Return the fallback chain for a request.

        Starting from ``requested``, variants are stripped (last first), then
        the region, then the script. Every form present in ``available`` is
        kept, without duplicates. ``default`` is appended last when it is
        available and not already in the chain.

        Args:
            requested: Locale the caller asked for
            available: Locales that have resources loaded
            default: Locale of last resort

        Returns:
            Chain of available locales, most specific first. Empty when neither
            an ancestor of ``requested`` nor ``default`` is available.
        """
        available_set = frozenset(available)
        if self._size == 0:
            return self._compute(requested, available_set, default)

        key = (requested.to_canonical_string(), default.to_canonical_string())
        with self._lock:
            if available_set != self._available:
                if self._cache:
                    logger.debug(
                        "Available locales changed; dropping %d cached chains",
                        len(self._cache),
                    )
                self._cache.clear()
                self._available = available_set
            cached = self._cache.get(key)
            if cached is not None:
                self._cache.move_to_end(key)
                self._hits += 1
                return cached
            self._misses += 1

        chain = self._compute(requested, available_set, default)

        with self._lock:
            # Another thread may have swapped the available set meanwhile
            if available_set == self._available:
                if len(self._cache) >= self._size and key not in self._cache:
                    self._cache.popitem(last=False)
                self._cache[key] = chain
        return chain

    @staticmethod
    def _compute(
        requested: LocaleTag,
        available: frozenset[LocaleTag],
        default: LocaleTag,
    ) -> FallbackChain:
        chain: list[LocaleTag] = [
            candidate for candidate in requested.ancestors() if candidate in available
        ]
        if default in available and default not in chain:
            chain.append(default)
        logger.debug(
            "Fallback chain for %s (default %s): [%s]",
            requested,
            default,
            ", ".join(str(tag) for tag in chain),
        )
        return tuple(chain)

    def clear(self) -> None:
        """Drop all cached chains and reset statistics."""
        with self._lock:
            self._cache.clear()
            self._available = None
            self._hits = 0
            self._misses = 0

    def get_stats(self) -> dict[str, int]:
        """Cache statistics: size, maxsize, hits, misses."""
        with self._lock:
            return {
                "size": len(self._cache),
                "maxsize": self._size,
                "hits": self._hits,
                "misses": self._misses,
            }
