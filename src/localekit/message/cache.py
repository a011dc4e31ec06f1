"""Thread-safe LRU cache of compiled messages.

Compiled messages are keyed by their template text (content-addressed), so
the same template loaded under several keys or locales compiles once.

Architecture:
    - Thread-safe using threading.RLock (reentrant lock)
    - LRU eviction via OrderedDict
    - Compilation runs outside the lock; when two threads compile the same
      template concurrently, the first stored CompiledMessage is kept and
      returned to both

Python 3.13+.
"""

from __future__ import annotations

import logging
from collections import OrderedDict
from collections.abc import Callable
from threading import RLock

from localekit.constants import DEFAULT_CACHE_SIZE
from localekit.message.ast import CompiledMessage

__all__ = ["MessageCache"]

logger = logging.getLogger(__name__)


class MessageCache:
    """Thread-safe LRU cache of CompiledMessage by template text.

    Attributes:
        maxsize: Maximum number of cache entries
        hits: Number of cache hits (for metrics)
        misses: Number of cache misses (for metrics)

    Example:
        >>> cache = MessageCache(maxsize=2)
        >>> first = cache.get_or_compile("Hi {name}", parse_template)
        >>> cache.get_or_compile("Hi {name}", parse_template) is first
        True
    """

    __slots__ = ("_cache", "_hits", "_lock", "_maxsize", "_misses")

    def __init__(self, maxsize: int = DEFAULT_CACHE_SIZE) -> None:
        """Initialize message cache.

        Args:
            maxsize: Maximum number of entries (default: 1000)
        """
        if maxsize <= 0:
            msg = "maxsize must be positive"
            raise ValueError(msg)
        self._cache: OrderedDict[str, CompiledMessage] = OrderedDict()
        self._maxsize = maxsize
        self._lock = RLock()
        self._hits = 0
        self._misses = 0

    @property
    def maxsize(self) -> int:
        """Maximum number of entries."""
        return self._maxsize

    def get(self, template: str) -> CompiledMessage | None:
        """Get the cached compiled message, or None on a miss."""
        with self._lock:
            compiled = self._cache.get(template)
            if compiled is None:
                self._misses += 1
                return None
            self._cache.move_to_end(template)
            self._hits += 1
            return compiled

    def put(self, template: str, compiled: CompiledMessage) -> CompiledMessage:
        """Store a compiled message unless one is already cached.

        Returns:
            The retained entry (the existing one if the template was already
            cached)
        """
        with self._lock:
            existing = self._cache.get(template)
            if existing is not None:
                self._cache.move_to_end(template)
                return existing
            if len(self._cache) >= self._maxsize:
                evicted, _ = self._cache.popitem(last=False)
                logger.debug("Evicted compiled template %r", evicted[:40])
            self._cache[template] = compiled
            return compiled

    def get_or_compile(
        self,
        template: str,
        compile_template: Callable[[str], CompiledMessage],
    ) -> CompiledMessage:
        """Return the cached compiled message, compiling it on a miss.

        Compilation errors propagate and nothing is cached for the template.
        """
        cached = self.get(template)
        if cached is not None:
            return cached
        return self.put(template, compile_template(template))

    def clear(self) -> None:
        """Clear all cached entries and reset metrics."""
        with self._lock:
            self._cache.clear()
            self._hits = 0
            self._misses = 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)

    def get_stats(self) -> dict[str, int | float]:
        """Get cache statistics.

        Returns:
            Dict with keys:
            - size (int): Current number of cached entries
            - maxsize (int): Maximum cache capacity
            - hits (int): Number of cache hits
            - misses (int): Number of cache misses
            - hit_rate (float): Hit rate as percentage (0.0-100.0)
        """
        with self._lock:
            total = self._hits + self._misses
            hit_rate = (self._hits / total * 100) if total > 0 else 0.0
            return {
                "size": len(self._cache),
                "maxsize": self._maxsize,
                "hits": self._hits,
                "misses": self._misses,
                "hit_rate": round(hit_rate, 2),
            }
