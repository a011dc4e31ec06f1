"""Cache configuration for the Resolver.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from dataclasses import dataclass

from localekit.constants import DEFAULT_CACHE_SIZE, DEFAULT_CHAIN_CACHE_SIZE

__all__ = ["CacheConfig"]


@dataclass(frozen=True, slots=True)
class CacheConfig:
    """Immutable configuration for the compile and fallback-chain caches.

    Attributes:
        size: Maximum compiled messages kept (default: 1000)
        chain_size: Maximum cached fallback chains (default: 128).
            0 disables fallback-chain caching.

    Example:
        >>> from localekit import CacheConfig, ResourceStore, Resolver
        >>> resolver = Resolver(ResourceStore(), "en", cache=CacheConfig(size=200))
        >>> resolver.get_cache_stats()["maxsize"]
        200
    """

    size: int = DEFAULT_CACHE_SIZE
    chain_size: int = DEFAULT_CHAIN_CACHE_SIZE

    def __post_init__(self) -> None:
        """Validate configuration values at construction time.

        Raises:
            ValueError: If size is not positive or chain_size is negative
        """
        if self.size <= 0:
            msg = "size must be positive"
            raise ValueError(msg)
        if self.chain_size < 0:
            msg = "chain_size must be non-negative"
            raise ValueError(msg)
