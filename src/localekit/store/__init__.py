"""Resource storage and loading.

Python 3.13+.
"""

from .loading import (
    DictResourceLoader,
    FallbackInfo,
    LoadSummary,
    ResourceKey,
    ResourceLoader,
    ResourceLoadResult,
    Template,
)
from .store import ReloadListener, ResourceStore

__all__ = [
    "DictResourceLoader",
    "FallbackInfo",
    "LoadSummary",
    "ReloadListener",
    "ResourceKey",
    "ResourceLoadResult",
    "ResourceLoader",
    "ResourceStore",
    "Template",
]
