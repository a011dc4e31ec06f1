"""Resolution runtime and caller facade.

Provides the Resolver (store + fallback + formatter) and the Localization
facade with its locale-change hook.

Python 3.13+.
"""

from .cache_config import CacheConfig
from .config import LocalizeConfig
from .localization import (
    KeyLike,
    LocaleChange,
    LocaleListener,
    Localization,
    LocalizationKey,
    MessageRequest,
    key_of,
)
from .resolver import Resolver

__all__ = [
    "CacheConfig",
    "KeyLike",
    "LocaleChange",
    "LocaleListener",
    "Localization",
    "LocalizationKey",
    "LocalizeConfig",
    "MessageRequest",
    "Resolver",
    "key_of",
]
