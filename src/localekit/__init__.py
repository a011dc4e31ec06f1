"""localekit - locale fallback, resource lookup and ICU message formatting.

A localization runtime core: resolve a resource key for a requested locale
through its fallback chain, then format the template with runtime arguments
(plural, selectordinal, select and choice clauses, numbers, dates) using
CLDR data from Babel.

Public API:
    Localization - Current-locale facade with on_locale_changed hook
    Resolver - Key resolution with locale fallback
    ResourceStore - Thread-safe, snapshot-published resource tables
    MessageFormatter - Compile and render ICU MessageFormat templates
    LocaleTag - Parsed, normalized locale identifier
    PluralRuleEngine - CLDR plural category selection

Exceptions:
    LocalizeError - Base exception class
    MalformedTagError - Invalid locale identifiers
    TemplateSyntaxError - Template compile errors
    RenderError - Render errors (MissingArgumentError, FormatError)
    MissingResourceError - Key not found in any locale of the chain

Submodules:
    localekit.locales - LocaleTag and fallback chains
    localekit.store - Resource store and loaders
    localekit.plural - Plural rule sets and engine
    localekit.message - Template parser, AST, cache and renderer
    localekit.formatting - Babel-backed number and date formatting
    localekit.runtime - Resolver and Localization facade
    localekit.diagnostics - Error types and structured diagnostics
"""

from .diagnostics import (
    FormatError,
    LocalizeError,
    MalformedTagError,
    MissingArgumentError,
    MissingResourceError,
    RenderError,
    TemplateSyntaxError,
)
from .enums import PluralCategory, PluralKind
from .locales import LocaleTag
from .message import MessageFormatter, RenderContext
from .plural import PluralRuleEngine, PluralRuleSet
from .runtime import (
    CacheConfig,
    LocaleChange,
    Localization,
    LocalizeConfig,
    MessageRequest,
    Resolver,
)
from .store import DictResourceLoader, ResourceStore

# Version information - Auto-populated from package metadata
try:
    from importlib.metadata import PackageNotFoundError
    from importlib.metadata import version as _get_version
except ImportError as e:
    raise RuntimeError("importlib.metadata unavailable - Python version too old? " + str(e)) from e

try:
    __version__ = _get_version("localekit")
except PackageNotFoundError:
    # Development mode: package not installed yet
    __version__ = "0.0.0+dev"

__all__ = [
    "CacheConfig",
    "DictResourceLoader",
    "FormatError",
    "LocaleChange",
    "LocaleTag",
    "Localization",
    "LocalizeConfig",
    "LocalizeError",
    "MalformedTagError",
    "MessageFormatter",
    "MessageRequest",
    "MissingArgumentError",
    "MissingResourceError",
    "PluralCategory",
    "PluralKind",
    "PluralRuleEngine",
    "PluralRuleSet",
    "RenderContext",
    "RenderError",
    "Resolver",
    "ResourceStore",
    "TemplateSyntaxError",
    "__version__",
]
