"""Caller-facing localization facade.

Localization keeps the caller's current locale as observable state on top of
a Resolver, applies the missing-resource and format-error policy from
LocalizeConfig, and notifies listeners when the locale changes or when the
store publishes new resources, so that bound text can re-resolve.

Python 3.13+. Depends on Babel (through the Resolver).
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from threading import Lock
from typing import Protocol, Self, runtime_checkable

from localekit.constants import DEFAULT_LOCALE
from localekit.diagnostics import MissingResourceError, RenderError
from localekit.locales.fallback import FallbackChain
from localekit.locales.tag import LocaleTag, as_locale_tag
from localekit.runtime.cache_config import CacheConfig
from localekit.runtime.config import LocalizeConfig
from localekit.runtime.resolver import Resolver
from localekit.store.loading import FallbackInfo, ResourceKey, Template
from localekit.store.store import ResourceStore

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Facade
    "Localization",
    "MessageRequest",
    # Keys
    "KeyLike",
    "LocalizationKey",
    "key_of",
    # Events
    "LocaleChange",
    "LocaleListener",
    # Rendering
    "RequestProcessor",
]

logger = logging.getLogger(__name__)


@runtime_checkable
class LocalizationKey(Protocol):
    """Anything that names a resource through a ``key`` attribute.

    Example:
        >>> from dataclasses import dataclass
        >>> @dataclass(frozen=True)
        ... class Label:
        ...     key: str
        >>> key_of(Label("menu.open"))
        'menu.open'
    """

    @property
    def key(self) -> str:
        """Resource key."""
        ...


type KeyLike = LocalizationKey | str
"""Resource key given as a string, a StrEnum member or a LocalizationKey."""


def key_of(key: KeyLike) -> ResourceKey:
    """Return the resource key named by a key-like value.

    Raises:
        TypeError: If ``key`` is neither a string nor has a ``key`` attribute
    """
    match key:
        case str():
            # str() of a StrEnum member is its value
            return str(key)
        case LocalizationKey():
            return key.key
        case _:
            msg = f"Expected a string or an object with a 'key' attribute, got {type(key).__name__}"
            raise TypeError(msg)


@dataclass(frozen=True, slots=True)
class LocaleChange:
    """Event passed to locale-change listeners.

    Attributes:
        previous: Locale before the change
        current: Locale after the change
        reloaded: True when the event comes from a store reload rather than
            a locale switch (previous and current are then equal)
    """

    previous: LocaleTag
    current: LocaleTag
    reloaded: bool = False


type LocaleListener = Callable[[LocaleChange], None]

type RequestProcessor = Callable[[LocaleTag, Template, Mapping[str | int, object]], str]
"""Turns a found template into text: (resolved locale, template, arguments) -> str.

The default is Resolver.render. A processor signals an unrenderable template
by raising RenderError, which the facade handles per LocalizeConfig.
"""


class MessageRequest:
    """Builder collecting the arguments of one message lookup.

    Arguments are either all positional (addressed as ``{0}``, ``{1}`` in
    templates) or all named; mixing the two raises ValueError.

    Example:
        >>> l10n = Localization.from_resources({"en": {"greet": "Hello, {0} and {1}!"}})
        >>> l10n.get("greet").arg("Ann").arg("Bo").value()
        'Hello, Ann and Bo!'
    """

    __slots__ = ("_key", "_localization", "_named", "_positional")

    def __init__(self, localization: Localization, key: KeyLike) -> None:
        self._localization = localization
        self._key = key_of(key)
        self._positional: list[object] = []
        self._named: dict[str, object] = {}

    def __repr__(self) -> str:
        return (
            f"MessageRequest(key={self._key!r}, positional={len(self._positional)}, "
            f"named={sorted(self._named)!r})"
        )

    @property
    def key(self) -> ResourceKey:
        """Resource key this request resolves."""
        return self._key

    def arg(self, *args: object) -> Self:
        """Add one argument: ``arg(value)`` (positional) or ``arg(name, value)``.

        Raises:
            TypeError: If called with other than one or two arguments, or with
                a non-string name
            ValueError: If positional and named arguments are mixed
        """
        match args:
            case (value,):
                self._add_positional(value)
            case (str() as name, value):
                self._add_named(name, value)
            case (name, _):
                msg = f"Argument name must be a string, got {type(name).__name__}"
                raise TypeError(msg)
            case _:
                msg = f"arg() takes 1 or 2 arguments ({len(args)} given)"
                raise TypeError(msg)
        return self

    def args(self, *values: object) -> Self:
        """Add several arguments: ``args(mapping)`` (named) or ``args(*values)``.

        Raises:
            ValueError: If positional and named arguments are mixed
        """
        match values:
            case (Mapping() as mapping,):
                for name, value in mapping.items():
                    self._add_named(str(name), value)
            case _:
                for value in values:
                    self._add_positional(value)
        return self

    def _add_positional(self, value: object) -> None:
        if self._named:
            msg = "Cannot add a positional argument to a request with named arguments"
            raise ValueError(msg)
        self._positional.append(value)

    def _add_named(self, name: str, value: object) -> None:
        if self._positional:
            msg = "Cannot add a named argument to a request with positional arguments"
            raise ValueError(msg)
        self._named[name] = value

    def arguments(self) -> dict[str, object]:
        """Collected arguments by name (positional ones as "0", "1", ...)."""
        if self._positional:
            return {str(index): value for index, value in enumerate(self._positional)}
        return dict(self._named)

    def value(self) -> str:
        """Resolve the key in the localization's current locale."""
        return self._localization.value(self._key, self.arguments())


class Localization:
    """Current-locale facade over a Resolver.

    Args:
        resolver: Resolver used for every lookup
        locale: Initial locale (default: the resolver's default locale)
        config: Missing-resource and format-error policy
        processor: Renders a found template (default: ``resolver.render``)

    The facade subscribes to the store's reload notifications; call close()
    (or use it as a context manager) to detach it.

    Example:
        >>> l10n = Localization.from_resources(
        ...     {"en": {"hi": "Hi {name}"}, "fr": {"hi": "Salut {name}"}}, locale="fr-CA"
        ... )
        >>> l10n.value("hi", name="Zoé")
        'Salut Zoé'
        >>> l10n.set_locale("en")
        >>> l10n.value("hi", {"name": "Zoe"})
        'Hi Zoe'
    """

    __slots__ = (
        "_config",
        "_listeners",
        "_locale",
        "_lock",
        "_processor",
        "_resolver",
        "_unsubscribe_store",
    )

    def __init__(
        self,
        resolver: Resolver,
        locale: LocaleTag | str | None = None,
        config: LocalizeConfig | None = None,
        *,
        processor: RequestProcessor | None = None,
    ) -> None:
        self._resolver = resolver
        self._processor: RequestProcessor = (
            processor if processor is not None else resolver.render
        )
        self._locale = as_locale_tag(locale) if locale is not None else resolver.default_locale
        self._config = config if config is not None else LocalizeConfig()
        self._lock = Lock()
        self._listeners: tuple[LocaleListener, ...] = ()
        self._unsubscribe_store: Callable[[], None] | None = resolver.store.on_reload(
            self._on_store_reload
        )

    @classmethod
    def from_resources(
        cls,
        resources: Mapping[LocaleTag | str, Mapping[ResourceKey, Template]],
        *,
        default_locale: LocaleTag | str = DEFAULT_LOCALE,
        locale: LocaleTag | str | None = None,
        config: LocalizeConfig | None = None,
        cache: CacheConfig | None = None,
        on_fallback: Callable[[FallbackInfo], None] | None = None,
        processor: RequestProcessor | None = None,
    ) -> Localization:
        """Build a store, resolver and facade from in-memory resources."""
        resolver = Resolver(
            ResourceStore(resources), default_locale, cache=cache, on_fallback=on_fallback
        )
        return cls(resolver, locale, config, processor=processor)

    def __repr__(self) -> str:
        return f"Localization(locale={str(self._locale)!r}, listeners={len(self._listeners)})"

    @property
    def locale(self) -> LocaleTag:
        """Current locale."""
        return self._locale

    @property
    def resolver(self) -> Resolver:
        """Underlying resolver."""
        return self._resolver

    @property
    def config(self) -> LocalizeConfig:
        """Missing-resource and format-error policy."""
        return self._config

    @property
    def processor(self) -> RequestProcessor:
        """Callable that renders found templates."""
        return self._processor

    # ------------------------------------------------------------------
    # Locale state
    # ------------------------------------------------------------------

    def set_locale(self, locale: LocaleTag | str) -> None:
        """Switch the current locale and notify listeners.

        Setting the locale that is already current does nothing.

        Raises:
            MalformedTagError: If ``locale`` is a string that does not parse
        """
        new = as_locale_tag(locale)
        with self._lock:
            old = self._locale
            if new == old:
                return
            self._locale = new
            listeners = self._listeners
        logger.debug("Locale changed from %s to %s", old, new)
        self._notify(listeners, LocaleChange(previous=old, current=new))

    def on_locale_changed(self, listener: LocaleListener) -> Callable[[], None]:
        """Register a listener for locale switches and store reloads.

        Listeners run on the thread that changed the locale or published
        the resources. An exception raised by a listener is logged and the
        remaining listeners are still called.

        Returns:
            Callable that unregisters the listener
        """
        with self._lock:
            self._listeners = (*self._listeners, listener)

        def unsubscribe() -> None:
            with self._lock:
                self._listeners = tuple(
                    registered for registered in self._listeners if registered is not listener
                )

        return unsubscribe

    def _on_store_reload(self, generation: int) -> None:
        with self._lock:
            current = self._locale
            listeners = self._listeners
        logger.debug("Store generation %d published; refreshing %s", generation, current)
        self._notify(listeners, LocaleChange(previous=current, current=current, reloaded=True))

    @staticmethod
    def _notify(listeners: tuple[LocaleListener, ...], change: LocaleChange) -> None:
        for listener in listeners:
            try:
                listener(change)
            except Exception:  # pylint: disable=broad-exception-caught
                logger.exception("Locale listener %r failed for %r", listener, change)

    def close(self) -> None:
        """Stop receiving store reload notifications."""
        with self._lock:
            unsubscribe, self._unsubscribe_store = self._unsubscribe_store, None
        if unsubscribe is not None:
            unsubscribe()

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def get(self, key: KeyLike) -> MessageRequest:
        """Start a request for ``key`` to add arguments to."""
        return MessageRequest(self, key)

    def has(self, key: KeyLike) -> bool:
        """Check whether the current locale's chain provides ``key``."""
        return self._resolver.has(self._locale, key_of(key))

    def fallback_chain(self) -> FallbackChain:
        """Locales searched for the current locale."""
        return self._resolver.fallback_chain(self._locale)

    def value(
        self,
        key: KeyLike,
        args: Mapping[str | int, object] | None = None,
        /,
        **kwargs: object,
    ) -> str:
        """Resolve ``key`` in the current locale.

        Named arguments may be given as a mapping, as keywords, or both
        (keywords win).

        When format errors are ignored, a template that fails to render is
        skipped and the next locale in the chain that has the key is tried;
        if none renders, the configured missing text is returned.

        Raises:
            MissingResourceError: If the key is missing and the config
                says to raise
            RenderError: If rendering fails and format errors are not ignored
            TemplateSyntaxError: If the template is malformed
        """
        resource_key = key_of(key)
        merged: dict[str | int, object] = dict(args) if args else {}
        merged.update(kwargs)
        locale = self._locale

        try:
            resolved, template = self._resolver.lookup(locale, resource_key)
        except MissingResourceError as e:
            if self._config.raise_on_missing:
                raise
            logger.warning("Missing resource: %s", e)
            return self._config.missing_text(resource_key)

        try:
            return self._processor(resolved, template, merged)
        except RenderError as e:
            if not self._config.ignore_format_errors:
                raise
            logger.warning("Failed to render '%s' from %s: %s", resource_key, resolved, e)
        return self._render_after(locale, resolved, resource_key, merged)

    def _render_after(
        self,
        locale: LocaleTag,
        failed: LocaleTag,
        key: ResourceKey,
        args: Mapping[str | int, object],
    ) -> str:
        # Later chain locales only; the ones before ``failed`` lack the key
        past_failed = False
        for candidate, template in self._resolver.candidates(locale, key):
            if not past_failed:
                past_failed = candidate == failed
                continue
            try:
                return self._processor(candidate, template, args)
            except RenderError as e:
                logger.warning("Failed to render '%s' from %s: %s", key, candidate, e)
        logger.warning("No locale could render '%s' for %s; using missing text", key, locale)
        return self._config.missing_text(key)
