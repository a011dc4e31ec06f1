"""Locale-keyed resource storage with snapshot publication.

The store maps (LocaleTag, key) to a raw template. Readers never lock: every
read dereferences one immutable snapshot, so a reader sees either the state
before a write or the state after it, never a mix. Writers build a new
snapshot under a lock and publish it with a single attribute assignment.

A snapshot merges layers, highest priority first:
    1. Resources written directly (constructor, replace, update, load)
    2. Named loaders (add_loader), in registration order

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from threading import Lock
from types import MappingProxyType

from localekit.enums import LoadStatus
from localekit.locales.tag import LocaleTag, as_locale_tag
from localekit.store.loading import (
    LoadSummary,
    ResourceKey,
    ResourceLoader,
    ResourceLoadResult,
    Template,
)

__all__ = ["ReloadListener", "ResourceStore"]

logger = logging.getLogger(__name__)

type ReloadListener = Callable[[int], None]
"""Called with the new generation after every published write."""

type _Tables = Mapping[LocaleTag, Mapping[ResourceKey, Template]]

_EMPTY: Mapping[ResourceKey, Template] = MappingProxyType({})


@dataclass(frozen=True, slots=True)
class _Snapshot:
    tables: _Tables
    available: frozenset[LocaleTag]
    generation: int


@dataclass(frozen=True, slots=True)
class _Source:
    """A registered loader with the tables it last produced."""

    name: str
    loader: ResourceLoader
    locales: tuple[LocaleTag, ...]
    tables: _Tables


def _freeze(tables: _Tables, generation: int) -> _Snapshot:
    frozen = MappingProxyType(
        {locale: MappingProxyType(dict(table)) for locale, table in tables.items() if table}
    )
    return _Snapshot(tables=frozen, available=frozenset(frozen), generation=generation)


def _normalize(
    resources: Mapping[LocaleTag | str, Mapping[ResourceKey, Template]],
) -> dict[LocaleTag, Mapping[ResourceKey, Template]]:
    return {as_locale_tag(locale): table for locale, table in resources.items()}


def _fetch(
    loader: ResourceLoader, tags: Iterable[LocaleTag], source: str | None = None
) -> tuple[dict[LocaleTag, Mapping[ResourceKey, Template]], list[ResourceLoadResult]]:
    """Call the loader for every locale, classifying failures."""
    loaded: dict[LocaleTag, Mapping[ResourceKey, Template]] = {}
    results: list[ResourceLoadResult] = []
    for tag in tags:
        try:
            table = loader.load(tag)
        except FileNotFoundError as e:
            logger.debug("No resources for locale %s: %s", tag, e)
            results.append(ResourceLoadResult(tag, LoadStatus.NOT_FOUND, error=e, source=source))
        except (OSError, ValueError) as e:
            logger.warning("Failed to load resources for locale %s: %s", tag, e)
            results.append(ResourceLoadResult(tag, LoadStatus.ERROR, error=e, source=source))
        else:
            loaded[tag] = table
            results.append(
                ResourceLoadResult(tag, LoadStatus.SUCCESS, key_count=len(table), source=source)
            )
    return loaded, results


class ResourceStore:
    """Thread-safe store of templates keyed by locale and resource key.

    Lookup is exact: no fallback happens here (see Resolver). A locale counts
    as available once it has at least one key.

    Resources come from direct writes and from named loaders. For each
    (locale, key) the first layer that has the key wins: direct writes
    first, then named loaders in the order they were first registered.

    Thread Safety:
        get(), has(), templates() and available_locales() are lock-free.
        Every write is serialized by a writer lock and publishes one new
        snapshot, bumping ``generation`` and notifying on_reload listeners
        after the swap. Loaders are called outside the lock.

    Example:
        >>> store = ResourceStore({"en": {"hi": "Hello"}})
        >>> store.get(LocaleTag.parse("en"), "hi")
        'Hello'
        >>> store.update("fr", {"hi": "Salut"})
        >>> sorted(str(tag) for tag in store.available_locales())
        ['en', 'fr']
    """

    __slots__ = ("_direct", "_listeners", "_snapshot", "_sources", "_write_lock")

    def __init__(
        self,
        resources: Mapping[LocaleTag | str, Mapping[ResourceKey, Template]] | None = None,
    ) -> None:
        self._direct: _Tables = _normalize(resources or {})
        self._sources: dict[str, _Source] = {}
        self._snapshot = _freeze(self._direct, 0)
        self._write_lock = Lock()
        self._listeners: tuple[ReloadListener, ...] = ()

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get(self, locale: LocaleTag | str, key: ResourceKey) -> Template | None:
        """Return the template for an exact (locale, key) pair, or None."""
        table = self._snapshot.tables.get(as_locale_tag(locale), _EMPTY)
        return table.get(key)

    def has(self, locale: LocaleTag | str, key: ResourceKey) -> bool:
        """Check whether the exact (locale, key) pair exists."""
        return key in self._snapshot.tables.get(as_locale_tag(locale), _EMPTY)

    def templates(self, locale: LocaleTag | str) -> Mapping[ResourceKey, Template]:
        """Read-only view of every template of a locale (empty if absent)."""
        return self._snapshot.tables.get(as_locale_tag(locale), _EMPTY)

    def available_locales(self) -> frozenset[LocaleTag]:
        """Locales with at least one resource."""
        return self._snapshot.available

    @property
    def generation(self) -> int:
        """Number of writes published since construction."""
        return self._snapshot.generation

    # ------------------------------------------------------------------
    # Direct writes
    # ------------------------------------------------------------------

    def replace(self, resources: Mapping[LocaleTag | str, Mapping[ResourceKey, Template]]) -> None:
        """Replace every directly written resource.

        Named loaders are kept; use clear() to drop them as well.
        """
        tables = _normalize(resources)
        with self._write_lock:
            self._direct = tables
            generation = self._publish()
        self._notify(generation)

    def update(
        self,
        locale: LocaleTag | str,
        resources: Mapping[ResourceKey, Template],
        *,
        merge: bool = True,
    ) -> None:
        """Add resources for one locale.

        Args:
            locale: Target locale
            resources: Key -> template table
            merge: When True (default), keys are merged into the existing
                table (new values win). When False, the table is replaced.
        """
        tag = as_locale_tag(locale)
        with self._write_lock:
            tables = dict(self._direct)
            if merge:
                tables[tag] = {**tables.get(tag, {}), **resources}
            else:
                tables[tag] = resources
            self._direct = tables
            generation = self._publish()
        self._notify(generation)

    def load(self, loader: ResourceLoader, locales: Iterable[LocaleTag | str]) -> LoadSummary:
        """Load resources for several locales and publish them together.

        Each locale's table replaces the directly written table already
        stored for it. A locale whose loader raises keeps its previous table.

        Loader errors are classified, not raised: FileNotFoundError becomes
        NOT_FOUND; OSError and ValueError become ERROR and are logged at
        WARNING. The whole batch is published as one snapshot, even when
        some locales failed.

        Args:
            loader: Resource loader
            locales: Locales to load

        Returns:
            LoadSummary describing every attempt
        """
        loaded, results = _fetch(loader, [as_locale_tag(locale) for locale in locales])

        with self._write_lock:
            self._direct = {**self._direct, **loaded}
            generation = self._publish()
        self._notify(generation)

        summary = LoadSummary(results=tuple(results))
        logger.debug("Loaded resources: %r", summary)
        return summary

    def clear(self) -> None:
        """Remove every resource and every named loader."""
        with self._write_lock:
            self._direct = {}
            self._sources = {}
            generation = self._publish()
        self._notify(generation)

    # ------------------------------------------------------------------
    # Named loaders
    # ------------------------------------------------------------------

    def add_loader(
        self, name: str, loader: ResourceLoader, locales: Iterable[LocaleTag | str]
    ) -> LoadSummary:
        """Register a named loader, load its locales and publish the result.

        A new name ranks below every loader registered before it. Registering
        an existing name replaces that loader in place, keeping its rank.
        Load failures are classified as in load().

        Args:
            name: Identifier used by remove_loader() and reload()
            loader: Resource loader
            locales: Locales this loader provides

        Returns:
            LoadSummary describing every attempt
        """
        tags = tuple(as_locale_tag(locale) for locale in locales)
        loaded, results = _fetch(loader, tags, name)
        source = _Source(name=name, loader=loader, locales=tags, tables=loaded)

        with self._write_lock:
            replaced = name in self._sources
            self._sources = {**self._sources, name: source}
            generation = self._publish()
        self._notify(generation)

        summary = LoadSummary(results=tuple(results))
        logger.debug(
            "%s loader '%s': %r", "Replaced" if replaced else "Registered", name, summary
        )
        return summary

    def remove_loader(self, name: str) -> bool:
        """Unregister a named loader and withdraw its resources.

        Returns:
            True if the loader was registered, False otherwise
        """
        with self._write_lock:
            if name not in self._sources:
                return False
            self._sources = {key: src for key, src in self._sources.items() if key != name}
            generation = self._publish()
        self._notify(generation)
        logger.debug("Removed loader '%s'", name)
        return True

    def loader_names(self) -> tuple[str, ...]:
        """Registered loader names, highest priority first."""
        return tuple(self._sources)

    def reload(self, name: str | None = None) -> LoadSummary:
        """Call one named loader (or all of them) again and publish the result.

        A locale whose loader raises keeps the table that loader produced
        before. A loader removed or replaced while reloading is left as is.

        Args:
            name: Loader to reload; None reloads every registered loader

        Returns:
            LoadSummary describing every attempt

        Raises:
            KeyError: If ``name`` is not a registered loader
        """
        if name is None:
            targets = tuple(self._sources.values())
        else:
            try:
                targets = (self._sources[name],)
            except KeyError:
                msg = f"No loader registered as '{name}'"
                raise KeyError(msg) from None

        refreshed: list[_Source] = []
        results: list[ResourceLoadResult] = []
        for source in targets:
            loaded, source_results = _fetch(source.loader, source.locales, source.name)
            refreshed.append(
                _Source(
                    name=source.name,
                    loader=source.loader,
                    locales=source.locales,
                    tables={**source.tables, **loaded},
                )
            )
            results.extend(source_results)

        with self._write_lock:
            sources = dict(self._sources)
            for previous, source in zip(targets, refreshed, strict=True):
                if sources.get(source.name) is previous:
                    sources[source.name] = source
                else:
                    logger.debug("Loader '%s' changed during reload; skipped", source.name)
            self._sources = sources
            generation = self._publish()
        self._notify(generation)

        summary = LoadSummary(results=tuple(results))
        logger.debug("Reloaded %s: %r", name or "all loaders", summary)
        return summary

    # ------------------------------------------------------------------
    # Publication
    # ------------------------------------------------------------------

    def _compose(self) -> dict[LocaleTag, dict[ResourceKey, Template]]:
        # Lowest priority first so that higher layers overwrite
        merged: dict[LocaleTag, dict[ResourceKey, Template]] = {}
        layers = [source.tables for source in reversed(self._sources.values())]
        layers.append(self._direct)
        for tables in layers:
            for locale, table in tables.items():
                merged.setdefault(locale, {}).update(table)
        return merged

    def _publish(self) -> int:
        # Caller holds the write lock
        snapshot = _freeze(self._compose(), self._snapshot.generation + 1)
        self._snapshot = snapshot
        logger.debug(
            "Published store generation %d (%d locales)",
            snapshot.generation,
            len(snapshot.available),
        )
        return snapshot.generation

    # ------------------------------------------------------------------
    # Listeners
    # ------------------------------------------------------------------

    def on_reload(self, listener: ReloadListener) -> Callable[[], None]:
        """Register a listener called after every published write.

        Listeners run on the writing thread, after the write lock is released.
        An exception raised by a listener is logged and does not reach the
        writer or stop the remaining listeners.

        Returns:
            Callable that unregisters the listener
        """
        with self._write_lock:
            self._listeners = (*self._listeners, listener)

        def unsubscribe() -> None:
            with self._write_lock:
                self._listeners = tuple(
                    registered for registered in self._listeners if registered is not listener
                )

        return unsubscribe

    def _notify(self, generation: int) -> None:
        # Already published: listener failures are logged, never raised
        for listener in self._listeners:
            try:
                listener(generation)
            except Exception:  # pylint: disable=broad-exception-caught
                logger.exception(
                    "Reload listener %r failed for generation %d", listener, generation
                )
