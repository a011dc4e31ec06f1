"""Tests for runtime/resolver.py - fallback resolution and rendering.

Coverage:
    - Fallback through the chain to the default locale
    - Rendering with the locale the template was found in
    - on_fallback notifications
    - lookup(), render() and candidates()
    - MissingResourceError details and empty chains
    - Cache configuration and management
"""

from __future__ import annotations

import logging

import pytest

from localekit.diagnostics import (
    DiagnosticCode,
    MalformedTagError,
    MissingArgumentError,
    MissingResourceError,
    TemplateSyntaxError,
)
from localekit.locales import LocaleTag
from localekit.runtime import CacheConfig, Resolver
from localekit.store import FallbackInfo, ResourceStore

RESOURCES = {
    "en": {
        "greeting": "Hello, {name}!",
        "files": "{n, plural, one{# file} other{# files}}",
        "only_en": "English only",
    },
    "en-GB": {"colour": "Colour"},
    "de": {
        "greeting": "Hallo, {name}!",
        "files": "{n, plural, one{# Datei} other{# Dateien}}",
    },
    "fr": {"greeting": "Bonjour, {name} !"},
}


@pytest.fixture
def store() -> ResourceStore:
    return ResourceStore(RESOURCES)


@pytest.fixture
def resolver(store: ResourceStore) -> Resolver:
    return Resolver(store, "en")


class TestResolve:
    """Resolution through the fallback chain."""

    def test_exact_locale(self, resolver: Resolver) -> None:
        assert resolver.resolve("de", "greeting", {"name": "Ann"}) == "Hallo, Ann!"

    def test_region_falls_back_to_language(self, resolver: Resolver) -> None:
        assert resolver.resolve("de-AT", "greeting", {"name": "Ann"}) == "Hallo, Ann!"

    def test_missing_key_falls_back_to_default(self, resolver: Resolver) -> None:
        assert resolver.resolve("de-AT", "only_en") == "English only"

    def test_unavailable_locale_uses_default(self, resolver: Resolver) -> None:
        assert resolver.resolve("ja-JP", "greeting", {"name": "Ann"}) == "Hello, Ann!"

    def test_more_specific_locale_preferred(self, resolver: Resolver) -> None:
        assert resolver.resolve("en-GB", "colour") == "Colour"
        assert resolver.resolve("en-GB", "greeting", {"name": "Ann"}) == "Hello, Ann!"

    def test_renders_with_resolved_locale(self, resolver: Resolver) -> None:
        """German text found for de-AT uses German number formatting."""
        assert resolver.resolve("de-AT", "files", {"n": 1234}) == "1.234 Dateien"

    def test_fallback_text_uses_its_own_locale(self) -> None:
        """A German request answered by English text uses English plurals and numbers."""
        store = ResourceStore({"en": {"files": "{n, plural, one{# file} other{# files}}"}})
        resolver = Resolver(store, "en")
        assert resolver.resolve("de", "files", {"n": 1234}) == "1,234 files"

    def test_accepts_locale_tag(self, resolver: Resolver) -> None:
        result = resolver.resolve(LocaleTag.parse("fr"), "greeting", {"name": "Zoé"})
        assert result == "Bonjour, Zoé !"

    def test_positional_arguments(self) -> None:
        resolver = Resolver(ResourceStore({"en": {"pair": "{0} & {1}"}}), "en")
        assert resolver.resolve("en", "pair", {0: "A", 1: "B"}) == "A & B"

    def test_malformed_locale_rejected(self, resolver: Resolver) -> None:
        with pytest.raises(MalformedTagError):
            resolver.resolve("not a locale!", "greeting")

    def test_sees_store_updates(self, resolver: Resolver, store: ResourceStore) -> None:
        store.update("fr", {"only_en": "Plus maintenant"})
        assert resolver.resolve("fr", "only_en") == "Plus maintenant"


class TestFind:
    """find() / has() locate templates without rendering."""

    def test_find_returns_locale_and_template(self, resolver: Resolver) -> None:
        found = resolver.find("de-CH", "greeting")
        assert found == (LocaleTag.parse("de"), "Hallo, {name}!")

    def test_find_missing(self, resolver: Resolver) -> None:
        assert resolver.find("de", "nope") is None

    def test_has(self, resolver: Resolver) -> None:
        assert resolver.has("fr-CA", "only_en")
        assert not resolver.has("fr-CA", "colour")

    def test_fallback_chain(self, resolver: Resolver) -> None:
        assert [str(tag) for tag in resolver.fallback_chain("en-GB")] == ["en-GB", "en"]
        assert [str(tag) for tag in resolver.fallback_chain("de-AT")] == ["de", "en"]

    def test_candidates_in_chain_order(self, resolver: Resolver) -> None:
        found = list(resolver.candidates("de-AT", "greeting"))
        assert found == [
            (LocaleTag.parse("de"), "Hallo, {name}!"),
            (LocaleTag.parse("en"), "Hello, {name}!"),
        ]
        assert list(resolver.candidates("fr", "colour")) == []


class TestLookupAndRender:
    """lookup() and render() are the two halves of resolve()."""

    def test_lookup(self, resolver: Resolver) -> None:
        assert resolver.lookup("en-GB", "files") == (
            LocaleTag.parse("en"),
            "{n, plural, one{# file} other{# files}}",
        )

    def test_lookup_missing(self, resolver: Resolver) -> None:
        with pytest.raises(MissingResourceError):
            resolver.lookup("de", "nope")

    def test_lookup_fires_on_fallback(self, store: ResourceStore) -> None:
        events: list[FallbackInfo] = []
        resolver = Resolver(store, "en", on_fallback=events.append)
        resolver.lookup("fr", "only_en")
        assert [str(event.resolved_locale) for event in events] == ["en"]

    def test_render_in_given_locale(self, resolver: Resolver) -> None:
        template = "{n, plural, one{# Datei} other{# Dateien}}"
        assert resolver.render("de", template, {"n": 1234}) == "1.234 Dateien"
        assert resolver.render(LocaleTag.parse("en"), "plain") == "plain"


class TestFallbackNotification:
    """on_fallback fires only when the resolved locale differs."""

    def test_callback_receives_info(self, store: ResourceStore) -> None:
        events: list[FallbackInfo] = []
        resolver = Resolver(store, "en", on_fallback=events.append)
        resolver.resolve("de-AT", "only_en")
        assert events == [
            FallbackInfo(
                requested_locale=LocaleTag.parse("de-AT"),
                resolved_locale=LocaleTag.parse("en"),
                key="only_en",
            )
        ]

    def test_no_callback_for_exact_match(self, store: ResourceStore) -> None:
        events: list[FallbackInfo] = []
        resolver = Resolver(store, "en", on_fallback=events.append)
        resolver.resolve("de", "greeting", {"name": "Ann"})
        assert events == []

    def test_fallback_logged_at_debug(
        self, resolver: Resolver, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.DEBUG, logger="localekit.runtime.resolver"):
            resolver.resolve("de-AT", "only_en")
        assert any("only_en" in r.getMessage() for r in caplog.records)


class TestMissingResource:
    """Failures carry the key, requested locale and searched chain."""

    def test_missing_key(self, resolver: Resolver) -> None:
        with pytest.raises(MissingResourceError) as exc_info:
            resolver.resolve("de-AT", "nope")
        error = exc_info.value
        assert error.key == "nope"
        assert error.locale_code == "de-AT"
        assert error.chain == ("de", "en")
        assert error.diagnostic is not None
        assert error.diagnostic.code == DiagnosticCode.RESOURCE_NOT_FOUND
        assert "nope" in str(error)

    def test_is_lookup_error(self, resolver: Resolver) -> None:
        with pytest.raises(LookupError):
            resolver.resolve("en", "nope")

    def test_empty_chain(self) -> None:
        resolver = Resolver(ResourceStore({"fr": {"hi": "Salut"}}), "en")
        with pytest.raises(MissingResourceError) as exc_info:
            resolver.resolve("ja", "hi")
        error = exc_info.value
        assert error.chain == ()
        assert error.diagnostic is not None
        assert error.diagnostic.code == DiagnosticCode.NO_LOCALE_AVAILABLE

    def test_empty_store(self) -> None:
        with pytest.raises(MissingResourceError):
            Resolver(ResourceStore(), "en").resolve("en", "hi")


class TestRenderFailures:
    """Compile and render errors propagate unchanged."""

    def test_syntax_error(self) -> None:
        resolver = Resolver(ResourceStore({"en": {"bad": "Hello {name"}}), "en")
        with pytest.raises(TemplateSyntaxError):
            resolver.resolve("en", "bad")

    def test_missing_argument(self, resolver: Resolver) -> None:
        with pytest.raises(MissingArgumentError):
            resolver.resolve("en", "greeting")

    def test_malformed_template_does_not_mask_fallback(self) -> None:
        """A broken template in the preferred locale is not skipped for a good one."""
        store = ResourceStore({"de": {"hi": "{oops"}, "en": {"hi": "Hi"}})
        with pytest.raises(TemplateSyntaxError):
            Resolver(store, "en").resolve("de", "hi")


class TestResolverCaches:
    """CacheConfig sizing and cache management."""

    def test_cache_size_from_config(self, store: ResourceStore) -> None:
        resolver = Resolver(store, "en", cache=CacheConfig(size=5))
        assert resolver.get_cache_stats()["maxsize"] == 5

    def test_compiled_templates_reused(self, resolver: Resolver) -> None:
        resolver.resolve("en", "files", {"n": 1})
        resolver.resolve("en", "files", {"n": 2})
        stats = resolver.get_cache_stats()
        assert stats["misses"] == 1
        assert stats["hits"] == 1

    def test_clear_cache(self, resolver: Resolver) -> None:
        resolver.resolve("en", "files", {"n": 1})
        resolver.clear_cache()
        assert resolver.get_cache_stats()["size"] == 0

    def test_chain_cache_disabled(self, store: ResourceStore) -> None:
        resolver = Resolver(store, "en", cache=CacheConfig(chain_size=0))
        assert resolver.resolve("de-AT", "only_en") == "English only"

    @pytest.mark.parametrize(("size", "chain_size"), [(0, 10), (-1, 10), (10, -1)])
    def test_invalid_cache_config(self, size: int, chain_size: int) -> None:
        with pytest.raises(ValueError, match="size"):
            CacheConfig(size=size, chain_size=chain_size)

    def test_properties_and_repr(self, resolver: Resolver, store: ResourceStore) -> None:
        assert resolver.store is store
        assert resolver.default_locale == LocaleTag.parse("en")
        assert repr(resolver) == "Resolver(default_locale='en', locales=4)"
