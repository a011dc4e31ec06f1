"""Tests for locales/fallback.py - fallback chain construction and caching."""

from __future__ import annotations

import logging

import pytest
from hypothesis import event, given
from hypothesis import strategies as st

from localekit.locales import FallbackChainBuilder, LocaleTag
from tests.strategies import locale_tags


def tags(*texts: str) -> list[LocaleTag]:
    return [LocaleTag.parse(text) for text in texts]


EN = LocaleTag.parse("en")
FR = LocaleTag.parse("fr")


class TestFallbackChainBuild:
    """build() ordering rules."""

    def test_region_falls_back_to_language_then_default(self) -> None:
        """en-US with {en, fr} and default fr gives [en, fr]."""
        builder = FallbackChainBuilder()
        chain = builder.build(LocaleTag.parse("en-US"), tags("en", "fr"), FR)
        assert chain == (EN, FR)

    def test_exact_match_first(self) -> None:
        builder = FallbackChainBuilder()
        available = tags("en-US", "en", "de")
        chain = builder.build(LocaleTag.parse("en-US"), available, LocaleTag.parse("de"))
        assert [str(t) for t in chain] == ["en-US", "en", "de"]

    def test_variants_stripped_before_region_before_script(self) -> None:
        builder = FallbackChainBuilder()
        available = tags("sr-Latn-RS-1996", "sr-Latn-RS", "sr-Latn", "sr", "en")
        chain = builder.build(LocaleTag.parse("sr-Latn-RS-1996-fonipa"), available, EN)
        assert [str(t) for t in chain] == ["sr-Latn-RS-1996", "sr-Latn-RS", "sr-Latn", "sr", "en"]

    def test_default_not_duplicated(self) -> None:
        builder = FallbackChainBuilder()
        chain = builder.build(LocaleTag.parse("en-GB"), tags("en", "fr"), EN)
        assert chain == (EN,)

    def test_unavailable_default_not_appended(self) -> None:
        builder = FallbackChainBuilder()
        chain = builder.build(LocaleTag.parse("de-AT"), tags("de", "fr"), EN)
        assert chain == (LocaleTag.parse("de"),)

    def test_empty_when_nothing_matches(self) -> None:
        builder = FallbackChainBuilder()
        assert builder.build(LocaleTag.parse("ja"), tags("fr"), EN) == ()

    def test_sibling_regions_not_included(self) -> None:
        """en-US never falls back to en-GB, only to its own ancestors."""
        builder = FallbackChainBuilder()
        chain = builder.build(LocaleTag.parse("en-US"), tags("en-GB", "fr"), FR)
        assert chain == (FR,)

    @pytest.mark.parametrize("container", [list, tuple, set, frozenset])
    def test_container_type_does_not_matter(self, container: type) -> None:
        builder = FallbackChainBuilder(cache_size=0)
        available = container(tags("en", "fr", "en-US"))
        chain = builder.build(LocaleTag.parse("en-US"), available, FR)
        assert [str(t) for t in chain] == ["en-US", "en", "fr"]

    def test_chain_logged_at_debug(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.DEBUG, logger="localekit.locales.fallback"):
            FallbackChainBuilder().build(LocaleTag.parse("en-US"), tags("en"), EN)
        assert any("Fallback chain for en-US" in r.getMessage() for r in caplog.records)


class TestFallbackChainProperties:
    """Invariants of every chain."""

    @given(
        requested=locale_tags(),
        available=st.sets(locale_tags(), max_size=8),
        default=locale_tags(),
    )
    def test_chain_members_available_and_unique(
        self, requested: LocaleTag, available: set[LocaleTag], default: LocaleTag
    ) -> None:
        chain = FallbackChainBuilder(cache_size=0).build(requested, available, default)
        assert len(set(chain)) == len(chain)
        assert all(tag in available for tag in chain)
        event(f"length={len(chain)}")

    @given(requested=locale_tags(), available=st.sets(locale_tags(), max_size=8))
    def test_ancestors_precede_default(
        self, requested: LocaleTag, available: set[LocaleTag]
    ) -> None:
        default = LocaleTag("en")
        chain = FallbackChainBuilder(cache_size=0).build(requested, available, default)
        ancestors = [tag for tag in requested.ancestors() if tag in available]
        assert list(chain[: len(ancestors)]) == ancestors
        if default in available and default not in ancestors:
            assert chain[-1] == default

    @given(requested=locale_tags(), available=st.sets(locale_tags(), max_size=8))
    def test_cached_and_uncached_agree(
        self, requested: LocaleTag, available: set[LocaleTag]
    ) -> None:
        cached = FallbackChainBuilder()
        uncached = FallbackChainBuilder(cache_size=0)
        first = cached.build(requested, available, EN)
        assert first == uncached.build(requested, available, EN)
        assert cached.build(requested, available, EN) == first


class TestFallbackChainCache:
    """Bounded cache keyed by (requested, default)."""

    def test_hit_on_repeat(self) -> None:
        builder = FallbackChainBuilder()
        available = tags("en", "fr")
        builder.build(LocaleTag.parse("en-US"), available, FR)
        builder.build(LocaleTag.parse("en-US"), available, FR)
        stats = builder.get_stats()
        assert stats["hits"] == 1
        assert stats["misses"] == 1
        assert stats["size"] == 1

    def test_available_change_invalidates(self) -> None:
        builder = FallbackChainBuilder()
        requested = LocaleTag.parse("en-US")
        assert builder.build(requested, tags("fr"), FR) == (FR,)
        assert builder.build(requested, tags("fr", "en"), FR) == (EN, FR)
        assert builder.get_stats()["size"] == 1

    def test_eviction_bounded(self) -> None:
        builder = FallbackChainBuilder(cache_size=2)
        available = tags("en")
        for text in ("en-US", "en-GB", "en-AU"):
            builder.build(LocaleTag.parse(text), available, EN)
        assert builder.get_stats()["size"] == 2
        assert builder.get_stats()["maxsize"] == 2

    def test_disabled_cache_records_nothing(self) -> None:
        builder = FallbackChainBuilder(cache_size=0)
        builder.build(LocaleTag.parse("en-US"), tags("en"), EN)
        assert builder.get_stats()["size"] == 0

    def test_clear(self) -> None:
        builder = FallbackChainBuilder()
        builder.build(LocaleTag.parse("en-US"), tags("en"), EN)
        builder.clear()
        assert builder.get_stats()["size"] == 0

    def test_negative_size_rejected(self) -> None:
        with pytest.raises(ValueError, match="cache_size"):
            FallbackChainBuilder(cache_size=-1)
