"""Tests for locales/tag.py - LocaleTag parsing, normalization and hierarchy."""

from __future__ import annotations

import logging

import pytest
from hypothesis import event, example, given
from hypothesis import strategies as st

from localekit.diagnostics import DiagnosticCode, MalformedTagError
from localekit.locales import LocaleTag, as_locale_tag
from tests.strategies import locale_strings, locale_tags

# ============================================================================
# Parsing
# ============================================================================


class TestLocaleTagParse:
    """LocaleTag.parse() in strict mode."""

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("en", LocaleTag("en")),
            ("EN", LocaleTag("en")),
            ("en-US", LocaleTag("en", region="US")),
            ("en_us", LocaleTag("en", region="US")),
            ("zh-hant-tw", LocaleTag("zh", "Hant", "TW")),
            ("sr_Latn", LocaleTag("sr", "Latn")),
            ("es-419", LocaleTag("es", region="419")),
            ("de-DE-1996", LocaleTag("de", region="DE", variants=("1996",))),
            ("ca-ES-VALENCIA", LocaleTag("ca", region="ES", variants=("valencia",))),
            ("haw", LocaleTag("haw")),
        ],
    )
    def test_parses_and_normalizes(self, text: str, expected: LocaleTag) -> None:
        """Subtags are recognized by shape and normalized by case."""
        assert LocaleTag.parse(text) == expected

    def test_surrounding_whitespace_is_ignored(self) -> None:
        assert LocaleTag.parse("  fr-CA ") == LocaleTag("fr", region="CA")

    @pytest.mark.parametrize("text", ["", "   "])
    def test_empty_rejected(self, text: str) -> None:
        with pytest.raises(MalformedTagError) as exc_info:
            LocaleTag.parse(text)
        assert exc_info.value.diagnostic is not None
        assert exc_info.value.diagnostic.code == DiagnosticCode.TAG_EMPTY

    @pytest.mark.parametrize("text", ["e", "englishlanguage", "1a", "en4"])
    def test_invalid_language_rejected(self, text: str) -> None:
        with pytest.raises(MalformedTagError) as exc_info:
            LocaleTag.parse(text)
        assert exc_info.value.diagnostic is not None
        assert exc_info.value.diagnostic.code == DiagnosticCode.TAG_INVALID_LANGUAGE
        assert exc_info.value.tag == text

    @pytest.mark.parametrize(
        "text", ["en-US.UTF-8", "de_DE@euro", "en-x-private", "en-US-US", "en--US"]
    )
    def test_strict_rejects_unrecognized_subtags(self, text: str) -> None:
        with pytest.raises(MalformedTagError) as exc_info:
            LocaleTag.parse(text)
        assert exc_info.value.diagnostic is not None
        assert exc_info.value.diagnostic.code == DiagnosticCode.TAG_INVALID_SUBTAG

    def test_malformed_tag_is_value_error(self) -> None:
        """Callers catching ValueError also catch malformed tags."""
        with pytest.raises(ValueError, match="en-US-US"):
            LocaleTag.parse("en-US-US")


class TestLocaleTagLenientParse:
    """LocaleTag.parse(strict=False) truncation behaviour."""

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("en_US.UTF-8", "en-US"),
            ("de_DE.UTF-8@euro", "de-DE"),
            ("sr_RS@latin", "sr-RS"),
            ("en-US-x-private", "en-US"),
            ("en-US-US", "en-US"),
            ("pt-BR-1996-1996", "pt-BR-1996"),
        ],
    )
    def test_drops_trailing_segments(self, text: str, expected: str) -> None:
        assert str(LocaleTag.parse(text, strict=False)) == expected

    def test_truncation_logged_at_debug(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.DEBUG, logger="localekit.locales.tag"):
            LocaleTag.parse("en-US-x-private", strict=False)
        assert any("x-private" in record.getMessage() for record in caplog.records)

    def test_language_still_validated(self) -> None:
        with pytest.raises(MalformedTagError):
            LocaleTag.parse("1-US", strict=False)


# ============================================================================
# Construction
# ============================================================================


class TestLocaleTagConstruction:
    """Constructor and of() builder validate and normalize components."""

    def test_constructor_normalizes_case(self) -> None:
        tag = LocaleTag("ZH", "hANT", "tw", ("POSIX",))
        assert tag == LocaleTag("zh", "Hant", "TW", ("posix",))

    def test_of_builder(self) -> None:
        assert LocaleTag.of("sr", script="latn", region="rs") == LocaleTag.parse("sr-Latn-RS")

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"language": "e"},
            {"language": "en", "script": "Lat"},
            {"language": "en", "region": "USA"},
            {"language": "en", "variants": ("abc",)},
        ],
    )
    def test_invalid_component_rejected(self, kwargs: dict[str, object]) -> None:
        with pytest.raises(MalformedTagError):
            LocaleTag.of(**kwargs)  # type: ignore[arg-type]

    @pytest.mark.parametrize("variants", [("fonipa", "fonipa"), ("1996", "FONIPA", "fonipa")])
    def test_duplicate_variants_rejected(self, variants: tuple[str, ...]) -> None:
        """Constructed tags must stay parseable from their canonical string."""
        with pytest.raises(MalformedTagError, match="fonipa") as exc_info:
            LocaleTag("en", variants=variants)
        assert exc_info.value.tag.startswith("en-")
        with pytest.raises(MalformedTagError):
            LocaleTag.of("en", variants=variants)

    def test_distinct_variants_survive_parse(self) -> None:
        tag = LocaleTag("sl", region="IT", variants=("rozaj", "biske"))
        assert LocaleTag.parse(str(tag)) == tag

    def test_immutable(self) -> None:
        tag = LocaleTag("en")
        with pytest.raises(AttributeError):
            tag.language = "fr"  # type: ignore[misc]

    def test_as_locale_tag_passes_tags_through(self) -> None:
        tag = LocaleTag("en")
        assert as_locale_tag(tag) is tag
        assert as_locale_tag("en-gb") == LocaleTag("en", region="GB")


# ============================================================================
# Rendering and hierarchy
# ============================================================================


class TestLocaleTagRendering:
    """Canonical and POSIX string forms."""

    def test_canonical_string(self) -> None:
        assert LocaleTag.parse("zh_hant_tw").to_canonical_string() == "zh-Hant-TW"

    def test_posix(self) -> None:
        assert LocaleTag.parse("zh-Hant-TW").to_posix() == "zh_Hant_TW"

    def test_str_is_canonical(self) -> None:
        assert str(LocaleTag.parse("DE-de-1996")) == "de-DE-1996"

    @given(tag=locale_tags())
    def test_canonical_string_round_trips(self, tag: LocaleTag) -> None:
        """Parsing the canonical string yields an equal tag."""
        assert LocaleTag.parse(tag.to_canonical_string()) == tag
        event(f"rank={tag.specificity_rank()}")

    @given(text=locale_strings())
    @example(text="EN_us")
    def test_canonicalization_idempotent(self, text: str) -> None:
        """parse(str(parse(s))) == parse(s) for every accepted string."""
        once = LocaleTag.parse(text)
        assert LocaleTag.parse(str(once)) == once
        assert str(LocaleTag.parse(str(once))) == str(once)


class TestLocaleTagHierarchy:
    """parent(), ancestors(), specificity_rank(), matches() and ordering."""

    def test_parent_strips_last_variant_first(self) -> None:
        tag = LocaleTag.parse("de-DE-1996-fonipa")
        assert str(tag.parent()) == "de-DE-1996"

    def test_parent_order_region_then_script(self) -> None:
        tag = LocaleTag.parse("zh-Hant-TW")
        assert [str(t) for t in tag.ancestors()] == ["zh-Hant-TW", "zh-Hant", "zh"]

    def test_bare_language_has_no_parent(self) -> None:
        assert LocaleTag("en").parent() is None
        assert LocaleTag("en").ancestors() == (LocaleTag("en"),)

    @pytest.mark.parametrize(
        ("text", "rank"),
        [("en", 1), ("en-US", 2), ("sr-Latn-RS", 3), ("de-DE-1996-fonipa", 4)],
    )
    def test_specificity_rank(self, text: str, rank: int) -> None:
        assert LocaleTag.parse(text).specificity_rank() == rank

    @given(tag=locale_tags())
    def test_ancestors_strictly_less_specific(self, tag: LocaleTag) -> None:
        ranks = [ancestor.specificity_rank() for ancestor in tag.ancestors()]
        assert ranks == sorted(ranks, reverse=True)
        assert len(set(ranks)) == len(ranks)
        assert tag.ancestors()[-1] == LocaleTag(tag.language)

    def test_matches_is_exact(self) -> None:
        assert LocaleTag.parse("en-us").matches(LocaleTag.parse("EN_US"))
        assert not LocaleTag.parse("en-US").matches(LocaleTag.parse("en"))

    def test_ordering_by_canonical_string(self) -> None:
        tags = [LocaleTag.parse(t) for t in ("fr", "en-US", "en", "de")]
        assert [str(t) for t in sorted(tags)] == ["de", "en", "en-US", "fr"]

    @given(a=locale_tags(), b=locale_tags())
    def test_equal_tags_hash_equal(self, a: LocaleTag, b: LocaleTag) -> None:
        if a == b:
            assert hash(a) == hash(b)
        assert (a == b) == (str(a) == str(b))

    @given(text=st.text(max_size=12))
    def test_parse_never_raises_unexpected_errors(self, text: str) -> None:
        """Arbitrary input either parses or raises MalformedTagError."""
        try:
            LocaleTag.parse(text, strict=False)
        except MalformedTagError:
            event("rejected")
        else:
            event("accepted")
