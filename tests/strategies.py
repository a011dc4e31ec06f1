"""Hypothesis strategies for locale tags and message templates.

Provides generators shared by the property tests of the locales, plural and
message packages.
"""

from __future__ import annotations

import string
from decimal import Decimal

from hypothesis import strategies as st
from hypothesis.strategies import composite

from localekit.locales import LocaleTag

# Languages with CLDR data in Babel, spanning different plural systems
KNOWN_LANGUAGES = [
    "en", "de", "fr", "lv", "pl", "ru", "ar", "ja", "zh", "cy", "ga", "he", "cs", "lt",
]

SCRIPTS = ["Latn", "Cyrl", "Hans", "Hant", "Arab"]
REGIONS = ["US", "GB", "DE", "FR", "LV", "CN", "TW", "419", "001"]
VARIANTS = ["1996", "posix", "valencia", "fonipa"]


@composite
def locale_tags(draw: st.DrawFn) -> LocaleTag:
    """Generate valid LocaleTags with any combination of optional fields."""
    language = draw(st.sampled_from(KNOWN_LANGUAGES))
    script = draw(st.none() | st.sampled_from(SCRIPTS))
    region = draw(st.none() | st.sampled_from(REGIONS))
    variants = draw(st.lists(st.sampled_from(VARIANTS), max_size=2, unique=True))
    return LocaleTag(language, script, region, tuple(variants))


@composite
def locale_strings(draw: st.DrawFn) -> str:
    """Generate locale strings in mixed case with '-' or '_' separators."""
    tag = draw(locale_tags())
    separator = draw(st.sampled_from(["-", "_"]))
    parts = []
    for part in tag.to_canonical_string().split("-"):
        parts.append(draw(st.sampled_from([part, part.upper(), part.lower()])))
    return separator.join(parts)


# Literal text containing none of the characters special in templates
plain_text = st.text(
    alphabet=st.characters(
        blacklist_characters="{}'#|",
        blacklist_categories=("Cs",),
    ),
    max_size=40,
)


@composite
def quoted_literals(draw: st.DrawFn) -> tuple[str, str]:
    """Generate (template, expected rendering) pairs made of literal text only.

    Mixes plain text, doubled apostrophes and quoted braces.
    """
    template: list[str] = []
    expected: list[str] = []
    # A quoted run continues through a following apostrophe, so anything
    # starting with one is separated from a preceding quoted brace
    after_brace = False
    for _ in range(draw(st.integers(min_value=0, max_value=6))):
        kind = draw(st.sampled_from(["text", "apostrophe", "brace"]))
        match kind:
            case "text":
                text = draw(plain_text)
                template.append(text)
                expected.append(text)
                after_brace = after_brace and not text
            case "apostrophe":
                if after_brace:
                    template.append(" ")
                    expected.append(" ")
                template.append("''")
                expected.append("'")
                after_brace = False
            case _:
                brace = draw(st.sampled_from(["{", "}", "{}"]))
                if after_brace:
                    template.append(" ")
                    expected.append(" ")
                template.append(f"'{brace}'")
                expected.append(brace)
                after_brace = True
    return "".join(template), "".join(expected)


argument_names = st.text(
    alphabet=string.ascii_letters + "_",
    min_size=1,
    max_size=12,
)

plural_numbers = st.one_of(
    st.integers(min_value=-1_000_000, max_value=1_000_000),
    st.decimals(
        min_value=Decimal("-1000000"),
        max_value=Decimal("1000000"),
        allow_nan=False,
        allow_infinity=False,
        places=3,
    ),
    st.floats(min_value=-1e6, max_value=1e6, allow_nan=False, allow_infinity=False),
)
