"""Normalized locale identifiers.

LocaleTag is the lookup key for every resource in the store and the input to
fallback-chain construction. Tags are parsed once at the system boundary and
are immutable afterwards, so two tags compare equal exactly when their
normalized fields match.

Grammar (BCP-47 subset, ``-`` or ``_`` separators):

    language[-Script][-REGION][-variant...]

    language  2-3 or 5-8 ASCII letters        -> lowercase
    Script    4 ASCII letters                 -> titlecase
    REGION    2 ASCII letters or 3 digits     -> uppercase
    variant   5-8 alphanumerics, or a digit
              followed by 3 alphanumerics     -> lowercase

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import functools
import logging
import re
from dataclasses import dataclass

from localekit.diagnostics import ErrorTemplate, MalformedTagError

__all__ = ["LocaleTag", "as_locale_tag"]

logger = logging.getLogger(__name__)

_LANGUAGE = re.compile(r"[a-zA-Z]{2,3}|[a-zA-Z]{5,8}")
_SCRIPT = re.compile(r"[a-zA-Z]{4}")
_REGION = re.compile(r"[a-zA-Z]{2}|[0-9]{3}")
_VARIANT = re.compile(r"[a-zA-Z0-9]{5,8}|[0-9][a-zA-Z0-9]{3}")
_SEPARATOR = re.compile(r"[-_]")
# POSIX locale names carry ".codeset" and "@modifier" suffixes (de_DE.UTF-8@euro)
_POSIX_SUFFIX = re.compile(r"[.@].*$")


@functools.total_ordering
@dataclass(frozen=True, slots=True, eq=True, order=False)
class LocaleTag:
    """Immutable, normalized locale identifier.

    Construct with LocaleTag.parse() for strings, or directly / via of() from
    components. Components are normalized (case) and validated on
    construction; invalid components raise MalformedTagError.

    Attributes:
        language: ISO 639 language subtag, lowercase
        script: ISO 15924 script subtag, titlecase (e.g. "Hant"), or None
        region: ISO 3166 / UN M.49 region subtag, uppercase, or None
        variants: Registered variant subtags, lowercase, in input order

    Examples:
        >>> LocaleTag.parse("zh_hant_tw")
        LocaleTag(language='zh', script='Hant', region='TW', variants=())
        >>> str(LocaleTag.parse("EN-us"))
        'en-US'
        >>> LocaleTag.parse("en-US").parent()
        LocaleTag(language='en', script=None, region=None, variants=())
    """

    language: str
    script: str | None = None
    region: str | None = None
    variants: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        """Normalize subtag case and validate every component.

        Raises:
            MalformedTagError: If a component does not fit its slot
        """
        raw = "-".join(
            part
            for part in (self.language, self.script, self.region, *self.variants)
            if part
        )
        if not _LANGUAGE.fullmatch(self.language):
            raise MalformedTagError(
                ErrorTemplate.tag_invalid_language(raw, self.language), tag=raw
            )
        object.__setattr__(self, "language", self.language.lower())

        if self.script is not None:
            if not _SCRIPT.fullmatch(self.script):
                raise MalformedTagError(
                    ErrorTemplate.tag_invalid_subtag(raw, self.script), tag=raw
                )
            object.__setattr__(self, "script", self.script.title())

        if self.region is not None:
            if not _REGION.fullmatch(self.region):
                raise MalformedTagError(
                    ErrorTemplate.tag_invalid_subtag(raw, self.region), tag=raw
                )
            object.__setattr__(self, "region", self.region.upper())

        variants: list[str] = []
        for variant in self.variants:
            # parse() stops at a repeated variant as well
            if not _VARIANT.fullmatch(variant) or variant.lower() in variants:
                raise MalformedTagError(
                    ErrorTemplate.tag_invalid_subtag(raw, variant), tag=raw
                )
            variants.append(variant.lower())
        object.__setattr__(self, "variants", tuple(variants))

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def parse(cls, text: str, *, strict: bool = True) -> LocaleTag:
        """Parse a locale string into a normalized tag.

        Args:
            text: Locale string, e.g. "en", "en-US", "zh_Hant_TW", "de-DE-1996"
            strict: When True (default), any subtag that does not fit its slot
                raises MalformedTagError. When False, POSIX ".codeset" and
                "@modifier" suffixes are removed and everything from the first
                unrecognized subtag onwards is dropped (logged at DEBUG).
                The language subtag is validated in both modes.

        Returns:
            Normalized LocaleTag

        Raises:
            MalformedTagError: If the string is empty, the language subtag is
                invalid, or (strict mode) any later subtag is unrecognized

        Examples:
            >>> LocaleTag.parse("en_US.UTF-8", strict=False)
            LocaleTag(language='en', script=None, region='US', variants=())
            >>> str(LocaleTag.parse("en-US-x-private", strict=False))
            'en-US'
        """
        source = text.strip()
        if not source:
            raise MalformedTagError(ErrorTemplate.tag_empty(), tag=text)

        if not strict and _POSIX_SUFFIX.search(source):
            stripped = _POSIX_SUFFIX.sub("", source)
            logger.debug("Dropped POSIX suffix from locale %r -> %r", text, stripped)
            source = stripped

        parts = _SEPARATOR.split(source)
        language = parts[0]
        if not _LANGUAGE.fullmatch(language):
            raise MalformedTagError(
                ErrorTemplate.tag_invalid_language(text, language), tag=text
            )

        index = 1
        script: str | None = None
        region: str | None = None
        variants: list[str] = []

        if index < len(parts) and _SCRIPT.fullmatch(parts[index]):
            script = parts[index]
            index += 1
        if index < len(parts) and _REGION.fullmatch(parts[index]):
            region = parts[index]
            index += 1
        while index < len(parts) and _VARIANT.fullmatch(parts[index]):
            if parts[index].lower() in variants:
                break
            variants.append(parts[index].lower())
            index += 1

        if index < len(parts):
            if strict:
                raise MalformedTagError(
                    ErrorTemplate.tag_invalid_subtag(text, parts[index]), tag=text
                )
            logger.debug(
                "Dropped unrecognized subtags %r from locale %r",
                "-".join(parts[index:]),
                text,
            )

        return cls(language, script, region, tuple(variants))

    @classmethod
    def of(
        cls,
        language: str,
        *,
        script: str | None = None,
        region: str | None = None,
        variants: tuple[str, ...] = (),
    ) -> LocaleTag:
        """Build a tag from components (keyword form of the constructor)."""
        return cls(language, script, region, tuple(variants))

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def to_canonical_string(self) -> str:
        """Return the canonical BCP-47 form used as the lookup key.

        Parsing the result yields an equal tag.
        """
        return "-".join(self._parts())

    def to_posix(self) -> str:
        """Return the underscore form understood by Babel (e.g. "zh_Hant_TW")."""
        return "_".join(self._parts())

    def __str__(self) -> str:
        return self.to_canonical_string()

    def _parts(self) -> list[str]:
        parts = [self.language]
        if self.script:
            parts.append(self.script)
        if self.region:
            parts.append(self.region)
        parts.extend(self.variants)
        return parts

    # ------------------------------------------------------------------
    # Comparison and hierarchy
    # ------------------------------------------------------------------

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, LocaleTag):
            return NotImplemented
        return self.to_canonical_string() < other.to_canonical_string()

    def matches(self, other: LocaleTag) -> bool:
        """Exact match on all normalized fields."""
        return self == other

    def specificity_rank(self) -> int:
        """Number of present fields; each variant counts once.

        >>> LocaleTag.parse("sr-Latn-RS").specificity_rank()
        3
        """
        rank = 1
        if self.script:
            rank += 1
        if self.region:
            rank += 1
        return rank + len(self.variants)

    def parent(self) -> LocaleTag | None:
        """Strip the least specific present field.

        Variants go first (last one first), then the region, then the script.
        A bare language has no parent.
        """
        if self.variants:
            return LocaleTag(self.language, self.script, self.region, self.variants[:-1])
        if self.region:
            return LocaleTag(self.language, self.script)
        if self.script:
            return LocaleTag(self.language)
        return None

    def ancestors(self) -> tuple[LocaleTag, ...]:
        """This tag followed by each successive parent down to the bare language.

        >>> [str(t) for t in LocaleTag.parse("zh-Hant-TW").ancestors()]
        ['zh-Hant-TW', 'zh-Hant', 'zh']
        """
        result: list[LocaleTag] = []
        current: LocaleTag | None = self
        while current is not None:
            result.append(current)
            current = current.parent()
        return tuple(result)


def as_locale_tag(locale: LocaleTag | str) -> LocaleTag:
    """Return ``locale`` unchanged if it is a LocaleTag, else parse it strictly."""
    if isinstance(locale, LocaleTag):
        return locale
    return LocaleTag.parse(locale)
