"""Error message templates.

Centralized error message templates for testable, consistent error messages.
Python 3.13+. Zero external dependencies.
"""

from collections.abc import Sequence

from .codes import Diagnostic, DiagnosticCode, SourceSpan

__all__ = ["ErrorTemplate"]


class ErrorTemplate:
    """Centralized error message templates.

    All error messages are created here. NO f-strings in exception constructors!
    This keeps messages testable and documents every error case in one place.
    """

    # ------------------------------------------------------------------
    # Locale tags
    # ------------------------------------------------------------------

    @staticmethod
    def tag_empty() -> Diagnostic:
        """Empty or whitespace-only locale string."""
        return Diagnostic(
            code=DiagnosticCode.TAG_EMPTY,
            message="Locale tag is empty",
            hint="Pass a tag such as 'en', 'en-US' or 'zh-Hant-TW'",
        )

    @staticmethod
    def tag_invalid_language(tag: str, subtag: str) -> Diagnostic:
        """Language subtag is not 2-3 or 5-8 ASCII letters.

        Args:
            tag: Full input string
            subtag: Offending language subtag
        """
        msg = f"Invalid language subtag '{subtag}' in locale tag '{tag}'"
        return Diagnostic(
            code=DiagnosticCode.TAG_INVALID_LANGUAGE,
            message=msg,
            hint="Language subtags are 2-3 letters (ISO 639) or 5-8 letters",
        )

    @staticmethod
    def tag_invalid_subtag(tag: str, subtag: str) -> Diagnostic:
        """A subtag does not fit the script, region or variant slot.

        Args:
            tag: Full input string
            subtag: First unrecognized subtag
        """
        msg = f"Unrecognized subtag '{subtag}' in locale tag '{tag}'"
        return Diagnostic(
            code=DiagnosticCode.TAG_INVALID_SUBTAG,
            message=msg,
            hint=(
                "Expected language[-Script][-REGION][-variant...]; "
                "parse with strict=False to drop unrecognized trailing subtags"
            ),
        )

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    @staticmethod
    def resource_not_found(key: str, locale_code: str, chain: Sequence[str]) -> Diagnostic:
        """No locale in the fallback chain has the key.

        Args:
            key: Requested resource key
            locale_code: Canonical requested locale
            chain: Canonical locales that were searched (may be empty)
        """
        msg = f"Resource '{key}' not found for locale '{locale_code}'"
        if chain:
            msg += f" (searched: {', '.join(chain)})"
        return Diagnostic(
            code=DiagnosticCode.RESOURCE_NOT_FOUND,
            message=msg,
            locale_code=locale_code,
            hint="Add the key to one of the loaded locales or to the default locale",
        )

    @staticmethod
    def no_locale_available(key: str, locale_code: str, default_code: str) -> Diagnostic:
        """Fallback chain is empty: neither an ancestor nor the default is loaded.

        Args:
            key: Requested resource key
            locale_code: Canonical requested locale
            default_code: Canonical default locale
        """
        msg = (
            f"Resource '{key}' not found: no loaded locale matches '{locale_code}' "
            f"and default locale '{default_code}' is not loaded"
        )
        return Diagnostic(
            code=DiagnosticCode.NO_LOCALE_AVAILABLE,
            message=msg,
            locale_code=locale_code,
            hint="Load resources for the default locale",
        )

    # ------------------------------------------------------------------
    # Template syntax
    # ------------------------------------------------------------------

    @staticmethod
    def unexpected_eof(span: SourceSpan, expected: str) -> Diagnostic:
        """Template ended inside an argument or clause.

        Args:
            span: Location of the end of input
            expected: Description of what was expected
        """
        return Diagnostic(
            code=DiagnosticCode.UNEXPECTED_EOF,
            message=f"Unexpected end of template, expected {expected}",
            span=span,
            hint="Check that every '{' has a matching '}'",
        )

    @staticmethod
    def unmatched_brace(span: SourceSpan) -> Diagnostic:
        """Closing brace without a matching opening brace."""
        return Diagnostic(
            code=DiagnosticCode.UNMATCHED_BRACE,
            message="Unmatched '}' in template",
            span=span,
            hint="Quote literal braces as '{' and '}'",
        )

    @staticmethod
    def invalid_argument_name(name: str, span: SourceSpan) -> Diagnostic:
        """Argument name is empty or contains pattern syntax characters.

        Args:
            name: Offending name (may be empty)
            span: Location of the name
        """
        shown = f"'{name}'" if name else "empty name"
        return Diagnostic(
            code=DiagnosticCode.INVALID_ARGUMENT_NAME,
            message=f"Invalid argument name: {shown}",
            span=span,
            hint="Use an identifier such as {count} or a number such as {0}",
        )

    @staticmethod
    def unknown_argument_type(arg_type: str, span: SourceSpan) -> Diagnostic:
        """Argument type keyword is not supported.

        Args:
            arg_type: Keyword found after the first comma
            span: Location of the keyword
        """
        return Diagnostic(
            code=DiagnosticCode.UNKNOWN_ARGUMENT_TYPE,
            message=f"Unknown argument type '{arg_type}'",
            span=span,
            hint="Supported types: number, date, time, plural, selectordinal, select, choice",
        )

    @staticmethod
    def unsupported_style(style: str, span: SourceSpan) -> Diagnostic:
        """Argument style is syntactically valid ICU but unsupported."""
        return Diagnostic(
            code=DiagnosticCode.UNSUPPORTED_STYLE,
            message=f"Unsupported argument style '{style}'",
            span=span,
            hint="Number skeletons ('::...') are not supported; use a decimal pattern",
        )

    @staticmethod
    def unknown_plural_keyword(keyword: str, span: SourceSpan) -> Diagnostic:
        """Plural selector is neither '=N' nor a CLDR category.

        Args:
            keyword: Offending selector
            span: Location of the selector
        """
        return Diagnostic(
            code=DiagnosticCode.UNKNOWN_PLURAL_KEYWORD,
            message=f"Unknown plural keyword '{keyword}'",
            span=span,
            hint="Use zero, one, two, few, many, other or an explicit value such as =0",
        )

    @staticmethod
    def missing_other_branch(argument_name: str, span: SourceSpan) -> Diagnostic:
        """Plural or selectordinal clause without an 'other' branch."""
        return Diagnostic(
            code=DiagnosticCode.MISSING_OTHER_BRANCH,
            message=f"Plural clause for '{argument_name}' has no 'other' branch",
            span=span,
            argument_name=argument_name,
            hint="Every plural and selectordinal clause needs an other{...} branch",
        )

    @staticmethod
    def duplicate_selector(selector: str, span: SourceSpan) -> Diagnostic:
        """Same selector appears twice in one clause."""
        return Diagnostic(
            code=DiagnosticCode.DUPLICATE_SELECTOR,
            message=f"Duplicate selector '{selector}'",
            span=span,
        )

    @staticmethod
    def invalid_offset(text: str, span: SourceSpan) -> Diagnostic:
        """'offset:' not followed by a number, or given twice."""
        return Diagnostic(
            code=DiagnosticCode.INVALID_OFFSET,
            message=f"Invalid plural offset '{text}'",
            span=span,
            hint="Write offset:N before the first selector, e.g. offset:1",
        )

    @staticmethod
    def invalid_explicit_value(text: str, span: SourceSpan) -> Diagnostic:
        """'=' selector not followed by a number."""
        return Diagnostic(
            code=DiagnosticCode.INVALID_EXPLICIT_VALUE,
            message=f"Invalid explicit value selector '{text}'",
            span=span,
            hint="Explicit value selectors are numbers, e.g. =0 or =1.5",
        )

    @staticmethod
    def expected_sub_message(span: SourceSpan) -> Diagnostic:
        """Selector not followed by a braced sub-message."""
        return Diagnostic(
            code=DiagnosticCode.EXPECTED_SUB_MESSAGE,
            message="Expected '{' to start a sub-message",
            span=span,
        )

    @staticmethod
    def invalid_choice(reason: str, span: SourceSpan) -> Diagnostic:
        """Malformed choice clause (limits, separators or ordering)."""
        return Diagnostic(
            code=DiagnosticCode.INVALID_CHOICE,
            message=f"Invalid choice clause: {reason}",
            span=span,
            hint="Write limits in ascending order, e.g. {n, choice, 0#none|1#one|1<many}",
        )

    @staticmethod
    def nesting_depth_exceeded(max_depth: int, span: SourceSpan) -> Diagnostic:
        """Clauses nested deeper than the parser allows."""
        return Diagnostic(
            code=DiagnosticCode.NESTING_DEPTH_EXCEEDED,
            message=f"Maximum clause nesting depth ({max_depth}) exceeded",
            span=span,
        )

    @staticmethod
    def unexpected_character(char: str, expected: str, span: SourceSpan) -> Diagnostic:
        """Character that does not fit the argument grammar.

        Args:
            char: Character found
            expected: Description of what was expected
            span: Location of the character
        """
        return Diagnostic(
            code=DiagnosticCode.UNEXPECTED_CHARACTER,
            message=f"Unexpected character {char!r}, expected {expected}",
            span=span,
        )

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    @staticmethod
    def argument_not_provided(argument_name: str) -> Diagnostic:
        """Referenced argument absent from the render context."""
        return Diagnostic(
            code=DiagnosticCode.ARGUMENT_NOT_PROVIDED,
            message=f"Argument '{argument_name}' not provided",
            argument_name=argument_name,
            hint=f"Pass '{argument_name}' in the arguments mapping",
        )

    @staticmethod
    def type_mismatch(
        argument_name: str,
        expected: str,
        received: str,
        locale_code: str | None = None,
    ) -> Diagnostic:
        """Value kind incompatible with the requested format.

        Args:
            argument_name: Argument being rendered
            expected: Expected value kind(s)
            received: Actual value kind
            locale_code: Render locale
        """
        return Diagnostic(
            code=DiagnosticCode.TYPE_MISMATCH,
            message=f"Argument '{argument_name}' cannot be formatted as {expected}",
            argument_name=argument_name,
            expected_type=expected,
            received_type=received,
            locale_code=locale_code,
        )

    @staticmethod
    def no_matching_branch(argument_name: str, selector: str) -> Diagnostic:
        """Select clause without a match and without an 'other' branch."""
        return Diagnostic(
            code=DiagnosticCode.NO_MATCHING_BRANCH,
            message=(
                f"No branch of select clause '{argument_name}' matches '{selector}' "
                "and there is no 'other' branch"
            ),
            argument_name=argument_name,
            hint="Add an other{...} branch",
        )

    @staticmethod
    def formatting_failed(argument_name: str, reason: str, locale_code: str) -> Diagnostic:
        """Babel failed to format a value."""
        return Diagnostic(
            code=DiagnosticCode.FORMATTING_FAILED,
            message=f"Formatting argument '{argument_name}' failed: {reason}",
            argument_name=argument_name,
            locale_code=locale_code,
        )
