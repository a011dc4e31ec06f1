"""localekit exception hierarchy with structured diagnostics.

All exceptions accept either a plain message or a Diagnostic object; when a
Diagnostic is given, the exception message is its Rust-style rendering and
the Diagnostic stays available on the ``diagnostic`` attribute.

Hierarchy:
    LocalizeError
    ├── MalformedTagError        (also ValueError)
    ├── TemplateSyntaxError
    ├── RenderError
    │   ├── MissingArgumentError
    │   └── FormatError
    └── MissingResourceError     (also LookupError)

Python 3.13+. Zero external dependencies.
"""

from .codes import Diagnostic, SourceSpan

__all__ = [
    "FormatError",
    "LocalizeError",
    "MalformedTagError",
    "MissingArgumentError",
    "MissingResourceError",
    "RenderError",
    "TemplateSyntaxError",
]


class LocalizeError(Exception):
    """Base exception for all localekit errors.

    Attributes:
        diagnostic: Structured diagnostic information (optional)
    """

    def __init__(self, message: str | Diagnostic) -> None:
        """Initialize LocalizeError.

        Args:
            message: Error message string OR Diagnostic object
        """
        if isinstance(message, Diagnostic):
            self.diagnostic: Diagnostic | None = message
            super().__init__(message.format_error())
        else:
            self.diagnostic = None
            super().__init__(message)


class MalformedTagError(LocalizeError, ValueError):
    """Locale string could not be parsed into a LocaleTag.

    Raised at parse time; malformed tags are never silently coerced.

    Attributes:
        tag: The rejected input string
    """

    def __init__(self, message: str | Diagnostic, *, tag: str = "") -> None:
        super().__init__(message)
        self.tag = tag


class TemplateSyntaxError(LocalizeError):
    """Malformed message template, rejected at compile time.

    Attributes:
        template: Template source that failed to compile
        span: Location of the error inside the template
    """

    def __init__(
        self,
        message: str | Diagnostic,
        *,
        template: str = "",
        span: SourceSpan | None = None,
    ) -> None:
        super().__init__(message)
        self.template = template
        if span is None and self.diagnostic is not None:
            span = self.diagnostic.span
        self.span = span

    @property
    def position(self) -> int | None:
        """Character offset of the error, or None when unknown."""
        return self.span.start if self.span is not None else None


class RenderError(LocalizeError):
    """Runtime error while rendering a compiled message."""


class MissingArgumentError(RenderError):
    """A template references an argument absent from the render context.

    Attributes:
        argument_name: Name of the missing argument
    """

    def __init__(self, message: str | Diagnostic, *, argument_name: str = "") -> None:
        super().__init__(message)
        self.argument_name = argument_name


class FormatError(RenderError):
    """An argument value is incompatible with its requested format.

    Examples:
    - Formatting a string with {n, number}
    - A select clause with no matching branch and no 'other'
    - Babel failing to format a value for the locale
    """


class MissingResourceError(LocalizeError, LookupError):
    """No locale in the fallback chain provides the requested key.

    Attributes:
        key: Resource key that was requested
        locale_code: Canonical requested locale
        chain: Canonical strings of the locales that were searched
    """

    def __init__(
        self,
        message: str | Diagnostic,
        *,
        key: str,
        locale_code: str = "",
        chain: tuple[str, ...] = (),
    ) -> None:
        super().__init__(message)
        self.key = key
        self.locale_code = locale_code
        self.chain = chain
