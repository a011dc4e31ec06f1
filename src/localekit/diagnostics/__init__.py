"""Diagnostic system for localekit errors.

Provides structured error diagnostics with codes, spans and hints.
Inspired by Rust compiler diagnostics and Elm error messages.

Python 3.13+. Zero external dependencies.
"""

from .codes import Diagnostic, DiagnosticCode, SourceSpan
from .errors import (
    FormatError,
    LocalizeError,
    MalformedTagError,
    MissingArgumentError,
    MissingResourceError,
    RenderError,
    TemplateSyntaxError,
)
from .formatter import DiagnosticFormatter, OutputFormat
from .templates import ErrorTemplate

__all__ = [
    "Diagnostic",
    "DiagnosticCode",
    "DiagnosticFormatter",
    "ErrorTemplate",
    "FormatError",
    "LocalizeError",
    "MalformedTagError",
    "MissingArgumentError",
    "MissingResourceError",
    "OutputFormat",
    "RenderError",
    "SourceSpan",
    "TemplateSyntaxError",
]
