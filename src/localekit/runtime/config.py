"""Caller-level policy for the Localization facade.

The core always raises; what to show instead of a missing or unrenderable
message is decided here.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from dataclasses import dataclass

__all__ = ["LocalizeConfig"]


@dataclass(frozen=True, slots=True)
class LocalizeConfig:
    """Missing-resource and format-error policy.

    Attributes:
        raise_on_missing: Propagate MissingResourceError (default: True).
            When False, the missing text below is returned instead.
        missing_value: Text returned for a missing key when not raising
        use_key_as_missing_value: Return the key itself instead of
            missing_value
        ignore_format_errors: Return the unformatted template when an
            argument is missing or does not fit its placeholder, instead of
            raising (default: False). Template syntax errors always propagate.

    Example:
        >>> config = LocalizeConfig(raise_on_missing=False, use_key_as_missing_value=True)
        >>> config.missing_text("menu.open")
        'menu.open'
    """

    raise_on_missing: bool = True
    missing_value: str = ""
    use_key_as_missing_value: bool = False
    ignore_format_errors: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.missing_value, str):
            msg = f"missing_value must be a string, got {type(self.missing_value).__name__}"
            raise TypeError(msg)

    def missing_text(self, key: str) -> str:
        """Text shown in place of a missing key."""
        return key if self.use_key_as_missing_value else self.missing_value
