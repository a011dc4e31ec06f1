"""CLDR plural category selection.

Python 3.13+.
"""

from .rules import OTHER_ONLY, PluralRuleEngine, PluralRuleSet, to_plural_operand

__all__ = [
    "OTHER_ONLY",
    "PluralRuleEngine",
    "PluralRuleSet",
    "to_plural_operand",
]
