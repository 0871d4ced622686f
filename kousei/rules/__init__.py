"""
Built-in rules.
"""

from .base import BaseRule
from .duplicate_word import DuplicateWordRule
from .max_line_length import MaxLineLengthRule
from .preferred_terms import PreferredTermsRule
from .registry import RULE_CLASSES, build_rules, describe_rules
from .trailing_whitespace import TrailingWhitespaceRule

__all__ = [
    'BaseRule',
    'DuplicateWordRule',
    'MaxLineLengthRule',
    'PreferredTermsRule',
    'TrailingWhitespaceRule',
    'RULE_CLASSES',
    'build_rules',
    'describe_rules',
]
