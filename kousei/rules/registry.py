"""
Registry of built-in rules.

Rules are registered in a fixed order; that order is the order findings are
reported in.
"""

import logging
from typing import Dict, List, Optional, Type

from ..core.config import thaw
from .base import BaseRule
from .duplicate_word import DuplicateWordRule
from .max_line_length import MaxLineLengthRule
from .preferred_terms import PreferredTermsRule
from .trailing_whitespace import TrailingWhitespaceRule

logger = logging.getLogger(__name__)

RULE_CLASSES: Dict[str, Type[BaseRule]] = {
    cls.rule_id: cls
    for cls in (
        DuplicateWordRule,
        PreferredTermsRule,
        TrailingWhitespaceRule,
        MaxLineLengthRule,
    )
}


def build_rules(config=None, extension: Optional[str] = None) -> List[BaseRule]:
    """
    Instantiate the enabled rules for a document.

    Args:
        config: LinterConfig, or None for the defaults
        extension: File extension of the document, used to pick rules

    Returns:
        Rule instances in registration order

    Raises:
        ConfigError: if a rule rejects its options
    """
    rules = []
    for rule_id, rule_class in RULE_CLASSES.items():
        settings = config.settings_for(rule_id) if config is not None else None
        if settings is not None and not settings.enabled:
            continue
        if settings is not None and not settings.applies_to(extension):
            logger.debug(f"Skipping {rule_id} for extension {extension}")
            continue
        rules.append(rule_class(settings.options if settings is not None else None))
    return rules


def describe_rules(config=None) -> List[Dict]:
    """Known rules with their effective settings."""
    described = []
    for rule_id, rule_class in RULE_CLASSES.items():
        settings = config.settings_for(rule_id) if config is not None else None
        options = dict(rule_class.default_options)
        if settings is not None:
            options.update(thaw(settings.options))
        described.append({
            'id': rule_id,
            'description': rule_class.description,
            'severity': rule_class.severity.value,
            'enabled': settings.enabled if settings is not None else True,
            'options': options,
            'extensions': list(settings.extensions) if settings is not None else [],
        })
    return described
