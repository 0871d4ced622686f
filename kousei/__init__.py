"""
kousei

Text linting with pluggable rules and conflict-free fix application.
"""

__version__ = "1.0.0"

from .core.runner import LintRunner
from .core.config import LinterConfig, RuleSettings
from .core.aggregator import FindingAggregator
from .core.models import Finding, Fix, LintResult, Position, Range, Severity

__all__ = [
    'LintRunner',
    'LinterConfig',
    'RuleSettings',
    'FindingAggregator',
    'Finding',
    'Fix',
    'LintResult',
    'Position',
    'Range',
    'Severity',
]
