"""
Core modules for finding normalization and fix application.
"""

from .runner import LintRunner
from .engine import Rule, FunctionRule, RuleEngine, RuleOutcome, RULE_FAILURE_ID
from .normalizer import FindingNormalizer
from .positions import PositionIndex
from .fixer import FixApplier, FixOutcome
from .config import LinterConfig, RuleSettings
from .aggregator import FindingAggregator, DocumentStatus
from .models import (
    Severity, Position, Range, Fix, Finding, LintResult,
    RawViolation, CoordinateConvention, ZERO_BASED, ONE_BASED
)

__all__ = [
    'LintRunner',
    'Rule',
    'FunctionRule',
    'RuleEngine',
    'RuleOutcome',
    'RULE_FAILURE_ID',
    'FindingNormalizer',
    'PositionIndex',
    'FixApplier',
    'FixOutcome',
    'LinterConfig',
    'RuleSettings',
    'FindingAggregator',
    'DocumentStatus',
    'Severity',
    'Position',
    'Range',
    'Fix',
    'Finding',
    'LintResult',
    'RawViolation',
    'CoordinateConvention',
    'ZERO_BASED',
    'ONE_BASED',
]
