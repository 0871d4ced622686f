"""
Base class shared by the built-in rules.
"""

from typing import Any, Iterable, Mapping, Optional, Tuple

from ..core.engine import Rule
from ..core.errors import ConfigError
from ..core.models import RawViolation, Severity


class BaseRule(Rule):
    """
    Built-in rule with validated options.

    Subclasses declare rule_id, description, severity, convention and
    default_options, and implement scan().
    """

    description: str = ""
    severity: Severity = Severity.WARNING
    default_options: Mapping[str, Any] = {}

    def __init__(self, options: Optional[Mapping[str, Any]] = None):
        merged = dict(self.default_options)
        merged.update(options or {})
        unknown = set(merged) - set(self.default_options)
        if unknown:
            raise ConfigError(f"Unknown option(s) for {self.rule_id}: {', '.join(sorted(unknown))}")
        self.options = merged
        self.validate_options()

    def validate_options(self) -> None:
        """Raise ConfigError on bad options. No options by default."""

    def scan(self, document: str) -> Iterable[RawViolation]:
        raise NotImplementedError("scan() must be implemented")

    @staticmethod
    def line_column(document: str, offset: int) -> Tuple[int, int]:
        """0-based line and column of an offset."""
        line = document.count('\n', 0, offset)
        line_start = document.rfind('\n', 0, offset) + 1
        return line, offset - line_start

    def violation(self, message: str, line: int, column: int, **kwargs) -> RawViolation:
        return RawViolation(
            rule_id=self.rule_id,
            severity=self.severity,
            message=message,
            line=line,
            column=column,
            **kwargs
        )
