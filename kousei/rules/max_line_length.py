"""
Lines longer than a configured limit.
"""

from typing import Iterator

from ..core.errors import ConfigError
from ..core.models import ONE_BASED, RawViolation, Severity
from .base import BaseRule


class MaxLineLengthRule(BaseRule):
    rule_id = "max-line-length"
    description = "Flags lines longer than the configured maximum"
    severity = Severity.WARNING
    convention = ONE_BASED
    default_options = {'max': 80}

    def validate_options(self) -> None:
        limit = self.options['max']
        if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
            raise ConfigError(f"{self.rule_id}: 'max' must be a positive integer, got {limit!r}")

    def scan(self, document: str) -> Iterator[RawViolation]:
        limit = self.options['max']
        for line_number, line in enumerate(document.split('\n'), start=1):
            body = line[:-1] if line.endswith('\r') else line
            if len(body) > limit:
                yield self.violation(
                    f"Line is too long ({len(body)}/{limit})",
                    line_number, limit + 1,
                    end_line=line_number,
                    end_column=len(body) + 1
                )
