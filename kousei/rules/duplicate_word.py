"""
Repeated adjacent words ("the the").
"""

import re
from typing import Iterator

from ..core.models import ZERO_BASED, RawViolation, Severity
from .base import BaseRule

# The repeat sits in a lookahead so it can start the next match
DUPLICATE_PATTERN = re.compile(r'\b(\w+)(?=([ \t]+)(\1)\b)', re.IGNORECASE)


class DuplicateWordRule(BaseRule):
    rule_id = "duplicate-word"
    description = "Flags a word repeated immediately after itself"
    severity = Severity.WARNING
    convention = ZERO_BASED

    def scan(self, document: str) -> Iterator[RawViolation]:
        for match in DUPLICATE_PATTERN.finditer(document):
            line, column = self.line_column(document, match.start(3))
            end_line, end_column = self.line_column(document, match.end(3))
            yield self.violation(
                f"Duplicate word '{match.group(3)}'",
                line, column,
                end_line=end_line,
                end_column=end_column,
                # Delete the separator and the repeated word
                fix_range=(match.start(2), match.end(3)),
                fix_text=""
            )
