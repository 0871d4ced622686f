"""
Spaces or tabs at the end of a line.

Reports in 1-based line/column coordinates.
"""

from typing import Iterator

from ..core.models import ONE_BASED, RawViolation, Severity
from .base import BaseRule


class TrailingWhitespaceRule(BaseRule):
    rule_id = "trailing-whitespace"
    description = "Flags spaces and tabs at the end of a line"
    severity = Severity.INFO
    convention = ONE_BASED

    def scan(self, document: str) -> Iterator[RawViolation]:
        offset = 0
        for line_number, line in enumerate(document.split('\n'), start=1):
            body = line[:-1] if line.endswith('\r') else line
            stripped = body.rstrip(' \t')
            if len(stripped) != len(body):
                yield self.violation(
                    "Trailing whitespace",
                    line_number, len(stripped) + 1,
                    end_line=line_number,
                    end_column=len(body) + 1,
                    fix_range=(offset + len(stripped), offset + len(body)),
                    fix_text=""
                )
            offset += len(line) + 1
