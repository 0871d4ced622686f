"""
Terms that have a preferred spelling or wording.

Reports with inclusive end coordinates, the way dictionary-based checkers
usually mark the last character of a match.
"""

import re
from typing import Iterator, List, Mapping, Tuple

from ..core.errors import ConfigError
from ..core.models import CoordinateConvention, RawViolation, Severity
from .base import BaseRule


class PreferredTermsRule(BaseRule):
    rule_id = "preferred-terms"
    description = "Suggests the preferred form of dictionary terms"
    severity = Severity.WARNING
    convention = CoordinateConvention(inclusive_end=True)
    default_options = {
        'terms': {
            'utilize': 'use',
            'e-mail': 'email',
            'in order to': 'to',
        },
    }

    def validate_options(self) -> None:
        terms = self.options['terms']
        if not isinstance(terms, Mapping):
            raise ConfigError(f"{self.rule_id}: 'terms' must map terms to their preferred form")
        for term, preferred in terms.items():
            if not isinstance(term, str) or not term or not isinstance(preferred, str):
                raise ConfigError(f"{self.rule_id}: invalid dictionary entry {term!r} -> {preferred!r}")
        self.patterns: List[Tuple[re.Pattern, str]] = [
            (re.compile(r'\b' + re.escape(term) + r'\b'), preferred)
            for term, preferred in terms.items()
            if term != preferred
        ]

    def scan(self, document: str) -> Iterator[RawViolation]:
        matches = []
        for pattern, preferred in self.patterns:
            for match in pattern.finditer(document):
                matches.append((match.start(), match.end(), match.group(0), preferred))
        matches.sort(key=lambda m: (m[0], m[1]))

        for start, end, found, preferred in matches:
            line, column = self.line_column(document, start)
            end_line, end_column = self.line_column(document, end - 1)
            yield self.violation(
                f"Use '{preferred}' instead of '{found}'",
                line, column,
                end_line=end_line,
                end_column=end_column,
                fix_range=(start, end - 1),
                fix_text=preferred
            )
