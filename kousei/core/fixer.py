"""
Fix Applier Module

This module merges the fixes offered by a set of findings into a single
rewrite of the original document. Overlapping fixes are resolved with a
greedy earliest-start-wins policy.
"""

import logging
from typing import List, Sequence

from .models import Finding

logger = logging.getLogger(__name__)


class FixOutcome:
    """Result of a fix application."""

    def __init__(self, text: str, applied: int = 0, rejected: List[Finding] = None):
        self.text = text
        self.applied = applied
        self.rejected = rejected or []

    def __repr__(self):
        return f"FixOutcome(applied={self.applied}, rejected={len(self.rejected)})"


class FixApplier:
    """
    Applies a conflict-free subset of fixes to a document.

    The algorithm:
    - keeps findings whose fix is present and fits the document
    - stable-sorts them by (range.start, range.end)
    - walks them once with a cursor, accepting a fix only if it starts at
      or after the end of the previously accepted one
    """

    @staticmethod
    def candidates(document: str, findings: Sequence[Finding]) -> List[Finding]:
        """Findings with a present, range-valid fix, in application order."""
        length = len(document)
        valid = []
        for finding in findings:
            if finding.fix is None:
                continue
            if not finding.fix.is_valid_for(length):
                logger.debug(f"Skipping {finding.rule_id} fix with invalid range "
                             f"[{finding.fix.range.start}, {finding.fix.range.end})")
                continue
            valid.append(finding)
        # sorted() is stable, so equal ranges keep their input order
        return sorted(valid, key=lambda f: (f.fix.range.start, f.fix.range.end))

    def apply(self, document: str, findings: Sequence[Finding]) -> FixOutcome:
        """
        Apply fixes to a document.

        Args:
            document: Original document text (never modified)
            findings: Findings, in their original order

        Returns:
            FixOutcome with the corrected text and the accepted count
        """
        output: List[str] = []
        cursor = 0
        applied = 0
        rejected: List[Finding] = []

        for finding in self.candidates(document, findings):
            fix = finding.fix
            if fix.range.start < cursor:
                logger.debug(f"Rejecting {finding.rule_id} fix at [{fix.range.start}, {fix.range.end}): "
                             f"overlaps a fix ending at {cursor}")
                rejected.append(finding)
                continue
            output.append(document[cursor:fix.range.start])
            output.append(fix.text)
            cursor = fix.range.end
            applied += 1

        output.append(document[cursor:])
        return FixOutcome(''.join(output), applied, rejected)
