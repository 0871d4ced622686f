"""
Finding Normalizer Module

Converts violations reported in a rule's own coordinate convention into
canonical findings: 0-based positions, absolute offset ranges and fixes
whose ranges are guaranteed to fit the document.
"""

import logging
from typing import Iterable, List, Optional, Tuple

from .errors import InvalidFixRange, InvalidPosition
from .models import (
    ZERO_BASED, CoordinateConvention, Finding, Fix, Position, Range, RawViolation
)
from .positions import PositionIndex

logger = logging.getLogger(__name__)


class FindingNormalizer:
    """
    Normalizer bound to one document.

    A finding is never dropped here. Bad locations are clamped to the nearest
    valid position; bad fixes are discarded and noted on the finding.
    """

    def __init__(self, document: str, index: Optional[PositionIndex] = None):
        self.document = document
        self.index = index or PositionIndex(document)

    def normalize(self, raw: RawViolation,
                  convention: CoordinateConvention = ZERO_BASED) -> Finding:
        """
        Normalize one raw violation.

        Args:
            raw: Violation as reported by the rule
            convention: Coordinate convention the rule declared

        Returns:
            Finding object with canonical coordinates
        """
        notes: List[str] = []

        position, start, located = self._locate(raw, convention, notes)
        end = self._locate_end(raw, convention, start)

        fix = None
        has_fix = raw.fix_range is not None or raw.fix_text is not None
        if has_fix and not located:
            logger.warning(f"{raw.rule_id}: fix discarded for an invalid location")
            notes.append("fix discarded: invalid location")
        elif has_fix:
            fix, note = self._build_fix(raw, convention)
            if note:
                notes.append(note)

        return Finding(
            rule_id=raw.rule_id,
            severity=raw.severity,
            message=raw.message,
            range=Range(start, end),
            position=position,
            fix=fix,
            notes=tuple(notes)
        )

    def normalize_all(self, violations: Iterable[Tuple[RawViolation, CoordinateConvention]]) -> List[Finding]:
        return [self.normalize(raw, convention) for raw, convention in violations]

    def _locate(self, raw: RawViolation, convention: CoordinateConvention,
                notes: List[str]) -> Tuple[Position, int, bool]:
        """Canonical position and offset, and whether the reported location was valid."""
        line = raw.line - convention.line_base
        column = raw.column - convention.column_base
        try:
            position = Position(line, column)
            return position, self.index.position_to_offset(position), True
        except InvalidPosition as e:
            clamped = self.index.clamp(line, column)
            logger.warning(f"{raw.rule_id}: {e}; clamped to line {clamped.line}, column {clamped.column}")
            notes.append(f"location clamped from line {line}, column {column}")
            return clamped, self.index.position_to_offset(clamped), False

    def _locate_end(self, raw: RawViolation, convention: CoordinateConvention, start: int) -> int:
        if raw.end_column is None:
            return start
        end_line = raw.end_line if raw.end_line is not None else raw.line
        end_column = raw.end_column - convention.column_base
        if convention.inclusive_end:
            end_column += 1
        try:
            end = self.index.position_to_offset(Position(end_line - convention.line_base, end_column))
        except InvalidPosition:
            return start
        return max(end, start)

    def _build_fix(self, raw: RawViolation,
                   convention: CoordinateConvention) -> Tuple[Optional[Fix], Optional[str]]:
        if raw.fix_range is None:
            logger.warning(f"{raw.rule_id}: fix text without a range discarded")
            return None, "fix discarded: fix text without a range"
        if raw.fix_text is None:
            logger.warning(f"{raw.rule_id}: fix range without text discarded")
            return None, "fix discarded: fix range without text"

        start = raw.fix_range[0] - convention.offset_base
        end = raw.fix_range[1] - convention.offset_base
        if convention.inclusive_end:
            end += 1

        fix = Fix(range=Range(start, end), text=raw.fix_text)
        try:
            fix.validate(self.index.length)
        except InvalidFixRange as e:
            logger.warning(f"{raw.rule_id}: {e}")
            return None, f"fix discarded: invalid range [{start}, {end})"
        return fix, None
