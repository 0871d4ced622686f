"""
Data Model Module

This module defines the value objects shared by the kousei core: canonical
positions and ranges, fixes, findings and lint results, plus the raw
violation format that rules report in their own coordinate convention.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from .errors import InvalidFixRange


class Severity(Enum):
    """Finding severity levels."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"

    @classmethod
    def coerce(cls, value: Any) -> "Severity":
        """
        Convert a rule-supplied severity into a Severity.

        Accepts a Severity, its string value (plus the alias "warn"), or the
        textlint-style integers 0 (info), 1 (warning) and 2 (error).

        Raises:
            ValueError: if the value names no known severity
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, bool):
            raise ValueError(f"Unknown severity: {value!r}")
        if isinstance(value, int):
            by_level = {0: cls.INFO, 1: cls.WARNING, 2: cls.ERROR}
            if value in by_level:
                return by_level[value]
        if isinstance(value, str):
            name = value.strip().lower()
            if name == 'warn':
                return cls.WARNING
            for severity in cls:
                if severity.value == name:
                    return severity
        raise ValueError(f"Unknown severity: {value!r}")


@dataclass(frozen=True)
class Position:
    """0-based line/column coordinate."""
    line: int
    column: int

    def to_dict(self) -> Dict[str, int]:
        return {'line': self.line, 'column': self.column}


@dataclass(frozen=True)
class Range:
    """Half-open span [start, end) of absolute character offsets."""
    start: int
    end: int

    def is_valid_for(self, length: int) -> bool:
        """Check 0 <= start <= end <= length."""
        return 0 <= self.start <= self.end <= length

    def overlaps(self, other: "Range") -> bool:
        return self.start < other.end and other.start < self.end

    def to_dict(self) -> Dict[str, int]:
        return {'start': self.start, 'end': self.end}


@dataclass(frozen=True)
class Fix:
    """Replacement text for a range of the document."""
    range: Range
    text: str

    def is_valid_for(self, length: int) -> bool:
        return self.range.is_valid_for(length)

    def validate(self, length: int) -> None:
        """
        Raises:
            InvalidFixRange: if the range does not fit the document
        """
        if not self.is_valid_for(length):
            raise InvalidFixRange(self.range.start, self.range.end, length)

    def to_dict(self) -> Dict[str, Any]:
        return {'range': self.range.to_dict(), 'text': self.text}


@dataclass(frozen=True)
class Finding:
    """A normalized report of one rule violation."""
    rule_id: str
    severity: Severity
    message: str
    range: Range
    position: Position
    fix: Optional[Fix] = None
    notes: Tuple[str, ...] = ()

    @property
    def fixable(self) -> bool:
        return self.fix is not None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            'ruleId': self.rule_id,
            'severity': self.severity.value,
            'message': self.message,
            'range': self.range.to_dict(),
            'position': self.position.to_dict(),
            'fix': self.fix.to_dict() if self.fix else None,
        }
        if self.notes:
            data['notes'] = list(self.notes)
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Finding":
        """
        Rebuild a finding from its serialized form.

        Args:
            data: Mapping produced by to_dict (extra keys such as 'id' are ignored)

        Returns:
            Finding object
        """
        fix_data = data.get('fix')
        fix = None
        if fix_data:
            text = fix_data['text']
            if not isinstance(text, str):
                raise ValueError(f"Fix text must be a string, got {text!r}")
            fix = Fix(
                range=Range(int(fix_data['range']['start']), int(fix_data['range']['end'])),
                text=text
            )
        range_data = data['range']
        position_data = data.get('position') or {'line': 0, 'column': 0}
        return cls(
            rule_id=str(data['ruleId']),
            severity=Severity.coerce(data['severity']),
            message=str(data.get('message', '')),
            range=Range(int(range_data['start']), int(range_data['end'])),
            position=Position(int(position_data['line']), int(position_data['column'])),
            fix=fix,
            notes=tuple(data.get('notes') or ())
        )


def count_fixable(findings: Sequence[Finding], length: Optional[int] = None) -> int:
    """
    Count findings that offer a fix.

    When a document length is given, fixes whose range does not fit the
    document count as absent.
    """
    if length is None:
        return sum(1 for f in findings if f.fix is not None)
    return sum(1 for f in findings if f.fix is not None and f.fix.is_valid_for(length))


@dataclass(frozen=True)
class LintResult:
    """Findings of one lint pass plus summary metrics."""
    findings: Tuple[Finding, ...]
    total_issues: int
    fixable_issues: int

    @classmethod
    def from_findings(cls, findings: Sequence[Finding], length: Optional[int] = None) -> "LintResult":
        findings = tuple(findings)
        return cls(
            findings=findings,
            total_issues=len(findings),
            fixable_issues=count_fixable(findings, length)
        )

    def has_errors(self) -> bool:
        return any(f.severity == Severity.ERROR for f in self.findings)

    def filter_by_severity(self, *severities: Severity) -> List[Finding]:
        return [f for f in self.findings if f.severity in severities]

    def to_dict(self) -> Dict[str, Any]:
        findings = []
        for index, finding in enumerate(self.findings):
            data = {'id': f"finding-{index}"}
            data.update(finding.to_dict())
            findings.append(data)
        return {
            'findings': findings,
            'totalIssues': self.total_issues,
            'fixableIssues': self.fixable_issues,
        }


@dataclass(frozen=True)
class CoordinateConvention:
    """
    Coordinate convention a rule reports in.

    line_base / column_base / offset_base are 0 or 1. inclusive_end marks
    end_column and the fix range end as pointing at the last character
    rather than one past it.
    """
    line_base: int = 0
    column_base: int = 0
    offset_base: int = 0
    inclusive_end: bool = False

    def __post_init__(self):
        for name in ('line_base', 'column_base', 'offset_base'):
            if getattr(self, name) not in (0, 1):
                raise ValueError(f"{name} must be 0 or 1, got {getattr(self, name)!r}")


ZERO_BASED = CoordinateConvention()
ONE_BASED = CoordinateConvention(line_base=1, column_base=1)


@dataclass(frozen=True)
class RawViolation:
    """A violation as reported by a rule, in the rule's own convention."""
    rule_id: str
    severity: Severity
    message: str
    line: int
    column: int
    end_line: Optional[int] = None
    end_column: Optional[int] = None
    fix_range: Optional[Tuple[int, int]] = None
    fix_text: Optional[str] = None

    def __post_init__(self):
        """
        Coerce and check field types when the violation is built.

        Raises:
            TypeError / ValueError: on a field that cannot be coerced
        """
        object.__setattr__(self, 'severity', Severity.coerce(self.severity))
        for name in ('rule_id', 'message'):
            if not isinstance(getattr(self, name), str):
                raise TypeError(f"{name} must be a string, got {getattr(self, name)!r}")
        object.__setattr__(self, 'line', int(self.line))
        object.__setattr__(self, 'column', int(self.column))
        for name in ('end_line', 'end_column'):
            if getattr(self, name) is not None:
                object.__setattr__(self, name, int(getattr(self, name)))
        if self.fix_text is not None and not isinstance(self.fix_text, str):
            raise TypeError(f"fix_text must be a string, got {self.fix_text!r}")
        if self.fix_range is not None:
            start, end = self.fix_range
            object.__setattr__(self, 'fix_range', (int(start), int(end)))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RawViolation":
        """
        Build a violation from a plain mapping.

        Both camelCase (ruleId, endLine, fixRange, ...) and snake_case keys
        are accepted.

        Raises:
            KeyError: if ruleId, severity, message, line or column is missing
        """
        def pick(camel: str, snake: str, default: Any = None) -> Any:
            if camel in data:
                return data[camel]
            return data.get(snake, default)

        rule_id = pick('ruleId', 'rule_id')
        if rule_id is None:
            raise KeyError('ruleId')
        return cls(
            rule_id=str(rule_id),
            severity=data['severity'],
            message=str(data['message']),
            line=int(data['line']),
            column=int(data['column']),
            end_line=pick('endLine', 'end_line'),
            end_column=pick('endColumn', 'end_column'),
            fix_range=pick('fixRange', 'fix_range'),
            fix_text=pick('fixText', 'fix_text')
        )
