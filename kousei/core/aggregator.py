"""
Finding Aggregator Module

This module aggregates lint results across documents: per-document status,
project-wide summary statistics, the process exit code and JSON reports.
"""

from collections import Counter
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Set, Tuple
import fnmatch
import logging

from .models import LintResult, Severity

logger = logging.getLogger(__name__)


class DocumentStatus(Enum):
    """Document status categories, from the worst finding severity."""
    OK = "OK"
    INFO = "Info"
    WARNING = "Warning"
    ERROR = "Error"


@dataclass
class DocumentInfo:
    """Information about a single linted document."""
    path: str
    name: str
    status: DocumentStatus
    issue_count: int
    fixable_count: int
    error_count: int
    warning_count: int
    info_count: int
    rule_ids: Set[str]
    result: LintResult


@dataclass
class ProjectSummary:
    """Summary statistics across every linted document."""
    total_documents: int
    ok_documents: int
    info_documents: int
    warning_documents: int
    error_documents: int
    total_issues: int
    fixable_issues: int
    success_rate: float
    most_common_rules: List[Tuple[str, int]]
    rule_distribution: Dict[str, int]
    severity_distribution: Dict[str, int]


class FindingAggregator:
    """
    Aggregator for organizing lint results.

    This class provides:
    - Document status categorization
    - Filtering by status, rule, and name pattern
    - Project summary and exit code computation
    - JSON-ready report export
    """

    def __init__(self):
        """Initialize the aggregator."""
        self.documents: List[DocumentInfo] = []

    def add_result(self, path: str, result: LintResult) -> DocumentInfo:
        """
        Add a lint result to the aggregator.

        A result for a path that was already added replaces the old one.

        Args:
            path: Path (or label) of the linted document
            result: LintResult from the runner

        Returns:
            The DocumentInfo recorded for the document
        """
        info = self._create_document_info(path, result)
        logger.debug(f"{path}: {info.status.value} ({info.issue_count} issues)")

        for i, existing in enumerate(self.documents):
            if existing.path == path:
                self.documents[i] = info
                break
        else:
            self.documents.append(info)

        return info

    def _create_document_info(self, path: str, result: LintResult) -> DocumentInfo:
        severities = Counter(f.severity for f in result.findings)

        if severities[Severity.ERROR]:
            status = DocumentStatus.ERROR
        elif severities[Severity.WARNING]:
            status = DocumentStatus.WARNING
        elif severities[Severity.INFO]:
            status = DocumentStatus.INFO
        else:
            status = DocumentStatus.OK

        return DocumentInfo(
            path=path,
            name=Path(path).name,
            status=status,
            issue_count=result.total_issues,
            fixable_count=result.fixable_issues,
            error_count=severities[Severity.ERROR],
            warning_count=severities[Severity.WARNING],
            info_count=severities[Severity.INFO],
            rule_ids=set(f.rule_id for f in result.findings),
            result=result
        )

    def filter_documents(self,
                         status: Optional[DocumentStatus] = None,
                         rule_id: Optional[str] = None,
                         fixable_only: bool = False,
                         name_pattern: Optional[str] = None) -> List[DocumentInfo]:
        """
        Filter documents based on various criteria.

        Args:
            status: Filter by document status
            rule_id: Only documents with a finding from this rule
            fixable_only: Only documents offering at least one fix
            name_pattern: Shell-style pattern matched against the file name

        Returns:
            List of filtered DocumentInfo objects
        """
        filtered = self.documents

        if status:
            filtered = [d for d in filtered if d.status == status]

        if rule_id:
            filtered = [d for d in filtered if rule_id in d.rule_ids]

        if fixable_only:
            filtered = [d for d in filtered if d.fixable_count > 0]

        if name_pattern:
            filtered = [d for d in filtered if fnmatch.fnmatch(d.name.lower(), name_pattern.lower())]

        return filtered

    def generate_summary(self) -> ProjectSummary:
        """Generate the project summary."""
        if not self.documents:
            return ProjectSummary(
                total_documents=0, ok_documents=0, info_documents=0, warning_documents=0,
                error_documents=0, total_issues=0, fixable_issues=0, success_rate=0.0,
                most_common_rules=[], rule_distribution={}, severity_distribution={}
            )

        total_documents = len(self.documents)
        status_counts = Counter(d.status for d in self.documents)

        rule_counts: Counter = Counter()
        for document in self.documents:
            rule_counts.update(f.rule_id for f in document.result.findings)

        return ProjectSummary(
            total_documents=total_documents,
            ok_documents=status_counts[DocumentStatus.OK],
            info_documents=status_counts[DocumentStatus.INFO],
            warning_documents=status_counts[DocumentStatus.WARNING],
            error_documents=status_counts[DocumentStatus.ERROR],
            total_issues=sum(d.issue_count for d in self.documents),
            fixable_issues=sum(d.fixable_count for d in self.documents),
            success_rate=status_counts[DocumentStatus.OK] / total_documents * 100,
            most_common_rules=rule_counts.most_common(10),
            rule_distribution=dict(rule_counts),
            severity_distribution={
                'error': sum(d.error_count for d in self.documents),
                'warning': sum(d.warning_count for d in self.documents),
                'info': sum(d.info_count for d in self.documents),
            }
        )

    def exit_code(self) -> int:
        """1 if any document has an error-severity finding, else 0."""
        return 1 if any(d.error_count for d in self.documents) else 0

    def export_report(self) -> Dict[str, Any]:
        """
        Export a report of every document and the project summary.

        Returns:
            JSON-serializable report dictionary
        """
        summary = self.generate_summary()

        return {
            'summary': {
                'total_documents': summary.total_documents,
                'ok_documents': summary.ok_documents,
                'info_documents': summary.info_documents,
                'warning_documents': summary.warning_documents,
                'error_documents': summary.error_documents,
                'total_issues': summary.total_issues,
                'fixable_issues': summary.fixable_issues,
                'success_rate': summary.success_rate,
                'most_common_rules': summary.most_common_rules,
                'rule_distribution': summary.rule_distribution,
                'severity_distribution': summary.severity_distribution,
            },
            'documents': [
                {
                    'path': d.path,
                    'name': d.name,
                    'status': d.status.value,
                    'result': d.result.to_dict(),
                }
                for d in self.documents
            ],
        }
