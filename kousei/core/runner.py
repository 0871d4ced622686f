"""
Lint Runner Module

This module provides the public entry points of the kousei core: linting a
document into a LintResult and applying the fixes carried by findings.
"""

import logging
import os
from pathlib import Path
from typing import Any, List, Mapping, Optional, Sequence, Union

from ..rules.registry import build_rules
from .config import LinterConfig
from .engine import Rule, RuleEngine
from .errors import ConfigError, InvalidDocument
from .fixer import FixApplier, FixOutcome
from .models import Finding, LintResult
from .normalizer import FindingNormalizer
from .positions import PositionIndex

logger = logging.getLogger(__name__)


class LintRunner:
    """
    Orchestrates a lint pass.

    This class provides:
    - lint_text: rule engine, then normalization of every raw violation
    - apply_fixes: merge the fixes of a chosen set of findings
    - fix_text: lint and apply every offered fix in one call
    - lint_file: read a UTF-8 file and lint it
    - update_config: swap in an updated configuration at runtime

    No state is kept between calls besides the configuration and the
    explicitly supplied rules.
    """

    def __init__(self, config: Optional[LinterConfig] = None, rules: Optional[Sequence[Rule]] = None):
        """
        Initialize the runner.

        Args:
            config: Linter configuration; defaults to LinterConfig()
            rules: Explicit rules to run instead of the built-in registry
        """
        self.config = config or LinterConfig()
        self.rules = tuple(rules) if rules is not None else None
        self.fixer = FixApplier()

    def update_config(self, changes: Mapping[str, Any]) -> LinterConfig:
        """
        Replace the configuration with the current one updated by `changes`.

        Top-level keys of `changes` ('rules', 'maxWorkers',
        'keepPartialOutput') replace the current values; omitted keys keep them.

        Returns:
            The new LinterConfig

        Raises:
            ConfigError: if the result is invalid; the old configuration stays active
        """
        if not isinstance(changes, Mapping):
            raise ConfigError("Configuration update must be a JSON object")
        merged = self.config.to_dict()
        # from_dict reads camelCase keys first
        for snake, camel in (('max_workers', 'maxWorkers'), ('keep_partial_output', 'keepPartialOutput')):
            if snake in changes:
                merged.pop(camel)
        merged.update(changes)
        config = LinterConfig.from_dict(merged)
        # Rule options are only checked when rules are built
        build_rules(config)
        self.config = config
        logger.info("Configuration updated")
        return config

    def rules_for(self, file_path: Optional[str] = None) -> List[Rule]:
        """Rules registered for a document, selected by its extension."""
        if self.rules is not None:
            return list(self.rules)
        extension = os.path.splitext(file_path)[1] if file_path else None
        return build_rules(self.config, extension)

    @staticmethod
    def _check_document(document) -> None:
        if not isinstance(document, str):
            raise InvalidDocument(f"Document must be a string, got {type(document).__name__}")

    def lint_text(self, document: str, file_path: Optional[str] = None) -> LintResult:
        """
        Lint a document.

        Args:
            document: Document text
            file_path: Optional path whose extension selects the rules

        Returns:
            LintResult object

        Raises:
            InvalidDocument: if the document is not a string
        """
        self._check_document(document)

        engine = RuleEngine(
            self.rules_for(file_path),
            max_workers=self.config.max_workers,
            keep_partial_output=self.config.keep_partial_output
        )
        index = PositionIndex(document)
        normalizer = FindingNormalizer(document, index)
        findings = normalizer.normalize_all(engine.violations(document))

        result = LintResult.from_findings(findings, index.length)
        logger.debug(f"Linted {file_path or '<text>'}: {result.total_issues} issues, "
                     f"{result.fixable_issues} fixable")
        return result

    def apply_fixes(self, document: str, findings: Sequence[Finding]) -> str:
        """
        Apply the fixes of the given findings.

        Callers may pre-filter findings (for example by severity).

        Returns:
            The corrected document
        """
        self._check_document(document)
        return self.fixer.apply(document, findings).text

    def fix_text(self, document: str, file_path: Optional[str] = None) -> FixOutcome:
        """Lint a document and apply every fix it offers."""
        result = self.lint_text(document, file_path)
        return self.fixer.apply(document, result.findings)

    def lint_file(self, path: Union[str, Path]) -> LintResult:
        """Read a UTF-8 file and lint its contents."""
        with open(path, 'r', encoding='utf-8', newline='') as f:
            document = f.read()
        return self.lint_text(document, str(path))
