"""
Rule Engine Module

Runs registered rules over a document in registration order, isolating
failures so that one broken rule never aborts the pass.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Iterator, List, Mapping, Optional, Sequence, Tuple, Union

from .errors import RuleFailure
from .models import ZERO_BASED, CoordinateConvention, RawViolation, Severity

logger = logging.getLogger(__name__)

RULE_FAILURE_ID = "engine/rule-failure"

ViolationLike = Union[RawViolation, Mapping[str, Any]]


class Rule:
    """
    Rule capability interface.

    Subclasses set rule_id and convention and implement scan, which returns
    (or yields) RawViolation objects or plain mappings accepted by
    RawViolation.from_dict.
    """

    rule_id: str = ""
    convention: CoordinateConvention = ZERO_BASED

    def scan(self, document: str) -> Iterable[ViolationLike]:
        raise NotImplementedError("scan() must be implemented")

    def __repr__(self):
        return f"{type(self).__name__}(rule_id='{self.rule_id}')"


class FunctionRule(Rule):
    """Adapts a plain callable to the Rule interface."""

    def __init__(self, rule_id: str, func: Callable[[str], Iterable[ViolationLike]],
                 convention: CoordinateConvention = ZERO_BASED):
        self.rule_id = rule_id
        self.func = func
        self.convention = convention

    def scan(self, document: str) -> Iterable[ViolationLike]:
        return self.func(document)


@dataclass(frozen=True)
class RuleOutcome:
    """
    Result of invoking one rule.

    On success error is None. On failure error holds the captured failure
    description and violations holds whatever the rule emitted before it
    raised.
    """
    rule: Rule
    violations: Tuple[RawViolation, ...] = ()
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def rule_id(self) -> str:
        return self.rule.rule_id

    def raise_for_failure(self) -> None:
        """
        Raises:
            RuleFailure: if the rule failed
        """
        if self.error is not None:
            raise RuleFailure(self.rule_id, self.error)

    def failure_violation(self) -> RawViolation:
        """Synthetic violation reporting this rule's failure."""
        return RawViolation(
            rule_id=RULE_FAILURE_ID,
            severity=Severity.ERROR,
            message=f"Rule '{self.rule_id}' failed: {self.error}",
            line=0,
            column=0
        )


class RuleEngine:
    """
    Engine executing an ordered collection of rules.

    This class provides:
    - Per-rule failure isolation through RuleOutcome values
    - Optional thread-pool execution with registration-order output
    - Flattening of outcomes into (violation, convention) pairs
    """

    def __init__(self, rules: Sequence[Rule], max_workers: int = 1,
                 keep_partial_output: bool = False):
        """
        Initialize the engine.

        Args:
            rules: Rules in registration order
            max_workers: Number of worker threads; 1 runs rules sequentially
            keep_partial_output: Keep violations a failing rule emitted before it raised
        """
        self.rules: Tuple[Rule, ...] = tuple(rules)
        self.max_workers = max_workers
        self.keep_partial_output = keep_partial_output

    @staticmethod
    def invoke(rule: Rule, document: str) -> RuleOutcome:
        """
        Run a single rule and capture its output or its failure.

        Args:
            rule: Rule to run
            document: Document text

        Returns:
            RuleOutcome object
        """
        emitted: List[RawViolation] = []
        try:
            for item in rule.scan(document) or ():
                if isinstance(item, RawViolation):
                    emitted.append(item)
                else:
                    emitted.append(RawViolation.from_dict(item))
        except Exception as e:
            description = f"{type(e).__name__}: {e}"
            logger.error(f"Rule {rule.rule_id} failed: {description}")
            return RuleOutcome(rule=rule, violations=tuple(emitted), error=description)

        logger.debug(f"Rule {rule.rule_id} reported {len(emitted)} violations")
        return RuleOutcome(rule=rule, violations=tuple(emitted))

    def run(self, document: str) -> List[RuleOutcome]:
        """
        Run every rule over the document.

        Returns:
            One RuleOutcome per rule, in registration order
        """
        if self.max_workers > 1 and len(self.rules) > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                return list(executor.map(lambda rule: self.invoke(rule, document), self.rules))
        return [self.invoke(rule, document) for rule in self.rules]

    def violations(self, document: str) -> Iterator[Tuple[RawViolation, CoordinateConvention]]:
        """
        Yield every raw violation with the convention it is expressed in.

        Successful rules contribute their output in emission order. A failed
        rule contributes a single synthetic failure violation, preceded by its
        partial output when keep_partial_output is set.
        """
        for outcome in self.run(document):
            if outcome.ok or self.keep_partial_output:
                for violation in outcome.violations:
                    yield violation, outcome.rule.convention
            if not outcome.ok:
                yield outcome.failure_violation(), ZERO_BASED
