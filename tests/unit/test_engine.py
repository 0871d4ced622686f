"""
Unit tests for the rule engine.

These tests cover:
- Registration-order execution and output concatenation
- Failure isolation and the synthetic engine/rule-failure violation
- Mapping output and malformed output
- Thread-pool execution
"""

import threading
import time

import pytest

from kousei.core.engine import RULE_FAILURE_ID, FunctionRule, Rule, RuleEngine, RuleOutcome
from kousei.core.errors import RuleFailure
from kousei.core.models import ONE_BASED, ZERO_BASED, RawViolation, Severity


def make_violation(rule_id, message, column=0):
    return RawViolation(rule_id=rule_id, severity=Severity.INFO, message=message, line=0, column=column)


def static_rule(rule_id, *messages, convention=ZERO_BASED):
    return FunctionRule(
        rule_id,
        lambda document: [make_violation(rule_id, m) for m in messages],
        convention
    )


def flaky_rule(rule_id="flaky"):
    def scan(document):
        yield make_violation(rule_id, "before failure")
        raise RuntimeError("boom")
    return FunctionRule(rule_id, scan)


class TestRuleOutcome:
    """Test the RuleOutcome result type."""

    def test_success(self):
        """Test a successful outcome."""
        rule = static_rule("a", "one")
        outcome = RuleOutcome(rule=rule, violations=(make_violation("a", "one"),))

        assert outcome.ok is True
        assert outcome.rule_id == "a"
        outcome.raise_for_failure()

    def test_failure(self):
        """Test a failed outcome and its synthetic violation."""
        outcome = RuleOutcome(rule=static_rule("a"), error="ValueError: bad")

        assert outcome.ok is False
        with pytest.raises(RuleFailure) as exc_info:
            outcome.raise_for_failure()
        assert exc_info.value.rule_id == "a"

        synthetic = outcome.failure_violation()
        assert synthetic.rule_id == RULE_FAILURE_ID
        assert synthetic.severity == Severity.ERROR
        assert "'a'" in synthetic.message
        assert "ValueError: bad" in synthetic.message
        assert synthetic.fix_range is None


class TestRuleEngine:
    """Test the RuleEngine class."""

    def test_base_rule_requires_scan(self):
        """Test that the Rule interface must be implemented."""
        outcome = RuleEngine.invoke(Rule(), "text")

        assert outcome.ok is False
        assert "NotImplementedError" in outcome.error

    def test_registration_order(self):
        """Test that output is concatenated in registration order."""
        engine = RuleEngine([
            static_rule("b", "b1", "b2"),
            static_rule("a", "a1"),
        ])

        messages = [v.message for v, _ in engine.violations("doc")]

        assert messages == ["b1", "b2", "a1"]

    def test_convention_travels_with_violation(self):
        """Test that each violation is paired with its rule's convention."""
        engine = RuleEngine([static_rule("one", "x", convention=ONE_BASED), static_rule("zero", "y")])

        conventions = [c for _, c in engine.violations("doc")]

        assert conventions == [ONE_BASED, ZERO_BASED]

    def test_failure_isolated(self):
        """Test that a failing rule does not stop later rules."""
        engine = RuleEngine([flaky_rule(), static_rule("after", "still runs")])

        pairs = list(engine.violations("doc"))

        assert [v.rule_id for v, _ in pairs] == [RULE_FAILURE_ID, "after"]
        assert "RuntimeError: boom" in pairs[0][0].message
        assert pairs[0][1] == ZERO_BASED

    def test_partial_output_kept_when_requested(self):
        """Test keep_partial_output keeps violations emitted before the failure."""
        engine = RuleEngine([flaky_rule(), static_rule("after", "still runs")], keep_partial_output=True)

        messages = [v.message for v, _ in engine.violations("doc")]

        assert messages[0] == "before failure"
        assert messages[1].startswith("Rule 'flaky' failed")
        assert messages[2] == "still runs"

    def test_invoke_records_partial_output(self):
        """Test that invoke keeps the partial output on the outcome."""
        outcome = RuleEngine.invoke(flaky_rule(), "doc")

        assert outcome.ok is False
        assert [v.message for v in outcome.violations] == ["before failure"]
        assert outcome.error == "RuntimeError: boom"

    def test_mapping_output(self):
        """Test that rules may return plain mappings."""
        rule = FunctionRule("dicts", lambda document: [
            {'ruleId': 'dicts', 'severity': 2, 'message': 'm', 'line': 0, 'column': 1,
             'fixRange': [0, 1], 'fixText': 'X'}
        ])

        outcome = RuleEngine.invoke(rule, "doc")

        assert outcome.ok is True
        assert outcome.violations[0].severity == Severity.ERROR
        assert outcome.violations[0].fix_range == (0, 1)

    def test_malformed_mapping_is_failure(self):
        """Test that output missing required keys counts as a rule failure."""
        rule = FunctionRule("broken", lambda document: [{'message': 'no position'}])

        outcome = RuleEngine.invoke(rule, "doc")

        assert outcome.ok is False
        assert outcome.error.startswith("KeyError")

    def test_unknown_severity_is_failure(self):
        """Test that an unknown severity counts as a rule failure."""
        rule = FunctionRule("odd", lambda document: [
            {'ruleId': 'odd', 'severity': 'fatal', 'message': 'm', 'line': 0, 'column': 0}
        ])

        outcome = RuleEngine.invoke(rule, "doc")

        assert outcome.ok is False
        assert "ValueError" in outcome.error

    @pytest.mark.parametrize("fields", [
        {'line': None},
        {'column': "first"},
        {'end_column': object()},
        {'fix_range': (0, 1), 'fix_text': 5},
        {'message': None},
    ])
    def test_badly_typed_violation_is_failure(self, fields):
        """Test that a violation object with unusable fields fails its rule only."""
        def scan(document):
            data = dict(rule_id="typed", severity=Severity.INFO, message="m", line=0, column=0)
            data.update(fields)
            return [RawViolation(**data)]

        engine = RuleEngine([FunctionRule("typed", scan), static_rule("good", "still runs")])

        pairs = list(engine.violations("doc"))

        assert [v.rule_id for v, _ in pairs] == [RULE_FAILURE_ID, "good"]
        assert pairs[0][0].message.startswith("Rule 'typed' failed: ")

    def test_numeric_strings_coerced(self):
        """Test that integral coordinates given as strings are coerced."""
        violation = RawViolation(rule_id="r", severity="info", message="m", line="2", column="3",
                                 end_column="4")

        assert (violation.line, violation.column, violation.end_column) == (2, 3, 4)

    def test_none_output_is_empty(self):
        """Test that a rule returning None reports nothing."""
        outcome = RuleEngine.invoke(FunctionRule("quiet", lambda document: None), "doc")

        assert outcome.ok is True
        assert outcome.violations == ()

    def test_parallel_preserves_order(self):
        """Test that thread-pool execution keeps registration order."""
        def slow(document):
            time.sleep(0.05)
            return [make_violation("slow", "slow")]

        engine = RuleEngine(
            [FunctionRule("slow", slow), static_rule("fast", "fast"), flaky_rule()],
            max_workers=3
        )

        rule_ids = [v.rule_id for v, _ in engine.violations("doc")]

        assert rule_ids == ["slow", "fast", RULE_FAILURE_ID]

    def test_parallel_uses_worker_threads(self):
        """Test that max_workers > 1 runs rules off the calling thread."""
        seen = []

        def record(document):
            seen.append(threading.current_thread())
            return []

        RuleEngine([FunctionRule("a", record), FunctionRule("b", record)], max_workers=2).run("doc")

        assert len(seen) == 2
        assert all(thread is not threading.current_thread() for thread in seen)
