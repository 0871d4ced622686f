"""
Property-based tests for fix application and positions using Hypothesis.

These tests generate documents and sets of (possibly overlapping or
invalid) fixes and verify that the applier behaves consistently across
all of them.
"""

from hypothesis import given, strategies as st

from kousei.core.fixer import FixApplier
from kousei.core.models import Finding, Fix, LintResult, Position, Range, Severity
from kousei.core.positions import PositionIndex


# Documents and replacement texts use disjoint alphabets so that untouched
# document text can be told apart from inserted text.
documents = st.text(alphabet="ab \n", max_size=40)
replacements = st.text(alphabet="XYZ", max_size=4)
severities = st.sampled_from(list(Severity))


@st.composite
def document_with_findings(draw):
    """Generate a document and findings whose fix ranges may be invalid."""
    document = draw(documents)
    length = len(document)
    findings = []
    for index in range(draw(st.integers(min_value=0, max_value=8))):
        start = draw(st.integers(min_value=-2, max_value=length + 2))
        end = draw(st.integers(min_value=-2, max_value=length + 2))
        has_fix = draw(st.booleans())
        findings.append(Finding(
            rule_id=f"rule-{index}",
            severity=draw(severities),
            message="generated",
            range=Range(0, 0),
            position=Position(0, 0),
            fix=Fix(Range(start, end), draw(replacements)) if has_fix else None
        ))
    return document, findings


def accepted_fixes(document, findings, outcome):
    rejected = {id(f) for f in outcome.rejected}
    return [f for f in FixApplier.candidates(document, findings) if id(f) not in rejected]


class TestFixApplierProperties:
    """Property-based tests for FixApplier."""

    @given(documents)
    def test_no_fixes_is_identity(self, document):
        """Test that applying no fixes returns the document unchanged."""
        outcome = FixApplier().apply(document, [])

        assert outcome.text == document
        assert outcome.applied == 0

    @given(document_with_findings())
    def test_accepted_fixes_do_not_overlap(self, data):
        """Test that accepted fix ranges are pairwise disjoint and ordered."""
        document, findings = data
        outcome = FixApplier().apply(document, findings)

        accepted = accepted_fixes(document, findings, outcome)
        for previous, current in zip(accepted, accepted[1:]):
            assert previous.fix.range.end <= current.fix.range.start

    @given(document_with_findings())
    def test_every_candidate_accepted_or_rejected(self, data):
        """Test that each valid fix is either applied or reported as rejected."""
        document, findings = data
        outcome = FixApplier().apply(document, findings)

        candidates = FixApplier.candidates(document, findings)
        assert outcome.applied + len(outcome.rejected) == len(candidates)
        assert outcome.applied == len(accepted_fixes(document, findings, outcome))

    @given(document_with_findings())
    def test_text_outside_accepted_fixes_preserved(self, data):
        """Test that the output equals splicing the accepted fixes right to left."""
        document, findings = data
        outcome = FixApplier().apply(document, findings)

        expected = document
        for finding in reversed(accepted_fixes(document, findings, outcome)):
            fix = finding.fix
            expected = expected[:fix.range.start] + fix.text + expected[fix.range.end:]

        assert outcome.text == expected

    @given(document_with_findings())
    def test_length_accounting(self, data):
        """Test that the output length follows from the accepted fixes."""
        document, findings = data
        outcome = FixApplier().apply(document, findings)

        delta = sum(
            len(f.fix.text) - (f.fix.range.end - f.fix.range.start)
            for f in accepted_fixes(document, findings, outcome)
        )
        assert len(outcome.text) == len(document) + delta

    @given(document_with_findings())
    def test_deterministic(self, data):
        """Test that the same input always gives the same output."""
        document, findings = data

        first = FixApplier().apply(document, findings)
        second = FixApplier().apply(document, findings)

        assert first.text == second.text
        assert first.applied == second.applied

    @given(document_with_findings())
    def test_fixable_count_matches_candidates(self, data):
        """Test that fixable_issues counts exactly the findings with a valid fix."""
        document, findings = data

        result = LintResult.from_findings(findings, len(document))

        assert result.total_issues == len(findings)
        assert result.fixable_issues == len(FixApplier.candidates(document, findings))


class TestPositionIndexProperties:
    """Property-based tests for PositionIndex."""

    @given(documents, st.data())
    def test_offset_round_trip(self, document, data):
        """Test that offset -> position -> offset is the identity."""
        index = PositionIndex(document)
        offset = data.draw(st.integers(min_value=0, max_value=len(document)))

        position = index.offset_to_position(offset)

        assert index.position_to_offset(position) == offset
        assert document.count('\n', 0, offset) == position.line

    @given(documents)
    def test_line_count(self, document):
        """Test that the line count is one more than the number of newlines."""
        assert PositionIndex(document).line_count == document.count('\n') + 1
