"""
Tests for the compliance gate and decision finalization.
"""

import pytest

from risk_underwriting.pipeline.models import (
    DecisionMethod,
    DecisionOutcome,
    UnderwritingDecision,
)
from risk_underwriting.pipeline.steps.compliance_check import ComplianceCheckStep
from risk_underwriting.pipeline.steps.finalization import FinalizationStep


@pytest.fixture
def decision(make_profile):
    return UnderwritingDecision.for_profile(make_profile())


class TestComplianceCheck:
    """Tests for ComplianceCheckStep."""

    def test_passes_complete_decision(self, decision):
        decision.outcome = DecisionOutcome.APPROVE
        decision.risk_score = 25

        ComplianceCheckStep().execute(decision)

        assert decision.compliance_passed is True
        assert decision.compliance_issues == []

    @pytest.mark.parametrize("score", [0, 100])
    def test_score_bounds_inclusive(self, decision, score):
        decision.outcome = DecisionOutcome.REFER
        decision.risk_score = score

        ComplianceCheckStep().execute(decision)

        assert decision.compliance_passed is True

    def test_missing_outcome(self, decision):
        decision.risk_score = 10

        ComplianceCheckStep().execute(decision)

        assert decision.compliance_passed is False
        assert decision.compliance_issues == ["Decision is null"]

    @pytest.mark.parametrize("score", [None, -1, 101])
    def test_invalid_score(self, decision, score):
        decision.outcome = DecisionOutcome.APPROVE
        decision.risk_score = score

        ComplianceCheckStep().execute(decision)

        assert decision.compliance_passed is False
        assert decision.compliance_issues == ["Invalid risk score"]

    def test_reports_every_issue(self, decision):
        ComplianceCheckStep().execute(decision)
        assert decision.compliance_issues == ["Decision is null", "Invalid risk score"]

    def test_keeps_existing_issues(self, decision):
        """Test issues recorded earlier are kept and fail the check."""
        decision.outcome = DecisionOutcome.APPROVE
        decision.risk_score = 20
        decision.compliance_issues.append("Missing disclosure")

        ComplianceCheckStep().execute(decision)

        assert decision.compliance_passed is False
        assert decision.compliance_issues == ["Missing disclosure"]


class TestFinalization:
    """Tests for FinalizationStep."""

    @pytest.mark.parametrize("outcome,terms", [
        (DecisionOutcome.REJECT, "Application rejected"),
        (DecisionOutcome.REFER, "Pending manual review"),
        (DecisionOutcome.APPROVE, "Standard policy terms"),
    ])
    def test_default_terms(self, decision, outcome, terms):
        decision.outcome = outcome
        FinalizationStep().execute(decision)
        assert decision.terms == terms

    def test_terms_count_exclusions_and_conditions(self, decision):
        decision.outcome = DecisionOutcome.APPROVE
        decision.exclusions.extend(["Flood damage", "Earthquake"])
        decision.conditions.append("Separate flood policy required")

        FinalizationStep().execute(decision)

        assert decision.terms == "Standard policy terms with 2 exclusion(s), 1 condition(s) apply"

    def test_existing_terms_kept(self, decision):
        decision.outcome = DecisionOutcome.APPROVE
        decision.terms = "Custom terms"

        FinalizationStep().execute(decision)

        assert decision.terms == "Custom terms"

    @pytest.mark.parametrize("method,confidence", [
        (DecisionMethod.RULES_ENGINE, 0.95),
        (DecisionMethod.MACHINE_LEARNING, 0.85),
        (DecisionMethod.STANDARD_ASSESSMENT, 0.75),
        (None, 0.75),
    ])
    def test_default_confidence(self, decision, method, confidence):
        decision.outcome = DecisionOutcome.APPROVE
        decision.decision_method = method

        FinalizationStep().execute(decision)

        assert decision.confidence_score == pytest.approx(confidence)

    def test_model_confidence_kept(self, decision):
        decision.outcome = DecisionOutcome.APPROVE
        decision.decision_method = DecisionMethod.MACHINE_LEARNING
        decision.confidence_score = 0.62

        FinalizationStep().execute(decision)

        assert decision.confidence_score == pytest.approx(0.62)
