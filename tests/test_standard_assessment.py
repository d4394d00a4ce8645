"""
Tests for the weighted risk scoring and standard assessment.
"""

import pytest

from risk_underwriting.pipeline.models import (
    DecisionOutcome,
    RiskLevel,
    UnderwritingDecision,
)
from risk_underwriting.pipeline.steps.standard_assessment import StandardAssessmentStep


@pytest.fixture
def step():
    return StandardAssessmentStep()


class TestRiskScore:
    """Tests for the scoring formula."""

    @pytest.mark.parametrize("credit_score,expected", [
        (550, 40),
        (599, 40),
        (600, 30),
        (649, 30),
        (650, 20),
        (699, 20),
        (700, 10),
        (749, 10),
        (750, 0),
        (850, 0),
    ])
    def test_credit_bands(self, step, make_profile, credit_score, expected):
        """Test each credit band boundary."""
        assert step.score(make_profile(credit_score=credit_score)) == expected

    def test_missing_credit_score_adds_nothing(self, step, make_profile):
        """Test that a profile without a credit score is not penalised for it."""
        assert step.score(make_profile(credit_score=None)) == 0

    @pytest.mark.parametrize("claims,expected", [(0, 0), (1, 8), (3, 24), (4, 25), (10, 25)])
    def test_claims_capped_at_25(self, step, make_profile, claims, expected):
        """Test claims contribute 8 points each, capped at 25."""
        profile = make_profile(credit_score=800, claims_in_last_3_years=claims)
        assert step.score(profile) == expected

    def test_auto_category_capped_at_20(self, step, make_profile):
        """Test DUI, violations and accidents sum to at most 20."""
        profile = make_profile(credit_score=800, dui=True, driving_violations=4, at_fault_accidents=5)
        assert step.score(profile) == 20

    def test_auto_violations(self, step, make_profile):
        """Test violations and at-fault accidents."""
        profile = make_profile(credit_score=800, driving_violations=1, at_fault_accidents=1)
        assert step.score(profile) == 12

    def test_health_smoker_and_conditions(self, step, make_profile):
        """Test smoker and medical conditions are capped together."""
        smoker = make_profile(insurance_category="health", credit_score=800, smoker=True)
        conditions = make_profile(
            insurance_category="life",
            credit_score=800,
            medical_conditions=["diabetes", "hypertension"],
        )
        both = make_profile(
            insurance_category="health",
            credit_score=800,
            smoker=True,
            medical_conditions=["diabetes", "asthma", "hypertension"],
        )

        assert step.score(smoker) == 15
        assert step.score(conditions) == 10
        assert step.score(both) == 20

    def test_home_flood_age_and_security_capped(self, step, home_flood_profile):
        """Test home factors sum to 25 before the category cap of 20."""
        # credit 700 -> 10, home factors 25 -> capped at 20
        assert step.score(home_flood_profile) == 30

    def test_home_unknown_security_system_not_penalised(self, step, make_profile):
        """Test that only an explicit missing security system adds points."""
        unknown = make_profile(insurance_category="home", credit_score=800, has_security_system=None)
        missing = make_profile(insurance_category="home", credit_score=800, has_security_system=False)

        assert step.score(unknown) == 0
        assert step.score(missing) == 5

    def test_category_fields_ignored_for_other_lines(self, step, make_profile):
        """Test auto factors do not score on a home profile."""
        profile = make_profile(insurance_category="home", credit_score=800, dui=True, driving_violations=3)
        assert step.score(profile) == 0

    def test_prior_issues_add_independently(self, step, make_profile):
        """Test prior cancellation and denial both count."""
        profile = make_profile(credit_score=800, prior_cancellation=True, prior_denial=True)
        assert step.score(profile) == 25

    def test_grand_total_capped_at_100(self, step, make_profile):
        """Test the overall score never exceeds 100."""
        profile = make_profile(
            credit_score=500,
            claims_in_last_3_years=6,
            dui=True,
            at_fault_accidents=3,
            prior_cancellation=True,
            prior_denial=True,
        )
        assert step.score(profile) == 100

    def test_monotonic_in_claims_and_credit(self, step, make_profile):
        """Test more claims and worse credit give a higher score."""
        low_risk = make_profile(credit_score=780, claims_in_last_3_years=0)
        high_risk = make_profile(credit_score=600, claims_in_last_3_years=3)
        assert step.score(low_risk) < step.score(high_risk)


class TestStandardAssessment:
    """Tests for outcome thresholds."""

    def _assess(self, step, profile):
        return step.execute(profile, UnderwritingDecision.for_profile(profile))

    def test_reject_at_80(self, step, make_profile):
        """Test a score of 80 is rejected."""
        # 40 credit + 25 claims + 15 prior denial
        profile = make_profile(credit_score=550, claims_in_last_3_years=4, prior_denial=True)
        decision = self._assess(step, profile)

        assert decision.risk_score == 80
        assert decision.outcome == DecisionOutcome.REJECT
        assert decision.risk_level == RiskLevel.VERY_HIGH
        assert decision.decision_reason == "High risk score from standard assessment"
        assert decision.premium_multiplier is None

    def test_refer_between_60_and_80(self, step, make_profile):
        """Test poor credit with many claims is referred."""
        profile = make_profile(credit_score=550, claims_in_last_3_years=5)
        decision = self._assess(step, profile)

        assert decision.risk_score == 65
        assert decision.outcome == DecisionOutcome.REFER
        assert decision.risk_level == RiskLevel.HIGH
        assert decision.manual_review_required is True
        assert decision.referral_reason == "Moderate risk requires manual review"

    def test_refer_at_60(self, step, make_profile):
        """Test a score of exactly 60 is referred."""
        profile = make_profile(credit_score=550, dui=True)
        decision = self._assess(step, profile)

        assert decision.risk_score == 60
        assert decision.outcome == DecisionOutcome.REFER

    def test_approve_medium_with_multiplier(self, step, make_profile):
        """Test a score of 40 is approved as medium risk."""
        decision = self._assess(step, make_profile(credit_score=550))

        assert decision.risk_score == 40
        assert decision.outcome == DecisionOutcome.APPROVE
        assert decision.risk_level == RiskLevel.MEDIUM
        assert decision.premium_multiplier == pytest.approx(1.40)

    def test_approve_low(self, step, make_profile):
        """Test a score under 40 is approved as low risk."""
        decision = self._assess(step, make_profile(credit_score=620, claims_in_last_3_years=1))

        assert decision.risk_score == 38
        assert decision.outcome == DecisionOutcome.APPROVE
        assert decision.risk_level == RiskLevel.LOW
        assert decision.premium_multiplier == pytest.approx(1.38)
        assert decision.manual_review_required is False

    def test_excellent_profile(self, step, auto_profile):
        """Test a clean profile scores zero with no loading."""
        decision = self._assess(step, auto_profile)

        assert decision.risk_score == 0
        assert decision.risk_level == RiskLevel.LOW
        assert decision.premium_multiplier == pytest.approx(1.0)
