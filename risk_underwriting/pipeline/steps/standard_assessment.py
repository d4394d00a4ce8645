"""
Standard Assessment
Deterministic weighted risk scoring, used as the default fallback resolver
and as the scorer of last resort for decisions that come back without a score.
"""

import logging

from risk_underwriting.pipeline.models import (
    DecisionOutcome,
    InsuranceCategory,
    RiskLevel,
    RiskProfile,
    UnderwritingDecision,
)


logger = logging.getLogger(__name__)


class StandardAssessmentStep:
    """
    Scores a profile from 0 to 100 and maps the score to an outcome.
    The score is a pure function of the profile.
    """

    # Decision thresholds
    REJECT_MIN_SCORE = 80
    REFER_MIN_SCORE = 60
    MEDIUM_RISK_MIN_SCORE = 40

    # Sub-total caps
    MAX_CLAIMS_POINTS = 25
    MAX_CATEGORY_POINTS = 20
    MAX_SCORE = 100

    def score(self, profile: RiskProfile) -> int:
        """
        Calculate the numerical risk score.

        Args:
            profile: Applicant risk profile

        Returns:
            Risk score between 0 and 100
        """
        total = (
            self._credit_points(profile)
            + self._claims_points(profile)
            + self._category_points(profile)
            + self._prior_issue_points(profile)
        )
        return min(total, self.MAX_SCORE)

    def execute(
        self,
        profile: RiskProfile,
        decision: UnderwritingDecision
    ) -> UnderwritingDecision:
        """
        Decide the case from the risk score.

        Args:
            profile: Applicant risk profile
            decision: Decision left undecided by the rules

        Returns:
            The same decision, with outcome, risk level and score set
        """
        risk_score = self.score(profile)
        logger.debug(f"Standard assessment score: {risk_score}")

        if risk_score >= self.REJECT_MIN_SCORE:
            decision.outcome = DecisionOutcome.REJECT
            decision.decision_reason = "High risk score from standard assessment"
            decision.risk_level = RiskLevel.VERY_HIGH
        elif risk_score >= self.REFER_MIN_SCORE:
            decision.outcome = DecisionOutcome.REFER
            decision.referral_reason = "Moderate risk requires manual review"
            decision.manual_review_required = True
            decision.risk_level = RiskLevel.HIGH
        else:
            decision.outcome = DecisionOutcome.APPROVE
            decision.decision_reason = "Standard approval based on risk assessment"
            decision.risk_level = (
                RiskLevel.MEDIUM if risk_score >= self.MEDIUM_RISK_MIN_SCORE else RiskLevel.LOW
            )
            # 1% loading per risk point
            decision.premium_multiplier = round(1.0 + risk_score * 0.01, 2)

        decision.risk_score = risk_score
        return decision

    def _credit_points(self, profile: RiskProfile) -> int:
        """0-40 points by credit band. No score on file adds nothing."""
        credit_score = profile.credit_score
        if credit_score is None:
            return 0
        if credit_score < 600:
            return 40
        if credit_score < 650:
            return 30
        if credit_score < 700:
            return 20
        if credit_score < 750:
            return 10
        return 0

    def _claims_points(self, profile: RiskProfile) -> int:
        return min(profile.claims_in_last_3_years * 8, self.MAX_CLAIMS_POINTS)

    def _category_points(self, profile: RiskProfile) -> int:
        """Line-of-business specific risk, capped at 20."""
        risk = 0
        category = profile.insurance_category

        if category == InsuranceCategory.AUTO:
            if profile.dui:
                risk += 20
            if profile.driving_violations is not None:
                risk += min(profile.driving_violations * 5, 15)
            if profile.at_fault_accidents is not None:
                risk += min(profile.at_fault_accidents * 7, 20)

        elif category in (InsuranceCategory.HEALTH, InsuranceCategory.LIFE):
            if profile.smoker:
                risk += 15
            risk += min(len(profile.medical_conditions) * 5, 20)

        elif category == InsuranceCategory.HOME:
            if profile.in_flood_zone:
                risk += 10
            if profile.property_age is not None and profile.property_age > 50:
                risk += 10
            # Only an explicit "no" counts; unknown is not penalised
            if profile.has_security_system is False:
                risk += 5

        return min(risk, self.MAX_CATEGORY_POINTS)

    def _prior_issue_points(self, profile: RiskProfile) -> int:
        points = 0
        if profile.prior_cancellation:
            points += 10
        if profile.prior_denial:
            points += 15
        return points
