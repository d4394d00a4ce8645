"""
ML Assessment
Alternative fallback resolver backed by a pluggable classifier.
"""

import logging

from risk_underwriting.core.classifier import RiskClassifier
from risk_underwriting.pipeline.models import (
    DecisionOutcome,
    RiskLevel,
    RiskProfile,
    UnderwritingDecision,
)


logger = logging.getLogger(__name__)


class MLAssessmentStep:
    """
    Maps a classifier prediction onto the decision.
    Classifier failures never escape this step: the case is referred instead.
    """

    def __init__(self, classifier: RiskClassifier):
        """Initialize with the classification capability."""
        self.classifier = classifier

    def execute(
        self,
        profile: RiskProfile,
        decision: UnderwritingDecision
    ) -> UnderwritingDecision:
        """
        Assess risk with the classifier.

        Args:
            profile: Applicant risk profile
            decision: Decision left undecided by the rules

        Returns:
            The same decision with the model's outcome applied
        """
        try:
            prediction = self.classifier.predict(profile)
        except Exception as e:
            logger.exception(f"ML assessment failed: {e}")
            decision.outcome = DecisionOutcome.REFER
            decision.referral_reason = "ML assessment failed, manual review required"
            decision.manual_review_required = True
            return decision

        decision.outcome = prediction.label

        if prediction.label == DecisionOutcome.APPROVE:
            decision.decision_reason = "ML model recommends approval"
            decision.risk_level = RiskLevel.MEDIUM
            decision.risk_score = 30
            decision.premium_multiplier = 1.0
        elif prediction.label == DecisionOutcome.REJECT:
            decision.decision_reason = "ML model recommends rejection"
            decision.risk_level = RiskLevel.VERY_HIGH
            decision.risk_score = 90
        else:
            decision.decision_reason = "ML model recommends manual review"
            decision.referral_reason = "Model confidence below threshold"
            decision.manual_review_required = True
            decision.risk_level = RiskLevel.HIGH
            decision.risk_score = 65

        decision.confidence_score = prediction.confidence
        logger.info(
            f"ML assessment completed - Prediction: {prediction.label.value}, "
            f"Confidence: {prediction.confidence:.2f}"
        )
        return decision
