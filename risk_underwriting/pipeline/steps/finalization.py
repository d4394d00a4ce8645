"""
Finalization
Fills in the derived fields that depend on which path produced the decision.
"""

from risk_underwriting.pipeline.models import (
    DecisionMethod,
    DecisionOutcome,
    UnderwritingDecision,
)


class FinalizationStep:
    """Sets default policy terms and the confidence score when missing."""

    CONFIDENCE_BY_METHOD = {
        DecisionMethod.RULES_ENGINE: 0.95,
        DecisionMethod.MACHINE_LEARNING: 0.85,
    }
    DEFAULT_CONFIDENCE = 0.75

    def execute(self, decision: UnderwritingDecision) -> UnderwritingDecision:
        if decision.terms is None:
            decision.terms = self._default_terms(decision)

        if decision.confidence_score is None:
            decision.confidence_score = self.CONFIDENCE_BY_METHOD.get(
                decision.decision_method, self.DEFAULT_CONFIDENCE
            )

        return decision

    def _default_terms(self, decision: UnderwritingDecision) -> str:
        if decision.outcome == DecisionOutcome.REJECT:
            return "Application rejected"
        if decision.outcome == DecisionOutcome.REFER:
            return "Pending manual review"

        terms = "Standard policy terms"
        if decision.exclusions:
            terms += f" with {len(decision.exclusions)} exclusion(s)"
        if decision.conditions:
            terms += f", {len(decision.conditions)} condition(s) apply"
        return terms
