"""
Rule Evaluation
Runs the configured rule set against the profile and decision.
"""

from risk_underwriting.core.rules_engine import RuleEvaluator
from risk_underwriting.pipeline.models import RiskProfile, UnderwritingDecision


class RuleEvaluationStep:
    """
    Applies the ordered rule set.
    An outcome still unset afterwards means the fallback resolver must run.
    """

    def __init__(self, evaluator: RuleEvaluator):
        """Initialize with a loaded rule set."""
        self.evaluator = evaluator

    def execute(self, profile: RiskProfile, decision: UnderwritingDecision) -> bool:
        """
        Evaluate the rules.

        Args:
            profile: Applicant risk profile
            decision: Empty decision, mutated in place

        Returns:
            True if a rule decided the case
        """
        self.evaluator.evaluate(profile, decision)
        return decision.is_decided
