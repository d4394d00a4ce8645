"""
Compliance Check
Consistency gate run before a decision leaves the pipeline.
"""

import logging

from risk_underwriting.pipeline.models import UnderwritingDecision


logger = logging.getLogger(__name__)


class ComplianceCheckStep:
    """
    Annotates the decision with compliance issues.
    Never blocks: callers decide what to do with a failed check.
    """

    MIN_RISK_SCORE = 0
    MAX_RISK_SCORE = 100

    def execute(self, decision: UnderwritingDecision) -> UnderwritingDecision:
        """
        Validate the decision's required fields.

        Args:
            decision: Decision produced by the earlier steps

        Returns:
            The same decision with compliance_passed and compliance_issues set
        """
        issues = []

        if decision.outcome is None:
            issues.append("Decision is null")

        score = decision.risk_score
        if score is None or not self.MIN_RISK_SCORE <= score <= self.MAX_RISK_SCORE:
            issues.append("Invalid risk score")

        decision.compliance_issues.extend(issues)
        decision.compliance_passed = not decision.compliance_issues

        logger.info(f"Compliance check: {'PASSED' if decision.compliance_passed else 'FAILED'}")
        return decision
