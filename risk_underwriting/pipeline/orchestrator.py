"""
Pipeline Orchestrator
Sequences the underwriting steps and is the single entry point for callers.
"""

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, Optional

from risk_underwriting.config import Settings, get_settings
from risk_underwriting.core.classifier import RiskClassifier, get_classifier, load_classifier
from risk_underwriting.core.credit_client import CreditScoreClient, get_credit_client
from risk_underwriting.core.rules_engine import RuleEvaluator, load_ruleset
from risk_underwriting.pipeline.models import (
    DecisionMethod,
    DecisionOutcome,
    FinalizedDecision,
    RiskLevel,
    RiskProfile,
    UnderwritingDecision,
)
from risk_underwriting.pipeline.steps import (
    CreditEnrichmentStep,
    RuleEvaluationStep,
    StandardAssessmentStep,
    MLAssessmentStep,
    ComplianceCheckStep,
    FinalizationStep,
)
from risk_underwriting.utils.masking import mask_sensitive_data


logger = logging.getLogger(__name__)


class UnderwritingError(Exception):
    """Raised by the synchronous entry point when a step fails unexpectedly."""


class UnderwritingPipeline:
    """
    Orchestrates the underwriting pipeline:
    enrichment -> rules -> fallback assessment -> compliance -> finalization.

    Evaluations share no mutable state, so one pipeline can serve
    concurrent callers.
    """

    def __init__(
        self,
        rule_evaluator: Optional[RuleEvaluator] = None,
        credit_client: Optional[CreditScoreClient] = None,
        classifier: Optional[RiskClassifier] = None,
        settings: Optional[Settings] = None,
        progress_callback: Optional[Callable[[int, str, str], None]] = None
    ):
        """
        Initialize the pipeline with required services.

        Args:
            rule_evaluator: Loaded rule set (loads the configured one if not provided)
            credit_client: Bureau client (built from settings if enrichment is enabled)
            classifier: Classifier for ML assessment (loaded from settings if not provided)
            settings: Settings override (uses cached settings and services if not provided)
            progress_callback: Optional callback for progress updates
                             (step_number, step_name, status)

        Raises:
            RuleSetError: The configured rule set cannot be loaded
        """
        uses_defaults = settings is None
        self.settings = settings or get_settings()
        self.use_ml = self.settings.use_ml
        self.use_external_credit_check = self.settings.use_external_credit_check
        self.progress_callback = progress_callback

        self.rule_evaluator = rule_evaluator or load_ruleset(self.settings.ruleset_name)

        if classifier is None and self.use_ml:
            classifier = get_classifier() if uses_defaults else load_classifier(self.settings)
        self.classifier = classifier

        # Clients built here for explicit settings are closed on shutdown
        self._owns_credit_client = False
        if credit_client is None and self.use_external_credit_check:
            if uses_defaults:
                credit_client = get_credit_client()
            else:
                credit_client = CreditScoreClient(settings=self.settings)
                self._owns_credit_client = True
        self.credit_client = credit_client

        self.steps = {
            "rule_evaluation": RuleEvaluationStep(self.rule_evaluator),
            "standard_assessment": StandardAssessmentStep(),
            "compliance_check": ComplianceCheckStep(),
            "finalization": FinalizationStep(),
        }
        if self.credit_client is not None:
            self.steps["credit_enrichment"] = CreditEnrichmentStep(self.credit_client)
        if self.classifier is not None:
            self.steps["ml_assessment"] = MLAssessmentStep(self.classifier)

        self._executor = ThreadPoolExecutor(
            max_workers=self.settings.max_workers,
            thread_name_prefix="underwriting",
        )

    def _report_progress(self, step: int, name: str, status: str):
        """Report progress if callback is set."""
        if self.progress_callback:
            self.progress_callback(step, name, status)

    def evaluate(self, profile: RiskProfile) -> FinalizedDecision:
        """
        Run a profile through the complete underwriting pipeline.

        Args:
            profile: Applicant risk profile

        Returns:
            Immutable underwriting decision

        Raises:
            UnderwritingError: A step failed unexpectedly
        """
        logger.info(
            f"Starting underwriting for customer: {mask_sensitive_data(profile.customer_id)}, "
            f"Type: {profile.insurance_category.value}"
        )

        try:
            decision = self._run(profile)
        except Exception as e:
            logger.exception(f"Error in underwriting process: {e}")
            raise UnderwritingError("Underwriting failed") from e

        logger.info(
            f"Underwriting completed - Decision: {_value(decision.outcome)}, "
            f"Risk Level: {_value(decision.risk_level)}, Score: {decision.risk_score}"
        )
        return decision

    def evaluate_async(self, profile: RiskProfile) -> "Future[FinalizedDecision]":
        """
        Run the pipeline on the worker pool.

        The returned future always resolves to a decision: failures become a
        REFER decision tagged ERROR_FALLBACK instead of an exception. This
        includes calls made after shutdown(), which get an already completed
        future.
        """
        logger.info(
            f"Starting async underwriting for customer: {mask_sensitive_data(profile.customer_id)}"
        )
        try:
            return self._executor.submit(self._evaluate_or_refer, profile)
        except RuntimeError as e:
            logger.error(f"Async underwriting not scheduled: {e}")
            future: "Future[FinalizedDecision]" = Future()
            future.set_result(self._error_decision(profile, str(e)))
            return future

    def _evaluate_or_refer(self, profile: RiskProfile) -> FinalizedDecision:
        try:
            return self.evaluate(profile)
        except Exception as e:
            summary = f"{e}: {e.__cause__}" if e.__cause__ else str(e)
            logger.error(f"Async underwriting failed: {summary}")
            return self._error_decision(profile, summary)

    def _run(self, profile: RiskProfile) -> FinalizedDecision:
        self._log_compliance_event(profile)

        # Step 1: Credit Enrichment (optional)
        if (
            self.use_external_credit_check
            and "credit_enrichment" in self.steps
            and not profile.external_credit_check_completed
        ):
            self._report_progress(1, "Credit Enrichment", "running")
            profile = self.steps["credit_enrichment"].execute(profile)
            self._report_progress(1, "Credit Enrichment", "complete")
        else:
            self._report_progress(1, "Credit Enrichment", "skipped")

        decision = UnderwritingDecision.for_profile(profile)

        # Step 2: Rule Evaluation
        self._report_progress(2, "Rule Evaluation", "running")
        decided_by_rules = self.steps["rule_evaluation"].execute(profile, decision)
        self._report_progress(2, "Rule Evaluation", "complete")

        # Step 3: Fallback Assessment
        if decided_by_rules:
            decision.decision_method = DecisionMethod.RULES_ENGINE
            self._report_progress(3, "Fallback Assessment", "skipped")
        else:
            self._report_progress(3, "Fallback Assessment", "running")
            if self.use_ml and "ml_assessment" in self.steps:
                self.steps["ml_assessment"].execute(profile, decision)
                decision.decision_method = DecisionMethod.MACHINE_LEARNING
            else:
                self.steps["standard_assessment"].execute(profile, decision)
                decision.decision_method = DecisionMethod.STANDARD_ASSESSMENT
            self._report_progress(3, "Fallback Assessment", "complete")

        if decision.risk_score is None:
            decision.risk_score = self.steps["standard_assessment"].score(profile)

        # Step 4: Compliance Check
        self._report_progress(4, "Compliance Check", "running")
        self.steps["compliance_check"].execute(decision)
        self._report_progress(4, "Compliance Check", "complete")

        # Step 5: Finalization
        self._report_progress(5, "Finalization", "running")
        self.steps["finalization"].execute(decision)
        self._report_progress(5, "Finalization", "complete")

        return decision.freeze()

    def _error_decision(self, profile: RiskProfile, message: str) -> FinalizedDecision:
        return FinalizedDecision(
            customer_id=profile.customer_id,
            outcome=DecisionOutcome.REFER,
            referral_reason=f"System error: {message}",
            manual_review_required=True,
            risk_level=RiskLevel.UNKNOWN,
            decision_method=DecisionMethod.ERROR_FALLBACK,
            compliance_passed=False,
        )

    def _log_compliance_event(self, profile: RiskProfile):
        """Audit trail entry. Identifiers are masked."""
        logger.info(
            f"COMPLIANCE LOG - Underwriting started for customer: "
            f"{mask_sensitive_data(profile.customer_id)}, "
            f"Type: {profile.insurance_category.value}, "
            f"Credit Score: {profile.credit_score}"
        )

    def shutdown(self, wait: bool = True):
        """Release the worker pool and any client this pipeline created."""
        self._executor.shutdown(wait=wait)
        if self._owns_credit_client:
            self.credit_client.close()
            self._owns_credit_client = False

    def __enter__(self) -> "UnderwritingPipeline":
        return self

    def __exit__(self, exc_type, exc, tb):
        self.shutdown()


def _value(enum_member) -> Optional[str]:
    return enum_member.value if enum_member is not None else None
