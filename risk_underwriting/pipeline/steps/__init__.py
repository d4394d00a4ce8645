"""
Pipeline steps for the underwriting process.
Each step is a self-contained module that performs a specific task.
"""

from .credit_enrichment import CreditEnrichmentStep
from .rule_evaluation import RuleEvaluationStep
from .standard_assessment import StandardAssessmentStep
from .ml_assessment import MLAssessmentStep
from .compliance_check import ComplianceCheckStep
from .finalization import FinalizationStep

__all__ = [
    "CreditEnrichmentStep",
    "RuleEvaluationStep",
    "StandardAssessmentStep",
    "MLAssessmentStep",
    "ComplianceCheckStep",
    "FinalizationStep",
]
