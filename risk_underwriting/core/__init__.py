"""
Core services for the underwriting system.
"""

from .rules_engine import Rule, RuleEvaluator, RuleSetError, load_ruleset
from .credit_client import (
    CreditCheckError,
    CreditScoreClient,
    CreditScoreResponse,
    get_credit_client,
)
from .classifier import (
    ClassifierError,
    RiskClassifier,
    SklearnRiskClassifier,
    get_classifier,
    load_classifier,
)

__all__ = [
    "Rule",
    "RuleEvaluator",
    "RuleSetError",
    "load_ruleset",
    "CreditCheckError",
    "CreditScoreClient",
    "CreditScoreResponse",
    "get_credit_client",
    "ClassifierError",
    "RiskClassifier",
    "SklearnRiskClassifier",
    "get_classifier",
    "load_classifier",
]
