"""
Underwriting pipeline components.
"""

from .models import (
    InsuranceCategory,
    DecisionOutcome,
    RiskLevel,
    DecisionMethod,
    RiskProfile,
    UnderwritingDecision,
    FinalizedDecision,
    ClassifierPrediction,
)

__all__ = [
    "InsuranceCategory",
    "DecisionOutcome",
    "RiskLevel",
    "DecisionMethod",
    "RiskProfile",
    "UnderwritingDecision",
    "FinalizedDecision",
    "ClassifierPrediction",
]
