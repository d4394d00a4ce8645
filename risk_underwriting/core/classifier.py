"""
Classification capability consumed by the ML assessment step.

The pipeline only depends on ``RiskClassifier``: anything with a
``predict(profile) -> ClassifierPrediction`` method can be plugged in.
``SklearnRiskClassifier`` adapts a fitted scikit-learn estimator that was
trained offline and serialized with joblib.
"""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, Optional, Protocol, Union, runtime_checkable

import joblib
import numpy as np

from risk_underwriting.config import Settings, get_settings
from risk_underwriting.pipeline.models import (
    ClassifierPrediction,
    DecisionOutcome,
    InsuranceCategory,
    RiskProfile,
)


logger = logging.getLogger(__name__)


class ClassifierError(Exception):
    """Raised when a model cannot be loaded or produces an unusable prediction."""


@runtime_checkable
class RiskClassifier(Protocol):
    """Classify a profile into APPROVE, REJECT or REFER."""

    def predict(self, profile: RiskProfile) -> ClassifierPrediction:
        ...


FEATURE_NAMES = [
    "credit_score",
    "claims_count",
    "age",
    "years_licensed",
    "insurance_category",
]

CATEGORY_CODES = {
    InsuranceCategory.AUTO: 0,
    InsuranceCategory.HOME: 1,
    InsuranceCategory.LIFE: 2,
    InsuranceCategory.HEALTH: 3,
}

# Imputed when the profile leaves a feature empty
DEFAULT_CREDIT_SCORE = 650
DEFAULT_AGE = 30
DEFAULT_YEARS_LICENSED = 5


def build_features(profile: RiskProfile) -> np.ndarray:
    """Build a single-row feature matrix in FEATURE_NAMES order."""
    row = [
        profile.credit_score if profile.credit_score is not None else DEFAULT_CREDIT_SCORE,
        profile.claims_in_last_3_years,
        profile.age if profile.age is not None else DEFAULT_AGE,
        profile.years_licensed if profile.years_licensed is not None else DEFAULT_YEARS_LICENSED,
        CATEGORY_CODES[profile.insurance_category],
    ]
    return np.array([row], dtype=float)


class SklearnRiskClassifier:
    """
    Adapter for a fitted scikit-learn classifier.
    Class labels must be the outcome names APPROVE, REJECT and REFER.
    """

    def __init__(self, estimator: Any):
        if not hasattr(estimator, "predict_proba") or not hasattr(estimator, "classes_"):
            raise ClassifierError("Estimator must be fitted and expose predict_proba")
        self.estimator = estimator

    @classmethod
    def from_path(cls, path: Union[str, Path]) -> "SklearnRiskClassifier":
        """
        Load a joblib-serialized estimator.

        Raises:
            ClassifierError: Missing, unreadable or incompatible model file
        """
        path = Path(path)
        if not path.exists():
            raise ClassifierError(f"Model file not found: {path}")
        try:
            estimator = joblib.load(path)
        except Exception as e:
            raise ClassifierError(f"Could not load model from {path}: {e!r}") from e
        return cls(estimator)

    def predict(self, profile: RiskProfile) -> ClassifierPrediction:
        distribution = self.estimator.predict_proba(build_features(profile))[0]
        classes = list(self.estimator.classes_)
        if len(distribution) != len(classes):
            raise ClassifierError("Probability distribution does not match model classes")

        label = str(classes[int(np.argmax(distribution))])
        try:
            outcome = DecisionOutcome(label)
        except ValueError as e:
            raise ClassifierError(f"Unknown class label: {label}") from e

        return ClassifierPrediction(
            label=outcome,
            probabilities=[float(p) for p in distribution],
        )


def load_classifier(settings: Settings) -> Optional[RiskClassifier]:
    """
    Load the classifier described by ``settings``.
    Returns None when ML is disabled, no model is configured, or loading fails.
    """
    if not settings.use_ml or settings.classifier_model_path is None:
        return None

    try:
        classifier = SklearnRiskClassifier.from_path(settings.classifier_model_path)
    except ClassifierError as e:
        logger.error(f"Failed to load classifier: {e}")
        return None

    logger.info(f"Classifier loaded from {settings.classifier_model_path}")
    return classifier


@lru_cache()
def get_classifier() -> Optional[RiskClassifier]:
    """Get cached classifier for the default settings."""
    return load_classifier(get_settings())
