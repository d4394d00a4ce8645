"""
Pytest configuration and fixtures.
"""

import numpy as np
import pytest
from sklearn.tree import DecisionTreeClassifier

from risk_underwriting.config import Settings
from risk_underwriting.pipeline.models import RiskProfile
from risk_underwriting.pipeline.orchestrator import UnderwritingPipeline


@pytest.fixture
def settings():
    """Default settings, isolated from any local .env file."""
    return Settings(_env_file=None)


@pytest.fixture
def make_profile():
    """Factory for risk profiles with sensible defaults."""
    def _make(**overrides):
        data = {
            "customer_id": "CUST000123",
            "insurance_category": "auto",
            "credit_score": 720,
            "age": 35,
        }
        data.update(overrides)
        return RiskProfile(**data)
    return _make


@pytest.fixture
def auto_profile(make_profile):
    """Clean auto applicant with excellent credit."""
    return make_profile(
        customer_id="CUST002",
        credit_score=800,
        claims_in_last_3_years=0,
        driving_violations=0,
        at_fault_accidents=0,
        years_licensed=15,
    )


@pytest.fixture
def home_flood_profile(make_profile):
    """Older home in a flood zone without a security system."""
    return make_profile(
        customer_id="CUST007",
        insurance_category="home",
        credit_score=700,
        claims_in_last_3_years=0,
        in_flood_zone=True,
        has_security_system=False,
        property_age=60,
    )


@pytest.fixture
def pipeline(settings):
    """Pipeline with the default rule set and standard assessment."""
    with UnderwritingPipeline(settings=settings) as underwriting_pipeline:
        yield underwriting_pipeline


@pytest.fixture
def fitted_estimator():
    """
    Decision tree fitted on a small labelled sample.
    Columns: credit score, claims, age, years licensed, category code.
    """
    features = np.array([
        [750, 0, 30, 10, 0],
        [800, 0, 35, 15, 0],
        [550, 3, 25, 5, 0],
        [500, 5, 22, 3, 0],
        [650, 1, 40, 20, 0],
        [620, 2, 28, 8, 0],
        [700, 0, 45, 25, 1],
        [580, 4, 30, 10, 1],
        [720, 1, 50, 30, 2],
        [600, 2, 35, 15, 3],
    ], dtype=float)
    labels = [
        "APPROVE", "APPROVE", "REJECT", "REJECT", "APPROVE",
        "REFER", "APPROVE", "REJECT", "APPROVE", "REFER",
    ]
    return DecisionTreeClassifier(random_state=0).fit(features, labels)
