"""
Pydantic models for the underwriting pipeline.
These models define the data structures passed between pipeline steps.
"""

import uuid
from datetime import date, datetime, timezone
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class InsuranceCategory(str, Enum):
    """Line of business the applicant is asking cover for."""
    AUTO = "auto"
    HOME = "home"
    LIFE = "life"
    HEALTH = "health"


class DecisionOutcome(str, Enum):
    """Underwriting outcome. An undecided case carries ``None``."""
    APPROVE = "APPROVE"
    REJECT = "REJECT"
    REFER = "REFER"


class RiskLevel(str, Enum):
    """Risk band. UNKNOWN is only used on error fallback decisions."""
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    VERY_HIGH = "VERY_HIGH"
    UNKNOWN = "UNKNOWN"


class DecisionMethod(str, Enum):
    """Which pipeline path produced the outcome."""
    RULES_ENGINE = "RULES_ENGINE"
    MACHINE_LEARNING = "MACHINE_LEARNING"
    STANDARD_ASSESSMENT = "STANDARD_ASSESSMENT"
    ERROR_FALLBACK = "ERROR_FALLBACK"


class RiskProfile(BaseModel):
    """Immutable applicant fact set submitted for underwriting."""

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )

    customer_id: str = Field(min_length=1, description="Customer identifier")
    insurance_category: InsuranceCategory = Field(description="auto, home, life or health")
    credit_score: Optional[int] = Field(default=None, ge=300, le=850, description="Bureau score 300-850")

    # Claims history (trailing 3 years)
    claims_in_last_3_years: int = Field(default=0, ge=0)
    total_claim_amount: float = Field(default=0.0, ge=0)
    last_claim_date: Optional[date] = Field(default=None)

    # Driving record (auto)
    driving_violations: Optional[int] = Field(default=None, ge=0)
    at_fault_accidents: Optional[int] = Field(default=None, ge=0)
    dui: Optional[bool] = Field(default=None, description="Driving under the influence on record")
    years_licensed: Optional[int] = Field(default=None, ge=0)

    # Health information (health/life)
    smoker: Optional[bool] = Field(default=None)
    medical_conditions: List[str] = Field(default_factory=list)
    occupation: Optional[str] = Field(default=None)

    # Property information (home)
    property_age: Optional[int] = Field(default=None, ge=0)
    in_flood_zone: Optional[bool] = Field(default=None)
    has_security_system: Optional[bool] = Field(default=None)

    # Insurance history and general factors
    prior_cancellation: Optional[bool] = Field(default=None)
    prior_denial: Optional[bool] = Field(default=None)
    age: Optional[int] = Field(default=None, ge=0)
    address: Optional[str] = Field(default=None)

    # External data flags
    external_credit_check_completed: bool = Field(default=False)
    driving_record_check_completed: bool = Field(default=False)

    @field_validator("insurance_category", mode="before")
    @classmethod
    def _lowercase_category(cls, value):
        if isinstance(value, str):
            return value.strip().lower()
        return value


class UnderwritingDecision(BaseModel):
    """
    Decision accumulator.

    Created empty by the orchestrator, mutated in place by each step,
    then frozen into a FinalizedDecision before it is handed back.
    """

    model_config = ConfigDict(validate_assignment=True)

    decision_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    customer_id: str
    decision_date: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    # Outcome
    outcome: Optional[DecisionOutcome] = Field(default=None)

    # Risk assessment
    risk_score: Optional[int] = Field(default=None, description="0-100 once set")
    risk_level: Optional[RiskLevel] = Field(default=None)
    risk_factors: List[str] = Field(default_factory=list)
    positive_factors: List[str] = Field(default_factory=list)

    # Policy terms
    terms: Optional[str] = Field(default=None)
    exclusions: List[str] = Field(default_factory=list)
    conditions: List[str] = Field(default_factory=list)
    premium_multiplier: Optional[float] = Field(default=None, description="e.g. 1.5 for 50% loading")
    extra_premium: Optional[float] = Field(default=None)

    # Reasoning
    decision_reason: Optional[str] = Field(default=None)
    referral_reason: Optional[str] = Field(default=None)
    manual_review_required: bool = Field(default=False)

    # Compliance
    compliance_passed: Optional[bool] = Field(default=None)
    compliance_issues: List[str] = Field(default_factory=list)

    # Provenance
    decision_method: Optional[DecisionMethod] = Field(default=None)
    confidence_score: Optional[float] = Field(default=None, ge=0.0, le=1.0)

    @classmethod
    def for_profile(cls, profile: RiskProfile) -> "UnderwritingDecision":
        """Create an empty decision for the given profile."""
        return cls(customer_id=profile.customer_id)

    @property
    def is_decided(self) -> bool:
        return self.outcome is not None

    def freeze(self) -> "FinalizedDecision":
        """Return an immutable copy of this decision."""
        return FinalizedDecision(**self.model_dump())


class FinalizedDecision(UnderwritingDecision):
    """Decision as returned to the caller. Attribute assignment is rejected."""

    model_config = ConfigDict(frozen=True)


class ClassifierPrediction(BaseModel):
    """Output of the classification capability."""
    label: DecisionOutcome
    probabilities: List[float] = Field(default_factory=list, description="Class probability distribution")

    @property
    def confidence(self) -> float:
        """Maximum class probability."""
        return max(self.probabilities, default=0.0)
