"""
Underwriting rule sets.

Rules fire in ascending priority, then in the order they are declared here.
Outcome-setting actions only ever escalate severity
(REJECT > REFER > APPROVE > undecided), so a later rule can tighten a
decision but never soften it.
"""

from typing import Dict, List

from risk_underwriting.core.rules_engine import Rule
from risk_underwriting.pipeline.models import (
    DecisionOutcome,
    InsuranceCategory,
    RiskLevel,
    RiskProfile,
    UnderwritingDecision,
)


_SEVERITY = {
    None: 0,
    DecisionOutcome.APPROVE: 1,
    DecisionOutcome.REFER: 2,
    DecisionOutcome.REJECT: 3,
}


def escalate(decision: UnderwritingDecision, outcome: DecisionOutcome) -> bool:
    """Set ``outcome`` if it is more severe than the current one."""
    if _SEVERITY[outcome] <= _SEVERITY[decision.outcome]:
        return False
    decision.outcome = outcome
    return True


def _is(category: InsuranceCategory):
    return lambda profile, decision: profile.insurance_category == category


def _is_any(*categories: InsuranceCategory):
    return lambda profile, decision: profile.insurance_category in categories


# Insurance history

def _flag_prior_denial(profile: RiskProfile, decision: UnderwritingDecision) -> None:
    decision.risk_factors.append("Previous application denied")


def _flag_prior_cancellation(profile: RiskProfile, decision: UnderwritingDecision) -> None:
    decision.risk_factors.append("Previous policy cancelled")


def _note_excellent_credit(profile: RiskProfile, decision: UnderwritingDecision) -> None:
    decision.positive_factors.append("Excellent credit score")


def _note_clean_claims(profile: RiskProfile, decision: UnderwritingDecision) -> None:
    decision.positive_factors.append("No claims in the last 3 years")


def _load_high_claims(profile: RiskProfile, decision: UnderwritingDecision) -> None:
    decision.risk_factors.append("High claims frequency")
    if profile.total_claim_amount > 0:
        loading = profile.total_claim_amount * 0.05
        decision.extra_premium = round((decision.extra_premium or 0.0) + loading, 2)


# Auto

def _refer_dui(profile: RiskProfile, decision: UnderwritingDecision) -> None:
    decision.risk_factors.append("DUI on driving record")
    if escalate(decision, DecisionOutcome.REFER):
        decision.referral_reason = "DUI conviction requires manual review"
        decision.manual_review_required = True
        decision.risk_level = RiskLevel.HIGH


def _reject_dui_with_accidents(profile: RiskProfile, decision: UnderwritingDecision) -> None:
    if escalate(decision, DecisionOutcome.REJECT):
        decision.decision_reason = "DUI combined with multiple at-fault accidents"
        decision.referral_reason = None
        decision.manual_review_required = False
        decision.risk_level = RiskLevel.VERY_HIGH


def _condition_new_driver(profile: RiskProfile, decision: UnderwritingDecision) -> None:
    decision.risk_factors.append("Licensed for less than 2 years")
    decision.conditions.append("Driver training course completion")


# Health / life

def _flag_smoker(profile: RiskProfile, decision: UnderwritingDecision) -> None:
    decision.risk_factors.append("Tobacco use")


# Home

def _note_security_system(profile: RiskProfile, decision: UnderwritingDecision) -> None:
    decision.positive_factors.append("Security system installed")


def _exclude_flood(profile: RiskProfile, decision: UnderwritingDecision) -> None:
    decision.exclusions.append("Flood damage")
    if decision.is_decided:
        return
    clean_applicant = (
        profile.credit_score is not None
        and profile.credit_score >= 650
        and profile.claims_in_last_3_years <= 1
        and not profile.prior_denial
    )
    if clean_applicant and escalate(decision, DecisionOutcome.APPROVE):
        decision.decision_reason = "Approved with flood damage excluded"
        decision.risk_level = RiskLevel.MEDIUM
        decision.conditions.append("Separate flood policy required")


def _years_licensed_below(limit: int):
    def condition(profile: RiskProfile, decision: UnderwritingDecision) -> bool:
        return profile.years_licensed is not None and profile.years_licensed < limit
    return condition


def _both(*conditions):
    return lambda profile, decision: all(c(profile, decision) for c in conditions)


UNDERWRITING_RULES: List[Rule] = [
    Rule(
        name="prior-denial-flag",
        priority=10,
        condition=lambda p, d: bool(p.prior_denial),
        action=_flag_prior_denial,
    ),
    Rule(
        name="prior-cancellation-flag",
        priority=10,
        condition=lambda p, d: bool(p.prior_cancellation),
        action=_flag_prior_cancellation,
    ),
    Rule(
        name="excellent-credit",
        priority=20,
        condition=lambda p, d: p.credit_score is not None and p.credit_score >= 750,
        action=_note_excellent_credit,
    ),
    Rule(
        name="clean-claims-history",
        priority=20,
        condition=lambda p, d: p.claims_in_last_3_years == 0,
        action=_note_clean_claims,
    ),
    Rule(
        name="high-claims-frequency",
        priority=30,
        condition=lambda p, d: p.claims_in_last_3_years >= 3,
        action=_load_high_claims,
        description="Extra premium of 5% of the claimed amount",
    ),
    Rule(
        name="dui-referral",
        priority=40,
        condition=_both(_is(InsuranceCategory.AUTO), lambda p, d: bool(p.dui)),
        action=_refer_dui,
    ),
    Rule(
        name="dui-with-accidents-reject",
        priority=40,
        condition=_both(
            _is(InsuranceCategory.AUTO),
            lambda p, d: bool(p.dui) and (p.at_fault_accidents or 0) >= 2,
        ),
        action=_reject_dui_with_accidents,
    ),
    Rule(
        name="inexperienced-driver",
        priority=40,
        condition=_both(_is(InsuranceCategory.AUTO), _years_licensed_below(2)),
        action=_condition_new_driver,
    ),
    Rule(
        name="smoker-rating",
        priority=50,
        condition=_both(
            _is_any(InsuranceCategory.HEALTH, InsuranceCategory.LIFE),
            lambda p, d: bool(p.smoker),
        ),
        action=_flag_smoker,
    ),
    Rule(
        name="home-security-credit",
        priority=60,
        condition=_both(_is(InsuranceCategory.HOME), lambda p, d: p.has_security_system is True),
        action=_note_security_system,
    ),
    Rule(
        name="flood-zone-exclusion",
        priority=60,
        condition=_both(_is(InsuranceCategory.HOME), lambda p, d: bool(p.in_flood_zone)),
        action=_exclude_flood,
    ),
]


RULESETS: Dict[str, List[Rule]] = {
    "underwriting-rules": UNDERWRITING_RULES,
}
