"""
CLI tool for underwriting a single risk profile.
Usage: risk-underwrite <profile.json> [--json]
"""

import sys
import json
import logging
import argparse
from pathlib import Path

from pydantic import ValidationError

from risk_underwriting.config import get_settings
from risk_underwriting.core.classifier import ClassifierError, SklearnRiskClassifier
from risk_underwriting.pipeline.models import DecisionOutcome, RiskProfile
from risk_underwriting.pipeline.orchestrator import UnderwritingPipeline


# ANSI color codes for terminal output
class Colors:
    BLUE = '\033[94m'
    CYAN = '\033[96m'
    GREEN = '\033[92m'
    YELLOW = '\033[93m'
    RED = '\033[91m'
    ENDC = '\033[0m'
    BOLD = '\033[1m'


OUTCOME_COLORS = {
    DecisionOutcome.APPROVE: Colors.GREEN,
    DecisionOutcome.REFER: Colors.YELLOW,
    DecisionOutcome.REJECT: Colors.RED,
}


def print_step(step_num: int, name: str, status: str):
    """Print step progress."""
    if status == "running":
        return
    if status == "complete":
        icon = "done"
        color = Colors.GREEN
    else:
        icon = status
        color = Colors.CYAN

    print(f"  [{step_num}/5] {name:<22} {color}{icon}{Colors.ENDC}")


def print_list(title: str, items):
    if items:
        print(f"\n{Colors.BOLD}{title}:{Colors.ENDC}")
        for item in items:
            print(f"  - {item}")


def print_decision(decision):
    """Print the decision in a formatted way."""
    color = OUTCOME_COLORS.get(decision.outcome, Colors.RED)
    outcome = decision.outcome.value if decision.outcome else "UNDECIDED"

    print("\n" + "=" * 60)
    print(f"{Colors.BOLD}{color}        DECISION: {outcome}{Colors.ENDC}")
    print("=" * 60)

    print(f"\n{Colors.BOLD}Decision ID:{Colors.ENDC} {decision.decision_id}")
    if decision.decision_method:
        print(f"{Colors.BOLD}Method:{Colors.ENDC} {decision.decision_method.value}")
    if decision.risk_score is not None:
        print(f"{Colors.BOLD}Risk Score:{Colors.ENDC} {decision.risk_score}/100")
    if decision.risk_level:
        print(f"{Colors.BOLD}Risk Level:{Colors.ENDC} {decision.risk_level.value}")
    if decision.confidence_score is not None:
        print(f"{Colors.BOLD}Confidence:{Colors.ENDC} {decision.confidence_score:.0%}")
    if decision.premium_multiplier is not None:
        print(f"{Colors.BOLD}Premium Multiplier:{Colors.ENDC} {decision.premium_multiplier:.2f}")
    if decision.extra_premium:
        print(f"{Colors.BOLD}Extra Premium:{Colors.ENDC} ${decision.extra_premium:,.2f}")

    if decision.decision_reason:
        print(f"\n{Colors.BOLD}Reason:{Colors.ENDC} {decision.decision_reason}")
    if decision.referral_reason:
        print(f"{Colors.YELLOW}Referral: {decision.referral_reason}{Colors.ENDC}")
    if decision.terms:
        print(f"{Colors.BOLD}Terms:{Colors.ENDC} {decision.terms}")

    print_list("Risk Factors", decision.risk_factors)
    print_list("Positive Factors", decision.positive_factors)
    print_list("Exclusions", decision.exclusions)
    print_list("Conditions", decision.conditions)

    if decision.compliance_passed:
        print(f"\n{Colors.GREEN}Compliance check passed{Colors.ENDC}")
    else:
        print(f"\n{Colors.RED}Compliance check failed{Colors.ENDC}")
        for issue in decision.compliance_issues:
            print(f"  - {issue}")


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Underwrite an applicant risk profile",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  risk-underwrite data/sample_profiles/auto_dui.json
  risk-underwrite data/sample_profiles/home_flood_zone.json --json
  cat data/sample_profiles/auto_many_claims.json | risk-underwrite --credit-check
        """
    )

    parser.add_argument(
        "file",
        nargs="?",
        help="Path to a risk profile JSON file"
    )
    parser.add_argument(
        "--json", "-j",
        action="store_true",
        help="Output decision as JSON only"
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Suppress progress output"
    )
    parser.add_argument(
        "--model",
        help="Path to a joblib-serialized classifier (enables ML assessment)"
    )
    parser.add_argument(
        "--credit-check",
        action="store_true",
        help="Enrich the profile with an external credit score"
    )

    args = parser.parse_args()

    settings = get_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    # Get profile content
    if args.file:
        file_path = Path(args.file)
        if not file_path.exists():
            print(f"{Colors.RED}Error: File not found: {args.file}{Colors.ENDC}")
            sys.exit(1)
        content = file_path.read_text()
    elif not sys.stdin.isatty():
        content = sys.stdin.read()
    else:
        parser.print_help()
        sys.exit(1)

    try:
        profile = RiskProfile.model_validate_json(content)
    except ValidationError as e:
        print(f"{Colors.RED}Error: Invalid risk profile{Colors.ENDC}\n{e}")
        sys.exit(1)

    overrides = {}
    if args.model:
        overrides["use_ml"] = True
        overrides["classifier_model_path"] = Path(args.model)
    if args.credit_check:
        overrides["use_external_credit_check"] = True
    if overrides:
        settings = settings.model_copy(update=overrides)

    # Setup progress callback
    def progress_callback(step: int, name: str, status: str):
        if not args.quiet and not args.json:
            print_step(step, name, status)

    if not args.quiet and not args.json:
        print(f"\n{Colors.BOLD}Risk Underwriting{Colors.ENDC}")
        print("-" * 40)

    # An unusable model falls back to standard assessment, as the pipeline does
    classifier = None
    if args.model:
        try:
            classifier = SklearnRiskClassifier.from_path(args.model)
        except ClassifierError as e:
            print(
                f"{Colors.YELLOW}Warning: {e}. Using standard assessment.{Colors.ENDC}",
                file=sys.stderr
            )
            settings = settings.model_copy(update={"use_ml": False})

    try:
        with UnderwritingPipeline(
            classifier=classifier,
            settings=settings,
            progress_callback=progress_callback,
        ) as pipeline:
            decision = pipeline.evaluate(profile)

        if args.json:
            print(json.dumps(decision.model_dump(mode="json"), indent=2))
        else:
            print_decision(decision)

        sys.exit(0 if decision.compliance_passed else 1)

    except Exception as e:
        if args.json:
            print(json.dumps({"success": False, "error": str(e)}))
        else:
            print(f"\n{Colors.RED}Error: {e}{Colors.ENDC}")
        sys.exit(1)


if __name__ == "__main__":
    main()
