"""
Risk Underwriting Decision Core

This package evaluates an applicant's risk profile and produces an
underwriting decision using:
- An ordered, declarative rule set for clear-cut cases
- Deterministic weighted scoring or a pluggable classifier as fallback
- A compliance gate that annotates every decision before it leaves
"""

__version__ = "1.0.0"
