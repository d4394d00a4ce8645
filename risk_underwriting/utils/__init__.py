"""
Shared helpers for the underwriting core.
"""

from .masking import mask_sensitive_data

__all__ = ["mask_sensitive_data"]
