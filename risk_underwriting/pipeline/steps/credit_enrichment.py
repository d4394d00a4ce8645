"""
Credit Enrichment
Supplements the profile with an external credit score.
"""

import logging

from risk_underwriting.core.credit_client import CreditScoreClient
from risk_underwriting.pipeline.models import RiskProfile


logger = logging.getLogger(__name__)


class CreditEnrichmentStep:
    """
    Fetches a bureau credit score for the applicant.
    A failed lookup is never fatal: the profile's own score is kept.
    """

    def __init__(self, credit_client: CreditScoreClient):
        """Initialize with the bureau client."""
        self.credit_client = credit_client

    def execute(self, profile: RiskProfile) -> RiskProfile:
        """
        Enrich the profile with an external credit score.

        Args:
            profile: Applicant risk profile

        Returns:
            An enriched copy of the profile, or the original on failure
        """
        try:
            response = self.credit_client.get_credit_score(
                profile.customer_id, self._tax_id_for(profile)
            )
        except Exception as e:
            logger.warning(f"Failed to fetch external credit score: {e}")
            return profile

        logger.info(f"Credit score enriched from {response.bureau}: {response.credit_score}")
        return profile.model_copy(update={
            "credit_score": response.credit_score,
            "external_credit_check_completed": True,
        })

    def _tax_id_for(self, profile: RiskProfile) -> str:
        # Real tax ids come from secure storage outside this core
        return f"XXX-XX-{profile.customer_id[:4]}"
