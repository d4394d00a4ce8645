"""
Credit bureau client used to enrich risk profiles.
Wraps the bureau HTTP API with retry logic and a simulated fallback.
"""

import logging
import random
import time
from functools import lru_cache
from typing import Optional

import httpx
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from tenacity import (
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    stop_after_delay,
    wait_exponential,
)

from risk_underwriting.config import Settings, get_settings
from risk_underwriting.utils.masking import mask_sensitive_data


logger = logging.getLogger(__name__)


class CreditCheckError(Exception):
    """Raised when a live credit lookup fails and no fallback is allowed."""


class CreditScoreResponse(BaseModel):
    """Bureau response for a single customer."""

    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    customer_id: str
    credit_score: int = Field(ge=300, le=850)
    score_range: Optional[str] = Field(default=None)
    bureau: Optional[str] = Field(default=None)
    delinquencies: int = Field(default=0)
    bankruptcies: int = Field(default=0)
    accounts_in_good_standing: int = Field(default=0)
    total_debt: float = Field(default=0.0)
    credit_utilization: float = Field(default=0.0)
    credit_age: int = Field(default=0, description="Years of credit history")
    recent_inquiries: int = Field(default=0)
    risk_level: Optional[str] = Field(default=None)


def determine_risk_level(credit_score: int) -> str:
    """Map a bureau score to a coarse risk band."""
    if credit_score >= 750:
        return "LOW"
    if credit_score >= 650:
        return "MEDIUM"
    if credit_score >= 550:
        return "HIGH"
    return "VERY_HIGH"


class CreditScoreClient:
    """
    Client for the external credit scoring API.

    When the live API is disabled, or a live call fails and fallback is
    allowed, the client answers with a simulated bureau response drawn from
    its own random source. Seed that source to make runs reproducible.
    """

    def __init__(
        self,
        http_client: Optional[httpx.Client] = None,
        rng: Optional[random.Random] = None,
        settings: Optional[Settings] = None,
    ):
        """
        Initialize the client.

        Args:
            http_client: HTTP client (built from settings if not provided)
            rng: Random source for simulated responses
            settings: Settings override (uses cached settings if not provided)
        """
        settings = settings or get_settings()

        self.api_enabled = settings.credit_api_enabled
        self.api_url = settings.credit_api_url.rstrip("/")
        self.api_key = settings.credit_api_key
        self.max_retries = settings.credit_api_max_retries
        self.timeout_seconds = settings.credit_api_timeout_seconds
        self.mock_fallback = settings.credit_mock_fallback

        self.http_client = http_client or httpx.Client(
            timeout=httpx.Timeout(settings.credit_api_timeout_seconds)
        )
        self.rng = rng or random.Random(settings.credit_mock_seed)

    def get_credit_score(self, customer_id: str, tax_id: str) -> CreditScoreResponse:
        """
        Look up a customer's credit score.

        Args:
            customer_id: Customer identifier
            tax_id: Tax identifier forwarded to the bureau

        Returns:
            CreditScoreResponse from the bureau or the simulated fallback

        Raises:
            CreditCheckError: The live call failed and fallback is disabled
        """
        if not self.api_enabled:
            logger.debug("External credit API disabled, using mock response")
            return self._mock_credit_score(customer_id)

        logger.info(f"Calling credit score API for customer: {mask_sensitive_data(customer_id)}")

        # The timeout bounds the whole lookup, retries included
        deadline = time.monotonic() + self.timeout_seconds
        try:
            retryer = Retrying(
                stop=stop_after_attempt(self.max_retries) | stop_after_delay(self.timeout_seconds),
                wait=wait_exponential(multiplier=1, min=1, max=10),
                retry=retry_if_exception_type(httpx.TransportError),
                reraise=True,
            )
            return retryer(self._request_credit_score, customer_id, tax_id, deadline)
        except (httpx.HTTPError, ValueError) as e:
            if not self.mock_fallback:
                raise CreditCheckError(f"Credit score lookup failed: {e}") from e
            logger.warning(f"Error calling credit score API, using mock response: {e}")
            return self._mock_credit_score(customer_id)

    def _request_credit_score(
        self,
        customer_id: str,
        tax_id: str,
        deadline: float
    ) -> CreditScoreResponse:
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            raise httpx.TimeoutException("Credit score lookup exceeded its time budget")

        response = self.http_client.post(
            f"{self.api_url}/credit-score",
            timeout=remaining,
            headers={"Authorization": f"Bearer {self.api_key}"},
            json={
                "customerId": customer_id,
                "ssn": tax_id,
                "requestType": "full_report",
            },
        )
        response.raise_for_status()
        return CreditScoreResponse.model_validate(response.json())

    def _mock_credit_score(self, customer_id: str) -> CreditScoreResponse:
        """Generate a realistic simulated bureau response."""
        logger.debug(f"Generating mock credit score for customer: {mask_sensitive_data(customer_id)}")

        score = 600 + self.rng.randrange(200)
        return CreditScoreResponse(
            customer_id=customer_id,
            credit_score=score,
            score_range="300-850",
            bureau="Experian (Mock)",
            delinquencies=self.rng.randrange(3) if score < 650 else 0,
            bankruptcies=self.rng.randrange(2) if score < 600 else 0,
            accounts_in_good_standing=self.rng.randrange(10) + 5,
            total_debt=round(self.rng.random() * 50000, 2),
            credit_utilization=round(self.rng.random() * 0.8, 4),
            credit_age=self.rng.randrange(20) + 3,
            recent_inquiries=self.rng.randrange(5),
            risk_level=determine_risk_level(score),
        )

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self.http_client.close()


@lru_cache()
def get_credit_client() -> CreditScoreClient:
    """Get cached credit client instance."""
    return CreditScoreClient()
