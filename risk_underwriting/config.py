"""
Configuration management using Pydantic Settings.
Loads environment variables from .env file with validation.
"""

from pathlib import Path
from functools import lru_cache
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=Path(__file__).parent.parent / ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Fallback resolver selection
    use_ml: bool = Field(
        default=False,
        description="Use the classifier assessor when rules leave the case undecided"
    )
    classifier_model_path: Optional[Path] = Field(
        default=None,
        description="Path to a joblib-serialized fitted classifier"
    )

    # Rule set
    ruleset_name: str = Field(
        default="underwriting-rules",
        description="Named rule set loaded at startup"
    )

    # Credit bureau configuration
    use_external_credit_check: bool = Field(
        default=False,
        description="Enrich profiles with an external credit score"
    )
    credit_api_enabled: bool = Field(
        default=False,
        description="Call the live bureau API; simulated responses otherwise"
    )
    credit_api_url: str = Field(default="https://api.experian.example.com/v1")
    credit_api_key: str = Field(default="")
    credit_api_timeout_seconds: float = Field(default=30.0, gt=0)
    credit_api_max_retries: int = Field(default=3, ge=1)
    credit_mock_fallback: bool = Field(
        default=True,
        description="Answer with a simulated response when the live call fails"
    )
    credit_mock_seed: Optional[int] = Field(
        default=None,
        description="Seed for simulated bureau responses (deterministic test runs)"
    )

    # Async entry point
    max_workers: int = Field(default=4, ge=1)

    # Logging
    log_level: str = Field(default="INFO")


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.
    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()
