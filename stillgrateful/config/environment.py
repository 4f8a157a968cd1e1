"""Environment variable loading and validation."""

import os
from typing import Optional

from .exceptions import ConfigurationError

VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class EnvironmentConfig:
    """Secrets and deployment settings read from the environment."""

    def __init__(
        self,
        gemini_api_key: str,
        resend_api_key: str,
        database_url: Optional[str] = None,
        log_level: Optional[str] = None,
        environment: Optional[str] = None,
    ):
        """Initialize environment configuration."""
        self.gemini_api_key = gemini_api_key
        self.resend_api_key = resend_api_key
        self.database_url = database_url or "sqlite:///./data/stillgrateful.db"
        self.log_level = log_level
        self.environment = environment or "local"

    def __repr__(self) -> str:
        # API keys are omitted
        return (
            f"EnvironmentConfig(database_url={self.database_url!r}, "
            f"log_level={self.log_level!r}, environment={self.environment!r})"
        )


def load_environment_config() -> EnvironmentConfig:
    """
    Load and validate environment variables.

    Required environment variables:
    - GEMINI_API_KEY: API key for the Gemini content classifier
    - RESEND_API_KEY: API key for the Resend email API

    Optional environment variables:
    - DATABASE_URL: SQLAlchemy URL (default: sqlite:///./data/stillgrateful.db)
    - LOG_LEVEL: Override log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    - ENVIRONMENT: Label attached to every log record (default: local)

    Returns:
        EnvironmentConfig object with validated values

    Raises:
        ConfigurationError: If required variables are missing or invalid
    """
    errors = []

    gemini_api_key = (os.getenv("GEMINI_API_KEY") or "").strip()
    resend_api_key = (os.getenv("RESEND_API_KEY") or "").strip()
    database_url = os.getenv("DATABASE_URL")
    log_level = os.getenv("LOG_LEVEL")
    environment = os.getenv("ENVIRONMENT")

    if not gemini_api_key:
        errors.append("Missing required environment variable: GEMINI_API_KEY")

    if not resend_api_key:
        errors.append("Missing required environment variable: RESEND_API_KEY")

    if database_url is not None and not database_url.strip():
        errors.append("DATABASE_URL is set but empty")

    if log_level and log_level.upper() not in VALID_LOG_LEVELS:
        errors.append(
            f"Invalid LOG_LEVEL: '{log_level}'. Must be one of: {', '.join(VALID_LOG_LEVELS)}"
        )

    if errors:
        raise ConfigurationError(
            "Environment variable validation failed",
            errors=errors,
            suggestions=[
                "Copy .env.example to .env and fill in your API keys",
                "Ensure all required environment variables are set",
            ],
        )

    return EnvironmentConfig(
        gemini_api_key=gemini_api_key,
        resend_api_key=resend_api_key,
        database_url=database_url.strip() if database_url else None,
        log_level=log_level.upper() if log_level else None,
        environment=environment,
    )
