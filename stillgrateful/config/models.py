"""Configuration schema models using Pydantic."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from .duration import DurationParseError, parse_duration, validate_duration_range


class FailPolicy(str, Enum):
    """What the content filter does when the classifier is unavailable."""

    CLOSED = "closed"  # reject the message
    OPEN = "open"  # allow the message


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Log output formats."""

    JSON = "json"
    KEY_VALUE = "key-value"


class LimitsConfig(BaseModel):
    """Bounds applied by the request validator."""

    max_message_length: int = Field(
        2000, ge=1, le=10000, description="Maximum message length in characters"
    )


class RateLimitConfig(BaseModel):
    """Fixed-window rate limiting per hashed sender token."""

    max_sends: int = Field(5, ge=1, le=1000, description="Sends allowed per window")
    window: str = Field("24h", description="Window length (e.g. 24h, PT24H, 1d)")

    # Computed field
    window_seconds: Optional[int] = None

    @field_validator("window")
    @classmethod
    def validate_window(cls, v: str) -> str:
        """Validate the window duration string and its range."""
        try:
            seconds = parse_duration(v)
            validate_duration_range(seconds, label="Rate limit window")
            return v
        except DurationParseError as e:
            raise ValueError(str(e)) from e

    @model_validator(mode="after")
    def compute_window_seconds(self):
        """Store the parsed window length."""
        self.window_seconds = parse_duration(self.window)
        return self


class ContentFilterConfig(BaseModel):
    """Settings for the external text classifier."""

    model: str = Field("gemini-2.0-flash", min_length=1, description="Gemini model name")
    api_base_url: str = Field(
        "https://generativelanguage.googleapis.com/v1beta",
        min_length=1,
        description="Base URL of the Generative Language API",
    )
    fail_policy: FailPolicy = Field(
        FailPolicy.CLOSED,
        description="closed = reject when the classifier is unavailable, open = allow",
    )
    max_output_tokens: int = Field(10, ge=1, le=256)
    temperature: float = Field(0.0, ge=0.0, le=2.0)

    @field_validator("model", "api_base_url")
    @classmethod
    def strip_whitespace(cls, v: str) -> str:
        """Strip whitespace (and trailing slashes from URLs)."""
        stripped = v.strip().rstrip("/")
        if not stripped:
            raise ValueError("Field cannot be empty or whitespace-only")
        return stripped

    model_config = {"use_enum_values": True, "protected_namespaces": ()}


class DeliveryConfig(BaseModel):
    """Settings for the transactional-email provider."""

    from_address: str = Field(
        "Still Grateful <hello@stillgrateful.app>",
        min_length=3,
        description="Static From header for every notification",
    )
    subject: str = Field("Someone is grateful for you", min_length=1)
    api_url: str = Field("https://api.resend.com/emails", min_length=1)
    site_url: str = Field(
        "https://stillgrateful.app", description="Link shown in the email footer"
    )

    @field_validator("from_address", "subject", "api_url", "site_url")
    @classmethod
    def strip_whitespace(cls, v: str) -> str:
        """Strip whitespace from string fields."""
        stripped = v.strip()
        if not stripped:
            raise ValueError("Field cannot be empty or whitespace-only")
        return stripped


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: LogLevel = Field(LogLevel.INFO, description="Log level")
    format: LogFormat = Field(
        LogFormat.KEY_VALUE, description="Log output format (json or key-value)"
    )

    model_config = {"use_enum_values": True}


class AdvancedConfig(BaseModel):
    """Advanced runtime settings."""

    http_request_timeout: int = Field(
        30, ge=5, le=300, description="Timeout for classifier and email API calls (seconds)"
    )
    user_agent: str = Field(
        "StillGratefulAPI/0.1",
        min_length=1,
        description="User-Agent string for outbound HTTP requests",
    )

    @field_validator("user_agent")
    @classmethod
    def strip_user_agent(cls, v: str) -> str:
        """Strip whitespace from user agent."""
        stripped = v.strip()
        if not stripped:
            raise ValueError("user_agent cannot be empty")
        return stripped


class AppConfig(BaseModel):
    """Root configuration object for the Still Grateful API.

    Every section has defaults, so an empty mapping is a valid config.
    """

    limits: LimitsConfig = Field(default_factory=LimitsConfig)
    rate_limit: RateLimitConfig = Field(default_factory=RateLimitConfig)
    content_filter: ContentFilterConfig = Field(default_factory=ContentFilterConfig)
    delivery: DeliveryConfig = Field(default_factory=DeliveryConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    advanced: AdvancedConfig = Field(default_factory=AdvancedConfig)

    # Misspelt section names are errors rather than silently ignored
    model_config = {"extra": "forbid"}
