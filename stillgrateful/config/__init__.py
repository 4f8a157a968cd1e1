"""Configuration management module for the Still Grateful API."""

from .environment import EnvironmentConfig, load_environment_config
from .exceptions import ConfigurationError
from .loader import load_app_config, load_config, validate_config_file
from .models import (
    AdvancedConfig,
    AppConfig,
    ContentFilterConfig,
    DeliveryConfig,
    FailPolicy,
    LimitsConfig,
    LogFormat,
    LogLevel,
    LoggingConfig,
    RateLimitConfig,
)

__all__ = [
    # Main loader functions
    "load_config",
    "load_app_config",
    "validate_config_file",
    "load_environment_config",
    # Configuration models
    "AppConfig",
    "LimitsConfig",
    "RateLimitConfig",
    "ContentFilterConfig",
    "DeliveryConfig",
    "LoggingConfig",
    "AdvancedConfig",
    "EnvironmentConfig",
    # Enums
    "FailPolicy",
    "LogLevel",
    "LogFormat",
    # Exceptions
    "ConfigurationError",
]
