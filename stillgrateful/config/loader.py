"""Configuration loader for the Still Grateful API.

The YAML file holds tunables (limits, rate window, classifier and delivery
settings); secrets come from the environment. Both are validated up front so
the service never starts with a half-usable configuration.
"""

import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import ValidationError

from .environment import EnvironmentConfig, load_environment_config
from .exceptions import ConfigurationError
from .models import AppConfig
from .validators import check_for_warnings, emit_warnings

CONFIG_PATH_ENV_VAR = "STILLGRATEFUL_CONFIG"

DEFAULT_CONFIG_LOCATIONS = (
    Path("config.yaml"),
    Path("config") / "config.yaml",
)

EXAMPLE_HINT = "Copy config.example.yaml to config.yaml"


def load_config(config_path: Optional[Path] = None) -> tuple[AppConfig, EnvironmentConfig]:
    """
    Load the YAML settings and the environment secrets.

    Config file lookup order:
    1. config_path, if given
    2. The path in $STILLGRATEFUL_CONFIG, if set
    3. ./config.yaml
    4. ./config/config.yaml

    Args:
        config_path: Optional path to configuration file

    Returns:
        Tuple of (AppConfig, EnvironmentConfig)

    Raises:
        ConfigurationError: If either part is missing or invalid
    """
    app_config = load_app_config(_find_config_file(config_path))
    return app_config, load_environment_config()


def load_app_config(config_file: Path) -> AppConfig:
    """
    Parse and validate a YAML configuration file.

    Every section is optional, so an empty file yields the defaults.

    Args:
        config_file: Path to the YAML file

    Returns:
        Validated AppConfig

    Raises:
        ConfigurationError: If the file cannot be read, parsed or validated
    """
    settings = _read_yaml(config_file)

    pending_warnings = check_for_warnings(settings)
    if pending_warnings:
        emit_warnings(pending_warnings)

    try:
        return AppConfig.model_validate(settings)
    except ValidationError as e:
        raise ConfigurationError(
            f"Configuration validation failed for {config_file}",
            errors=_describe_validation_errors(e),
            suggestions=[
                "Review config.example.yaml for the accepted keys and ranges",
                "Durations accept forms like 24h, 90m, 1d or PT24H",
            ],
        )


def validate_config_file(config_path: Optional[Path] = None) -> bool:
    """
    Check a configuration file without touching environment secrets.

    Intended for deploy pipelines (`stillgrateful --validate-config`). The file
    is located the same way load_config() locates it.

    Args:
        config_path: Path to configuration file (None to search)

    Returns:
        True if valid, False otherwise (details printed to stdout)
    """
    try:
        config_path = _find_config_file(config_path)
        load_app_config(config_path)
    except ConfigurationError as e:
        print(f"✗ Configuration validation failed:\n{e}")
        return False

    print(f"✓ Configuration file {config_path} is valid")
    return True


def _read_yaml(config_file: Path) -> Dict[str, Any]:
    """Read a YAML mapping from disk, treating an empty file as {}."""
    try:
        with open(config_file, "r") as f:
            settings = yaml.safe_load(f)
    except FileNotFoundError:
        raise ConfigurationError(
            f"Configuration file not found: {config_file}",
            suggestions=[EXAMPLE_HINT, f"Ensure {config_file} exists and is readable"],
        )
    except yaml.YAMLError as e:
        raise ConfigurationError(
            f"Failed to parse YAML configuration: {e}",
            suggestions=[
                "Check YAML syntax in your config file",
                "Ensure proper indentation (use spaces, not tabs)",
            ],
        )
    except OSError as e:
        raise ConfigurationError(
            f"Failed to read configuration file: {e}",
            suggestions=[f"Check the permissions on {config_file}"],
        )

    if settings is None:
        return {}

    if not isinstance(settings, dict):
        raise ConfigurationError(
            f"Configuration file must contain a mapping at the top level, "
            f"got {type(settings).__name__}",
            suggestions=["Review config.example.yaml for the expected layout"],
        )

    return settings


def _describe_validation_errors(error: ValidationError) -> List[str]:
    """Turn pydantic errors into one readable line per problem."""
    descriptions = []
    for item in error.errors():
        field_path = " -> ".join(str(loc) for loc in item["loc"]) or "(root)"
        error_type = item["type"]

        if error_type == "extra_forbidden":
            descriptions.append(f"Unknown setting: {field_path}")
        elif error_type.endswith("_type"):
            expected = error_type[: -len("_type")]
            descriptions.append(
                f"Invalid type for '{field_path}': expected {expected}, got {item.get('input')!r}"
            )
        elif error_type == "enum":
            descriptions.append(f"Invalid value for '{field_path}': {item['msg']}")
        else:
            descriptions.append(f"{field_path}: {item['msg']}")

    return descriptions


def _find_config_file(config_path: Optional[Path] = None) -> Path:
    """
    Resolve which configuration file to load.

    An explicit path, or one named by $STILLGRATEFUL_CONFIG, must exist; the
    default locations are tried in order.

    Raises:
        ConfigurationError: If no config file is found
    """
    if config_path is None and os.getenv(CONFIG_PATH_ENV_VAR):
        config_path = Path(os.environ[CONFIG_PATH_ENV_VAR])

    if config_path is not None:
        if not config_path.exists():
            raise ConfigurationError(
                f"Specified configuration file not found: {config_path}",
                suggestions=[
                    f"Ensure {config_path} exists",
                    f"Check --config and ${CONFIG_PATH_ENV_VAR}",
                ],
            )
        return config_path

    for candidate in DEFAULT_CONFIG_LOCATIONS:
        if candidate.exists():
            return candidate

    raise ConfigurationError(
        "Configuration file not found",
        errors=[f"Tried: {candidate}" for candidate in DEFAULT_CONFIG_LOCATIONS],
        suggestions=[
            EXAMPLE_HINT,
            f"Use --config or ${CONFIG_PATH_ENV_VAR} to specify a custom location",
        ],
    )
