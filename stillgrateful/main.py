"""Main entry point for the Still Grateful API service."""

from dotenv import load_dotenv
load_dotenv()

import argparse
import sys
import time
from pathlib import Path
from typing import Optional, Tuple

import uvicorn

from stillgrateful.adapters.gemini import GeminiClassifierClient
from stillgrateful.adapters.resend import ResendClient
from stillgrateful.api import create_app
from stillgrateful.audit import AuditLogger
from stillgrateful.config.environment import EnvironmentConfig
from stillgrateful.config.exceptions import ConfigurationError
from stillgrateful.config.loader import load_config, validate_config_file
from stillgrateful.config.models import AppConfig
from stillgrateful.filtering import FILTER_SYSTEM_PROMPT, ContentFilter
from stillgrateful.logging import get_logger
from stillgrateful.logging.config import configure_logging
from stillgrateful.notifications.service import DeliveryService
from stillgrateful.persistence.database import Database, redact_url
from stillgrateful.pipeline import SendPipeline
from stillgrateful.ratelimit import RateLimiter

logger = get_logger(__name__, component="cli")


def load_runtime_config(
    config_path: Optional[Path], log_level_override: Optional[str]
) -> Tuple[AppConfig, EnvironmentConfig]:
    """
    Load and prepare runtime configuration.

    Args:
        config_path: Path to configuration file (None to search defaults)
        log_level_override: Log level from CLI (takes precedence)

    Returns:
        Tuple of (AppConfig, EnvironmentConfig) with log_level resolved

    Raises:
        ConfigurationError: If configuration is invalid
    """
    app_config, env_config = load_config(config_path)

    # Log level priority: CLI > Environment > Config
    if log_level_override:
        env_config.log_level = log_level_override
    elif not env_config.log_level:
        env_config.log_level = app_config.logging.level

    return app_config, env_config


def build_pipeline(
    app_config: AppConfig, env_config: EnvironmentConfig, database: Database
) -> SendPipeline:
    """
    Wire the pipeline collaborators from configuration.

    Args:
        app_config: Application configuration
        env_config: Environment configuration with API keys
        database: Open database

    Returns:
        Ready-to-use SendPipeline
    """
    advanced = app_config.advanced
    filter_config = app_config.content_filter

    classifier = GeminiClassifierClient(
        api_key=env_config.gemini_api_key,
        system_instruction=FILTER_SYSTEM_PROMPT,
        model=filter_config.model,
        api_base_url=filter_config.api_base_url,
        max_output_tokens=filter_config.max_output_tokens,
        temperature=filter_config.temperature,
        timeout=advanced.http_request_timeout,
        user_agent=advanced.user_agent,
    )
    email_client = ResendClient(
        api_key=env_config.resend_api_key,
        api_url=app_config.delivery.api_url,
        timeout=advanced.http_request_timeout,
        user_agent=advanced.user_agent,
    )

    return SendPipeline(
        rate_limiter=RateLimiter(
            database,
            max_sends=app_config.rate_limit.max_sends,
            window_seconds=app_config.rate_limit.window_seconds,
        ),
        content_filter=ContentFilter(classifier, fail_policy=filter_config.fail_policy),
        delivery_service=DeliveryService(email_client, delivery_config=app_config.delivery),
        audit_logger=AuditLogger(database),
        max_message_length=app_config.limits.max_message_length,
    )


def main(argv: Optional[list] = None) -> int:
    """
    Main entry point for the Still Grateful API.

    Returns:
        Exit code (0 for success, non-zero for failure).
    """
    start_time = time.time()
    parser = argparse.ArgumentParser(
        description="Still Grateful API - anonymous gratitude message relay"
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help=(
            "Path to configuration file "
            "(default: $STILLGRATEFUL_CONFIG, config.yaml or config/config.yaml)"
        ),
    )
    parser.add_argument("--host", default="127.0.0.1", help="Bind address (default: 127.0.0.1)")
    parser.add_argument("--port", type=int, default=8000, help="Bind port (default: 8000)")
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level (overrides config and environment)",
    )
    parser.add_argument(
        "--validate-config",
        action="store_true",
        help="Validate the configuration file and exit",
    )

    args = parser.parse_args(argv)

    if args.validate_config:
        return 0 if validate_config_file(args.config) else 1

    database = None
    try:
        app_config, env_config = load_runtime_config(args.config, args.log_level)

        configure_logging(
            level=env_config.log_level,
            format_type=app_config.logging.format,
            environment=env_config.environment,
        )

        logger.info(
            "Still Grateful API starting",
            extra={
                "event": "service.starting",
                "config_path": str(args.config) if args.config else None,
                "log_level": env_config.log_level,
                "database_url": redact_url(env_config.database_url),
                "fail_policy": app_config.content_filter.fail_policy,
                "max_sends": app_config.rate_limit.max_sends,
                "window_seconds": app_config.rate_limit.window_seconds,
            },
        )

        database = Database(env_config.database_url)
        app = create_app(build_pipeline(app_config, env_config, database))

        logger.info(
            "Serving HTTP",
            extra={"event": "service.serving", "host": args.host, "port": args.port},
        )
        uvicorn.run(app, host=args.host, port=args.port, log_config=None)

        logger.info(
            "Still Grateful API stopped",
            extra={
                "event": "service.stopping",
                "uptime_seconds": round(time.time() - start_time, 2),
            },
        )
        return 0

    except ConfigurationError as e:
        print(f"Configuration Error: {e}", file=sys.stderr)
        logger.error(
            f"Configuration error: {e}",
            extra={"event": "config.error", "error_type": "ConfigurationError"},
        )
        return 1
    except KeyboardInterrupt:
        print("\nShutdown requested by user", file=sys.stderr)
        return 0
    except Exception as e:
        print(f"Fatal error: {e}", file=sys.stderr)
        logger.critical(
            "Fatal error during startup",
            extra={
                "event": "service.startup.failed",
                "error_type": type(e).__name__,
            },
            exc_info=True,
        )
        return 1
    finally:
        if database is not None:
            database.close()


if __name__ == "__main__":
    sys.exit(main())
