"""Non-fatal configuration checks."""

import warnings
from typing import Any, Dict, List

from .duration import DurationParseError, parse_duration


def check_for_warnings(config_dict: Dict[str, Any]) -> List[str]:
    """
    Check configuration for settings that are legal but probably unintended.

    Args:
        config_dict: Raw configuration dictionary

    Returns:
        List of warning messages
    """
    warning_messages = []

    content_filter = config_dict.get("content_filter", {})
    if isinstance(content_filter, dict):
        if str(content_filter.get("fail_policy", "closed")).lower() == "open":
            warning_messages.append(
                "content_filter.fail_policy is 'open': messages are delivered "
                "unscreened whenever the classifier is unavailable"
            )

        temperature = content_filter.get("temperature", 0.0)
        if isinstance(temperature, (int, float)) and temperature > 0:
            warning_messages.append(
                f"content_filter.temperature is {temperature}: classifier verdicts "
                "will not be deterministic"
            )

    rate_limit = config_dict.get("rate_limit", {})
    if isinstance(rate_limit, dict):
        max_sends = rate_limit.get("max_sends", 5)
        if isinstance(max_sends, int) and max_sends > 50:
            warning_messages.append(
                f"Large rate_limit.max_sends ({max_sends}) offers little abuse protection"
            )

        window = rate_limit.get("window", "24h")
        if isinstance(window, str):
            try:
                if parse_duration(window) < 3600:
                    warning_messages.append(
                        f"Short rate_limit.window ({window}) resets counters very quickly"
                    )
            except DurationParseError:
                # Reported as an error by model validation
                pass

    return warning_messages


def emit_warnings(warning_messages: List[str]) -> None:
    """
    Emit warning messages using Python's warnings module.

    Args:
        warning_messages: List of warning messages to emit
    """
    for message in warning_messages:
        warnings.warn(message, UserWarning, stacklevel=2)
