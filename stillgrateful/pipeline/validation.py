"""Request validation and normalisation.

Checks run in a fixed order and stop at the first failure: presence and type
of every field first, then bounds and formats.
"""

from typing import Any

from email_validator import EmailNotValidError, validate_email
from pydantic import ValidationError

from stillgrateful.domain.models import ContextTag, SendRequest

DEFAULT_MAX_MESSAGE_LENGTH = 2000


class ValidationFailure(Exception):
    """Raised when a send request payload is rejected.

    The message is a human-readable reason safe to return to the client.
    """

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


def _is_non_empty_string(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def _is_utf8_encodable(value: str) -> bool:
    # JSON escapes can decode to lone surrogates, which have no UTF-8 form
    try:
        value.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True


def is_valid_email(email: str) -> bool:
    """Check email syntax only (no DNS or deliverability lookups)."""
    try:
        validate_email(email, check_deliverability=False)
        return True
    except EmailNotValidError:
        return False


def validate_send_request(
    payload: Any, max_message_length: int = DEFAULT_MAX_MESSAGE_LENGTH
) -> SendRequest:
    """Validate a decoded JSON payload and build a normalised SendRequest.

    Args:
        payload: Result of decoding the request body (any JSON value)
        max_message_length: Maximum message length in characters

    Returns:
        SendRequest with trimmed strings and a lower-cased recipient

    Raises:
        ValidationFailure: On the first violated check
    """
    if not isinstance(payload, dict):
        raise ValidationFailure("Request body must be a JSON object.")

    message = payload.get("message")
    recipient_email = payload.get("recipient_email")
    context_tag = payload.get("context_tag")
    sender_token = payload.get("sender_token")

    if not _is_non_empty_string(message):
        raise ValidationFailure("Message is required and must be a non-empty string.")

    if not _is_non_empty_string(recipient_email):
        raise ValidationFailure("Recipient email is required.")

    if not _is_non_empty_string(context_tag):
        raise ValidationFailure("Context tag is required.")

    if not _is_non_empty_string(sender_token):
        raise ValidationFailure("Sender token is required.")

    for label, value in (
        ("Message", message),
        ("Recipient email", recipient_email),
        ("Context tag", context_tag),
        ("Sender token", sender_token),
    ):
        if not _is_utf8_encodable(value):
            raise ValidationFailure(f"{label} contains characters that are not valid UTF-8.")

    if len(message) > max_message_length:
        raise ValidationFailure(f"Message must be {max_message_length} characters or less.")

    recipient_email = recipient_email.strip().lower()
    if not is_valid_email(recipient_email):
        raise ValidationFailure("Invalid email address format.")

    if context_tag not in ContextTag.values():
        raise ValidationFailure(
            f"Invalid context tag. Must be one of: {', '.join(ContextTag.values())}."
        )

    try:
        return SendRequest(
            message=message.strip(),
            recipient_email=recipient_email,
            context_tag=ContextTag(context_tag),
            sender_token=sender_token.strip(),
        )
    except ValidationError as e:
        field = e.errors()[0]["loc"][0]
        raise ValidationFailure(f"Invalid value for {field}.") from e
