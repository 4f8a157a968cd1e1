"""Result types and exceptions for gratitude email delivery."""

from dataclasses import dataclass
from typing import Optional


class NotificationError(Exception):
    """Base exception for notification-related errors."""

    pass


class NotificationTemplateError(NotificationError):
    """Raised when template rendering fails due to configuration or missing variables."""

    pass


class DeliveryError(NotificationError):
    """Raised when the email provider does not accept a message."""

    pass


@dataclass
class DeliveryResult:
    """Result of attempting to deliver one gratitude email.

    Attributes:
        delivered: Whether the provider accepted the email
        provider_message_id: Id returned by the provider, if any
        error: Error description when delivery failed
    """

    delivered: bool
    provider_message_id: Optional[str] = None
    error: Optional[str] = None

    def is_success(self) -> bool:
        """Check if the email was accepted by the provider."""
        return self.delivered
