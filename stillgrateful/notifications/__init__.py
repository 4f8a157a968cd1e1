"""Gratitude email rendering and delivery.

- DeliveryService: renders templates and submits one email per request
- DeliveryResult: outcome of a delivery attempt
- TemplateRenderer: Jinja2-based email template rendering
- build_notification_context: template context for a send request
"""

from .models import (
    DeliveryError,
    DeliveryResult,
    NotificationError,
    NotificationTemplateError,
)
from .payloads import build_notification_context
from .service import DeliveryService
from .templates import RenderedEmail, TemplateRenderer

__all__ = [
    # Main service
    "DeliveryService",
    # Models and results
    "DeliveryResult",
    "RenderedEmail",
    # Exceptions
    "NotificationError",
    "NotificationTemplateError",
    "DeliveryError",
    # Components
    "TemplateRenderer",
    "build_notification_context",
]
