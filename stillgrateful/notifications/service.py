"""Delivery service for gratitude emails.

Renders the templates for a validated request and hands the result to the
email provider in a single attempt. Failures are reported in the returned
DeliveryResult rather than raised.
"""

import logging
from typing import Optional

from stillgrateful.adapters.exceptions import AdapterError
from stillgrateful.adapters.resend import ResendClient
from stillgrateful.config.models import DeliveryConfig
from stillgrateful.domain.models import SendRequest
from stillgrateful.logging import get_logger
from stillgrateful.utils.hashing import extract_recipient_domain

from .models import DeliveryError, DeliveryResult, NotificationTemplateError
from .payloads import build_notification_context
from .templates import RenderedEmail, TemplateRenderer

logger = get_logger(__name__, component="notification")


class DeliveryService:
    """Renders and sends one gratitude email per request.

    No retries: a failed provider call is final for the request.
    """

    def __init__(
        self,
        client: ResendClient,
        delivery_config: Optional[DeliveryConfig] = None,
        template_renderer: Optional[TemplateRenderer] = None,
        logger_instance: Optional[logging.Logger] = None,
    ):
        """Initialize delivery service.

        Args:
            client: Email provider client
            delivery_config: From address, subject and site link (defaults if None)
            template_renderer: Template renderer instance (creates default if None)
            logger_instance: Logger instance (uses module logger if None)
        """
        self.client = client
        self.delivery_config = delivery_config or DeliveryConfig()
        self.template_renderer = template_renderer or TemplateRenderer()
        self.logger = logger_instance or logger

    def deliver(self, request: SendRequest) -> DeliveryResult:
        """Render and submit the email for a request.

        Args:
            request: Validated send request

        Returns:
            DeliveryResult with delivered=False on template or provider failure
        """
        recipient_domain = extract_recipient_domain(request.recipient_email)

        try:
            rendered = self.template_renderer.render(
                build_notification_context(
                    request,
                    subject=self.delivery_config.subject,
                    site_url=self.delivery_config.site_url,
                )
            )
        except NotificationTemplateError as e:
            self.logger.error(
                "Failed to render gratitude email",
                extra={"event": "delivery.template_failed", "error": str(e)},
            )
            return DeliveryResult(delivered=False, error=str(e))

        try:
            message_id = self._send(request.recipient_email, rendered)
        except DeliveryError as e:
            self.logger.error(
                "Gratitude email was not accepted by provider",
                extra={
                    "event": "delivery.failed",
                    "recipient_domain": recipient_domain,
                    "error": str(e),
                },
            )
            return DeliveryResult(delivered=False, error=str(e))

        self.logger.info(
            "Gratitude email delivered",
            extra={
                "event": "delivery.sent",
                "recipient_domain": recipient_domain,
                "context_tag": request.context_tag.value,
                "provider_message_id": message_id,
            },
        )
        return DeliveryResult(delivered=True, provider_message_id=message_id)

    def _send(self, recipient: str, rendered: RenderedEmail) -> Optional[str]:
        """Submit a rendered email, translating adapter errors.

        Raises:
            DeliveryError: If the provider call fails for any reason
        """
        try:
            return self.client.send_email(
                to=recipient,
                subject=rendered.subject,
                text=rendered.text_body,
                html=rendered.html_body,
                from_address=self.delivery_config.from_address,
            )
        except AdapterError as e:
            raise DeliveryError(f"{type(e).__name__}: {e}") from e
