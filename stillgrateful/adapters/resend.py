"""Resend transactional-email adapter."""

from __future__ import annotations

from typing import Optional

from stillgrateful.logging import get_logger

from .base import BaseHTTPAdapter
from .exceptions import AdapterConfigurationError

logger = get_logger(__name__, component="adapter")


class ResendClient(BaseHTTPAdapter):
    """Submits a single email through the Resend API.

    API Details:
        Endpoint: https://api.resend.com/emails
        Method: POST
        Authentication: Bearer token
        Response: JSON object with the message 'id'
    """

    ADAPTER_NAME = "resend"

    def __init__(
        self,
        api_key: str,
        api_url: str = "https://api.resend.com/emails",
        timeout: int = 30,
        user_agent: str = "StillGratefulAPI/0.1",
    ) -> None:
        super().__init__(timeout=timeout, user_agent=user_agent)

        if not api_key or not api_key.strip():
            raise AdapterConfigurationError("Resend API key cannot be empty")

        self._api_key = api_key.strip()
        self.api_url = api_url

    def send_email(
        self,
        to: str,
        subject: str,
        text: str,
        html: str,
        from_address: str,
    ) -> Optional[str]:
        """Send one email.

        Args:
            to: Recipient address
            subject: Subject line
            text: Plain-text body
            html: HTML body
            from_address: From header

        Returns:
            Provider message id, or None if the response omitted it

        Raises:
            AdapterHTTPError: On HTTP error status or transport failure
            AdapterTimeoutError: On timeout
            AdapterResponseError: On an unparseable response
        """
        response = self._make_request(
            self.api_url,
            headers={"Authorization": f"Bearer {self._api_key}"},
            json_data={
                "from": from_address,
                "to": [to],
                "subject": subject,
                "text": text,
                "html": html,
            },
        )

        message_id = response.get("id")
        logger.info(
            "Email accepted by provider",
            extra={"event": "resend.send.accepted", "provider_message_id": message_id},
        )
        return message_id
