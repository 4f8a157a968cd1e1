"""Google Gemini generateContent adapter used as the message classifier."""

from __future__ import annotations

from typing import Any, Dict

from stillgrateful.logging import get_logger

from .base import BaseHTTPAdapter
from .exceptions import AdapterConfigurationError, AdapterResponseError

logger = get_logger(__name__, component="adapter")


class GeminiClassifierClient(BaseHTTPAdapter):
    """Sends one message to Gemini with a fixed system instruction.

    API Details:
        Endpoint: {api_base_url}/models/{model}:generateContent
        Method: POST
        Authentication: x-goog-api-key header
        Response: JSON object with 'candidates[0].content.parts[0].text'
    """

    ADAPTER_NAME = "gemini"

    def __init__(
        self,
        api_key: str,
        system_instruction: str,
        model: str = "gemini-2.0-flash",
        api_base_url: str = "https://generativelanguage.googleapis.com/v1beta",
        max_output_tokens: int = 10,
        temperature: float = 0.0,
        timeout: int = 30,
        user_agent: str = "StillGratefulAPI/0.1",
    ) -> None:
        super().__init__(timeout=timeout, user_agent=user_agent)

        if not api_key or not api_key.strip():
            raise AdapterConfigurationError("Gemini API key cannot be empty")

        self._api_key = api_key.strip()
        self.system_instruction = system_instruction
        self.model = model
        self.url = f"{api_base_url.rstrip('/')}/models/{model}:generateContent"
        self.max_output_tokens = max_output_tokens
        self.temperature = temperature

    def build_payload(self, message: str) -> Dict[str, Any]:
        """Build the generateContent request body for one message."""
        return {
            "systemInstruction": {"parts": [{"text": self.system_instruction}]},
            "contents": [
                {
                    "role": "user",
                    "parts": [{"text": f'Message to evaluate:\n"{message}"'}],
                }
            ],
            "generationConfig": {
                "maxOutputTokens": self.max_output_tokens,
                "temperature": self.temperature,
            },
        }

    def classify(self, message: str) -> str:
        """Ask the model for a verdict on a message.

        Args:
            message: Message text (sent to the provider, never logged)

        Returns:
            The model's reply, stripped of surrounding whitespace

        Raises:
            AdapterHTTPError: On HTTP error status or transport failure
            AdapterTimeoutError: On timeout
            AdapterResponseError: If the reply is missing or empty
        """
        response = self._make_request(
            self.url,
            headers={"x-goog-api-key": self._api_key},
            json_data=self.build_payload(message),
        )

        text = _extract_text(response)
        if not text:
            raise AdapterResponseError("Gemini response contained no text")

        logger.debug(
            "Classifier replied",
            extra={"event": "gemini.classify.completed", "model": self.model},
        )
        return text


def _extract_text(response: Dict[str, Any]) -> str:
    """Pull candidates[0].content.parts[0].text out of a response body."""
    try:
        text = response["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError) as e:
        raise AdapterResponseError(f"Unexpected Gemini response shape: {e!r}") from e

    if not isinstance(text, str):
        raise AdapterResponseError(
            f"Expected text to be a string, got {type(text).__name__}"
        )
    return text.strip()
