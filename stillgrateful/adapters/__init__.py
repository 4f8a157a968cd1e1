"""HTTP adapters for the external classifier and email providers."""

from .base import BaseHTTPAdapter
from .exceptions import (
    AdapterConfigurationError,
    AdapterError,
    AdapterHTTPError,
    AdapterResponseError,
    AdapterTimeoutError,
)
from .gemini import GeminiClassifierClient
from .resend import ResendClient

__all__ = [
    "BaseHTTPAdapter",
    "GeminiClassifierClient",
    "ResendClient",
    "AdapterError",
    "AdapterHTTPError",
    "AdapterTimeoutError",
    "AdapterResponseError",
    "AdapterConfigurationError",
]
