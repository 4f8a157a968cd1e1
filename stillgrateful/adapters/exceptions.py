"""Exceptions raised by the classifier and email provider adapters."""

from typing import Optional


class AdapterError(Exception):
    """Base exception for all adapter errors.

    The content filter and the delivery service catch this to apply the fail
    policy or report a failed delivery.
    """


class AdapterHTTPError(AdapterError):
    """The provider answered with a 4xx/5xx status, or could not be reached.

    Attributes:
        status_code: HTTP status, or 0 when no response arrived (refused
            connection, DNS or TLS failure)
        url: Endpoint that failed (never contains credentials)
        detail: Provider's own error description, if the body had one
    """

    def __init__(
        self, message: str, status_code: int, url: str, detail: Optional[str] = None
    ) -> None:
        super().__init__(message if detail is None else f"{message} ({detail})")
        self.status_code = status_code
        self.url = url
        self.detail = detail


class AdapterTimeoutError(AdapterError):
    """The provider did not answer within the configured timeout."""

    def __init__(self, message: str, url: str) -> None:
        super().__init__(message)
        self.url = url


class AdapterResponseError(AdapterError):
    """A response arrived but was not JSON or lacked the expected fields."""


class AdapterConfigurationError(AdapterError):
    """An adapter was built with unusable settings (missing key, bad timeout)."""
