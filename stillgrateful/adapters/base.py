"""Shared HTTP plumbing for the classifier and email provider adapters.

Both providers take one JSON POST per call and answer with a JSON object.
Request bodies and auth headers are never logged; they carry the message
text and API keys.
"""

import logging
from typing import Any, Dict, Optional

import requests

from stillgrateful.logging import get_logger

from .exceptions import (
    AdapterConfigurationError,
    AdapterHTTPError,
    AdapterResponseError,
    AdapterTimeoutError,
)

logger = get_logger(__name__, component="adapter")

MIN_TIMEOUT_SECONDS = 5
MAX_TIMEOUT_SECONDS = 300

# Longest provider error description kept on AdapterHTTPError
MAX_ERROR_DETAIL_LENGTH = 200


class BaseHTTPAdapter:
    """requests.Session wrapper that maps every failure onto AdapterError.

    Attributes:
        timeout: HTTP request timeout in seconds
        user_agent: User-Agent header for HTTP requests
    """

    ADAPTER_NAME = "base"

    def __init__(self, timeout: int = 30, user_agent: str = "StillGratefulAPI/0.1") -> None:
        """
        Args:
            timeout: HTTP request timeout in seconds (5-300)
            user_agent: User-Agent header for requests

        Raises:
            AdapterConfigurationError: If timeout is outside valid range or user_agent is empty
        """
        if not MIN_TIMEOUT_SECONDS <= timeout <= MAX_TIMEOUT_SECONDS:
            raise AdapterConfigurationError(
                f"Timeout must be between {MIN_TIMEOUT_SECONDS} and "
                f"{MAX_TIMEOUT_SECONDS} seconds, got: {timeout}"
            )
        if not user_agent or not user_agent.strip():
            raise AdapterConfigurationError("user_agent cannot be empty")

        self.timeout = timeout
        self.user_agent = user_agent.strip()

        self._session = requests.Session()
        self._session.headers.update(
            {"User-Agent": self.user_agent, "Content-Type": "application/json"}
        )

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self._session.close()

    def _make_request(
        self,
        url: str,
        method: str = "POST",
        headers: Optional[Dict[str, str]] = None,
        json_data: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """Send one request and return the decoded JSON object.

        Args:
            url: URL to request (must not carry credentials)
            method: HTTP method
            headers: Extra headers merged over the session defaults
            json_data: JSON body

        Raises:
            AdapterHTTPError: On 4xx/5xx status, or transport failure (status_code 0)
            AdapterTimeoutError: On request timeout
            AdapterResponseError: On invalid JSON or a non-object body
        """
        logger.debug(
            f"{self.ADAPTER_NAME} {method} request",
            extra={
                "event": "adapter.request",
                "adapter": self.ADAPTER_NAME,
                "url": url,
                "timeout": self.timeout,
            },
        )

        response = self._send(url, method, headers, json_data)
        self._raise_for_status(response, url)
        data = self._decode(response, url)

        logger.debug(
            f"{self.ADAPTER_NAME} request succeeded",
            extra={
                "event": "adapter.request.succeeded",
                "adapter": self.ADAPTER_NAME,
                "status_code": response.status_code,
            },
        )
        return data

    def _send(
        self,
        url: str,
        method: str,
        headers: Optional[Dict[str, str]],
        json_data: Optional[Dict[str, Any]],
    ) -> requests.Response:
        try:
            return self._session.request(
                method=method,
                url=url,
                headers={**self._session.headers, **(headers or {})},
                json=json_data,
                timeout=self.timeout,
            )
        except requests.exceptions.Timeout as e:
            logger.warning(
                f"{self.ADAPTER_NAME} did not answer within {self.timeout} seconds",
                extra={
                    "event": "adapter.request.timeout",
                    "adapter": self.ADAPTER_NAME,
                    "url": url,
                },
            )
            raise AdapterTimeoutError(
                f"Request to {url} timed out after {self.timeout} seconds", url=url
            ) from e
        except requests.exceptions.RequestException as e:
            logger.error(
                f"{self.ADAPTER_NAME} unreachable: {type(e).__name__}",
                extra={
                    "event": "adapter.request.error",
                    "adapter": self.ADAPTER_NAME,
                    "error_type": type(e).__name__,
                    "url": url,
                },
            )
            raise AdapterHTTPError(
                f"Request to {url} failed: {type(e).__name__}", status_code=0, url=url
            ) from e

    def _raise_for_status(self, response: requests.Response, url: str) -> None:
        """Raise AdapterHTTPError for 4xx/5xx answers.

        Server errors are logged as warnings (provider trouble); client errors
        as errors, since they usually mean a bad key or request.
        """
        if response.status_code < 400:
            return

        logger.log(
            logging.WARNING if response.status_code >= 500 else logging.ERROR,
            f"{self.ADAPTER_NAME} answered HTTP {response.status_code}",
            extra={
                "event": "adapter.request.error",
                "adapter": self.ADAPTER_NAME,
                "status_code": response.status_code,
                "url": url,
            },
        )
        raise AdapterHTTPError(
            f"HTTP {response.status_code}: {response.reason}",
            status_code=response.status_code,
            url=url,
            detail=_error_detail(response),
        )

    def _decode(self, response: requests.Response, url: str) -> Dict[str, Any]:
        try:
            data = response.json()
        except ValueError as e:
            logger.error(
                f"{self.ADAPTER_NAME} returned a body that is not JSON",
                extra={"event": "adapter.response.invalid", "adapter": self.ADAPTER_NAME},
            )
            raise AdapterResponseError(f"Failed to parse JSON response from {url}: {e}") from e

        if not isinstance(data, dict):
            raise AdapterResponseError(
                f"Expected JSON object response, got {type(data).__name__}"
            )
        return data


def _error_detail(response: requests.Response) -> Optional[str]:
    """Best-effort provider error description from a failed response.

    Understands {"error": {"message": ...}} and {"message": ...} bodies.
    """
    try:
        body = response.json()
    except ValueError:
        return None
    if not isinstance(body, dict):
        return None

    error = body.get("error")
    if isinstance(error, dict):
        detail = error.get("message")
    else:
        detail = body.get("message") or error

    if not isinstance(detail, str) or not detail:
        return None
    return detail[:MAX_ERROR_DETAIL_LENGTH]
