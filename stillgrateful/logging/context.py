"""Per-request fields for structured logging.

Fields bound here (request_id, sender_hash prefix) are injected into every log
record emitted inside the scope by ContextualFilter. Backed by contextvars, so
each request handled in a worker thread keeps its own fields.
"""

from contextlib import contextmanager
from contextvars import ContextVar, Token
from typing import Any, Dict, Iterator, Optional
from uuid import uuid4

LogContextVar: ContextVar[Dict[str, Any]] = ContextVar("log_context", default={})

REQUEST_ID_LENGTH = 16


def get_log_context() -> Dict[str, Any]:
    """Get a copy of the current logging context."""
    return LogContextVar.get().copy()


def push_log_context(**kwargs) -> Token:
    """Merge new fields into the logging context.

    Returns:
        Token that restores the previous fields via pop_log_context()
    """
    return LogContextVar.set({**LogContextVar.get(), **kwargs})


def pop_log_context(token: Token) -> None:
    LogContextVar.reset(token)


def clear_log_context() -> None:
    """Drop all fields (used by tests)."""
    LogContextVar.set({})


@contextmanager
def log_context(**fields) -> Iterator[None]:
    """Bind fields for the duration of a with-block.

    Example:
        >>> with log_context(sender_hash="3f9a1c0b2d4e"):
        ...     logger.info("Send allowed")  # includes sender_hash
    """
    token = push_log_context(**fields)
    try:
        yield
    finally:
        pop_log_context(token)


def new_request_id() -> str:
    """Short random identifier used to correlate the log lines of one request."""
    return uuid4().hex[:REQUEST_ID_LENGTH]


@contextmanager
def request_context(request_id: Optional[str] = None) -> Iterator[str]:
    """Bind a request id for one send request, generating one if needed.

    Yields:
        The request id in effect
    """
    request_id = request_id or new_request_id()
    with log_context(request_id=request_id):
        yield request_id
