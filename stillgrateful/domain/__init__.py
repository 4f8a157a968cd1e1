"""Domain models for the Still Grateful API."""

from .models import (
    CONTEXT_TAG_DISPLAY_NAMES,
    AuditRecord,
    ContextTag,
    RateLimitRecord,
    SendRequest,
    SendStatus,
)

__all__ = [
    "SendRequest",
    "ContextTag",
    "CONTEXT_TAG_DISPLAY_NAMES",
    "SendStatus",
    "RateLimitRecord",
    "AuditRecord",
]
