"""Core domain models for send requests, rate limits and audit records.

- SendRequest: a validated, normalised request (transient, never persisted)
- ContextTag: the fixed set of sender/recipient relationships
- SendStatus: terminal outcome recorded in the audit log
- RateLimitRecord: per-sender fixed-window counter
- AuditRecord: content-free record of one send attempt
"""

from datetime import datetime
from enum import Enum
from typing import Dict, Optional

from pydantic import BaseModel, Field, field_validator

from stillgrateful.utils.timestamps import ensure_utc


class ContextTag(str, Enum):
    """Relationship of the sender to the recipient."""

    FORMER_STUDENT = "former-student"
    FORMER_TEACHER = "former-teacher"
    OLD_FRIEND = "old-friend"
    FORMER_COLLEAGUE = "former-colleague"
    FORMER_TEAMMATE = "former-teammate"
    FAMILY_MEMBER = "family-member"
    MENTOR = "mentor"
    OTHER = "other"

    @classmethod
    def values(cls) -> list[str]:
        """All tag values in declaration order."""
        return [tag.value for tag in cls]

    @property
    def display_name(self) -> str:
        """Phrase shown to the recipient in the email."""
        return CONTEXT_TAG_DISPLAY_NAMES[self]


CONTEXT_TAG_DISPLAY_NAMES: Dict[ContextTag, str] = {
    ContextTag.FORMER_STUDENT: "A former student",
    ContextTag.FORMER_TEACHER: "A former teacher",
    ContextTag.OLD_FRIEND: "An old friend",
    ContextTag.FORMER_COLLEAGUE: "A former colleague",
    ContextTag.FORMER_TEAMMATE: "A former teammate",
    ContextTag.FAMILY_MEMBER: "A family member",
    ContextTag.MENTOR: "A mentor",
    ContextTag.OTHER: "Someone from your past",
}


class SendStatus(str, Enum):
    """Terminal status of a send attempt, as written to the audit log."""

    SENT = "sent"
    REJECTED = "rejected"
    ERROR = "error"


class SendRequest(BaseModel):
    """A validated gratitude message request.

    Lives only for the duration of one request. The message text must never
    be written to the database or to logs.
    """

    message: str = Field(..., min_length=1, description="Gratitude message text")
    recipient_email: str = Field(..., min_length=3, description="Lower-cased recipient address")
    context_tag: ContextTag = Field(..., description="Relationship tag")
    sender_token: str = Field(..., min_length=1, description="Opaque client-generated token")

    def __repr__(self) -> str:
        # Never expose the message body or token in reprs or tracebacks
        return f"SendRequest(context_tag={self.context_tag.value!r}, message_length={len(self.message)})"

    __str__ = __repr__


class RateLimitRecord(BaseModel):
    """Fixed-window send counter for one hashed sender identifier."""

    sender_hash: str = Field(..., min_length=64, max_length=64)
    send_count: int = Field(..., ge=0)
    window_start: datetime = Field(..., description="When the current window opened (UTC)")

    @field_validator("window_start")
    @classmethod
    def window_start_utc(cls, v: datetime) -> datetime:
        """Ensure datetime is timezone-aware and in UTC."""
        return ensure_utc(v)


class AuditRecord(BaseModel):
    """Content-free outcome of one send attempt.

    Holds only the hashed sender, the recipient's domain, the tag and the
    status. Append-only.
    """

    id: Optional[int] = Field(None, description="Database row id once persisted")
    sender_hash: str = Field(..., min_length=64, max_length=64)
    recipient_domain: str = Field(..., description="Domain part of the recipient address")
    context_tag: ContextTag
    status: SendStatus
    created_at: datetime

    @field_validator("created_at")
    @classmethod
    def created_at_utc(cls, v: datetime) -> datetime:
        """Ensure datetime is timezone-aware and in UTC."""
        return ensure_utc(v)
