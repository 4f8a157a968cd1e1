"""Data models for request outcomes and the HTTP response contract."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from stillgrateful.domain.models import SendStatus

REASON_RATE_LIMITED = "You've sent too many messages today. Please try again tomorrow."
REASON_MESSAGE_REJECTED = "This message doesn't appear to be expressing gratitude."
REASON_DELIVERY_FAILED = "Failed to send email. Please try again later."
REASON_UNEXPECTED = "An unexpected error occurred. Please try again later."
REASON_INVALID_JSON = "Invalid JSON in request body."


class ErrorCode(str, Enum):
    """Machine-readable error codes returned to clients."""

    VALIDATION_ERROR = "validation_error"
    MESSAGE_REJECTED = "message_rejected"
    RATE_LIMITED = "rate_limited"
    SERVER_ERROR = "server_error"


ERROR_HTTP_STATUS: Dict[ErrorCode, int] = {
    ErrorCode.VALIDATION_ERROR: 400,
    ErrorCode.MESSAGE_REJECTED: 400,
    ErrorCode.RATE_LIMITED: 429,
    ErrorCode.SERVER_ERROR: 500,
}


class PipelineStage(str, Enum):
    """Furthest stage a request reached."""

    RECEIVED = "received"
    VALIDATED = "validated"
    RATE_CHECKED = "rate_checked"
    FILTERED = "filtered"
    DELIVERED = "delivered"
    LOGGED = "logged"
    RESPONDED = "responded"


@dataclass
class PipelineResult:
    """
    Terminal outcome of one send request.

    Attributes:
        success: Whether the email was delivered
        stage: Furthest stage reached before the outcome was decided
        error: Error code on failure
        reason: Human-readable reason on failure
        audit_status: Status written to the audit log, if any
        audit_written: Whether the audit write succeeded
    """

    success: bool
    stage: PipelineStage
    error: Optional[ErrorCode] = None
    reason: Optional[str] = None
    audit_status: Optional[SendStatus] = None
    audit_written: bool = False

    @classmethod
    def ok(cls, stage: PipelineStage = PipelineStage.RESPONDED) -> "PipelineResult":
        return cls(success=True, stage=stage, audit_status=SendStatus.SENT)

    @classmethod
    def failure(
        cls,
        error: ErrorCode,
        reason: str,
        stage: PipelineStage,
        audit_status: Optional[SendStatus] = None,
    ) -> "PipelineResult":
        return cls(
            success=False,
            stage=stage,
            error=error,
            reason=reason,
            audit_status=audit_status,
        )

    @property
    def http_status(self) -> int:
        """HTTP status code for this outcome."""
        if self.success:
            return 200
        return ERROR_HTTP_STATUS[self.error]

    def body(self) -> Dict[str, Any]:
        """JSON response body for this outcome."""
        if self.success:
            return {"success": True}
        return {"success": False, "error": self.error.value, "reason": self.reason}
