"""Send-request pipeline: validation, orchestration and outcome models."""

from .models import (
    REASON_DELIVERY_FAILED,
    REASON_INVALID_JSON,
    REASON_MESSAGE_REJECTED,
    REASON_RATE_LIMITED,
    REASON_UNEXPECTED,
    ErrorCode,
    PipelineResult,
    PipelineStage,
)
from .runner import SendPipeline
from .validation import ValidationFailure, validate_send_request

__all__ = [
    "SendPipeline",
    "PipelineResult",
    "PipelineStage",
    "ErrorCode",
    "ValidationFailure",
    "validate_send_request",
    "REASON_RATE_LIMITED",
    "REASON_MESSAGE_REJECTED",
    "REASON_DELIVERY_FAILED",
    "REASON_UNEXPECTED",
    "REASON_INVALID_JSON",
]
