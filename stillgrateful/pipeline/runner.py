"""Orchestration of a single send request.

received -> validated -> rate_checked -> filtered -> delivered -> logged -> responded

Every request ends in exactly one outcome. Requests that pass validation get
exactly one audit record, whatever happens afterwards.
"""

from typing import Any, Optional

from stillgrateful.audit import AuditLogger
from stillgrateful.domain.models import SendStatus
from stillgrateful.filtering import ContentFilter
from stillgrateful.logging import get_logger
from stillgrateful.logging.context import log_context, request_context
from stillgrateful.notifications.service import DeliveryService
from stillgrateful.ratelimit import RateLimiter
from stillgrateful.utils.hashing import extract_recipient_domain, hash_sender_token

from .models import (
    REASON_DELIVERY_FAILED,
    REASON_MESSAGE_REJECTED,
    REASON_RATE_LIMITED,
    REASON_UNEXPECTED,
    ErrorCode,
    PipelineResult,
    PipelineStage,
)
from .validation import DEFAULT_MAX_MESSAGE_LENGTH, ValidationFailure, validate_send_request

logger = get_logger(__name__, component="pipeline")

# Prefix of the sender hash attached to log records
SENDER_HASH_LOG_LENGTH = 12


class SendPipeline:
    """
    Runs validation, rate limiting, content filtering, delivery and audit
    logging for one request.

    Collaborators are injected so tests can replace any of them.
    """

    def __init__(
        self,
        rate_limiter: RateLimiter,
        content_filter: ContentFilter,
        delivery_service: DeliveryService,
        audit_logger: AuditLogger,
        max_message_length: int = DEFAULT_MAX_MESSAGE_LENGTH,
    ):
        """
        Initialize the send pipeline.

        Args:
            rate_limiter: Per-sender fixed-window limiter
            content_filter: Classifier-backed content screen
            delivery_service: Email rendering and submission
            audit_logger: Best-effort audit writer
            max_message_length: Maximum message length in characters
        """
        self.rate_limiter = rate_limiter
        self.content_filter = content_filter
        self.delivery_service = delivery_service
        self.audit_logger = audit_logger
        self.max_message_length = max_message_length

    def process(self, payload: Any, request_id: Optional[str] = None) -> PipelineResult:
        """
        Process one decoded request body.

        The result's stage is the last stage completed before the outcome was
        decided; a successful request ends at "responded".

        Args:
            payload: Decoded JSON body (any JSON value)
            request_id: Identifier for log correlation (generated if None)

        Returns:
            PipelineResult describing the outcome and HTTP response
        """
        with request_context(request_id):
            logger.info("Send request received", extra={"event": "send.received"})

            try:
                request = validate_send_request(payload, self.max_message_length)
            except ValidationFailure as e:
                logger.info(
                    "Send request failed validation",
                    extra={"event": "send.validation_failed", "reason": e.reason},
                )
                return PipelineResult.failure(
                    ErrorCode.VALIDATION_ERROR, e.reason, PipelineStage.RECEIVED
                )

            sender_hash = hash_sender_token(request.sender_token)
            recipient_domain = extract_recipient_domain(request.recipient_email)

            with log_context(sender_hash=sender_hash[:SENDER_HASH_LOG_LENGTH]):
                result = self._run_checks_and_deliver(request, sender_hash)

                result.audit_written = self.audit_logger.record(
                    sender_hash,
                    recipient_domain,
                    request.context_tag,
                    result.audit_status,
                )
                if result.success:
                    result.stage = PipelineStage.RESPONDED

                logger.info(
                    "Send request completed",
                    extra={
                        "event": "send.completed",
                        "status": result.audit_status.value,
                        "http_status": result.http_status,
                        "stage": result.stage.value,
                        "context_tag": request.context_tag.value,
                        "recipient_domain": recipient_domain,
                    },
                )
                return result

    def _run_checks_and_deliver(self, request, sender_hash: str) -> PipelineResult:
        """Rate limit, filter and deliver; returns the outcome to audit.

        Unexpected exceptions become a server error result at the last stage
        that completed.
        """
        stage = PipelineStage.VALIDATED
        try:
            decision = self.rate_limiter.check_and_increment(sender_hash)
            if not decision.allowed:
                return PipelineResult.failure(
                    ErrorCode.RATE_LIMITED,
                    REASON_RATE_LIMITED,
                    PipelineStage.RATE_CHECKED,
                    audit_status=SendStatus.REJECTED,
                )
            stage = PipelineStage.RATE_CHECKED

            screening = self.content_filter.check(request.message)
            if not screening.allowed:
                return PipelineResult.failure(
                    ErrorCode.MESSAGE_REJECTED,
                    REASON_MESSAGE_REJECTED,
                    PipelineStage.FILTERED,
                    audit_status=SendStatus.REJECTED,
                )
            stage = PipelineStage.FILTERED

            delivery = self.delivery_service.deliver(request)
            if not delivery.delivered:
                return PipelineResult.failure(
                    ErrorCode.SERVER_ERROR,
                    REASON_DELIVERY_FAILED,
                    PipelineStage.FILTERED,
                    audit_status=SendStatus.ERROR,
                )

            return PipelineResult.ok(stage=PipelineStage.DELIVERED)
        except Exception as e:
            logger.error(
                f"Unexpected error while processing send request: {type(e).__name__}",
                exc_info=True,
                extra={
                    "event": "send.unexpected_error",
                    "error_type": type(e).__name__,
                    "stage": stage.value,
                },
            )
            return PipelineResult.failure(
                ErrorCode.SERVER_ERROR,
                REASON_UNEXPECTED,
                stage,
                audit_status=SendStatus.ERROR,
            )
