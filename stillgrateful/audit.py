"""Best-effort audit log of send outcomes.

One row per terminal outcome in the sends table. A failed write is logged and
never changes the response the sender receives.
"""

from datetime import datetime
from typing import Callable

from stillgrateful.domain.models import AuditRecord, ContextTag, SendStatus
from stillgrateful.logging import get_logger
from stillgrateful.persistence.database import Database
from stillgrateful.persistence.repositories import SendLogRepository
from stillgrateful.utils.timestamps import utc_now

logger = get_logger(__name__, component="audit")


class AuditLogger:
    """Appends content-free records to the sends table."""

    def __init__(self, database: Database, clock: Callable[[], datetime] = utc_now):
        self.database = database
        self.clock = clock

    def record(
        self,
        sender_hash: str,
        recipient_domain: str,
        context_tag: ContextTag,
        status: SendStatus,
    ) -> bool:
        """Append one audit record.

        Args:
            sender_hash: Hashed sender identifier
            recipient_domain: Domain part of the recipient address
            context_tag: Relationship tag
            status: Terminal outcome

        Returns:
            True if the record was written, False if the write failed
        """
        try:
            record = AuditRecord(
                sender_hash=sender_hash,
                recipient_domain=recipient_domain,
                context_tag=context_tag,
                status=status,
                created_at=self.clock(),
            )
            with self.database.session() as session:
                SendLogRepository(session).append(record)
        except Exception as e:
            logger.error(
                f"Failed to write audit record: {e}",
                extra={
                    "event": "audit.write_failed",
                    "status": getattr(status, "value", status),
                    "error_type": type(e).__name__,
                },
            )
            return False

        logger.debug(
            "Audit record written",
            extra={"event": "audit.recorded", "status": getattr(status, "value", status)},
        )
        return True
