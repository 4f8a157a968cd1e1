"""Data access layer (repositories) for persistence operations.

Repositories wrap a session supplied by the caller, return domain models
rather than ORM models, and translate SQLAlchemy errors into
PersistenceError subclasses. They never commit; Database.session() does.
"""

import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from stillgrateful.domain.models import AuditRecord, RateLimitRecord, SendStatus
from stillgrateful.utils.timestamps import format_db_timestamp

from .exceptions import DataIntegrityError, PersistenceError
from .schema import RateLimitModel, SendLogModel

logger = logging.getLogger(__name__)


class RateLimitRepository:
    """Repository for per-sender rate-limit counters.

    The mutating methods are single conditional statements so that two
    requests racing on the same sender cannot both slip past the cap.
    """

    def __init__(self, session: Session):
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy session for database operations
        """
        self.session = session

    def get(self, sender_hash: str) -> Optional[RateLimitRecord]:
        """Retrieve the counter for a sender.

        Args:
            sender_hash: Hashed sender identifier

        Returns:
            RateLimitRecord if found, None otherwise

        Raises:
            PersistenceError: If database error occurs
        """
        try:
            model = self.session.get(RateLimitModel, sender_hash)
            return model.to_domain() if model is not None else None
        except SQLAlchemyError as e:
            logger.error(f"Error retrieving rate limit record: {e}", exc_info=True)
            raise PersistenceError(f"Failed to retrieve rate limit record: {e}") from e

    def increment_within_window(
        self, sender_hash: str, window_cutoff: datetime, max_sends: int
    ) -> bool:
        """Increment the counter if the window is still open and below the cap.

        Equivalent to:
            UPDATE rate_limits SET send_count = send_count + 1
            WHERE sender_hash = ? AND window_start >= ? AND send_count < ?

        Args:
            sender_hash: Hashed sender identifier
            window_cutoff: Windows that started before this instant have expired
            max_sends: Cap for the window

        Returns:
            True if a row was updated

        Raises:
            PersistenceError: If database error occurs
        """
        try:
            stmt = (
                update(RateLimitModel)
                .where(
                    RateLimitModel.sender_hash == sender_hash,
                    RateLimitModel.window_start >= format_db_timestamp(window_cutoff),
                    RateLimitModel.send_count < max_sends,
                )
                .values(send_count=RateLimitModel.send_count + 1)
                .execution_options(synchronize_session=False)
            )
            result = self.session.execute(stmt)
            self.session.flush()
            return result.rowcount == 1
        except SQLAlchemyError as e:
            logger.error(f"Error incrementing rate limit counter: {e}", exc_info=True)
            raise PersistenceError(f"Failed to increment rate limit counter: {e}") from e

    def reset_expired_window(
        self, sender_hash: str, window_cutoff: datetime, now: datetime
    ) -> bool:
        """Start a new window (count=1) if the current one has expired.

        Equivalent to:
            UPDATE rate_limits SET send_count = 1, window_start = ?
            WHERE sender_hash = ? AND window_start < ?

        Args:
            sender_hash: Hashed sender identifier
            window_cutoff: Windows that started before this instant have expired
            now: Start of the new window

        Returns:
            True if a row was reset

        Raises:
            PersistenceError: If database error occurs
        """
        try:
            stmt = (
                update(RateLimitModel)
                .where(
                    RateLimitModel.sender_hash == sender_hash,
                    RateLimitModel.window_start < format_db_timestamp(window_cutoff),
                )
                .values(send_count=1, window_start=format_db_timestamp(now))
                .execution_options(synchronize_session=False)
            )
            result = self.session.execute(stmt)
            self.session.flush()
            return result.rowcount == 1
        except SQLAlchemyError as e:
            logger.error(f"Error resetting rate limit window: {e}", exc_info=True)
            raise PersistenceError(f"Failed to reset rate limit window: {e}") from e

    def create(self, sender_hash: str, now: datetime) -> RateLimitRecord:
        """Insert the first counter for a sender (count=1).

        Args:
            sender_hash: Hashed sender identifier
            now: Start of the window

        Returns:
            Persisted RateLimitRecord

        Raises:
            DataIntegrityError: If a concurrent request created the row first
            PersistenceError: If database error occurs
        """
        try:
            model = RateLimitModel.from_domain(
                RateLimitRecord(sender_hash=sender_hash, send_count=1, window_start=now)
            )
            self.session.add(model)
            self.session.flush()
            return model.to_domain()
        except IntegrityError as e:
            logger.debug("Rate limit record already exists (concurrent insert)")
            raise DataIntegrityError(f"Rate limit record already exists: {e}") from e
        except SQLAlchemyError as e:
            logger.error(f"Error creating rate limit record: {e}", exc_info=True)
            raise PersistenceError(f"Failed to create rate limit record: {e}") from e


class SendLogRepository:
    """Repository for the append-only sends audit log."""

    def __init__(self, session: Session):
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy session for database operations
        """
        self.session = session

    def append(self, record: AuditRecord) -> AuditRecord:
        """Insert one audit record.

        Args:
            record: AuditRecord to persist (id is ignored)

        Returns:
            Persisted AuditRecord with its id

        Raises:
            PersistenceError: If database error occurs
        """
        try:
            model = SendLogModel.from_domain(record)
            self.session.add(model)
            self.session.flush()
            return model.to_domain()
        except SQLAlchemyError as e:
            logger.error(f"Error appending audit record: {e}", exc_info=True)
            raise PersistenceError(f"Failed to append audit record: {e}") from e

    def get_for_sender(self, sender_hash: str) -> List[AuditRecord]:
        """Retrieve a sender's audit records, oldest first.

        Args:
            sender_hash: Hashed sender identifier

        Returns:
            List of AuditRecord domain models (empty list if none found)

        Raises:
            PersistenceError: If database error occurs
        """
        try:
            stmt = (
                select(SendLogModel)
                .where(SendLogModel.sender_hash == sender_hash)
                .order_by(SendLogModel.id.asc())
            )
            return [model.to_domain() for model in self.session.execute(stmt).scalars().all()]
        except SQLAlchemyError as e:
            logger.error(f"Error retrieving audit records: {e}", exc_info=True)
            raise PersistenceError(f"Failed to retrieve audit records: {e}") from e

    def count_by_status(self, status: Optional[SendStatus] = None) -> int:
        """Count audit records, optionally filtered by status.

        Args:
            status: Only count records with this status

        Returns:
            Number of matching records

        Raises:
            PersistenceError: If database error occurs
        """
        try:
            stmt = select(func.count()).select_from(SendLogModel)
            if status is not None:
                stmt = stmt.where(SendLogModel.status == SendStatus(status).value)
            return self.session.execute(stmt).scalar_one()
        except SQLAlchemyError as e:
            logger.error(f"Error counting audit records: {e}", exc_info=True)
            raise PersistenceError(f"Failed to count audit records: {e}") from e
