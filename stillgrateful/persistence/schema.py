"""Database schema definition and ORM models.

Two tables:
- rate_limits: one fixed-window counter per hashed sender
- sends: append-only, content-free audit log of send attempts

Neither table has a column for the message body.
"""

import logging

from sqlalchemy import Column, Index, Integer, String, inspect
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base

from stillgrateful.domain.models import AuditRecord, RateLimitRecord
from stillgrateful.utils.timestamps import format_db_timestamp, parse_db_timestamp

logger = logging.getLogger(__name__)

Base = declarative_base()


class RateLimitModel(Base):
    """ORM model for the rate_limits table."""

    __tablename__ = "rate_limits"

    sender_hash = Column(String(64), primary_key=True, nullable=False)
    send_count = Column(Integer, nullable=False, default=0)
    # ISO 8601 string, see utils.timestamps
    window_start = Column(String(50), nullable=False)

    def to_domain(self) -> RateLimitRecord:
        """Convert ORM model to domain model."""
        return RateLimitRecord(
            sender_hash=self.sender_hash,
            send_count=self.send_count,
            window_start=parse_db_timestamp(self.window_start),
        )

    @classmethod
    def from_domain(cls, record: RateLimitRecord) -> "RateLimitModel":
        """Create ORM model from domain model."""
        return cls(
            sender_hash=record.sender_hash,
            send_count=record.send_count,
            window_start=format_db_timestamp(record.window_start),
        )


class SendLogModel(Base):
    """ORM model for the sends table (audit log)."""

    __tablename__ = "sends"

    id = Column(Integer, primary_key=True, autoincrement=True)
    sender_hash = Column(String(64), nullable=False)
    recipient_domain = Column(String(255), nullable=False)
    context_tag = Column(String(32), nullable=False)
    status = Column(String(16), nullable=False)
    created_at = Column(String(50), nullable=False)

    __table_args__ = (
        Index("idx_sends_sender_hash", "sender_hash"),
        Index("idx_sends_status", "status"),
    )

    def to_domain(self) -> AuditRecord:
        """Convert ORM model to domain model."""
        return AuditRecord(
            id=self.id,
            sender_hash=self.sender_hash,
            recipient_domain=self.recipient_domain,
            context_tag=self.context_tag,
            status=self.status,
            created_at=parse_db_timestamp(self.created_at),
        )

    @classmethod
    def from_domain(cls, record: AuditRecord) -> "SendLogModel":
        """Create ORM model from domain model. The id is assigned on insert."""
        return cls(
            sender_hash=record.sender_hash,
            recipient_domain=record.recipient_domain,
            context_tag=record.context_tag.value,
            status=record.status.value,
            created_at=format_db_timestamp(record.created_at),
        )


def create_schema(engine: Engine) -> None:
    """Create all tables and indexes if they don't exist (idempotent).

    Args:
        engine: SQLAlchemy engine instance
    """
    logger.info("Creating database schema if not exists")

    try:
        Base.metadata.create_all(engine, checkfirst=True)

        tables = inspect(engine).get_table_names()
        logger.info(f"Database schema ready. Tables: {', '.join(tables)}")

    except Exception as e:
        logger.error(f"Failed to create database schema: {e}", exc_info=True)
        raise
