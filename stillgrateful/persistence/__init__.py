"""Persistence layer for rate-limit counters and the audit log.

Public API:
    - Database: engine, session factory and schema bootstrap
    - RateLimitRepository: conditional updates on rate_limits
    - SendLogRepository: appends to the sends audit log
    - PersistenceError, DatabaseConnectionError, DataIntegrityError

Example usage:
    >>> from stillgrateful.persistence import Database, SendLogRepository
    >>> database = Database("sqlite:///./data/stillgrateful.db")
    >>> with database.session() as session:
    ...     SendLogRepository(session).count_by_status("sent")
"""

from .database import Database, redact_url
from .exceptions import DatabaseConnectionError, DataIntegrityError, PersistenceError
from .repositories import RateLimitRepository, SendLogRepository

__all__ = [
    # Database
    "Database",
    "redact_url",
    # Repositories
    "RateLimitRepository",
    "SendLogRepository",
    # Exceptions
    "PersistenceError",
    "DatabaseConnectionError",
    "DataIntegrityError",
]
