"""Persistence errors.

Repositories translate SQLAlchemy exceptions into these, so callers outside
the persistence package never import sqlalchemy.exc.
"""


class PersistenceError(Exception):
    """Base exception for all database failures."""


class DatabaseConnectionError(PersistenceError):
    """The database could not be opened, or was used after close().

    Raised for an empty or unknown URL, an unwritable SQLite path, or a
    failed connectivity check at startup.
    """


class DataIntegrityError(PersistenceError):
    """A constraint was violated.

    The rate limiter raises this out of RateLimitRepository.create() when a
    concurrent request inserted the same sender first, and retries once.
    """
