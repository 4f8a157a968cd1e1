"""Fixed-window rate limiting per hashed sender.

Each sender hash owns one row in rate_limits. A request is allowed when the
row is absent, its window has expired, or its count is below the cap. Every
allowed request increments the count; a denied request changes nothing.

The check and the increment happen in the same conditional UPDATE, so two
concurrent requests for the same sender cannot both pass the cap:

1. increment where window is current and count < cap
2. otherwise reset where window has expired
3. otherwise, if the row exists, deny
4. otherwise insert the first row; if a concurrent insert won, start over once
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Optional

from sqlalchemy.orm import Session

from stillgrateful.logging import get_logger
from stillgrateful.persistence.database import Database
from stillgrateful.persistence.exceptions import DataIntegrityError
from stillgrateful.persistence.repositories import RateLimitRepository
from stillgrateful.utils.timestamps import utc_now

logger = get_logger(__name__, component="ratelimit")

# One retry covers a lost race on the first insert
_MAX_ATTEMPTS = 2


@dataclass
class RateLimitDecision:
    """Outcome of a rate-limit check.

    Attributes:
        allowed: Whether the request may proceed
        send_count: Count in the current window after this request
        window_start: When the current window opened
    """

    allowed: bool
    send_count: int
    window_start: Optional[datetime]


class RateLimiter:
    """Fixed-window counter backed by the rate_limits table."""

    def __init__(
        self,
        database: Database,
        max_sends: int = 5,
        window_seconds: int = 24 * 3600,
        clock: Callable[[], datetime] = utc_now,
    ):
        """Initialize the rate limiter.

        Args:
            database: Database holding the rate_limits table
            max_sends: Sends allowed per window
            window_seconds: Window length in seconds
            clock: Returns the current UTC time (injectable for tests)
        """
        if max_sends < 1:
            raise ValueError(f"max_sends must be at least 1, got: {max_sends}")
        if window_seconds < 1:
            raise ValueError(f"window_seconds must be positive, got: {window_seconds}")

        self.database = database
        self.max_sends = max_sends
        self.window = timedelta(seconds=window_seconds)
        self.clock = clock

    def check_and_increment(self, sender_hash: str) -> RateLimitDecision:
        """Decide whether a sender may send, counting the send if so.

        Args:
            sender_hash: Hashed sender identifier

        Returns:
            RateLimitDecision

        Raises:
            PersistenceError: If the database cannot be read or written
        """
        for attempt in range(1, _MAX_ATTEMPTS + 1):
            try:
                with self.database.session() as session:
                    decision = self._check(session, sender_hash)
            except DataIntegrityError:
                if attempt == _MAX_ATTEMPTS:
                    raise
                logger.debug(
                    "Concurrent first insert for sender, retrying",
                    extra={"event": "ratelimit.insert_conflict", "attempt": attempt},
                )
                continue

            logger.info(
                "Rate limit allowed" if decision.allowed else "Rate limit exceeded",
                extra={
                    "event": "ratelimit.allowed" if decision.allowed else "ratelimit.denied",
                    "send_count": decision.send_count,
                    "max_sends": self.max_sends,
                },
            )
            return decision

        # Unreachable: the loop either returns or re-raises
        raise DataIntegrityError("Rate limit check did not complete")

    def _check(self, session: Session, sender_hash: str) -> RateLimitDecision:
        repo = RateLimitRepository(session)
        now = self.clock()
        cutoff = now - self.window

        if repo.increment_within_window(sender_hash, cutoff, self.max_sends):
            record = repo.get(sender_hash)
            return RateLimitDecision(True, record.send_count, record.window_start)

        if repo.reset_expired_window(sender_hash, cutoff, now):
            return RateLimitDecision(True, 1, now)

        record = repo.get(sender_hash)
        if record is not None:
            return RateLimitDecision(False, record.send_count, record.window_start)

        record = repo.create(sender_hash, now)
        return RateLimitDecision(True, record.send_count, record.window_start)
