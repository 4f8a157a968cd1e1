"""Utility functions for hashing and time handling."""

from .hashing import extract_recipient_domain, hash_sender_token, hash_string
from .timestamps import (
    ensure_utc,
    format_db_timestamp,
    parse_db_timestamp,
    utc_now,
)

__all__ = [
    # Hashing
    "hash_string",
    "hash_sender_token",
    "extract_recipient_domain",
    # Timestamps
    "utc_now",
    "ensure_utc",
    "format_db_timestamp",
    "parse_db_timestamp",
]
