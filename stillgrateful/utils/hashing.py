"""Hashing utilities for pseudonymous sender identifiers.

The sender token supplied by the client is never stored. Rate limiting and the
audit log key on its SHA-256 digest instead, and only the domain part of the
recipient address is ever recorded.
"""

import hashlib


def hash_string(value: str) -> str:
    """Compute SHA256 hash of a string value.

    Args:
        value: String to hash

    Returns:
        Hexadecimal string representation of SHA256 hash (64 characters)
    """
    hash_obj = hashlib.sha256(value.encode("utf-8"))
    return hash_obj.hexdigest()


def hash_sender_token(sender_token: str) -> str:
    """Derive the pseudonymous sender identifier from a sender token.

    Deterministic and one-way: the same token always yields the same 64
    character hex digest, and the token cannot be recovered from it. The
    token is hashed exactly as given (the validator has already trimmed it).

    Args:
        sender_token: Opaque client-generated token

    Returns:
        Hex SHA-256 digest used as rate-limit and audit key

    Example:
        >>> len(hash_sender_token("unique-anonymous-token-123"))
        64
    """
    return hash_string(sender_token)


def extract_recipient_domain(email: str) -> str:
    """Extract the lower-cased domain of an email address.

    Args:
        email: Recipient email address

    Returns:
        Everything after the first '@', lower-cased; empty string if the
        address contains no '@'

    Example:
        >>> extract_recipient_domain("Someone@Example.COM")
        'example.com'
    """
    parts = email.split("@")
    return parts[1].lower() if len(parts) > 1 else ""
