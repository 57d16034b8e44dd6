"""Identifier and journal-text hashing for logs.

Student identifiers and journal text never appear raw in application logs.
Services log a salted hash of the student id and an unsalted fingerprint
of any free text they handle.
"""
import hashlib
import logging
from typing import Optional

logger = logging.getLogger(__name__)

MIN_SALT_LENGTH = 32

# Set once at service startup from PII_HASH_SALT
_PII_SALT: Optional[str] = None


def configure_pii_salt(salt: str) -> None:
    """Configure the salt used by hash_pii().

    Args:
        salt: Secret salt, at least MIN_SALT_LENGTH characters

    Raises:
        ValueError: If salt is empty or too short
    """
    global _PII_SALT
    if not salt or len(salt) < MIN_SALT_LENGTH:
        logger.critical(
            "PII_SALT_CONFIGURATION_FAILED",
            extra={"reason": "Salt too short or empty", "min_length": MIN_SALT_LENGTH}
        )
        raise ValueError(f"PII salt must be at least {MIN_SALT_LENGTH} characters")

    _PII_SALT = salt
    logger.info("PII_SALT_CONFIGURED", extra={"salt_length": len(salt)})


def hash_pii(value: Optional[str]) -> str:
    """Hash a student identifier for logging.

    Args:
        value: Student id (or email). None hashes to "anonymous" so entries
            without an owner can still be logged.

    Returns:
        64-char hex SHA-256 of salt + value

    Raises:
        RuntimeError: If configure_pii_salt() has not been called
    """
    if value is None:
        return "anonymous"

    if _PII_SALT is None:
        logger.critical(
            "PII_HASH_FAILED",
            extra={"reason": "Salt not configured", "action": "call configure_pii_salt()"}
        )
        raise RuntimeError("PII salt not configured. Call configure_pii_salt() first.")

    return hashlib.sha256(f"{_PII_SALT}{value}".encode()).hexdigest()


def hash_text_for_audit(text: str) -> str:
    """Fingerprint journal text so log lines can be correlated with the entry."""
    return hashlib.sha256(text.encode()).hexdigest()
