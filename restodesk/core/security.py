"""
Password Hashing

Users never keep a plaintext password: registration, tenant provisioning
and profile edits store a salted bcrypt hash, and login compares with
bcrypt.checkpw (constant-time).
"""

import logging
from typing import Optional

import bcrypt

from restodesk.core.config import get_settings

logger = logging.getLogger(__name__)


def hash_password(password: str, rounds: Optional[int] = None) -> str:
    """
    Hash a password with a fresh salt.

    Args:
        password: Plaintext password
        rounds: bcrypt cost factor (defaults to the configured value)

    Returns:
        str: bcrypt hash, safe to store
    """
    if rounds is None:
        rounds = get_settings().bcrypt_rounds
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, password_hash: Optional[str]) -> bool:
    """Check a plaintext password against a stored hash."""
    if not password or not password_hash:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        logger.warning("Refusing password check against a malformed hash")
        return False
