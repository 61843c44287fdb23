"""
Security Utilities.

Password hashing for user accounts. Passwords are never stored or
compared in plaintext.

bcrypt reads at most 72 bytes, so passwords are first reduced to a
fixed-length SHA-256 digest (base64, 44 bytes). Any password of any
length or encoding hashes without truncation.
"""

import base64
import hashlib

import bcrypt


def _prehash(password: str) -> bytes:
    digest = hashlib.sha256(password.encode("utf-8")).digest()
    return base64.b64encode(digest)


def hash_password(password: str) -> str:
    """Hash a password using bcrypt."""
    salt = bcrypt.gensalt()
    return bcrypt.hashpw(_prehash(password), salt).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    return bcrypt.checkpw(
        _prehash(plain_password),
        hashed_password.encode("utf-8"),
    )
