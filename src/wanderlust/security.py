"""Password hashing helpers."""

import hashlib

import bcrypt


def _pre_hash_password(password: str) -> bytes:
    """Digest the password with SHA-256 so bcrypt never sees more than 72 bytes."""
    return hashlib.sha256(password.encode("utf-8")).digest()


def hash_password(password: str, rounds: int = 10) -> str:
    """Return a salted bcrypt hash of the password."""
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(_pre_hash_password(password), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Check a plaintext password against a stored hash."""
    try:
        return bcrypt.checkpw(
            _pre_hash_password(password), password_hash.encode("utf-8")
        )
    except ValueError:
        return False
