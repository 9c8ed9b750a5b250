"""Password hashing helpers."""

import bcrypt

from ..config import get_config


def hash_password(plain_password: str) -> str:
    """Hash a password with bcrypt using the configured cost factor."""
    rounds = get_config().security.bcrypt_rounds
    return bcrypt.hashpw(
        plain_password.encode("utf-8"), bcrypt.gensalt(rounds=rounds)
    ).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    try:
        return bcrypt.checkpw(
            plain_password.encode("utf-8"), hashed_password.encode("utf-8")
        )
    except ValueError:
        # Stored value is not a bcrypt hash
        return False
