"""Password hashing for admin credentials (bcrypt)."""

import logging

import bcrypt

logger = logging.getLogger(__name__)

SALT_ROUNDS = 10
BCRYPT_PREFIXES = ("$2a$", "$2b$", "$2y$")


def is_bcrypt_hash(value: str) -> bool:
    return bool(value) and value.startswith(BCRYPT_PREFIXES)


def hash_password(password: str) -> str:
    salt = bcrypt.gensalt(rounds=SALT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    """Check ``password`` against a bcrypt hash; anything else never matches."""
    if not is_bcrypt_hash(hashed):
        logger.warning("Rejected login against a non-bcrypt password hash.")
        return False
    return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
