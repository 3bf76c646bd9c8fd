"""
Credential hashing utilities.

Login passwords and one-time codes share one bcrypt context so that every
secret at rest carries the same work factor.
"""

from passlib.context import CryptContext
from app.core.config import settings

# Password hashing context (bcrypt), cost fixed by settings
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_ROUNDS,
)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plain secret against a stored bcrypt hash (constant-time)."""
    # Bcrypt has a 72-byte limit - truncate if necessary
    password_bytes = plain_password.encode('utf-8')[:72]
    return pwd_context.verify(password_bytes, hashed_password)


def get_password_hash(password: str) -> str:
    """
    Hash a secret using bcrypt.

    Note: Bcrypt has a 72-byte limit. Secrets longer than 72 bytes
    are automatically truncated to comply with this limitation.
    """
    # Bcrypt has a 72-byte limit - truncate if necessary
    password_bytes = password.encode('utf-8')[:72]
    return pwd_context.hash(password_bytes)
