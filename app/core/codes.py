"""
One-time code generation and checking.

Codes are short numeric strings a person can type from an email. Only the
bcrypt hash of a code is ever persisted; the plaintext lives just long enough
to be hashed and handed to the email dispatcher.

Known weakness: the code space is 9000 values and nothing throttles guesses,
so a determined caller can brute-force an outstanding code before it expires.
"""

import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

from app.core.config import settings
from app.core.security import get_password_hash, verify_password


def generate_code() -> str:
    """
    Generate a numeric code drawn uniformly from [CODE_MIN, CODE_MAX].

    Uses the secrets module so codes cannot be predicted from earlier ones.
    Zero-padded to code_length() digits when CODE_MIN has fewer digits
    than CODE_MAX.

    Returns:
        str: e.g. "4821"
    """
    span = settings.CODE_MAX - settings.CODE_MIN + 1
    return str(settings.CODE_MIN + secrets.randbelow(span)).zfill(code_length())


def code_length() -> int:
    """Number of digits in every generated code."""
    return len(str(settings.CODE_MAX))


def hash_code(code: str) -> str:
    return get_password_hash(code)


def check_code(code: str, code_hash: str) -> bool:
    return verify_password(code, code_hash)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def expiry_from(now: Optional[datetime] = None) -> datetime:
    """Absolute expiry timestamp for a code issued at `now`."""
    issued_at = now or utcnow()
    return issued_at + timedelta(minutes=settings.TOKEN_EXPIRE_MINUTES)


def as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything we store is UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def is_expired(expires_at: datetime, now: Optional[datetime] = None) -> bool:
    """A code is expired strictly after its expiry instant."""
    return (now or utcnow()) > as_utc(expires_at)


def expiry_statement() -> str:
    """Human-readable lifetime used in outgoing emails."""
    minutes = settings.TOKEN_EXPIRE_MINUTES
    if minutes % 60 == 0:
        hours = minutes // 60
        return f"{hours} hour" if hours == 1 else f"{hours} hours"
    return f"{minutes} minutes"
