"""
Account token model for one-time codes.

One table serves all three purposes. The (user_id, purpose) unique constraint
guarantees at most one outstanding code per account and purpose; issuing a
new code replaces the old row.
"""

import enum
import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, String, DateTime, Enum, ForeignKey, Index, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from app.core.database import Base


class TokenPurpose(str, enum.Enum):
    """
    Which flow a token belongs to. Token spaces are independent per purpose.

    - SIGNUP: confirm the email address of a new account
    - PASSWORD_RESET: authorize setting a new password
    - EMAIL_CHANGE: prove control of a new email address
    """
    SIGNUP = "SIGNUP"
    PASSWORD_RESET = "PASSWORD_RESET"
    EMAIL_CHANGE = "EMAIL_CHANGE"


class AccountToken(Base):
    """
    Hashed, expiring one-time code tied to one account and one purpose.

    Features:
    - bcrypt hash only, never the plaintext code
    - absolute expiry checked when the code is submitted
    - deleted on successful use, on detected expiry, or when superseded
    - cascade delete with user
    """
    __tablename__ = "account_tokens"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    purpose = Column(Enum(TokenPurpose), nullable=False)

    # bcrypt hash of the code
    code_hash = Column(String(255), nullable=False)

    # Pending address (EMAIL_CHANGE only)
    new_email = Column(String, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    expires_at = Column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        UniqueConstraint('user_id', 'purpose', name='uq_account_tokens_user_purpose'),
        Index('ix_account_tokens_expires_at', 'expires_at'),
    )

    def __repr__(self):
        return f"<AccountToken(user_id={self.user_id}, purpose={self.purpose.value}, expires_at={self.expires_at})>"
