"""
User model for account identity.

Email and phone number are each unique across all accounts. An account is
created unverified and only becomes verified through the signup code flow.
"""

import uuid
from sqlalchemy import Column, String, Boolean, DateTime, func
from sqlalchemy.dialects.postgresql import UUID
from app.core.database import Base


class User(Base):
    """
    Account record.

    The password is stored only as a bcrypt hash. Token records reference
    the account by id and are removed with it.
    """
    __tablename__ = "users"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)

    # Identity (both unique)
    email = Column(String, unique=True, nullable=False, index=True)
    phone_number = Column(String, unique=True, nullable=False, index=True)

    # Authentication credentials
    hashed_password = Column(String, nullable=False)

    # User profile
    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False)
    profile_picture = Column(String, nullable=False, default="")

    # Account status - flipped only by a successful signup confirmation
    is_verified = Column(Boolean, default=False, nullable=False)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}', verified={self.is_verified})>"
