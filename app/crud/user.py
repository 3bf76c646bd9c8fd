"""
CRUD operations for User model.

The account store the token flows delegate to. Functions that change a row
take a `commit` flag so a flow can stage several changes and commit them as
one transaction.
"""

import uuid
from typing import Any, Dict, Optional
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import ConflictError
from app.models.user import User


def get_by_id(db: Session, user_id: uuid.UUID) -> Optional[User]:
    return db.query(User).filter(User.id == user_id).first()


def get_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == email).first()


def get_by_email_or_phone(db: Session, email: str, phone_number: str) -> Optional[User]:
    """
    Find any account holding either the email or the phone number.

    Used before signup to report the uniqueness conflict up front.
    """
    return db.query(User).filter(
        or_(User.email == email, User.phone_number == phone_number)
    ).first()


def email_in_use(db: Session, email: str, exclude_user_id: Optional[uuid.UUID] = None) -> bool:
    query = db.query(User.id).filter(User.email == email)
    if exclude_user_id is not None:
        query = query.filter(User.id != exclude_user_id)
    return query.first() is not None


def create(db: Session, fields: Dict[str, Any]) -> User:
    """
    Create a new unverified account.

    Args:
        db: Database session
        fields: Column values (hashed_password already hashed)

    Returns:
        Created User instance with id

    Raises:
        ConflictError: email or phone number taken (including a concurrent insert)
    """
    user = User(id=uuid.uuid4(), is_verified=False, **fields)
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError()
    db.refresh(user)
    return user


def update_fields(db: Session, user: User, partial: Dict[str, Any], commit: bool = True) -> User:
    """Apply a partial update to an account."""
    for field, value in partial.items():
        setattr(user, field, value)
    if commit:
        db.commit()
        db.refresh(user)
    return user


def delete(db: Session, user: User, commit: bool = True) -> None:
    db.delete(user)
    if commit:
        db.commit()
