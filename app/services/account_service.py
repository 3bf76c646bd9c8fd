"""
Account signup and sign-in.

Signup creates an unverified account and hands it straight to the
verification flow. Sign-in only checks credentials; no session is issued.
"""

import logging
import uuid
from typing import Any, Dict
from sqlalchemy.orm import Session

from app.core.errors import (
    ConflictError,
    FlowResult,
    MismatchError,
    NotFoundError,
    NotVerifiedError,
    flow_boundary,
)
from app.core.security import get_password_hash, verify_password
from app.crud import user as user_crud
from app.services import verification_flow
from app.services.email_service import EmailService

logger = logging.getLogger(__name__)


@flow_boundary
def register_account(db: Session, email_service: EmailService, fields: Dict[str, Any]) -> FlowResult:
    """
    Create an account and send its signup code.

    Args:
        db: Database session
        email_service: Dispatcher for the code email
        fields: first_name, last_name, email, phone_number, password

    Returns:
        FlowResult: Pending with the new account id, or the failure. A
        failure after the account row exists does not remove the account.
    """
    if user_crud.get_by_email_or_phone(db, fields["email"], fields["phone_number"]):
        raise ConflictError()

    user = user_crud.create(db, {
        "first_name": fields["first_name"],
        "last_name": fields["last_name"],
        "email": fields["email"],
        "phone_number": fields["phone_number"],
        "hashed_password": get_password_hash(fields["password"]),
        "profile_picture": "",
    })
    logger.info(f"New account created: {user.id}")

    return verification_flow.issue_verification(db, email_service, user)


@flow_boundary
def authenticate(db: Session, email: str, password: str) -> FlowResult:
    user = user_crud.get_by_email(db, email)
    if not user:
        raise NotFoundError("Invalid credentials entered", reason="invalid_credentials")
    if not user.is_verified:
        raise NotVerifiedError()
    if not verify_password(password, user.hashed_password):
        raise MismatchError("Invalid password", reason="invalid_password")

    logger.info(f"User {user.id} signed in")
    return FlowResult.success("Login successful", data={"id": str(user.id)})


@flow_boundary
def get_profile(db: Session, user_id: uuid.UUID) -> FlowResult:
    """Public profile fields; never the password hash or verified flag."""
    user = user_crud.get_by_id(db, user_id)
    if not user:
        raise NotFoundError()

    return FlowResult.success("User found", data={
        "id": str(user.id),
        "first_name": user.first_name,
        "last_name": user.last_name,
        "email": user.email,
        "phone_number": user.phone_number,
        "profile_picture": user.profile_picture,
    })
