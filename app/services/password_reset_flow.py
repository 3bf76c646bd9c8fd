"""
Password reset by emailed code.

Issued -> Completed | Expired

Only verified accounts can request a reset. The new password is hashed with
the same work factor as signup passwords.
"""

import logging
import uuid
from sqlalchemy.orm import Session

from app.core import codes
from app.core.errors import (
    DispatchError,
    ExpiredError,
    FlowResult,
    MismatchError,
    NoPendingRequestError,
    NotFoundError,
    NotVerifiedError,
    flow_boundary,
)
from app.core.security import get_password_hash
from app.crud import user as user_crud
from app.crud.account_token import password_reset_tokens
from app.services.email_service import EmailService

logger = logging.getLogger(__name__)


@flow_boundary
def request_password_reset(db: Session, email_service: EmailService, email: str) -> FlowResult:
    """
    Email a reset code to a verified account, replacing any earlier code.

    An unknown address gets its own outcome, which reveals whether an
    account exists for it; existing clients depend on that message.
    """
    user = user_crud.get_by_email(db, email)
    if not user:
        raise NotFoundError("No account with the given email exists")
    if not user.is_verified:
        raise NotVerifiedError("Email hasn't been verified yet. Check your email")

    code = codes.generate_code()
    password_reset_tokens.put(db, user.id, codes.hash_code(code), codes.expiry_from())
    logger.info(f"Password reset code issued for user {user.id}")

    if not email_service.send_password_reset_code(user.email, code):
        raise DispatchError("Error sending password reset email")

    return FlowResult.pending("Password reset email sent", data=str(user.id))


@flow_boundary
def complete_password_reset(db: Session, user_id: uuid.UUID, code: str, new_password: str) -> FlowResult:
    """
    Set a new password if the reset code matches and has not expired.

    The new password is not held to the signup strength rules.
    """
    record = password_reset_tokens.get(db, user_id)
    if not record:
        raise NoPendingRequestError("Password reset request not found")

    if password_reset_tokens.is_expired(record):
        password_reset_tokens.consume(db, record)
        db.commit()
        logger.info(f"Expired password reset for user {user_id} removed")
        raise ExpiredError("Password reset code has expired. Please request another")

    if not codes.check_code(code, record.code_hash):
        raise MismatchError("Invalid password reset details passed")

    user = user_crud.get_by_id(db, user_id)
    if not user:
        password_reset_tokens.consume(db, record)
        db.commit()
        raise NotFoundError()

    user_crud.update_fields(db, user, {"hashed_password": get_password_hash(new_password)}, commit=False)
    if not password_reset_tokens.consume(db, record):
        raise NoPendingRequestError("Password reset request not found")
    db.commit()

    logger.info(f"Password reset completed for user {user_id}")
    return FlowResult.success("You have successfully reset your password. You can now login")
