"""
Email address change by emailed code.

Issued -> Completed | Expired

The code goes to the new address, so completing the change proves the
account holder controls that mailbox. The pending address is stored on the
token record and must be resubmitted with the code.
"""

import logging
import uuid
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core import codes
from app.core.errors import (
    ConflictError,
    DispatchError,
    ExpiredError,
    FlowResult,
    MismatchError,
    NoPendingRequestError,
    NotFoundError,
    flow_boundary,
)
from app.core.security import verify_password
from app.crud import user as user_crud
from app.crud.account_token import email_change_tokens
from app.services.email_service import EmailService

logger = logging.getLogger(__name__)

EMAIL_USED_MESSAGE = "Email provided has already been used. Try a different one"


@flow_boundary
def request_email_change(
    db: Session,
    email_service: EmailService,
    user_id: uuid.UUID,
    new_email: str,
    password: str,
) -> FlowResult:
    """
    Start an email change after re-checking the current password.

    Checks, in order: account exists, password matches, new address is not
    held by any account. Only then is the previous request replaced.
    """
    user = user_crud.get_by_id(db, user_id)
    if not user:
        raise NotFoundError()

    if not verify_password(password, user.hashed_password):
        raise MismatchError("Invalid password", reason="invalid_password")

    if user_crud.email_in_use(db, new_email):
        raise ConflictError(EMAIL_USED_MESSAGE, reason="already_used")

    code = codes.generate_code()
    email_change_tokens.put(db, user.id, codes.hash_code(code), codes.expiry_from(), new_email=new_email)
    logger.info(f"Email change code issued for user {user.id}")

    if not email_service.send_email_change_code(new_email, code):
        raise DispatchError("Error occurred sending verification email")

    return FlowResult.pending("Verification email sent. Check your mailbox to verify new email")


@flow_boundary
def complete_email_change(db: Session, user_id: uuid.UUID, new_email: str, code: str) -> FlowResult:
    """
    Switch the account to the pending address once the code matches.

    A submitted address other than the pending one is treated as no request.
    """
    user = user_crud.get_by_id(db, user_id)
    if not user:
        raise NotFoundError()

    record = email_change_tokens.get(db, user_id, new_email=new_email)
    if not record:
        raise NoPendingRequestError("Email change request not found")

    if email_change_tokens.is_expired(record):
        email_change_tokens.consume(db, record)
        db.commit()
        logger.info(f"Expired email change for user {user_id} removed")
        raise ExpiredError("The code you entered has expired. Please request another")

    if not codes.check_code(code, record.code_hash):
        raise MismatchError("Invalid code")

    # Another account may have claimed the address since the request
    if user_crud.email_in_use(db, new_email, exclude_user_id=user.id):
        raise ConflictError(EMAIL_USED_MESSAGE, reason="already_used")

    user_crud.update_fields(db, user, {"email": new_email}, commit=False)
    if not email_change_tokens.consume(db, record):
        raise NoPendingRequestError("Email change request not found")
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError(EMAIL_USED_MESSAGE, reason="already_used")

    logger.info(f"User {user_id} changed their email")
    return FlowResult.success("Email updated successfully")
