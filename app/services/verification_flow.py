"""
Signup email confirmation.

Issued -> Confirmed | Expired | Superseded

A code is issued right after an account is created and again on every
resend. Confirming an expired code deletes the unverified account as well,
so the person has to sign up again.
"""

import logging
import uuid
from sqlalchemy.orm import Session

from app.core import codes
from app.core.errors import (
    AlreadyVerifiedError,
    DispatchError,
    ExpiredError,
    FlowResult,
    MismatchError,
    NoPendingRequestError,
    NotFoundError,
    flow_boundary,
)
from app.crud import user as user_crud
from app.crud.account_token import signup_tokens
from app.models.user import User
from app.services.email_service import EmailService

logger = logging.getLogger(__name__)


def _issue(db: Session, email_service: EmailService, user: User) -> FlowResult:
    code = codes.generate_code()
    signup_tokens.put(db, user.id, codes.hash_code(code), codes.expiry_from())
    logger.info(f"Signup code issued for user {user.id}")

    if not email_service.send_verification_code(user.email, code):
        raise DispatchError("Error occurred sending verification email")

    return FlowResult.pending("Verification email sent", data=str(user.id))


@flow_boundary
def issue_verification(db: Session, email_service: EmailService, user: User) -> FlowResult:
    """
    Generate, store and email a signup code for a freshly created account.

    Storage and dispatch failures come back as distinct outcomes; the
    account itself is left in place (unverified) so a resend can recover.
    """
    return _issue(db, email_service, user)


@flow_boundary
def resend_verification(db: Session, email_service: EmailService, user_id: uuid.UUID) -> FlowResult:
    """
    Replace any outstanding signup code for the account with a new one.

    The previous code stops matching as soon as the new record is stored.
    """
    user = user_crud.get_by_id(db, user_id)
    if not user:
        raise NotFoundError("User not found. Please create an account")
    if user.is_verified:
        raise AlreadyVerifiedError()

    return _issue(db, email_service, user)


@flow_boundary
def confirm_email(db: Session, user_id: uuid.UUID, code: str) -> FlowResult:
    """
    Check a submitted signup code and mark the account verified.

    Outcomes:
    - no record: no_pending_request (also what an already verified account sees)
    - expired: record and unverified account deleted, then expired
    - wrong code: invalid_code, record kept for another try
    - match: verified flag set and record deleted in one commit
    """
    record = signup_tokens.get(db, user_id)
    if not record:
        raise NoPendingRequestError(
            "No email verification records found. You might have already verified your email"
        )

    if signup_tokens.is_expired(record):
        signup_tokens.consume(db, record)
        user = user_crud.get_by_id(db, user_id)
        if user and not user.is_verified:
            user_crud.delete(db, user, commit=False)
        db.commit()
        logger.info(f"Expired signup for user {user_id} removed")
        raise ExpiredError("The code you entered has already expired. Please sign up again")

    if not codes.check_code(code, record.code_hash):
        raise MismatchError("Invalid code")

    user = user_crud.get_by_id(db, user_id)
    if not user:
        signup_tokens.consume(db, record)
        db.commit()
        raise NotFoundError()

    user_crud.update_fields(db, user, {"is_verified": True}, commit=False)
    if not signup_tokens.consume(db, record):
        # Consumed or superseded by a concurrent request
        raise NoPendingRequestError(
            "No email verification records found. You might have already verified your email"
        )
    db.commit()

    logger.info(f"User {user_id} verified their email")
    return FlowResult.success("Email confirmed successfully. You can login")
