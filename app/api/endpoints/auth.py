"""
Account signup, sign-in and password reset endpoints.

- POST /user/signup: Create an unverified account and email its signup code
- POST /user/signin: Check credentials of a verified account
- POST /user/request-password-reset: Email a password reset code
- POST /user/reset-password: Set a new password with the reset code

Every endpoint answers with a tagged FlowResponse (Success / Failed / Pending).
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.deps import get_email_service
from app.schemas.user import SignupRequest, SigninRequest
from app.schemas.verification import FlowResponse, PasswordResetRequest, ResetPasswordRequest
from app.services import account_service, password_reset_flow
from app.services.email_service import EmailService

router = APIRouter(prefix="/user", tags=["Authentication"])


@router.post("/signup", response_model=FlowResponse)
def signup(
    request: SignupRequest,
    db: Session = Depends(get_db),
    email_service: EmailService = Depends(get_email_service)
):
    """
    Register a new account.

    Returns Pending with the account id once the signup code is sent.
    """
    result = account_service.register_account(db, email_service, request.model_dump())
    return FlowResponse.from_result(result)


@router.post("/signin", response_model=FlowResponse)
def signin(
    request: SigninRequest,
    db: Session = Depends(get_db)
):
    """Validate email/password for a verified account."""
    result = account_service.authenticate(db, request.email, request.password)
    return FlowResponse.from_result(result)


@router.post("/request-password-reset", response_model=FlowResponse)
def request_password_reset(
    request: PasswordResetRequest,
    db: Session = Depends(get_db),
    email_service: EmailService = Depends(get_email_service)
):
    """
    Send a password reset code.

    Only verified accounts can reset. A new request replaces any earlier code.
    """
    result = password_reset_flow.request_password_reset(db, email_service, request.email)
    return FlowResponse.from_result(result)


@router.post("/reset-password", response_model=FlowResponse)
def reset_password(
    request: ResetPasswordRequest,
    db: Session = Depends(get_db)
):
    """Complete a password reset with the emailed code."""
    result = password_reset_flow.complete_password_reset(
        db, request.user_id, request.reset_code, request.new_password
    )
    return FlowResponse.from_result(result)
