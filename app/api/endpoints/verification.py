"""
Email verification endpoints.

Handles confirming and resending signup codes.
"""

import uuid
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.deps import get_email_service
from app.schemas.verification import FlowResponse, VerifyEmailRequest
from app.services import verification_flow
from app.services.email_service import EmailService

router = APIRouter(prefix="/user", tags=["Email Verification"])


@router.post("/verify-email/{user_id}", response_model=FlowResponse)
def verify_email(
    user_id: uuid.UUID,
    request: VerifyEmailRequest,
    db: Session = Depends(get_db)
):
    """
    Confirm a new account's email with its signup code.

    An expired code removes the unverified account; the user must sign up again.
    """
    result = verification_flow.confirm_email(db, user_id, request.confirmation_code)
    return FlowResponse.from_result(result)


@router.post("/resend-email-verification-code/{user_id}", response_model=FlowResponse)
def resend_verification_code(
    user_id: uuid.UUID,
    db: Session = Depends(get_db),
    email_service: EmailService = Depends(get_email_service)
):
    """
    Send a fresh signup code.

    Generates a new code and invalidates the old one.
    """
    result = verification_flow.resend_verification(db, email_service, user_id)
    return FlowResponse.from_result(result)
