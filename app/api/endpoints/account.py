"""
Account profile and email change endpoints.
"""

import uuid
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.deps import get_email_service
from app.schemas.verification import EmailChangeRequest, FlowResponse, VerifyNewEmailRequest
from app.services import account_service, email_change_flow
from app.services.email_service import EmailService

router = APIRouter(prefix="/user", tags=["Account"])


@router.get("/get-user-profile/{user_id}", response_model=FlowResponse)
def get_user_profile(
    user_id: uuid.UUID,
    db: Session = Depends(get_db)
):
    """Profile fields of an account (no password hash)."""
    result = account_service.get_profile(db, user_id)
    return FlowResponse.from_result(result)


@router.post("/edit-email/{user_id}", response_model=FlowResponse)
def edit_email(
    user_id: uuid.UUID,
    request: EmailChangeRequest,
    db: Session = Depends(get_db),
    email_service: EmailService = Depends(get_email_service)
):
    """
    Request an email change.

    Requires the current password. The code is sent to the new address.
    """
    result = email_change_flow.request_email_change(
        db, email_service, user_id, request.new_email, request.password
    )
    return FlowResponse.from_result(result)


@router.post("/verify-new-email/{user_id}", response_model=FlowResponse)
def verify_new_email(
    user_id: uuid.UUID,
    request: VerifyNewEmailRequest,
    db: Session = Depends(get_db)
):
    """Complete an email change with the code sent to the new address."""
    result = email_change_flow.complete_email_change(
        db, user_id, request.new_email, request.secret_code
    )
    return FlowResponse.from_result(result)
