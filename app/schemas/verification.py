"""
Pydantic schemas for the one-time code endpoints.

Field aliases keep the camelCase names older clients send.
"""

import re
import uuid
from typing import Any, Optional
from pydantic import BaseModel, EmailStr, Field, field_validator

from app.core.codes import code_length
from app.core.errors import FlowResult, FlowStatus


def _validate_code(v: str) -> str:
    """Codes are exactly code_length() digits"""
    if not re.match(rf'^\d{{{code_length()}}}$', v):
        raise ValueError(f'Code must be exactly {code_length()} digits')
    return v


class VerifyEmailRequest(BaseModel):
    """Signup code submitted for /verify-email/{user_id}"""
    confirmation_code: str = Field(..., alias="confirmationCode")

    @field_validator('confirmation_code')
    @classmethod
    def validate_code_format(cls, v: str) -> str:
        return _validate_code(v)

    class Config:
        str_strip_whitespace = True
        populate_by_name = True


class PasswordResetRequest(BaseModel):
    """Start a password reset"""
    email: EmailStr

    class Config:
        str_strip_whitespace = True


class ResetPasswordRequest(BaseModel):
    """
    Complete a password reset.

    The new password only has to be non-empty; signup strength rules are
    not applied here.
    """
    user_id: uuid.UUID = Field(..., alias="userId")
    reset_code: str = Field(..., alias="resetString")
    new_password: str = Field(..., min_length=1, max_length=72, alias="newPassword")

    @field_validator('reset_code')
    @classmethod
    def validate_code_format(cls, v: str) -> str:
        return _validate_code(v)

    class Config:
        str_strip_whitespace = True
        populate_by_name = True


class EmailChangeRequest(BaseModel):
    """Start an email change for /edit-email/{user_id}"""
    new_email: EmailStr = Field(..., alias="newEmail")
    password: str = Field(..., min_length=1)

    class Config:
        str_strip_whitespace = True
        populate_by_name = True


class VerifyNewEmailRequest(BaseModel):
    """Complete an email change for /verify-new-email/{user_id}"""
    new_email: EmailStr = Field(..., alias="newEmail")
    secret_code: str = Field(..., alias="secretCode")

    @field_validator('secret_code')
    @classmethod
    def validate_code_format(cls, v: str) -> str:
        return _validate_code(v)

    class Config:
        str_strip_whitespace = True
        populate_by_name = True


class FlowResponse(BaseModel):
    """Tagged outcome returned by every flow endpoint"""
    status: FlowStatus
    message: str
    reason: Optional[str] = None
    data: Optional[Any] = None

    @classmethod
    def from_result(cls, result: FlowResult) -> "FlowResponse":
        return cls(status=result.status, message=result.message, reason=result.reason, data=result.data)
