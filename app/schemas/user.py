"""
Pydantic schemas for account signup, sign-in and profile.
"""

from pydantic import BaseModel, EmailStr, Field, field_validator
import re


class SignupRequest(BaseModel):
    """Request schema for account signup."""
    first_name: str = Field(..., min_length=1, alias="firstName")
    last_name: str = Field(..., min_length=1, alias="lastName")
    email: EmailStr
    phone_number: str = Field(..., min_length=1, alias="phoneNumber")
    password: str = Field(
        ...,
        min_length=8,
        max_length=72,  # bcrypt limit
        description="Password must be 8-72 characters"
    )

    @field_validator('first_name', 'last_name')
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Names are letters and spaces only."""
        if not re.match(r'^[a-zA-Z ]+$', v):
            raise ValueError('Invalid name format')
        return v

    @field_validator('phone_number', mode='before')
    @classmethod
    def validate_phone_number(cls, v) -> str:
        """Accept numbers or digit strings, optionally with a leading +."""
        v = str(v).strip()
        if not re.match(r'^\+?\d{6,15}$', v):
            raise ValueError('Invalid phone number')
        return v

    class Config:
        str_strip_whitespace = True
        populate_by_name = True


class SigninRequest(BaseModel):
    """Request schema for sign-in."""
    email: EmailStr
    password: str = Field(..., min_length=1)

    class Config:
        str_strip_whitespace = True
