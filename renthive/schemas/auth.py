"""
Pydantic schemas for authentication requests and responses.
Handles sign-up, sign-in, session and password flows.
"""

from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional
from datetime import datetime


class SignInRequest(BaseModel):
    """Sign-in request schema."""

    email: EmailStr = Field(
        ...,
        description="User's email address",
        examples=["owner@example.com"]
    )
    password: str = Field(
        ...,
        min_length=1,
        max_length=128,
        description="User's password"
    )

    @field_validator('email')
    @classmethod
    def normalize_email(cls, v):
        """Normalize email to lowercase."""
        return v.lower().strip()


class SignUpRequest(SignInRequest):
    """Sign-up request schema. Password strength is checked by the auth service."""

    full_name: Optional[str] = Field(None, max_length=255, examples=["Jane Doe"])


class PasswordResetRequest(BaseModel):
    email: EmailStr

    @field_validator('email')
    @classmethod
    def normalize_email(cls, v):
        return v.lower().strip()


class PasswordUpdateRequest(BaseModel):
    """
    New password, authorized either by the current session or by a reset
    token issued through the password reset flow.
    """

    password: str = Field(..., max_length=128)
    reset_token: Optional[str] = Field(None, description="Token from the reset email")


class UserResponse(BaseModel):
    """User response schema (excluding sensitive data)."""

    id: str = Field(..., description="User's unique identifier")
    email: EmailStr
    full_name: Optional[str] = None
    is_active: bool = True
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class SessionResponse(BaseModel):
    """Current session: the user (or null) and, after sign-in, the token."""

    user: Optional[UserResponse] = None
    access_token: Optional[str] = None
    token_type: str = "bearer"
    expires_in: Optional[int] = Field(None, description="Token lifetime in seconds")


class MessageResponse(BaseModel):
    success: bool = True
    message: str
