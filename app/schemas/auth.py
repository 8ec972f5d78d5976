"""
Authentication schemas for request/response validation.
"""

from datetime import datetime
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from .base import CamelModel


class UserCreate(BaseModel):
    """Schema for operator creation."""
    username: str
    email: EmailStr
    password: str
    full_name: Optional[str] = None

    @field_validator("username")
    @classmethod
    def validate_username(cls, v):
        if len(v) < 3:
            raise ValueError("Username must be at least 3 characters long")
        return v.lower()

    @field_validator("password")
    @classmethod
    def validate_password(cls, v):
        if len(v) < 8:
            raise ValueError("Password must be at least 8 characters long")
        return v


class UserRead(BaseModel):
    """Schema for user response."""
    id: str
    username: str
    email: str
    full_name: Optional[str] = None
    role: str
    is_active: bool
    created_at: datetime
    last_login: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int


Phone = Optional[Union[str, int]]


class OtpSendRequest(BaseModel):
    phone: Phone = None


class OtpVerifyRequest(BaseModel):
    phone: Phone = None
    otp: Optional[str] = None


class PasswordResetInitiateRequest(BaseModel):
    phone: Phone = None


class PasswordResetRequest(CamelModel):
    phone: Phone = None
    otp: Optional[str] = None
    new_password: Optional[str] = Field(default=None)
