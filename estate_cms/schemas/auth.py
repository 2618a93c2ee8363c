"""
Pydantic schemas for authentication requests and responses.
"""

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from typing import Optional


class LoginRequest(BaseModel):
    """Login request schema."""

    model_config = ConfigDict(extra="forbid")

    email: EmailStr = Field(
        ...,
        description="Admin email address",
        examples=["admin@propertyicon.com"]
    )
    password: str = Field(
        ...,
        min_length=1,
        max_length=128,
        description="Admin password"
    )

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v):
        """Normalize email to lowercase."""
        return v.lower().strip()


class AdminResponse(BaseModel):
    """Public admin identity."""

    id: str
    email: str
    name: Optional[str] = None


class LoginResponse(BaseModel):
    """Login response schema. The token itself travels in the cookie."""

    success: bool = True
    admin: AdminResponse


class CurrentAdminResponse(BaseModel):
    admin: AdminResponse


class LogoutResponse(BaseModel):
    success: bool = True
