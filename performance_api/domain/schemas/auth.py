"""Pydantic schemas for account and authentication endpoints."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from performance_api.domain.models.user import Role


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------

class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class RegisterRequest(BaseModel):
    """Administrator-only account creation."""

    name: str = Field(..., min_length=1, max_length=120)
    email: EmailStr
    password: str = Field(..., min_length=1, description="Strength rules live in the domain validators")
    role: Role = Role.EMPLOYEE
    department: str = Field(..., min_length=1)


class ProfileUpdateRequest(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=120)
    email: Optional[EmailStr] = None
    avatar: Optional[str] = None


class TwoFactorCodeRequest(BaseModel):
    """Six-digit TOTP code from the authenticator app."""

    token: str = Field(..., pattern=r"^\d{6}$")


class UserStatusUpdateRequest(BaseModel):
    is_active: bool


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------

class UserPayload(BaseModel):
    """Public view of a user. Never carries the password hash or the 2FA secret."""

    id: str
    name: str
    email: str
    role: Role
    department: str
    is_active: bool
    two_factor_enabled: bool
    avatar: str = ""
    last_login: Optional[datetime] = None
    created_at: datetime

    model_config = {"from_attributes": True}


class TwoFactorSetupPayload(BaseModel):
    secret: str
    provisioning_uri: str
