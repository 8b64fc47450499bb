from datetime import datetime
from typing import Optional
from pydantic import BaseModel, EmailStr, field_validator

from .common import normalize_timestamp
from .enums import Role


class ProfileRead(BaseModel):
    id: str
    email: str
    full_name: str
    flat_number: str
    phone: Optional[str] = None
    role: Role
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("created_at", "updated_at", mode="before")
    def parse_timestamps(cls, v):
        return normalize_timestamp(v)


class ProfileUpdate(BaseModel):
    """Self-service edit. Role is not editable here."""
    full_name: Optional[str] = None
    phone: Optional[str] = None
    flat_number: Optional[str] = None


# -----------------------------------------------------
# Auth payloads
# -----------------------------------------------------
class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class TokenResponse(BaseModel):
    access_token: str
    refresh_token: Optional[str] = None
    expires_in: Optional[int] = None
    token_type: str = "bearer"


class SignupRequest(BaseModel):
    email: EmailStr
    password: str
    full_name: str
    flat_number: str
    phone: Optional[str] = None
    role: Role = Role.resident

    @field_validator("role")
    def residents_only(cls, v):
        # Staff roles are granted on the profiles row, never self-assigned
        if v != Role.resident:
            raise ValueError("Self-signup registers residents only")
        return v
