import re
from pydantic import BaseModel, EmailStr, Field, field_validator, ConfigDict
from typing import Optional, List
from datetime import datetime

PHONE_PATTERN = r"^[0-9]{10,15}$"


def check_password_strength(v: str) -> str:
    if len(v) < 8:
        raise ValueError("password must be at least 8 characters")
    if not re.search(r"\d", v) or not re.search(r"[a-zA-Z]", v):
        raise ValueError("password must contain at least 1 letter and 1 number")
    return v


class RegisterRequest(BaseModel):
    """Platform-level account (superadmin) registration"""
    email: EmailStr
    name: str = Field(..., min_length=1)
    role: str = Field("superadmin", min_length=1)
    phone_number: Optional[str] = Field(None, pattern=PHONE_PATTERN)
    password: Optional[str] = None

    @field_validator("password")
    def password_strength(cls, v):
        return check_password_strength(v) if v else v


class OnboardClinicRequest(BaseModel):
    clinic_name: str = Field(..., min_length=1)
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    phone_number: Optional[str] = Field(None, pattern=PHONE_PATTERN)
    contact_email: Optional[EmailStr] = None
    website: Optional[str] = None
    specialties: List[str] = []
    admin_name: str = Field(..., min_length=1)
    admin_email: EmailStr
    admin_phone_number: str = Field(..., pattern=PHONE_PATTERN)

    @field_validator("phone_number", "contact_email", mode="before")
    def blank_to_none(cls, v):
        return v or None


class LoginRequest(BaseModel):
    email: str
    password: str


class TokenResponse(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int  # seconds
    user_id: str
    email: str
    name: Optional[str] = None
    clinic_id: Optional[str] = None
    roles: List[str] = []


class RefreshTokenRequest(BaseModel):
    refresh_token: str


class LogoutRequest(BaseModel):
    refresh_token: str


class ForgotPasswordRequest(BaseModel):
    email: EmailStr


class ResetPasswordRequest(BaseModel):
    password: str

    @field_validator("password")
    def password_strength(cls, v):
        return check_password_strength(v)


class RoleBrief(BaseModel):
    id: str
    role_name: str

    model_config = ConfigDict(from_attributes=True)


class SpecialtyBrief(BaseModel):
    id: str
    name: str
    department_name: str

    model_config = ConfigDict(from_attributes=True)


class UserResponse(BaseModel):
    """User profile response"""
    id: str
    name: str
    email: str
    phone_number: Optional[str] = None
    clinic_id: Optional[str] = None
    current_camp_id: Optional[str] = None
    status: str
    is_email_verified: bool
    roles: List[RoleBrief] = []
    specialties: List[SpecialtyBrief] = []
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
