"""Clinic staff schemas."""
from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from app.core.constants import RESERVED_ROLE_NAMES
from app.schemas.auth import check_password_strength


class ClinicUserCreate(BaseModel):
    email: EmailStr
    name: str = Field(..., min_length=1)
    password: Optional[str] = None
    phone_number: Optional[str] = None
    roles: List[str] = []  # role names
    specialties: List[str] = []  # specialty ids

    @field_validator("password")
    def password_strength(cls, v):
        return check_password_strength(v) if v else v

    @field_validator("roles")
    def no_reserved_roles(cls, v):
        v = [name.strip() for name in v]
        if RESERVED_ROLE_NAMES & {name.lower() for name in v}:
            raise ValueError("reserved role name")
        return v


class ClinicUserUpdate(BaseModel):
    name: Optional[str] = None
    email: Optional[EmailStr] = None
    phone_number: Optional[str] = None
    roles: Optional[List[str]] = None  # role ids
    specialties: Optional[List[str]] = None


class SetCurrentCamp(BaseModel):
    camp_id: str
