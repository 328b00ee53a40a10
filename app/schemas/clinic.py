"""Clinic and specialty schemas."""
from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from app.schemas.auth import PHONE_PATTERN, SpecialtyBrief


class ClinicUpdate(BaseModel):
    clinic_name: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    phone_number: Optional[str] = Field(None, pattern=PHONE_PATTERN)
    contact_email: Optional[EmailStr] = None
    website: Optional[str] = None
    status: Optional[Literal["pending", "active", "inactive"]] = None
    specialties: Optional[List[str]] = None

    @field_validator("phone_number", "contact_email", mode="before")
    def blank_to_none(cls, v):
        return v or None


class ClinicStatusUpdate(BaseModel):
    status: Literal["pending", "active", "inactive"]


class ClinicRead(BaseModel):
    id: str
    clinic_name: str
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    phone_number: Optional[str] = None
    contact_email: Optional[str] = None
    website: Optional[str] = None
    status: str
    owner_id: Optional[str] = None
    specialties: List[SpecialtyBrief] = []
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class SpecialtyCreate(BaseModel):
    name: str = Field(..., min_length=1)
    department_name: Literal["GP", "Dentistry", "Mammography"]
