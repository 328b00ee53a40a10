"""Patient schemas."""
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Dict, List, Literal, Optional
from datetime import datetime

from app.schemas.common import DoctorRef

MOBILE_PATTERN = r"^[0-9]{10}$"


class PatientCreate(BaseModel):
    name: str = Field(..., min_length=1)
    age: int = Field(..., ge=0)
    sex: Literal["male", "female", "other"]
    mobile: str = Field(..., pattern=MOBILE_PATTERN)
    address: Optional[str] = None


class PatientUpdate(BaseModel):
    name: Optional[str] = None
    age: Optional[int] = Field(None, ge=0)
    sex: Optional[Literal["male", "female", "other"]] = None
    mobile: Optional[str] = Field(None, pattern=MOBILE_PATTERN)
    address: Optional[str] = None
    primary_doctor: Optional[DoctorRef] = None


class PatientRead(BaseModel):
    id: str
    reg_no: str
    name: str
    age: Optional[int] = None
    sex: Optional[str] = None
    mobile: Optional[str] = None
    address: Optional[str] = None
    clinic_id: str
    primary_doctor: Optional[dict] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class Billing(BaseModel):
    total_cost: float = Field(..., ge=0)
    paid_amount: float = Field(..., ge=0)
    remaining_amount: float = Field(..., ge=0)


class DentalRecordCreate(BaseModel):
    appointment_id: str
    patient_id: str
    complaints: List[str]
    treatment: List[str]
    # quadrant "1".."4" -> teeth 1..8
    dental_quadrant: Dict[Literal["1", "2", "3", "4"], List[int]]
    xray_status: bool
    xray: Optional[List[str]] = None
    notes: Optional[str] = None
    billing: Optional[Billing] = None

    @field_validator("dental_quadrant")
    def teeth_in_range(cls, v):
        for teeth in v.values():
            if any(t < 1 or t > 8 for t in teeth):
                raise ValueError("tooth numbers must be between 1 and 8")
        return v
