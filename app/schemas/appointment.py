from datetime import date, datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

AppointmentStatusLiteral = Literal["in queue", "in", "out", "cancelled"]


class AppointmentBookRequest(BaseModel):
    patient_id: str
    specialties: List[str] = Field(..., min_length=1, description="Specialty ids to queue the patient for")
    appointment_date: date
    status: Literal["in queue", "in", "out"] = "in queue"


class AppointmentUpdateRequest(BaseModel):
    status: AppointmentStatusLiteral
    status_updated_at: Optional[datetime] = None


class AppointmentRow(BaseModel):
    """Flattened appointment row as listed for the front desk."""
    id: str
    appointment_date: date
    status: str
    status_updated_at: Optional[datetime] = None
    specialty_id: str
    specialty_name: Optional[str] = None
    patient_id: str
    patient_name: Optional[str] = None
    age: Optional[int] = None
    sex: Optional[str] = None
    mobile: Optional[str] = None
    reg_no: Optional[str] = None
    token_number: Optional[int] = None
    queue_type: Optional[str] = None
    queue_date: Optional[date] = None
    primary_doctor: Optional[str] = None
    medical_records: list = []
