"""Health camp schemas."""
from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from app.schemas.auth import SpecialtyBrief


class CampCreate(BaseModel):
    name: str = Field(..., min_length=1)
    location: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    start_date: date
    end_date: date
    specialties: List[str] = []
    vans: List[str] = []
    users: List[str] = []

    @model_validator(mode="after")
    def check_dates(self):
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class CampUpdate(BaseModel):
    name: Optional[str] = None
    location: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    specialties: Optional[List[str]] = None
    vans: Optional[List[str]] = None
    users: Optional[List[str]] = None


class CampUserBrief(BaseModel):
    id: str
    name: str
    email: str

    model_config = ConfigDict(from_attributes=True)


class CampRead(BaseModel):
    id: str
    name: str
    location: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    vans: Optional[List[str]] = None
    start_date: date
    end_date: date
    status: str
    clinic_id: str
    organizer_id: Optional[str] = None
    specialties: List[SpecialtyBrief] = []
    users: List[CampUserBrief] = []
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class BroadcastRequest(BaseModel):
    template_name: str = Field(..., min_length=1)
    variables: List[str] = []
    # defaults to every camp patient's mobile
    recipients: Optional[List[str]] = None
