"""Dental diagnosis, treatment and treatment sitting schemas."""
from datetime import date, datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.common import DoctorRef


class DiagnosisBase(BaseModel):
    diagnosis_date: Optional[date] = None
    complaints: Optional[List[str]] = None
    treatments_suggested: Optional[List[str]] = None
    current_status: Optional[str] = None
    dental_quadrant_type: Optional[Literal["adult", "child", "all"]] = None
    dental_quadrant: Optional[Dict[str, Any]] = None
    selected_teeth: Optional[int] = None
    child_selected_teeth: Optional[List[int]] = None
    adult_selected_teeth: Optional[List[int]] = None
    xray_status: Optional[bool] = None
    xray: Optional[List[str]] = None
    notes: Optional[str] = None
    additional_details: Optional[Dict[str, Any]] = None
    estimated_cost: Optional[float] = Field(None, ge=0)


class DiagnosisCreate(DiagnosisBase):
    diagnosis_date: date


class DiagnosisUpdate(DiagnosisBase):
    pass


class TreatmentSettingRead(BaseModel):
    id: str
    treatment_date: Optional[date] = None
    treatment_status: Optional[List[str]] = None
    notes: Optional[str] = None
    additional_details: Optional[dict] = None
    setting_paid_amount: Optional[float] = None
    online_amount: Optional[float] = None
    offline_amount: Optional[float] = None
    treating_doctor: Optional[dict] = None
    crown_status: bool = False
    next_date: Optional[date] = None
    xray_status: bool = False
    xray: Optional[List[str]] = None
    camp_id: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class TreatmentRead(BaseModel):
    id: str
    diagnosis_id: str
    complaints: Optional[List[str]] = None
    treatments: Optional[List[str]] = None
    notes: Optional[str] = None
    additional_details: Optional[dict] = None
    total_amount: Optional[float] = None
    paid_amount: Optional[float] = None
    remaining_amount: Optional[float] = None
    payment_status: str
    status: str
    treatment_settings: List[TreatmentSettingRead] = []
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class DiagnosisRead(BaseModel):
    id: str
    patient_id: str
    camp_id: Optional[str] = None
    diagnosis_date: Optional[date] = None
    complaints: Optional[List[str]] = None
    treatments_suggested: Optional[List[str]] = None
    current_status: Optional[str] = None
    dental_quadrant_type: str
    dental_quadrant: Optional[dict] = None
    selected_teeth: Optional[int] = None
    child_selected_teeth: Optional[List[int]] = None
    adult_selected_teeth: Optional[List[int]] = None
    xray_status: bool
    xray: Optional[List[str]] = None
    notes: Optional[str] = None
    additional_details: Optional[dict] = None
    estimated_cost: Optional[float] = None
    treatment: Optional[TreatmentRead] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class TreatmentUpdate(BaseModel):
    complaints: Optional[List[str]] = None
    treatments: Optional[List[str]] = None
    notes: Optional[str] = None
    additional_details: Optional[Dict[str, Any]] = None
    total_amount: Optional[float] = Field(None, ge=0)
    status: Optional[Literal["started", "completed", "not started"]] = None


class TreatmentSettingCreate(BaseModel):
    treatment_date: date
    treatment_status: List[str] = []
    notes: Optional[str] = None
    additional_details: Optional[Dict[str, Any]] = None
    setting_paid_amount: Optional[float] = Field(None, ge=0)
    online_amount: float = Field(0, ge=0)
    offline_amount: float = Field(0, ge=0)
    treating_doctor: Optional[DoctorRef] = None
    crown_status: bool = False
    next_date: Optional[date] = None
    xray_status: bool = False
    xray: List[str] = []
    status: Optional[Literal["started", "completed", "not started"]] = None
