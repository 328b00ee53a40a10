"""General physician record schemas."""
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Medicine(BaseModel):
    key: Optional[str] = None
    medicine_type: Optional[str] = None
    medicine: str
    dose: Optional[str] = None
    when: Optional[str] = None
    frequency: Optional[str] = None
    duration: Optional[str] = None
    notes: Optional[str] = None


class GPRecordBase(BaseModel):
    weight: Optional[str] = None
    height: Optional[str] = None
    sugar: Optional[str] = None
    bp: Optional[str] = None
    hb: Optional[str] = None
    complaints: Optional[List[str]] = None
    other_complaints: Optional[str] = None
    kco: Optional[List[str]] = None
    findings: Optional[List[str]] = None
    findings_options_details: Optional[Dict[str, Any]] = None
    systemic_examination: Optional[List[str]] = None
    systemic_examination_options_details: Optional[Dict[str, Any]] = None
    treatment: Optional[str] = None
    advice: Optional[str] = None
    medicine: Optional[List[Medicine]] = None
    follow_up_date: Optional[date] = None
    online_amount: Optional[float] = Field(None, ge=0)
    offline_amount: Optional[float] = Field(None, ge=0)


class GPRecordCreate(GPRecordBase):
    pass


class GPRecordUpdate(GPRecordBase):
    pass


class GPRecordRead(GPRecordBase):
    id: str
    patient_id: str
    camp_id: Optional[str] = None
    medicine: Optional[List[Dict[str, Any]]] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
