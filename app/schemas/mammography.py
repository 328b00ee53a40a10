from datetime import date, datetime
from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

YesNo = Optional[Literal["Yes", "No"]]
Side = Optional[Literal["No", "Right", "Left", "Both"]]


class MammographyBase(BaseModel):
    menstrual_age: Optional[int] = Field(None, ge=0)
    last_menstrual_date: Optional[date] = None
    cycle_type: Optional[Literal["Regular", "Irregular"]] = None
    obstetric_history: Optional[Dict[str, bool]] = None
    number_of_pregnancies: Optional[int] = Field(None, ge=0)
    number_of_deliveries: Optional[int] = Field(None, ge=0)
    number_of_living_children: Optional[int] = Field(None, ge=0)
    menopause: YesNo = None

    family_history: YesNo = None
    family_history_details: Optional[str] = None
    first_degree_relatives: Optional[str] = None
    previous_cancer: Optional[str] = None
    previous_diagnosis: Optional[str] = None
    previous_biopsy: YesNo = None
    previous_surgery: YesNo = None
    previous_treatment: YesNo = None
    previous_treatment_details: Optional[str] = None
    implants: YesNo = None
    relevant_diagnosis: YesNo = None
    relevant_diagnosis_details: Optional[str] = None

    smoking: YesNo = None
    smoking_details: Optional[Dict[str, Any]] = None
    alcohol: YesNo = None
    alcohol_details: Optional[Dict[str, Any]] = None
    misheri_tobacco: YesNo = None
    misheri_tobacco_details: Optional[Dict[str, Any]] = None

    lump: Side = None
    lump_details: Optional[Any] = None
    discharge: Side = None
    discharge_details: Optional[Any] = None
    skin_changes: Side = None
    skin_changes_details: Optional[Any] = None
    nipple_retraction: Side = None
    nipple_retraction_details: Optional[Any] = None
    pain: Side = None
    pain_details: Optional[Any] = None

    imaging_studies: Optional[Dict[str, Any]] = None
    additional_info: Optional[str] = None
    online_amount: Optional[float] = Field(None, ge=0)
    offline_amount: Optional[float] = Field(None, ge=0)

    @field_validator(
        "cycle_type", "menopause", "family_history", "previous_biopsy", "previous_surgery",
        "previous_treatment", "implants", "relevant_diagnosis", "smoking", "alcohol",
        "misheri_tobacco", "lump", "discharge", "skin_changes", "nipple_retraction", "pain",
        mode="before",
    )
    def blank_to_none(cls, v):
        return v or None


class MammographyCreate(MammographyBase):
    pass


class MammographyUpdate(MammographyBase):
    pass


class MammographyRead(MammographyBase):
    id: str
    patient_id: str
    camp_id: Optional[str] = None
    screening_image: Optional[dict] = None
    mammo_report: Optional[dict] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
