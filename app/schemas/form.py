from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class FormField(BaseModel):
    id: str
    type: Literal["phone", "text", "textarea", "radio", "checkbox", "select", "date"]
    title: str
    value: Optional[str] = None
    options: Optional[List[str]] = None


class FormTemplateCreate(BaseModel):
    name: str = Field(..., min_length=1)
    form_data: List[FormField]


class FormTemplateUpdate(BaseModel):
    name: Optional[str] = None
    form_data: Optional[List[FormField]] = None


class FormTemplateRead(BaseModel):
    id: str
    clinic_id: str
    name: str
    form_data: List[Dict[str, Any]]
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class FormFieldsCreate(BaseModel):
    form_name: str = Field(..., min_length=1)
    form_field_data: List[Dict[str, Any]]


class FormFieldsUpdate(BaseModel):
    form_name: Optional[str] = None
    form_field_data: Optional[List[Dict[str, Any]]] = None


class FormFieldsRead(BaseModel):
    id: str
    clinic_id: str
    form_name: str
    form_field_data: List[Dict[str, Any]]
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
