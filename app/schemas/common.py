"""Shared schema pieces."""
from pydantic import BaseModel
from typing import Optional


class DoctorRef(BaseModel):
    """Select-box style reference to a staff member ({label, value})."""
    label: Optional[str] = None
    value: Optional[str] = None
    phone_number: Optional[str] = None
