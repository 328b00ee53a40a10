from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.core.constants import RESERVED_ROLE_NAMES


class RoleCreate(BaseModel):
    role_name: str = Field(..., min_length=1)
    role_description: Optional[str] = None
    permissions: List[str]  # permission ids

    @field_validator("role_name")
    def not_reserved(cls, v):
        v = v.strip()
        if v.lower() in RESERVED_ROLE_NAMES:
            raise ValueError("reserved role name")
        return v


class RoleUpdate(RoleCreate):
    pass


class PermissionRead(BaseModel):
    id: str
    action: str
    description: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class RoleRead(BaseModel):
    id: str
    role_name: str
    role_description: Optional[str] = None
    clinic_id: Optional[str] = None
    permissions: List[PermissionRead] = []

    model_config = ConfigDict(from_attributes=True)
