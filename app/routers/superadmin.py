"""Platform administration: clinic approvals and the specialty catalogue."""
from typing import Literal, Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from app.core.database import get_db
from app.dependencies.auth import get_current_superadmin
from app.services.clinic_service import ClinicService
from app.services.specialty_service import SpecialtyService
from app.schemas.auth import SpecialtyBrief
from app.schemas.clinic import ClinicRead, ClinicStatusUpdate, SpecialtyCreate

router = APIRouter(prefix="/superadmin", tags=["superadmin"])


@router.get("/clinics")
async def list_clinics(
    status: Optional[Literal["pending", "active", "inactive"]] = None,
    sort_by: str = "created_at",
    order: Literal["asc", "desc"] = "desc",
    current_admin=Depends(get_current_superadmin),
    db: Session = Depends(get_db),
):
    result = ClinicService.list_clinics(db, status=status, sort_by=sort_by, order=order)
    return {"success": True, **result}


@router.patch("/approve-clinic/{clinic_id}")
async def approve_clinic(
    clinic_id: str,
    request: ClinicStatusUpdate,
    current_admin=Depends(get_current_superadmin),
    db: Session = Depends(get_db),
):
    clinic = ClinicService.approve_clinic(db, current_admin["user_id"], clinic_id, request.status)
    return {"success": True, "data": ClinicRead.model_validate(clinic).model_dump()}


@router.get("/specialties")
async def list_specialties(
    current_admin=Depends(get_current_superadmin),
    db: Session = Depends(get_db),
):
    specialties = SpecialtyService.list_all(db)
    return {"success": True, "data": [SpecialtyBrief.model_validate(s).model_dump() for s in specialties]}


@router.post("/specialties", status_code=status.HTTP_201_CREATED)
async def create_specialty(
    request: SpecialtyCreate,
    current_admin=Depends(get_current_superadmin),
    db: Session = Depends(get_db),
):
    specialty = SpecialtyService.create(db, request.name, request.department_name)
    return {"success": True, "data": SpecialtyBrief.model_validate(specialty).model_dump()}
