"""Clinic profile endpoints. Registered after the /clinics/* sub-routers."""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app.core.constants import RoleName
from app.core.database import get_db
from app.dependencies.auth import get_clinic_user, require_roles
from app.services.clinic_service import ClinicService
from app.schemas.auth import SpecialtyBrief
from app.schemas.clinic import ClinicRead, ClinicUpdate
from app.utils.errors import ForbiddenError

router = APIRouter(prefix="/clinics", tags=["clinics"])


def _check_clinic_access(current_user: dict, clinic_id: str) -> None:
    # clinic admins only see their own clinic
    if not current_user["is_superadmin"] and current_user["clinic_id"] != clinic_id:
        raise ForbiddenError()


@router.get("/specialty-departments")
async def specialty_departments(
    current_user=Depends(get_clinic_user),
    db: Session = Depends(get_db),
):
    specialties = ClinicService.get_specialty_departments(db, current_user["clinic_id"])
    return {"success": True, "data": [SpecialtyBrief.model_validate(s).model_dump() for s in specialties]}


@router.get("/{clinic_id}")
async def get_clinic(
    clinic_id: str,
    current_user=Depends(require_roles(RoleName.SUPERADMIN.value, RoleName.ADMIN.value)),
    db: Session = Depends(get_db),
):
    _check_clinic_access(current_user, clinic_id)
    return {"success": True, "data": ClinicService.get_clinic(db, clinic_id)}


@router.put("/{clinic_id}")
async def update_clinic(
    clinic_id: str,
    request: ClinicUpdate,
    current_user=Depends(require_roles(RoleName.SUPERADMIN.value, RoleName.ADMIN.value)),
    db: Session = Depends(get_db),
):
    _check_clinic_access(current_user, clinic_id)
    data = request.model_dump(exclude_unset=True)
    # clinic admins cannot approve themselves
    if not current_user["is_superadmin"]:
        data.pop("status", None)
    clinic = ClinicService.update_clinic(db, clinic_id, data)
    return {"success": True, "data": ClinicRead.model_validate(clinic).model_dump()}
