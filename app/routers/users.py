from typing import Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from app.core.constants import PermissionAction, RoleName
from app.core.database import get_db
from app.dependencies.auth import get_clinic_user, require_permissions
from app.schemas.auth import UserResponse
from app.schemas.user import ClinicUserCreate, ClinicUserUpdate
from app.services.user_service import UserService

router = APIRouter(prefix="/clinics/users", tags=["users"])

manage_users = require_permissions(PermissionAction.ADMINISTRATION_WRITE.value)


@router.post("", status_code=status.HTTP_204_NO_CONTENT)
async def create_user(
    request: ClinicUserCreate,
    current_user=Depends(manage_users),
    db: Session = Depends(get_db),
):
    """Add a staff member to the caller's clinic; they receive a set-password link."""
    UserService.create_clinic_user(
        db,
        current_user["clinic_id"],
        request.model_dump(),
        allow_admin=RoleName.ADMIN.value in current_user["role_names"],
    )


@router.get("")
async def list_users(
    name: Optional[str] = None,
    role: Optional[str] = None,
    current_user=Depends(get_clinic_user),
    db: Session = Depends(get_db),
):
    users = UserService.list_clinic_users(db, current_user["clinic_id"], name=name, role=role)
    return {"success": True, "data": [UserResponse.model_validate(u).model_dump() for u in users]}


@router.get("/{user_id}")
async def get_user(
    user_id: str,
    current_user=Depends(get_clinic_user),
    db: Session = Depends(get_db),
):
    user = UserService.get_clinic_user(db, current_user["clinic_id"], user_id)
    return {"success": True, "data": UserResponse.model_validate(user).model_dump()}


@router.patch("/{user_id}")
async def update_user(
    user_id: str,
    request: ClinicUserUpdate,
    current_user=Depends(manage_users),
    db: Session = Depends(get_db),
):
    user = UserService.update_clinic_user(
        db,
        current_user["clinic_id"],
        user_id,
        request.model_dump(exclude_unset=True),
        allow_admin=RoleName.ADMIN.value in current_user["role_names"],
    )
    return {"success": True, "data": UserResponse.model_validate(user).model_dump()}


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: str,
    current_user=Depends(manage_users),
    db: Session = Depends(get_db),
):
    UserService.delete_clinic_user(db, current_user["clinic_id"], user_id)
