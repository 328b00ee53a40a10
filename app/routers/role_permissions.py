from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from app.core.constants import PermissionAction, RoleName
from app.core.database import get_db
from app.dependencies.auth import get_clinic_user, require_permissions
from app.schemas.role import PermissionRead, RoleCreate, RoleRead, RoleUpdate
from app.services.role_permission_service import RolePermissionService

router = APIRouter(prefix="/clinics/role-permission", tags=["roles"])

manage_roles = require_permissions(PermissionAction.ADMINISTRATION_WRITE.value)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_role(
    request: RoleCreate,
    current_user=Depends(manage_roles),
    db: Session = Depends(get_db),
):
    role = RolePermissionService.create_role(
        db,
        clinic_id=current_user["clinic_id"],
        role_name=request.role_name,
        permission_ids=request.permissions,
        role_description=request.role_description,
        allow_admin=RoleName.ADMIN.value in current_user["role_names"],
    )
    return {"success": True, "data": RoleRead.model_validate(role).model_dump()}


@router.get("")
async def list_roles(
    current_user=Depends(get_clinic_user),
    db: Session = Depends(get_db),
):
    roles = RolePermissionService.list_roles(db, current_user["clinic_id"])
    return {"success": True, "data": [RoleRead.model_validate(r).model_dump() for r in roles]}


@router.get("/permissions")
async def list_permissions(
    current_user=Depends(get_clinic_user),
    db: Session = Depends(get_db),
):
    permissions = RolePermissionService.list_permissions(db)
    return {"success": True, "data": [PermissionRead.model_validate(p).model_dump() for p in permissions]}


@router.put("")
async def update_role(
    request: RoleUpdate,
    role_id: str = Query(...),
    current_user=Depends(manage_roles),
    db: Session = Depends(get_db),
):
    """Rename a role; permissions in the request are added, never removed."""
    role = RolePermissionService.update_role(
        db,
        clinic_id=current_user["clinic_id"],
        role_id=role_id,
        role_name=request.role_name,
        permission_ids=request.permissions,
        role_description=request.role_description,
        allow_admin=RoleName.ADMIN.value in current_user["role_names"],
    )
    return {"success": True, "data": RoleRead.model_validate(role).model_dump()}
