"""Clinic roles and the permissions attached to them."""
from typing import List, Optional

from sqlalchemy.orm import Session, selectinload

from app.core.constants import RoleName
from app.models.role import Permission, Role
from app.utils.errors import BadRequestError, ForbiddenError, NotFoundError


def _load_permissions(db: Session, permission_ids: List[str]) -> List[Permission]:
    ids = list(dict.fromkeys(permission_ids))
    permissions = db.query(Permission).filter(Permission.id.in_(ids)).all() if ids else []
    if len(permissions) != len(ids):
        raise BadRequestError("Some permissions not found")
    return permissions


class RolePermissionService:

    @staticmethod
    def create_role(
        db: Session,
        clinic_id: str,
        role_name: str,
        permission_ids: List[str],
        role_description: Optional[str] = None,
        allow_admin: bool = False,
    ) -> Role:
        if role_name == RoleName.ADMIN.value and not allow_admin:
            raise ForbiddenError()
        if db.query(Role).filter(Role.clinic_id == clinic_id, Role.role_name == role_name).first():
            raise BadRequestError("Role already has been there for the clinic")
        role = Role(role_name=role_name, role_description=role_description, clinic_id=clinic_id)
        role.permissions = _load_permissions(db, permission_ids)
        db.add(role)
        db.commit()
        db.refresh(role)
        return role

    @staticmethod
    def list_roles(db: Session, clinic_id: str) -> List[Role]:
        return (
            db.query(Role)
            .options(selectinload(Role.permissions))
            .filter(Role.clinic_id == clinic_id)
            .order_by(Role.role_name.asc())
            .all()
        )

    @staticmethod
    def list_permissions(db: Session) -> List[Permission]:
        return db.query(Permission).order_by(Permission.action.asc()).all()

    @staticmethod
    def update_role(
        db: Session,
        clinic_id: str,
        role_id: str,
        role_name: str,
        permission_ids: List[str],
        role_description: Optional[str] = None,
        allow_admin: bool = False,
    ) -> Role:
        """Rename the role and attach any permissions it does not have yet."""
        role = db.query(Role).filter(Role.id == role_id, Role.clinic_id == clinic_id).first()
        if not role:
            raise NotFoundError("Role not found")
        if RoleName.ADMIN.value in (role.role_name, role_name) and not allow_admin:
            raise ForbiddenError()

        permissions = _load_permissions(db, permission_ids)
        role.role_name = role_name
        role.role_description = role_description
        existing = {p.id for p in role.permissions}
        for permission in permissions:
            if permission.id not in existing:
                role.permissions.append(permission)
        db.commit()
        db.refresh(role)
        return role

    @staticmethod
    def user_has_permission(user, actions: tuple) -> bool:
        """Admins pass; otherwise one of the user's roles must grant a listed action."""
        if RoleName.ADMIN.value in user.role_names:
            return True
        return any(p.action in actions for role in user.roles for p in role.permissions)
