from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from app.core.constants import RoleName, TokenType
from app.core.database import get_db
from app.core.security import decode_typed_token
from app.models.user import User
from app.models.session import UserSession
from app.services.role_permission_service import RolePermissionService
from app.utils.errors import ForbiddenError, Unauthorized
from app.utils.helpers import utcnow

security = HTTPBearer(auto_error=False)


def get_current_user_from_token(
    token: str,
    db: Session,
):
    """
    Verify an access token against its live session and return the caller context.
    """
    payload = decode_typed_token(token, TokenType.ACCESS)
    if payload is None:
        raise Unauthorized()

    user_id = payload.get("sub")
    jti = payload.get("jti")

    # Check if token is revoked
    session = db.query(UserSession).filter(
        UserSession.user_id == user_id,
        UserSession.token_jti == jti,
        UserSession.is_revoked == False,  # noqa: E712
    ).first()
    if not session:
        raise Unauthorized()

    if session.expires_at and session.expires_at < utcnow():
        raise Unauthorized()

    user = db.query(User).filter(User.id == user_id, User.deleted_at.is_(None)).first()
    if not user:
        raise Unauthorized()

    return {
        **payload,
        "jti": jti,
        "user_id": user.id,
        "clinic_id": user.clinic_id,
        "current_camp_id": user.current_camp_id,
        "role_names": user.role_names,
        "is_superadmin": user.is_superadmin,
    }


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db),
):
    """Verify JWT token and return current user"""
    if credentials is None:
        raise Unauthorized()
    return get_current_user_from_token(credentials.credentials, db)


async def get_current_superadmin(
    current_user=Depends(get_current_user),
):
    if not current_user["is_superadmin"]:
        raise ForbiddenError()
    return current_user


async def get_clinic_user(
    current_user=Depends(get_current_user),
):
    """Caller that belongs to a clinic."""
    if not current_user.get("clinic_id"):
        raise ForbiddenError()
    return current_user


def require_roles(*role_names: str):
    """Caller must hold one of `role_names`."""

    async def _check(current_user=Depends(get_current_user)):
        held = set(current_user["role_names"]) - {RoleName.SUPERADMIN.value}
        if current_user["is_superadmin"]:
            held.add(RoleName.SUPERADMIN.value)
        if not set(role_names) & held:
            raise ForbiddenError()
        return current_user

    return _check


def require_permissions(*actions: str):
    """Admins pass; anyone else needs a role granting one of `actions`."""

    async def _check(
        current_user=Depends(get_clinic_user),
        db: Session = Depends(get_db),
    ):
        user = db.query(User).filter(User.id == current_user["user_id"]).first()
        if not user or not RolePermissionService.user_has_permission(user, actions):
            raise ForbiddenError()
        return current_user

    return _check
