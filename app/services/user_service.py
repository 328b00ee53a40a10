from typing import List, Optional

from sqlalchemy.orm import Session

from app.core.constants import RESERVED_ROLE_NAMES, RoleName, TokenType, UserStatus
from app.core.database import transaction
from app.core.security import hash_password, unusable_password_hash
from app.models.role import Role
from app.models.user import User
from app.services import email_service
from app.services.auth_service import AuthService
from app.services.clinic_service import load_specialties
from app.services.token_service import TokenService
from app.utils.errors import BadRequestError, EmailTakenError, ForbiddenError, UserNotFoundError
from app.utils.helpers import column_updates, utcnow
import logging

logger = logging.getLogger(__name__)


class UserService:

    @staticmethod
    def get_by_id(db: Session, user_id: str) -> Optional[User]:
        return db.query(User).filter(User.id == user_id, User.deleted_at.is_(None)).first()

    @staticmethod
    def get_clinic_user(db: Session, clinic_id: str, user_id: str) -> User:
        user = (
            db.query(User)
            .filter(User.id == user_id, User.clinic_id == clinic_id, User.deleted_at.is_(None))
            .first()
        )
        if not user:
            raise UserNotFoundError()
        return user

    @staticmethod
    def _clinic_role(db: Session, clinic_id: str, role_name: str, user_id: str, allow_admin: bool) -> Role:
        if role_name.lower() in RESERVED_ROLE_NAMES:
            raise BadRequestError(f"Role name '{role_name}' is reserved")
        if role_name == RoleName.ADMIN.value and not allow_admin:
            raise ForbiddenError()
        role = db.query(Role).filter(Role.clinic_id == clinic_id, Role.role_name == role_name).first()
        if role is None:
            role = Role(role_name=role_name, clinic_id=clinic_id, user_id=user_id)
            db.add(role)
        return role

    @staticmethod
    def create_clinic_user(db: Session, clinic_id: str, data: dict, allow_admin: bool = False) -> User:
        """
        Create a staff account in the caller's clinic and mail a set-password link.
        Only clinic admins (`allow_admin`) may hand out the admin role.
        """
        if AuthService.is_email_taken(db, data["email"]):
            raise EmailTakenError()

        password = data.get("password")
        with transaction(db):
            user = User(
                name=data["name"],
                email=data["email"],
                phone_number=data.get("phone_number"),
                clinic_id=clinic_id,
                password_hash=hash_password(password) if password else unusable_password_hash(),
                status=UserStatus.INACTIVE.value,
            )
            user.specialties = load_specialties(db, data.get("specialties") or [])
            db.add(user)
            db.flush()
            for role_name in dict.fromkeys(data.get("roles") or []):
                user.roles.append(UserService._clinic_role(db, clinic_id, role_name, user.id, allow_admin))
            token = TokenService.generate_password_token(db, user, TokenType.SET_PASSWORD)

        logger.info(f"Created clinic user {user.id} in clinic {clinic_id}")
        email_service.send_password_email(user.email, token, TokenType.SET_PASSWORD)
        return user

    @staticmethod
    def list_clinic_users(
        db: Session,
        clinic_id: str,
        name: Optional[str] = None,
        role: Optional[str] = None,
    ) -> List[User]:
        query = db.query(User).filter(User.clinic_id == clinic_id, User.deleted_at.is_(None))
        if name:
            query = query.filter(User.name.ilike(f"%{name}%"))
        if role:
            query = query.filter(User.roles.any(Role.role_name == role))
        return query.order_by(User.created_at.desc()).all()

    @staticmethod
    def update_clinic_user(
        db: Session, clinic_id: str, user_id: str, data: dict, allow_admin: bool = False
    ) -> User:
        user = UserService.get_clinic_user(db, clinic_id, user_id)
        if data.get("email") and AuthService.is_email_taken(db, data["email"], exclude_user_id=user.id):
            raise EmailTakenError()

        role_ids = data.pop("roles", None)
        specialty_ids = data.pop("specialties", None)
        with transaction(db):
            for field, value in column_updates(User, data).items():
                setattr(user, field, value)
            if role_ids is not None:
                ids = list(dict.fromkeys(role_ids))
                roles = db.query(Role).filter(Role.id.in_(ids), Role.clinic_id == clinic_id).all()
                if len(roles) != len(ids):
                    raise BadRequestError("One or more roles not found")
                if not allow_admin and any(r.role_name == RoleName.ADMIN.value for r in roles):
                    raise ForbiddenError()
                user.roles = roles
            if specialty_ids is not None:
                user.specialties = load_specialties(db, specialty_ids)
        return user

    @staticmethod
    def delete_clinic_user(db: Session, clinic_id: str, user_id: str) -> None:
        user = UserService.get_clinic_user(db, clinic_id, user_id)
        user.deleted_at = utcnow()
        user.status = UserStatus.INACTIVE.value
        db.commit()
