from sqlalchemy.orm import Session
from app.models.user import User
from app.models.role import Role
from app.models.session import UserSession
from app.models.token import Token
from app.core.security import (
    hash_password, verify_password, create_access_token,
    create_refresh_token, hash_token, decode_refresh_token,
    unusable_password_hash,
)
from app.core.config import settings
from app.core.constants import ClinicStatus, RoleName, TokenType, UserStatus
from app.core.database import transaction
from app.services import email_service
from app.services.token_service import TokenService, PASSWORD_TOKEN_TYPES
from app.utils.helpers import utcnow
from datetime import timedelta
from app.utils.errors import (
    InvalidCredentialsError, Unauthorized, UserNotFoundError, EmailTakenError, NotFoundError,
)
import logging

logger = logging.getLogger(__name__)


class AuthService:

    @staticmethod
    def is_email_taken(db: Session, email: str, exclude_user_id: str | None = None) -> bool:
        query = db.query(User).filter(User.email == email.strip().lower())
        if exclude_user_id:
            query = query.filter(User.id != exclude_user_id)
        return db.query(query.exists()).scalar()

    @staticmethod
    def register(
        db: Session,
        email: str,
        name: str,
        role: str = RoleName.SUPERADMIN.value,
        phone_number: str | None = None,
        password: str | None = None,
    ) -> User:
        """
        Create a platform-level account with its own role.
        Without a password the account stays inactive until the emailed
        set-password link is used.
        """
        if AuthService.is_email_taken(db, email):
            raise EmailTakenError()

        with transaction(db):
            user = User(
                name=name,
                email=email,
                phone_number=phone_number,
                password_hash=hash_password(password) if password else unusable_password_hash(),
                status=UserStatus.ACTIVE.value if password else UserStatus.INACTIVE.value,
            )
            db.add(user)
            db.flush()
            user_role = Role(role_name=role, user_id=user.id)
            user.roles.append(user_role)
            token = None if password else TokenService.generate_password_token(db, user, TokenType.SET_PASSWORD)

        if token:
            email_service.send_password_email(user.email, token, TokenType.SET_PASSWORD)
        logger.info(f"Registered {role} account {user.id}")
        return user

    @staticmethod
    def _check_can_login(user: User) -> None:
        if user.is_superadmin:
            return
        clinic = user.clinic
        if clinic is not None and clinic.status == ClinicStatus.PENDING.value:
            raise Unauthorized("Unable to access your account. The clinic is awaiting approval")
        if user.status != UserStatus.ACTIVE.value:
            raise Unauthorized("Unable to access your account. Your account is inactive")

    @staticmethod
    def _issue_tokens(db: Session, user: User, ip_address: str, user_agent: str) -> dict:
        access_token, access_jti = create_access_token(
            user_id=user.id,
            email=user.email,
            clinic_id=user.clinic_id,
        )
        refresh_token, refresh_jti = create_refresh_token(user.id)

        now = utcnow()
        refresh_expires = now + timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS)
        db.add(UserSession(
            user_id=user.id,
            token_jti=access_jti,
            refresh_jti=refresh_jti,
            refresh_token_hash=hash_token(refresh_token),
            ip_address=ip_address,
            user_agent=user_agent,
            expires_at=now + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
            refresh_expires_at=refresh_expires,
        ))
        TokenService.save_token(db, refresh_token, user.id, refresh_expires, TokenType.REFRESH)
        return AuthService._token_response(user, access_token, refresh_token)

    @staticmethod
    def _token_response(user: User, access_token: str, refresh_token: str) -> dict:
        return {
            "access_token": access_token,
            "refresh_token": refresh_token,
            "token_type": "bearer",
            "expires_in": settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
            "user_id": user.id,
            "email": user.email,
            "name": user.name,
            "clinic_id": user.clinic_id,
            "roles": user.role_names,
        }

    @staticmethod
    def login(db: Session, email: str, password: str, ip_address: str, user_agent: str = "") -> dict:
        """
        Email/password login
        - Verify credentials
        - Superadmins skip clinic/account status checks
        - Create access & refresh tokens and track the session
        """
        user = (
            db.query(User)
            .filter(User.email == email.strip().lower(), User.deleted_at.is_(None))
            .first()
        )
        if not user or not verify_password(password, user.password_hash or ""):
            raise InvalidCredentialsError()

        AuthService._check_can_login(user)

        result = AuthService._issue_tokens(db, user, ip_address, user_agent)
        user.last_login = utcnow()
        db.commit()
        return result

    @staticmethod
    def logout(db: Session, refresh_token: str) -> None:
        payload = decode_refresh_token(refresh_token)
        if not payload:
            raise Unauthorized()

        token_doc = (
            db.query(Token)
            .filter(
                Token.token == refresh_token,
                Token.type == TokenType.REFRESH.value,
                Token.blacklisted.is_(False),
            )
            .first()
        )
        if not token_doc:
            raise NotFoundError()

        now = utcnow()
        token_doc.blacklisted = True
        session = db.query(UserSession).filter(UserSession.refresh_jti == payload.get("jti")).first()
        if session:
            session.is_revoked = True
            session.revoked_at = now
            session.revoked_reason = "logout"

        user = db.query(User).filter(User.id == token_doc.user_id).first()
        if user:
            user.current_camp_id = None
        db.commit()

    @staticmethod
    def refresh_tokens(db: Session, refresh_token: str, ip_address: str, user_agent: str = "") -> dict:
        """
        Rotate the token pair.
        - Validate refresh JWT, its stored Token row and the session
        - Blacklist the old refresh token, issue a new pair on the same session
        """
        payload = decode_refresh_token(refresh_token)
        if not payload or not payload.get("jti"):
            raise Unauthorized("Invalid refresh token")

        user_id = payload.get("sub")
        session = (
            db.query(UserSession)
            .filter(
                UserSession.user_id == user_id,
                UserSession.refresh_jti == payload["jti"],
                UserSession.is_revoked.is_(False),
            )
            .first()
        )
        token_doc = TokenService.verify_token(db, refresh_token, TokenType.REFRESH)
        if not session or not token_doc:
            raise Unauthorized("Invalid or revoked refresh token")

        now = utcnow()
        if session.refresh_token_hash != hash_token(refresh_token):
            session.is_revoked = True
            session.revoked_at = now
            session.revoked_reason = "refresh_mismatch"
            db.commit()
            raise Unauthorized("Invalid refresh token")

        user = db.query(User).filter(User.id == user_id, User.deleted_at.is_(None)).first()
        if not user:
            raise Unauthorized("Invalid refresh token")

        access_token, access_jti = create_access_token(user_id=user.id, email=user.email, clinic_id=user.clinic_id)
        new_refresh_token, new_refresh_jti = create_refresh_token(user.id)
        refresh_expires = now + timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS)

        token_doc.blacklisted = True
        TokenService.save_token(db, new_refresh_token, user.id, refresh_expires, TokenType.REFRESH)

        session.token_jti = access_jti
        session.refresh_jti = new_refresh_jti
        session.refresh_token_hash = hash_token(new_refresh_token)
        session.refresh_expires_at = refresh_expires
        session.expires_at = now + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
        session.ip_address = ip_address
        session.user_agent = user_agent
        db.commit()

        return AuthService._token_response(user, access_token, new_refresh_token)

    @staticmethod
    def send_password_reset(db: Session, email: str) -> None:
        """Store a reset-password token and email the link."""
        token = TokenService.generate_password_token_for_email(db, email, TokenType.RESET_PASSWORD)
        db.commit()
        email_service.send_password_email(email, token, TokenType.RESET_PASSWORD)

    @staticmethod
    def _user_for_password_token(db: Session, token: str) -> User:
        token_doc = TokenService.verify_token(db, token, *PASSWORD_TOKEN_TYPES)
        if not token_doc:
            raise ValueError("token not found")
        user = db.query(User).filter(User.id == token_doc.user_id, User.deleted_at.is_(None)).first()
        if not user:
            raise ValueError("user not found")
        return user

    @staticmethod
    def verify_password_token(db: Session, token: str) -> dict:
        try:
            user = AuthService._user_for_password_token(db, token)
        except ValueError:
            raise Unauthorized()
        return {"id": user.id, "name": user.name, "email": user.email}

    @staticmethod
    def reset_password(db: Session, token: str, new_password: str) -> None:
        """Set the password, activate the account and drop outstanding password tokens."""
        try:
            user = AuthService._user_for_password_token(db, token)
        except ValueError as e:
            logger.warning(f"Password reset rejected: {e}")
            raise Unauthorized("Password reset failed")

        with transaction(db):
            user.password_hash = hash_password(new_password)
            user.status = UserStatus.ACTIVE.value
            TokenService.delete_user_tokens(db, user.id, *PASSWORD_TOKEN_TYPES)

    @staticmethod
    def send_verification_email(db: Session, user_id: str) -> None:
        user = db.query(User).filter(User.id == user_id).first()
        if not user:
            raise UserNotFoundError()
        token = TokenService.generate_verify_email_token(db, user)
        db.commit()
        email_service.send_verification_email(user.email, token)

    @staticmethod
    def verify_email(db: Session, token: str) -> None:
        token_doc = TokenService.verify_token(db, token, TokenType.VERIFY_EMAIL)
        user = db.query(User).filter(User.id == token_doc.user_id).first() if token_doc else None
        if not user:
            raise Unauthorized("Email verification failed")

        with transaction(db):
            TokenService.delete_user_tokens(db, user.id, TokenType.VERIFY_EMAIL)
            user.is_email_verified = True
