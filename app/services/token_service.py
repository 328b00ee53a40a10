"""Persisted single-purpose tokens (set/reset password, email verification)."""
from datetime import timedelta
from typing import Optional

from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.constants import TokenType
from app.core.security import create_action_token, decode_typed_token
from app.models.token import Token
from app.models.user import User
from app.utils.errors import NotFoundError
from app.utils.helpers import utcnow

PASSWORD_TOKEN_TYPES = (TokenType.SET_PASSWORD, TokenType.RESET_PASSWORD)


class TokenService:

    @staticmethod
    def save_token(db: Session, token: str, user_id: str, expires, token_type: TokenType) -> Token:
        token_doc = Token(token=token, user_id=user_id, expires=expires, type=token_type.value)
        db.add(token_doc)
        db.flush()
        return token_doc

    @staticmethod
    def generate_password_token(db: Session, user: User, token_type: TokenType) -> str:
        token, expires = create_action_token(
            user.id,
            token_type,
            timedelta(days=settings.SET_PASSWORD_TOKEN_EXPIRE_DAYS),
        )
        TokenService.save_token(db, token, user.id, expires, token_type)
        return token

    @staticmethod
    def generate_password_token_for_email(db: Session, email: str, token_type: TokenType) -> str:
        user = (
            db.query(User)
            .filter(User.email == email.strip().lower(), User.deleted_at.is_(None))
            .first()
        )
        if not user:
            raise NotFoundError("No users found with this email")
        return TokenService.generate_password_token(db, user, token_type)

    @staticmethod
    def generate_verify_email_token(db: Session, user: User) -> str:
        token, expires = create_action_token(
            user.id,
            TokenType.VERIFY_EMAIL,
            timedelta(minutes=settings.VERIFY_EMAIL_TOKEN_EXPIRE_MINUTES),
        )
        TokenService.save_token(db, token, user.id, expires, TokenType.VERIFY_EMAIL)
        return token

    @staticmethod
    def verify_token(db: Session, token: str, *token_types: TokenType) -> Optional[Token]:
        """Stored, unexpired, non-blacklisted token of one of `token_types`, else None."""
        payload = decode_typed_token(token, *token_types)
        if not payload:
            return None
        return (
            db.query(Token)
            .filter(
                Token.token == token,
                Token.user_id == payload.get("sub"),
                Token.type.in_([t.value for t in token_types]),
                Token.blacklisted.is_(False),
                Token.expires > utcnow(),
            )
            .first()
        )

    @staticmethod
    def delete_user_tokens(db: Session, user_id: str, *token_types: TokenType) -> int:
        return (
            db.query(Token)
            .filter(Token.user_id == user_id, Token.type.in_([t.value for t in token_types]))
            .delete(synchronize_session=False)
        )

    @staticmethod
    def delete_expired(db: Session) -> int:
        return db.query(Token).filter(Token.expires < utcnow()).delete(synchronize_session=False)
