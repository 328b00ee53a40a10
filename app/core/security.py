from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any
from jose import JWTError, jwt
from passlib.context import CryptContext
import secrets
import hashlib
from app.core.config import settings
from app.core.constants import TokenType

pwd_context = CryptContext(
    schemes=["argon2"],
    deprecated="auto",
)
def hash_password(password: str) -> str:
    if not password or not isinstance(password, str):
        raise ValueError("Password must be a non-empty string")
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    if not plain_password or not hashed_password:
        return False
    if not isinstance(plain_password, str):
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except Exception:
        return False


def unusable_password_hash() -> str:
    """Hash of a random secret nobody knows; the owner must go through set-password."""
    return hash_password(secrets.token_urlsafe(32))


def hash_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()

def _create_jwt(payload: Dict[str, Any], expires_delta: timedelta) -> tuple[str, str]:
    expire = datetime.now(timezone.utc) + expires_delta
    jti = secrets.token_urlsafe(32)

    payload.update({
        "exp": expire,
        "jti": jti,
    })

    token = jwt.encode(
        payload,
        settings.SECRET_KEY,
        algorithm=settings.ALGORITHM,
    )
    return token, jti


def create_access_token(
    user_id: str,
    email: str,
    clinic_id: Optional[str] = None,
    expires_delta: Optional[timedelta] = None,
) -> tuple[str, str]:
    return _create_jwt(
        payload={
            "sub": str(user_id),
            "email": email,
            "clinic_id": clinic_id,
            "type": TokenType.ACCESS.value,
        },
        expires_delta=expires_delta
        or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
    )


def create_refresh_token(user_id: str) -> tuple[str, str]:
    return _create_jwt(
        payload={
            "sub": str(user_id),
            "type": TokenType.REFRESH.value,
        },
        expires_delta=timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS),
    )


def create_action_token(user_id: str, token_type: TokenType, expires_delta: timedelta) -> tuple[str, datetime]:
    """Single-purpose token (set/reset password, verify email). Returns (token, naive UTC expiry)."""
    token, _ = _create_jwt(
        payload={
            "sub": str(user_id),
            "type": token_type.value,
        },
        expires_delta=expires_delta,
    )
    expires_at = (datetime.now(timezone.utc) + expires_delta).replace(tzinfo=None)
    return token, expires_at

def decode_token(token: str) -> Optional[Dict[str, Any]]:
    try:
        return jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM],
        )
    except JWTError:
        return None


def decode_typed_token(token: str, *token_types: TokenType) -> Optional[Dict[str, Any]]:
    payload = decode_token(token)
    if payload and payload.get("type") in {t.value for t in token_types}:
        return payload
    return None


def decode_refresh_token(token: str) -> Optional[Dict[str, Any]]:
    return decode_typed_token(token, TokenType.REFRESH)
