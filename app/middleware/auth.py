"""Early bearer-token check.

Rejects malformed, expired or revoked access tokens before routing and attaches
the decoded payload to `request.state.auth`. Route dependencies
(`get_current_user`) still enforce authentication and roles.
"""
from starlette.requests import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse
from app.core.constants import TokenType
from app.core.security import decode_typed_token
from app.core.database import SessionLocal
from app.models.session import UserSession
from app.utils.helpers import utcnow


def _unauthorized() -> JSONResponse:
    return JSONResponse(status_code=401, content={"code": 401, "message": "Please authenticate"})


class JWTMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        auth_header = request.headers.get("authorization")
        if not auth_header:
            return await call_next(request)

        scheme, _, token = auth_header.partition(" ")
        if scheme.lower() != "bearer" or not token:
            return _unauthorized()

        payload = decode_typed_token(token, TokenType.ACCESS)
        if not payload or not payload.get("jti") or not payload.get("sub"):
            return _unauthorized()

        db = SessionLocal()
        try:
            session = db.query(UserSession).filter(
                UserSession.user_id == payload["sub"],
                UserSession.token_jti == payload["jti"],
                UserSession.is_revoked == False,  # noqa: E712
            ).first()
            if not session:
                return _unauthorized()
            if session.expires_at and session.expires_at < utcnow():
                return _unauthorized()
        finally:
            db.close()

        request.state.auth = payload
        return await call_next(request)
