from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session
from app.core.database import get_db
from app.schemas.auth import (
    RegisterRequest, OnboardClinicRequest, LoginRequest, LogoutRequest,
    RefreshTokenRequest, ForgotPasswordRequest, ResetPasswordRequest, UserResponse,
)
from app.services.auth_service import AuthService
from app.services.clinic_service import ClinicService
from app.services.user_service import UserService
from app.dependencies.auth import get_current_user
from app.dependencies.rate_limit import rate_limit
from app.utils.errors import UserNotFoundError
from app.utils.helpers import get_client_ip

router = APIRouter(prefix="/auth", tags=["authentication"])


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(
    request: RegisterRequest,
    db: Session = Depends(get_db),
    _: None = Depends(rate_limit),
):
    """Create a platform-level account (superadmin by default)."""
    user = AuthService.register(db, **request.model_dump())
    return {"success": True, "data": UserResponse.model_validate(user).model_dump()}


@router.post("/onboard-clinic", status_code=status.HTTP_201_CREATED)
async def onboard_clinic(
    request: OnboardClinicRequest,
    db: Session = Depends(get_db),
    _: None = Depends(rate_limit),
):
    """
    Clinic self-registration
    - Clinic is created pending superadmin approval
    - Clinic admin receives a set-password link
    """
    result = ClinicService.onboard_clinic(db, request.model_dump())
    return {"success": True, "data": result}


@router.post("/login", status_code=200)
async def login(
    request: LoginRequest,
    http_request: Request,
    db: Session = Depends(get_db),
    _: None = Depends(rate_limit),
):
    result = AuthService.login(
        db=db,
        email=request.email,
        password=request.password,
        ip_address=get_client_ip(http_request),
        user_agent=http_request.headers.get("user-agent", ""),
    )
    return {"success": True, "data": result}


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(
    request: LogoutRequest,
    db: Session = Depends(get_db),
):
    AuthService.logout(db, request.refresh_token)


@router.post("/refresh-tokens", status_code=200)
async def refresh_tokens(
    request: RefreshTokenRequest,
    http_request: Request,
    db: Session = Depends(get_db),
    _: None = Depends(rate_limit),
):
    """Rotate the access/refresh pair; the presented refresh token is blacklisted."""
    result = AuthService.refresh_tokens(
        db=db,
        refresh_token=request.refresh_token,
        ip_address=get_client_ip(http_request),
        user_agent=http_request.headers.get("user-agent", ""),
    )
    return {"success": True, "data": result}


@router.get("/me", status_code=200)
async def me(
    current_user=Depends(get_current_user),
    db: Session = Depends(get_db),
):
    user = UserService.get_by_id(db, current_user["user_id"])
    if not user:
        raise UserNotFoundError()
    return {"success": True, "data": UserResponse.model_validate(user).model_dump()}


@router.post("/forgot-password", status_code=status.HTTP_204_NO_CONTENT)
async def forgot_password(
    request: ForgotPasswordRequest,
    db: Session = Depends(get_db),
    _: None = Depends(rate_limit),
):
    AuthService.send_password_reset(db, request.email)


@router.post("/reset-password", status_code=status.HTTP_204_NO_CONTENT)
async def reset_password(
    request: ResetPasswordRequest,
    token: str = Query(...),
    db: Session = Depends(get_db),
    _: None = Depends(rate_limit),
):
    """Reset (or first-time set) a password from an emailed link."""
    AuthService.reset_password(db, token=token, new_password=request.password)


@router.get("/verify-token", status_code=200)
async def verify_token(
    token: str = Query(...),
    db: Session = Depends(get_db),
):
    return {"success": True, "data": AuthService.verify_password_token(db, token)}


@router.post("/send-verification-email", status_code=status.HTTP_204_NO_CONTENT)
async def send_verification_email(
    current_user=Depends(get_current_user),
    db: Session = Depends(get_db),
    _: None = Depends(rate_limit),
):
    AuthService.send_verification_email(db, current_user["user_id"])


@router.post("/verify-email", status_code=status.HTTP_204_NO_CONTENT)
async def verify_email(
    token: str = Query(...),
    db: Session = Depends(get_db),
):
    AuthService.verify_email(db, token)
