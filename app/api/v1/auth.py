from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import get_current_user
from app.models.user import User
from app.schemas.auth import LoginRequest, RefreshTokenRequest, LogoutRequest, ChangePasswordRequest
from app.schemas.common import SuccessResponse, success_response
from app.services.auth_service import auth_service, serialize_user

router = APIRouter(prefix="/auth")


# ─── POST /auth/login ─────────────────────────────────────────────────────────
@router.post(
    "/login",
    status_code=status.HTTP_200_OK,
    summary="Login and receive access + refresh tokens",
    response_model=SuccessResponse,
)
def login(data: LoginRequest, db: Session = Depends(get_db)):
    """
    Verify the scheduler account's password.
    Returns a short-lived accessToken and a refreshToken (7 days).
    """
    result = auth_service.login(db, data)
    return success_response("Login successful", result)


# ─── POST /auth/refresh ───────────────────────────────────────────────────────
@router.post(
    "/refresh",
    status_code=status.HTTP_200_OK,
    summary="Get new access token using refresh token",
    response_model=SuccessResponse,
)
def refresh_token(data: RefreshTokenRequest, db: Session = Depends(get_db)):
    result = auth_service.refresh_token(db, data.refreshToken)
    return success_response("Token refreshed", result)


# ─── POST /auth/logout ────────────────────────────────────────────────────────
@router.post(
    "/logout",
    status_code=status.HTTP_200_OK,
    summary="Revoke refresh token (logout)",
    response_model=SuccessResponse,
)
def logout(
    data: LogoutRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    auth_service.logout(db, data.refreshToken, current_user.id)
    return success_response("Logged out successfully", None)


# ─── POST /auth/change-password ───────────────────────────────────────────────
@router.post(
    "/change-password",
    status_code=status.HTTP_200_OK,
    summary="Change password (requires current password)",
    response_model=SuccessResponse,
)
def change_password(
    data: ChangePasswordRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    auth_service.change_password(db, data, current_user)
    return success_response("Password changed successfully. Please login again.", None)


# ─── GET /auth/me ─────────────────────────────────────────────────────────────
@router.get(
    "/me",
    status_code=status.HTTP_200_OK,
    summary="Get current authenticated user",
    response_model=SuccessResponse,
)
def get_me(current_user: User = Depends(get_current_user)):
    return success_response("User profile retrieved", serialize_user(current_user))
