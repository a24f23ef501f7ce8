from datetime import datetime, timezone

from sqlalchemy.orm import Session

from app.models.user import User
from app.models.refresh_token import RefreshToken
from app.schemas.auth import LoginRequest, ChangePasswordRequest
from app.utils.security import (
    verify_password, hash_password,
    create_access_token, create_refresh_token, verify_refresh_token,
)
from app.utils.audit import log_action
from app.utils.exceptions import (
    UnauthorizedException, AccountInactiveException,
    DuplicateEntryException, RefreshTokenInvalidException,
)
from app.config import settings


def serialize_user(user: User) -> dict:
    return {
        "id":        user.id,
        "username":  user.username,
        "name":      user.name,
        "isActive":  user.isActive,
        "createdAt": user.createdAt.isoformat() if user.createdAt else None,
    }


class AuthService:

    # ─── Login ────────────────────────────────────────────────────────────────
    def login(self, db: Session, data: LoginRequest) -> dict:
        user = db.query(User).filter(User.username == data.username).first()

        if not user or not verify_password(data.password, user.password):
            raise UnauthorizedException("Invalid username or password")

        if not user.isActive:
            raise AccountInactiveException()

        # Create tokens
        access_token = create_access_token(user.id, user.username)
        refresh_token_str, refresh_expires = create_refresh_token(user.id)

        # Persist refresh token
        db.add(RefreshToken(
            userId=user.id,
            token=refresh_token_str,
            expiresAt=refresh_expires,
            revoked=False,
        ))

        log_action(db, user.id, "LOGIN", "User", user.id, f"{user.username} logged in")
        db.commit()

        return {
            "accessToken":  access_token,
            "refreshToken": refresh_token_str,
            "tokenType":    "Bearer",
            "expiresIn":    settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
            "user":         serialize_user(user),
        }

    # ─── Refresh Token ────────────────────────────────────────────────────────
    def refresh_token(self, db: Session, refresh_token_str: str) -> dict:
        payload = verify_refresh_token(refresh_token_str)
        user_id = int(payload.get("sub"))

        stored = db.query(RefreshToken).filter(
            RefreshToken.token == refresh_token_str,
            RefreshToken.userId == user_id,
            RefreshToken.revoked == False,
        ).first()

        if not stored:
            raise RefreshTokenInvalidException()

        if stored.expiresAt.replace(tzinfo=timezone.utc) < datetime.now(timezone.utc):
            stored.revoked = True
            db.commit()
            raise RefreshTokenInvalidException()

        user = db.query(User).filter(User.id == user_id).first()
        if not user or not user.isActive:
            raise AccountInactiveException()

        return {
            "accessToken": create_access_token(user.id, user.username),
            "tokenType":   "Bearer",
            "expiresIn":   settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        }

    # ─── Logout ───────────────────────────────────────────────────────────────
    def logout(self, db: Session, refresh_token_str: str, user_id: int) -> None:
        stored = db.query(RefreshToken).filter(
            RefreshToken.token == refresh_token_str,
            RefreshToken.userId == user_id,
        ).first()
        if stored:
            stored.revoked = True

        log_action(db, user_id, "LOGOUT", "User", user_id, "User logged out")
        db.commit()

    # ─── Change Password ──────────────────────────────────────────────────────
    def change_password(
        self, db: Session, data: ChangePasswordRequest, current_user: User
    ) -> None:
        if not verify_password(data.currentPassword, current_user.password):
            raise UnauthorizedException("Current password is incorrect")

        current_user.password = hash_password(data.newPassword)
        # Existing sessions must log in again with the new password
        db.query(RefreshToken).filter(
            RefreshToken.userId == current_user.id,
            RefreshToken.revoked == False,
        ).update({"revoked": True})
        log_action(db, current_user.id, "CHANGE_PASSWORD", "User", current_user.id,
                   f"{current_user.username} changed their password")
        db.commit()

    # ─── Create User (CLI) ────────────────────────────────────────────────────
    def create_user(self, db: Session, username: str, name: str, password: str) -> User:
        if db.query(User).filter(User.username == username).first():
            raise DuplicateEntryException("Username already exists", field="username")

        user = User(
            username=username,
            name=name,
            password=hash_password(password),
            isActive=True,
        )
        db.add(user)
        db.flush()
        log_action(db, None, "CREATE", "User", user.id, f"Created user {username}")
        db.commit()
        db.refresh(user)
        return user


auth_service = AuthService()
