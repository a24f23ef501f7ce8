from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.user import User
from app.utils.security import verify_access_token
from app.utils.exceptions import (
    UnauthorizedException,
    AccountInactiveException,
)

# Bearer token extractor
bearer_scheme = HTTPBearer(auto_error=False)


# ─── Get Current User ─────────────────────────────────────────────────────────
def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    """
    Validate the signed session token and return the current User.
    Raises 401 if token is missing, invalid, expired, or names an unknown user.
    Raises 403 if account is inactive.
    """
    if not credentials:
        raise UnauthorizedException("No authentication token provided")

    payload = verify_access_token(credentials.credentials)
    user_id: str | None = payload.get("sub")

    if user_id is None:
        raise UnauthorizedException("Invalid token payload")

    user = db.query(User).filter(User.id == int(user_id)).first()
    if not user:
        raise UnauthorizedException("Session user no longer exists")

    if not user.isActive:
        raise AccountInactiveException()

    return user
