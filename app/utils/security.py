import uuid
from datetime import datetime, timedelta, timezone

from jose import JWTError, ExpiredSignatureError, jwt
from passlib.context import CryptContext

from app.config import settings
from app.utils.exceptions import TokenExpiredException, UnauthorizedException

# ─── Password Hashing ─────────────────────────────────────────────────────────
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(plain_password: str) -> str:
    """Hash a plain-text password using bcrypt."""
    return pwd_context.hash(plain_password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plain-text password against a bcrypt hash."""
    return pwd_context.verify(plain_password, hashed_password)


# ─── JWT ──────────────────────────────────────────────────────────────────────
def create_access_token(user_id: int, username: str) -> str:
    """
    Create a short-lived signed session token.
    Payload: sub (user_id), username, type, exp
    """
    expire = datetime.now(timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    payload = {
        "sub": str(user_id),
        "username": username,
        "type": "access",
        "exp": expire,
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def create_refresh_token(user_id: int) -> tuple[str, datetime]:
    """
    Create a long-lived JWT refresh token.
    Returns (token_string, expiry_datetime).
    """
    now = datetime.now(timezone.utc)
    expire = now + timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS)
    payload = {
        "sub": str(user_id),
        "type": "refresh",
        "iat": now,
        "exp": expire,
        "jti": uuid.uuid4().hex,
    }
    token = jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)
    return token, expire


def _decode(token: str, expected_type: str) -> dict:
    payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    if payload.get("type") != expected_type:
        raise UnauthorizedException("Invalid token type")
    return payload


def verify_access_token(token: str) -> dict:
    """
    Decode and validate a JWT access token.
    Raises 401 if invalid, 401 (TOKEN_EXPIRED) if expired.
    """
    try:
        return _decode(token, "access")
    except ExpiredSignatureError:
        raise TokenExpiredException()
    except JWTError:
        raise UnauthorizedException("Invalid or malformed token")


def verify_refresh_token(token: str) -> dict:
    """
    Decode and validate a JWT refresh token.
    Raises 401 if invalid or expired.
    """
    try:
        return _decode(token, "refresh")
    except ExpiredSignatureError:
        raise UnauthorizedException("Refresh token has expired, please login again")
    except JWTError:
        raise UnauthorizedException("Invalid refresh token")
