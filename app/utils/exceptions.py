from fastapi import HTTPException, status


# ═══════════════════════════════════════════════════════════════════════════════
# ERROR CODES: machine-readable constants for the dashboard client
# ═══════════════════════════════════════════════════════════════════════════════
class ErrorCode:
    VALIDATION_ERROR        = "VALIDATION_ERROR"
    UNAUTHORIZED            = "UNAUTHORIZED"
    TOKEN_EXPIRED           = "TOKEN_EXPIRED"
    REFRESH_TOKEN_INVALID   = "REFRESH_TOKEN_INVALID"
    NOT_FOUND               = "NOT_FOUND"
    DUPLICATE_ENTRY         = "DUPLICATE_ENTRY"
    ACCOUNT_INACTIVE        = "ACCOUNT_INACTIVE"
    SCHEDULE_NOT_ABSENT     = "SCHEDULE_NOT_ABSENT"
    INVALID_REPLACEMENT     = "INVALID_REPLACEMENT"
    STORAGE_ERROR           = "STORAGE_ERROR"
    INTERNAL_SERVER_ERROR   = "INTERNAL_SERVER_ERROR"


# ═══════════════════════════════════════════════════════════════════════════════
# BASE EXCEPTION
# ═══════════════════════════════════════════════════════════════════════════════
class AppException(HTTPException):
    """
    Base exception for all application-level errors.
    Carries a machine-readable error_code for frontend handling.
    """
    def __init__(
        self,
        status_code: int,
        message: str,
        error_code: str,
        details: list | None = None,
        field: str | None = None,
    ):
        super().__init__(status_code=status_code, detail={
            "message": message,
            "error": {
                "code": error_code,
                "details": details,
                "field": field,
            }
        })

    @property
    def error_code(self) -> str:
        return self.detail["error"]["code"]


# ═══════════════════════════════════════════════════════════════════════════════
# CONCRETE EXCEPTIONS
# ═══════════════════════════════════════════════════════════════════════════════

class ValidationException(AppException):
    def __init__(self, message: str, field: str | None = None):
        super().__init__(
            status.HTTP_422_UNPROCESSABLE_ENTITY, message, ErrorCode.VALIDATION_ERROR, field=field,
        )


class UnauthorizedException(AppException):
    def __init__(self, message: str = "Authentication required"):
        super().__init__(status.HTTP_401_UNAUTHORIZED, message, ErrorCode.UNAUTHORIZED)


class TokenExpiredException(AppException):
    def __init__(self):
        super().__init__(status.HTTP_401_UNAUTHORIZED, "Access token has expired", ErrorCode.TOKEN_EXPIRED)


class RefreshTokenInvalidException(AppException):
    def __init__(self):
        super().__init__(status.HTTP_401_UNAUTHORIZED, "Refresh token is invalid or revoked", ErrorCode.REFRESH_TOKEN_INVALID)


class NotFoundException(AppException):
    def __init__(self, resource: str = "Resource"):
        super().__init__(status.HTTP_404_NOT_FOUND, f"{resource} not found", ErrorCode.NOT_FOUND)


class DuplicateEntryException(AppException):
    def __init__(self, message: str = "Record already exists", field: str | None = None):
        super().__init__(status.HTTP_409_CONFLICT, message, ErrorCode.DUPLICATE_ENTRY, field=field)


class AccountInactiveException(AppException):
    def __init__(self):
        super().__init__(
            status.HTTP_403_FORBIDDEN,
            "Your account has been deactivated. Contact admin.",
            ErrorCode.ACCOUNT_INACTIVE,
        )


class ScheduleNotAbsentException(AppException):
    def __init__(self):
        super().__init__(
            status.HTTP_400_BAD_REQUEST,
            "Driver is not on day off or annual leave for this date",
            ErrorCode.SCHEDULE_NOT_ABSENT,
        )


class InvalidReplacementException(AppException):
    def __init__(self, message: str):
        super().__init__(status.HTTP_400_BAD_REQUEST, message, ErrorCode.INVALID_REPLACEMENT)
