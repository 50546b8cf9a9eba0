"""Custom exceptions and error codes."""

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Standardized error codes for the API."""

    # Authentication errors (401)
    UNAUTHORIZED = "UNAUTHORIZED"
    INVALID_TOKEN = "INVALID_TOKEN"
    TOKEN_EXPIRED = "TOKEN_EXPIRED"

    # Authorization errors (403)
    FORBIDDEN = "FORBIDDEN"

    # Not found errors (404)
    PROFILE_NOT_FOUND = "PROFILE_NOT_FOUND"
    MATCH_NOT_FOUND = "MATCH_NOT_FOUND"
    MESSAGE_NOT_FOUND = "MESSAGE_NOT_FOUND"

    # Validation errors (400)
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # Rate limiting (429)
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"

    # Server errors (500 / 503)
    INTERNAL_ERROR = "INTERNAL_ERROR"
    DATABASE_ERROR = "DATABASE_ERROR"
    PROFILE_CATALOG_UNAVAILABLE = "PROFILE_CATALOG_UNAVAILABLE"


class AppException(Exception):
    """Base application exception."""

    def __init__(
        self,
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Any | None = None,
    ) -> None:
        self.error_code = error_code
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)


class AuthenticationError(AppException):
    """Authentication failed."""

    def __init__(
        self,
        message: str = "Authentication required",
        error_code: ErrorCode = ErrorCode.UNAUTHORIZED,
    ) -> None:
        super().__init__(
            error_code=error_code,
            message=message,
            status_code=401,
        )


class AuthorizationError(AppException):
    """Authorization failed."""

    def __init__(self, message: str = "Access denied") -> None:
        super().__init__(
            error_code=ErrorCode.FORBIDDEN,
            message=message,
            status_code=403,
        )


class ValidationError(AppException):
    """Input rejected before any write happens."""

    def __init__(self, message: str, details: Any | None = None) -> None:
        super().__init__(
            error_code=ErrorCode.VALIDATION_ERROR,
            message=message,
            status_code=400,
            details=details,
        )


class NotFoundError(AppException):
    """A referenced profile, match or message does not exist."""

    def __init__(self, error_code: ErrorCode, message: str, details: Any | None = None) -> None:
        super().__init__(
            error_code=error_code,
            message=message,
            status_code=404,
            details=details,
        )


class ProfileNotFoundError(NotFoundError):
    """Profile not found in the catalog."""

    def __init__(self, user_id: str) -> None:
        super().__init__(
            ErrorCode.PROFILE_NOT_FOUND,
            f"Profile not found: {user_id}",
            {"user_id": user_id},
        )


class MatchNotFoundError(NotFoundError):
    """Match not found (or the caller is not part of it)."""

    def __init__(self, match_id: str) -> None:
        super().__init__(
            ErrorCode.MATCH_NOT_FOUND,
            f"Match not found: {match_id}",
            {"match_id": match_id},
        )


class MessageNotFoundError(NotFoundError):
    """Message not found in the given conversation."""

    def __init__(self, match_id: str, message_id: str) -> None:
        super().__init__(
            ErrorCode.MESSAGE_NOT_FOUND,
            f"Message not found: {message_id}",
            {"match_id": match_id, "message_id": message_id},
        )


class ProfileCatalogUnavailableError(AppException):
    """The external profile catalog could not answer."""

    def __init__(self, user_id: str | None = None) -> None:
        super().__init__(
            error_code=ErrorCode.PROFILE_CATALOG_UNAVAILABLE,
            message="Profile catalog is unavailable",
            status_code=503,
            details={"user_id": user_id} if user_id else None,
        )
