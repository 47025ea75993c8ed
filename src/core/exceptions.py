"""Custom exceptions and error codes."""

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Standardized error codes for the API."""

    # Authentication errors (401)
    UNAUTHORIZED = "UNAUTHORIZED"
    INVALID_TOKEN = "INVALID_TOKEN"

    # Authorization errors (403)
    FORBIDDEN = "FORBIDDEN"

    # Not found errors (404)
    PROFILE_NOT_FOUND = "PROFILE_NOT_FOUND"
    LINK_NOT_FOUND = "LINK_NOT_FOUND"

    # Validation errors (400)
    VALIDATION_ERROR = "VALIDATION_ERROR"
    AVATAR_INVALID = "AVATAR_INVALID"

    # Upstream errors (503)
    UPSTREAM_UNAVAILABLE = "UPSTREAM_UNAVAILABLE"

    # Server errors (500)
    INTERNAL_ERROR = "INTERNAL_ERROR"


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


class ProfileNotFoundError(AppException):
    """Profile not found."""

    def __init__(self, profile_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.PROFILE_NOT_FOUND,
            message=f"Profile not found: {profile_id}",
            status_code=404,
            details={"profile_id": profile_id},
        )


class LinkNotFoundError(AppException):
    """No link at the requested position."""

    def __init__(self, index: int) -> None:
        super().__init__(
            error_code=ErrorCode.LINK_NOT_FOUND,
            message=f"No link at position {index}",
            status_code=404,
            details={"index": index},
        )


class AvatarValidationError(AppException):
    """Avatar upload rejected before reaching storage."""

    def __init__(self, message: str, details: Any | None = None) -> None:
        super().__init__(
            error_code=ErrorCode.AVATAR_INVALID,
            message=message,
            status_code=400,
            details=details,
        )


class UpstreamUnavailableError(AppException):
    """A managed service (record store, object store, identity) failed."""

    def __init__(self, service: str, message: str | None = None) -> None:
        super().__init__(
            error_code=ErrorCode.UPSTREAM_UNAVAILABLE,
            message=message or f"{service} is currently unavailable, please try again",
            status_code=503,
            details={"service": service},
        )
