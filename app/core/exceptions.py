"""
Custom exception classes for the GitGud application.
Provides structured error handling with machine-readable error codes.
"""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Error codes shared with the frontend and the browser extension"""

    # Authentication errors (401)
    AUTH_NOT_AUTHENTICATED = "AUTH_NOT_AUTHENTICATED"
    AUTH_TOKEN_INVALID = "AUTH_TOKEN_INVALID"
    AUTH_OAUTH_FAILED = "AUTH_OAUTH_FAILED"

    # Authorization errors (403)
    AUTHZ_FORBIDDEN = "AUTHZ_FORBIDDEN"

    # Resource errors (404, 409)
    RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"
    RESOURCE_CONFLICT = "RESOURCE_CONFLICT"

    # Validation errors (400, 422)
    BAD_REQUEST = "BAD_REQUEST"
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # PVP match rules (400)
    MATCH_SELF_JOIN = "MATCH_SELF_JOIN"
    MATCH_FULL = "MATCH_FULL"

    # Rate limiting (429)
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"

    # Upstream services (502)
    GITHUB_ERROR = "GITHUB_ERROR"
    LLM_ERROR = "LLM_ERROR"
    TTS_ERROR = "TTS_ERROR"

    # Server errors (500+)
    SERVER_ERROR = "SERVER_ERROR"
    SERVER_UNAVAILABLE = "SERVER_UNAVAILABLE"


class AppException(Exception):
    """
    Base exception class for application errors.
    All custom exceptions should inherit from this class.
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.SERVER_ERROR,
        status_code: int = 500,
        field: str | None = None,
        metadata: dict[str, Any] | None = None,
    ):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.field = field
        self.metadata = metadata or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to response dictionary"""
        response = {
            "detail": self.message,
            "code": self.code.value,
        }
        if self.field:
            response["field"] = self.field
        if self.metadata:
            response["metadata"] = self.metadata
        return response


# Authentication Errors (401)


class AuthenticationError(AppException):
    """Caller identity is missing or unusable"""

    def __init__(
        self,
        message: str = "Not authenticated",
        code: ErrorCode = ErrorCode.AUTH_NOT_AUTHENTICATED,
    ):
        super().__init__(
            message=message,
            code=code,
            status_code=401,
        )


class TokenInvalidError(AuthenticationError):
    """Session token is invalid or expired"""

    def __init__(self, message: str = "Session token is invalid or expired"):
        super().__init__(message=message, code=ErrorCode.AUTH_TOKEN_INVALID)


# Authorization Errors (403)


class AuthorizationError(AppException):
    """Caller is authenticated but not allowed to do this"""

    def __init__(self, message: str = "You are not allowed to do this"):
        super().__init__(
            message=message,
            code=ErrorCode.AUTHZ_FORBIDDEN,
            status_code=403,
        )


# Resource Errors (404, 409)


class NotFoundError(AppException):
    """Resource not found"""

    def __init__(
        self,
        message: str = "Requested resource was not found",
        resource: str | None = None,
    ):
        metadata = {"resource": resource} if resource else None
        super().__init__(
            message=message,
            code=ErrorCode.RESOURCE_NOT_FOUND,
            status_code=404,
            metadata=metadata,
        )


class ConflictError(AppException):
    """Resource conflict"""

    def __init__(
        self,
        message: str = "Request conflicts with the current state",
        field: str | None = None,
    ):
        super().__init__(
            message=message,
            code=ErrorCode.RESOURCE_CONFLICT,
            status_code=409,
            field=field,
        )


# Bad requests (400)


class BadRequestError(AppException):
    """Request is well-formed but cannot be served"""

    def __init__(self, message: str, field: str | None = None):
        super().__init__(
            message=message,
            code=ErrorCode.BAD_REQUEST,
            status_code=400,
            field=field,
        )


# PVP match rules (400)


class MatchPolicyError(AppException):
    """A match operation was refused by the match rules"""

    def __init__(self, message: str, code: ErrorCode):
        super().__init__(message=message, code=code, status_code=400)


class CannotJoinOwnMatchError(MatchPolicyError):
    def __init__(self, message: str = "Cannot join your own match"):
        super().__init__(message=message, code=ErrorCode.MATCH_SELF_JOIN)


class MatchFullError(MatchPolicyError):
    def __init__(self, message: str = "Match is already full"):
        super().__init__(message=message, code=ErrorCode.MATCH_FULL)


# Rate Limiting (429)


class RateLimitError(AppException):
    """Rate limit exceeded"""

    def __init__(
        self,
        message: str = "Rate limit exceeded. Please slow down",
        retry_after: int = 60,
    ):
        super().__init__(
            message=message,
            code=ErrorCode.RATE_LIMIT_EXCEEDED,
            status_code=429,
            metadata={"retry_after": retry_after},
        )


# Upstream Errors (502)


class UpstreamServiceError(AppException):
    """A third-party API call failed"""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.SERVER_UNAVAILABLE,
        metadata: dict[str, Any] | None = None,
    ):
        super().__init__(
            message=message,
            code=code,
            status_code=502,
            metadata=metadata,
        )


# Server Errors (503)


class ServiceUnavailableError(AppException):
    """Feature is not configured on this deployment"""

    def __init__(self, message: str = "Service is not configured"):
        super().__init__(
            message=message,
            code=ErrorCode.SERVER_UNAVAILABLE,
            status_code=503,
        )


