"""Custom exception hierarchy for the paper portal API.

Every exception carries an HTTP status code and a stable error code; the global
handlers in `portal.middleware.error_handler` render them uniformly.
"""

from typing import Any, Optional


class BaseAPIException(Exception):
    """Base class for all API exceptions."""

    status_code: int = 500
    error_code: str = "INTERNAL_SERVER_ERROR"

    def __init__(
        self,
        message: str,
        details: Optional[dict[str, Any]] = None,
        status_code: Optional[int] = None,
        error_code: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.details = details
        if status_code is not None:
            self.status_code = status_code
        if error_code is not None:
            self.error_code = error_code


# ============================================================================
# Authentication (401)
# ============================================================================


class MissingTokenError(BaseAPIException):
    status_code = 401
    error_code = "MISSING_TOKEN"

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message)


class InvalidTokenError(BaseAPIException):
    status_code = 401
    error_code = "INVALID_TOKEN"

    def __init__(self, message: str = "Invalid authentication token"):
        super().__init__(message)


# ============================================================================
# Authorization (403)
# ============================================================================


class ForbiddenError(BaseAPIException):
    status_code = 403
    error_code = "FORBIDDEN"

    def __init__(self, message: str = "You do not have permission to perform this action"):
        super().__init__(message)


# ============================================================================
# Lookup (404)
# ============================================================================


class ResourceNotFoundError(BaseAPIException):
    status_code = 404
    error_code = "RESOURCE_NOT_FOUND"

    def __init__(self, resource_type: str, resource_id: str):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            details={"resource_type": resource_type, "resource_id": resource_id},
        )


# ============================================================================
# Validation (400 / 413 / 415)
# ============================================================================


class ValidationError(BaseAPIException):
    status_code = 400
    error_code = "VALIDATION_ERROR"


class InvalidTransitionError(ValidationError):
    error_code = "INVALID_TRANSITION"

    def __init__(self, current: str, target: str, reason: Optional[str] = None):
        message = f"Cannot move paper from '{current}' to '{target}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message, details={"current_status": current, "target_status": target})


class FileTooLargeError(ValidationError):
    status_code = 413
    error_code = "FILE_TOO_LARGE"

    def __init__(self, size: int, limit: int):
        super().__init__(
            f"File exceeds the maximum upload size of {limit // (1024 * 1024)} MB",
            details={"size": size, "limit": limit},
        )


class UnsupportedFileTypeError(ValidationError):
    status_code = 415
    error_code = "UNSUPPORTED_FILE_TYPE"

    def __init__(self, mime_type: str, allowed: list[str]):
        super().__init__(
            "Only .pdf and .docx files are allowed",
            details={"mime_type": mime_type, "allowed": allowed},
        )


# ============================================================================
# Conflicts (409)
# ============================================================================


class ConflictError(BaseAPIException):
    status_code = 409
    error_code = "CONFLICT"


# ============================================================================
# Infrastructure (5xx)
# ============================================================================


class DatabaseError(BaseAPIException):
    status_code = 500
    error_code = "DATABASE_ERROR"


class AdvisoryServiceError(BaseAPIException):
    status_code = 502
    error_code = "ADVISORY_UNAVAILABLE"

    def __init__(self, kind: str, message: str = "AI analysis is currently unavailable"):
        super().__init__(message, details={"kind": kind})
        self.kind = kind


class LLMTimeoutError(BaseAPIException):
    status_code = 504
    error_code = "LLM_TIMEOUT"

    def __init__(self, provider: str, timeout_seconds: float):
        super().__init__(
            f"LLM provider '{provider}' did not respond within {timeout_seconds}s",
            details={"provider": provider, "timeout_seconds": timeout_seconds},
        )
        self.provider = provider
        self.timeout_seconds = timeout_seconds
