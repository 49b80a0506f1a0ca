"""
Error hierarchy for content access failures.

Every error carries a code and an HTTP status; the exception handler in
src.main turns them into responses. Access failures terminate
the request: callers must not catch them to continue serving.
"""

from typing import Any, Optional


class AppError(Exception):
    """Base exception for all application errors."""

    code: str = "APP_ERROR"
    http_status: int = 500

    def __init__(self, message: str, *, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_response(self) -> dict:
        """REST error envelope. Never includes details for 5xx errors."""
        body: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details and self.http_status < 500:
            body["details"] = self.details
        return {"error": body}


class NotFoundError(AppError):
    """Resource or entity absent, or hidden from the caller. Always a generic 404."""

    code = "NOT_FOUND"
    http_status = 404

    def __init__(self, message: str = "File not found", **kwargs: Any):
        super().__init__(message, **kwargs)


class AuthRequiredError(AppError):
    """No authenticated session; the client should log in and retry."""

    code = "AUTH_REQUIRED"
    http_status = 401

    def __init__(self, message: str = "Authentication required", **kwargs: Any):
        super().__init__(message, **kwargs)


class ForbiddenError(AppError):
    """Authenticated, but lacking enrolment or elevated privilege."""

    code = "FORBIDDEN"
    http_status = 403

    def __init__(self, message: str = "Access denied", **kwargs: Any):
        super().__init__(message, **kwargs)


class ConfigurationError(AppError):
    """A serving strategy (or other plugin) is registered but malformed. Fatal."""

    code = "CONFIGURATION_ERROR"
    http_status = 500


class StorageError(AppError):
    """Database or file store failure. Propagated, never retried."""

    code = "STORAGE_ERROR"
    http_status = 500


class CodingError(AppError):
    """API misuse by calling code."""

    code = "CODING_ERROR"
    http_status = 500
