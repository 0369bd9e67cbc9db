# core/errors.py
from typing import Any, Dict, List, Optional


class AppError(Exception):
    """
    Base for every error the service reports on purpose.
    Carries the HTTP status and a stable error type for the failure envelope.
    """

    status_code: int = 500
    error_type: str = "internal_error"

    def __init__(self, message: str, *, details: Optional[List[Dict[str, Any]]] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_envelope(self) -> Dict[str, Any]:
        error: Dict[str, Any] = {"type": self.error_type, "message": self.message}
        if self.details:
            error["details"] = self.details
        return {"error": error}


class ValidationError(AppError):
    """Malformed or missing expense/query fields. Never retried."""

    status_code = 400
    error_type = "validation_error"

    def __init__(self, errors: List[Dict[str, Any]], message: str = "Invalid expense data"):
        super().__init__(message, details=errors)
        self.errors = errors

    @property
    def fields(self) -> List[str]:
        return [e["field"] for e in self.errors]


class AuthError(AppError):
    """Bad API key (401) or a chat identity with no linked account (404)."""

    status_code = 401
    error_type = "auth_error"

    def __init__(self, message: str = "Unauthorized", *, status_code: int = 401):
        super().__init__(message)
        self.status_code = status_code


class NotFoundError(AppError):
    status_code = 404
    error_type = "not_found"


class UpstreamError(AppError):
    """Store or completion-service failure. Logged, surfaced generically, not retried."""

    status_code = 502
    error_type = "upstream_error"

    def __init__(self, message: str = "Upstream service failed", *, status_code: int = 502):
        super().__init__(message)
        self.status_code = status_code
