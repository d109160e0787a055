"""
Base exception classes for the Sportiko admin service.

Each module should define its own exceptions that inherit from these bases.
This enables consistent error handling across the application.
"""

from typing import Optional, Any

from supabase import PostgrestAPIError

# PostgREST: "JSON object requested, multiple (or no) rows returned"
NO_ROWS_CODE = "PGRST116"
# PostgreSQL: insufficient_privilege
PERMISSION_DENIED_CODE = "42501"


class SportikoError(Exception):
    """
    Base exception for all Sportiko errors.

    All custom exceptions should inherit from this class.
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


class NotFoundError(SportikoError):
    """Resource not found."""

    pass


class ValidationError(SportikoError):
    """Input validation failed."""

    pass


class AuthenticationError(SportikoError):
    """Authentication failed (invalid or missing credentials)."""

    pass


class AuthorizationError(SportikoError):
    """Authorization failed (insufficient permissions or RLS rejection)."""

    pass


class ExternalServiceError(SportikoError):
    """Error communicating with an external service."""

    def __init__(
        self,
        message: str,
        service: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message, code, details)
        self.service = service
        self.details["service"] = service


def is_no_rows_error(error: BaseException) -> bool:
    """Whether a backend error is the PostgREST "no rows returned" case."""
    return isinstance(error, PostgrestAPIError) and error.code == NO_ROWS_CODE


def is_permission_denied(error: BaseException) -> bool:
    """
    Whether a backend error is an authorization / RLS rejection.

    PostgREST does not give RLS rejections a dedicated shape, so besides the
    SQLSTATE the message text is checked for "permission denied".
    """
    if isinstance(error, PostgrestAPIError) and error.code == PERMISSION_DENIED_CODE:
        return True
    message = getattr(error, "message", None) or str(error)
    return "permission denied" in str(message).lower()


def from_backend_error(
    error: BaseException,
    action: str,
    resource: Optional[str] = None,
) -> SportikoError:
    """
    Convert a Supabase client error into the Sportiko exception hierarchy.

    Args:
        error: The exception raised by the Supabase client
        action: Short description of what was attempted (for the message)
        resource: Optional table, RPC or bucket name

    Returns:
        A SportikoError subclass instance (not raised)
    """
    details: dict[str, Any] = {}
    if resource:
        details["resource"] = resource
    backend_message = getattr(error, "message", None) or str(error)
    backend_code = getattr(error, "code", None)
    if backend_code:
        details["backend_code"] = backend_code

    if is_no_rows_error(error):
        return NotFoundError(f"Failed to {action}: not found", code="NOT_FOUND", details=details)
    if is_permission_denied(error):
        return AuthorizationError(
            f"Failed to {action}: permission denied",
            code="PERMISSION_DENIED",
            details=details,
        )
    return ExternalServiceError(
        f"Failed to {action}: {backend_message}",
        service="supabase",
        code="BACKEND_ERROR",
        details=details,
    )
