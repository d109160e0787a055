"""
Shared infrastructure for the Sportiko admin service.

This package contains cross-cutting concerns that are used by multiple modules:
- config: Centralized settings management
- database: Supabase client factory
- connection: Connectivity probe and diagnostic config cache
- exceptions: Base exception classes and backend error translation

Note: Business logic should NOT go here. This is for infrastructure only.
"""

from .config import Settings, get_settings
from .database import (
    get_supabase_client,
    get_supabase_admin_client,
    get_supabase_user_client,
    reset_client_cache,
)
from .exceptions import (
    SportikoError,
    NotFoundError,
    ValidationError,
    AuthenticationError,
    AuthorizationError,
    ExternalServiceError,
    from_backend_error,
)
from .models import AuthenticatedUser

__all__ = [
    "Settings",
    "get_settings",
    "get_supabase_client",
    "get_supabase_admin_client",
    "get_supabase_user_client",
    "reset_client_cache",
    "SportikoError",
    "NotFoundError",
    "ValidationError",
    "AuthenticationError",
    "AuthorizationError",
    "ExternalServiceError",
    "from_backend_error",
    "AuthenticatedUser",
]
