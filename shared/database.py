"""
Database client factory for Supabase.

Provides the process-wide anonymous client used by every module, an optional
service-role client for administrative operations (schema provisioning, user
creation), and user-authenticated clients for operations respecting RLS.
"""

import logging
from typing import Optional
from supabase import create_client, Client, ClientOptions

from .config import get_settings

logger = logging.getLogger(__name__)

# Used when configuration is missing; every call against them fails at runtime.
PLACEHOLDER_SUPABASE_URL = "https://placeholder.supabase.co"
PLACEHOLDER_SUPABASE_KEY = "placeholder-anon-key"

# Module-level client cache
_client: Optional[Client] = None
_admin_client: Optional[Client] = None
_admin_resolved: bool = False


def _client_info_headers() -> dict[str, str]:
    settings = get_settings()
    return {"X-Client-Info": f"sportiko-trainer/{settings.app_version}"}


def get_supabase_client() -> Client:
    """
    Get the shared Supabase client with the anonymous key.

    Missing configuration does not prevent startup: placeholder values are
    used instead and a warning is logged, so the service comes up in a
    non-functional state and the connectivity probe reports the failure.

    Returns:
        Supabase client configured with the anonymous key
    """
    global _client

    if _client is None:
        settings = get_settings()
        url = settings.supabase_url
        key = settings.supabase_anon_key
        if not url or not key:
            logger.warning(
                "Supabase configuration missing (SUPABASE_URL / SUPABASE_ANON_KEY); "
                "using placeholder values, all backend calls will fail"
            )
            url = url or PLACEHOLDER_SUPABASE_URL
            key = key or PLACEHOLDER_SUPABASE_KEY
        _client = create_client(
            url,
            key,
            options=ClientOptions(headers=_client_info_headers()),
        )

    return _client


def get_supabase_admin_client() -> Optional[Client]:
    """
    Get the Supabase client with the service role key (bypasses RLS).

    Returns:
        Service-role client, or None when no service role key is configured
    """
    global _admin_client, _admin_resolved

    if not _admin_resolved:
        settings = get_settings()
        if settings.supabase_url and settings.supabase_service_role_key:
            _admin_client = create_client(
                settings.supabase_url,
                settings.supabase_service_role_key,
                options=ClientOptions(
                    auto_refresh_token=False,
                    persist_session=False,
                ),
            )
        _admin_resolved = True

    return _admin_client


def get_supabase_user_client(access_token: str) -> Client:
    """
    Get Supabase client authenticated as a specific user.

    Use this for operations that should respect Row Level Security (RLS),
    such as querying a trainer's tenant schema on their behalf.

    Args:
        access_token: JWT access token from Supabase Auth

    Returns:
        Supabase client configured with user's access token
    """
    settings = get_settings()
    if not settings.supabase_url or not settings.supabase_anon_key:
        raise RuntimeError(
            "Supabase configuration missing. "
            "Set SUPABASE_URL and SUPABASE_ANON_KEY environment variables."
        )

    client = create_client(
        settings.supabase_url,
        settings.supabase_anon_key,
        options=ClientOptions(headers=_client_info_headers()),
    )
    client.postgrest.auth(access_token)
    return client


def reset_client_cache() -> None:
    """
    Reset the cached database clients.

    Useful for testing or when configuration changes.
    """
    global _client, _admin_client, _admin_resolved
    _client = None
    _admin_client = None
    _admin_resolved = False
