"""
Authentication service implementation.

Validates Supabase JWT tokens and resolves application profiles.
"""

from datetime import datetime, timezone
from typing import Optional
import jwt

from shared.config import Settings, get_settings
from shared.database import get_supabase_client
from shared.models import AuthenticatedUser

from .interfaces import IAuthService
from .models import JWTPayload, Profile
from .profiles import ProfileService
from .exceptions import (
    InvalidTokenError,
    ExpiredTokenError,
    MissingTokenError,
)


class AuthService(IAuthService):
    """
    Implementation of the authentication service.

    Uses Supabase JWT tokens for authentication and the shared profile
    tables (superadmins, trainers, players_auth) for role resolution.
    """

    def __init__(self, settings: Optional[Settings] = None, profiles: Optional[ProfileService] = None):
        self._settings = settings or get_settings()
        self._profiles = profiles or ProfileService(get_supabase_client(), self._settings)

    @property
    def profiles(self) -> ProfileService:
        return self._profiles

    async def validate_token(self, token: str) -> AuthenticatedUser:
        """
        Validate a JWT token and return the authenticated user.

        This implementation validates Supabase JWTs using the JWT secret.
        """
        if not token:
            raise MissingTokenError()

        try:
            # Decode and validate the JWT
            payload = jwt.decode(
                token,
                self._settings.supabase_jwt_secret,
                algorithms=["HS256"],
                audience="authenticated",
            )

            jwt_payload = JWTPayload(**payload)

            return AuthenticatedUser(
                id=jwt_payload.sub,
                email=jwt_payload.email or "",
                email_verified=jwt_payload.email_confirmed_at is not None,
                display_name=jwt_payload.user_metadata.get("full_name"),
                last_sign_in=datetime.fromtimestamp(jwt_payload.iat, tz=timezone.utc),
            )

        except jwt.ExpiredSignatureError:
            raise ExpiredTokenError()
        except jwt.InvalidTokenError as e:
            raise InvalidTokenError(str(e))

    async def resolve_profile(self, user: AuthenticatedUser) -> Profile:
        return await self._profiles.resolve(user)


# Module-level instance getter
_service_instance: Optional[AuthService] = None


def get_auth_service() -> AuthService:
    """Get the auth service singleton."""
    global _service_instance
    if _service_instance is None:
        _service_instance = AuthService()
    return _service_instance


def reset_auth_service() -> None:
    """Reset the auth service singleton (for testing)."""
    global _service_instance
    _service_instance = None
