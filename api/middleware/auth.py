"""
JWT Authentication dependencies.

Extracts the bearer token and validates it through the auth service.
Failures raise ``AuthenticationError`` subclasses, which the application's
exception handlers turn into 401 responses.
"""

from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from modules.auth.exceptions import MissingTokenError
from shared.models import AuthenticatedUser

# Bearer token extractor
bearer_scheme = HTTPBearer(auto_error=False)


def get_access_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> str:
    """The raw bearer token. Raises MissingTokenError when absent."""
    if credentials is None or not credentials.credentials:
        raise MissingTokenError()
    return credentials.credentials


async def get_current_user(token: str = Depends(get_access_token)) -> AuthenticatedUser:
    """
    Dependency that requires authentication.

    Use this for endpoints that require a logged-in user.

    Usage:
        @router.get("/protected")
        async def protected_route(user: AuthenticatedUser = Depends(get_current_user)):
            return {"user_id": user.id}
    """
    from api.dependencies import get_container

    return await get_container().auth.validate_token(token)

