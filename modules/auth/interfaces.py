"""
Authentication module interface.

Other modules should depend on IAuthService, not the concrete implementation.
This enables testing with mocks and future extraction to a microservice.
"""

from typing import Protocol, runtime_checkable

from shared.models import AuthenticatedUser

from .models import Profile


@runtime_checkable
class IAuthService(Protocol):
    """
    Interface for authentication operations.

    This protocol defines the contract that the auth module exposes
    to other modules. Implementations must provide all these methods.
    """

    async def validate_token(self, token: str) -> AuthenticatedUser:
        """
        Validate a JWT token and return the authenticated user.

        Args:
            token: JWT access token from Supabase Auth

        Returns:
            AuthenticatedUser with user ID and basic info

        Raises:
            AuthenticationError: If token is invalid or expired
        """
        ...

    async def resolve_profile(self, user: AuthenticatedUser) -> Profile:
        """
        Resolve the application profile of an authenticated user.

        Never returns None: principals found in no profile table resolve
        to an UnresolvedProfile (or a fallback trainer profile when so
        configured).
        """
        ...


class ProvisioningOutcome(Protocol):
    success: bool
    errors: list[str]


@runtime_checkable
class ISchemaProvisioner(Protocol):
    """Creates a trainer's tenant schema. Used by the sign-up workflow."""

    async def provision(self, trainer_id: str) -> ProvisioningOutcome:
        ...

