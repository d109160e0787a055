"""
Authentication module.

Handles JWT validation, profile resolution, the session holder and
superadmin classification.

Public API:
- IAuthService: Interface for auth operations
- resolve_profile / ProfileService: Role resolution over the profile tables
- SessionHolder: Observable owner of the current session
- PrivilegeClassifier: "is superadmin" checks
- Profile variants: SuperadminProfile, TrainerProfile, PlayerProfile, UnresolvedProfile
- Auth exceptions: InvalidTokenError, InvalidCredentialsError, etc.
"""

from .interfaces import IAuthService, ISchemaProvisioner
from .models import (
    JWTPayload,
    Profile,
    ProfileSource,
    ProfileLookups,
    SuperadminProfile,
    TrainerProfile,
    PlayerProfile,
    UnresolvedProfile,
    SessionState,
    SessionSnapshot,
    SignUpResult,
    PrivilegeCheck,
    PrivilegeStatus,
)
from .exceptions import (
    InvalidTokenError,
    ExpiredTokenError,
    MissingTokenError,
    InvalidCredentialsError,
    SignUpError,
    ProfileNotResolvedError,
    InsufficientPermissionsError,
)
from .seeds import SeedIdentity, SEED_IDENTITIES, SUPERADMIN_SEED, TRAINER_SEED, PLAYER_SEED
from .profiles import resolve_profile, ProfileService
from .privilege import PrivilegeClassifier
from .session import SessionHolder

__all__ = [
    # Interface
    "IAuthService",
    "ISchemaProvisioner",
    # Models
    "JWTPayload",
    "Profile",
    "ProfileSource",
    "ProfileLookups",
    "SuperadminProfile",
    "TrainerProfile",
    "PlayerProfile",
    "UnresolvedProfile",
    "SessionState",
    "SessionSnapshot",
    "SignUpResult",
    "PrivilegeCheck",
    "PrivilegeStatus",
    # Seeds
    "SeedIdentity",
    "SEED_IDENTITIES",
    "SUPERADMIN_SEED",
    "TRAINER_SEED",
    "PLAYER_SEED",
    # Services
    "resolve_profile",
    "ProfileService",
    "PrivilegeClassifier",
    "SessionHolder",
    # Exceptions
    "InvalidTokenError",
    "ExpiredTokenError",
    "MissingTokenError",
    "InvalidCredentialsError",
    "SignUpError",
    "ProfileNotResolvedError",
    "InsufficientPermissionsError",
]
