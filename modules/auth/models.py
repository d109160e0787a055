"""
Authentication module data models.

These models define the data structures used by the auth module
and exposed to other modules through the interface.
"""

from datetime import datetime
from enum import Enum
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, EmailStr, Field

from shared.models import AuthenticatedUser


class JWTPayload(BaseModel):
    """
    Decoded JWT token payload from Supabase.

    This matches the structure of Supabase Auth JWTs.
    """

    sub: str = Field(..., description="Subject (user ID)")
    email: Optional[str] = Field(None, description="User's email")
    exp: int = Field(..., description="Expiration timestamp")
    iat: int = Field(..., description="Issued at timestamp")
    aud: str = Field(default="authenticated", description="Audience")
    role: str = Field(default="authenticated", description="User role")

    # Supabase-specific claims
    app_metadata: dict = Field(default_factory=dict)
    user_metadata: dict = Field(default_factory=dict)
    email_confirmed_at: Optional[str] = None


# =============================================================================
# Profiles
# =============================================================================


class ProfileSource(str, Enum):
    """How a profile was decided."""

    SEED_EMAIL = "seed_email"          # Superadmin seed email literal
    TABLE = "table"                    # Row in superadmins / trainers / players_auth
    SEED_IDENTITY = "seed_identity"    # Known demo account without a row
    FALLBACK = "fallback"              # Nothing matched


class _ProfileBase(BaseModel):
    id: str = Field(..., description="Principal ID")
    email: str = Field(default="", description="Email address")
    full_name: Optional[str] = Field(None, description="Display name")
    avatar_url: Optional[str] = Field(None, description="Avatar URL")
    source: ProfileSource = Field(..., description="How the profile was decided")

    model_config = {"frozen": True, "extra": "ignore"}


class SuperadminProfile(_ProfileBase):
    role: Literal["superadmin"] = "superadmin"


class TrainerProfile(_ProfileBase):
    role: Literal["trainer"] = "trainer"
    is_active: bool = Field(default=True, description="Whether the trainer account is enabled")
    trial_end: Optional[datetime] = Field(None, description="End of the trial window")
    subscription_plan: Optional[str] = Field(None, description="Plan identifier")
    subscription_status: Optional[str] = Field(None, description="Subscription status")


class PlayerProfile(_ProfileBase):
    role: Literal["player"] = "player"
    trainer_id: Optional[str] = Field(None, description="Owning trainer ID")


class UnresolvedProfile(_ProfileBase):
    """A principal found in no profile table. Grants no access."""

    role: Literal["unresolved"] = "unresolved"
    source: ProfileSource = ProfileSource.FALLBACK


Profile = Annotated[
    Union[SuperadminProfile, TrainerProfile, PlayerProfile, UnresolvedProfile],
    Field(discriminator="role"),
]


class ProfileLookups(BaseModel):
    """Rows found for a principal in each profile table (None if absent)."""

    superadmin_row: Optional[dict[str, Any]] = None
    trainer_row: Optional[dict[str, Any]] = None
    player_row: Optional[dict[str, Any]] = None


# =============================================================================
# Session
# =============================================================================


class SessionState(str, Enum):
    """Session holder lifecycle."""

    UNINITIALIZED = "uninitialized"
    RESOLVING = "resolving"
    AUTHENTICATED = "authenticated"
    UNAUTHENTICATED = "unauthenticated"


class SessionSnapshot(BaseModel):
    """
    Read-only view of the session holder.

    Consumers receive snapshots; the holder is the only writer.
    """

    state: SessionState = SessionState.UNINITIALIZED
    principal: Optional[AuthenticatedUser] = None
    profile: Optional[Profile] = None
    access_token: Optional[str] = Field(None, repr=False)

    model_config = {"frozen": True}

    @property
    def loading(self) -> bool:
        return self.state in (SessionState.UNINITIALIZED, SessionState.RESOLVING)

    @property
    def authenticated(self) -> bool:
        return self.state == SessionState.AUTHENTICATED


class SignUpResult(BaseModel):
    """Outcome of the sign-up workflow. Earlier steps are never rolled back."""

    principal: AuthenticatedUser
    trainer_created: bool = False
    provisioned: bool = False
    errors: list[str] = Field(default_factory=list)


# =============================================================================
# Privilege
# =============================================================================


class PrivilegeCheck(str, Enum):
    """The check that decided a classification."""

    SEED_EMAIL = "seed_email"
    PROFILE_ROLE = "profile_role"
    SUPERADMIN_TABLE = "superadmin_table"
    NONE = "none"


class PrivilegeStatus(BaseModel):
    """Whether the current principal is a superadmin."""

    is_superadmin: bool = False
    loading: bool = False
    decided_by: PrivilegeCheck = PrivilegeCheck.NONE

    model_config = {"frozen": True}


# =============================================================================
# API payloads
# =============================================================================


class SignUpRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=6)
    full_name: str = Field(..., min_length=1)


class SessionInfo(BaseModel):
    """Response of ``GET /api/auth/me``."""

    user: AuthenticatedUser
    profile: Profile
    is_superadmin: bool
    tenant_ready: bool
    tenant_schema: Optional[str] = None
    tenant_mode: Optional[str] = None
