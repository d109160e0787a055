"""
Shared data models used across modules.

These models are shared infrastructure, not business logic.
Module-specific models should stay in their respective module directories.
"""

from datetime import datetime
from typing import Any, Optional
from pydantic import BaseModel, Field


class AuthenticatedUser(BaseModel):
    """
    Represents an authenticated principal issued by Supabase Auth.

    This is the minimal identity needed for most operations. It is built
    either from a validated JWT (API requests) or from a Supabase session
    (the session holder).
    """

    id: str = Field(..., description="User ID (UUID from Supabase)")
    email: str = Field(..., description="User's email address")
    email_verified: bool = Field(default=False, description="Whether email is verified")
    display_name: Optional[str] = Field(None, description="Display name from user metadata")

    created_at: Optional[datetime] = Field(None, description="Account creation time")
    last_sign_in: Optional[datetime] = Field(None, description="Last sign-in time")

    model_config = {
        "frozen": True,  # Make immutable for safety
        "extra": "ignore",  # Ignore extra fields from JWT
    }

    @classmethod
    def from_supabase_user(cls, user: Any) -> "AuthenticatedUser":
        """Build a principal from a supabase-py ``User`` object."""
        metadata = getattr(user, "user_metadata", None) or {}
        return cls(
            id=str(user.id),
            email=user.email or "",
            email_verified=getattr(user, "email_confirmed_at", None) is not None,
            display_name=metadata.get("full_name"),
            created_at=getattr(user, "created_at", None),
            last_sign_in=getattr(user, "last_sign_in_at", None),
        )
