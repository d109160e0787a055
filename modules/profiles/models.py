"""
Profile settings models.
"""

from typing import Optional

from pydantic import BaseModel, Field


class ProfileUpdate(BaseModel):
    """Editable profile fields; only fields that were set are written."""

    full_name: Optional[str] = Field(None, min_length=1, description="Display name")
    bio: Optional[str] = None
    phone: Optional[str] = None
    avatar_url: Optional[str] = None


class ProfileUpdateResult(BaseModel):
    table: str = Field(..., description="Profile table that was updated")
    updated: dict = Field(default_factory=dict, description="Row as stored")
    metadata_synced: bool = Field(
        False, description="Whether the auth display name was updated as well"
    )
