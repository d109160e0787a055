"""
Profiles module.

Self-service profile settings for superadmins and trainers.
"""

from .models import ProfileUpdate, ProfileUpdateResult
from .exceptions import ProfileNotEditableError, ProfileRowNotFoundError
from .service import ProfileSettingsService

__all__ = [
    "ProfileUpdate",
    "ProfileUpdateResult",
    "ProfileNotEditableError",
    "ProfileRowNotFoundError",
    "ProfileSettingsService",
]
