"""
Profile settings: editing one's own profile row and avatar.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from supabase import AuthError, Client

from modules.auth.models import Profile
from modules.auth.profiles import SUPERADMINS_TABLE, TRAINERS_TABLE
from modules.catalog.models import StoredFile
from modules.catalog.storage import AVATARS_BUCKET, StorageService
from shared.models import AuthenticatedUser
from shared.repository import BaseRepository

from .exceptions import ProfileNotEditableError, ProfileRowNotFoundError
from .models import ProfileUpdate, ProfileUpdateResult

logger = logging.getLogger(__name__)

_TABLE_BY_ROLE = {
    "superadmin": SUPERADMINS_TABLE,
    "trainer": TRAINERS_TABLE,
}


class ProfileSettingsService(BaseRepository[ProfileUpdateResult]):
    """
    Args:
        db: Client acting as the user, so row level security applies
        storage: Avatar uploads
        admin_client: Service-role client used to sync the auth display name
    """

    def __init__(self, db: Client, storage: StorageService, admin_client: Optional[Client] = None):
        super().__init__(db)
        self._storage = storage
        self._admin = admin_client

    def _sync_display_name(self, principal: AuthenticatedUser, full_name: str) -> bool:
        try:
            if self._admin is not None:
                self._admin.auth.admin.update_user_by_id(
                    principal.id, {"user_metadata": {"full_name": full_name}}
                )
            else:
                self._db.auth.update_user({"data": {"full_name": full_name}})
        except AuthError as e:
            logger.warning("Failed to update auth metadata for %s: %s", principal.id, e.message)
            return False
        return True

    async def update_profile(
        self,
        principal: AuthenticatedUser,
        profile: Profile,
        changes: ProfileUpdate,
    ) -> ProfileUpdateResult:
        """
        Update the caller's own profile row, chosen by role.

        A changed display name is also written to the auth metadata; failing
        that step does not fail the update.

        Raises:
            ProfileNotEditableError: The role has no editable profile row
            ProfileRowNotFoundError: No row matched (missing, or hidden by RLS)
        """
        table = _TABLE_BY_ROLE.get(profile.role)
        if table is None:
            raise ProfileNotEditableError(profile.role)

        data = changes.model_dump(exclude_unset=True)
        data["updated_at"] = datetime.now(timezone.utc).isoformat()
        result = self._execute(
            self._db.table(table).update(data).eq("id", principal.id),
            "update profile",
            table,
        )
        if not result.data:
            raise ProfileRowNotFoundError(table, principal.id)

        synced = False
        if changes.full_name and changes.full_name != profile.full_name:
            synced = self._sync_display_name(principal, changes.full_name)

        logger.info("Updated %s profile of %s", profile.role, principal.id)
        return ProfileUpdateResult(table=table, updated=result.data[0], metadata_synced=synced)

    async def upload_avatar(
        self,
        principal: AuthenticatedUser,
        filename: str,
        content: bytes,
        content_type: Optional[str] = None,
    ) -> StoredFile:
        """Store an avatar image and return its public URL (not yet saved on the profile)."""
        return self._storage.upload(
            AVATARS_BUCKET, filename, content, content_type, prefix=principal.id
        )
