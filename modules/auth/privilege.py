"""
Superadmin classification.

Answers "is the current principal a superadmin" with ordered checks,
cheapest first: the seed email literal, the resolved profile's role, then a
lookup in the superadmins table. The first decisive check wins. Results are
not cached; every call re-runs the checks.
"""

import logging
from typing import Optional

from supabase import Client, PostgrestAPIError

from shared.models import AuthenticatedUser
from shared.repository import fetch_single

from .models import PrivilegeCheck, PrivilegeStatus, Profile, SessionSnapshot
from .profiles import SUPERADMINS_TABLE

logger = logging.getLogger(__name__)


class PrivilegeClassifier:
    def __init__(self, db: Client, superadmin_seed_email: str):
        self._db = db
        self._seed_email = superadmin_seed_email.lower()
        self._pending = 0

    @property
    def loading(self) -> bool:
        """True while a superadmin table lookup is outstanding."""
        return self._pending > 0

    async def classify(
        self,
        principal: Optional[AuthenticatedUser],
        profile: Optional[Profile] = None,
    ) -> PrivilegeStatus:
        if principal is None:
            return PrivilegeStatus(is_superadmin=False)

        if self._seed_email and principal.email.lower() == self._seed_email:
            return PrivilegeStatus(is_superadmin=True, decided_by=PrivilegeCheck.SEED_EMAIL)

        if profile is not None and profile.role != "unresolved":
            return PrivilegeStatus(
                is_superadmin=profile.role == "superadmin",
                decided_by=PrivilegeCheck.PROFILE_ROLE,
            )

        self._pending += 1
        try:
            row = fetch_single(
                self._db.table(SUPERADMINS_TABLE).select("id").eq("id", principal.id)
            )
        except PostgrestAPIError as e:
            logger.error("Error checking superadmin status for %s: %s", principal.id, e.message)
            return PrivilegeStatus(is_superadmin=False)
        finally:
            self._pending -= 1

        return PrivilegeStatus(is_superadmin=row is not None, decided_by=PrivilegeCheck.SUPERADMIN_TABLE)

    async def classify_session(self, snapshot: SessionSnapshot) -> PrivilegeStatus:
        """Classify a session snapshot; a session still resolving reports loading."""
        if snapshot.loading:
            return PrivilegeStatus(loading=True)
        return await self.classify(snapshot.principal, snapshot.profile)
