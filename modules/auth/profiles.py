"""
Profile resolution.

``resolve_profile`` is a pure function from a principal and the rows found
for it to exactly one profile variant. ``ProfileService`` performs the
lookups against the shared profile tables and runs it.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from supabase import Client, PostgrestAPIError

from shared.config import Settings
from shared.models import AuthenticatedUser
from shared.repository import fetch_single

from .models import (
    PlayerProfile,
    Profile,
    ProfileLookups,
    ProfileSource,
    SuperadminProfile,
    TrainerProfile,
    UnresolvedProfile,
)
from .seeds import SEED_IDENTITIES, SeedIdentity, find_seed

logger = logging.getLogger(__name__)

SUPERADMINS_TABLE = "superadmins"
TRAINERS_TABLE = "trainers"
PLAYERS_AUTH_TABLE = "players_auth"


def _fields(principal: AuthenticatedUser, row: Optional[dict[str, Any]]) -> dict[str, Any]:
    data = {k: v for k, v in (row or {}).items() if v is not None and k != "role"}
    data["id"] = principal.id
    data.setdefault("email", principal.email)
    if principal.display_name:
        data.setdefault("full_name", principal.display_name)
    return data


def resolve_profile(
    principal: AuthenticatedUser,
    lookups: ProfileLookups,
    *,
    superadmin_seed_email: str,
    seeds: tuple[SeedIdentity, ...] = SEED_IDENTITIES,
    fallback_to_trainer: bool = False,
) -> Profile:
    """
    Decide the profile of a principal.

    Checks run in order and the first decisive one wins:
    superadmin seed email, superadmin row, trainer row, player row, seed
    identity, fallback. Never returns None.

    Args:
        principal: The authenticated principal
        lookups: Rows found in the profile tables
        superadmin_seed_email: Email that is always a superadmin
        seeds: Known demo identities (empty to disable)
        fallback_to_trainer: Give unmatched principals a trainer profile
            instead of an unresolved one

    Returns:
        One of SuperadminProfile, TrainerProfile, PlayerProfile, UnresolvedProfile
    """
    if superadmin_seed_email and principal.email.lower() == superadmin_seed_email.lower():
        return SuperadminProfile(
            **_fields(principal, lookups.superadmin_row),
            source=ProfileSource.SEED_EMAIL,
        )
    if lookups.superadmin_row:
        return SuperadminProfile(**_fields(principal, lookups.superadmin_row), source=ProfileSource.TABLE)
    if lookups.trainer_row:
        return TrainerProfile(**_fields(principal, lookups.trainer_row), source=ProfileSource.TABLE)
    if lookups.player_row:
        return PlayerProfile(**_fields(principal, lookups.player_row), source=ProfileSource.TABLE)

    seed = find_seed(principal.id, principal.email, seeds)
    if seed is not None and seed.role == "trainer":
        return TrainerProfile(
            **_fields(principal, {"full_name": seed.full_name}),
            source=ProfileSource.SEED_IDENTITY,
        )
    if seed is not None and seed.role == "player":
        return PlayerProfile(
            **_fields(principal, {"full_name": seed.full_name, "trainer_id": seed.trainer_id}),
            source=ProfileSource.SEED_IDENTITY,
        )

    if fallback_to_trainer:
        return TrainerProfile(**_fields(principal, None), source=ProfileSource.FALLBACK)
    return UnresolvedProfile(**_fields(principal, None))


class ProfileService:
    """Looks up and resolves profiles against the shared schema."""

    def __init__(self, db: Client, settings: Settings):
        self._db = db
        self._settings = settings

    def _lookup(self, table: str, principal_id: str) -> Optional[dict[str, Any]]:
        try:
            return fetch_single(self._db.table(table).select("*").eq("id", principal_id))
        except PostgrestAPIError as e:
            # RLS commonly hides tables the principal has no business in.
            logger.warning("Profile lookup on %s failed for %s: %s", table, principal_id, e.message)
            return None

    async def load_lookups(self, principal: AuthenticatedUser) -> ProfileLookups:
        """Query the profile tables in resolution order, stopping at the first row."""
        superadmin_row = self._lookup(SUPERADMINS_TABLE, principal.id)
        if superadmin_row:
            return ProfileLookups(superadmin_row=superadmin_row)

        trainer_row = self._lookup(TRAINERS_TABLE, principal.id)
        if trainer_row:
            return ProfileLookups(trainer_row=trainer_row)

        return ProfileLookups(player_row=self._lookup(PLAYERS_AUTH_TABLE, principal.id))

    async def resolve(self, principal: AuthenticatedUser) -> Profile:
        """
        Resolve the principal's profile.

        A trainer seed identity without a trainer row gets one inserted, so
        the demo account behaves like a signed-up trainer from then on.
        """
        if principal.email.lower() == self._settings.superadmin_seed_email.lower():
            lookups = ProfileLookups(superadmin_row=self._lookup(SUPERADMINS_TABLE, principal.id))
        else:
            lookups = await self.load_lookups(principal)

        profile = resolve_profile(
            principal,
            lookups,
            superadmin_seed_email=self._settings.superadmin_seed_email,
            seeds=SEED_IDENTITIES if self._settings.enable_seed_identities else (),
            fallback_to_trainer=self._settings.fallback_trainer_profile,
        )
        logger.debug("Resolved %s as %s (%s)", principal.id, profile.role, profile.source.value)

        if isinstance(profile, TrainerProfile) and profile.source == ProfileSource.SEED_IDENTITY:
            profile = self._create_seed_trainer(profile)
        return profile

    def _create_seed_trainer(self, profile: TrainerProfile) -> TrainerProfile:
        trial_end = datetime.now(timezone.utc) + timedelta(days=self._settings.trial_days)
        row = {
            "id": profile.id,
            "email": profile.email,
            "full_name": profile.full_name,
            "trial_end": trial_end.isoformat(),
        }
        try:
            self._db.table(TRAINERS_TABLE).insert(row).execute()
        except PostgrestAPIError as e:
            logger.warning("Could not create trainer row for seed identity %s: %s", profile.id, e.message)
            return profile
        logger.info("Created trainer row for seed identity %s", profile.email)
        return profile.model_copy(update={"trial_end": trial_end})
