"""
Seed identities.

Well-known demo accounts with fixed identifiers. They let a fresh
deployment be exercised end to end before any profile rows exist: the
superadmin seed is recognised by email alone, and the trainer and player
seeds resolve to profiles even when their tables are empty.
"""

from typing import Optional

from pydantic import BaseModel, Field


class SeedIdentity(BaseModel):
    """A demo account with a fixed principal id."""

    id: str = Field(..., description="Fixed principal ID (UUID)")
    email: str = Field(..., description="Sign-in email")
    role: str = Field(..., description="Profile role the identity resolves to")
    full_name: str = Field(..., description="Display name")
    trainer_id: Optional[str] = Field(None, description="Owning trainer (players only)")

    model_config = {"frozen": True}


SUPERADMIN_SEED = SeedIdentity(
    id="be9c6165-808a-4335-b90e-22f6d20328bf",
    email="superadmin_pt@sportiko.eu",
    role="superadmin",
    full_name="Super Admin",
)

TRAINER_SEED = SeedIdentity(
    id="d45616a4-d90b-4358-b62c-9005f61e3d84",
    email="trainer_pt@sportiko.eu",
    role="trainer",
    full_name="Demo Trainer",
)

PLAYER_SEED = SeedIdentity(
    id="131dc3dc-eccc-4c00-a2fa-8bf408b4d86c",
    email="player_pt@sportiko.eu",
    role="player",
    full_name="Demo Player",
    trainer_id=TRAINER_SEED.id,
)

SEED_IDENTITIES: tuple[SeedIdentity, ...] = (SUPERADMIN_SEED, TRAINER_SEED, PLAYER_SEED)


def find_seed(principal_id: str, email: str, seeds=SEED_IDENTITIES) -> Optional[SeedIdentity]:
    """
    Match a principal against the seed list.

    A seed matches on its fixed id or on its email, since accounts created
    on a fresh backend receive new ids.
    """
    email = (email or "").lower()
    for seed in seeds:
        if seed.id == principal_id or seed.email.lower() == email:
            return seed
    return None
