"""
Trainer management for the superadmin console.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from supabase import AuthError, Client

from modules.tenants.provisioner import TenantProvisioner
from shared.config import Settings
from shared.exceptions import SportikoError

from .exceptions import (
    ServiceRoleRequiredError,
    TrainerDeletionError,
    TrainerNotFoundError,
    TrainerOnboardingError,
)
from .models import (
    OnboardingResult,
    Trainer,
    TrainerStats,
    TrainerWithTrial,
    TrialState,
    trial_status,
)
from .repository import TrainerRepository

logger = logging.getLogger(__name__)


def _matches(trainer: Trainer, search: str) -> bool:
    needle = search.lower()
    return needle in (trainer.full_name or "").lower() or needle in (trainer.email or "").lower()


class TrainerService:
    """
    Trainer listing, activation, trials, deletion and onboarding.

    Args:
        repository: Trainer rows
        provisioner: Creates the tenant schema of onboarded trainers
        settings: Application settings
        admin_client: Service-role client, required only for onboarding
    """

    def __init__(
        self,
        repository: TrainerRepository,
        provisioner: TenantProvisioner,
        settings: Settings,
        admin_client: Optional[Client] = None,
    ):
        self._repository = repository
        self._provisioner = provisioner
        self._settings = settings
        self._admin = admin_client

    def _require(self, trainer_id: str) -> Trainer:
        trainer = self._repository.get_trainer(trainer_id)
        if trainer is None:
            raise TrainerNotFoundError(trainer_id)
        return trainer

    async def list_trainers(
        self,
        search: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> list[TrainerWithTrial]:
        """Trainers newest first, optionally filtered by name or email."""
        trainers = self._repository.list_trainers()
        if search:
            trainers = [t for t in trainers if _matches(t, search)]
        return [
            TrainerWithTrial(**t.model_dump(), trial=trial_status(t.trial_end, now))
            for t in trainers
        ]

    async def stats(self, now: Optional[datetime] = None) -> TrainerStats:
        trainers = self._repository.list_trainers()
        return TrainerStats(
            total=len(trainers),
            active=sum(1 for t in trainers if t.active),
            in_trial=sum(
                1 for t in trainers if trial_status(t.trial_end, now).status == TrialState.ACTIVE
            ),
        )

    async def set_active(self, trainer_id: str, is_active: bool) -> Trainer:
        trainer = self._repository.update_trainer(trainer_id, {"is_active": is_active})
        if trainer is None:
            raise TrainerNotFoundError(trainer_id)
        logger.info("Trainer %s %s", trainer_id, "activated" if is_active else "deactivated")
        return trainer

    async def toggle_active(self, trainer_id: str) -> Trainer:
        trainer = self._require(trainer_id)
        return await self.set_active(trainer_id, not trainer.active)

    async def extend_trial(
        self,
        trainer_id: str,
        days: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> Trainer:
        """
        Extend a trial.

        The extension starts from the current trial end when it lies in the
        future, otherwise from now.
        """
        trainer = self._require(trainer_id)
        now = now or datetime.now(timezone.utc)
        base = trainer.trial_end if trainer.trial_end and trainer.trial_end > now else now
        new_end = base + timedelta(days=days or self._settings.trial_days)

        updated = self._repository.update_trainer(trainer_id, {"trial_end": new_end.isoformat()})
        if updated is None:
            raise TrainerNotFoundError(trainer_id)
        return updated

    async def delete_trainer(self, trainer_id: str) -> None:
        """
        Delete a trainer row.

        The row must exist beforehand and must be gone afterwards; a delete
        silently filtered by row level security is reported as an error.
        """
        self._require(trainer_id)
        self._repository.delete_trainer(trainer_id)
        if self._repository.get_trainer(trainer_id) is not None:
            logger.error("Trainer %s still exists after deletion", trainer_id)
            raise TrainerDeletionError(trainer_id)
        logger.info("Deleted trainer %s", trainer_id)

    async def onboard_trainer(self, email: str, password: str, full_name: str) -> OnboardingResult:
        """
        Create a trainer account end to end.

        Steps: create the principal (service role), insert the trainer row
        with a trial window, provision the tenant schema. A failure stops the
        workflow and is reported; earlier steps are not undone.
        """
        if self._admin is None:
            raise ServiceRoleRequiredError("Trainer onboarding")

        try:
            response = self._admin.auth.admin.create_user(
                {
                    "email": email,
                    "password": password,
                    "email_confirm": True,
                    "user_metadata": {"full_name": full_name},
                }
            )
        except AuthError as e:
            logger.error("Could not create principal for %s: %s", email, e.message)
            raise TrainerOnboardingError(email, e.message) from e

        trainer_id = str(response.user.id)
        result = OnboardingResult(trainer_id=trainer_id)

        now = datetime.now(timezone.utc)
        try:
            self._repository.create_trainer(
                {
                    "id": trainer_id,
                    "email": email,
                    "full_name": full_name,
                    "trial_start": now.isoformat(),
                    "trial_end": (now + timedelta(days=self._settings.trial_days)).isoformat(),
                }
            )
        except SportikoError as e:
            result.errors.append(f"trainer profile: {e.message}")
            return result
        result.trainer_created = True

        result.provisioning = await self._provisioner.provision(trainer_id)
        result.errors.extend(result.provisioning.errors)
        logger.info("Onboarded trainer %s (schema provisioned: %s)", email, result.provisioning.success)
        return result
