"""Tests for TrainerService."""

import pytest
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock

from supabase import AuthError

from modules.tenants.models import ProvisioningPath, ProvisioningResult
from modules.trainers.exceptions import (
    ServiceRoleRequiredError,
    TrainerDeletionError,
    TrainerNotFoundError,
    TrainerOnboardingError,
)
from modules.trainers.models import Trainer, TrialState, trial_status
from modules.trainers.repository import TrainerRepository
from modules.trainers.service import TrainerService
from shared.exceptions import ExternalServiceError

from fakes import FakeSupabase, backend_error

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def db():
    return FakeSupabase(
        {
            "trainers": [
                {
                    "id": "t-1",
                    "email": "ana@example.com",
                    "full_name": "Ana Costa",
                    "is_active": True,
                    "trial_end": (NOW + timedelta(days=3)).isoformat(),
                    "created_at": "2024-01-01T00:00:00+00:00",
                },
                {
                    "id": "t-2",
                    "email": "bruno@example.com",
                    "full_name": "Bruno Silva",
                    "is_active": None,
                    "trial_end": (NOW - timedelta(days=1)).isoformat(),
                    "created_at": "2024-02-01T00:00:00+00:00",
                },
                {
                    "id": "t-3",
                    "email": "carla@example.com",
                    "full_name": "Carla Dias",
                    "is_active": False,
                    "trial_end": None,
                    "created_at": "2024-03-01T00:00:00+00:00",
                },
            ]
        }
    )


@pytest.fixture
def provisioner():
    provisioner = AsyncMock()
    provisioner.provision.return_value = ProvisioningResult(
        trainer_id="new", schema_name="pt_new", success=True, path=ProvisioningPath.EXECUTE_SQL
    )
    return provisioner


@pytest.fixture
def service(db, provisioner, settings):
    return TrainerService(TrainerRepository(db), provisioner, settings, admin_client=db)


class TestTrialStatus:
    def test_rounds_partial_days_up(self):
        status = trial_status(NOW + timedelta(days=2, hours=1), NOW)
        assert status.status == TrialState.ACTIVE
        assert status.days_left == 3

    def test_past_end_is_expired(self):
        assert trial_status(NOW - timedelta(seconds=1), NOW).status == TrialState.EXPIRED

    def test_missing_end_is_expired(self):
        status = trial_status(None, NOW)
        assert status.status == TrialState.EXPIRED
        assert status.days_left == 0


class TestListing:
    @pytest.mark.asyncio
    async def test_newest_first_with_trial(self, service):
        trainers = await service.list_trainers(now=NOW)
        assert [t.id for t in trainers] == ["t-3", "t-2", "t-1"]
        assert trainers[2].trial.days_left == 3

    @pytest.mark.asyncio
    async def test_search_by_name_or_email(self, service):
        assert [t.id for t in await service.list_trainers("SILVA", now=NOW)] == ["t-2"]
        assert [t.id for t in await service.list_trainers("carla@", now=NOW)] == ["t-3"]

    @pytest.mark.asyncio
    async def test_stats_treat_null_active_as_active(self, service):
        stats = await service.stats(now=NOW)
        assert stats.total == 3
        assert stats.active == 2
        assert stats.in_trial == 1

    @pytest.mark.asyncio
    async def test_backend_error_propagates(self, service, db):
        db.fail("trainers", error=backend_error("connection refused"))
        with pytest.raises(ExternalServiceError) as exc_info:
            await service.list_trainers()
        assert exc_info.value.code == "BACKEND_ERROR"


class TestActivation:
    @pytest.mark.asyncio
    async def test_set_active(self, service, db):
        trainer = await service.set_active("t-3", True)
        assert trainer.is_active is True
        assert db.rows("trainers")[2]["is_active"] is True

    @pytest.mark.asyncio
    async def test_toggle(self, service):
        assert (await service.toggle_active("t-1")).is_active is False
        assert (await service.toggle_active("t-2")).is_active is False

    @pytest.mark.asyncio
    async def test_unknown_trainer(self, service):
        with pytest.raises(TrainerNotFoundError):
            await service.set_active("missing", True)


class TestExtendTrial:
    @pytest.mark.asyncio
    async def test_running_trial_extends_from_its_end(self, service):
        trainer = await service.extend_trial("t-1", 7, now=NOW)
        assert trainer.trial_end == NOW + timedelta(days=10)

    @pytest.mark.asyncio
    async def test_expired_trial_extends_from_now(self, service):
        trainer = await service.extend_trial("t-2", 7, now=NOW)
        assert trainer.trial_end == NOW + timedelta(days=7)

    @pytest.mark.asyncio
    async def test_default_length(self, service, settings):
        trainer = await service.extend_trial("t-3", now=NOW)
        assert trainer.trial_end == NOW + timedelta(days=settings.trial_days)


class TestDeletion:
    @pytest.mark.asyncio
    async def test_delete(self, service, db):
        await service.delete_trainer("t-1")
        assert [r["id"] for r in db.rows("trainers")] == ["t-2", "t-3"]

    @pytest.mark.asyncio
    async def test_delete_unknown(self, service):
        with pytest.raises(TrainerNotFoundError):
            await service.delete_trainer("missing")

    @pytest.mark.asyncio
    async def test_silently_blocked_delete_is_an_error(self, provisioner, settings):
        repository = MagicMock()
        repository.get_trainer.return_value = Trainer(id="t-1")
        service = TrainerService(repository, provisioner, settings)

        with pytest.raises(TrainerDeletionError):
            await service.delete_trainer("t-1")
        repository.delete_trainer.assert_called_once_with("t-1")


class TestOnboarding:
    @pytest.mark.asyncio
    async def test_requires_service_role(self, provisioner, settings, db):
        service = TrainerService(TrainerRepository(db), provisioner, settings)
        with pytest.raises(ServiceRoleRequiredError):
            await service.onboard_trainer("new@example.com", "secret123", "New")

    @pytest.mark.asyncio
    async def test_full_workflow(self, service, db, provisioner):
        result = await service.onboard_trainer("new@example.com", "secret123", "New Coach")

        assert result.trainer_created
        assert result.provisioning.success
        assert result.errors == []
        row = next(r for r in db.rows("trainers") if r["id"] == result.trainer_id)
        assert row["full_name"] == "New Coach"
        provisioner.provision.assert_awaited_once_with(result.trainer_id)

    @pytest.mark.asyncio
    async def test_auth_rejection(self, service, db):
        db.auth.admin.create_error = AuthError("Email already registered", "email_exists")
        with pytest.raises(TrainerOnboardingError):
            await service.onboard_trainer("ana@example.com", "secret123", "Ana")

    @pytest.mark.asyncio
    async def test_row_failure_keeps_principal(self, service, db, provisioner):
        db.fail("trainers", action="insert", error=backend_error("duplicate key"))

        result = await service.onboard_trainer("new@example.com", "secret123", "New")

        assert not result.trainer_created
        assert result.errors
        assert "new@example.com" in db.auth.accounts
        provisioner.provision.assert_not_called()
