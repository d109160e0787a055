"""Tests for superadmin classification."""

import pytest

from modules.auth.models import (
    PrivilegeCheck,
    ProfileSource,
    SessionSnapshot,
    SessionState,
    TrainerProfile,
    UnresolvedProfile,
)
from modules.auth.privilege import PrivilegeClassifier
from shared.models import AuthenticatedUser

from fakes import FakeSupabase, backend_error

SEED_EMAIL = "superadmin_pt@sportiko.eu"


@pytest.fixture
def db():
    return FakeSupabase({"superadmins": [{"id": "root-1"}]})


@pytest.fixture
def classifier(db):
    return PrivilegeClassifier(db, SEED_EMAIL)


@pytest.mark.asyncio
async def test_no_principal(classifier, db):
    status = await classifier.classify(None)
    assert not status.is_superadmin
    assert db.queries == []


@pytest.mark.asyncio
async def test_seed_email_short_circuits(classifier, db):
    status = await classifier.classify(AuthenticatedUser(id="x", email=SEED_EMAIL.upper()))
    assert status.is_superadmin
    assert status.decided_by == PrivilegeCheck.SEED_EMAIL
    assert db.queries == []


@pytest.mark.asyncio
async def test_profile_role_decides_before_table(classifier, db):
    principal = AuthenticatedUser(id="root-1", email="root@example.com")
    profile = TrainerProfile(id="root-1", email="root@example.com", source=ProfileSource.TABLE)

    status = await classifier.classify(principal, profile)

    assert not status.is_superadmin
    assert status.decided_by == PrivilegeCheck.PROFILE_ROLE
    assert db.queries == []


@pytest.mark.asyncio
async def test_table_lookup_for_unresolved_profile(classifier):
    principal = AuthenticatedUser(id="root-1", email="root@example.com")
    status = await classifier.classify(principal, UnresolvedProfile(id="root-1"))
    assert status.is_superadmin
    assert status.decided_by == PrivilegeCheck.SUPERADMIN_TABLE


@pytest.mark.asyncio
async def test_table_lookup_miss(classifier):
    status = await classifier.classify(AuthenticatedUser(id="nobody", email="n@example.com"))
    assert not status.is_superadmin
    assert status.decided_by == PrivilegeCheck.SUPERADMIN_TABLE
    assert not classifier.loading


@pytest.mark.asyncio
async def test_lookup_error_is_not_superadmin(classifier, db):
    db.fail("superadmins", error=backend_error())
    status = await classifier.classify(AuthenticatedUser(id="root-1", email="root@example.com"))
    assert not status.is_superadmin
    assert status.decided_by == PrivilegeCheck.NONE
    assert not classifier.loading


@pytest.mark.asyncio
async def test_resolving_session_reports_loading(classifier, db):
    snapshot = SessionSnapshot(
        state=SessionState.RESOLVING,
        principal=AuthenticatedUser(id="root-1", email="root@example.com"),
    )
    status = await classifier.classify_session(snapshot)
    assert status.loading
    assert not status.is_superadmin
    assert db.queries == []
