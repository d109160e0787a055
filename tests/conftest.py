"""
Shared test fixtures and utilities.

This module provides common test infrastructure used across all test modules.
"""

import pytest
from datetime import datetime, timezone, timedelta
import jwt  # PyJWT
from fastapi.testclient import TestClient

from api import app
from api.dependencies import ServiceContainer, reset_container, set_container
from modules.auth.service import reset_auth_service
from shared.config import Settings

from fakes import FakeSupabase


# Test JWT secret (only for testing)
TEST_JWT_SECRET = "test-secret-key-for-testing-only"

SUPERADMIN_EMAIL = "superadmin_pt@sportiko.eu"
TRAINER_ID = "0b7c6f0e-8a51-4f4e-9d0a-6c3f2b1e9a11"
TRAINER_EMAIL = "coach@example.com"
OTHER_TRAINER_ID = "3e2d1c0b-9a8f-4e7d-8c6b-5a4f3e2d1c0b"
PLAYER_ID = "6a5b4c3d-2e1f-4a0b-9c8d-7e6f5a4b3c2d"


def create_test_token(
    user_id: str = "test-user-123",
    email: str = "test@example.com",
    expired: bool = False,
    email_verified: bool = True,
    secret: str = TEST_JWT_SECRET,
    audience: str = "authenticated",
) -> str:
    """
    Create a test JWT token for authentication.

    Args:
        user_id: User ID to include in the token
        email: Email to include in the token
        expired: If True, creates an expired token
        email_verified: Whether the email should be marked as verified

    Returns:
        JWT token string
    """
    now = datetime.now(timezone.utc)
    exp = now - timedelta(hours=1) if expired else now + timedelta(hours=1)

    payload = {
        "sub": user_id,
        "email": email,
        "email_confirmed_at": now.isoformat() if email_verified else None,
        "aud": audience,
        "role": "authenticated",
        "exp": int(exp.timestamp()),
        "iat": int(now.timestamp()),
    }
    return jwt.encode(payload, secret, algorithm="HS256")


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture(autouse=True)
def reset_auth_singleton():
    """Reset the auth service singleton before and after each test."""
    reset_auth_service()
    yield
    reset_auth_service()


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings isolated from the environment and the working directory."""
    return Settings(
        _env_file=None,
        supabase_url="https://fake.supabase.co",
        supabase_anon_key="fake-anon-key-0123456789abcdef",
        supabase_service_role_key="fake-service-role-key",
        supabase_jwt_secret=TEST_JWT_SECRET,
        superadmin_seed_email=SUPERADMIN_EMAIL,
        connection_cache_path=str(tmp_path / "db_config.json"),
    )


@pytest.fixture
def fake_db() -> FakeSupabase:
    """Backend with one trainer and one player of that trainer."""
    return FakeSupabase(
        {
            "trainers": [
                {
                    "id": TRAINER_ID,
                    "email": TRAINER_EMAIL,
                    "full_name": "Coach Carter",
                    "is_active": True,
                    "subscription_status": "trial",
                    "trial_end": (datetime.now(timezone.utc) + timedelta(days=10)).isoformat(),
                    "created_at": "2024-01-01T00:00:00+00:00",
                }
            ],
            "players_auth": [
                {"id": PLAYER_ID, "email": "player@example.com", "trainer_id": TRAINER_ID}
            ],
        }
    )


@pytest.fixture
def container(settings, fake_db) -> ServiceContainer:
    """Install a container wired to the fake backend for the test's duration."""
    container = ServiceContainer(
        settings=settings,
        client=fake_db,
        admin_client=fake_db,
        user_client_factory=lambda token: fake_db,
    )
    set_container(container)
    yield container
    reset_container()


@pytest.fixture
def client(container) -> TestClient:
    return TestClient(app)


@pytest.fixture
def superadmin_headers() -> dict[str, str]:
    return bearer(create_test_token("be9c6165-808a-4335-b90e-22f6d20328bf", SUPERADMIN_EMAIL))


@pytest.fixture
def trainer_headers() -> dict[str, str]:
    return bearer(create_test_token(TRAINER_ID, TRAINER_EMAIL))


@pytest.fixture
def player_headers() -> dict[str, str]:
    return bearer(create_test_token(PLAYER_ID, "player@example.com"))


@pytest.fixture
def stranger_headers() -> dict[str, str]:
    """A valid principal found in no profile table."""
    return bearer(create_test_token("9d8c7b6a-5f4e-4d3c-8b2a-1f0e9d8c7b6a", "stranger@example.com"))
