"""
Synthetic sample data served in simulation mode.

Superadmins have no tenant of their own, so tenant-scoped pages render this
data instead. The same set is served when a live tenant query fails and
``SIMULATE_ON_BACKEND_ERROR`` is enabled. Dates are generated relative to
``now`` so that time-window queries (active homework, trials) behave the
same whenever the fixtures are built.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from modules.auth.seeds import PLAYER_SEED, TRAINER_SEED

SAMPLE_TRAINER_ID = TRAINER_SEED.id
SAMPLE_COACH_ID = "12345678-1234-1234-1234-123456789012"

SAMPLE_PLAYER_IDS = (
    "5f0c3a52-7d3e-4c55-9a0e-3f1b2a6c8d01",
    "5f0c3a52-7d3e-4c55-9a0e-3f1b2a6c8d02",
    "5f0c3a52-7d3e-4c55-9a0e-3f1b2a6c8d03",
)


def _iso(value: datetime) -> str:
    return value.isoformat()


def sample_data(now: Optional[datetime] = None) -> dict[str, list[dict[str, Any]]]:
    """
    Build the fixture tables.

    Contents: three players, two open homework assignments, two unpaid
    orders totalling 125.00 (plus one paid), the matching payments, two
    trainers and the seed player's auth row.
    """
    now = now or datetime.now(timezone.utc)
    p1, p2, p3 = SAMPLE_PLAYER_IDS

    players = [
        {
            "id": p1,
            "name": "John Doe",
            "position": "Forward",
            "birth_date": "2008-04-12",
            "contact": "john.doe@example.com",
            "avatar_url": None,
            "created_at": _iso(now - timedelta(hours=2)),
        },
        {
            "id": p2,
            "name": "Sarah Smith",
            "position": "Midfielder",
            "birth_date": "2009-09-03",
            "contact": "sarah.smith@example.com",
            "avatar_url": None,
            "created_at": _iso(now - timedelta(days=3)),
        },
        {
            "id": p3,
            "name": "Mike Johnson",
            "position": "Goalkeeper",
            "birth_date": "2007-01-27",
            "contact": "mike.johnson@example.com",
            "avatar_url": None,
            "created_at": _iso(now - timedelta(days=10)),
        },
    ]

    homework = [
        {
            "id": "7a1d9e40-1b2c-4d3e-8f90-0a1b2c3d4e01",
            "player_id": p2,
            "title": "Passing accuracy drills",
            "description": "3 x 50 short passes against the wall",
            "due_date": _iso(now + timedelta(days=3)),
            "completed": False,
            "created_at": _iso(now - timedelta(hours=5)),
        },
        {
            "id": "7a1d9e40-1b2c-4d3e-8f90-0a1b2c3d4e02",
            "player_id": p1,
            "title": "Sprint intervals",
            "description": "8 x 30m sprints with 60s rest",
            "due_date": _iso(now + timedelta(days=7)),
            "completed": False,
            "created_at": _iso(now - timedelta(days=1)),
        },
    ]

    orders = [
        {
            "id": "9c2e8f10-3a4b-4c5d-9e6f-7a8b9c0d1e01",
            "player_id": p3,
            "status": "pending",
            "total_amount": 50.00,
            "payment_method": "cash",
            "paid": False,
            "created_at": _iso(now - timedelta(days=1)),
        },
        {
            "id": "9c2e8f10-3a4b-4c5d-9e6f-7a8b9c0d1e02",
            "player_id": p1,
            "status": "pending",
            "total_amount": 75.00,
            "payment_method": "card",
            "paid": False,
            "created_at": _iso(now - timedelta(days=2)),
        },
        {
            "id": "9c2e8f10-3a4b-4c5d-9e6f-7a8b9c0d1e03",
            "player_id": p2,
            "status": "completed",
            "total_amount": 40.00,
            "payment_method": "card",
            "paid": True,
            "created_at": _iso(now - timedelta(days=20)),
        },
    ]

    payments = [
        {"id": o["id"], "player_id": o["player_id"], "amount": o["total_amount"], "paid": o["paid"]}
        for o in orders
    ]

    trainers = [
        {
            "id": SAMPLE_TRAINER_ID,
            "email": TRAINER_SEED.email,
            "full_name": "Demo Trainer",
            "subscription_plan": "basic",
            "subscription_status": "trial",
            "trial_start": _iso(now - timedelta(days=4)),
            "trial_end": _iso(now + timedelta(days=10)),
            "subscription_start": None,
            "subscription_end": None,
            "is_active": True,
            "created_at": _iso(now - timedelta(days=4)),
        },
        {
            "id": SAMPLE_COACH_ID,
            "email": "john.coach@sportiko.eu",
            "full_name": "John Coach",
            "subscription_plan": "pro",
            "subscription_status": "active",
            "trial_start": _iso(now - timedelta(days=60)),
            "trial_end": _iso(now - timedelta(days=46)),
            "subscription_start": _iso(now - timedelta(days=46)),
            "subscription_end": _iso(now + timedelta(days=45)),
            "is_active": True,
            "created_at": _iso(now - timedelta(days=60)),
        },
    ]

    players_auth = [
        {
            "id": PLAYER_SEED.id,
            "email": PLAYER_SEED.email,
            "full_name": "Demo Player",
            "trainer_id": SAMPLE_TRAINER_ID,
            "created_at": _iso(now - timedelta(days=4)),
        },
    ]

    return {
        "players": players,
        "homework": homework,
        "orders": orders,
        "payments": payments,
        "trainers": trainers,
        "players_auth": players_auth,
    }
