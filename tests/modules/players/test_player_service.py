"""Tests for the trainer console services."""

import pytest
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from modules.auth.models import ProfileSource, SuperadminProfile, TrainerProfile
from modules.players.exceptions import PlayerNotFoundError
from modules.players.models import HomeworkCreate, PlayerCreate, PlayerUpdate
from modules.players.service import OverviewService, PlayerService, search_expression
from modules.tenants.resolver import TenantResolver
from modules.tenants.schema import tenant_schema_name
from shared.models import AuthenticatedUser

from fakes import FakeSupabase

TRAINER_ID = "0b7c6f0e-8a51-4f4e-9d0a-6c3f2b1e9a11"
SCHEMA = tenant_schema_name(TRAINER_ID)
NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def db():
    db = FakeSupabase()
    db.seed(
        "players",
        [
            {"id": "p1", "name": "Ana Jorge", "position": "Forward", "created_at": "2024-01-01"},
            {"id": "p2", "name": "Rui Costa", "position": "Goalkeeper", "created_at": "2024-02-01"},
        ],
        schema=SCHEMA,
    )
    db.seed(
        "homework",
        [
            {"id": "h1", "title": "Juggling", "due_date": (NOW + timedelta(days=2)).isoformat(), "created_at": "2024-05-01"},
            {"id": "h2", "title": "Old drill", "due_date": (NOW - timedelta(days=2)).isoformat(), "created_at": "2024-04-01"},
        ],
        schema=SCHEMA,
    )
    db.seed(
        "orders",
        [
            {"id": "o1", "total_amount": 30.0, "paid": False},
            {"id": "o2", "total_amount": 12.5, "paid": False},
            {"id": "o3", "total_amount": 99.0, "paid": True},
        ],
        schema=SCHEMA,
    )
    return db


def trainer_service(db, settings):
    profile = TrainerProfile(id=TRAINER_ID, email="coach@example.com", source=ProfileSource.TABLE)
    resolver = TenantResolver(db, AuthenticatedUser(id=TRAINER_ID, email="coach@example.com"), profile, settings)
    return PlayerService(resolver)


class TestSearchExpression:
    def test_matches_name_and_position(self):
        assert search_expression("jo") == "name.ilike.%jo%,position.ilike.%jo%"

    def test_strips_reserved_characters(self):
        assert search_expression(" a,b(c)% ") == "name.ilike.%abc%,position.ilike.%abc%"


class TestPlayers:
    @pytest.mark.asyncio
    async def test_list_newest_first(self, db, settings):
        result = await trainer_service(db, settings).list_players()
        assert [r["id"] for r in result.rows] == ["p2", "p1"]
        assert not result.simulated

    @pytest.mark.asyncio
    async def test_search(self, db, settings):
        result = await trainer_service(db, settings).list_players("goal")
        assert [r["id"] for r in result.rows] == ["p2"]

    @pytest.mark.asyncio
    async def test_blank_search_lists_all(self, db, settings):
        result = await trainer_service(db, settings).list_players("   ")
        assert len(result.rows) == 2

    @pytest.mark.asyncio
    async def test_create(self, db, settings):
        await trainer_service(db, settings).create_player(PlayerCreate(name="Nova", position="Defender"))
        assert [r["name"] for r in db.rows("players", schema=SCHEMA)][-1] == "Nova"

    @pytest.mark.asyncio
    async def test_update(self, db, settings):
        result = await trainer_service(db, settings).update_player("p1", PlayerUpdate(position="Winger"))
        assert result.rows[0]["position"] == "Winger"
        assert result.rows[0]["name"] == "Ana Jorge"

    @pytest.mark.asyncio
    async def test_update_unknown(self, db, settings):
        with pytest.raises(PlayerNotFoundError):
            await trainer_service(db, settings).update_player("nope", PlayerUpdate(name="X"))

    @pytest.mark.asyncio
    async def test_delete(self, db, settings):
        await trainer_service(db, settings).delete_player("p1")
        assert [r["id"] for r in db.rows("players", schema=SCHEMA)] == ["p2"]


class TestHomework:
    @pytest.mark.asyncio
    async def test_active_only(self, db, settings):
        service = trainer_service(db, settings)
        assert len((await service.list_homework(now=NOW)).rows) == 2
        assert [r["id"] for r in (await service.list_homework(True, now=NOW)).rows] == ["h1"]

    @pytest.mark.asyncio
    async def test_create(self, db, settings):
        await trainer_service(db, settings).create_homework(HomeworkCreate(title="Stretching", player_id="p1"))
        assert any(r["title"] == "Stretching" for r in db.rows("homework", schema=SCHEMA))


class TestDashboard:
    @pytest.mark.asyncio
    async def test_live_figures(self, db, settings):
        stats = await trainer_service(db, settings).dashboard_stats(NOW)
        assert stats.total_players == 2
        assert stats.active_homework == 1
        assert stats.pending_payments == 2
        assert stats.pending_total == 42.5
        assert not stats.simulated

    @pytest.mark.asyncio
    async def test_superadmin_sees_sample_figures(self, db, settings):
        profile = SuperadminProfile(id="s1", email="admin@example.com", source=ProfileSource.TABLE)
        resolver = TenantResolver(db, AuthenticatedUser(id="s1", email="admin@example.com"), profile, settings)

        stats = await PlayerService(resolver).dashboard_stats()

        assert stats.total_players == 3
        assert stats.active_homework == 2
        assert stats.pending_payments == 2
        assert stats.pending_total == 125.0
        assert stats.simulated

    @pytest.mark.asyncio
    async def test_failing_table_marks_figures_simulated(self, db, settings):
        db.fail("orders", schema=SCHEMA)
        stats = await trainer_service(db, settings).dashboard_stats(NOW)
        assert stats.total_players == 2
        assert stats.simulated


class TestOverview:
    @pytest.mark.asyncio
    async def test_stats(self):
        db = FakeSupabase(
            {
                "trainers": [{"id": "t1"}, {"id": "t2"}],
                "orders": [
                    {"id": "o1", "total_amount": 10.0, "status": "pending"},
                    {"id": "o2", "total_amount": 20.0, "status": "processing"},
                    {"id": "o3", "total_amount": 5.0, "status": "completed"},
                ],
            }
        )
        stats = await OverviewService(db).stats()
        assert stats.total_trainers == 2
        assert stats.total_revenue == 35.0
        assert stats.active_orders == 2
        assert stats.pending_orders == 1

    @pytest.mark.asyncio
    async def test_revenue_is_summed_exactly(self):
        db = FakeSupabase(
            {
                "trainers": [],
                "orders": [
                    {"id": "o1", "total_amount": 0.1, "status": "completed"},
                    {"id": "o2", "total_amount": 0.2, "status": "completed"},
                    {"id": "o3", "total_amount": None, "status": "pending"},
                ],
            }
        )
        stats = await OverviewService(db).stats()
        assert stats.total_revenue == Decimal("0.3")
        assert stats.model_dump(mode="json")["total_revenue"] == 0.3
