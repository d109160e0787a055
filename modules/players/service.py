"""
Trainer console services.

Everything here goes through a ``TenantResolver``, so a trainer reaches only
their own schema, a player reaches their trainer's, and a superadmin gets
sample data. Results keep the resolver's ``simulated`` flag.
"""

import logging
import re
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Iterable, Optional

from supabase import Client

from modules.tenants.models import TenantResult
from modules.tenants.resolver import TenantResolver
from shared.repository import BaseRepository

from .exceptions import PlayerNotFoundError
from .models import (
    DashboardStats,
    HomeworkCreate,
    OverviewStats,
    PlayerCreate,
    PlayerUpdate,
)

logger = logging.getLogger(__name__)

# Characters with a meaning inside a PostgREST "or" expression.
_OR_RESERVED = re.compile(r"[,()%*\\]")


def _money_total(amounts: Iterable[Any]) -> Decimal:
    """Sum order amounts exactly; missing amounts count as zero."""
    return sum((Decimal(str(a)) for a in amounts if a is not None), Decimal("0"))


def search_expression(search: str, columns: tuple[str, ...] = ("name", "position")) -> str:
    """
    Build a case-insensitive substring match over several columns.

    Example:
        search_expression("jo") -> "name.ilike.%jo%,position.ilike.%jo%"
    """
    needle = _OR_RESERVED.sub("", search.strip())
    return ",".join(f"{column}.ilike.%{needle}%" for column in columns)


class PlayerService:
    """Players, homework and the dashboard of one tenant."""

    def __init__(self, resolver: TenantResolver):
        self._resolver = resolver

    # -------------------------------------------------------------------------
    # Players
    # -------------------------------------------------------------------------

    async def list_players(self, search: Optional[str] = None) -> TenantResult:
        """Players newest first, optionally matched on name or position."""
        query = self._resolver.table("players").select("*")
        if search and search.strip():
            query = query.or_(search_expression(search))
        return await query.order("created_at", desc=True).execute()

    async def create_player(self, request: PlayerCreate) -> TenantResult:
        result = await self._resolver.table("players").insert(request.model_dump(mode="json")).execute()
        logger.info("Created player in %s", self._resolver.schema_name or "sample data")
        return result

    async def update_player(self, player_id: str, request: PlayerUpdate) -> TenantResult:
        result = await (
            self._resolver.table("players")
            .update(request.model_dump(mode="json", exclude_unset=True))
            .eq("id", player_id)
            .execute()
        )
        if not result.rows:
            raise PlayerNotFoundError(player_id)
        return result

    async def delete_player(self, player_id: str) -> TenantResult:
        return await self._resolver.table("players").delete().eq("id", player_id).execute()

    # -------------------------------------------------------------------------
    # Homework
    # -------------------------------------------------------------------------

    async def list_homework(self, active_only: bool = False, now: Optional[datetime] = None) -> TenantResult:
        """Homework newest first; ``active_only`` keeps assignments not yet due."""
        query = self._resolver.table("homework").select("*")
        if active_only:
            now = now or datetime.now(timezone.utc)
            query = query.gte("due_date", now.isoformat())
        return await query.order("created_at", desc=True).execute()

    async def create_homework(self, request: HomeworkCreate) -> TenantResult:
        return await self._resolver.table("homework").insert(request.model_dump(mode="json")).execute()

    # -------------------------------------------------------------------------
    # Dashboard
    # -------------------------------------------------------------------------

    async def dashboard_stats(self, now: Optional[datetime] = None) -> DashboardStats:
        """
        Player count, homework not yet due, and unpaid orders with their total.
        """
        now = now or datetime.now(timezone.utc)
        players = await self._resolver.table("players").select("id").execute()
        homework = await (
            self._resolver.table("homework").select("id").gte("due_date", now.isoformat()).execute()
        )
        unpaid = await (
            self._resolver.table("orders").select("id, total_amount").eq("paid", False).execute()
        )
        return DashboardStats(
            total_players=len(players.rows),
            active_homework=len(homework.rows),
            pending_payments=len(unpaid.rows),
            pending_total=_money_total(row.get("total_amount") for row in unpaid.rows),
            simulated=any(r.simulated for r in (players, homework, unpaid)),
        )


class OverviewService(BaseRepository[OverviewStats]):
    """Superadmin dashboard over the shared ``trainers`` and ``orders`` tables."""

    def __init__(self, db: Client):
        super().__init__(db)

    async def stats(self) -> OverviewStats:
        trainers = self._execute(self._db.table("trainers").select("id"), "load trainers", "trainers")
        orders = self._execute(
            self._db.table("orders").select("total_amount, status"), "load orders", "orders"
        )
        order_rows = orders.data or []
        return OverviewStats(
            total_trainers=len(trainers.data or []),
            total_revenue=_money_total(o.get("total_amount") for o in order_rows),
            active_orders=sum(1 for o in order_rows if o.get("status") in ("pending", "processing")),
            pending_orders=sum(1 for o in order_rows if o.get("status") == "pending"),
        )
