"""
Tenant resolver.

Decides which schema backs tenant-scoped queries for the current profile
and hands out query builders scoped to it:

- trainer: the schema derived from the trainer's own id
- player: the schema of the owning trainer
- superadmin: no schema; queries are answered from sample data
- anything else: not ready

Every query returns a ``TenantResult`` whose ``simulated`` flag tells a real
result apart from sample data.
"""

import logging
from typing import Any, Optional

from supabase import Client, PostgrestAPIError

from modules.auth.models import PlayerProfile, Profile, SuperadminProfile, TrainerProfile
from shared.config import Settings
from shared.exceptions import from_backend_error, is_no_rows_error
from shared.models import AuthenticatedUser

from .exceptions import InvalidTenantIdentifierError, TenantNotReadyError, UnknownTenantTableError
from .fixtures import sample_data
from .memory import MemoryStore
from .models import SimulationReason, TenantMode, TenantResult
from .query import Filter, QuerySpec, apply_to_builder
from .schema import TENANT_TABLE_NAMES, canonical_trainer_id, tenant_schema_name

logger = logging.getLogger(__name__)

TRAINER_BUCKET_PREFIX = "trainer-"


class TenantQuery:
    """
    Query builder for one tenant table.

    Mirrors the supabase-py request builder for the operations tenant pages
    use. Nothing is sent until ``execute()``.

    Example:
        result = await resolver.table("players").select("*").order("created_at", desc=True).execute()
    """

    def __init__(self, resolver: "TenantResolver", table: str):
        self._resolver = resolver
        self._spec = QuerySpec(table=table)

    @property
    def spec(self) -> QuerySpec:
        return self._spec

    def select(self, columns: str = "*", count: Optional[str] = None) -> "TenantQuery":
        self._spec.action = "select"
        self._spec.columns = columns
        self._spec.count = count
        return self

    def insert(self, payload: dict[str, Any] | list[dict[str, Any]]) -> "TenantQuery":
        self._spec.action = "insert"
        self._spec.payload = payload
        return self

    def update(self, payload: dict[str, Any]) -> "TenantQuery":
        self._spec.action = "update"
        self._spec.payload = payload
        return self

    def delete(self) -> "TenantQuery":
        self._spec.action = "delete"
        return self

    def _filter(self, column: str, op: str, value: Any) -> "TenantQuery":
        self._spec.filters.append(Filter(column, op, value))
        return self

    def eq(self, column: str, value: Any) -> "TenantQuery":
        return self._filter(column, "eq", value)

    def neq(self, column: str, value: Any) -> "TenantQuery":
        return self._filter(column, "neq", value)

    def gt(self, column: str, value: Any) -> "TenantQuery":
        return self._filter(column, "gt", value)

    def gte(self, column: str, value: Any) -> "TenantQuery":
        return self._filter(column, "gte", value)

    def lt(self, column: str, value: Any) -> "TenantQuery":
        return self._filter(column, "lt", value)

    def lte(self, column: str, value: Any) -> "TenantQuery":
        return self._filter(column, "lte", value)

    def ilike(self, column: str, pattern: str) -> "TenantQuery":
        return self._filter(column, "ilike", pattern)

    def or_(self, expression: str) -> "TenantQuery":
        self._spec.or_filters.append(expression)
        return self

    def order(self, column: str, desc: bool = False) -> "TenantQuery":
        self._spec.order.append((column, desc))
        return self

    def limit(self, size: int) -> "TenantQuery":
        self._spec.limit = size
        return self

    def single(self) -> "TenantQuery":
        self._spec.single = True
        return self

    async def execute(self) -> TenantResult:
        return await self._resolver.run(self._spec)


class TenantResolver:
    """
    Binds a principal and profile to a tenant schema.

    Args:
        client: Supabase client used for live queries (a user client in the
            API, so row level security applies)
        principal: The authenticated principal, or None
        profile: The resolved profile, or None while unresolved
        settings: Application settings
        store: Sample data store for simulation mode (built on demand)
    """

    def __init__(
        self,
        client: Client,
        principal: Optional[AuthenticatedUser],
        profile: Optional[Profile],
        settings: Settings,
        store: Optional[MemoryStore] = None,
    ):
        self._client = client
        self._settings = settings
        self._store = store
        self._principal = principal
        self._profile = profile
        self._trainer_id: Optional[str] = None
        self._schema_name: Optional[str] = None
        self._mode: Optional[TenantMode] = None
        self._reason: Optional[SimulationReason] = None
        self._error: Optional[str] = None
        self._bind()

    def _bind(self) -> None:
        profile = self._profile
        if self._principal is None or profile is None:
            return

        if isinstance(profile, SuperadminProfile):
            self._mode = TenantMode.SIMULATED
            self._reason = SimulationReason.SUPERADMIN_PREVIEW
            return

        if isinstance(profile, TrainerProfile):
            trainer_id = profile.id
        elif isinstance(profile, PlayerProfile) and profile.trainer_id:
            trainer_id = profile.trainer_id
        else:
            return

        try:
            self._trainer_id = canonical_trainer_id(trainer_id)
            self._schema_name = tenant_schema_name(trainer_id, self._settings.tenant_schema_prefix)
        except InvalidTenantIdentifierError as e:
            logger.error("Cannot address tenant schema for %s: %s", trainer_id, e.message)
            if self._settings.simulate_on_backend_error:
                self._mode = TenantMode.SIMULATED
                self._reason = SimulationReason.BACKEND_ERROR
                self._error = e.message
            return
        self._mode = TenantMode.LIVE

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @property
    def ready(self) -> bool:
        return self._mode is not None

    @property
    def mode(self) -> Optional[TenantMode]:
        return self._mode

    @property
    def schema_name(self) -> Optional[str]:
        return self._schema_name

    @property
    def trainer_id(self) -> Optional[str]:
        return self._trainer_id

    @property
    def profile(self) -> Optional[Profile]:
        return self._profile

    @property
    def store(self) -> MemoryStore:
        if self._store is None:
            self._store = MemoryStore(sample_data())
        return self._store

    # -------------------------------------------------------------------------
    # Handles
    # -------------------------------------------------------------------------

    def table(self, name: str) -> TenantQuery:
        """
        Query builder for ``{schema}.{name}``.

        Raises:
            TenantNotReadyError: No tenant is bound to the current profile
            UnknownTenantTableError: The table is not part of a tenant schema
        """
        if not self.ready:
            raise TenantNotReadyError(self._profile.role if self._profile else None)
        if name not in TENANT_TABLE_NAMES and not (
            self._mode == TenantMode.SIMULATED and self.store.has_table(name)
        ):
            raise UnknownTenantTableError(name)
        return TenantQuery(self, name)

    @property
    def bucket_name(self) -> Optional[str]:
        if self._trainer_id is None:
            return None
        return f"{TRAINER_BUCKET_PREFIX}{self._trainer_id}"

    def storage(self) -> Any:
        """The trainer's private storage bucket."""
        if self.bucket_name is None:
            raise TenantNotReadyError(self._profile.role if self._profile else None)
        return self._client.storage.from_(self.bucket_name)

    # -------------------------------------------------------------------------
    # Execution
    # -------------------------------------------------------------------------

    def _simulate(
        self,
        spec: QuerySpec,
        reason: Optional[SimulationReason],
        error: Optional[str] = None,
    ) -> TenantResult:
        try:
            response = self.store.execute(spec)
        except PostgrestAPIError as e:
            if not is_no_rows_error(e):
                raise
            return TenantResult(data=None, simulated=True, reason=reason, error=error)
        return TenantResult(
            data=response.data,
            count=response.count,
            simulated=True,
            reason=reason,
            error=error,
        )

    async def run(self, spec: QuerySpec) -> TenantResult:
        """
        Execute a recorded query.

        Live reads that fail degrade to sample data when
        ``SIMULATE_ON_BACKEND_ERROR`` is set, flagged with
        ``reason=backend_error``. Failed writes always raise.
        """
        if self._mode == TenantMode.SIMULATED:
            return self._simulate(spec, self._reason, self._error)
        if self._mode is None:
            raise TenantNotReadyError(self._profile.role if self._profile else None)

        builder = self._client.postgrest.schema(self._schema_name).from_(spec.table)
        try:
            response = apply_to_builder(builder, spec).execute()
        except PostgrestAPIError as e:
            if spec.single and is_no_rows_error(e):
                return TenantResult(data=None)
            logger.error(
                "Tenant query on %s.%s failed: %s", self._schema_name, spec.table, e.message
            )
            if spec.action == "select" and self._settings.simulate_on_backend_error:
                return self._simulate(spec, SimulationReason.BACKEND_ERROR, e.message)
            raise from_backend_error(e, f"{spec.action} {spec.table}", resource=spec.table) from e

        return TenantResult(data=response.data, count=getattr(response, "count", None))
