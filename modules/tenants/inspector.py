"""
Tenant schema inspection for the superadmin console.

Thin wrappers over the backend's introspection RPCs. Listing schemas falls
back to sample schemas, flagged as simulated, when the RPC is unavailable.
"""

import logging
from typing import Any, Optional

from supabase import Client, PostgrestAPIError

from shared.config import Settings
from shared.exceptions import from_backend_error
from shared.repository import fetch_single

from .fixtures import sample_data
from .models import PolicyInfo, TableInfo, TenantSchemaInfo, TenantSchemaList
from .schema import TENANT_TABLE_NAMES, is_tenant_schema, tenant_schema_name, trainer_id_from_schema

logger = logging.getLogger(__name__)


class SchemaInspector:
    def __init__(self, client: Client, settings: Settings, admin_client: Optional[Client] = None):
        self._db = admin_client or client
        self._settings = settings

    @property
    def _prefix(self) -> str:
        return self._settings.tenant_schema_prefix

    def _rpc(self, name: str, params: Optional[dict[str, Any]] = None) -> Any:
        try:
            return self._db.rpc(name, params or {}).execute().data
        except PostgrestAPIError as e:
            logger.error("RPC %s failed: %s", name, e.message)
            raise from_backend_error(e, f"call {name}", resource=name) from e

    def _sample_schemas(self) -> list[TenantSchemaInfo]:
        return [
            TenantSchemaInfo(
                schema_name=tenant_schema_name(t["id"], self._prefix),
                trainer_id=t["id"],
                table_count=len(TENANT_TABLE_NAMES),
                trainer_email=t["email"],
                trainer_name=t["full_name"],
                created_at=t["created_at"],
                status="active" if t["is_active"] else "inactive",
            )
            for t in sample_data()["trainers"]
        ]

    def _enrich(self, row: dict[str, Any]) -> TenantSchemaInfo:
        schema_name = row["schema_name"]
        trainer_id = trainer_id_from_schema(schema_name, self._prefix)
        info = TenantSchemaInfo(
            schema_name=schema_name,
            trainer_id=trainer_id,
            table_count=row.get("table_count"),
        )
        try:
            trainer = fetch_single(
                self._db.table("trainers")
                .select("email, full_name, created_at, is_active")
                .eq("id", trainer_id)
            )
        except PostgrestAPIError as e:
            logger.error("Error loading trainer data for %s: %s", trainer_id, e.message)
            return info
        if trainer is None:
            return info
        return TenantSchemaInfo(
            **info.model_dump(exclude={"trainer_email", "trainer_name", "created_at", "status"}),
            trainer_email=trainer.get("email") or "Unknown",
            trainer_name=trainer.get("full_name") or "Unknown Trainer",
            created_at=trainer.get("created_at"),
            status="active" if trainer.get("is_active") else "inactive",
        )

    async def list_tenant_schemas(self) -> TenantSchemaList:
        """All tenant schemas with their trainer's details."""
        try:
            rows = self._db.rpc("get_schemas_info", {}).execute().data or []
        except PostgrestAPIError as e:
            logger.error("Error loading schemas: %s", e.message)
            return TenantSchemaList(schemas=self._sample_schemas(), simulated=True, error=e.message)

        tenant_rows = [
            r for r in rows
            if r.get("is_trainer_schema", True) and is_tenant_schema(r.get("schema_name", ""), self._prefix)
        ]
        return TenantSchemaList(schemas=[self._enrich(r) for r in tenant_rows])

    async def tables(self, schema_name: str) -> list[TableInfo]:
        trainer_id_from_schema(schema_name, self._prefix)
        rows = self._rpc("get_tables_info", {"schema_name": schema_name}) or []
        return [TableInfo.model_validate(r) for r in rows]

    async def policies(self, schema_name: str) -> list[PolicyInfo]:
        trainer_id_from_schema(schema_name, self._prefix)
        rows = self._rpc("get_policies_info", {"schema_name": schema_name}) or []
        return [PolicyInfo.model_validate(r) for r in rows]

    async def create_missing_policies(self) -> Any:
        """Ask the backend to install policies missing from any tenant table."""
        return self._rpc("create_missing_policies")

    async def add_player_to_trainer(
        self,
        trainer_id: str,
        player_id: str,
        player_name: str,
        player_email: str,
    ) -> Any:
        return self._rpc(
            "add_player_to_trainer_schema",
            {
                "schema_name": tenant_schema_name(trainer_id, self._prefix),
                "player_id": player_id,
                "player_name": player_name,
                "player_email": player_email,
            },
        )

    async def is_superadmin_rpc(self, user_id: str) -> bool:
        return bool(self._rpc("is_superadmin", {"user_id": user_id}))
