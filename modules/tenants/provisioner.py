"""
Tenant schema provisioner.

Brings a trainer's schema into existence. The primary path submits the
rendered migration script through the ``execute_sql`` RPC; the whole script
runs in that one call, so the backend applies it as a single transaction.
If that call fails, the server-side ``create_tenant_schema`` RPC is tried.
Both failing is reported, never retried.
"""

import logging
from typing import Optional

import httpx
from supabase import Client, PostgrestAPIError

from shared.config import Settings

from .exceptions import ProvisioningError
from .models import (
    ProvisioningPath,
    ProvisioningResult,
    SchemaVerification,
    TableInfo,
)
from .schema import MigrationPlan, drop_schema_sql, render_sql

logger = logging.getLogger(__name__)

# API errors and transport failures both count as a failed call.
_CALL_ERRORS = (PostgrestAPIError, httpx.HTTPError)


def _describe(error: Exception) -> str:
    return getattr(error, "message", None) or str(error) or type(error).__name__


class TenantProvisioner:
    """
    Creates, verifies and drops tenant schemas.

    Uses the service-role client when one is configured, since schema DDL
    is not something an end user's role may run.
    """

    def __init__(self, client: Client, settings: Settings, admin_client: Optional[Client] = None):
        self._db = admin_client or client
        self._settings = settings

    def plan(self, trainer_id: str) -> MigrationPlan:
        return MigrationPlan.for_trainer(trainer_id, self._settings.tenant_schema_prefix)

    def preview(self, trainer_id: str) -> str:
        """The script ``provision`` would submit (dry run)."""
        return render_sql(self.plan(trainer_id))

    async def provision(self, trainer_id: str) -> ProvisioningResult:
        """
        Provision the tenant schema for a trainer.

        Safe to re-invoke: every statement is idempotent.

        Raises:
            InvalidTenantIdentifierError: If trainer_id is not a UUID
        """
        plan = self.plan(trainer_id)
        errors: list[str] = []
        logger.info("Provisioning tenant schema %s", plan.schema_name)

        try:
            self._db.rpc("execute_sql", {"sql": render_sql(plan)}).execute()
        except _CALL_ERRORS as e:
            logger.warning(
                "execute_sql failed for %s, trying create_tenant_schema: %s", plan.schema_name, _describe(e)
            )
            errors.append(f"execute_sql: {_describe(e)}")
        else:
            logger.info("Tenant schema %s provisioned", plan.schema_name)
            return ProvisioningResult(
                success=True,
                path=ProvisioningPath.EXECUTE_SQL,
                schema_name=plan.schema_name,
                trainer_id=plan.trainer_id,
            )

        try:
            self._db.rpc(
                "create_tenant_schema",
                {"schema_name": plan.schema_name, "trainer_id": plan.trainer_id},
            ).execute()
        except _CALL_ERRORS as e:
            logger.error("Provisioning failed for %s: %s", plan.schema_name, _describe(e))
            errors.append(f"create_tenant_schema: {_describe(e)}")
            return ProvisioningResult(
                success=False,
                schema_name=plan.schema_name,
                trainer_id=plan.trainer_id,
                errors=errors,
            )

        logger.info("Tenant schema %s provisioned via create_tenant_schema", plan.schema_name)
        return ProvisioningResult(
            success=True,
            path=ProvisioningPath.CREATE_TENANT_SCHEMA,
            schema_name=plan.schema_name,
            trainer_id=plan.trainer_id,
            errors=errors,
        )

    async def verify(self, trainer_id: str) -> SchemaVerification:
        """
        Compare a provisioned schema with the migration definition.

        Reports tables that are missing and tables whose row level security
        is reported as disabled.
        """
        plan = self.plan(trainer_id)
        try:
            response = self._db.rpc("get_tables_info", {"schema_name": plan.schema_name}).execute()
        except PostgrestAPIError as e:
            logger.error("Could not inspect %s: %s", plan.schema_name, e.message)
            raise ProvisioningError(plan.schema_name, e.message) from e

        tables = [TableInfo.model_validate(row) for row in response.data or []]
        present = {t.table_name: t for t in tables}
        return SchemaVerification(
            schema_name=plan.schema_name,
            expected_tables=list(plan.table_names),
            missing_tables=[name for name in plan.table_names if name not in present],
            tables_without_rls=[
                name for name in plan.table_names
                if name in present and present[name].rls_enabled is False
            ],
        )

    async def drop(self, schema_name: str) -> None:
        """Drop a tenant schema and everything in it."""
        sql = drop_schema_sql(schema_name, self._settings.tenant_schema_prefix)
        try:
            self._db.rpc("execute_sql", {"sql": sql}).execute()
        except PostgrestAPIError as e:
            logger.error("Error deleting schema %s: %s", schema_name, e.message)
            raise ProvisioningError(schema_name, e.message) from e
        logger.info("Dropped tenant schema %s", schema_name)

    async def recreate(self, trainer_id: str) -> ProvisioningResult:
        """Drop and provision again. All tenant data is lost."""
        plan = self.plan(trainer_id)
        await self.drop(plan.schema_name)
        return await self.provision(plan.trainer_id)
