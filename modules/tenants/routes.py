"""
Tenant schema API endpoints (superadmin).
"""

from typing import Any

from fastapi import APIRouter, Depends, Query
from fastapi.responses import PlainTextResponse

from api.dependencies import get_inspector, get_provisioner

from .inspector import SchemaInspector
from .models import (
    AddPlayerRequest,
    PolicyInfo,
    ProvisioningResult,
    SchemaVerification,
    TableInfo,
    TenantSchemaList,
)
from .provisioner import TenantProvisioner

router = APIRouter()


@router.get("", response_model=TenantSchemaList)
async def list_schemas(inspector: SchemaInspector = Depends(get_inspector)) -> TenantSchemaList:
    """
    All tenant schemas with their trainer's details.

    Falls back to sample schemas, flagged ``simulated``, when the
    introspection RPC is unavailable.
    """
    return await inspector.list_tenant_schemas()


@router.post("/policies/create-missing")
async def create_missing_policies(inspector: SchemaInspector = Depends(get_inspector)) -> Any:
    return await inspector.create_missing_policies()


@router.get("/{schema_name}/tables", response_model=list[TableInfo])
async def schema_tables(
    schema_name: str,
    inspector: SchemaInspector = Depends(get_inspector),
) -> list[TableInfo]:
    return await inspector.tables(schema_name)


@router.get("/{schema_name}/policies", response_model=list[PolicyInfo])
async def schema_policies(
    schema_name: str,
    inspector: SchemaInspector = Depends(get_inspector),
) -> list[PolicyInfo]:
    return await inspector.policies(schema_name)


@router.delete("/{schema_name}", status_code=204)
async def drop_schema(
    schema_name: str,
    provisioner: TenantProvisioner = Depends(get_provisioner),
) -> None:
    """Drop a tenant schema and all its data."""
    await provisioner.drop(schema_name)


@router.get("/trainers/{trainer_id}/migration", response_class=PlainTextResponse)
async def preview_migration(
    trainer_id: str,
    provisioner: TenantProvisioner = Depends(get_provisioner),
) -> str:
    """The SQL script provisioning would submit."""
    return provisioner.preview(trainer_id)


@router.post("/trainers/{trainer_id}/provision", response_model=ProvisioningResult)
async def provision_schema(
    trainer_id: str,
    recreate: bool = Query(default=False, description="Drop the schema first"),
    provisioner: TenantProvisioner = Depends(get_provisioner),
) -> ProvisioningResult:
    if recreate:
        return await provisioner.recreate(trainer_id)
    return await provisioner.provision(trainer_id)


@router.get("/trainers/{trainer_id}/verify", response_model=SchemaVerification)
async def verify_schema(
    trainer_id: str,
    provisioner: TenantProvisioner = Depends(get_provisioner),
) -> SchemaVerification:
    return await provisioner.verify(trainer_id)


@router.post("/trainers/{trainer_id}/players", status_code=201)
async def add_player(
    trainer_id: str,
    request: AddPlayerRequest,
    inspector: SchemaInspector = Depends(get_inspector),
) -> Any:
    """Add a player to a trainer's schema through the backend RPC."""
    return await inspector.add_player_to_trainer(
        trainer_id, request.player_id, request.player_name, request.player_email
    )
