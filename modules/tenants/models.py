"""
Tenants module data models.

These models define the data structures used by the tenants module
and exposed to other modules through the interface.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, computed_field


class TenantMode(str, Enum):
    """Where tenant-scoped queries are answered."""

    LIVE = "live"            # The trainer's schema on the backend
    SIMULATED = "simulated"  # In-memory sample data (superadmin preview)


class SimulationReason(str, Enum):
    """Why a result came from sample data rather than the backend."""

    SUPERADMIN_PREVIEW = "superadmin_preview"
    BACKEND_ERROR = "backend_error"


class TenantResult(BaseModel):
    """
    Result of a tenant-scoped query.

    ``simulated`` distinguishes a real (possibly empty) result from sample
    data served by design (superadmin preview) or because the backend
    failed (``error`` then carries the backend message).
    """

    data: Any = Field(default=None, description="Rows (list) or one row (single)")
    count: Optional[int] = Field(None, description="Exact count when requested")
    simulated: bool = Field(default=False, description="Whether data is sample data")
    reason: Optional[SimulationReason] = Field(None, description="Why data is simulated")
    error: Optional[str] = Field(None, description="Backend error behind a simulated result")

    @property
    def rows(self) -> list[dict[str, Any]]:
        if self.data is None:
            return []
        if isinstance(self.data, list):
            return self.data
        return [self.data]


class ProvisioningPath(str, Enum):
    EXECUTE_SQL = "execute_sql"
    CREATE_TENANT_SCHEMA = "create_tenant_schema"
    NONE = "none"


class ProvisioningResult(BaseModel):
    """Outcome of provisioning one tenant schema."""

    success: bool = Field(..., description="Whether a provisioning path succeeded")
    path: ProvisioningPath = Field(default=ProvisioningPath.NONE, description="Path that succeeded")
    schema_name: str = Field(..., description="Target schema")
    trainer_id: str = Field(..., description="Owning trainer")
    errors: list[str] = Field(default_factory=list, description="Failures, in order of attempts")


class TableInfo(BaseModel):
    """One row of ``get_tables_info``."""

    table_name: str
    row_count: Optional[int] = None
    rls_enabled: Optional[bool] = None

    model_config = {"extra": "allow"}


class PolicyInfo(BaseModel):
    """One row of ``get_policies_info``."""

    table_name: Optional[str] = None
    policy_name: Optional[str] = None
    command: Optional[str] = None
    roles: Optional[Any] = None

    model_config = {"extra": "allow"}


class SchemaVerification(BaseModel):
    """Completeness check of a tenant schema against the migration definition."""

    schema_name: str
    expected_tables: list[str] = Field(default_factory=list)
    missing_tables: list[str] = Field(default_factory=list)
    tables_without_rls: list[str] = Field(default_factory=list)

    @computed_field
    @property
    def complete(self) -> bool:
        return not self.missing_tables and not self.tables_without_rls


class TenantSchemaInfo(BaseModel):
    """A tenant schema enriched with its trainer's details."""

    schema_name: str
    trainer_id: Optional[str] = None
    table_count: Optional[int] = None
    trainer_email: str = "Unknown"
    trainer_name: str = "Unknown Trainer"
    created_at: Optional[datetime] = None
    status: str = Field(default="unknown", description="active | inactive | unknown")


class TenantSchemaList(BaseModel):
    schemas: list[TenantSchemaInfo] = Field(default_factory=list)
    simulated: bool = False
    error: Optional[str] = None


class AddPlayerRequest(BaseModel):
    player_id: str
    player_name: str
    player_email: str
