"""
Tenants module.

One isolated schema per trainer: naming, the declarative migration
definition, provisioning, schema-scoped queries and inspection.

Public API:
- tenant_schema_name / trainer_id_from_schema: Deterministic schema naming
- MigrationPlan / render_sql: Migration definition and its single executor
- TenantProvisioner: Create, verify, drop and recreate tenant schemas
- TenantResolver / TenantQuery / TenantResult: Schema-scoped queries
- SchemaInspector: Superadmin introspection RPCs
- MemoryStore / sample_data: Simulation mode
"""

from .schema import (
    DEFAULT_SCHEMA_PREFIX,
    TENANT_TABLES,
    TENANT_TABLE_NAMES,
    ColumnDef,
    ForeignKey,
    PolicyDef,
    TableDef,
    MigrationPlan,
    render_sql,
    plan_statements,
    drop_schema_sql,
    tenant_schema_name,
    trainer_id_from_schema,
    is_tenant_schema,
)
from .models import (
    TenantMode,
    SimulationReason,
    TenantResult,
    ProvisioningPath,
    ProvisioningResult,
    SchemaVerification,
    TableInfo,
    PolicyInfo,
    TenantSchemaInfo,
    TenantSchemaList,
    AddPlayerRequest,
)
from .exceptions import (
    InvalidTenantIdentifierError,
    TenantNotReadyError,
    UnknownTenantTableError,
    ProvisioningError,
)
from .query import Filter, QuerySpec
from .memory import MemoryStore
from .fixtures import sample_data
from .resolver import TenantResolver, TenantQuery
from .provisioner import TenantProvisioner
from .inspector import SchemaInspector

__all__ = [
    # Schema model
    "DEFAULT_SCHEMA_PREFIX",
    "TENANT_TABLES",
    "TENANT_TABLE_NAMES",
    "ColumnDef",
    "ForeignKey",
    "PolicyDef",
    "TableDef",
    "MigrationPlan",
    "render_sql",
    "plan_statements",
    "drop_schema_sql",
    "tenant_schema_name",
    "trainer_id_from_schema",
    "is_tenant_schema",
    # Models
    "TenantMode",
    "SimulationReason",
    "TenantResult",
    "ProvisioningPath",
    "ProvisioningResult",
    "SchemaVerification",
    "TableInfo",
    "PolicyInfo",
    "TenantSchemaInfo",
    "TenantSchemaList",
    "AddPlayerRequest",
    # Exceptions
    "InvalidTenantIdentifierError",
    "TenantNotReadyError",
    "UnknownTenantTableError",
    "ProvisioningError",
    # Queries
    "Filter",
    "QuerySpec",
    "MemoryStore",
    "sample_data",
    "TenantResolver",
    "TenantQuery",
    # Services
    "TenantProvisioner",
    "SchemaInspector",
]
