"""
Tenant schema model.

Each trainer owns an isolated schema named after their identifier. The
schema shape is declared here as data (tables, columns, foreign keys, row
level security policies) and turned into SQL by a single executor,
``render_sql``. Identifiers are validated and quoted; the only value that
reaches the script from outside is the trainer id, and it must parse as a
UUID before it is embedded as a literal.
"""

import re
import uuid
from dataclasses import dataclass, field
from typing import Optional

from .exceptions import InvalidTenantIdentifierError

DEFAULT_SCHEMA_PREFIX = "pt_"
OWNER_POLICY_NAME = "trainer_all_access"
TENANT_ROLE = "authenticated"

_IDENTIFIER_RE = re.compile(r"^[a-z_][a-z0-9_]*$")


# -----------------------------------------------------------------------------
# Naming
# -----------------------------------------------------------------------------


def canonical_trainer_id(trainer_id: str) -> str:
    """Return the canonical (lower-case, hyphenated) form of a trainer id."""
    try:
        return str(uuid.UUID(str(trainer_id)))
    except ValueError:
        raise InvalidTenantIdentifierError(str(trainer_id), "trainer id must be a UUID")


def tenant_schema_name(trainer_id: str, prefix: str = DEFAULT_SCHEMA_PREFIX) -> str:
    """
    Derive the tenant schema name for a trainer.

    The mapping is deterministic and injective on trainer ids: the prefix
    followed by the canonical UUID with hyphens replaced by underscores.

    Example:
        tenant_schema_name("d45616a4-d90b-4358-b62c-9005f61e3d84")
        -> "pt_d45616a4_d90b_4358_b62c_9005f61e3d84"
    """
    if not _IDENTIFIER_RE.match(prefix):
        raise InvalidTenantIdentifierError(prefix, "schema prefix is not a valid identifier")
    return prefix + canonical_trainer_id(trainer_id).replace("-", "_")


def trainer_id_from_schema(schema_name: str, prefix: str = DEFAULT_SCHEMA_PREFIX) -> str:
    """Inverse of ``tenant_schema_name``."""
    if not schema_name.startswith(prefix):
        raise InvalidTenantIdentifierError(schema_name, f"schema name must start with '{prefix}'")
    trainer_id = canonical_trainer_id(schema_name[len(prefix):].replace("_", "-"))
    if tenant_schema_name(trainer_id, prefix) != schema_name:
        raise InvalidTenantIdentifierError(schema_name, "schema name is not in canonical form")
    return trainer_id


def is_tenant_schema(schema_name: str, prefix: str = DEFAULT_SCHEMA_PREFIX) -> bool:
    try:
        trainer_id_from_schema(schema_name, prefix)
    except InvalidTenantIdentifierError:
        return False
    return True


def quote_ident(name: str) -> str:
    """Double-quote a validated SQL identifier."""
    if not _IDENTIFIER_RE.match(name):
        raise InvalidTenantIdentifierError(name, "not a valid SQL identifier")
    return f'"{name}"'


def quote_literal(value: str) -> str:
    return "'" + value.replace("'", "''") + "'"


# -----------------------------------------------------------------------------
# Declarative table definitions
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class ForeignKey:
    table: str
    column: str = "id"
    on_delete: str = "CASCADE"


@dataclass(frozen=True)
class ColumnDef:
    name: str
    type: str
    nullable: bool = True
    default: Optional[str] = None
    primary_key: bool = False
    references: Optional[ForeignKey] = None


@dataclass(frozen=True)
class PolicyDef:
    """
    A row level security policy restricting a table to its owning trainer.

    The predicate compares ``auth.uid()`` to the trainer id embedded at
    schema creation time.
    """

    name: str = OWNER_POLICY_NAME
    command: str = "ALL"
    role: str = TENANT_ROLE


@dataclass(frozen=True)
class TableDef:
    name: str
    columns: tuple[ColumnDef, ...]
    policies: tuple[PolicyDef, ...] = (PolicyDef(),)

    @property
    def column_names(self) -> tuple[str, ...]:
        return tuple(c.name for c in self.columns)


def _id() -> ColumnDef:
    return ColumnDef("id", "UUID", nullable=False, default="gen_random_uuid()", primary_key=True)


def _timestamps() -> tuple[ColumnDef, ...]:
    return (
        ColumnDef("created_at", "TIMESTAMP WITH TIME ZONE", default="CURRENT_TIMESTAMP"),
        ColumnDef("updated_at", "TIMESTAMP WITH TIME ZONE", default="CURRENT_TIMESTAMP"),
    )


# Order matters: referenced tables come before the tables referencing them.
TENANT_TABLES: tuple[TableDef, ...] = (
    TableDef("players", (
        _id(),
        ColumnDef("name", "TEXT", nullable=False),
        ColumnDef("birth_date", "DATE"),
        ColumnDef("position", "TEXT"),
        ColumnDef("contact", "TEXT"),
        ColumnDef("avatar_url", "TEXT"),
        *_timestamps(),
    )),
    TableDef("assessments", (
        _id(),
        ColumnDef("player_id", "UUID", references=ForeignKey("players")),
        ColumnDef("assessment_date", "DATE", nullable=False),
        ColumnDef("metrics", "JSONB"),
        ColumnDef("notes", "TEXT"),
        *_timestamps(),
    )),
    TableDef("exercises", (
        _id(),
        ColumnDef("name", "TEXT", nullable=False),
        ColumnDef("description", "TEXT"),
        ColumnDef("category", "TEXT"),
        ColumnDef("difficulty", "TEXT"),
        ColumnDef("video_url", "TEXT"),
        ColumnDef("image_url", "TEXT"),
        ColumnDef("instructions", "JSONB"),
        ColumnDef("tags", "TEXT[]"),
        *_timestamps(),
    )),
    TableDef("homework", (
        _id(),
        ColumnDef("player_id", "UUID", references=ForeignKey("players")),
        ColumnDef("title", "TEXT", nullable=False),
        ColumnDef("description", "TEXT"),
        ColumnDef("due_date", "TIMESTAMP WITH TIME ZONE"),
        ColumnDef("completed", "BOOLEAN", default="FALSE"),
        *_timestamps(),
    )),
    TableDef("homework_items", (
        _id(),
        ColumnDef("homework_id", "UUID", references=ForeignKey("homework")),
        ColumnDef("exercise_id", "UUID", references=ForeignKey("exercises", on_delete="SET NULL")),
        ColumnDef("sets", "INTEGER"),
        ColumnDef("reps", "INTEGER"),
        ColumnDef("notes", "TEXT"),
        ColumnDef("completed", "BOOLEAN", default="FALSE"),
        *_timestamps(),
    )),
    TableDef("products", (
        _id(),
        ColumnDef("name", "TEXT", nullable=False),
        ColumnDef("description", "TEXT"),
        ColumnDef("price", "NUMERIC(10,2)", nullable=False),
        ColumnDef("stock_quantity", "INTEGER", default="0"),
        ColumnDef("category", "TEXT"),
        ColumnDef("image_url", "TEXT"),
        ColumnDef("is_active", "BOOLEAN", default="TRUE"),
        *_timestamps(),
    )),
    TableDef("orders", (
        _id(),
        ColumnDef("player_id", "UUID", references=ForeignKey("players")),
        ColumnDef("status", "TEXT", default="'pending'"),
        ColumnDef("total_amount", "NUMERIC(10,2)", nullable=False),
        ColumnDef("payment_method", "TEXT"),
        ColumnDef("paid", "BOOLEAN", default="FALSE"),
        ColumnDef("notes", "TEXT"),
        *_timestamps(),
    )),
)

TENANT_TABLE_NAMES: tuple[str, ...] = tuple(t.name for t in TENANT_TABLES)


def get_table_def(name: str) -> Optional[TableDef]:
    for table in TENANT_TABLES:
        if table.name == name:
            return table
    return None


# -----------------------------------------------------------------------------
# Migration plan and executor
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class MigrationPlan:
    """Everything needed to bring one trainer's schema into existence."""

    schema_name: str
    trainer_id: str
    tables: tuple[TableDef, ...] = field(default=TENANT_TABLES)

    @classmethod
    def for_trainer(
        cls,
        trainer_id: str,
        prefix: str = DEFAULT_SCHEMA_PREFIX,
        tables: tuple[TableDef, ...] = TENANT_TABLES,
    ) -> "MigrationPlan":
        canonical = canonical_trainer_id(trainer_id)
        return cls(
            schema_name=tenant_schema_name(canonical, prefix),
            trainer_id=canonical,
            tables=tables,
        )

    @property
    def table_names(self) -> tuple[str, ...]:
        return tuple(t.name for t in self.tables)


def _column_sql(schema: str, column: ColumnDef) -> str:
    parts = [quote_ident(column.name), column.type]
    if column.primary_key:
        parts.append("PRIMARY KEY")
    elif not column.nullable:
        parts.append("NOT NULL")
    if column.default is not None:
        parts.append(f"DEFAULT {column.default}")
    if column.references is not None:
        ref = column.references
        parts.append(
            f"REFERENCES {schema}.{quote_ident(ref.table)}({quote_ident(ref.column)}) "
            f"ON DELETE {ref.on_delete}"
        )
    return " ".join(parts)


def _owner_predicate(trainer_id: str) -> str:
    return f"auth.uid() = {quote_literal(canonical_trainer_id(trainer_id))}::uuid"


def plan_statements(plan: MigrationPlan) -> list[str]:
    """
    Render a migration plan into an ordered list of idempotent statements.

    Schema and tables use IF NOT EXISTS; policies are dropped if present
    and recreated, so running the same plan twice leaves the same objects.
    """
    schema = quote_ident(plan.schema_name)
    predicate = _owner_predicate(plan.trainer_id)
    statements = [f"CREATE SCHEMA IF NOT EXISTS {schema};"]

    for table in plan.tables:
        columns = ",\n  ".join(_column_sql(schema, c) for c in table.columns)
        statements.append(
            f"CREATE TABLE IF NOT EXISTS {schema}.{quote_ident(table.name)} (\n  {columns}\n);"
        )

    for table in plan.tables:
        qualified = f"{schema}.{quote_ident(table.name)}"
        statements.append(f"ALTER TABLE {qualified} ENABLE ROW LEVEL SECURITY;")
        for policy in table.policies:
            statements.append(f"DROP POLICY IF EXISTS {quote_ident(policy.name)} ON {qualified};")
            statements.append(
                f"CREATE POLICY {quote_ident(policy.name)} ON {qualified}\n"
                f"  FOR {policy.command} TO {policy.role}\n"
                f"  USING ({predicate})\n"
                f"  WITH CHECK ({predicate});"
            )

    statements.append(f"GRANT USAGE ON SCHEMA {schema} TO {TENANT_ROLE};")
    statements.append(f"GRANT ALL ON ALL TABLES IN SCHEMA {schema} TO {TENANT_ROLE};")
    return statements


def render_sql(plan: MigrationPlan) -> str:
    """Render a migration plan as one script for a single ``execute_sql`` call."""
    return "\n".join(plan_statements(plan)) + "\n"


def drop_schema_sql(schema_name: str, prefix: str = DEFAULT_SCHEMA_PREFIX) -> str:
    """Render the cascading drop of a tenant schema (validated by name)."""
    trainer_id_from_schema(schema_name, prefix)
    return f"DROP SCHEMA IF EXISTS {quote_ident(schema_name)} CASCADE;"
