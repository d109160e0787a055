#!/usr/bin/env python3
"""
Operator CLI for tenant schemas and backend diagnostics.

Usage:
    uv run python run_admin.py status                      # Probe backend, show cached config
    uv run python run_admin.py schema-name <trainer_id>    # Print a trainer's schema name
    uv run python run_admin.py provision <trainer_id>      # Provision a tenant schema
    uv run python run_admin.py provision <id> --dry-run    # Print the SQL instead
    uv run python run_admin.py verify <trainer_id>         # Compare schema with the definition
    uv run python run_admin.py schemas                     # List tenant schemas
    uv run python run_admin.py tables <schema>             # Tables of a schema
    uv run python run_admin.py policies <schema>           # RLS policies of a schema
    uv run python run_admin.py drop <schema> --yes         # Drop a schema and its data
    uv run python run_admin.py whoami --email E --password P

Configuration:
    Set SUPABASE_URL and SUPABASE_ANON_KEY in your .env file. Provisioning and
    dropping schemas need SUPABASE_SERVICE_ROLE_KEY.
"""

import argparse
import asyncio
import logging
import sys

from rich.console import Console
from rich.table import Table

from modules.auth.privilege import PrivilegeClassifier
from modules.auth.profiles import ProfileService
from modules.auth.session import SessionHolder
from modules.tenants.inspector import SchemaInspector
from modules.tenants.provisioner import TenantProvisioner
from modules.tenants.schema import tenant_schema_name
from shared.config import Settings, get_settings
from shared.connection import ConnectionConfig, ConnectionConfigCache, check_connection
from shared.database import get_supabase_admin_client, get_supabase_client
from shared.exceptions import SportikoError

console = Console()


def _provisioner(settings: Settings) -> TenantProvisioner:
    admin = get_supabase_admin_client()
    if admin is None:
        console.print("[yellow]Warning:[/yellow] SUPABASE_SERVICE_ROLE_KEY is not set; using the anon key.")
    return TenantProvisioner(get_supabase_client(), settings, admin)


def _inspector(settings: Settings) -> SchemaInspector:
    return SchemaInspector(get_supabase_client(), settings, get_supabase_admin_client())


def show_status(settings: Settings) -> int:
    cache = ConnectionConfigCache(settings.connection_cache_path, settings.connection_cache_ttl_hours)
    result = check_connection(get_supabase_client())

    table = Table(title="Backend Status")
    table.add_column("Check", style="cyan")
    table.add_column("Value")
    table.add_row("URL", settings.supabase_url or "[red]not set[/red]")
    table.add_row("Service role key", "configured" if settings.supabase_service_role_key else "[yellow]missing[/yellow]")
    table.add_row(
        "Connection",
        "[green]Connected[/green]" if result.connected else f"[red]Error[/red] {result.error or ''}",
    )

    if result.connected:
        cache.store(ConnectionConfig.from_settings(settings))
    cached = cache.retrieve()
    table.add_row("Cached config", f"{cached.url} ({cached.key_prefix}...)" if cached else "[dim]none[/dim]")
    console.print(table)
    return 0 if result.connected else 1


async def provision(settings: Settings, trainer_id: str, dry_run: bool) -> int:
    provisioner = _provisioner(settings)
    if dry_run:
        console.print(provisioner.preview(trainer_id), markup=False, highlight=False)
        return 0

    result = await provisioner.provision(trainer_id)
    for error in result.errors:
        console.print(f"[yellow]![/yellow] {error}")
    if not result.success:
        console.print(f"[red]✗[/red] Could not provision {result.schema_name}")
        return 1
    console.print(f"[green]✓[/green] {result.schema_name} provisioned via {result.path.value}")
    return 0


async def verify(settings: Settings, trainer_id: str) -> int:
    report = await _provisioner(settings).verify(trainer_id)
    if report.complete:
        console.print(f"[green]✓[/green] {report.schema_name} has all {len(report.expected_tables)} tables with RLS")
        return 0
    for name in report.missing_tables:
        console.print(f"[red]✗[/red] missing table: {name}")
    for name in report.tables_without_rls:
        console.print(f"[yellow]![/yellow] RLS disabled: {name}")
    return 1


async def list_schemas(settings: Settings) -> int:
    listing = await _inspector(settings).list_tenant_schemas()
    if listing.simulated:
        console.print(f"[yellow]Showing sample data:[/yellow] {listing.error}")

    table = Table(title="Tenant Schemas")
    table.add_column("Schema", style="cyan")
    table.add_column("Trainer")
    table.add_column("Email")
    table.add_column("Tables", justify="right")
    table.add_column("Status")
    for info in listing.schemas:
        table.add_row(
            info.schema_name,
            info.trainer_name,
            info.trainer_email,
            str(info.table_count) if info.table_count is not None else "",
            info.status,
        )
    if not listing.schemas:
        console.print("[dim]No tenant schemas found.[/dim]")
    else:
        console.print(table)
    return 0


async def show_tables(settings: Settings, schema_name: str) -> int:
    tables = await _inspector(settings).tables(schema_name)
    table = Table(title=f"Tables in {schema_name}")
    table.add_column("Table", style="cyan")
    table.add_column("Rows", justify="right")
    table.add_column("RLS")
    for info in tables:
        table.add_row(
            info.table_name,
            str(info.row_count) if info.row_count is not None else "",
            {True: "[green]on[/green]", False: "[red]off[/red]"}.get(info.rls_enabled, "?"),
        )
    console.print(table)
    return 0


async def show_policies(settings: Settings, schema_name: str) -> int:
    policies = await _inspector(settings).policies(schema_name)
    table = Table(title=f"Policies in {schema_name}")
    table.add_column("Table", style="cyan")
    table.add_column("Policy")
    table.add_column("Command")
    for info in policies:
        table.add_row(info.table_name or "", info.policy_name or "", info.command or "")
    console.print(table)
    return 0


async def drop(settings: Settings, schema_name: str, confirmed: bool) -> int:
    if not confirmed:
        console.print(f"[red]Refusing to drop {schema_name} without --yes.[/red] All its data would be lost.")
        return 1
    await _provisioner(settings).drop(schema_name)
    console.print(f"[green]✓[/green] Dropped {schema_name}")
    return 0


async def whoami(settings: Settings, email: str, password: str) -> int:
    client = get_supabase_client()
    admin = get_supabase_admin_client()
    holder = SessionHolder(client, ProfileService(admin or client, settings), settings)
    classifier = PrivilegeClassifier(admin or client, settings.superadmin_seed_email)

    snapshot = await holder.sign_in(email, password)
    try:
        privilege = await classifier.classify_session(snapshot)
        profile = snapshot.profile
        table = Table(title="Session")
        table.add_column("Field", style="cyan")
        table.add_column("Value")
        table.add_row("Principal", f"{snapshot.principal.id} ({snapshot.principal.email})")
        table.add_row("Role", profile.role if profile else "")
        table.add_row("Resolved from", profile.source.value if profile else "")
        table.add_row("Superadmin", f"{privilege.is_superadmin} ({privilege.decided_by.value})")
        if profile is not None and profile.role == "trainer":
            table.add_row("Tenant schema", tenant_schema_name(profile.id, settings.tenant_schema_prefix))
        console.print(table)
    finally:
        await holder.sign_out()
        await holder.close()
    return 0


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Sportiko tenant administration",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("status", help="Probe the backend and show the cached config")

    p = sub.add_parser("schema-name", help="Print the schema name of a trainer")
    p.add_argument("trainer_id")

    p = sub.add_parser("provision", help="Provision a trainer's tenant schema")
    p.add_argument("trainer_id")
    p.add_argument("--dry-run", action="store_true", help="Print the SQL without running it")

    p = sub.add_parser("verify", help="Check a tenant schema against the definition")
    p.add_argument("trainer_id")

    sub.add_parser("schemas", help="List tenant schemas")

    p = sub.add_parser("tables", help="List tables of a schema")
    p.add_argument("schema")

    p = sub.add_parser("policies", help="List RLS policies of a schema")
    p.add_argument("schema")

    p = sub.add_parser("drop", help="Drop a tenant schema and all its data")
    p.add_argument("schema")
    p.add_argument("--yes", action="store_true", help="Confirm the drop")

    p = sub.add_parser("whoami", help="Sign in and show the resolved profile")
    p.add_argument("--email", required=True)
    p.add_argument("--password", required=True)

    args = parser.parse_args()
    settings = get_settings()
    logging.basicConfig(level=settings.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")

    try:
        if args.command == "status":
            code = show_status(settings)
        elif args.command == "schema-name":
            console.print(tenant_schema_name(args.trainer_id, settings.tenant_schema_prefix))
            code = 0
        elif args.command == "provision":
            code = asyncio.run(provision(settings, args.trainer_id, args.dry_run))
        elif args.command == "verify":
            code = asyncio.run(verify(settings, args.trainer_id))
        elif args.command == "schemas":
            code = asyncio.run(list_schemas(settings))
        elif args.command == "tables":
            code = asyncio.run(show_tables(settings, args.schema))
        elif args.command == "policies":
            code = asyncio.run(show_policies(settings, args.schema))
        elif args.command == "drop":
            code = asyncio.run(drop(settings, args.schema, args.yes))
        else:
            code = asyncio.run(whoami(settings, args.email, args.password))
    except SportikoError as e:
        console.print(f"[red]Error:[/red] {e.message}")
        sys.exit(1)

    sys.exit(code)


if __name__ == "__main__":
    main()
