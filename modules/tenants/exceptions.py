"""
Tenants module exceptions.

These exceptions are raised by the tenants module and can be caught
by API error handlers to return appropriate HTTP responses.
"""

from typing import Optional

from shared.exceptions import AuthorizationError, ExternalServiceError, ValidationError


class InvalidTenantIdentifierError(ValidationError):
    """Raised when a trainer id or schema name cannot address a tenant schema."""

    def __init__(self, value: str, reason: str):
        super().__init__(
            f"Invalid tenant identifier '{value}': {reason}",
            code="INVALID_TENANT_IDENTIFIER",
            details={"value": value, "reason": reason},
        )


class TenantNotReadyError(AuthorizationError):
    """Raised when tenant-scoped queries are issued before a tenant is bound."""

    def __init__(self, role: Optional[str] = None):
        super().__init__(
            "Tenant schema not available",
            code="TENANT_NOT_READY",
            details={"role": role} if role else {},
        )


class UnknownTenantTableError(ValidationError):
    """Raised when a query addresses a table that tenant schemas do not have."""

    def __init__(self, table: str):
        super().__init__(
            f"Unknown tenant table: {table}",
            code="UNKNOWN_TENANT_TABLE",
            details={"table": table},
        )


class ProvisioningError(ExternalServiceError):
    """Raised when a tenant schema operation is rejected by the backend."""

    def __init__(self, schema_name: str, message: str):
        super().__init__(
            f"Schema operation failed for {schema_name}: {message}",
            service="supabase",
            code="PROVISIONING_FAILED",
            details={"schema_name": schema_name},
        )
