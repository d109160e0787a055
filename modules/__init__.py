"""
Feature modules for the Sportiko admin backend.

Each module is self-contained with its own:
- models.py: Pydantic models for data transfer
- service.py: Business logic implementation
- repository.py: Supabase queries on the shared schema
- routes.py: FastAPI route handlers
- exceptions.py: Module-specific exceptions

Tenant-scoped data goes through modules.tenants; shared-schema tables go
through each module's repository.
"""
