"""
Centralized configuration for the Sportiko admin service.

All settings are loaded from environment variables with sensible defaults.
Module-specific settings should be namespaced (e.g., SUPABASE_*, CONNECTION_*).
"""

from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Sportiko Admin API"
    app_version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    reload: bool = False

    # CORS settings
    cors_origins: list[str] = ["http://localhost:5173", "http://localhost:3000"]
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = ["*"]
    cors_allow_headers: list[str] = ["*"]

    # Supabase
    supabase_url: str = ""
    supabase_anon_key: str = ""
    supabase_service_role_key: str = ""
    supabase_jwt_secret: str = ""

    # Identity resolution
    superadmin_seed_email: str = "superadmin_pt@sportiko.eu"
    enable_seed_identities: bool = True
    # Grant a trainer profile to principals found in no profile table.
    # Off by default: such principals resolve to an unresolved profile.
    fallback_trainer_profile: bool = False

    # Tenancy
    shared_schema: str = "public"
    tenant_schema_prefix: str = "pt_"
    simulate_on_backend_error: bool = True

    # Connectivity probe
    connection_probe_interval: int = 30  # seconds
    connection_cache_path: str = ".sportiko_db_config.json"
    connection_cache_ttl_hours: int = 24

    # Storage
    max_upload_bytes: int = 5 * 1024 * 1024

    # Subscriptions
    trial_days: int = 14


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()
