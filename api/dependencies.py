"""
Dependency injection setup for FastAPI.

This module provides the "container" that wires together all module
implementations, and the per-request context every route builds on:
the validated principal, their resolved profile, the superadmin
classification and the tenant resolver.

Process-wide objects (clients, auth, provisioner, connection monitor) live
in the container. Services that act on behalf of the caller are built per
request around a client carrying the caller's token, so row level security
applies to them.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Optional

from fastapi import Depends
from supabase import Client

from modules.auth.exceptions import InsufficientPermissionsError, ProfileNotResolvedError
from modules.auth.models import PrivilegeStatus, Profile
from modules.catalog.storage import StorageService
from modules.tenants.exceptions import TenantNotReadyError
from modules.tenants.resolver import TenantResolver
from shared.config import Settings, get_settings
from shared.models import AuthenticatedUser

from .middleware.auth import get_access_token, get_current_user

# Type checking imports (avoids import cycles at module load)
if TYPE_CHECKING:
    from modules.auth.interfaces import IAuthService
    from modules.auth.privilege import PrivilegeClassifier
    from modules.billing.interfaces import IBillingService
    from modules.catalog.service import AdService, ShopService
    from modules.players.service import OverviewService, PlayerService
    from modules.profiles.service import ProfileSettingsService
    from modules.tenants.inspector import SchemaInspector
    from modules.tenants.provisioner import TenantProvisioner
    from modules.trainers.service import TrainerService
    from shared.connection import ConnectionConfigCache, ConnectionMonitor


class ServiceContainer:
    """
    Container for process-wide service instances.

    Instances are created lazily on first access and cached. Clients can be
    injected, which is how tests swap in an in-memory backend.

    Args:
        settings: Application settings (defaults to ``get_settings()``)
        client: Anonymous client (defaults to the shared one)
        admin_client: Service-role client (defaults to the shared one, if configured)
        user_client_factory: Builds a client acting as the bearer of a token
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        client: Optional[Client] = None,
        admin_client: Optional[Client] = None,
        user_client_factory: Optional[Callable[[str], Client]] = None,
    ) -> None:
        self._settings = settings
        self._client = client
        self._admin_client = admin_client
        self._admin_injected = admin_client is not None
        self._user_client_factory = user_client_factory
        self._auth_service: "IAuthService | None" = None
        self._classifier: "PrivilegeClassifier | None" = None
        self._provisioner: "TenantProvisioner | None" = None
        self._inspector: "SchemaInspector | None" = None
        self._connection_cache: "ConnectionConfigCache | None" = None
        self._connection_monitor: "ConnectionMonitor | None" = None

    @property
    def settings(self) -> Settings:
        if self._settings is None:
            self._settings = get_settings()
        return self._settings

    @property
    def client(self) -> Client:
        """Anonymous client."""
        if self._client is None:
            from shared.database import get_supabase_client
            self._client = get_supabase_client()
        return self._client

    @property
    def admin_client(self) -> Optional[Client]:
        """Service-role client, or None when no service role key is configured."""
        if not self._admin_injected:
            from shared.database import get_supabase_admin_client
            self._admin_client = get_supabase_admin_client()
            self._admin_injected = True
        return self._admin_client

    @property
    def lookup_client(self) -> Client:
        """Client for reads that precede knowing who the caller is (profiles, privilege)."""
        return self.admin_client or self.client

    def user_client(self, access_token: str) -> Client:
        """Client acting as the bearer of ``access_token``."""
        if self._user_client_factory is not None:
            return self._user_client_factory(access_token)
        from shared.database import get_supabase_user_client
        return get_supabase_user_client(access_token)

    @property
    def auth(self) -> "IAuthService":
        """Get the auth service instance."""
        if self._auth_service is None:
            from modules.auth.profiles import ProfileService
            from modules.auth.service import AuthService
            self._auth_service = AuthService(
                settings=self.settings,
                profiles=ProfileService(self.lookup_client, self.settings),
            )
        return self._auth_service

    @property
    def classifier(self) -> "PrivilegeClassifier":
        if self._classifier is None:
            from modules.auth.privilege import PrivilegeClassifier
            self._classifier = PrivilegeClassifier(
                self.lookup_client, self.settings.superadmin_seed_email
            )
        return self._classifier

    @property
    def provisioner(self) -> "TenantProvisioner":
        if self._provisioner is None:
            from modules.tenants.provisioner import TenantProvisioner
            self._provisioner = TenantProvisioner(self.client, self.settings, self.admin_client)
        return self._provisioner

    @property
    def inspector(self) -> "SchemaInspector":
        if self._inspector is None:
            from modules.tenants.inspector import SchemaInspector
            self._inspector = SchemaInspector(self.client, self.settings, self.admin_client)
        return self._inspector

    @property
    def connection_cache(self) -> "ConnectionConfigCache":
        if self._connection_cache is None:
            from shared.connection import ConnectionConfigCache
            self._connection_cache = ConnectionConfigCache(
                self.settings.connection_cache_path,
                ttl_hours=self.settings.connection_cache_ttl_hours,
            )
        return self._connection_cache

    @property
    def connection_monitor(self) -> "ConnectionMonitor":
        if self._connection_monitor is None:
            from shared.connection import ConnectionConfig, ConnectionMonitor
            self._connection_monitor = ConnectionMonitor(
                self.client,
                interval=self.settings.connection_probe_interval,
                cache=self.connection_cache,
                config=ConnectionConfig.from_settings(self.settings),
            )
        return self._connection_monitor

    def reset(self) -> None:
        """
        Reset all cached services.

        This is primarily for testing - allows tests to get fresh
        service instances with different mock dependencies.
        """
        self._auth_service = None
        self._classifier = None
        self._provisioner = None
        self._inspector = None
        self._connection_cache = None
        self._connection_monitor = None


# Module-level container singleton
_container: ServiceContainer | None = None


def get_container() -> ServiceContainer:
    """Get the singleton service container."""
    global _container
    if _container is None:
        _container = ServiceContainer()
    return _container


def set_container(container: ServiceContainer) -> None:
    """Install a preconfigured container (tests, CLI)."""
    global _container
    _container = container


def reset_container() -> None:
    """
    Reset the service container.

    This clears the cached container, so the next call to get_container()
    will create a fresh container with new service instances.

    Primarily used for testing.
    """
    global _container
    _container = None


# =============================================================================
# Request context
# =============================================================================


@dataclass
class RequestContext:
    """Everything a route knows about its caller."""

    principal: AuthenticatedUser
    profile: Profile
    privilege: PrivilegeStatus
    db: Client
    resolver: TenantResolver

    @property
    def is_superadmin(self) -> bool:
        return self.privilege.is_superadmin


async def get_request_context(
    user: AuthenticatedUser = Depends(get_current_user),
    token: str = Depends(get_access_token),
) -> RequestContext:
    """
    Resolve the caller: profile, classification, user client and tenant.

    FastAPI caches this per request, so every dependency below shares one
    resolution.
    """
    container = get_container()
    profile = await container.auth.resolve_profile(user)
    privilege = await container.classifier.classify(user, profile)
    db = container.user_client(token)
    return RequestContext(
        principal=user,
        profile=profile,
        privilege=privilege,
        db=db,
        resolver=TenantResolver(db, user, profile, container.settings),
    )


async def require_superadmin(ctx: RequestContext = Depends(get_request_context)) -> RequestContext:
    """Gate for the superadmin route tree."""
    if not ctx.is_superadmin:
        raise InsufficientPermissionsError("superadmin", ctx.profile.role)
    return ctx


async def require_tenant(ctx: RequestContext = Depends(get_request_context)) -> RequestContext:
    """
    Gate for the trainer route tree.

    Requires a bound tenant. Superadmins pass and are served sample data.
    """
    if ctx.profile.role == "unresolved":
        raise ProfileNotResolvedError(ctx.principal.id)
    if not ctx.resolver.ready:
        raise TenantNotReadyError(ctx.profile.role)
    return ctx


# =============================================================================
# Services
# =============================================================================
# FastAPI dependency functions. These are the functions that should be used
# in route Depends() calls.


def get_auth_service() -> "IAuthService":
    """FastAPI dependency for auth service."""
    return get_container().auth


def get_provisioner() -> "TenantProvisioner":
    return get_container().provisioner


def get_inspector() -> "SchemaInspector":
    return get_container().inspector


def get_connection_monitor() -> "ConnectionMonitor":
    return get_container().connection_monitor


def get_storage_service(ctx: RequestContext = Depends(get_request_context)) -> StorageService:
    return StorageService(ctx.db, get_container().settings)


def get_trainer_service(ctx: RequestContext = Depends(require_superadmin)) -> "TrainerService":
    from modules.trainers.repository import TrainerRepository
    from modules.trainers.service import TrainerService
    container = get_container()
    return TrainerService(
        TrainerRepository(ctx.db),
        container.provisioner,
        container.settings,
        container.admin_client,
    )


def get_billing_service(ctx: RequestContext = Depends(require_superadmin)) -> "IBillingService":
    """FastAPI dependency for billing service."""
    from modules.billing.repository import PlanRepository
    from modules.billing.service import BillingService
    from modules.trainers.repository import TrainerRepository
    return BillingService(TrainerRepository(ctx.db), PlanRepository(ctx.db))


def get_ad_service(ctx: RequestContext = Depends(get_request_context)) -> "AdService":
    from modules.catalog.repository import AdRepository
    from modules.catalog.service import AdService
    return AdService(AdRepository(ctx.db))


def get_shop_service(ctx: RequestContext = Depends(get_request_context)) -> "ShopService":
    from modules.catalog.repository import OrderRepository, ShopItemRepository
    from modules.catalog.service import ShopService
    return ShopService(ShopItemRepository(ctx.db), OrderRepository(ctx.db))


def get_player_service(ctx: RequestContext = Depends(require_tenant)) -> "PlayerService":
    from modules.players.service import PlayerService
    return PlayerService(ctx.resolver)


def get_overview_service(ctx: RequestContext = Depends(require_superadmin)) -> "OverviewService":
    from modules.players.service import OverviewService
    return OverviewService(ctx.db)


def get_profile_settings_service(
    ctx: RequestContext = Depends(get_request_context),
    storage: StorageService = Depends(get_storage_service),
) -> "ProfileSettingsService":
    from modules.profiles.service import ProfileSettingsService
    return ProfileSettingsService(ctx.db, storage, get_container().admin_client)
