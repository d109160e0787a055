"""
FastAPI application factory.

Creates and configures the FastAPI application instance. Two disjoint route
trees sit under ``/api``: ``/api/superadmin/*`` for classified superadmins
and ``/api/trainer/*`` for callers with a bound tenant.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from modules.billing.routes import plans_router, router as subscriptions_router
from modules.catalog.routes import ads_router, shop_router, trainer_router as catalog_trainer_router
from modules.players.routes import overview_router, router as players_router
from modules.profiles.routes import router as profile_router
from modules.tenants.routes import router as tenants_router
from modules.trainers.routes import router as trainers_router
from shared.config import get_settings
from shared.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ExternalServiceError,
    NotFoundError,
    SportikoError,
    ValidationError,
)

from .dependencies import get_container, require_superadmin, require_tenant
from .models.errors import ErrorResponse
from .routes import auth, health

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Starts the backend connectivity probe and stops it on shutdown.
    """
    settings = get_settings()
    logger.info("Starting %s on %s:%s", settings.app_name, settings.host, settings.port)
    monitor = get_container().connection_monitor
    monitor.start()
    yield
    await monitor.stop()
    logger.info("Shutting down %s", settings.app_name)


def _status_for(exc: SportikoError) -> int:
    if isinstance(exc, NotFoundError):
        return status.HTTP_404_NOT_FOUND
    if isinstance(exc, AuthenticationError):
        return status.HTTP_401_UNAUTHORIZED
    if isinstance(exc, AuthorizationError):
        return status.HTTP_403_FORBIDDEN
    if isinstance(exc, ExternalServiceError):
        return status.HTTP_502_BAD_GATEWAY
    return status.HTTP_400_BAD_REQUEST


async def sportiko_error_handler(request: Request, exc: SportikoError) -> JSONResponse:
    status_code = _status_for(exc)
    if status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthenticationError) else None
    return JSONResponse(status_code=status_code, content=exc.to_dict(), headers=headers)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last resort: log the failure and return a generic body."""
    logger.error("Unhandled exception on %s %s", request.method, request.url.path, exc_info=exc)
    body = ErrorResponse(error="INTERNAL_ERROR", message="Something went wrong")
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=body.model_dump())


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI instance
    """
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Multi-tenant administration API for the Sportiko trainer platform",
        version=settings.app_version,
        lifespan=lifespan,
        docs_url="/api/docs" if settings.debug else None,
        redoc_url="/api/redoc" if settings.debug else None,
    )

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

    app.add_exception_handler(SportikoError, sportiko_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    # Register routes
    app.include_router(health.router, prefix="/api", tags=["health"])
    app.include_router(auth.router, prefix="/api/auth", tags=["auth"])

    superadmin = [Depends(require_superadmin)]
    app.include_router(overview_router, prefix="/api/superadmin", tags=["superadmin"], dependencies=superadmin)
    app.include_router(trainers_router, prefix="/api/superadmin/trainers", tags=["trainers"], dependencies=superadmin)
    app.include_router(
        subscriptions_router, prefix="/api/superadmin/subscriptions", tags=["subscriptions"], dependencies=superadmin
    )
    app.include_router(plans_router, prefix="/api/superadmin/plans", tags=["subscriptions"], dependencies=superadmin)
    app.include_router(ads_router, prefix="/api/superadmin/ads", tags=["ads"], dependencies=superadmin)
    app.include_router(shop_router, prefix="/api/superadmin/shop-items", tags=["shop"], dependencies=superadmin)
    app.include_router(tenants_router, prefix="/api/superadmin/schemas", tags=["schemas"], dependencies=superadmin)
    app.include_router(profile_router, prefix="/api/superadmin/profile", tags=["profile"], dependencies=superadmin)

    tenant = [Depends(require_tenant)]
    app.include_router(players_router, prefix="/api/trainer", tags=["trainer"], dependencies=tenant)
    app.include_router(catalog_trainer_router, prefix="/api/trainer", tags=["trainer"], dependencies=tenant)
    app.include_router(profile_router, prefix="/api/trainer/profile", tags=["profile"], dependencies=tenant)

    return app


# Application instance for uvicorn
app = create_app()
