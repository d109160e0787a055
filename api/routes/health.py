"""
Health check endpoints.

Provides endpoints for monitoring application health and readiness.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Response
from pydantic import BaseModel

from shared.connection import ConnectionConfig, ConnectionMonitor, ConnectionStatus
from shared.config import get_settings

from ..dependencies import get_connection_monitor, get_container

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    version: str


class ReadinessResponse(BaseModel):
    """Readiness check response model."""

    status: str
    database: ConnectionStatus
    error: Optional[str] = None
    cached_config: Optional[ConnectionConfig] = None


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """
    Basic health check endpoint.

    Returns 200 if the API is running.
    """
    return HealthResponse(status="healthy", version=get_settings().app_version)


@router.get("/ready", response_model=ReadinessResponse)
async def readiness_check(
    response: Response,
    recheck: bool = Query(default=False, description="Probe now instead of using the last result"),
    monitor: ConnectionMonitor = Depends(get_connection_monitor),
) -> ReadinessResponse:
    """
    Readiness check endpoint.

    Reports the backend connectivity probe and the last known-good
    connection config. Responds 503 while the backend is unreachable.
    """
    check = monitor.last_check
    if recheck or check is None:
        check = await monitor.check_now()

    if not check.connected:
        response.status_code = 503
    return ReadinessResponse(
        status="ready" if check.connected else "not_ready",
        database=monitor.status,
        error=check.error,
        cached_config=get_container().connection_cache.retrieve(),
    )
