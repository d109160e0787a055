"""
Trainer console API endpoints.

Every response carries the tenant result's ``simulated`` flag, so a client
can tell sample data (superadmin preview, backend failure) from live data.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from api.dependencies import get_overview_service, get_player_service
from modules.tenants.models import TenantResult

from .models import DashboardStats, HomeworkCreate, OverviewStats, PlayerCreate, PlayerUpdate
from .service import OverviewService, PlayerService

router = APIRouter()
overview_router = APIRouter()


@router.get("/players", response_model=TenantResult)
async def list_players(
    search: Optional[str] = Query(default=None, description="Match on name or position"),
    service: PlayerService = Depends(get_player_service),
) -> TenantResult:
    """Players, newest first."""
    return await service.list_players(search)


@router.post("/players", response_model=TenantResult, status_code=201)
async def create_player(
    request: PlayerCreate,
    service: PlayerService = Depends(get_player_service),
) -> TenantResult:
    return await service.create_player(request)


@router.patch("/players/{player_id}", response_model=TenantResult)
async def update_player(
    player_id: str,
    request: PlayerUpdate,
    service: PlayerService = Depends(get_player_service),
) -> TenantResult:
    return await service.update_player(player_id, request)


@router.delete("/players/{player_id}", response_model=TenantResult)
async def delete_player(
    player_id: str,
    service: PlayerService = Depends(get_player_service),
) -> TenantResult:
    return await service.delete_player(player_id)


@router.get("/homework", response_model=TenantResult)
async def list_homework(
    active: bool = Query(default=False, description="Only assignments not yet due"),
    service: PlayerService = Depends(get_player_service),
) -> TenantResult:
    return await service.list_homework(active_only=active)


@router.post("/homework", response_model=TenantResult, status_code=201)
async def create_homework(
    request: HomeworkCreate,
    service: PlayerService = Depends(get_player_service),
) -> TenantResult:
    return await service.create_homework(request)


@router.get("/dashboard", response_model=DashboardStats)
async def dashboard(service: PlayerService = Depends(get_player_service)) -> DashboardStats:
    return await service.dashboard_stats()


@overview_router.get("/dashboard", response_model=OverviewStats)
async def overview(service: OverviewService = Depends(get_overview_service)) -> OverviewStats:
    """Trainer count and order figures across the platform."""
    return await service.stats()
