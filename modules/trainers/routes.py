"""
Trainer management API endpoints (superadmin).
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from api.dependencies import get_trainer_service

from .models import (
    ExtendTrialRequest,
    OnboardingResult,
    OnboardTrainerRequest,
    SetActiveRequest,
    Trainer,
    TrainerStats,
    TrainerWithTrial,
)
from .service import TrainerService

router = APIRouter()


@router.get("", response_model=list[TrainerWithTrial])
async def list_trainers(
    search: Optional[str] = Query(default=None, description="Match on name or email"),
    service: TrainerService = Depends(get_trainer_service),
) -> list[TrainerWithTrial]:
    """List trainers, newest first, with their trial status."""
    return await service.list_trainers(search)


@router.get("/stats", response_model=TrainerStats)
async def trainer_stats(service: TrainerService = Depends(get_trainer_service)) -> TrainerStats:
    return await service.stats()


@router.post("", response_model=OnboardingResult, status_code=201)
async def onboard_trainer(
    request: OnboardTrainerRequest,
    service: TrainerService = Depends(get_trainer_service),
) -> OnboardingResult:
    """
    Create a trainer account, its profile row and its tenant schema.

    Requires the service role key. Partial failures are reported in the
    body; completed steps are kept.
    """
    return await service.onboard_trainer(request.email, request.password, request.full_name)


@router.put("/{trainer_id}/active", response_model=Trainer)
async def set_active(
    trainer_id: str,
    request: SetActiveRequest,
    service: TrainerService = Depends(get_trainer_service),
) -> Trainer:
    return await service.set_active(trainer_id, request.is_active)


@router.post("/{trainer_id}/toggle-active", response_model=Trainer)
async def toggle_active(
    trainer_id: str,
    service: TrainerService = Depends(get_trainer_service),
) -> Trainer:
    return await service.toggle_active(trainer_id)


@router.post("/{trainer_id}/extend-trial", response_model=Trainer)
async def extend_trial(
    trainer_id: str,
    request: ExtendTrialRequest,
    service: TrainerService = Depends(get_trainer_service),
) -> Trainer:
    return await service.extend_trial(trainer_id, request.days)


@router.delete("/{trainer_id}", status_code=204)
async def delete_trainer(
    trainer_id: str,
    service: TrainerService = Depends(get_trainer_service),
) -> None:
    """Delete a trainer; fails if the row is still present afterwards."""
    await service.delete_trainer(trainer_id)
