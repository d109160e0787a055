"""
Subscription and plan API endpoints (superadmin).
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from api.dependencies import get_billing_service
from modules.trainers.models import Trainer

from .interfaces import IBillingService
from .models import (
    ChangePlanRequest,
    ExtendSubscriptionRequest,
    PlanCreate,
    PlanList,
    PlanUpdate,
    SetStatusRequest,
    SubscriptionList,
    SubscriptionPlan,
    SubscriptionStats,
    SubscriptionView,
)

router = APIRouter()
plans_router = APIRouter()


@router.get("", response_model=SubscriptionList)
async def list_subscriptions(
    search: Optional[str] = Query(default=None, description="Match on name or email"),
    view: Optional[SubscriptionView] = Query(default=None, description="Filter by derived standing"),
    service: IBillingService = Depends(get_billing_service),
) -> SubscriptionList:
    """
    List subscriptions.

    Falls back to sample data, flagged ``simulated``, when trainers cannot
    be loaded.
    """
    return await service.list_subscriptions(search, view)


@router.get("/stats", response_model=SubscriptionStats)
async def subscription_stats(service: IBillingService = Depends(get_billing_service)) -> SubscriptionStats:
    return await service.stats()


@router.post("/{trainer_id}/extend", response_model=Trainer)
async def extend_subscription(
    trainer_id: str,
    request: ExtendSubscriptionRequest,
    service: IBillingService = Depends(get_billing_service),
) -> Trainer:
    return await service.extend(trainer_id, request.amount, request.unit)


@router.put("/{trainer_id}/plan", response_model=Trainer)
async def change_plan(
    trainer_id: str,
    request: ChangePlanRequest,
    service: IBillingService = Depends(get_billing_service),
) -> Trainer:
    return await service.change_plan(trainer_id, request.plan, request.status)


@router.put("/{trainer_id}/status", response_model=Trainer)
async def set_status(
    trainer_id: str,
    request: SetStatusRequest,
    service: IBillingService = Depends(get_billing_service),
) -> Trainer:
    return await service.set_status(trainer_id, request.status)


@router.post("/{trainer_id}/cancel", response_model=Trainer)
async def cancel_subscription(
    trainer_id: str,
    service: IBillingService = Depends(get_billing_service),
) -> Trainer:
    """Cancel and deactivate."""
    return await service.cancel(trainer_id)


@plans_router.get("", response_model=PlanList)
async def list_plans(service: IBillingService = Depends(get_billing_service)) -> PlanList:
    return await service.list_plans()


@plans_router.post("", response_model=SubscriptionPlan, status_code=201)
async def create_plan(
    request: PlanCreate,
    service: IBillingService = Depends(get_billing_service),
) -> SubscriptionPlan:
    return await service.create_plan(request)


@plans_router.patch("/{plan_id}", response_model=SubscriptionPlan)
async def update_plan(
    plan_id: str,
    request: PlanUpdate,
    service: IBillingService = Depends(get_billing_service),
) -> SubscriptionPlan:
    return await service.update_plan(plan_id, request)
