"""
Billing module interface.

Routes depend on IBillingService, not the concrete implementation.
"""

from datetime import datetime
from typing import Optional, Protocol, runtime_checkable

from modules.trainers.models import Trainer

from .models import (
    DurationUnit,
    PlanCreate,
    PlanList,
    PlanUpdate,
    SubscriptionList,
    SubscriptionPlan,
    SubscriptionStats,
    SubscriptionStatus,
    SubscriptionView,
)


@runtime_checkable
class IBillingService(Protocol):
    """
    Interface for subscription and plan operations.

    All operations are superadmin-only; authorization happens in the routes.
    """

    async def list_subscriptions(
        self,
        search: Optional[str] = None,
        view_filter: Optional[SubscriptionView] = None,
        now: Optional[datetime] = None,
    ) -> SubscriptionList:
        """
        List trainers with their derived subscription standing.

        Args:
            search: Case-insensitive match on name or email
            view_filter: Only subscriptions in this derived view

        Returns:
            SubscriptionList, flagged simulated if sample data was served
        """
        ...

    async def extend(
        self,
        trainer_id: str,
        amount: int,
        unit: DurationUnit = DurationUnit.DAYS,
        now: Optional[datetime] = None,
    ) -> Trainer:
        """
        Extend a trial or subscription window.

        Raises:
            SubscriptionNotFoundError: If the trainer doesn't exist
        """
        ...

    async def change_plan(
        self,
        trainer_id: str,
        plan: str,
        status: SubscriptionStatus = SubscriptionStatus.ACTIVE,
        now: Optional[datetime] = None,
    ) -> Trainer:
        ...

    async def set_status(self, trainer_id: str, status: SubscriptionStatus) -> Trainer:
        ...

    async def cancel(self, trainer_id: str) -> Trainer:
        ...

    async def list_plans(self) -> PlanList:
        ...

    async def create_plan(self, plan: PlanCreate) -> SubscriptionPlan:
        ...

    async def update_plan(self, plan_id: str, changes: PlanUpdate) -> SubscriptionPlan:
        """
        Update a plan.

        Raises:
            PlanNotFoundError: If no plan has this ID
            EmptyPlanUpdateError: If no fields were given
        """
        ...

    async def stats(self, now: Optional[datetime] = None) -> SubscriptionStats:
        ...
