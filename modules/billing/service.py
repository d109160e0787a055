"""
Subscription management for the superadmin console.

Lists trainers with their derived subscription standing, extends and
changes subscriptions, and manages plans. Listing falls back to sample
data, flagged as simulated, when the backend cannot be read.
"""

import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

from dateutil.relativedelta import relativedelta

from modules.tenants.fixtures import sample_data
from modules.trainers.models import Trainer
from modules.trainers.repository import TrainerRepository
from shared.exceptions import SportikoError

from .exceptions import EmptyPlanUpdateError, PlanNotFoundError, SubscriptionNotFoundError
from .interfaces import IBillingService
from .models import (
    DEFAULT_SUBSCRIPTION_PLANS,
    DurationUnit,
    PlanCreate,
    PlanList,
    PlanUpdate,
    Subscription,
    SubscriptionList,
    SubscriptionPlan,
    SubscriptionStats,
    SubscriptionStatus,
    SubscriptionView,
    subscription_standing,
)
from .repository import PlanRepository

logger = logging.getLogger(__name__)


def add_duration(start: datetime, amount: int, unit: DurationUnit) -> datetime:
    """Calendar-aware addition (month ends clamp, leap years respected)."""
    if unit == DurationUnit.DAYS:
        return start + relativedelta(days=amount)
    if unit == DurationUnit.MONTHS:
        return start + relativedelta(months=amount)
    return start + relativedelta(years=amount)


class BillingService(IBillingService):
    """
    Implementation of the billing service over the trainers and
    subscription_plans tables.
    """

    def __init__(self, trainers: TrainerRepository, plans: PlanRepository):
        self._trainers = trainers
        self._plans = plans

    def _require(self, trainer_id: str) -> Trainer:
        trainer = self._trainers.get_trainer(trainer_id)
        if trainer is None:
            raise SubscriptionNotFoundError(trainer_id)
        return trainer

    def _update(self, trainer_id: str, data: dict) -> Trainer:
        trainer = self._trainers.update_trainer(trainer_id, data)
        if trainer is None:
            raise SubscriptionNotFoundError(trainer_id)
        return trainer

    # -------------------------------------------------------------------------
    # Subscriptions
    # -------------------------------------------------------------------------

    async def list_subscriptions(
        self,
        search: Optional[str] = None,
        view_filter: Optional[SubscriptionView] = None,
        now: Optional[datetime] = None,
    ) -> SubscriptionList:
        simulated = False
        error = None
        try:
            trainers = self._trainers.list_trainers()
        except SportikoError as e:
            logger.error("Error loading trainers, using sample data: %s", e.message)
            trainers = [Trainer.model_validate(row) for row in sample_data(now)["trainers"]]
            simulated = True
            error = e.message

        subscriptions = [
            Subscription(**t.model_dump(), standing=subscription_standing(t, now)) for t in trainers
        ]
        if search:
            needle = search.lower()
            subscriptions = [
                s for s in subscriptions
                if needle in (s.full_name or "").lower() or needle in (s.email or "").lower()
            ]
        if view_filter is not None:
            subscriptions = [s for s in subscriptions if s.standing.view == view_filter]
        return SubscriptionList(subscriptions=subscriptions, simulated=simulated, error=error)

    async def extend(
        self,
        trainer_id: str,
        amount: int,
        unit: DurationUnit = DurationUnit.DAYS,
        now: Optional[datetime] = None,
    ) -> Trainer:
        """
        Extend a subscription.

        Trials extend ``trial_end``; everything else extends
        ``subscription_end``, starting from now when it has none.
        """
        trainer = self._require(trainer_id)
        now = now or datetime.now(timezone.utc)

        if trainer.subscription_status == SubscriptionStatus.TRIAL.value:
            new_end = add_duration(trainer.trial_end or now, amount, unit)
            field = "trial_end"
        else:
            new_end = add_duration(trainer.subscription_end or now, amount, unit)
            field = "subscription_end"

        logger.info("Extending %s of %s to %s", field, trainer_id, new_end.isoformat())
        return self._update(trainer_id, {field: new_end.isoformat()})

    async def change_plan(
        self,
        trainer_id: str,
        plan: str,
        status: SubscriptionStatus = SubscriptionStatus.ACTIVE,
        now: Optional[datetime] = None,
    ) -> Trainer:
        """Change plan and status; moving to active starts a one-month window."""
        data = {"subscription_plan": plan, "subscription_status": status.value}
        if status == SubscriptionStatus.ACTIVE:
            now = now or datetime.now(timezone.utc)
            data["subscription_start"] = now.isoformat()
            data["subscription_end"] = add_duration(now, 1, DurationUnit.MONTHS).isoformat()
        return self._update(trainer_id, data)

    async def set_status(self, trainer_id: str, status: SubscriptionStatus) -> Trainer:
        """Set any status; no transition rules apply."""
        return self._update(trainer_id, {"subscription_status": status.value})

    async def cancel(self, trainer_id: str) -> Trainer:
        """Cancel the subscription and deactivate the trainer."""
        return self._update(
            trainer_id,
            {"subscription_status": SubscriptionStatus.CANCELLED.value, "is_active": False},
        )

    # -------------------------------------------------------------------------
    # Plans
    # -------------------------------------------------------------------------

    async def list_plans(self) -> PlanList:
        try:
            return PlanList(plans=self._plans.list_plans())
        except SportikoError as e:
            logger.error("Error loading plans, using defaults: %s", e.message)
            return PlanList(plans=list(DEFAULT_SUBSCRIPTION_PLANS), simulated=True, error=e.message)

    async def create_plan(self, plan: PlanCreate) -> SubscriptionPlan:
        return self._plans.create_plan(plan.model_dump(mode="json"))

    async def update_plan(self, plan_id: str, changes: PlanUpdate) -> SubscriptionPlan:
        data = changes.model_dump(mode="json", exclude_none=True)
        if not data:
            raise EmptyPlanUpdateError(plan_id)
        plan = self._plans.update_plan(plan_id, data)
        if plan is None:
            raise PlanNotFoundError(plan_id)
        return plan

    async def stats(self, now: Optional[datetime] = None) -> SubscriptionStats:
        """
        Headline numbers.

        Revenue sums the price of the plan matching (by name) each trainer
        whose stored status is active.
        """
        listing = await self.list_subscriptions(now=now)
        plans = await self.list_plans()
        prices = {p.name.lower(): p.price for p in plans.plans}

        views = [s.standing.view for s in listing.subscriptions]
        revenue = sum(
            (
                prices.get((s.subscription_plan or "").lower(), Decimal("0"))
                for s in listing.subscriptions
                if s.subscription_status == SubscriptionStatus.ACTIVE.value
            ),
            Decimal("0"),
        )
        return SubscriptionStats(
            total=len(views),
            active=views.count(SubscriptionView.ACTIVE),
            trial=views.count(SubscriptionView.TRIAL_ACTIVE),
            expired=views.count(SubscriptionView.EXPIRED) + views.count(SubscriptionView.TRIAL_EXPIRED),
            monthly_revenue=revenue,
            simulated=listing.simulated or plans.simulated,
        )
