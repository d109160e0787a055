"""
Billing module data models.

Subscription state lives on the trainer row (plan, status, trial window,
subscription window). Plans live in the shared ``subscription_plans`` table.
"""

import json
import math
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

from modules.trainers.models import Trainer

EXPIRING_SOON_DAYS = 7


class SubscriptionStatus(str, Enum):
    """Stored subscription status. Transitions are not enforced."""

    TRIAL = "trial"
    ACTIVE = "active"
    CANCELLED = "cancelled"
    EXPIRED = "expired"


class SubscriptionView(str, Enum):
    """Status as displayed, derived from the stored status and the dates."""

    TRIAL_ACTIVE = "trial_active"
    TRIAL_EXPIRED = "trial_expired"
    ACTIVE = "active"
    EXPIRING_SOON = "expiring_soon"
    EXPIRED = "expired"
    CANCELLED = "cancelled"
    INACTIVE = "inactive"


class DurationUnit(str, Enum):
    DAYS = "days"
    MONTHS = "months"
    YEARS = "years"


class SubscriptionStanding(BaseModel):
    view: SubscriptionView
    label: str
    days_left: Optional[int] = None


def _days_left(end: datetime, now: datetime) -> int:
    return math.ceil((end - now).total_seconds() / 86400)


def subscription_standing(trainer: Trainer, now: Optional[datetime] = None) -> SubscriptionStanding:
    """
    Derive the displayed subscription status of a trainer.

    A trial without an end date counts as expired. An active subscription
    needs an end date; without one it shows as inactive.
    """
    now = now or datetime.now(timezone.utc)
    status = trainer.subscription_status

    if status == SubscriptionStatus.TRIAL.value:
        if trainer.trial_end is None or now > trainer.trial_end:
            return SubscriptionStanding(view=SubscriptionView.TRIAL_EXPIRED, label="Trial Expired")
        days = _days_left(trainer.trial_end, now)
        return SubscriptionStanding(
            view=SubscriptionView.TRIAL_ACTIVE, label=f"Trial ({days}d left)", days_left=days
        )

    if status == SubscriptionStatus.ACTIVE.value and trainer.subscription_end is not None:
        if now > trainer.subscription_end:
            return SubscriptionStanding(view=SubscriptionView.EXPIRED, label="Expired")
        days = _days_left(trainer.subscription_end, now)
        if days <= EXPIRING_SOON_DAYS:
            return SubscriptionStanding(
                view=SubscriptionView.EXPIRING_SOON, label=f"Expires in {days}d", days_left=days
            )
        return SubscriptionStanding(view=SubscriptionView.ACTIVE, label="Active", days_left=days)

    if status == SubscriptionStatus.CANCELLED.value:
        return SubscriptionStanding(view=SubscriptionView.CANCELLED, label="Cancelled")

    return SubscriptionStanding(view=SubscriptionView.INACTIVE, label="Inactive")


class Subscription(Trainer):
    """A trainer row together with its derived standing."""

    standing: SubscriptionStanding


class SubscriptionList(BaseModel):
    subscriptions: list[Subscription] = Field(default_factory=list)
    simulated: bool = Field(default=False, description="Sample data served because loading failed")
    error: Optional[str] = None


class PlanFeatures(BaseModel):
    players_limit: Optional[int] = None
    storage_limit: Optional[str] = None
    advanced_analytics: bool = False
    team_features: bool = False

    model_config = {"extra": "allow"}


class SubscriptionPlan(BaseModel):
    """
    A subscription plan.

    Plans are matched to trainers by name (case-insensitive) against the
    trainer's ``subscription_plan``.
    """

    id: str = Field(..., description="Plan ID")
    name: str = Field(..., description="Display name")
    description: Optional[str] = Field(None, description="Plan description")
    price: Decimal = Field(..., description="Price per billing period")
    billing_period: str = Field(default="monthly", description="Billing period")
    features: PlanFeatures = Field(default_factory=PlanFeatures)
    is_active: bool = Field(default=True, description="Offered to new subscribers")

    model_config = {"extra": "ignore", "coerce_numbers_to_str": True}

    @field_validator("features", mode="before")
    @classmethod
    def _parse_features(cls, value: Any) -> Any:
        # Stored as a JSON string by older clients.
        if isinstance(value, str):
            return json.loads(value) if value else {}
        return value or {}


# Default subscription plans
DEFAULT_SUBSCRIPTION_PLANS = [
    SubscriptionPlan(
        id="1",
        name="Basic",
        description="Essential features for individual trainers",
        price=Decimal("9.99"),
        features=PlanFeatures(players_limit=20, storage_limit="1GB"),
    ),
    SubscriptionPlan(
        id="2",
        name="Pro",
        description="Advanced features for professional trainers",
        price=Decimal("19.99"),
        features=PlanFeatures(players_limit=50, storage_limit="5GB", advanced_analytics=True),
    ),
    SubscriptionPlan(
        id="3",
        name="Team",
        description="Complete solution for training teams",
        price=Decimal("49.99"),
        features=PlanFeatures(
            players_limit=100,
            storage_limit="20GB",
            advanced_analytics=True,
            team_features=True,
        ),
    ),
]


class PlanList(BaseModel):
    plans: list[SubscriptionPlan] = Field(default_factory=list)
    simulated: bool = False
    error: Optional[str] = None


class SubscriptionStats(BaseModel):
    total: int = 0
    active: int = 0
    trial: int = 0
    expired: int = Field(default=0, description="Expired subscriptions and expired trials")
    monthly_revenue: Decimal = Field(default=Decimal("0"), description="Sum of active plan prices")
    simulated: bool = False


# =============================================================================
# Requests
# =============================================================================


class ExtendSubscriptionRequest(BaseModel):
    amount: int = Field(..., ge=1, description="How many units to add")
    unit: DurationUnit = Field(default=DurationUnit.DAYS)


class ChangePlanRequest(BaseModel):
    plan: str = Field(..., min_length=1, description="Plan identifier")
    status: SubscriptionStatus = Field(default=SubscriptionStatus.ACTIVE)


class SetStatusRequest(BaseModel):
    status: SubscriptionStatus


class PlanCreate(BaseModel):
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    price: Decimal = Field(..., ge=0)
    billing_period: str = "monthly"
    features: PlanFeatures = Field(default_factory=PlanFeatures)
    is_active: bool = True


class PlanUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[Decimal] = Field(None, ge=0)
    billing_period: Optional[str] = None
    features: Optional[PlanFeatures] = None
    is_active: Optional[bool] = None
