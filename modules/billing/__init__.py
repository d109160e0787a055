"""
Billing module.

Handles trainer subscriptions (status, trial and subscription windows) and
subscription plans.

Public API:
- IBillingService: Interface for billing operations
- subscription_standing: Derived display status of a subscription
- SubscriptionPlan: Plan record
- Billing exceptions: SubscriptionNotFoundError, PlanNotFoundError
"""

from .interfaces import IBillingService
from .models import (
    SubscriptionStatus,
    SubscriptionView,
    SubscriptionStanding,
    DurationUnit,
    Subscription,
    SubscriptionList,
    SubscriptionPlan,
    PlanFeatures,
    PlanList,
    SubscriptionStats,
    DEFAULT_SUBSCRIPTION_PLANS,
    subscription_standing,
)
from .exceptions import (
    SubscriptionNotFoundError,
    PlanNotFoundError,
    EmptyPlanUpdateError,
)

__all__ = [
    # Interface
    "IBillingService",
    # Models
    "SubscriptionStatus",
    "SubscriptionView",
    "SubscriptionStanding",
    "DurationUnit",
    "Subscription",
    "SubscriptionList",
    "SubscriptionPlan",
    "PlanFeatures",
    "PlanList",
    "SubscriptionStats",
    "DEFAULT_SUBSCRIPTION_PLANS",
    "subscription_standing",
    # Exceptions
    "SubscriptionNotFoundError",
    "PlanNotFoundError",
    "EmptyPlanUpdateError",
]
