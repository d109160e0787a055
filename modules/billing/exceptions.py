"""
Billing module exceptions.

These exceptions are raised by the billing module and can be caught
by API error handlers to return appropriate HTTP responses.
"""

from shared.exceptions import NotFoundError, ValidationError


class SubscriptionNotFoundError(NotFoundError):
    """Raised when the trainer holding a subscription does not exist."""

    def __init__(self, trainer_id: str):
        super().__init__(
            f"Subscription not found for trainer: {trainer_id}",
            code="SUBSCRIPTION_NOT_FOUND",
            details={"trainer_id": trainer_id},
        )


class PlanNotFoundError(NotFoundError):
    """Raised when a subscription plan does not exist."""

    def __init__(self, plan_id: str):
        super().__init__(
            f"Subscription plan not found: {plan_id}",
            code="PLAN_NOT_FOUND",
            details={"plan_id": plan_id},
        )


class EmptyPlanUpdateError(ValidationError):
    """Raised when a plan update carries no fields."""

    def __init__(self, plan_id: str):
        super().__init__(
            "No fields to update",
            code="EMPTY_UPDATE",
            details={"plan_id": plan_id},
        )
