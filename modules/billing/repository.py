"""
Subscription plan repository.

Encapsulates Supabase queries on the shared ``subscription_plans`` table.
Subscription state itself is read and written through the trainer
repository.
"""

import json
from typing import Any, Optional

from shared.repository import BaseRepository

from .models import SubscriptionPlan

PLANS_TABLE = "subscription_plans"


def _to_row(data: dict[str, Any]) -> dict[str, Any]:
    row = dict(data)
    if "price" in row and row["price"] is not None:
        row["price"] = float(row["price"])
    if "features" in row and row["features"] is not None:
        row["features"] = json.dumps(row["features"])
    return row


class PlanRepository(BaseRepository[SubscriptionPlan]):
    def list_plans(self) -> list[SubscriptionPlan]:
        """All plans, cheapest first."""
        result = self._execute(
            self._db.table(PLANS_TABLE).select("*").order("price"),
            "load subscription plans",
            PLANS_TABLE,
        )
        return [SubscriptionPlan.model_validate(row) for row in result.data or []]

    def create_plan(self, data: dict[str, Any]) -> SubscriptionPlan:
        result = self._execute(
            self._db.table(PLANS_TABLE).insert(_to_row(data)),
            "create subscription plan",
            PLANS_TABLE,
        )
        return SubscriptionPlan.model_validate(result.data[0])

    def update_plan(self, plan_id: str, data: dict[str, Any]) -> Optional[SubscriptionPlan]:
        result = self._execute(
            self._db.table(PLANS_TABLE).update(_to_row(data)).eq("id", plan_id),
            "update subscription plan",
            PLANS_TABLE,
        )
        if not result.data:
            return None
        return SubscriptionPlan.model_validate(result.data[0])
