"""
Trainers module data models.
"""

import math
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from modules.tenants.models import ProvisioningResult


class Trainer(BaseModel):
    """A row of the shared ``trainers`` table."""

    id: str = Field(..., description="Trainer ID (principal UUID)")
    email: Optional[str] = Field(None, description="Email address")
    full_name: Optional[str] = Field(None, description="Display name")
    avatar_url: Optional[str] = Field(None, description="Avatar URL")
    is_active: Optional[bool] = Field(True, description="Account enabled flag (null counts as active)")
    trial_start: Optional[datetime] = None
    trial_end: Optional[datetime] = None
    subscription_plan: Optional[str] = None
    subscription_status: Optional[str] = None
    subscription_start: Optional[datetime] = None
    subscription_end: Optional[datetime] = None
    created_at: Optional[datetime] = None

    model_config = {"extra": "ignore"}

    @property
    def active(self) -> bool:
        return self.is_active is not False


class TrialState(str, Enum):
    ACTIVE = "active"
    EXPIRED = "expired"


class TrialStatus(BaseModel):
    status: TrialState
    days_left: int = 0


def trial_status(trial_end: Optional[datetime], now: Optional[datetime] = None) -> TrialStatus:
    """Whole days left in a trial, rounded up; no end date counts as expired."""
    if trial_end is None:
        return TrialStatus(status=TrialState.EXPIRED)
    now = now or datetime.now(timezone.utc)
    days_left = math.ceil((trial_end - now).total_seconds() / 86400)
    if days_left > 0:
        return TrialStatus(status=TrialState.ACTIVE, days_left=days_left)
    return TrialStatus(status=TrialState.EXPIRED)


class TrainerWithTrial(Trainer):
    trial: TrialStatus


class TrainerStats(BaseModel):
    total: int = 0
    active: int = 0
    in_trial: int = 0


class SetActiveRequest(BaseModel):
    is_active: bool


class ExtendTrialRequest(BaseModel):
    days: int = Field(default=14, ge=1, le=365)


class OnboardTrainerRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=6)
    full_name: str = Field(..., min_length=1)


class OnboardingResult(BaseModel):
    """
    Outcome of onboarding a trainer.

    Steps already completed are kept when a later one fails.
    """

    trainer_id: str
    trainer_created: bool = False
    provisioning: Optional[ProvisioningResult] = None
    errors: list[str] = Field(default_factory=list)
