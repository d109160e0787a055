"""
Trainers module.

Superadmin management of trainer accounts: listing, activation, trial
extension, deletion and onboarding (account, profile row, tenant schema).
"""

from .models import (
    Trainer,
    TrainerStats,
    TrainerWithTrial,
    TrialState,
    TrialStatus,
    OnboardingResult,
    trial_status,
)
from .exceptions import (
    TrainerNotFoundError,
    TrainerDeletionError,
    ServiceRoleRequiredError,
    TrainerOnboardingError,
)
from .repository import TrainerRepository
from .service import TrainerService

__all__ = [
    "Trainer",
    "TrainerStats",
    "TrainerWithTrial",
    "TrialState",
    "TrialStatus",
    "OnboardingResult",
    "trial_status",
    "TrainerNotFoundError",
    "TrainerDeletionError",
    "ServiceRoleRequiredError",
    "TrainerOnboardingError",
    "TrainerRepository",
    "TrainerService",
]
