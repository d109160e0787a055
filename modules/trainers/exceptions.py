"""
Trainers module exceptions.
"""

from shared.exceptions import AuthorizationError, ExternalServiceError, NotFoundError


class TrainerNotFoundError(NotFoundError):
    """Raised when a trainer row does not exist."""

    def __init__(self, trainer_id: str):
        super().__init__(
            f"Trainer not found: {trainer_id}",
            code="TRAINER_NOT_FOUND",
            details={"trainer_id": trainer_id},
        )


class TrainerDeletionError(AuthorizationError):
    """Raised when a delete reported success but the row is still there."""

    def __init__(self, trainer_id: str):
        super().__init__(
            "Trainer still exists after deletion; the delete was likely blocked by row level security",
            code="TRAINER_NOT_DELETED",
            details={"trainer_id": trainer_id},
        )


class ServiceRoleRequiredError(ExternalServiceError):
    """Raised when an operation needs the service role key and none is configured."""

    def __init__(self, operation: str):
        super().__init__(
            f"{operation} requires SUPABASE_SERVICE_ROLE_KEY",
            service="supabase",
            code="SERVICE_ROLE_REQUIRED",
            details={"operation": operation},
        )


class TrainerOnboardingError(ExternalServiceError):
    """Raised when the auth backend refuses to create the trainer's principal."""

    def __init__(self, email: str, message: str):
        super().__init__(
            f"Could not create account for {email}: {message}",
            service="supabase",
            code="ONBOARDING_FAILED",
            details={"email": email},
        )
