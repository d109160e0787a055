"""
Profile settings exceptions.
"""

from shared.exceptions import AuthorizationError, NotFoundError


class ProfileNotEditableError(AuthorizationError):
    """Raised for roles without an editable profile row (players, unresolved)."""

    def __init__(self, role: str):
        super().__init__(
            f"Profiles of role '{role}' cannot be edited here",
            code="PROFILE_NOT_EDITABLE",
            details={"role": role},
        )


class ProfileRowNotFoundError(NotFoundError):
    def __init__(self, table: str, user_id: str):
        super().__init__(
            f"No {table} row for {user_id}",
            code="PROFILE_NOT_FOUND",
            details={"table": table, "user_id": user_id},
        )
