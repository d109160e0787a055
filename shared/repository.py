"""
Base repository class for database access.

Provides a common abstraction layer for all repositories, encapsulating
Supabase client access and providing shared utilities for data operations.
"""

import logging
from typing import Any, Optional, TypeVar, Generic
from supabase import Client, PostgrestAPIError

from .exceptions import from_backend_error, is_no_rows_error

logger = logging.getLogger(__name__)


T = TypeVar("T")


def fetch_single(query: Any) -> Optional[dict[str, Any]]:
    """
    Execute a query that expects exactly one row or none.

    Applies PostgREST's single-object modifier. The "no rows" case
    (``PGRST116``) is expected and returns None; every other backend error
    propagates to the caller.

    Example:
        row = fetch_single(db.table("superadmins").select("id").eq("id", user_id))
    """
    try:
        result = query.single().execute()
    except PostgrestAPIError as e:
        if is_no_rows_error(e):
            return None
        raise
    return result.data or None


class BaseRepository(Generic[T]):
    """
    Base class for all repositories.

    Provides common functionality for database operations:
    - Supabase client access via self._db
    - Generic type parameter for model type hints

    Subclasses should implement domain-specific data access methods
    and handle dict-to-Pydantic model mapping internally.

    Example:
        class TrainerRepository(BaseRepository[Trainer]):
            def get_by_id(self, trainer_id: str) -> Optional[Trainer]:
                row = fetch_single(
                    self._db.table("trainers").select("*").eq("id", trainer_id)
                )
                return Trainer(**row) if row else None
    """

    def __init__(self, db: Client) -> None:
        """
        Initialize the repository with a Supabase client.

        Args:
            db: Supabase client instance for database operations.
        """
        self._db = db

    def _execute(self, query: Any, action: str, resource: Optional[str] = None) -> Any:
        """
        Execute a query, converting backend errors into SportikoError.

        Returns:
            The supabase-py response
        """
        try:
            return query.execute()
        except PostgrestAPIError as e:
            logger.error("Failed to %s: %s", action, e.message)
            raise from_backend_error(e, action, resource) from e

    def _fetch_one(self, query: Any, action: str, resource: Optional[str] = None) -> Optional[dict[str, Any]]:
        """``fetch_single`` with the same error conversion as ``_execute``."""
        try:
            return fetch_single(query)
        except PostgrestAPIError as e:
            logger.error("Failed to %s: %s", action, e.message)
            raise from_backend_error(e, action, resource) from e
