"""
Trainer repository for database access.

Encapsulates Supabase queries on the shared ``trainers`` table.
"""

from typing import Any, Optional

from shared.repository import BaseRepository

from .models import Trainer

TRAINERS_TABLE = "trainers"


class TrainerRepository(BaseRepository[Trainer]):
    """
    Repository for trainer rows.

    Note: This repository does NOT perform authorization checks.
    Routes restrict it to superadmins.
    """

    def list_trainers(self) -> list[Trainer]:
        """All trainers, newest first."""
        result = self._execute(
            self._db.table(TRAINERS_TABLE).select("*").order("created_at", desc=True),
            "load trainers",
            TRAINERS_TABLE,
        )
        return [Trainer.model_validate(row) for row in result.data or []]

    def get_trainer(self, trainer_id: str) -> Optional[Trainer]:
        row = self._fetch_one(
            self._db.table(TRAINERS_TABLE).select("*").eq("id", trainer_id),
            "load trainer",
            TRAINERS_TABLE,
        )
        return Trainer.model_validate(row) if row else None

    def create_trainer(self, data: dict[str, Any]) -> Trainer:
        result = self._execute(
            self._db.table(TRAINERS_TABLE).insert(data),
            "create trainer",
            TRAINERS_TABLE,
        )
        return Trainer.model_validate(result.data[0])

    def update_trainer(self, trainer_id: str, data: dict[str, Any]) -> Optional[Trainer]:
        """Update a trainer. Returns None when no row matched."""
        result = self._execute(
            self._db.table(TRAINERS_TABLE).update(data).eq("id", trainer_id),
            "update trainer",
            TRAINERS_TABLE,
        )
        if not result.data:
            return None
        return Trainer.model_validate(result.data[0])

    def delete_trainer(self, trainer_id: str) -> None:
        self._execute(
            self._db.table(TRAINERS_TABLE).delete().eq("id", trainer_id),
            "delete trainer",
            TRAINERS_TABLE,
        )
