"""
Players module.

The trainer console: players, homework and dashboard figures, all scoped to
the caller's tenant schema. Also the superadmin overview figures.
"""

from .models import (
    Player,
    PlayerCreate,
    PlayerUpdate,
    Homework,
    HomeworkCreate,
    DashboardStats,
    OverviewStats,
)
from .exceptions import PlayerNotFoundError
from .service import PlayerService, OverviewService, search_expression

__all__ = [
    "Player",
    "PlayerCreate",
    "PlayerUpdate",
    "Homework",
    "HomeworkCreate",
    "DashboardStats",
    "OverviewStats",
    "PlayerNotFoundError",
    "PlayerService",
    "OverviewService",
    "search_expression",
]
