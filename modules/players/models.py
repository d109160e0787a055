"""
Players module data models.

Rows of a trainer's tenant schema (players, homework) and the dashboard
aggregates built from them.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Annotated, Optional

from pydantic import BaseModel, Field, PlainSerializer

# Summed exactly, sent to clients as a JSON number.
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class Player(BaseModel):
    id: str = Field(..., description="Player ID")
    name: str = Field(..., description="Full name")
    birth_date: Optional[date] = None
    position: Optional[str] = None
    contact: Optional[str] = None
    avatar_url: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = {"extra": "ignore"}


class PlayerCreate(BaseModel):
    name: str = Field(..., min_length=1, description="Full name")
    birth_date: Optional[date] = None
    position: Optional[str] = None
    contact: Optional[str] = None
    avatar_url: Optional[str] = None


class PlayerUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    birth_date: Optional[date] = None
    position: Optional[str] = None
    contact: Optional[str] = None
    avatar_url: Optional[str] = None


class Homework(BaseModel):
    id: str
    player_id: Optional[str] = None
    title: str
    description: Optional[str] = None
    due_date: Optional[datetime] = None
    completed: bool = False
    created_at: Optional[datetime] = None

    model_config = {"extra": "ignore"}


class HomeworkCreate(BaseModel):
    player_id: Optional[str] = Field(None, description="Assigned player")
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    due_date: Optional[datetime] = None


class DashboardStats(BaseModel):
    """Trainer dashboard figures."""

    total_players: int = 0
    active_homework: int = 0
    pending_payments: int = Field(0, description="Unpaid orders")
    pending_total: Money = Field(Decimal("0"), description="Amount due on unpaid orders")
    simulated: bool = Field(False, description="Whether any figure came from sample data")


class OverviewStats(BaseModel):
    """Superadmin dashboard figures over the shared schema."""

    total_trainers: int = 0
    total_revenue: Money = Decimal("0")
    active_orders: int = Field(0, description="Orders pending or processing")
    pending_orders: int = 0
