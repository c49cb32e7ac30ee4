from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field


class Planning(BaseModel):
    id: int | None = None
    uuid: str = ""
    user_id: int
    name: str = Field(min_length=3, max_length=155)
    goal: str = Field(min_length=1, max_length=500)
    goal_value: Decimal = Field(gt=0, decimal_places=2)
    plan: str = Field(min_length=1)
    description: str | None = Field(default=None, min_length=1, max_length=2999)
    created_at: datetime | None = None
    updated_at: datetime | None = None
    deleted_at: datetime | None = None
