from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, EmailStr, Field


class User(BaseModel):
    id: int | None = None
    uuid: str = ""
    name: str = Field(min_length=3, max_length=155)
    email: EmailStr
    birthdate: date | None = None
    salary: Decimal | None = Field(default=None, ge=0, decimal_places=2)
    password_hash: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None
    deleted_at: datetime | None = None
