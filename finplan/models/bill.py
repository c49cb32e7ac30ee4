from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field


class BillKind(str, Enum):
    FIXED = "fixed"
    MONTHLY_MISC = "monthly_misc"
    INSTALLMENT = "installment"


class Bill(BaseModel):
    id: int | None = None
    uuid: str = ""
    user_id: int
    name: str = Field(min_length=3, max_length=155)
    value: Decimal = Field(ge=0, decimal_places=2)
    description: str | None = Field(default=None, min_length=1, max_length=2999)
    installments_number: int | None = Field(default=None, ge=1)
    created_at: datetime | None = None
    updated_at: datetime | None = None
    deleted_at: datetime | None = None

    @property
    def kind(self) -> BillKind:
        if self.installments_number is None:
            return BillKind.FIXED
        if self.installments_number == 1:
            return BillKind.MONTHLY_MISC
        return BillKind.INSTALLMENT

    @property
    def label(self) -> str:
        if self.description:
            return f"{self.name} - {self.description}"
        return self.name

    @property
    def monthly_share(self) -> Decimal:
        """Amortized per-period value of the bill."""
        if not self.installments_number:
            return self.value
        return self.value / self.installments_number
