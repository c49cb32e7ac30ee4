from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel

ZERO = Decimal("0.00")


class BillsSummary(BaseModel):
    """Point-in-time view of a user's bills.

    ``total_value`` is the amortized obligation for the current month.
    ``total_bill_amount`` adds the three forward buckets on top of it, so
    installment shares are counted once per bucket they qualify for.
    """

    bills_active_count: int = 0
    total_bill_amount: Decimal = ZERO
    total_value: Decimal = ZERO
    total_installment_value: Decimal = ZERO
    total_fixed_bills_value: Decimal = ZERO
    total_monthly_misc_bills_value: Decimal = ZERO
    partial_value_next_month: Decimal = ZERO
    partial_value_2_months_later: Decimal = ZERO
    partial_value_3_months_later: Decimal = ZERO
    fixes_bills_names: str = ""
    monthly_misc_bills_names: str = ""
    installment_bills_names: str = ""


class UserSummary(BaseModel):
    id: str
    name: str
    salary: Decimal | None = None
    bills_active_count: int = 0
    plannings_count: int = 0
    total_bills_value_monthly: Decimal = ZERO
    partial_value_next_month: Decimal = ZERO
    partial_value_2_months_later: Decimal = ZERO
    partial_value_3_months_later: Decimal = ZERO
