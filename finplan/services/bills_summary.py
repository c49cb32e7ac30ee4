"""Bill classification and installment forecast.

Everything here is a pure function of a bill snapshot and a reference
"now"; ``BillsSummaryService`` is the only piece that touches a
repository, and it reads from it exactly once per call.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel

from finplan.clock import Clock, system_clock
from finplan.models.bill import Bill, BillKind
from finplan.models import CENTS
from finplan.models.summary import ZERO, BillsSummary
from finplan.repositories.base import BillRepository

logger = logging.getLogger(__name__)

# Remaining-installment thresholds for the next, 2nd and 3rd+ month buckets.
NEXT_MONTH_MIN_REMAINING = 2
TWO_MONTHS_MIN_REMAINING = 3
THREE_MONTHS_MIN_REMAINING = 4


class BillClassification(BaseModel):
    fixed: list[Bill] = []
    monthly_misc: list[Bill] = []
    installment: list[Bill] = []


class InstallmentProgress(BaseModel):
    bill: Bill
    total: int
    paid: int

    @property
    def remaining(self) -> int:
        return self.total - self.paid

    @property
    def settled(self) -> bool:
        return self.remaining == 0

    @property
    def share(self) -> Decimal:
        return self.bill.value / self.total


class SummaryTotals(BaseModel):
    bills_active_count: int = 0
    total_fixed_bills_value: Decimal = ZERO
    total_monthly_misc_bills_value: Decimal = ZERO
    total_installment_value: Decimal = ZERO
    amortized_installment_value: Decimal = ZERO
    total_value: Decimal = ZERO
    partial_value_next_month: Decimal = ZERO
    partial_value_2_months_later: Decimal = ZERO
    partial_value_3_months_later: Decimal = ZERO
    total_bill_amount: Decimal = ZERO


def classify_bills(bills: Iterable[Bill]) -> BillClassification:
    classification = BillClassification()
    for bill in bills:
        kind = bill.kind
        if kind == BillKind.FIXED:
            classification.fixed.append(bill)
        elif kind == BillKind.MONTHLY_MISC:
            classification.monthly_misc.append(bill)
        else:
            classification.installment.append(bill)
    return classification


def _align(moment: datetime, now: datetime) -> datetime:
    """Express ``moment`` in the timezone of ``now`` when both are aware."""
    if moment.tzinfo is not None and now.tzinfo is not None:
        return moment.astimezone(now.tzinfo)
    return moment


def months_between(start: datetime, now: datetime) -> int:
    """Calendar months from ``start`` to ``now``; the day of month is ignored."""
    start = _align(start, now)
    return (now.year - start.year) * 12 + (now.month - start.month)


def paid_installments(total: int, created_at: datetime, now: datetime) -> int:
    return min(max(months_between(created_at, now), 0), total)


def installment_progress(bill: Bill, now: datetime) -> InstallmentProgress:
    total = bill.installments_number or 1
    return InstallmentProgress(
        bill=bill,
        total=total,
        paid=paid_installments(total, bill.created_at, now),
    )


def is_current_month(moment: datetime, now: datetime) -> bool:
    return months_between(moment, now) == 0


def _sum_values(bills: Iterable[Bill]) -> Decimal:
    return sum((bill.value for bill in bills), ZERO)


def aggregate_totals(
    fixed: list[Bill],
    monthly_misc: list[Bill],
    installments: list[InstallmentProgress],
    now: datetime,
) -> SummaryTotals:
    this_month_misc = [bill for bill in monthly_misc if is_current_month(bill.created_at, now)]
    active = [progress for progress in installments if not progress.settled]

    fixed_total = _sum_values(fixed)
    misc_total = _sum_values(this_month_misc)
    installment_total = _sum_values(progress.bill for progress in active)
    amortized_total = sum((progress.share for progress in active), ZERO)
    total_value = fixed_total + misc_total + amortized_total

    next_month = fixed_total
    two_months = fixed_total
    three_months = fixed_total
    for progress in active:
        if progress.remaining >= NEXT_MONTH_MIN_REMAINING:
            next_month += progress.share
        if progress.remaining >= TWO_MONTHS_MIN_REMAINING:
            two_months += progress.share
        if progress.remaining >= THREE_MONTHS_MIN_REMAINING:
            three_months += progress.share

    return SummaryTotals(
        bills_active_count=len(fixed) + len(this_month_misc) + len(active),
        total_fixed_bills_value=fixed_total,
        total_monthly_misc_bills_value=misc_total,
        total_installment_value=installment_total,
        amortized_installment_value=amortized_total,
        total_value=total_value,
        partial_value_next_month=next_month,
        partial_value_2_months_later=two_months,
        partial_value_3_months_later=three_months,
        total_bill_amount=total_value + next_month + two_months + three_months,
    )


def _cents(value: Decimal) -> Decimal:
    return value.quantize(CENTS)


def join_labels(bills: Iterable[Bill]) -> str:
    return ", ".join(bill.label for bill in bills)


def assemble_summary(
    classification: BillClassification,
    installments: list[InstallmentProgress],
    totals: SummaryTotals,
) -> BillsSummary:
    return BillsSummary(
        bills_active_count=totals.bills_active_count,
        total_bill_amount=_cents(totals.total_bill_amount),
        total_value=_cents(totals.total_value),
        total_installment_value=_cents(totals.total_installment_value),
        total_fixed_bills_value=_cents(totals.total_fixed_bills_value),
        total_monthly_misc_bills_value=_cents(totals.total_monthly_misc_bills_value),
        partial_value_next_month=_cents(totals.partial_value_next_month),
        partial_value_2_months_later=_cents(totals.partial_value_2_months_later),
        partial_value_3_months_later=_cents(totals.partial_value_3_months_later),
        fixes_bills_names=join_labels(classification.fixed),
        # Every misc bill ever recorded is named, not only this month's.
        monthly_misc_bills_names=join_labels(classification.monthly_misc),
        installment_bills_names=join_labels(p.bill for p in installments if not p.settled),
    )


def _require_created_at(bills: Iterable[Bill]) -> None:
    for bill in bills:
        if bill.created_at is None:
            raise ValueError(f"Bill '{bill.label}' has no creation date; its month cannot be placed")


def summarize_bills(bills: Iterable[Bill], now: datetime) -> BillsSummary:
    classification = classify_bills(bill for bill in bills if bill.deleted_at is None)
    _require_created_at(classification.monthly_misc + classification.installment)
    installments = [installment_progress(bill, now) for bill in classification.installment]
    totals = aggregate_totals(classification.fixed, classification.monthly_misc, installments, now)
    return assemble_summary(classification, installments, totals)


class BillsSummaryService:
    def __init__(self, bill_repo: BillRepository, clock: Clock = system_clock) -> None:
        self.bill_repo = bill_repo
        self.clock = clock

    def compute_summary(self, user_id: int) -> BillsSummary:
        bills = self.bill_repo.list_by_user(user_id)
        if not bills:
            logger.debug("No bills for user=%s, returning empty summary", user_id)
            return BillsSummary()
        summary = summarize_bills(bills, self.clock())
        logger.debug(
            "Bills summary user=%s active=%d total_value=%s",
            user_id,
            summary.bills_active_count,
            summary.total_value,
        )
        return summary
