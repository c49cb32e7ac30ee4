from datetime import datetime
from decimal import Decimal

import pytest
from pydantic import ValidationError

from finplan.models.bill import Bill, BillKind


class TestBill:
    def test_defaults(self):
        bill = Bill(user_id=1, name="Aluguel", value=Decimal("1500.00"))
        assert bill.id is None
        assert bill.uuid == ""
        assert bill.description is None
        assert bill.installments_number is None
        assert bill.created_at is None
        assert bill.deleted_at is None

    def test_name_too_short(self):
        with pytest.raises(ValidationError):
            Bill(user_id=1, name="ab", value=Decimal("10"))

    def test_negative_value_rejected(self):
        with pytest.raises(ValidationError):
            Bill(user_id=1, name="Aluguel", value=Decimal("-1"))

    def test_more_than_two_decimal_places_rejected(self):
        with pytest.raises(ValidationError):
            Bill(user_id=1, name="Aluguel", value=Decimal("1.234"))

    def test_zero_installments_rejected(self):
        with pytest.raises(ValidationError):
            Bill(user_id=1, name="Aluguel", value=Decimal("10"), installments_number=0)

    def test_empty_description_rejected(self):
        with pytest.raises(ValidationError):
            Bill(user_id=1, name="Aluguel", value=Decimal("10"), description="")

    def test_parses_datetime_strings(self):
        bill = Bill(user_id=1, name="Aluguel", value=Decimal("10"), created_at="2026-10-05 12:00:00")
        assert bill.created_at == datetime(2026, 10, 5, 12, 0)


class TestKind:
    def test_fixed_without_installments(self):
        assert Bill(user_id=1, name="Aluguel", value=Decimal("10")).kind == BillKind.FIXED

    def test_monthly_misc_with_one_installment(self):
        bill = Bill(user_id=1, name="Farmácia", value=Decimal("10"), installments_number=1)
        assert bill.kind == BillKind.MONTHLY_MISC

    @pytest.mark.parametrize("count", [2, 12, 48])
    def test_installment_with_two_or_more(self, count):
        bill = Bill(user_id=1, name="Notebook", value=Decimal("10"), installments_number=count)
        assert bill.kind == BillKind.INSTALLMENT


class TestLabel:
    def test_name_only(self):
        assert Bill(user_id=1, name="Internet", value=Decimal("10")).label == "Internet"

    def test_name_and_description(self):
        bill = Bill(user_id=1, name="Aluguel", value=Decimal("10"), description="Apto 12")
        assert bill.label == "Aluguel - Apto 12"


class TestMonthlyShare:
    def test_installment_share(self):
        bill = Bill(user_id=1, name="Notebook", value=Decimal("300.00"), installments_number=6)
        assert bill.monthly_share == Decimal("50")

    def test_fixed_share_is_full_value(self):
        bill = Bill(user_id=1, name="Aluguel", value=Decimal("1000.00"))
        assert bill.monthly_share == Decimal("1000.00")
