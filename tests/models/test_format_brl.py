from decimal import Decimal

import pytest

from finplan.models import format_brl, parse_brl


class TestFormatBrl:
    @pytest.mark.parametrize(
        "value,expected",
        [
            (Decimal("2850"), "R$ 2.850,00"),
            (Decimal("0"), "R$ 0,00"),
            (Decimal("0.5"), "R$ 0,50"),
            (Decimal("1234567.89"), "R$ 1.234.567,89"),
            (100, "R$ 100,00"),
        ],
    )
    def test_format(self, value, expected):
        assert format_brl(value) == expected

    def test_rounds_long_fractions(self):
        assert format_brl(Decimal("100") / 3) == "R$ 33,33"


class TestParseBrl:
    @pytest.mark.parametrize(
        "text,expected",
        [
            ("2850", Decimal("2850.00")),
            ("2850.00", Decimal("2850.00")),
            ("2.850,00", Decimal("2850.00")),
            ("2850,50", Decimal("2850.50")),
            ("  15  ", Decimal("15.00")),
        ],
    )
    def test_valid(self, text, expected):
        assert parse_brl(text) == expected

    @pytest.mark.parametrize("text", ["", "   ", "abc", "NaN", "Infinity"])
    def test_invalid(self, text):
        assert parse_brl(text) is None
