"""Profit and payment-due derivation tests."""

from decimal import Decimal

import pytest

from leasedesk.errors import ValidationError
from leasedesk.services.financials import MAX_AMOUNT, derive, derive_payment_due, derived_fields, to_amount


class TestToAmount:
    @pytest.mark.parametrize("value", [None, "", "   ", "abc", "NaN", "Infinity", float("nan"), True])
    def test_invalid_becomes_zero(self, value):
        assert to_amount(value) == Decimal("0")

    @pytest.mark.parametrize(
        "value,expected",
        [
            (1000, Decimal("1000.00")),
            ("1,200.50", Decimal("1200.50")),
            ("₹ 750", Decimal("750.00")),
            (12.345, Decimal("12.35")),
            ("-40", Decimal("-40.00")),
        ],
    )
    def test_parses(self, value, expected):
        assert to_amount(value) == expected

    @pytest.mark.parametrize("value", ["1e30", 1e30, "-1e30", "1000000000000", Decimal("1E+999999")])
    def test_out_of_range_is_rejected(self, value):
        with pytest.raises(ValidationError):
            to_amount(value)

    def test_largest_column_value(self):
        assert to_amount("999999999999.99") == MAX_AMOUNT


class TestDerive:
    def test_reference_scenario(self):
        figures = derive(1000, 400, 50, 10)
        assert figures.gross_profit == Decimal("600.00")
        assert figures.net_profit == Decimal("540.00")
        assert figures.profit_margin == Decimal("54.00")

    def test_zero_total_has_zero_margin(self):
        figures = derive(0, 100, 0, 0)
        assert figures.gross_profit == Decimal("-100.00")
        assert figures.profit_margin == Decimal("0.00")

    def test_negative_total_has_zero_margin(self):
        assert derive(-500, 0, 0, 0).profit_margin == Decimal("0.00")

    def test_missing_inputs_are_zero(self):
        figures = derive(None, None, None, None)
        assert figures.net_profit == Decimal("0")
        assert figures.profit_margin == Decimal("0.00")

    def test_margin_rounds_half_up(self):
        # 1/3 of 100 -> 33.333... -> 33.33; 2/3 -> 66.67
        assert derive(3, 2, 0, 0).profit_margin == Decimal("33.33")
        assert derive(3, 1, 0, 0).profit_margin == Decimal("66.67")


class TestPaymentDue:
    def test_outstanding(self):
        assert derive_payment_due(1000, 300, 200) == Decimal("500.00")

    def test_overpaid_is_negative(self):
        assert derive_payment_due(1000, 800, 300) == Decimal("-100.00")

    def test_derived_fields(self):
        fields = derived_fields({
            "total_payment": to_amount(1000),
            "payment_owner": to_amount(100),
            "payment_tenant": to_amount(100),
            "actual_cost": to_amount(400),
            "agent_commission": to_amount(50),
            "other_expenses": to_amount(10),
        })
        assert fields == {
            "gross_profit": Decimal("600.00"),
            "net_profit": Decimal("540.00"),
            "profit_margin": Decimal("54.00"),
            "payment_due": Decimal("800.00"),
        }
