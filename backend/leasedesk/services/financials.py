# Overview: Pure profit and payment-due derivation for agreements.

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any

from ..errors import ValidationError

ZERO = Decimal("0")
CENT = Decimal("0.01")
HUNDRED = Decimal("100")
# Largest value a Numeric(14, 2) column holds.
MAX_AMOUNT = Decimal("999999999999.99")


def to_amount(value: Any) -> Decimal:
    """
    Coerce a monetary input to Decimal.

    Absent, blank, non-numeric, NaN and infinite values all become 0 so no
    null/NaN ever reaches a derived field. Currency symbols and thousands
    separators in strings are tolerated ("₹1,200.50"). Magnitudes beyond
    MAX_AMOUNT raise ValidationError.
    """
    if value is None or isinstance(value, bool):
        return ZERO
    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, (int, float)):
        amount = Decimal(str(value))
    else:
        text = str(value).strip().replace(",", "")
        text = text.lstrip("₹$€£ ")
        if not text:
            return ZERO
        try:
            amount = Decimal(text)
        except InvalidOperation:
            return ZERO
    if not amount.is_finite():
        return ZERO
    if abs(amount) > MAX_AMOUNT:
        raise ValidationError(f"Amount out of range (max {MAX_AMOUNT})")
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class ProfitFigures:
    gross_profit: Decimal
    net_profit: Decimal
    profit_margin: Decimal


def derive(
    total_payment: Any,
    actual_cost: Any,
    agent_commission: Any,
    other_expenses: Any,
) -> ProfitFigures:
    """
    gross = total - cost
    net = gross - commission - other expenses
    margin = net / total * 100, or 0 when total <= 0

    Margin is rounded half-up to two places.
    """
    total = to_amount(total_payment)
    gross = total - to_amount(actual_cost)
    net = gross - to_amount(agent_commission) - to_amount(other_expenses)
    if total > ZERO:
        margin = (net / total * HUNDRED).quantize(CENT, rounding=ROUND_HALF_UP)
    else:
        margin = ZERO.quantize(CENT)
    return ProfitFigures(gross_profit=gross, net_profit=net, profit_margin=margin)


def derive_payment_due(total_payment: Any, payment_owner: Any, payment_tenant: Any) -> Decimal:
    """Outstanding amount: total - received from owner - received from tenant."""
    return to_amount(total_payment) - to_amount(payment_owner) - to_amount(payment_tenant)


def derived_fields(amounts: dict[str, Any]) -> dict[str, Decimal]:
    """All four derived columns for a dict of agreement input amounts."""
    figures = derive(
        amounts.get("total_payment"),
        amounts.get("actual_cost"),
        amounts.get("agent_commission"),
        amounts.get("other_expenses"),
    )
    return {
        "gross_profit": figures.gross_profit,
        "net_profit": figures.net_profit,
        "profit_margin": figures.profit_margin,
        "payment_due": derive_payment_due(
            amounts.get("total_payment"),
            amounts.get("payment_owner"),
            amounts.get("payment_tenant"),
        ),
    }
