"""Annuity identity, in both directions.

    payment   = P × r / (1 − (1 + r)^−n)
    principal = A × (1 − (1 + r)^−n) / r

Shared by the affordability calculator (inverse) and the amortization
scheduler (forward) so the reported installment always matches period 1
of the schedule. r = 0 is an explicit branch in both directions.
"""

from __future__ import annotations

from decimal import ROUND_DOWN, ROUND_HALF_UP, Decimal

from affordable_loan.errors import ArithmeticDegeneracyError
from affordable_loan.money import Money

_ONE = Decimal("1")


def monthly_rate_from_annual(annual_rate_percent: Decimal) -> Decimal:
    """7.5 (% per year) → 0.00625 (per month)."""
    return annual_rate_percent / Decimal("100") / Decimal("12")


def _discount_complement(monthly_rate: Decimal, periods: int) -> Decimal:
    """1 − (1 + r)^−n, the annuity factor numerator."""
    complement = _ONE - (_ONE + monthly_rate) ** -periods
    if complement == 0:
        msg = f"Degenerate annuity factor for rate={monthly_rate} periods={periods}"
        raise ArithmeticDegeneracyError(msg)
    return complement


def principal_from_payment(payment: Money, monthly_rate: Decimal, periods: int) -> Money:
    """Largest principal a fixed monthly payment can amortize over ``periods``.

    Truncated to the cent, never rounded up.
    """
    if periods <= 0:
        msg = f"Annuity needs at least one period, got {periods}"
        raise ArithmeticDegeneracyError(msg)
    if monthly_rate == 0:
        return Money(payment.cents * periods)
    factor = _discount_complement(monthly_rate, periods) / monthly_rate
    return payment.multiply(factor, rounding=ROUND_DOWN)


def payment_from_principal(principal: Money, monthly_rate: Decimal, periods: int) -> Money:
    """Constant monthly installment that amortizes ``principal`` over ``periods``.

    Rounded half-up to the cent. With a zero rate this is the largest
    bucket of an even split, i.e. what the first period pays.
    """
    if periods <= 0:
        msg = f"Annuity needs at least one period, got {periods}"
        raise ArithmeticDegeneracyError(msg)
    if monthly_rate == 0:
        return principal.allocate(periods)[0]
    factor = monthly_rate / _discount_complement(monthly_rate, periods)
    return principal.multiply(factor, rounding=ROUND_HALF_UP)
