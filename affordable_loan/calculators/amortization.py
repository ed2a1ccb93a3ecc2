"""French (declining-balance) amortization schedule.

Constant installment, interest computed first on the outstanding balance
each month, the rest of the installment repays principal. Every amount is
rounded to the cent; the last period absorbs the accumulated rounding
residual by paying exactly ``balance + interest``, so the schedule always
closes at zero and the principal components sum to the loan amount.

Zero rate: the principal is split evenly with Money.allocate and the
interest component is zero in every period.
"""

from __future__ import annotations

from decimal import Decimal

from affordable_loan.calculators.annuity import monthly_rate_from_annual, payment_from_principal
from affordable_loan.errors import InvalidInputError
from affordable_loan.money import Money
from affordable_loan.schemas.loan import AmortizationEntry, AmortizationSchedule


def _validate(principal: Money, annual_rate_percent: Decimal, term_years: int) -> None:
    if principal.is_negative:
        msg = f"Principal cannot be negative, got {principal}"
        raise InvalidInputError(msg)
    if term_years <= 0:
        msg = f"Term must be at least one year, got {term_years}"
        raise InvalidInputError(msg)
    if not annual_rate_percent.is_finite() or annual_rate_percent < 0:
        msg = f"Interest rate cannot be negative, got {annual_rate_percent}"
        raise InvalidInputError(msg)


def _zero_rate_entries(principal: Money, periods: int) -> list[AmortizationEntry]:
    entries: list[AmortizationEntry] = []
    balance = principal
    for index, share in enumerate(principal.allocate(periods), start=1):
        balance -= share
        entries.append(AmortizationEntry(
            period_index=index,
            payment_amount=share,
            principal_component=share,
            interest_component=Money.zero(),
            remaining_balance=balance,
        ))
    return entries


def _annuity_entries(principal: Money, monthly_rate: Decimal, periods: int) -> list[AmortizationEntry]:
    payment = payment_from_principal(principal, monthly_rate, periods)
    entries: list[AmortizationEntry] = []
    balance = principal

    for index in range(1, periods):
        interest = balance.multiply(monthly_rate)
        # Never repay more than is outstanding
        principal_part = min(payment - interest, balance)
        balance -= principal_part
        entries.append(AmortizationEntry(
            period_index=index,
            payment_amount=interest + principal_part,
            principal_component=principal_part,
            interest_component=interest,
            remaining_balance=balance,
        ))

    # Final period settles whatever the rounding left behind
    interest = balance.multiply(monthly_rate)
    entries.append(AmortizationEntry(
        period_index=periods,
        payment_amount=balance + interest,
        principal_component=balance,
        interest_component=interest,
        remaining_balance=Money.zero(),
    ))
    return entries


def generate_schedule(
    principal: Money,
    annual_rate_percent: Decimal,
    term_years: int,
) -> AmortizationSchedule:
    """Build the month-by-month repayment table.

    Args:
        principal: Loan amount. Zero yields an empty schedule.
        annual_rate_percent: Nominal annual rate, e.g. Decimal("2.5").
        term_years: Loan term; the schedule has term_years × 12 entries.

    Returns:
        AmortizationSchedule whose principal components sum exactly to
        ``principal`` and whose last remaining balance is zero.

    Raises:
        InvalidInputError: negative principal or rate, or term ≤ 0.
    """
    _validate(principal, annual_rate_percent, term_years)

    periods = term_years * 12
    if principal.is_zero:
        entries: list[AmortizationEntry] = []
    elif annual_rate_percent == 0:
        entries = _zero_rate_entries(principal, periods)
    else:
        entries = _annuity_entries(principal, monthly_rate_from_annual(annual_rate_percent), periods)

    return AmortizationSchedule(
        principal=principal,
        annual_interest_rate_percent=annual_rate_percent,
        term_years=term_years,
        entries=tuple(entries),
    )
