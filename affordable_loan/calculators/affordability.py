"""Maximum affordable mortgage calculator.

Fixed-point Money arithmetic throughout. Implements:
- DTI capacity: max installment = net income × ratio cap − other debt
- Inverse annuity: installment → principal for the chosen term
- Acquisition cost adjustment per region and property state
- Round-down of the final amount to a whole currency unit

Policy defaults (configurable, see PolicySettings):
  ratio cap      35% of net monthly income
  default rate   2.5% per year when the household leaves it blank
  term           5–50 years

Capacity is income × ratio rounded down to the cent, so it never exceeds
the exact cap. The reported installment never exceeds capacity: the net
loan is at most the gross principal, whose exact installment is at most
the capacity, and half-up rounding cannot cross a value that is already
on the cent grid.
"""

from __future__ import annotations

from decimal import ROUND_DOWN, Decimal

from affordable_loan.calculators.annuity import (
    monthly_rate_from_annual,
    payment_from_principal,
    principal_from_payment,
)
from affordable_loan.config import PolicySettings, settings
from affordable_loan.errors import InvalidInputError
from affordable_loan.money import Money
from affordable_loan.schemas.loan import AffordabilityResult, CostFactor, LoanInput
from affordable_loan.tables.cost_factors import CostTable, load_cost_table

_HUNDRED = Decimal("100")


def _validate_input(loan_input: LoanInput, policy: PolicySettings) -> None:
    """Range checks the upstream form is expected to have done already."""
    if loan_input.monthly_net_income.cents <= 0:
        msg = f"Monthly net income must be positive, got {loan_input.monthly_net_income}"
        raise InvalidInputError(msg)
    if loan_input.other_monthly_debt.is_negative:
        msg = f"Other monthly debt cannot be negative, got {loan_input.other_monthly_debt}"
        raise InvalidInputError(msg)
    if not policy.min_term_years <= loan_input.term_years <= policy.max_term_years:
        msg = (
            f"Term must be between {policy.min_term_years} and {policy.max_term_years} years, "
            f"got {loan_input.term_years}"
        )
        raise InvalidInputError(msg)
    rate = loan_input.annual_interest_rate_percent
    if rate is not None and (not rate.is_finite() or not Decimal("0") <= rate <= _HUNDRED):
        msg = f"Interest rate must be between 0 and 100 percent, got {rate}"
        raise InvalidInputError(msg)


def _resolve_rate(loan_input: LoanInput, policy: PolicySettings) -> Decimal:
    """None (left blank) → policy default; anything else is used as given."""
    if loan_input.annual_interest_rate_percent is None:
        return policy.default_interest_rate_percent
    return loan_input.annual_interest_rate_percent


def _acquisition_costs(principal: Money, factor: CostFactor) -> Money:
    """Tax on the financed amount plus the fixed fee estimate."""
    return principal.multiply(factor.acquisition_tax_percent / _HUNDRED) + factor.fixed_fees_estimate


def compute_max_loan(
    loan_input: LoanInput,
    cost_table: CostTable | None = None,
    policy: PolicySettings | None = None,
) -> AffordabilityResult:
    """Compute the largest loan the household can service.

    Args:
        loan_input: Household income, debts, rate, term, property state, region.
        cost_table: Region/state cost factors. Defaults to the configured data set.
        policy: DTI cap, default rate and term bounds. Defaults to settings.policy.

    Returns:
        AffordabilityResult. ``max_loan_amount`` is zero (not an error) when
        existing debt already uses up the DTI capacity.

    Raises:
        InvalidInputError: income ≤ 0, negative debt, term or rate out of range.
        UnknownRegionError / UnknownPropertyStateError: cost table lookup miss.
    """
    policy = policy or settings.policy
    if cost_table is None:
        cost_table = load_cost_table(settings.cost_table.cost_table_path)

    _validate_input(loan_input, policy)
    cost_factor = cost_table.resolve(loan_input.region, loan_input.property_state)

    ratio = policy.dti_ratio_cap
    annual_rate = _resolve_rate(loan_input, policy)
    monthly_rate = monthly_rate_from_annual(annual_rate)
    periods = loan_input.term_years * 12

    capacity = loan_input.monthly_net_income.multiply(ratio, rounding=ROUND_DOWN)
    max_monthly_payment = capacity - loan_input.other_monthly_debt

    if max_monthly_payment.cents <= 0:
        # No residual capacity: a valid, fully-formed zero result
        return AffordabilityResult(
            max_loan_amount=Money.zero(),
            monthly_payment=Money.zero(),
            debt_to_income_ratio_used=ratio,
            estimated_acquisition_costs=Money.zero(),
            effective_monthly_rate=monthly_rate,
            max_monthly_payment=max_monthly_payment,
            gross_principal=Money.zero(),
            annual_interest_rate_percent=annual_rate,
            term_years=loan_input.term_years,
            cost_factor=cost_factor,
        )

    gross_principal = principal_from_payment(max_monthly_payment, monthly_rate, periods)
    costs = _acquisition_costs(gross_principal, cost_factor)
    net = gross_principal - costs
    max_loan = Money.zero() if net.is_negative else net.floor_to_unit()

    monthly_payment = (
        Money.zero() if max_loan.is_zero
        else payment_from_principal(max_loan, monthly_rate, periods)
    )

    return AffordabilityResult(
        max_loan_amount=max_loan,
        monthly_payment=monthly_payment,
        debt_to_income_ratio_used=ratio,
        estimated_acquisition_costs=costs,
        effective_monthly_rate=monthly_rate,
        max_monthly_payment=max_monthly_payment,
        gross_principal=gross_principal,
        annual_interest_rate_percent=annual_rate,
        term_years=loan_input.term_years,
        cost_factor=cost_factor,
    )
