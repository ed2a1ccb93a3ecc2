"""Tests for the maximum affordable loan calculator.

Tests cover:
- Default-rate scenario (€2000 income, 30 years, 0% costs)
- Explicit zero-rate branch (no division by zero)
- Zero affordability when debt uses up the DTI capacity
- Input validation (income, term, rate, debt)
- Cost table sensitivity (new build vs resale) and lookup errors
- Monotonicity in term and the DTI invariant
"""

from __future__ import annotations

from decimal import ROUND_FLOOR, Decimal

import pytest

from affordable_loan.calculators.affordability import compute_max_loan
from affordable_loan.config import PolicySettings
from affordable_loan.errors import InvalidInputError, UnknownRegionError
from affordable_loan.money import Money
from affordable_loan.schemas.loan import LoanInput, PropertyState


def _input(
    income: str = "2000",
    debt: str = "0",
    rate: str | None = None,
    term: int = 30,
    state: PropertyState = PropertyState.NEW,
    region: str = "testland",
) -> LoanInput:
    """Helper to create a LoanInput."""
    return LoanInput(
        monthly_net_income=Money.from_decimal(income),
        other_monthly_debt=Money.from_decimal(debt),
        annual_interest_rate_percent=None if rate is None else Decimal(rate),
        term_years=term,
        property_state=state,
        region=region,
    )


def _exact_principal(payment: Decimal, annual_rate: Decimal, term_years: int) -> Decimal:
    r = annual_rate / 100 / 12
    n = term_years * 12
    return payment * (1 - (1 + r) ** -n) / r


class TestDefaultRateScenario:
    """€2000 net, no other debt, blank rate (2.5%), 30 years, 0% cost region."""

    def test_max_monthly_payment_is_35_percent(self, zero_cost_table) -> None:
        result = compute_max_loan(_input(), cost_table=zero_cost_table)
        assert result.max_monthly_payment == Money.from_decimal("700.00")
        assert result.debt_to_income_ratio_used == Decimal("0.35")

    def test_default_rate_applied(self, zero_cost_table) -> None:
        result = compute_max_loan(_input(), cost_table=zero_cost_table)
        assert result.annual_interest_rate_percent == Decimal("2.5")
        assert result.effective_monthly_rate == Decimal("2.5") / Decimal("100") / Decimal("12")

    def test_principal_matches_annuity_formula(self, zero_cost_table) -> None:
        """Inverse annuity at r = 2.5%/12, n = 360, rounded down to whole euros."""
        result = compute_max_loan(_input(), cost_table=zero_cost_table)
        expected = _exact_principal(Decimal("700.00"), Decimal("2.5"), 30).to_integral_value(rounding=ROUND_FLOOR)
        assert result.max_loan_amount.to_decimal() == expected
        assert Decimal("177000") < expected < Decimal("177400")

    def test_amount_is_whole_units(self, zero_cost_table) -> None:
        result = compute_max_loan(_input(), cost_table=zero_cost_table)
        assert result.max_loan_amount.cents % 100 == 0

    def test_no_costs_in_zero_cost_region(self, zero_cost_table) -> None:
        result = compute_max_loan(_input(), cost_table=zero_cost_table)
        assert result.estimated_acquisition_costs == Money.zero()
        assert result.max_loan_amount == result.gross_principal.floor_to_unit()

    def test_payment_within_capacity(self, zero_cost_table) -> None:
        result = compute_max_loan(_input(), cost_table=zero_cost_table)
        assert Money.zero() < result.monthly_payment <= result.max_monthly_payment


class TestZeroRate:
    """Rate supplied explicitly as 0 (not left blank)."""

    def test_principal_is_payment_times_periods(self, zero_cost_table) -> None:
        """€700 × 120 months = €84,000."""
        result = compute_max_loan(_input(rate="0", term=10), cost_table=zero_cost_table)
        assert result.annual_interest_rate_percent == Decimal("0")
        assert result.effective_monthly_rate == 0
        assert result.max_loan_amount == Money.from_decimal("84000")
        assert result.monthly_payment == Money.from_decimal("700.00")

    def test_zero_rate_beats_any_positive_rate(self, zero_cost_table) -> None:
        zero = compute_max_loan(_input(rate="0"), cost_table=zero_cost_table)
        low = compute_max_loan(_input(rate="0.01"), cost_table=zero_cost_table)
        assert zero.max_loan_amount >= low.max_loan_amount


class TestZeroAffordability:
    """No residual capacity is a valid result, never an error."""

    def test_debt_exceeds_capacity(self, zero_cost_table) -> None:
        """€500 income × 35% = €175 < €400 debt."""
        result = compute_max_loan(_input(income="500", debt="400"), cost_table=zero_cost_table)
        assert result.max_monthly_payment < Money.zero()
        assert result.max_loan_amount == Money.zero()
        assert result.monthly_payment == Money.zero()
        assert result.is_zero

    def test_debt_equals_capacity(self, zero_cost_table) -> None:
        result = compute_max_loan(_input(income="2000", debt="700"), cost_table=zero_cost_table)
        assert result.max_monthly_payment == Money.zero()
        assert result.is_zero

    def test_costs_exceed_principal(self, cost_table_factory) -> None:
        """Tiny capacity swallowed by fixed fees → zero, not negative."""
        table = cost_table_factory(fees_new="50000")
        result = compute_max_loan(_input(income="100", term=5), cost_table=table)
        assert result.max_loan_amount == Money.zero()
        assert result.monthly_payment == Money.zero()

    def test_unknown_region_still_raises(self, zero_cost_table) -> None:
        with pytest.raises(UnknownRegionError):
            compute_max_loan(_input(income="500", debt="400", region="atlantis"), cost_table=zero_cost_table)


class TestValidation:
    """Out-of-range input raises InvalidInputError."""

    @pytest.mark.parametrize("income", ["0", "-100"])
    def test_non_positive_income(self, zero_cost_table, income: str) -> None:
        with pytest.raises(InvalidInputError):
            compute_max_loan(_input(income=income), cost_table=zero_cost_table)

    def test_negative_debt(self, zero_cost_table) -> None:
        with pytest.raises(InvalidInputError):
            compute_max_loan(_input(debt="-1"), cost_table=zero_cost_table)

    @pytest.mark.parametrize("term", [0, 4, 51, 100])
    def test_term_out_of_range(self, zero_cost_table, term: int) -> None:
        with pytest.raises(InvalidInputError):
            compute_max_loan(_input(term=term), cost_table=zero_cost_table)

    @pytest.mark.parametrize("term", [5, 50])
    def test_term_bounds_inclusive(self, zero_cost_table, term: int) -> None:
        result = compute_max_loan(_input(term=term), cost_table=zero_cost_table)
        assert result.term_years == term

    @pytest.mark.parametrize("rate", ["-0.5", "100.01"])
    def test_rate_out_of_range(self, zero_cost_table, rate: str) -> None:
        with pytest.raises(InvalidInputError):
            compute_max_loan(_input(rate=rate), cost_table=zero_cost_table)

    @pytest.mark.parametrize("rate", ["NaN", "Infinity"])
    def test_non_finite_rate(self, zero_cost_table, rate: str) -> None:
        """Rejected by the model or the calculator; never computed with."""
        with pytest.raises(ValueError):
            compute_max_loan(_input(rate=rate), cost_table=zero_cost_table)

    def test_rate_of_100_percent_allowed(self, zero_cost_table) -> None:
        result = compute_max_loan(_input(rate="100"), cost_table=zero_cost_table)
        assert result.max_loan_amount > Money.zero()

    def test_validation_precedes_lookup(self, zero_cost_table) -> None:
        with pytest.raises(InvalidInputError):
            compute_max_loan(_input(income="0", region="atlantis"), cost_table=zero_cost_table)


class TestCostSensitivity:
    """Property state and region scale the affordable amount."""

    def test_new_build_reduces_amount(self, cost_table_factory) -> None:
        table = cost_table_factory(
            tax_new="10", fees_new="2500", tax_second_hand="7", fees_second_hand="2000",
        )
        new = compute_max_loan(_input(state=PropertyState.NEW), cost_table=table)
        used = compute_max_loan(_input(state=PropertyState.SECOND_HAND), cost_table=table)

        assert new.gross_principal == used.gross_principal
        assert new.max_loan_amount < used.max_loan_amount

    def test_adjustment_is_tax_plus_fees(self, cost_table_factory) -> None:
        table = cost_table_factory(tax_new="10", fees_new="2500")
        result = compute_max_loan(_input(), cost_table=table)

        gross = result.gross_principal
        expected_costs = gross.multiply(Decimal("0.10")) + Money.from_decimal("2500")
        assert result.estimated_acquisition_costs == expected_costs
        assert result.max_loan_amount == (gross - expected_costs).floor_to_unit()

    def test_delta_is_reproducible(self, cost_table_factory) -> None:
        table = cost_table_factory(tax_new="11.5", tax_second_hand="6")

        def delta() -> Money:
            new = compute_max_loan(_input(state=PropertyState.NEW), cost_table=table)
            used = compute_max_loan(_input(state=PropertyState.SECOND_HAND), cost_table=table)
            return used.max_loan_amount - new.max_loan_amount

        assert delta() == delta()
        assert delta() > Money.zero()

    def test_higher_tax_region_reduces_amount(self, cost_table_factory) -> None:
        table = cost_table_factory(tax_second_hand="4", region="low")
        high = cost_table_factory(tax_second_hand="10", region="high")
        low_result = compute_max_loan(_input(state=PropertyState.SECOND_HAND, region="low"), cost_table=table)
        high_result = compute_max_loan(_input(state=PropertyState.SECOND_HAND, region="high"), cost_table=high)
        assert high_result.max_loan_amount < low_result.max_loan_amount

    def test_packaged_table_used_by_default(self) -> None:
        result = compute_max_loan(_input(region="andalucia", state=PropertyState.SECOND_HAND))
        assert result.cost_factor.region == "andalucia"
        assert result.cost_factor.acquisition_tax_percent == Decimal("7")


class TestProperties:
    """Monotonicity and the DTI invariant."""

    def test_longer_term_never_reduces_amount(self, zero_cost_table) -> None:
        amounts = [
            compute_max_loan(_input(term=term), cost_table=zero_cost_table).max_loan_amount
            for term in range(5, 51)
        ]
        assert amounts == sorted(amounts)

    def test_longer_term_never_reduces_amount_with_costs(self, cost_table_factory) -> None:
        table = cost_table_factory(tax_new="10", fees_new="2500")
        amounts = [
            compute_max_loan(_input(term=term, rate="3.9"), cost_table=table).max_loan_amount
            for term in range(5, 51, 5)
        ]
        assert amounts == sorted(amounts)

    @pytest.mark.parametrize(
        ("income", "debt", "rate", "term"),
        [
            ("2000", "0", None, 30),
            ("3187.45", "212.30", "3.75", 25),
            ("1234.56", "99.99", "0", 7),
            ("9999.99", "1500", "12.5", 40),
            ("800", "279.99", "1.1", 50),
            ("1000.14", "0", "0", 5),
        ],
    )
    def test_payment_plus_debt_within_cap(self, zero_cost_table, income, debt, rate, term) -> None:
        loan_input = _input(income=income, debt=debt, rate=rate, term=term)
        result = compute_max_loan(loan_input, cost_table=zero_cost_table)
        exact_cap = Decimal(loan_input.monthly_net_income.cents) * result.debt_to_income_ratio_used
        committed = result.monthly_payment.cents + loan_input.other_monthly_debt.cents
        assert Decimal(committed) <= exact_cap

    def test_capacity_rounds_down_to_the_cent(self, zero_cost_table) -> None:
        """1000.14 × 35% = 350.049 → capacity 350.04, never 350.05."""
        result = compute_max_loan(_input(income="1000.14", rate="0", term=5), cost_table=zero_cost_table)
        assert result.max_monthly_payment == Money.from_decimal("350.04")
        assert result.monthly_payment <= result.max_monthly_payment

    def test_policy_override(self, zero_cost_table) -> None:
        policy = PolicySettings(dti_ratio_cap=Decimal("0.40"), default_interest_rate_percent=Decimal("3"))
        result = compute_max_loan(_input(), cost_table=zero_cost_table, policy=policy)
        assert result.max_monthly_payment == Money.from_decimal("800.00")
        assert result.annual_interest_rate_percent == Decimal("3")
        assert result.debt_to_income_ratio_used == Decimal("0.40")
