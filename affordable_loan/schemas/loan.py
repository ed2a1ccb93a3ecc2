"""Pydantic schemas for the affordability pipeline.

Pure data classes. No I/O, no business logic beyond derived totals.
Every model is frozen: results are created once per computation and
never mutated afterwards.
"""

from __future__ import annotations

from decimal import Decimal
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

from affordable_loan.money import Money

_FROZEN = ConfigDict(frozen=True, arbitrary_types_allowed=True)


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class PropertyState(StrEnum):
    """Property condition; drives which acquisition tax applies."""

    NEW = "new"                  # VAT + stamp duty (AJD)
    SECOND_HAND = "second_hand"  # transfer tax (ITP)


# ---------------------------------------------------------------------------
# Input
# ---------------------------------------------------------------------------


class LoanInput(BaseModel):
    """Validated household data for one computation.

    ``annual_interest_rate_percent=None`` means "unknown → use the policy
    default". An explicit ``Decimal("0")`` is a genuine zero-rate loan.
    Range checks live in the calculator, which raises InvalidInputError.
    """

    model_config = _FROZEN

    monthly_net_income: Money
    other_monthly_debt: Money = Field(default_factory=Money.zero)
    annual_interest_rate_percent: Decimal | None = None
    term_years: int
    property_state: PropertyState
    region: str


# ---------------------------------------------------------------------------
# Cost table
# ---------------------------------------------------------------------------


class CostFactor(BaseModel):
    """Acquisition costs for one (region, property state) pair."""

    model_config = _FROZEN

    region: str
    property_state: PropertyState
    acquisition_tax_percent: Decimal   # e.g. Decimal("7") for 7% ITP
    fixed_fees_estimate: Money         # notary, registry, agency
    description: str | None = None


# ---------------------------------------------------------------------------
# Affordability calculator
# ---------------------------------------------------------------------------


class AffordabilityResult(BaseModel):
    """Maximum loan a household can service under the DTI cap."""

    model_config = _FROZEN

    max_loan_amount: Money                  # net of acquisition costs, whole units
    monthly_payment: Money                  # installment on max_loan_amount
    debt_to_income_ratio_used: Decimal      # e.g. Decimal("0.35")
    estimated_acquisition_costs: Money
    effective_monthly_rate: Decimal         # annual / 100 / 12
    max_monthly_payment: Money              # income × ratio − other debt (may be ≤ 0)
    gross_principal: Money                  # before the cost adjustment
    annual_interest_rate_percent: Decimal   # rate actually applied
    term_years: int
    cost_factor: CostFactor

    @property
    def is_zero(self) -> bool:
        """True when the household has no residual capacity for a loan."""
        return self.max_loan_amount.is_zero


# ---------------------------------------------------------------------------
# Amortization scheduler
# ---------------------------------------------------------------------------


class AmortizationEntry(BaseModel):
    """One monthly period of a French amortization schedule."""

    model_config = _FROZEN

    period_index: int
    payment_amount: Money
    principal_component: Money
    interest_component: Money
    remaining_balance: Money


class YearlySummary(BaseModel):
    """Twelve periods rolled up for the collapsed table view."""

    model_config = _FROZEN

    year: int
    principal_paid: Money
    interest_paid: Money
    closing_balance: Money


class AmortizationSchedule(BaseModel):
    """Full period-by-period repayment table for one principal."""

    model_config = _FROZEN

    principal: Money
    annual_interest_rate_percent: Decimal
    term_years: int
    entries: tuple[AmortizationEntry, ...] = ()

    @property
    def period_count(self) -> int:
        return len(self.entries)

    @property
    def total_principal(self) -> Money:
        return Money.total(e.principal_component for e in self.entries)

    @property
    def total_interest(self) -> Money:
        return Money.total(e.interest_component for e in self.entries)

    @property
    def total_paid(self) -> Money:
        return Money.total(e.payment_amount for e in self.entries)

    def yearly_summary(self) -> list[YearlySummary]:
        """Group entries by loan year (periods 1–12 → year 1, ...)."""
        summaries: list[YearlySummary] = []
        for start in range(0, len(self.entries), 12):
            chunk = self.entries[start:start + 12]
            summaries.append(YearlySummary(
                year=start // 12 + 1,
                principal_paid=Money.total(e.principal_component for e in chunk),
                interest_paid=Money.total(e.interest_component for e in chunk),
                closing_balance=chunk[-1].remaining_balance,
            ))
        return summaries


# ---------------------------------------------------------------------------
# Aggregated result
# ---------------------------------------------------------------------------


class LoanPlan(BaseModel):
    """Everything the presentation layer renders for one computation."""

    model_config = _FROZEN

    loan_input: LoanInput
    affordability: AffordabilityResult
    schedule: AmortizationSchedule
    cost_table_version: str

    @property
    def is_affordable(self) -> bool:
        return not self.affordability.is_zero

    @property
    def total_interest(self) -> Money:
        return self.schedule.total_interest

    @property
    def total_cost(self) -> Money:
        """Everything paid over the loan's life plus up-front acquisition costs."""
        return self.schedule.total_paid + self.affordability.estimated_acquisition_costs
