"""HTTP request/response DTOs.

The presentation layer sends plain decimals; the core works in Money.
This module is the only place that converts between the two. Amounts go
out as two-place decimal strings so no client parses them as floats.
"""

from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, Field

from affordable_loan.money import Money
from affordable_loan.schemas.loan import (
    AmortizationEntry,
    CostFactor,
    LoanInput,
    LoanPlan,
    PropertyState,
    YearlySummary,
)

# ---------------------------------------------------------------------------
# Request
# ---------------------------------------------------------------------------


class AffordabilityRequest(BaseModel):
    """Sanitized form fields (decimal separators already normalized)."""

    monthly_net_income: Decimal
    other_monthly_debt: Decimal = Decimal("0")
    annual_interest_rate_percent: Decimal | None = None   # blank → policy default
    term_years: int
    property_state: PropertyState = PropertyState.NEW
    region: str = "andalucia"
    include_schedule: bool = True

    def to_loan_input(self) -> LoanInput:
        return LoanInput(
            monthly_net_income=Money.parse(self.monthly_net_income),
            other_monthly_debt=Money.parse(self.other_monthly_debt),
            annual_interest_rate_percent=self.annual_interest_rate_percent,
            term_years=self.term_years,
            property_state=self.property_state,
            region=self.region,
        )


# ---------------------------------------------------------------------------
# Response
# ---------------------------------------------------------------------------


class CostFactorResponse(BaseModel):
    region: str
    property_state: PropertyState
    acquisition_tax_percent: str
    fixed_fees_estimate: str
    description: str | None = None

    @classmethod
    def from_factor(cls, factor: CostFactor) -> CostFactorResponse:
        return cls(
            region=factor.region,
            property_state=factor.property_state,
            acquisition_tax_percent=str(factor.acquisition_tax_percent),
            fixed_fees_estimate=str(factor.fixed_fees_estimate),
            description=factor.description,
        )


class ScheduleEntryResponse(BaseModel):
    period: int
    payment: str
    principal: str
    interest: str
    remaining_balance: str

    @classmethod
    def from_entry(cls, entry: AmortizationEntry) -> ScheduleEntryResponse:
        return cls(
            period=entry.period_index,
            payment=str(entry.payment_amount),
            principal=str(entry.principal_component),
            interest=str(entry.interest_component),
            remaining_balance=str(entry.remaining_balance),
        )


class YearlySummaryResponse(BaseModel):
    year: int
    principal_paid: str
    interest_paid: str
    closing_balance: str

    @classmethod
    def from_summary(cls, summary: YearlySummary) -> YearlySummaryResponse:
        return cls(
            year=summary.year,
            principal_paid=str(summary.principal_paid),
            interest_paid=str(summary.interest_paid),
            closing_balance=str(summary.closing_balance),
        )


class LoanPlanResponse(BaseModel):
    """Summary + optional schedule, as rendered by the results view."""

    affordable: bool
    max_loan_amount: str
    monthly_payment: str
    max_monthly_payment: str
    debt_to_income_ratio_used: str
    annual_interest_rate_percent: str
    effective_monthly_rate: str
    term_years: int
    estimated_acquisition_costs: str
    total_interest: str
    total_cost: str
    cost_factor: CostFactorResponse
    cost_table_version: str
    yearly_summary: list[YearlySummaryResponse] = Field(default_factory=list)
    schedule: list[ScheduleEntryResponse] | None = None

    @classmethod
    def from_plan(cls, plan: LoanPlan, include_schedule: bool = True) -> LoanPlanResponse:
        result = plan.affordability
        schedule = None
        if include_schedule:
            schedule = [ScheduleEntryResponse.from_entry(e) for e in plan.schedule.entries]
        return cls(
            affordable=plan.is_affordable,
            max_loan_amount=str(result.max_loan_amount),
            monthly_payment=str(result.monthly_payment),
            max_monthly_payment=str(result.max_monthly_payment),
            debt_to_income_ratio_used=str(result.debt_to_income_ratio_used),
            annual_interest_rate_percent=str(result.annual_interest_rate_percent),
            effective_monthly_rate=str(result.effective_monthly_rate),
            term_years=result.term_years,
            estimated_acquisition_costs=str(result.estimated_acquisition_costs),
            total_interest=str(plan.total_interest),
            total_cost=str(plan.total_cost),
            cost_factor=CostFactorResponse.from_factor(result.cost_factor),
            cost_table_version=plan.cost_table_version,
            yearly_summary=[YearlySummaryResponse.from_summary(s) for s in plan.schedule.yearly_summary()],
            schedule=schedule,
        )


class RegionsResponse(BaseModel):
    version: str
    factors: list[CostFactorResponse]


class ErrorResponse(BaseModel):
    detail: str
    error: str   # exception class name, e.g. "UnknownRegionError"
