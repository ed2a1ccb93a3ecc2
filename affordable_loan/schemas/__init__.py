"""Pydantic schemas: domain models and HTTP DTOs."""

from affordable_loan.schemas.loan import (
    AffordabilityResult,
    AmortizationEntry,
    AmortizationSchedule,
    CostFactor,
    LoanInput,
    LoanPlan,
    PropertyState,
    YearlySummary,
)

__all__ = [
    "AffordabilityResult",
    "AmortizationEntry",
    "AmortizationSchedule",
    "CostFactor",
    "LoanInput",
    "LoanPlan",
    "PropertyState",
    "YearlySummary",
]
