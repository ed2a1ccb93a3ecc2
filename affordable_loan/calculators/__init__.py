"""Mortgage calculators: annuity identity, affordability, amortization."""

from affordable_loan.calculators.affordability import compute_max_loan
from affordable_loan.calculators.amortization import generate_schedule
from affordable_loan.calculators.annuity import (
    monthly_rate_from_annual,
    payment_from_principal,
    principal_from_payment,
)

__all__ = [
    "compute_max_loan",
    "generate_schedule",
    "monthly_rate_from_annual",
    "payment_from_principal",
    "principal_from_payment",
]
