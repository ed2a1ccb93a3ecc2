"""Loan plan engine: affordability → schedule → aggregated result.

Pure Python orchestrator. No I/O beyond the cached cost table load.
The caller re-invokes it whenever the household's input changes; nothing
is cached here between calls.
"""

from __future__ import annotations

import logging

from affordable_loan.calculators.affordability import compute_max_loan
from affordable_loan.calculators.amortization import generate_schedule
from affordable_loan.config import PolicySettings, settings
from affordable_loan.errors import ArithmeticDegeneracyError
from affordable_loan.schemas.loan import AffordabilityResult, AmortizationSchedule, LoanInput, LoanPlan
from affordable_loan.tables.cost_factors import CostTable, load_cost_table

logger = logging.getLogger(__name__)


def aggregate_result(
    loan_input: LoanInput,
    affordability: AffordabilityResult,
    schedule: AmortizationSchedule,
    cost_table_version: str,
) -> LoanPlan:
    """Assemble the immutable result handed to the presentation layer.

    The schedule must have been generated from this affordability result;
    anything else is a wiring bug, not bad input.
    """
    if (
        schedule.principal != affordability.max_loan_amount
        or schedule.term_years != affordability.term_years
        or schedule.annual_interest_rate_percent != affordability.annual_interest_rate_percent
    ):
        msg = (
            f"Schedule ({schedule.principal} @ {schedule.annual_interest_rate_percent}% "
            f"over {schedule.term_years}y) does not match affordability result "
            f"({affordability.max_loan_amount} @ {affordability.annual_interest_rate_percent}% "
            f"over {affordability.term_years}y)"
        )
        raise ArithmeticDegeneracyError(msg)

    return LoanPlan(
        loan_input=loan_input,
        affordability=affordability,
        schedule=schedule,
        cost_table_version=cost_table_version,
    )


def compute_loan_plan(
    loan_input: LoanInput,
    cost_table: CostTable | None = None,
    policy: PolicySettings | None = None,
) -> LoanPlan:
    """Run the full pipeline for one household.

    Returns a LoanPlan; zero affordability yields an empty schedule.
    Errors from validation or the cost table propagate unchanged.
    """
    if cost_table is None:
        cost_table = load_cost_table(settings.cost_table.cost_table_path)

    affordability = compute_max_loan(loan_input, cost_table=cost_table, policy=policy)
    schedule = generate_schedule(
        affordability.max_loan_amount,
        affordability.annual_interest_rate_percent,
        affordability.term_years,
    )

    logger.debug(
        "Loan plan computed: region=%s state=%s term=%dy max_loan=%s payment=%s periods=%d",
        loan_input.region,
        loan_input.property_state.value,
        loan_input.term_years,
        affordability.max_loan_amount,
        affordability.monthly_payment,
        schedule.period_count,
    )

    return aggregate_result(loan_input, affordability, schedule, cost_table.version)
