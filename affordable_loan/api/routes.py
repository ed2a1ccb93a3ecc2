"""Affordability API: FastAPI router over the pure engine.

Converts request decimals to Money, runs the pipeline, and maps the
caller-side error taxonomy to 422. ArithmeticDegeneracyError is left
unhandled on purpose: it signals a bug and surfaces as a 500.
"""
# ruff: noqa: B008  (Depends() in function defaults is standard FastAPI)

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse

from affordable_loan.config import settings
from affordable_loan.engine import compute_loan_plan
from affordable_loan.errors import InvalidInputError, UnknownPropertyStateError, UnknownRegionError
from affordable_loan.schemas.api import (
    AffordabilityRequest,
    CostFactorResponse,
    ErrorResponse,
    LoanPlanResponse,
    RegionsResponse,
)
from affordable_loan.schemas.loan import PropertyState
from affordable_loan.tables.cost_factors import CostTable, load_cost_table

logger = logging.getLogger(__name__)

router = APIRouter(tags=["affordability"])


def get_cost_table(request: Request) -> CostTable:
    """Cost table loaded at startup; falls back to the configured data set."""
    table = getattr(request.app.state, "cost_table", None)
    if table is None:
        table = load_cost_table(settings.cost_table.cost_table_path)
    return table


@router.get("/health")
def health_check(cost_table: CostTable = Depends(get_cost_table)) -> dict[str, str]:
    """Health check endpoint."""
    return {
        "status": "ok",
        "environment": settings.environment,
        "cost_table_version": cost_table.version,
    }


@router.get("/regions", response_model=RegionsResponse)
def list_regions(cost_table: CostTable = Depends(get_cost_table)) -> RegionsResponse:
    """Every region with its new-build and second-hand cost factors."""
    factors = [
        CostFactorResponse.from_factor(cost_table.resolve(region, state))
        for region in cost_table.regions
        for state in PropertyState
    ]
    return RegionsResponse(version=cost_table.version, factors=factors)


@router.post(
    "/affordability",
    response_model=LoanPlanResponse,
    responses={422: {"model": ErrorResponse}},
)
def calculate_affordability(
    payload: AffordabilityRequest,
    cost_table: CostTable = Depends(get_cost_table),
) -> LoanPlanResponse | JSONResponse:
    """Maximum affordable loan plus its amortization schedule."""
    try:
        plan = compute_loan_plan(payload.to_loan_input(), cost_table=cost_table)
    except (InvalidInputError, UnknownRegionError, UnknownPropertyStateError) as exc:
        logger.info("Affordability request rejected: %s (%s)", exc, type(exc).__name__)
        return JSONResponse(
            status_code=422,
            content=ErrorResponse(detail=str(exc), error=type(exc).__name__).model_dump(),
        )

    return LoanPlanResponse.from_plan(plan, include_schedule=payload.include_schedule)


@router.get("/regions/{region}", response_model=list[CostFactorResponse])
def get_region(region: str, cost_table: CostTable = Depends(get_cost_table)) -> list[CostFactorResponse]:
    """Cost factors for a single region."""
    if region not in cost_table:
        raise HTTPException(status_code=404, detail=f"Unknown region: {region}")
    return [CostFactorResponse.from_factor(cost_table.resolve(region, state)) for state in PropertyState]
