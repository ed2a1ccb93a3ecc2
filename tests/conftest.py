"""Shared fixtures: small hand-built cost tables and the default policy."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from affordable_loan.config import PolicySettings
from affordable_loan.tables.cost_factors import CostTable, build_cost_table

TEST_REGION = "testland"


def make_cost_table(
    tax_new: str = "0",
    fees_new: str = "0",
    tax_second_hand: str = "0",
    fees_second_hand: str = "0",
    region: str = TEST_REGION,
    version: str = "test-1",
) -> CostTable:
    """One-region cost table with explicit factors."""
    return build_cost_table({
        "version": version,
        "regions": {
            region: {
                "description": "Test region",
                "new": {"acquisition_tax_percent": tax_new, "fixed_fees_estimate": fees_new},
                "second_hand": {
                    "acquisition_tax_percent": tax_second_hand,
                    "fixed_fees_estimate": fees_second_hand,
                },
            },
        },
    })


@pytest.fixture
def zero_cost_table() -> CostTable:
    """Region with 0% tax and no fees: max loan equals the gross principal."""
    return make_cost_table()


@pytest.fixture
def cost_table_factory() -> Callable[..., CostTable]:
    return make_cost_table


@pytest.fixture
def policy() -> PolicySettings:
    return PolicySettings()
