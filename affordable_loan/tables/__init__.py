"""Static, versioned lookup tables."""

from affordable_loan.tables.cost_factors import CostTable, build_cost_table, load_cost_table

__all__ = ["CostTable", "build_cost_table", "load_cost_table"]
