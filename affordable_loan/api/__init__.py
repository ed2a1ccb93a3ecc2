"""HTTP boundary for the presentation layer."""

from affordable_loan.api.routes import router

__all__ = ["router"]
