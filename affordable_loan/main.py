"""FastAPI application entry point.

Usage:
    python -m affordable_loan.main

Loads the cost table once at startup and serves the affordability API.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
import uvicorn
from fastapi import FastAPI

from affordable_loan import __version__
from affordable_loan.api.routes import router
from affordable_loan.config import settings
from affordable_loan.tables.cost_factors import load_cost_table

# ── Logging setup ────────────────────────────────────────────────────

logging.basicConfig(
    level=getattr(logging, settings.log_level),
    format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
    stream=sys.stdout,
)
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.dev.ConsoleRenderer(),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
)

logger = logging.getLogger(__name__)

# ── FastAPI lifespan ─────────────────────────────────────────────────


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Load static configuration before serving requests."""
    logger.info("Starting affordable-loan API (env=%s)", settings.environment)

    app.state.cost_table = load_cost_table(settings.cost_table.cost_table_path)
    logger.info("Cost table ready (version=%s)", app.state.cost_table.version)

    yield

    logger.info("affordable-loan API shutdown complete")


# ── FastAPI app ──────────────────────────────────────────────────────


def create_app() -> FastAPI:
    app = FastAPI(
        title="Affordable Loan API",
        description="Mortgage affordability and amortization schedules",
        version=__version__,
        lifespan=lifespan,
    )
    app.include_router(router)
    return app


app = create_app()


# ── Entry point ──────────────────────────────────────────────────────

if __name__ == "__main__":
    uvicorn.run(
        "affordable_loan.main:app",
        host=settings.api.api_host,
        port=settings.api.api_port,
        log_level=settings.log_level.lower(),
    )
