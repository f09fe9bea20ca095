# =============================================================================
# FastAPI Application — Financial Reporting Backend
# =============================================================================
#
# Run locally:
#   uvicorn finreport.main:app --reload
#
# Routers:
#   - api/reports.py:  POST /reports, data-source and component discovery
#   - api/analysis.py: POST /analysis/employee
#   - api/admin.py:    /admin/database schema administration
#
# With SIMULATION_MODE=true (the default) the service answers from the
# in-memory seed dataset; no database or LLM key is needed to start it.
# =============================================================================

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from finreport.api import admin, analysis, reports
from finreport.config import settings
from finreport.db.engine import dispose_engine
from finreport.models.responses import HealthResponse

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(
        "%s %s starting (simulation_mode=%s)",
        settings.app_name, settings.app_version, settings.simulation_mode,
    )
    yield
    await dispose_engine()


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description=(
        "Strategy-based financial reporting: employee, transaction, "
        "announcement, market and budget data with optional LLM narratives."
    ),
    lifespan=lifespan,
)

app.include_router(reports.router)
app.include_router(analysis.router)
app.include_router(admin.router)


@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health() -> HealthResponse:
    """Liveness check; also reports which record source is active."""
    return HealthResponse(
        version=settings.app_version,
        service=settings.app_name,
        simulation_mode=settings.simulation_mode,
    )
