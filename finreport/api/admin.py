# =============================================================================
# Admin API — Record Store Schema Administration
# =============================================================================
#
#   GET  /admin/database                → connectivity + missing tables
#   GET  /admin/database/create-script  → CREATE TABLE / INDEX DDL
#   POST /admin/database/migrate        → create missing tables
#
# In simulation mode no database is configured, so status and migrate
# return canned answers. The create script is still produced (compiled for
# PostgreSQL, the production dialect) because compiling DDL needs no
# connection.
#
# These endpoints manage the SCHEMA only; business rows are never written.
# =============================================================================

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.dialects import postgresql

from finreport.api.deps import get_record_store, get_simulation_mode
from finreport.models.responses import (
    CreateScriptResponse,
    DatabaseStatusResponse,
    MigrationResponse,
)
from finreport.services.record_store import RecordStore, compile_create_script

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin/database", tags=["Admin"])


def _require_store(record_store: RecordStore | None) -> RecordStore:
    if record_store is None:
        raise HTTPException(status_code=503, detail="No Record Store configured")
    return record_store


@router.get(
    "",
    response_model=DatabaseStatusResponse,
    summary="Record Store status",
)
async def database_status(
    simulation_mode: bool = Depends(get_simulation_mode),
    record_store: RecordStore | None = Depends(get_record_store),
) -> DatabaseStatusResponse:
    if simulation_mode:
        return DatabaseStatusResponse(simulation_mode=True, can_connect=True, dialect="simulation")

    store = _require_store(record_store)
    can_connect = await store.check_connection()
    pending: list[str] = []
    if can_connect:
        try:
            pending = await store.pending_migrations()
        except Exception as e:
            logger.exception("Failed to inspect Record Store schema: %s", e)
            raise HTTPException(status_code=502, detail=f"Schema inspection failed: {e}") from e

    return DatabaseStatusResponse(
        simulation_mode=False,
        can_connect=can_connect,
        dialect=store.dialect_name,
        pending_migrations=pending,
    )


@router.get(
    "/create-script",
    response_model=CreateScriptResponse,
    summary="DDL for the reporting tables",
)
async def create_script(
    simulation_mode: bool = Depends(get_simulation_mode),
    record_store: RecordStore | None = Depends(get_record_store),
) -> CreateScriptResponse:
    if simulation_mode:
        script = compile_create_script(postgresql.dialect())
    else:
        script = _require_store(record_store).generate_create_script()
    return CreateScriptResponse(simulation_mode=simulation_mode, script=script)


@router.post(
    "/migrate",
    response_model=MigrationResponse,
    summary="Create missing reporting tables",
)
async def migrate(
    simulation_mode: bool = Depends(get_simulation_mode),
    record_store: RecordStore | None = Depends(get_record_store),
) -> MigrationResponse:
    if simulation_mode:
        return MigrationResponse(
            success=True,
            message="Simulation mode: no database migrations to apply",
        )

    store = _require_store(record_store)
    try:
        applied = await store.apply_migrations()
    except Exception as e:
        logger.exception("Record Store migration failed: %s", e)
        raise HTTPException(status_code=502, detail=f"Migration failed: {e}") from e

    message = (
        f"Created {len(applied)} tables" if applied else "Database schema is up to date"
    )
    return MigrationResponse(success=True, message=message, applied=applied)
