# =============================================================================
# API Dependencies — Collaborator Wiring for Route Handlers
# =============================================================================
#
# Every collaborator a handler needs is provided through FastAPI's Depends():
#
#   get_simulation_mode()            ← settings.simulation_mode (read ONCE here)
#   get_simulated_store()            ← SimulatedRecordStore (singleton)
#   get_record_store()               ← RecordStore over the lazy engine, or
#                                      None in simulation mode
#   get_data_source_registry()       ← DataSourceRegistry(mode passed in)
#   get_output_component_registry()
#   get_report_factory()
#   get_narrative_service()
#   get_analysis_service()
#
# The registries and stores are stateless, so they are cached per process.
# Tests either call handlers directly with explicit arguments or use
# app.dependency_overrides.
# =============================================================================

from __future__ import annotations

from functools import lru_cache

from fastapi import Depends

from finreport.config import get_settings
from finreport.datasources.registry import DataSourceRegistry
from finreport.db.engine import get_async_engine, get_async_session_factory
from finreport.services.analysis import FinancialAnalysisService
from finreport.services.narrative import NarrativeService
from finreport.services.output_components import OutputComponentRegistry
from finreport.services.record_store import RecordStore
from finreport.services.report_factory import ReportFactory
from finreport.services.simulation import SimulatedRecordStore


def get_simulation_mode() -> bool:
    return get_settings().simulation_mode


@lru_cache
def get_simulated_store() -> SimulatedRecordStore:
    return SimulatedRecordStore()


@lru_cache
def _live_record_store() -> RecordStore:
    return RecordStore(get_async_engine(), get_async_session_factory())


def get_record_store(
    simulation_mode: bool = Depends(get_simulation_mode),
) -> RecordStore | None:
    """The live store, or None when running against the simulated dataset."""
    if simulation_mode:
        return None
    return _live_record_store()


@lru_cache
def _registry_for(simulation_mode: bool) -> DataSourceRegistry:
    record_store = None if simulation_mode else _live_record_store()
    return DataSourceRegistry(record_store, get_simulated_store(), simulation_mode)


def get_data_source_registry(
    simulation_mode: bool = Depends(get_simulation_mode),
) -> DataSourceRegistry:
    return _registry_for(simulation_mode)


@lru_cache
def get_output_component_registry() -> OutputComponentRegistry:
    return OutputComponentRegistry()


def get_report_factory(
    data_sources: DataSourceRegistry = Depends(get_data_source_registry),
    output_components: OutputComponentRegistry = Depends(get_output_component_registry),
) -> ReportFactory:
    return ReportFactory(data_sources, output_components)


@lru_cache
def get_narrative_service() -> NarrativeService:
    return NarrativeService()


def get_analysis_service(
    simulation_mode: bool = Depends(get_simulation_mode),
    record_store: RecordStore | None = Depends(get_record_store),
    narrative: NarrativeService = Depends(get_narrative_service),
) -> FinancialAnalysisService:
    return FinancialAnalysisService(
        narrative=narrative,
        simulated_store=get_simulated_store(),
        simulation_mode=simulation_mode,
        record_store=record_store,
    )
