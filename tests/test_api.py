# =============================================================================
# Unit Tests — API Handlers
# =============================================================================
#
# Route handlers are called directly with explicit collaborators (the values
# FastAPI would inject via Depends), so no server or TestClient is needed.
# =============================================================================

from __future__ import annotations

import asyncio
from datetime import date
from unittest.mock import AsyncMock

import pytest
from fastapi import HTTPException
from pydantic import ValidationError

from finreport.api import admin, analysis, reports
from finreport.datasources.registry import DataSourceRegistry
from finreport.main import app, health
from finreport.models.requests import EmployeeAnalysisRequest, QueryRequest
from finreport.services.analysis import FinancialAnalysisService
from finreport.services.llm import LLMResponse
from finreport.services.narrative import NarrativeService
from finreport.services.output_components import OutputComponentRegistry
from finreport.services.report_factory import ReportFactory
from finreport.services.simulation import SimulatedRecordStore


def _run(coro):
    """Helper to run async functions in sync tests."""
    return asyncio.run(coro)


def _registry() -> DataSourceRegistry:
    return DataSourceRegistry(None, SimulatedRecordStore(), simulation_mode=True)


def _analysis_service(llm=None) -> FinancialAnalysisService:
    if llm is None:
        llm = AsyncMock()
        llm.complete.return_value = LLMResponse(
            content="Narrative.", model="test-model", input_tokens=1, output_tokens=1,
        )
    return FinancialAnalysisService(
        narrative=NarrativeService(provider_factory=lambda: llm),
        simulated_store=SimulatedRecordStore(),
        simulation_mode=True,
    )


def _create_report(request: QueryRequest, narrate: bool = False):
    return _run(reports.create_report(
        request,
        narrate=narrate,
        factory=ReportFactory(_registry(), OutputComponentRegistry()),
        analysis=_analysis_service(),
    ))


# ---------------------------------------------------------------------------
# Test: Routes are mounted
# ---------------------------------------------------------------------------


class TestApp:
    def test_routes_registered(self):
        paths = set(app.openapi()["paths"])
        assert {
            "/health",
            "/reports",
            "/data-sources",
            "/data-sources/{name}/values/{field_name}",
            "/output-components",
            "/analysis/employee",
            "/admin/database",
            "/admin/database/create-script",
            "/admin/database/migrate",
        } <= paths

    def test_health(self):
        response = _run(health())
        assert response.status == "ok"
        assert isinstance(response.simulation_mode, bool)


# ---------------------------------------------------------------------------
# Test: POST /reports
# ---------------------------------------------------------------------------


class TestCreateReport:
    def test_report_with_views(self):
        request = QueryRequest(
            employee_id="E001",
            data_sources=["FinancialRecord", "Announcement"],
            output_components=["Table", "Summary"],
        )
        report = _create_report(request)

        assert report.title == "Financial Data Summary - Employee: E001"
        assert report.data_sources == ["FinancialRecord", "Announcement"]
        assert report.output_components == ["table", "summary"]
        assert len(report.responses) == 2
        assert len(report.views) == 4
        assert report.views[0].component == "table"
        assert report.views[0].report_id == report.responses[0].report_id
        assert report.narratives == []

    def test_narrate_adds_one_narrative_per_response(self):
        request = QueryRequest(data_sources=["Budget", "Market"])
        report = _create_report(request, narrate=True)
        assert [n.table_name for n in report.narratives] == ["BUDGET_RECORDS", "MARKET_DATA"]
        assert all(n.analysis == "Narrative." for n in report.narratives)

    def test_blank_filters_are_ignored(self):
        request = QueryRequest(region="  ", data_sources=["Employee"])
        report = _create_report(request)
        assert report.responses[0].data["record_count"] == 10
        assert report.title == "Financial Data Summary"


# ---------------------------------------------------------------------------
# Test: Discovery endpoints
# ---------------------------------------------------------------------------


class TestDiscovery:
    def test_list_data_sources(self):
        sources = _run(reports.list_data_sources(registry=_registry()))
        assert [s.name for s in sources] == [
            "Employee", "FinancialRecord", "Announcement", "Market", "Budget",
        ]
        assert sources[0].source_mode == "simulation"

    def test_available_values(self):
        response = _run(reports.get_available_values("員工", "department", registry=_registry()))
        assert response.data_source == "Employee"
        assert len(response.values) == 5

    def test_available_values_unknown_source(self):
        with pytest.raises(HTTPException) as exc_info:
            _run(reports.get_available_values("Payroll", "department", registry=_registry()))
        assert exc_info.value.status_code == 404

    def test_list_output_components(self):
        components = _run(reports.list_output_components(registry=OutputComponentRegistry()))
        assert [c.key for c in components] == ["sql", "table", "summary", "chart"]


# ---------------------------------------------------------------------------
# Test: POST /analysis/employee
# ---------------------------------------------------------------------------


class TestAnalyzeEmployee:
    def test_success(self):
        request = EmployeeAnalysisRequest(employee_id="E001", start_date=date(2024, 1, 1))
        response = _run(analysis.analyze_employee(request, service=_analysis_service()))
        assert response.employee["employee_id"] == "E001"
        assert response.statistics.transaction_count == 3
        assert response.statistics.stock_codes == ["2330"]
        assert response.ai_analysis == "Narrative."
        assert response.request["employee_id"] == "E001"
        assert response.request["start_date"] == "2024-01-01"

    def test_unknown_employee_is_404(self):
        request = EmployeeAnalysisRequest(employee_id="E999")
        with pytest.raises(HTTPException) as exc_info:
            _run(analysis.analyze_employee(request, service=_analysis_service()))
        assert exc_info.value.status_code == 404

    def test_blank_employee_id_fails_validation(self):
        with pytest.raises(ValidationError):
            EmployeeAnalysisRequest(employee_id="   ")

    def test_employee_id_is_stripped(self):
        request = EmployeeAnalysisRequest(employee_id="  E001 ")
        assert request.employee_id == "E001"
        response = _run(analysis.analyze_employee(request, service=_analysis_service()))
        assert response.employee["employee_id"] == "E001"

    def test_invalid_request_is_400(self):
        service = AsyncMock()
        service.generate_employee_analysis.side_effect = ValueError(
            "employee_id is required for employee analysis"
        )
        request = EmployeeAnalysisRequest(employee_id="E001")
        with pytest.raises(HTTPException) as exc_info:
            _run(analysis.analyze_employee(request, service=service))
        assert exc_info.value.status_code == 400

    def test_unexpected_error_is_502(self):
        service = AsyncMock()
        service.generate_employee_analysis.side_effect = RuntimeError("database down")
        request = EmployeeAnalysisRequest(employee_id="E001")
        with pytest.raises(HTTPException) as exc_info:
            _run(analysis.analyze_employee(request, service=service))
        assert exc_info.value.status_code == 502
        assert "database down" in exc_info.value.detail


# ---------------------------------------------------------------------------
# Test: /admin/database
# ---------------------------------------------------------------------------


class TestAdminSimulation:
    def test_status(self):
        status = _run(admin.database_status(simulation_mode=True, record_store=None))
        assert status.simulation_mode is True
        assert status.pending_migrations == []

    def test_create_script_without_database(self):
        response = _run(admin.create_script(simulation_mode=True, record_store=None))
        assert "CREATE TABLE" in response.script
        for table in ("EMPLOYEES", "FINANCIAL_RECORDS", "COMPANY_ANNOUNCEMENTS",
                      "MARKET_DATA", "BUDGET_RECORDS"):
            assert table in response.script

    def test_migrate_is_noop(self):
        response = _run(admin.migrate(simulation_mode=True, record_store=None))
        assert response.success is True
        assert response.applied == []


class TestAdminLive:
    def test_missing_store_is_503(self):
        with pytest.raises(HTTPException) as exc_info:
            _run(admin.database_status(simulation_mode=False, record_store=None))
        assert exc_info.value.status_code == 503

    def test_migrate_creates_missing_tables(self, empty_store):
        before = _run(admin.database_status(simulation_mode=False, record_store=empty_store))
        assert before.can_connect is True
        assert before.dialect == "sqlite"
        assert len(before.pending_migrations) == 5

        migrated = _run(admin.migrate(simulation_mode=False, record_store=empty_store))
        assert sorted(migrated.applied) == sorted(before.pending_migrations)

        after = _run(admin.database_status(simulation_mode=False, record_store=empty_store))
        assert after.pending_migrations == []

        again = _run(admin.migrate(simulation_mode=False, record_store=empty_store))
        assert again.applied == []
        assert again.message == "Database schema is up to date"

    def test_create_script_uses_engine_dialect(self, empty_store):
        response = _run(admin.create_script(simulation_mode=False, record_store=empty_store))
        assert response.simulation_mode is False
        assert "CREATE INDEX" in response.script
