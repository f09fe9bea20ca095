# =============================================================================
# Unit Tests — Report Factory
# =============================================================================

from __future__ import annotations

import asyncio
from datetime import date
from unittest.mock import MagicMock

from finreport.datasources.registry import DataSourceRegistry
from finreport.models.requests import QueryRequest
from finreport.services.output_components import OutputComponentRegistry
from finreport.services.report_factory import ReportFactory, build_title
from finreport.services.simulation import SimulatedRecordStore


def _run(coro):
    """Helper to run async functions in sync tests."""
    return asyncio.run(coro)


def _factory(store=None) -> ReportFactory:
    registry = DataSourceRegistry(None, store or SimulatedRecordStore(), simulation_mode=True)
    return ReportFactory(registry, OutputComponentRegistry())


class TestBuildTitle:
    def test_base_title(self):
        assert build_title(QueryRequest()) == "Financial Data Summary"

    def test_all_parts_in_order(self):
        request = QueryRequest(employee_id="E001", region="Taipei", start_date=date(2024, 3, 1))
        assert build_title(request) == (
            "Financial Data Summary - Employee: E001 - Region: Taipei - Date: 2024-03-01"
        )

    def test_end_date_alone_is_not_in_title(self):
        assert build_title(QueryRequest(end_date=date(2024, 3, 31))) == "Financial Data Summary"


class TestCreatePage:
    def test_resolves_in_request_order(self):
        request = QueryRequest(
            data_sources=["Budget", "Employee"],
            output_components=["Summary", "SQL"],
        )
        configuration = _run(_factory().create_page(request))

        assert [s.name for s in configuration.data_sources] == ["Budget", "Employee"]
        assert [r.data["table_name"] for r in configuration.responses] == [
            "BUDGET_RECORDS", "EMPLOYEES",
        ]
        assert [c.key for c in configuration.output_components] == ["summary", "sql"]

    def test_unresolved_names_are_skipped(self):
        request = QueryRequest(
            data_sources=["Payroll", "FinancialRecord"],
            output_components=["Heatmap"],
        )
        configuration = _run(_factory().create_page(request))
        assert [s.name for s in configuration.data_sources] == ["FinancialRecord"]
        assert len(configuration.responses) == 1
        assert configuration.output_components == []

    def test_empty_request(self):
        configuration = _run(_factory().create_page(QueryRequest()))
        assert configuration.title == "Financial Data Summary"
        assert configuration.data_sources == []
        assert configuration.responses == []

    def test_strategy_failure_does_not_raise(self):
        store = MagicMock()
        store.employees.side_effect = RuntimeError("store offline")
        store.budget_records.return_value = SimulatedRecordStore().budget_records()
        request = QueryRequest(data_sources=["Employee", "Budget"])

        configuration = _run(_factory(store).create_page(request))

        assert [r.is_success for r in configuration.responses] == [False, True]
        assert "store offline" in configuration.responses[0].messages[0]

    def test_each_response_has_unique_id(self):
        request = QueryRequest(data_sources=["Employee", "Employee"])
        configuration = _run(_factory().create_page(request))
        ids = {r.report_id for r in configuration.responses}
        assert len(ids) == 2
