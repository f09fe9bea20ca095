# =============================================================================
# Unit Tests — Financial Analysis Service
# =============================================================================
#
# Statistics are pure functions over transaction rows; the service is
# exercised with a mock LLM provider so no API key is needed.
# =============================================================================

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest

from finreport.db.models import CompanyAnnouncement, Employee, FinancialRecord
from finreport.models.requests import QueryRequest
from finreport.models.responses import QueryResponse
from finreport.services.analysis import (
    EmployeeNotFoundError,
    FinancialAnalysisService,
    calculate_statistics,
)
from finreport.services.llm import LLMResponse
from finreport.services.narrative import NarrativeService
from finreport.services.report_factory import ReportConfiguration
from finreport.services.simulation import SimulatedRecordStore


def _run(coro):
    """Helper to run async functions in sync tests."""
    return asyncio.run(coro)


def _mock_llm(text: str = "Narrative text.") -> AsyncMock:
    llm = AsyncMock()
    llm.complete.return_value = LLMResponse(
        content=text, model="test-model", input_tokens=10, output_tokens=5,
    )
    return llm


def _service(llm=None, simulation_mode=True, record_store=None) -> FinancialAnalysisService:
    llm = llm or _mock_llm()
    return FinancialAnalysisService(
        narrative=NarrativeService(provider_factory=lambda: llm),
        simulated_store=SimulatedRecordStore(),
        simulation_mode=simulation_mode,
        record_store=record_store,
    )


@dataclass
class _Txn:
    amount: Decimal
    transaction_type: str
    category: str = ""
    stock_code: str = ""


# ---------------------------------------------------------------------------
# Test: Statistics
# ---------------------------------------------------------------------------


class TestCalculateStatistics:
    def test_buy_sell_totals(self):
        stats = calculate_statistics([
            _Txn(Decimal("100"), "buy", stock_code="2330"),
            _Txn(Decimal("40"), "SELL", stock_code="2330"),
            _Txn(Decimal("60"), "Buy", category="2454"),
        ])
        assert stats.total_investment == Decimal("160")
        assert stats.total_divestment == Decimal("40")
        assert stats.net_investment == stats.total_investment - stats.total_divestment
        assert stats.transaction_count == 3
        assert stats.stock_codes == ["2330", "2454"]
        assert stats.average_transaction_amount == Decimal("200") / 3

    def test_no_transactions(self):
        stats = calculate_statistics([])
        assert stats.transaction_count == 0
        assert stats.average_transaction_amount == Decimal("0")
        assert stats.net_investment == Decimal("0")
        assert stats.stock_codes == []

    def test_empty_codes_are_skipped(self):
        stats = calculate_statistics([_Txn(Decimal("5"), "buy")])
        assert stats.stock_codes == []


# ---------------------------------------------------------------------------
# Test: Employee analysis
# ---------------------------------------------------------------------------


class TestGenerateEmployeeAnalysis:
    def test_simulated_employee(self):
        llm = _mock_llm("Portfolio is concentrated in TSMC.")
        result = _run(_service(llm).generate_employee_analysis(QueryRequest(employee_id="E001")))

        assert result.employee["employee_id"] == "E001"
        assert len(result.financial_records) == 3
        assert len(result.announcements) == 3
        assert result.statistics.total_investment == Decimal("121000")
        assert result.statistics.total_divestment == Decimal("30500")
        assert result.statistics.net_investment == Decimal("90500")
        assert result.statistics.stock_codes == ["2330"]
        assert result.ai_analysis == "Portfolio is concentrated in TSMC."
        assert result.investment_summary == "Portfolio is concentrated in TSMC."
        assert result.request.employee_id == "E001"
        assert llm.complete.await_count == 2

    def test_prompts_carry_employee_data(self):
        llm = _mock_llm()
        _run(_service(llm).generate_employee_analysis(QueryRequest(employee_id="E002")))

        report_prompt = llm.complete.call_args_list[0].kwargs["messages"][0]["content"]
        summary_prompt = llm.complete.call_args_list[1].kwargs["messages"][0]["content"]
        assert "employee E002" in report_prompt
        assert "MediaTek" in report_prompt
        assert "Total transactions: 2" in summary_prompt
        assert "2454" in summary_prompt

    def test_unknown_employee_raises(self):
        llm = _mock_llm()
        with pytest.raises(EmployeeNotFoundError) as exc_info:
            _run(_service(llm).generate_employee_analysis(QueryRequest(employee_id="E999")))
        assert exc_info.value.employee_id == "E999"
        assert isinstance(exc_info.value, LookupError)
        llm.complete.assert_not_called()

    def test_missing_employee_id(self):
        with pytest.raises(ValueError):
            _run(_service().generate_employee_analysis(QueryRequest()))

    def test_narrative_failure_is_absorbed(self):
        llm = AsyncMock()
        llm.complete.side_effect = RuntimeError("rate limited")
        result = _run(_service(llm).generate_employee_analysis(QueryRequest(employee_id="E001")))
        assert "rate limited" in result.ai_analysis
        assert "rate limited" in result.investment_summary
        assert result.statistics.transaction_count == 3

    def test_lookup_failure_is_reraised(self):
        store = MagicMock()
        store.get_employee_report = AsyncMock(side_effect=RuntimeError("connection refused"))
        service = _service(simulation_mode=False, record_store=store)
        with pytest.raises(RuntimeError, match="connection refused"):
            _run(service.generate_employee_analysis(QueryRequest(employee_id="E001")))

    def test_live_employee_uses_category_codes(self, live_store):
        service = _service(simulation_mode=False, record_store=live_store)
        result = _run(service.generate_employee_analysis(QueryRequest(employee_id="E001")))
        assert result.announcements == []
        assert result.statistics.stock_codes == ["2330"]
        assert result.statistics.total_investment == Decimal("121000")

    def test_live_unknown_employee(self, live_store):
        service = _service(simulation_mode=False, record_store=live_store)
        with pytest.raises(EmployeeNotFoundError):
            _run(service.generate_employee_analysis(QueryRequest(employee_id="E404")))

    def test_live_unknown_employee_writes_nothing(self, live_store):
        def row_counts():
            return {
                model.__tablename__: len(_run(live_store.query(model)))
                for model in (Employee, FinancialRecord, CompanyAnnouncement)
            }

        before = row_counts()
        service = _service(simulation_mode=False, record_store=live_store)
        with pytest.raises(EmployeeNotFoundError):
            _run(service.generate_employee_analysis(QueryRequest(employee_id="E404")))

        assert row_counts() == before
        assert before == {
            "EMPLOYEES": 10,
            "FINANCIAL_RECORDS": 21,
            "COMPANY_ANNOUNCEMENTS": 3,
        }
        assert _run(live_store.get_employee_report("E404")).employee is None


# ---------------------------------------------------------------------------
# Test: Report narratives
# ---------------------------------------------------------------------------


class TestNarrateReport:
    def test_only_successful_responses_are_narrated(self):
        llm = _mock_llm("Looks fine.")
        ok = QueryResponse(
            data={"table_name": "EMPLOYEES", "record_count": 10}, is_success=True,
        )
        failed = QueryResponse(messages=["Error querying BUDGET_RECORDS: boom"])
        configuration = ReportConfiguration(title="t", responses=[ok, failed])

        narratives = _run(_service(llm).narrate_report(configuration, prompt="Focus on Taipei"))

        assert len(narratives) == 1
        assert narratives[0]["report_id"] == ok.report_id
        assert narratives[0]["table_name"] == "EMPLOYEES"
        assert narratives[0]["analysis"] == "Looks fine."
        assert narratives[0]["pattern_check"] == "Looks fine."

        first_prompt = llm.complete.call_args_list[0].kwargs["messages"][0]["content"]
        second_prompt = llm.complete.call_args_list[1].kwargs["messages"][0]["content"]
        assert "Focus on Taipei" in first_prompt
        assert "EMPLOYEES has 10 records" in second_prompt
