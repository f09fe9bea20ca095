# =============================================================================
# Financial Analysis Service — Employee Investment Analysis + Report Narratives
# =============================================================================
#
# generate_employee_analysis():
#   1. Composite lookup keyed by employee id (simulated or live store)
#   2. EmployeeNotFoundError if there is no employee record
#   3. InvestmentStatistics over ALL of the employee's transactions
#   4. Two narrative prompts: full report + compact investment summary
#   5. Bundle everything into an EmployeeAnalysisResult
#
# Lookup and statistics faults are logged and re-raised. Narrative faults
# never reach this layer: NarrativeService returns an error string instead.
#
# narrate_report():
#   For each SUCCESSFUL response of an assembled report, a general
#   commentary (optionally steered by the request's free-text prompt) and a
#   record-count sanity check.
# =============================================================================

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field, is_dataclass
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Sequence

from finreport.models.requests import QueryRequest
from finreport.services.narrative import NarrativeService

if TYPE_CHECKING:
    from finreport.services.record_store import RecordStore
    from finreport.services.report_factory import ReportConfiguration
    from finreport.services.simulation import EmployeeReport, SimulatedRecordStore

logger = logging.getLogger(__name__)


class EmployeeNotFoundError(LookupError):
    """No employee record exists for the requested id."""

    def __init__(self, employee_id: str):
        super().__init__(f"Employee {employee_id} not found")
        self.employee_id = employee_id


# ---------------------------------------------------------------------------
# Data Structures
# ---------------------------------------------------------------------------


@dataclass
class InvestmentStatistics:
    total_investment: Decimal        # sum of buy amounts
    total_divestment: Decimal        # sum of sell amounts
    net_investment: Decimal          # buy - sell
    transaction_count: int
    stock_codes: list[str]           # distinct, first-seen order
    average_transaction_amount: Decimal


@dataclass
class EmployeeAnalysisResult:
    employee: dict[str, Any]
    financial_records: list[dict[str, Any]]
    announcements: list[dict[str, Any]]
    statistics: InvestmentStatistics
    ai_analysis: str
    investment_summary: str
    request: QueryRequest
    generated_at: datetime = field(default_factory=datetime.now)


def row_to_dict(row: Any) -> dict[str, Any]:
    """ORM rows and simulated dataclass rows → plain dict."""
    if hasattr(row, "to_dict"):
        return row.to_dict()
    if is_dataclass(row):
        return asdict(row)
    return dict(row)


def calculate_statistics(records: Sequence[Any]) -> InvestmentStatistics:
    """
    Buy/sell totals over a set of transactions.

    The stock code is taken from `stock_code` (simulated rows) and falls back
    to `category` (live rows have no stock_code column). Transaction types
    are compared case-insensitively.
    """
    total_buy = Decimal("0")
    total_sell = Decimal("0")
    total_amount = Decimal("0")
    stock_codes: list[str] = []

    for record in records:
        amount = Decimal(record.amount)
        total_amount += amount
        side = (record.transaction_type or "").lower()
        if side == "buy":
            total_buy += amount
        elif side == "sell":
            total_sell += amount

        code = getattr(record, "stock_code", "") or record.category
        if code and code not in stock_codes:
            stock_codes.append(code)

    count = len(records)
    return InvestmentStatistics(
        total_investment=total_buy,
        total_divestment=total_sell,
        net_investment=total_buy - total_sell,
        transaction_count=count,
        stock_codes=stock_codes,
        average_transaction_amount=total_amount / count if count else Decimal("0"),
    )


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------


class FinancialAnalysisService:
    def __init__(
        self,
        narrative: NarrativeService,
        simulated_store: SimulatedRecordStore,
        simulation_mode: bool,
        record_store: RecordStore | None = None,
    ):
        self._narrative = narrative
        self._simulated_store = simulated_store
        self._record_store = record_store
        self.simulation_mode = simulation_mode

    async def _lookup(self, employee_id: str) -> EmployeeReport:
        if self.simulation_mode:
            return self._simulated_store.get_employee_report(employee_id)
        if self._record_store is None:
            raise RuntimeError("No Record Store configured for live employee analysis")
        return await self._record_store.get_employee_report(employee_id)

    async def generate_employee_analysis(
        self, request: QueryRequest,
    ) -> EmployeeAnalysisResult:
        """
        Analyse one employee's investment activity.

        Raises:
            ValueError: request has no employee_id.
            EmployeeNotFoundError: no employee record for the id.
        """
        employee_id = request.employee_id
        if not employee_id:
            raise ValueError("employee_id is required for employee analysis")

        try:
            report = await self._lookup(employee_id)
            if report.employee is None:
                raise EmployeeNotFoundError(employee_id)
            statistics = calculate_statistics(report.financial_records)
        except EmployeeNotFoundError:
            logger.warning("Employee analysis requested for unknown employee %s", employee_id)
            raise
        except Exception:
            logger.exception("Employee analysis failed for %s", employee_id)
            raise

        employee = row_to_dict(report.employee)
        records = [row_to_dict(r) for r in report.financial_records]
        announcements = [row_to_dict(a) for a in report.announcements]

        logger.info(
            "Employee %s: %d transactions, %d announcements, net %s",
            employee_id, statistics.transaction_count,
            len(announcements), statistics.net_investment,
        )

        ai_analysis = await self._narrative.analyze_employee_report(
            employee_id, employee, records, announcements,
        )
        investment_summary = await self._narrative.generate_investment_summary(
            employee_id,
            statistics.transaction_count,
            statistics.total_investment,
            statistics.stock_codes,
        )

        return EmployeeAnalysisResult(
            employee=employee,
            financial_records=records,
            announcements=announcements,
            statistics=statistics,
            ai_analysis=ai_analysis,
            investment_summary=investment_summary,
            request=request,
        )

    async def narrate_report(
        self,
        configuration: ReportConfiguration,
        prompt: str | None = None,
    ) -> list[dict[str, Any]]:
        """Commentary + record-count check for each successful response."""
        narratives = []
        for response in configuration.responses:
            if not response.is_success:
                continue
            table_name = response.data.get("table_name")
            analysis = await self._narrative.analyze_financial_data(response.data, prompt)
            pattern_check = await self._narrative.explain_data_pattern(
                table_name or "this data source",
                response.data.get("record_count", 0),
            )
            narratives.append({
                "report_id": response.report_id,
                "table_name": table_name,
                "analysis": analysis,
                "pattern_check": pattern_check,
            })
        return narratives
