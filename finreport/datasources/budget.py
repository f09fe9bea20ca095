# =============================================================================
# Budget Strategy — BUDGET_RECORDS
# =============================================================================
#
# Filters: region, department, status, and a (year, month) period range.
# A budget row has no date column; the request's start/end dates are mapped
# to their (year, month) and compared as a compound key:
#
#   start:  BUDGET_YEAR > Y OR (BUDGET_YEAR = Y AND BUDGET_MONTH >= M)
#   end:    BUDGET_YEAR < Y OR (BUDGET_YEAR = Y AND BUDGET_MONTH <= M)
#
# Latest period first, capped at 100. Shaped rows add budget_period
# ("YYYY-MM") and variance_percent (None when nothing was planned).
# =============================================================================

from __future__ import annotations

from decimal import Decimal
from typing import Any

from finreport.datasources.base import DataSourceStrategy
from finreport.datasources.filters import QueryFilter, equals, period_range
from finreport.db.models import BudgetRecord
from finreport.models.requests import QueryRequest

_PERCENT = Decimal("0.01")


def variance_percent(variance: Decimal, planned_amount: Decimal) -> Decimal | None:
    if not planned_amount:
        return None
    return (variance / planned_amount * 100).quantize(_PERCENT)


class BudgetStrategy(DataSourceStrategy):
    name = "Budget"
    table_name = "BUDGET_RECORDS"
    tokens = ("budget", "預算")
    rows_key = "budget_records"
    entity_label = "budget records"
    model = BudgetRecord
    row_fields = (
        "budget_id",
        "department",
        "budget_year",
        "budget_month",
        "planned_amount",
        "actual_amount",
        "variance",
        "region",
        "category",
        "status",
    )
    value_attributes = {
        "department": "department",
        "region": "region",
        "category": "category",
        "status": "status",
    }

    def build_filters(self, request: QueryRequest) -> list[QueryFilter]:
        return [
            *equals("region", "REGION", request.region),
            *equals("department", "DEPARTMENT", request.department),
            *equals("status", "STATUS", request.status),
            *period_range(request.start_date, request.end_date),
        ]

    def simulated_rows(self) -> list[Any]:
        return self._simulated_store.budget_records()

    def order_by(self) -> list[Any]:
        return [
            BudgetRecord.budget_year.desc(),
            BudgetRecord.budget_month.desc(),
            BudgetRecord.budget_id.desc(),
        ]

    def sort_key(self, row: Any) -> tuple:
        return (row.budget_year, row.budget_month, row.budget_id)

    def order_by_sql(self) -> str:
        return "BUDGET_YEAR DESC, BUDGET_MONTH DESC, BUDGET_ID DESC"

    def shape_row(self, row: Any) -> dict[str, Any]:
        shaped = super().shape_row(row)
        shaped["budget_period"] = f"{row.budget_year}-{row.budget_month:02d}"
        shaped["variance_percent"] = variance_percent(row.variance, row.planned_amount)
        return shaped
