# =============================================================================
# Financial Record Strategy — FINANCIAL_RECORDS
# =============================================================================
# Filters: employee_id, region, transaction_type, status, record-date range.
# Newest first (ties by record id, descending), capped at 100.
#
# Simulated rows additionally carry stock_code, company_name, quantity and
# price_per_share; live rows do not have those columns.
# =============================================================================

from __future__ import annotations

from decimal import Decimal
from typing import Any, Sequence

from finreport.datasources.base import DataSourceStrategy, serialize_value
from finreport.datasources.filters import QueryFilter, date_range, equals
from finreport.db.models import FinancialRecord
from finreport.models.requests import QueryRequest

_SIMULATED_EXTRA_FIELDS = ("stock_code", "company_name", "quantity", "price_per_share")


class FinancialRecordStrategy(DataSourceStrategy):
    name = "FinancialRecord"
    table_name = "FINANCIAL_RECORDS"
    tokens = ("financial", "財務記錄")
    rows_key = "financial_records"
    entity_label = "financial records"
    model = FinancialRecord
    row_fields = (
        "record_id",
        "employee_id",
        "record_date",
        "amount",
        "transaction_type",
        "description",
        "region",
        "category",
        "status",
    )
    value_attributes = {
        "transactiontype": "transaction_type",
        "region": "region",
        "category": "category",
        "status": "status",
    }

    def build_filters(self, request: QueryRequest) -> list[QueryFilter]:
        return [
            *equals("employee_id", "EMPLOYEE_ID", request.employee_id),
            *equals("region", "REGION", request.region),
            *equals("transaction_type", "TRANSACTION_TYPE", request.transaction_type),
            *equals("status", "STATUS", request.status),
            *date_range("record_date", "RECORD_DATE", request.start_date, request.end_date),
        ]

    def simulated_rows(self) -> list[Any]:
        return self._simulated_store.financial_records()

    def order_by(self) -> list[Any]:
        return [FinancialRecord.record_date.desc(), FinancialRecord.record_id.desc()]

    def sort_key(self, row: Any) -> tuple:
        return (row.record_date, row.record_id)

    def order_by_sql(self) -> str:
        return "RECORD_DATE DESC, RECORD_ID DESC"

    def shape_row(self, row: Any) -> dict[str, Any]:
        shaped = super().shape_row(row)
        if self.simulation_mode:
            for field in _SIMULATED_EXTRA_FIELDS:
                shaped[field] = serialize_value(getattr(row, field))
        return shaped

    def summarize(self, rows: Sequence[Any], request: QueryRequest) -> dict[str, Any]:
        total = sum((row.amount for row in rows), Decimal("0"))
        average = total / len(rows) if rows else Decimal("0")
        start = request.start_date.isoformat() if request.start_date else ""
        end = request.end_date.isoformat() if request.end_date else ""
        return {
            "total_amount": total,
            "average_amount": average,
            "record_count": len(rows),
            "date_range": f"{start} ~ {end}",
        }
