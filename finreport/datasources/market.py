# =============================================================================
# Market Strategy — MARKET_DATA
# =============================================================================
# Filters: region, market-date range. Newest first, capped at 100.
# =============================================================================

from __future__ import annotations

from typing import Any

from finreport.datasources.base import DataSourceStrategy
from finreport.datasources.filters import QueryFilter, date_range, equals
from finreport.db.models import MarketData
from finreport.models.requests import QueryRequest


class MarketDataStrategy(DataSourceStrategy):
    name = "Market"
    table_name = "MARKET_DATA"
    tokens = ("market", "市場資料")
    rows_key = "market_data"
    entity_label = "market data rows"
    model = MarketData
    row_fields = (
        "data_id",
        "symbol",
        "market_date",
        "open_price",
        "close_price",
        "high_price",
        "low_price",
        "volume",
        "change_percent",
        "region",
        "market_type",
    )
    value_attributes = {
        "symbol": "symbol",
        "region": "region",
        "markettype": "market_type",
    }

    def build_filters(self, request: QueryRequest) -> list[QueryFilter]:
        return [
            *equals("region", "REGION", request.region),
            *date_range("market_date", "MARKET_DATE", request.start_date, request.end_date),
        ]

    def simulated_rows(self) -> list[Any]:
        return self._simulated_store.market_data()

    def order_by(self) -> list[Any]:
        return [MarketData.market_date.desc(), MarketData.data_id.desc()]

    def sort_key(self, row: Any) -> tuple:
        return (row.market_date, row.data_id)

    def order_by_sql(self) -> str:
        return "MARKET_DATE DESC, DATA_ID DESC"
