# =============================================================================
# Output Components — Presentation-Neutral Views of a QueryResponse
# =============================================================================
#
# An output component describes HOW a client should present a data-source
# response. The backend does not render HTML; each component builds a small
# view-model dict that a front end can draw directly.
#
# Registered in this order (first match wins, like the data-source registry):
#   SqlQueryComponent : "sql", "查詢"               → query text + table name
#   DataTableComponent : "table", "表格", "資料"      → columns + rows
#   SummaryComponent : "summary", "摘要", "狀態"    → success / count / time
#   ChartComponent : "chart", "圖表"             → placeholder + count
# =============================================================================

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable

from finreport.models.responses import QueryResponse

logger = logging.getLogger(__name__)

# Per-entity rows keys written by the data-source strategies
ROWS_KEYS = (
    "employees",
    "financial_records",
    "announcements",
    "market_data",
    "budget_records",
)

NO_DATA_MESSAGE = "No data to display"


def _sql_view(response: QueryResponse) -> dict[str, Any]:
    return {
        "sql_query": response.data.get("sql_query"),
        "table_name": response.data.get("table_name"),
    }


def _table_view(response: QueryResponse) -> dict[str, Any]:
    for key in ROWS_KEYS:
        if key in response.data:
            rows = response.data[key]
            return {
                "rows_key": key,
                "columns": list(rows[0].keys()) if rows else [],
                "rows": rows,
            }
    return {"rows_key": None, "columns": [], "rows": [], "message": NO_DATA_MESSAGE}


def _summary_view(response: QueryResponse) -> dict[str, Any]:
    return {
        "is_success": response.is_success,
        "record_count": response.data.get("record_count", 0),
        "generated_at": response.generated_at.isoformat(),
        "messages": list(response.messages),
        "summary": response.data.get("summary"),
    }


def _chart_view(response: QueryResponse) -> dict[str, Any]:
    return {
        "placeholder": "Chart rendering is handled by the client",
        "record_count": response.data.get("record_count", 0),
    }


@dataclass(frozen=True)
class OutputComponent:
    """Descriptor for one output component."""

    key: str
    display_name: str
    component_type: str
    tokens: tuple[str, ...]
    _builder: Callable[[QueryResponse], dict[str, Any]]

    def can_handle(self, component_name: str) -> bool:
        lowered = component_name.lower()
        return any(token.lower() in lowered for token in self.tokens)

    def build_view(self, response: QueryResponse) -> dict[str, Any]:
        return self._builder(response)


SqlQueryComponent = OutputComponent(
    key="sql",
    display_name="SQL Query",
    component_type="sql",
    tokens=("sql", "查詢"),
    _builder=_sql_view,
)

DataTableComponent = OutputComponent(
    key="table",
    display_name="Data Table",
    component_type="table",
    tokens=("table", "表格", "資料"),
    _builder=_table_view,
)

SummaryComponent = OutputComponent(
    key="summary",
    display_name="Summary",
    component_type="summary",
    tokens=("summary", "摘要", "狀態"),
    _builder=_summary_view,
)

ChartComponent = OutputComponent(
    key="chart",
    display_name="Chart",
    component_type="chart",
    tokens=("chart", "圖表"),
    _builder=_chart_view,
)


class OutputComponentRegistry:
    """Ordered output-component descriptors with first-match resolution."""

    def __init__(self, components: tuple[OutputComponent, ...] | None = None):
        self._components = list(components or (
            SqlQueryComponent,
            DataTableComponent,
            SummaryComponent,
            ChartComponent,
        ))

    def resolve(self, name: str) -> OutputComponent | None:
        return next((c for c in self._components if c.can_handle(name)), None)

    def list_all(self) -> list[OutputComponent]:
        return list(self._components)
