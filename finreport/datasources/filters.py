# =============================================================================
# Query Filters — One Filter List, Three Renderings
# =============================================================================
#
# Every data-source strategy turns the non-empty fields of a QueryRequest into
# a list of filters. The SAME list then drives:
#   - live mode:       filter.clause(Model)  → SQLAlchemy WHERE clause
#   - simulation mode: filter.matches(row)   → Python predicate
#   - both modes:      filter.sql()          → illustrative SQL fragment
#
# Keeping the three renderings on one object means simulation and live mode
# cannot drift apart: a filter added to a strategy applies to both paths.
#
# The illustrative SQL is display-only and is never executed. Values are
# rendered as literals (strings quoted, dates via TO_DATE) so the text reads
# like what an analyst would type into a SQL console.
# =============================================================================

from __future__ import annotations

import operator
from dataclasses import dataclass
from datetime import date
from typing import Any, Callable, Iterable, Sequence

from sqlalchemy import and_, or_

_OPERATORS: dict[str, Callable[[Any, Any], Any]] = {
    "=": operator.eq,
    ">=": operator.ge,
    "<=": operator.le,
}

# Strict counterpart used by the compound (year, month) comparison
_STRICT: dict[str, Callable[[Any, Any], Any]] = {
    ">=": operator.gt,
    "<=": operator.lt,
}


def _literal(value: Any) -> str:
    if isinstance(value, date):
        return f"TO_DATE('{value:%Y-%m-%d}', 'YYYY-MM-DD')"
    if isinstance(value, (int, float)):
        return str(value)
    escaped = str(value).replace("'", "''")
    return f"'{escaped}'"


@dataclass(frozen=True)
class Filter:
    """
    A single `attribute <op> value` comparison.

    `attribute` is the Python attribute name shared by the ORM model and the
    simulated row dataclass; `column` is the upper-case table column used in
    the illustrative SQL.
    """

    attribute: str
    column: str
    value: Any
    op: str = "="

    def clause(self, model: type) -> Any:
        return _OPERATORS[self.op](getattr(model, self.attribute), self.value)

    def matches(self, row: Any) -> bool:
        return bool(_OPERATORS[self.op](getattr(row, self.attribute), self.value))

    def sql(self) -> str:
        return f"{self.column} {self.op} {_literal(self.value)}"


@dataclass(frozen=True)
class PeriodFilter:
    """
    Bound on a (year, month) period split across two integer columns.

    For a lower bound (op ">=") the condition is
        year > Y OR (year == Y AND month >= M)
    and the upper bound (op "<=") mirrors it.
    """

    year: int
    month: int
    op: str
    year_attribute: str = "budget_year"
    month_attribute: str = "budget_month"
    year_column: str = "BUDGET_YEAR"
    month_column: str = "BUDGET_MONTH"

    def clause(self, model: type) -> Any:
        year_col = getattr(model, self.year_attribute)
        month_col = getattr(model, self.month_attribute)
        return or_(
            _STRICT[self.op](year_col, self.year),
            and_(year_col == self.year, _OPERATORS[self.op](month_col, self.month)),
        )

    def matches(self, row: Any) -> bool:
        row_year = getattr(row, self.year_attribute)
        row_month = getattr(row, self.month_attribute)
        if _STRICT[self.op](row_year, self.year):
            return True
        return row_year == self.year and bool(
            _OPERATORS[self.op](row_month, self.month)
        )

    def sql(self) -> str:
        strict = ">" if self.op == ">=" else "<"
        return (
            f"({self.year_column} {strict} {self.year} OR "
            f"({self.year_column} = {self.year} AND "
            f"{self.month_column} {self.op} {self.month}))"
        )


QueryFilter = Filter | PeriodFilter


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------


def equals(attribute: str, column: str, value: Any) -> list[Filter]:
    """Equality filter, or nothing when the request field is empty."""
    if value is None or value == "":
        return []
    return [Filter(attribute, column, value)]


def date_range(
    attribute: str,
    column: str,
    start: date | None,
    end: date | None,
) -> list[Filter]:
    """Inclusive date bounds; either side may be open."""
    filters = []
    if start is not None:
        filters.append(Filter(attribute, column, start, ">="))
    if end is not None:
        filters.append(Filter(attribute, column, end, "<="))
    return filters


def period_range(start: date | None, end: date | None) -> list[PeriodFilter]:
    """Inclusive (year, month) bounds derived from calendar dates."""
    filters = []
    if start is not None:
        filters.append(PeriodFilter(start.year, start.month, ">="))
    if end is not None:
        filters.append(PeriodFilter(end.year, end.month, "<="))
    return filters


# ---------------------------------------------------------------------------
# Application
# ---------------------------------------------------------------------------


def apply_filters(rows: Iterable[Any], filters: Sequence[QueryFilter]) -> list[Any]:
    """Keep the rows that satisfy every filter (simulation mode)."""
    return [row for row in rows if all(f.matches(row) for f in filters)]


def where_clauses(model: type, filters: Sequence[QueryFilter]) -> list[Any]:
    """SQLAlchemy clauses for `select(model).where(*clauses)` (live mode)."""
    return [f.clause(model) for f in filters]


def render_sql(
    table_name: str,
    filters: Sequence[QueryFilter],
    order_by: str | None = None,
    limit: int | None = None,
) -> str:
    """
    Illustrative SQL for a strategy fetch.

    Example:
        SELECT * FROM FINANCIAL_RECORDS WHERE 1=1 AND EMPLOYEE_ID = 'E001'
        ORDER BY RECORD_DATE DESC FETCH FIRST 100 ROWS ONLY
    """
    sql = f"SELECT * FROM {table_name} WHERE 1=1"
    for f in filters:
        sql += f" AND {f.sql()}"
    if order_by:
        sql += f" ORDER BY {order_by}"
    if limit is not None:
        sql += f" FETCH FIRST {limit} ROWS ONLY"
    return sql
