# =============================================================================
# Unit Tests — Query Filters
# =============================================================================
#
# One filter list drives three renderings (SQLAlchemy clause, Python
# predicate, illustrative SQL). These tests pin the predicate and SQL
# renderings; the clause rendering is covered by the live-mode strategy
# tests against SQLite.
# =============================================================================

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from sqlalchemy.dialects import sqlite

from finreport.datasources.filters import (
    Filter,
    PeriodFilter,
    apply_filters,
    date_range,
    equals,
    period_range,
    render_sql,
    where_clauses,
)
from finreport.db.models import BudgetRecord


@dataclass
class _Row:
    region: str
    record_date: date
    budget_year: int = 2024
    budget_month: int = 1


class TestBuilders:
    def test_equals_skips_empty_values(self):
        assert equals("region", "REGION", None) == []
        assert equals("region", "REGION", "") == []

    def test_equals_builds_one_filter(self):
        assert equals("region", "REGION", "Taipei") == [Filter("region", "REGION", "Taipei")]

    def test_date_range_open_ended(self):
        start_only = date_range("record_date", "RECORD_DATE", date(2024, 1, 1), None)
        assert [f.op for f in start_only] == [">="]
        assert date_range("record_date", "RECORD_DATE", None, None) == []

    def test_period_range_uses_year_and_month(self):
        filters = period_range(date(2024, 3, 1), date(2024, 3, 31))
        assert filters == [PeriodFilter(2024, 3, ">="), PeriodFilter(2024, 3, "<=")]


class TestPredicates:
    def test_equality_and_bounds(self):
        rows = [
            _Row("Taipei", date(2024, 1, 10)),
            _Row("Taipei", date(2024, 2, 10)),
            _Row("Hsinchu", date(2024, 1, 20)),
        ]
        filters = [
            *equals("region", "REGION", "Taipei"),
            *date_range("record_date", "RECORD_DATE", date(2024, 1, 1), date(2024, 1, 31)),
        ]
        assert apply_filters(rows, filters) == [rows[0]]

    def test_date_bounds_are_inclusive(self):
        row = _Row("Taipei", date(2024, 1, 31))
        filters = date_range("record_date", "RECORD_DATE", date(2024, 1, 31), date(2024, 1, 31))
        assert apply_filters([row], filters) == [row]

    def test_period_lower_bound(self):
        bound = PeriodFilter(2024, 3, ">=")
        assert bound.matches(_Row("x", date.today(), 2025, 1))
        assert bound.matches(_Row("x", date.today(), 2024, 3))
        assert not bound.matches(_Row("x", date.today(), 2024, 2))
        assert not bound.matches(_Row("x", date.today(), 2023, 12))

    def test_period_upper_bound(self):
        bound = PeriodFilter(2024, 3, "<=")
        assert bound.matches(_Row("x", date.today(), 2023, 12))
        assert bound.matches(_Row("x", date.today(), 2024, 3))
        assert not bound.matches(_Row("x", date.today(), 2024, 4))
        assert not bound.matches(_Row("x", date.today(), 2025, 1))

    def test_no_filters_keeps_everything(self):
        rows = [_Row("a", date.today()), _Row("b", date.today())]
        assert apply_filters(rows, []) == rows


class TestRenderSql:
    def test_string_and_date_literals(self):
        sql = render_sql(
            "FINANCIAL_RECORDS",
            [
                Filter("employee_id", "EMPLOYEE_ID", "E001"),
                Filter("record_date", "RECORD_DATE", date(2024, 3, 1), ">="),
            ],
            order_by="RECORD_DATE DESC",
            limit=100,
        )
        assert sql == (
            "SELECT * FROM FINANCIAL_RECORDS WHERE 1=1"
            " AND EMPLOYEE_ID = 'E001'"
            " AND RECORD_DATE >= TO_DATE('2024-03-01', 'YYYY-MM-DD')"
            " ORDER BY RECORD_DATE DESC FETCH FIRST 100 ROWS ONLY"
        )

    def test_quotes_are_escaped(self):
        sql = render_sql("EMPLOYEES", [Filter("region", "REGION", "O'Hare")])
        assert "REGION = 'O''Hare'" in sql

    def test_period_fragment(self):
        assert PeriodFilter(2024, 3, ">=").sql() == (
            "(BUDGET_YEAR > 2024 OR (BUDGET_YEAR = 2024 AND BUDGET_MONTH >= 3))"
        )
        assert PeriodFilter(2024, 3, "<=").sql() == (
            "(BUDGET_YEAR < 2024 OR (BUDGET_YEAR = 2024 AND BUDGET_MONTH <= 3))"
        )

    def test_no_filters(self):
        assert render_sql("MARKET_DATA", []) == "SELECT * FROM MARKET_DATA WHERE 1=1"


class TestClauses:
    def test_period_clause_compiles(self):
        clauses = where_clauses(BudgetRecord, [PeriodFilter(2024, 3, ">=")])
        compiled = str(clauses[0].compile(dialect=sqlite.dialect()))
        assert "BUDGET_YEAR" in compiled
        assert "BUDGET_MONTH" in compiled
        assert " OR " in compiled
