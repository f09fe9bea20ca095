# =============================================================================
# Employee Strategy — EMPLOYEES
# =============================================================================
# Filters: employee_id, region, department, hire-date range.
# Unordered (seed order in simulation mode), capped at 100.
# =============================================================================

from __future__ import annotations

from typing import Any

from finreport.datasources.base import DataSourceStrategy
from finreport.datasources.filters import QueryFilter, date_range, equals
from finreport.db.models import Employee
from finreport.models.requests import QueryRequest


class EmployeeStrategy(DataSourceStrategy):
    name = "Employee"
    table_name = "EMPLOYEES"
    tokens = ("employee", "員工")
    rows_key = "employees"
    entity_label = "employee records"
    model = Employee
    row_fields = (
        "employee_id",
        "employee_name",
        "department",
        "region",
        "position",
        "hire_date",
        "salary",
    )

    def build_filters(self, request: QueryRequest) -> list[QueryFilter]:
        return [
            *equals("employee_id", "EMPLOYEE_ID", request.employee_id),
            *equals("region", "REGION", request.region),
            *equals("department", "DEPARTMENT", request.department),
            *date_range("hire_date", "HIRE_DATE", request.start_date, request.end_date),
        ]

    def simulated_rows(self) -> list[Any]:
        return self._simulated_store.employees()

    def value_fields(self) -> dict[str, str]:
        # The simulated dataset does not expose region as a selector
        if self.simulation_mode:
            return {"department": "department", "position": "position"}
        return {"department": "department", "region": "region", "position": "position"}
