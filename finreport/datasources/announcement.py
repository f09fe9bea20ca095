# =============================================================================
# Announcement Strategy — COMPANY_ANNOUNCEMENTS
# =============================================================================
#
# The two source modes read DIFFERENT announcement shapes:
#
#   simulation (SimulatedAnnouncement)     live (CompanyAnnouncement ORM)
#   ├ published_date                       ├ announcement_date
#   ├ publisher, priority                  ├ region, importance_level
#   ├ stock_code, company_name             └ created_by
#   └ employee_id (relevance association)
#
# So the filter set depends on the mode:
#   simulation: employee_id, announcement_type, priority, status, date range
#   live:       announcement_type, region, priority (→ IMPORTANCE_LEVEL),
#               status, date range
#
# Newest first (ties by id, descending), capped at 50. Content longer than
# 100 characters is truncated with "..." in the shaped rows only.
# =============================================================================

from __future__ import annotations

from typing import Any

from finreport.datasources.base import DataSourceStrategy
from finreport.datasources.filters import QueryFilter, date_range, equals
from finreport.db.models import CompanyAnnouncement
from finreport.models.requests import QueryRequest

CONTENT_PREVIEW_LENGTH = 100

_SIMULATED_FIELDS = (
    "announcement_id",
    "title",
    "content",
    "announcement_type",
    "published_date",
    "publisher",
    "priority",
    "status",
    "stock_code",
    "company_name",
    "employee_id",
)

_LIVE_FIELDS = (
    "announcement_id",
    "title",
    "content",
    "announcement_date",
    "announcement_type",
    "region",
    "importance_level",
    "status",
    "created_by",
)


def preview(content: str, length: int = CONTENT_PREVIEW_LENGTH) -> str:
    if len(content) > length:
        return content[:length] + "..."
    return content


class AnnouncementStrategy(DataSourceStrategy):
    name = "Announcement"
    table_name = "COMPANY_ANNOUNCEMENTS"
    tokens = ("announcement", "公司重訊", "重訊", "公司公告", "公告")
    rows_key = "announcements"
    entity_label = "announcements"
    model = CompanyAnnouncement
    limit = 50

    @property
    def row_fields(self) -> tuple[str, ...]:
        return _SIMULATED_FIELDS if self.simulation_mode else _LIVE_FIELDS

    @property
    def _date_attribute(self) -> str:
        return "published_date" if self.simulation_mode else "announcement_date"

    def build_filters(self, request: QueryRequest) -> list[QueryFilter]:
        if self.simulation_mode:
            return [
                *equals("employee_id", "EMPLOYEE_ID", request.employee_id),
                *equals("announcement_type", "ANNOUNCEMENT_TYPE", request.announcement_type),
                *equals("priority", "PRIORITY", request.priority),
                *equals("status", "STATUS", request.status),
                *date_range("published_date", "PUBLISHED_DATE", request.start_date, request.end_date),
            ]
        return [
            *equals("announcement_type", "ANNOUNCEMENT_TYPE", request.announcement_type),
            *equals("region", "REGION", request.region),
            *equals("importance_level", "IMPORTANCE_LEVEL", request.priority),
            *equals("status", "STATUS", request.status),
            *date_range("announcement_date", "ANNOUNCEMENT_DATE", request.start_date, request.end_date),
        ]

    def simulated_rows(self) -> list[Any]:
        return self._simulated_store.announcements()

    def order_by(self) -> list[Any]:
        return [
            CompanyAnnouncement.announcement_date.desc(),
            CompanyAnnouncement.announcement_id.desc(),
        ]

    def sort_key(self, row: Any) -> tuple:
        return (getattr(row, self._date_attribute), row.announcement_id)

    def order_by_sql(self) -> str:
        return f"{self._date_attribute.upper()} DESC, ANNOUNCEMENT_ID DESC"

    def shape_row(self, row: Any) -> dict[str, Any]:
        shaped = super().shape_row(row)
        shaped["content"] = preview(shaped["content"] or "")
        return shaped

    def value_fields(self) -> dict[str, str]:
        if self.simulation_mode:
            return {
                "announcementtype": "announcement_type",
                "priority": "priority",
                "status": "status",
            }
        return {
            "announcementtype": "announcement_type",
            "region": "region",
            "priority": "importance_level",
            "status": "status",
        }
