# =============================================================================
# Data-Source Strategy — Abstract Base
# =============================================================================
#
# One strategy per reporting entity. A strategy answers three questions:
#   1. can_handle(name) : does a requested data-source name mean me?
#   2. fetch_data(request) : filtered, ordered, capped rows + metadata
#   3. get_available_values(field) : distinct values for filter selectors
#
# DESIGN DECISION: Template method over per-mode subclasses.
# The fetch pipeline (build filters → read rows → shape → summarise → wrap)
# is identical for every entity and both source modes. Subclasses only
# declare WHAT differs: table name, tokens, filters, ordering, row shape.
# Source mode is a constructor argument, never a global lookup, so the same
# class is exercised in tests against both the simulated and the live store.
#
# FAILURE POLICY:
# fetch_data() never raises. Any exception becomes
# QueryResponse(is_success=False, data={}, messages=[<error>]) and is logged
# with logger.exception. get_available_values() logs and returns [].
# =============================================================================

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from datetime import date
from typing import TYPE_CHECKING, Any, ClassVar, Sequence

from finreport.datasources.filters import QueryFilter, apply_filters, render_sql
from finreport.models.requests import QueryRequest
from finreport.models.responses import QueryResponse

if TYPE_CHECKING:
    from finreport.services.record_store import RecordStore
    from finreport.services.simulation import SimulatedRecordStore

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 100


def serialize_value(value: Any) -> Any:
    """Dates become ISO strings; Decimals and everything else pass through."""
    if isinstance(value, date):
        return value.isoformat()
    return value


def normalize_field_name(field_name: str) -> str:
    """`Transaction_Type` → `transactiontype`."""
    return field_name.replace("_", "").lower()


class DataSourceStrategy(ABC):
    """
    Base class for the per-entity retrieval strategies.

    Subclasses set the class attributes below and implement build_filters(),
    simulated_rows() and (usually) the ordering hooks.
    """

    name: ClassVar[str]
    table_name: ClassVar[str]
    tokens: ClassVar[tuple[str, ...]]
    rows_key: ClassVar[str]
    entity_label: ClassVar[str]
    model: ClassVar[type]
    row_fields: ClassVar[tuple[str, ...]] = ()
    value_attributes: ClassVar[dict[str, str]] = {}
    limit: ClassVar[int] = DEFAULT_LIMIT

    def __init__(
        self,
        record_store: RecordStore | None,
        simulated_store: SimulatedRecordStore,
        simulation_mode: bool,
    ):
        self._record_store = record_store
        self._simulated_store = simulated_store
        self.simulation_mode = simulation_mode

    @property
    def source_mode(self) -> str:
        return "simulation" if self.simulation_mode else "live"

    def can_handle(self, data_source_name: str) -> bool:
        """Case-insensitive substring match against this strategy's tokens."""
        lowered = data_source_name.lower()
        return any(token.lower() in lowered for token in self.tokens)

    # -----------------------------------------------------------------------
    # Hooks
    # -----------------------------------------------------------------------

    @abstractmethod
    def build_filters(self, request: QueryRequest) -> list[QueryFilter]:
        """Filters for the non-empty request fields this entity supports."""

    @abstractmethod
    def simulated_rows(self) -> list[Any]:
        """The full simulated dataset for this entity."""

    def order_by(self) -> list[Any]:
        """Live-mode ORDER BY expressions. Empty = unordered."""
        return []

    def sort_key(self, row: Any) -> tuple | None:
        """Simulation-mode descending sort key. None = keep seed order."""
        return None

    def order_by_sql(self) -> str | None:
        return None

    def shape_row(self, row: Any) -> dict[str, Any]:
        return {f: serialize_value(getattr(row, f)) for f in self.row_fields}

    def summarize(self, rows: Sequence[Any], request: QueryRequest) -> dict[str, Any] | None:
        return None

    def value_fields(self) -> dict[str, str]:
        """Normalised field name → row attribute, for get_available_values()."""
        return self.value_attributes

    # -----------------------------------------------------------------------
    # Pipeline
    # -----------------------------------------------------------------------

    async def _read_rows(self, filters: list[QueryFilter]) -> list[Any]:
        if self.simulation_mode:
            rows = apply_filters(self.simulated_rows(), filters)
            if rows and self.sort_key(rows[0]) is not None:
                rows.sort(key=self.sort_key, reverse=True)
            return rows[: self.limit]

        if self._record_store is None:
            raise RuntimeError(f"No Record Store configured for {self.table_name}")
        return await self._record_store.query(
            self.model, filters, order_by=self.order_by(), limit=self.limit,
        )

    def _sql_query(self, filters: list[QueryFilter], row_count: int) -> str:
        sql = render_sql(self.table_name, filters, self.order_by_sql(), self.limit)
        if self.simulation_mode:
            return (
                f"-- simulated query (not executed)\n{sql}\n"
                f"-- {row_count} rows from the simulated {self.table_name} dataset"
            )
        return sql

    async def fetch_data(self, request: QueryRequest) -> QueryResponse:
        """
        Fetch, shape and wrap the rows matching `request`.

        Returns:
            QueryResponse with data keys table_name, <rows_key>, record_count,
            sql_query, source_mode and (where applicable) summary.
        """
        try:
            filters = self.build_filters(request)
            rows = await self._read_rows(filters)

            data: dict[str, Any] = {
                "table_name": self.table_name,
                self.rows_key: [self.shape_row(row) for row in rows],
                "record_count": len(rows),
                "sql_query": self._sql_query(filters, len(rows)),
                "source_mode": self.source_mode,
            }
            summary = self.summarize(rows, request)
            if summary is not None:
                data["summary"] = summary

            logger.info(
                "%s: %d %s (%s mode, %d filters)",
                self.table_name, len(rows), self.entity_label,
                self.source_mode, len(filters),
            )
            prefix = "Simulation mode: retrieved" if self.simulation_mode else "Retrieved"
            return QueryResponse(
                data=data,
                messages=[f"{prefix} {len(rows)} {self.entity_label} from {self.table_name}"],
                is_success=True,
            )
        except Exception as exc:
            logger.exception("Failed to query %s", self.table_name)
            return QueryResponse(
                data={},
                messages=[f"Error querying {self.table_name}: {exc}"],
                is_success=False,
            )

    async def get_available_values(self, field_name: str) -> list[str]:
        """
        Distinct non-empty values of a filterable field, first-seen order.

        Unknown field names return []. Store failures are logged and
        return [].
        """
        attribute = self.value_fields().get(normalize_field_name(field_name))
        if attribute is None:
            return []

        try:
            if self.simulation_mode:
                values: list[str] = []
                for row in self.simulated_rows():
                    value = getattr(row, attribute)
                    if value in (None, ""):
                        continue
                    value = str(value)
                    if value not in values:
                        values.append(value)
                return values

            if self._record_store is None:
                raise RuntimeError(f"No Record Store configured for {self.table_name}")
            return await self._record_store.distinct_values(self.model, attribute)
        except Exception:
            logger.exception(
                "Failed to load available values for %s.%s", self.table_name, field_name,
            )
            return []
