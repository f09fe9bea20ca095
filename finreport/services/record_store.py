# =============================================================================
# Record Store — Live Read Access + Schema Administration
# =============================================================================
#
# Thin async wrapper around the SQLAlchemy engine. Strategies hand it an ORM
# model plus a list of filters (datasources/filters.py) and get back detached
# ORM rows; they never open sessions themselves.
#
# The service only READS business data. The administration methods at the
# bottom manage the SCHEMA (DDL preview, missing-table detection, create
# missing tables) and are exposed through the /admin/database endpoints.
#
# ARCHITECTURE:
#   RecordStore
#   ├── query() : filtered / ordered / capped SELECT
#   ├── distinct_values() : first-seen distinct values of one column
#   ├── get_employee_report() : employee + transactions (no announcements)
#   ├── check_connection() : SELECT 1
#   ├── generate_create_script()
#   ├── pending_migrations() : ORM tables missing from the database
#   └── apply_migrations() : CREATE the missing tables
# =============================================================================

from __future__ import annotations

import logging
from typing import Any, Sequence

from sqlalchemy import func, inspect, select, text
from sqlalchemy.engine import Dialect
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker
from sqlalchemy.schema import CreateIndex, CreateTable

from finreport.datasources.filters import QueryFilter, where_clauses
from finreport.db.models import Base, Employee, FinancialRecord
from finreport.services.simulation import EmployeeReport

logger = logging.getLogger(__name__)


def compile_create_script(dialect: Dialect) -> str:
    """
    CREATE TABLE / CREATE INDEX statements for every ORM table.

    Compiling needs only a dialect object, not a connection, so the script
    can be produced without a reachable database.
    """
    statements = []
    for table in Base.metadata.sorted_tables:
        statements.append(str(CreateTable(table).compile(dialect=dialect)).strip() + ";")
        for index in sorted(table.indexes, key=lambda i: i.name or ""):
            statements.append(str(CreateIndex(index).compile(dialect=dialect)).strip() + ";")
    return "\n\n".join(statements)


class RecordStore:
    """Read-only access to the live reporting tables."""

    def __init__(
        self,
        engine: AsyncEngine,
        session_factory: async_sessionmaker[AsyncSession] | None = None,
    ):
        self._engine = engine
        self._session_factory = session_factory or async_sessionmaker(
            bind=engine, class_=AsyncSession, expire_on_commit=False,
        )

    @property
    def dialect_name(self) -> str:
        return self._engine.dialect.name

    # -----------------------------------------------------------------------
    # Reads
    # -----------------------------------------------------------------------

    async def query(
        self,
        model: type[Base],
        filters: Sequence[QueryFilter] = (),
        order_by: Sequence[Any] = (),
        limit: int | None = None,
    ) -> list[Any]:
        """
        SELECT rows of `model` matching every filter.

        Args:
            model: ORM class to select.
            filters: Filters rendered via `filter.clause(model)`.
            order_by: SQLAlchemy ordering expressions, applied in order.
            limit: Row cap (None = uncapped).
        """
        stmt = select(model).where(*where_clauses(model, filters))
        if order_by:
            stmt = stmt.order_by(*order_by)
        if limit is not None:
            stmt = stmt.limit(limit)

        async with self._session_factory() as session:
            result = await session.execute(stmt)
            rows = list(result.scalars().all())

        logger.debug("%s query returned %d rows", model.__tablename__, len(rows))
        return rows

    async def distinct_values(self, model: type[Base], attribute: str) -> list[str]:
        """
        Distinct non-empty values of one column, in first-seen order.

        "First seen" is defined by primary-key order so results are stable
        across backends: each value is ordered by the smallest key it
        appears under.
        """
        column = getattr(model, attribute)
        first_seen = func.min(model.__mapper__.primary_key[0])
        stmt = (
            select(column, first_seen)
            .where(column.is_not(None), column != "")
            .group_by(column)
            .order_by(first_seen)
        )

        async with self._session_factory() as session:
            result = await session.execute(stmt)
            return [str(value) for value in result.scalars().all()]

    async def get_employee_report(self, employee_id: str) -> EmployeeReport:
        """
        Employee plus all of their transactions, newest first.

        Live announcements have no employee association, so the report's
        announcement list is always empty here.
        """
        async with self._session_factory() as session:
            employee = await session.get(Employee, employee_id)
            result = await session.execute(
                select(FinancialRecord)
                .where(FinancialRecord.employee_id == employee_id)
                .order_by(
                    FinancialRecord.record_date.desc(),
                    FinancialRecord.record_id.desc(),
                )
            )
            records = list(result.scalars().all())

        return EmployeeReport(
            employee_id=employee_id,
            employee=employee,
            financial_records=records,
            announcements=[],
        )

    # -----------------------------------------------------------------------
    # Schema administration
    # -----------------------------------------------------------------------

    async def check_connection(self) -> bool:
        try:
            async with self._engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except Exception:
            logger.exception("Record Store connection check failed")
            return False

    def generate_create_script(self) -> str:
        """CREATE TABLE / CREATE INDEX DDL compiled for this engine's dialect."""
        return compile_create_script(self._engine.dialect)

    async def pending_migrations(self) -> list[str]:
        """Names of ORM tables that do not exist in the database yet."""
        async with self._engine.connect() as conn:
            existing = await conn.run_sync(
                lambda sync_conn: set(inspect(sync_conn).get_table_names())
            )
        return [t.name for t in Base.metadata.sorted_tables if t.name not in existing]

    async def apply_migrations(self) -> list[str]:
        """Create every missing table (and its indexes). Returns the tables created."""
        pending = await self.pending_migrations()
        if not pending:
            return []

        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

        logger.info("Created %d Record Store tables: %s", len(pending), ", ".join(pending))
        return pending
