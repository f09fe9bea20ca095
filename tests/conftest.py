# =============================================================================
# Shared Test Fixtures
# =============================================================================
#
# Live-mode tests run against a file-backed SQLite database through the
# aiosqlite driver, so the real RecordStore / SQLAlchemy code paths are
# exercised without a PostgreSQL server.
#
# NullPool: every checkout opens a fresh connection, so the same engine can
# be used from several asyncio.run() calls (one per `_run` in a test).
# =============================================================================

from __future__ import annotations

import asyncio
from dataclasses import asdict
from datetime import date

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from finreport.db.models import (
    Base,
    BudgetRecord,
    CompanyAnnouncement,
    Employee,
    FinancialRecord,
    MarketData,
)
from finreport.services.record_store import RecordStore
from finreport.services.simulation import SimulatedRecordStore

_FINANCIAL_RECORD_COLUMNS = (
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


def live_rows() -> list[Base]:
    """ORM rows mirroring the simulated seed data (plus live announcements)."""
    simulated = SimulatedRecordStore()
    rows: list[Base] = []
    rows += [Employee(**asdict(e)) for e in simulated.employees()]
    rows += [
        FinancialRecord(**{c: getattr(r, c) for c in _FINANCIAL_RECORD_COLUMNS})
        for r in simulated.financial_records()
    ]
    rows += [MarketData(**asdict(m)) for m in simulated.market_data()]
    rows += [BudgetRecord(**asdict(b)) for b in simulated.budget_records()]
    rows += [
        CompanyAnnouncement(
            announcement_id=1,
            title="Quarterly results published",
            content="Q1 results are available to all staff. " * 5,
            announcement_date=date(2024, 4, 30),
            announcement_type="earnings",
            region="Taipei",
            importance_level="high",
            status="published",
            created_by="Investor Relations",
        ),
        CompanyAnnouncement(
            announcement_id=2,
            title="Office relocation",
            content="The Hsinchu office moves to the science park in May.",
            announcement_date=date(2024, 3, 15),
            announcement_type="administrative",
            region="Hsinchu",
            importance_level="medium",
            status="published",
            created_by="Facilities",
        ),
        CompanyAnnouncement(
            announcement_id=3,
            title="Trading window closes",
            content="The insider trading window closes on June 15.",
            announcement_date=date(2024, 6, 1),
            announcement_type="compliance",
            region="Taipei",
            importance_level="high",
            status="draft",
            created_by="Compliance",
        ),
    ]
    return rows


def _engine_for(tmp_path):
    return create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'finreport.db'}",
        poolclass=NullPool,
    )


@pytest.fixture
def live_store(tmp_path):
    """RecordStore over a seeded SQLite database."""
    engine = _engine_for(tmp_path)

    async def seed():
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        factory = async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)
        async with factory() as session:
            session.add_all(live_rows())
            await session.commit()

    asyncio.run(seed())
    yield RecordStore(engine)
    asyncio.run(engine.dispose())


@pytest.fixture
def empty_store(tmp_path):
    """RecordStore over a database with no tables yet."""
    engine = _engine_for(tmp_path)
    yield RecordStore(engine)
    asyncio.run(engine.dispose())


@pytest.fixture
def simulated_store():
    return SimulatedRecordStore()
