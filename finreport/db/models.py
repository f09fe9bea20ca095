# =============================================================================
# Database Models — SQLAlchemy ORM (live Record Store schema)
# =============================================================================
#
# These models map the five reporting tables of the live Record Store.
# The service only READS them; rows are created and updated by upstream
# systems. Table and column names follow the upstream (upper-case) naming.
#
# SCHEMA OVERVIEW:
#
#   EMPLOYEES              FINANCIAL_RECORDS          COMPANY_ANNOUNCEMENTS
#   ├ EMPLOYEE_ID (PK)     ├ RECORD_ID (PK)           ├ ANNOUNCEMENT_ID (PK)
#   ├ DEPARTMENT           ├ EMPLOYEE_ID (not a FK)   ├ ANNOUNCEMENT_DATE
#   ├ REGION               ├ RECORD_DATE              ├ ANNOUNCEMENT_TYPE
#   └ HIRE_DATE, SALARY    └ AMOUNT, TRANSACTION_TYPE └ REGION, IMPORTANCE_LEVEL
#
#   MARKET_DATA                          BUDGET_RECORDS
#   ├ DATA_ID (PK)                       ├ BUDGET_ID (PK)
#   ├ SYMBOL, MARKET_DATE                ├ BUDGET_YEAR, BUDGET_MONTH
#   └ OHLC (18,4), CHANGE_PERCENT (8,4)  └ PLANNED / ACTUAL / VARIANCE (18,2)
#
# FINANCIAL_RECORDS.EMPLOYEE_ID references EMPLOYEES by convention only; the
# upstream schema does not enforce the relationship, so neither do we.
#
# Live announcements carry REGION / IMPORTANCE_LEVEL and have no employee
# association. The simulated announcement shape (services/simulation.py) is
# different and is kept as a separate type.
# =============================================================================

from datetime import date, datetime
from decimal import Decimal
from typing import Any

from sqlalchemy import (
    BigInteger,
    Date,
    DateTime,
    Index,
    Integer,
    Numeric,
    String,
    func,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """SQLAlchemy declarative base class for the reporting tables."""

    def to_dict(self) -> dict[str, Any]:
        """Plain attribute dict of the mapped columns (used for prompts)."""
        return {
            column.key: getattr(self, column.key)
            for column in self.__mapper__.column_attrs
        }


class Employee(Base):
    """An employee master record."""

    __tablename__ = "EMPLOYEES"

    employee_id: Mapped[str] = mapped_column("EMPLOYEE_ID", String(50), primary_key=True)
    employee_name: Mapped[str] = mapped_column("EMPLOYEE_NAME", String(200), nullable=False)
    department: Mapped[str] = mapped_column("DEPARTMENT", String(100), nullable=False)
    region: Mapped[str] = mapped_column("REGION", String(100), nullable=False)
    position: Mapped[str] = mapped_column("POSITION", String(100), nullable=False)
    hire_date: Mapped[date] = mapped_column("HIRE_DATE", Date, nullable=False)
    salary: Mapped[Decimal] = mapped_column("SALARY", Numeric(18, 2), nullable=False)

    created_date: Mapped[datetime] = mapped_column(
        "CREATED_DATE", DateTime(timezone=True), server_default=func.now(), nullable=False,
    )
    updated_date: Mapped[datetime] = mapped_column(
        "UPDATED_DATE", DateTime(timezone=True), server_default=func.now(), nullable=False,
    )

    __table_args__ = (
        Index("IX_EMPLOYEES_REGION", "REGION"),
        Index("IX_EMPLOYEES_DEPARTMENT", "DEPARTMENT"),
    )

    def __repr__(self) -> str:
        return f"<Employee(id='{self.employee_id}', department='{self.department}')>"


class FinancialRecord(Base):
    """A single buy/sell transaction booked against an employee."""

    __tablename__ = "FINANCIAL_RECORDS"

    record_id: Mapped[int] = mapped_column("RECORD_ID", Integer, primary_key=True)
    employee_id: Mapped[str] = mapped_column("EMPLOYEE_ID", String(50), nullable=False)
    record_date: Mapped[date] = mapped_column("RECORD_DATE", Date, nullable=False)
    amount: Mapped[Decimal] = mapped_column("AMOUNT", Numeric(18, 2), nullable=False)

    # "buy" / "sell" in practice
    transaction_type: Mapped[str] = mapped_column("TRANSACTION_TYPE", String(50), nullable=False)
    description: Mapped[str] = mapped_column("DESCRIPTION", String(500), nullable=False, default="")
    region: Mapped[str] = mapped_column("REGION", String(100), nullable=False)
    category: Mapped[str] = mapped_column("CATEGORY", String(100), nullable=False, default="")
    status: Mapped[str] = mapped_column("STATUS", String(50), nullable=False, default="")

    created_date: Mapped[datetime] = mapped_column(
        "CREATED_DATE", DateTime(timezone=True), server_default=func.now(), nullable=False,
    )
    updated_date: Mapped[datetime] = mapped_column(
        "UPDATED_DATE", DateTime(timezone=True), server_default=func.now(), nullable=False,
    )

    __table_args__ = (
        Index("IX_FINANCIAL_RECORDS_EMPLOYEE_ID", "EMPLOYEE_ID"),
        Index("IX_FINANCIAL_RECORDS_RECORD_DATE", "RECORD_DATE"),
        Index("IX_FINANCIAL_RECORDS_REGION", "REGION"),
        Index("IX_FINANCIAL_RECORDS_EMPLOYEE_DATE", "EMPLOYEE_ID", "RECORD_DATE"),
    )

    def __repr__(self) -> str:
        return (
            f"<FinancialRecord(id={self.record_id}, employee='{self.employee_id}', "
            f"type='{self.transaction_type}', amount={self.amount})>"
        )


class CompanyAnnouncement(Base):
    """A company announcement as stored in the live Record Store."""

    __tablename__ = "COMPANY_ANNOUNCEMENTS"

    announcement_id: Mapped[int] = mapped_column("ANNOUNCEMENT_ID", Integer, primary_key=True)
    title: Mapped[str] = mapped_column("TITLE", String(500), nullable=False)
    content: Mapped[str] = mapped_column("CONTENT", String(4000), nullable=False)
    announcement_date: Mapped[date] = mapped_column("ANNOUNCEMENT_DATE", Date, nullable=False)
    announcement_type: Mapped[str] = mapped_column("ANNOUNCEMENT_TYPE", String(100), nullable=False)
    region: Mapped[str] = mapped_column("REGION", String(100), nullable=False, default="")
    importance_level: Mapped[str] = mapped_column("IMPORTANCE_LEVEL", String(50), nullable=False, default="")
    status: Mapped[str] = mapped_column("STATUS", String(50), nullable=False, default="")
    created_by: Mapped[str] = mapped_column("CREATED_BY", String(200), nullable=False, default="")

    created_date: Mapped[datetime] = mapped_column(
        "CREATED_DATE", DateTime(timezone=True), server_default=func.now(), nullable=False,
    )
    updated_date: Mapped[datetime] = mapped_column(
        "UPDATED_DATE", DateTime(timezone=True), server_default=func.now(), nullable=False,
    )

    __table_args__ = (
        Index("IX_COMPANY_ANNOUNCEMENTS_DATE", "ANNOUNCEMENT_DATE"),
        Index("IX_COMPANY_ANNOUNCEMENTS_REGION", "REGION"),
        Index("IX_COMPANY_ANNOUNCEMENTS_TYPE", "ANNOUNCEMENT_TYPE"),
    )

    def __repr__(self) -> str:
        return f"<CompanyAnnouncement(id={self.announcement_id}, title='{self.title[:30]}')>"


class MarketData(Base):
    """Daily OHLC quote for a listed symbol."""

    __tablename__ = "MARKET_DATA"

    data_id: Mapped[int] = mapped_column("DATA_ID", Integer, primary_key=True)
    symbol: Mapped[str] = mapped_column("SYMBOL", String(20), nullable=False)
    market_date: Mapped[date] = mapped_column("MARKET_DATE", Date, nullable=False)

    # Prices and change percent carry 4 decimal places
    open_price: Mapped[Decimal] = mapped_column("OPEN_PRICE", Numeric(18, 4), nullable=False)
    close_price: Mapped[Decimal] = mapped_column("CLOSE_PRICE", Numeric(18, 4), nullable=False)
    high_price: Mapped[Decimal] = mapped_column("HIGH_PRICE", Numeric(18, 4), nullable=False)
    low_price: Mapped[Decimal] = mapped_column("LOW_PRICE", Numeric(18, 4), nullable=False)
    volume: Mapped[int] = mapped_column("VOLUME", BigInteger, nullable=False)
    change_percent: Mapped[Decimal] = mapped_column("CHANGE_PERCENT", Numeric(8, 4), nullable=False)

    region: Mapped[str] = mapped_column("REGION", String(100), nullable=False)
    market_type: Mapped[str] = mapped_column("MARKET_TYPE", String(50), nullable=False, default="")

    created_date: Mapped[datetime] = mapped_column(
        "CREATED_DATE", DateTime(timezone=True), server_default=func.now(), nullable=False,
    )
    updated_date: Mapped[datetime] = mapped_column(
        "UPDATED_DATE", DateTime(timezone=True), server_default=func.now(), nullable=False,
    )

    __table_args__ = (
        Index("IX_MARKET_DATA_DATE", "MARKET_DATE"),
        Index("IX_MARKET_DATA_SYMBOL", "SYMBOL"),
        Index("IX_MARKET_DATA_REGION", "REGION"),
        Index("IX_MARKET_DATA_SYMBOL_DATE", "SYMBOL", "MARKET_DATE"),
    )

    def __repr__(self) -> str:
        return f"<MarketData(symbol='{self.symbol}', date={self.market_date})>"


class BudgetRecord(Base):
    """Planned vs. actual spend for a department in one (year, month) period."""

    __tablename__ = "BUDGET_RECORDS"

    budget_id: Mapped[int] = mapped_column("BUDGET_ID", Integer, primary_key=True)
    department: Mapped[str] = mapped_column("DEPARTMENT", String(100), nullable=False)

    # Composite period key
    budget_year: Mapped[int] = mapped_column("BUDGET_YEAR", Integer, nullable=False)
    budget_month: Mapped[int] = mapped_column("BUDGET_MONTH", Integer, nullable=False)

    planned_amount: Mapped[Decimal] = mapped_column("PLANNED_AMOUNT", Numeric(18, 2), nullable=False)
    actual_amount: Mapped[Decimal] = mapped_column("ACTUAL_AMOUNT", Numeric(18, 2), nullable=False)
    variance: Mapped[Decimal] = mapped_column("VARIANCE", Numeric(18, 2), nullable=False)

    region: Mapped[str] = mapped_column("REGION", String(100), nullable=False)
    category: Mapped[str] = mapped_column("CATEGORY", String(100), nullable=False, default="")
    status: Mapped[str] = mapped_column("STATUS", String(50), nullable=False, default="")

    created_date: Mapped[datetime] = mapped_column(
        "CREATED_DATE", DateTime(timezone=True), server_default=func.now(), nullable=False,
    )
    updated_date: Mapped[datetime] = mapped_column(
        "UPDATED_DATE", DateTime(timezone=True), server_default=func.now(), nullable=False,
    )

    __table_args__ = (
        Index("IX_BUDGET_RECORDS_DEPARTMENT", "DEPARTMENT"),
        Index("IX_BUDGET_RECORDS_REGION", "REGION"),
        Index("IX_BUDGET_RECORDS_PERIOD", "BUDGET_YEAR", "BUDGET_MONTH"),
    )

    def __repr__(self) -> str:
        return (
            f"<BudgetRecord(department='{self.department}', "
            f"period={self.budget_year}-{self.budget_month:02d})>"
        )
