# =============================================================================
# Simulated Record Store — Canned In-Memory Dataset
# =============================================================================
#
# Supplies the seed dataset every strategy reads when simulation_mode=True:
#   - 10 employees across 5 departments and 4 regions
#   - 21 stock transactions (ids 101–121), each tied to one employee
#   - 21 company announcements, each associated with one employee
#   - a small market-data and budget dataset
#
# The simulated transaction shape extends the live one with stock_code,
# company_name, quantity and price_per_share. The simulated announcement
# shape is a DIFFERENT type from the live ORM model: it has publisher /
# priority / published_date and an employee_id association, and no region.
#
# All seed dates are fixed offsets from SEED_AS_OF, so repeated reads return
# identical rows.
#
# ARCHITECTURE:
#   SimulatedRecordStore
#   ├── employees() / financial_records() / announcements()
#   ├── market_data() / budget_records()
#   ├── get_employee() : single lookup
#   └── get_employee_report() : employee + transactions + announcements
# =============================================================================

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from decimal import Decimal

logger = logging.getLogger(__name__)

SEED_AS_OF = date(2024, 6, 30)


def _days_ago(days: int) -> date:
    return SEED_AS_OF - timedelta(days=days)


# ---------------------------------------------------------------------------
# Row Types
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class EmployeeRow:
    employee_id: str
    employee_name: str
    department: str
    region: str
    position: str
    hire_date: date
    salary: Decimal


@dataclass(frozen=True)
class FinancialRecordRow:
    """A simulated stock transaction (buy/sell)."""

    record_id: int
    employee_id: str
    record_date: date
    amount: Decimal
    transaction_type: str
    description: str
    region: str
    category: str
    status: str
    stock_code: str
    company_name: str
    quantity: int
    price_per_share: Decimal


@dataclass(frozen=True)
class SimulatedAnnouncement:
    """Company announcement in the simulated shape (employee-associated)."""

    announcement_id: int
    title: str
    content: str
    announcement_type: str
    published_date: date
    publisher: str
    priority: str
    status: str
    stock_code: str
    company_name: str
    employee_id: str


@dataclass(frozen=True)
class MarketDataRow:
    data_id: int
    symbol: str
    market_date: date
    open_price: Decimal
    close_price: Decimal
    high_price: Decimal
    low_price: Decimal
    volume: int
    change_percent: Decimal
    region: str
    market_type: str


@dataclass(frozen=True)
class BudgetRow:
    budget_id: int
    department: str
    budget_year: int
    budget_month: int
    planned_amount: Decimal
    actual_amount: Decimal
    variance: Decimal
    region: str
    category: str
    status: str


@dataclass
class EmployeeReport:
    """Composite lookup result: one employee and everything tied to them."""

    employee_id: str
    employee: object | None
    financial_records: list = field(default_factory=list)
    announcements: list = field(default_factory=list)
    generated_at: datetime = field(default_factory=datetime.now)


# ---------------------------------------------------------------------------
# Seed Data
# ---------------------------------------------------------------------------

_EMPLOYEES: tuple[EmployeeRow, ...] = (
    EmployeeRow("E001", "Wang Hsiao-ming", "Finance", "Taipei", "Accountant", date(2020, 1, 15), Decimal("52000")),
    EmployeeRow("E002", "Li Mei-li", "Human Resources", "Hsinchu", "HR Specialist", date(2019, 5, 10), Decimal("48000")),
    EmployeeRow("E003", "Chen Ta-hua", "Information Technology", "Taichung", "Engineer", date(2021, 3, 1), Decimal("60000")),
    EmployeeRow("E004", "Lin Chih-ling", "Marketing", "Kaohsiung", "Marketing Manager", date(2018, 7, 20), Decimal("75000")),
    EmployeeRow("E005", "Chang Wei", "Finance", "Taipei", "Auditor", date(2022, 2, 14), Decimal("53000")),
    EmployeeRow("E006", "Huang Hsiao-chiang", "Information Technology", "Hsinchu", "Security Engineer", date(2020, 11, 30), Decimal("67000")),
    EmployeeRow("E007", "Wu Pei-shan", "Human Resources", "Taichung", "Recruiter", date(2017, 9, 5), Decimal("46000")),
    EmployeeRow("E008", "Chou Chieh-lun", "Marketing", "Kaohsiung", "Brand Manager", date(2016, 4, 18), Decimal("82000")),
    EmployeeRow("E009", "Cheng Yi-chien", "Investment Research", "Taipei", "Financial Analyst", date(2023, 1, 2), Decimal("55000")),
    EmployeeRow("E010", "Liu Te-hua", "Information Technology", "Hsinchu", "Systems Architect", date(2015, 8, 25), Decimal("90000")),
)

_COMPANIES = {
    "2330": "TSMC",
    "2454": "MediaTek",
    "2317": "Hon Hai",
    "2412": "Chunghwa Telecom",
    "1301": "Formosa Plastics",
}


def _trade(
    record_id: int,
    employee_id: str,
    region: str,
    days_ago: int,
    side: str,
    stock_code: str,
    quantity: int,
    price: int,
) -> FinancialRecordRow:
    company = _COMPANIES[stock_code]
    verb = "purchase" if side == "buy" else "sale"
    return FinancialRecordRow(
        record_id=record_id,
        employee_id=employee_id,
        record_date=_days_ago(days_ago),
        amount=Decimal(quantity * price),
        transaction_type=side,
        description=f"{company} share {verb}",
        region=region,
        category=stock_code,
        status="settled",
        stock_code=stock_code,
        company_name=company,
        quantity=quantity,
        price_per_share=Decimal(price),
    )


_FINANCIAL_RECORDS: tuple[FinancialRecordRow, ...] = (
    # E001: TSMC
    _trade(101, "E001", "Taipei", 60, "buy", "2330", 100, 600),
    _trade(102, "E001", "Taipei", 30, "sell", "2330", 50, 610),
    _trade(103, "E001", "Taipei", 5, "buy", "2330", 100, 610),
    # E002: MediaTek
    _trade(104, "E002", "Hsinchu", 35, "buy", "2454", 50, 800),
    _trade(105, "E002", "Hsinchu", 15, "buy", "2454", 40, 800),
    # E003: TSMC
    _trade(106, "E003", "Taichung", 55, "buy", "2330", 200, 600),
    _trade(107, "E003", "Taichung", 20, "sell", "2330", 100, 612),
    # E004: Hon Hai
    _trade(108, "E004", "Kaohsiung", 50, "buy", "2317", 500, 100),
    _trade(109, "E004", "Kaohsiung", 2, "sell", "2317", 250, 102),
    # E005: Chunghwa Telecom
    _trade(110, "E005", "Taipei", 20, "buy", "2412", 200, 110),
    _trade(111, "E005", "Taipei", 12, "buy", "2412", 300, 110),
    # E006: Hon Hai
    _trade(112, "E006", "Hsinchu", 45, "buy", "2317", 200, 100),
    _trade(113, "E006", "Hsinchu", 25, "buy", "2317", 300, 100),
    # E007: Formosa Plastics
    _trade(114, "E007", "Taichung", 15, "buy", "1301", 500, 90),
    _trade(115, "E007", "Taichung", 8, "buy", "1301", 200, 90),
    # E008: Formosa Plastics
    _trade(116, "E008", "Kaohsiung", 10, "buy", "1301", 200, 90),
    _trade(117, "E008", "Kaohsiung", 6, "buy", "1301", 300, 90),
    # E009: Chunghwa Telecom
    _trade(118, "E009", "Taipei", 25, "buy", "2412", 500, 110),
    _trade(119, "E009", "Taipei", 18, "buy", "2412", 200, 110),
    # E010: MediaTek
    _trade(120, "E010", "Hsinchu", 40, "buy", "2454", 100, 800),
    _trade(121, "E010", "Hsinchu", 28, "buy", "2454", 50, 800),
)


def _announcement(
    announcement_id: int,
    employee_id: str,
    stock_code: str,
    days_ago: int,
    announcement_type: str,
    priority: str,
    title: str,
    content: str,
) -> SimulatedAnnouncement:
    company = _COMPANIES[stock_code]
    return SimulatedAnnouncement(
        announcement_id=announcement_id,
        title=title,
        content=content,
        announcement_type=announcement_type,
        published_date=_days_ago(days_ago),
        publisher=company,
        priority=priority,
        status="published",
        stock_code=stock_code,
        company_name=company,
        employee_id=employee_id,
    )


_ANNOUNCEMENTS: tuple[SimulatedAnnouncement, ...] = (
    # E001: TSMC
    _announcement(1, "E001", "2330", 30, "earnings", "high",
                  "TSMC posts record Q2 revenue",
                  "TSMC reported Q2 revenue of NT$625.3 billion, up 32.8% year over year, with gross margin reaching 53.2%."),
    _announcement(2, "E001", "2330", 10, "dividend", "medium",
                  "TSMC board approves cash dividend",
                  "The board resolved a cash dividend of NT$11 per share, a payout ratio of about 70%, with the ex-dividend date set for August 15."),
    _announcement(3, "E001", "2330", 1, "major contract", "high",
                  "TSMC wins next-generation smartphone SoC order",
                  "TSMC confirmed a foundry order for a flagship smartphone processor on its 2nm process, with volume production expected in Q4 next year."),
    # E002: MediaTek
    _announcement(4, "E002", "2454", 8, "r&d investment", "medium",
                  "MediaTek expands AI chip R&D",
                  "MediaTek will invest NT$20 billion in AI silicon and plans to launch a dedicated AI processor next year."),
    _announcement(5, "E002", "2454", 18, "operating results", "medium",
                  "MediaTek 5G shipments hit a record",
                  "Q2 5G chipset shipments reached 120 million units, lifting market share to 35%."),
    # E003: TSMC
    _announcement(6, "E003", "2330", 20, "major investment", "high",
                  "TSMC breaks ground on second Arizona fab",
                  "Construction of the second Arizona fab has started, targeting 2nm volume production in 2026."),
    _announcement(7, "E003", "2330", 12, "capacity expansion", "medium",
                  "TSMC 3nm capacity fully booked",
                  "3nm orders keep rising with utilisation at 100%; new production lines are planned."),
    # E004: Hon Hai
    _announcement(8, "E004", "2317", 25, "major contract", "high",
                  "Hon Hai EV platform lands major order",
                  "The MIH electric-vehicle platform signed a partnership with a European carmaker, with first deliveries expected next year."),
    _announcement(9, "E004", "2317", 35, "earnings", "medium",
                  "Hon Hai Q2 revenue beats expectations",
                  "Q2 revenue reached NT$1.2 trillion, 8% above expectations, driven by handset assembly orders."),
    # E005: Chunghwa Telecom
    _announcement(10, "E005", "2412", 5, "strategic partnership", "medium",
                  "Chunghwa Telecom partners on enterprise cloud",
                  "Chunghwa Telecom signed a strategic agreement with a global cloud vendor to co-develop enterprise cloud solutions."),
    _announcement(11, "E005", "2412", 22, "operating results", "medium",
                  "Chunghwa Telecom 5G rollout ahead of plan",
                  "12,000 5G base stations are now in service, reaching 85% population coverage."),
    # E006: Hon Hai
    _announcement(12, "E006", "2317", 15, "capacity expansion", "medium",
                  "Hon Hai India plant starts production",
                  "The new India assembly plant is in production with annual capacity of 20 million handsets."),
    _announcement(13, "E006", "2317", 28, "operating results", "medium",
                  "Hon Hai AI server business surges",
                  "AI server revenue grew 150% in Q2 and has become a new growth driver."),
    # E007: Formosa Plastics
    _announcement(14, "E007", "1301", 22, "capacity expansion", "high",
                  "Formosa Plastics expands ethylene capacity",
                  "A NT$30 billion ethylene expansion is planned for completion in 2026, lifting annual capacity by 30%."),
    _announcement(15, "E007", "1301", 14, "major investment", "high",
                  "Formosa Plastics launches green-energy transition",
                  "The group will invest NT$20 billion in wind and solar power generation."),
    # E008: Formosa Plastics
    _announcement(16, "E008", "1301", 3, "r&d results", "high",
                  "Formosa biotech unit completes phase III trial",
                  "The vaccine candidate completed phase III trials with 95% efficacy; an emergency-use application will follow."),
    _announcement(17, "E008", "1301", 26, "environmental policy", "medium",
                  "Formosa group announces joint carbon-reduction plan",
                  "The group targets a 50% cut in carbon emissions by 2030 through green-technology investment."),
    # E009: Chunghwa Telecom
    _announcement(18, "E009", "2412", 12, "operating results", "medium",
                  "Chunghwa Telecom passes 4 million 5G subscribers",
                  "5G subscribers exceeded 4 million, a 37% penetration rate, keeping the lead among domestic carriers."),
    _announcement(19, "E009", "2412", 32, "product launch", "medium",
                  "Chunghwa Telecom launches IoT platform",
                  "A new enterprise IoT platform is live, targeting 100,000 business customers by year end."),
    # E010: MediaTek
    _announcement(20, "E010", "2454", 18, "product launch", "high",
                  "MediaTek unveils flagship Dimensity chip",
                  "The new flagship processor uses a 3nm process and delivers 40% higher AI performance."),
    _announcement(21, "E010", "2454", 24, "capacity expansion", "medium",
                  "MediaTek Wi-Fi 7 chips enter volume shipment",
                  "Wi-Fi 7 chipsets are shipping in volume, with Q3 shipments expected to reach 5 million units."),
)


def _quote(
    data_id: int,
    symbol: str,
    market_date: date,
    open_price: str,
    close_price: str,
    high_price: str,
    low_price: str,
    volume: int,
    change_percent: str,
    region: str = "Taiwan",
    market_type: str = "equity",
) -> MarketDataRow:
    return MarketDataRow(
        data_id=data_id,
        symbol=symbol,
        market_date=market_date,
        open_price=Decimal(open_price),
        close_price=Decimal(close_price),
        high_price=Decimal(high_price),
        low_price=Decimal(low_price),
        volume=volume,
        change_percent=Decimal(change_percent),
        region=region,
        market_type=market_type,
    )


_MARKET_DATA: tuple[MarketDataRow, ...] = (
    _quote(1, "2330", date(2024, 3, 1), "700.0000", "712.0000", "715.0000", "698.0000", 41_250_000, "1.7143"),
    _quote(2, "2454", date(2024, 3, 1), "1000.0000", "995.0000", "1010.0000", "990.0000", 6_120_000, "-0.5000"),
    _quote(3, "2317", date(2024, 3, 1), "104.5000", "106.0000", "106.5000", "104.0000", 52_800_000, "1.4354"),
    _quote(4, "2330", date(2024, 3, 15), "745.0000", "760.0000", "764.0000", "741.0000", 48_900_000, "2.0134"),
    _quote(5, "2412", date(2024, 3, 15), "118.0000", "118.5000", "119.0000", "117.5000", 8_450_000, "0.4237"),
    _quote(6, "1301", date(2024, 4, 2), "72.3000", "71.1000", "72.8000", "70.9000", 15_300_000, "-1.6598"),
    _quote(7, "TWII", date(2024, 4, 2), "20300.1500", "20215.4200", "20390.0000", "20180.7700", 0, "-0.4174", "Taiwan", "index"),
    _quote(8, "TSM", date(2024, 4, 2), "139.2000", "141.6500", "142.3000", "138.8000", 17_650_000, "1.7601", "US", "adr"),
)


def _budget(
    budget_id: int,
    department: str,
    year: int,
    month: int,
    planned: str,
    actual: str,
    region: str,
    category: str,
    status: str = "closed",
) -> BudgetRow:
    planned_amount = Decimal(planned)
    actual_amount = Decimal(actual)
    return BudgetRow(
        budget_id=budget_id,
        department=department,
        budget_year=year,
        budget_month=month,
        planned_amount=planned_amount,
        actual_amount=actual_amount,
        variance=actual_amount - planned_amount,
        region=region,
        category=category,
        status=status,
    )


_BUDGET_RECORDS: tuple[BudgetRow, ...] = (
    _budget(1, "Finance", 2023, 12, "120000.00", "118500.00", "Taipei", "operations"),
    _budget(2, "Finance", 2024, 2, "125000.00", "131200.00", "Taipei", "operations"),
    _budget(3, "Finance", 2024, 3, "125000.00", "122750.00", "Taipei", "operations"),
    _budget(4, "Information Technology", 2024, 2, "300000.00", "287400.00", "Hsinchu", "infrastructure"),
    _budget(5, "Information Technology", 2024, 3, "300000.00", "318900.00", "Hsinchu", "infrastructure"),
    _budget(6, "Marketing", 2024, 3, "180000.00", "180000.00", "Kaohsiung", "campaigns"),
    _budget(7, "Marketing", 2024, 4, "200000.00", "0.00", "Kaohsiung", "campaigns", "open"),
    _budget(8, "Human Resources", 2024, 4, "0.00", "4200.00", "Taichung", "training", "open"),
    _budget(9, "Finance", 2025, 1, "130000.00", "0.00", "Taipei", "operations", "planned"),
)


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------


class SimulatedRecordStore:
    """
    Read-only access to the canned dataset.

    Every accessor returns a fresh list over immutable rows, so callers may
    filter and sort freely without affecting other requests.
    """

    def employees(self) -> list[EmployeeRow]:
        return list(_EMPLOYEES)

    def financial_records(self) -> list[FinancialRecordRow]:
        return list(_FINANCIAL_RECORDS)

    def announcements(self) -> list[SimulatedAnnouncement]:
        return list(_ANNOUNCEMENTS)

    def market_data(self) -> list[MarketDataRow]:
        return list(_MARKET_DATA)

    def budget_records(self) -> list[BudgetRow]:
        return list(_BUDGET_RECORDS)

    def get_employee(self, employee_id: str) -> EmployeeRow | None:
        return next(
            (e for e in _EMPLOYEES if e.employee_id == employee_id), None,
        )

    def get_employee_financial_records(
        self, employee_id: str,
    ) -> list[FinancialRecordRow]:
        return [r for r in _FINANCIAL_RECORDS if r.employee_id == employee_id]

    def get_employee_announcements(
        self, employee_id: str,
    ) -> list[SimulatedAnnouncement]:
        announcements = [a for a in _ANNOUNCEMENTS if a.employee_id == employee_id]
        logger.debug(
            "Found %d announcements related to employee %s",
            len(announcements), employee_id,
        )
        return announcements

    def get_employee_report(self, employee_id: str) -> EmployeeReport:
        """Join one employee with their transactions and announcements."""
        return EmployeeReport(
            employee_id=employee_id,
            employee=self.get_employee(employee_id),
            financial_records=self.get_employee_financial_records(employee_id),
            announcements=self.get_employee_announcements(employee_id),
        )
