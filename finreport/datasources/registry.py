# =============================================================================
# Data-Source Registry — Name → Strategy Resolution
# =============================================================================
#
# Strategies are registered once per registry in a FIXED order:
#   Employee, FinancialRecord, Announcement, Market, Budget
#
# resolve(name) returns the FIRST strategy whose can_handle(name) is true,
# so a name matching several token sets (e.g. "Employee financial") always
# resolves to the earlier one. Strategies are stateless; the registry can be
# shared across requests.
# =============================================================================

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from finreport.datasources.announcement import AnnouncementStrategy
from finreport.datasources.base import DataSourceStrategy
from finreport.datasources.budget import BudgetStrategy
from finreport.datasources.employee import EmployeeStrategy
from finreport.datasources.financial_record import FinancialRecordStrategy
from finreport.datasources.market import MarketDataStrategy

if TYPE_CHECKING:
    from finreport.services.record_store import RecordStore
    from finreport.services.simulation import SimulatedRecordStore

logger = logging.getLogger(__name__)

STRATEGY_CLASSES: tuple[type[DataSourceStrategy], ...] = (
    EmployeeStrategy,
    FinancialRecordStrategy,
    AnnouncementStrategy,
    MarketDataStrategy,
    BudgetStrategy,
)


class DataSourceRegistry:
    """Ordered collection of data-source strategies sharing one source mode."""

    def __init__(
        self,
        record_store: RecordStore | None,
        simulated_store: SimulatedRecordStore,
        simulation_mode: bool,
    ):
        self.simulation_mode = simulation_mode
        self._strategies = [
            cls(record_store, simulated_store, simulation_mode)
            for cls in STRATEGY_CLASSES
        ]
        logger.debug(
            "Data-source registry ready: %d strategies (%s mode)",
            len(self._strategies), "simulation" if simulation_mode else "live",
        )

    def resolve(self, name: str) -> DataSourceStrategy | None:
        return next((s for s in self._strategies if s.can_handle(name)), None)

    def list_all(self) -> list[DataSourceStrategy]:
        return list(self._strategies)
