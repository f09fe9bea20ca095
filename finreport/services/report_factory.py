# =============================================================================
# Report Factory — Request → ReportConfiguration
# =============================================================================
#
# Assembles a report from a QueryRequest:
#   1. Title from the request's employee / region / start date
#   2. Resolve each requested data source IN ORDER, fetching immediately
#   3. Resolve each requested output component IN ORDER
#
# Unresolved names are skipped (debug log only). Strategy failures never
# escape: fetch_data() already converts them into failed QueryResponses,
# so create_page() does not raise for them.
# =============================================================================

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime

from finreport.datasources.base import DataSourceStrategy
from finreport.datasources.registry import DataSourceRegistry
from finreport.models.requests import QueryRequest
from finreport.models.responses import QueryResponse
from finreport.services.output_components import OutputComponent, OutputComponentRegistry

logger = logging.getLogger(__name__)

BASE_TITLE = "Financial Data Summary"


@dataclass
class ReportConfiguration:
    """An assembled report: what was queried, how to show it, and the results."""

    title: str
    data_sources: list[DataSourceStrategy] = field(default_factory=list)
    output_components: list[OutputComponent] = field(default_factory=list)
    responses: list[QueryResponse] = field(default_factory=list)
    created_at: datetime = field(default_factory=datetime.now)


def build_title(request: QueryRequest) -> str:
    title = BASE_TITLE
    if request.employee_id:
        title += f" - Employee: {request.employee_id}"
    if request.region:
        title += f" - Region: {request.region}"
    if request.start_date:
        title += f" - Date: {request.start_date:%Y-%m-%d}"
    return title


class ReportFactory:
    def __init__(
        self,
        data_sources: DataSourceRegistry,
        output_components: OutputComponentRegistry,
    ):
        self._data_sources = data_sources
        self._output_components = output_components

    async def create_page(self, request: QueryRequest) -> ReportConfiguration:
        configuration = ReportConfiguration(title=build_title(request))

        for name in request.data_sources:
            strategy = self._data_sources.resolve(name)
            if strategy is None:
                logger.debug("No data source matches '%s', skipping", name)
                continue
            configuration.data_sources.append(strategy)
            configuration.responses.append(await strategy.fetch_data(request))

        for name in request.output_components:
            component = self._output_components.resolve(name)
            if component is None:
                logger.debug("No output component matches '%s', skipping", name)
                continue
            configuration.output_components.append(component)

        logger.info(
            "Report '%s': %d data sources, %d output components",
            configuration.title,
            len(configuration.data_sources),
            len(configuration.output_components),
        )
        return configuration
