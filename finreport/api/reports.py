# =============================================================================
# Reports API — Report Assembly + Discovery Endpoints
# =============================================================================
#
#   POST /reports                                  → assembled report
#   GET  /data-sources                             → registered strategies
#   GET  /data-sources/{name}/values/{field_name}  → selector values
#   GET  /output-components                        → registered components
#
# POST /reports runs the Report Factory, then builds one view per
# (response, output component) pair. With ?narrate=true each successful
# response also gets LLM commentary; narrative failures show up as text in
# the narrative fields, never as HTTP errors.
# =============================================================================

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from finreport.api.deps import (
    get_analysis_service,
    get_data_source_registry,
    get_output_component_registry,
    get_report_factory,
)
from finreport.datasources.registry import DataSourceRegistry
from finreport.models.requests import QueryRequest
from finreport.models.responses import (
    AvailableValuesResponse,
    ComponentView,
    DataSourceInfo,
    NarrativeResult,
    OutputComponentInfo,
    ReportResponse,
)
from finreport.services.analysis import FinancialAnalysisService
from finreport.services.output_components import OutputComponentRegistry
from finreport.services.report_factory import ReportFactory

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Reports"])


# ---------------------------------------------------------------------------
# POST /reports: Assemble a report
# ---------------------------------------------------------------------------


@router.post(
    "/reports",
    response_model=ReportResponse,
    summary="Assemble a financial report",
    description=(
        "Resolve the requested data sources and output components, fetch "
        "each data source with the request's filters, and return the "
        "responses plus a view per output component. Unknown names are "
        "skipped. Set narrate=true to add LLM commentary."
    ),
)
async def create_report(
    request: QueryRequest,
    narrate: bool = Query(default=False, description="Generate narrative commentary"),
    factory: ReportFactory = Depends(get_report_factory),
    analysis: FinancialAnalysisService = Depends(get_analysis_service),
) -> ReportResponse:
    logger.info(
        "Report request: data_sources=%s, output_components=%s, narrate=%s",
        request.data_sources, request.output_components, narrate,
    )

    configuration = await factory.create_page(request)

    views = [
        ComponentView(
            component=component.key,
            report_id=response.report_id,
            view=component.build_view(response),
        )
        for response in configuration.responses
        for component in configuration.output_components
    ]

    narratives: list[NarrativeResult] = []
    if narrate:
        narratives = [
            NarrativeResult(**narrative)
            for narrative in await analysis.narrate_report(configuration, request.prompt)
        ]

    return ReportResponse(
        title=configuration.title,
        data_sources=[strategy.name for strategy in configuration.data_sources],
        output_components=[component.key for component in configuration.output_components],
        responses=configuration.responses,
        views=views,
        narratives=narratives,
        created_at=configuration.created_at,
    )


# ---------------------------------------------------------------------------
# Discovery
# ---------------------------------------------------------------------------


@router.get(
    "/data-sources",
    response_model=list[DataSourceInfo],
    summary="List registered data sources",
)
async def list_data_sources(
    registry: DataSourceRegistry = Depends(get_data_source_registry),
) -> list[DataSourceInfo]:
    return [
        DataSourceInfo(
            name=strategy.name,
            table_name=strategy.table_name,
            tokens=list(strategy.tokens),
            source_mode=strategy.source_mode,
        )
        for strategy in registry.list_all()
    ]


@router.get(
    "/data-sources/{name}/values/{field_name}",
    response_model=AvailableValuesResponse,
    summary="Distinct values of a filterable field",
    description=(
        "Returns distinct, non-empty values in first-seen order. Unknown "
        "field names return an empty list; an unknown data-source name "
        "returns 404."
    ),
)
async def get_available_values(
    name: str,
    field_name: str,
    registry: DataSourceRegistry = Depends(get_data_source_registry),
) -> AvailableValuesResponse:
    strategy = registry.resolve(name)
    if strategy is None:
        raise HTTPException(status_code=404, detail=f"No data source matches '{name}'")

    values = await strategy.get_available_values(field_name)
    return AvailableValuesResponse(
        data_source=strategy.name, field_name=field_name, values=values,
    )


@router.get(
    "/output-components",
    response_model=list[OutputComponentInfo],
    summary="List registered output components",
)
async def list_output_components(
    registry: OutputComponentRegistry = Depends(get_output_component_registry),
) -> list[OutputComponentInfo]:
    return [
        OutputComponentInfo(
            key=component.key,
            display_name=component.display_name,
            component_type=component.component_type,
            tokens=list(component.tokens),
        )
        for component in registry.list_all()
    ]
