# =============================================================================
# Response Models — Pydantic V2 Schemas
# =============================================================================
#
# QueryResponse is produced by every data-source strategy and is also part of
# the public API contract. The remaining models are API-only envelopes
# around internal dataclasses (ReportConfiguration, EmployeeAnalysisResult).
#
# Decimal values inside `data` are kept as Decimal; FastAPI serialises them
# as strings in JSON, which keeps fixed-point amounts exact.
# =============================================================================

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, Field


def _new_report_id() -> str:
    return str(uuid.uuid4())


class QueryResponse(BaseModel):
    """
    Result of one data-source fetch.

    `report_id` and `generated_at` are unique per call; `data` and
    `messages` depend only on the request and the underlying dataset.
    A failed fetch has is_success=False, an empty `data` and the error text
    in `messages`.
    """

    report_id: str = Field(default_factory=_new_report_id)
    generated_at: datetime = Field(default_factory=datetime.now)
    data: dict[str, Any] = Field(default_factory=dict)
    messages: list[str] = Field(default_factory=list)
    is_success: bool = False


class HealthResponse(BaseModel):
    """Response for GET /health: confirms the API is running."""

    status: str = "ok"
    version: str
    service: str
    simulation_mode: bool


# ---------------------------------------------------------------------------
# Discovery
# ---------------------------------------------------------------------------


class DataSourceInfo(BaseModel):
    """One registered data-source strategy."""

    name: str
    table_name: str
    tokens: list[str] = Field(description="Name fragments this strategy answers to")
    source_mode: str = Field(description="'live' or 'simulation'")


class AvailableValuesResponse(BaseModel):
    """Distinct values of one filterable field, for populating selectors."""

    data_source: str
    field_name: str
    values: list[str]


class OutputComponentInfo(BaseModel):
    """One registered output-component descriptor."""

    key: str
    display_name: str
    component_type: str
    tokens: list[str]


# ---------------------------------------------------------------------------
# Reports
# ---------------------------------------------------------------------------


class ComponentView(BaseModel):
    """A presentation-neutral view of one response for one component."""

    component: str
    report_id: str
    view: dict[str, Any]


class NarrativeResult(BaseModel):
    """Narrative text produced for one successful data-source response."""

    report_id: str
    table_name: str | None
    analysis: str
    pattern_check: str


class ReportResponse(BaseModel):
    """Response for POST /reports."""

    title: str
    data_sources: list[str] = Field(description="Resolved strategy names, in request order")
    output_components: list[str] = Field(description="Resolved component keys, in request order")
    responses: list[QueryResponse]
    views: list[ComponentView] = Field(default_factory=list)
    narratives: list[NarrativeResult] = Field(default_factory=list)
    created_at: datetime


# ---------------------------------------------------------------------------
# Employee analysis
# ---------------------------------------------------------------------------


class InvestmentStatisticsResponse(BaseModel):
    total_investment: Decimal
    total_divestment: Decimal
    net_investment: Decimal
    transaction_count: int
    stock_codes: list[str]
    average_transaction_amount: Decimal


class EmployeeAnalysisResponse(BaseModel):
    """Response for POST /analysis/employee."""

    employee: dict[str, Any]
    financial_records: list[dict[str, Any]]
    announcements: list[dict[str, Any]]
    statistics: InvestmentStatisticsResponse
    ai_analysis: str
    investment_summary: str
    generated_at: datetime
    request: dict[str, Any]


# ---------------------------------------------------------------------------
# Record Store administration
# ---------------------------------------------------------------------------


class DatabaseStatusResponse(BaseModel):
    simulation_mode: bool
    can_connect: bool
    dialect: str | None = None
    pending_migrations: list[str] = Field(default_factory=list)


class CreateScriptResponse(BaseModel):
    simulation_mode: bool
    script: str


class MigrationResponse(BaseModel):
    success: bool
    message: str
    applied: list[str] = Field(default_factory=list)
