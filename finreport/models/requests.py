# =============================================================================
# API Request Models — Pydantic V2 Schemas
# =============================================================================
#
# QueryRequest is both the POST /reports body and the object handed to every
# data-source strategy. Filter fields are optional; each strategy only looks
# at the fields relevant to its entity. Blank strings are normalised to None
# so "" never turns into a `WHERE col = ''` filter.
# =============================================================================

from datetime import date

from pydantic import BaseModel, ConfigDict, Field, field_validator

_FILTER_FIELDS = (
    "employee_id",
    "region",
    "department",
    "transaction_type",
    "announcement_type",
    "priority",
    "status",
    "prompt",
)


class QueryRequest(BaseModel):
    """
    Request body for POST /reports: which data sources to query and how.

    Example:
        {
            "employee_id": "E001",
            "data_sources": ["Employee", "FinancialRecord"],
            "output_components": ["Table", "Summary"]
        }
    """

    employee_id: str | None = Field(default=None, examples=["E001"])
    start_date: date | None = Field(default=None, examples=["2024-03-01"])
    end_date: date | None = Field(default=None, examples=["2024-03-31"])
    region: str | None = Field(default=None, examples=["Taipei"])
    department: str | None = None
    transaction_type: str | None = Field(default=None, examples=["buy"])
    announcement_type: str | None = None
    priority: str | None = None
    status: str | None = None

    # Free-text instruction appended to the narrative prompt (narrate=true)
    prompt: str | None = Field(default=None, max_length=2000)

    data_sources: list[str] = Field(
        default_factory=list,
        description=(
            "Requested data-source names, matched case-insensitively by "
            "substring (e.g. 'Employee', 'FinancialRecord', 'Announcement', "
            "'Market', 'Budget'). Unmatched names are skipped."
        ),
    )
    output_components: list[str] = Field(
        default_factory=list,
        description="Requested output components ('SQL', 'Table', 'Summary', 'Chart').",
    )

    @field_validator(*_FILTER_FIELDS, mode="before")
    @classmethod
    def _blank_to_none(cls, value):
        if isinstance(value, str):
            value = value.strip()
            return value or None
        return value

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "employee_id": "E001",
                    "data_sources": ["FinancialRecord", "Announcement"],
                    "output_components": ["Table", "Summary"],
                },
                {
                    "region": "Taipei",
                    "start_date": "2024-03-01",
                    "end_date": "2024-03-31",
                    "data_sources": ["Budget", "Market"],
                    "output_components": ["SQL", "Chart"],
                },
            ]
        }
    )


class EmployeeAnalysisRequest(BaseModel):
    """Request body for POST /analysis/employee."""

    employee_id: str = Field(..., min_length=1, examples=["E001"])
    start_date: date | None = None
    end_date: date | None = None
    prompt: str | None = Field(default=None, max_length=2000)

    @field_validator("employee_id", mode="before")
    @classmethod
    def _strip_employee_id(cls, value):
        # "   " must fail min_length instead of becoming an empty lookup
        if isinstance(value, str):
            return value.strip()
        return value

    def to_query_request(self) -> QueryRequest:
        return QueryRequest(
            employee_id=self.employee_id,
            start_date=self.start_date,
            end_date=self.end_date,
            prompt=self.prompt,
        )
