# =============================================================================
# Models Package — Pydantic V2 Schemas
# =============================================================================
# Request/response schemas for the API. QueryRequest and QueryResponse are
# also the in-process contract of the data-source strategies.
# These are SEPARATE from the ORM models in finreport/db/models.py.
# =============================================================================
