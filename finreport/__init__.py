# =============================================================================
# Financial Reporting Backend
# =============================================================================
# Strategy-dispatch reporting over employee, transaction, announcement,
# market and budget data, with optional LLM narratives.
#
# Package structure:
#   finreport/
#   ├── api/          → FastAPI route handlers (reports, analysis, admin)
#   ├── datasources/  → per-entity retrieval strategies + registry
#   ├── db/           → async engine and ORM models (live Record Store)
#   ├── models/       → Pydantic V2 request/response schemas
#   └── services/     → record stores, report factory, output components,
#                       analysis, narrative / LLM providers
# =============================================================================
