# =============================================================================
# Database Package — Live Record Store
# =============================================================================
# Contains:
#   - engine.py: lazy async SQLAlchemy engine and session factory
#   - models.py: ORM models for the five reporting tables
# =============================================================================
