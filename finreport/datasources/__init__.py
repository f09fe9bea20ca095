# =============================================================================
# Data Sources Package — Per-Entity Retrieval Strategies
# =============================================================================
# Contains:
#   - filters.py:  filter objects shared by live and simulation mode
#   - base.py:     DataSourceStrategy (template for fetch / available values)
#   - employee.py, financial_record.py, announcement.py, market.py, budget.py
#   - registry.py: DataSourceRegistry (first-match name resolution)
# =============================================================================
