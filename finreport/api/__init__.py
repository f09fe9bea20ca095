# =============================================================================
# API Package — FastAPI Route Handlers
# =============================================================================
# Each module defines a FastAPI APIRouter for one feature:
#   - reports.py: report assembly, data-source and output-component discovery
#   - analysis.py: employee investment analysis
#   - admin.py: Record Store schema administration
#   - deps.py: collaborator wiring via Depends()
# =============================================================================
