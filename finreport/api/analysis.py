# =============================================================================
# Analysis API — Employee Investment Analysis
# =============================================================================
#
# POST /analysis/employee runs FinancialAnalysisService for one employee:
# lookup → statistics → two narratives.
#
# Error mapping:
#   - EmployeeNotFoundError → 404
#   - ValueError (request without a usable employee id) → 400
#   - anything else raised by lookup / statistics → 502
#   - narrative failures → 200, with the error text in ai_analysis /
#     investment_summary (absorbed by NarrativeService)
# =============================================================================

from __future__ import annotations

import logging
from dataclasses import asdict

from fastapi import APIRouter, Depends, HTTPException

from finreport.api.deps import get_analysis_service
from finreport.models.requests import EmployeeAnalysisRequest
from finreport.models.responses import (
    EmployeeAnalysisResponse,
    InvestmentStatisticsResponse,
)
from finreport.services.analysis import EmployeeNotFoundError, FinancialAnalysisService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Analysis"])


@router.post(
    "/analysis/employee",
    response_model=EmployeeAnalysisResponse,
    summary="Analyse one employee's investment activity",
    description=(
        "Look up the employee with their transactions and related "
        "announcements, compute investment statistics and generate an "
        "analysis narrative plus a short investment summary."
    ),
)
async def analyze_employee(
    request: EmployeeAnalysisRequest,
    service: FinancialAnalysisService = Depends(get_analysis_service),
) -> EmployeeAnalysisResponse:
    logger.info("Employee analysis request: employee_id=%s", request.employee_id)

    try:
        result = await service.generate_employee_analysis(request.to_query_request())
    except EmployeeNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except Exception as e:
        logger.exception("Employee analysis failed: %s", e)
        raise HTTPException(
            status_code=502,
            detail=f"Employee analysis failed: {e}",
        ) from e

    return EmployeeAnalysisResponse(
        employee=result.employee,
        financial_records=result.financial_records,
        announcements=result.announcements,
        statistics=InvestmentStatisticsResponse(**asdict(result.statistics)),
        ai_analysis=result.ai_analysis,
        investment_summary=result.investment_summary,
        generated_at=result.generated_at,
        request=result.request.model_dump(mode="json"),
    )
