"""/v1/statistics - aggregate views over stored assessments"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request

from risk_engine.api.dependencies import get_request_id, get_underwriting_service
from risk_engine.api.v1.errors import to_http_exception
from risk_engine.api.v1.schemas import StatisticsOverviewResponse
from risk_engine.services.underwriting import UnderwritingService

router = APIRouter(prefix="/statistics")


@router.get("/overview", response_model=StatisticsOverviewResponse)
def get_overview_statistics(
    request: Request,
    service: UnderwritingService = Depends(get_underwriting_service),
):
    """
    Totals, approval/rejection rates and average risk score.

    Rates are percentages with 2 decimal places; all rates and the
    average are 0.0 when nothing has been assessed yet.
    """
    request_id = get_request_id(request)
    logging.info("Retrieving overview statistics", extra={"request_id": request_id})

    try:
        return service.get_overview_statistics()
    except Exception as e:
        raise to_http_exception(e, request_id, service.db)


@router.get("/assessments/count", response_model=int)
def get_total_assessments_count(service: UnderwritingService = Depends(get_underwriting_service)):
    return service.count_total()


@router.get("/assessments/approved/count", response_model=int)
def get_approved_assessments_count(service: UnderwritingService = Depends(get_underwriting_service)):
    return service.count_approved()


@router.get("/assessments/rejected/count", response_model=int)
def get_rejected_assessments_count(service: UnderwritingService = Depends(get_underwriting_service)):
    return service.count_rejected()


@router.get("/risk-score/average", response_model=Optional[float])
def get_average_risk_score(service: UnderwritingService = Depends(get_underwriting_service)):
    """Mean risk score across all assessments, null when there are none"""
    return service.average_risk_score()
