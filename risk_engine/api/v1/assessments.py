"""/v1/risk-assessment - evaluate loan applications and read stored assessments"""

import logging
import time
from decimal import Decimal
from typing import Any, List, Optional

from fastapi import APIRouter, Depends, Query, Request, status
from pydantic import ValidationError

from risk_engine.api.dependencies import get_request_id, get_underwriting_service
from risk_engine.api.v1.errors import to_http_exception
from risk_engine.api.v1.schemas import LoanApplicationRequest, MonthlyPaymentResponse, RiskAssessmentResponse
from risk_engine.domain.models import RiskLevel
from risk_engine.infrastructure.observability.logging import log_assessment
from risk_engine.infrastructure.observability.metrics import batch_item_failures_counter
from risk_engine.services.underwriting import UnderwritingService

router = APIRouter(prefix="/risk-assessment")


@router.post("/evaluate", response_model=RiskAssessmentResponse, status_code=status.HTTP_201_CREATED)
def evaluate_risk(
    request_body: LoanApplicationRequest,
    request: Request,
    service: UnderwritingService = Depends(get_underwriting_service),
):
    """
    Score a loan application and store the resulting assessment.

    Returns the stored assessment with its factor breakdown, approval
    recommendation, recommended rate and ratios.
    """
    start_time = time.time()
    request_id = get_request_id(request)
    logging.info(
        "Received risk assessment request",
        extra={"request_id": request_id, "loan_type": request_body.loan_type.value},
    )

    try:
        assessment = service.evaluate(request_body.to_domain())
    except Exception as e:
        raise to_http_exception(e, request_id, service.db)

    duration_ms = (time.time() - start_time) * 1000
    log_assessment(
        request_id,
        assessment.id,
        request_body.loan_type.value,
        assessment.risk_score,
        assessment.risk_level.value,
        assessment.approval_recommendation,
        duration_ms,
    )
    return assessment


@router.post("/batch-evaluate", response_model=List[RiskAssessmentResponse])
def evaluate_risk_batch(
    request_body: List[Any],
    request: Request,
    service: UnderwritingService = Depends(get_underwriting_service),
):
    """
    Score many applications in one call.

    Each item is validated on its own. Null entries are skipped, and items
    that are invalid or fail to store are left out of the response; the
    rest of the batch still completes.
    """
    request_id = get_request_id(request)
    logging.info(
        "Received batch risk assessment request",
        extra={"request_id": request_id, "batch_size": len(request_body)},
    )

    applications = []
    for index, item in enumerate(request_body):
        if item is None:
            applications.append(None)
            continue
        try:
            applications.append(LoanApplicationRequest.model_validate(item).to_domain())
        except ValidationError as e:
            batch_item_failures_counter.inc()
            logging.warning(
                f"Invalid loan application in batch: {e.error_count()} validation error(s)",
                extra={"request_id": request_id, "batch_index": index},
            )
            applications.append(None)

    try:
        return service.evaluate_batch(applications)
    except Exception as e:
        raise to_http_exception(e, request_id, service.db)


@router.get("/assessments", response_model=List[RiskAssessmentResponse])
def list_assessments(
    request: Request,
    risk_level: Optional[RiskLevel] = Query(None, description="Only assessments in this risk level"),
    approved: Optional[bool] = Query(None, description="Only approved (true) or rejected (false)"),
    min_score: Optional[int] = Query(None, ge=0, description="Lowest risk score to include"),
    max_score: Optional[int] = Query(None, ge=0, description="Highest risk score to include"),
    service: UnderwritingService = Depends(get_underwriting_service),
):
    """List stored assessments; level, outcome and score filters combine"""
    request_id = get_request_id(request)

    try:
        if risk_level is None and approved is None and min_score is None and max_score is None:
            assessments = list(service.list_all())
        else:
            assessments = service.search(risk_level, approved, min_score, max_score)
    except Exception as e:
        raise to_http_exception(e, request_id, service.db)

    return assessments


@router.get("/assessments/{assessment_id}", response_model=RiskAssessmentResponse)
def get_assessment(
    assessment_id: int,
    request: Request,
    service: UnderwritingService = Depends(get_underwriting_service),
):
    """Fetch a single assessment by id"""
    try:
        return service.get_by_id(assessment_id)
    except Exception as e:
        raise to_http_exception(e, get_request_id(request), service.db)


@router.get("/assessments/{assessment_id}/monthly-payment", response_model=MonthlyPaymentResponse)
def get_monthly_payment(
    assessment_id: int,
    request: Request,
    loan_amount: Decimal = Query(..., gt=0, description="Principal to amortize"),
    term_months: int = Query(..., gt=0, description="Number of monthly payments"),
    service: UnderwritingService = Depends(get_underwriting_service),
):
    """Level monthly payment for a principal at the assessment's recommended rate"""
    try:
        assessment = service.get_by_id(assessment_id)
    except Exception as e:
        raise to_http_exception(e, get_request_id(request), service.db)

    return MonthlyPaymentResponse(
        assessment_id=assessment.id,
        loan_amount=loan_amount,
        term_months=term_months,
        interest_rate=assessment.recommended_interest_rate,
        monthly_payment=assessment.monthly_payment(loan_amount, term_months),
    )
