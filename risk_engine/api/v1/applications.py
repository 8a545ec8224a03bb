"""/v1/loan-applications - store applications and evaluate them by id"""

import logging
import time

from fastapi import APIRouter, Depends, Request, status

from risk_engine.api.dependencies import get_loan_application_service, get_request_id, get_underwriting_service
from risk_engine.api.v1.errors import to_http_exception
from risk_engine.api.v1.schemas import LoanApplicationRequest, LoanApplicationResponse, RiskAssessmentResponse
from risk_engine.infrastructure.observability.logging import log_assessment
from risk_engine.services.applications import LoanApplicationService
from risk_engine.services.underwriting import UnderwritingService

router = APIRouter(prefix="/loan-applications")


@router.post("", response_model=LoanApplicationResponse, status_code=status.HTTP_201_CREATED)
def create_loan_application(
    request_body: LoanApplicationRequest,
    request: Request,
    service: LoanApplicationService = Depends(get_loan_application_service),
):
    """
    Store a loan application.

    Rejected with 409 while another application under the same email is
    still active (not yet assessed, or last assessed as approvable).
    """
    request_id = get_request_id(request)
    try:
        application = service.create(request_body.to_domain())
    except Exception as e:
        raise to_http_exception(e, request_id, service.db)

    logging.info(
        "Loan application created",
        extra={"request_id": request_id, "loan_application_id": application.id},
    )
    return application


@router.get("/{application_id}", response_model=LoanApplicationResponse)
def get_loan_application(
    application_id: int,
    request: Request,
    service: LoanApplicationService = Depends(get_loan_application_service),
):
    try:
        return service.get_by_id(application_id)
    except Exception as e:
        raise to_http_exception(e, get_request_id(request), service.db)


@router.post(
    "/{application_id}/evaluate",
    response_model=RiskAssessmentResponse,
    status_code=status.HTTP_201_CREATED,
)
def evaluate_loan_application(
    application_id: int,
    request: Request,
    service: LoanApplicationService = Depends(get_loan_application_service),
):
    """Score a stored application; each call records a new assessment"""
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        assessment = service.evaluate(application_id)
    except Exception as e:
        raise to_http_exception(e, request_id, service.db)

    log_assessment(
        request_id,
        assessment.id,
        None,
        assessment.risk_score,
        assessment.risk_level.value,
        assessment.approval_recommendation,
        (time.time() - start_time) * 1000,
    )
    return assessment


@router.get("/{application_id}/assessment", response_model=RiskAssessmentResponse)
def get_latest_assessment(
    application_id: int,
    request: Request,
    service: UnderwritingService = Depends(get_underwriting_service),
):
    """Most recent assessment recorded for the application"""
    try:
        return service.find_by_loan_application(application_id)
    except Exception as e:
        raise to_http_exception(e, get_request_id(request), service.db)
