"""Dependency injection for FastAPI endpoints"""

from fastapi import Depends, Request
from sqlalchemy.orm import Session
from risk_engine.infrastructure.database.session import get_db
from risk_engine.services.applications import LoanApplicationService
from risk_engine.services.underwriting import UnderwritingService


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_underwriting_service(db: Session = Depends(get_db)) -> UnderwritingService:
    """Provide the assessment store facade bound to the request's session"""
    return UnderwritingService(db)


def get_loan_application_service(db: Session = Depends(get_db)) -> LoanApplicationService:
    """Provide the loan application store bound to the request's session"""
    return LoanApplicationService(db)
