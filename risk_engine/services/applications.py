"""Loan application store with the duplicate-email policy"""

import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from risk_engine.config import settings
from risk_engine.domain.exceptions import DuplicateError, InternalError, InvalidInputError, NotFoundError
from risk_engine.domain.models import LoanApplication, RiskAssessment
from risk_engine.infrastructure.database.repositories import (
    LoanApplicationRepository,
    RiskAssessmentRepository,
    to_loan_application,
)
from risk_engine.services.underwriting import UnderwritingService, validate_id

logger = logging.getLogger(__name__)


class LoanApplicationService:
    """Persists loan applications and evaluates them by id"""

    def __init__(self, db: Session, reject_duplicates: bool | None = None):
        self.db = db
        self.applications = LoanApplicationRepository(db)
        self.assessments = RiskAssessmentRepository(db)
        self.reject_duplicates = (
            settings.reject_duplicate_applications if reject_duplicates is None else reject_duplicates
        )

    def has_active_application(self, email: str) -> bool:
        """
        An application is active until an assessment rejects it.

        Applications never assessed, or whose latest assessment recommends
        approval, block a new submission under the same email.
        """
        for record in self.applications.find_by_email(email):
            latest = self.assessments.find_latest_by_loan_application_id(record.id)
            if latest is None or latest.approval_recommendation:
                return True
        return False

    def create(self, application: Optional[LoanApplication]) -> LoanApplication:
        """
        Raises:
            InvalidInputError: application is None
            DuplicateError: an active application exists for the email
            InternalError: the store rejected the write
        """
        if application is None:
            raise InvalidInputError("Loan application cannot be null")

        if self.reject_duplicates and self.has_active_application(application.email):
            logger.warning("Duplicate loan application rejected", extra={"email": application.email})
            raise DuplicateError.for_email(application.email)

        try:
            record = self.applications.create(application)
            self.db.commit()
            self.db.refresh(record)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to save loan application: {e}")
            raise InternalError("Failed to save loan application") from e

        logger.info("Saved loan application", extra={"loan_application_id": record.id})
        return to_loan_application(record)

    def get_by_id(self, application_id: Optional[int]) -> LoanApplication:
        validate_id(application_id, "Loan application")

        record = self.applications.get_by_id(application_id)
        if record is None:
            raise NotFoundError("Loan application", application_id)
        return to_loan_application(record)

    def evaluate(self, application_id: Optional[int]) -> RiskAssessment:
        """Score a stored application; the assessment links back to it"""
        application = self.get_by_id(application_id)
        return UnderwritingService(self.db).evaluate(application)
