"""Assessment store facade: scores applications and persists the results"""

import logging
from typing import Iterable, Iterator, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from risk_engine.domain.exceptions import InternalError, InvalidInputError, NotFoundError
from risk_engine.domain.models import LoanApplication, OverviewStatistics, RiskAssessment, RiskLevel
from risk_engine.domain.scoring import compute_assessment
from risk_engine.domain.statistics import build_overview
from risk_engine.infrastructure.database.repositories import RiskAssessmentRepository, to_risk_assessment
from risk_engine.infrastructure.observability.metrics import (
    batch_item_failures_counter,
    record_assessment,
    store_failures_counter,
)

logger = logging.getLogger(__name__)


def validate_id(entity_id: Optional[int], entity: str) -> int:
    """Reject absent or non-positive identifiers before touching the store"""
    if entity_id is None or entity_id <= 0:
        raise InvalidInputError(f"{entity} ID must be a positive integer")
    return entity_id


class UnderwritingService:
    """
    Facade over the risk assessment store.

    Each saved assessment is committed on its own, so one failed write
    never takes earlier writes in the same session down with it.
    """

    def __init__(self, db: Session):
        self.db = db
        self.assessments = RiskAssessmentRepository(db)

    def save(self, assessment: Optional[RiskAssessment]) -> RiskAssessment:
        """
        Persist an assessment and return the stored copy.

        Raises:
            InvalidInputError: assessment is None
            InternalError: the store rejected the write
        """
        if assessment is None:
            raise InvalidInputError("Risk assessment cannot be null")

        logger.info("Saving risk assessment", extra={"risk_score": assessment.risk_score})
        try:
            record = self.assessments.create(assessment)
            self.db.commit()
            self.db.refresh(record)
        except SQLAlchemyError as e:
            self.db.rollback()
            store_failures_counter.inc()
            logger.error(f"Failed to save risk assessment: {e}")
            raise InternalError("Failed to save risk assessment") from e

        logger.info("Saved risk assessment", extra={"assessment_id": record.id})
        return to_risk_assessment(record)

    def get_by_id(self, assessment_id: Optional[int]) -> RiskAssessment:
        validate_id(assessment_id, "Assessment")

        record = self.assessments.get_by_id(assessment_id)
        if record is None:
            raise NotFoundError("Risk assessment", assessment_id)
        return to_risk_assessment(record)

    def list_all(self) -> Iterator[RiskAssessment]:
        """Lazily yield every stored assessment"""
        for record in self.assessments.iter_all():
            yield to_risk_assessment(record)

    def list_by_risk_level(self, risk_level: RiskLevel) -> List[RiskAssessment]:
        return [to_risk_assessment(r) for r in self.assessments.find_by_risk_level(risk_level)]

    def list_by_approval(self, approved: bool) -> List[RiskAssessment]:
        return [to_risk_assessment(r) for r in self.assessments.find_by_approval(approved)]

    def list_by_score_range(self, min_score: int, max_score: int) -> List[RiskAssessment]:
        if min_score > max_score:
            raise InvalidInputError("min_score must not exceed max_score")
        return [to_risk_assessment(r) for r in self.assessments.find_by_score_between(min_score, max_score)]

    def search(
        self,
        risk_level: Optional[RiskLevel] = None,
        approved: Optional[bool] = None,
        min_score: Optional[int] = None,
        max_score: Optional[int] = None,
    ) -> List[RiskAssessment]:
        """Assessments matching every given filter"""
        if min_score is not None and max_score is not None and min_score > max_score:
            raise InvalidInputError("min_score must not exceed max_score")
        records = self.assessments.find_matching(risk_level, approved, min_score, max_score)
        return [to_risk_assessment(r) for r in records]

    def find_by_loan_application(self, loan_application_id: Optional[int]) -> RiskAssessment:
        """Most recent assessment recorded for a loan application"""
        validate_id(loan_application_id, "Loan application")

        record = self.assessments.find_latest_by_loan_application_id(loan_application_id)
        if record is None:
            raise NotFoundError("Risk assessment for loan application", loan_application_id)
        return to_risk_assessment(record)

    def evaluate(self, application: Optional[LoanApplication]) -> RiskAssessment:
        """Score one application and persist the assessment"""
        if application is None:
            raise InvalidInputError("Loan application cannot be null")

        logger.info("Calculating risk assessment", extra={"loan_application_id": application.id})
        saved = self.save(compute_assessment(application))
        record_assessment(saved.approval_recommendation, saved.risk_level.value, saved.risk_score)
        return saved

    def evaluate_batch(self, applications: Optional[Iterable[Optional[LoanApplication]]]) -> List[RiskAssessment]:
        """
        Best-effort evaluation of many applications.

        None entries are skipped. A failure on one item is logged and
        counted, then processing moves on; only successfully stored
        assessments are returned.
        """
        if applications is None:
            raise InvalidInputError("Loan application batch cannot be null")

        results = []
        for index, application in enumerate(applications):
            if application is None:
                continue
            try:
                results.append(self.evaluate(application))
            except Exception:
                batch_item_failures_counter.inc()
                logger.exception(
                    "Error processing loan application in batch",
                    extra={"batch_index": index, "applicant_email": application.email},
                )
        return results

    # Aggregates

    def count_total(self) -> int:
        return self.assessments.count()

    def count_approved(self) -> int:
        return self.assessments.count_approved()

    def count_rejected(self) -> int:
        return self.assessments.count_rejected()

    def average_risk_score(self) -> Optional[float]:
        return self.assessments.average_risk_score()

    def get_overview_statistics(self) -> OverviewStatistics:
        return build_overview(
            total=self.count_total(),
            approved=self.count_approved(),
            rejected=self.count_rejected(),
            average_risk_score=self.average_risk_score(),
        )
