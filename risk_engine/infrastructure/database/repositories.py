"""Data access layer for loan applications and risk assessments"""

from typing import Iterator, List, Optional
from sqlalchemy import func
from sqlalchemy.orm import Session
from risk_engine.infrastructure.database.models import LoanApplicationRecord, RiskAssessmentRecord
from risk_engine.domain.models import LoanApplication, LoanType, RiskAssessment, RiskLevel


class LoanApplicationRepository:
    """Repository for loan applications"""

    def __init__(self, db: Session):
        self.db = db

    def create(self, application: LoanApplication) -> LoanApplicationRecord:
        """Persist application; id and timestamps come from the database"""
        record = LoanApplicationRecord(
            applicant_name=application.applicant_name,
            email=application.email,
            age=application.age,
            annual_income=application.annual_income,
            loan_amount=application.loan_amount,
            loan_type=application.loan_type.value,
            loan_term_months=application.loan_term_months,
            credit_score=application.credit_score,
            employment_years=application.employment_years,
            monthly_debt_payments=application.monthly_debt_payments,
            down_payment=application.down_payment,
            has_collateral=application.has_collateral,
            collateral_value=application.collateral_value,
        )
        self.db.add(record)
        self.db.flush()  # Get ID without committing
        return record

    def get_by_id(self, application_id: int) -> Optional[LoanApplicationRecord]:
        return self.db.get(LoanApplicationRecord, application_id)

    def find_by_email(self, email: str) -> List[LoanApplicationRecord]:
        return (
            self.db.query(LoanApplicationRecord)
            .filter(LoanApplicationRecord.email == email)
            .order_by(LoanApplicationRecord.id)
            .all()
        )


class RiskAssessmentRepository:
    """Repository for risk assessments"""

    def __init__(self, db: Session):
        self.db = db

    def create(self, assessment: RiskAssessment) -> RiskAssessmentRecord:
        """Persist assessment; id and created_at come from the database"""
        record = RiskAssessmentRecord(
            loan_application_id=assessment.loan_application_id,
            risk_score=assessment.risk_score,
            risk_level=assessment.risk_level.value,
            approval_recommendation=assessment.approval_recommendation,
            recommended_interest_rate=assessment.recommended_interest_rate,
            debt_to_income_ratio=assessment.debt_to_income_ratio,
            loan_to_value_ratio=assessment.loan_to_value_ratio,
            credit_score_factor=assessment.credit_score_factor,
            income_factor=assessment.income_factor,
            employment_factor=assessment.employment_factor,
            collateral_factor=assessment.collateral_factor,
            loan_type_factor=assessment.loan_type_factor,
            assessment_notes=assessment.assessment_notes,
        )
        self.db.add(record)
        self.db.flush()
        return record

    def get_by_id(self, assessment_id: int) -> Optional[RiskAssessmentRecord]:
        return self.db.get(RiskAssessmentRecord, assessment_id)

    def iter_all(self, batch_size: int = 100) -> Iterator[RiskAssessmentRecord]:
        """Stream every assessment without loading the table into memory"""
        return self.db.query(RiskAssessmentRecord).order_by(RiskAssessmentRecord.id).yield_per(batch_size)

    def find_latest_by_loan_application_id(self, loan_application_id: int) -> Optional[RiskAssessmentRecord]:
        return (
            self.db.query(RiskAssessmentRecord)
            .filter(RiskAssessmentRecord.loan_application_id == loan_application_id)
            .order_by(RiskAssessmentRecord.id.desc())
            .first()
        )

    def find_by_risk_level(self, risk_level: RiskLevel) -> List[RiskAssessmentRecord]:
        return (
            self.db.query(RiskAssessmentRecord)
            .filter(RiskAssessmentRecord.risk_level == risk_level.value)
            .order_by(RiskAssessmentRecord.id)
            .all()
        )

    def find_by_approval(self, approved: bool) -> List[RiskAssessmentRecord]:
        return (
            self.db.query(RiskAssessmentRecord)
            .filter(RiskAssessmentRecord.approval_recommendation.is_(approved))
            .order_by(RiskAssessmentRecord.id)
            .all()
        )

    def find_by_score_between(self, min_score: int, max_score: int) -> List[RiskAssessmentRecord]:
        return (
            self.db.query(RiskAssessmentRecord)
            .filter(RiskAssessmentRecord.risk_score >= min_score, RiskAssessmentRecord.risk_score <= max_score)
            .order_by(RiskAssessmentRecord.id)
            .all()
        )

    def find_matching(
        self,
        risk_level: Optional[RiskLevel] = None,
        approved: Optional[bool] = None,
        min_score: Optional[int] = None,
        max_score: Optional[int] = None,
    ) -> List[RiskAssessmentRecord]:
        """All given criteria must hold; omitted ones are not applied"""
        query = self.db.query(RiskAssessmentRecord)
        if risk_level is not None:
            query = query.filter(RiskAssessmentRecord.risk_level == risk_level.value)
        if approved is not None:
            query = query.filter(RiskAssessmentRecord.approval_recommendation.is_(approved))
        if min_score is not None:
            query = query.filter(RiskAssessmentRecord.risk_score >= min_score)
        if max_score is not None:
            query = query.filter(RiskAssessmentRecord.risk_score <= max_score)
        return query.order_by(RiskAssessmentRecord.id).all()

    # Aggregates

    def count(self) -> int:
        return self.db.query(func.count(RiskAssessmentRecord.id)).scalar() or 0

    def count_approved(self) -> int:
        return (
            self.db.query(func.count(RiskAssessmentRecord.id))
            .filter(RiskAssessmentRecord.approval_recommendation.is_(True))
            .scalar()
            or 0
        )

    def count_rejected(self) -> int:
        return (
            self.db.query(func.count(RiskAssessmentRecord.id))
            .filter(RiskAssessmentRecord.approval_recommendation.is_(False))
            .scalar()
            or 0
        )

    def average_risk_score(self) -> Optional[float]:
        """AVG(risk_score), None on an empty table"""
        value = self.db.query(func.avg(RiskAssessmentRecord.risk_score)).scalar()
        return float(value) if value is not None else None


def to_loan_application(record: LoanApplicationRecord) -> LoanApplication:
    """Map ORM row to domain model"""
    return LoanApplication(
        id=record.id,
        applicant_name=record.applicant_name,
        email=record.email,
        age=record.age,
        annual_income=record.annual_income,
        loan_amount=record.loan_amount,
        loan_type=LoanType(record.loan_type),
        loan_term_months=record.loan_term_months,
        credit_score=record.credit_score,
        employment_years=record.employment_years,
        monthly_debt_payments=record.monthly_debt_payments,
        down_payment=record.down_payment,
        has_collateral=bool(record.has_collateral),
        collateral_value=record.collateral_value,
        created_at=record.created_at,
        updated_at=record.updated_at,
    )


def to_risk_assessment(record: RiskAssessmentRecord) -> RiskAssessment:
    """Map ORM row to domain model"""
    return RiskAssessment(
        id=record.id,
        loan_application_id=record.loan_application_id,
        risk_score=record.risk_score,
        risk_level=RiskLevel(record.risk_level),
        approval_recommendation=record.approval_recommendation,
        recommended_interest_rate=record.recommended_interest_rate,
        debt_to_income_ratio=record.debt_to_income_ratio,
        loan_to_value_ratio=record.loan_to_value_ratio,
        credit_score_factor=record.credit_score_factor,
        income_factor=record.income_factor,
        employment_factor=record.employment_factor,
        collateral_factor=record.collateral_factor,
        loan_type_factor=record.loan_type_factor,
        assessment_notes=record.assessment_notes,
        created_at=record.created_at,
    )
