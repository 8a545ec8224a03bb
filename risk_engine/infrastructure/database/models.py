"""SQLAlchemy ORM models for loan applications and risk assessments"""

from sqlalchemy import Column, Boolean, DateTime, ForeignKey, Integer, Numeric, Text
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()

MONEY = Numeric(15, 2)
RATIO = Numeric(30, 4)


class LoanApplicationRecord(Base):
    """Submitted loan application"""

    __tablename__ = "loan_applications"

    id = Column(Integer, primary_key=True, autoincrement=True)
    applicant_name = Column(Text, nullable=False)
    email = Column(Text, nullable=False, index=True)
    age = Column(Integer, nullable=True)
    annual_income = Column(MONEY, nullable=True)
    loan_amount = Column(MONEY, nullable=True)
    loan_type = Column(Text, nullable=False)
    loan_term_months = Column(Integer, nullable=True)
    credit_score = Column(Integer, nullable=True)
    employment_years = Column(Integer, nullable=True)
    monthly_debt_payments = Column(MONEY, nullable=True)
    down_payment = Column(MONEY, nullable=True)
    has_collateral = Column(Boolean, nullable=False, default=False)
    collateral_value = Column(MONEY, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    assessments = relationship("RiskAssessmentRecord", back_populates="loan_application")


class RiskAssessmentRecord(Base):
    """Persisted output of the scoring engine"""

    __tablename__ = "risk_assessments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    loan_application_id = Column(
        Integer,
        ForeignKey("loan_applications.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    risk_score = Column(Integer, nullable=False)
    risk_level = Column(Text, nullable=False, index=True)
    approval_recommendation = Column(Boolean, nullable=True)
    recommended_interest_rate = Column(Numeric(5, 2), nullable=False)
    debt_to_income_ratio = Column(RATIO, nullable=False)
    loan_to_value_ratio = Column(RATIO, nullable=False)
    credit_score_factor = Column(Integer, nullable=False)
    income_factor = Column(Integer, nullable=False)
    employment_factor = Column(Integer, nullable=False)
    collateral_factor = Column(Integer, nullable=False)
    loan_type_factor = Column(Integer, nullable=False)
    assessment_notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    loan_application = relationship("LoanApplicationRecord", back_populates="assessments")
