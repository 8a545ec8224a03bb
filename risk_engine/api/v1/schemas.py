"""Pydantic schemas for API request/response validation"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from risk_engine.domain.models import LoanApplication, LoanType, RiskLevel


class LoanApplicationRequest(BaseModel):
    """Request body for POST /v1/risk-assessment/evaluate and /v1/loan-applications"""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "applicant_name": "John Doe",
                "email": "john.doe@email.com",
                "age": 35,
                "annual_income": "75000",
                "loan_amount": "250000",
                "loan_type": "MORTGAGE",
                "loan_term_months": 360,
                "credit_score": 720,
                "employment_years": 5,
                "monthly_debt_payments": "1200",
                "down_payment": "50000",
                "has_collateral": True,
                "collateral_value": "300000",
            }
        }
    )

    applicant_name: str = Field(..., min_length=1, description="Full name of the loan applicant")
    email: str = Field(..., min_length=3, description="Email address of the applicant")
    age: Optional[int] = Field(None, ge=18, le=100, description="Age in years")
    annual_income: Optional[Decimal] = Field(None, ge=0, description="Annual income in USD")
    loan_amount: Optional[Decimal] = Field(None, gt=0, description="Requested loan amount in USD")
    loan_type: LoanType = Field(..., description="Type of loan being requested")
    loan_term_months: Optional[int] = Field(None, ge=1, description="Loan term in months")
    credit_score: Optional[int] = Field(None, ge=300, le=850, description="Credit score")
    employment_years: Optional[int] = Field(None, ge=0, description="Years in current employment")
    monthly_debt_payments: Optional[Decimal] = Field(None, ge=0, description="Total monthly debt payments in USD")
    down_payment: Optional[Decimal] = Field(None, ge=0, description="Down payment in USD")
    has_collateral: bool = Field(False, description="Whether the loan has collateral")
    collateral_value: Optional[Decimal] = Field(None, ge=0, description="Value of collateral in USD")

    def to_domain(self) -> LoanApplication:
        return LoanApplication(**self.model_dump())


class LoanApplicationResponse(BaseModel):
    """Stored loan application"""

    model_config = ConfigDict(from_attributes=True)

    id: int
    applicant_name: str
    email: str
    age: Optional[int] = None
    annual_income: Optional[Decimal] = None
    loan_amount: Optional[Decimal] = None
    loan_type: LoanType
    loan_term_months: Optional[int] = None
    credit_score: Optional[int] = None
    employment_years: Optional[int] = None
    monthly_debt_payments: Optional[Decimal] = None
    down_payment: Optional[Decimal] = None
    has_collateral: bool
    collateral_value: Optional[Decimal] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class RiskAssessmentResponse(BaseModel):
    """Stored risk assessment"""

    model_config = ConfigDict(from_attributes=True)

    id: int
    loan_application_id: Optional[int] = None
    risk_score: int = Field(..., description="Sum of the five risk factors (lower is better)")
    risk_level: RiskLevel
    approval_recommendation: Optional[bool] = None
    recommended_interest_rate: Decimal = Field(..., description="Annual rate in percent")
    debt_to_income_ratio: Decimal
    loan_to_value_ratio: Decimal
    credit_score_factor: int
    income_factor: int
    employment_factor: int
    collateral_factor: int
    loan_type_factor: int
    assessment_notes: Optional[str] = None
    created_at: Optional[datetime] = None


class MonthlyPaymentResponse(BaseModel):
    """Response for GET /v1/risk-assessment/assessments/{id}/monthly-payment"""

    assessment_id: int
    loan_amount: Decimal
    term_months: int
    interest_rate: Decimal
    monthly_payment: Decimal


class StatisticsOverviewResponse(BaseModel):
    """Response for GET /v1/statistics/overview"""

    model_config = ConfigDict(from_attributes=True)

    total_assessments: int
    approved_assessments: int
    rejected_assessments: int
    pending_assessments: int
    approval_rate: float
    rejection_rate: float
    average_risk_score: float
