"""Domain models - pure Python dataclasses representing business entities"""

import enum
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

from risk_engine.domain.amortization import calculate_monthly_payment


class LoanType(str, enum.Enum):
    """Closed set of loan products the engine knows how to price"""

    PERSONAL = "PERSONAL"
    MORTGAGE = "MORTGAGE"
    AUTO = "AUTO"
    BUSINESS = "BUSINESS"
    STUDENT = "STUDENT"
    CREDIT_CARD = "CREDIT_CARD"

    @property
    def display_name(self) -> str:
        return _LOAN_TYPE_NAMES[self]


_LOAN_TYPE_NAMES = {
    LoanType.PERSONAL: "Personal Loan",
    LoanType.MORTGAGE: "Mortgage Loan",
    LoanType.AUTO: "Auto Loan",
    LoanType.BUSINESS: "Business Loan",
    LoanType.STUDENT: "Student Loan",
    LoanType.CREDIT_CARD: "Credit Card",
}


class RiskLevel(str, enum.Enum):
    """Contiguous score bands over [1, 1000]"""

    LOW = "LOW"
    MODERATE = "MODERATE"
    HIGH = "HIGH"
    VERY_HIGH = "VERY_HIGH"

    @property
    def display_name(self) -> str:
        return _RISK_LEVEL_BANDS[self][0]

    @property
    def min_score(self) -> int:
        return _RISK_LEVEL_BANDS[self][1]

    @property
    def max_score(self) -> int:
        return _RISK_LEVEL_BANDS[self][2]

    @classmethod
    def from_score(cls, score: int) -> "RiskLevel":
        """Band lookup; anything outside [1, 1000] falls back to VERY_HIGH"""
        for level in cls:
            if level.min_score <= score <= level.max_score:
                return level
        return cls.VERY_HIGH


_RISK_LEVEL_BANDS = {
    RiskLevel.LOW: ("Low Risk", 1, 300),
    RiskLevel.MODERATE: ("Moderate Risk", 301, 500),
    RiskLevel.HIGH: ("High Risk", 501, 700),
    RiskLevel.VERY_HIGH: ("Very High Risk", 701, 1000),
}


@dataclass(frozen=True)
class LoanApplication:
    """Loan application submitted for underwriting"""

    applicant_name: str
    email: str
    loan_type: LoanType
    age: Optional[int] = None
    annual_income: Optional[Decimal] = None
    loan_amount: Optional[Decimal] = None
    loan_term_months: Optional[int] = None
    credit_score: Optional[int] = None
    employment_years: Optional[int] = None
    monthly_debt_payments: Optional[Decimal] = None
    down_payment: Optional[Decimal] = None
    has_collateral: bool = False
    collateral_value: Optional[Decimal] = None
    # Assigned by the store
    id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class RiskAssessment:
    """Output of the scoring engine; never mutated after creation"""

    risk_score: int
    risk_level: RiskLevel
    approval_recommendation: bool
    recommended_interest_rate: Decimal
    debt_to_income_ratio: Decimal
    loan_to_value_ratio: Decimal
    credit_score_factor: int
    income_factor: int
    employment_factor: int
    collateral_factor: int
    loan_type_factor: int
    assessment_notes: str
    loan_application_id: Optional[int] = None
    # Assigned by the store
    id: Optional[int] = None
    created_at: Optional[datetime] = None

    def monthly_payment(self, loan_amount: Optional[Decimal], term_months: Optional[int]) -> Decimal:
        """Level monthly payment for `loan_amount` at the recommended rate"""
        return calculate_monthly_payment(self.recommended_interest_rate, loan_amount, term_months)


@dataclass(frozen=True)
class OverviewStatistics:
    """Aggregate view over all stored assessments"""

    total_assessments: int
    approved_assessments: int
    rejected_assessments: int
    pending_assessments: int
    approval_rate: float
    rejection_rate: float
    average_risk_score: float
