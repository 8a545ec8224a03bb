"""Risk scoring engine - core business logic for underwriting decisions"""

from decimal import Decimal
from typing import Optional

from risk_engine.domain.exceptions import InvalidInputError
from risk_engine.domain.models import LoanApplication, LoanType, RiskAssessment, RiskLevel
from risk_engine.utils.decimal_utils import divide, quantize_half_up

MAX_DTI_RATIO = Decimal("0.43")  # 43% max debt-to-income
EXCELLENT_CREDIT_SCORE = 750
POOR_CREDIT_SCORE = 600

# Lower factor = lower risk. Secured products score better than unsecured ones.
LOAN_TYPE_FACTORS = {
    LoanType.MORTGAGE: 50,
    LoanType.AUTO: 75,
    LoanType.STUDENT: 100,
    LoanType.BUSINESS: 125,
    LoanType.PERSONAL: 150,
    LoanType.CREDIT_CARD: 175,
}

# Annual base rate in percent
BASE_RATES = {
    LoanType.MORTGAGE: Decimal("3.5"),
    LoanType.AUTO: Decimal("4.0"),
    LoanType.STUDENT: Decimal("5.0"),
    LoanType.BUSINESS: Decimal("6.0"),
    LoanType.PERSONAL: Decimal("8.0"),
    LoanType.CREDIT_CARD: Decimal("15.0"),
}


def _band(value, thresholds, default: int) -> int:
    """Return the points of the first (threshold, points) pair with value >= threshold"""
    for threshold, points in thresholds:
        if value >= threshold:
            return points
    return default


def calculate_credit_score_factor(credit_score: Optional[int]) -> int:
    """
    Score bands:
    - 750+: excellent
    - 700-749: good
    - 650-699: fair
    - 600-649: poor
    - <600: very poor
    """
    if credit_score is None:
        return 200
    return _band(credit_score, [(750, 50), (700, 100), (650, 150), (600, 200)], 250)


def calculate_income_factor(annual_income: Optional[Decimal], loan_amount: Optional[Decimal]) -> int:
    """Income-to-loan ratio: 3x income or better is the safest band"""
    if annual_income is None or not loan_amount:
        return 200

    ratio = divide(annual_income, loan_amount)
    return _band(
        ratio,
        [(Decimal("3.0"), 50), (Decimal("2.0"), 100), (Decimal("1.5"), 150), (Decimal("1.0"), 200)],
        250,
    )


def calculate_employment_factor(employment_years: Optional[int]) -> int:
    if employment_years is None:
        return 150
    return _band(employment_years, [(5, 50), (2, 100), (1, 150)], 200)


def calculate_collateral_factor(
    has_collateral: bool,
    collateral_value: Optional[Decimal],
    loan_amount: Optional[Decimal],
) -> int:
    """Collateral coverage of the loan; only counted when flagged and valued"""
    if not has_collateral or collateral_value is None or not loan_amount:
        return 150

    ratio = divide(collateral_value, loan_amount)
    return _band(ratio, [(Decimal("1.5"), 25), (Decimal("1.2"), 50), (Decimal("1.0"), 75)], 100)


def calculate_loan_type_factor(loan_type: LoanType) -> int:
    return LOAN_TYPE_FACTORS[loan_type]


def calculate_debt_to_income_ratio(
    annual_income: Optional[Decimal],
    monthly_debt_payments: Optional[Decimal],
) -> Decimal:
    """Monthly debt over monthly income, 0 when either side is unknown"""
    if annual_income is None or monthly_debt_payments is None:
        return Decimal("0")

    monthly_income = divide(annual_income, Decimal(12))
    if monthly_income == 0:
        return Decimal("0")

    return divide(monthly_debt_payments, monthly_income)


def calculate_loan_to_value_ratio(loan_amount: Optional[Decimal], down_payment: Optional[Decimal]) -> Decimal:
    """Loan over (loan + down payment), the latter standing in for property value"""
    if loan_amount is None:
        return Decimal("0")

    property_value = loan_amount
    if down_payment is not None:
        property_value = loan_amount + down_payment

    if property_value == 0:
        return Decimal("1")

    return divide(loan_amount, property_value)


def determine_approval(risk_score: int, debt_to_income_ratio: Decimal) -> bool:
    """
    Approval policy:
    - <= 300: approve
    - 301-500: approve only with DTI at or under 43%
    - > 500: reject
    """
    if risk_score <= 300:
        return True
    if risk_score <= 500:
        return debt_to_income_ratio <= MAX_DTI_RATIO
    return False


def calculate_interest_rate(risk_score: int, loan_type: LoanType) -> Decimal:
    """Base rate for the product plus a premium banded by risk score"""
    if risk_score > 700:
        premium = Decimal("8.0")
    elif risk_score > 500:
        premium = Decimal("5.0")
    elif risk_score > 300:
        premium = Decimal("2.0")
    else:
        premium = Decimal("1.0")

    return quantize_half_up(BASE_RATES[loan_type] + premium, 2)


def generate_assessment_notes(
    application: LoanApplication,
    risk_score: int,
    risk_level: RiskLevel,
    debt_to_income_ratio: Decimal,
) -> str:
    lines = [
        "Risk Assessment Summary:",
        f"- Overall Risk Score: {risk_score} ({risk_level.display_name})",
    ]

    credit_score = application.credit_score
    if credit_score is not None:
        if credit_score >= EXCELLENT_CREDIT_SCORE:
            lines.append(f"- Excellent credit score ({credit_score})")
        elif credit_score < POOR_CREDIT_SCORE:
            lines.append(f"- Poor credit score ({credit_score}) - major risk factor")

    if debt_to_income_ratio > MAX_DTI_RATIO:
        dti_percent = quantize_half_up(debt_to_income_ratio * 100, 1)
        lines.append(f"- High debt-to-income ratio ({dti_percent}%)")

    if application.has_collateral:
        lines.append("- Loan secured with collateral")
    else:
        lines.append("- Unsecured loan increases risk")

    return "\n".join(lines) + "\n"


def compute_assessment(application: Optional[LoanApplication]) -> RiskAssessment:
    """
    Main entry point: score a loan application.

    Pure function. The result carries no id or timestamp; those are
    assigned when the assessment is persisted.

    Raises:
        InvalidInputError: application is None
    """
    if application is None:
        raise InvalidInputError("Loan application cannot be null")

    credit_score_factor = calculate_credit_score_factor(application.credit_score)
    income_factor = calculate_income_factor(application.annual_income, application.loan_amount)
    employment_factor = calculate_employment_factor(application.employment_years)
    collateral_factor = calculate_collateral_factor(
        application.has_collateral,
        application.collateral_value,
        application.loan_amount,
    )
    loan_type_factor = calculate_loan_type_factor(application.loan_type)

    risk_score = credit_score_factor + income_factor + employment_factor + collateral_factor + loan_type_factor
    risk_level = RiskLevel.from_score(risk_score)

    debt_to_income_ratio = calculate_debt_to_income_ratio(
        application.annual_income,
        application.monthly_debt_payments,
    )
    loan_to_value_ratio = calculate_loan_to_value_ratio(application.loan_amount, application.down_payment)

    return RiskAssessment(
        loan_application_id=application.id,
        risk_score=risk_score,
        risk_level=risk_level,
        approval_recommendation=determine_approval(risk_score, debt_to_income_ratio),
        recommended_interest_rate=calculate_interest_rate(risk_score, application.loan_type),
        debt_to_income_ratio=debt_to_income_ratio,
        loan_to_value_ratio=loan_to_value_ratio,
        credit_score_factor=credit_score_factor,
        income_factor=income_factor,
        employment_factor=employment_factor,
        collateral_factor=collateral_factor,
        loan_type_factor=loan_type_factor,
        assessment_notes=generate_assessment_notes(application, risk_score, risk_level, debt_to_income_ratio),
    )
