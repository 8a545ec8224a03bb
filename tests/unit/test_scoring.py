"""Unit tests for risk scoring logic"""

import pytest
from decimal import Decimal
from risk_engine.domain.models import LoanType, RiskLevel
from risk_engine.domain.scoring import (
    BASE_RATES,
    LOAN_TYPE_FACTORS,
    calculate_collateral_factor,
    calculate_credit_score_factor,
    calculate_debt_to_income_ratio,
    calculate_employment_factor,
    calculate_income_factor,
    calculate_interest_rate,
    calculate_loan_to_value_ratio,
    compute_assessment,
    determine_approval,
)
from risk_engine.domain.exceptions import InvalidInputError


@pytest.mark.parametrize(
    "credit_score, expected",
    [(850, 50), (750, 50), (749, 100), (700, 100), (699, 150), (650, 150), (649, 200), (600, 200), (599, 250), (300, 250), (None, 200)],
)
def test_credit_score_factor_bands(credit_score, expected):
    assert calculate_credit_score_factor(credit_score) == expected


@pytest.mark.parametrize(
    "income, loan, expected",
    [
        ("300000", "100000", 50),  # 3.0x
        ("200000", "100000", 100),
        ("150000", "100000", 150),
        ("100000", "100000", 200),
        ("99994", "100000", 250),  # 0.99994 stays under 1.0
        ("99995", "100000", 200),  # 0.99995 rounds up to 1.0000
    ],
)
def test_income_factor_bands(income, loan, expected):
    assert calculate_income_factor(Decimal(income), Decimal(loan)) == expected


def test_income_factor_ratio_rounds_half_up_before_banding():
    """2.99995 rounds to 3.0000 at 4 decimal places and lands in the best band"""
    assert calculate_income_factor(Decimal("299995"), Decimal("100000")) == 50
    assert calculate_income_factor(Decimal("299994"), Decimal("100000")) == 100


def test_income_factor_missing_inputs():
    assert calculate_income_factor(None, Decimal("100000")) == 200
    assert calculate_income_factor(Decimal("100000"), None) == 200
    assert calculate_income_factor(Decimal("100000"), Decimal("0")) == 200


@pytest.mark.parametrize("years, expected", [(10, 50), (5, 50), (4, 100), (2, 100), (1, 150), (0, 200), (None, 150)])
def test_employment_factor_bands(years, expected):
    assert calculate_employment_factor(years) == expected


def test_collateral_factor_bands():
    loan = Decimal("100000")
    assert calculate_collateral_factor(True, Decimal("150000"), loan) == 25
    assert calculate_collateral_factor(True, Decimal("120000"), loan) == 50
    assert calculate_collateral_factor(True, Decimal("100000"), loan) == 75
    assert calculate_collateral_factor(True, Decimal("99994"), loan) == 100
    assert calculate_collateral_factor(True, Decimal("99995"), loan) == 75


def test_collateral_factor_requires_flag_and_values():
    loan = Decimal("100000")
    assert calculate_collateral_factor(False, Decimal("500000"), loan) == 150
    assert calculate_collateral_factor(True, None, loan) == 150
    assert calculate_collateral_factor(True, Decimal("500000"), None) == 150


def test_loan_type_tables_cover_every_loan_type():
    """Adding a LoanType without a factor and base rate must fail here"""
    assert set(LOAN_TYPE_FACTORS) == set(LoanType)
    assert set(BASE_RATES) == set(LoanType)


def test_debt_to_income_ratio():
    # 60000 / 12 = 5000 monthly; 2000 / 5000 = 0.4
    assert calculate_debt_to_income_ratio(Decimal("60000"), Decimal("2000")) == Decimal("0.4000")


def test_debt_to_income_ratio_rounds_half_up():
    # 36000 / 12 = 3000 monthly, repeating quotients round at the 4th place
    assert calculate_debt_to_income_ratio(Decimal("36000"), Decimal("1000")) == Decimal("0.3333")
    assert calculate_debt_to_income_ratio(Decimal("36000"), Decimal("2000")) == Decimal("0.6667")


def test_debt_to_income_ratio_defaults_to_zero():
    assert calculate_debt_to_income_ratio(None, Decimal("1000")) == 0
    assert calculate_debt_to_income_ratio(Decimal("50000"), None) == 0
    assert calculate_debt_to_income_ratio(Decimal("0"), Decimal("1000")) == 0


def test_loan_to_value_ratio():
    assert calculate_loan_to_value_ratio(Decimal("200000"), Decimal("50000")) == Decimal("0.8000")
    assert calculate_loan_to_value_ratio(Decimal("200000"), None) == Decimal("1")
    assert calculate_loan_to_value_ratio(None, Decimal("50000")) == Decimal("0")
    assert calculate_loan_to_value_ratio(Decimal("0"), None) == Decimal("1")


@pytest.mark.parametrize(
    "score, dti, expected",
    [
        (300, Decimal("0.90"), True),  # Low risk approves regardless of DTI
        (450, Decimal("0.50"), False),
        (450, Decimal("0.40"), True),
        (450, Decimal("0.43"), True),  # Boundary is inclusive
        (500, Decimal("0.4301"), False),
        (501, Decimal("0"), False),
    ],
)
def test_determine_approval(score, dti, expected):
    assert determine_approval(score, dti) is expected


def test_interest_rate_examples():
    assert calculate_interest_rate(250, LoanType.MORTGAGE) == Decimal("4.50")
    assert calculate_interest_rate(800, LoanType.CREDIT_CARD) == Decimal("23.00")


@pytest.mark.parametrize("score, premium", [(300, "1.0"), (301, "2.0"), (500, "2.0"), (501, "5.0"), (700, "5.0"), (701, "8.0")])
def test_interest_rate_premium_boundaries(score, premium):
    expected = BASE_RATES[LoanType.AUTO] + Decimal(premium)
    assert calculate_interest_rate(score, LoanType.AUTO) == expected


def test_compute_assessment_best_case(prime_mortgage):
    """Every factor in its best band: 50+50+50+25+50"""
    assessment = compute_assessment(prime_mortgage)

    assert assessment.credit_score_factor == 50
    assert assessment.income_factor == 50
    assert assessment.employment_factor == 50
    assert assessment.collateral_factor == 25
    assert assessment.loan_type_factor == 50
    assert assessment.risk_score == 225
    assert assessment.risk_level == RiskLevel.LOW
    assert assessment.approval_recommendation is True
    assert assessment.recommended_interest_rate == Decimal("4.50")
    assert assessment.debt_to_income_ratio == Decimal("0.0600")
    assert assessment.loan_to_value_ratio == Decimal("0.8000")


def test_compute_assessment_all_optional_fields_missing(make_application):
    """Fallbacks only: 200+200+150+150+175"""
    assessment = compute_assessment(make_application(loan_type=LoanType.CREDIT_CARD))

    assert assessment.risk_score == 875
    assert assessment.risk_level == RiskLevel.VERY_HIGH
    assert assessment.approval_recommendation is False
    assert assessment.recommended_interest_rate == Decimal("23.00")
    assert assessment.debt_to_income_ratio == 0
    assert assessment.loan_to_value_ratio == 0


def test_compute_assessment_score_is_sum_of_factors(make_application):
    application = make_application(
        annual_income=Decimal("90000"),
        loan_amount=Decimal("40000"),
        loan_type=LoanType.AUTO,
        credit_score=680,
        employment_years=3,
        monthly_debt_payments=Decimal("900"),
    )
    assessment = compute_assessment(application)

    factors = (
        assessment.credit_score_factor
        + assessment.income_factor
        + assessment.employment_factor
        + assessment.collateral_factor
        + assessment.loan_type_factor
    )
    assert assessment.risk_score == factors
    # 150 + 100 (2.25x) + 100 + 150 + 75
    assert assessment.risk_score == 575
    assert assessment.risk_level == RiskLevel.HIGH
    assert assessment.approval_recommendation is False


def test_compute_assessment_moderate_approval_depends_on_dti(make_application):
    base = dict(
        annual_income=Decimal("120000"),
        loan_amount=Decimal("50000"),
        loan_type=LoanType.STUDENT,
        credit_score=720,
        employment_years=2,
    )
    # 100 + 100 (2.4x) + 100 + 25 (1.5x collateral) + 100
    base.update(has_collateral=True, collateral_value=Decimal("75000"))

    low_debt = compute_assessment(make_application(monthly_debt_payments=Decimal("4000"), **base))
    high_debt = compute_assessment(make_application(monthly_debt_payments=Decimal("5000"), **base))

    assert low_debt.risk_score == high_debt.risk_score == 425
    assert low_debt.debt_to_income_ratio == Decimal("0.4000")
    assert low_debt.approval_recommendation is True
    assert high_debt.debt_to_income_ratio == Decimal("0.5000")
    assert high_debt.approval_recommendation is False


def test_compute_assessment_is_deterministic(prime_mortgage):
    assert compute_assessment(prime_mortgage) == compute_assessment(prime_mortgage)


def test_compute_assessment_leaves_store_fields_unset(prime_mortgage):
    assessment = compute_assessment(prime_mortgage)
    assert assessment.id is None
    assert assessment.created_at is None
    assert assessment.loan_application_id is None


def test_compute_assessment_links_persisted_application(make_application):
    assessment = compute_assessment(make_application(id=42))
    assert assessment.loan_application_id == 42


def test_compute_assessment_rejects_missing_application():
    with pytest.raises(InvalidInputError):
        compute_assessment(None)


def test_assessment_notes_excellent_credit_and_collateral(prime_mortgage):
    notes = compute_assessment(prime_mortgage).assessment_notes

    assert "Overall Risk Score: 225 (Low Risk)" in notes
    assert "Excellent credit score (780)" in notes
    assert "Loan secured with collateral" in notes
    assert "debt-to-income" not in notes


def test_assessment_notes_poor_credit_high_dti_unsecured(make_application):
    application = make_application(
        credit_score=580,
        annual_income=Decimal("60000"),
        monthly_debt_payments=Decimal("3000"),
    )
    notes = compute_assessment(application).assessment_notes

    assert "Poor credit score (580) - major risk factor" in notes
    assert "High debt-to-income ratio (60.0%)" in notes
    assert "Unsecured loan increases risk" in notes
