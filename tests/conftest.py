"""Pytest fixtures for testing"""

import pytest
from decimal import Decimal
from typing import Callable, Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from risk_engine.api.main import create_app
from risk_engine.infrastructure.database.models import Base
from risk_engine.infrastructure.database.session import get_db
from risk_engine.domain.models import LoanApplication, LoanType


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db: Session) -> TestClient:
    """Create FastAPI test client with test database"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app)


@pytest.fixture
def make_application() -> Callable[..., LoanApplication]:
    """Factory for applications with every optional field absent unless given"""

    def _make(**overrides) -> LoanApplication:
        fields = {
            "applicant_name": "Jane Roe",
            "email": "jane.roe@example.com",
            "loan_type": LoanType.PERSONAL,
        }
        fields.update(overrides)
        return LoanApplication(**fields)

    return _make


@pytest.fixture
def prime_mortgage(make_application) -> LoanApplication:
    """Lowest-risk profile: every factor in its best band"""
    return make_application(
        applicant_name="John Doe",
        email="john.doe@example.com",
        age=42,
        annual_income=Decimal("300000"),
        loan_amount=Decimal("100000"),
        loan_type=LoanType.MORTGAGE,
        loan_term_months=360,
        credit_score=780,
        employment_years=8,
        monthly_debt_payments=Decimal("1500"),
        down_payment=Decimal("25000"),
        has_collateral=True,
        collateral_value=Decimal("150000"),
    )


@pytest.fixture
def mortgage_payload() -> dict:
    """JSON body for a typical mid-risk mortgage application"""
    return {
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
