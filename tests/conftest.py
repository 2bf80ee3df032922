"""Pytest fixtures for testing"""

import os

# Point the app at a throwaway database before anything reads settings
TEST_DATABASE_URL = "sqlite:///./test.db"
os.environ["DATABASE_URL"] = TEST_DATABASE_URL
os.environ["AUTO_CREATE_TABLES"] = "false"

import pytest
from datetime import date, datetime
from decimal import Decimal
from typing import Generator
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session
from financex.api.main import create_app
from financex.infrastructure.database.models import Base
from financex.infrastructure.database.session import engine, SessionLocal, get_db
from financex.domain.models import Transaction, Debt, DebtPayment


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
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
def june_10() -> date:
    """Day 10 of a 30-day month"""
    return date(2024, 6, 10)


@pytest.fixture
def sample_transactions() -> list[Transaction]:
    """June 2024 spending of 2000 over the first ten days, plus noise from May"""
    created = datetime(2024, 6, 10, 12, 0)
    transactions = [
        Transaction(
            id=f"exp_{day}",
            type="expense",
            category="groceries",
            date=date(2024, 6, day),
            description="Supermarket",
            value=Decimal("400"),
            created_at=created,
        )
        for day in (1, 3, 5, 7, 9)
    ]

    # Previous month must not count toward June
    transactions.append(
        Transaction(
            id="may_rent",
            type="expense",
            category="fixed_bills",
            date=date(2024, 5, 31),
            description="Rent",
            value=Decimal("1500"),
            created_at=created,
        )
    )
    transactions.append(
        Transaction(
            id="may_salary",
            type="income",
            category="salary",
            date=date(2024, 5, 5),
            description="Salary",
            value=Decimal("5000"),
            created_at=created,
        )
    )
    return transactions


@pytest.fixture
def sample_debt() -> Debt:
    """Car loan with 300 already paid"""
    return Debt(
        id="debt_car",
        name="Car loan",
        total_value=Decimal("1200"),
        monthly_installment=Decimal("100"),
        paid_value=Decimal("300"),
        start_date=date(2024, 1, 1),
        created_at=datetime(2024, 1, 1, 9, 0),
    )


@pytest.fixture
def sample_payment(sample_debt: Debt) -> DebtPayment:
    """A 100 payment already counted in sample_debt.paid_value"""
    return DebtPayment(
        id="pay_jan",
        debt_id=sample_debt.id,
        value=Decimal("100"),
        date=date(2024, 1, 15),
        created_at=datetime(2024, 1, 15, 10, 0),
    )
