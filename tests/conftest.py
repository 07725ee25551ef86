"""Pytest fixtures for testing"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")

import pytest
from typing import Generator
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker, Session
from pension_gateway.api.main import create_app
from pension_gateway.domain.models import ContractConfig, ContractPlan
from pension_gateway.infrastructure.database.models import Base
from pension_gateway.infrastructure.database.session import build_engine, get_db


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = build_engine(TEST_DATABASE_URL)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

WALLET = "0x" + "1" * 40
OTHER_WALLET = "0x" + "2" * 40
USDC = 1_000_000  # minor units per USDC


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
def contract_config() -> ContractConfig:
    """Contract parameters as deployed: 30-day interval, 10 USDC minimum"""
    return ContractConfig(
        min_deposit_minor=10 * USDC,
        interval_seconds=30 * 86_400,
        min_duration=12,
        max_duration=120,
    )


@pytest.fixture
def sample_plans() -> list[ContractPlan]:
    """One running, one finished and one deactivated plan"""
    return [
        ContractPlan(
            plan_id=1,
            beneficiary=WALLET,
            payment_amount_minor=100 * USDC,
            payments_remaining=11,
            last_paid=1_700_000_000,
            active=True,
        ),
        ContractPlan(
            plan_id=2,
            beneficiary=WALLET,
            payment_amount_minor=50 * USDC,
            payments_remaining=0,
            last_paid=1_690_000_000,
            active=False,
        ),
        ContractPlan(
            plan_id=3,
            beneficiary=WALLET,
            payment_amount_minor=25 * USDC,
            payments_remaining=4,
            last_paid=0,
            active=False,
        ),
    ]
