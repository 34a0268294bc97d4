"""Pytest configuration and shared fixtures."""

import os

# Must run before dormitory is imported: the engine is built at import time
os.environ["DATABASE_URL"] = "sqlite:///:memory:"

from datetime import date  # noqa: E402
from decimal import Decimal  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402

from dormitory.main import app  # noqa: E402
from dormitory.models import Base, BillingPeriod, Occupant  # noqa: E402
from dormitory.services import engine, get_db  # noqa: E402


@pytest.fixture(scope="function")
def test_db_session():
    """Fresh schema per test; the API shares this session."""
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()

    def override_get_db():
        yield session

    app.dependency_overrides[get_db] = override_get_db

    yield session

    session.close()
    app.dependency_overrides.clear()

    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(test_db_session):
    """Provide a FastAPI test client with test database."""
    return TestClient(app)


@pytest.fixture
def make_occupant(test_db_session):
    """Factory creating persisted occupants."""

    def _make(name: str = "Ana", room: str = "101", monthly_rent: str = "1500.00", **kwargs):
        occupant = Occupant(name=name, room=room, monthly_rent=Decimal(monthly_rent), **kwargs)
        test_db_session.add(occupant)
        test_db_session.commit()
        test_db_session.refresh(occupant)
        return occupant

    return _make


@pytest.fixture
def august_period(test_db_session) -> BillingPeriod:
    """Cut-over period crossing a calendar month boundary (Aug 22 - Sep 21)."""
    period = BillingPeriod(
        name="2025-08-22..2025-09-21",
        start_date=date(2025, 8, 22),
        end_date=date(2025, 9, 21),
        is_current=True,
    )
    test_db_session.add(period)
    test_db_session.commit()
    test_db_session.refresh(period)
    return period
