"""
Pytest configuration and fixtures for ride_ledger tests.
"""
import os

# Must be set before ride_ledger reads its settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["PARTICIPANTS"] = '["Anne", "Bram"]'

import pytest
from datetime import datetime
from decimal import Decimal
from types import SimpleNamespace
from typing import List

from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from ride_ledger.main import app
from ride_ledger.db.database import Base, create_db_engine, get_db
from ride_ledger.models.rides import Ride
from ride_ledger.schemas.expense_schema import Allocation


def make_ride(ride_id: int, driver: str, distance) -> SimpleNamespace:
    """A ride as the allocation engine sees it"""
    return SimpleNamespace(id=ride_id, driver=driver, distance=Decimal(str(distance)))


def make_debt(from_user: str, to_user: str, amount) -> SimpleNamespace:
    """A directed debt as the settlement reducer sees it"""
    return SimpleNamespace(from_user=from_user, to_user=to_user, amount=Decimal(str(amount)))


@pytest.fixture
def sample_rides() -> List[SimpleNamespace]:
    """Two drivers, four rides, 100 km in total."""
    return [
        make_ride(1, "Anne", "10"),
        make_ride(2, "Bram", "30"),
        make_ride(3, "Anne", "15"),
        make_ride(4, "Bram", "45"),
    ]


@pytest.fixture
def db_engine():
    engine = create_db_engine("sqlite://")
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(db_engine):
    """Isolated in-memory database session."""
    session = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(db_engine):
    """API client whose requests run against the in-memory database."""
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)

    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def stored_rides(db_session) -> List[Ride]:
    """Rides persisted in the session: Anne 10km, Bram 30km, Anne 20km."""
    rides = [
        Ride(driver="Anne", distance=Decimal("10"), date=datetime(2024, 3, 1, 8, 0)),
        Ride(driver="Bram", distance=Decimal("30"), date=datetime(2024, 3, 2, 8, 0)),
        Ride(driver="Anne", distance=Decimal("20"), date=datetime(2024, 3, 3, 8, 0)),
    ]
    db_session.add_all(rides)
    db_session.commit()
    for ride in rides:
        db_session.refresh(ride)
    return rides


def verify_allocation_totals(allocation: Allocation, amount: Decimal, payer: str, rides) -> None:
    """
    Helper to verify an allocation distributes the whole expense.

    - link percentages add up to 100
    - debts plus the payer's own share add up to the amount
    """
    total_percentage = sum(link.percentage for link in allocation.links)
    assert abs(total_percentage - Decimal("100")) <= Decimal("0.01"), \
        f"Percentages sum to {total_percentage}, expected 100"

    total_distance = sum(ride.distance for ride in rides)
    payer_distance = sum(ride.distance for ride in rides if ride.driver == payer)
    payer_share = amount * payer_distance / total_distance

    total_debts = sum(debt.amount for debt in allocation.balances)
    assert abs(total_debts + payer_share - amount) <= Decimal("0.01"), \
        f"Debts {total_debts} + payer share {payer_share} != amount {amount}"

    for debt in allocation.balances:
        assert debt.from_user != debt.to_user
        assert debt.to_user == payer
        assert debt.amount > Decimal("0")
