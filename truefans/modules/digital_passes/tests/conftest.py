# truefans/modules/digital_passes/tests/conftest.py

import pytest
from datetime import datetime, timedelta
from typing import Generator
from unittest.mock import AsyncMock, Mock

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from truefans.core.auth import User as AuthUser, get_current_user
from truefans.core.database import Base, get_db
from truefans.modules.digital_passes.dependencies import (
    get_pass_email_service,
    get_wallet_client,
)
from truefans.modules.digital_passes.models.pass_models import (
    DigitalPass, PassStatus, Restaurant, User,
)
from truefans.modules.digital_passes.services.pass_email_service import DigitalPassEmailService
from truefans.modules.digital_passes.services.wallet_provider import PassNinjaClient, WalletPassResult


@pytest.fixture
def test_engine():
    """In-memory SQLite shared by every session of a test"""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def db_session(test_engine) -> Generator[Session, None, None]:
    """Create a database session for testing"""
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def restaurant(db_session) -> Restaurant:
    restaurant = Restaurant(
        id="rest-1",
        name="Luigi's Trattoria",
        digital_wallet={
            "logo": "https://cdn.truefans.test/luigi.png",
            "primaryColor": "#c0392b",
            "secondaryColor": "#ffffff",
            "customMessage": "Buon appetito!",
            "cardBackground": "#fff8f0",
            "cardTextColor": "#222222",
        },
    )
    db_session.add(restaurant)
    db_session.commit()
    return restaurant


@pytest.fixture
def other_restaurant(db_session) -> Restaurant:
    restaurant = Restaurant(id="rest-2", name="Sushi Corner", digital_wallet=None)
    db_session.add(restaurant)
    db_session.commit()
    return restaurant


@pytest.fixture
def diner(db_session) -> User:
    user = User(id="user-1", first_name="Jane", last_name="Doe", email="jane@example.com")
    db_session.add(user)
    db_session.commit()
    return user


@pytest.fixture
def make_pass(db_session, restaurant, diner):
    """Factory for persisted passes"""
    counter = {"n": 0}

    def _make_pass(**overrides) -> DigitalPass:
        counter["n"] += 1
        now = datetime.utcnow()
        values = {
            "pass_id": f"{counter['n']:032x}",
            "user_id": diner.id,
            "restaurant_id": restaurant.id,
            "points": 0,
            "visits": 0,
            "is_active": True,
            "status": PassStatus.ACTIVE,
            "created_at": now,
            "updated_at": now,
            "expires_at": now + timedelta(days=365),
        }
        values.update(overrides)
        digital_pass = DigitalPass(**values)
        db_session.add(digital_pass)
        db_session.commit()
        return digital_pass

    return _make_pass


@pytest.fixture
def mailer() -> Mock:
    mailer = Mock(spec=DigitalPassEmailService)
    mailer.send_digital_pass.return_value = True
    return mailer


@pytest.fixture
def wallet_client() -> Mock:
    client = Mock(spec=PassNinjaClient)
    client.create_pass = AsyncMock(
        return_value=WalletPassResult(
            serial_number="SN-123",
            download_url="https://passninja.test/p/SN-123",
        )
    )
    return client


@pytest.fixture
def auth_state():
    """Mutable identity returned by the overridden auth dependency"""
    return {"user": AuthUser(id="user-1", email="jane@example.com")}


@pytest.fixture
def staff_user(auth_state, restaurant) -> AuthUser:
    user = AuthUser(id="staff-1", email="staff@luigi.test", roles=["staff"], restaurant_id=restaurant.id)
    auth_state["user"] = user
    return user


@pytest.fixture
def client(db_session, mailer, wallet_client, auth_state):
    """Test client with database, auth and outbound services overridden"""
    from truefans.app.main import app

    def _override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = _override_get_db
    app.dependency_overrides[get_pass_email_service] = lambda: mailer
    app.dependency_overrides[get_wallet_client] = lambda: wallet_client
    app.dependency_overrides[get_current_user] = lambda: auth_state["user"]

    yield TestClient(app)

    app.dependency_overrides.clear()


@pytest.fixture
def anonymous_client(db_session, mailer, wallet_client):
    """Test client without an authenticated identity"""
    from truefans.app.main import app

    def _override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = _override_get_db
    app.dependency_overrides[get_pass_email_service] = lambda: mailer
    app.dependency_overrides[get_wallet_client] = lambda: wallet_client

    yield TestClient(app)

    app.dependency_overrides.clear()
