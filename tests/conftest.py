import os

# Settings are read at import time; give the test run its own values.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-the-ledger-suite-0123456789")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("STARTING_BALANCE", "10000")

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient

from oneoften.main import app
from oneoften.core.database import Base, get_db
from oneoften.core.limiter import limiter
from oneoften.services.outcome import get_outcome_generator

# In-memory SQLite — StaticPool ensures one shared DB across all connections
SQLALCHEMY_DATABASE_URL = "sqlite://"
engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class ScriptedOutcomeGenerator:
    """Deterministic stand-in for OutcomeGenerator: replays a fixed sequence."""

    def __init__(self, draws):
        self.draws = list(draws)
        self.calls = []

    def draw(self, low: int, high: int) -> int:
        self.calls.append((low, high))
        value = self.draws.pop(0)
        assert low <= value <= high
        return value


def override_get_db():
    database = TestingSessionLocal()
    try:
        yield database
    finally:
        database.close()


@pytest.fixture(autouse=True)
def _disable_rate_limiter():
    """Disable the rate limiter for all tests so rapid requests don't return 429."""
    limiter.enabled = False
    yield
    limiter.enabled = True


@pytest.fixture
def scripted():
    """Factory for scripted generators: ``scripted(5, 3)`` draws 5 then 3."""
    return lambda *draws: ScriptedOutcomeGenerator(draws)


@pytest.fixture(scope="function")
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client():
    Base.metadata.create_all(bind=engine)
    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def force_draws(client):
    """Make the API's generator replay the given draws for this test."""

    def _force(*draws):
        generator = ScriptedOutcomeGenerator(draws)
        app.dependency_overrides[get_outcome_generator] = lambda: generator
        return generator

    return _force
