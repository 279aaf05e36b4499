"""Pytest fixtures and configuration for weekgrid tests."""

import os

# Keep the app's module-level engine off the filesystem during tests.
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

import random
from datetime import date, datetime

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient

from weekgrid.database.database import Base
from weekgrid.database.schedule_repository import ScheduleRepository
from weekgrid.database.store import InMemoryScheduleStore
from weekgrid.engine.solver import ConstraintSolver
from weekgrid.models.blocked_time import BlockedTime
from weekgrid.models.proposed_event import ProposedEvent
from weekgrid.models.time_key import Weekday


# Use in-memory SQLite database for tests
TEST_DATABASE_URL = "sqlite:///:memory:"

# 2024-01-01 is a Monday
WEEK_START = date(2024, 1, 1)


@pytest.fixture(scope="function")
def db_session():
    """Create a database session for testing.

    Uses an in-memory SQLite database that is created fresh for each test.
    """
    from weekgrid.database import models  # noqa: F401  (registers tables)

    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False
    )
    Base.metadata.create_all(bind=engine)

    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()

    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def schedule_repository(db_session: Session):
    """Create a ScheduleRepository instance for testing."""
    return ScheduleRepository(db_session)


@pytest.fixture
def memory_store():
    return InMemoryScheduleStore()


@pytest.fixture
def week_start():
    return WEEK_START


@pytest.fixture
def rng():
    """Seeded random source so randomized placement is reproducible."""
    return random.Random(1234)


@pytest.fixture
def solver(week_start, rng):
    return ConstraintSolver(week_start=week_start, rng=rng, tie_break_window=5)


@pytest.fixture
def make_event():
    """Factory for ProposedEvent with sensible defaults."""
    def _make(name="Activity", day=Weekday.MON, start="09:00", duration=60, locked=False):
        return ProposedEvent(day=day, start_time=start, duration_minutes=duration, name=name, locked=locked)
    return _make


@pytest.fixture
def make_blocked():
    """Factory for BlockedTime on a given column of the test week."""
    def _make(column=0, start_hour=14, end_hour=16, description="Blocked"):
        day = WEEK_START.toordinal() + column
        base = date.fromordinal(day)
        return BlockedTime(
            start=datetime(base.year, base.month, base.day, start_hour),
            end=datetime(base.year, base.month, base.day, end_hour),
            description=description,
            column_index=column,
        )
    return _make


@pytest.fixture
def test_client(db_session: Session):
    """Create a FastAPI test client with overridden database dependency."""
    from weekgrid.api.app import app
    from weekgrid.database.database import get_db

    # Override the get_db dependency to use our test database session
    def override_get_db():
        try:
            yield db_session
        finally:
            pass  # Don't close the session here, let the fixture handle it

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as client:
        yield client

    # Clean up dependency overrides
    app.dependency_overrides.clear()
