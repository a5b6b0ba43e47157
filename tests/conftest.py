# tests/conftest.py

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from shotify.infra.models import Base


def stat(type_, player='A', team='team1', timestamp=0.0, **extra):
    """Build a raw stat dict the way the tracker stores it."""
    data = {'type': type_, 'player': player, 'team': team, 'timestamp': timestamp}
    data.update(extra)
    return data


@pytest.fixture
def test_engine():
    """
    Fresh in-memory SQLite engine per test. StaticPool keeps the single
    connection alive across sessions and the TestClient's worker thread.
    """
    engine = create_engine(
        "sqlite:///:memory:",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)  # create all tables
    yield engine
    Base.metadata.drop_all(bind=engine)    # teardown - drop all tables
    engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


@pytest.fixture
def session(session_factory):
    db_session = session_factory()
    try:
        yield db_session
    finally:
        db_session.close()


@pytest.fixture
def client(session_factory):
    from shotify.main import create_app
    from shotify.infra.api_routes.deps import get_session_factory

    app = create_app(lifespan=None)
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def sample_stats():
    """A short two-team game: team1 wins 7-3."""
    return [
        stat('FG Made', 'A', 'team1', 10.0),
        stat('3PT Made', 'A', 'team1', 25.5),
        stat('Assist', 'B', 'team1', 25.5),
        stat('FT Missed', 'A', 'team1', 40.0),
        stat('3PT Made', 'X', 'team2', 55.0),
        stat('Rebound', 'B', 'team1', 61.0),
        stat('FG Made', 'B', 'team1', 70.0),
        stat('Turnover', 'X', 'team2', 80.0),
    ]


@pytest.fixture
def sample_teams():
    return {
        'team1': {'name': 'Ballers', 'players': ['A', 'B']},
        'team2': {'name': 'Hoopers', 'players': ['X']},
    }
