"""Shared pytest fixtures for the NFL vote API tests."""
import sys
from pathlib import Path
from typing import AsyncGenerator, Callable, Generator

import httpx
import pytest
import pytest_asyncio
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

# Add project root to Python path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))


@pytest.fixture(scope="function")
def db_session() -> Generator[Session, None, None]:
    """Fresh in-memory SQLite database per test.

    StaticPool keeps a single connection so the TestClient's worker thread
    sees the same database as the test body.
    """
    from app.models import Base

    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)

    TestSessionLocal = sessionmaker(bind=engine, autoflush=False)
    session = TestSessionLocal()

    yield session

    session.close()
    engine.dispose()


@pytest.fixture
def sample_users(db_session: Session):
    """Two registered users."""
    from app.models import User

    users = [
        User(id="user-1", username="alice"),
        User(id="user-2", username="bob"),
    ]
    db_session.add_all(users)
    db_session.commit()
    return users


@pytest.fixture
def sample_game_result_body() -> dict:
    return {
        "matchup_id": "m1",
        "home_team": "A",
        "away_team": "B",
        "home_score": 10,
        "away_score": 7,
        "winner": "A",
        "game_date": "2024-01-01",
    }


@pytest.fixture
def sample_matchups() -> list:
    """Trimmed The Odds API payload for two NFL games."""
    return [
        {
            "id": "e912304de2b2ce35b473ce2ecd3d1502",
            "sport_key": "americanfootball_nfl",
            "sport_title": "NFL",
            "commence_time": "2024-09-06T00:20:00Z",
            "home_team": "Kansas City Chiefs",
            "away_team": "Baltimore Ravens",
            "bookmakers": [
                {
                    "key": "draftkings",
                    "title": "DraftKings",
                    "last_update": "2024-09-05T12:00:00Z",
                    "markets": [
                        {
                            "key": "h2h",
                            "outcomes": [
                                {"name": "Baltimore Ravens", "price": 124},
                                {"name": "Kansas City Chiefs", "price": -148},
                            ],
                        }
                    ],
                }
            ],
        },
        {
            "id": "0e5b5bb0a2b0b9e1c2c0b5f0a9d1f7a3",
            "sport_key": "americanfootball_nfl",
            "sport_title": "NFL",
            "commence_time": "2024-09-08T17:00:00Z",
            "home_team": "Atlanta Falcons",
            "away_team": "Pittsburgh Steelers",
            "bookmakers": [],
        },
    ]


@pytest.fixture
def make_odds_service() -> Callable:
    """Build an OddsApiService whose HTTP calls go to a handler function.

    Usage:
        service = make_odds_service(lambda request: httpx.Response(200, json=[]))
    """
    from app.services.odds_api_service import OddsApiService

    def _make(handler: Callable[[httpx.Request], httpx.Response], api_key: str = "test-key"):
        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return OddsApiService(
            api_key=api_key,
            base_url="https://api.the-odds-api.com/v4",
            client=client,
        )

    return _make


# =============================================================================
# FASTAPI TEST CLIENT FIXTURE
# =============================================================================

@pytest.fixture(scope="function")
def test_client(db_session):
    """
    FastAPI TestClient bound to the per-test database.

    No context manager: the lifespan (SQLite table creation, odds client
    shutdown) is not needed against the overridden session.
    """
    from fastapi.testclient import TestClient
    from app.main import app
    from app.core.database import get_db

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    client = TestClient(app, raise_server_exceptions=False)
    yield client

    app.dependency_overrides.clear()


@pytest_asyncio.fixture(scope="function")
async def async_client(db_session: Session) -> AsyncGenerator[httpx.AsyncClient, None]:
    """Async HTTP client driving the app in the test's event loop.

    Needed for tests that issue overlapping requests.
    """
    from app.main import app
    from app.core.database import get_db

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app),
        base_url="http://test"
    ) as client:
        yield client

    app.dependency_overrides.clear()
