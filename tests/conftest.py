"""Global fixtures for ako-odds tests."""

from typing import Any
from unittest.mock import AsyncMock, patch

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from app.api.deps import get_cache, get_metrics, get_store
from app.main import app
from app.schemas import MatchResponse, OddsSnapshot
from app.services.metrics import MetricsService
from tests.fakes import T1, T2, FakeCache, InMemoryMatchStore, make_match


@pytest.fixture
def sample_matches() -> list[MatchResponse]:
    """Two matches; m1 has an out-of-order history for STS."""
    return [
        make_match(
            "m1",
            {
                "STS": [
                    OddsSnapshot(timestamp=T2, odds=(1.6, 3.1, 2.7)),
                    OddsSnapshot(timestamp=T1, odds=(1.5, 3.2, 2.8)),
                ],
                "Betclic": [OddsSnapshot(timestamp=T1, odds=(1.55, 3.3, 2.75))],
            },
        ),
        make_match(
            "m2",
            {"STS": [OddsSnapshot(timestamp=T1, odds=(2.1, 3.0, 3.4))]},
            host="Team C",
            guest="Team D",
            league="Spain_La_Liga",
        ),
    ]


@pytest.fixture
def match_store(sample_matches) -> InMemoryMatchStore:
    return InMemoryMatchStore(sample_matches)


@pytest.fixture
def fake_cache() -> FakeCache:
    return FakeCache()


@pytest.fixture
def mock_metrics() -> AsyncMock:
    return AsyncMock(spec=MetricsService)


@pytest.fixture
def raw_feed_entry() -> dict[str, Any]:
    """Feed entry as produced by the scraper."""
    return {
        "startTime": "18.10.2026 20:45",
        "host": " Team A ",
        "guest": "Team B",
        "league": "England: Premier League - 2026",
        "bookmakers": {
            "STS.pl": ["1.50", "3.20", "2.80"],
            "LV BET": [1.55, 3.1, 2.75],
        },
    }


@pytest_asyncio.fixture
async def test_client(match_store, fake_cache, mock_metrics):
    """Async test client for FastAPI with in-memory store and cache."""
    app.dependency_overrides[get_store] = lambda: match_store
    app.dependency_overrides[get_cache] = lambda: fake_cache
    app.dependency_overrides[get_metrics] = lambda: mock_metrics

    with patch("app.main.settings.api_key_enabled", False):
        app.state.limiter.enabled = False
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            yield client
        app.state.limiter.enabled = True

    app.dependency_overrides.clear()


@pytest.fixture
def mock_httpx():
    """Mock httpx.AsyncClient for HTTP tests."""
    with patch("httpx.AsyncClient") as mock_class:
        mock_client = AsyncMock()
        mock_class.return_value.__aenter__ = AsyncMock(return_value=mock_client)
        mock_class.return_value.__aexit__ = AsyncMock(return_value=None)
        yield mock_client
