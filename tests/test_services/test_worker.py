"""Tests for scheduled ARQ jobs."""

from unittest.mock import AsyncMock

import pytest

from app.exceptions import DatabaseError, FeedError
from app.schemas import RawMatchSnapshot
from app.tasks.worker import WorkerSettings, purge_and_rescrape, scrape_matches
from tests.fakes import KICK_OFF, InMemoryMatchStore


def scraped(host: str = "Team A") -> RawMatchSnapshot:
    return RawMatchSnapshot(
        start_time=KICK_OFF,
        host=host,
        guest="Team B",
        league="England_Premier_League",
        bookmakers={"STS": (1.5, 3.2, 2.8)},
    )


@pytest.fixture
def ctx(mock_metrics):
    provider = AsyncMock()
    provider.fetch_snapshots = AsyncMock(return_value=[scraped(), scraped("Team C")])
    return {
        "store": InMemoryMatchStore(),
        "metrics": mock_metrics,
        "provider": provider,
    }


@pytest.mark.asyncio
async def test_scrape_matches_appends_feed(ctx):
    result = await scrape_matches(ctx)

    assert result == {"matches": 2, "snapshots": 2}
    assert len(ctx["store"].matches) == 2
    ctx["metrics"].track_ingestion.assert_awaited_once_with(success=True)


@pytest.mark.asyncio
async def test_scrape_matches_empty_feed(ctx):
    ctx["provider"].fetch_snapshots = AsyncMock(return_value=[])

    result = await scrape_matches(ctx)

    assert result == {"matches": 0, "snapshots": 0}
    assert ctx["store"].matches == {}


@pytest.mark.asyncio
async def test_scrape_matches_feed_failure_does_not_raise(ctx, caplog):
    ctx["provider"].fetch_snapshots = AsyncMock(side_effect=FeedError("HTTP 502 from odds feed"))

    result = await scrape_matches(ctx)

    assert result == {"error": "HTTP 502 from odds feed"}
    assert "Error occurred during the scraping task" in caplog.text
    ctx["metrics"].track_ingestion.assert_awaited_once_with(success=False)


@pytest.mark.asyncio
async def test_scrape_matches_store_failure(ctx):
    ctx["store"] = AsyncMock()
    ctx["store"].bulk_upsert = AsyncMock(side_effect=DatabaseError(operation="bulk_upsert"))

    result = await scrape_matches(ctx)

    assert result["error"] == "merge failed"
    ctx["metrics"].track_ingestion.assert_awaited_once_with(success=False)


@pytest.mark.asyncio
async def test_purge_and_rescrape(ctx, sample_matches):
    ctx["store"] = InMemoryMatchStore(sample_matches)

    result = await purge_and_rescrape(ctx)

    assert result["deleted"] == 2
    assert result["matches"] == 2
    assert {m.host for m in ctx["store"].matches.values()} == {"Team A", "Team C"}
    assert "m1" not in ctx["store"].matches


def test_worker_schedule():
    names = {job.name for job in WorkerSettings.cron_jobs}

    assert len(WorkerSettings.cron_jobs) == 3
    assert "scrape_matches_new_day" in names
    assert WorkerSettings.max_jobs == 1
