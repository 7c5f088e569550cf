"""Merging freshly scraped odds into the match history store."""

import logging
from collections.abc import Iterable
from datetime import datetime, timezone
from typing import Protocol

from app.schemas.matches import MatchUpsert, OddsSnapshot, RawMatchSnapshot

logger = logging.getLogger(__name__)


class MatchWriter(Protocol):
    async def bulk_upsert(self, operations: list[MatchUpsert]) -> int: ...

    async def delete_all(self) -> int: ...


def build_merge_operations(
    raw_matches: Iterable[RawMatchSnapshot],
    now: datetime | None = None,
) -> list[MatchUpsert]:
    """One upsert-and-append operation per scraped match.

    Every bookmaker of a match gets one snapshot stamped with the same scrape
    time.
    """
    now = now or datetime.now(timezone.utc)
    return [
        MatchUpsert(
            start_time=raw.start_time,
            host=raw.host,
            guest=raw.guest,
            league=raw.league,
            snapshots={
                bookmaker: OddsSnapshot(timestamp=now, odds=odds)
                for bookmaker, odds in raw.bookmakers.items()
            },
        )
        for raw in raw_matches
    ]


async def merge_snapshots(
    store: MatchWriter,
    raw_matches: Iterable[RawMatchSnapshot],
    now: datetime | None = None,
) -> int | None:
    """Upsert scraped matches and append their odds in one batch.

    Failures are logged and not raised: the next scheduled scrape retries.
    Returns the number of appended snapshots, or None on failure.
    """
    try:
        operations = build_merge_operations(raw_matches, now)
        appended = 0
        if operations:
            appended = await store.bulk_upsert(operations)
        logger.info("Updating database finished successfully.")
        return appended
    except Exception as e:
        logger.error(f"Error upserting matches: {e}")
        return None


async def remove_all_matches(store: MatchWriter) -> int | None:
    """Delete every stored match (end-of-day reset)."""
    try:
        deleted = await store.delete_all()
        logger.info(f"{deleted} past matches removed")
        return deleted
    except Exception as e:
        logger.error(f"Error removing past matches: {e}")
        return None
