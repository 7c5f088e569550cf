import logging
import math
from typing import Any
from zoneinfo import ZoneInfo

import httpx

from app.config import settings
from app.exceptions import FeedError
from app.providers.base import ProviderInterface
from app.schemas import OddsTriple, RawMatchSnapshot
from app.services.normalization import (
    extract_league_name,
    map_bookmaker_name,
    parse_start_time,
)

logger = logging.getLogger(__name__)


class OddsFeedProvider(ProviderInterface):
    """Provider for the scraper's JSON feed of today's scheduled matches.

    Each feed entry looks like::

        {
            "startTime": "18.10.2026 20:45",
            "host": "Team A",
            "guest": "Team B",
            "league": "England: Premier League - 2026",
            "bookmakers": {"STS.pl": ["1.50", "3.20", "2.80"]}
        }
    """

    def __init__(self, url: str | None = None, timeout: float | None = None):
        self.url = url or settings.feed_url
        self.timeout = timeout or settings.feed_timeout
        self.tz = ZoneInfo(settings.timezone)

    @staticmethod
    def get_name() -> str:
        return "ODDS_FEED"

    async def fetch_snapshots(self) -> list[RawMatchSnapshot]:
        data = await self._request()
        if not isinstance(data, list):
            raise FeedError("Feed payload is not a list", url=self.url)

        snapshots = []
        for entry in data:
            snapshot = self.parse_entry(entry)
            if snapshot is not None:
                snapshots.append(snapshot)

        logger.info(f"Feed returned {len(data)} entries, {len(snapshots)} usable")
        return snapshots

    async def _request(self) -> Any:
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(self.url)
                response.raise_for_status()
                return response.json()
        except httpx.TimeoutException:
            raise FeedError(f"Feed request timed out after {self.timeout}s", url=self.url)
        except httpx.HTTPStatusError as e:
            raise FeedError(
                f"HTTP {e.response.status_code} from odds feed",
                status_code=e.response.status_code,
                url=self.url,
            )
        except httpx.RequestError as e:
            raise FeedError(f"Network error: {e}", url=self.url)
        except ValueError as e:
            raise FeedError(f"Invalid JSON from odds feed: {e}", url=self.url)

    def parse_entry(self, entry: dict[str, Any]) -> RawMatchSnapshot | None:
        """Normalize one feed entry; None if it has no usable odds."""
        try:
            host = (entry.get("host") or "").strip()
            guest = (entry.get("guest") or "").strip()
            league = (entry.get("league") or "").strip()
            start_time = entry.get("startTime")
            if not (host and guest and league and start_time):
                logger.warning(f"Skipping incomplete feed entry: {entry}")
                return None

            bookmakers: dict[str, OddsTriple] = {}
            for name, odds in (entry.get("bookmakers") or {}).items():
                triple = parse_odds(odds)
                if triple is None:
                    logger.warning(f"Skipping {name} odds for {host} - {guest}: {odds}")
                    continue
                bookmakers[map_bookmaker_name(name.strip())] = triple

            if not bookmakers:
                return None

            return RawMatchSnapshot(
                start_time=parse_start_time(start_time, tz=self.tz),
                host=host,
                guest=guest,
                league=extract_league_name(league),
                bookmakers=bookmakers,
            )
        except (AttributeError, TypeError, ValueError) as e:
            logger.warning(f"Failed to parse feed entry {entry}: {e}")
            return None


def parse_odds(odds: Any) -> OddsTriple | None:
    """Three decimal odds (numbers or numeric strings), else None.

    Every price must be finite and positive.
    """
    if not isinstance(odds, (list, tuple)) or len(odds) != 3:
        return None
    try:
        home, draw, guest = (float(str(value).strip()) for value in odds)
    except ValueError:
        return None
    if not all(math.isfinite(value) and value > 0 for value in (home, draw, guest)):
        return None
    return (home, draw, guest)
