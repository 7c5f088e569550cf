from datetime import datetime, time
from zoneinfo import ZoneInfo

from app.config import settings
from app.schemas.matches import MatchResponse
from app.services.match_store import MatchStore


def today_window(now: datetime | None = None, tz: str | None = None) -> tuple[datetime, datetime]:
    """From now until the last millisecond of the current local day."""
    zone = ZoneInfo(tz or settings.timezone)
    now = now.astimezone(zone) if now else datetime.now(zone)
    end_of_today = datetime.combine(now.date(), time(23, 59, 59, 999000), tzinfo=zone)
    return now, end_of_today


async def fetch_todays_matches(
    store: MatchStore,
    league: str | None = None,
    bookmaker: str | None = None,
    now: datetime | None = None,
) -> list[MatchResponse]:
    """Today's matches that have not started yet, with their odds history.

    With a bookmaker, only that bookmaker's odds are included.
    """
    start, end = today_window(now)
    return await store.find_matches(start, end, league=league, bookmaker=bookmaker)
