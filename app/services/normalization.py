"""Normalization of scraped labels into stored keys."""

from datetime import datetime

from app.config import BOOKMAKER_NAME_MAP

SCRAPED_DATE_FORMAT = "%d.%m.%Y %H:%M"


def map_bookmaker_name(bookmaker: str) -> str:
    """Maps scraped bookmaker name to indexable string."""
    return BOOKMAKER_NAME_MAP.get(bookmaker, bookmaker)


def extract_league_name(raw: str) -> str:
    """Turn "England: Premier League - 2023" into "England_Premier_League".

    Input without a colon is returned unchanged.
    """
    parts = raw.split(":")
    if len(parts) < 2:
        return raw

    country = parts[0].strip()
    league = "_".join(parts[1].split("-")[0].split())

    return f"{country}_{league}" if country and league else raw


def parse_start_time(raw: str, tz=None) -> datetime:
    """Parse "dd.mm.yyyy HH:MM" (as shown on the site) or ISO-8601.

    Naive results are localized to ``tz`` when given.
    """
    try:
        value = datetime.strptime(raw.strip(), SCRAPED_DATE_FORMAT)
    except ValueError:
        value = datetime.fromisoformat(raw.strip().replace("Z", "+00:00"))

    if value.tzinfo is None and tz is not None:
        value = value.replace(tzinfo=tz)
    return value
