"""Latest-odds resolution for bet legs."""

import logging
from collections.abc import Sequence
from typing import Protocol

from app.exceptions import (
    BookmakerNotFoundError,
    InvalidEventTypeError,
    MatchNotFoundError,
    ResolutionError,
)
from app.schemas.bets import BetLeg
from app.schemas.common import EventType
from app.schemas.matches import MatchOdds, OddsSnapshot

logger = logging.getLogger(__name__)

# Position of each outcome in a (home, draw, guest) odds triple
EVENT_TYPE_INDEX: dict[str, int] = {
    EventType.HOME.value: 0,
    EventType.DRAW.value: 1,
    EventType.GUEST.value: 2,
}


class OddsReader(Protocol):
    async def find_by_ids(self, match_ids: list[str]) -> list[MatchOdds]: ...


def latest_snapshot(history: Sequence[OddsSnapshot]) -> OddsSnapshot:
    """Most recent snapshot of a history that is not stored in time order."""
    return sorted(history, key=lambda snapshot: snapshot.timestamp, reverse=True)[0]


def event_index(event_type: EventType | str, match_id: str | None = None) -> int:
    index = EVENT_TYPE_INDEX.get(event_type) if isinstance(event_type, str) else None
    if index is None:
        raise InvalidEventTypeError(event_type, match_id)
    return index


async def resolve_latest_odds(store: OddsReader, legs: Sequence[BetLeg]) -> dict[str, float]:
    """Resolve the latest odd of every leg, keyed by match ID.

    All matches are fetched in one store call. Any missing match, bookmaker
    or unknown event type aborts the whole resolution.

    Raises:
        MatchNotFoundError: fewer matches stored than requested
        BookmakerNotFoundError: a match has no odds from the leg's bookmaker
        InvalidEventTypeError: a leg's event type is not home/draw/guest
        ResolutionError: a fetched match has no corresponding leg
    """
    match_ids = list(dict.fromkeys(leg.match_id for leg in legs))
    matches = await store.find_by_ids(match_ids)

    if len(matches) != len(match_ids):
        raise MatchNotFoundError(multiple=len(legs) > 1)

    odds_by_match: dict[str, float] = {}

    for match in matches:
        leg = next((leg for leg in legs if leg.match_id == match.id), None)
        if leg is None:
            logger.error(f"Store returned match {match.id} that was not requested")
            raise ResolutionError(match.id)

        history = match.bookmakers.get(leg.bookmaker)
        if not history:
            raise BookmakerNotFoundError(leg.bookmaker, match.id)

        latest = latest_snapshot(history)
        odds_by_match[match.id] = latest.odds[event_index(leg.event_type, match.id)]

    return odds_by_match
