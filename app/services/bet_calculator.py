import math
from collections.abc import Mapping

from app.schemas.bets import AkoBetRequest, SingleBetRequest
from app.services.odds_resolver import OddsReader, resolve_latest_odds


def cumulate_odds(odds_by_match: Mapping[str, float]) -> float:
    """Computes the cumulative value of a bet by multiplying the provided odds."""
    return math.prod(odds_by_match.values(), start=1)


async def calculate_bet(store: OddsReader, bet: SingleBetRequest | AkoBetRequest) -> float:
    """Cumulative odds of a single or accumulator bet from the latest prices."""
    odds_by_match = await resolve_latest_odds(store, bet.legs)
    return cumulate_odds(odds_by_match)
