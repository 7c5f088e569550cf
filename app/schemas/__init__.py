from app.schemas.bets import AkoBetRequest, BetLeg, BetRequest, BetResponse, SingleBetRequest
from app.schemas.common import BetType, CamelCaseModel, EventType
from app.schemas.matches import (
    MatchListResponse,
    MatchOdds,
    MatchResponse,
    MatchUpsert,
    OddsSnapshot,
    OddsTriple,
    RawMatchSnapshot,
)

__all__ = [
    "AkoBetRequest",
    "BetLeg",
    "BetRequest",
    "BetResponse",
    "BetType",
    "CamelCaseModel",
    "EventType",
    "MatchListResponse",
    "MatchOdds",
    "MatchResponse",
    "MatchUpsert",
    "OddsSnapshot",
    "OddsTriple",
    "RawMatchSnapshot",
    "SingleBetRequest",
]
