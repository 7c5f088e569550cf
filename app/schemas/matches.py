from datetime import datetime

from pydantic import BaseModel, Field

from app.schemas.common import CamelCaseModel

OddsTriple = tuple[float, float, float]


class OddsSnapshot(BaseModel):
    """Odds of one bookmaker at one scrape time: (home, draw, guest)."""

    timestamp: datetime
    odds: OddsTriple


class MatchOdds(BaseModel):
    """Lean match record used for odds resolution (id and odds history only)."""

    id: str
    bookmakers: dict[str, list[OddsSnapshot]] = {}


class MatchResponse(CamelCaseModel):
    id: str
    start_time: datetime = Field(alias="startTime")
    host: str
    guest: str
    league: str
    bookmakers: dict[str, list[OddsSnapshot]] = {}


class MatchListResponse(BaseModel):
    data: list[MatchResponse]


class RawMatchSnapshot(CamelCaseModel):
    """One match as extracted by the scraper, with the current odds per bookmaker."""

    start_time: datetime = Field(alias="startTime")
    host: str
    guest: str
    league: str
    bookmakers: dict[str, OddsTriple]


class MatchUpsert(BaseModel):
    """Insert-if-missing for the identity tuple, then append the snapshots."""

    start_time: datetime
    host: str
    guest: str
    league: str
    snapshots: dict[str, OddsSnapshot]

    @property
    def identity(self) -> tuple[datetime, str, str, str]:
        return (self.start_time, self.host, self.guest, self.league)
