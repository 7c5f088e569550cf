from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field, field_validator

from app.schemas.common import CamelCaseModel, EventType


class BetLeg(CamelCaseModel):
    """One match + bookmaker + outcome selection."""

    match_id: str = Field(alias="matchId", min_length=1)
    bookmaker: str = Field(min_length=1)
    event_type: EventType = Field(alias="eventType")


class SingleBetRequest(CamelCaseModel):
    bet_type: Literal["single"] = Field(alias="betType")
    legs: list[BetLeg] = Field(alias="matches", min_length=1, max_length=1)


class AkoBetRequest(CamelCaseModel):
    bet_type: Literal["ako"] = Field(alias="betType")
    legs: list[BetLeg] = Field(alias="matches", min_length=2)

    @field_validator("legs")
    @classmethod
    def match_ids_unique(cls, legs: list[BetLeg]) -> list[BetLeg]:
        match_ids = [leg.match_id for leg in legs]
        if len(set(match_ids)) != len(match_ids):
            raise ValueError("Match IDs must be unique for AKO bets")
        return legs


BetRequest = Annotated[
    Union[SingleBetRequest, AkoBetRequest],
    Field(discriminator="bet_type"),
]


class BetResponse(BaseModel):
    bet: float
