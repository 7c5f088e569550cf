"""Request dependencies: injected clients and bet query validation."""

import json
from urllib.parse import unquote

from fastapi import Query, Request
from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from app.exceptions import ValidationError
from app.schemas.bets import AkoBetRequest, BetRequest, SingleBetRequest
from app.schemas.common import BetType
from app.services.cache import CacheService
from app.services.match_store import MatchStore
from app.services.metrics import MetricsService

bet_request_adapter: TypeAdapter[SingleBetRequest | AkoBetRequest] = TypeAdapter(BetRequest)


def get_store(request: Request) -> MatchStore:
    return request.app.state.store


def get_cache(request: Request) -> CacheService:
    return request.app.state.cache


def get_metrics(request: Request) -> MetricsService:
    return request.app.state.metrics


def parse_bet_query(
    bet_type: str | None = Query(None, alias="betType", description="single or ako"),
    matches: str | None = Query(
        None,
        description='URL-encoded JSON array of {"matchId", "bookmaker", "eventType"}',
    ),
) -> SingleBetRequest | AkoBetRequest:
    """Validate the calculate-bet query into a single or accumulator bet.

    Raises:
        ValidationError: on any malformed or inconsistent parameter
    """
    if not bet_type:
        raise ValidationError("Bet type is required", field="betType")
    if bet_type not in {t.value for t in BetType}:
        raise ValidationError(
            "Bet type must be either 'single' or 'ako'", field="betType", value=bet_type
        )
    if matches is None:
        raise ValidationError("Matches parameter is required", field="matches")

    try:
        legs = json.loads(unquote(matches))
    except ValueError:
        raise ValidationError("Matches parameter should be a JSON array", field="matches", value=matches)
    if not isinstance(legs, list):
        raise ValidationError("Matches parameter should be of an array type", field="matches", value=matches)

    try:
        return bet_request_adapter.validate_python({"betType": bet_type, "matches": legs})
    except PydanticValidationError as e:
        error = e.errors()[0]
        field = ".".join(str(part) for part in error["loc"])
        raise ValidationError(_error_message(error), field=field or None)


def _error_message(error: dict) -> str:
    # Custom validator messages come wrapped as "Value error, ..."
    cause = error.get("ctx", {}).get("error")
    if error["type"] == "value_error" and cause:
        return str(cause)
    return error["msg"]
