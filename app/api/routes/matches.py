import logging

from fastapi import APIRouter, Depends, Query, Request

from app.api.deps import get_cache, get_metrics, get_store, parse_bet_query
from app.config import settings
from app.schemas import (
    AkoBetRequest,
    BetResponse,
    MatchListResponse,
    MatchResponse,
    SingleBetRequest,
)
from app.services.bet_calculator import calculate_bet
from app.services.cache import CacheService
from app.services.cache_keys import bet_cache_key, matches_cache_key
from app.services.listing import fetch_todays_matches
from app.services.match_store import MatchStore
from app.services.metrics import MetricsService
from app.services.rate_limiter import limiter

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=MatchListResponse)
@limiter.limit(settings.rate_limit_default)
async def list_matches(
    request: Request,
    league: str | None = Query(None, min_length=1, description="League key, e.g. England_Premier_League"),
    bookmaker: str | None = Query(None, min_length=1, description="Only include this bookmaker's odds"),
    store: MatchStore = Depends(get_store),
    cache: CacheService = Depends(get_cache),
    metrics: MetricsService = Depends(get_metrics),
):
    """Get today's pending matches with their odds history (cached briefly)."""
    cache_key = matches_cache_key(league, bookmaker)
    cached = await cache.get(cache_key)
    await metrics.track_cache(hit=cached is not None)

    if cached is not None:
        logger.info("Returning cached matches data")
        return MatchListResponse(data=[MatchResponse.model_validate(m) for m in cached])

    matches = await fetch_todays_matches(store, league=league, bookmaker=bookmaker)
    await cache.set(
        cache_key,
        [m.model_dump(mode="json", by_alias=True) for m in matches],
        ttl=settings.cache_ttl_matches,
    )
    return MatchListResponse(data=matches)


@router.get("/all", response_model=MatchListResponse)
@limiter.limit(settings.rate_limit_default)
async def list_all_matches(
    request: Request,
    store: MatchStore = Depends(get_store),
):
    """Get every stored match with full odds history (uncached)."""
    return MatchListResponse(data=await store.find_all())


@router.get("/calculate-bet", response_model=BetResponse)
@limiter.limit(settings.rate_limit_heavy)
async def calculate_bet_odds(
    request: Request,
    bet: SingleBetRequest | AkoBetRequest = Depends(parse_bet_query),
    store: MatchStore = Depends(get_store),
    cache: CacheService = Depends(get_cache),
    metrics: MetricsService = Depends(get_metrics),
):
    """Cumulative odds of a single or accumulator ("ako") bet.

    Query parameters:
    - betType: "single" (exactly one leg) or "ako" (two or more legs on
      distinct matches)
    - matches: URL-encoded JSON array of legs, each with matchId,
      bookmaker and eventType (home, draw or guest)

    The latest stored odds of every leg are multiplied together.
    """
    cache_key = bet_cache_key(bet.bet_type, bet.legs)
    cached = await cache.get(cache_key)
    await metrics.track_cache(hit=cached is not None)

    if cached is not None:
        logger.info("Returning cached bet calculation data")
        return BetResponse(bet=cached)

    value = await calculate_bet(store, bet)
    await cache.set(cache_key, value, ttl=settings.cache_ttl_bet)
    return BetResponse(bet=value)


@router.delete("")
@limiter.limit(settings.rate_limit_heavy)
async def purge_matches(
    request: Request,
    store: MatchStore = Depends(get_store),
):
    """Delete every stored match and its odds history."""
    deleted = await store.delete_all()
    logger.info(f"{deleted} matches removed on request")
    return {"status": "deleted", "deleted": deleted}
