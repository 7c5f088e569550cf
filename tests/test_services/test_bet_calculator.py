"""Tests for bet aggregation."""

import pytest

from app.exceptions import MatchNotFoundError
from app.schemas import AkoBetRequest, BetLeg, SingleBetRequest
from app.services.bet_calculator import calculate_bet, cumulate_odds


def test_returns_one_when_there_are_no_odds():
    assert cumulate_odds({}) == 1


def test_returns_same_value_for_single_odd():
    assert cumulate_odds({"1": 1.5}) == 1.5


def test_multiplies_multiple_odds():
    assert cumulate_odds({"1": 1.5, "2": 2, "3": 3}) == 9


def test_returns_one_if_all_odds_are_one():
    assert cumulate_odds({"1": 1, "2": 1, "3": 1}) == 1


def test_returns_zero_if_any_odd_is_zero():
    assert cumulate_odds({"1": 1.5, "2": 0, "3": 3}) == 0


def test_order_independent():
    forward = cumulate_odds({"a": 1.6, "b": 3.0, "c": 2.25})
    backward = cumulate_odds({"c": 2.25, "b": 3.0, "a": 1.6})

    assert forward == pytest.approx(backward)


def test_does_not_round():
    assert cumulate_odds({"a": 1.333, "b": 1.777}) == pytest.approx(1.333 * 1.777)


@pytest.mark.asyncio
async def test_calculate_single_bet(match_store):
    bet = SingleBetRequest(
        bet_type="single",
        legs=[BetLeg(match_id="m2", bookmaker="STS", event_type="guest")],
    )

    assert await calculate_bet(match_store, bet) == pytest.approx(3.4)


@pytest.mark.asyncio
async def test_calculate_ako_bet(match_store):
    bet = AkoBetRequest(
        bet_type="ako",
        legs=[
            BetLeg(match_id="m1", bookmaker="STS", event_type="home"),
            BetLeg(match_id="m2", bookmaker="STS", event_type="draw"),
        ],
    )

    assert await calculate_bet(match_store, bet) == pytest.approx(4.8)


@pytest.mark.asyncio
async def test_calculate_bet_propagates_not_found(match_store):
    bet = AkoBetRequest(
        bet_type="ako",
        legs=[
            BetLeg(match_id="m1", bookmaker="STS", event_type="home"),
            BetLeg(match_id="missing", bookmaker="STS", event_type="draw"),
        ],
    )

    with pytest.raises(MatchNotFoundError):
        await calculate_bet(match_store, bet)
