"""Tests for the management CLI."""

from unittest.mock import AsyncMock, patch

import pytest
import typer
from typer.testing import CliRunner

from app.cli import app, parse_leg
from app.exceptions import FeedError
from app.schemas import EventType, RawMatchSnapshot
from tests.fakes import KICK_OFF, InMemoryMatchStore

runner = CliRunner()


def test_parse_leg():
    leg = parse_leg("m1:STS:draw")

    assert leg.match_id == "m1"
    assert leg.bookmaker == "STS"
    assert leg.event_type == EventType.DRAW


@pytest.mark.parametrize("raw", ["m1:STS", "m1:STS:home:extra", "m1:STS:over", ":STS:home"])
def test_parse_leg_rejects(raw):
    with pytest.raises(typer.BadParameter):
        parse_leg(raw)


def test_calculate_bet(match_store):
    with patch("app.cli.MatchStore", return_value=match_store):
        result = runner.invoke(
            app, ["calculate-bet", "-t", "ako", "--leg", "m1:STS:home", "--leg", "m2:STS:draw"]
        )

    assert result.exit_code == 0
    assert "4.80" in result.output


def test_calculate_bet_not_found(match_store):
    with patch("app.cli.MatchStore", return_value=match_store):
        result = runner.invoke(app, ["calculate-bet", "-t", "single", "--leg", "nope:STS:home"])

    assert result.exit_code == 1
    assert "Match with given Id not found" in result.output


def test_calculate_bet_invalid_combination(match_store):
    with patch("app.cli.MatchStore", return_value=match_store):
        result = runner.invoke(app, ["calculate-bet", "-t", "ako", "--leg", "m1:STS:home"])

    assert result.exit_code == 2


def test_list_matches(match_store):
    with patch("app.cli.MatchStore", return_value=match_store):
        result = runner.invoke(app, ["list-matches", "--league", "Spain_La_Liga"])

    assert result.exit_code == 0
    assert "Team C" in result.output
    assert "Team A" not in result.output


def test_scrape():
    store = InMemoryMatchStore()
    snapshot = RawMatchSnapshot(
        start_time=KICK_OFF,
        host="Team A",
        guest="Team B",
        league="England_Premier_League",
        bookmakers={"STS": (1.5, 3.2, 2.8)},
    )

    with (
        patch("app.cli.MatchStore", return_value=store),
        patch("app.cli.OddsFeedProvider") as mock_provider,
    ):
        mock_provider.return_value.fetch_snapshots = AsyncMock(return_value=[snapshot])
        result = runner.invoke(app, ["scrape"])

    assert result.exit_code == 0
    assert "1 matches merged, 1 odds snapshots appended" in result.output
    assert len(store.matches) == 1


def test_scrape_feed_failure():
    with patch("app.cli.OddsFeedProvider") as mock_provider:
        mock_provider.return_value.fetch_snapshots = AsyncMock(side_effect=FeedError("HTTP 503 from odds feed"))
        result = runner.invoke(app, ["scrape"])

    assert result.exit_code == 1
    assert "HTTP 503 from odds feed" in result.output


def test_purge_confirmed(match_store):
    with patch("app.cli.MatchStore", return_value=match_store):
        result = runner.invoke(app, ["purge"], input="y\n")

    assert result.exit_code == 0
    assert "2 matches removed" in result.output
    assert match_store.matches == {}


def test_purge_cancelled(match_store):
    with patch("app.cli.MatchStore", return_value=match_store):
        result = runner.invoke(app, ["purge"], input="n\n")

    assert "Cancelled" in result.output
    assert len(match_store.matches) == 2
