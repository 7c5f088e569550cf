"""CLI for operating the odds store.

Usage:
    python -m app.cli scrape
    python -m app.cli list-matches --league England_Premier_League
    python -m app.cli calculate-bet --bet-type ako --leg m1:STS:home --leg m2:STS:draw
    python -m app.cli purge
"""

import asyncio

import typer
from pydantic import ValidationError as PydanticValidationError
from rich.console import Console
from rich.table import Table

from app.api.deps import bet_request_adapter
from app.config import settings
from app.exceptions import OddsServiceError
from app.providers.feed import OddsFeedProvider
from app.schemas import BetLeg
from app.services.bet_calculator import calculate_bet
from app.services.ingestion import merge_snapshots, remove_all_matches
from app.services.match_store import MatchStore

app = typer.Typer(help="ako-odds store management")
console = Console()


def parse_leg(raw: str) -> BetLeg:
    """Parse "matchId:bookmaker:eventType"."""
    parts = raw.split(":")
    if len(parts) != 3:
        raise typer.BadParameter(f"Expected matchId:bookmaker:eventType, got {raw!r}")
    match_id, bookmaker, event_type = parts
    try:
        return BetLeg(match_id=match_id, bookmaker=bookmaker, event_type=event_type)
    except PydanticValidationError as e:
        raise typer.BadParameter(e.errors()[0]["msg"])


async def _scrape() -> None:
    snapshots = await OddsFeedProvider().fetch_snapshots()
    if not snapshots:
        console.print("\n[yellow]No relevant match data found.[/yellow]\n")
        return

    async with MatchStore(settings.database_url) as store:
        appended = await merge_snapshots(store, snapshots)

    if appended is None:
        console.print("\n[red]✗[/red] Updating database failed, see logs.\n")
    else:
        console.print(
            f"\n[green]✓[/green] {len(snapshots)} matches merged, {appended} odds snapshots appended.\n"
        )


@app.command("scrape")
def scrape():
    """Run one ingestion cycle from the odds feed."""
    try:
        asyncio.run(_scrape())
    except OddsServiceError as e:
        console.print(f"\n[red]✗[/red] {e.message}\n")
        raise typer.Exit(code=1)


async def _list_matches(league: str | None) -> None:
    async with MatchStore(settings.database_url) as store:
        matches = await store.find_all()

    if league:
        matches = [m for m in matches if m.league == league]

    if not matches:
        console.print("\n[yellow]No matches found.[/yellow]\n")
        return

    table = Table(title="Matches")
    table.add_column("ID", style="dim")
    table.add_column("Start", style="blue")
    table.add_column("League", style="magenta")
    table.add_column("Match", style="cyan")
    table.add_column("Bookmakers", style="green")
    table.add_column("Snapshots", justify="right")

    for match in matches:
        table.add_row(
            match.id,
            match.start_time.strftime("%Y-%m-%d %H:%M"),
            match.league,
            f"{match.host} - {match.guest}",
            ", ".join(sorted(match.bookmakers)) or "-",
            str(sum(len(history) for history in match.bookmakers.values())),
        )

    console.print()
    console.print(table)
    console.print()


@app.command("list-matches")
def list_matches(
    league: str | None = typer.Option(None, "--league", "-l", help="League key, e.g. England_Premier_League")
):
    """List stored matches and how much odds history each has."""
    asyncio.run(_list_matches(league))


async def _calculate_bet(bet_type: str, legs: list[BetLeg]) -> float:
    bet = bet_request_adapter.validate_python(
        {"betType": bet_type, "matches": [leg.model_dump(by_alias=True) for leg in legs]}
    )
    async with MatchStore(settings.database_url) as store:
        return await calculate_bet(store, bet)


@app.command("calculate-bet")
def calculate_bet_command(
    bet_type: str = typer.Option(..., "--bet-type", "-t", help="single or ako"),
    leg: list[str] = typer.Option(..., "--leg", help="matchId:bookmaker:eventType (repeatable)"),
):
    """Cumulative odds of a bet from the latest stored prices."""
    legs = [parse_leg(raw) for raw in leg]
    try:
        value = asyncio.run(_calculate_bet(bet_type, legs))
    except PydanticValidationError as e:
        console.print(f"\n[red]✗[/red] Invalid bet: {e.errors()[0]['msg']}\n")
        raise typer.Exit(code=2)
    except OddsServiceError as e:
        console.print(f"\n[red]✗[/red] {e.message}\n")
        raise typer.Exit(code=1)
    console.print(f"\n[green]✓[/green] Cumulative odds: [bold]{value:.2f}[/bold]\n")


async def _purge() -> int | None:
    async with MatchStore(settings.database_url) as store:
        return await remove_all_matches(store)


@app.command("purge")
def purge():
    """Permanently delete every match and its odds history."""
    if not typer.confirm("Are you sure you want to delete all matches?"):
        console.print("\n[yellow]Cancelled.[/yellow]\n")
        return

    deleted = asyncio.run(_purge())
    if deleted is None:
        console.print("\n[red]✗[/red] Purge failed, see logs.\n")
        raise typer.Exit(code=1)
    console.print(f"\n[green]✓[/green] {deleted} matches removed.\n")


if __name__ == "__main__":
    app()
