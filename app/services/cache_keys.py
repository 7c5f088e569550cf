"""Cache key derivation for match listings and bet calculations."""

from collections.abc import Sequence
from enum import Enum
from urllib.parse import quote

from app.schemas.bets import BetLeg
from app.schemas.common import BetType, EventType

ALL_PLACEHOLDER = "all"


def matches_cache_key(league: str | None = None, bookmaker: str | None = None) -> str:
    """Key for a matches listing: league first, then bookmaker.

    An absent filter is the bare placeholder. A defined filter is written as
    ``name=<percent-encoded value>``, so no value can produce the placeholder
    or spill into the other field (``=`` and ``%`` are always encoded).
    """
    return f"matches_{_filter_part('league', league)}_{_filter_part('bookmaker', bookmaker)}"


def _filter_part(name: str, value: str | None) -> str:
    if value is None:
        return ALL_PLACEHOLDER
    return f"{name}={quote(value, safe='')}"


def bet_cache_key(bet_type: BetType | str, legs: Sequence[BetLeg]) -> str:
    """Key for a bet calculation, independent of the order of the legs.

    Legs are sorted on a copy; the caller's sequence keeps its order.
    """
    ordered = sorted(legs, key=lambda leg: leg.match_id)
    bet_key = "_".join(
        f"{leg.match_id}_{leg.bookmaker}_{_value(leg.event_type)}" for leg in ordered
    )
    return f"{_value(bet_type)}_{bet_key}"


def _value(member: BetType | EventType | str) -> str:
    return member.value if isinstance(member, Enum) else member
