from enum import Enum

from pydantic import BaseModel, ConfigDict


class BetType(str, Enum):
    """Supported bet shapes."""

    SINGLE = "single"
    AKO = "ako"  # accumulator


class EventType(str, Enum):
    """1X2 outcomes, in odds-triple order."""

    HOME = "home"
    DRAW = "draw"
    GUEST = "guest"


class CamelCaseModel(BaseModel):
    """Base model with camelCase alias support."""

    model_config = ConfigDict(populate_by_name=True)
