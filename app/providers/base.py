from abc import ABC, abstractmethod

from app.schemas import RawMatchSnapshot


class ProviderInterface(ABC):
    """Interface for odds sources feeding the ingestion job."""

    @staticmethod
    @abstractmethod
    def get_name() -> str:
        """Provider identifier (e.g., 'ODDS_FEED')."""
        ...

    @abstractmethod
    async def fetch_snapshots(self) -> list[RawMatchSnapshot]:
        """Current odds of every scheduled match, one entry per match."""
        ...
