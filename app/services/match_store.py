"""PostgreSQL-backed odds history store."""

import logging
import uuid
from collections import defaultdict
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from datetime import datetime

from sqlalchemy import Select, delete, select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from app.exceptions import DatabaseError
from app.models import Match, OddsSnapshotRow
from app.schemas.matches import MatchOdds, MatchResponse, MatchUpsert, OddsSnapshot

logger = logging.getLogger(__name__)

IDENTITY_COLUMNS = ["start_time", "host", "guest", "league"]

BookmakerHistory = dict[str, list[OddsSnapshot]]


@contextmanager
def _db_errors(operation: str, table: str = "matches") -> Iterator[None]:
    try:
        yield
    except SQLAlchemyError as e:
        logger.error(f"Database {operation} on {table} failed: {e}")
        raise DatabaseError(operation=operation, table=table) from e


def group_snapshots(rows: Sequence[OddsSnapshotRow]) -> dict[str, BookmakerHistory]:
    """Group snapshot rows by match ID, then bookmaker, in storage order."""
    grouped: dict[str, BookmakerHistory] = defaultdict(lambda: defaultdict(list))
    for row in rows:
        grouped[row.match_id][row.bookmaker].append(
            OddsSnapshot(timestamp=row.timestamp, odds=row.odds)
        )
    return {match_id: dict(history) for match_id, history in grouped.items()}


class MatchStore:
    """Matches and their per-bookmaker odds history.

    Must be opened before use and closed on shutdown; every method runs in
    its own session.
    """

    def __init__(self, database_url: str):
        self.database_url = database_url
        self._engine: AsyncEngine | None = None
        self._session_maker: async_sessionmaker[AsyncSession] | None = None

    async def open(self) -> None:
        if self._engine is None:
            self._engine = create_async_engine(self.database_url, pool_pre_ping=True)
            self._session_maker = async_sessionmaker(self._engine, expire_on_commit=False)

    async def close(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            self._session_maker = None

    async def __aenter__(self) -> "MatchStore":
        await self.open()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    def session(self) -> AsyncSession:
        if self._session_maker is None:
            raise DatabaseError("Match store is not open", operation="session")
        return self._session_maker()

    async def find_by_ids(self, match_ids: list[str]) -> list[MatchOdds]:
        """Lean records (ID and odds history) for the given match IDs."""
        if not match_ids:
            return []

        with _db_errors("find_by_ids"):
            async with self.session() as db:
                result = await db.execute(select(Match.id).where(Match.id.in_(match_ids)))
                found = list(result.scalars().all())
                if not found:
                    return []

                result = await db.execute(
                    select(OddsSnapshotRow)
                    .where(OddsSnapshotRow.match_id.in_(found))
                    .order_by(OddsSnapshotRow.id)
                )
                history = group_snapshots(result.scalars().all())

        return [MatchOdds(id=match_id, bookmakers=history.get(match_id, {})) for match_id in found]

    async def find_matches(
        self,
        start: datetime,
        end: datetime,
        league: str | None = None,
        bookmaker: str | None = None,
    ) -> list[MatchResponse]:
        """Matches starting in [start, end), optionally filtered by league.

        With a bookmaker, only that bookmaker's odds history is returned.
        """
        stmt = select(Match).where(Match.start_time >= start, Match.start_time < end)
        if league:
            stmt = stmt.where(Match.league == league)
        return await self._load_matches(stmt, bookmaker)

    async def find_all(self) -> list[MatchResponse]:
        return await self._load_matches(select(Match))

    async def _load_matches(
        self, stmt: Select, bookmaker: str | None = None
    ) -> list[MatchResponse]:
        with _db_errors("find_matches"):
            async with self.session() as db:
                result = await db.execute(stmt.order_by(Match.start_time))
                matches = list(result.scalars().all())
                if not matches:
                    return []

                snapshot_stmt = select(OddsSnapshotRow).where(
                    OddsSnapshotRow.match_id.in_([m.id for m in matches])
                )
                if bookmaker:
                    snapshot_stmt = snapshot_stmt.where(OddsSnapshotRow.bookmaker == bookmaker)
                result = await db.execute(snapshot_stmt.order_by(OddsSnapshotRow.id))
                history = group_snapshots(result.scalars().all())

        return [
            MatchResponse(
                id=m.id,
                start_time=m.start_time,
                host=m.host,
                guest=m.guest,
                league=m.league,
                bookmakers=history.get(m.id, {}),
            )
            for m in matches
        ]

    async def bulk_upsert(self, operations: list[MatchUpsert]) -> int:
        """Insert unseen matches and append their snapshots in one transaction.

        Returns the number of snapshots appended.
        """
        snapshot_rows: list[dict] = []

        with _db_errors("bulk_upsert"):
            async with self.session() as db:
                async with db.begin():
                    for op in operations:
                        stmt = insert(Match).values(
                            id=str(uuid.uuid4()),
                            start_time=op.start_time,
                            host=op.host,
                            guest=op.guest,
                            league=op.league,
                        )
                        # No-op update so RETURNING also yields an existing row's id
                        stmt = stmt.on_conflict_do_update(
                            index_elements=IDENTITY_COLUMNS,
                            set_={"host": stmt.excluded.host},
                        ).returning(Match.id)
                        match_id = (await db.execute(stmt)).scalar_one()

                        for bookmaker, snapshot in op.snapshots.items():
                            home, draw, guest = snapshot.odds
                            snapshot_rows.append(
                                {
                                    "match_id": match_id,
                                    "bookmaker": bookmaker,
                                    "timestamp": snapshot.timestamp,
                                    "home": home,
                                    "draw": draw,
                                    "guest": guest,
                                }
                            )

                    if snapshot_rows:
                        await db.execute(insert(OddsSnapshotRow), snapshot_rows)

        return len(snapshot_rows)

    async def delete_all(self) -> int:
        """Delete every match; snapshots go with them (ON DELETE CASCADE)."""
        with _db_errors("delete_all"):
            async with self.session() as db:
                async with db.begin():
                    result = await db.execute(delete(Match))
        return result.rowcount
