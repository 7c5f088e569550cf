import uuid
from datetime import datetime

from sqlalchemy import DateTime, Float, ForeignKey, Index, String, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    pass


class Match(Base):
    """One scheduled match, identified by (start_time, host, guest, league)."""

    __tablename__ = "matches"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    start_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    host: Mapped[str] = mapped_column(String(255), nullable=False)
    guest: Mapped[str] = mapped_column(String(255), nullable=False)
    league: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    snapshots: Mapped[list["OddsSnapshotRow"]] = relationship(
        "OddsSnapshotRow", back_populates="match", cascade="all, delete-orphan"
    )

    __table_args__ = (
        Index("uq_match_identity", "start_time", "host", "guest", "league", unique=True),
        Index("idx_match_league", "league"),
    )


class OddsSnapshotRow(Base):
    """Append-only 1X2 odds scraped for one match from one bookmaker."""

    __tablename__ = "odds_snapshots"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    match_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("matches.id", ondelete="CASCADE"), nullable=False
    )
    bookmaker: Mapped[str] = mapped_column(String(100), nullable=False)
    timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    home: Mapped[float] = mapped_column(Float, nullable=False)
    draw: Mapped[float] = mapped_column(Float, nullable=False)
    guest: Mapped[float] = mapped_column(Float, nullable=False)

    match: Mapped["Match"] = relationship("Match", back_populates="snapshots")

    __table_args__ = (
        Index("idx_snapshot_match_bookmaker", "match_id", "bookmaker"),
    )

    @property
    def odds(self) -> tuple[float, float, float]:
        return (self.home, self.draw, self.guest)
