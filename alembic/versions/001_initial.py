"""Initial migration

Revision ID: 001
Revises:
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "matches",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("start_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("host", sa.String(255), nullable=False),
        sa.Column("guest", sa.String(255), nullable=False),
        sa.Column("league", sa.String(255), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index(
        "uq_match_identity",
        "matches",
        ["start_time", "host", "guest", "league"],
        unique=True,
    )
    op.create_index("idx_match_league", "matches", ["league"])

    op.create_table(
        "odds_snapshots",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "match_id",
            sa.String(36),
            sa.ForeignKey("matches.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("bookmaker", sa.String(100), nullable=False),
        sa.Column("timestamp", sa.DateTime(timezone=True), nullable=False),
        sa.Column("home", sa.Float(), nullable=False),
        sa.Column("draw", sa.Float(), nullable=False),
        sa.Column("guest", sa.Float(), nullable=False),
    )
    op.create_index(
        "idx_snapshot_match_bookmaker", "odds_snapshots", ["match_id", "bookmaker"]
    )


def downgrade() -> None:
    op.drop_table("odds_snapshots")
    op.drop_table("matches")
