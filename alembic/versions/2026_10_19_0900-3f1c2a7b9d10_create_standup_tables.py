"""create standup tables

Revision ID: 3f1c2a7b9d10
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "3f1c2a7b9d10"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema: standup_statuses and standup_parking_lots tables."""
    op.create_table(
        "standup_statuses",
        sa.Column("channel_id", sa.String(length=64), nullable=False),
        sa.Column("standup_date", sa.DateTime(), nullable=False),
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column("yesterday", sa.Text(), nullable=False),
        sa.Column("today", sa.Text(), nullable=False),
        sa.Column("parking_lot", sa.Text(), nullable=True),
        sa.Column("pull_requests", sa.Text(), nullable=True),
        sa.Column("parking_lot_attendees", sa.JSON(), nullable=False),
        sa.Column("schedule_date_str", sa.String(length=10), nullable=True),
        sa.Column("schedule_time_str", sa.String(length=5), nullable=True),
        sa.Column("message_id", sa.String(length=64), nullable=True),
        sa.Column(
            "message_type",
            sa.String(length=16),
            nullable=False,
            server_default="posted",
        ),
        sa.Column("timezone", sa.String(length=64), nullable=True),
        sa.Column(
            "created_at", sa.DateTime(), nullable=False, server_default=sa.text("now()")
        ),
        sa.Column(
            "updated_at", sa.DateTime(), nullable=False, server_default=sa.text("now()")
        ),
        sa.Column("time_to_live", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("channel_id", "standup_date", "user_id"),
    )
    op.create_index(
        "ix_standup_statuses_time_to_live",
        "standup_statuses",
        ["time_to_live"],
        unique=False,
    )

    op.create_table(
        "standup_parking_lots",
        sa.Column("channel_id", sa.String(length=64), nullable=False),
        sa.Column("standup_date", sa.DateTime(), nullable=False),
        sa.Column("items", sa.JSON(), nullable=False),
        sa.Column(
            "created_at", sa.DateTime(), nullable=False, server_default=sa.text("now()")
        ),
        sa.Column(
            "updated_at", sa.DateTime(), nullable=False, server_default=sa.text("now()")
        ),
        sa.Column("time_to_live", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("channel_id", "standup_date"),
    )
    op.create_index(
        "ix_standup_parking_lots_time_to_live",
        "standup_parking_lots",
        ["time_to_live"],
        unique=False,
    )


def downgrade() -> None:
    """Downgrade schema: drop standup tables."""
    op.drop_index(
        "ix_standup_parking_lots_time_to_live", table_name="standup_parking_lots"
    )
    op.drop_table("standup_parking_lots")
    op.drop_index("ix_standup_statuses_time_to_live", table_name="standup_statuses")
    op.drop_table("standup_statuses")
