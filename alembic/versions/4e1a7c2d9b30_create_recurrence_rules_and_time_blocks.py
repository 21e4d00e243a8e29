"""Create recurrence_rules and time_blocks tables

Revision ID: 4e1a7c2d9b30
Revises:
Create Date: 2026-02-16
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "4e1a7c2d9b30"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "recurrence_rules",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("type", sa.String(), nullable=False),
        sa.Column("interval", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("days_of_week", sa.String(), nullable=True),
        sa.Column("end_date", sa.Date(), nullable=True),
        sa.Column("max_occurrences", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )

    op.create_table(
        "time_blocks",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("subtitle", sa.String(), nullable=True),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("start_time", sa.Time(), nullable=False),
        sa.Column("end_time", sa.Time(), nullable=False),
        sa.Column("duration_minutes", sa.Integer(), nullable=False, server_default="30"),
        sa.Column("is_urgent", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("is_completed", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("sort_order", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("is_recurring", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column(
            "recurrence_rule_id",
            sa.String(),
            sa.ForeignKey("recurrence_rules.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("recurrence_parent_id", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )
    op.create_index(op.f("ix_time_blocks_user_id"), "time_blocks", ["user_id"], unique=False)
    op.create_index(op.f("ix_time_blocks_date"), "time_blocks", ["date"], unique=False)
    op.create_index(op.f("ix_time_blocks_recurrence_rule_id"), "time_blocks", ["recurrence_rule_id"], unique=False)
    op.create_index(op.f("ix_time_blocks_recurrence_parent_id"), "time_blocks", ["recurrence_parent_id"], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index(op.f("ix_time_blocks_recurrence_parent_id"), table_name="time_blocks")
    op.drop_index(op.f("ix_time_blocks_recurrence_rule_id"), table_name="time_blocks")
    op.drop_index(op.f("ix_time_blocks_date"), table_name="time_blocks")
    op.drop_index(op.f("ix_time_blocks_user_id"), table_name="time_blocks")
    op.drop_table("time_blocks")
    op.drop_table("recurrence_rules")
