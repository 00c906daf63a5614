"""Initial schema: appointments, blocked_days.

Revision ID: 001_initial
Revises:
Create Date: 2026-01-02

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "appointments",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("client_name", sa.String(), nullable=False),
        sa.Column("client_email", sa.String(), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("time", sa.String(), nullable=False),
        sa.Column("service", sa.String(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("date", "time", name="uq_appointments_date_time"),
    )
    op.create_index(op.f("ix_appointments_client_email"), "appointments", ["client_email"], unique=False)
    op.create_index(op.f("ix_appointments_date"), "appointments", ["date"], unique=False)

    op.create_table(
        "blocked_days",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("blocked_times", sa.JSON(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_blocked_days_date"), "blocked_days", ["date"], unique=True)


def downgrade() -> None:
    op.drop_index(op.f("ix_blocked_days_date"), table_name="blocked_days")
    op.drop_table("blocked_days")
    op.drop_index(op.f("ix_appointments_date"), table_name="appointments")
    op.drop_index(op.f("ix_appointments_client_email"), table_name="appointments")
    op.drop_table("appointments")
