"""Impersonation audit log.

Revision ID: 002
Revises: 001
Create Date: 2026-09-21

"""

from collections.abc import Sequence

from alembic import op
import sqlalchemy as sa

revision: str = "002"
down_revision: str | None = "001"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "impersonation_log",
        sa.Column("session_id", sa.String(255), primary_key=True),
        sa.Column("super_user_id", sa.String(255), nullable=False),
        sa.Column("impersonated_user_id", sa.String(255), nullable=False),
        sa.Column("tenant_id", sa.String(255), nullable=False),
        sa.Column("reason", sa.Text(), nullable=True),
        sa.Column("ip_address", sa.String(64), nullable=True),
        sa.Column("user_agent", sa.Text(), nullable=True),
        sa.Column("started_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("ended_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("actions", sa.JSON(), nullable=False),
        sa.Column("summary", sa.JSON(), nullable=False),
    )
    op.create_index("ix_impersonation_log_super_user", "impersonation_log", ["super_user_id"])
    op.create_index("ix_impersonation_log_tenant", "impersonation_log", ["tenant_id"])


def downgrade() -> None:
    op.drop_table("impersonation_log")
