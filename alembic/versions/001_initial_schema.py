"""Initial schema - roles, element permissions, overrides.

Revision ID: 001
Revises:
Create Date: 2026-09-14

"""

from collections.abc import Sequence

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "role",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("description", sa.String(255), nullable=True),
    )
    op.create_index("ix_role_name", "role", ["name"], unique=True)

    op.create_table(
        "user_role",
        sa.Column("actor_id", sa.String(255), primary_key=True),
        sa.Column("role_id", sa.String(64), sa.ForeignKey("role.id", ondelete="CASCADE"), primary_key=True),
        # Empty string means the assignment applies in every tenant
        sa.Column("tenant_id", sa.String(255), primary_key=True, server_default=""),
    )
    op.create_index("ix_user_role_actor", "user_role", ["actor_id"])

    op.create_table(
        "permission",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("scope", sa.JSON(), nullable=True),
    )
    op.create_index("ix_permission_name", "permission", ["name"])

    op.create_table(
        "role_permission",
        sa.Column("role_id", sa.String(64), sa.ForeignKey("role.id", ondelete="CASCADE"), primary_key=True),
        sa.Column(
            "permission_id",
            sa.String(64),
            sa.ForeignKey("permission.id", ondelete="CASCADE"),
            primary_key=True,
        ),
    )

    op.create_table(
        "permission_override",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column("actor_id", sa.String(255), nullable=False),
        sa.Column("resource_id", sa.String(255), nullable=False),
        sa.Column("override_type", sa.String(10), nullable=False),
        sa.Column("issued_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint("override_type IN ('grant', 'deny')", name="ck_permission_override_type"),
    )
    op.create_index(
        "ix_permission_override_actor_resource",
        "permission_override",
        ["actor_id", "resource_id"],
    )

    op.execute("""
        INSERT INTO role (id, name, description) VALUES
        ('viewer', 'viewer', 'See CRM elements'),
        ('editor', 'editor', 'See and edit CRM elements'),
        ('admin', 'admin', 'Full access including permission administration')
    """)
    op.execute("""
        INSERT INTO permission (id, name, scope) VALUES
        ('crm-visible', 'crm:*:visible', NULL),
        ('crm-accessible', 'crm:*:accessible', NULL),
        ('crm-enabled', 'crm:*:enabled', NULL),
        ('crm-editable', 'crm:*:editable', '{"tenant_match": "current"}'),
        ('crm-all', 'crm:*', NULL)
    """)
    op.execute("""
        INSERT INTO role_permission (role_id, permission_id) VALUES
        ('viewer', 'crm-visible'),
        ('viewer', 'crm-accessible'),
        ('editor', 'crm-visible'),
        ('editor', 'crm-accessible'),
        ('editor', 'crm-enabled'),
        ('editor', 'crm-editable'),
        ('admin', 'crm-all')
    """)


def downgrade() -> None:
    op.drop_table("permission_override")
    op.drop_table("role_permission")
    op.drop_table("permission")
    op.drop_table("user_role")
    op.drop_table("role")
