"""Initial schema - permission, role, auth_group, principal, client.

Revision ID: 001
Revises:
Create Date: 2026-10-19

"""

from collections.abc import Sequence

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _audit_columns() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("created_by", sa.String(255), nullable=True),
        sa.Column("modified_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("modified_by", sa.String(255), nullable=True),
        sa.Column("is_deleted", sa.Boolean(), nullable=False, server_default=sa.false()),
    ]


def upgrade() -> None:
    op.create_table(
        "permission",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column("grain", sa.String(255), nullable=False),
        sa.Column("securable_item", sa.String(255), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("action", sa.String(10), nullable=False, server_default="allow"),
        *_audit_columns(),
    )
    op.create_index(
        "ix_permission_key",
        "permission",
        ["grain", "securable_item", "name"],
        unique=True,
        postgresql_where=sa.text("NOT is_deleted"),
    )

    op.create_table(
        "role",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column("grain", sa.String(255), nullable=False),
        sa.Column("securable_item", sa.String(255), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("parent_role_id", sa.UUID(), nullable=True),
        sa.Column(
            "child_roles", postgresql.ARRAY(sa.UUID()), nullable=False, server_default="{}"
        ),
        sa.Column(
            "permissions", postgresql.ARRAY(sa.UUID()), nullable=False, server_default="{}"
        ),
        sa.Column(
            "denied_permissions",
            postgresql.ARRAY(sa.UUID()),
            nullable=False,
            server_default="{}",
        ),
        *_audit_columns(),
    )
    op.create_index("ix_role_scope", "role", ["grain", "securable_item"])

    op.create_table(
        "auth_group",
        sa.Column("name", sa.String(255), primary_key=True),
        sa.Column("id", sa.String(255), nullable=False),
        sa.Column("source", sa.String(20), nullable=False),
        sa.Column("roles", postgresql.ARRAY(sa.UUID()), nullable=False, server_default="{}"),
        sa.Column("users", postgresql.JSONB(), nullable=False, server_default="[]"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("is_deleted", sa.Boolean(), nullable=False, server_default=sa.false()),
    )
    op.create_index(
        "ix_auth_group_users", "auth_group", ["users"], postgresql_using="gin"
    )

    op.create_table(
        "principal",
        sa.Column("identity_provider", sa.String(255), primary_key=True),
        sa.Column("subject_id", sa.String(255), primary_key=True),
        sa.Column(
            "granular_permissions", postgresql.JSONB(), nullable=False, server_default="[]"
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("modified_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("is_deleted", sa.Boolean(), nullable=False, server_default=sa.false()),
    )

    op.create_table(
        "client",
        sa.Column("id", sa.String(255), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("top_level_securable_item", postgresql.JSONB(), nullable=False),
        *_audit_columns(),
    )


def downgrade() -> None:
    op.drop_table("client")
    op.drop_table("principal")
    op.drop_index("ix_auth_group_users", table_name="auth_group")
    op.drop_table("auth_group")
    op.drop_index("ix_role_scope", table_name="role")
    op.drop_table("role")
    op.drop_index("ix_permission_key", table_name="permission")
    op.drop_table("permission")
