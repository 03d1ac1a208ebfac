"""create dockyard schema

Revision ID: 3c1f0a9e7b21
Revises:
Create Date: 2026-10-18 09:12:44.518203

Creates identities, organizations, memberships and API keys, then the
resource hierarchy: environments, applications, components, container
groups and secrets. Child rows cascade on delete; repositories also delete
descendants explicitly.
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op


# revision identifiers, used by Alembic.
revision: str = "3c1f0a9e7b21"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]


def _parent(owner: str, column: str, table: str) -> sa.Column:
    return sa.Column(
        column,
        sa.Integer,
        sa.ForeignKey(
            f"{table}.id",
            ondelete="CASCADE",
            name=f"fk_{owner}_{column}_{table}",
        ),
        nullable=False,
        index=True,
    )


def upgrade() -> None:
    """Create every table.

    Key constraints:
    - users.username, users.email and organizations.username are unique
    - memberships has one row per (user, organization)
    - secrets keys are unique within a container group
    - container group size and count are limited to the allowed sets
    """
    op.create_table(
        "users",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("username", sa.String(20), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("name", sa.String(50), nullable=False),
        sa.Column("github_id", sa.String(64), nullable=True),
        sa.Column("password_hash", sa.String(255), nullable=True),
        sa.Column("totp_secret", sa.String(64), nullable=True),
        sa.Column(
            "failed_login_attempts",
            sa.Integer,
            nullable=False,
            server_default="0",
        ),
        sa.Column("locked_until", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("username", name="uq_users_username"),
        sa.UniqueConstraint("email", name="uq_users_email"),
        sa.UniqueConstraint("github_id", name="uq_users_github_id"),
    )

    op.create_table(
        "organizations",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(50), nullable=False),
        sa.Column("username", sa.String(20), nullable=False),
        sa.Column(
            "is_personal", sa.Boolean, nullable=False, server_default=sa.false()
        ),
        *_timestamps(),
        sa.UniqueConstraint("username", name="uq_organizations_username"),
    )

    op.create_table(
        "memberships",
        sa.Column(
            "user_id",
            sa.Integer,
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column(
            "organization_id",
            sa.Integer,
            sa.ForeignKey("organizations.id", ondelete="CASCADE"),
            primary_key=True,
            index=True,
        ),
        sa.Column("level", sa.String(10), nullable=False),
        *_timestamps(),
        sa.CheckConstraint(
            "level IN ('read', 'write', 'admin')", name="ck_memberships_level"
        ),
    )

    op.create_table(
        "api_keys",
        sa.Column("id", sa.String(26), primary_key=True),
        _parent("api_keys", "user_id", "users"),
        sa.Column("description", sa.String(255), nullable=False),
        sa.Column("key_hash", sa.String(255), nullable=False),
        sa.Column("prefix", sa.String(12), nullable=False, index=True),
        sa.Column("last_used_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "is_revoked", sa.Boolean, nullable=False, server_default=sa.false()
        ),
        *_timestamps(),
        sa.UniqueConstraint("key_hash", name="uq_api_keys_key_hash"),
    )

    op.create_table(
        "environments",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        _parent("environments", "organization_id", "organizations"),
        sa.Column("name", sa.String(50), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint(
            "organization_id", "name", name="uq_environments_organization_idname"
        ),
    )

    op.create_table(
        "applications",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        _parent("applications", "organization_id", "organizations"),
        sa.Column("name", sa.String(50), nullable=False),
        sa.Column("description", sa.String(500), nullable=False, server_default=""),
        *_timestamps(),
    )

    op.create_table(
        "components",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        _parent("components", "application_id", "applications"),
        sa.Column("name", sa.String(50), nullable=False),
        sa.Column("image", sa.String(255), nullable=False),
        sa.Column("deployment_strategy", sa.String(10), nullable=False),
        *_timestamps(),
        sa.CheckConstraint(
            "deployment_strategy IN ('rolling', 'recreate')",
            name="ck_components_deployment_strategy",
        ),
    )

    op.create_table(
        "container_groups",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        _parent("container_groups", "component_id", "components"),
        _parent("container_groups", "environment_id", "environments"),
        _parent("container_groups", "organization_id", "organizations"),
        sa.Column("size", sa.String(10), nullable=False),
        sa.Column("container_count", sa.Integer, nullable=False),
        *_timestamps(),
        sa.CheckConstraint(
            "size IN ('small', 'medium', 'large', 'xlarge')",
            name="ck_container_groups_size",
        ),
        sa.CheckConstraint(
            "container_count BETWEEN 1 AND 10",
            name="ck_container_groups_container_count",
        ),
    )

    op.create_table(
        "secrets",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        _parent("secrets", "container_group_id", "container_groups"),
        sa.Column("key", sa.String(255), nullable=False),
        sa.Column("value", sa.Text, nullable=False),
        *_timestamps(),
        sa.UniqueConstraint(
            "container_group_id", "key", name="uq_secrets_container_group_idkey"
        ),
    )


def downgrade() -> None:
    """Drop every table, children first."""
    for table in (
        "secrets",
        "container_groups",
        "components",
        "applications",
        "environments",
        "api_keys",
        "memberships",
        "organizations",
        "users",
    ):
        op.drop_table(table)
