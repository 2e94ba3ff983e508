"""create users, teams, memberships and profiles tables

Revision ID: 0f1e2d3c4b5a
Revises:
Create Date: 2026-10-18 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = "0f1e2d3c4b5a"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "teams",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("slug", sa.String(255), nullable=True),
        sa.Column("logo_url", sa.String(1024), nullable=True),
        sa.Column("cal_video_logo", sa.String(1024), nullable=True),
        sa.Column("metadata", postgresql.JSONB(), nullable=True),
        sa.Column("is_organization", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("parent_id", sa.Integer(), sa.ForeignKey("teams.id", ondelete="CASCADE"), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint("slug", "parent_id", name="uq_team_slug_parent"),
    )

    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("username", sa.String(255), nullable=True),
        sa.Column("name", sa.String(255), nullable=True),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column("email_verified", sa.DateTime(timezone=True), nullable=True),
        sa.Column("locked", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("role", sa.String(20), nullable=False, server_default="USER"),
        sa.Column("identity_provider", sa.String(20), nullable=False, server_default="CAL"),
        sa.Column("password_hash", sa.String(255), nullable=True),
        sa.Column("two_factor_enabled", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("two_factor_secret", sa.String(255), nullable=True),
        sa.Column("backup_codes", sa.String(1024), nullable=True),
        sa.Column("locale", sa.String(10), nullable=True),
        sa.Column("metadata", postgresql.JSONB(), nullable=True),
        sa.Column("organization_id", sa.Integer(), sa.ForeignKey("teams.id", ondelete="SET NULL"), nullable=True),
        sa.Column("moved_to_profile_id", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    # 레거시 조직 범위 사용자명 고유 — username unique within legacy organization
    op.create_index("ix_users_username_organization_id", "users", ["username", "organization_id"], unique=True)

    op.create_table(
        "memberships",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("team_id", sa.Integer(), sa.ForeignKey("teams.id", ondelete="CASCADE"), nullable=False),
        sa.Column("accepted", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("role", sa.String(20), nullable=False, server_default="MEMBER"),
        sa.UniqueConstraint("user_id", "team_id", name="uq_membership_user_team"),
    )

    op.create_table(
        "profiles",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("uid", sa.String(64), nullable=False, unique=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("organization_id", sa.Integer(), sa.ForeignKey("teams.id", ondelete="CASCADE"), nullable=False),
        sa.Column("username", sa.String(255), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint("user_id", "organization_id", name="uq_profile_user_org"),
        sa.UniqueConstraint("username", "organization_id", name="uq_profile_username_org"),
    )

    # users <-> profiles 순환 참조 — cycle, added after both tables exist
    op.create_foreign_key(
        "fk_users_moved_to_profile", "users", "profiles",
        ["moved_to_profile_id"], ["id"], ondelete="SET NULL",
    )


def downgrade() -> None:
    op.drop_constraint("fk_users_moved_to_profile", "users", type_="foreignkey")
    op.drop_table("profiles")
    op.drop_table("memberships")
    op.drop_index("ix_users_username_organization_id", table_name="users")
    op.drop_table("users")
    op.drop_table("teams")
