"""팀/조직 및 멤버십 SQLAlchemy ORM 모델 정의.

Team/Organization and Membership SQLAlchemy ORM model definitions.
An organization is a Team flagged as such; regular teams may hang under an
organization through ``parent_id``.

Tables:
    - teams: 팀 및 조직 (Teams and organizations)
    - memberships: 사용자-팀 연결 (User-team links gated by acceptance)
"""

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import String, Boolean, DateTime, Integer, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from user_directory.database import Base, JSONType

# 멤버십 역할 — Membership roles
MEMBERSHIP_ROLE_MEMBER: str = "MEMBER"
MEMBERSHIP_ROLE_ADMIN: str = "ADMIN"
MEMBERSHIP_ROLE_OWNER: str = "OWNER"


class Team(Base):
    """팀 모델 — 팀 또는 조직(테넌트).

    Team model — A team, or an organization (tenant) when flagged.

    Attributes:
        id: 고유 식별자 (Integer primary key)
        name: 팀 이름 (Team name)
        slug: URL 슬러그 (Public slug, NULL until published)
        logo_url: 로고 URL (Logo URL, optional)
        cal_video_logo: 화상회의 로고 (Video-call logo URL, optional)
        team_metadata: 팀 메타데이터 JSON (Metadata, column "metadata";
                       unpublished organizations carry "requestedSlug")
        is_organization: 조직 여부 (Whether this team is an organization)
        parent_id: 상위 조직 FK (Parent organization for sub-teams)

    Relationships:
        parent: 상위 조직 (Parent organization)
        children: 하위 팀 목록 (Child teams)
        members: 멤버십 목록 (Memberships, cascade delete)
    """

    __tablename__ = "teams"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str | None] = mapped_column(String(255), nullable=True)
    logo_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    cal_video_logo: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    team_metadata: Mapped[dict[str, Any] | None] = mapped_column("metadata", JSONType, nullable=True)
    is_organization: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    parent_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("teams.id", ondelete="CASCADE"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        UniqueConstraint("slug", "parent_id", name="uq_team_slug_parent"),
    )

    # 관계 — Relationships
    parent = relationship("Team", remote_side="Team.id", back_populates="children")
    children = relationship("Team", back_populates="parent", cascade="all, delete-orphan")
    members = relationship("Membership", back_populates="team", cascade="all, delete-orphan")


class Membership(Base):
    """멤버십 모델 — 사용자와 팀의 연결.

    Membership model — Links a user to a team. Pending until ``accepted``.

    Constraints:
        uq_membership_user_team: 사용자-팀 쌍 고유 (One membership per user/team)
    """

    __tablename__ = "memberships"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    team_id: Mapped[int] = mapped_column(Integer, ForeignKey("teams.id", ondelete="CASCADE"), nullable=False)
    # 초대 수락 여부 — Invitation accepted flag
    accepted: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    role: Mapped[str] = mapped_column(String(20), default=MEMBERSHIP_ROLE_MEMBER, nullable=False)

    __table_args__ = (
        UniqueConstraint("user_id", "team_id", name="uq_membership_user_team"),
    )

    # 관계 — Relationships
    user = relationship("User", back_populates="memberships")
    team = relationship("Team", back_populates="members")
