"""프로필 SQLAlchemy ORM 모델 정의.

Profile SQLAlchemy ORM model definition.
A profile ties a user to an organization under an organization-scoped username.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, DateTime, Integer, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from user_directory.database import Base


class Profile(Base):
    """프로필 모델 — 조직 내 사용자 신원.

    Profile model — A user's identity inside one organization.

    Attributes:
        id: 고유 식별자 (Integer primary key)
        uid: 외부 노출용 식별자 (Opaque string identifier)
        user_id: 사용자 FK (Owning user)
        organization_id: 조직 FK (Organization the profile belongs to)
        username: 조직 내 사용자명 (Username, unique within the organization)

    Constraints:
        uq_profile_user_org: 사용자당 조직별 프로필 하나 (One profile per user per org)
        uq_profile_username_org: 조직 내 사용자명 고유 (Unique username per org)
    """

    __tablename__ = "profiles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    uid: Mapped[str] = mapped_column(String(64), unique=True, nullable=False, default=lambda: uuid.uuid4().hex)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    organization_id: Mapped[int] = mapped_column(Integer, ForeignKey("teams.id", ondelete="CASCADE"), nullable=False)
    username: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        UniqueConstraint("user_id", "organization_id", name="uq_profile_user_org"),
        UniqueConstraint("username", "organization_id", name="uq_profile_username_org"),
    )

    # 관계 — Relationships
    user = relationship("User", back_populates="profiles", foreign_keys=[user_id])
    organization = relationship("Team")
