"""사용자 관련 SQLAlchemy ORM 모델 정의.

User SQLAlchemy ORM model definition.
A user is the authentication identity; organization-scoped usernames live
on Profile rows (see models.profile).

Tables:
    - users: 사용자 계정 (User accounts with credentials and settings)
"""

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import String, Boolean, DateTime, Integer, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship

from user_directory.database import Base, JSONType

# 사용자 역할 — User roles
ROLE_USER: str = "USER"
ROLE_ADMIN: str = "ADMIN"

# 인증 제공자 — Identity providers
IDENTITY_PROVIDER_CAL: str = "CAL"
IDENTITY_PROVIDER_GOOGLE: str = "GOOGLE"
IDENTITY_PROVIDER_SAML: str = "SAML"


class User(Base):
    """사용자 모델 — 시스템 사용자 계정 정보.

    User model — System user account information.
    Email is globally unique and always stored lower-cased.
    Username is unique within ``organization_id`` (NULL means no organization).

    Attributes:
        id: 고유 식별자 (Integer primary key)
        username: 로그인 아이디 (Username, optional)
        name: 표시 이름 (Display name)
        email: 이메일 (Email address, unique)
        locked: 계정 잠금 여부 (Whether the account is locked)
        role: 사용자 역할 (USER or ADMIN)
        identity_provider: 인증 제공자 (CAL, GOOGLE, SAML)
        password_hash: 해시된 비밀번호 (Hashed password)
        two_factor_enabled: 2단계 인증 활성 여부 (Two-factor flag)
        two_factor_secret: 2단계 인증 시크릿 (TOTP secret)
        backup_codes: 2단계 인증 백업 코드 (Encrypted backup codes)
        locale: 로케일 (Preferred locale, e.g. "en")
        user_metadata: 사용자 메타데이터 JSON (Free-form metadata, column "metadata")
        organization_id: 레거시 소속 조직 FK (Legacy organization the username is scoped to)
        moved_to_profile_id: 이동된 프로필 FK (Profile this user was moved to)

    Relationships:
        memberships: 팀 멤버십 목록 (Team memberships, cascade delete)
        profiles: 조직 프로필 목록 (Organization profiles, cascade delete)
        organization: 레거시 소속 조직 (Legacy organization)
    """

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str | None] = mapped_column(String(255), nullable=True)
    name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    # 이메일 — 항상 소문자로 저장 (Always stored lower-cased)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    email_verified: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    locked: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    role: Mapped[str] = mapped_column(String(20), default=ROLE_USER, nullable=False)
    identity_provider: Mapped[str] = mapped_column(String(20), default=IDENTITY_PROVIDER_CAL, nullable=False)
    # 자격 증명 — Credentials and secrets (never logged unmasked)
    password_hash: Mapped[str | None] = mapped_column(String(255), nullable=True)
    two_factor_enabled: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    two_factor_secret: Mapped[str | None] = mapped_column(String(255), nullable=True)
    backup_codes: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    locale: Mapped[str | None] = mapped_column(String(10), nullable=True)
    user_metadata: Mapped[dict[str, Any] | None] = mapped_column("metadata", JSONType, nullable=True)
    # 레거시 조직 FK — 조직이 삭제되면 NULL (SET NULL on organization delete)
    organization_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("teams.id", ondelete="SET NULL"), nullable=True
    )
    # users <-> profiles 순환 참조 — use_alter로 제약 조건을 분리 생성
    # users <-> profiles reference cycle, constraint emitted separately via use_alter
    moved_to_profile_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("profiles.id", ondelete="SET NULL", use_alter=True, name="fk_users_moved_to_profile"),
        nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        Index("ix_users_username_organization_id", "username", "organization_id", unique=True),
    )

    # 관계 — Relationships
    memberships = relationship("Membership", back_populates="user", cascade="all, delete-orphan")
    profiles = relationship(
        "Profile",
        back_populates="user",
        foreign_keys="Profile.user_id",
        cascade="all, delete-orphan",
    )
    organization = relationship("Team", foreign_keys=[organization_id])
