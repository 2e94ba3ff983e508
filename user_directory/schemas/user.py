"""사용자 및 프로필 관련 Pydantic 스키마 정의.

User and Profile Pydantic schema definitions.
Every user handed to callers carries a ``profile``; users without an
organization profile get a synthesized personal profile.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel

from user_directory.schemas.team import MembershipResponse, ParsedTeam


# === 프로필 (Profile) 스키마 ===

class UserProfile(BaseModel):
    """사용자 프로필 스키마.

    User profile schema. A personal profile has ``id`` None and an
    ``up_id`` of the form ``usr-<user id>``.

    Attributes:
        id: 저장된 프로필 ID (Stored profile id, None for personal profiles)
        uid: 프로필 외부 식별자 (Opaque profile identifier)
        up_id: 프로필 식별 문자열 (Profile id string or "usr-<user id>")
        username: 조직 내 사용자명 (Organization-scoped username)
        organization_id: 조직 ID (Organization id, None for personal profiles)
        organization: 파싱된 조직 (Parsed organization)
    """

    id: int | None = None
    uid: str | None = None
    up_id: str
    username: str | None = None
    organization_id: int | None = None
    organization: ParsedTeam | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


# === 사용자 (User) 스키마 ===

class UserResponse(BaseModel):
    """사용자 응답 스키마 (자격 증명 제외).

    User response schema without credentials or secrets.
    """

    id: int
    username: str | None = None
    name: str | None = None
    email: str
    locked: bool
    role: str
    identity_provider: str
    locale: str | None = None
    metadata: dict[str, Any] | None = None
    organization_id: int | None = None
    moved_to_profile_id: int | None = None


class UserWithProfile(UserResponse):
    """프로필이 병합된 사용자 스키마.

    User merged with the profile it is being viewed through.
    """

    profile: UserProfile


class UserWithCredentials(BaseModel):
    """인증용 사용자 스키마 — 자격 증명과 전체 프로필 포함.

    Authentication-facing user projection with credentials, team memberships
    and every profile of the user. Never returned over HTTP.
    """

    id: int
    username: str | None = None
    name: str | None = None
    email: str
    locked: bool
    role: str
    identity_provider: str
    password_hash: str | None = None
    two_factor_enabled: bool
    two_factor_secret: str | None = None
    backup_codes: str | None = None
    locale: str | None = None
    metadata: dict[str, Any] | None = None
    teams: list[MembershipResponse]
    all_profiles: list[UserProfile]


class MembershipCheckResponse(BaseModel):
    """조직 멤버 여부 응답.

    Organization membership check response.
    """

    is_member: bool
