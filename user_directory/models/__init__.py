"""SQLAlchemy ORM 모델 패키지 — 모든 도메인 모델의 중앙 임포트 지점.

SQLAlchemy ORM models package — Central import point for all domain models.
Importing from this package ensures all models are registered with the
SQLAlchemy metadata, which is required for Alembic migrations and
relationship resolution.

Modules:
    user: 사용자 (User accounts)
    team: 팀/조직 및 멤버십 (Teams, organizations and memberships)
    profile: 조직 프로필 (Organization-scoped profiles)
"""

from user_directory.models.user import User
from user_directory.models.team import Team, Membership
from user_directory.models.profile import Profile

__all__ = [
    "User",
    "Team", "Membership",
    "Profile",
]
