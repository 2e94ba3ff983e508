"""프로필 레포지토리 — 조직 범위 프로필 조회 및 개인 프로필 생성.

Profile Repository — Organization-scoped profile queries.
Also synthesizes the *personal profile* of a user who has no organization
profile, so callers always see the same profile shape.
"""

from collections.abc import Mapping
from typing import Any

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from user_directory.models.profile import Profile
from user_directory.models.team import Team
from user_directory.models.user import User
from user_directory.repositories.base import BaseRepository
from user_directory.repositories.organization_repository import organization_repository
from user_directory.schemas.user import UserProfile
from user_directory.utils.logger import get_logger, safe_stringify
from user_directory.utils.team import get_parsed_team

log = get_logger("repository.profile")

# 개인 프로필 upId 접두사 — upId prefix of personal profiles ("usr-<user id>")
PERSONAL_PROFILE_PREFIX: str = "usr-"

# ID 컬럼 범위 — Integer primary keys are positive 32-bit values
_MAX_ID: int = 2**31 - 1


def _user_attr(user: Any, key: str) -> Any:
    if isinstance(user, Mapping):
        return user.get(key)
    return getattr(user, key)


def _parse_id(raw: str) -> int | None:
    """upId의 숫자 부분을 ID로 변환합니다 (None if not a valid row id)."""
    # ASCII 숫자만 허용 — "²" or full-width digits are not row ids
    if not raw.isascii() or not raw.isdecimal():
        return None
    value: int = int(raw)
    if not 0 < value <= _MAX_ID:
        return None
    return value


class ProfileRepository(BaseRepository[Profile]):
    """프로필 테이블에 대한 데이터베이스 쿼리를 담당하는 레포지토리.

    Repository handling database queries for the profiles table.
    """

    def __init__(self) -> None:
        super().__init__(Profile)

    @staticmethod
    def build_personal_profile_from_user(user: Any) -> UserProfile:
        """사용자 정보로 개인 프로필을 합성합니다.

        Synthesize the personal profile of a user that has no organization
        profile. Accepts an ORM user, a pydantic user or a mapping with
        ``id`` and ``username``.
        """
        user_id: int = _user_attr(user, "id")
        return UserProfile(
            id=None,
            uid=None,
            up_id=f"{PERSONAL_PROFILE_PREFIX}{user_id}",
            username=_user_attr(user, "username"),
            organization_id=None,
            organization=None,
        )

    @staticmethod
    def to_user_profile(profile: Profile) -> UserProfile:
        """저장된 프로필을 UserProfile로 변환합니다 (organization이 로드되어 있어야 함).

        Convert a stored profile into a UserProfile. ``profile.organization``
        must already be loaded.
        """
        return UserProfile(
            id=profile.id,
            uid=profile.uid,
            up_id=str(profile.id),
            username=profile.username,
            organization_id=profile.organization_id,
            organization=get_parsed_team(profile.organization) if profile.organization else None,
            created_at=profile.created_at,
            updated_at=profile.updated_at,
        )

    async def find_many_by_org_slug_or_requested_slug(
        self,
        db: AsyncSession,
        org_slug: str,
        usernames: list[str],
    ) -> list[Profile]:
        """조직 슬러그(또는 요청 슬러그)와 사용자명 목록으로 프로필을 조회합니다.

        Retrieve profiles whose username is in ``usernames`` inside the
        organization addressed by ``org_slug`` (slug or requested slug).

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            org_slug: 조직 슬러그 (Organization slug or requested slug)
            usernames: 조직 내 사용자명 목록 (Organization-scoped usernames)

        Returns:
            list[Profile]: user 및 organization이 로드된 프로필 목록
                           (Profiles with user and organization loaded)
        """
        query: Select = (
            select(Profile)
            .join(Team, Profile.organization_id == Team.id)
            .options(selectinload(Profile.user), selectinload(Profile.organization))
            .where(
                Profile.username.in_(usernames),
                organization_repository.where_slug_or_requested_slug(org_slug),
            )
            .order_by(Profile.id)
        )
        result = await db.execute(query)
        return list(result.scalars().all())

    async def find_many_for_org(
        self,
        db: AsyncSession,
        organization_id: int,
    ) -> list[Profile]:
        """조직의 모든 프로필을 사용자와 함께 조회합니다.

        Retrieve every profile of an organization with its user loaded.
        """
        query: Select = (
            select(Profile)
            .options(selectinload(Profile.user))
            .where(Profile.organization_id == organization_id)
            .order_by(Profile.id)
        )
        result = await db.execute(query)
        return list(result.scalars().all())

    async def find_many_for_user(
        self,
        db: AsyncSession,
        user_id: int,
    ) -> list[UserProfile]:
        """사용자의 조직 프로필을 생성 순으로 조회합니다.

        Retrieve a user's organization profiles, oldest first, with the
        organization parsed.
        """
        query: Select = (
            select(Profile)
            .options(selectinload(Profile.organization))
            .where(Profile.user_id == user_id)
            .order_by(Profile.created_at, Profile.id)
        )
        result = await db.execute(query)
        return [self.to_user_profile(profile) for profile in result.scalars().all()]

    async def find_all_profiles_for_user_including_moved_user(
        self,
        db: AsyncSession,
        user: Any,
    ) -> list[UserProfile]:
        """사용자의 모든 프로필을 반환하고, 없으면 개인 프로필 하나를 반환합니다.

        Return all profiles of the user, or a single personal profile when the
        user has no organization profile yet.
        """
        profiles: list[UserProfile] = await self.find_many_for_user(db, _user_attr(user, "id"))
        if not profiles:
            return [self.build_personal_profile_from_user(user)]
        return profiles

    async def find_by_id_with_organization(
        self,
        db: AsyncSession,
        profile_id: int,
    ) -> Profile | None:
        """프로필을 조직과 함께 조회합니다 (Profile with organization loaded, or None)."""
        query: Select = (
            select(Profile)
            .options(selectinload(Profile.organization))
            .where(Profile.id == profile_id)
        )
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def find_by_up_id(
        self,
        db: AsyncSession,
        up_id: str,
    ) -> UserProfile | None:
        """upId로 프로필을 조회합니다.

        Resolve a profile from its upId. ``usr-<id>`` resolves the user and
        synthesizes its personal profile; a numeric upId resolves the stored
        profile. Anything else, or a missing row, yields None.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            up_id: 프로필 식별 문자열 (Profile id string or "usr-<user id>")

        Returns:
            UserProfile | None: 조회된 프로필 또는 None (Resolved profile or None)
        """
        if up_id.startswith(PERSONAL_PROFILE_PREFIX):
            user_id: int | None = _parse_id(up_id[len(PERSONAL_PROFILE_PREFIX):])
            if user_id is None:
                log.warning("Invalid personal upId %s", safe_stringify({"up_id": up_id}))
                return None
            user: User | None = await db.get(User, user_id)
            if user is None:
                return None
            return self.build_personal_profile_from_user(user)

        profile_id: int | None = _parse_id(up_id)
        if profile_id is None:
            log.warning("Invalid upId %s", safe_stringify({"up_id": up_id}))
            return None
        profile: Profile | None = await self.find_by_id_with_organization(db, profile_id)
        if profile is None:
            return None
        return self.to_user_profile(profile)

    async def create(
        self,
        db: AsyncSession,
        obj_data: dict[str, Any],
    ) -> Profile:
        """프로필을 생성합니다. 조직 내 사용자명은 소문자로 저장합니다.

        Create a profile; the organization-scoped username is stored lower-cased.
        """
        data: dict[str, Any] = dict(obj_data)
        if data.get("username"):
            data["username"] = data["username"].lower()
        return await super().create(db, data)

    async def create_for_existing_user(
        self,
        db: AsyncSession,
        user_id: int,
        organization_id: int,
        username: str,
    ) -> Profile:
        """기존 사용자를 조직으로 이동시키며 프로필을 생성합니다.

        Create an organization profile for an existing user and point the
        user's ``moved_to_profile_id`` at it.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            user_id: 사용자 ID (User id)
            organization_id: 조직 ID (Organization id)
            username: 조직 내 사용자명 (Organization-scoped username)

        Returns:
            Profile: 생성된 프로필 (The created profile)
        """
        # 순환 임포트 방지 — user_repository imports this module
        from user_directory.repositories.user_repository import user_repository

        profile: Profile = await self.create(
            db,
            {"user_id": user_id, "organization_id": organization_id, "username": username},
        )
        await user_repository.update_where_id(db, user_id, moved_to_profile_id=profile.id)
        log.info(
            "Moved user to profile %s",
            safe_stringify({"user_id": user_id, "profile_id": profile.id, "organization_id": organization_id}),
        )
        return profile


# 싱글턴 인스턴스 — Singleton instance
profile_repository: ProfileRepository = ProfileRepository()
