"""사용자 레포지토리 — 사용자 조회, 조직 멤버십 및 프로필 병합.

User Repository — User lookups, organization membership and profile merging.
A user can belong to several organizations; organization usernames live on
profiles, so lookups scoped to an organization go through ProfileRepository.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from sqlalchemy import ColumnElement, Select, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import load_only, selectinload

from user_directory.models.profile import Profile
from user_directory.models.team import Membership, Team
from user_directory.models.user import User
from user_directory.repositories.base import BaseRepository
from user_directory.repositories.profile_repository import profile_repository
from user_directory.schemas.user import UserProfile, UserResponse, UserWithCredentials, UserWithProfile
from user_directory.utils.exceptions import ProfileNotFoundError
from user_directory.utils.logger import get_logger, safe_stringify
from user_directory.utils.team import get_parsed_team, is_organization, membership_to_response

log = get_logger("repository.user")


@dataclass
class TeamMemberships:
    """사용자 멤버십을 수락 여부로 분류한 결과.

    A user's memberships split by acceptance. ``accepted_team_memberships``
    and ``pending_team_memberships`` partition ``memberships``.
    """

    teams: list[Team] = field(default_factory=list)
    memberships: list[Membership] = field(default_factory=list)
    accepted_team_memberships: list[Membership] = field(default_factory=list)
    pending_team_memberships: list[Membership] = field(default_factory=list)


def to_user_response(user: User) -> UserResponse:
    """사용자 모델을 응답 스키마로 변환합니다 (자격 증명 제외).

    Convert a User model into a UserResponse without credentials.
    """
    return UserResponse(
        id=user.id,
        username=user.username,
        name=user.name,
        email=user.email,
        locked=user.locked,
        role=user.role,
        identity_provider=user.identity_provider,
        locale=user.locale,
        metadata=user.user_metadata,
        organization_id=user.organization_id,
        moved_to_profile_id=user.moved_to_profile_id,
    )


def _with_profile(user: User, profile: UserProfile) -> UserWithProfile:
    return UserWithProfile(**to_user_response(user).model_dump(), profile=profile)


def _get(obj: Any, key: str) -> Any:
    if isinstance(obj, Mapping):
        return obj.get(key)
    return getattr(obj, key, None)


class UserRepository(BaseRepository[User]):
    """사용자 테이블에 대한 데이터베이스 쿼리를 담당하는 레포지토리.

    Repository handling database queries for the users table.
    Not-found results are returned as None, never raised.
    """

    def __init__(self) -> None:
        """UserRepository를 초기화합니다.

        Initialize the UserRepository with the User model.
        """
        super().__init__(User)

    async def find_teams_by_user_id(
        self,
        db: AsyncSession,
        user_id: int,
    ) -> TeamMemberships:
        """사용자의 팀 멤버십을 조회하고 수락 여부로 분류합니다.

        Retrieve a user's team memberships and classify them by acceptance.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            user_id: 사용자 ID (User id)

        Returns:
            TeamMemberships: 수락된 팀, 전체/수락/대기 멤버십
                             (Accepted teams and all/accepted/pending memberships)
        """
        query: Select = (
            select(Membership)
            .options(selectinload(Membership.team))
            .where(Membership.user_id == user_id)
            .order_by(Membership.id)
        )
        result = await db.execute(query)
        memberships: list[Membership] = list(result.scalars().all())

        accepted: list[Membership] = [m for m in memberships if m.accepted]
        pending: list[Membership] = [m for m in memberships if not m.accepted]

        return TeamMemberships(
            teams=[m.team for m in accepted],
            memberships=memberships,
            accepted_team_memberships=accepted,
            pending_team_memberships=pending,
        )

    async def find_organizations(
        self,
        db: AsyncSession,
        user_id: int,
    ) -> list[Team]:
        """사용자가 수락한 멤버십 중 조직인 팀을 조회합니다.

        Retrieve the organizations the user has an accepted membership in.
        """
        memberships: TeamMemberships = await self.find_teams_by_user_id(db, user_id)
        return [
            m.team for m in memberships.accepted_team_memberships if is_organization(m.team)
        ]

    async def find_users_by_username(
        self,
        db: AsyncSession,
        usernames: list[str],
        org_slug: str | None = None,
    ) -> list[UserWithProfile]:
        """사용자명 목록으로 사용자를 조회하고 프로필을 병합합니다.

        Retrieve users by username, aware that a user can be part of several
        organizations. With ``org_slug`` the usernames are organization
        usernames resolved through profiles; without it they are plain
        usernames of users outside any organization.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            usernames: 사용자명 목록 (Usernames to look up)
            org_slug: 조직 슬러그 또는 요청 슬러그 (Organization slug, optional)

        Returns:
            list[UserWithProfile]: 매칭된 사용자마다 하나의 항목
                                   (One entry per matched user)

        Raises:
            ProfileNotFoundError: 조회에 사용한 프로필이 사용자에 없음
                                  (A user resolved through profiles has none of them)
        """
        conditions, profiles = await self._get_where_clause_for_finding_users_by_username(
            db, usernames, org_slug
        )
        log.debug(
            "find_users_by_username %s",
            safe_stringify({"org_slug": org_slug, "usernames": usernames, "profiles": profiles}),
        )

        result = await db.execute(select(User).where(*conditions).order_by(User.id))
        users: list[User] = list(result.scalars().all())

        enriched: list[UserWithProfile] = []
        for user in users:
            # 조직 밖의 사용자 — User isn't part of any organization
            if profiles is None:
                enriched.append(
                    _with_profile(user, profile_repository.build_personal_profile_from_user(user))
                )
                continue

            profile: Profile | None = next((p for p in profiles if p.user_id == user.id), None)
            if profile is None:
                log.error(
                    "Profile not found for user %s",
                    safe_stringify({"user": user, "profiles": profiles}),
                )
                # 프로필로 사용자를 찾았으므로 반드시 존재해야 함
                # The profile was used to retrieve the user, so it must be there
                raise ProfileNotFoundError()
            enriched.append(_with_profile(user, profile_repository.to_user_profile(profile)))

        return enriched

    async def _get_where_clause_for_finding_users_by_username(
        self,
        db: AsyncSession,
        usernames: list[str],
        org_slug: str | None,
    ) -> tuple[list[ColumnElement[bool]], list[Profile] | None]:
        """사용자명 조회용 조건과 (조직 범위일 때) 사용한 프로필을 반환합니다.

        Build the user filter for a username lookup, plus the profiles used to
        build it when the lookup is organization-scoped (None otherwise).
        """
        if org_slug:
            # 조직 사용자명은 프로필에 존재 — organization usernames live on profiles
            profiles: list[Profile] = await profile_repository.find_many_by_org_slug_or_requested_slug(
                db, org_slug=org_slug, usernames=usernames
            )
            return [User.id.in_([p.user_id for p in profiles])], profiles

        return [User.username.in_(usernames), User.organization_id.is_(None)], None

    async def find_by_email_and_include_profiles(
        self,
        db: AsyncSession,
        email: str,
    ) -> UserWithCredentials | None:
        """이메일로 사용자를 조회하고 자격 증명 및 전체 프로필을 포함합니다.

        Retrieve a user by email (case-insensitive) with the fixed projection
        used for authentication, its memberships and all of its profiles.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            email: 이메일 주소 (Email address)

        Returns:
            UserWithCredentials | None: 인증용 사용자 또는 None
                                        (Authentication projection or None)
        """
        query: Select = (
            select(User)
            .options(
                load_only(
                    User.id,
                    User.locked,
                    User.role,
                    User.username,
                    User.name,
                    User.email,
                    User.user_metadata,
                    User.identity_provider,
                    User.password_hash,
                    User.two_factor_enabled,
                    User.two_factor_secret,
                    User.backup_codes,
                    User.locale,
                ),
                selectinload(User.memberships).selectinload(Membership.team),
            )
            .where(User.email == email.lower())
        )
        result = await db.execute(query)
        user: User | None = result.scalar_one_or_none()
        if user is None:
            return None

        all_profiles: list[UserProfile] = (
            await profile_repository.find_all_profiles_for_user_including_moved_user(db, user)
        )
        return UserWithCredentials(
            id=user.id,
            username=user.username,
            name=user.name,
            email=user.email,
            locked=user.locked,
            role=user.role,
            identity_provider=user.identity_provider,
            password_hash=user.password_hash,
            two_factor_enabled=user.two_factor_enabled,
            two_factor_secret=user.two_factor_secret,
            backup_codes=user.backup_codes,
            locale=user.locale,
            metadata=user.user_metadata,
            teams=[membership_to_response(m) for m in user.memberships],
            all_profiles=all_profiles,
        )

    async def find_by_id(
        self,
        db: AsyncSession,
        user_id: int,
    ) -> User | None:
        """ID로 사용자를 조회합니다 (User by id, or None)."""
        return await self.get_by_id(db, user_id)

    async def find_by_id_with_profiles(
        self,
        db: AsyncSession,
        user_id: int,
    ) -> User | None:
        """프로필이 로드된 사용자를 조회합니다 (User with profiles loaded, or None)."""
        query: Select = (
            select(User).options(selectinload(User.profiles)).where(User.id == user_id)
        )
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def find_many_by_organization(
        self,
        db: AsyncSession,
        organization_id: int,
    ) -> list[User]:
        """조직의 프로필을 통해 조직에 속한 사용자 목록을 조회합니다.

        Retrieve the users of an organization through its profiles.
        """
        profiles: list[Profile] = await profile_repository.find_many_for_org(db, organization_id)
        return [profile.user for profile in profiles]

    @staticmethod
    def is_a_member_of_organization(user: Any, organization_id: int) -> bool:
        """사용자의 프로필 중 조직 ID가 일치하는 것이 있는지 확인합니다.

        Return True iff one of ``user.profiles`` belongs to ``organization_id``.
        Works on ORM users with profiles loaded and on plain mappings.
        """
        profiles = _get(user, "profiles") or []
        return any(_get(profile, "organization_id") == organization_id for profile in profiles)

    async def enrich_user_with_the_profile(
        self,
        db: AsyncSession,
        user: User,
        up_id: str,
    ) -> UserWithProfile:
        """upId로 찾은 프로필을 사용자에 병합합니다.

        Attach the profile addressed by ``up_id``; fall back to the personal
        profile when it does not resolve.
        """
        log.debug("enrich_user_with_the_profile %s", safe_stringify({"user": user, "up_id": up_id}))
        profile: UserProfile | None = await profile_repository.find_by_up_id(db, up_id)
        if profile is None:
            return _with_profile(user, profile_repository.build_personal_profile_from_user(user))
        return _with_profile(user, profile)

    async def enrich_user_with_its_profile(
        self,
        db: AsyncSession,
        user: User,
    ) -> UserWithProfile:
        """upId 없이 사용자의 프로필을 병합합니다.

        Attach the user's own profile when the profile id is not known. This
        covers a user not yet added to any organization (personal profile),
        and a user that was moved to a profile when invited to an organization
        (first organization profile, whose username replaces the user's).
        """
        profiles: list[UserProfile] = await profile_repository.find_many_for_user(db, user.id)
        if profiles:
            profile: UserProfile = profiles[0]
            return _with_profile(user, profile).model_copy(update={"username": profile.username})

        # 조직 프로필이 없으면 개인 프로필로 정규화
        # No organization profile: normalize with the personal profile
        return _with_profile(user, profile_repository.build_personal_profile_from_user(user))

    async def enrich_entity_with_profile(
        self,
        db: AsyncSession,
        entity: Mapping[str, Any],
    ) -> dict[str, Any]:
        """엔티티 페이로드에 프로필을 병합합니다.

        Normalize the profile of an entity payload.

        - An entity carrying ``profile`` gets ``profile.organization`` replaced
          by the parsed organization (or None).
        - An entity carrying ``user`` gets the user's first organization
          profile, or the personal profile.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            entity: ``profile`` 또는 ``user``를 가진 매핑 (Mapping with "profile" or "user")

        Returns:
            dict[str, Any]: 프로필이 정규화된 새 딕셔너리 (New dict with normalized profile)
        """
        if "profile" in entity:
            entity_without_profile: dict[str, Any] = {k: v for k, v in entity.items() if k != "profile"}
            profile: dict[str, Any] = dict(entity["profile"] or {})
            organization = profile.pop("organization", None)
            return {
                **entity_without_profile,
                "profile": {
                    **profile,
                    "organization": get_parsed_team(organization) if organization else None,
                },
            }

        user = entity["user"]
        profiles: list[UserProfile] = await profile_repository.find_many_for_user(db, _get(user, "id"))
        if not profiles:
            return {**entity, "profile": profile_repository.build_personal_profile_from_user(user)}
        return {**entity, "profile": profiles[0]}

    async def update_where_id(
        self,
        db: AsyncSession,
        user_id: int,
        moved_to_profile_id: int | None = None,
    ) -> User | None:
        """사용자의 이동된 프로필 포인터를 갱신합니다.

        Point the user's ``moved_to_profile_id`` at the given profile. A falsy
        ``moved_to_profile_id`` leaves the pointer unchanged.

        Returns:
            User | None: 사용자 또는 None (The user, or None when not found)
        """
        if not moved_to_profile_id:
            return await self.get_by_id(db, user_id)
        return await self.update(db, user_id, {"moved_to_profile_id": moved_to_profile_id})


# 싱글턴 인스턴스 — Singleton instance
user_repository: UserRepository = UserRepository()
