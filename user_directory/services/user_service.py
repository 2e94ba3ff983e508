"""사용자 서비스 — 사용자 조회 및 프로필 병합 비즈니스 로직.

User Service — Business logic behind the read-only user directory endpoints.
Maps repository results to response schemas and turns missing rows into
NotFoundError.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from user_directory.models.team import Team
from user_directory.models.user import User
from user_directory.repositories.organization_repository import organization_repository
from user_directory.repositories.user_repository import TeamMemberships, to_user_response, user_repository
from user_directory.schemas.team import ParsedTeam, TeamMembershipsResponse
from user_directory.schemas.user import MembershipCheckResponse, UserResponse, UserWithProfile
from user_directory.utils.exceptions import NotFoundError
from user_directory.utils.team import get_parsed_team, membership_to_response


class UserService:
    """사용자 조회 관련 비즈니스 로직을 처리하는 서비스.

    Service handling user lookup business logic.
    """

    async def _get_user_or_404(self, db: AsyncSession, user_id: int) -> User:
        user: User | None = await user_repository.find_by_id(db, user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    async def get_user(
        self,
        db: AsyncSession,
        user_id: int,
    ) -> UserResponse:
        """사용자 정보를 조회합니다.

        Retrieve a user.

        Raises:
            NotFoundError: 사용자를 찾을 수 없을 때 (User not found)
        """
        return to_user_response(await self._get_user_or_404(db, user_id))

    async def get_user_with_profile(
        self,
        db: AsyncSession,
        user_id: int,
    ) -> UserWithProfile:
        """사용자를 자신의 프로필과 함께 조회합니다.

        Retrieve a user merged with its own profile (first organization
        profile, or the personal profile).
        """
        user: User = await self._get_user_or_404(db, user_id)
        return await user_repository.enrich_user_with_its_profile(db, user)

    async def find_by_usernames(
        self,
        db: AsyncSession,
        usernames: list[str],
        org_slug: str | None = None,
    ) -> list[UserWithProfile]:
        """사용자명 목록으로 사용자를 조회합니다 (Users by username, optionally org-scoped)."""
        return await user_repository.find_users_by_username(db, usernames, org_slug=org_slug)

    async def get_team_memberships(
        self,
        db: AsyncSession,
        user_id: int,
    ) -> TeamMembershipsResponse:
        """사용자의 팀 멤버십을 수락 여부로 분류해 조회합니다.

        Retrieve a user's memberships split into accepted and pending.
        """
        await self._get_user_or_404(db, user_id)
        result: TeamMemberships = await user_repository.find_teams_by_user_id(db, user_id)
        return TeamMembershipsResponse(
            teams=[get_parsed_team(t) for t in result.teams],
            memberships=[membership_to_response(m) for m in result.memberships],
            accepted_team_memberships=[membership_to_response(m) for m in result.accepted_team_memberships],
            pending_team_memberships=[membership_to_response(m) for m in result.pending_team_memberships],
        )

    async def get_organizations(
        self,
        db: AsyncSession,
        user_id: int,
    ) -> list[ParsedTeam]:
        """사용자가 수락한 조직 목록을 조회합니다 (Organizations with an accepted membership)."""
        await self._get_user_or_404(db, user_id)
        organizations: list[Team] = await user_repository.find_organizations(db, user_id)
        return [get_parsed_team(org) for org in organizations]

    async def list_organization_users(
        self,
        db: AsyncSession,
        organization_id: int,
    ) -> list[UserResponse]:
        """조직 프로필을 가진 사용자 목록을 조회합니다.

        List the users holding a profile in the organization.

        Raises:
            NotFoundError: 조직을 찾을 수 없을 때 (Organization not found)
        """
        org: Team | None = await organization_repository.get_by_id(db, organization_id)
        if org is None:
            raise NotFoundError("Organization not found")
        users: list[User] = await user_repository.find_many_by_organization(db, organization_id)
        return [to_user_response(u) for u in users]

    async def check_membership(
        self,
        db: AsyncSession,
        organization_id: int,
        user_id: int,
    ) -> MembershipCheckResponse:
        """사용자가 조직 멤버인지 확인합니다 (Whether the user holds a profile in the org)."""
        user: User | None = await user_repository.find_by_id_with_profiles(db, user_id)
        if user is None:
            raise NotFoundError("User not found")
        return MembershipCheckResponse(
            is_member=user_repository.is_a_member_of_organization(user, organization_id)
        )


# 싱글턴 인스턴스 — Singleton instance
user_service: UserService = UserService()
