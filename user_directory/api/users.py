"""사용자 라우터 — 사용자 조회 및 프로필/멤버십 조회.

User Router — Read-only user lookups with profile and membership views.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from user_directory.database import get_db
from user_directory.schemas.team import ParsedTeam, TeamMembershipsResponse
from user_directory.schemas.user import UserResponse, UserWithProfile
from user_directory.services.user_service import user_service

router: APIRouter = APIRouter()


@router.get("", response_model=list[UserWithProfile])
async def find_users_by_username(
    db: Annotated[AsyncSession, Depends(get_db)],
    usernames: Annotated[list[str], Query(min_length=1)],
    org_slug: Annotated[str | None, Query()] = None,
) -> list[UserWithProfile]:
    """사용자명 목록으로 사용자를 조회합니다.

    Look up users by username. With ``org_slug`` the usernames are resolved
    inside that organization.
    """
    return await user_service.find_by_usernames(db, usernames, org_slug=org_slug)


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> UserResponse:
    """사용자를 조회합니다 (Retrieve a user)."""
    return await user_service.get_user(db, user_id)


@router.get("/{user_id}/profile", response_model=UserWithProfile)
async def get_user_profile(
    user_id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> UserWithProfile:
    """사용자를 자신의 프로필과 함께 조회합니다 (User merged with its profile)."""
    return await user_service.get_user_with_profile(db, user_id)


@router.get("/{user_id}/teams", response_model=TeamMembershipsResponse)
async def get_user_teams(
    user_id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TeamMembershipsResponse:
    """사용자의 팀 멤버십을 조회합니다 (Memberships split into accepted and pending)."""
    return await user_service.get_team_memberships(db, user_id)


@router.get("/{user_id}/organizations", response_model=list[ParsedTeam])
async def get_user_organizations(
    user_id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> list[ParsedTeam]:
    """사용자가 수락한 조직 목록을 조회합니다 (Organizations with an accepted membership)."""
    return await user_service.get_organizations(db, user_id)
