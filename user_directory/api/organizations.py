"""조직 라우터 — 조직 소속 사용자 조회.

Organization Router — Users of an organization and membership checks.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from user_directory.database import get_db
from user_directory.schemas.user import MembershipCheckResponse, UserResponse
from user_directory.services.user_service import user_service

router: APIRouter = APIRouter()


@router.get("/{organization_id}/users", response_model=list[UserResponse])
async def list_organization_users(
    organization_id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> list[UserResponse]:
    """조직 프로필을 가진 사용자 목록을 조회합니다.

    List the users holding a profile in the organization.
    """
    return await user_service.list_organization_users(db, organization_id)


@router.get("/{organization_id}/members/{user_id}", response_model=MembershipCheckResponse)
async def check_organization_member(
    organization_id: int,
    user_id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> MembershipCheckResponse:
    """사용자가 조직 멤버인지 확인합니다 (Whether the user belongs to the organization)."""
    return await user_service.check_membership(db, organization_id, user_id)
