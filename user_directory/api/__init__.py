"""API 라우터 패키지 — 모든 엔드포인트 통합.

API Router package — Aggregates all endpoints into a single router for
inclusion in the FastAPI application.

Included routers:
    - users: 사용자 조회 (User lookups, profiles, memberships)
    - organizations: 조직 사용자 조회 (Organization users, membership checks)
"""

from fastapi import APIRouter

from user_directory.api.users import router as users_router
from user_directory.api.organizations import router as organizations_router

api_router: APIRouter = APIRouter()

api_router.include_router(users_router, prefix="/users", tags=["Users"])
api_router.include_router(organizations_router, prefix="/organizations", tags=["Organizations"])
