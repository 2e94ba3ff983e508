"""테스트 인프라 — 인메모리 SQLite DB, 세션, httpx 클라이언트 픽스처.

Test infrastructure — In-memory SQLite DB, session, and httpx client fixtures.
Every test gets a fresh schema on its own in-memory database (aiosqlite).
"""

import os

# 앱 임포트 전에 DB URL 지정 — point the app at SQLite before it is imported
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

from collections.abc import AsyncGenerator  # noqa: E402
from typing import Any  # noqa: E402

import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool  # noqa: E402

from user_directory.database import Base, get_db  # noqa: E402
from user_directory.main import app  # noqa: E402
from user_directory.models import Membership, Profile, Team, User  # noqa: E402

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


# ---------------------------------------------------------------------------
# Function-scoped: 엔진, 세션, 클라이언트
# ---------------------------------------------------------------------------
@pytest_asyncio.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """테스트용 async 엔진. 매 테스트마다 새 스키마를 생성합니다."""
    eng = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield eng
    await eng.dispose()


@pytest_asyncio.fixture
async def db(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """각 테스트에 격리된 DB 세션을 제공합니다."""
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture
async def client(db: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """FastAPI 테스트 클라이언트 — DB 세션을 오버라이드합니다."""
    async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db

    app.dependency_overrides[get_db] = _override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# 헬퍼: 테스트용 데이터 생성
# ---------------------------------------------------------------------------
async def _persist(db: AsyncSession, obj: Any) -> Any:
    db.add(obj)
    await db.flush()
    await db.refresh(obj)
    return obj


async def make_user(db: AsyncSession, username: str | None, **kwargs: Any) -> User:
    """사용자를 생성합니다 (email 기본값: <username>@example.com)."""
    kwargs.setdefault("email", f"{username}@example.com")
    kwargs.setdefault("name", (username or "anonymous").title())
    return await _persist(db, User(username=username, **kwargs))


async def make_team(db: AsyncSession, name: str, **kwargs: Any) -> Team:
    """팀 또는 조직을 생성합니다."""
    return await _persist(db, Team(name=name, **kwargs))


async def make_profile(db: AsyncSession, user: User, org: Team, username: str) -> Profile:
    """조직 프로필을 생성합니다."""
    return await _persist(db, Profile(user_id=user.id, organization_id=org.id, username=username))


async def make_membership(db: AsyncSession, user: User, team: Team, accepted: bool) -> Membership:
    """멤버십을 생성합니다."""
    return await _persist(db, Membership(user_id=user.id, team_id=team.id, accepted=accepted))


# ---------------------------------------------------------------------------
# 픽스처: 조직, 팀, 사용자
# ---------------------------------------------------------------------------
@pytest_asyncio.fixture
async def org(db: AsyncSession) -> Team:
    """게시된 슬러그를 가진 조직."""
    return await make_team(
        db, "Acme", slug="acme", is_organization=True,
        team_metadata={"isOrganizationVerified": True},
    )


@pytest_asyncio.fixture
async def unpublished_org(db: AsyncSession) -> Team:
    """슬러그를 요청만 한 조직 (메타데이터 플래그로만 조직 표시)."""
    return await make_team(
        db, "Beta", slug=None,
        team_metadata={"isOrganization": True, "requestedSlug": "beta"},
    )


@pytest_asyncio.fixture
async def team(db: AsyncSession, org: Team) -> Team:
    """조직 하위의 일반 팀."""
    return await make_team(db, "Acme Sales", slug="sales", parent_id=org.id)


@pytest_asyncio.fixture
async def alice(db: AsyncSession) -> User:
    """조직 밖의 사용자."""
    return await make_user(db, "alice", password_hash="hashed-alice", locale="en")


@pytest_asyncio.fixture
async def bob(db: AsyncSession, org: Team) -> User:
    """acme 조직에 'bobby'라는 프로필을 가진 사용자."""
    user = await make_user(db, "bob")
    await make_profile(db, user, org, "bobby")
    return user
