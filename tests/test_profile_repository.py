"""프로필 레포지토리 테스트.

Profile repository tests — personal profiles, upId resolution, slug lookups
and moving a user into an organization.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from user_directory.models import Team, User
from user_directory.repositories.organization_repository import organization_repository
from user_directory.repositories.profile_repository import profile_repository
from user_directory.repositories.user_repository import user_repository

from tests.conftest import make_profile, make_team, make_user


class TestBuildPersonalProfile:
    """개인 프로필 합성 테스트."""

    def test_from_mapping(self):
        profile = profile_repository.build_personal_profile_from_user({"id": 42, "username": "zed"})
        assert profile.id is None
        assert profile.uid is None
        assert profile.up_id == "usr-42"
        assert profile.username == "zed"
        assert profile.organization_id is None
        assert profile.organization is None

    async def test_from_orm_user(self, alice: User):
        profile = profile_repository.build_personal_profile_from_user(alice)
        assert profile.up_id == f"usr-{alice.id}"
        assert profile.username == "alice"

    def test_username_may_be_missing(self):
        profile = profile_repository.build_personal_profile_from_user({"id": 1, "username": None})
        assert profile.username is None
        assert profile.up_id == "usr-1"


class TestFindByUpId:
    """upId 해석 테스트."""

    async def test_personal_up_id(self, db: AsyncSession, alice: User):
        profile = await profile_repository.find_by_up_id(db, f"usr-{alice.id}")
        assert profile is not None
        assert profile.id is None
        assert profile.username == "alice"

    async def test_personal_up_id_unknown_user(self, db: AsyncSession):
        assert await profile_repository.find_by_up_id(db, "usr-9999") is None

    async def test_stored_profile(self, db: AsyncSession, alice: User, org: Team):
        stored = await make_profile(db, alice, org, "ally")

        profile = await profile_repository.find_by_up_id(db, str(stored.id))

        assert profile.id == stored.id
        assert profile.up_id == str(stored.id)
        assert profile.uid == stored.uid
        assert profile.organization.slug == "acme"

    async def test_malformed_up_id(self, db: AsyncSession):
        """형식이 잘못된 upId는 None."""
        assert await profile_repository.find_by_up_id(db, "usr-abc") is None
        assert await profile_repository.find_by_up_id(db, "profile-1") is None
        assert await profile_repository.find_by_up_id(db, "") is None

    async def test_non_ascii_and_out_of_range_up_id(self, db: AsyncSession, alice: User):
        """유니코드 숫자나 범위를 넘는 ID는 예외 없이 None."""
        too_big = "9" * 30
        for up_id in ["usr-²", "²", "usr-１２", f"usr-{too_big}", too_big, "0", "usr-0"]:
            assert await profile_repository.find_by_up_id(db, up_id) is None


class TestFindManyByOrgSlugOrRequestedSlug:
    """조직 슬러그 기반 프로필 조회 테스트."""

    async def test_published_slug(self, db: AsyncSession, bob: User, org: Team):
        profiles = await profile_repository.find_many_by_org_slug_or_requested_slug(
            db, org_slug="acme", usernames=["bobby", "ghost"]
        )
        assert [p.user_id for p in profiles] == [bob.id]
        assert profiles[0].organization.id == org.id
        assert profiles[0].user.email == "bob@example.com"

    async def test_regular_team_slug_is_not_an_org(self, db: AsyncSession, bob: User, team: Team):
        """조직이 아닌 팀의 슬러그는 매칭되지 않음."""
        await make_profile(db, bob, team, "bob-sales")
        profiles = await profile_repository.find_many_by_org_slug_or_requested_slug(
            db, org_slug="sales", usernames=["bob-sales"]
        )
        assert profiles == []


class TestFindManyForUser:
    """사용자 프로필 목록 테스트."""

    async def test_orders_oldest_first(self, db: AsyncSession, bob: User, unpublished_org: Team):
        await make_profile(db, bob, unpublished_org, "bob-beta")

        profiles = await profile_repository.find_many_for_user(db, bob.id)

        assert [p.username for p in profiles] == ["bobby", "bob-beta"]
        assert profiles[1].organization.requested_slug == "beta"

    async def test_user_without_profiles(self, db: AsyncSession, alice: User):
        assert await profile_repository.find_many_for_user(db, alice.id) == []


class TestFindAllProfilesIncludingMovedUser:
    """전체 프로필 조회 테스트."""

    async def test_personal_fallback(self, db: AsyncSession, alice: User):
        profiles = await profile_repository.find_all_profiles_for_user_including_moved_user(db, alice)
        assert [p.up_id for p in profiles] == [f"usr-{alice.id}"]

    async def test_org_profiles(self, db: AsyncSession, bob: User):
        profiles = await profile_repository.find_all_profiles_for_user_including_moved_user(db, bob)
        assert [p.username for p in profiles] == ["bobby"]


class TestCreate:
    """프로필 생성 테스트."""

    async def test_username_is_lowercased(self, db: AsyncSession, alice: User, org: Team):
        profile = await profile_repository.create(
            db, {"user_id": alice.id, "organization_id": org.id, "username": "Alice.Smith"}
        )
        assert profile.username == "alice.smith"
        assert profile.uid

    async def test_create_for_existing_user(self, db: AsyncSession, org: Team):
        """기존 사용자를 조직 프로필로 이동."""
        carol = await make_user(db, "carol")

        profile = await profile_repository.create_for_existing_user(
            db, user_id=carol.id, organization_id=org.id, username="Carol"
        )

        assert profile.username == "carol"
        moved = await user_repository.find_by_id(db, carol.id)
        assert moved.moved_to_profile_id == profile.id
        members = await user_repository.find_many_by_organization(db, org.id)
        assert carol.id in [u.id for u in members]


class TestOrganizationRepository:
    """조직 슬러그 조회 테스트."""

    async def test_find_by_published_slug(self, db: AsyncSession, org: Team):
        found = await organization_repository.find_by_slug(db, "acme")
        assert found.id == org.id

    async def test_find_by_requested_slug(self, db: AsyncSession, unpublished_org: Team):
        found = await organization_repository.find_by_slug(db, "beta")
        assert found.id == unpublished_org.id

    async def test_published_slug_wins(self, db: AsyncSession, org: Team):
        """게시된 슬러그가 요청 슬러그보다 우선."""
        await make_team(db, "Acme Clone", team_metadata={"isOrganization": True, "requestedSlug": "acme"})
        found = await organization_repository.find_by_slug(db, "acme")
        assert found.id == org.id

    async def test_regular_team_is_ignored(self, db: AsyncSession, team: Team):
        assert await organization_repository.find_by_slug(db, "sales") is None
