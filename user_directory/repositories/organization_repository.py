"""조직 레포지토리 — 슬러그 기반 조직 조회.

Organization Repository — Slug-based organization queries.
An organization can be addressed either by its published slug or, before
publishing, by the slug it requested (stored in its metadata).
"""

from sqlalchemy import ColumnElement, Select, and_, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from user_directory.models.team import Team
from user_directory.repositories.base import BaseRepository


class OrganizationRepository(BaseRepository[Team]):
    """조직(조직 플래그가 있는 팀)에 대한 쿼리를 담당하는 레포지토리.

    Repository handling queries for organizations (teams flagged as such).
    """

    def __init__(self) -> None:
        super().__init__(Team)

    @staticmethod
    def where_is_organization() -> ColumnElement[bool]:
        """조직 판별 조건 (column flag or legacy ``isOrganization`` metadata)."""
        return or_(
            Team.is_organization.is_(True),
            Team.team_metadata["isOrganization"].as_boolean().is_(True),
        )

    @classmethod
    def where_slug_or_requested_slug(cls, slug: str) -> ColumnElement[bool]:
        """슬러그 또는 요청 슬러그가 일치하는 조직 조건을 만듭니다.

        Build the where clause matching an organization whose slug, or whose
        requested slug, equals ``slug``.

        Args:
            slug: 조직 슬러그 (Organization slug)

        Returns:
            ColumnElement[bool]: teams 테이블에 대한 조건 (Clause over the teams table)
        """
        return and_(
            cls.where_is_organization(),
            or_(
                Team.slug == slug,
                Team.team_metadata["requestedSlug"].as_string() == slug,
            ),
        )

    async def find_by_slug(
        self,
        db: AsyncSession,
        slug: str,
    ) -> Team | None:
        """슬러그 또는 요청 슬러그로 조직을 조회합니다.

        Find an organization by slug or requested slug.
        A published slug wins over a requested one.
        """
        query: Select = (
            select(Team)
            .where(self.where_slug_or_requested_slug(slug))
            .order_by(Team.slug.is_(None), Team.id)
            .limit(1)
        )
        result = await db.execute(query)
        return result.scalar_one_or_none()


# 싱글턴 인스턴스 — Singleton instance
organization_repository: OrganizationRepository = OrganizationRepository()
