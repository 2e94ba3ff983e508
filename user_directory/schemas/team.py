"""팀/조직 및 멤버십 관련 Pydantic 스키마 정의.

Team/Organization and Membership Pydantic schema definitions.
Team metadata is stored as camelCase JSON; the schema exposes snake_case
fields and keeps unknown keys.
"""

from pydantic import BaseModel, ConfigDict, Field


class TeamMetadata(BaseModel):
    """팀 메타데이터 스키마.

    Team metadata schema. Unknown keys are preserved.

    Attributes:
        requested_slug: 게시 전 조직이 요청한 슬러그 (Slug requested by an unpublished org)
        is_organization: 조직 여부 플래그 (Legacy organization flag)
        is_organization_verified: 조직 도메인 인증 여부 (Organization domain verified)
        is_organization_configured: 조직 DNS 설정 완료 여부 (Organization DNS configured)
        org_auto_accept_email: 자동 수락 이메일 도메인 (Auto-accept email domain)
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    requested_slug: str | None = Field(default=None, alias="requestedSlug")
    is_organization: bool | None = Field(default=None, alias="isOrganization")
    is_organization_verified: bool | None = Field(default=None, alias="isOrganizationVerified")
    is_organization_configured: bool | None = Field(default=None, alias="isOrganizationConfigured")
    org_auto_accept_email: str | None = Field(default=None, alias="orgAutoAcceptEmail")


class ParsedTeam(BaseModel):
    """메타데이터가 파싱된 팀 스키마.

    Team with its metadata parsed and ``requested_slug`` lifted to the top level.
    """

    id: int
    name: str
    slug: str | None = None
    logo_url: str | None = None
    cal_video_logo: str | None = None
    is_organization: bool = False
    parent_id: int | None = None
    metadata: TeamMetadata
    requested_slug: str | None = None


class MembershipResponse(BaseModel):
    """멤버십 응답 스키마 (팀 포함).

    Membership response schema with its team.
    """

    id: int
    user_id: int
    team_id: int
    accepted: bool
    role: str
    team: ParsedTeam


class TeamMembershipsResponse(BaseModel):
    """사용자의 팀 멤버십 분류 응답.

    A user's memberships split by acceptance.

    Attributes:
        teams: 수락된 멤버십의 팀 목록 (Teams of accepted memberships)
        memberships: 전체 멤버십 (All memberships)
        accepted_team_memberships: 수락된 멤버십 (Accepted memberships)
        pending_team_memberships: 대기 중 멤버십 (Pending memberships)
    """

    teams: list[ParsedTeam]
    memberships: list[MembershipResponse]
    accepted_team_memberships: list[MembershipResponse]
    pending_team_memberships: list[MembershipResponse]
