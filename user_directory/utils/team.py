"""팀 정규화 헬퍼 — 메타데이터 파싱 및 조직 판별.

Team normalization helpers — metadata parsing and organization detection.
Both helpers accept either a Team ORM instance or a plain mapping with the
same keys (``metadata`` instead of ``team_metadata`` for mappings).
"""

from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from user_directory.models.team import Membership, Team
from user_directory.schemas.team import MembershipResponse, ParsedTeam, TeamMetadata
from user_directory.utils.logger import get_logger, safe_stringify

log = get_logger("team")


def _read(team: Team | Mapping[str, Any], key: str, default: Any = None) -> Any:
    """ORM 인스턴스 또는 매핑에서 값을 읽습니다 (Read a key from an ORM row or a mapping)."""
    if isinstance(team, Mapping):
        if key == "team_metadata":
            key = "metadata"
        return team.get(key, default)
    # 이미 파싱된 팀(ParsedTeam)은 "metadata" 필드를 가짐 — parsed teams expose "metadata"
    if key == "team_metadata" and not hasattr(team, key):
        key = "metadata"
    return getattr(team, key, default)


def parse_team_metadata(raw: Any) -> TeamMetadata:
    """팀 메타데이터 JSON을 파싱합니다.

    Parse raw team metadata. Missing or malformed metadata yields an empty
    TeamMetadata and a warning.
    """
    if isinstance(raw, TeamMetadata):
        return raw
    if not raw:
        return TeamMetadata()
    try:
        return TeamMetadata.model_validate(raw)
    except ValidationError:
        log.warning("Invalid team metadata %s", safe_stringify(raw))
        return TeamMetadata()


def is_organization(team: Team | Mapping[str, Any]) -> bool:
    """팀이 조직인지 판별합니다.

    Return True when the team is flagged as an organization, either by its
    column or by the legacy ``isOrganization`` metadata key.
    """
    if _read(team, "is_organization"):
        return True
    metadata: TeamMetadata = parse_team_metadata(_read(team, "team_metadata"))
    return bool(metadata.is_organization)


def get_parsed_team(team: Team | Mapping[str, Any]) -> ParsedTeam:
    """팀의 메타데이터를 파싱하고 requested_slug를 끌어올립니다.

    Parse a team's metadata and lift ``requested_slug`` to the top level.

    Args:
        team: 팀 ORM 인스턴스 또는 매핑 (Team ORM instance or mapping)

    Returns:
        ParsedTeam: 정규화된 팀 (Normalized team)
    """
    metadata: TeamMetadata = parse_team_metadata(_read(team, "team_metadata"))
    return ParsedTeam(
        id=_read(team, "id"),
        name=_read(team, "name"),
        slug=_read(team, "slug"),
        logo_url=_read(team, "logo_url"),
        cal_video_logo=_read(team, "cal_video_logo"),
        is_organization=is_organization(team),
        parent_id=_read(team, "parent_id"),
        metadata=metadata,
        requested_slug=metadata.requested_slug,
    )


def membership_to_response(membership: Membership) -> MembershipResponse:
    """멤버십을 응답 스키마로 변환합니다 (팀이 로드되어 있어야 함).

    Convert a membership, with its team loaded, into a MembershipResponse.
    """
    return MembershipResponse(
        id=membership.id,
        user_id=membership.user_id,
        team_id=membership.team_id,
        accepted=membership.accepted,
        role=membership.role,
        team=get_parsed_team(membership.team),
    )
