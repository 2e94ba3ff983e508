"""커스텀 HTTP 예외 클래스 모듈.

Custom HTTP exception classes module.
Provides pre-configured HTTPException subclasses raised across services and
repositories, so call sites never spell out status codes.

Usage:
    from user_directory.utils.exceptions import NotFoundError
    raise NotFoundError("User not found")
"""

from fastapi import HTTPException, status


class NotFoundError(HTTPException):
    """404 Not Found 예외 — 요청한 리소스를 찾을 수 없을 때 사용.

    404 Not Found exception.
    Raised by services when a repository lookup returns None.

    Args:
        detail: 오류 메시지 (Error message, default: "Resource not found")
    """

    def __init__(self, detail: str = "Resource not found") -> None:
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class ProfileNotFoundError(HTTPException):
    """500 데이터 무결성 예외 — 조회에 사용한 프로필이 결과에 없을 때.

    500 data-integrity exception.
    Raised when a user was resolved through a set of profiles but none of
    those profiles belongs to it. This is an upstream invariant violation,
    not a recoverable condition.

    Args:
        detail: 오류 메시지 (Error message, default: "Profile couldn't be found")
    """

    def __init__(self, detail: str = "Profile couldn't be found") -> None:
        super().__init__(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail)
