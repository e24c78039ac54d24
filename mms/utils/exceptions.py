"""커스텀 HTTP 예외 클래스 모듈.

Custom HTTP exception classes module.
Services raise these directly; FastAPI renders them as JSON error responses
with a ``detail`` message, so routers never need to catch them.

Usage:
    from mms.utils.exceptions import NotFoundError, BadRequestError
    raise NotFoundError("Issue not found")
    raise BadRequestError("Vendor name is required")
"""

from fastapi import HTTPException, status


class NotFoundError(HTTPException):
    """404 Not Found 예외 — 요청한 리소스를 찾을 수 없을 때 사용.

    Raised when a requested resource (user, project, unit, issue, ...) does not exist.
    """

    def __init__(self, detail: str = "Resource not found") -> None:
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class DuplicateError(HTTPException):
    """409 Conflict 예외 — 중복 리소스 생성 시도 시 사용.

    Raised when a uniqueness rule would be violated
    (e.g. duplicate employee ID, duplicate unit number within a project).
    """

    def __init__(self, detail: str = "Resource already exists") -> None:
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class ConflictError(HTTPException):
    """409 Conflict 예외 — 낙관적 동시성 검사 실패 시 사용.

    Raised when a write is based on a stale version of a record
    (the client-supplied ``version`` no longer matches, or another writer
    committed first).
    """

    def __init__(self, detail: str = "Record was modified by another user") -> None:
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class ForbiddenError(HTTPException):
    """403 Forbidden 예외 — 권한 부족 시 사용.

    Raised when the authenticated user lacks the required role
    (e.g. a worker calling manager-only operations, a manager editing an admin).
    """

    def __init__(self, detail: str = "Insufficient permissions") -> None:
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class UnauthorizedError(HTTPException):
    """401 Unauthorized 예외 — 인증 실패 시 사용."""

    def __init__(self, detail: str = "Authentication required") -> None:
        super().__init__(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


class BadRequestError(HTTPException):
    """400 Bad Request 예외 — 잘못된 요청 데이터 시 사용.

    Raised when request data passes Pydantic validation but fails a business
    rule (missing vendor name, missing rejection reason, invalid status
    transition, ...).
    """

    def __init__(self, detail: str = "Bad request") -> None:
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)
