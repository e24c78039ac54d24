"""요청 값 변환 유틸리티.

Helpers for turning request values into domain values.
"""

from datetime import datetime, timezone
from uuid import UUID

from mms.utils.exceptions import BadRequestError


def parse_uuid(value: str, field: str = "id") -> UUID:
    """문자열을 UUID로 변환합니다. 형식이 틀리면 400.

    Raises:
        BadRequestError: 유효하지 않은 UUID 문자열 (Malformed UUID string)
    """
    try:
        return UUID(str(value))
    except ValueError:
        raise BadRequestError(f"Invalid {field}")


def as_utc(value: datetime) -> datetime:
    """타임존 없는 값은 UTC로 간주합니다 (SQLite는 tzinfo를 저장하지 않음).

    Treat naive datetimes as UTC; SQLite drops tzinfo on storage.
    """
    return value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)


def is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


# LIKE 이스케이프 문자 — Escape character for LIKE patterns
LIKE_ESCAPE: str = "\\"


def like_pattern(q: str) -> str:
    """부분 일치 LIKE 패턴. 입력의 %, _ 는 문자 그대로 검색됩니다.

    Case-folded substring pattern; user-typed % and _ match literally.
    Use with ``.like(pattern, escape=LIKE_ESCAPE)``.
    """
    escaped = q.lower().replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"
