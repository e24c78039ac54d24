"""시스템 로그 응답 스키마.

System log (audit trail) response schema.
"""

from datetime import datetime

from pydantic import BaseModel


class SystemLogResponse(BaseModel):
    id: str
    action: str  # LOGIN, CREATE, APPROVE ...
    entity_type: str  # USER, PROJECT, UNIT, OCCUPANT, ISSUE
    entity_id: str | None
    performed_by_user_id: str
    performed_by_name: str | None = None  # 수행자 이름 — 조인된 값 (Resolved actor name)
    details: str | None
    created_at: datetime
