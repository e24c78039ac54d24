"""관리자 시스템 로그 라우터 — 감사 로그 조회 API (읽기 전용).

Admin System Log Router — Read-only audit trail. No update or delete endpoints.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from mms.api.deps import require_admin
from mms.database import get_db
from mms.models.user import User
from mms.schemas.common import PaginatedResponse
from mms.services.audit_service import audit_service

router: APIRouter = APIRouter()


@router.get("", response_model=PaginatedResponse)
async def list_logs(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
    action: str | None = Query(None),
    entity_type: str | None = Query(None),
    q: str | None = Query(None),
    page: int = Query(1, ge=1),
    per_page: int = Query(50, ge=1, le=500),
) -> dict:
    """시스템 로그 목록 (최신순)."""
    return await audit_service.list_logs(
        db, action=action, entity_type=entity_type, q=q, page=page, per_page=per_page
    )


@router.get("/actions", response_model=list[str])
async def list_log_actions(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
) -> list[str]:
    """기록된 액션 코드 목록 (필터 드롭다운용)."""
    return await audit_service.list_actions(db)
