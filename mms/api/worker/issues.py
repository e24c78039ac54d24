"""작업자 이슈 라우터 — 이슈 보고, 내 이슈, 검증 대기열, AFTER 증빙 API.

Worker Issue Router — Report issues, list own reports, the verification
queue, and AFTER proof uploads.
"""

from typing import Annotated, Literal
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from mms.api.deps import require_worker
from mms.database import get_db
from mms.models.user import User
from mms.schemas.common import PaginatedResponse
from mms.schemas.issue import (
    AttachmentCreate,
    AttachmentResponse,
    IssueCreate,
    IssueResponse,
    StatusHistoryResponse,
)
from mms.services.issue_service import issue_service

router: APIRouter = APIRouter()


@router.post("", response_model=IssueResponse, status_code=201)
async def report_issue(
    data: IssueCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_worker)],
) -> IssueResponse:
    """이슈 보고. 배정된 프로젝트에서만 가능."""
    issue = await issue_service.create_issue(db, data, current_user)
    await db.commit()
    return await issue_service.build_response(db, issue)


@router.get("", response_model=PaginatedResponse)
async def list_my_issues(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_worker)],
    scope: Literal["active", "archived", "all"] = Query("all"),
    status: str | None = Query(None),
    q: str | None = Query(None),
    page: int = Query(1, ge=1),
    per_page: int = Query(20, ge=1, le=200),
) -> dict:
    """내가 보고한 이슈 목록."""
    return await issue_service.list_issues(
        db,
        page=page,
        per_page=per_page,
        scope=scope,
        status=status,
        q=q,
        reported_by_user_id=current_user.id,
    )


@router.get("/verification-queue", response_model=list[IssueResponse])
async def get_verification_queue(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_worker)],
) -> list[IssueResponse]:
    """AFTER 증빙이 필요한 내 이슈 (RESOLVED, 미검증)."""
    return await issue_service.list_verification_queue(db, current_user)


@router.get("/{issue_id}", response_model=IssueResponse)
async def get_my_issue(
    issue_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_worker)],
) -> IssueResponse:
    issue = await issue_service.get_visible_issue(db, issue_id, current_user)
    return await issue_service.build_response(db, issue)


@router.get("/{issue_id}/history", response_model=list[StatusHistoryResponse])
async def get_my_issue_history(
    issue_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_worker)],
) -> list[StatusHistoryResponse]:
    return await issue_service.get_history(db, issue_id, current_user)


@router.post("/{issue_id}/attachments", response_model=AttachmentResponse, status_code=201)
async def add_after_proof(
    issue_id: UUID,
    data: AttachmentCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_worker)],
) -> AttachmentResponse:
    """해결 후(AFTER) 증빙 업로드."""
    attachment = await issue_service.add_after_proof(db, issue_id, data, current_user)
    await db.commit()
    return issue_service.attachment_response(attachment)
