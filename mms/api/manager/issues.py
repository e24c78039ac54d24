"""이슈 검토 라우터 — 이슈 보고, 목록/상세 및 승인, 반려, 해결, 검증 API.

Issue Review Router — Reporting, issue views and the review workflow actions
(approve, reject, resolve, verify). Shared by the manager and admin portals.
"""

from typing import Annotated, Literal
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from mms.api.deps import require_manager
from mms.database import get_db
from mms.models.user import User
from mms.schemas.common import PaginatedResponse
from mms.schemas.issue import (
    ApproveRequest,
    IssueCreate,
    IssueResponse,
    IssueStats,
    RejectRequest,
    StatusHistoryResponse,
    TransitionRequest,
)
from mms.services.issue_service import issue_service
from mms.utils.parsing import parse_uuid

router: APIRouter = APIRouter()


@router.post("", response_model=IssueResponse, status_code=201)
async def report_issue(
    data: IssueCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_manager)],
) -> IssueResponse:
    """이슈 보고. 매니저/관리자는 배정 없이 모든 프로젝트에 보고할 수 있다."""
    issue = await issue_service.create_issue(db, data, current_user)
    await db.commit()
    return await issue_service.build_response(db, issue)


@router.get("", response_model=PaginatedResponse)
async def list_issues(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_manager)],
    scope: Literal["active", "archived", "all"] = Query("active"),
    status: str | None = Query(None),
    priority: str | None = Query(None),
    project_id: str | None = Query(None),
    q: str | None = Query(None),
    page: int = Query(1, ge=1),
    per_page: int = Query(20, ge=1, le=200),
) -> dict:
    """이슈 목록. scope=active(처리 대상) / archived(이력) / all."""
    return await issue_service.list_issues(
        db,
        page=page,
        per_page=per_page,
        scope=scope,
        status=status,
        priority=priority,
        project_id=parse_uuid(project_id, "project_id") if project_id else None,
        q=q,
    )


@router.get("/stats", response_model=IssueStats)
async def get_issue_stats(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_manager)],
    project_id: str | None = Query(None),
) -> IssueStats:
    return await issue_service.get_stats(
        db, project_id=parse_uuid(project_id, "project_id") if project_id else None
    )


@router.get("/{issue_id}", response_model=IssueResponse)
async def get_issue(
    issue_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_manager)],
) -> IssueResponse:
    issue = await issue_service.get_issue(db, issue_id)
    return await issue_service.build_response(db, issue)


@router.get("/{issue_id}/history", response_model=list[StatusHistoryResponse])
async def get_issue_history(
    issue_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_manager)],
) -> list[StatusHistoryResponse]:
    return await issue_service.get_history(db, issue_id, current_user)


@router.post("/{issue_id}/approve", response_model=IssueResponse)
async def approve_issue(
    issue_id: UUID,
    data: ApproveRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_manager)],
) -> IssueResponse:
    """OPEN → IN_PROGRESS. 업체명 필수."""
    issue = await issue_service.approve(db, issue_id, data, current_user)
    await db.commit()
    return await issue_service.build_response(db, issue)


@router.post("/{issue_id}/reject", response_model=IssueResponse)
async def reject_issue(
    issue_id: UUID,
    data: RejectRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_manager)],
) -> IssueResponse:
    """OPEN → REJECTED. 사유 필수."""
    issue = await issue_service.reject(db, issue_id, data, current_user)
    await db.commit()
    return await issue_service.build_response(db, issue)


@router.post("/{issue_id}/resolve", response_model=IssueResponse)
async def resolve_issue(
    issue_id: UUID,
    data: TransitionRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_manager)],
) -> IssueResponse:
    issue = await issue_service.resolve(db, issue_id, data, current_user)
    await db.commit()
    return await issue_service.build_response(db, issue)


@router.post("/{issue_id}/verify", response_model=IssueResponse)
async def verify_issue(
    issue_id: UUID,
    data: TransitionRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_manager)],
) -> IssueResponse:
    """RESOLVED → verified. AFTER 증빙 1개 이상 필요."""
    issue = await issue_service.verify(db, issue_id, data, current_user)
    await db.commit()
    return await issue_service.build_response(db, issue)
