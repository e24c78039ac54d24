"""관리자 이슈 라우터 — 강제 변경 및 검증 증빙 첨부 API.

Admin Issue Router — Status/priority override and VERIFICATION proof
uploads. The review workflow comes from the shared issue router.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from mms.api.deps import require_admin
from mms.database import get_db
from mms.models.user import User
from mms.schemas.issue import AttachmentCreate, AttachmentResponse, IssueResponse, OverrideRequest
from mms.services.issue_service import issue_service

router: APIRouter = APIRouter()


@router.post("/{issue_id}/override", response_model=IssueResponse)
async def override_issue(
    issue_id: UUID,
    data: OverrideRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
) -> IssueResponse:
    """상태/우선순위 강제 변경. 워크플로우 전제조건을 우회합니다."""
    issue = await issue_service.override(db, issue_id, data, current_user)
    await db.commit()
    return await issue_service.build_response(db, issue)


@router.post("/{issue_id}/attachments", response_model=AttachmentResponse, status_code=201)
async def add_verification_proof(
    issue_id: UUID,
    data: AttachmentCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
) -> AttachmentResponse:
    attachment = await issue_service.add_verification_proof(db, issue_id, data, current_user)
    await db.commit()
    return issue_service.attachment_response(attachment)
