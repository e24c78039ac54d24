"""관리자 프로젝트 라우터 — 프로젝트 생성/수정 API.

Admin Project Router — Project creation and update (admin only).
Listing and worker assignment come from the shared project router.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from mms.api.deps import require_admin
from mms.database import get_db
from mms.models.user import User
from mms.schemas.project import ProjectCreate, ProjectResponse, ProjectUpdate
from mms.services.project_service import project_service

router: APIRouter = APIRouter()


@router.post("", response_model=ProjectResponse, status_code=201)
async def create_project(
    data: ProjectCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
) -> ProjectResponse:
    result: ProjectResponse = await project_service.create_project(db, data, current_user)
    await db.commit()
    return result


@router.put("/{project_id}", response_model=ProjectResponse)
async def update_project(
    project_id: UUID,
    data: ProjectUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
) -> ProjectResponse:
    result: ProjectResponse = await project_service.update_project(db, project_id, data, current_user)
    await db.commit()
    return result
