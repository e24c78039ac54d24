"""프로젝트 라우터 — 프로젝트 조회 및 작업자 배정 API.

Project Router — Project listing/detail and worker assignment.
Shared by the manager portal and (under /admin) the admin portal.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from mms.api.deps import require_manager
from mms.database import get_db
from mms.models.user import User
from mms.schemas.common import MessageResponse
from mms.schemas.project import ProjectResponse, ProjectWorkerResponse, WorkerAssignRequest
from mms.services.project_service import project_service

router: APIRouter = APIRouter()


@router.get("", response_model=list[ProjectResponse])
async def list_projects(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_manager)],
) -> list[ProjectResponse]:
    """프로젝트 목록 (유닛/이슈 수 포함)."""
    return await project_service.list_projects(db)


@router.get("/{project_id}", response_model=ProjectResponse)
async def get_project(
    project_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_manager)],
) -> ProjectResponse:
    project = await project_service.get_project(db, project_id)
    return await project_service.to_response(db, project)


@router.get("/{project_id}/workers", response_model=list[ProjectWorkerResponse])
async def list_project_workers(
    project_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_manager)],
) -> list[ProjectWorkerResponse]:
    return await project_service.list_workers(db, project_id)


@router.post("/{project_id}/workers", response_model=ProjectWorkerResponse, status_code=201)
async def assign_worker(
    project_id: UUID,
    data: WorkerAssignRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_manager)],
) -> ProjectWorkerResponse:
    """작업자를 프로젝트에 배정."""
    result: ProjectWorkerResponse = await project_service.assign_worker(
        db, project_id, data.worker_user_id, current_user
    )
    await db.commit()
    return result


@router.delete("/{project_id}/workers/{worker_user_id}", response_model=MessageResponse)
async def end_worker_assignment(
    project_id: UUID,
    worker_user_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_manager)],
) -> dict:
    """작업자 배정 종료. 배정 레코드는 비활성으로 남습니다."""
    await project_service.end_assignment(db, project_id, worker_user_id, current_user)
    await db.commit()
    return {"message": "Assignment ended"}
