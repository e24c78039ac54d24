"""작업자 프로젝트 라우터 — 배정된 프로젝트와 유닛 조회 API.

Worker Project Router — Projects the worker is assigned to and their units
(used to pick the issue location).
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from mms.api.deps import require_worker
from mms.database import get_db
from mms.models.user import User
from mms.schemas.project import ProjectResponse
from mms.schemas.unit import UnitResponse
from mms.services.project_service import project_service
from mms.services.unit_service import unit_service
from mms.utils.exceptions import ForbiddenError

router: APIRouter = APIRouter()


@router.get("", response_model=list[ProjectResponse])
async def list_my_projects(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_worker)],
) -> list[ProjectResponse]:
    """내게 배정된 프로젝트 목록."""
    return await project_service.list_worker_projects(db, current_user)


@router.get("/{project_id}/units", response_model=list[UnitResponse])
async def list_project_units(
    project_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_worker)],
) -> list[UnitResponse]:
    if not await project_service.is_worker_assigned(db, project_id, current_user.id):
        raise ForbiddenError("You are not assigned to this project")
    return await unit_service.list_units(db, project_id)
