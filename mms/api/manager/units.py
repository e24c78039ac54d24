"""유닛 라우터 — 유닛 관리 및 입주 상태 API.

Unit Router — Units of a project, unit updates, occupancy changes and
occupancy history. Shared by the manager and admin portals.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from mms.api.deps import require_manager
from mms.database import get_db
from mms.models.user import User
from mms.schemas.unit import OccupancyHistoryResponse, OccupancyRequest, UnitCreate, UnitResponse, UnitUpdate
from mms.services.unit_service import unit_service

router: APIRouter = APIRouter()


@router.get("/projects/{project_id}/units", response_model=list[UnitResponse])
async def list_units(
    project_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_manager)],
) -> list[UnitResponse]:
    return await unit_service.list_units(db, project_id)


@router.post("/projects/{project_id}/units", response_model=UnitResponse, status_code=201)
async def create_unit(
    project_id: UUID,
    data: UnitCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_manager)],
) -> UnitResponse:
    """유닛 추가. 입주자 정보가 있으면 입주 상태로 생성."""
    result: UnitResponse = await unit_service.create_unit(db, project_id, data, current_user)
    await db.commit()
    return result


@router.get("/units/{unit_id}", response_model=UnitResponse)
async def get_unit(
    unit_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_manager)],
) -> UnitResponse:
    return await unit_service.get_unit_detail(db, unit_id)


@router.put("/units/{unit_id}", response_model=UnitResponse)
async def update_unit(
    unit_id: UUID,
    data: UnitUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_manager)],
) -> UnitResponse:
    result: UnitResponse = await unit_service.update_unit(db, unit_id, data, current_user)
    await db.commit()
    return result


@router.put("/units/{unit_id}/occupancy", response_model=UnitResponse)
async def set_occupancy(
    unit_id: UUID,
    data: OccupancyRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_manager)],
) -> UnitResponse:
    """입주(occupied=true + occupant) 또는 퇴거(occupied=false)."""
    result: UnitResponse = await unit_service.set_occupancy(db, unit_id, data, current_user)
    await db.commit()
    return result


@router.get("/units/{unit_id}/history", response_model=list[OccupancyHistoryResponse])
async def get_occupancy_history(
    unit_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_manager)],
) -> list[OccupancyHistoryResponse]:
    return await unit_service.get_history(db, unit_id)
