"""입주자 라우터 — 입주자 검색, 현재 입주 목록, 조회/수정 API.

Occupant Router — Search, active occupants, detail and update.
Shared by the manager and admin portals.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from mms.api.deps import require_manager
from mms.database import get_db
from mms.models.user import User
from mms.schemas.unit import ActiveOccupantResponse, OccupantResponse, OccupantUpdate
from mms.services.occupant_service import occupant_service
from mms.utils.parsing import parse_uuid

router: APIRouter = APIRouter()


@router.get("", response_model=list[OccupantResponse])
async def search_occupants(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_manager)],
    q: str = Query(""),
) -> list[OccupantResponse]:
    """신분증/여권 번호, 이름, 전화번호로 입주자 검색."""
    return await occupant_service.search(db, q)


@router.get("/active", response_model=list[ActiveOccupantResponse])
async def list_active_occupants(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_manager)],
    project_id: str | None = Query(None),
) -> list[ActiveOccupantResponse]:
    """현재 입주 중인 입주자 목록 (유닛 번호, 프로젝트 이름 포함)."""
    return await occupant_service.list_active(
        db, parse_uuid(project_id, "project_id") if project_id else None
    )


@router.get("/{occupant_id}", response_model=OccupantResponse)
async def get_occupant(
    occupant_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_manager)],
) -> OccupantResponse:
    return await occupant_service.get_occupant(db, occupant_id)


@router.put("/{occupant_id}", response_model=OccupantResponse)
async def update_occupant(
    occupant_id: UUID,
    data: OccupantUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_manager)],
) -> OccupantResponse:
    result: OccupantResponse = await occupant_service.update_occupant(db, occupant_id, data, current_user)
    await db.commit()
    return result
