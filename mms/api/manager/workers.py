"""매니저 작업자 라우터 — WORKER 계정 관리 API.

Manager Worker Router — Managers list, create, update, deactivate and
reactivate WORKER accounts. Non-worker accounts are out of reach.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from mms.api.deps import require_manager
from mms.database import get_db
from mms.models.enums import UserRole
from mms.models.user import User
from mms.schemas.user import DeactivateRequest, UserCreate, UserResponse, UserUpdate
from mms.services.user_service import user_service

router: APIRouter = APIRouter()


@router.get("", response_model=list[UserResponse])
async def list_workers(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_manager)],
    active: bool | None = Query(None),
    q: str | None = Query(None),
) -> list[UserResponse]:
    """작업자 목록. 비활성 작업자도 포함."""
    return await user_service.list_users(db, current_user, role=UserRole.WORKER.value, active=active, q=q)


@router.post("", response_model=UserResponse, status_code=201)
async def create_worker(
    data: UserCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_manager)],
) -> UserResponse:
    data.role = UserRole.WORKER
    result: UserResponse = await user_service.create_user(db, data, current_user)
    await db.commit()
    return result


@router.get("/{user_id}", response_model=UserResponse)
async def get_worker(
    user_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_manager)],
) -> UserResponse:
    return await user_service.get_user(db, user_id, current_user)


@router.put("/{user_id}", response_model=UserResponse)
async def update_worker(
    user_id: UUID,
    data: UserUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_manager)],
) -> UserResponse:
    result: UserResponse = await user_service.update_user(db, user_id, data, current_user)
    await db.commit()
    return result


@router.post("/{user_id}/deactivate", response_model=UserResponse)
async def deactivate_worker(
    user_id: UUID,
    data: DeactivateRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_manager)],
) -> UserResponse:
    result: UserResponse = await user_service.deactivate_user(db, user_id, current_user, data.reason)
    await db.commit()
    return result


@router.post("/{user_id}/reactivate", response_model=UserResponse)
async def reactivate_worker(
    user_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_manager)],
) -> UserResponse:
    result: UserResponse = await user_service.reactivate_user(db, user_id, current_user)
    await db.commit()
    return result
