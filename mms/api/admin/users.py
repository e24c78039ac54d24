"""관리자 사용자 라우터 — 전체 사용자 관리 API.

Admin User Router — Admins manage every account (admins, managers, workers).
Users are never deleted; deactivation keeps the record.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from mms.api.deps import require_admin
from mms.database import get_db
from mms.models.enums import UserRole
from mms.models.user import User
from mms.schemas.user import DeactivateRequest, UserCreate, UserResponse, UserUpdate
from mms.services.user_service import user_service

router: APIRouter = APIRouter()


@router.get("", response_model=list[UserResponse])
async def list_users(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
    role: UserRole | None = Query(None),
    active: bool | None = Query(None),
    q: str | None = Query(None),
) -> list[UserResponse]:
    """사용자 목록. 역할/활성 필터, 비활성 사용자 포함."""
    return await user_service.list_users(
        db, current_user, role=role.value if role else None, active=active, q=q
    )


@router.post("", response_model=UserResponse, status_code=201)
async def create_user(
    data: UserCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
) -> UserResponse:
    result: UserResponse = await user_service.create_user(db, data, current_user)
    await db.commit()
    return result


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
) -> UserResponse:
    return await user_service.get_user(db, user_id, current_user)


@router.put("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: UUID,
    data: UserUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
) -> UserResponse:
    result: UserResponse = await user_service.update_user(db, user_id, data, current_user)
    await db.commit()
    return result


@router.post("/{user_id}/deactivate", response_model=UserResponse)
async def deactivate_user(
    user_id: UUID,
    data: DeactivateRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
) -> UserResponse:
    """사용자 비활성화. 자기 자신은 불가."""
    result: UserResponse = await user_service.deactivate_user(db, user_id, current_user, data.reason)
    await db.commit()
    return result


@router.post("/{user_id}/reactivate", response_model=UserResponse)
async def reactivate_user(
    user_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
) -> UserResponse:
    result: UserResponse = await user_service.reactivate_user(db, user_id, current_user)
    await db.commit()
    return result
