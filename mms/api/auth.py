"""인증 라우터 — 로그인, 토큰 갱신, 로그아웃, 내 정보.

Auth Router — Login, token refresh, logout and current user endpoints
shared by the admin, manager and worker portals.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from mms.api.deps import get_current_user
from mms.database import get_db
from mms.models.user import User
from mms.schemas.auth import LoginRequest, RefreshRequest, TokenResponse, UserMeResponse
from mms.schemas.common import MessageResponse
from mms.services.auth_service import auth_service

router: APIRouter = APIRouter()


@router.post("/login", response_model=TokenResponse)
async def login(
    data: LoginRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TokenResponse:
    """사번과 비밀번호로 로그인합니다."""
    tokens: TokenResponse = await auth_service.login(db, data)
    await db.commit()
    return tokens


@router.post("/refresh", response_model=TokenResponse)
async def refresh(
    data: RefreshRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TokenResponse:
    """리프레시 토큰으로 새 토큰 쌍을 발급합니다."""
    tokens: TokenResponse = await auth_service.refresh_tokens(db, data)
    await db.commit()
    return tokens


@router.post("/logout", response_model=MessageResponse)
async def logout(
    data: RefreshRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict:
    await auth_service.logout(db, data.refresh_token)
    await db.commit()
    return {"message": "Logged out successfully"}


@router.get("/me", response_model=UserMeResponse)
async def get_me(
    current_user: Annotated[User, Depends(get_current_user)],
) -> UserMeResponse:
    return auth_service.get_me(current_user)
