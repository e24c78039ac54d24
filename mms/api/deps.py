"""FastAPI 의존성 주입 모듈 — 인증 및 권한 검사.

FastAPI dependency injection module — Authentication and authorization.
Provides reusable dependencies for extracting the current user from JWT
and enforcing role-based portal access on API endpoints.

Authentication Flow:
    1. 클라이언트가 Authorization: Bearer <token> 헤더를 전송
       (Client sends Authorization: Bearer <token> header)
    2. HTTPBearer가 토큰을 추출 (HTTPBearer extracts the token)
    3. decode_token()이 JWT를 검증하고 페이로드를 반환
       (decode_token verifies JWT and returns payload)
    4. 페이로드의 "sub" 필드로 DB에서 사용자를 조회
       (User is fetched from DB using payload "sub" field)
    5. 사용자 활성 상태를 확인 — 비활성 사용자의 토큰은 즉시 무효
       (Tokens of deactivated users stop working immediately)

Portal levels:
    1 = ADMIN, 2 = MANAGER, 3 = WORKER (낮을수록 높은 권한, lower is more privileged)
"""

from typing import Annotated, Awaitable, Callable
from uuid import UUID

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from mms.database import get_db
from mms.models.enums import UserRole
from mms.models.user import User
from mms.repositories.user_repository import user_repository
from mms.utils.jwt import decode_token

# HTTP Bearer 토큰 추출기 — Authorization 헤더에서 JWT 토큰 추출
security: HTTPBearer = HTTPBearer()


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(security)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User:
    """JWT 토큰에서 현재 인증된 사용자를 추출합니다.

    Decode JWT from the Authorization header and return the authenticated user.
    Validates token signature, expiration, and user existence/active status.

    Raises:
        HTTPException(401): 토큰이 유효하지 않거나 만료됨 (Invalid or expired token)
        HTTPException(401): 사용자를 찾을 수 없거나 비활성 (User not found or inactive)
    """
    try:
        payload: dict = decode_token(credentials.credentials)
        # 토큰 타입 검증 — Reject refresh tokens used as access tokens
        if payload.get("type") != "access":
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token type")
        user_id: str | None = payload.get("sub")
        if user_id is None:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")
        parsed_id: UUID = UUID(user_id)
    except HTTPException:
        raise
    except (jwt.InvalidTokenError, KeyError, ValueError):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid or expired token")

    user: User | None = await user_repository.get_by_id(db, parsed_id)
    if user is None or not user.active:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User not found or inactive")

    return user


def require_level(max_level: int) -> Callable[..., Awaitable[User]]:
    """역할 레벨 기반 권한 검사 의존성 팩토리.

    Dependency factory enforcing a maximum role level. The level is taken
    from the stored user role, not from the token, so role changes apply
    immediately.

    Args:
        max_level: 허용되는 최대 역할 레벨 (Maximum allowed role level, inclusive)

    Returns:
        FastAPI 의존성 함수 — 인증된 사용자 반환 또는 403 발생
    """
    async def _check(
        current_user: Annotated[User, Depends(get_current_user)],
    ) -> User:
        if current_user.level > max_level:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Insufficient permissions")
        return current_user
    return _check


async def require_worker(
    current_user: Annotated[User, Depends(get_current_user)],
) -> User:
    """작업자 포털 — WORKER 역할만 허용 (Worker portal, WORKER role only)."""
    if current_user.role != UserRole.WORKER.value:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Worker access only")
    return current_user


# 편의 의존성 — Pre-configured level dependencies
require_admin = require_level(1)    # ADMIN만 허용 (Admin only)
require_manager = require_level(2)  # ADMIN + MANAGER 허용 (Level <= 2)
