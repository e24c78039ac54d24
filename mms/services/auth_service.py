"""인증 서비스 — 로그인, 토큰 갱신, 로그아웃 비즈니스 로직.

Auth Service — Business logic for login, token refresh and logout.
Handles the JWT token lifecycle and current user profile retrieval.
"""

from datetime import datetime, timedelta, timezone
from uuid import UUID

import jwt
from sqlalchemy.ext.asyncio import AsyncSession

from mms.config import settings
from mms.models.enums import LogAction
from mms.models.user import User
from mms.repositories.auth_repository import auth_repository
from mms.repositories.user_repository import user_repository
from mms.schemas.auth import LoginRequest, RefreshRequest, TokenResponse, UserMeResponse
from mms.services.audit_service import audit_service
from mms.utils.exceptions import UnauthorizedError
from mms.utils.jwt import create_access_token, create_refresh_token, decode_token
from mms.utils.parsing import as_utc
from mms.utils.password import verify_password


class AuthService:
    """인증 관련 비즈니스 로직을 처리하는 서비스.

    Service handling authentication business logic.
    One login flow serves all portals; portal access is enforced by role level.
    """

    def _build_jwt_payload(self, user: User) -> dict[str, str | int]:
        return {
            "sub": str(user.id),
            "role": user.role,
            "level": user.level,
        }

    async def _generate_tokens(self, db: AsyncSession, user: User) -> TokenResponse:
        """액세스 토큰과 리프레시 토큰을 생성합니다.

        Generate access and refresh token pair for a user.
        Previously issued refresh tokens are revoked.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            user: 사용자 모델 (User model instance)

        Returns:
            TokenResponse: 토큰 응답 (Token response with access and refresh tokens)
        """
        payload: dict[str, str | int] = self._build_jwt_payload(user)
        access_token: str = create_access_token(payload)
        refresh_token: str = create_refresh_token(payload)

        # 기존 리프레시 토큰 정리 — Clean up old refresh tokens to prevent accumulation
        await auth_repository.delete_user_refresh_tokens(db, user.id)

        expires_at: datetime = datetime.now(timezone.utc) + timedelta(
            days=settings.JWT_REFRESH_TOKEN_EXPIRE_DAYS
        )
        await auth_repository.create_refresh_token(
            db, user_id=user.id, token=refresh_token, expires_at=expires_at
        )

        return TokenResponse(access_token=access_token, refresh_token=refresh_token)

    async def login(self, db: AsyncSession, data: LoginRequest) -> TokenResponse:
        """사번과 비밀번호로 로그인합니다.

        Process login by employee ID and password. Deactivated accounts are refused.

        Raises:
            UnauthorizedError: 잘못된 인증 정보 또는 비활성 계정
                               (Invalid credentials or deactivated account)
        """
        user: User | None = await user_repository.get_by_employee_id(db, data.employee_id.strip())
        if user is None or not verify_password(data.password, user.password_hash):
            raise UnauthorizedError("Invalid employee ID or password")

        if not user.active:
            raise UnauthorizedError("Account is deactivated")

        tokens: TokenResponse = await self._generate_tokens(db, user)
        await audit_service.record(
            db, LogAction.LOGIN, "USER", user.id, user.id, f"{user.employee_id} logged in"
        )
        return tokens

    async def refresh_tokens(self, db: AsyncSession, data: RefreshRequest) -> TokenResponse:
        """리프레시 토큰으로 새 토큰 쌍을 발급합니다.

        Issue a new token pair using a stored refresh token.

        Raises:
            UnauthorizedError: 유효하지 않거나 만료된 리프레시 토큰일 때
                               (Invalid or expired refresh token)
        """
        db_token = await auth_repository.get_refresh_token(db, data.refresh_token)
        if db_token is None:
            raise UnauthorizedError("Invalid refresh token")

        if as_utc(db_token.expires_at) < datetime.now(timezone.utc):
            await auth_repository.delete_refresh_token(db, data.refresh_token)
            raise UnauthorizedError("Refresh token has expired")

        try:
            payload: dict = decode_token(data.refresh_token)
        except jwt.InvalidTokenError:
            await auth_repository.delete_refresh_token(db, data.refresh_token)
            raise UnauthorizedError("Invalid refresh token")

        if payload.get("type") != "refresh" or payload.get("sub") is None:
            raise UnauthorizedError("Invalid refresh token payload")

        user: User | None = await user_repository.get_by_id(db, UUID(payload["sub"]))
        if user is None or not user.active:
            raise UnauthorizedError("User not found or inactive")

        await auth_repository.delete_refresh_token(db, data.refresh_token)
        return await self._generate_tokens(db, user)

    async def logout(self, db: AsyncSession, refresh_token: str) -> None:
        await auth_repository.delete_refresh_token(db, refresh_token)

    def get_me(self, user: User) -> UserMeResponse:
        return UserMeResponse(
            id=str(user.id),
            employee_id=user.employee_id,
            full_name=user.full_name,
            role=user.role,
            level=user.level,
            phone=user.phone,
            active=user.active,
        )


# 싱글턴 인스턴스 — Singleton instance
auth_service: AuthService = AuthService()
