"""인증 관련 Pydantic 요청/응답 스키마 정의.

Authentication-related Pydantic request/response schema definitions.
Covers login, token issuance/refresh, and current user info.
"""

from pydantic import BaseModel


class LoginRequest(BaseModel):
    """로그인 요청 스키마.

    Login request schema shared by all three portals.

    Attributes:
        employee_id: 사번 (Employee ID, the login identifier)
        password: 비밀번호 (Plain text password, verified against bcrypt hash)
    """

    employee_id: str  # 사번 — 전역 고유 (Employee ID, globally unique)
    password: str  # 비밀번호 — 평문, 서버에서 bcrypt 해시와 비교 (Plain text, compared to bcrypt hash)


class TokenResponse(BaseModel):
    """JWT 토큰 발급 응답 스키마.

    Returned after successful login or token refresh.
    """

    access_token: str  # JWT 액세스 토큰 — 만료: 30분 기본 (Access token, default TTL: 30min)
    refresh_token: str  # JWT 리프레시 토큰 — 만료: 7일 기본 (Refresh token, default TTL: 7 days)
    token_type: str = "bearer"  # 토큰 유형 — 항상 "bearer"


class RefreshRequest(BaseModel):
    refresh_token: str  # 기존 리프레시 토큰 (Current refresh token)


class UserMeResponse(BaseModel):
    """현재 사용자 정보 응답 스키마 (GET /me).

    Attributes:
        id: 사용자 UUID (User unique identifier)
        employee_id: 사번 (Employee ID)
        full_name: 실명 (Full display name)
        role: 역할 (ADMIN / MANAGER / WORKER)
        level: 역할 레벨 (1=admin, 3=worker; lower is more privileged)
        phone: 전화번호 (Phone, nullable)
        active: 활성 상태 (Account active status)
    """

    id: str
    employee_id: str
    full_name: str
    role: str
    level: int  # 역할 레벨 — 1=ADMIN, 2=MANAGER, 3=WORKER
    phone: str | None
    active: bool
