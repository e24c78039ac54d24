"""사용자 관련 Pydantic 요청/응답 스키마 정의.

User-related Pydantic request/response schema definitions.
"""

from datetime import datetime

from pydantic import BaseModel

from mms.models.enums import UserRole


class UserCreate(BaseModel):
    """사용자 생성 요청 스키마.

    User creation request schema. Managers may only create WORKER accounts;
    the worker router forces ``role`` accordingly.

    Attributes:
        employee_id: 사번 (Login identifier, globally unique)
        password: 비밀번호 (Plain text, will be bcrypt-hashed)
        full_name: 실명 (Full display name)
        role: 역할 (ADMIN / MANAGER / WORKER)
        phone: 전화번호 (Phone number, optional)
    """

    employee_id: str  # 사번 — 전역 고유 (Employee ID, globally unique)
    password: str  # 비밀번호 — 평문, 서버에서 해싱 (Plain text, hashed server-side)
    full_name: str  # 실명 (Full display name)
    role: UserRole = UserRole.WORKER  # 역할 (Role)
    phone: str | None = None  # 전화번호 (Optional phone)


class UserUpdate(BaseModel):
    """사용자 수정 요청 스키마 (부분 업데이트).

    User update request schema (partial update). Activation is changed only
    through the dedicated deactivate / reactivate endpoints.
    """

    employee_id: str | None = None  # 변경할 사번 (New employee ID, optional)
    full_name: str | None = None  # 변경할 실명 (New name, optional)
    role: UserRole | None = None  # 변경할 역할 (New role, optional)
    phone: str | None = None  # 변경할 전화번호 (New phone, optional)
    password: str | None = None  # 비밀번호 재설정 (Password reset, optional)


class DeactivateRequest(BaseModel):
    reason: str | None = None  # 비활성화 사유 — 없으면 기본 사유 사용 (Defaults to "Deactivated by admin")


class UserResponse(BaseModel):
    """사용자 응답 스키마.

    Attributes:
        id: 사용자 UUID (User unique identifier)
        employee_id: 사번 (Employee ID)
        full_name: 실명 (Full display name)
        role: 역할 (Role)
        phone: 전화번호 (Phone, nullable)
        active: 활성 상태 (Account active flag)
        inactive_reason: 비활성 사유 (Deactivation reason, nullable)
        created_at: 생성 일시 (Account creation timestamp)
    """

    id: str  # 사용자 UUID 문자열 (User UUID as string)
    employee_id: str  # 사번 (Employee ID)
    full_name: str  # 실명 (Full display name)
    role: str  # 역할 — "ADMIN"|"MANAGER"|"WORKER"
    phone: str | None  # 전화번호 (Phone, may be null)
    active: bool  # 계정 활성 상태 (Account active flag)
    inactive_reason: str | None  # 비활성 사유 (Deactivation reason, may be null)
    created_at: datetime  # 생성 일시 UTC (Account creation timestamp)
