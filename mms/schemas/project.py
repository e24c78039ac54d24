"""프로젝트 관련 Pydantic 요청/응답 스키마 정의.

Project and worker-assignment request/response schemas.
"""

from datetime import datetime

from pydantic import BaseModel


class ProjectCreate(BaseModel):
    name: str  # 프로젝트(건물/단지) 이름 (Project name)
    location: str | None = None  # 주소/위치 (Address, optional)


class ProjectUpdate(BaseModel):
    name: str | None = None
    location: str | None = None


class ProjectResponse(BaseModel):
    """프로젝트 응답 스키마.

    Attributes:
        id: 프로젝트 UUID (Project unique identifier)
        name: 프로젝트 이름 (Project name)
        location: 위치 (Location, nullable)
        unit_count: 유닛 수 (Number of units)
        occupied_unit_count: 입주 유닛 수 (Number of occupied units)
        issue_count: 이슈 수 (Number of issues ever reported)
        created_at: 생성 일시 (Creation timestamp)
    """

    id: str
    name: str
    location: str | None
    unit_count: int = 0  # 유닛 수 — 서비스에서 계산 (Computed by service)
    occupied_unit_count: int = 0
    issue_count: int = 0
    created_at: datetime


class WorkerAssignRequest(BaseModel):
    worker_user_id: str  # 배정할 작업자 UUID (Worker to assign)


class ProjectWorkerResponse(BaseModel):
    """프로젝트 배정 작업자 응답 스키마.

    Active worker assignment with resolved worker details.
    """

    assignment_id: str
    worker_user_id: str
    employee_id: str
    full_name: str
    active: bool  # 작업자 계정 활성 상태 (Worker account active flag)
    assigned_at: datetime
