"""유닛 및 입주자 관련 Pydantic 요청/응답 스키마 정의.

Unit, occupant and occupancy request/response schemas.
"""

from datetime import datetime

from pydantic import BaseModel

from mms.models.enums import OccupantType


class OccupantDetails(BaseModel):
    """입주자 정보 스키마 — 입주 처리 시 입력.

    Occupant details supplied when a unit becomes occupied.
    The occupant is matched (upserted) by ``id_passport``.
    """

    id_passport: str  # 신분증/여권 번호 — 고유 (ID card / passport number, unique)
    name: str  # 이름 (Full name)
    phone: str | None = None  # 전화번호 (Phone, optional)
    occupant_type: OccupantType | None = None  # OWNER / TENANT


class UnitCreate(BaseModel):
    """유닛 생성 요청 스키마.

    Unit creation request. When ``occupant`` is given the unit starts occupied.
    """

    unit_no: str  # 유닛 번호 — 프로젝트 내 고유 (Unique within project)
    type: str | None = None  # 유닛 유형 (e.g. "Studio", "2BR")
    occupant: OccupantDetails | None = None


class UnitUpdate(BaseModel):
    unit_no: str | None = None
    type: str | None = None


class OccupancyRequest(BaseModel):
    """입주 상태 변경 요청 스키마.

    Set unit occupancy. ``occupied=True`` requires ``occupant``;
    ``occupied=False`` vacates the unit.
    """

    occupied: bool
    occupant: OccupantDetails | None = None


class OccupantUpdate(BaseModel):
    name: str | None = None
    phone: str | None = None
    occupant_type: OccupantType | None = None


class OccupantResponse(BaseModel):
    id: str
    id_passport: str
    name: str
    phone: str | None
    occupant_type: str | None
    created_at: datetime


class UnitResponse(BaseModel):
    """유닛 응답 스키마.

    Attributes:
        id: 유닛 UUID (Unit unique identifier)
        project_id: 프로젝트 UUID (Parent project)
        unit_no: 유닛 번호 (Unit number)
        type: 유닛 유형 (Unit type, nullable)
        is_occupied: 입주 여부 (Occupancy flag)
        current_occupant: 현재 입주자 (Current occupant, nullable)
    """

    id: str
    project_id: str
    unit_no: str
    type: str | None
    is_occupied: bool
    current_occupant: OccupantResponse | None = None
    created_at: datetime


class OccupancyHistoryResponse(BaseModel):
    """유닛 입주 이력 항목."""

    assignment_id: str
    occupant: OccupantResponse
    start_date: datetime
    end_date: datetime | None
    is_active: bool


class ActiveOccupantResponse(BaseModel):
    """현재 입주자 목록 항목 — 유닛 번호와 프로젝트 이름 포함.

    Active occupant row joined with unit number and project name.
    """

    occupant: OccupantResponse
    unit_id: str
    unit_no: str
    project_id: str
    project_name: str
    start_date: datetime
