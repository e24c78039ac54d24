"""유닛 서비스 — 유닛 관리 및 입주/퇴거 비즈니스 로직.

Unit Service — Business logic for units and their occupancy.

Occupancy rules:
    - 입주(occupy): 입주자를 신분증/여권 번호로 upsert, 기존 활성 배정 종료 후 새 배정 생성
      (Upsert occupant by id_passport, end any active assignment, open a new one)
    - 퇴거(vacate): 활성 배정 종료, 유닛을 공실로 표시
      (End the active assignment and mark the unit vacant)
"""

from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from mms.models.enums import LogAction
from mms.models.project import Project
from mms.models.unit import Occupant, OccupantUnitAssignment, Unit
from mms.models.user import User
from mms.repositories.occupant_repository import occupant_repository
from mms.repositories.unit_repository import unit_repository
from mms.schemas.unit import (
    OccupancyHistoryResponse,
    OccupancyRequest,
    OccupantDetails,
    UnitCreate,
    UnitResponse,
    UnitUpdate,
)
from mms.services.audit_service import audit_service
from mms.services.occupant_service import occupant_service
from mms.services.project_service import project_service
from mms.utils.exceptions import BadRequestError, DuplicateError, NotFoundError
from mms.utils.parsing import is_blank


class UnitService:
    """유닛 관련 비즈니스 로직을 처리하는 서비스."""

    def to_response(self, unit: Unit, occupant: Occupant | None) -> UnitResponse:
        return UnitResponse(
            id=str(unit.id),
            project_id=str(unit.project_id),
            unit_no=unit.unit_no,
            type=unit.type,
            is_occupied=unit.is_occupied,
            current_occupant=occupant_service.to_response(occupant) if occupant is not None else None,
            created_at=unit.created_at,
        )

    async def get_unit(self, db: AsyncSession, unit_id: UUID) -> Unit:
        unit: Unit | None = await unit_repository.get_by_id(db, unit_id)
        if unit is None:
            raise NotFoundError("Unit not found")
        return unit

    async def get_unit_detail(self, db: AsyncSession, unit_id: UUID) -> UnitResponse:
        unit: Unit = await self.get_unit(db, unit_id)
        return await self._build_response(db, unit)

    async def _build_response(self, db: AsyncSession, unit: Unit) -> UnitResponse:
        occupant: Occupant | None = None
        if unit.current_occupant_id is not None:
            occupant = await occupant_repository.get_by_id(db, unit.current_occupant_id)
        return self.to_response(unit, occupant)

    async def list_units(self, db: AsyncSession, project_id: UUID) -> list[UnitResponse]:
        await project_service.get_project(db, project_id)
        rows = await unit_repository.list_by_project(db, project_id)
        return [self.to_response(unit, occupant) for unit, occupant in rows]

    async def create_unit(
        self,
        db: AsyncSession,
        project_id: UUID,
        data: UnitCreate,
        caller: User,
    ) -> UnitResponse:
        """프로젝트에 유닛을 추가합니다.

        Add a unit to a project. Optional occupant details occupy it immediately.

        Raises:
            NotFoundError: 프로젝트가 없을 때 (Project not found)
            BadRequestError: 유닛 번호 누락 (Blank unit number)
            DuplicateError: 프로젝트 내 유닛 번호 중복 (Unit number taken in project)
        """
        project: Project = await project_service.get_project(db, project_id)
        if is_blank(data.unit_no):
            raise BadRequestError("Unit number is required")
        unit_no: str = data.unit_no.strip()
        if await unit_repository.get_by_unit_no(db, project.id, unit_no) is not None:
            raise DuplicateError("Unit number already exists in this project")

        unit: Unit = await unit_repository.create(db, {
            "project_id": project.id,
            "unit_no": unit_no,
            "type": data.type,
            "created_by_user_id": caller.id,
        })
        await audit_service.record(
            db, LogAction.CREATE, "UNIT", unit.id, caller.id, f"Created unit {unit_no} in {project.name}"
        )

        if data.occupant is not None:
            await self._occupy(db, unit, data.occupant, caller)
        return await self._build_response(db, unit)

    async def update_unit(
        self,
        db: AsyncSession,
        unit_id: UUID,
        data: UnitUpdate,
        caller: User,
    ) -> UnitResponse:
        unit: Unit = await self.get_unit(db, unit_id)
        update_data: dict = data.model_dump(exclude_unset=True)

        if "unit_no" in update_data:
            if is_blank(update_data["unit_no"]):
                raise BadRequestError("Unit number cannot be blank")
            update_data["unit_no"] = update_data["unit_no"].strip()
            existing: Unit | None = await unit_repository.get_by_unit_no(db, unit.project_id, update_data["unit_no"])
            if existing is not None and existing.id != unit.id:
                raise DuplicateError("Unit number already exists in this project")

        unit = await unit_repository.update(db, unit, update_data)
        await audit_service.record(
            db, LogAction.UPDATE, "UNIT", unit.id, caller.id, f"Updated unit {unit.unit_no}"
        )
        return await self._build_response(db, unit)

    async def set_occupancy(
        self,
        db: AsyncSession,
        unit_id: UUID,
        data: OccupancyRequest,
        caller: User,
    ) -> UnitResponse:
        """유닛 입주 상태를 변경합니다.

        Occupy (with occupant details) or vacate a unit.

        Raises:
            BadRequestError: 입주 시 입주자 정보 누락, 또는 공실 유닛 퇴거
                             (Missing occupant details, or vacating a vacant unit)
        """
        unit: Unit = await self.get_unit(db, unit_id)
        if data.occupied:
            if data.occupant is None:
                raise BadRequestError("Occupant details are required to occupy a unit")
            await self._occupy(db, unit, data.occupant, caller)
        else:
            await self._vacate(db, unit, caller)
        return await self._build_response(db, unit)

    async def _end_active_assignment(self, db: AsyncSession, unit: Unit) -> OccupantUnitAssignment | None:
        active: OccupantUnitAssignment | None = await unit_repository.get_active_assignment(db, unit.id)
        if active is not None:
            active.is_active = False
            active.end_date = datetime.now(timezone.utc)
            await db.flush()
        return active

    async def _occupy(self, db: AsyncSession, unit: Unit, details: OccupantDetails, caller: User) -> None:
        occupant: Occupant = await occupant_service.upsert(db, details)
        await self._end_active_assignment(db, unit)
        await unit_repository.create_assignment(db, unit.id, occupant.id, caller.id)
        await unit_repository.update(db, unit, {"is_occupied": True, "current_occupant_id": occupant.id})
        await audit_service.record(
            db, LogAction.OCCUPY, "UNIT", unit.id, caller.id,
            f"Unit {unit.unit_no} occupied by {occupant.name} ({occupant.id_passport})",
        )

    async def _vacate(self, db: AsyncSession, unit: Unit, caller: User) -> None:
        if not unit.is_occupied:
            raise BadRequestError("Unit is already vacant")
        await self._end_active_assignment(db, unit)
        await unit_repository.update(db, unit, {"is_occupied": False, "current_occupant_id": None})
        await audit_service.record(
            db, LogAction.VACATE, "UNIT", unit.id, caller.id, f"Unit {unit.unit_no} vacated"
        )

    async def get_history(self, db: AsyncSession, unit_id: UUID) -> list[OccupancyHistoryResponse]:
        await self.get_unit(db, unit_id)
        rows = await unit_repository.list_history(db, unit_id)
        return [
            OccupancyHistoryResponse(
                assignment_id=str(assignment.id),
                occupant=occupant_service.to_response(occupant),
                start_date=assignment.start_date,
                end_date=assignment.end_date,
                is_active=assignment.is_active,
            )
            for assignment, occupant in rows
        ]


# 싱글턴 인스턴스 — Singleton instance
unit_service: UnitService = UnitService()
