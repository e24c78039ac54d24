"""유닛 레포지토리 — 유닛 및 입주 배정 쿼리.

Unit Repository — Queries for units and occupant-unit assignments.
"""

from uuid import UUID

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from mms.models.unit import Occupant, OccupantUnitAssignment, Unit
from mms.repositories.base import BaseRepository


class UnitRepository(BaseRepository[Unit]):
    """유닛 테이블에 대한 데이터베이스 쿼리를 담당하는 레포지토리.

    Repository handling database queries for units and their occupancy records.
    """

    def __init__(self) -> None:
        super().__init__(Unit)

    async def list_by_project(
        self,
        db: AsyncSession,
        project_id: UUID,
    ) -> list[tuple[Unit, Occupant | None]]:
        """프로젝트의 유닛 목록을 현재 입주자와 함께 조회합니다.

        List units of a project with their current occupant (if any),
        ordered by unit number.
        """
        query: Select = (
            select(Unit, Occupant)
            .outerjoin(Occupant, Occupant.id == Unit.current_occupant_id)
            .where(Unit.project_id == project_id)
            .order_by(Unit.unit_no)
        )
        result = await db.execute(query)
        return [(row[0], row[1]) for row in result.all()]

    async def get_by_unit_no(self, db: AsyncSession, project_id: UUID, unit_no: str) -> Unit | None:
        result = await db.execute(
            select(Unit).where(Unit.project_id == project_id, Unit.unit_no == unit_no)
        )
        return result.scalar_one_or_none()

    # --- 입주 배정 (Occupancy assignments) ---

    async def get_active_assignment(self, db: AsyncSession, unit_id: UUID) -> OccupantUnitAssignment | None:
        query: Select = select(OccupantUnitAssignment).where(
            OccupantUnitAssignment.unit_id == unit_id,
            OccupantUnitAssignment.is_active == True,  # noqa: E712
        )
        result = await db.execute(query)
        return result.scalars().first()

    async def create_assignment(
        self,
        db: AsyncSession,
        unit_id: UUID,
        occupant_id: UUID,
        assigned_by_user_id: UUID,
    ) -> OccupantUnitAssignment:
        assignment: OccupantUnitAssignment = OccupantUnitAssignment(
            unit_id=unit_id,
            occupant_id=occupant_id,
            assigned_by_user_id=assigned_by_user_id,
        )
        db.add(assignment)
        await db.flush()
        await db.refresh(assignment)
        return assignment

    async def list_history(
        self,
        db: AsyncSession,
        unit_id: UUID,
    ) -> list[tuple[OccupantUnitAssignment, Occupant]]:
        """유닛의 입주 이력을 최신순으로 조회합니다.

        Unit occupancy history, newest assignment first.
        """
        query: Select = (
            select(OccupantUnitAssignment, Occupant)
            .join(Occupant, Occupant.id == OccupantUnitAssignment.occupant_id)
            .where(OccupantUnitAssignment.unit_id == unit_id)
            .order_by(OccupantUnitAssignment.start_date.desc())
        )
        result = await db.execute(query)
        return [(row[0], row[1]) for row in result.all()]


# 싱글턴 인스턴스 — Singleton instance
unit_repository: UnitRepository = UnitRepository()
