"""입주자 레포지토리 — 입주자 검색 및 현재 입주 목록.

Occupant Repository — Occupant lookup, search and active-occupancy listing.
"""

from sqlalchemy import Select, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from mms.models.project import Project
from mms.models.unit import Occupant, OccupantUnitAssignment, Unit
from mms.repositories.base import BaseRepository
from mms.utils.parsing import LIKE_ESCAPE, like_pattern


class OccupantRepository(BaseRepository[Occupant]):
    """입주자 테이블에 대한 데이터베이스 쿼리를 담당하는 레포지토리.

    Repository handling database queries for the occupants table.
    """

    def __init__(self) -> None:
        super().__init__(Occupant)

    async def get_by_id_passport(self, db: AsyncSession, id_passport: str) -> Occupant | None:
        result = await db.execute(select(Occupant).where(Occupant.id_passport == id_passport))
        return result.scalar_one_or_none()

    async def search(self, db: AsyncSession, q: str, limit: int = 20) -> list[Occupant]:
        """신분증/여권 번호, 이름, 전화번호로 입주자를 검색합니다.

        Case-insensitive search over passport/ID number, name and phone.
        """
        pattern = like_pattern(q)
        query: Select = (
            select(Occupant)
            .where(
                or_(
                    func.lower(Occupant.id_passport).like(pattern, escape=LIKE_ESCAPE),
                    func.lower(Occupant.name).like(pattern, escape=LIKE_ESCAPE),
                    func.lower(Occupant.phone).like(pattern, escape=LIKE_ESCAPE),
                )
            )
            .order_by(Occupant.name)
            .limit(limit)
        )
        result = await db.execute(query)
        return list(result.scalars().all())

    async def list_active(
        self,
        db: AsyncSession,
        project_id=None,
    ) -> list[tuple[Occupant, OccupantUnitAssignment, Unit, Project]]:
        """현재 입주 중인 입주자를 유닛/프로젝트 정보와 함께 조회합니다.

        Occupants with an active unit assignment, joined with unit and project.
        """
        query: Select = (
            select(Occupant, OccupantUnitAssignment, Unit, Project)
            .join(OccupantUnitAssignment, OccupantUnitAssignment.occupant_id == Occupant.id)
            .join(Unit, Unit.id == OccupantUnitAssignment.unit_id)
            .join(Project, Project.id == Unit.project_id)
            .where(OccupantUnitAssignment.is_active == True)  # noqa: E712
            .order_by(Project.name, Unit.unit_no)
        )
        if project_id is not None:
            query = query.where(Unit.project_id == project_id)
        result = await db.execute(query)
        return [(row[0], row[1], row[2], row[3]) for row in result.all()]


# 싱글턴 인스턴스 — Singleton instance
occupant_repository: OccupantRepository = OccupantRepository()
