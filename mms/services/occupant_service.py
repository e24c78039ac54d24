"""입주자 서비스 — 입주자 조회, 수정, 검색 비즈니스 로직.

Occupant Service — Business logic for occupants (clients): lookup,
update, search and the active-occupant listing.
"""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from mms.models.enums import LogAction
from mms.models.unit import Occupant
from mms.models.user import User
from mms.repositories.occupant_repository import occupant_repository
from mms.schemas.unit import ActiveOccupantResponse, OccupantDetails, OccupantResponse, OccupantUpdate
from mms.services.audit_service import audit_service
from mms.utils.exceptions import BadRequestError, NotFoundError
from mms.utils.parsing import is_blank


class OccupantService:
    """입주자 관련 비즈니스 로직을 처리하는 서비스."""

    def to_response(self, occupant: Occupant) -> OccupantResponse:
        return OccupantResponse(
            id=str(occupant.id),
            id_passport=occupant.id_passport,
            name=occupant.name,
            phone=occupant.phone,
            occupant_type=occupant.occupant_type,
            created_at=occupant.created_at,
        )

    async def upsert(self, db: AsyncSession, details: OccupantDetails) -> Occupant:
        """신분증/여권 번호로 입주자를 찾아 갱신하거나 새로 생성합니다.

        Find the occupant by ``id_passport`` and refresh its details,
        or create a new occupant.

        Raises:
            BadRequestError: 신분증 번호 또는 이름 누락 (Blank ID/passport or name)
        """
        if is_blank(details.id_passport) or is_blank(details.name):
            raise BadRequestError("Occupant ID/passport and name are required")

        values: dict = {
            "id_passport": details.id_passport.strip(),
            "name": details.name.strip(),
            "phone": details.phone,
            "occupant_type": details.occupant_type.value if details.occupant_type else None,
        }
        existing: Occupant | None = await occupant_repository.get_by_id_passport(db, values["id_passport"])
        if existing is not None:
            return await occupant_repository.update(db, existing, values)
        return await occupant_repository.create(db, values)

    async def get_occupant(self, db: AsyncSession, occupant_id: UUID) -> OccupantResponse:
        occupant: Occupant | None = await occupant_repository.get_by_id(db, occupant_id)
        if occupant is None:
            raise NotFoundError("Occupant not found")
        return self.to_response(occupant)

    async def update_occupant(
        self,
        db: AsyncSession,
        occupant_id: UUID,
        data: OccupantUpdate,
        caller: User,
    ) -> OccupantResponse:
        occupant: Occupant | None = await occupant_repository.get_by_id(db, occupant_id)
        if occupant is None:
            raise NotFoundError("Occupant not found")

        update_data: dict = data.model_dump(exclude_unset=True)
        if "name" in update_data and is_blank(update_data["name"]):
            raise BadRequestError("Occupant name cannot be blank")
        if update_data.get("occupant_type") is not None:
            update_data["occupant_type"] = update_data["occupant_type"].value

        occupant = await occupant_repository.update(db, occupant, update_data)
        await audit_service.record(
            db, LogAction.UPDATE, "OCCUPANT", occupant.id, caller.id, f"Updated occupant {occupant.name}"
        )
        return self.to_response(occupant)

    async def search(self, db: AsyncSession, q: str) -> list[OccupantResponse]:
        if is_blank(q):
            return []
        occupants: list[Occupant] = await occupant_repository.search(db, q.strip())
        return [self.to_response(o) for o in occupants]

    async def list_active(self, db: AsyncSession, project_id: UUID | None = None) -> list[ActiveOccupantResponse]:
        """현재 입주 중인 입주자 목록 (유닛 번호, 프로젝트 이름 포함)."""
        rows = await occupant_repository.list_active(db, project_id)
        return [
            ActiveOccupantResponse(
                occupant=self.to_response(occupant),
                unit_id=str(unit.id),
                unit_no=unit.unit_no,
                project_id=str(project.id),
                project_name=project.name,
                start_date=assignment.start_date,
            )
            for occupant, assignment, unit, project in rows
        ]


# 싱글턴 인스턴스 — Singleton instance
occupant_service: OccupantService = OccupantService()
