"""사용자 레포지토리 — 사용자 조회 및 필터링 쿼리.

User Repository — Query helpers for the users table.
"""

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from mms.models.user import User
from mms.repositories.base import BaseRepository
from mms.utils.parsing import LIKE_ESCAPE, like_pattern


class UserRepository(BaseRepository[User]):
    """사용자 테이블에 대한 데이터베이스 쿼리를 담당하는 레포지토리.

    Repository handling database queries for the users table.
    """

    def __init__(self) -> None:
        super().__init__(User)

    async def list_filtered(
        self,
        db: AsyncSession,
        role: str | None = None,
        active: bool | None = None,
        q: str | None = None,
    ) -> list[User]:
        """역할/활성 상태/검색어로 사용자 목록을 조회합니다.

        List users with optional role, active-flag and search filters.
        Deactivated users are included unless ``active`` is given, so a
        deactivated record always remains enumerable.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            role: 역할 필터 (ADMIN / MANAGER / WORKER)
            active: 활성 상태 필터 (Active flag filter)
            q: 이름/사번 검색어 (Case-insensitive search over name and employee ID)

        Returns:
            list[User]: 사용자 목록, 생성순 (Users ordered by creation time)
        """
        query: Select = select(User)
        if role is not None:
            query = query.where(User.role == role)
        if active is not None:
            query = query.where(User.active == active)
        if q:
            pattern = like_pattern(q)
            query = query.where(
                func.lower(User.full_name).like(pattern, escape=LIKE_ESCAPE)
                | func.lower(User.employee_id).like(pattern, escape=LIKE_ESCAPE)
            )

        result = await db.execute(query.order_by(User.created_at))
        return list(result.scalars().all())

    async def get_by_employee_id(self, db: AsyncSession, employee_id: str) -> User | None:
        result = await db.execute(select(User).where(User.employee_id == employee_id))
        return result.scalar_one_or_none()

    async def count_by_role(self, db: AsyncSession) -> dict[str, dict[str, int]]:
        """역할별 전체/활성 사용자 수를 집계합니다.

        Returns:
            dict: {"WORKER": {"total": 3, "active": 2}, ...}
        """
        result = await db.execute(
            select(User.role, User.active, func.count()).group_by(User.role, User.active)
        )
        counts: dict[str, dict[str, int]] = {}
        for role, active, n in result.all():
            bucket = counts.setdefault(role, {"total": 0, "active": 0})
            bucket["total"] += n
            if active:
                bucket["active"] += n
        return counts


# 싱글턴 인스턴스 — Singleton instance
user_repository: UserRepository = UserRepository()
