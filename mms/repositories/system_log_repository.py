"""시스템 로그 레포지토리 — 감사 로그 추가 및 조회.

System Log Repository — Append and query audit log entries.
Entries are never updated or deleted.
"""

from typing import Sequence

from sqlalchemy import Select, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from mms.models.system_log import SystemLog
from mms.repositories.base import BaseRepository
from mms.utils.parsing import LIKE_ESCAPE, like_pattern


class SystemLogRepository(BaseRepository[SystemLog]):
    """시스템 로그 테이블에 대한 데이터베이스 쿼리를 담당하는 레포지토리."""

    def __init__(self) -> None:
        super().__init__(SystemLog)

    async def list_paginated(
        self,
        db: AsyncSession,
        action: str | None = None,
        entity_type: str | None = None,
        q: str | None = None,
        page: int = 1,
        per_page: int = 50,
    ) -> tuple[Sequence[SystemLog], int]:
        """필터 조건으로 로그를 최신순 페이지 조회합니다.

        Paginated log entries, newest first.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            action: 액션 필터 (Action code filter)
            entity_type: 엔티티 유형 필터 (Entity type filter)
            q: 상세/엔티티 검색어 (Search over details and entity fields)
            page: 페이지 번호 (Page number)
            per_page: 페이지당 항목 수 (Items per page)
        """
        query: Select = select(SystemLog)
        if action:
            query = query.where(SystemLog.action == action)
        if entity_type:
            query = query.where(SystemLog.entity_type == entity_type)
        if q:
            pattern = like_pattern(q)
            query = query.where(
                or_(
                    func.lower(func.coalesce(SystemLog.details, "")).like(pattern, escape=LIKE_ESCAPE),
                    func.lower(SystemLog.entity_type).like(pattern, escape=LIKE_ESCAPE),
                    func.lower(func.coalesce(SystemLog.entity_id, "")).like(pattern, escape=LIKE_ESCAPE),
                )
            )
        query = query.order_by(SystemLog.created_at.desc())
        return await self.get_paginated(db, query, page, per_page)

    async def distinct_actions(self, db: AsyncSession) -> list[str]:
        result = await db.execute(select(SystemLog.action).distinct().order_by(SystemLog.action))
        return list(result.scalars().all())


# 싱글턴 인스턴스 — Singleton instance
system_log_repository: SystemLogRepository = SystemLogRepository()
