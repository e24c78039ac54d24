"""기본 레포지토리 — 도메인 레포지토리 공통 부모 클래스.

Base Repository — Shared lookup, paging, insert and update helpers for the
domain repositories. There is no delete helper: users are deactivated,
assignments ended and issues archived.

Usage:
    class UnitRepository(BaseRepository[Unit]):
        def __init__(self) -> None:
            super().__init__(Unit)
"""

from typing import Any, Generic, Sequence, TypeVar
from uuid import UUID

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from mms.database import Base

# UUID 기본키를 가진 매핑 모델 — Mapped model with a UUID primary key
ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """제네릭 레포지토리.

    Attributes:
        model: 대상 ORM 모델 (Mapped model class this repository serves)
    """

    def __init__(self, model: type[ModelType]) -> None:
        self.model: type[ModelType] = model

    async def get_by_id(self, db: AsyncSession, record_id: UUID) -> ModelType | None:
        """기본키로 레코드 하나를 조회합니다. 없으면 None."""
        result = await db.execute(select(self.model).where(self.model.id == record_id))
        return result.scalar_one_or_none()

    async def get_paginated(
        self,
        db: AsyncSession,
        query: Select,
        page: int = 1,
        per_page: int = 20,
    ) -> tuple[Sequence[ModelType], int]:
        """정렬된 SELECT에 페이지를 적용합니다.

        Apply OFFSET/LIMIT to an already filtered and ordered query.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            query: 필터와 정렬이 적용된 쿼리 (Filtered, ordered query)
            page: 1부터 시작하는 페이지 번호 (1-based page number)
            per_page: 페이지 크기 (Page size)

        Returns:
            tuple: (현재 페이지 레코드, 필터 조건의 전체 개수)
                   (Records on this page, total matching the filters)
        """
        total: int = (await db.execute(select(func.count()).select_from(query.subquery()))).scalar() or 0
        result = await db.execute(query.offset((max(page, 1) - 1) * per_page).limit(per_page))
        return result.scalars().all(), total

    async def create(self, db: AsyncSession, values: dict[str, Any]) -> ModelType:
        """레코드를 추가하고 flush하여 기본값(id, version, 타임스탬프)을 채웁니다.

        Insert a record and flush so generated ids, the issue version counter
        and timestamps are populated before the caller commits.
        """
        record: ModelType = self.model(**values)
        db.add(record)
        await db.flush()
        await db.refresh(record)
        return record

    async def update(self, db: AsyncSession, record: ModelType, values: dict[str, Any]) -> ModelType:
        """이미 조회한 레코드에 변경값을 적용하고 flush합니다.

        Callers load and validate the record first. For versioned rows
        (issues) the flush raises StaleDataError when another writer got
        there first.
        """
        for field, value in values.items():
            if hasattr(record, field):
                setattr(record, field, value)

        await db.flush()
        await db.refresh(record)
        return record
