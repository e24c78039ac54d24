"""감사 서비스 — 시스템 로그 기록 및 조회.

Audit Service — Appends SystemLog entries for every mutating operation
and serves the admin-only log viewer.
"""

from typing import Any
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from mms.models.enums import LogAction
from mms.models.system_log import SystemLog
from mms.models.user import User
from mms.repositories.system_log_repository import system_log_repository
from mms.schemas.system_log import SystemLogResponse


class AuditService:
    """시스템 로그 관련 비즈니스 로직을 처리하는 서비스."""

    async def record(
        self,
        db: AsyncSession,
        action: LogAction,
        entity_type: str,
        entity_id: UUID | str | None,
        performed_by_user_id: UUID,
        details: str | None = None,
    ) -> SystemLog:
        """시스템 로그 항목을 추가합니다.

        Append an audit entry in the caller's transaction. The entry is
        committed together with the change it describes.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            action: 액션 코드 (Action code)
            entity_type: 엔티티 유형 (USER, PROJECT, UNIT, OCCUPANT, ISSUE)
            entity_id: 엔티티 ID (Entity identifier)
            performed_by_user_id: 수행자 ID (Acting user)
            details: 상세 설명 (Human-readable details)

        Returns:
            SystemLog: 생성된 로그 항목 (Created log entry)
        """
        return await system_log_repository.create(db, {
            "action": action.value,
            "entity_type": entity_type,
            "entity_id": str(entity_id) if entity_id is not None else None,
            "performed_by_user_id": performed_by_user_id,
            "details": details,
        })

    async def list_logs(
        self,
        db: AsyncSession,
        action: str | None = None,
        entity_type: str | None = None,
        q: str | None = None,
        page: int = 1,
        per_page: int = 50,
    ) -> dict[str, Any]:
        """로그 목록을 최신순으로 조회합니다 (수행자 이름 포함).

        Newest-first log page with actor names resolved.
        """
        logs, total = await system_log_repository.list_paginated(
            db, action=action, entity_type=entity_type, q=q, page=page, per_page=per_page
        )

        # 수행자 이름 일괄 조회 — Resolve actor names in one query
        user_ids: set[UUID] = {log.performed_by_user_id for log in logs}
        names: dict[UUID, str] = {}
        if user_ids:
            result = await db.execute(select(User.id, User.full_name).where(User.id.in_(user_ids)))
            names = {row[0]: row[1] for row in result.all()}

        items: list[SystemLogResponse] = [
            SystemLogResponse(
                id=str(log.id),
                action=log.action,
                entity_type=log.entity_type,
                entity_id=log.entity_id,
                performed_by_user_id=str(log.performed_by_user_id),
                performed_by_name=names.get(log.performed_by_user_id),
                details=log.details,
                created_at=log.created_at,
            )
            for log in logs
        ]
        return {"items": items, "total": total, "page": page, "per_page": per_page}

    async def list_actions(self, db: AsyncSession) -> list[str]:
        return await system_log_repository.distinct_actions(db)


# 싱글턴 인스턴스 — Singleton instance
audit_service: AuditService = AuditService()
