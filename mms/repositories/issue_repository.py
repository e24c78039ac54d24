"""이슈 레포지토리 — 이슈 필터링, 첨부, 상태 이력, 통계 쿼리.

Issue Repository — Issue filtering (derived views), attachments,
status history and aggregate statistics.

Derived views are recomputed on every read:
    - active: 보관되지 않은 이슈 (not archived)
    - archived: RESOLVED+verified 또는 REJECTED
"""

from typing import Any, Sequence
from uuid import UUID

from sqlalchemy import ColumnElement, Select, and_, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from mms.models.enums import IssueStatus, ProofType
from mms.models.issue import Issue, IssueAttachment, IssueStatusHistory
from mms.repositories.base import BaseRepository
from mms.utils.parsing import LIKE_ESCAPE, like_pattern


def _archived_clause() -> ColumnElement[bool]:
    """보관 조건 — (RESOLVED AND verified) OR REJECTED."""
    return or_(
        and_(Issue.status == IssueStatus.RESOLVED.value, Issue.verified == True),  # noqa: E712
        Issue.status == IssueStatus.REJECTED.value,
    )


class IssueRepository(BaseRepository[Issue]):
    """이슈 테이블에 대한 데이터베이스 쿼리를 담당하는 레포지토리.

    Repository handling database queries for issues and their child rows.
    """

    def __init__(self) -> None:
        super().__init__(Issue)

    def build_query(
        self,
        scope: str = "all",
        status: str | None = None,
        priority: str | None = None,
        project_id: UUID | None = None,
        project_ids: list[UUID] | None = None,
        reported_by_user_id: UUID | None = None,
        verified: bool | None = None,
        q: str | None = None,
    ) -> Select:
        """필터 조건으로 이슈 SELECT 쿼리를 생성합니다.

        Build the issue SELECT for a derived view. Every filter is optional
        and combined with AND; results are newest first.

        Args:
            scope: active / archived / all
            status: 상태 필터 (Status filter)
            priority: 우선순위 필터 (Priority filter)
            project_id: 프로젝트 필터 (Single project filter)
            project_ids: 허용 프로젝트 목록 (Restrict to a set of projects)
            reported_by_user_id: 보고자 필터 (Reporter filter, "my issues")
            verified: 검증 여부 필터 (Verified flag filter)
            q: 원인/분류/설명 검색어 (Search over cause, category, description)

        Returns:
            Select: 정렬된 이슈 쿼리 (Ordered issue query)
        """
        query: Select = select(Issue)

        if scope == "active":
            query = query.where(~_archived_clause())
        elif scope == "archived":
            query = query.where(_archived_clause())

        if status:
            query = query.where(Issue.status == status)
        if priority:
            query = query.where(Issue.priority == priority)
        if project_id is not None:
            query = query.where(Issue.project_id == project_id)
        if project_ids is not None:
            query = query.where(Issue.project_id.in_(project_ids))
        if reported_by_user_id is not None:
            query = query.where(Issue.reported_by_user_id == reported_by_user_id)
        if verified is not None:
            query = query.where(Issue.verified == verified)
        if q:
            pattern = like_pattern(q)
            query = query.where(
                or_(
                    func.lower(Issue.complaint_type).like(pattern, escape=LIKE_ESCAPE),
                    func.lower(Issue.issue_caused_by).like(pattern, escape=LIKE_ESCAPE),
                    func.lower(func.coalesce(Issue.description_text, "")).like(pattern, escape=LIKE_ESCAPE),
                    func.lower(func.coalesce(Issue.other_area, "")).like(pattern, escape=LIKE_ESCAPE),
                )
            )

        return query.order_by(Issue.created_at.desc())

    async def list_paginated(
        self,
        db: AsyncSession,
        page: int = 1,
        per_page: int = 20,
        **filters: Any,
    ) -> tuple[Sequence[Issue], int]:
        return await self.get_paginated(db, self.build_query(**filters), page, per_page)

    async def list_all(self, db: AsyncSession, **filters: Any) -> list[Issue]:
        result = await db.execute(self.build_query(**filters))
        return list(result.scalars().all())

    # --- 첨부 (Attachments) ---

    async def add_attachment(
        self,
        db: AsyncSession,
        issue_id: UUID,
        url: str,
        proof_type: str,
        media_type: str,
        uploaded_by_user_id: UUID | None,
    ) -> IssueAttachment:
        attachment: IssueAttachment = IssueAttachment(
            issue_id=issue_id,
            url=url,
            proof_type=proof_type,
            media_type=media_type,
            uploaded_by_user_id=uploaded_by_user_id,
        )
        db.add(attachment)
        await db.flush()
        await db.refresh(attachment)
        return attachment

    async def get_attachments(self, db: AsyncSession, issue_id: UUID) -> list[IssueAttachment]:
        result = await db.execute(
            select(IssueAttachment)
            .where(IssueAttachment.issue_id == issue_id)
            .order_by(IssueAttachment.created_at)
        )
        return list(result.scalars().all())

    async def get_attachments_for(
        self,
        db: AsyncSession,
        issue_ids: list[UUID],
    ) -> dict[UUID, list[IssueAttachment]]:
        """여러 이슈의 첨부를 한 번에 조회합니다 (N+1 방지).

        Batch-load attachments for a page of issues.
        """
        grouped: dict[UUID, list[IssueAttachment]] = {issue_id: [] for issue_id in issue_ids}
        if not issue_ids:
            return grouped
        result = await db.execute(
            select(IssueAttachment)
            .where(IssueAttachment.issue_id.in_(issue_ids))
            .order_by(IssueAttachment.created_at)
        )
        for attachment in result.scalars().all():
            grouped[attachment.issue_id].append(attachment)
        return grouped

    async def count_proofs(self, db: AsyncSession, issue_id: UUID, proof_type: str = ProofType.AFTER.value) -> int:
        query: Select = select(func.count()).select_from(IssueAttachment).where(
            IssueAttachment.issue_id == issue_id,
            IssueAttachment.proof_type == proof_type,
        )
        return (await db.execute(query)).scalar() or 0

    # --- 상태 이력 (Status history) ---

    async def add_history(
        self,
        db: AsyncSession,
        issue_id: UUID,
        from_status: str,
        to_status: str,
        changed_by_user_id: UUID,
        note: str | None = None,
    ) -> IssueStatusHistory:
        entry: IssueStatusHistory = IssueStatusHistory(
            issue_id=issue_id,
            from_status=from_status,
            to_status=to_status,
            changed_by_user_id=changed_by_user_id,
            note=note,
        )
        db.add(entry)
        await db.flush()
        return entry

    async def get_history(self, db: AsyncSession, issue_id: UUID) -> list[IssueStatusHistory]:
        result = await db.execute(
            select(IssueStatusHistory)
            .where(IssueStatusHistory.issue_id == issue_id)
            .order_by(IssueStatusHistory.changed_at)
        )
        return list(result.scalars().all())

    # --- 통계 (Statistics) ---

    async def aggregate(
        self,
        db: AsyncSession,
        project_id: UUID | None = None,
        project_ids: list[UUID] | None = None,
        reported_by_user_id: UUID | None = None,
    ) -> list[tuple[str, str, bool, int]]:
        """상태/우선순위/검증 여부별 이슈 수를 집계합니다.

        Group issue counts by (status, priority, verified).

        Returns:
            list[tuple]: [(status, priority, verified, count), ...]
        """
        query: Select = select(Issue.status, Issue.priority, Issue.verified, func.count()).group_by(
            Issue.status, Issue.priority, Issue.verified
        )
        if project_id is not None:
            query = query.where(Issue.project_id == project_id)
        if project_ids is not None:
            query = query.where(Issue.project_id.in_(project_ids))
        if reported_by_user_id is not None:
            query = query.where(Issue.reported_by_user_id == reported_by_user_id)

        result = await db.execute(query)
        return [(row[0], row[1], bool(row[2]), row[3]) for row in result.all()]


# 싱글턴 인스턴스 — Singleton instance
issue_repository: IssueRepository = IssueRepository()
