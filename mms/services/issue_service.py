"""이슈 서비스 — 이슈 보고, 상태 전이, 첨부, 조회 비즈니스 로직.

Issue Service — Business logic for issue reporting, the review workflow,
proof attachments and derived issue views.

Status transitions:
    OPEN --approve(vendor)--> IN_PROGRESS --resolve--> RESOLVED --verify(AFTER proof)--> RESOLVED+verified
    OPEN --reject(reason)--> REJECTED
    관리자 강제 변경(override)은 위 조건을 우회하되 verified ⇒ RESOLVED 는 유지합니다.
    Admin override bypasses the preconditions but keeps verified ⇒ RESOLVED.

Every transition writes one status-history row and one system-log row in
the same transaction. Requests may carry the ``version`` they read; a
mismatch (or a concurrent write detected at flush) raises ConflictError.
"""

from datetime import datetime, timezone
from typing import Any, Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from mms.models.enums import (
    IssuePriority,
    IssueStatus,
    LocationType,
    LogAction,
    MediaType,
    ProofType,
    UserRole,
)
from mms.models.issue import Issue, IssueAttachment
from mms.models.unit import Unit
from mms.models.user import User
from mms.repositories.issue_repository import issue_repository
from mms.repositories.unit_repository import unit_repository
from mms.schemas.issue import (
    ApproveRequest,
    AttachmentCreate,
    AttachmentResponse,
    IssueCreate,
    IssueResponse,
    IssueStats,
    OverrideRequest,
    RejectRequest,
    StatusHistoryResponse,
    TransitionRequest,
)
from mms.services.audit_service import audit_service
from mms.services.project_service import project_service
from mms.services.storage_service import storage_service
from mms.utils.exceptions import BadRequestError, ConflictError, ForbiddenError, NotFoundError
from mms.utils.parsing import is_blank, parse_uuid


class IssueService:
    """이슈 관련 비즈니스 로직을 처리하는 서비스.

    Service handling issue business logic.
    """

    # --- 응답 변환 (Response building) ---

    def attachment_response(self, attachment: IssueAttachment) -> AttachmentResponse:
        return AttachmentResponse(
            id=str(attachment.id),
            url=attachment.url,
            media_type=attachment.media_type,
            proof_type=attachment.proof_type,
            uploaded_by_user_id=str(attachment.uploaded_by_user_id) if attachment.uploaded_by_user_id else None,
            created_at=attachment.created_at,
        )

    def to_response(self, issue: Issue, attachments: list[IssueAttachment] | None = None) -> IssueResponse:
        """이슈 모델을 응답 스키마로 변환합니다.

        Convert an Issue to its response. Attachments are passed in because
        relationships are not lazily loadable on an async session.
        """

        def _str(value: UUID | None) -> str | None:
            return str(value) if value is not None else None

        return IssueResponse(
            id=str(issue.id),
            project_id=str(issue.project_id),
            reported_by_user_id=str(issue.reported_by_user_id),
            location_type=issue.location_type,
            unit_id=_str(issue.unit_id),
            other_area=issue.other_area,
            issue_caused_by=issue.issue_caused_by,
            complaint_type=issue.complaint_type,
            description_text=issue.description_text,
            voice_url=issue.voice_url,
            status=issue.status,
            priority=issue.priority,
            assigned_vendor_name=issue.assigned_vendor_name,
            approved=issue.approved,
            approved_by_user_id=_str(issue.approved_by_user_id),
            approved_at=issue.approved_at,
            rejection_reason=issue.rejection_reason,
            rejected_by_user_id=_str(issue.rejected_by_user_id),
            rejected_at=issue.rejected_at,
            resolved_by_user_id=_str(issue.resolved_by_user_id),
            resolved_at=issue.resolved_at,
            verified=issue.verified,
            verified_by_user_id=_str(issue.verified_by_user_id),
            verified_at=issue.verified_at,
            is_archived=issue.is_archived,
            is_actionable=issue.is_actionable,
            version=issue.version,
            attachments=[self.attachment_response(a) for a in attachments or []],
            created_at=issue.created_at,
            updated_at=issue.updated_at,
        )

    async def build_response(self, db: AsyncSession, issue: Issue) -> IssueResponse:
        attachments: list[IssueAttachment] = await issue_repository.get_attachments(db, issue.id)
        return self.to_response(issue, attachments)

    async def build_page(
        self,
        db: AsyncSession,
        issues: Sequence[Issue],
        total: int,
        page: int,
        per_page: int,
    ) -> dict[str, Any]:
        grouped = await issue_repository.get_attachments_for(db, [i.id for i in issues])
        items: list[IssueResponse] = [self.to_response(i, grouped.get(i.id)) for i in issues]
        return {"items": items, "total": total, "page": page, "per_page": per_page}

    # --- 조회 (Reads) ---

    async def get_issue(self, db: AsyncSession, issue_id: UUID) -> Issue:
        """이슈를 조회합니다.

        Raises:
            NotFoundError: 이슈가 없을 때 (Issue not found)
        """
        issue: Issue | None = await issue_repository.get_by_id(db, issue_id)
        if issue is None:
            raise NotFoundError("Issue not found")
        return issue

    async def get_visible_issue(self, db: AsyncSession, issue_id: UUID, caller: User) -> Issue:
        """호출자가 볼 수 있는 이슈를 조회합니다. 작업자는 본인 보고 이슈만.

        Workers only see issues they reported.
        """
        issue: Issue = await self.get_issue(db, issue_id)
        if caller.role == UserRole.WORKER.value and issue.reported_by_user_id != caller.id:
            raise NotFoundError("Issue not found")
        return issue

    async def list_issues(
        self,
        db: AsyncSession,
        page: int = 1,
        per_page: int = 20,
        **filters: Any,
    ) -> dict[str, Any]:
        """필터 조건으로 이슈 목록을 조회합니다.

        List issues for a derived view (scope, status, priority, project, search).
        """
        issues, total = await issue_repository.list_paginated(db, page=page, per_page=per_page, **filters)
        return await self.build_page(db, issues, total, page, per_page)

    async def list_verification_queue(self, db: AsyncSession, worker: User) -> list[IssueResponse]:
        """작업자 검증 대기열 — 본인이 보고한 RESOLVED, 미검증 이슈.

        Worker verification queue: own reports that are RESOLVED and unverified,
        i.e. waiting for an AFTER proof.
        """
        issues: list[Issue] = await issue_repository.list_all(
            db,
            status=IssueStatus.RESOLVED.value,
            verified=False,
            reported_by_user_id=worker.id,
        )
        grouped = await issue_repository.get_attachments_for(db, [i.id for i in issues])
        return [self.to_response(i, grouped.get(i.id)) for i in issues]

    async def get_history(self, db: AsyncSession, issue_id: UUID, caller: User) -> list[StatusHistoryResponse]:
        await self.get_visible_issue(db, issue_id, caller)
        entries = await issue_repository.get_history(db, issue_id)
        return [
            StatusHistoryResponse(
                id=str(e.id),
                from_status=e.from_status,
                to_status=e.to_status,
                changed_by_user_id=str(e.changed_by_user_id),
                note=e.note,
                changed_at=e.changed_at,
            )
            for e in entries
        ]

    async def get_stats(self, db: AsyncSession, **filters: Any) -> IssueStats:
        """상태/우선순위별 이슈 통계를 계산합니다.

        Compute issue statistics from grouped counts.
        """
        stats: IssueStats = IssueStats(
            by_status={s.value: 0 for s in IssueStatus},
            by_priority={p.value: 0 for p in IssuePriority},
        )
        for status, priority, verified, count in await issue_repository.aggregate(db, **filters):
            stats.total += count
            stats.by_status[status] = stats.by_status.get(status, 0) + count
            stats.by_priority[priority] = stats.by_priority.get(priority, 0) + count
            archived: bool = (status == IssueStatus.RESOLVED.value and verified) or status == IssueStatus.REJECTED.value
            if not archived:
                stats.actionable += count
            if verified:
                stats.verified += count
            elif status == IssueStatus.RESOLVED.value:
                stats.verify_pending += count
        return stats

    # --- 보고 (Reporting) ---

    async def create_issue(self, db: AsyncSession, data: IssueCreate, caller: User) -> Issue:
        """새 이슈를 보고합니다.

        Report a new issue. The result is always OPEN and unverified.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            data: 이슈 보고 데이터 (Issue report data)
            caller: 보고자 (Reporting user)

        Returns:
            Issue: 생성된 이슈 (Created issue)

        Raises:
            NotFoundError: 프로젝트/유닛이 없을 때 (Project or unit not found)
            ForbiddenError: 배정되지 않은 프로젝트에 작업자가 보고할 때
                            (Worker not assigned to the project)
            BadRequestError: 위치/원인/분류 누락 (Missing location, cause or category)
        """
        project = await project_service.get_project(db, parse_uuid(data.project_id, "project_id"))
        if caller.role == UserRole.WORKER.value and not await project_service.is_worker_assigned(
            db, project.id, caller.id
        ):
            raise ForbiddenError("You are not assigned to this project")

        if is_blank(data.issue_caused_by):
            raise BadRequestError("Issue cause is required")
        if is_blank(data.complaint_type):
            raise BadRequestError("Complaint type is required")

        unit_id: UUID | None = None
        other_area: str | None = None
        if data.location_type == LocationType.UNIT:
            if is_blank(data.unit_id):
                raise BadRequestError("Unit is required for a unit issue")
            unit: Unit | None = await unit_repository.get_by_id(db, parse_uuid(data.unit_id, "unit_id"))
            if unit is None or unit.project_id != project.id:
                raise NotFoundError("Unit not found in this project")
            unit_id = unit.id
        else:
            if is_blank(data.other_area):
                raise BadRequestError("Area name is required for a common-area issue")
            other_area = data.other_area.strip()

        # 업로드 확정은 이슈 생성 전에 수행 (Finalize uploads before anything is written)
        voice_url: str | None = storage_service.finalize_upload(data.voice_url) if data.voice_url else None
        file_urls: list[str] = [
            storage_service.finalize_upload(url.strip()) for url in data.attachment_urls if not is_blank(url)
        ]

        issue: Issue = await issue_repository.create(db, {
            "project_id": project.id,
            "reported_by_user_id": caller.id,
            "location_type": data.location_type.value,
            "unit_id": unit_id,
            "other_area": other_area,
            "issue_caused_by": data.issue_caused_by.strip(),
            "complaint_type": data.complaint_type.strip(),
            "description_text": data.description_text,
            "voice_url": voice_url,
            "status": IssueStatus.OPEN.value,
            "priority": data.priority or IssuePriority.MEDIUM.value,
            "verified": False,
            "approved": False,
        })

        for file_url in file_urls:
            await issue_repository.add_attachment(
                db, issue.id, file_url, ProofType.BEFORE.value, MediaType.IMAGE.value, caller.id
            )

        await audit_service.record(
            db, LogAction.CREATE, "ISSUE", issue.id, caller.id,
            f"Reported {issue.complaint_type} issue in {project.name}",
        )
        return issue

    # --- 상태 전이 (Transitions) ---

    def _check_version(self, issue: Issue, version: int | None) -> None:
        if version is not None and version != issue.version:
            raise ConflictError()

    async def _apply(
        self,
        db: AsyncSession,
        issue: Issue,
        update_data: dict[str, Any],
        caller: User,
        action: LogAction,
        note: str | None,
    ) -> Issue:
        """필드 변경, 상태 이력, 시스템 로그를 한 번에 기록합니다.

        Write the new field values plus one history row and one log row.
        A concurrent version bump surfaces as ConflictError.
        """
        from_status: str = issue.status
        try:
            issue = await issue_repository.update(db, issue, update_data)
        except StaleDataError:
            raise ConflictError()

        await issue_repository.add_history(db, issue.id, from_status, issue.status, caller.id, note)
        details: str = f"{action.value} issue: {from_status} -> {issue.status}"
        if note:
            details = f"{details} ({note})"
        await audit_service.record(db, action, "ISSUE", issue.id, caller.id, details)
        return issue

    async def approve(self, db: AsyncSession, issue_id: UUID, data: ApproveRequest, caller: User) -> Issue:
        """OPEN 이슈를 승인하고 업체를 배정합니다 (→ IN_PROGRESS).

        Raises:
            BadRequestError: OPEN이 아니거나 업체명이 비어 있을 때
        """
        issue: Issue = await self.get_issue(db, issue_id)
        self._check_version(issue, data.version)
        if issue.status != IssueStatus.OPEN.value:
            raise BadRequestError(f"Only OPEN issues can be approved (current: {issue.status})")
        if is_blank(data.vendor_name):
            raise BadRequestError("Vendor name is required to approve an issue")

        update_data: dict[str, Any] = {
            "status": IssueStatus.IN_PROGRESS.value,
            "approved": True,
            "approved_by_user_id": caller.id,
            "approved_at": datetime.now(timezone.utc),
            "assigned_vendor_name": data.vendor_name.strip(),
        }
        if data.priority:
            update_data["priority"] = data.priority
        return await self._apply(
            db, issue, update_data, caller, LogAction.APPROVE, f"Vendor: {update_data['assigned_vendor_name']}"
        )

    async def reject(self, db: AsyncSession, issue_id: UUID, data: RejectRequest, caller: User) -> Issue:
        issue: Issue = await self.get_issue(db, issue_id)
        self._check_version(issue, data.version)
        if issue.status != IssueStatus.OPEN.value:
            raise BadRequestError(f"Only OPEN issues can be rejected (current: {issue.status})")
        if is_blank(data.reason):
            raise BadRequestError("A reason is required to reject an issue")

        reason: str = data.reason.strip()
        return await self._apply(db, issue, {
            "status": IssueStatus.REJECTED.value,
            "rejection_reason": reason,
            "rejected_by_user_id": caller.id,
            "rejected_at": datetime.now(timezone.utc),
        }, caller, LogAction.REJECT, reason)

    async def resolve(self, db: AsyncSession, issue_id: UUID, data: TransitionRequest, caller: User) -> Issue:
        issue: Issue = await self.get_issue(db, issue_id)
        self._check_version(issue, data.version)
        if issue.status != IssueStatus.IN_PROGRESS.value:
            raise BadRequestError(f"Only IN_PROGRESS issues can be resolved (current: {issue.status})")

        return await self._apply(db, issue, {
            "status": IssueStatus.RESOLVED.value,
            "resolved_by_user_id": caller.id,
            "resolved_at": datetime.now(timezone.utc),
        }, caller, LogAction.RESOLVE, data.note)

    async def verify(self, db: AsyncSession, issue_id: UUID, data: TransitionRequest, caller: User) -> Issue:
        """해결된 이슈를 검증합니다. AFTER 증빙이 최소 1개 필요합니다.

        Verify a RESOLVED issue; requires at least one AFTER proof attachment.
        The issue becomes archived.

        Raises:
            BadRequestError: RESOLVED가 아니거나, 이미 검증됐거나, AFTER 증빙이 없을 때
        """
        issue: Issue = await self.get_issue(db, issue_id)
        self._check_version(issue, data.version)
        if issue.status != IssueStatus.RESOLVED.value:
            raise BadRequestError(f"Only RESOLVED issues can be verified (current: {issue.status})")
        if issue.verified:
            raise BadRequestError("Issue is already verified")
        if await issue_repository.count_proofs(db, issue.id, ProofType.AFTER.value) == 0:
            raise BadRequestError("At least one AFTER proof is required before verification")

        return await self._apply(db, issue, {
            "verified": True,
            "verified_by_user_id": caller.id,
            "verified_at": datetime.now(timezone.utc),
        }, caller, LogAction.VERIFY, data.note)

    async def override(self, db: AsyncSession, issue_id: UUID, data: OverrideRequest, caller: User) -> Issue:
        """관리자 강제 변경 — 상태 및/또는 우선순위를 직접 설정합니다.

        Admin override: set status and/or priority directly, bypassing the
        workflow preconditions. At least one value must change. Moving to a
        status other than RESOLVED clears verification.

        Raises:
            BadRequestError: 변경 사항이 없을 때 (Nothing would change)
        """
        issue: Issue = await self.get_issue(db, issue_id)
        self._check_version(issue, data.version)

        new_status: str | None = data.status.value if data.status is not None else None
        status_changed: bool = new_status is not None and new_status != issue.status
        priority_changed: bool = data.priority is not None and data.priority != issue.priority
        if not status_changed and not priority_changed:
            raise BadRequestError("Override must change the status or the priority")

        update_data: dict[str, Any] = {}
        if priority_changed:
            update_data["priority"] = data.priority
        if status_changed:
            update_data["status"] = new_status
            if new_status != IssueStatus.RESOLVED.value:
                update_data.update({"verified": False, "verified_by_user_id": None, "verified_at": None})
            elif issue.resolved_at is None:
                update_data.update({"resolved_by_user_id": caller.id, "resolved_at": datetime.now(timezone.utc)})

        changes: list[str] = []
        if status_changed:
            changes.append(f"status {issue.status} -> {new_status}")
        if priority_changed:
            changes.append(f"priority {issue.priority} -> {data.priority}")
        note: str = "; ".join(changes)
        if not is_blank(data.comment):
            note = f"{note}. Comment: {data.comment.strip()}"

        return await self._apply(db, issue, update_data, caller, LogAction.OVERRIDE, note)

    # --- 첨부 (Attachments) ---

    async def add_after_proof(
        self,
        db: AsyncSession,
        issue_id: UUID,
        data: AttachmentCreate,
        worker: User,
    ) -> IssueAttachment:
        """보고자가 해결 후(AFTER) 증빙을 추가합니다.

        The reporting worker adds an AFTER proof while the issue is RESOLVED
        and unverified. Archived issues accept no worker attachments.

        Raises:
            NotFoundError: 본인 보고 이슈가 아닐 때 (Not the caller's own report)
            BadRequestError: RESOLVED 미검증 상태가 아닐 때 (Not awaiting verification)
        """
        issue: Issue = await self.get_visible_issue(db, issue_id, worker)
        if issue.is_archived:
            raise BadRequestError("Archived issues cannot receive attachments")
        if issue.status != IssueStatus.RESOLVED.value:
            raise BadRequestError("AFTER proofs can only be added to RESOLVED issues")
        if is_blank(data.url):
            raise BadRequestError("Attachment URL is required")

        file_url: str = storage_service.finalize_upload(data.url.strip())
        attachment: IssueAttachment = await issue_repository.add_attachment(
            db, issue.id, file_url, ProofType.AFTER.value, data.media_type.value, worker.id
        )
        await audit_service.record(
            db, LogAction.UPDATE, "ISSUE", issue.id, worker.id, "Added AFTER proof"
        )
        return attachment

    async def add_verification_proof(
        self,
        db: AsyncSession,
        issue_id: UUID,
        data: AttachmentCreate,
        admin: User,
    ) -> IssueAttachment:
        issue: Issue = await self.get_issue(db, issue_id)
        if is_blank(data.url):
            raise BadRequestError("Attachment URL is required")

        file_url: str = storage_service.finalize_upload(data.url.strip())
        attachment: IssueAttachment = await issue_repository.add_attachment(
            db, issue.id, file_url, ProofType.VERIFICATION.value, data.media_type.value, admin.id
        )
        await audit_service.record(
            db, LogAction.UPDATE, "ISSUE", issue.id, admin.id, "Added VERIFICATION proof"
        )
        return attachment


# 싱글턴 인스턴스 — Singleton instance
issue_service: IssueService = IssueService()
