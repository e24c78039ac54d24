"""이슈 관련 SQLAlchemy ORM 모델 정의.

Issue-related SQLAlchemy ORM model definitions.

Tables:
    - issues: 유지보수 이슈 (Reported maintenance problems)
    - issue_attachments: 이슈 첨부 (Photo/video proof references: BEFORE / AFTER / VERIFICATION)
    - issue_status_history: 상태 변경 이력 (One row per status transition)

Lifecycle:
    OPEN → IN_PROGRESS (승인, approve) → RESOLVED (해결, resolve) → verified (검증, verify)
    OPEN → REJECTED (반려, reject)
    RESOLVED+verified 또는 REJECTED 상태의 이슈는 보관(archived) 처리되며 삭제되지 않습니다.
"""

import uuid
from datetime import datetime, timezone
from sqlalchemy import String, Boolean, DateTime, Integer, Text, ForeignKey, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from mms.database import Base
from mms.models.enums import IssueStatus


class Issue(Base):
    """이슈 모델 — 보고된 유지보수 문제.

    Issue model — A reported maintenance problem tracked through the
    review / approval / verification workflow.

    ``version`` is SQLAlchemy's version counter: every UPDATE bumps it and
    checks the previous value, so two writers racing on the same issue
    cannot silently overwrite each other.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        project_id: 소속 프로젝트 FK (Parent project)
        reported_by_user_id: 보고자 FK (Reporting user)
        location_type: 위치 유형 (UNIT or OTHER)
        unit_id: 유닛 FK (Unit, when location_type=UNIT)
        other_area: 공용 구역 이름 (Named common area, when location_type=OTHER)
        issue_caused_by: 원인 (Cause, e.g. "Tenant Misuse", "Wear and Tear")
        complaint_type: 분류 (Category, e.g. "Plumbing", "Electrical")
        description_text: 설명 (Free-text description, optional)
        voice_url: 음성 메모 URL (Voice note reference, optional)
        status: 상태 (OPEN / IN_PROGRESS / RESOLVED / REJECTED)
        priority: 우선순위 (LOW / MEDIUM / HIGH)
        assigned_vendor_name: 배정 업체 (Vendor assigned on approval)
        approved / approved_by_user_id / approved_at: 승인 정보 (Approval metadata)
        rejection_reason / rejected_by_user_id / rejected_at: 반려 정보 (Rejection metadata)
        resolved_by_user_id / resolved_at: 해결 정보 (Resolution metadata)
        verified / verified_by_user_id / verified_at: 검증 정보 (Verification metadata)
        version: 낙관적 동시성 버전 (Optimistic concurrency counter)
    """

    __tablename__ = "issues"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    project_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("projects.id"), nullable=False, index=True)
    reported_by_user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id"), nullable=False, index=True)

    # 위치 — Location (unit or named common area)
    location_type: Mapped[str] = mapped_column(String(10), nullable=False)
    unit_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("units.id"), nullable=True)
    other_area: Mapped[str | None] = mapped_column(String(255), nullable=True)

    # 내용 — Content
    issue_caused_by: Mapped[str] = mapped_column(String(255), nullable=False)
    complaint_type: Mapped[str] = mapped_column(String(100), nullable=False)
    description_text: Mapped[str | None] = mapped_column(Text, nullable=True)
    voice_url: Mapped[str | None] = mapped_column(String(1000), nullable=True)

    status: Mapped[str] = mapped_column(String(20), default=IssueStatus.OPEN.value, index=True)
    priority: Mapped[str] = mapped_column(String(10), default="MEDIUM")

    # 승인 — Approval metadata
    assigned_vendor_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    approved: Mapped[bool] = mapped_column(Boolean, default=False)
    approved_by_user_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("users.id"), nullable=True)
    approved_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    # 반려 — Rejection metadata
    rejection_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    rejected_by_user_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("users.id"), nullable=True)
    rejected_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    # 해결 — Resolution metadata
    resolved_by_user_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("users.id"), nullable=True)
    resolved_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    # 검증 — Verification metadata
    verified: Mapped[bool] = mapped_column(Boolean, default=False)
    verified_by_user_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("users.id"), nullable=True)
    verified_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    version: Mapped[int] = mapped_column(Integer, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    __mapper_args__ = {"version_id_col": version}

    # 관계 — Relationships (cascade: 이슈와 함께 저장되는 하위 레코드)
    attachments = relationship("IssueAttachment", back_populates="issue", order_by="IssueAttachment.created_at")
    history = relationship("IssueStatusHistory", back_populates="issue", order_by="IssueStatusHistory.changed_at")

    @property
    def is_archived(self) -> bool:
        """보관 여부 — 검증 완료된 RESOLVED 또는 REJECTED."""
        return (self.status == IssueStatus.RESOLVED.value and self.verified) or self.status == IssueStatus.REJECTED.value

    @property
    def is_actionable(self) -> bool:
        """처리 대기 여부 — 아직 누군가의 조치가 필요한 이슈."""
        return not self.is_archived


class IssueAttachment(Base):
    """이슈 첨부 모델 — 사진/영상 증빙 참조.

    proof_type:
        BEFORE: 보고 시점의 사진 (Photo taken when reporting)
        AFTER: 작업 완료 후 보고자가 올린 사진 (Reporter's proof after the fix)
        VERIFICATION: 관리자가 올린 검증 자료 (Admin-supplied verification proof)
    """

    __tablename__ = "issue_attachments"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    issue_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("issues.id"), nullable=False, index=True)
    url: Mapped[str] = mapped_column(String(1000), nullable=False)
    media_type: Mapped[str] = mapped_column(String(10), default="IMAGE")
    proof_type: Mapped[str] = mapped_column(String(20), nullable=False)
    uploaded_by_user_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("users.id"), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    issue = relationship("Issue", back_populates="attachments")


class IssueStatusHistory(Base):
    """이슈 상태 변경 이력 모델.

    One row per status change; ``note`` carries the rejection reason or the
    override comment.
    """

    __tablename__ = "issue_status_history"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    issue_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("issues.id"), nullable=False, index=True)
    from_status: Mapped[str] = mapped_column(String(20), nullable=False)
    to_status: Mapped[str] = mapped_column(String(20), nullable=False)
    changed_by_user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id"), nullable=False)
    note: Mapped[str | None] = mapped_column(Text, nullable=True)
    changed_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    issue = relationship("Issue", back_populates="history")
