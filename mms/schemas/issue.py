"""이슈 관련 Pydantic 요청/응답 스키마 정의.

Issue request/response schemas: reporting, workflow transitions,
attachments, status history and statistics.

Mutating requests carry an optional ``version``: when present it must match
the issue's current version, otherwise the request is rejected with 409.
"""

from datetime import datetime

from pydantic import BaseModel, field_validator

from mms.models.enums import IssuePriority, IssueStatus, LocationType, MediaType


def _normalise_priority(value: str | None) -> str | None:
    """우선순위 정규화 — 구버전 URGENT는 HIGH로 취급.

    Normalise priority input; the legacy value URGENT maps to HIGH.
    """
    if value is None:
        return None
    value = value.strip().upper()
    if value == "URGENT":
        return IssuePriority.HIGH.value
    if value not in {p.value for p in IssuePriority}:
        raise ValueError("priority must be one of LOW, MEDIUM, HIGH")
    return value


class IssueCreate(BaseModel):
    """이슈 보고 요청 스키마.

    Issue report request schema.

    Attributes:
        project_id: 프로젝트 UUID (Project the issue belongs to)
        location_type: 위치 유형 (UNIT or OTHER)
        unit_id: 유닛 UUID (Required when location_type=UNIT)
        other_area: 공용 구역 (Required when location_type=OTHER, e.g. "Lobby")
        issue_caused_by: 원인 (Cause, required)
        complaint_type: 분류 (Category, required)
        description_text: 설명 (Free text, optional)
        voice_url: 음성 메모 URL (Voice note, optional)
        attachment_urls: 사진 URL 목록 (Photo references, stored as BEFORE proofs)
        priority: 우선순위 (Defaults to MEDIUM)
    """

    project_id: str
    location_type: LocationType
    unit_id: str | None = None
    other_area: str | None = None
    issue_caused_by: str
    complaint_type: str
    description_text: str | None = None
    voice_url: str | None = None
    attachment_urls: list[str] = []
    priority: str | None = None

    @field_validator("priority")
    @classmethod
    def check_priority(cls, value: str | None) -> str | None:
        return _normalise_priority(value)


class ApproveRequest(BaseModel):
    vendor_name: str  # 배정 업체 — 공백 불가 (Assigned vendor, must be non-blank)
    priority: str | None = None  # 승인 시 우선순위 변경 (Optional priority change)
    version: int | None = None

    @field_validator("priority")
    @classmethod
    def check_priority(cls, value: str | None) -> str | None:
        return _normalise_priority(value)


class RejectRequest(BaseModel):
    reason: str  # 반려 사유 — 공백 불가 (Rejection reason, must be non-blank)
    version: int | None = None


class TransitionRequest(BaseModel):
    """해결/검증 요청 스키마 — 메모와 버전만 포함.

    Body for resolve and verify: an optional note plus the read version.
    """

    note: str | None = None
    version: int | None = None


class OverrideRequest(BaseModel):
    """관리자 강제 변경 요청 스키마.

    Admin override: force status and/or priority, bypassing workflow
    preconditions. At least one of them must differ from the current value.
    """

    status: IssueStatus | None = None
    priority: str | None = None
    comment: str | None = None
    version: int | None = None

    @field_validator("priority")
    @classmethod
    def check_priority(cls, value: str | None) -> str | None:
        return _normalise_priority(value)


class AttachmentCreate(BaseModel):
    url: str  # 업로드 완료된 파일 URL (URL returned by the storage service)
    media_type: MediaType = MediaType.IMAGE


class AttachmentResponse(BaseModel):
    id: str
    url: str
    media_type: str
    proof_type: str  # BEFORE / AFTER / VERIFICATION
    uploaded_by_user_id: str | None
    created_at: datetime


class StatusHistoryResponse(BaseModel):
    id: str
    from_status: str
    to_status: str
    changed_by_user_id: str
    note: str | None
    changed_at: datetime


class IssueResponse(BaseModel):
    """이슈 응답 스키마.

    Issue response schema with derived archive flags and attachments.
    """

    id: str
    project_id: str
    reported_by_user_id: str
    location_type: str
    unit_id: str | None
    other_area: str | None
    issue_caused_by: str
    complaint_type: str
    description_text: str | None
    voice_url: str | None
    status: str
    priority: str
    assigned_vendor_name: str | None
    approved: bool
    approved_by_user_id: str | None
    approved_at: datetime | None
    rejection_reason: str | None
    rejected_by_user_id: str | None
    rejected_at: datetime | None
    resolved_by_user_id: str | None
    resolved_at: datetime | None
    verified: bool
    verified_by_user_id: str | None
    verified_at: datetime | None
    is_archived: bool  # 보관 여부 — 파생 값 (Derived: RESOLVED+verified or REJECTED)
    is_actionable: bool  # 처리 대상 여부 — 보관되지 않은 이슈 (Derived: not archived)
    version: int  # 낙관적 동시성 버전 (Optimistic concurrency version)
    attachments: list[AttachmentResponse] = []
    created_at: datetime
    updated_at: datetime


class IssueStats(BaseModel):
    """이슈 통계 응답 스키마.

    Attributes:
        total: 전체 이슈 수 (All issues)
        actionable: 처리 대상 이슈 수 (Not archived)
        by_status: 상태별 수 (Counts per status)
        by_priority: 우선순위별 수 (Counts per priority)
        verify_pending: 검증 대기 수 (RESOLVED and not verified)
        verified: 검증 완료 수 (Verified)
    """

    total: int = 0
    actionable: int = 0
    by_status: dict[str, int] = {}
    by_priority: dict[str, int] = {}
    verify_pending: int = 0
    verified: int = 0
