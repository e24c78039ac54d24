"""대시보드 응답 스키마.

Overview/dashboard response schemas for the three portals.
"""

from pydantic import BaseModel

from mms.schemas.issue import IssueStats


class OverviewResponse(BaseModel):
    """관리자/매니저 개요 응답 스키마.

    Admin / manager overview: issue statistics plus headcounts.
    """

    issues: IssueStats
    project_count: int
    unit_count: int
    occupied_unit_count: int
    users_by_role: dict[str, dict[str, int]] = {}  # {"WORKER": {"total": 3, "active": 2}}


class WorkerDashboardResponse(BaseModel):
    """작업자 대시보드 응답 스키마.

    Worker dashboard counts over the worker's own reports.
    """

    project_count: int  # 활성 배정 프로젝트 수 (Active project assignments)
    issues: IssueStats  # 본인이 보고한 이슈 통계 (Stats over own reports)
    verification_queue: int  # 검증 대기 본인 이슈 수 (Own issues awaiting AFTER proof)
