"""SQLAlchemy ORM 모델 패키지 — 모든 도메인 모델의 중앙 임포트 지점.

SQLAlchemy ORM models package — Central import point for all domain models.
Importing from this package ensures all models are registered with the
SQLAlchemy metadata, which is required for table creation and
relationship resolution.

Modules:
    user: 사용자 및 리프레시 토큰 (User and RefreshToken)
    project: 프로젝트 및 작업자 배정 (Project and WorkerProjectAssignment)
    unit: 유닛, 입주자, 입주 이력 (Unit, Occupant, OccupantUnitAssignment)
    issue: 이슈, 첨부, 상태 이력 (Issue, IssueAttachment, IssueStatusHistory)
    system_log: 시스템 감사 로그 (SystemLog)
"""

from mms.models.user import User, RefreshToken
from mms.models.project import Project, WorkerProjectAssignment
from mms.models.unit import Unit, Occupant, OccupantUnitAssignment
from mms.models.issue import Issue, IssueAttachment, IssueStatusHistory
from mms.models.system_log import SystemLog

__all__ = [
    "User", "RefreshToken",
    "Project", "WorkerProjectAssignment",
    "Unit", "Occupant", "OccupantUnitAssignment",
    "Issue", "IssueAttachment", "IssueStatusHistory",
    "SystemLog",
]
