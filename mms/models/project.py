"""프로젝트 및 작업자 배정 SQLAlchemy ORM 모델 정의.

Project (building / site) and worker-to-project assignment models.

Tables:
    - projects: 관리 대상 건물/현장 (Managed buildings or sites)
    - worker_project_assignments: 작업자-프로젝트 배정 (Worker assignments, ended not deleted)
"""

import uuid
from datetime import datetime, timezone
from sqlalchemy import String, Boolean, DateTime, ForeignKey, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from mms.database import Base


class Project(Base):
    """프로젝트 모델 — 유닛과 이슈가 소속되는 건물/현장.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        name: 프로젝트 이름 (Project display name)
        location: 주소 (Street address, optional)
        created_by_user_id: 생성자 FK (Creator user)
        created_at: 생성 일시 UTC (Creation timestamp)
        updated_at: 수정 일시 UTC (Last update timestamp)
    """

    __tablename__ = "projects"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    location: Mapped[str | None] = mapped_column(String(500), nullable=True)
    created_by_user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id"), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    # 관계 — Units inside this project
    units = relationship("Unit", back_populates="project")


class WorkerProjectAssignment(Base):
    """작업자 프로젝트 배정 모델.

    Worker-to-project assignment. Workers may only report issues in projects
    where they hold an active assignment. Ending an assignment sets
    ``active=False`` and ``ended_at``; rows are kept for history.
    """

    __tablename__ = "worker_project_assignments"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # 작업자 FK — Assigned worker
    worker_user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id"), nullable=False)
    # 프로젝트 FK — Target project
    project_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("projects.id"), nullable=False)
    # 배정자 FK — Manager/admin who made the assignment
    assigned_by_user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id"), nullable=False)
    assigned_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    active: Mapped[bool] = mapped_column(Boolean, default=True)
    ended_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
