"""유닛 및 입주자 관련 SQLAlchemy ORM 모델 정의.

Unit and occupant SQLAlchemy ORM model definitions.
An occupant (client) is assigned to a unit through an assignment row;
moving out ends the assignment instead of deleting it, so every unit keeps
its full occupancy history.

Tables:
    - units: 프로젝트 내 호실 (Units inside a project)
    - occupants: 입주자 (Residents, identified by ID/passport number)
    - occupant_unit_assignments: 입주 이력 (Occupancy history)
"""

import uuid
from datetime import datetime, timezone
from sqlalchemy import String, Boolean, DateTime, ForeignKey, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from mms.database import Base


class Unit(Base):
    """유닛 모델 — 프로젝트 내 개별 호실.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        project_id: 소속 프로젝트 FK (Parent project)
        unit_no: 호실 번호 (Unit number, unique within a project)
        type: 유형 (Layout type, e.g. "2BHK", optional)
        is_occupied: 입주 여부 (Whether an occupant currently lives here)
        current_occupant_id: 현재 입주자 FK (Current occupant, NULL when vacant)
        created_by_user_id: 생성자 FK (Creator user)

    Constraints:
        uq_unit_project_unit_no: 프로젝트 내 호실 번호 고유 (Unique unit number per project)
    """

    __tablename__ = "units"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    project_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("projects.id"), nullable=False)
    unit_no: Mapped[str] = mapped_column(String(50), nullable=False)
    type: Mapped[str | None] = mapped_column(String(50), nullable=True)
    is_occupied: Mapped[bool] = mapped_column(Boolean, default=False)
    current_occupant_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("occupants.id"), nullable=True)
    created_by_user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id"), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        UniqueConstraint("project_id", "unit_no", name="uq_unit_project_unit_no"),
    )

    # 관계 — Relationships
    project = relationship("Project", back_populates="units")
    current_occupant = relationship("Occupant", foreign_keys=[current_occupant_id])


class Occupant(Base):
    """입주자 모델 — 유닛에 배정되는 거주자.

    Occupant (client) model. ``id_passport`` is the natural key used to
    upsert occupants when a unit is occupied.
    """

    __tablename__ = "occupants"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # 신분증/여권 번호 — National ID or passport number (unique)
    id_passport: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    # 입주 유형 — "OWNER" | "TENANT"
    occupant_type: Mapped[str | None] = mapped_column(String(20), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))


class OccupantUnitAssignment(Base):
    """입주 이력 모델 — 입주자와 유닛의 기간별 연결.

    At most one assignment per unit is active at a time; vacating a unit
    sets ``is_active=False`` and ``end_date``.
    """

    __tablename__ = "occupant_unit_assignments"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    occupant_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("occupants.id"), nullable=False)
    unit_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("units.id"), nullable=False)
    assigned_by_user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id"), nullable=False)
    start_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    end_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    occupant = relationship("Occupant")
