"""시스템 로그 SQLAlchemy ORM 모델 정의.

System log (audit trail) model. Append-only: rows are never updated or deleted.
"""

import uuid
from datetime import datetime, timezone
from sqlalchemy import String, DateTime, Text, ForeignKey, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from mms.database import Base


class SystemLog(Base):
    """시스템 로그 모델 — 감사 추적용 활동 기록.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        action: 액션 코드 (LOGIN, CREATE, APPROVE, OVERRIDE, ...)
        entity_type: 대상 엔티티 유형 (user, project, unit, occupant, issue)
        entity_id: 대상 엔티티 ID (Target entity identifier, optional)
        performed_by_user_id: 수행자 FK (Acting user)
        details: 상세 설명 (Human-readable details)
        created_at: 기록 일시 UTC (Timestamp)
    """

    __tablename__ = "system_logs"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    action: Mapped[str] = mapped_column(String(30), nullable=False, index=True)
    entity_type: Mapped[str] = mapped_column(String(30), nullable=False)
    entity_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    performed_by_user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id"), nullable=False)
    details: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), index=True)
