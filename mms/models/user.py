"""사용자 및 리프레시 토큰 SQLAlchemy ORM 모델 정의.

User and RefreshToken SQLAlchemy ORM model definitions.
Roles are a fixed hierarchy (ADMIN / MANAGER / WORKER) stored on the user row.

Tables:
    - users: 사용자 계정 (User accounts, never deleted — deactivated instead)
    - refresh_tokens: 리프레시 토큰 (Persisted refresh tokens for logout/revocation)
"""

import uuid
from datetime import datetime, timezone
from sqlalchemy import String, Boolean, DateTime, ForeignKey, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from mms.database import Base
from mms.models.enums import ROLE_LEVELS


class User(Base):
    """사용자 모델 — 시스템 사용자 계정 정보.

    User model — System user account information.
    Users log in with their employee ID. Deactivation flips ``active`` and
    records a reason; the row itself is kept and stays enumerable.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        employee_id: 로그인 아이디 (Login identifier, globally unique)
        full_name: 실명 (Full display name)
        role: 역할 (ADMIN / MANAGER / WORKER)
        phone: 연락처 (Phone number, optional)
        password_hash: bcrypt 해시된 비밀번호 (bcrypt-hashed password)
        active: 활성 상태 (Active status, soft-delete pattern)
        inactive_reason: 비활성 사유 (Deactivation reason, cleared on reactivation)
        created_at: 생성 일시 UTC (Creation timestamp)
        updated_at: 수정 일시 UTC (Last update timestamp)
    """

    __tablename__ = "users"

    # 사용자 고유 식별자 — User unique identifier (UUID v4, auto-generated)
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # 로그인 아이디 — Employee ID used to log in
    employee_id: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    # 실명 — User's full display name
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    # 역할 — "ADMIN" | "MANAGER" | "WORKER"
    role: Mapped[str] = mapped_column(String(20), nullable=False)
    # 연락처 — Optional phone number
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    # 비밀번호 해시 — bcrypt hashed password (평문 저장 금지, never store plaintext)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    # 활성 상태 — Whether the account may log in
    active: Mapped[bool] = mapped_column(Boolean, default=True)
    # 비활성 사유 — Why the account was deactivated
    inactive_reason: Mapped[str | None] = mapped_column(String(500), nullable=True)
    # 생성 일시 — Record creation timestamp (UTC)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    # 수정 일시 — Last modification timestamp (UTC, auto-updated)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    # 관계 — Relationships
    refresh_tokens = relationship("RefreshToken", back_populates="user", cascade="all, delete-orphan")

    @property
    def level(self) -> int:
        """역할 레벨 — 1=ADMIN, 2=MANAGER, 3=WORKER."""
        return ROLE_LEVELS[self.role]


class RefreshToken(Base):
    """리프레시 토큰 테이블.

    Refresh token table for managing long-lived authentication sessions.
    """

    __tablename__ = "refresh_tokens"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    token: Mapped[str] = mapped_column(String(512), unique=True, nullable=False)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    user = relationship("User", back_populates="refresh_tokens")
