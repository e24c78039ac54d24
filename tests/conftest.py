"""테스트 인프라 — 인메모리 SQLite DB, 세션, httpx 클라이언트 픽스처.

Test infrastructure — In-memory SQLite database, session and httpx client
fixtures. Every test gets a fresh database (StaticPool keeps the single
in-memory connection alive for the engine's lifetime).
"""

from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from mms.database import Base, get_db
from mms.main import app
from mms.models import *  # noqa: F401,F403 — register all models with metadata
from mms.models.enums import UserRole
from mms.utils.jwt import create_access_token
from mms.utils.password import hash_password

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


# ---------------------------------------------------------------------------
# Function-scoped: 엔진, 세션, 클라이언트
# ---------------------------------------------------------------------------
@pytest_asyncio.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """테스트용 async 엔진. 테스트마다 새 인메모리 DB와 스키마를 만듭니다."""
    eng = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest_asyncio.fixture
async def db(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """각 테스트에 격리된 DB 세션을 제공합니다."""
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture
async def client(db: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """FastAPI 테스트 클라이언트 — DB 세션을 오버라이드합니다."""
    async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db

    app.dependency_overrides[get_db] = _override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# 헬퍼 픽스처: 테스트용 데이터 생성
# ---------------------------------------------------------------------------
async def create_user(
    db: AsyncSession,
    employee_id: str,
    role: UserRole,
    password: str = "secret123",
    full_name: str | None = None,
    active: bool = True,
):
    from mms.models.user import User
    user = User(
        employee_id=employee_id,
        full_name=full_name or employee_id.title(),
        role=role.value,
        password_hash=hash_password(password),
        active=active,
    )
    db.add(user)
    await db.flush()
    await db.refresh(user)
    return user


@pytest_asyncio.fixture
async def admin_user(db: AsyncSession):
    """관리자 사용자를 생성합니다."""
    return await create_user(db, "admin", UserRole.ADMIN, "admin123", "Test Admin")


@pytest_asyncio.fixture
async def manager_user(db: AsyncSession):
    """매니저 사용자를 생성합니다."""
    return await create_user(db, "manager1", UserRole.MANAGER, "manager123", "Test Manager")


@pytest_asyncio.fixture
async def worker_user(db: AsyncSession):
    """작업자 사용자를 생성합니다."""
    return await create_user(db, "guard", UserRole.WORKER, "guard123", "Test Worker")


@pytest_asyncio.fixture
async def other_worker(db: AsyncSession):
    """두 번째 작업자 — 타인 이슈 접근 테스트용."""
    return await create_user(db, "guard2", UserRole.WORKER, "guard123", "Other Worker")


@pytest_asyncio.fixture
async def project(db: AsyncSession, admin_user):
    """테스트 프로젝트를 생성합니다."""
    from mms.models.project import Project
    p = Project(name="Skyline Towers", location="123 Main St", created_by_user_id=admin_user.id)
    db.add(p)
    await db.flush()
    await db.refresh(p)
    return p


@pytest_asyncio.fixture
async def unit(db: AsyncSession, project, manager_user):
    """프로젝트에 공실 유닛 101을 생성합니다."""
    from mms.models.unit import Unit
    u = Unit(project_id=project.id, unit_no="101", type="2BHK", created_by_user_id=manager_user.id)
    db.add(u)
    await db.flush()
    await db.refresh(u)
    return u


@pytest_asyncio.fixture
async def assignment(db: AsyncSession, project, worker_user, manager_user):
    """작업자를 프로젝트에 배정합니다."""
    from mms.models.project import WorkerProjectAssignment
    a = WorkerProjectAssignment(
        worker_user_id=worker_user.id, project_id=project.id, assigned_by_user_id=manager_user.id
    )
    db.add(a)
    await db.flush()
    return a


def make_token(user) -> str:
    """테스트용 JWT 액세스 토큰을 생성합니다."""
    return create_access_token({"sub": str(user.id), "role": user.role, "level": user.level})


@pytest.fixture
def admin_token(admin_user) -> str:
    return make_token(admin_user)


@pytest.fixture
def manager_token(manager_user) -> str:
    return make_token(manager_user)


@pytest.fixture
def worker_token(worker_user) -> str:
    return make_token(worker_user)


@pytest.fixture
def other_worker_token(other_worker) -> str:
    return make_token(other_worker)


def auth_header(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


# ---------------------------------------------------------------------------
# 이슈 픽스처 — 워크플로우 각 단계의 이슈
# ---------------------------------------------------------------------------
@pytest_asyncio.fixture
async def open_issue(db: AsyncSession, project, unit, assignment, worker_user):
    """작업자가 유닛 101에 보고한 OPEN 이슈."""
    from mms.schemas.issue import IssueCreate
    from mms.services.issue_service import issue_service
    issue = await issue_service.create_issue(db, IssueCreate(
        project_id=str(project.id),
        location_type="UNIT",
        unit_id=str(unit.id),
        issue_caused_by="Tenant Misuse",
        complaint_type="Plumbing",
        description_text="Leaking faucet in kitchen",
    ), worker_user)
    await db.commit()
    return issue


@pytest_asyncio.fixture
async def resolved_issue(db: AsyncSession, open_issue, manager_user):
    """승인 후 해결 처리된 (미검증) 이슈."""
    from mms.schemas.issue import ApproveRequest, TransitionRequest
    from mms.services.issue_service import issue_service
    await issue_service.approve(db, open_issue.id, ApproveRequest(vendor_name="PipeWorks"), manager_user)
    issue = await issue_service.resolve(db, open_issue.id, TransitionRequest(), manager_user)
    await db.commit()
    return issue
